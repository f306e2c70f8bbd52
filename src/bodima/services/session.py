"""Session state for the signed-in user.

SessionState is an explicit context object: create one per signed-in app
instance and hand it to the components that need the acting user or the
auth token. The cached profile lives in the preferences store and the token
in secure storage.
"""

import logging
from typing import Protocol, runtime_checkable

from pydantic import ValidationError

from bodima.models import User
from bodima.utils.jwt import extract_subject, is_token_expired

from .storage import KeyValueStore, SecretStore

logger = logging.getLogger(__name__)

TOKEN_KEY = "auth_token"
USER_KEY = "current_user"
PROFILE_ID_KEY = "user_profile_id"


@runtime_checkable
class UserResolver(Protocol):
    """Anything that can name the acting user."""

    def current_user_id(self) -> str | None: ...


class SessionState:
    """Current user and auth token for one app instance."""

    def __init__(self, secrets: SecretStore, preferences: KeyValueStore | None = None) -> None:
        self._secrets = secrets
        self._preferences = preferences
        self._user: User | None = None

    @property
    def current_user(self) -> User | None:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None and self.auth_token() is not None

    def current_user_id(self) -> str | None:
        """ID of the acting user, or None when nobody usable is signed in.

        Falls back to the cached profile ID, then to the ``sub`` claim of an
        unexpired auth token.
        """
        if self._user is not None and self._user.id:
            return self._user.id
        if self._preferences is not None:
            profile_id = self._preferences.get(PROFILE_ID_KEY)
            if profile_id:
                return str(profile_id)
        token = self.auth_token()
        if token and not is_token_expired(token):
            return extract_subject(token)
        return None

    def auth_token(self) -> str | None:
        return self._secrets.get(TOKEN_KEY)

    def sign_in(self, user: User, token: str) -> None:
        """Record a successful sign-in.

        Args:
            user: Authenticated user profile
            token: Backend-issued JWT
        """
        self._user = user
        self._secrets.set(TOKEN_KEY, token)
        if self._preferences is not None:
            self._preferences.set(USER_KEY, user.model_dump(mode="json"))
            if user.id:
                self._preferences.set(PROFILE_ID_KEY, user.id)
        logger.info("Signed in user %s", user.id or user.username)

    def sign_out(self) -> None:
        """Forget the user and token (also used when the token expires)."""
        self._user = None
        self._secrets.delete(TOKEN_KEY)
        if self._preferences is not None:
            self._preferences.delete(USER_KEY)
            self._preferences.delete(PROFILE_ID_KEY)
        logger.info("Signed out")

    def restore(self) -> bool:
        """Reload a previous session from storage.

        A session with an expired token is discarded.

        Returns:
            True if a usable session was restored.
        """
        token = self.auth_token()
        if token is None or self._preferences is None:
            return False
        if is_token_expired(token):
            logger.info("Stored token expired; clearing session")
            self.sign_out()
            return False

        raw_user = self._preferences.get(USER_KEY)
        if not raw_user:
            return False
        try:
            self._user = User.model_validate(raw_user)
        except ValidationError:
            logger.warning("Cached user profile is unreadable; clearing session")
            self.sign_out()
            return False
        return True
