"""Local storage wrappers: plain preferences and encrypted secrets.

KeyValueStore keeps small non-sensitive values (cached profile, flags) in a
JSON file. SecureStorage keeps secrets (auth tokens, cached credentials)
encrypted at rest with Fernet (AES-128-CBC + HMAC-SHA256).

Usage:
    settings = ClientSettings.from_env()
    secrets = SecureStorage.from_settings(settings)
    secrets.set("auth_token", token)
"""

import base64
import hashlib
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol

from cryptography.fernet import Fernet, InvalidToken

from bodima.config import ClientSettings

logger = logging.getLogger(__name__)

PREFERENCES_FILE = "preferences.json"
SECRETS_FILE = "secrets.json"
KEY_FILE = "secrets.key"


class StorageError(Exception):
    """Raised when local storage cannot be read or written."""

    pass


class SecretStore(Protocol):
    """Opaque string secrets keyed by name."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


def derive_key(passphrase: str) -> bytes:
    """Derive a Fernet key from an arbitrary passphrase.

    Args:
        passphrase: Secret string of any length

    Returns:
        32-byte URL-safe base64-encoded key.
    """
    return base64.urlsafe_b64encode(hashlib.sha256(passphrase.encode()).digest())


def _read_json(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise StorageError(f"Failed to read {path}: {e}") from e
    if not isinstance(data, dict):
        raise StorageError(f"Unexpected content in {path}")
    return data


def _write_json(path: Path, data: dict[str, Any], private: bool = False) -> None:
    """Write JSON atomically (temp file + rename).

    The temp file is removed if serialising or renaming fails.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.")
    except OSError as e:
        raise StorageError(f"Failed to write {path}: {e}") from e

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(data, fh, indent=2, sort_keys=True)
        if private:
            os.chmod(tmp_name, 0o600)
        os.replace(tmp_name, path)
    except (OSError, TypeError, ValueError) as e:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise StorageError(f"Failed to write {path}: {e}") from e


class KeyValueStore:
    """JSON-file backed preferences store."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    @classmethod
    def from_settings(cls, settings: ClientSettings) -> "KeyValueStore":
        return cls(settings.storage_dir / PREFERENCES_FILE)

    def get(self, key: str, default: Any = None) -> Any:
        return _read_json(self.path).get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = _read_json(self.path)
        data[key] = value
        _write_json(self.path, data)

    def delete(self, key: str) -> None:
        data = _read_json(self.path)
        if data.pop(key, None) is not None:
            _write_json(self.path, data)

    def clear(self) -> None:
        _write_json(self.path, {})


class SecureStorage:
    """Fernet-encrypted secrets file.

    Each value is encrypted separately; the file maps key names to tokens.
    """

    def __init__(self, path: Path, key: bytes) -> None:
        self.path = Path(path)
        self._fernet = Fernet(key)

    @classmethod
    def from_settings(cls, settings: ClientSettings) -> "SecureStorage":
        """Open the secrets file under the configured storage directory.

        Uses BODIMA_SECRET_KEY when set; otherwise a random key is generated
        once and kept next to the secrets file with owner-only permissions.
        """
        storage_dir = settings.storage_dir
        if settings.secret_key:
            key = derive_key(settings.secret_key)
        else:
            key = cls._load_or_create_key(storage_dir / KEY_FILE)
        return cls(storage_dir / SECRETS_FILE, key)

    @staticmethod
    def _load_or_create_key(key_path: Path) -> bytes:
        try:
            if key_path.exists():
                return key_path.read_bytes().strip()
            key_path.parent.mkdir(parents=True, exist_ok=True)
            key = Fernet.generate_key()
            # Created owner-only; never visible with umask permissions
            fd = os.open(key_path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
            with os.fdopen(fd, "wb") as fh:
                fh.write(key)
            logger.info("Generated new secure storage key at %s", key_path)
            return key
        except OSError as e:
            raise StorageError(f"Failed to access key file {key_path}: {e}") from e

    def get(self, key: str) -> str | None:
        token = _read_json(self.path).get(key)
        if token is None:
            return None
        try:
            return self._fernet.decrypt(token.encode()).decode()
        except InvalidToken as e:
            raise StorageError(f"Secret '{key}' cannot be decrypted with this key") from e

    def set(self, key: str, value: str) -> None:
        data = _read_json(self.path)
        data[key] = self._fernet.encrypt(value.encode()).decode()
        _write_json(self.path, data, private=True)

    def delete(self, key: str) -> None:
        data = _read_json(self.path)
        if data.pop(key, None) is not None:
            _write_json(self.path, data, private=True)


class MemorySecureStorage:
    """In-process secret store for tests and ephemeral sessions."""

    def __init__(self) -> None:
        self._values: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def delete(self, key: str) -> None:
        self._values.pop(key, None)
