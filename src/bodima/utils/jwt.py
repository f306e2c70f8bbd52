"""JWT helpers for the client-side auth token.

The backend issues JWTs and verifies their signatures; the client only reads
claims to avoid sending a token it already knows has expired.
"""

import base64
import json
import logging
import time
from typing import Any

logger = logging.getLogger(__name__)


def decode_jwt_payload(token: str | None) -> dict[str, Any] | None:
    """Decode a JWT and return its payload without verifying the signature.

    Args:
        token: JWT token string

    Returns:
        Decoded payload dict or None if decoding fails
    """
    if not token:
        return None

    try:
        # JWT format: header.payload.signature
        parts = token.split(".")
        if len(parts) != 3:
            logger.debug("Invalid JWT format: expected 3 parts, got %d", len(parts))
            return None

        payload_b64 = parts[1]

        # base64url requires padding to a multiple of 4
        padding = 4 - len(payload_b64) % 4
        if padding != 4:
            payload_b64 += "=" * padding

        payload = json.loads(base64.urlsafe_b64decode(payload_b64))
        return payload if isinstance(payload, dict) else None

    except (ValueError, json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning("Failed to decode JWT payload: %s", type(e).__name__)
        return None


def extract_subject(token: str | None) -> str | None:
    """Return the ``sub`` claim of a JWT, if present."""
    payload = decode_jwt_payload(token)
    if not payload or not payload.get("sub"):
        return None
    return str(payload["sub"])


def is_token_expired(token: str | None, now: float | None = None) -> bool:
    """Check whether a JWT is past its ``exp`` claim.

    Tokens that cannot be decoded or carry no numeric ``exp`` are treated as
    expired.

    Args:
        token: JWT token string
        now: Current UNIX time (defaults to time.time())

    Returns:
        True if the token is expired or unreadable.
    """
    payload = decode_jwt_payload(token)
    if payload is None:
        return True

    exp = payload.get("exp")
    if not isinstance(exp, (int, float)) or isinstance(exp, bool):
        return True

    current = time.time() if now is None else now
    return current > exp
