"""Client configuration for the booking core.

Settings are read once from the environment and then passed explicitly to
the components that need them (HTTP transport, storage, reservation flow).

Environment variables:
- BODIMA_API_BASE_URL: Backend base URL (default: http://localhost:3000)
- BODIMA_REQUEST_TIMEOUT: Per-request timeout in seconds (default: 60)
- BODIMA_CURRENCY: Currency code sent with payments (default: LKR)
- BODIMA_DEFAULT_STAY_DAYS: Default draft window in days (default: 30)
- BODIMA_MAX_PAYMENT_AMOUNT: Upper bound for a single charge (default: 1000000)
- BODIMA_STORAGE_DIR: Directory for local preference/secret files
- BODIMA_SECRET_KEY: Passphrase used to derive the secure storage key
"""

import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_API_BASE_URL = "http://localhost:3000"
DEFAULT_STORAGE_DIR = Path.home() / ".bodima"


class ClientSettings(BaseModel):
    """Immutable settings for one client instance."""

    model_config = ConfigDict(frozen=True)

    api_base_url: str = Field(
        default=DEFAULT_API_BASE_URL, description="Backend base URL"
    )
    request_timeout: float = Field(
        default=60.0, gt=0, description="Per-request timeout in seconds"
    )
    currency: str = Field(
        default="LKR", min_length=3, max_length=3, description="ISO currency code"
    )
    default_stay_days: int = Field(
        default=30, ge=1, description="Days between default check-in and check-out"
    )
    max_payment_amount: float = Field(
        default=1_000_000, gt=0, description="Largest amount accepted for one charge"
    )
    storage_dir: Path = Field(
        default=DEFAULT_STORAGE_DIR, description="Directory for local storage files"
    )
    secret_key: str | None = Field(
        default=None, description="Passphrase for the secure storage key"
    )

    @classmethod
    def from_env(cls) -> "ClientSettings":
        """Build settings from BODIMA_* environment variables.

        Returns:
            ClientSettings with defaults for any unset variable.
        """
        values: dict[str, object] = {}
        env_map = {
            "BODIMA_API_BASE_URL": "api_base_url",
            "BODIMA_REQUEST_TIMEOUT": "request_timeout",
            "BODIMA_CURRENCY": "currency",
            "BODIMA_DEFAULT_STAY_DAYS": "default_stay_days",
            "BODIMA_MAX_PAYMENT_AMOUNT": "max_payment_amount",
            "BODIMA_STORAGE_DIR": "storage_dir",
            "BODIMA_SECRET_KEY": "secret_key",
        }
        for env_name, field_name in env_map.items():
            raw = os.environ.get(env_name)
            if raw:
                values[field_name] = raw

        # Env values are strings; let pydantic coerce them
        return cls.model_validate(values)
