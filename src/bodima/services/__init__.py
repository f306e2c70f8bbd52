"""Services for the Bodima booking core."""

from .biometric import (
    BiometricGate,
    CallbackBiometricGate,
    StaticBiometricGate,
    UnavailableBiometricGate,
    payment_reason,
)
from .http_client import ApiClient, ApiError
from .payment_client import PaymentApiClient
from .reservation_client import ReservationApiClient
from .reservation_flow import ReservationFlow
from .session import SessionState, UserResolver
from .storage import KeyValueStore, MemorySecureStorage, SecureStorage, StorageError
from .validation import MINIMUM_STAY_DAYS, validate_reservation

__all__ = [
    "ApiClient",
    "ApiError",
    "BiometricGate",
    "CallbackBiometricGate",
    "StaticBiometricGate",
    "UnavailableBiometricGate",
    "payment_reason",
    "KeyValueStore",
    "MemorySecureStorage",
    "SecureStorage",
    "StorageError",
    "PaymentApiClient",
    "ReservationApiClient",
    "ReservationFlow",
    "SessionState",
    "UserResolver",
    "MINIMUM_STAY_DAYS",
    "validate_reservation",
]
