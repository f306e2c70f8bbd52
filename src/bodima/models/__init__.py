"""Pydantic models for the Bodima booking core."""

from .enums import CardType, ErrorCategory, ReservationStatus, SagaState
from .errors import (
    ERROR_CATEGORIES,
    ERROR_MESSAGES,
    ERROR_RECOVERY,
    BookingError,
    ErrorCode,
)
from .habitation import FeatureSnapshot, Habitation, HabitationOwner, LocationSnapshot
from .outcome import SUCCESS_MESSAGE, BookingOutcome, ValidationResult
from .payment import (
    MOCK_PAYMENT_METHODS,
    PaymentMethod,
    PaymentRequest,
    PaymentResult,
    mask_card_number,
)
from .reservation import (
    AvailabilityRequest,
    AvailabilityResult,
    PendingReservation,
    ReservationCreateRequest,
    ReservationRecord,
    ReservationResult,
    ReservedDateRange,
    ReservedDatesResult,
)
from .user import User

__all__ = [
    # Enums
    "CardType",
    "ErrorCategory",
    "ReservationStatus",
    "SagaState",
    # Errors
    "BookingError",
    "ErrorCode",
    "ERROR_CATEGORIES",
    "ERROR_MESSAGES",
    "ERROR_RECOVERY",
    # Habitation
    "FeatureSnapshot",
    "Habitation",
    "HabitationOwner",
    "LocationSnapshot",
    # Outcomes
    "BookingOutcome",
    "SUCCESS_MESSAGE",
    "ValidationResult",
    # Payment
    "MOCK_PAYMENT_METHODS",
    "PaymentMethod",
    "PaymentRequest",
    "PaymentResult",
    "mask_card_number",
    # Reservation
    "AvailabilityRequest",
    "AvailabilityResult",
    "PendingReservation",
    "ReservationCreateRequest",
    "ReservationRecord",
    "ReservationResult",
    "ReservedDateRange",
    "ReservedDatesResult",
    # User
    "User",
]
