"""Standard error codes for the booking core.

Every failure the reservation flow can report maps to one ErrorCode, a
user-facing message, a recovery hint for the calling UI and an
ErrorCategory telling the caller how urgent the failure is.
"""

from enum import Enum
from typing import Optional

from .enums import ErrorCategory


class ErrorCode(str, Enum):
    """Error codes reported by the booking core."""

    # Draft validation (ERR_BOOK_001-ERR_BOOK_005)
    NO_ACTIVE_DRAFT = "ERR_BOOK_001"
    DATE_ORDER_INVALID = "ERR_BOOK_002"
    DATE_IN_PAST = "ERR_BOOK_003"
    STAY_TOO_SHORT = "ERR_BOOK_004"
    PAYMENT_METHOD_MISSING = "ERR_BOOK_005"

    # Flow control (ERR_FLOW_001-ERR_FLOW_003)
    USER_UNRESOLVED = "ERR_FLOW_001"
    FLOW_IN_PROGRESS = "ERR_FLOW_002"
    DRAFT_SUPERSEDED = "ERR_FLOW_003"

    # Device owner verification
    AUTHENTICATION_FAILED = "ERR_AUTH_001"

    # Remote calls (ERR_REMOTE_001-ERR_REMOTE_003)
    RESERVATION_FAILED = "ERR_REMOTE_001"
    PAYMENT_FAILED = "ERR_REMOTE_002"
    UNEXPECTED_ERROR = "ERR_REMOTE_003"

    # Payment taken but reservation not confirmed
    CONFIRMATION_FAILED = "ERR_CONFIRM_001"


# Human-readable error messages
ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.NO_ACTIVE_DRAFT: "No reservation data found",
    ErrorCode.DATE_ORDER_INVALID: "Check-out date must be after check-in date",
    ErrorCode.DATE_IN_PAST: "Check-in date cannot be in the past",
    ErrorCode.STAY_TOO_SHORT: "Minimum stay is 1 day",
    ErrorCode.PAYMENT_METHOD_MISSING: "Please select a payment method",
    ErrorCode.USER_UNRESOLVED: "Unable to retrieve user profile",
    ErrorCode.FLOW_IN_PROGRESS: "A reservation is already being processed",
    ErrorCode.DRAFT_SUPERSEDED: "This booking was replaced by a newer one",
    ErrorCode.AUTHENTICATION_FAILED: (
        "Biometric authentication was not successful. Please try again."
    ),
    ErrorCode.RESERVATION_FAILED: "Failed to create reservation",
    ErrorCode.PAYMENT_FAILED: "Payment failed",
    ErrorCode.UNEXPECTED_ERROR: "Reservation failed. Please try again.",
    ErrorCode.CONFIRMATION_FAILED: (
        "Payment completed but reservation confirmation failed"
    ),
}

# Recovery suggestions for the calling UI
ERROR_RECOVERY: dict[ErrorCode, str] = {
    ErrorCode.NO_ACTIVE_DRAFT: "Start a new booking from the listing",
    ErrorCode.DATE_ORDER_INVALID: "Pick a check-out date after the check-in date",
    ErrorCode.DATE_IN_PAST: "Pick a check-in date from today onwards",
    ErrorCode.STAY_TOO_SHORT: "Extend the stay to at least one night",
    ErrorCode.PAYMENT_METHOD_MISSING: "Select a payment card",
    ErrorCode.USER_UNRESOLVED: "Sign in again and retry the booking",
    ErrorCode.FLOW_IN_PROGRESS: "Wait for the current booking to finish",
    ErrorCode.DRAFT_SUPERSEDED: "Continue with the newer booking",
    ErrorCode.AUTHENTICATION_FAILED: "Retry the booking and complete verification",
    ErrorCode.RESERVATION_FAILED: "Check the dates are still free and try again",
    ErrorCode.PAYMENT_FAILED: "Try again or use a different payment card",
    ErrorCode.UNEXPECTED_ERROR: "Try again later",
    ErrorCode.CONFIRMATION_FAILED: (
        "Do not pay again; contact support with the reservation ID"
    ),
}

ERROR_CATEGORIES: dict[ErrorCode, ErrorCategory] = {
    ErrorCode.NO_ACTIVE_DRAFT: ErrorCategory.VALIDATION,
    ErrorCode.DATE_ORDER_INVALID: ErrorCategory.VALIDATION,
    ErrorCode.DATE_IN_PAST: ErrorCategory.VALIDATION,
    ErrorCode.STAY_TOO_SHORT: ErrorCategory.VALIDATION,
    ErrorCode.PAYMENT_METHOD_MISSING: ErrorCategory.VALIDATION,
    ErrorCode.USER_UNRESOLVED: ErrorCategory.AUTHENTICATION,
    ErrorCode.FLOW_IN_PROGRESS: ErrorCategory.VALIDATION,
    ErrorCode.DRAFT_SUPERSEDED: ErrorCategory.VALIDATION,
    ErrorCode.AUTHENTICATION_FAILED: ErrorCategory.AUTHENTICATION,
    ErrorCode.RESERVATION_FAILED: ErrorCategory.REMOTE,
    ErrorCode.PAYMENT_FAILED: ErrorCategory.REMOTE,
    ErrorCode.UNEXPECTED_ERROR: ErrorCategory.REMOTE,
    ErrorCode.CONFIRMATION_FAILED: ErrorCategory.CONFIRMATION,
}


class BookingError(Exception):
    """Exception raised inside the reservation flow to end a run.

    The flow catches it and converts it to a BookingOutcome, so it never
    reaches the caller of ``finalize``.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: Optional[str] = None,
        details: Optional[dict[str, str]] = None,
    ):
        self.code = code
        # Remote failures pass the backend's message through when it has one
        self.message = message or ERROR_MESSAGES[code]
        self.recovery = ERROR_RECOVERY[code]
        self.category = ERROR_CATEGORIES[code]
        self.details = details
        super().__init__(self.message)
