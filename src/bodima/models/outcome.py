"""Result types returned to callers of the booking core."""

from pydantic import BaseModel, ConfigDict, Field

from .enums import ErrorCategory, SagaState
from .errors import ERROR_CATEGORIES, ERROR_MESSAGES, ERROR_RECOVERY, BookingError, ErrorCode

SUCCESS_MESSAGE = "Reservation completed successfully!"


class ValidationResult(BaseModel):
    """Verdict of the draft validator."""

    model_config = ConfigDict(frozen=True)

    is_valid: bool
    message: str | None = None
    error_code: ErrorCode | None = None

    @classmethod
    def passed(cls) -> "ValidationResult":
        return cls(is_valid=True)

    @classmethod
    def failed(cls, code: ErrorCode) -> "ValidationResult":
        return cls(is_valid=False, message=ERROR_MESSAGES[code], error_code=code)


class BookingOutcome(BaseModel):
    """Terminal result of one finalize run.

    ``success`` and ``message`` form the pair handed to ``on_complete``;
    the remaining fields let the caller pick a recovery path.
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    message: str
    state: SagaState = Field(..., description="State the run ended in")
    failed_at: SagaState | None = Field(
        default=None, description="Step that was running when the run failed"
    )
    error_code: ErrorCode | None = None
    category: ErrorCategory | None = None
    recovery: str | None = None
    reservation_id: str | None = None

    @classmethod
    def completed(cls, reservation_id: str) -> "BookingOutcome":
        return cls(
            success=True,
            message=SUCCESS_MESSAGE,
            state=SagaState.COMPLETED,
            reservation_id=reservation_id,
        )

    @classmethod
    def from_error(
        cls,
        error: BookingError,
        failed_at: SagaState,
        reservation_id: str | None = None,
    ) -> "BookingOutcome":
        return cls(
            success=False,
            message=error.message,
            state=SagaState.FAILED,
            failed_at=failed_at,
            error_code=error.code,
            category=error.category,
            recovery=error.recovery,
            reservation_id=reservation_id,
        )

    @classmethod
    def failure(
        cls,
        code: ErrorCode,
        failed_at: SagaState,
        message: str | None = None,
    ) -> "BookingOutcome":
        return cls(
            success=False,
            message=message or ERROR_MESSAGES[code],
            state=SagaState.FAILED,
            failed_at=failed_at,
            error_code=code,
            category=ERROR_CATEGORIES[code],
            recovery=ERROR_RECOVERY[code],
        )
