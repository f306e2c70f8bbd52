"""Logging for booking attempts.

Each ``finalize`` run tags its log lines with a booking ID so one attempt
can be followed across the flow, the API clients and the transport.

Usage:
    from bodima.utils.logging import configure_logging, get_logger

    configure_logging()
    logger = get_logger(__name__)
"""

import logging
import uuid
from contextvars import ContextVar
from typing import Any

NO_BOOKING_ID = "no-booking-id"

# Per task, so concurrent bookings keep their own ID
_booking_id: ContextVar[str | None] = ContextVar("booking_id", default=None)


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Tag the current booking attempt, minting an ID unless one is given."""
    booking_id = correlation_id or str(uuid.uuid4())
    _booking_id.set(booking_id)
    return booking_id


def get_correlation_id() -> str | None:
    return _booking_id.get()


def clear_correlation_id() -> None:
    _booking_id.set(None)


class CorrelationIdFilter(logging.Filter):
    """Stamps ``record.correlation_id`` with the active booking ID."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = _booking_id.get() or NO_BOOKING_ID
        return True


class StructuredFormatter(logging.Formatter):
    """Prefixes each line with ``[booking-id]``."""

    def format(self, record: logging.LogRecord) -> str:
        booking_id = getattr(record, "correlation_id", None) or _booking_id.get() or NO_BOOKING_ID
        record.correlation_id = booking_id
        return f"[{booking_id}] {super().format(record)}"


def get_logger(name: str) -> logging.Logger:
    """``logging.getLogger`` with the booking ID filter attached once."""
    logger = logging.getLogger(name)
    if not any(isinstance(f, CorrelationIdFilter) for f in logger.filters):
        logger.addFilter(CorrelationIdFilter())
    return logger


def configure_logging(level: int = logging.INFO) -> logging.Handler:
    """Send ``bodima`` logs to stderr in the booking-tagged format.

    Repeated calls reuse the handler installed by the first one.

    Returns:
        The stream handler writing the logs.
    """
    package_logger = logging.getLogger("bodima")
    package_logger.setLevel(level)
    for handler in package_logger.handlers:
        if isinstance(handler.formatter, StructuredFormatter):
            return handler

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    handler.addFilter(CorrelationIdFilter())
    package_logger.addHandler(handler)
    return handler


def log_booking_step(
    logger: logging.Logger,
    step: str,
    *,
    habitation_id: str | None = None,
    reservation_id: str | None = None,
    user_id: str | None = None,
    amount: float | None = None,
    status: str | None = None,
    error: str | None = None,
    **extra: Any,
) -> None:
    """Log one saga step as ``Booking step: <step> | key=value | ...``.

    Context fields are also set on the record for handlers that want them.
    A step carrying ``error`` is logged at ERROR, anything else at INFO.

    Args:
        logger: Logger to write to
        step: Saga state name, e.g. "charging"
        habitation_id: Listing being booked
        reservation_id: Backend reservation, once created
        user_id: Acting user, once resolved
        amount: Charge in LKR
        status: "started", "succeeded" or "failed"
        error: Failure message
        **extra: Any further fields
    """
    context: dict[str, Any] = {"step": step}
    if habitation_id:
        context["habitation_id"] = habitation_id
    if reservation_id:
        context["reservation_id"] = reservation_id
    if user_id:
        context["user_id"] = user_id
    if amount is not None:
        context["amount"] = amount
    if status:
        context["status"] = status
    if error:
        context["error"] = error
    context.update(extra)

    details = " | ".join(f"{key}={value}" for key, value in context.items() if key != "step")
    message = f"Booking step: {step} | {details}" if details else f"Booking step: {step}"

    level = logging.ERROR if error else logging.INFO
    logger.log(level, message, extra=context)
