"""Draft validation for the reservation flow.

The validator is a pure function of the draft and the current day. The
reservation flow uses it before submitting, and screens can call it while
the user edits dates to surface warnings early.
"""

import datetime as dt

from bodima.models import ErrorCode, PendingReservation, ValidationResult

MINIMUM_STAY_DAYS = 1


def _as_day(value: dt.date | dt.datetime) -> dt.date:
    if isinstance(value, dt.datetime):
        return value.date()
    return value


def validate_reservation(
    draft: PendingReservation | None,
    today: dt.date | dt.datetime,
) -> ValidationResult:
    """Check a draft reservation against the booking rules.

    Checks run in a fixed order and the first failure is reported:
    date order, check-in in the past, minimum stay, payment method.

    Args:
        draft: Pending reservation snapshot, or None if no booking is active
        today: Current day (datetimes are reduced to their date)

    Returns:
        ValidationResult with the first failing check's message, or a pass.
    """
    if draft is None:
        return ValidationResult.failed(ErrorCode.NO_ACTIVE_DRAFT)

    today = _as_day(today)
    check_in = draft.check_in
    check_out = draft.check_out

    if check_out <= check_in:
        return ValidationResult.failed(ErrorCode.DATE_ORDER_INVALID)

    if check_in < today:
        return ValidationResult.failed(ErrorCode.DATE_IN_PAST)

    if (check_out - check_in).days < MINIMUM_STAY_DAYS:
        return ValidationResult.failed(ErrorCode.STAY_TOO_SHORT)

    if draft.payment_method is None:
        return ValidationResult.failed(ErrorCode.PAYMENT_METHOD_MISSING)

    return ValidationResult.passed()
