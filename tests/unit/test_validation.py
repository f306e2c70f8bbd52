"""Unit tests for draft validation.

Tests verify the validator:
- Reports the first failing check in the fixed order
- Treats datetimes at day granularity
- Is a pure function of (draft, today)
"""

from datetime import date, datetime, timedelta

import pytest

from bodima.models import (
    MOCK_PAYMENT_METHODS,
    ErrorCode,
    Habitation,
    PendingReservation,
)
from bodima.services.validation import validate_reservation

TODAY = date(2026, 7, 1)


def _draft(
    habitation: Habitation,
    check_in: date,
    check_out: date,
    with_method: bool = True,
) -> PendingReservation:
    return PendingReservation(
        habitation=habitation,
        check_in=check_in,
        check_out=check_out,
        payment_method=MOCK_PAYMENT_METHODS[0] if with_method else None,
    )


class TestValidationOrder:
    """Tests for the order in which checks are applied."""

    def test_no_draft(self) -> None:
        """Missing draft is reported before anything else."""
        result = validate_reservation(None, TODAY)

        assert result.is_valid is False
        assert result.error_code == ErrorCode.NO_ACTIVE_DRAFT
        assert result.message == "No reservation data found"

    def test_checkout_before_checkin(self, habitation: Habitation) -> None:
        draft = _draft(habitation, TODAY + timedelta(days=5), TODAY + timedelta(days=2))

        result = validate_reservation(draft, TODAY)

        assert result.error_code == ErrorCode.DATE_ORDER_INVALID
        assert result.message == "Check-out date must be after check-in date"

    def test_checkin_in_past_regardless_of_checkout(self, habitation: Habitation) -> None:
        """A past check-in fails even when the stay itself is well formed."""
        for nights in (1, 3, 30):
            check_in = TODAY - timedelta(days=1)
            draft = _draft(habitation, check_in, check_in + timedelta(days=nights))

            result = validate_reservation(draft, TODAY)

            assert result.error_code == ErrorCode.DATE_IN_PAST
            assert result.message == "Check-in date cannot be in the past"

    def test_date_order_reported_before_past_date(self, habitation: Habitation) -> None:
        """When both date order and past check-in fail, date order wins."""
        draft = _draft(habitation, TODAY - timedelta(days=1), TODAY - timedelta(days=3))

        result = validate_reservation(draft, TODAY)

        assert result.error_code == ErrorCode.DATE_ORDER_INVALID

    def test_same_day_stay_fails_on_date_order(self, habitation: Habitation) -> None:
        """Equal check-in and check-out trips the first check in the order."""
        day = TODAY + timedelta(days=10)
        draft = _draft(habitation, day, day)

        result = validate_reservation(draft, TODAY)

        assert result.is_valid is False
        assert result.error_code == ErrorCode.DATE_ORDER_INVALID

    def test_missing_payment_method(self, habitation: Habitation) -> None:
        draft = _draft(
            habitation,
            TODAY + timedelta(days=1),
            TODAY + timedelta(days=2),
            with_method=False,
        )

        result = validate_reservation(draft, TODAY)

        assert result.error_code == ErrorCode.PAYMENT_METHOD_MISSING
        assert result.message == "Please select a payment method"

    @pytest.mark.parametrize("method_index", [0, 1, 2])
    def test_any_payment_method_passes(self, habitation: Habitation, method_index: int) -> None:
        draft = PendingReservation(
            habitation=habitation,
            check_in=TODAY,
            check_out=TODAY + timedelta(days=1),
            payment_method=MOCK_PAYMENT_METHODS[method_index],
        )

        result = validate_reservation(draft, TODAY)

        assert result.is_valid is True
        assert result.message is None
        assert result.error_code is None


class TestValidationDayGranularity:
    """Tests that time of day never affects the verdict."""

    def test_checkin_today_is_allowed(self, draft: PendingReservation) -> None:
        draft.check_in = TODAY
        draft.check_out = TODAY + timedelta(days=1)

        assert validate_reservation(draft, TODAY).is_valid is True

    def test_today_as_datetime_late_in_day(self, draft: PendingReservation) -> None:
        """A late 'now' does not push today's check-in into the past."""
        draft.check_in = TODAY

        result = validate_reservation(draft, datetime(2026, 7, 1, 23, 59))

        assert result.is_valid is True

    def test_draft_datetimes_are_reduced_to_dates(self, habitation: Habitation) -> None:
        draft = PendingReservation(
            habitation=habitation,
            check_in=datetime(2026, 7, 2, 18, 30),
            check_out=datetime(2026, 7, 3, 9, 0),
            payment_method=MOCK_PAYMENT_METHODS[1],
        )

        assert draft.check_in == date(2026, 7, 2)
        assert draft.nights == 1
        assert validate_reservation(draft, TODAY).is_valid is True


class TestValidationPurity:
    """Tests for deterministic, side-effect free validation."""

    def test_identical_inputs_identical_verdicts(self, draft: PendingReservation) -> None:
        draft.payment_method = None

        first = validate_reservation(draft, TODAY)
        second = validate_reservation(draft, TODAY)

        assert first == second
        assert draft.payment_method is None
