"""Unit tests for booking models and error taxonomy."""

from datetime import date

import pytest
from pydantic import ValidationError

from bodima.models import (
    ERROR_CATEGORIES,
    ERROR_MESSAGES,
    ERROR_RECOVERY,
    MOCK_PAYMENT_METHODS,
    BookingError,
    BookingOutcome,
    CardType,
    ErrorCategory,
    ErrorCode,
    Habitation,
    LocationSnapshot,
    PaymentMethod,
    PaymentRequest,
    PendingReservation,
    ReservationCreateRequest,
    ReservationRecord,
    SagaState,
    mask_card_number,
)


class TestErrorTaxonomy:
    """Tests for ErrorCode tables and BookingError."""

    def test_every_code_is_described(self) -> None:
        for code in ErrorCode:
            assert code in ERROR_MESSAGES
            assert code in ERROR_RECOVERY
            assert code in ERROR_CATEGORIES

    def test_confirmation_failure_has_own_category(self) -> None:
        confirmation_codes = [
            code for code, cat in ERROR_CATEGORIES.items() if cat == ErrorCategory.CONFIRMATION
        ]

        assert confirmation_codes == [ErrorCode.CONFIRMATION_FAILED]

    def test_booking_error_message_override(self) -> None:
        error = BookingError(ErrorCode.PAYMENT_FAILED, "Card declined")

        assert error.message == "Card declined"
        assert str(error) == "Card declined"
        assert error.category == ErrorCategory.REMOTE

    def test_booking_error_default_message(self) -> None:
        error = BookingError(ErrorCode.RESERVATION_FAILED)

        assert error.message == "Failed to create reservation"

    def test_outcome_from_error(self) -> None:
        error = BookingError(ErrorCode.AUTHENTICATION_FAILED)

        outcome = BookingOutcome.from_error(error, SagaState.AUTHENTICATING, "RES-1")

        assert outcome.success is False
        assert outcome.state == SagaState.FAILED
        assert outcome.failed_at == SagaState.AUTHENTICATING
        assert outcome.reservation_id == "RES-1"
        assert outcome.recovery == ERROR_RECOVERY[ErrorCode.AUTHENTICATION_FAILED]


class TestPaymentMethod:
    """Tests for card masking and mock methods."""

    def test_mask(self) -> None:
        assert mask_card_number("1234567890123456") == "1234 **** **** 3456"
        assert mask_card_number("1234 5678 9012 3456") == "1234 **** **** 3456"

    def test_mock_methods(self) -> None:
        assert [(m.card_type, m.masked_number, m.holder_name) for m in MOCK_PAYMENT_METHODS] == [
            (CardType.VISA, "1234 **** **** 3456", "John Doe"),
            (CardType.MASTERCARD, "9876 **** **** 7654", "Jane Smith"),
            (CardType.VISA, "1111 **** **** 4444", "Alex Johnson"),
        ]

    def test_label(self) -> None:
        assert MOCK_PAYMENT_METHODS[1].label == "Mastercard 9876 **** **** 7654"

    def test_frozen(self) -> None:
        with pytest.raises(ValidationError):
            MOCK_PAYMENT_METHODS[0].holder_name = "Someone Else"

    def test_unknown_card_type_rejected(self) -> None:
        with pytest.raises(ValidationError):
            PaymentMethod(card_type="amex", masked_number="x", holder_name="y")


class TestWireModels:
    """Tests for request/response models and their aliases."""

    def test_habitation_from_backend_payload(self) -> None:
        habitation = Habitation.model_validate(
            {
                "_id": "HAB-1",
                "name": "Annex",
                "price": 25000,
                "isReserved": False,
                "user": {"_id": "OWNER-1", "firstName": "Ruwan", "lastName": "Jayasinghe"},
                "pictureUrls": [],
            }
        )

        assert habitation.owner.id == "OWNER-1"
        assert habitation.owner.full_name == "Ruwan Jayasinghe"
        assert habitation.main_picture_url is None

    def test_location_short_address_preferred(self) -> None:
        location = LocationSnapshot(city="Galle", district="Galle", short_address="Fort, Galle")

        assert location.display_address == "Fort, Galle"

    def test_pending_reservation_without_location(self, habitation: Habitation) -> None:
        draft = PendingReservation(
            habitation=habitation, check_in=date(2026, 7, 2), check_out=date(2026, 7, 3)
        )

        assert draft.property_address == "Address not available"

    def test_create_request_uses_midnight_utc(self) -> None:
        request = ReservationCreateRequest.for_stay(
            "USER-1", "HAB-1", date(2026, 7, 2), date(2026, 7, 5)
        )

        dumped = request.model_dump(by_alias=True)
        assert dumped["checkInDate"] == "2026-07-02T00:00:00Z"
        assert dumped["reservationEndDateTime"] == "2026-07-05T00:00:00Z"

    def test_payment_request_rejects_zero_amount(self) -> None:
        with pytest.raises(ValidationError):
            PaymentRequest(habitation_owner_id="OWNER-1", reservation="RES-1", amount=0)

    def test_reservation_record_ignores_unknown_fields(self) -> None:
        record = ReservationRecord.model_validate(
            {"_id": "RES-1", "status": "confirmed", "__v": 0, "habitation": {"_id": "HAB-1"}}
        )

        assert record.habitation == "HAB-1"
        assert record.is_payment_completed is False
