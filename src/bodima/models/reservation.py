"""Reservation models: the local draft and the remote reservation views."""

from datetime import date, datetime, time, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import ReservationStatus
from .habitation import FeatureSnapshot, Habitation, LocationSnapshot
from .payment import PaymentMethod


def _to_day(value: Any) -> Any:
    """Reduce datetimes to their calendar day; other values pass through."""
    if isinstance(value, datetime):
        return value.date()
    return value


class PendingReservation(BaseModel):
    """The in-progress booking held by the reservation flow.

    Date ordering and payment-method presence are not enforced here; the
    user edits freely and the validator reports problems.
    """

    model_config = ConfigDict(validate_assignment=True)

    habitation: Habitation
    location: LocationSnapshot | None = None
    features: FeatureSnapshot | None = None
    check_in: date
    check_out: date
    payment_method: PaymentMethod | None = None

    @field_validator("check_in", "check_out", mode="before")
    @classmethod
    def _strip_time(cls, value: Any) -> Any:
        return _to_day(value)

    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days

    @property
    def total_amount(self) -> float:
        """Amount charged for the stay (listing price, LKR)."""
        return float(self.habitation.price)

    @property
    def property_title(self) -> str:
        return self.habitation.name

    @property
    def property_address(self) -> str:
        if self.location is None:
            return "Address not available"
        return self.location.display_address

    @property
    def property_image_url(self) -> str | None:
        return self.habitation.main_picture_url

    @property
    def payee_id(self) -> str:
        """Owner ID the payment is made out to."""
        if self.habitation.owner is None:
            return "unknown_owner"
        return self.habitation.owner.id


def _iso_midnight(day: date) -> str:
    """ISO-8601 UTC timestamp for the start of a day."""
    return datetime.combine(day, time.min, tzinfo=timezone.utc).isoformat().replace(
        "+00:00", "Z"
    )


class ReservationCreateRequest(BaseModel):
    """Body of POST /reservations."""

    model_config = ConfigDict(populate_by_name=True)

    user: str = Field(..., min_length=1)
    habitation: str = Field(..., min_length=1)
    check_in_date: str = Field(..., alias="checkInDate")
    check_out_date: str = Field(..., alias="checkOutDate")
    reserved_date_time: str = Field(..., alias="reservedDateTime")
    reservation_end_date_time: str = Field(..., alias="reservationEndDateTime")

    @classmethod
    def for_stay(
        cls, user_id: str, habitation_id: str, check_in: date, check_out: date
    ) -> "ReservationCreateRequest":
        """Build a request where the reserved window equals the stay."""
        start = _iso_midnight(check_in)
        end = _iso_midnight(check_out)
        return cls(
            user=user_id,
            habitation=habitation_id,
            check_in_date=start,
            check_out_date=end,
            reserved_date_time=start,
            reservation_end_date_time=end,
        )


class AvailabilityRequest(BaseModel):
    """Body of POST /reservations/check-availability."""

    model_config = ConfigDict(populate_by_name=True)

    habitation_id: str = Field(..., min_length=1, alias="habitationId")
    check_in_date: str = Field(..., alias="checkInDate")
    check_out_date: str = Field(..., alias="checkOutDate")

    @classmethod
    def for_stay(
        cls, habitation_id: str, check_in: date, check_out: date
    ) -> "AvailabilityRequest":
        return cls(
            habitation_id=habitation_id,
            check_in_date=_iso_midnight(check_in),
            check_out_date=_iso_midnight(check_out),
        )


class ReservationRecord(BaseModel):
    """Reservation as returned by the backend.

    The user and habitation fields may arrive either as IDs or as populated
    objects; only the ID is kept.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., alias="_id")
    user: str | None = None
    habitation: str | None = None
    check_in_date: str | None = Field(default=None, alias="checkInDate")
    check_out_date: str | None = Field(default=None, alias="checkOutDate")
    status: ReservationStatus = ReservationStatus.PENDING
    payment_deadline: str | None = Field(default=None, alias="paymentDeadline")
    is_payment_completed: bool = Field(default=False, alias="isPaymentCompleted")
    total_days: int = Field(default=1, alias="totalDays")
    total_amount: int = Field(default=0, alias="totalAmount")

    @field_validator("user", "habitation", mode="before")
    @classmethod
    def _reference_id(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return value.get("_id") or value.get("id")
        return value


class ReservationResult(BaseModel):
    """Outcome of a reservation create/confirm/get call."""

    success: bool
    reservation_id: str | None = None
    status: ReservationStatus | None = None
    reservation: ReservationRecord | None = None
    error_message: str | None = None


class ReservedDateRange(BaseModel):
    """A span of days already taken on a habitation."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., alias="_id")
    check_in_date: str = Field(..., alias="checkInDate")
    check_out_date: str = Field(..., alias="checkOutDate")
    status: ReservationStatus


class AvailabilityResult(BaseModel):
    """Outcome of an availability check."""

    success: bool
    is_available: bool = False
    conflicting_reservations: list[ReservedDateRange] = Field(default_factory=list)
    error_message: str | None = None


class ReservedDatesResult(BaseModel):
    """Outcome of a reserved-dates lookup."""

    success: bool
    reserved_dates: list[ReservedDateRange] = Field(default_factory=list)
    error_message: str | None = None
