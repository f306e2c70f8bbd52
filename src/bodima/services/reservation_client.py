"""Reservation API client.

Every method returns a result object; transport and HTTP failures come
back as ``success=False`` with a user-facing ``error_message`` instead of
raising.
"""

import logging
from datetime import date
from typing import Any

from pydantic import ValidationError

from bodima.models import (
    AvailabilityRequest,
    AvailabilityResult,
    ReservationCreateRequest,
    ReservationRecord,
    ReservationResult,
    ReservedDateRange,
    ReservedDatesResult,
)

from .http_client import DECODE_MESSAGE, ApiClient, ApiError

logger = logging.getLogger(__name__)

CREATE_FAILED_MESSAGE = "Failed to create reservation"


def _parse_record(data: Any) -> ReservationRecord | None:
    if not isinstance(data, dict):
        return None
    try:
        return ReservationRecord.model_validate(data)
    except ValidationError:
        logger.warning("Unreadable reservation payload: %s", data)
        return None


def _record_result(body: dict[str, Any], fallback: str) -> ReservationResult:
    """Turn a ``{success, message, data}`` body into a ReservationResult."""
    if not body.get("success"):
        return ReservationResult(success=False, error_message=body.get("message") or fallback)
    record = _parse_record(body.get("data"))
    if record is None:
        return ReservationResult(success=False, error_message=DECODE_MESSAGE)
    return ReservationResult(
        success=True,
        reservation_id=record.id,
        status=record.status,
        reservation=record,
    )


def _parse_ranges(items: Any) -> list[ReservedDateRange] | None:
    """Parse a list of date ranges; None when the payload is not a list."""
    if items is None:
        return []
    if not isinstance(items, list):
        logger.warning("Expected a list of reserved date ranges, got %s", type(items).__name__)
        return None
    ranges = []
    for item in items:
        try:
            ranges.append(ReservedDateRange.model_validate(item))
        except ValidationError:
            logger.warning("Skipping unreadable reserved date range: %s", item)
    return ranges


class ReservationApiClient:
    """Client for the /reservations endpoints."""

    def __init__(self, api: ApiClient) -> None:
        self.api = api

    async def create_reservation(
        self,
        user_id: str,
        habitation_id: str,
        check_in: date,
        check_out: date,
    ) -> ReservationResult:
        """Create a pending reservation.

        The reserved window is the stay itself; both are sent as ISO-8601
        UTC timestamps at midnight.

        Args:
            user_id: Acting user's profile ID
            habitation_id: Habitation being booked
            check_in: First day of the stay
            check_out: Day the stay ends

        Returns:
            ReservationResult with the new reservation ID on success.
        """
        if not user_id:
            return ReservationResult(
                success=False, error_message="User ID is required for reservation creation"
            )
        if not habitation_id:
            return ReservationResult(
                success=False,
                error_message="Habitation ID is required for reservation creation",
            )

        request = ReservationCreateRequest.for_stay(user_id, habitation_id, check_in, check_out)
        try:
            body = await self.api.post("/reservations", json=request.model_dump(by_alias=True))
        except ApiError as e:
            logger.warning("Reservation create failed: %s", e.message)
            return ReservationResult(success=False, error_message=e.message)

        result = _record_result(body, CREATE_FAILED_MESSAGE)
        if result.success:
            logger.info(
                "Reservation %s created for habitation %s", result.reservation_id, habitation_id
            )
        return result

    async def get_reservation(self, reservation_id: str) -> ReservationResult:
        """Fetch one reservation by ID."""
        if not reservation_id:
            return ReservationResult(success=False, error_message="Reservation ID is required")
        try:
            body = await self.api.get(f"/reservations/{reservation_id}")
        except ApiError as e:
            return ReservationResult(success=False, error_message=e.message)
        return _record_result(body, "Failed to fetch reservation")

    async def confirm_reservation(self, reservation_id: str) -> ReservationResult:
        """Move a pending reservation to confirmed after payment.

        Args:
            reservation_id: Reservation to confirm

        Returns:
            ReservationResult; ``success`` is False if the backend refused.
        """
        if not reservation_id:
            return ReservationResult(success=False, error_message="Reservation ID is required")
        try:
            body = await self.api.put(f"/reservations/{reservation_id}/confirm")
        except ApiError as e:
            logger.warning("Reservation %s confirm failed: %s", reservation_id, e.message)
            return ReservationResult(
                success=False, reservation_id=reservation_id, error_message=e.message
            )

        if not body.get("success"):
            return ReservationResult(
                success=False,
                reservation_id=reservation_id,
                error_message=body.get("message") or "Failed to confirm reservation",
            )
        record = _parse_record(body.get("data"))
        return ReservationResult(
            success=True,
            reservation_id=reservation_id,
            status=record.status if record else None,
            reservation=record,
        )

    async def check_availability(
        self, habitation_id: str, check_in: date, check_out: date
    ) -> AvailabilityResult:
        """Ask whether the dates are free on a habitation.

        Args:
            habitation_id: Habitation to check
            check_in: Requested first day
            check_out: Requested end day

        Returns:
            AvailabilityResult listing any conflicting reservations.
        """
        if not habitation_id:
            return AvailabilityResult(
                success=False,
                error_message="Habitation ID is required for availability checking",
            )
        request = AvailabilityRequest.for_stay(habitation_id, check_in, check_out)
        try:
            body = await self.api.post(
                "/reservations/check-availability", json=request.model_dump(by_alias=True)
            )
        except ApiError as e:
            return AvailabilityResult(success=False, error_message=e.message)

        data = body.get("data")
        if not body.get("success") or not isinstance(data, dict):
            return AvailabilityResult(
                success=False,
                error_message=body.get("message") or "Failed to check availability",
            )
        conflicts = _parse_ranges(data.get("conflictingReservations"))
        if conflicts is None:
            return AvailabilityResult(success=False, error_message=DECODE_MESSAGE)
        return AvailabilityResult(
            success=True,
            is_available=bool(data.get("isAvailable")),
            conflicting_reservations=conflicts,
        )

    async def get_reserved_dates(self, habitation_id: str) -> ReservedDatesResult:
        """List date ranges already taken on a habitation."""
        if not habitation_id:
            return ReservedDatesResult(success=False, error_message="Habitation ID is required")
        try:
            body = await self.api.get(f"/reservations/habitation/{habitation_id}/reserved-dates")
        except ApiError as e:
            return ReservedDatesResult(success=False, error_message=e.message)

        if not body.get("success"):
            return ReservedDatesResult(
                success=False,
                error_message=body.get("message") or "Failed to fetch reserved dates",
            )
        reserved = _parse_ranges(body.get("data"))
        if reserved is None:
            return ReservedDatesResult(success=False, error_message=DECODE_MESSAGE)
        return ReservedDatesResult(success=True, reserved_dates=reserved)

    async def check_expiration(self, reservation_id: str) -> ReservationResult:
        """Have the backend expire the reservation if its deadline passed.

        The backend only acknowledges the check, so the reservation is
        re-fetched to report its current status.
        """
        if not reservation_id:
            return ReservationResult(success=False, error_message="Reservation ID is required")
        try:
            body = await self.api.post(f"/reservations/{reservation_id}/check-expiration")
        except ApiError as e:
            return ReservationResult(success=False, error_message=e.message)

        if not body.get("success"):
            return ReservationResult(
                success=False,
                reservation_id=reservation_id,
                error_message=body.get("message") or "Failed to check reservation expiration",
            )
        return await self.get_reservation(reservation_id)
