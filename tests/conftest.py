"""Pytest configuration and fixtures for the Bodima booking core tests.

This module provides reusable fixtures for testing:
- Sample listing data (habitation, owner, location, features)
- Draft reservations on a fixed "today"
- Mocked reservation/payment APIs, biometric gate and user resolver
- JWT construction for session and transport tests
"""

import base64
import json
import time
from datetime import date, timedelta
from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import pytest

from bodima.config import ClientSettings
from bodima.models import (
    MOCK_PAYMENT_METHODS,
    FeatureSnapshot,
    Habitation,
    HabitationOwner,
    LocationSnapshot,
    PaymentResult,
    PendingReservation,
    ReservationResult,
    ReservationStatus,
)
from bodima.services.biometric import StaticBiometricGate
from bodima.services.reservation_flow import ReservationFlow

# === Test Configuration ===

TODAY = date(2026, 7, 1)
TEST_HABITATION_ID = "HAB-UNITTEST"
TEST_OWNER_ID = "OWNER-UNITTEST"
TEST_USER_ID = "USER-UNITTEST"
TEST_RESERVATION_ID = "RES-UNITTEST"
TEST_PAYMENT_ID = "PAY-UNITTEST"


def _make_jwt(claims: dict[str, Any]) -> str:
    """Build an unsigned JWT carrying the given claims."""

    def encode(part: dict[str, Any]) -> str:
        raw = json.dumps(part).encode()
        return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()

    return f"{encode({'alg': 'HS256', 'typ': 'JWT'})}.{encode(claims)}.signature"


# === Data Fixtures ===


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def settings(tmp_path) -> ClientSettings:
    """Settings pointing local storage at a temporary directory."""
    return ClientSettings(api_base_url="http://bodima.test", storage_dir=tmp_path)


@pytest.fixture
def owner() -> HabitationOwner:
    return HabitationOwner(
        id=TEST_OWNER_ID, first_name="Nimal", last_name="Perera", phone_number="0771234567"
    )


@pytest.fixture
def habitation(owner: HabitationOwner) -> Habitation:
    """Listing priced at LKR 12,500 for the stay."""
    return Habitation(
        id=TEST_HABITATION_ID,
        name="Sunny single room near campus",
        description="Quiet room with attached bathroom",
        type="SingleRoom",
        price=12500,
        owner=owner,
        picture_urls=["https://img.bodima.test/hab-1.jpg"],
    )


@pytest.fixture
def location() -> LocationSnapshot:
    return LocationSnapshot(
        address_no="12",
        address_line1="Temple Road",
        city="Kandy",
        district="Kandy",
    )


@pytest.fixture
def features() -> FeatureSnapshot:
    return FeatureSnapshot(sqft=180, small_bed_count=1, is_water_available=True)


@pytest.fixture
def draft(habitation: Habitation, location: LocationSnapshot) -> PendingReservation:
    """Valid draft: three nights from tomorrow, Visa card selected."""
    return PendingReservation(
        habitation=habitation,
        location=location,
        check_in=TODAY + timedelta(days=1),
        check_out=TODAY + timedelta(days=4),
        payment_method=MOCK_PAYMENT_METHODS[0],
    )


@pytest.fixture
def valid_token() -> str:
    return _make_jwt({"sub": TEST_USER_ID, "exp": int(time.time()) + 3600})


@pytest.fixture
def expired_token() -> str:
    return _make_jwt({"sub": TEST_USER_ID, "exp": int(time.time()) - 60})


@pytest.fixture
def make_token() -> Callable[[dict[str, Any]], str]:
    """Factory for unsigned JWTs with arbitrary claims."""
    return _make_jwt


# === Collaborator Fixtures ===


@pytest.fixture
def reservation_api() -> MagicMock:
    """Reservation API where create and confirm both succeed."""
    api = MagicMock()
    api.create_reservation = AsyncMock(
        return_value=ReservationResult(
            success=True,
            reservation_id=TEST_RESERVATION_ID,
            status=ReservationStatus.PENDING,
        )
    )
    api.confirm_reservation = AsyncMock(
        return_value=ReservationResult(
            success=True,
            reservation_id=TEST_RESERVATION_ID,
            status=ReservationStatus.CONFIRMED,
        )
    )
    return api


@pytest.fixture
def payment_api() -> MagicMock:
    """Payment API where the charge succeeds."""
    api = MagicMock()
    api.create_payment = AsyncMock(
        return_value=PaymentResult(success=True, payment_id=TEST_PAYMENT_ID)
    )
    return api


@pytest.fixture
def gate() -> StaticBiometricGate:
    return StaticBiometricGate(result=True)


@pytest.fixture
def user_resolver() -> MagicMock:
    resolver = MagicMock()
    resolver.current_user_id.return_value = TEST_USER_ID
    return resolver


@pytest.fixture
def flow(
    reservation_api: MagicMock,
    payment_api: MagicMock,
    gate: StaticBiometricGate,
    user_resolver: MagicMock,
) -> ReservationFlow:
    """ReservationFlow on a fixed day with mocked collaborators."""
    return ReservationFlow(
        reservation_api,
        payment_api,
        gate,
        user_resolver,
        today=lambda: TODAY,
    )


@pytest.fixture
def ready_flow(
    flow: ReservationFlow, habitation: Habitation, location: LocationSnapshot
) -> ReservationFlow:
    """Flow holding a valid draft, ready to finalize."""
    flow.start(habitation, location)
    flow.set_dates(TODAY + timedelta(days=1), TODAY + timedelta(days=4))
    flow.set_payment_method(MOCK_PAYMENT_METHODS[0])
    return flow
