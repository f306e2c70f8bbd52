"""In-memory FastAPI stand-in for the Bodima backend.

Emulates the reservation and payment endpoints the booking core calls, so
the API clients and the reservation flow can be driven end to end without
a server:

    app = create_app()
    transport = httpx.ASGITransport(app=app)
    api = ApiClient(settings, transport=transport)

Responses use the backend's ``{success, message, data}`` envelope. Failures
can be injected through ``app.state.backend.failures``.

Run standalone with: python -m bodima.mock_backend
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta
from typing import Any, Callable

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_201_CREATED,
    HTTP_400_BAD_REQUEST,
    HTTP_402_PAYMENT_REQUIRED,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from bodima.models import (
    AvailabilityRequest,
    PaymentRequest,
    ReservationCreateRequest,
    ReservationStatus,
)
from bodima.utils.logging import configure_logging

logger = logging.getLogger(__name__)

# Unpaid pending reservations expire after this long
PAYMENT_WINDOW = timedelta(minutes=2)

BLOCKING_STATUSES = (ReservationStatus.PENDING, ReservationStatus.CONFIRMED)


class MockBackendError(Exception):
    """Error returned to the client as ``{success: false, message}``."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


@dataclass
class FailureSwitches:
    """Flags that make the matching endpoint fail."""

    create_reservation: bool = False
    payment: bool = False
    confirm: bool = False


@dataclass
class MockBackend:
    """Backend state shared by all routes of one app."""

    now: Callable[[], datetime] = lambda: datetime.now(UTC)
    reservations: dict[str, dict[str, Any]] = field(default_factory=dict)
    payments: dict[str, dict[str, Any]] = field(default_factory=dict)
    failures: FailureSwitches = field(default_factory=FailureSwitches)
    # Request log as (method, path) pairs
    calls: list[tuple[str, str]] = field(default_factory=list)

    def get_reservation(self, reservation_id: str) -> dict[str, Any]:
        reservation = self.reservations.get(reservation_id)
        if reservation is None:
            raise MockBackendError(HTTP_404_NOT_FOUND, "Reservation not found")
        return reservation

    def conflicts(
        self, habitation_id: str, check_in: date, check_out: date
    ) -> list[dict[str, Any]]:
        """Reservations on the habitation whose stay overlaps the range."""
        found = []
        for reservation in self.reservations.values():
            if reservation["habitation"] != habitation_id:
                continue
            if reservation["status"] not in BLOCKING_STATUSES:
                continue
            if _parse_day(reservation["checkInDate"]) < check_out and check_in < _parse_day(
                reservation["checkOutDate"]
            ):
                found.append(reservation)
        return found


def _parse_day(value: str) -> date:
    return datetime.fromisoformat(value.replace("Z", "+00:00")).date()


def _timestamp(moment: datetime) -> str:
    return moment.isoformat().replace("+00:00", "Z")


def _envelope(message: str, data: Any = None) -> dict[str, Any]:
    return {"success": True, "message": message, "data": data}


def _date_range(reservation: dict[str, Any]) -> dict[str, Any]:
    return {
        "_id": reservation["_id"],
        "checkInDate": reservation["checkInDate"],
        "checkOutDate": reservation["checkOutDate"],
        "status": reservation["status"],
    }


def get_backend(request: Request) -> MockBackend:
    backend: MockBackend = request.app.state.backend
    backend.calls.append((request.method, request.url.path))
    return backend


# === Reservations ===

reservations_router = APIRouter(prefix="/reservations", tags=["reservations"])


@reservations_router.post("", status_code=HTTP_201_CREATED)
async def create_reservation(
    body: ReservationCreateRequest, backend: MockBackend = Depends(get_backend)
) -> dict[str, Any]:
    if backend.failures.create_reservation:
        raise MockBackendError(HTTP_500_INTERNAL_SERVER_ERROR, "Reservation service unavailable")

    check_in = _parse_day(body.check_in_date)
    check_out = _parse_day(body.check_out_date)
    if check_out <= check_in:
        raise MockBackendError(HTTP_400_BAD_REQUEST, "Check-out date must be after check-in date")
    if backend.conflicts(body.habitation, check_in, check_out):
        raise MockBackendError(
            HTTP_409_CONFLICT, "Habitation is already reserved for the selected dates"
        )

    now = backend.now()
    reservation_id = uuid.uuid4().hex[:24]
    reservation = {
        "_id": reservation_id,
        "user": body.user,
        "habitation": body.habitation,
        "checkInDate": body.check_in_date,
        "checkOutDate": body.check_out_date,
        "reservedDateTime": body.reserved_date_time,
        "reservationEndDateTime": body.reservation_end_date_time,
        "status": ReservationStatus.PENDING,
        "paymentDeadline": _timestamp(now + PAYMENT_WINDOW),
        "isPaymentCompleted": False,
        "totalDays": (check_out - check_in).days,
        "totalAmount": 0,
        "createdAt": _timestamp(now),
        "updatedAt": _timestamp(now),
    }
    backend.reservations[reservation_id] = reservation
    logger.info("Mock reservation %s created for habitation %s", reservation_id, body.habitation)
    return _envelope("Reservation created successfully", reservation)


@reservations_router.post("/check-availability")
async def check_availability(
    body: AvailabilityRequest, backend: MockBackend = Depends(get_backend)
) -> dict[str, Any]:
    conflicts = backend.conflicts(
        body.habitation_id, _parse_day(body.check_in_date), _parse_day(body.check_out_date)
    )
    return _envelope(
        "Availability checked",
        {
            "isAvailable": not conflicts,
            "conflictingReservations": [_date_range(r) for r in conflicts],
        },
    )


@reservations_router.get("/habitation/{habitation_id}/reserved-dates")
async def get_reserved_dates(
    habitation_id: str, backend: MockBackend = Depends(get_backend)
) -> dict[str, Any]:
    ranges = [
        _date_range(r)
        for r in backend.reservations.values()
        if r["habitation"] == habitation_id and r["status"] in BLOCKING_STATUSES
    ]
    return _envelope("Reserved dates retrieved", ranges)


@reservations_router.get("/{reservation_id}")
async def get_reservation(
    reservation_id: str, backend: MockBackend = Depends(get_backend)
) -> dict[str, Any]:
    return _envelope("Reservation retrieved", backend.get_reservation(reservation_id))


@reservations_router.put("/{reservation_id}/confirm")
async def confirm_reservation(
    reservation_id: str, backend: MockBackend = Depends(get_backend)
) -> dict[str, Any]:
    reservation = backend.get_reservation(reservation_id)
    if backend.failures.confirm:
        raise MockBackendError(HTTP_500_INTERNAL_SERVER_ERROR, "Failed to confirm reservation")
    if reservation["status"] != ReservationStatus.PENDING:
        raise MockBackendError(
            HTTP_400_BAD_REQUEST, f"Reservation is {reservation['status'].value}"
        )

    reservation["status"] = ReservationStatus.CONFIRMED
    reservation["updatedAt"] = _timestamp(backend.now())
    return _envelope("Reservation confirmed", reservation)


@reservations_router.post("/{reservation_id}/check-expiration")
async def check_expiration(
    reservation_id: str, backend: MockBackend = Depends(get_backend)
) -> dict[str, Any]:
    reservation = backend.get_reservation(reservation_id)
    deadline = datetime.fromisoformat(reservation["paymentDeadline"].replace("Z", "+00:00"))
    if (
        reservation["status"] == ReservationStatus.PENDING
        and not reservation["isPaymentCompleted"]
        and backend.now() >= deadline
    ):
        reservation["status"] = ReservationStatus.EXPIRED
        reservation["updatedAt"] = _timestamp(backend.now())
        logger.info("Mock reservation %s expired", reservation_id)
    return {"success": True, "message": "Expiration checked", "data": None}


# === Payments ===

payments_router = APIRouter(prefix="/payments", tags=["payments"])


@payments_router.get("/test")
async def test_payments(backend: MockBackend = Depends(get_backend)) -> dict[str, Any]:
    return _envelope("Payment service is reachable")


@payments_router.post("", status_code=HTTP_201_CREATED)
async def create_payment(
    body: PaymentRequest, backend: MockBackend = Depends(get_backend)
) -> dict[str, Any]:
    reservation = backend.get_reservation(body.reservation)
    if backend.failures.payment:
        raise MockBackendError(HTTP_402_PAYMENT_REQUIRED, "Card declined")
    if reservation["status"] != ReservationStatus.PENDING:
        raise MockBackendError(
            HTTP_400_BAD_REQUEST, f"Reservation is {reservation['status'].value}"
        )

    now = backend.now()
    payment_id = uuid.uuid4().hex[:24]
    payment = {
        "_id": payment_id,
        "habitationOwnerId": body.habitation_owner_id,
        "reservation": body.reservation,
        "amount": body.amount,
        "currencyType": body.currency_type,
        "amountType": body.amount_type,
        "discount": body.discount,
        "totalAmount": body.amount - body.discount,
        "createdAt": _timestamp(now),
        "updatedAt": _timestamp(now),
    }
    backend.payments[payment_id] = payment
    reservation["isPaymentCompleted"] = True
    reservation["totalAmount"] = int(body.amount)
    return _envelope("Payment created successfully", payment)


# === App ===


async def mock_backend_error_handler(request: Request, exc: MockBackendError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.message},
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"Invalid {location}: {first.get('msg', 'bad value')}" if location else "Invalid request"
    return JSONResponse(
        status_code=HTTP_400_BAD_REQUEST,
        content={"success": False, "message": message},
    )


def create_app(backend: MockBackend | None = None) -> FastAPI:
    """Build a fresh mock backend app.

    Args:
        backend: Pre-populated state; a new empty one is used if omitted

    Returns:
        FastAPI app with ``app.state.backend`` holding the state.
    """
    app = FastAPI(title="Bodima Mock Backend", version="0.1.0")
    app.state.backend = backend or MockBackend()
    app.add_exception_handler(MockBackendError, mock_backend_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.include_router(reservations_router)
    app.include_router(payments_router)
    return app


def run_server(host: str = "127.0.0.1", port: int = 8080) -> None:
    """Serve a fresh mock backend over HTTP with booking-tagged logs.

    Args:
        host: Host to bind to (default: 127.0.0.1)
        port: Port to listen on (default: 8080)
    """
    import uvicorn

    configure_logging()
    logger.info("Starting mock backend on %s:%d", host, port)
    uvicorn.run(create_app(), host=host, port=port, log_config=None)


if __name__ == "__main__":
    run_server()
