"""Unit tests for PaymentApiClient."""

import asyncio
import json
from typing import Any, Awaitable, Callable

import httpx
import pytest

from bodima.config import ClientSettings
from bodima.services.http_client import ApiClient
from bodima.services.payment_client import PaymentApiClient

Handler = Callable[[httpx.Request], httpx.Response]


def _run(
    settings: ClientSettings,
    handler: Handler,
    call: Callable[[PaymentApiClient], Awaitable[Any]],
) -> Any:
    async def run() -> Any:
        async with ApiClient(settings, transport=httpx.MockTransport(handler)) as api:
            return await call(PaymentApiClient(api, settings))

    return asyncio.run(run())


def _unreachable(request: httpx.Request) -> httpx.Response:
    raise AssertionError(f"unexpected request to {request.url}")


class TestCreatePayment:
    """Tests for create_payment()."""

    def test_request_body(self, settings: ClientSettings) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                201,
                json={
                    "success": True,
                    "message": "Payment created successfully",
                    "data": {"_id": "PAY-001", "amount": 12500.0},
                },
            )

        result = _run(settings, handler, lambda c: c.create_payment("OWNER-001", "RES-001", 12500.0))

        assert result.success is True
        assert result.payment_id == "PAY-001"
        assert result.message == "Payment created successfully"
        assert seen[0].url.path == "/payments"
        assert json.loads(seen[0].content) == {
            "habitationOwnerId": "OWNER-001",
            "reservation": "RES-001",
            "amount": 12500.0,
            "currencyType": "LKR",
            "amountType": "rent",
            "discount": 0,
        }

    @pytest.mark.parametrize(
        "payee_id, reservation_id, amount, message",
        [
            ("  ", "RES-001", 100.0, "Habitation owner ID is required"),
            ("OWNER-001", "", 100.0, "Reservation ID is required"),
            ("OWNER-001", "RES-001", 0.0, "Payment amount must be greater than zero"),
            ("OWNER-001", "RES-001", -5.0, "Payment amount must be greater than zero"),
            ("OWNER-001", "RES-001", 1_000_000.01, "Payment amount exceeds maximum allowed limit"),
        ],
    )
    def test_local_checks(
        self,
        settings: ClientSettings,
        payee_id: str,
        reservation_id: str,
        amount: float,
        message: str,
    ) -> None:
        result = _run(
            settings, _unreachable, lambda c: c.create_payment(payee_id, reservation_id, amount)
        )

        assert result.success is False
        assert result.error_message == message

    def test_limit_is_inclusive(self, settings: ClientSettings) -> None:
        result = _run(
            settings,
            lambda r: httpx.Response(201, json={"success": True, "data": {"_id": "PAY-MAX"}}),
            lambda c: c.create_payment("OWNER-001", "RES-001", 1_000_000),
        )

        assert result.success is True

    def test_declined(self, settings: ClientSettings) -> None:
        result = _run(
            settings,
            lambda r: httpx.Response(402, json={"success": False, "message": "Card declined"}),
            lambda c: c.create_payment("OWNER-001", "RES-001", 100.0),
        )

        assert result.success is False
        assert result.error_message == "Card declined"

    def test_unsuccessful_body_without_message(self, settings: ClientSettings) -> None:
        result = _run(
            settings,
            lambda r: httpx.Response(200, json={"success": False}),
            lambda c: c.create_payment("OWNER-001", "RES-001", 100.0),
        )

        assert result.error_message == "Payment failed"


class TestConnection:
    """Tests for test_connection()."""

    def test_reachable(self, settings: ClientSettings) -> None:
        assert _run(
            settings,
            lambda r: httpx.Response(200, json={"success": True}),
            lambda c: c.test_connection(),
        ) is True

    def test_unreachable(self, settings: ClientSettings) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        assert _run(settings, handler, lambda c: c.test_connection()) is False
