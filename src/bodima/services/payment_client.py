"""Payment API client.

Charges are made out to the habitation owner against a reservation. The
request is checked locally before it is sent, so obviously bad charges
never reach the backend.
"""

import logging

from bodima.config import ClientSettings
from bodima.models import PaymentRequest, PaymentResult

from .http_client import ApiClient, ApiError

logger = logging.getLogger(__name__)

PAYMENT_FAILED_MESSAGE = "Payment failed"


class PaymentApiClient:
    """Client for the /payments endpoints."""

    def __init__(self, api: ApiClient, settings: ClientSettings | None = None) -> None:
        """Initialize the client.

        Args:
            api: Shared HTTP transport
            settings: Client settings (currency, payment limit)
        """
        self.api = api
        self.settings = settings or ClientSettings()

    def _check_request(self, payee_id: str, reservation_id: str, amount: float) -> str | None:
        """Return an error message if the charge must not be sent."""
        if not payee_id.strip():
            return "Habitation owner ID is required"
        if not reservation_id.strip():
            return "Reservation ID is required"
        if amount <= 0:
            return "Payment amount must be greater than zero"
        if amount > self.settings.max_payment_amount:
            return "Payment amount exceeds maximum allowed limit"
        return None

    async def create_payment(
        self, payee_id: str, reservation_id: str, amount: float
    ) -> PaymentResult:
        """Charge the payer for a reservation.

        Args:
            payee_id: Habitation owner receiving the payment
            reservation_id: Reservation being paid for
            amount: Charge amount in the configured currency

        Returns:
            PaymentResult; ``error_message`` carries the reason on failure.
        """
        problem = self._check_request(payee_id, reservation_id, amount)
        if problem:
            logger.warning("Payment rejected locally: %s", problem)
            return PaymentResult(success=False, error_message=problem)

        request = PaymentRequest(
            habitation_owner_id=payee_id,
            reservation=reservation_id,
            amount=amount,
            currency_type=self.settings.currency,
        )
        try:
            body = await self.api.post("/payments", json=request.model_dump(by_alias=True))
        except ApiError as e:
            logger.warning("Payment for reservation %s failed: %s", reservation_id, e.message)
            return PaymentResult(success=False, error_message=e.message)

        if not body.get("success"):
            return PaymentResult(
                success=False, error_message=body.get("message") or PAYMENT_FAILED_MESSAGE
            )

        data = body.get("data")
        payment_id = None
        if isinstance(data, dict):
            payment_id = data.get("_id") or data.get("id")
        logger.info("Payment %s recorded for reservation %s", payment_id, reservation_id)
        return PaymentResult(success=True, payment_id=payment_id, message=body.get("message"))

    async def test_connection(self) -> bool:
        """Check that the payment service is reachable."""
        try:
            await self.api.get("/payments/test")
        except ApiError as e:
            logger.warning("Payment service unreachable: %s", e.message)
            return False
        return True
