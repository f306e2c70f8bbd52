"""Payment models.

Card data is display-only: a PaymentMethod keeps a masked number and the
holder name, never the full card number.
"""

from pydantic import BaseModel, ConfigDict, Field

from .enums import CardType


def mask_card_number(card_number: str) -> str:
    """Mask a card number as '1234 **** **** 3456'.

    Args:
        card_number: Raw card number (spaces allowed)

    Returns:
        Masked number keeping only the first and last four digits.
    """
    digits = card_number.replace(" ", "")
    return f"{digits[:4]} **** **** {digits[-4:]}"


class PaymentMethod(BaseModel):
    """A selectable payment card."""

    model_config = ConfigDict(frozen=True)

    card_type: CardType = Field(..., description="Card brand")
    masked_number: str = Field(..., description="Masked card number")
    holder_name: str = Field(..., min_length=1, description="Name on the card")

    @classmethod
    def from_card_number(
        cls, card_type: CardType, card_number: str, holder_name: str
    ) -> "PaymentMethod":
        """Build a display-only method from a raw card number."""
        return cls(
            card_type=card_type,
            masked_number=mask_card_number(card_number),
            holder_name=holder_name,
        )

    @property
    def label(self) -> str:
        return f"{self.card_type.display_name} {self.masked_number}"


# Demonstration cards; a production build would fetch these from a payment vault
MOCK_PAYMENT_METHODS: tuple[PaymentMethod, ...] = (
    PaymentMethod.from_card_number(CardType.VISA, "1234567890123456", "John Doe"),
    PaymentMethod.from_card_number(CardType.MASTERCARD, "9876543210987654", "Jane Smith"),
    PaymentMethod.from_card_number(CardType.VISA, "1111222233334444", "Alex Johnson"),
)


class PaymentRequest(BaseModel):
    """Body of POST /payments."""

    model_config = ConfigDict(populate_by_name=True)

    habitation_owner_id: str = Field(..., alias="habitationOwnerId")
    reservation: str = Field(..., description="Reservation ID being paid for")
    amount: float = Field(..., gt=0)
    currency_type: str = Field(default="LKR", alias="currencyType")
    amount_type: str = Field(default="rent", alias="amountType")
    discount: float = Field(default=0, ge=0)


class PaymentResult(BaseModel):
    """Outcome of a charge as seen by the client."""

    success: bool
    payment_id: str | None = None
    message: str | None = None
    error_message: str | None = None
