"""Enumeration types for Bodima booking models."""

from enum import Enum


class ReservationStatus(str, Enum):
    """Status of a remote reservation."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    EXPIRED = "expired"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class CardType(str, Enum):
    """Supported payment card brands."""

    VISA = "visa"
    MASTERCARD = "mastercard"

    @property
    def display_name(self) -> str:
        """Brand name as shown to users."""
        return {CardType.VISA: "Visa", CardType.MASTERCARD: "Mastercard"}[self]


class SagaState(str, Enum):
    """Steps of one reservation finalize run."""

    IDLE = "idle"
    VALIDATING = "validating"
    RESOLVING_USER = "resolving_user"
    CREATING_RESERVATION = "creating_reservation"
    AUTHENTICATING = "authenticating"
    CHARGING = "charging"
    CONFIRMING = "confirming"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """True once a run can make no further progress."""
        return self in (SagaState.COMPLETED, SagaState.FAILED)


class ErrorCategory(str, Enum):
    """How a failed booking should be handled by the caller."""

    VALIDATION = "validation"  # fixable by editing the draft
    AUTHENTICATION = "authentication"  # fixable by retrying the prompt
    REMOTE = "remote"  # backend refused or was unreachable
    CONFIRMATION = "confirmation"  # money moved, booking not locked in
