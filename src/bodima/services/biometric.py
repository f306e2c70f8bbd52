"""Biometric gate used to confirm the payer before charging.

The device prompt itself (fingerprint, face or passcode fallback) lives in
the host platform. This module defines the async contract the reservation
flow calls and a few adapters. A gate answers True only for a successful
device-owner verification and never raises.
"""

import inspect
import logging
from typing import Awaitable, Callable, Protocol, Union, runtime_checkable

logger = logging.getLogger(__name__)

DEFAULT_REASON = "Authenticate to proceed"

AuthCallback = Callable[[str], Union[bool, Awaitable[bool]]]


@runtime_checkable
class BiometricGate(Protocol):
    """Device-owner verification prompt."""

    async def authenticate(self, reason: str = DEFAULT_REASON) -> bool:
        """Prompt the user and report whether verification succeeded."""
        ...


def payment_reason(amount: float, currency: str = "LKR") -> str:
    """Prompt text that tells the user exactly what they are approving.

    Args:
        amount: Charge amount
        currency: ISO currency code

    Returns:
        Reason string such as 'Confirm payment of LKR 12,500.00'.
    """
    return f"Confirm payment of {currency} {amount:,.2f}"


class StaticBiometricGate:
    """Gate with a fixed answer, for simulators and tests.

    Records every reason it was asked with.
    """

    def __init__(self, result: bool = True) -> None:
        self.result = result
        self.reasons: list[str] = []

    async def authenticate(self, reason: str = DEFAULT_REASON) -> bool:
        self.reasons.append(reason)
        logger.info("Biometric prompt (static): %s -> %s", reason, self.result)
        return self.result


class UnavailableBiometricGate:
    """Gate for devices without biometric or passcode capability."""

    async def authenticate(self, reason: str = DEFAULT_REASON) -> bool:
        logger.warning("Biometric authentication unavailable on this device")
        return False


class CallbackBiometricGate:
    """Adapts a platform callback into a BiometricGate.

    The callback receives the reason string and may be sync or async. Any
    error it raises, or any non-True answer, counts as a denial.
    """

    def __init__(self, callback: AuthCallback) -> None:
        self._callback = callback

    async def authenticate(self, reason: str = DEFAULT_REASON) -> bool:
        try:
            answer = self._callback(reason)
            if inspect.isawaitable(answer):
                answer = await answer
        except Exception:
            logger.exception("Biometric callback failed; treating as denied")
            return False
        return answer is True
