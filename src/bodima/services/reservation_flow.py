"""Reservation-and-payment flow for one habitation booking.

ReservationFlow owns the pending reservation draft and runs the booking
saga when the user confirms:

    VALIDATING -> RESOLVING_USER -> CREATING_RESERVATION -> AUTHENTICATING
    -> CHARGING -> CONFIRMING -> COMPLETED

Any step can end the run in FAILED. Each ``finalize`` call is a fresh run;
failures never raise out of it and are reported as a BookingOutcome.

No compensating call is made when authentication or payment fails after
the reservation was created: the backend expires unpaid pending
reservations on its own.

Usage:
    flow = ReservationFlow(reservations, payments, gate, session)
    flow.start(habitation, location, features)
    flow.set_dates(check_in, check_out)
    flow.set_payment_method(MOCK_PAYMENT_METHODS[0])
    outcome = await flow.finalize(on_complete=show_result)
"""

from datetime import date, datetime, timedelta
from typing import Callable, Protocol

from bodima.config import ClientSettings
from bodima.models import (
    BookingError,
    BookingOutcome,
    ErrorCode,
    FeatureSnapshot,
    Habitation,
    LocationSnapshot,
    PaymentMethod,
    PaymentResult,
    PendingReservation,
    ReservationResult,
    SagaState,
    ValidationResult,
)
from bodima.utils.logging import (
    clear_correlation_id,
    get_logger,
    log_booking_step,
    set_correlation_id,
)

from .biometric import BiometricGate, payment_reason
from .session import UserResolver
from .validation import validate_reservation

logger = get_logger(__name__)

CompletionHandler = Callable[[bool, str], None]


class ReservationApi(Protocol):
    """Reservation calls the flow depends on."""

    async def create_reservation(
        self, user_id: str, habitation_id: str, check_in: date, check_out: date
    ) -> ReservationResult: ...

    async def confirm_reservation(self, reservation_id: str) -> ReservationResult: ...


class PaymentApi(Protocol):
    """Payment calls the flow depends on."""

    async def create_payment(
        self, payee_id: str, reservation_id: str, amount: float
    ) -> PaymentResult: ...


class ReservationFlow:
    """Holds the booking draft and runs the reservation saga."""

    def __init__(
        self,
        reservations: ReservationApi,
        payments: PaymentApi,
        biometric_gate: BiometricGate,
        user_resolver: UserResolver,
        *,
        settings: ClientSettings | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        """Initialize the flow with its collaborators.

        Args:
            reservations: Reservation API client
            payments: Payment API client
            biometric_gate: Device-owner verification prompt
            user_resolver: Names the acting user
            settings: Client settings (default stay length, currency)
            today: Clock returning the current day
        """
        self._reservations = reservations
        self._payments = payments
        self._gate = biometric_gate
        self._user_resolver = user_resolver
        self.settings = settings or ClientSettings()
        self._today = today

        self._draft: PendingReservation | None = None
        # Bumped whenever the draft is replaced or dropped
        self._generation = 0
        self._state = SagaState.IDLE
        self._running = False

    @property
    def draft(self) -> PendingReservation | None:
        return self._draft

    @property
    def state(self) -> SagaState:
        """Current state of the running run, or the state the last one ended in."""
        return self._state

    @property
    def is_in_progress(self) -> bool:
        return self._running

    # === Draft editing ===

    def start(
        self,
        habitation: Habitation,
        location: LocationSnapshot | None = None,
        features: FeatureSnapshot | None = None,
    ) -> PendingReservation:
        """Begin a new booking, replacing any previous draft.

        Dates default to today and today plus the configured stay length;
        no payment method is selected.

        Args:
            habitation: Habitation being booked
            location: Address snapshot shown in the summary
            features: Feature snapshot shown in the summary

        Returns:
            The new draft.
        """
        check_in = self._today()
        check_out = check_in + timedelta(days=self.settings.default_stay_days)
        self._draft = PendingReservation(
            habitation=habitation,
            location=location,
            features=features,
            check_in=check_in,
            check_out=check_out,
        )
        self._generation += 1
        if not self._running:
            self._state = SagaState.IDLE
        logger.info("Started booking draft for habitation %s", habitation.id)
        return self._draft

    def set_dates(self, check_in: date | datetime, check_out: date | datetime) -> None:
        """Change the stay dates. Nothing is validated here."""
        if self._draft is None:
            logger.warning("set_dates called with no active booking draft")
            return
        self._draft.check_in = check_in
        self._draft.check_out = check_out

    def set_payment_method(self, method: PaymentMethod) -> None:
        if self._draft is None:
            logger.warning("set_payment_method called with no active booking draft")
            return
        self._draft.payment_method = method

    def cancel(self) -> None:
        """Drop the current draft."""
        if self._draft is not None:
            logger.info("Cancelled booking draft for habitation %s", self._draft.habitation.id)
        self._draft = None
        self._generation += 1
        if not self._running:
            self._state = SagaState.IDLE

    def validate(self) -> ValidationResult:
        """Check the current draft against the booking rules."""
        try:
            return validate_reservation(self._draft, self._today())
        except Exception:
            logger.exception("Draft validation raised")
            return ValidationResult.failed(ErrorCode.UNEXPECTED_ERROR)

    # === Saga ===

    async def finalize(self, on_complete: CompletionHandler | None = None) -> BookingOutcome:
        """Run the booking saga for the current draft.

        ``on_complete`` is called exactly once with ``(success, message)``.

        Args:
            on_complete: Optional completion callback

        Returns:
            BookingOutcome describing how the run ended.
        """
        if self._running:
            logger.warning("finalize called while a booking is already being processed")
            outcome = BookingOutcome.failure(ErrorCode.FLOW_IN_PROGRESS, failed_at=self._state)
            self._notify(on_complete, outcome)
            return outcome

        self._running = True
        set_correlation_id()
        try:
            draft = self._draft.model_copy() if self._draft is not None else None
            outcome = await self._run(draft, self._generation)
        finally:
            self._running = False

        self._notify(on_complete, outcome)
        clear_correlation_id()
        return outcome

    async def _run(self, draft: PendingReservation | None, generation: int) -> BookingOutcome:
        reservation_id: str | None = None
        habitation_id = draft.habitation.id if draft is not None else None

        try:
            self._enter(SagaState.VALIDATING, habitation_id=habitation_id)
            verdict = validate_reservation(draft, self._today())
            if not verdict.is_valid:
                raise BookingError(verdict.error_code, verdict.message)

            self._enter(SagaState.RESOLVING_USER, habitation_id=habitation_id)
            user_id = self._user_resolver.current_user_id()
            if not user_id:
                raise BookingError(ErrorCode.USER_UNRESOLVED)

            self._ensure_current(generation)
            self._enter(
                SagaState.CREATING_RESERVATION, habitation_id=habitation_id, user_id=user_id
            )
            created = await self._reservations.create_reservation(
                user_id, draft.habitation.id, draft.check_in, draft.check_out
            )
            if not created.success or not created.reservation_id:
                raise BookingError(ErrorCode.RESERVATION_FAILED, created.error_message)
            reservation_id = created.reservation_id

            amount = draft.total_amount
            self._ensure_current(generation)
            self._enter(SagaState.AUTHENTICATING, reservation_id=reservation_id, amount=amount)
            if not await self._authenticate(payment_reason(amount, self.settings.currency)):
                raise BookingError(ErrorCode.AUTHENTICATION_FAILED)

            self._ensure_current(generation)
            self._enter(SagaState.CHARGING, reservation_id=reservation_id, amount=amount)
            paid = await self._payments.create_payment(draft.payee_id, reservation_id, amount)
            if not paid.success:
                raise BookingError(ErrorCode.PAYMENT_FAILED, paid.error_message)

            # Money has moved: confirm even if the draft was replaced meanwhile
            self._enter(SagaState.CONFIRMING, reservation_id=reservation_id)
            try:
                confirmed = await self._reservations.confirm_reservation(reservation_id)
            except Exception:
                logger.exception("Confirming reservation %s raised", reservation_id)
                raise BookingError(ErrorCode.CONFIRMATION_FAILED) from None
            if not confirmed.success:
                raise BookingError(
                    ErrorCode.CONFIRMATION_FAILED,
                    details={"reservation_id": reservation_id},
                )

        except BookingError as e:
            return self._fail(e, reservation_id)
        except Exception:
            logger.exception("Unexpected error during %s", self._state.value)
            return self._fail(BookingError(ErrorCode.UNEXPECTED_ERROR), reservation_id)

        self._state = SagaState.COMPLETED
        if self._generation == generation:
            self._draft = None
        else:
            logger.info("Draft was replaced during the run; leaving the newer draft in place")
        log_booking_step(
            logger, SagaState.COMPLETED.value, reservation_id=reservation_id, status="succeeded"
        )
        return BookingOutcome.completed(reservation_id)

    def _enter(self, state: SagaState, **context) -> None:
        self._state = state
        log_booking_step(logger, state.value, status="started", **context)

    def _ensure_current(self, generation: int) -> None:
        if self._generation != generation:
            raise BookingError(ErrorCode.DRAFT_SUPERSEDED)

    def _fail(self, error: BookingError, reservation_id: str | None) -> BookingOutcome:
        failed_at = self._state
        self._state = SagaState.FAILED
        log_booking_step(
            logger,
            failed_at.value,
            reservation_id=reservation_id,
            status="failed",
            error=error.message,
            error_code=error.code.value,
        )
        return BookingOutcome.from_error(error, failed_at, reservation_id)

    async def _authenticate(self, reason: str) -> bool:
        try:
            approved = await self._gate.authenticate(reason)
        except Exception:
            logger.exception("Biometric gate raised; treating as denied")
            return False
        return approved is True

    @staticmethod
    def _notify(on_complete: CompletionHandler | None, outcome: BookingOutcome) -> None:
        if on_complete is None:
            return
        try:
            on_complete(outcome.success, outcome.message)
        except Exception:
            logger.exception("Booking completion callback raised")
