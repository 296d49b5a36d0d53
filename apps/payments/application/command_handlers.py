"""
Payment Command Handlers

Commands:
- CreatePaymentIntentCommand: open a gateway session for a CONFIRMED booking

The gateway call sits between two short units of work and never runs while
rows are locked:

1. lock the booking, check it is payable, compute amount and reference
2. call the gateway (bounded timeout); failure leaves nothing behind
3. lock the booking again, re-check, insert the PENDING payment

If step 3 fails the gateway holds a session with no local payment; the
orphaned reference is logged at ERROR level for manual follow-up.
"""

from dataclasses import dataclass
from uuid import UUID
import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import IntegrityError

from apps.bookings.domain.entities import Booking, BookingStatus
from apps.bookings.repositories import booking_repository
from apps.payments.domain.amounts import compute_amount, make_reference
from apps.payments.domain.entities import PaymentStatus, parse_method
from apps.payments.domain.events import PaymentCreated
from apps.payments.gateway import Customer, PaymentGatewayError, payment_gateway
from apps.payments.models import Payment
from apps.payments.repositories import payment_repository
from shared.application.access import Caller
from shared.application.result import returns_result
from shared.application.uow import DjangoUnitOfWork
from shared.domain.errors import (
    DomainError,
    DuplicatePayment,
    ExternalServiceError,
    ForbiddenError,
    InternalError,
    InvalidTransition,
)

logger = logging.getLogger(__name__)


@dataclass
class CreatePaymentIntentCommand:
    """Pay for a confirmed booking through the gateway with ``method``"""
    booking_id: UUID
    caller: Caller
    method: str | None = None


class CreatePaymentIntentHandler:

    def __init__(self, booking_repo=None, payment_repo=None, gateway=None, uow_factory=DjangoUnitOfWork):
        self.booking_repo = booking_repo or booking_repository
        self.payment_repo = payment_repo or payment_repository
        self.gateway = gateway or payment_gateway
        self.uow_factory = uow_factory

    @returns_result
    def handle(self, command: CreatePaymentIntentCommand) -> Payment:
        method = parse_method(command.method)

        with self.uow_factory() as uow:
            booking = self.booking_repo.get(uow, command.booking_id, lock=True)
            self._check_payable(uow, booking, command.caller)
            amount = compute_amount(booking.lines, booking.window)
            attempt = self.payment_repo.claim_attempt(uow, booking.id)
            owner = get_user_model().objects.get(pk=booking.owner_id)

        reference = make_reference(booking.id, attempt, settings.PAYMENT_REFERENCE_MAX_LENGTH)
        try:
            session = self.gateway.create_transaction(reference, amount.amount, method, Customer.from_user(owner))
        except PaymentGatewayError as e:
            raise ExternalServiceError(str(e), reference=reference)

        try:
            with self.uow_factory() as uow:
                booking = self.booking_repo.get(uow, booking.id, lock=True)
                self._check_payable(uow, booking, command.caller)
                payment = self.payment_repo.add(
                    uow,
                    booking_id=booking.id,
                    amount=amount.amount,
                    method=method.value,
                    status=PaymentStatus.PENDING.value,
                    reference=reference,
                    redirect_url=session.redirect_url,
                    token=session.token,
                )
                uow.add_event(PaymentCreated(
                    aggregate_id=payment.pk,
                    payment_id=payment.pk,
                    booking_id=booking.id,
                    owner_id=booking.owner_id,
                    amount=payment.amount,
                    reference=reference,
                ))
        except DomainError as e:
            self._log_orphan(reference, booking.id, e)
            raise
        except IntegrityError as e:
            self._log_orphan(reference, booking.id, e)
            raise DuplicatePayment(booking_id=booking.id)
        except Exception as e:
            self._log_orphan(reference, booking.id, e)
            raise InternalError(reference=reference) from e

        logger.info(f"Payment {reference} of {amount} opened for booking {booking.id}")
        return payment

    def _check_payable(self, uow, booking: Booking, caller: Caller) -> None:
        if booking.owner_id != caller.user_id:
            raise ForbiddenError("Only the owner can pay for this booking")
        if booking.status != BookingStatus.CONFIRMED:
            raise InvalidTransition(
                "Booking must be CONFIRMED before it can be paid",
                booking_id=booking.id,
                status=booking.status.value,
            )
        existing = self.payment_repo.blocking_payment(uow, booking.id)
        if existing is not None:
            raise DuplicatePayment(booking_id=booking.id, reference=existing.reference)

    @staticmethod
    def _log_orphan(reference: str, booking_id: UUID, error: Exception) -> None:
        logger.error(
            f"Gateway session {reference} for booking {booking_id} has no local payment "
            f"({error.__class__.__name__}: {error}); it must be voided manually"
        )


create_payment_intent_handler = CreatePaymentIntentHandler()
