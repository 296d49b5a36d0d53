"""
Payment Reconciliation

Applies a gateway notification to the stored payment. Safe under replayed
and out-of-order deliveries:

- the payment row is locked for the whole unit of work
- the next status comes from the pure ``next_status`` mapping
- payment and booking are moved with compare-and-swap updates in the
  same transaction, so a transition (and its notifications) happens once

Every delivery, matched or not, is appended to the PaymentTransaction log.
"""

from dataclasses import dataclass, field
from uuid import UUID

import structlog
from django.utils import timezone

from apps.bookings.repositories import booking_repository
from apps.payments.domain.entities import PaymentStatus
from apps.payments.domain.events import PaymentFailed, PaymentPaid
from apps.payments.domain.reconciliation import ReconcileOutcome, map_gateway_status, next_status
from apps.payments.models import Payment, PaymentTransaction
from apps.payments.repositories import payment_repository
from shared.application.result import returns_result
from shared.application.uow import DjangoUnitOfWork
from shared.domain.errors import InvalidTransition, ValidationError

logger = structlog.get_logger(__name__)


@dataclass
class ReconcilePaymentCommand:
    reference: str
    transaction_status: str | None
    fraud_status: str | None = None
    payload: dict = field(default_factory=dict)
    source: str = PaymentTransaction.Source.WEBHOOK


@dataclass(frozen=True)
class ReconcileReport:
    outcome: ReconcileOutcome
    reference: str
    payment_id: UUID | None = None
    status: PaymentStatus | None = None


class ReconcilePaymentHandler:

    def __init__(self, payment_repo=None, booking_repo=None, uow_factory=DjangoUnitOfWork):
        self.payment_repo = payment_repo or payment_repository
        self.booking_repo = booking_repo or booking_repository
        self.uow_factory = uow_factory

    @returns_result
    def handle(self, command: ReconcilePaymentCommand) -> ReconcileReport:
        if not command.reference:
            raise ValidationError("order_id is required")

        log = logger.bind(
            reference=command.reference,
            transaction_status=command.transaction_status,
            fraud_status=command.fraud_status,
            source=str(command.source),
        )
        mapped = map_gateway_status(command.transaction_status, command.fraud_status)

        with self.uow_factory() as uow:
            payment = self.payment_repo.find_by_reference(uow, command.reference, lock=True)
            if payment is None:
                self._record(uow, command, ReconcileOutcome.UNMATCHED, None, mapped)
                log.warning("payment.reconcile.unmatched")
                return ReconcileReport(outcome=ReconcileOutcome.UNMATCHED, reference=command.reference)

            current = PaymentStatus(payment.status)
            target = next_status(current, command.transaction_status, command.fraud_status)

            if target is None:
                outcome = ReconcileOutcome.IGNORED
                if mapped is not None:
                    log.warning("payment.reconcile.late_verdict", current=current.value, mapped=mapped.value)
            elif target == current:
                outcome = ReconcileOutcome.ALREADY_CONVERGED
            elif self.payment_repo.compare_and_set_status(uow, payment, current, target, at=timezone.now()):
                outcome = ReconcileOutcome.APPLIED
                self._apply(uow, payment, target, command, log)
            else:
                outcome = ReconcileOutcome.ALREADY_CONVERGED

            self._record(uow, command, outcome, payment, mapped)

        log.info("payment.reconcile.done", outcome=outcome.value, payment_id=str(payment.pk), status=payment.status)
        return ReconcileReport(
            outcome=outcome,
            reference=command.reference,
            payment_id=payment.pk,
            status=PaymentStatus(payment.status),
        )

    def _apply(self, uow, payment: Payment, target: PaymentStatus, command: ReconcilePaymentCommand, log) -> None:
        booking = self.booking_repo.get(uow, payment.booking_id, lock=True)

        if target == PaymentStatus.PAID:
            try:
                booking.mark_paid()
                self.booking_repo.save_transition(uow, booking, expected=booking.previous_status)
            except InvalidTransition:
                log.error(
                    "payment.reconcile.booking_not_payable",
                    booking_id=str(booking.id),
                    booking_status=booking.status.value,
                    action="manual refund required",
                )
            uow.add_event(PaymentPaid(
                aggregate_id=payment.pk,
                payment_id=payment.pk,
                booking_id=booking.id,
                owner_id=booking.owner_id,
                amount=payment.amount,
            ))
        elif target == PaymentStatus.FAILED:
            uow.add_event(PaymentFailed(
                aggregate_id=payment.pk,
                payment_id=payment.pk,
                booking_id=booking.id,
                owner_id=booking.owner_id,
                gateway_status=command.transaction_status or '',
            ))

        log.info("payment.reconcile.applied", payment_id=str(payment.pk), status=target.value)

    def _record(self, uow, command: ReconcilePaymentCommand, outcome, payment, mapped) -> None:
        self.payment_repo.record_delivery(
            uow,
            reference=command.reference,
            outcome=outcome,
            payment=payment,
            transaction_status=command.transaction_status,
            fraud_status=command.fraud_status,
            mapped=mapped,
            payload=command.payload,
            source=command.source,
        )


reconcile_payment_handler = ReconcilePaymentHandler()
