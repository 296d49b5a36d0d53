"""
Payment Repository

Row access for payments and their notification log. Writes go through the
caller's unit of work; status changes are compare-and-swap updates.
"""

from __future__ import annotations

import logging
from datetime import datetime
from uuid import UUID

from django.db.models import F, Value  # type: ignore
from django.db.models.functions import Greatest  # type: ignore
from django.utils import timezone  # type: ignore

from apps.bookings.models import Booking as BookingModel
from apps.payments.domain.entities import BLOCKING_PAYMENT_STATUSES, PaymentStatus
from apps.payments.domain.reconciliation import ReconcileOutcome
from apps.payments.models import Payment, PaymentTransaction
from shared.domain.errors import NotFoundError

logger = logging.getLogger(__name__)


class PaymentRepository:

    def get(self, payment_id: UUID) -> Payment:
        payment = Payment.objects.select_related("booking").filter(pk=payment_id).first()
        if payment is None:
            raise NotFoundError("Payment not found", payment_id=payment_id)
        return payment

    def find_by_reference(self, uow, reference: str, lock: bool = False) -> Payment | None:
        queryset = Payment.objects.using(uow.using)
        if lock:
            queryset = queryset.select_for_update()
        return queryset.filter(reference=reference).first()

    def blocking_payment(self, uow, booking_id: UUID) -> Payment | None:
        """PENDING or PAID payment of the booking, if any"""
        return (
            Payment.objects.using(uow.using)
            .filter(booking_id=booking_id, status__in=[s.value for s in BLOCKING_PAYMENT_STATUSES])
            .first()
        )

    def claim_attempt(self, uow, booking_id: UUID) -> int:
        """
        Reserve the next attempt number of a booking

        The counter is stored on the booking and commits with the caller's
        unit of work, so an order id sent to the gateway is never reused even
        when no payment row was written for it. The caller holds the booking
        row lock.
        """
        issued = Payment.objects.using(uow.using).filter(booking_id=booking_id).count()
        bookings = BookingModel.objects.using(uow.using).filter(pk=booking_id)
        bookings.update(payment_attempts=Greatest(F("payment_attempts"), Value(issued)) + 1)
        return bookings.values_list("payment_attempts", flat=True).get()

    def add(self, uow, **fields) -> Payment:
        payment = Payment.objects.using(uow.using).create(**fields)
        logger.info(f"Saved payment {payment.reference} for booking {payment.booking_id}")
        return payment

    def compare_and_set_status(
        self,
        uow,
        payment: Payment,
        expected: PaymentStatus,
        target: PaymentStatus,
        at: datetime | None = None,
    ) -> bool:
        """Move ``payment`` to ``target`` only if it is still ``expected``"""
        changes = {"status": target.value, "updated_at": timezone.now()}
        if target == PaymentStatus.PAID:
            changes["paid_at"] = at or timezone.now()
        updated = (
            Payment.objects.using(uow.using)
            .filter(pk=payment.pk, status=expected.value)
            .update(**changes)
        )
        if updated:
            payment.status = target.value
            payment.paid_at = changes.get("paid_at", payment.paid_at)
        return bool(updated)

    def record_delivery(
        self,
        uow,
        *,
        reference: str,
        outcome: ReconcileOutcome,
        payment: Payment | None = None,
        transaction_status: str | None = None,
        fraud_status: str | None = None,
        mapped: PaymentStatus | None = None,
        payload: dict | None = None,
        source: str = PaymentTransaction.Source.WEBHOOK,
    ) -> PaymentTransaction:
        return PaymentTransaction.objects.using(uow.using).create(
            payment=payment,
            reference=reference[:100],
            source=source,
            transaction_status=transaction_status or "",
            fraud_status=fraud_status or "",
            mapped_status=mapped.value if mapped else "",
            outcome=outcome.value,
            payload=payload or {},
        )

    def stale_pending(self, older_than: datetime):
        return Payment.objects.filter(
            status=PaymentStatus.PENDING.value,
            created_at__lte=older_than,
        ).order_by("created_at")


payment_repository = PaymentRepository()
