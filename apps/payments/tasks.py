"""Celery tasks for the payments domain."""

from __future__ import annotations

import logging
from datetime import timedelta

from celery import shared_task  # type: ignore
from django.conf import settings  # type: ignore
from django.utils import timezone  # type: ignore

from .application.reconciliation import ReconcilePaymentCommand, reconcile_payment_handler
from .domain.reconciliation import ReconcileOutcome
from .gateway import PaymentGatewayError, payment_gateway
from .models import PaymentTransaction
from .repositories import payment_repository

logger = logging.getLogger(__name__)


# ============================================================================
# PERIODIC TASKS (scheduled by Celery Beat)
# ============================================================================

@shared_task(name="payments.sync_pending_payments")
def sync_pending_payments() -> dict[str, int]:
    """
    Re-check PENDING payments whose notification never arrived.

    Asks the gateway for the live status of every PENDING payment older than
    PAYMENT_SWEEP_AGE_MINUTES and feeds it through reconciliation, exactly as
    if the notification had been delivered.

    Returns:
        dict: {"checked": ..., "applied": ..., "errors": ...}
    """
    cutoff = timezone.now() - timedelta(minutes=settings.PAYMENT_SWEEP_AGE_MINUTES)
    checked = applied = errors = 0

    for payment in payment_repository.stale_pending(cutoff):
        checked += 1
        try:
            live = payment_gateway.transaction_status(payment.reference)
        except PaymentGatewayError as e:
            errors += 1
            logger.warning(f"Could not query gateway for {payment.reference}: {e}")
            continue
        if live is None:
            continue

        result = reconcile_payment_handler.handle(ReconcilePaymentCommand(
            reference=payment.reference,
            transaction_status=live.get("transaction_status"),
            fraud_status=live.get("fraud_status"),
            payload=live,
            source=PaymentTransaction.Source.SWEEP,
        ))
        if not result.ok:
            errors += 1
            logger.error(f"Sweep could not reconcile {payment.reference}: {result.error.message}")
        elif result.value.outcome == ReconcileOutcome.APPLIED:
            applied += 1

    if checked:
        logger.info(f"Pending payment sweep: {checked} checked, {applied} applied, {errors} errors")
    return {"checked": checked, "applied": applied, "errors": errors}
