"""
Payment Reconciliation Rules

Pure mapping of a gateway notification onto a payment's next status.
Nothing here touches storage: the command handler applies the result as a
compare-and-swap on the stored status.

Gateway status            Fraud status   Mapped
capture                   accept         PAID
settlement                any            PAID
deny / cancel / expire    any            FAILED
pending                   any            PENDING
anything else             any            (no change)
"""

from enum import Enum

from apps.payments.domain.entities import TERMINAL_PAYMENT_STATUSES, PaymentStatus

FAILED_TRANSACTION_STATUSES = frozenset({'deny', 'cancel', 'expire'})


class ReconcileOutcome(str, Enum):
    APPLIED = 'APPLIED'
    ALREADY_CONVERGED = 'ALREADY_CONVERGED'
    IGNORED = 'IGNORED'
    UNMATCHED = 'UNMATCHED'


def map_gateway_status(transaction_status: str | None, fraud_status: str | None = None) -> PaymentStatus | None:
    transaction_status = (transaction_status or '').lower()
    fraud_status = (fraud_status or '').lower()

    if transaction_status == 'capture':
        return PaymentStatus.PAID if fraud_status == 'accept' else None
    if transaction_status == 'settlement':
        return PaymentStatus.PAID
    if transaction_status in FAILED_TRANSACTION_STATUSES:
        return PaymentStatus.FAILED
    if transaction_status == 'pending':
        return PaymentStatus.PENDING
    return None


def next_status(
    current: PaymentStatus,
    transaction_status: str | None,
    fraud_status: str | None = None,
) -> PaymentStatus | None:
    """
    Status the payment should have after this notification

    Returns ``current`` when the notification agrees with what is stored and
    None when it must not change anything (unmapped status, or a terminal
    payment receiving a different verdict).
    """
    mapped = map_gateway_status(transaction_status, fraud_status)
    if mapped is None:
        return None
    if current in TERMINAL_PAYMENT_STATUSES and mapped != current:
        return None
    return mapped
