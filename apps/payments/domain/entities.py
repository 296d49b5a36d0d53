"""
Payment Domain Entities

- PaymentStatus: PENDING -> {PAID, FAILED}, both terminal
- PaymentMethod: channel the payer picked at checkout of the payment
"""

from enum import Enum

from shared.domain.errors import ValidationError


class PaymentStatus(str, Enum):
    PENDING = 'PENDING'
    PAID = 'PAID'
    FAILED = 'FAILED'


TERMINAL_PAYMENT_STATUSES = frozenset({PaymentStatus.PAID, PaymentStatus.FAILED})

# Non-terminal and settled payments both block a new attempt
BLOCKING_PAYMENT_STATUSES = frozenset({PaymentStatus.PENDING, PaymentStatus.PAID})


class PaymentMethod(str, Enum):
    QRIS = 'QRIS'
    TRANSFER = 'TRANSFER'
    CASH = 'CASH'


def parse_method(value) -> PaymentMethod:
    if value in (None, ''):
        return PaymentMethod.QRIS
    try:
        return PaymentMethod(str(value).upper())
    except ValueError:
        raise ValidationError(f"Unknown payment method: {value!r}", allowed='QRIS, TRANSFER, CASH')
