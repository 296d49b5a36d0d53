"""
Payment Amounts

Amount owed for a booking, computed from the rates snapshotted on its lines:

- asset line:   unit_rate × qty × billable days of the window
- service line: unit_rate × qty

Arithmetic is Decimal end to end; the gateway is charged exactly this value.
"""

from decimal import Decimal
from typing import Iterable
from uuid import UUID

from apps.bookings.domain.entities import BookingLine
from shared.domain.errors import InvalidAmount
from shared.domain.value_objects import BookingWindow, Money

REFERENCE_PREFIX = 'bk'


def compute_amount(lines: Iterable[BookingLine], window: BookingWindow) -> Money:
    days = window.billable_days
    total = Money.zero()
    for line in lines:
        line_total = Money(line.unit_rate) * line.qty
        if line.is_asset:
            line_total = line_total * days
        total = total + line_total

    if not total.is_positive():
        raise InvalidAmount(amount=total.amount)
    # IDR has no minor unit at the gateway
    if total.amount != total.amount.to_integral_value():
        raise InvalidAmount("Payment amount must be a whole number of rupiah", amount=total.amount)
    return total


def make_reference(booking_id: UUID, attempt: int, max_length: int = 50) -> str:
    """Gateway order id for the ``attempt``-th payment of a booking."""
    reference = f"{REFERENCE_PREFIX}-{booking_id.hex}-{attempt}"
    if len(reference) > max_length:
        raise ValueError(f"Payment reference {reference!r} exceeds {max_length} characters")
    return reference


def gross_amount(amount: Decimal) -> int:
    """Integer amount sent to the gateway"""
    return int(amount)
