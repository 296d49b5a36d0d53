"""
Payment Domain Events

Published after commit. Notification handlers turn them into messages for
the payer and, for settled payments, for administrators.
"""

from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from shared.domain.base import DomainEvent


@dataclass(kw_only=True)
class PaymentCreated(DomainEvent):
    payment_id: UUID
    booking_id: UUID
    owner_id: int
    amount: Decimal
    reference: str


@dataclass(kw_only=True)
class PaymentPaid(DomainEvent):
    payment_id: UUID
    booking_id: UUID
    owner_id: int
    amount: Decimal


@dataclass(kw_only=True)
class PaymentFailed(DomainEvent):
    payment_id: UUID
    booking_id: UUID
    owner_id: int
    gateway_status: str
