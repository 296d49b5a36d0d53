"""
Booking Domain Events

Events that represent things that have happened in the booking domain.
These are published after successful transaction commits.
"""

from dataclasses import dataclass
from uuid import UUID

from shared.domain.base import DomainEvent


@dataclass(kw_only=True)
class BookingCreated(DomainEvent):
    """
    Event: A booking was checked out from a cart (-> PENDING)

    Triggers:
    - Notify the owner that the request was submitted
    - Notify active admins and approvers that a request awaits review
    """
    booking_id: UUID
    owner_id: int
    booking_type: str


@dataclass(kw_only=True)
class BookingApproved(DomainEvent):
    """Event: PENDING -> CONFIRMED"""
    booking_id: UUID
    owner_id: int
    approver_id: int


@dataclass(kw_only=True)
class BookingRejected(DomainEvent):
    """Event: PENDING -> REJECTED, stock released"""
    booking_id: UUID
    owner_id: int
    reason: str


@dataclass(kw_only=True)
class BookingCancelled(DomainEvent):
    """Event: PENDING/CONFIRMED -> CANCELLED, stock released"""
    booking_id: UUID
    owner_id: int
    previous_status: str
