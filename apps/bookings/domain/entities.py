"""
Booking Domain Entities

Core business entities for the booking domain:
- Booking: Main aggregate representing a rental request
- BookingLine: One item of a booking, frozen at checkout
- BookingStatus: FSM states for booking lifecycle
- BookingType: What kind of items the booking holds
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Sequence, Tuple

from apps.catalog.domain.items import ItemKind
from shared.domain.base import Aggregate, ValueObject
from shared.domain.errors import InvalidTransition
from shared.domain.value_objects import BookingWindow


class BookingStatus(str, Enum):
    """
    Booking Status Finite State Machine

    State transitions:
    - PENDING -> CONFIRMED (approver accepted the request)
    - PENDING -> REJECTED (approver declined, stock released)
    - PENDING -> CANCELLED (owner withdrew, stock released)
    - CONFIRMED -> CANCELLED (owner withdrew, stock released)
    - CONFIRMED -> PAID (payment settled)
    """
    PENDING = 'PENDING'
    CONFIRMED = 'CONFIRMED'
    REJECTED = 'REJECTED'
    CANCELLED = 'CANCELLED'
    PAID = 'PAID'


class BookingType(str, Enum):
    ASSET = 'ASSET'
    SERVICE = 'SERVICE'
    MIXED = 'MIXED'


ALLOWED_TRANSITIONS = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.REJECTED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.CANCELLED, BookingStatus.PAID}),
}

# Bookings in these states keep their asset stock on hold
HOLDING_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED})

TERMINAL_STATUSES = frozenset({BookingStatus.PAID, BookingStatus.REJECTED, BookingStatus.CANCELLED})


@dataclass(frozen=True)
class BookingLine(ValueObject):
    """One catalog item of a booking with its rate and price at checkout"""
    kind: ItemKind
    item_id: int
    qty: int
    unit_rate: Decimal
    price: Decimal

    @property
    def is_asset(self) -> bool:
        return self.kind == ItemKind.ASSET


@dataclass(kw_only=True, eq=False)
class Booking(Aggregate):
    """
    Booking Aggregate Root

    Represents a user's request to rent a set of items for one window.

    Key invariants:
    - window.start < window.end (enforced by BookingWindow)
    - lines are fixed at creation
    - status only moves along ALLOWED_TRANSITIONS
    """

    owner_id: int
    window: BookingWindow
    lines: Tuple[BookingLine, ...]
    type: 'BookingType'
    status: BookingStatus = BookingStatus.PENDING
    notes: str = ''
    approved_by: int | None = None
    approved_at: datetime | None = None
    created_at: datetime | None = None
    _previous_status: BookingStatus | None = field(default=None, init=False, repr=False)

    @classmethod
    def create(cls, owner_id: int, window: BookingWindow, lines: Sequence[BookingLine], notes: str = '') -> 'Booking':
        """Open a new PENDING booking from checked-out lines"""
        from apps.bookings.domain.classification import classify_booking
        from apps.bookings.domain.events import BookingCreated

        booking = cls(
            owner_id=owner_id,
            window=window,
            lines=tuple(lines),
            type=classify_booking(line.kind for line in lines),
            notes=notes or '',
        )
        booking.add_event(BookingCreated(
            aggregate_id=booking.id,
            booking_id=booking.id,
            owner_id=owner_id,
            booking_type=booking.type.value,
        ))
        return booking

    @property
    def holds_stock(self) -> bool:
        return self.status in HOLDING_STATUSES

    @property
    def previous_status(self) -> BookingStatus | None:
        """Status before the last transition, used for the compare-and-swap write"""
        return self._previous_status

    def asset_holds(self) -> List[Tuple[int, int]]:
        """(asset_id, qty) for every asset line"""
        return [(line.item_id, line.qty) for line in self.lines if line.is_asset]

    def approve(self, approver_id: int, at: datetime, notes: str | None = None):
        """
        Approve booking (PENDING -> CONFIRMED)

        Stock has been held since checkout, so nothing is re-checked here.
        Events: BookingApproved
        """
        from apps.bookings.domain.events import BookingApproved

        self._move_to(BookingStatus.CONFIRMED)
        self.approved_by = approver_id
        self.approved_at = at
        if notes:
            self.notes = notes

        self.add_event(BookingApproved(
            aggregate_id=self.id,
            booking_id=self.id,
            owner_id=self.owner_id,
            approver_id=approver_id,
        ))

    def reject(self, reason: str = ''):
        """
        Reject booking (PENDING -> REJECTED)

        The caller releases asset holds in the same unit of work.
        Events: BookingRejected
        """
        from apps.bookings.domain.events import BookingRejected

        self._move_to(BookingStatus.REJECTED)
        if reason:
            self.notes = reason

        self.add_event(BookingRejected(
            aggregate_id=self.id,
            booking_id=self.id,
            owner_id=self.owner_id,
            reason=reason or '',
        ))

    def cancel(self):
        """
        Cancel booking (PENDING or CONFIRMED -> CANCELLED)

        Events: BookingCancelled
        """
        from apps.bookings.domain.events import BookingCancelled

        self._move_to(BookingStatus.CANCELLED)

        self.add_event(BookingCancelled(
            aggregate_id=self.id,
            booking_id=self.id,
            owner_id=self.owner_id,
            previous_status=self._previous_status.value,
        ))

    def mark_paid(self):
        """
        Settle booking (CONFIRMED -> PAID)

        No event: the payment that settled it announces the outcome.
        """
        self._move_to(BookingStatus.PAID)

    def _move_to(self, target: BookingStatus):
        if target not in ALLOWED_TRANSITIONS.get(self.status, frozenset()):
            raise InvalidTransition(
                f"Cannot change booking status from {self.status.value} to {target.value}",
                booking_id=self.id,
                status=self.status.value,
            )
        self._previous_status = self.status
        self.status = target
