"""
Booking Command Handlers

These are the use cases for the booking domain.
They orchestrate domain operations within a unit of work and return a
Result instead of raising.

Commands:
- CheckoutCommand: Turn the caller's cart into a PENDING booking
- ApproveBookingCommand: PENDING -> CONFIRMED (admin/approver)
- RejectBookingCommand: PENDING -> REJECTED, releases stock (admin/approver)
- CancelBookingCommand: PENDING/CONFIRMED -> CANCELLED, releases stock (owner)
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID
import logging

from django.utils import timezone

from apps.bookings.domain.entities import Booking, BookingLine
from apps.bookings.domain.inventory import ReservationRequest
from apps.bookings.repositories import booking_repository
from apps.bookings.reservations import reservation_engine
from apps.carts.repositories import CartRepository
from shared.application.access import Caller, STAFF_ROLES, require_role
from shared.application.result import returns_result
from shared.application.uow import DjangoUnitOfWork
from shared.domain.errors import ForbiddenError, ValidationError
from shared.domain.value_objects import BookingWindow

logger = logging.getLogger(__name__)


# ===== Commands =====

@dataclass
class CheckoutCommand:
    """
    Command to check out the caller's cart

    All cart lines become booking lines of one booking over [start, end).
    """
    caller: Caller
    start: datetime
    end: datetime
    notes: str = ''


@dataclass
class ApproveBookingCommand:
    booking_id: UUID
    caller: Caller
    notes: str = ''


@dataclass
class RejectBookingCommand:
    booking_id: UUID
    caller: Caller
    reason: str = ''


@dataclass
class CancelBookingCommand:
    booking_id: UUID
    caller: Caller


# ===== Command Handlers =====

class CheckoutHandler:
    """
    Handler for Checkout command

    One unit of work covers the whole checkout:
    1. Validate the window (before anything is locked)
    2. Lock and read the cart lines
    3. Reserve every line (locks asset rows, checks capacity, takes stock)
    4. Create the Booking and its lines
    5. Clear the cart
    6. Commit; BookingCreated is published after commit
    """

    def __init__(self, booking_repo=None, cart_repo=None, reservations=None, uow_factory=DjangoUnitOfWork):
        self.booking_repo = booking_repo or booking_repository
        self.cart_repo = cart_repo or CartRepository()
        self.reservations = reservations or reservation_engine
        self.uow_factory = uow_factory

    @returns_result
    def handle(self, command: CheckoutCommand) -> Booking:
        if command.start is None or command.end is None:
            raise ValidationError("Start and end are required")
        window = BookingWindow(command.start, command.end)
        owner_id = command.caller.user_id

        with self.uow_factory() as uow:
            cart_lines = self.cart_repo.lines_for_checkout(uow, owner_id)
            if not cart_lines:
                raise ValidationError("Cart is empty")

            requests = [
                ReservationRequest(kind=line.kind, item_id=line.item_id, qty=line.qty)
                for line in cart_lines
            ]
            items = self.reservations.reserve(uow, window, requests).unwrap()

            lines = [
                BookingLine(
                    kind=request.kind,
                    item_id=request.item_id,
                    qty=request.qty,
                    unit_rate=item.rate,
                    price=item.price(request.qty).amount,
                )
                for request, item in zip(requests, items)
            ]
            booking = Booking.create(owner_id, window, lines, command.notes)
            self.booking_repo.add(uow, booking)
            self.cart_repo.clear(uow, owner_id)
            uow.collect_events(booking)

        logger.info(f"User {owner_id} checked out booking {booking.id} ({booking.type.value}, {window})")
        return booking


class ApproveBookingHandler:
    """
    Handler for ApproveBooking command

    Approval never re-checks stock: it has been held since checkout.
    """

    def __init__(self, booking_repo=None, uow_factory=DjangoUnitOfWork):
        self.booking_repo = booking_repo or booking_repository
        self.uow_factory = uow_factory

    @returns_result
    def handle(self, command: ApproveBookingCommand) -> Booking:
        require_role(command.caller, STAFF_ROLES).unwrap()

        with self.uow_factory() as uow:
            booking = self.booking_repo.get(uow, command.booking_id, lock=True)
            booking.approve(command.caller.user_id, timezone.now(), command.notes)
            self.booking_repo.save_transition(uow, booking, expected=booking.previous_status)
            uow.collect_events(booking)

        logger.info(f"Booking {booking.id} approved by user {command.caller.user_id}")
        return booking


class RejectBookingHandler:
    """Handler for RejectBooking command"""

    def __init__(self, booking_repo=None, reservations=None, uow_factory=DjangoUnitOfWork):
        self.booking_repo = booking_repo or booking_repository
        self.reservations = reservations or reservation_engine
        self.uow_factory = uow_factory

    @returns_result
    def handle(self, command: RejectBookingCommand) -> Booking:
        require_role(command.caller, STAFF_ROLES).unwrap()

        with self.uow_factory() as uow:
            booking = self.booking_repo.get(uow, command.booking_id, lock=True)
            booking.reject(command.reason)
            # CAS first: a lost race must not release stock a second time
            self.booking_repo.save_transition(uow, booking, expected=booking.previous_status)
            self.reservations.release(uow, booking.asset_holds())
            uow.collect_events(booking)

        logger.info(f"Booking {booking.id} rejected by user {command.caller.user_id}")
        return booking


class CancelBookingHandler:
    """
    Handler for CancelBooking command

    Only the owner may cancel, from PENDING or CONFIRMED.
    """

    def __init__(self, booking_repo=None, reservations=None, uow_factory=DjangoUnitOfWork):
        self.booking_repo = booking_repo or booking_repository
        self.reservations = reservations or reservation_engine
        self.uow_factory = uow_factory

    @returns_result
    def handle(self, command: CancelBookingCommand) -> Booking:
        with self.uow_factory() as uow:
            booking = self.booking_repo.get(uow, command.booking_id, lock=True)
            if booking.owner_id != command.caller.user_id:
                raise ForbiddenError("Only the owner can cancel this booking")

            booking.cancel()
            self.booking_repo.save_transition(uow, booking, expected=booking.previous_status)
            self.reservations.release(uow, booking.asset_holds())
            uow.collect_events(booking)

        logger.info(f"Booking {booking.id} cancelled by its owner")
        return booking


checkout_handler = CheckoutHandler()
approve_booking_handler = ApproveBookingHandler()
reject_booking_handler = RejectBookingHandler()
cancel_booking_handler = CancelBookingHandler()
