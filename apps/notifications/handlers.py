"""
Event Handlers

Turn booking and payment events into notifications. Registered on the
message bus by ``NotificationsConfig.ready``; the bus calls them after the
originating transaction has committed.
"""

from __future__ import annotations

import logging

from apps.bookings.domain.events import (
    BookingApproved,
    BookingCancelled,
    BookingCreated,
    BookingRejected,
)
from apps.payments.domain.events import PaymentCreated, PaymentFailed, PaymentPaid
from apps.users.models import User
from shared.application.access import Role, STAFF_ROLES
from shared.application.message_bus import MessageBus

from .models import Notification
from .sink import notification_sink

logger = logging.getLogger(__name__)

BOOKING = Notification.Type.BOOKING
PAYMENT = Notification.Type.PAYMENT


def _active_user_ids(*roles: Role) -> list[int]:
    return list(User.objects.active_with_roles(*roles).values_list("pk", flat=True))


def on_booking_created(event: BookingCreated) -> None:
    notification_sink.send_many(
        [user_id for user_id in _active_user_ids(*STAFF_ROLES) if user_id != event.owner_id],
        BOOKING,
        "Booking Baru Masuk",
        f"Booking baru dengan ID {event.booking_id} dari user ID {event.owner_id} sedang menunggu konfirmasi.",
    )
    notification_sink.send(
        event.owner_id,
        BOOKING,
        "Booking Anda Berhasil Diajukan",
        f"Booking Anda dengan ID {event.booking_id} berhasil dibuat dan sedang menunggu konfirmasi dari admin.",
    )


def on_booking_approved(event: BookingApproved) -> None:
    notification_sink.send(
        event.owner_id,
        BOOKING,
        "Booking Disetujui",
        f"Booking Anda dengan ID {event.booking_id} telah disetujui.",
    )


def on_booking_rejected(event: BookingRejected) -> None:
    reason = event.reason or "Tidak ada alasan"
    notification_sink.send(
        event.owner_id,
        BOOKING,
        "Booking Ditolak",
        f"Booking Anda dengan ID {event.booking_id} telah ditolak. Alasan: {reason}",
    )


def on_booking_cancelled(event: BookingCancelled) -> None:
    notification_sink.send(
        event.owner_id,
        BOOKING,
        "Booking Dibatalkan",
        f"Booking Anda dengan ID {event.booking_id} telah dibatalkan.",
    )


def on_payment_created(event: PaymentCreated) -> None:
    notification_sink.send(
        event.owner_id,
        PAYMENT,
        "Pembayaran Dibuat",
        f"Silakan selesaikan pembayaran untuk booking ID {event.booking_id}",
    )


def on_payment_paid(event: PaymentPaid) -> None:
    notification_sink.send(
        event.owner_id,
        PAYMENT,
        "Pembayaran Berhasil",
        f"Pembayaran untuk booking ID {event.booking_id} telah berhasil.",
    )
    notification_sink.send_many(
        _active_user_ids(Role.ADMIN),
        PAYMENT,
        "Pembayaran Masuk",
        f"Pembayaran baru untuk booking ID {event.booking_id}.",
    )


def on_payment_failed(event: PaymentFailed) -> None:
    notification_sink.send(
        event.owner_id,
        PAYMENT,
        "Pembayaran Gagal",
        f"Pembayaran untuk booking ID {event.booking_id} gagal ({event.gateway_status}). Silakan buat pembayaran baru.",
    )


HANDLERS = {
    BookingCreated: on_booking_created,
    BookingApproved: on_booking_approved,
    BookingRejected: on_booking_rejected,
    BookingCancelled: on_booking_cancelled,
    PaymentCreated: on_payment_created,
    PaymentPaid: on_payment_paid,
    PaymentFailed: on_payment_failed,
}


def register(bus: MessageBus) -> None:
    for event_type, handler in HANDLERS.items():
        bus.register_event_handler(event_type, handler)
    logger.debug(f"Registered {len(HANDLERS)} notification handlers")
