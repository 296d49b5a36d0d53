"""Tests for notification fan-out and the inbox API."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest import mock

import pytest
from django.urls import reverse
from rest_framework import status

from apps.bookings.application.command_handlers import (
    ApproveBookingCommand,
    CheckoutCommand,
    RejectBookingCommand,
    approve_booking_handler,
    checkout_handler,
    reject_booking_handler,
)
from apps.carts.models import CartLine
from apps.notifications.models import Notification
from apps.notifications.sink import DatabaseNotificationSink
from apps.payments.application.reconciliation import ReconcilePaymentCommand, reconcile_payment_handler
from apps.payments.models import Payment
from shared.application.access import Caller

START = datetime(2026, 10, 5, 8, 0, tzinfo=timezone.utc)


def _titles(user) -> list[str]:
    return list(Notification.objects.filter(user=user).order_by("id").values_list("title", flat=True))


def _checkout(user, asset, django_capture_on_commit_callbacks):
    CartLine.objects.create(user=user, asset=asset, qty=1, price=asset.daily_rate)
    with django_capture_on_commit_callbacks(execute=True):
        result = checkout_handler.handle(CheckoutCommand(
            caller=Caller.from_user(user), start=START, end=START + timedelta(days=2)
        ))
    assert result.ok, result.error
    return result.value


@pytest.mark.django_db
def test_checkout_notifies_staff_and_owner(
    peminjam, approver, administrator, make_user, make_asset, django_capture_on_commit_callbacks
):
    retired_admin = make_user("admin", is_active=False)

    _checkout(peminjam, make_asset(), django_capture_on_commit_callbacks)

    assert _titles(peminjam) == ["Booking Anda Berhasil Diajukan"]
    assert _titles(approver) == ["Booking Baru Masuk"]
    assert _titles(administrator) == ["Booking Baru Masuk"]
    assert _titles(retired_admin) == []
    assert Notification.objects.filter(user=peminjam).get().type == "BOOKING"


@pytest.mark.django_db
def test_each_transition_notifies_owner_once(
    peminjam, approver, make_asset, django_capture_on_commit_callbacks
):
    booking = _checkout(peminjam, make_asset(stock=3), django_capture_on_commit_callbacks)
    rejected = _checkout(peminjam, make_asset(stock=3), django_capture_on_commit_callbacks)
    caller = Caller.from_user(approver)

    with django_capture_on_commit_callbacks(execute=True):
        assert approve_booking_handler.handle(ApproveBookingCommand(booking_id=booking.id, caller=caller)).ok
        assert approve_booking_handler.handle(ApproveBookingCommand(booking_id=booking.id, caller=caller)).error
        assert reject_booking_handler.handle(RejectBookingCommand(
            booking_id=rejected.id, caller=caller, reason="Aset dalam perbaikan"
        )).ok

    titles = _titles(peminjam)
    assert titles.count("Booking Disetujui") == 1
    assert titles.count("Booking Ditolak") == 1
    body = Notification.objects.get(user=peminjam, title="Booking Ditolak").body
    assert body.endswith("Alasan: Aset dalam perbaikan")


@pytest.mark.django_db
def test_replayed_settlement_fans_out_once(
    peminjam, administrator, make_user, make_asset, make_booking, django_capture_on_commit_callbacks
):
    second_admin = make_user("admin")
    booking = make_booking(peminjam, [(make_asset(), 1)])
    payment = Payment.objects.create(booking=booking, amount=Decimal("300000"), reference="bk-replay-1")
    command = ReconcilePaymentCommand(reference=payment.reference, transaction_status="settlement")

    with django_capture_on_commit_callbacks(execute=True):
        reconcile_payment_handler.handle(command)
        reconcile_payment_handler.handle(command)

    assert _titles(peminjam) == ["Pembayaran Berhasil"]
    assert _titles(administrator) == ["Pembayaran Masuk"]
    assert _titles(second_admin) == ["Pembayaran Masuk"]


@pytest.mark.django_db
def test_sink_failure_is_swallowed(peminjam):
    sink = DatabaseNotificationSink()

    with mock.patch.object(Notification.objects, "create", side_effect=RuntimeError("db gone")):
        assert sink.send(peminjam.pk, "BOOKING", "Judul", "Isi") is None

    assert sink.send(peminjam.pk, "BOOKING", "Judul", "Isi") is not None


@pytest.mark.django_db
def test_inbox_lists_only_own_notifications(api_client, peminjam, other_peminjam):
    Notification.objects.create(user=peminjam, type="BOOKING", title="Mine", body="...")
    Notification.objects.create(user=other_peminjam, type="BOOKING", title="Theirs", body="...")
    api_client.force_authenticate(user=peminjam)

    response = api_client.get(reverse("notification-list"))

    assert response.status_code == status.HTTP_200_OK
    assert [item["title"] for item in response.data["results"]] == ["Mine"]


@pytest.mark.django_db
def test_mark_read(api_client, peminjam, other_peminjam):
    mine = Notification.objects.create(user=peminjam, type="PAYMENT", title="Mine", body="...")
    theirs = Notification.objects.create(user=other_peminjam, type="PAYMENT", title="Theirs", body="...")
    api_client.force_authenticate(user=peminjam)

    response = api_client.post(reverse("notification-mark-read", args=[mine.pk]))
    foreign = api_client.post(reverse("notification-mark-read", args=[theirs.pk]))
    count = api_client.get(reverse("notification-unread-count"))

    assert response.status_code == status.HTTP_200_OK
    assert foreign.status_code == status.HTTP_404_NOT_FOUND
    assert count.data == {"unread": 0}
    mine.refresh_from_db()
    assert mine.is_read
