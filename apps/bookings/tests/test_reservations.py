"""Integration tests for checkout, stock holds and their release."""

from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from django.db import connection

from apps.bookings.application.command_handlers import (
    CancelBookingCommand,
    CancelBookingHandler,
    CheckoutCommand,
    CheckoutHandler,
    RejectBookingCommand,
    checkout_handler,
    reject_booking_handler,
)
from apps.bookings.domain.entities import BookingStatus, BookingType
from apps.bookings.domain.events import BookingCancelled, BookingCreated
from apps.bookings.models import Booking as BookingModel
from apps.bookings.reservations import ReservationEngine
from apps.carts.models import CartLine
from apps.catalog.models import Asset
from shared.application.access import Caller
from shared.application.uow import DjangoUnitOfWork
from shared.domain.errors import (
    InsufficientStock,
    InternalError,
    InvalidTransition,
    OverlappingCapacityExceeded,
    ServiceInactive,
    ValidationError,
)
from shared.domain.value_objects import BookingWindow

D1 = datetime(2026, 5, 4, 8, 0, tzinfo=timezone.utc)
D3 = D1 + timedelta(days=2)


class RecordingBus:
    def __init__(self):
        self.events = []

    def publish_events(self, events):
        self.events.extend(events)


def _caller(user) -> Caller:
    return Caller.from_user(user)


def _put_in_cart(user, qty=1, asset=None, service=None):
    item = asset or service
    rate = asset.daily_rate if asset else service.unit_rate
    return CartLine.objects.create(user=user, asset=asset, service=service, qty=qty, price=rate * qty)


def _checkout(user, start=D1, end=D3, handler=checkout_handler):
    return handler.handle(CheckoutCommand(caller=_caller(user), start=start, end=end))


def _stock(asset) -> int:
    return Asset.objects.get(pk=asset.pk).stock


@pytest.mark.django_db
def test_checkout_holds_stock_and_snapshots_prices(peminjam, make_asset, make_service):
    asset = make_asset(stock=3, daily_rate="100000")
    service = make_service(unit_rate="75000")
    _put_in_cart(peminjam, qty=2, asset=asset)
    _put_in_cart(peminjam, qty=1, service=service)

    result = _checkout(peminjam)

    assert result.ok, result.error
    booking = result.value
    assert booking.status == BookingStatus.PENDING
    assert booking.type == BookingType.MIXED
    assert _stock(asset) == 1
    assert not CartLine.objects.filter(user=peminjam).exists()

    stored = BookingModel.objects.get(pk=booking.id)
    prices = sorted(line.price for line in stored.lines.all())
    assert prices == [Decimal("75000.00"), Decimal("200000.00")]
    assert list(stored.lines.values_list("position", flat=True).order_by("position")) == [1, 2]


@pytest.mark.django_db
def test_checkout_publishes_created_event_after_commit(peminjam, make_asset, django_capture_on_commit_callbacks):
    bus = RecordingBus()
    handler = CheckoutHandler(uow_factory=lambda: DjangoUnitOfWork(bus=bus))
    _put_in_cart(peminjam, asset=make_asset())

    with django_capture_on_commit_callbacks(execute=True):
        result = _checkout(peminjam, handler=handler)

    assert result.ok
    assert [type(event) for event in bus.events] == [BookingCreated]
    assert bus.events[0].owner_id == peminjam.pk


@pytest.mark.django_db
def test_checkout_rejects_inverted_window_before_touching_stock(peminjam, make_asset):
    asset = make_asset(stock=2)
    _put_in_cart(peminjam, asset=asset)

    result = _checkout(peminjam, start=D3, end=D1)

    assert isinstance(result.error, ValidationError)
    assert _stock(asset) == 2
    assert CartLine.objects.filter(user=peminjam).count() == 1
    assert not BookingModel.objects.exists()


@pytest.mark.django_db
def test_checkout_with_empty_cart_fails(peminjam):
    assert isinstance(_checkout(peminjam).error, ValidationError)


@pytest.mark.django_db
def test_failed_line_rolls_back_the_whole_checkout(peminjam, make_asset, make_service):
    asset = make_asset(stock=2)
    service = make_service()
    _put_in_cart(peminjam, asset=asset)
    _put_in_cart(peminjam, service=service)
    service.is_active = False
    service.save()

    result = _checkout(peminjam)

    assert isinstance(result.error, ServiceInactive)
    assert _stock(asset) == 2
    assert CartLine.objects.filter(user=peminjam).count() == 2
    assert not BookingModel.objects.exists()


@pytest.mark.django_db
def test_reject_restores_stock_and_frees_the_window(peminjam, other_peminjam, approver, make_asset):
    asset = make_asset(stock=2)

    _put_in_cart(peminjam, qty=2, asset=asset)
    first = _checkout(peminjam)
    assert first.ok
    assert _stock(asset) == 0

    _put_in_cart(other_peminjam, qty=1, asset=asset)
    blocked = _checkout(other_peminjam, start=D1 + timedelta(days=1), end=D3 + timedelta(days=1))
    assert isinstance(blocked.error, InsufficientStock)
    assert _stock(asset) == 0

    rejected = reject_booking_handler.handle(RejectBookingCommand(
        booking_id=first.value.id, caller=_caller(approver), reason="Sedang dipakai"
    ))
    assert rejected.ok
    assert _stock(asset) == 2

    retried = _checkout(other_peminjam, start=D1 + timedelta(days=1), end=D3 + timedelta(days=1))
    assert retried.ok
    assert retried.value.status == BookingStatus.PENDING
    # the retry holds its single unit
    assert _stock(asset) == 1


@pytest.mark.django_db
def test_overlapping_hold_counts_twice(peminjam, other_peminjam, make_asset):
    asset = make_asset(stock=3)
    _put_in_cart(peminjam, qty=2, asset=asset)
    assert _checkout(peminjam).ok
    assert _stock(asset) == 1

    # one unit is physically left, but the live hold of 2 is counted again
    _put_in_cart(other_peminjam, qty=1, asset=asset)
    result = _checkout(other_peminjam)

    assert isinstance(result.error, OverlappingCapacityExceeded)
    assert _stock(asset) == 1


@pytest.mark.django_db
def test_touching_windows_collide(peminjam, other_peminjam, make_asset):
    asset = make_asset(stock=3)
    _put_in_cart(peminjam, qty=2, asset=asset)
    assert _checkout(peminjam, start=D1, end=D3).ok

    _put_in_cart(other_peminjam, qty=1, asset=asset)
    result = _checkout(other_peminjam, start=D3, end=D3 + timedelta(days=1))

    assert isinstance(result.error, OverlappingCapacityExceeded)


@pytest.mark.django_db
def test_disjoint_windows_do_not_collide(peminjam, other_peminjam, make_asset):
    asset = make_asset(stock=3)
    _put_in_cart(peminjam, qty=2, asset=asset)
    assert _checkout(peminjam, start=D1, end=D3).ok

    _put_in_cart(other_peminjam, qty=1, asset=asset)
    later = D3 + timedelta(days=1)
    assert _checkout(other_peminjam, start=later, end=later + timedelta(days=1)).ok
    assert _stock(asset) == 0


@pytest.mark.django_db
def test_double_cancel_releases_once(peminjam, make_asset, django_capture_on_commit_callbacks):
    asset = make_asset(stock=2)
    _put_in_cart(peminjam, qty=1, asset=asset)
    booking = _checkout(peminjam).value
    bus = RecordingBus()
    handler = CancelBookingHandler(uow_factory=lambda: DjangoUnitOfWork(bus=bus))
    command = CancelBookingCommand(booking_id=booking.id, caller=_caller(peminjam))

    with django_capture_on_commit_callbacks(execute=True):
        first = handler.handle(command)
        second = handler.handle(command)

    assert first.ok
    assert isinstance(second.error, InvalidTransition)
    assert _stock(asset) == 2
    assert [type(event) for event in bus.events] == [BookingCancelled]
    assert bus.events[0].previous_status == "PENDING"


@pytest.mark.django_db
def test_reserve_requires_an_open_unit_of_work(make_asset):
    engine = ReservationEngine()
    window = BookingWindow(D1, D3)

    result = engine.reserve(DjangoUnitOfWork(), window, [])

    assert isinstance(result.error, InternalError)


@pytest.mark.django_db(transaction=True)
def test_concurrent_checkouts_never_oversell(make_user, make_asset):
    asset = make_asset(stock=1)
    users = [make_user("peminjam") for _ in range(5)]
    for user in users:
        _put_in_cart(user, qty=1, asset=asset)

    results = []
    lock = threading.Lock()
    start_gate = threading.Barrier(len(users))

    def attempt(user):
        try:
            start_gate.wait()
            result = _checkout(user)
            with lock:
                results.append(result)
        finally:
            connection.close()

    threads = [threading.Thread(target=attempt, args=(user,)) for user in users]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    winners = [result for result in results if result.ok]
    losers = [result for result in results if not result.ok]
    assert len(winners) == 1
    assert all(isinstance(result.error, InsufficientStock) for result in losers)
    assert _stock(asset) == 0
    assert BookingModel.objects.count() == 1
