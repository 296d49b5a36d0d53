"""Unit tests for the booking aggregate, classification and capacity ledger."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from apps.bookings.domain.classification import classify_booking
from apps.bookings.domain.entities import Booking, BookingLine, BookingStatus, BookingType
from apps.bookings.domain.events import BookingCancelled, BookingCreated
from apps.bookings.domain.inventory import CapacityLedger, Hold
from apps.catalog.domain.items import AssetItem, ItemKind
from shared.domain.errors import (
    AssetUnavailable,
    InsufficientStock,
    InvalidTransition,
    OverlappingCapacityExceeded,
    ValidationError,
)
from shared.domain.value_objects import BookingWindow

D1 = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


def _window(start_day: int, days: int) -> BookingWindow:
    start = D1 + timedelta(days=start_day)
    return BookingWindow(start, start + timedelta(days=days))


def _asset(stock: int, available: bool = True) -> AssetItem:
    return AssetItem(id=1, code="PRJ", name="Projector", rate=Decimal("100000"), stock=stock, is_available=available)


def _booking() -> Booking:
    line = BookingLine(kind=ItemKind.ASSET, item_id=1, qty=1, unit_rate=Decimal("100000"), price=Decimal("100000"))
    return Booking.create(owner_id=7, window=_window(0, 2), lines=[line])


class TestClassification:
    def test_assets_only(self):
        assert classify_booking([ItemKind.ASSET, ItemKind.ASSET]) == BookingType.ASSET

    def test_services_only(self):
        assert classify_booking([ItemKind.SERVICE]) == BookingType.SERVICE

    def test_mixed(self):
        assert classify_booking([ItemKind.SERVICE, ItemKind.ASSET]) == BookingType.MIXED

    def test_empty_is_invalid(self):
        with pytest.raises(ValidationError):
            classify_booking([])


class TestBookingWindow:
    def test_start_must_precede_end(self):
        with pytest.raises(ValidationError):
            BookingWindow(D1, D1)

    def test_touching_windows_collide(self):
        assert _window(0, 2).overlaps_with(_window(2, 1))
        assert not _window(0, 2).overlaps_with(_window(3, 1))

    def test_partial_days_are_billed_as_full_days(self):
        window = BookingWindow(D1, D1 + timedelta(days=2, hours=1))
        assert window.billable_days == 3


class TestBookingStateMachine:
    def test_create_emits_event(self):
        booking = _booking()
        assert booking.status == BookingStatus.PENDING
        assert booking.type == BookingType.ASSET
        assert [type(e) for e in booking.events] == [BookingCreated]

    def test_approve_then_pay(self):
        booking = _booking()
        booking.approve(approver_id=3, at=D1)
        assert booking.status == BookingStatus.CONFIRMED
        assert booking.previous_status == BookingStatus.PENDING
        assert booking.approved_by == 3
        booking.mark_paid()
        assert booking.status == BookingStatus.PAID

    def test_cancel_from_confirmed_records_previous_status(self):
        booking = _booking()
        booking.approve(approver_id=3, at=D1)
        booking.clear_events()
        booking.cancel()
        event = booking.events[0]
        assert isinstance(event, BookingCancelled)
        assert event.previous_status == "CONFIRMED"

    @pytest.mark.parametrize("status", [BookingStatus.REJECTED, BookingStatus.CANCELLED, BookingStatus.PAID])
    def test_terminal_states_refuse_everything(self, status):
        booking = _booking()
        booking.status = status
        for move in (lambda: booking.approve(1, D1), booking.reject, booking.cancel, booking.mark_paid):
            with pytest.raises(InvalidTransition):
                move()
        assert booking.status == status

    def test_confirmed_cannot_be_rejected(self):
        booking = _booking()
        booking.approve(approver_id=3, at=D1)
        with pytest.raises(InvalidTransition):
            booking.reject("too late")
        assert booking.status == BookingStatus.CONFIRMED

    def test_pending_cannot_be_paid(self):
        with pytest.raises(InvalidTransition):
            _booking().mark_paid()

    def test_aggregates_compare_by_identity(self):
        booking = _booking()
        assert booking == booking
        assert booking != _booking()
        assert len({booking, booking}) == 1


class TestCapacityLedger:
    def test_accepts_within_stock(self):
        ledger = CapacityLedger({1: _asset(stock=2)}, [])
        ledger.reserve(1, 2, _window(0, 2))
        assert ledger.taken == {1: 2}

    def test_rejects_unavailable_asset(self):
        ledger = CapacityLedger({1: _asset(stock=2, available=False)}, [])
        with pytest.raises(AssetUnavailable):
            ledger.reserve(1, 1, _window(0, 2))

    def test_rejects_quantity_above_stock(self):
        ledger = CapacityLedger({1: _asset(stock=0)}, [])
        with pytest.raises(InsufficientStock):
            ledger.reserve(1, 1, _window(0, 2))

    def test_overlapping_holds_count_against_stock(self):
        # stock 1 left after an existing hold of 1 over the same days
        ledger = CapacityLedger({1: _asset(stock=1)}, [Hold(asset_id=1, qty=1, window=_window(0, 2))])
        with pytest.raises(OverlappingCapacityExceeded):
            ledger.reserve(1, 1, _window(1, 2))
        assert ledger.taken == {}

    def test_disjoint_holds_are_ignored(self):
        ledger = CapacityLedger({1: _asset(stock=1)}, [Hold(asset_id=1, qty=1, window=_window(0, 2))])
        ledger.reserve(1, 1, _window(5, 1))
        assert ledger.taken == {1: 1}

    def test_lines_of_one_checkout_see_each_other(self):
        ledger = CapacityLedger({1: _asset(stock=2)}, [])
        ledger.reserve(1, 1, _window(0, 1))
        with pytest.raises(OverlappingCapacityExceeded):
            ledger.reserve(1, 1, _window(0, 1))
