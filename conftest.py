"""Shared pytest fixtures."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from apps.bookings.models import Booking, BookingLine
from apps.catalog.models import Asset, Service
from apps.users.models import User


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def factory(role: str = "peminjam", **extra):
        counter["n"] += 1
        email = extra.pop("email", f"{role}{counter['n']}@example.com")
        return User.objects.create_user(email=email, password="Password123", role=role, **extra)

    return factory


@pytest.fixture
def peminjam(make_user):
    return make_user("peminjam", first_name="Budi", last_name="Santoso")


@pytest.fixture
def other_peminjam(make_user):
    return make_user("peminjam", first_name="Sari")


@pytest.fixture
def approver(make_user):
    return make_user("approver")


@pytest.fixture
def administrator(make_user):
    return make_user("admin")


@pytest.fixture
def make_asset(db):
    counter = {"n": 0}

    def factory(stock: int = 2, daily_rate: str = "100000", **extra):
        counter["n"] += 1
        return Asset.objects.create(
            code=extra.pop("code", f"AST-{counter['n']:03d}"),
            name=extra.pop("name", f"Projector {counter['n']}"),
            daily_rate=Decimal(daily_rate),
            stock=stock,
            **extra,
        )

    return factory


@pytest.fixture
def make_service(db):
    counter = {"n": 0}

    def factory(unit_rate: str = "50000", **extra):
        counter["n"] += 1
        return Service.objects.create(
            code=extra.pop("code", f"SRV-{counter['n']:03d}"),
            name=extra.pop("name", f"Operator {counter['n']}"),
            unit_rate=Decimal(unit_rate),
            **extra,
        )

    return factory


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def make_booking(db):
    """Stored booking with one line per (item, qty); stock is left untouched."""
    def factory(owner, items, status="CONFIRMED", days=3, start=None):
        start = start or datetime(2026, 7, 1, 9, 0, tzinfo=timezone.utc)
        has_assets = any(isinstance(item, Asset) for item, _ in items)
        has_services = any(isinstance(item, Service) for item, _ in items)
        booking = Booking.objects.create(
            user=owner,
            type="MIXED" if has_assets and has_services else ("ASSET" if has_assets else "SERVICE"),
            start_datetime=start,
            end_datetime=start + timedelta(days=days),
            status=status,
        )
        for position, (item, qty) in enumerate(items, start=1):
            rate = item.daily_rate if isinstance(item, Asset) else item.unit_rate
            BookingLine.objects.create(
                booking=booking,
                position=position,
                asset=item if isinstance(item, Asset) else None,
                service=item if isinstance(item, Service) else None,
                qty=qty,
                unit_rate=rate,
                price=rate * qty,
            )
        return booking

    return factory
