"""API tests for checkout and the booking lifecycle endpoints."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from django.urls import reverse
from rest_framework import status

from apps.bookings.models import Booking
from apps.carts.models import CartLine
from apps.catalog.models import Asset

START = datetime(2026, 6, 1, 9, 0, tzinfo=timezone.utc)
END = START + timedelta(days=3)


def _window(start=START, end=END) -> dict:
    return {"start_datetime": start.isoformat(), "end_datetime": end.isoformat()}


def _checkout(client, user, asset, qty=1):
    CartLine.objects.create(user=user, asset=asset, qty=qty, price=asset.daily_rate * qty)
    client.force_authenticate(user=user)
    return client.post(reverse("booking-checkout"), _window(), format="json")


@pytest.mark.django_db
def test_checkout_creates_pending_booking(api_client, peminjam, make_asset):
    asset = make_asset(stock=2, daily_rate="100000")

    response = _checkout(api_client, peminjam, asset, qty=1)

    assert response.status_code == status.HTTP_201_CREATED
    assert response.data["status"] == "PENDING"
    assert response.data["type"] == "ASSET"
    assert response.data["user"]["id"] == peminjam.pk
    assert response.data["lines"][0]["item_code"] == asset.code
    assert response.data["total_price"] == "100000.00"
    assert Asset.objects.get(pk=asset.pk).stock == 1


@pytest.mark.django_db
def test_checkout_with_inverted_window_is_bad_request(api_client, peminjam, make_asset):
    asset = make_asset(stock=2)
    CartLine.objects.create(user=peminjam, asset=asset, qty=1, price=asset.daily_rate)
    api_client.force_authenticate(user=peminjam)

    response = api_client.post(reverse("booking-checkout"), _window(END, START), format="json")

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.data["code"] == "validation_error"
    assert Asset.objects.get(pk=asset.pk).stock == 2


@pytest.mark.django_db
def test_checkout_without_stock_is_conflict(api_client, peminjam, make_asset):
    asset = make_asset(stock=1)

    response = _checkout(api_client, peminjam, asset, qty=2)

    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.data["code"] == "insufficient_stock"


@pytest.mark.django_db
def test_approve_requires_staff_role(api_client, peminjam, other_peminjam, approver, make_asset):
    booking_id = _checkout(api_client, peminjam, make_asset()).data["id"]
    url = reverse("booking-approve", args=[booking_id])

    api_client.force_authenticate(user=other_peminjam)
    assert api_client.post(url, {}, format="json").status_code == status.HTTP_403_FORBIDDEN

    api_client.force_authenticate(user=approver)
    response = api_client.post(url, {"notes": "OK"}, format="json")

    assert response.status_code == status.HTTP_200_OK
    assert response.data["status"] == "CONFIRMED"
    assert response.data["approved_by"]["id"] == approver.pk
    assert response.data["approved_at"] is not None


@pytest.mark.django_db
def test_second_approval_is_conflict(api_client, peminjam, administrator, make_asset):
    booking_id = _checkout(api_client, peminjam, make_asset()).data["id"]
    url = reverse("booking-approve", args=[booking_id])
    api_client.force_authenticate(user=administrator)

    assert api_client.post(url, {}, format="json").status_code == status.HTTP_200_OK
    response = api_client.post(url, {}, format="json")

    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.data["code"] == "invalid_transition"


@pytest.mark.django_db
def test_reject_releases_stock(api_client, peminjam, approver, make_asset):
    asset = make_asset(stock=2)
    booking_id = _checkout(api_client, peminjam, asset, qty=2).data["id"]
    api_client.force_authenticate(user=approver)

    response = api_client.patch(
        reverse("booking-reject", args=[booking_id]), {"reason": "Jadwal bentrok"}, format="json"
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.data["status"] == "REJECTED"
    assert response.data["notes"] == "Jadwal bentrok"
    assert Asset.objects.get(pk=asset.pk).stock == 2


@pytest.mark.django_db
def test_only_owner_can_cancel(api_client, peminjam, administrator, make_asset):
    asset = make_asset(stock=2)
    booking_id = _checkout(api_client, peminjam, asset).data["id"]
    url = reverse("booking-cancel", args=[booking_id])

    api_client.force_authenticate(user=administrator)
    assert api_client.post(url).status_code == status.HTTP_403_FORBIDDEN

    api_client.force_authenticate(user=peminjam)
    response = api_client.post(url)

    assert response.status_code == status.HTTP_200_OK
    assert response.data["status"] == "CANCELLED"
    assert Asset.objects.get(pk=asset.pk).stock == 2


@pytest.mark.django_db
def test_list_is_scoped_to_owner_for_borrowers(api_client, peminjam, other_peminjam, approver, make_asset):
    asset = make_asset(stock=5)
    _checkout(api_client, peminjam, asset)
    _checkout(api_client, other_peminjam, asset)

    api_client.force_authenticate(user=peminjam)
    own = api_client.get(reverse("booking-list"))
    api_client.force_authenticate(user=approver)
    everything = api_client.get(reverse("booking-list"))

    assert own.status_code == status.HTTP_200_OK
    assert own.data["count"] == 1
    assert everything.data["count"] == 2


@pytest.mark.django_db
def test_list_filters_by_status(api_client, peminjam, make_asset):
    _checkout(api_client, peminjam, make_asset())

    pending = api_client.get(reverse("booking-list"), {"status": "pending"})
    paid = api_client.get(reverse("booking-list"), {"status": "PAID"})
    unknown = api_client.get(reverse("booking-list"), {"status": "LOST"})

    assert pending.data["count"] == 1
    assert paid.data["count"] == 0
    assert unknown.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
def test_detail_is_hidden_from_other_borrowers(api_client, peminjam, other_peminjam, make_asset):
    booking_id = _checkout(api_client, peminjam, make_asset()).data["id"]
    url = reverse("booking-detail", args=[booking_id])

    owner_view = api_client.get(url)
    api_client.force_authenticate(user=other_peminjam)
    stranger_view = api_client.get(url)

    assert owner_view.status_code == status.HTTP_200_OK
    assert owner_view.data["payments"] == []
    assert stranger_view.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
def test_detail_of_unknown_booking_is_not_found(api_client, peminjam):
    api_client.force_authenticate(user=peminjam)

    assert api_client.get(reverse("booking-detail", args=["not-a-uuid"])).status_code == 404
    missing = reverse("booking-detail", args=["00000000-0000-0000-0000-000000000000"])
    assert api_client.get(missing).status_code == 404


@pytest.mark.django_db
def test_anonymous_requests_are_rejected(api_client):
    assert api_client.get(reverse("booking-list")).status_code == status.HTTP_401_UNAUTHORIZED
    assert Booking.objects.count() == 0
