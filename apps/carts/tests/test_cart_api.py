"""Tests for the cart aggregator and cart API."""

from __future__ import annotations

from decimal import Decimal

import pytest
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.carts.application.aggregator import CartAggregator
from apps.carts.models import CartLine
from apps.catalog.models import Asset, Service
from apps.users.models import User
from shared.application.access import Caller, Role
from shared.domain.errors import (
    AssetUnavailable,
    InsufficientStock,
    NotFoundError,
    ServiceInactive,
    ValidationError,
)


def _caller(user) -> Caller:
    return Caller.from_user(user)


@pytest.mark.django_db
def test_add_merges_into_existing_line(peminjam, make_asset):
    asset = make_asset(stock=5, daily_rate="100000")
    cart = CartAggregator()

    first = cart.add(_caller(peminjam), "asset", asset.pk, 1)
    second = cart.add(_caller(peminjam), "asset", asset.pk, 2)

    assert first.ok and second.ok
    assert CartLine.objects.filter(user=peminjam).count() == 1
    line = CartLine.objects.get(user=peminjam)
    assert line.qty == 3
    assert line.price == Decimal("300000.00")


@pytest.mark.django_db
def test_add_rechecks_stock_for_merged_quantity(peminjam, make_asset):
    asset = make_asset(stock=2)
    cart = CartAggregator()

    assert cart.add(_caller(peminjam), "asset", asset.pk, 2).ok
    result = cart.add(_caller(peminjam), "asset", asset.pk, 1)

    assert isinstance(result.error, InsufficientStock)
    assert CartLine.objects.get(user=peminjam).qty == 2


@pytest.mark.django_db
def test_add_rejects_unavailable_items(peminjam, make_asset, make_service):
    retired = make_asset(status=Asset.Status.RETIRED)
    inactive = make_service(is_active=False)
    cart = CartAggregator()

    assert isinstance(cart.add(_caller(peminjam), "asset", retired.pk, 1).error, AssetUnavailable)
    assert isinstance(cart.add(_caller(peminjam), "service", inactive.pk, 1).error, ServiceInactive)
    assert isinstance(cart.add(_caller(peminjam), "asset", 9999, 1).error, NotFoundError)
    assert isinstance(cart.add(_caller(peminjam), "asset", retired.pk, 0).error, ValidationError)
    assert isinstance(cart.add(_caller(peminjam), "vehicle", retired.pk, 1).error, ValidationError)
    assert not CartLine.objects.exists()


@pytest.mark.django_db
def test_service_lines_are_priced_per_unit(peminjam, make_service):
    service = make_service(unit_rate="50000")
    result = CartAggregator().add(_caller(peminjam), "service", service.pk, 3)

    assert result.value.price == Decimal("150000.00")
    assert result.value.asset_id is None


@pytest.mark.django_db
def test_foreign_lines_look_missing(peminjam, other_peminjam, make_asset):
    asset = make_asset(stock=3)
    cart = CartAggregator()
    line = cart.add(_caller(peminjam), "asset", asset.pk, 1).value

    assert isinstance(cart.update(_caller(other_peminjam), line.pk, 2).error, NotFoundError)
    assert isinstance(cart.remove(_caller(other_peminjam), line.pk).error, NotFoundError)
    assert cart.clear(_caller(other_peminjam)).value == 0
    assert CartLine.objects.filter(pk=line.pk).exists()


@pytest.mark.django_db
def test_update_reprices_and_validates(peminjam, make_asset):
    asset = make_asset(stock=3, daily_rate="20000")
    cart = CartAggregator()
    line = cart.add(_caller(peminjam), "asset", asset.pk, 1).value

    updated = cart.update(_caller(peminjam), line.pk, 3)
    assert updated.value.price == Decimal("60000.00")
    assert isinstance(cart.update(_caller(peminjam), line.pk, 4).error, InsufficientStock)
    assert isinstance(cart.update(_caller(peminjam), line.pk, 0).error, ValidationError)


class CartAPITests(APITestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user(email="cart@example.com", password="Password123", role=Role.PEMINJAM.value)
        self.asset = Asset.objects.create(code="TND-1", name="Tent", daily_rate=Decimal("80000"), stock=4)
        self.service = Service.objects.create(code="DRV-1", name="Driver", unit_rate=Decimal("150000"))
        self.client.force_authenticate(self.user)

    def test_cart_flow(self) -> None:
        response = self.client.post(
            reverse("cart-list"),
            {"kind": "asset", "item_id": self.asset.pk, "qty": 2},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        line_id = response.data["id"]

        self.client.post(reverse("cart-list"), {"kind": "service", "item_id": self.service.pk}, format="json")

        response = self.client.get(reverse("cart-list"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data["lines"]), 2)
        self.assertEqual(Decimal(response.data["total"]), Decimal("310000"))

        response = self.client.patch(reverse("cart-detail", args=[line_id]), {"qty": 1}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(Decimal(response.data["price"]), Decimal("80000"))

        response = self.client.delete(reverse("cart-detail", args=[line_id]))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

        response = self.client.delete(reverse("cart-clear"))
        self.assertEqual(response.data, {"deleted": 1})

    def test_conflicts_map_to_409(self) -> None:
        response = self.client.post(
            reverse("cart-list"),
            {"kind": "asset", "item_id": self.asset.pk, "qty": 5},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["code"], "insufficient_stock")

    def test_missing_line_is_404(self) -> None:
        response = self.client.patch(reverse("cart-detail", args=[12345]), {"qty": 1}, format="json")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_non_numeric_line_id_is_404(self) -> None:
        response = self.client.patch(reverse("cart-detail", args=["abc"]), {"qty": 1}, format="json")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

        response = self.client.delete(reverse("cart-detail", args=["abc"]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
