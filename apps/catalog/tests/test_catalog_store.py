"""Tests for the catalog store and catalog API."""

from __future__ import annotations

from decimal import Decimal

import pytest
from django.db import transaction
from django.urls import reverse

from apps.catalog.domain.items import AssetItem, ItemKind, ServiceItem
from apps.catalog.store import CatalogStore
from shared.domain.errors import (
    AssetUnavailable,
    InsufficientStock,
    NotFoundError,
    ServiceInactive,
)


@pytest.mark.django_db
def test_get_returns_tagged_snapshots(make_asset, make_service):
    asset = make_asset(stock=3, daily_rate="125000")
    service = make_service(unit_rate="40000")
    store = CatalogStore()

    asset_item = store.get(ItemKind.ASSET, asset.pk)
    service_item = store.get(ItemKind.SERVICE, service.pk)

    assert isinstance(asset_item, AssetItem)
    assert asset_item.kind == ItemKind.ASSET
    assert asset_item.rate == Decimal("125000.00")
    assert asset_item.stock == 3
    assert isinstance(service_item, ServiceItem)
    assert service_item.is_active is True


@pytest.mark.django_db
def test_get_unknown_item_raises_not_found():
    with pytest.raises(NotFoundError):
        CatalogStore().get(ItemKind.ASSET, 999)


@pytest.mark.django_db
def test_adjust_stock_never_goes_negative(make_asset):
    asset = make_asset(stock=1)
    store = CatalogStore()

    store.adjust_stock(asset.pk, -1)
    with pytest.raises(InsufficientStock):
        store.adjust_stock(asset.pk, -1)
    store.adjust_stock(asset.pk, 2)

    asset.refresh_from_db()
    assert asset.stock == 2


@pytest.mark.django_db
def test_lock_assets_reports_missing_rows(make_asset):
    asset = make_asset()
    with transaction.atomic():
        items = CatalogStore().lock_assets([asset.pk])
        assert list(items) == [asset.pk]
        with pytest.raises(NotFoundError):
            CatalogStore().lock_assets([asset.pk, asset.pk + 100])


def test_orderable_checks():
    asset = AssetItem(id=1, code="A", name="Tent", rate=Decimal("1"), stock=1, is_available=True)
    retired = AssetItem(id=2, code="B", name="Old tent", rate=Decimal("1"), stock=5, is_available=False)
    inactive = ServiceItem(id=3, code="S", name="Driver", rate=Decimal("1"), is_active=False)

    asset.check_orderable(1)
    with pytest.raises(InsufficientStock):
        asset.check_orderable(2)
    with pytest.raises(AssetUnavailable):
        retired.check_orderable(1)
    with pytest.raises(ServiceInactive):
        inactive.check_orderable(1)


@pytest.mark.django_db
def test_only_admin_can_write_catalog(api_client, peminjam, administrator):
    payload = {"code": "CAM-1", "name": "Camera", "daily_rate": "75000.00", "stock": 4}

    api_client.force_authenticate(peminjam)
    assert api_client.get(reverse("asset-list")).status_code == 200
    assert api_client.post(reverse("asset-list"), payload, format="json").status_code == 403

    api_client.force_authenticate(administrator)
    response = api_client.post(reverse("asset-list"), payload, format="json")
    assert response.status_code == 201, response.data

    detail = reverse("asset-detail", args=[response.data["id"]])
    response = api_client.patch(detail, {"stock": 10}, format="json")
    assert response.status_code == 400
