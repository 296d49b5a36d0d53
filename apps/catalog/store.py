"""
Catalog Store

The only gateway from the booking core to catalog rows. Reads return
immutable CatalogItem snapshots; ``adjust_stock`` is the single stock
mutation and is called by the reservation engine only, inside its unit of
work.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable

from django.db.models import F  # type: ignore

from apps.catalog.domain.items import AssetItem, CatalogItem, ItemKind, ServiceItem
from apps.catalog.models import Asset, Service
from shared.domain.errors import InsufficientStock, NotFoundError

logger = logging.getLogger(__name__)


def _asset_item(asset: Asset) -> AssetItem:
    return AssetItem(
        id=asset.pk,
        code=asset.code,
        name=asset.name,
        rate=asset.daily_rate,
        stock=asset.stock,
        is_available=asset.is_available,
    )


def _service_item(service: Service) -> ServiceItem:
    return ServiceItem(
        id=service.pk,
        code=service.code,
        name=service.name,
        rate=service.unit_rate,
        is_active=service.is_active,
    )


class CatalogStore:
    """Django-backed catalog store"""

    def get(self, kind: ItemKind, item_id: int) -> CatalogItem:
        if kind == ItemKind.ASSET:
            asset = Asset.objects.filter(pk=item_id).first()
            if asset is None:
                raise NotFoundError("Asset not found", asset_id=item_id)
            return _asset_item(asset)

        service = Service.objects.filter(pk=item_id).first()
        if service is None:
            raise NotFoundError("Service not found", service_id=item_id)
        return _service_item(service)

    def lock_assets(self, asset_ids: Iterable[int]) -> Dict[int, AssetItem]:
        """
        Lock asset rows for the current transaction and return snapshots

        Rows are locked in ascending id order so that two checkouts over
        the same assets always queue instead of deadlocking. Must be called
        inside an atomic block.
        """
        ids = sorted(set(asset_ids))
        assets = Asset.objects.select_for_update().filter(pk__in=ids).order_by('pk')
        items = {asset.pk: _asset_item(asset) for asset in assets}
        missing = [asset_id for asset_id in ids if asset_id not in items]
        if missing:
            raise NotFoundError("Asset not found", asset_id=missing[0])
        return items

    def adjust_stock(self, asset_id: int, delta: int) -> None:
        """Add ``delta`` (negative to take) to an asset's stock atomically"""
        updated = Asset.objects.filter(pk=asset_id, stock__gte=-delta).update(stock=F('stock') + delta)
        if updated:
            logger.debug(f"Adjusted stock of asset {asset_id} by {delta}")
            return
        if not Asset.objects.filter(pk=asset_id).exists():
            raise NotFoundError("Asset not found", asset_id=asset_id)
        raise InsufficientStock("Stock cannot become negative", asset_id=asset_id, delta=delta)


catalog_store = CatalogStore()
