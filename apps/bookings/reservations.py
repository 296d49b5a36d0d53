"""
Inventory Reservation Engine

Places and releases asset holds. ``reserve`` must run inside the checkout's
unit of work: it locks the involved asset rows (ascending id), evaluates
every line against the capacity ledger and decrements stock, so either all
lines are held or none are.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Sequence, Tuple

from apps.bookings.domain.inventory import CapacityLedger, ReservationRequest
from apps.bookings.repositories import booking_repository
from apps.catalog.domain.items import CatalogItem, ItemKind
from apps.catalog.store import catalog_store
from shared.application.result import returns_result
from shared.domain.errors import InternalError
from shared.domain.value_objects import BookingWindow

logger = logging.getLogger(__name__)


class ReservationEngine:

    def __init__(self, catalog=None, bookings=None):
        self.catalog = catalog or catalog_store
        self.bookings = bookings or booking_repository

    @returns_result
    def reserve(self, uow, window: BookingWindow, requests: Sequence[ReservationRequest]) -> List[CatalogItem]:
        """
        Hold stock for every asset request and check every service request

        Returns the catalog snapshot used for each request, in order.
        Rejections: AssetUnavailable, InsufficientStock, ServiceInactive,
        OverlappingCapacityExceeded.
        """
        if not uow.active:
            raise InternalError("Reservations must run inside a unit of work")

        asset_ids = [r.item_id for r in requests if r.kind == ItemKind.ASSET]
        assets = self.catalog.lock_assets(asset_ids) if asset_ids else {}
        holds = self.bookings.holds_overlapping(uow, assets.keys(), window.start, window.end) if assets else []
        ledger = CapacityLedger(assets, holds)

        items: List[CatalogItem] = []
        for request in requests:
            if request.kind == ItemKind.ASSET:
                ledger.reserve(request.item_id, request.qty, window)
                items.append(assets[request.item_id])
            else:
                service = self.catalog.get(ItemKind.SERVICE, request.item_id)
                service.check_orderable(request.qty)
                items.append(service)

        for asset_id, qty in sorted(ledger.taken.items()):
            self.catalog.adjust_stock(asset_id, -qty)

        if ledger.taken:
            logger.info(f"Reserved {ledger.taken} for window {window}")
        return items

    def release(self, uow, holds: Iterable[Tuple[int, int]]) -> None:
        """Give held stock back; runs in the caller's unit of work"""
        for asset_id, qty in sorted(holds):
            self.catalog.adjust_stock(asset_id, qty)
            logger.info(f"Released {qty} unit(s) of asset {asset_id}")


reservation_engine = ReservationEngine()
