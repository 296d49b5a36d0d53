"""
Inventory Capacity

This is the CRITICAL piece for preventing overselling asset stock.
Every hold requested at checkout is evaluated here against a snapshot of
the locked asset rows and of the holds already placed by non-terminal
bookings.

Rules, per asset line:
(a) the asset must be available
(b) qty must not exceed the asset's current stock
(c) quantities held by PENDING/CONFIRMED bookings whose window touches or
    overlaps the requested window are summed
(d) held + qty must not exceed the asset's current stock

Current stock is already net of every live hold, so (d) counts a held unit
twice. The ledger keeps that behaviour: it can refuse capacity that is
physically free but never grants capacity that is not.
"""

from dataclasses import dataclass, replace
from typing import Dict, Iterable, List

from apps.catalog.domain.items import AssetItem, ItemKind
from shared.domain.errors import OverlappingCapacityExceeded
from shared.domain.value_objects import BookingWindow


@dataclass(frozen=True)
class ReservationRequest:
    """One line to reserve: an asset hold or a service activity check"""
    kind: ItemKind
    item_id: int
    qty: int


@dataclass(frozen=True)
class Hold:
    """Quantity of an asset held by a non-terminal booking"""
    asset_id: int
    qty: int
    window: BookingWindow


class CapacityLedger:
    """
    In-memory capacity view for one checkout

    Usage:
        ledger = CapacityLedger(locked_assets, existing_holds)
        ledger.reserve(asset_id, qty, window)   # raises on rejection
        ledger.taken                            # {asset_id: qty} to decrement
    """

    def __init__(self, assets: Dict[int, AssetItem], holds: Iterable[Hold]):
        self._assets = dict(assets)
        self._holds: List[Hold] = list(holds)
        self.taken: Dict[int, int] = {}

    def held_quantity(self, asset_id: int, window: BookingWindow) -> int:
        return sum(
            hold.qty
            for hold in self._holds
            if hold.asset_id == asset_id and hold.window.overlaps_with(window)
        )

    def available_stock(self, asset_id: int) -> int:
        return self._assets[asset_id].stock - self.taken.get(asset_id, 0)

    def reserve(self, asset_id: int, qty: int, window: BookingWindow):
        asset = self._assets[asset_id]
        stock = self.available_stock(asset_id)
        # (a) and (b) against stock left after earlier lines of this checkout
        replace(asset, stock=stock).check_orderable(qty)

        held = self.held_quantity(asset_id, window)
        if held + qty > stock:
            raise OverlappingCapacityExceeded(
                f"Asset '{asset.name}' is already booked for the requested period",
                asset_id=asset_id,
                held=held,
                requested=qty,
                stock=stock,
            )

        self.taken[asset_id] = self.taken.get(asset_id, 0) + qty
        self._holds.append(Hold(asset_id=asset_id, qty=qty, window=window))
