"""
Catalog Items

Read-only snapshots of catalog rows handed to carts and the reservation
engine. A catalog item is either an AssetItem or a ServiceItem; ``kind``
tells them apart.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import ClassVar, Union

from shared.domain.base import ValueObject
from shared.domain.errors import (
    AssetUnavailable,
    InsufficientStock,
    ServiceInactive,
    ValidationError,
)
from shared.domain.value_objects import Money


class ItemKind(str, Enum):
    ASSET = 'asset'
    SERVICE = 'service'


@dataclass(frozen=True)
class AssetItem(ValueObject):
    kind: ClassVar[ItemKind] = ItemKind.ASSET

    id: int
    code: str
    name: str
    rate: Decimal    # per day
    stock: int
    is_available: bool

    def check_orderable(self, qty: int):
        """Raise if ``qty`` units cannot be taken from current stock"""
        if not self.is_available:
            raise AssetUnavailable(f"Asset '{self.name}' is not available", asset_id=self.id)
        if qty > self.stock:
            raise InsufficientStock(
                f"Only {self.stock} unit(s) of '{self.name}' in stock",
                asset_id=self.id,
                requested=qty,
                stock=self.stock,
            )

    def price(self, qty: int) -> Money:
        return Money(self.rate) * qty


@dataclass(frozen=True)
class ServiceItem(ValueObject):
    kind: ClassVar[ItemKind] = ItemKind.SERVICE

    id: int
    code: str
    name: str
    rate: Decimal    # per unit
    is_active: bool

    def check_orderable(self, qty: int):
        if not self.is_active:
            raise ServiceInactive(f"Service '{self.name}' is not active", service_id=self.id)

    def price(self, qty: int) -> Money:
        return Money(self.rate) * qty


CatalogItem = Union[AssetItem, ServiceItem]


def parse_kind(value) -> ItemKind:
    try:
        return ItemKind(value)
    except ValueError:
        raise ValidationError(f"Unknown item kind: {value!r}", allowed='asset, service')


def validate_quantity(qty) -> int:
    if isinstance(qty, bool) or not isinstance(qty, int) or qty <= 0:
        raise ValidationError("Quantity must be a positive integer", qty=qty)
    return qty
