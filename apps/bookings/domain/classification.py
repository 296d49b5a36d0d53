"""
Booking Type Classification

A booking's type is derived once, at checkout, from the kinds of items it
contains.
"""

from typing import Iterable

from apps.bookings.domain.entities import BookingType
from apps.catalog.domain.items import ItemKind
from shared.domain.errors import ValidationError


def classify_booking(kinds: Iterable[ItemKind]) -> BookingType:
    """
    Classify a booking from the set of its line item kinds

    Only assets -> ASSET, only services -> SERVICE, both -> MIXED.
    An empty set cannot be classified.
    """
    present = set(kinds)
    if not present:
        raise ValidationError("A booking needs at least one item")
    if present == {ItemKind.ASSET}:
        return BookingType.ASSET
    if present == {ItemKind.SERVICE}:
        return BookingType.SERVICE
    return BookingType.MIXED
