"""
Cart Aggregator

Use cases over a user's cart. Every operation returns a Result. Catalog
checks made here (availability, stock, active flag) only give early
feedback; the reservation engine re-checks everything at checkout.
"""

from typing import List
import logging

from django.db import IntegrityError, transaction

from apps.carts.models import CartLine
from apps.catalog.domain.items import ItemKind, parse_kind, validate_quantity
from apps.catalog.store import catalog_store
from shared.application.access import Caller
from shared.application.result import returns_result
from shared.domain.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)

ITEM_FIELDS = {
    ItemKind.ASSET: 'asset_id',
    ItemKind.SERVICE: 'service_id',
}


class CartAggregator:

    def __init__(self, catalog=None):
        self.catalog = catalog or catalog_store

    @returns_result
    def add(self, caller: Caller, kind, item_id: int, qty: int = 1) -> CartLine:
        """Add ``qty`` of an item, merging into the existing line for it"""
        kind = parse_kind(kind)
        validate_quantity(qty)
        item = self.catalog.get(kind, item_id)
        item.check_orderable(qty)

        lookup = {'user_id': caller.user_id, ITEM_FIELDS[kind]: item.id}
        try:
            with transaction.atomic():
                line = CartLine.objects.select_for_update().filter(**lookup).first()
                if line is None:
                    line = CartLine.objects.create(qty=qty, price=item.price(qty).amount, **lookup)
                    logger.info(f"User {caller.user_id} added {kind.value} {item.id} × {qty} to cart")
                    return line

                new_qty = line.qty + qty
                item.check_orderable(new_qty)
                line.qty = new_qty
                line.price = item.price(new_qty).amount
                line.save(update_fields=['qty', 'price', 'updated_at'])
        except IntegrityError:
            # Another request created the same line first
            raise ConflictError("Cart changed concurrently, please retry")

        logger.info(f"User {caller.user_id} merged {kind.value} {item.id} into cart line {line.pk} (qty {new_qty})")
        return line

    @returns_result
    def update(self, caller: Caller, line_id: int, qty: int) -> CartLine:
        """Set the quantity of one of the caller's lines"""
        validate_quantity(qty)
        line = self._owned_line(caller, line_id)
        item = self.catalog.get(line.kind, line.item_id)
        item.check_orderable(qty)

        line.qty = qty
        line.price = item.price(qty).amount
        line.save(update_fields=['qty', 'price', 'updated_at'])
        return line

    @returns_result
    def remove(self, caller: Caller, line_id: int) -> None:
        line = self._owned_line(caller, line_id)
        line.delete()

    @returns_result
    def clear(self, caller: Caller) -> int:
        deleted, _ = CartLine.objects.filter(user_id=caller.user_id).delete()
        return deleted

    @returns_result
    def lines(self, caller: Caller) -> List[CartLine]:
        return list(
            CartLine.objects.filter(user_id=caller.user_id).select_related('asset', 'service')
        )

    def _owned_line(self, caller: Caller, line_id: int) -> CartLine:
        # Foreign lines are reported exactly like missing ones
        line = CartLine.objects.filter(pk=line_id, user_id=caller.user_id).first()
        if line is None:
            raise NotFoundError("Cart line not found", line_id=line_id)
        return line


cart_aggregator = CartAggregator()
