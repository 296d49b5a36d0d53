"""Cart persistence helpers used by checkout."""

from __future__ import annotations

from typing import List

from apps.carts.models import CartLine


class CartRepository:
    """Reads and clears a user's cart inside the caller's unit of work"""

    def lines_for_checkout(self, uow, user_id: int) -> List[CartLine]:
        return list(
            CartLine.objects.using(uow.using)
            .select_for_update()
            .filter(user_id=user_id)
            .order_by("id")
        )

    def clear(self, uow, user_id: int) -> int:
        deleted, _ = CartLine.objects.using(uow.using).filter(user_id=user_id).delete()
        return deleted
