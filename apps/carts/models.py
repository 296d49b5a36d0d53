"""Cart models."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.db.models import Q  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from apps.catalog.domain.items import ItemKind


class CartLine(models.Model):
    """One catalog item in a user's cart, priced as rate × qty."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="cart_lines",
    )
    asset = models.ForeignKey(
        "catalog.Asset",
        on_delete=models.CASCADE,
        related_name="cart_lines",
        null=True,
        blank=True,
    )
    service = models.ForeignKey(
        "catalog.Service",
        on_delete=models.CASCADE,
        related_name="cart_lines",
        null=True,
        blank=True,
    )
    qty = models.PositiveIntegerField()
    price = models.DecimalField(max_digits=14, decimal_places=2)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Cart line")
        verbose_name_plural = _("Cart lines")
        ordering = ["-created_at", "-id"]
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(asset__isnull=False, service__isnull=True)
                    | Q(asset__isnull=True, service__isnull=False)
                ),
                name="cart_line_single_item",
            ),
            models.CheckConstraint(condition=Q(qty__gt=0), name="cart_line_qty_positive"),
            models.UniqueConstraint(
                fields=["user", "asset"],
                condition=Q(asset__isnull=False),
                name="cart_line_unique_asset",
            ),
            models.UniqueConstraint(
                fields=["user", "service"],
                condition=Q(service__isnull=False),
                name="cart_line_unique_service",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.item_id} × {self.qty} ({self.user_id})"

    @property
    def kind(self) -> ItemKind:
        return ItemKind.ASSET if self.asset_id else ItemKind.SERVICE

    @property
    def item_id(self) -> int:
        return self.asset_id or self.service_id

    @property
    def item(self):
        return self.asset if self.asset_id else self.service
