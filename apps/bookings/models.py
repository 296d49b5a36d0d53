"""Booking domain models for SewaHub."""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.db.models import Q  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from apps.bookings.domain.entities import BookingStatus, BookingType


class Booking(models.Model):
    """Rental request for a set of assets and services over one window."""

    class Status(models.TextChoices):
        PENDING = BookingStatus.PENDING.value, _("Waiting for approval")
        CONFIRMED = BookingStatus.CONFIRMED.value, _("Confirmed")
        REJECTED = BookingStatus.REJECTED.value, _("Rejected")
        CANCELLED = BookingStatus.CANCELLED.value, _("Cancelled")
        PAID = BookingStatus.PAID.value, _("Paid")

    class Type(models.TextChoices):
        ASSET = BookingType.ASSET.value, _("Assets only")
        SERVICE = BookingType.SERVICE.value, _("Services only")
        MIXED = BookingType.MIXED.value, _("Assets and services")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    type = models.CharField(max_length=10, choices=Type.choices)
    start_datetime = models.DateTimeField()
    end_datetime = models.DateTimeField()
    status = models.CharField(
        max_length=16,
        choices=Status.choices,
        default=Status.PENDING,
    )
    notes = models.TextField(blank=True)
    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="approved_bookings",
    )
    approved_at = models.DateTimeField(null=True, blank=True)
    payment_attempts = models.PositiveIntegerField(
        default=0,
        help_text=_("Gateway order ids issued so far, including ones that never got a payment row."),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=Q(end_datetime__gt=models.F("start_datetime")),
                name="booking_valid_window",
            ),
        ]
        indexes = [
            models.Index(fields=["status"], name="booking_status_idx"),
            models.Index(fields=["start_datetime", "end_datetime"], name="booking_window_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking {self.pk} ({self.status})"

    @property
    def total_price(self) -> Decimal:
        return sum((line.price for line in self.lines.all()), Decimal("0"))


class BookingLine(models.Model):
    """Item of a booking; written once at checkout."""

    booking = models.ForeignKey(Booking, on_delete=models.CASCADE, related_name="lines")
    position = models.PositiveSmallIntegerField()
    asset = models.ForeignKey(
        "catalog.Asset",
        on_delete=models.PROTECT,
        related_name="booking_lines",
        null=True,
        blank=True,
    )
    service = models.ForeignKey(
        "catalog.Service",
        on_delete=models.PROTECT,
        related_name="booking_lines",
        null=True,
        blank=True,
    )
    qty = models.PositiveIntegerField()
    unit_rate = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        help_text=_("Daily rate for assets, unit rate for services, at checkout."),
    )
    price = models.DecimalField(max_digits=14, decimal_places=2)

    class Meta:
        verbose_name = _("Booking line")
        verbose_name_plural = _("Booking lines")
        ordering = ["booking", "position"]
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(asset__isnull=False, service__isnull=True)
                    | Q(asset__isnull=True, service__isnull=False)
                ),
                name="booking_line_single_item",
            ),
            models.CheckConstraint(condition=Q(qty__gt=0), name="booking_line_qty_positive"),
            models.UniqueConstraint(fields=["booking", "position"], name="booking_line_unique_position"),
        ]

    def __str__(self) -> str:
        item = self.asset_id and f"asset {self.asset_id}" or f"service {self.service_id}"
        return f"{item} × {self.qty}"
