"""Catalog models: rentable assets and bookable services."""

from __future__ import annotations

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Asset(models.Model):
    """Physical item rented per day with a counted stock."""

    class Status(models.TextChoices):
        AVAILABLE = "TERSEDIA", _("Available")
        MAINTENANCE = "PERBAIKAN", _("Under maintenance")
        RETIRED = "NONAKTIF", _("Retired")

    code = models.CharField(max_length=50, unique=True)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    daily_rate = models.DecimalField(max_digits=14, decimal_places=2)
    stock = models.PositiveIntegerField(default=0)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.AVAILABLE)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Asset")
        verbose_name_plural = _("Assets")
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(condition=models.Q(stock__gte=0), name="asset_stock_non_negative"),
            models.CheckConstraint(condition=models.Q(daily_rate__gte=0), name="asset_rate_non_negative"),
        ]

    def __str__(self) -> str:
        return f"{self.code} - {self.name}"

    @property
    def is_available(self) -> bool:
        return self.status == self.Status.AVAILABLE


class Service(models.Model):
    """Service billed per unit (operator, cleaning, delivery...)."""

    code = models.CharField(max_length=50, unique=True)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    unit_rate = models.DecimalField(max_digits=14, decimal_places=2)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Service")
        verbose_name_plural = _("Services")
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(condition=models.Q(unit_rate__gte=0), name="service_rate_non_negative"),
        ]

    def __str__(self) -> str:
        return f"{self.code} - {self.name}"
