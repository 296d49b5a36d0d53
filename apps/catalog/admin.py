"""Admin registrations for the catalog domain."""

from __future__ import annotations

from django.contrib import admin

from .models import Asset, Service


@admin.register(Asset)
class AssetAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "daily_rate", "stock", "status", "updated_at")
    list_filter = ("status",)
    search_fields = ("code", "name")
    readonly_fields = ("created_at", "updated_at")


@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "unit_rate", "is_active", "updated_at")
    list_filter = ("is_active",)
    search_fields = ("code", "name")
    readonly_fields = ("created_at", "updated_at")
