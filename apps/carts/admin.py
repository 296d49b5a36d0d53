"""Admin registrations for carts."""

from __future__ import annotations

from django.contrib import admin

from .models import CartLine


@admin.register(CartLine)
class CartLineAdmin(admin.ModelAdmin):
    list_display = ("user", "asset", "service", "qty", "price", "updated_at")
    search_fields = ("user__email", "asset__code", "service__code")
    raw_id_fields = ("user", "asset", "service")
