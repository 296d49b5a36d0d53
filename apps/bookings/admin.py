"""Admin registrations for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking, BookingLine


class BookingLineInline(admin.TabularInline):
    model = BookingLine
    extra = 0
    fields = ("position", "asset", "service", "qty", "unit_rate", "price")
    readonly_fields = fields
    can_delete = False


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    """Read-only: statuses and stock only change through the booking API."""

    list_display = ("id", "user", "type", "status", "start_datetime", "end_datetime", "created_at")
    list_filter = ("status", "type")
    search_fields = ("id", "user__email")
    inlines = (BookingLineInline,)
    readonly_fields = (
        "id",
        "user",
        "type",
        "status",
        "start_datetime",
        "end_datetime",
        "notes",
        "approved_by",
        "approved_at",
        "created_at",
        "updated_at",
    )

    def has_add_permission(self, request):  # type: ignore
        return False
