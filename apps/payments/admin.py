"""Admin registrations for payments."""

from __future__ import annotations

from django.contrib import admin

from .models import Payment, PaymentTransaction


class PaymentTransactionInline(admin.TabularInline):
    model = PaymentTransaction
    extra = 0
    fields = ("created_at", "source", "transaction_status", "fraud_status", "mapped_status", "outcome")
    readonly_fields = fields
    can_delete = False


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("reference", "booking", "amount", "method", "status", "paid_at", "created_at")
    list_filter = ("status", "method")
    search_fields = ("reference", "booking__id", "booking__user__email")
    readonly_fields = (
        "id",
        "booking",
        "amount",
        "method",
        "status",
        "reference",
        "redirect_url",
        "token",
        "paid_at",
        "created_at",
        "updated_at",
    )
    inlines = (PaymentTransactionInline,)

    def has_add_permission(self, request):  # type: ignore
        return False


@admin.register(PaymentTransaction)
class PaymentTransactionAdmin(admin.ModelAdmin):
    """Unmatched deliveries are followed up from here."""

    list_display = ("reference", "source", "transaction_status", "outcome", "payment", "created_at")
    list_filter = ("outcome", "source")
    search_fields = ("reference",)
    readonly_fields = (
        "payment",
        "reference",
        "source",
        "transaction_status",
        "fraud_status",
        "mapped_status",
        "outcome",
        "payload",
        "created_at",
    )

    def has_add_permission(self, request):  # type: ignore
        return False
