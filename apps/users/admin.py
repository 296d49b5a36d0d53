"""Admin registrations for the users domain."""

from __future__ import annotations

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.translation import gettext_lazy as _

from .models import CustomUser


@admin.register(CustomUser)
class CustomUserAdmin(BaseUserAdmin):
    fieldsets = (
        (None, {"fields": ("email", "password")}),
        (_("Profile"), {"fields": ("username", "first_name", "last_name", "phone")}),
        (_("Access"), {"fields": ("role", "is_active", "is_staff", "is_superuser")}),
        (_("Dates"), {"fields": ("last_login", "date_joined", "created_at", "updated_at")}),
    )
    add_fieldsets = (
        (None, {"classes": ("wide",), "fields": ("email", "password1", "password2", "role")}),
    )
    list_display = ("email", "display_name", "role", "is_active")
    list_filter = ("role", "is_active")
    search_fields = ("email", "phone", "first_name", "last_name")
    ordering = ("email",)
    readonly_fields = ("created_at", "updated_at", "date_joined", "last_login")
    actions = ["make_approver", "make_borrower"]

    @admin.action(description=_("Grant approver role"))
    def make_approver(self, request, queryset):
        updated = queryset.update(role=CustomUser.RoleChoices.APPROVER)
        self.message_user(request, _("%d user(s) can now approve bookings.") % updated)

    @admin.action(description=_("Revert to borrower role"))
    def make_borrower(self, request, queryset):
        updated = queryset.exclude(is_superuser=True).update(role=CustomUser.RoleChoices.PEMINJAM)
        self.message_user(request, _("%d user(s) reverted to borrower.") % updated)
