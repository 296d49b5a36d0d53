"""Permissions for the catalog API."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore

from shared.application.access import Role


class IsAdminRoleOrReadOnly(permissions.BasePermission):
    """Authenticated users may read, only administrators may write."""

    def has_permission(self, request, view):  # type: ignore
        user = request.user
        if not user or not user.is_authenticated:
            return False
        if request.method in permissions.SAFE_METHODS:
            return True
        return getattr(user, "role", None) == Role.ADMIN.value
