"""Serializers for user-related API endpoints."""

from __future__ import annotations

from django.contrib.auth import get_user_model  # type: ignore
from rest_framework import serializers  # type: ignore

from .models import PHONE_VALIDATOR

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    display_name = serializers.CharField(read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "display_name",
            "first_name",
            "last_name",
            "phone",
            "role",
            "is_active",
            "created_at",
        ]
        read_only_fields = fields


class UserShortSerializer(serializers.ModelSerializer):
    """Borrower or approver as embedded in booking responses."""

    display_name = serializers.CharField(read_only=True)

    class Meta:
        model = User
        fields = ["id", "email", "display_name", "role"]
        read_only_fields = fields


class ProfileUpdateSerializer(serializers.ModelSerializer):
    """Fields a user may change on their own account; role is not one of them."""

    phone = serializers.CharField(required=False, allow_blank=True)

    class Meta:
        model = User
        fields = ["username", "first_name", "last_name", "phone"]

    def validate_phone(self, value: str) -> str | None:
        if not value:
            return None
        phone = User.objects.normalize_phone(value)
        PHONE_VALIDATOR(phone)
        return phone


class RoleAssignmentSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=User.RoleChoices.choices)
