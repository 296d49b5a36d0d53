"""Serializers for the catalog API."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Asset, Service


class AssetSerializer(serializers.ModelSerializer):
    class Meta:
        model = Asset
        fields = [
            "id",
            "code",
            "name",
            "description",
            "daily_rate",
            "stock",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate_stock(self, value: int) -> int:
        # Stock of an existing asset is owned by the reservation engine
        if self.instance is not None and value != self.instance.stock:
            raise serializers.ValidationError("Stock can only be set when the asset is created.")
        return value


class ServiceSerializer(serializers.ModelSerializer):
    class Meta:
        model = Service
        fields = [
            "id",
            "code",
            "name",
            "description",
            "unit_rate",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]
