"""Serializers for the cart API."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.catalog.domain.items import ItemKind
from .models import CartLine


class CartLineSerializer(serializers.ModelSerializer):
    kind = serializers.SerializerMethodField()
    item_id = serializers.IntegerField(read_only=True)
    item_code = serializers.SerializerMethodField()
    item_name = serializers.SerializerMethodField()

    class Meta:
        model = CartLine
        fields = [
            "id",
            "kind",
            "item_id",
            "item_code",
            "item_name",
            "qty",
            "price",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_kind(self, obj: CartLine) -> str:
        return obj.kind.value

    def get_item_code(self, obj: CartLine) -> str:
        return obj.item.code

    def get_item_name(self, obj: CartLine) -> str:
        return obj.item.name


class AddToCartSerializer(serializers.Serializer):
    kind = serializers.ChoiceField(choices=[kind.value for kind in ItemKind])
    item_id = serializers.IntegerField(min_value=1)
    qty = serializers.IntegerField(min_value=1, default=1)


class UpdateCartLineSerializer(serializers.Serializer):
    qty = serializers.IntegerField(min_value=1)
