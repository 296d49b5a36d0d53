"""Serializers for the booking domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.users.serializers import UserShortSerializer
from .models import Booking, BookingLine


class BookingLineSerializer(serializers.ModelSerializer):
    kind = serializers.SerializerMethodField()
    item_id = serializers.SerializerMethodField()
    item_code = serializers.SerializerMethodField()
    item_name = serializers.SerializerMethodField()

    class Meta:
        model = BookingLine
        fields = ["position", "kind", "item_id", "item_code", "item_name", "qty", "unit_rate", "price"]
        read_only_fields = fields

    def _item(self, obj: BookingLine):
        return obj.asset if obj.asset_id else obj.service

    def get_kind(self, obj: BookingLine) -> str:
        return "asset" if obj.asset_id else "service"

    def get_item_id(self, obj: BookingLine) -> int:
        return obj.asset_id or obj.service_id

    def get_item_code(self, obj: BookingLine) -> str:
        return self._item(obj).code

    def get_item_name(self, obj: BookingLine) -> str:
        return self._item(obj).name


class BookingSerializer(serializers.ModelSerializer):
    """Booking with its lines."""

    user = UserShortSerializer(read_only=True)
    approved_by = UserShortSerializer(read_only=True)
    lines = BookingLineSerializer(many=True, read_only=True)
    total_price = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = Booking
        fields = [
            "id",
            "user",
            "type",
            "status",
            "start_datetime",
            "end_datetime",
            "notes",
            "approved_by",
            "approved_at",
            "lines",
            "total_price",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class BookingDetailSerializer(BookingSerializer):
    """Booking with lines and its payment attempts."""

    payments = serializers.SerializerMethodField()

    class Meta(BookingSerializer.Meta):
        fields = BookingSerializer.Meta.fields + ["payments"]
        read_only_fields = fields

    def get_payments(self, obj: Booking) -> list[dict]:
        return [
            {
                "id": str(payment.id),
                "reference": payment.reference,
                "method": payment.method,
                "status": payment.status,
                "amount": str(payment.amount),
                "paid_at": payment.paid_at.isoformat() if payment.paid_at else None,
            }
            for payment in obj.payments.all()
        ]


class CheckoutSerializer(serializers.Serializer):
    start_datetime = serializers.DateTimeField()
    end_datetime = serializers.DateTimeField()
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class ApproveSerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class RejectSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default="")
