"""Serializers for the payments API."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Payment


class PaymentBookingSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    status = serializers.CharField()
    start_datetime = serializers.DateTimeField()
    end_datetime = serializers.DateTimeField()


class PaymentSerializer(serializers.ModelSerializer):
    booking = PaymentBookingSerializer(read_only=True)

    class Meta:
        model = Payment
        fields = [
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
        ]
        read_only_fields = fields


class CreatePaymentSerializer(serializers.Serializer):
    method = serializers.ChoiceField(choices=Payment.Method.choices, required=False, default=Payment.Method.QRIS)


class GatewayNotificationSerializer(serializers.Serializer):
    """Fields of a Midtrans HTTP notification the reconciliation needs."""

    order_id = serializers.CharField(max_length=100)
    transaction_status = serializers.CharField(required=False, allow_blank=True, default="")
    fraud_status = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")
    status_code = serializers.CharField(required=False, allow_blank=True, default="")
    gross_amount = serializers.CharField(required=False, allow_blank=True, default="")
    signature_key = serializers.CharField(required=False, allow_blank=True, default="")
