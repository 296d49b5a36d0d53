"""API views for payments and the gateway notification endpoint."""

from __future__ import annotations

from uuid import UUID

import structlog
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.exceptions import NotFound  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from shared.interfaces.http import caller_from_request, error_response, result_response
from .application.command_handlers import CreatePaymentIntentCommand, create_payment_intent_handler
from .application.queries import payment_queries
from .application.reconciliation import ReconcilePaymentCommand, reconcile_payment_handler
from .gateway import payment_gateway
from .models import Payment
from .serializers import CreatePaymentSerializer, GatewayNotificationSerializer, PaymentSerializer

logger = structlog.get_logger(__name__)


def _uuid(value, label: str) -> UUID:
    try:
        return UUID(str(value))
    except ValueError:
        raise NotFound(f"{label} not found")


def _serialize(payment: Payment) -> dict:
    payment = Payment.objects.select_related("booking").get(pk=payment.pk)
    return PaymentSerializer(payment).data


class PaymentViewSet(viewsets.GenericViewSet):
    """Create a payment for a booking, read it and cross-check it with the gateway."""

    serializer_class = PaymentSerializer
    permission_classes = [permissions.IsAuthenticated]
    queryset = Payment.objects.none()

    def retrieve(self, request, pk=None):  # type: ignore
        result = payment_queries.detail(_uuid(pk, "Payment"), caller_from_request(request))
        return result_response(result, lambda payment: PaymentSerializer(payment).data)

    @action(detail=False, methods=["post"], url_path=r"create/(?P<booking_id>[^/.]+)", url_name="create")
    def create_intent(self, request, booking_id=None):  # type: ignore
        serializer = CreatePaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = create_payment_intent_handler.handle(CreatePaymentIntentCommand(
            booking_id=_uuid(booking_id, "Booking"),
            caller=caller_from_request(request),
            method=serializer.validated_data["method"],
        ))
        return result_response(result, _serialize, success_status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["get"], url_path="status", url_name="status")
    def check_status(self, request, pk=None):  # type: ignore
        result = payment_queries.check_status(_uuid(pk, "Payment"), caller_from_request(request))
        return result_response(result)


class GatewayNotificationView(APIView):
    """
    Midtrans HTTP notification endpoint

    Unauthenticated; authenticity comes from the notification signature.
    Unmatched and already-applied notifications are acknowledged with 200 so
    the gateway stops retrying.
    """

    authentication_classes: list = []
    permission_classes = [permissions.AllowAny]

    def post(self, request):  # type: ignore
        serializer = GatewayNotificationSerializer(data=request.data)
        if not serializer.is_valid():
            logger.warning("payment.notification.invalid", errors=serializer.errors)
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        data = serializer.validated_data

        if not payment_gateway.verify_signature(data):
            logger.error("payment.notification.bad_signature", reference=data["order_id"])
            return Response({"detail": "Invalid signature"}, status=status.HTTP_403_FORBIDDEN)

        payload = {key: value for key, value in request.data.items() if key != "signature_key"}
        result = reconcile_payment_handler.handle(ReconcilePaymentCommand(
            reference=data["order_id"],
            transaction_status=data["transaction_status"],
            fraud_status=data["fraud_status"],
            payload=payload,
        ))
        if not result.ok:
            return error_response(result.error)

        report = result.value
        return Response(
            {
                "outcome": report.outcome.value,
                "payment_id": str(report.payment_id) if report.payment_id else None,
                "status": report.status.value if report.status else None,
            },
            status=status.HTTP_200_OK,
        )
