"""API views for the booking domain."""

from __future__ import annotations

from uuid import UUID

from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.exceptions import NotFound  # type: ignore
from rest_framework.response import Response  # type: ignore

from shared.interfaces.http import caller_from_request, error_response, result_response
from .application.command_handlers import (
    ApproveBookingCommand,
    CancelBookingCommand,
    CheckoutCommand,
    RejectBookingCommand,
    approve_booking_handler,
    cancel_booking_handler,
    checkout_handler,
    reject_booking_handler,
)
from .application.queries import booking_queries
from .filters import BookingFilterSet
from .models import Booking
from .serializers import (
    ApproveSerializer,
    BookingDetailSerializer,
    BookingSerializer,
    CheckoutSerializer,
    RejectSerializer,
)


def _booking_id(pk) -> UUID:
    try:
        return UUID(str(pk))
    except ValueError:
        raise NotFound("Booking not found")


def _serialize(booking) -> dict:
    """Re-read the stored booking so responses show what was committed."""
    model = Booking.objects.prefetch_related("lines__asset", "lines__service").get(pk=booking.id)
    return BookingSerializer(model).data


class BookingViewSet(viewsets.GenericViewSet):
    """Checkout, listing and lifecycle transitions of bookings."""

    serializer_class = BookingSerializer
    permission_classes = [permissions.IsAuthenticated]
    filter_backends = [DjangoFilterBackend]
    filterset_class = BookingFilterSet

    def get_queryset(self):  # type: ignore
        if getattr(self, "swagger_fake_view", False):
            return Booking.objects.none()
        return booking_queries.visible_to(caller_from_request(self.request))

    def list(self, request):  # type: ignore
        result = booking_queries.list(caller_from_request(request), request.query_params.get("status"))
        if not result.ok:
            return error_response(result.error)
        queryset = self.filter_queryset(result.value)
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(BookingSerializer(page, many=True).data)
        return Response(BookingSerializer(queryset, many=True).data)

    def retrieve(self, request, pk=None):  # type: ignore
        result = booking_queries.detail(_booking_id(pk), caller_from_request(request))
        return result_response(result, lambda booking: BookingDetailSerializer(booking).data)

    @action(detail=False, methods=["post"])
    def checkout(self, request):  # type: ignore
        serializer = CheckoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        result = checkout_handler.handle(CheckoutCommand(
            caller=caller_from_request(request),
            start=data["start_datetime"],
            end=data["end_datetime"],
            notes=data["notes"],
        ))
        return result_response(result, _serialize, success_status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post", "patch"])
    def approve(self, request, pk=None):  # type: ignore
        serializer = ApproveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = approve_booking_handler.handle(ApproveBookingCommand(
            booking_id=_booking_id(pk),
            caller=caller_from_request(request),
            notes=serializer.validated_data["notes"],
        ))
        return result_response(result, _serialize)

    @action(detail=True, methods=["post", "patch"])
    def reject(self, request, pk=None):  # type: ignore
        serializer = RejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = reject_booking_handler.handle(RejectBookingCommand(
            booking_id=_booking_id(pk),
            caller=caller_from_request(request),
            reason=serializer.validated_data["reason"],
        ))
        return result_response(result, _serialize)

    @action(detail=True, methods=["post", "patch"])
    def cancel(self, request, pk=None):  # type: ignore
        result = cancel_booking_handler.handle(CancelBookingCommand(
            booking_id=_booking_id(pk),
            caller=caller_from_request(request),
        ))
        return result_response(result, _serialize)
