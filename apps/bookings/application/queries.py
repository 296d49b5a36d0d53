"""
Booking Queries

Read side of the booking domain. Owners see their own bookings; admins
and approvers see everyone's.
"""

from uuid import UUID

from apps.bookings.domain.entities import BookingStatus
from apps.bookings.models import Booking as BookingModel
from shared.application.access import Caller, STAFF_ROLES, require_owner_or_role
from shared.application.result import returns_result
from shared.domain.errors import NotFoundError, ValidationError


class BookingQueries:

    def visible_to(self, caller: Caller, status: str | None = None):
        """Queryset of bookings the caller may list, newest first"""
        queryset = BookingModel.objects.select_related("user", "approved_by").prefetch_related(
            "lines__asset", "lines__service"
        )
        if not caller.is_staff:
            queryset = queryset.filter(user_id=caller.user_id)
        if status:
            try:
                queryset = queryset.filter(status=BookingStatus(status.upper()).value)
            except ValueError:
                raise ValidationError(f"Unknown booking status: {status}")
        return queryset.order_by("-created_at")

    @returns_result
    def list(self, caller: Caller, status: str | None = None):
        return self.visible_to(caller, status)

    @returns_result
    def detail(self, booking_id: UUID, caller: Caller) -> BookingModel:
        booking = (
            BookingModel.objects.select_related("user", "approved_by")
            .prefetch_related("lines__asset", "lines__service", "payments")
            .filter(pk=booking_id)
            .first()
        )
        if booking is None:
            raise NotFoundError("Booking not found", booking_id=booking_id)
        require_owner_or_role(caller, booking.user_id, STAFF_ROLES).unwrap()
        return booking


booking_queries = BookingQueries()
