"""FilterSet definitions for booking listing."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Booking


class BookingFilterSet(django_filters.FilterSet):
    """Extra list filters; ``status`` is handled by the booking queries."""

    type = django_filters.ChoiceFilter(choices=Booking.Type.choices)
    start_after = django_filters.IsoDateTimeFilter(field_name="start_datetime", lookup_expr="gte")
    end_before = django_filters.IsoDateTimeFilter(field_name="end_datetime", lookup_expr="lte")

    class Meta:
        model = Booking
        fields = ["type"]
