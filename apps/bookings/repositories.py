"""
Booking Repository

Maps Booking aggregates to the ``Booking``/``BookingLine`` tables. All
writes go through the unit of work handed in by the caller; status changes
are compare-and-swap updates on the stored status.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, List
from uuid import UUID

from django.utils import timezone  # type: ignore

from apps.bookings.domain.entities import (
    HOLDING_STATUSES,
    Booking,
    BookingLine,
    BookingStatus,
    BookingType,
)
from apps.bookings.domain.inventory import Hold
from apps.bookings.models import Booking as BookingModel
from apps.bookings.models import BookingLine as BookingLineModel
from apps.catalog.domain.items import ItemKind
from shared.domain.errors import InvalidTransition, NotFoundError
from shared.domain.value_objects import BookingWindow

logger = logging.getLogger(__name__)


def _line_to_domain(line: BookingLineModel) -> BookingLine:
    return BookingLine(
        kind=ItemKind.ASSET if line.asset_id else ItemKind.SERVICE,
        item_id=line.asset_id or line.service_id,
        qty=line.qty,
        unit_rate=line.unit_rate,
        price=line.price,
    )


def to_domain(model: BookingModel) -> Booking:
    return Booking(
        id=model.pk,
        owner_id=model.user_id,
        window=BookingWindow(model.start_datetime, model.end_datetime),
        lines=tuple(_line_to_domain(line) for line in model.lines.all()),
        type=BookingType(model.type),
        status=BookingStatus(model.status),
        notes=model.notes,
        approved_by=model.approved_by_id,
        approved_at=model.approved_at,
        created_at=model.created_at,
    )


class BookingRepository:
    """Django ORM implementation of the booking repository"""

    def get(self, uow, booking_id: UUID, lock: bool = False) -> Booking:
        queryset = BookingModel.objects.using(uow.using)
        if lock:
            queryset = queryset.select_for_update()
        model = queryset.filter(pk=booking_id).first()
        if model is None:
            raise NotFoundError("Booking not found", booking_id=booking_id)
        return to_domain(model)

    def add(self, uow, booking: Booking) -> BookingModel:
        model = BookingModel.objects.using(uow.using).create(
            id=booking.id,
            user_id=booking.owner_id,
            type=booking.type.value,
            start_datetime=booking.window.start,
            end_datetime=booking.window.end,
            status=booking.status.value,
            notes=booking.notes,
        )
        BookingLineModel.objects.using(uow.using).bulk_create([
            BookingLineModel(
                booking=model,
                position=position,
                asset_id=line.item_id if line.is_asset else None,
                service_id=None if line.is_asset else line.item_id,
                qty=line.qty,
                unit_rate=line.unit_rate,
                price=line.price,
            )
            for position, line in enumerate(booking.lines, start=1)
        ])
        booking.created_at = model.created_at
        logger.info(f"Saved booking {booking.id} with {len(booking.lines)} line(s)")
        return model

    def save_transition(self, uow, booking: Booking, expected: BookingStatus) -> None:
        """
        Persist a status change only if the stored status is still ``expected``

        Raises InvalidTransition when another request moved the booking first.
        """
        updated = (
            BookingModel.objects.using(uow.using)
            .filter(pk=booking.id, status=expected.value)
            .update(
                status=booking.status.value,
                notes=booking.notes,
                approved_by_id=booking.approved_by,
                approved_at=booking.approved_at,
                updated_at=timezone.now(),
            )
        )
        if updated != 1:
            logger.warning(
                f"Booking {booking.id} is no longer {expected.value}; "
                f"transition to {booking.status.value} refused"
            )
            raise InvalidTransition(
                "Booking status changed concurrently",
                booking_id=booking.id,
                expected=expected.value,
            )

    def holds_overlapping(
        self,
        uow,
        asset_ids: Iterable[int],
        start: datetime,
        end: datetime,
    ) -> List[Hold]:
        """
        Asset quantities held by PENDING/CONFIRMED bookings touching [start, end]

        Windows that merely touch the range are included.
        """
        lines = (
            BookingLineModel.objects.using(uow.using)
            .filter(
                asset_id__in=list(asset_ids),
                booking__status__in=[status.value for status in HOLDING_STATUSES],
                booking__start_datetime__lte=end,
                booking__end_datetime__gte=start,
            )
            .values_list("asset_id", "qty", "booking__start_datetime", "booking__end_datetime")
        )
        return [
            Hold(asset_id=asset_id, qty=qty, window=BookingWindow(line_start, line_end))
            for asset_id, qty, line_start, line_end in lines
        ]


booking_repository = BookingRepository()
