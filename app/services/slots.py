"""Slot generation.

``generate_slots`` is pure: minutes in, minutes out. ``get_available_slots``
wires it to the availability store and existing bookings for one provider and
date.
"""

import logging
from datetime import date, datetime
from typing import Iterable, NamedTuple, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.models.appointment import Appointment, AppointmentStatus
from app.services.catalog import get_bookable_service
from app.services.availability import AvailabilityRepository
from app.utils.time_utils import time_to_minutes, minutes_to_time, day_of_week, local_now

logger = logging.getLogger(__name__)

DEFAULT_STEP_MINUTES = 15


class Slot(NamedTuple):
    start: int
    end: int


def overlaps(start: int, end: int, other_start: int, other_end: int) -> bool:
    """Half-open interval intersection: [start, end) vs [other_start, other_end)."""
    return not (start >= other_end or end <= other_start)


def generate_slots(
    window_start: int,
    window_end: int,
    duration_minutes: int,
    booked_intervals: Iterable[tuple[int, int]],
    step_minutes: int = DEFAULT_STEP_MINUTES,
) -> list[Slot]:
    """Candidate start/end pairs inside the window that avoid every booking.

    Candidates start every ``step_minutes`` regardless of the duration, so
    consecutive slots may overlap each other.
    """
    booked = list(booked_intervals)
    slots = []
    current = window_start

    while current + duration_minutes <= window_end:
        end = current + duration_minutes
        if not any(overlaps(current, end, b_start, b_end) for b_start, b_end in booked):
            slots.append(Slot(current, end))
        current += step_minutes

    return slots


def drop_started_slots(slots: list[Slot], target_date: date, now: datetime) -> list[Slot]:
    """On today's date keep only slots starting strictly after the current minute."""
    if target_date != now.date():
        return slots
    current_minute = now.hour * 60 + now.minute
    return [slot for slot in slots if slot.start > current_minute]


async def get_booked_intervals(
    db: AsyncSession,
    provider_id: UUID,
    target_date: date,
) -> list[tuple[int, int]]:
    """[start, end) minute intervals of live bookings for a provider on a date."""
    result = await db.execute(
        select(Appointment.start_time, Appointment.end_time)
        .where(
            Appointment.provider_id == provider_id,
            Appointment.date == target_date,
            Appointment.status == AppointmentStatus.BOOKED,
        )
        .order_by(Appointment.start_time)
    )
    return [(time_to_minutes(start), time_to_minutes(end)) for start, end in result.all()]


async def get_available_slots(
    db: AsyncSession,
    provider_id: UUID,
    service_id: UUID,
    target_date: date,
    now: Optional[datetime] = None,
) -> list[dict]:
    """Bookable slots for a service on a date.

    Past dates, days off and blocked dates yield an empty list rather than an
    error. A service that is unknown, inactive or offered by another provider
    raises ``NotFoundError``, the same as at booking.
    """
    now = now or local_now()
    if target_date < now.date():
        logger.debug("Slots requested for past date %s", target_date)
        return []

    repo = AvailabilityRepository(db)
    rule = await repo.is_day_available(provider_id, day_of_week(target_date))
    if rule is None:
        return []
    if await repo.is_date_blocked(provider_id, target_date):
        return []

    service = await get_bookable_service(db, service_id, provider_id)

    booked = await get_booked_intervals(db, provider_id, target_date)
    slots = generate_slots(
        time_to_minutes(rule.start_time),
        time_to_minutes(rule.end_time),
        service.duration_minutes,
        booked,
        step_minutes=settings.SLOT_STEP_MINUTES,
    )
    slots = drop_started_slots(slots, target_date, now)

    logger.info(
        "Slots for provider=%s date=%s duration=%d: %d available",
        provider_id, target_date, service.duration_minutes, len(slots),
    )
    return [
        {"start_time": minutes_to_time(s.start), "end_time": minutes_to_time(s.end), "available": True}
        for s in slots
    ]
