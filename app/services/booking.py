"""Booking: validate a requested slot and reserve it.

Checks run in a fixed order and the first failure wins:

1. service exists, is active and belongs to the provider (``get_bookable_service``)
2. end time derived from the service duration
3. provider works that day of week
4. the date is not blocked
5. the interval fits the working window and has not started yet
6. no live booking overlaps the interval

Steps 3-6 and the insert run inside the per-provider/date lock; the partial
unique index on appointments rejects anything that still slips through.
"""

import logging
from datetime import date, datetime
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import UnavailableError, ConflictError
from app.core.locks import booking_locks
from app.models.appointment import Appointment, AppointmentStatus
from app.services.catalog import get_bookable_service
from app.services.availability import AvailabilityRepository
from app.services.slots import get_booked_intervals, overlaps
from app.utils.time_utils import time_to_minutes, minutes_to_time, day_of_week, local_now, combine

logger = logging.getLogger(__name__)


async def book_appointment(
    db: AsyncSession,
    user_id: UUID,
    provider_id: UUID,
    service_id: UUID,
    target_date: date,
    start_time: str,
    notes: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Appointment:
    """Reserve ``start_time`` on ``target_date`` and commit the appointment."""
    service = await get_bookable_service(db, service_id, provider_id)

    start_minutes = time_to_minutes(start_time)
    end_minutes = start_minutes + service.duration_minutes
    end_time = minutes_to_time(end_minutes)

    repo = AvailabilityRepository(db)
    async with booking_locks.hold(db, provider_id, target_date):
        try:
            rule = await repo.is_day_available(provider_id, day_of_week(target_date))
            if rule is None:
                raise UnavailableError("Provider not available on this day")

            if await repo.is_date_blocked(provider_id, target_date):
                raise UnavailableError("Date is blocked")

            if start_minutes < time_to_minutes(rule.start_time) or end_minutes > time_to_minutes(rule.end_time):
                raise UnavailableError(
                    f"Requested time {start_time}-{end_time} is outside working hours "
                    f"{rule.start_time}-{rule.end_time}"
                )

            if combine(target_date, start_time) <= (now or local_now()):
                raise UnavailableError("Requested time has already passed")

            for booked_start, booked_end in await get_booked_intervals(db, provider_id, target_date):
                if overlaps(start_minutes, end_minutes, booked_start, booked_end):
                    logger.warning(
                        "Booking conflict: provider=%s date=%s %s-%s",
                        provider_id, target_date, start_time, end_time,
                    )
                    raise ConflictError("Time slot already booked")

            appointment = Appointment(
                user_id=user_id,
                provider_id=provider_id,
                service_id=service_id,
                date=target_date,
                start_time=start_time,
                end_time=end_time,
                status=AppointmentStatus.BOOKED,
                notes=notes,
                price_at_booking=service.price,
            )
            db.add(appointment)
            await db.commit()
        except IntegrityError:
            await db.rollback()
            logger.warning(
                "Booking rejected by unique slot index: provider=%s date=%s start=%s",
                provider_id, target_date, start_time,
            )
            raise ConflictError("Time slot already booked")
        except Exception:
            await db.rollback()
            raise

    logger.info(
        "Appointment booked: id=%s user=%s provider=%s date=%s %s-%s",
        appointment.id, user_id, provider_id, target_date, start_time, end_time,
    )
    return appointment
