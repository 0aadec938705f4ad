"""Appointment status transitions.

    booked ──> completed
       └─────> cancelled

``completed`` and ``cancelled`` are terminal; nothing re-opens them.
Users may only cancel their own appointments before they start; providers
may complete or cancel their own appointments at any time.
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, InvalidStateError
from app.models.appointment import Appointment, AppointmentStatus, CancelledBy
from app.utils.time_utils import combine, local_now

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[AppointmentStatus, frozenset[AppointmentStatus]] = {
    AppointmentStatus.BOOKED: frozenset({AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED}),
    AppointmentStatus.COMPLETED: frozenset(),
    AppointmentStatus.CANCELLED: frozenset(),
}


def can_transition(current: AppointmentStatus, target: AppointmentStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def _apply(appointment: Appointment, target: AppointmentStatus, by: CancelledBy, now: datetime) -> None:
    if not can_transition(appointment.status, target):
        raise InvalidStateError(
            f"Cannot change appointment status from {appointment.status.value} to {target.value}"
        )
    appointment.status = target
    if target == AppointmentStatus.CANCELLED:
        appointment.cancelled_at = now
        appointment.cancelled_by = by


async def cancel_appointment(
    db: AsyncSession,
    appointment_id: UUID,
    requesting_user_id: UUID,
    now: Optional[datetime] = None,
) -> Appointment:
    """Cancel a booked appointment on behalf of the user who booked it."""
    result = await db.execute(
        select(Appointment).where(
            Appointment.id == appointment_id,
            Appointment.user_id == requesting_user_id,
            Appointment.status == AppointmentStatus.BOOKED,
        )
    )
    appointment = result.scalar_one_or_none()
    if not appointment:
        raise NotFoundError("Appointment not found or cannot be cancelled")

    now = now or local_now()
    if now >= combine(appointment.date, appointment.start_time):
        raise InvalidStateError("Cannot cancel an appointment that has already started or passed")

    _apply(appointment, AppointmentStatus.CANCELLED, CancelledBy.USER, now)
    await db.commit()

    logger.info("Appointment cancelled by user: id=%s user=%s", appointment_id, requesting_user_id)
    return appointment


async def update_status(
    db: AsyncSession,
    appointment_id: UUID,
    provider_id: UUID,
    new_status: AppointmentStatus,
    now: Optional[datetime] = None,
) -> Appointment:
    """Provider-side transition (complete or cancel), no time restriction."""
    result = await db.execute(
        select(Appointment).where(
            Appointment.id == appointment_id,
            Appointment.provider_id == provider_id,
        )
    )
    appointment = result.scalar_one_or_none()
    if not appointment:
        raise NotFoundError("Appointment not found")

    previous = appointment.status
    _apply(appointment, new_status, CancelledBy.PROVIDER, now or local_now())
    await db.commit()

    logger.info(
        "Appointment status updated by provider: id=%s %s -> %s",
        appointment_id, previous.value, new_status.value,
    )
    return appointment
