"""Paginated appointment listings with summary stats."""

import logging
import math
from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import select, func, or_, and_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.config import settings
from app.core.exceptions import NotFoundError
from app.models.appointment import Appointment, AppointmentStatus
from app.models.service import Service
from app.schemas.appointment import AppointmentListParams
from app.utils.time_utils import local_now

logger = logging.getLogger(__name__)

DETAIL_OPTIONS = (
    selectinload(Appointment.user),
    selectinload(Appointment.provider),
    selectinload(Appointment.service),
)

SORT_FIELDS = {
    "date": Appointment.date,
    "createdAt": Appointment.created_at,
    "created_at": Appointment.created_at,
    "startTime": Appointment.start_time,
    "start_time": Appointment.start_time,
    "status": Appointment.status,
}

TERMINAL_STATUSES = (AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED)


def upcoming_clause(today: date):
    return and_(Appointment.date >= today, Appointment.status == AppointmentStatus.BOOKED)


def past_clause(today: date):
    return or_(Appointment.date < today, Appointment.status.in_(TERMINAL_STATUSES))


def revenue_price_column():
    """Price used for revenue: live service price or the booking-time snapshot."""
    if settings.REVENUE_PRICE_SOURCE == "booking":
        return Appointment.price_at_booking
    return Service.price


def appointment_price(appointment: Appointment) -> Decimal:
    """Revenue of one appointment; ``service`` must be loaded for live pricing."""
    if settings.REVENUE_PRICE_SOURCE == "booking":
        return appointment.price_at_booking or Decimal(0)
    return appointment.service.price if appointment.service else Decimal(0)


async def completed_revenue(db: AsyncSession, *conditions) -> Decimal:
    """Sum of prices of completed appointments matching ``conditions``."""
    result = await db.execute(
        select(func.coalesce(func.sum(revenue_price_column()), 0))
        .select_from(Appointment)
        .join(Service, Service.id == Appointment.service_id)
        .where(Appointment.status == AppointmentStatus.COMPLETED, *conditions)
    )
    return Decimal(result.scalar() or 0)


async def count_appointments(db: AsyncSession, *conditions) -> int:
    result = await db.execute(select(func.count(Appointment.id)).where(*conditions))
    return result.scalar() or 0


async def get_appointment_detail(db: AsyncSession, appointment_id: UUID) -> Appointment:
    """Appointment with user, provider and service loaded for serialization."""
    result = await db.execute(
        select(Appointment)
        .options(*DETAIL_OPTIONS)
        .where(Appointment.id == appointment_id)
        .execution_options(populate_existing=True)
    )
    appointment = result.scalar_one_or_none()
    if not appointment:
        raise NotFoundError("Appointment not found")
    return appointment


async def appointment_stats(
    db: AsyncSession,
    owner_clause,
    today: date,
    include_revenue: bool = False,
) -> dict:
    """Counts by status and by position relative to today for one owner."""
    stats = {
        "total": await count_appointments(db, owner_clause),
        "today": await count_appointments(db, owner_clause, Appointment.date == today),
        "upcoming": await count_appointments(db, owner_clause, upcoming_clause(today)),
        "past": await count_appointments(db, owner_clause, past_clause(today)),
        "booked": await count_appointments(db, owner_clause, Appointment.status == AppointmentStatus.BOOKED),
        "completed": await count_appointments(db, owner_clause, Appointment.status == AppointmentStatus.COMPLETED),
        "cancelled": await count_appointments(db, owner_clause, Appointment.status == AppointmentStatus.CANCELLED),
        "past_booked": await count_appointments(
            db, owner_clause, Appointment.date < today, Appointment.status == AppointmentStatus.BOOKED,
        ),
    }
    if include_revenue:
        stats["total_revenue"] = round(float(await completed_revenue(db, owner_clause)), 2)
    return stats


def paginate(total: int, page: int, limit: int) -> dict:
    total_pages = max(1, math.ceil(total / limit))
    has_next = page < total_pages
    has_prev = page > 1
    return {
        "total_items": total,
        "total_pages": total_pages,
        "current_page": page,
        "has_next_page": has_next,
        "has_prev_page": has_prev,
        "next_page": page + 1 if has_next else None,
        "prev_page": page - 1 if has_prev else None,
        "limit": limit,
    }


async def list_appointments(
    db: AsyncSession,
    owner_id: UUID,
    params: AppointmentListParams,
    as_provider: bool = False,
    now: Optional[datetime] = None,
) -> dict:
    """One page of a user's (or provider's) appointments plus stats.

    ``type=upcoming`` means booked and dated today or later; ``type=past``
    means dated before today or already completed/cancelled. All filters are
    combined with AND.
    """
    today = (now or local_now()).date()
    owner_clause = (Appointment.provider_id if as_provider else Appointment.user_id) == owner_id

    conditions = [owner_clause]
    if params.status:
        conditions.append(Appointment.status == params.status)
    if params.type == "upcoming":
        conditions.append(upcoming_clause(today))
    elif params.type == "past":
        conditions.append(past_clause(today))
    if params.start_date:
        conditions.append(Appointment.date >= params.start_date)
    if params.end_date:
        conditions.append(Appointment.date <= params.end_date)
    if as_provider:
        if params.date:
            conditions.append(Appointment.date == params.date)
        if params.user_id:
            conditions.append(Appointment.user_id == params.user_id)
        if params.service_id:
            conditions.append(Appointment.service_id == params.service_id)

    total = await count_appointments(db, *conditions)

    sort_column = SORT_FIELDS.get(params.sort_by, Appointment.date)
    ordering = [sort_column.desc() if params.sort_order == "desc" else sort_column.asc()]
    if sort_column is Appointment.date:
        ordering.append(Appointment.start_time.desc() if params.sort_order == "desc" else Appointment.start_time.asc())
    ordering.append(Appointment.id)

    result = await db.execute(
        select(Appointment)
        .options(*DETAIL_OPTIONS)
        .where(*conditions)
        .order_by(*ordering)
        .offset((params.page - 1) * params.limit)
        .limit(params.limit)
    )
    appointments = list(result.scalars().all())

    return {
        "success": True,
        "data": appointments,
        "pagination": paginate(total, params.page, params.limit),
        "stats": await appointment_stats(db, owner_clause, today, include_revenue=as_provider),
    }
