"""Dashboards, trends and reports for users and providers.

Counts come from SQL; per-day and per-service breakdowns are grouped in
Python over the appointments of the requested period.
"""

import logging
from collections import Counter, defaultdict
from datetime import date, datetime, timedelta
from typing import Optional
from uuid import UUID

from sqlalchemy import select, func, desc
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.appointment import Appointment, AppointmentStatus
from app.models.service import Service
from app.models.user import User
from app.schemas.appointment import AppointmentOut
from app.services.appointment_queries import (
    DETAIL_OPTIONS,
    appointment_price,
    completed_revenue,
    count_appointments,
    revenue_price_column,
    upcoming_clause,
)
from app.utils.time_utils import WEEKDAY_NAMES, day_of_week, hour_bucket_label, local_now, time_to_minutes

logger = logging.getLogger(__name__)

PERIOD_DAYS = {"week": 7, "month": 30, "year": 365}
STATUS_KEYS = [s.value for s in AppointmentStatus]


def _rate(part: int, whole: int) -> float:
    """Percentage rounded to one decimal, 0 when there is nothing to divide."""
    return round(part / whole * 100, 1) if whole > 0 else 0


def _empty_status_counts() -> dict:
    return {**{key: 0 for key in STATUS_KEYS}, "total": 0}


def _serialize(appointments) -> list[AppointmentOut]:
    return [AppointmentOut.model_validate(a) for a in appointments]


def busiest_times(start_times: list[str], top: int = 5) -> dict:
    """Rank start hours ("9 AM", "2 PM") by number of appointments."""
    counts = Counter(hour_bucket_label(time_to_minutes(t) // 60) for t in start_times)
    total = len(start_times)
    return {
        "timeSlots": [
            {"time": label, "count": count, "percentage": round(count / total * 100) if total else 0}
            for label, count in counts.most_common(top)
        ],
        "totalCount": total,
    }


async def _status_counts(db: AsyncSession, owner_clause) -> dict:
    return {
        "total": await count_appointments(db, owner_clause),
        "booked": await count_appointments(db, owner_clause, Appointment.status == AppointmentStatus.BOOKED),
        "completed": await count_appointments(db, owner_clause, Appointment.status == AppointmentStatus.COMPLETED),
        "cancelled": await count_appointments(db, owner_clause, Appointment.status == AppointmentStatus.CANCELLED),
    }


async def _grouped_by_status(db: AsyncSession, *conditions) -> dict:
    result = await db.execute(
        select(Appointment.status, func.count(Appointment.id))
        .where(*conditions)
        .group_by(Appointment.status)
    )
    counts = _empty_status_counts()
    for status, count in result.all():
        counts[status.value] = count
        counts["total"] += count
    return counts


async def _fetch(db: AsyncSession, *conditions, order_by=(), limit: Optional[int] = None) -> list[Appointment]:
    stmt = select(Appointment).options(*DETAIL_OPTIONS).where(*conditions).order_by(*order_by)
    if limit:
        stmt = stmt.limit(limit)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def _active_clients(db: AsyncSession, provider_id: UUID) -> int:
    result = await db.execute(
        select(func.count(func.distinct(Appointment.user_id))).where(Appointment.provider_id == provider_id)
    )
    return result.scalar() or 0


# ============================================================================
# DASHBOARDS
# ============================================================================

async def user_dashboard(db: AsyncSession, user_id: UUID, now: Optional[datetime] = None) -> dict:
    today = (now or local_now()).date()
    owner = Appointment.user_id == user_id

    counts = await _status_counts(db, owner)
    today_count = await count_appointments(
        db, owner, Appointment.date == today, Appointment.status == AppointmentStatus.BOOKED,
    )
    upcoming_count = await count_appointments(db, owner, upcoming_clause(today))

    recent = await _fetch(db, owner, order_by=(Appointment.date.desc(), Appointment.start_time.desc()), limit=5)
    upcoming = await _fetch(
        db, owner, upcoming_clause(today),
        order_by=(Appointment.date.asc(), Appointment.start_time.asc()), limit=10,
    )

    return {
        "success": True,
        "data": {
            "stats": {
                **counts,
                "today": today_count,
                "upcoming": upcoming_count,
                "completionRate": _rate(counts["completed"], counts["total"]),
                "cancellationRate": _rate(counts["cancelled"], counts["total"]),
            },
            "recentAppointments": _serialize(recent),
            "upcomingAppointments": _serialize(upcoming),
            "summary": {
                "hasUpcoming": upcoming_count > 0,
                "hasRecent": len(recent) > 0,
            },
        },
    }


async def provider_dashboard(db: AsyncSession, provider_id: UUID, now: Optional[datetime] = None) -> dict:
    today = (now or local_now()).date()
    owner = Appointment.provider_id == provider_id

    counts = await _status_counts(db, owner)
    today_count = await count_appointments(
        db, owner, Appointment.date == today, Appointment.status == AppointmentStatus.BOOKED,
    )
    upcoming_count = await count_appointments(db, owner, upcoming_clause(today))
    total_revenue = float(await completed_revenue(db, owner))

    active_services = (await db.execute(
        select(func.count(Service.id)).where(Service.provider_id == provider_id, Service.is_active.is_(True))
    )).scalar() or 0

    recent = await _fetch(db, owner, order_by=(Appointment.date.desc(), Appointment.start_time.desc()), limit=5)
    todays_schedule = await _fetch(
        db, owner, Appointment.date == today, Appointment.status == AppointmentStatus.BOOKED,
        order_by=(Appointment.start_time.asc(),),
    )

    price = revenue_price_column()
    popular_rows = (await db.execute(
        select(
            Service.id,
            Service.name,
            func.count(Appointment.id).label("count"),
            func.coalesce(func.sum(price), 0).label("revenue"),
        )
        .select_from(Appointment)
        .join(Service, Service.id == Appointment.service_id)
        .where(owner, Appointment.status == AppointmentStatus.COMPLETED)
        .group_by(Service.id, Service.name)
        .order_by(desc("count"))
        .limit(5)
    )).all()
    popular_services = [
        {"serviceId": row.id, "serviceName": row.name, "count": row.count, "revenue": round(float(row.revenue), 2)}
        for row in popular_rows
    ]

    completed = counts["completed"]
    return {
        "success": True,
        "data": {
            "stats": {
                **counts,
                "today": today_count,
                "upcoming": upcoming_count,
                "completionRate": _rate(completed, counts["total"]),
                "cancellationRate": _rate(counts["cancelled"], counts["total"]),
                "totalRevenue": round(total_revenue, 2),
                "averageRevenue": round(total_revenue / completed, 2) if completed else 0,
                "activeClients": await _active_clients(db, provider_id),
                "activeServices": active_services,
            },
            "recentAppointments": _serialize(recent),
            "todaysSchedule": _serialize(todays_schedule),
            "popularServices": popular_services,
            "summary": {
                "hasUpcoming": upcoming_count > 0,
                "hasScheduleToday": len(todays_schedule) > 0,
                "hasPopularServices": len(popular_services) > 0,
            },
        },
    }


async def dashboard_trends(
    db: AsyncSession,
    owner_id: UUID,
    period: str = "week",
    as_provider: bool = False,
    now: Optional[datetime] = None,
) -> dict:
    """Per-day counts by status for the last week, month or year.

    Providers also get revenue per day and per service.
    """
    end = now or local_now()
    start = end - timedelta(days=PERIOD_DAYS.get(period, PERIOD_DAYS["week"]))
    owner = (Appointment.provider_id if as_provider else Appointment.user_id) == owner_id

    appointments = await _fetch(
        db, owner, Appointment.date >= start.date(), Appointment.date <= end.date(),
        order_by=(Appointment.date.asc(), Appointment.start_time.asc()),
    )

    by_date: dict[date, dict] = {}
    status_counts = {key: 0 for key in STATUS_KEYS}
    revenue_by_service: dict[str, dict] = defaultdict(lambda: {"revenue": 0.0, "count": 0})
    total_revenue = 0.0

    for appt in appointments:
        day = by_date.setdefault(appt.date, {**_empty_status_counts(), "revenue": 0.0})
        day[appt.status.value] += 1
        day["total"] += 1
        status_counts[appt.status.value] += 1

        if as_provider and appt.status == AppointmentStatus.COMPLETED and appt.service:
            revenue = float(appointment_price(appt))
            day["revenue"] += revenue
            total_revenue += revenue
            revenue_by_service[appt.service.name]["revenue"] += revenue
            revenue_by_service[appt.service.name]["count"] += 1

    chart_data = []
    for day, values in sorted(by_date.items()):
        row = {"date": day.isoformat(), **values}
        if not as_provider:
            row.pop("revenue")
        chart_data.append(row)

    data = {
        "period": {"start": start, "end": end},
        "chartData": chart_data,
        "statusCounts": status_counts,
        "total": len(appointments),
    }
    if as_provider:
        data["totalRevenue"] = round(total_revenue, 2)
        data["revenueByService"] = dict(revenue_by_service)
        data["summary"] = {
            "averageDailyRevenue": round(total_revenue / len(by_date), 2) if by_date else 0,
            "completionRate": _rate(status_counts["completed"], len(appointments)),
        }
    return {"success": True, "data": data}


async def provider_overview(db: AsyncSession, provider_id: UUID, now: Optional[datetime] = None) -> dict:
    """Today vs yesterday, this week per weekday, and top clients by spend."""
    today = (now or local_now()).date()
    yesterday = today - timedelta(days=1)
    week_start = today - timedelta(days=day_of_week(today))
    week_end = week_start + timedelta(days=7)
    owner = Appointment.provider_id == provider_id

    today_stats = await _grouped_by_status(db, owner, Appointment.date == today)
    yesterday_stats = await _grouped_by_status(db, owner, Appointment.date == yesterday)

    weekly = {name: _empty_status_counts() for name in WEEKDAY_NAMES}
    week_rows = (await db.execute(
        select(Appointment.date, Appointment.status, func.count(Appointment.id))
        .where(owner, Appointment.date >= week_start, Appointment.date < week_end)
        .group_by(Appointment.date, Appointment.status)
    )).all()
    for day, status, count in week_rows:
        bucket = weekly[WEEKDAY_NAMES[day_of_week(day)]]
        bucket[status.value] += count
        bucket["total"] += count

    price = revenue_price_column()
    client_rows = (await db.execute(
        select(
            User.id,
            User.name,
            User.email,
            func.count(Appointment.id).label("total_appointments"),
            func.coalesce(func.sum(price), 0).label("total_spent"),
        )
        .select_from(Appointment)
        .join(User, User.id == Appointment.user_id)
        .join(Service, Service.id == Appointment.service_id)
        .where(owner, Appointment.status == AppointmentStatus.COMPLETED)
        .group_by(User.id, User.name, User.email)
        .order_by(desc("total_spent"))
        .limit(5)
    )).all()
    top_clients = [
        {
            "userId": row.id,
            "name": row.name,
            "email": row.email,
            "totalAppointments": row.total_appointments,
            "totalSpent": round(float(row.total_spent), 2),
        }
        for row in client_rows
    ]

    return {
        "success": True,
        "data": {
            "today": today_stats,
            "yesterday": yesterday_stats,
            "weekly": weekly,
            "topClients": top_clients,
            "quickStats": {
                "hasTodayAppointments": today_stats["total"] > 0,
                "hasWeeklyData": len(week_rows) > 0,
                "hasTopClients": len(top_clients) > 0,
            },
        },
    }


# ============================================================================
# REPORTS
# ============================================================================

async def provider_report(db: AsyncSession, provider_id: UUID, now: Optional[datetime] = None) -> dict:
    today = (now or local_now()).date()
    owner = Appointment.provider_id == provider_id
    counts = await _status_counts(db, owner)

    start_times = (await db.execute(
        select(Appointment.start_time).where(
            owner,
            Appointment.status.in_((AppointmentStatus.COMPLETED, AppointmentStatus.BOOKED)),
        )
    )).scalars().all()

    return {
        "todayAppointments": await count_appointments(
            db, owner, Appointment.date == today, Appointment.status == AppointmentStatus.BOOKED,
        ),
        "totalAppointments": counts["total"],
        "completedAppointments": counts["completed"],
        "cancelledAppointments": counts["cancelled"],
        "bookedAppointments": counts["booked"],
        "totalRevenue": round(float(await completed_revenue(db, owner)), 2),
        "activeClients": await _active_clients(db, provider_id),
        "completionRate": counts["completed"] / max(1, counts["total"]),
        "busiestTimes": busiest_times(list(start_times)),
    }


async def user_report(db: AsyncSession, user_id: UUID, now: Optional[datetime] = None) -> dict:
    today = (now or local_now()).date()
    owner = Appointment.user_id == user_id
    counts = await _status_counts(db, owner)

    return {
        "totalBooked": counts["booked"],
        "totalCompleted": counts["completed"],
        "totalCancelled": counts["cancelled"],
        "upcomingAppointments": await count_appointments(db, owner, upcoming_clause(today)),
        "todayAppointments": await count_appointments(
            db, owner, Appointment.date == today, Appointment.status == AppointmentStatus.BOOKED,
        ),
        "cancellationRate": counts["cancelled"] / max(1, counts["total"]),
        "totalAll": counts["total"],
    }
