"""Pydantic schemas for Appointments."""

import datetime as dt
from uuid import UUID

from pydantic import Field, field_validator

from app.models.appointment import AppointmentStatus, CancelledBy
from app.schemas.common import CamelModel, Pagination


class AppointmentCreate(CamelModel):
    """Schema for booking an appointment."""
    provider_id: UUID
    service_id: UUID
    date: dt.date
    start_time: str
    notes: str | None = None


class StatusUpdate(CamelModel):
    status: AppointmentStatus


class PartySummary(CamelModel):
    id: UUID
    name: str
    email: str
    phone: str | None = None


class ServiceSummary(CamelModel):
    id: UUID
    name: str
    duration_minutes: int
    price: float


class AppointmentOut(CamelModel):
    """Schema for returning appointment details."""
    id: UUID
    user_id: UUID
    provider_id: UUID
    service_id: UUID
    date: dt.date
    start_time: str
    end_time: str
    status: AppointmentStatus
    notes: str | None = None
    cancelled_at: dt.datetime | None = None
    cancelled_by: CancelledBy | None = None
    created_at: dt.datetime | None = None
    user: PartySummary | None = None
    provider: PartySummary | None = None
    service: ServiceSummary | None = None


class AppointmentStats(CamelModel):
    total: int
    today: int
    upcoming: int
    past: int
    booked: int
    completed: int
    cancelled: int
    past_booked: int
    total_revenue: float | None = None


class AppointmentPage(CamelModel):
    success: bool = True
    data: list[AppointmentOut]
    pagination: Pagination
    stats: AppointmentStats


class AppointmentListParams(CamelModel):
    """Filters, sorting and paging for appointment listings."""
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)
    status: AppointmentStatus | None = None
    type: str | None = None
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    sort_by: str = "date"
    sort_order: str = "desc"
    # Provider-side extras
    date: dt.date | None = None
    user_id: UUID | None = None
    service_id: UUID | None = None

    @field_validator("type")
    @classmethod
    def validate_type(cls, v):
        if v is not None and v not in ("upcoming", "past"):
            raise ValueError("type must be 'upcoming' or 'past'")
        return v

    @field_validator("sort_order")
    @classmethod
    def validate_sort_order(cls, v):
        if v not in ("asc", "desc"):
            raise ValueError("sortOrder must be 'asc' or 'desc'")
        return v

