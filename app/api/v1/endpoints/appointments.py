"""Appointment booking, cancellation and listing endpoints."""

import logging
from datetime import date
from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import get_current_user, require_provider
from app.models.appointment import AppointmentStatus
from app.models.user import User
from app.schemas.appointment import (
    AppointmentCreate,
    AppointmentOut,
    AppointmentPage,
    AppointmentListParams,
    StatusUpdate,
)
from app.schemas.common import MessageResponse
from app.services.appointment_queries import get_appointment_detail, list_appointments
from app.services.booking import book_appointment
from app.services.lifecycle import cancel_appointment, update_status

router = APIRouter()
logger = logging.getLogger(__name__)


def _list_params(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[AppointmentStatus] = Query(None),
    type: Optional[str] = Query(None, pattern="^(upcoming|past)$"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    sort_by: str = Query("date", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder", pattern="^(asc|desc)$"),
) -> AppointmentListParams:
    return AppointmentListParams(
        page=page,
        limit=limit,
        status=status,
        type=type,
        start_date=start_date,
        end_date=end_date,
        sort_by=sort_by,
        sort_order=sort_order,
    )


# ============================================================================
# USER
# ============================================================================

@router.post("/book", response_model=AppointmentOut, status_code=201)
async def book(
    data: AppointmentCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Book a slot; 400 when the provider is unavailable or the slot is taken."""
    appointment = await book_appointment(
        db,
        user_id=current_user.id,
        provider_id=data.provider_id,
        service_id=data.service_id,
        target_date=data.date,
        start_time=data.start_time,
        notes=data.notes,
    )
    return await get_appointment_detail(db, appointment.id)


@router.get("/my-appointments", response_model=AppointmentPage)
async def my_appointments(
    params: AppointmentListParams = Depends(_list_params),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await list_appointments(db, current_user.id, params)


@router.put("/cancel/{appointment_id}", response_model=MessageResponse)
async def cancel(
    appointment_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await cancel_appointment(db, appointment_id, current_user.id)
    return {"message": "Appointment cancelled successfully"}


# ============================================================================
# PROVIDER
# ============================================================================

@router.get("/provider-appointments", response_model=AppointmentPage)
async def provider_appointments(
    params: AppointmentListParams = Depends(_list_params),
    on_date: Optional[date] = Query(None, alias="date"),
    user_id: Optional[UUID] = Query(None, alias="userId"),
    service_id: Optional[UUID] = Query(None, alias="serviceId"),
    current_user: User = Depends(require_provider),
    db: AsyncSession = Depends(get_db),
):
    params = params.model_copy(update={"date": on_date, "user_id": user_id, "service_id": service_id})
    return await list_appointments(db, current_user.id, params, as_provider=True)


@router.put("/update-status/{appointment_id}", response_model=AppointmentOut)
async def provider_update_status(
    appointment_id: UUID,
    data: StatusUpdate,
    current_user: User = Depends(require_provider),
    db: AsyncSession = Depends(get_db),
):
    """Complete or cancel one of the provider's appointments."""
    await update_status(db, appointment_id, current_user.id, data.status)
    return await get_appointment_detail(db, appointment_id)
