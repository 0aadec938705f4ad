"""Provider availability and public slot lookup endpoints."""

from datetime import date
from uuid import UUID
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import require_provider
from app.models.user import User
from app.schemas.availability import (
    WeeklyAvailabilitySet,
    DateBlockCreate,
    WeeklyRuleOut,
    BlockedDateOut,
    MyAvailability,
    SlotOut,
)
from app.schemas.common import MessageResponse
from app.services.availability import AvailabilityRepository
from app.services.slots import get_available_slots

router = APIRouter()


@router.post("/set", response_model=WeeklyRuleOut)
async def set_availability(
    data: WeeklyAvailabilitySet,
    current_user: User = Depends(require_provider),
    db: AsyncSession = Depends(get_db),
):
    """Create or replace working hours for one day of week."""
    rule = await AvailabilityRepository(db).set_weekly_availability(
        current_user.id, data.day_of_week, data.start_time, data.end_time,
    )
    await db.commit()
    return rule


@router.post("/block-date", response_model=BlockedDateOut)
async def block_date(
    data: DateBlockCreate,
    current_user: User = Depends(require_provider),
    db: AsyncSession = Depends(get_db),
):
    block = await AvailabilityRepository(db).block_date(current_user.id, data.date, data.reason)
    await db.commit()
    return BlockedDateOut(date=block.blocked_date, reason=block.reason)


@router.delete("/block-date/{blocked_date}", response_model=MessageResponse)
async def unblock_date(
    blocked_date: date,
    current_user: User = Depends(require_provider),
    db: AsyncSession = Depends(get_db),
):
    await AvailabilityRepository(db).unblock_date(current_user.id, blocked_date)
    await db.commit()
    return {"message": "Date unblocked"}


@router.get("/my-availability", response_model=MyAvailability)
async def my_availability(
    current_user: User = Depends(require_provider),
    db: AsyncSession = Depends(get_db),
):
    repo = AvailabilityRepository(db)
    return MyAvailability(
        weekly=await repo.get_weekly_schedule(current_user.id),
        blocked_dates=await repo.get_blocked_dates(current_user.id),
    )


@router.get("/available-slots", response_model=list[SlotOut])
async def available_slots(
    provider_id: UUID = Query(..., alias="providerId"),
    service_id: UUID = Query(..., alias="serviceId"),
    date: date = Query(...),
    db: AsyncSession = Depends(get_db),
):
    """Public: bookable slots for a service on a date (empty list when none)."""
    return await get_available_slots(db, provider_id, service_id, date)
