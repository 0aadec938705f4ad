"""Dashboard endpoints for users and providers."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import get_current_user, require_provider
from app.models.user import User
from app.services import reports

router = APIRouter()

PERIOD_PATTERN = "^(week|month|year)$"


@router.get("/user")
async def user_dashboard(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await reports.user_dashboard(db, current_user.id)


@router.get("/user/trends")
async def user_trends(
    period: str = Query("week", pattern=PERIOD_PATTERN),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await reports.dashboard_trends(db, current_user.id, period)


@router.get("/provider")
async def provider_dashboard(
    current_user: User = Depends(require_provider),
    db: AsyncSession = Depends(get_db),
):
    return await reports.provider_dashboard(db, current_user.id)


@router.get("/provider/trends")
async def provider_trends(
    period: str = Query("week", pattern=PERIOD_PATTERN),
    current_user: User = Depends(require_provider),
    db: AsyncSession = Depends(get_db),
):
    return await reports.dashboard_trends(db, current_user.id, period, as_provider=True)


@router.get("/provider/overview")
async def provider_overview(
    current_user: User = Depends(require_provider),
    db: AsyncSession = Depends(get_db),
):
    return await reports.provider_overview(db, current_user.id)
