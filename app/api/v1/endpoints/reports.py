"""Report endpoints: totals, revenue and busiest times."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import get_current_user, require_provider
from app.models.user import User
from app.services import reports

router = APIRouter()


@router.get("/provider")
async def provider_report(
    current_user: User = Depends(require_provider),
    db: AsyncSession = Depends(get_db),
):
    return await reports.provider_report(db, current_user.id)


@router.get("/user")
async def user_report(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await reports.user_report(db, current_user.id)
