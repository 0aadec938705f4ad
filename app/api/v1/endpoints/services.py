"""Service catalog endpoints."""

from decimal import Decimal
from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import require_provider
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.service import ServiceCreate, ServiceUpdate, ServiceOut, ServiceList
from app.services import catalog

router = APIRouter()


@router.post("/", response_model=ServiceOut, status_code=201)
async def create_service(
    data: ServiceCreate,
    current_user: User = Depends(require_provider),
    db: AsyncSession = Depends(get_db),
):
    return await catalog.create_service(db, current_user.id, data)


@router.get("/", response_model=ServiceList)
async def list_all_services(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: str = Query(""),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder", pattern="^(asc|desc)$"),
    provider_id: Optional[UUID] = Query(None, alias="providerId"),
    min_price: Optional[Decimal] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[Decimal] = Query(None, alias="maxPrice", ge=0),
    min_duration: Optional[int] = Query(None, alias="minDuration", ge=0),
    max_duration: Optional[int] = Query(None, alias="maxDuration", ge=0),
    db: AsyncSession = Depends(get_db),
):
    """Public listing of active services."""
    return await catalog.list_services(
        db,
        page=page,
        limit=limit,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
        provider_id=provider_id,
        min_price=min_price,
        max_price=max_price,
        min_duration=min_duration,
        max_duration=max_duration,
    )


@router.get("/mine", response_model=ServiceList)
async def list_my_services(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: str = Query(""),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder", pattern="^(asc|desc)$"),
    current_user: User = Depends(require_provider),
    db: AsyncSession = Depends(get_db),
):
    return await catalog.list_services(
        db,
        page=page,
        limit=limit,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
        provider_id=current_user.id,
    )


@router.put("/{service_id}", response_model=ServiceOut)
async def update_service(
    service_id: UUID,
    data: ServiceUpdate,
    current_user: User = Depends(require_provider),
    db: AsyncSession = Depends(get_db),
):
    return await catalog.update_service(db, service_id, current_user.id, data)


@router.delete("/{service_id}", response_model=MessageResponse)
async def delete_service(
    service_id: UUID,
    current_user: User = Depends(require_provider),
    db: AsyncSession = Depends(get_db),
):
    """Soft delete: the service disappears from listings but past bookings keep it."""
    await catalog.deactivate_service(db, service_id, current_user.id)
    return {"message": "Service deleted successfully"}
