"""Service catalog: providers manage the services users can book."""

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import NotFoundError
from app.models.service import Service
from app.schemas.service import ServiceCreate, ServiceUpdate
from app.services.appointment_queries import paginate

logger = logging.getLogger(__name__)

SORT_FIELDS = {
    "createdAt": Service.created_at,
    "created_at": Service.created_at,
    "name": Service.name,
    "price": Service.price,
    "duration": Service.duration_minutes,
    "durationMinutes": Service.duration_minutes,
}


async def create_service(db: AsyncSession, provider_id: UUID, data: ServiceCreate) -> Service:
    service = Service(provider_id=provider_id, **data.model_dump())
    db.add(service)
    await db.commit()
    await db.refresh(service)
    logger.info("Service created: id=%s provider=%s name=%s", service.id, provider_id, service.name)
    return service


async def get_owned_service(db: AsyncSession, service_id: UUID, provider_id: UUID) -> Service:
    result = await db.execute(
        select(Service).where(Service.id == service_id, Service.provider_id == provider_id)
    )
    service = result.scalar_one_or_none()
    if not service:
        raise NotFoundError("Service not found")
    return service


async def get_bookable_service(db: AsyncSession, service_id: UUID, provider_id: UUID) -> Service:
    """Active service offered by ``provider_id``; anything else is not found."""
    service = await db.get(Service, service_id)
    if not service or not service.is_active or service.provider_id != provider_id:
        raise NotFoundError("Service not found")
    return service


async def update_service(db: AsyncSession, service_id: UUID, provider_id: UUID, data: ServiceUpdate) -> Service:
    service = await get_owned_service(db, service_id, provider_id)
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(service, key, value)
    await db.commit()
    await db.refresh(service)
    return service


async def deactivate_service(db: AsyncSession, service_id: UUID, provider_id: UUID) -> None:
    """Soft delete: existing appointments keep pointing at the service."""
    service = await get_owned_service(db, service_id, provider_id)
    service.is_active = False
    await db.commit()
    logger.info("Service deactivated: id=%s provider=%s", service_id, provider_id)


async def list_services(
    db: AsyncSession,
    page: int = 1,
    limit: int = 10,
    search: str = "",
    sort_by: str = "createdAt",
    sort_order: str = "desc",
    provider_id: Optional[UUID] = None,
    min_price: Optional[Decimal] = None,
    max_price: Optional[Decimal] = None,
    min_duration: Optional[int] = None,
    max_duration: Optional[int] = None,
) -> dict:
    """Active services, optionally for one provider, with search and bounds."""
    conditions = [Service.is_active.is_(True)]
    if provider_id:
        conditions.append(Service.provider_id == provider_id)
    if search:
        pattern = f"%{search}%"
        conditions.append(or_(Service.name.ilike(pattern), Service.description.ilike(pattern)))
    if min_price is not None:
        conditions.append(Service.price >= min_price)
    if max_price is not None:
        conditions.append(Service.price <= max_price)
    if min_duration is not None:
        conditions.append(Service.duration_minutes >= min_duration)
    if max_duration is not None:
        conditions.append(Service.duration_minutes <= max_duration)

    total = (await db.execute(select(func.count(Service.id)).where(*conditions))).scalar() or 0

    sort_column = SORT_FIELDS.get(sort_by, Service.created_at)
    result = await db.execute(
        select(Service)
        .options(selectinload(Service.provider))
        .where(*conditions)
        .order_by(sort_column.desc() if sort_order == "desc" else sort_column.asc(), Service.id)
        .offset((page - 1) * limit)
        .limit(limit)
    )

    return {
        "data": list(result.scalars().all()),
        "pagination": paginate(total, page, limit),
    }
