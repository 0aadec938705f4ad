"""Pydantic schemas for the service catalog."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import Field

from app.models.service import MIN_DURATION_MINUTES, MAX_DURATION_MINUTES
from app.schemas.common import CamelModel, Pagination


class ServiceCreate(CamelModel):
    name: str = Field(min_length=1)
    description: str | None = None
    duration_minutes: int = Field(ge=MIN_DURATION_MINUTES, le=MAX_DURATION_MINUTES)
    price: Decimal = Field(ge=0, decimal_places=2)


class ServiceUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    duration_minutes: int | None = Field(default=None, ge=MIN_DURATION_MINUTES, le=MAX_DURATION_MINUTES)
    price: Decimal | None = Field(default=None, ge=0, decimal_places=2)


class ProviderSummary(CamelModel):
    id: UUID
    name: str
    email: str
    phone: str | None = None


class ServiceOut(CamelModel):
    id: UUID
    provider_id: UUID
    name: str
    description: str | None = None
    duration_minutes: int
    price: float
    is_active: bool
    created_at: datetime | None = None


class ServiceWithProvider(ServiceOut):
    provider: ProviderSummary | None = None


class ServiceList(CamelModel):
    data: list[ServiceWithProvider]
    pagination: Pagination
