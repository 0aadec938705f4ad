"""Pydantic schemas for provider availability and slot lookup."""

import datetime as dt
from uuid import UUID

from pydantic import Field, field_validator, model_validator

from app.schemas.common import CamelModel
from app.utils.time_utils import is_valid_time


class WeeklyAvailabilitySet(CamelModel):
    """Upsert working hours for one day of week (0 = Sunday)."""
    day_of_week: int = Field(ge=0, le=6)
    start_time: str
    end_time: str

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_hhmm(cls, v):
        if not is_valid_time(v):
            raise ValueError("time must be HH:MM (00:00-23:59)")
        return v

    @model_validator(mode="after")
    def validate_window(self):
        if self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self


class DateBlockCreate(CamelModel):
    date: dt.date
    reason: str | None = None


class WeeklyRuleOut(CamelModel):
    id: UUID
    provider_id: UUID
    day_of_week: int
    start_time: str
    end_time: str
    is_blocked: bool


class BlockedDateOut(CamelModel):
    date: dt.date
    reason: str | None = None


class MyAvailability(CamelModel):
    weekly: list[WeeklyRuleOut]
    blocked_dates: list[BlockedDateOut]


class SlotOut(CamelModel):
    start_time: str
    end_time: str
    available: bool = True
