"""Availability store: weekly working hours and blocked dates per provider.

``AvailabilityRepository`` is the only writer of the ``availability`` table.
Writes flush but do not commit; the caller owns the transaction.
"""

import logging
from datetime import date
from typing import Optional
from uuid import UUID

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, ValidationError
from app.models.availability import WeeklyRule, DateBlock
from app.utils.time_utils import time_to_minutes

logger = logging.getLogger(__name__)


class AvailabilityRepository:
    """Schedule configuration for providers."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def set_weekly_availability(
        self,
        provider_id: UUID,
        day_of_week: int,
        start_time: str,
        end_time: str,
    ) -> WeeklyRule:
        """Create or overwrite the rule for one day of week.

        Overwriting clears ``is_blocked``. Existing appointments outside the
        new hours are left untouched.
        """
        if not 0 <= day_of_week <= 6:
            raise ValidationError("dayOfWeek must be between 0 and 6")
        if time_to_minutes(start_time) >= time_to_minutes(end_time):
            raise ValidationError("startTime must be before endTime")

        rule = await self._get_weekly_rule(provider_id, day_of_week)
        if rule:
            rule.start_time = start_time
            rule.end_time = end_time
            rule.is_blocked = False
        else:
            rule = WeeklyRule(
                provider_id=provider_id,
                day_of_week=day_of_week,
                start_time=start_time,
                end_time=end_time,
                is_blocked=False,
            )
            self.db.add(rule)

        await self.db.flush()
        logger.info(
            "Weekly availability set: provider=%s day=%d %s-%s",
            provider_id, day_of_week, start_time, end_time,
        )
        return rule

    async def block_date(self, provider_id: UUID, blocked_date: date, reason: Optional[str] = None) -> DateBlock:
        """Mark a calendar date unavailable.

        Blocking an already-blocked date replaces the reason and returns the
        existing block instead of adding a duplicate.
        """
        result = await self.db.execute(
            select(DateBlock).where(
                DateBlock.provider_id == provider_id,
                DateBlock.blocked_date == blocked_date,
            )
        )
        block = result.scalar_one_or_none()
        if block:
            block.reason = reason
        else:
            block = DateBlock(provider_id=provider_id, blocked_date=blocked_date, reason=reason)
            self.db.add(block)

        await self.db.flush()
        logger.info("Date blocked: provider=%s date=%s", provider_id, blocked_date)
        return block

    async def unblock_date(self, provider_id: UUID, blocked_date: date) -> None:
        result = await self.db.execute(
            delete(DateBlock).where(
                DateBlock.provider_id == provider_id,
                DateBlock.blocked_date == blocked_date,
            )
        )
        if result.rowcount == 0:
            raise NotFoundError("Blocked date not found")
        logger.info("Date unblocked: provider=%s date=%s", provider_id, blocked_date)

    async def get_weekly_schedule(self, provider_id: UUID) -> list[WeeklyRule]:
        """Weekly rules ordered by day; days without a rule are absent."""
        result = await self.db.execute(
            select(WeeklyRule)
            .where(WeeklyRule.provider_id == provider_id)
            .order_by(WeeklyRule.day_of_week)
        )
        return list(result.scalars().all())

    async def get_blocked_dates(self, provider_id: UUID) -> list[dict]:
        result = await self.db.execute(
            select(DateBlock)
            .where(DateBlock.provider_id == provider_id)
            .order_by(DateBlock.blocked_date)
        )
        return [{"date": b.blocked_date, "reason": b.reason} for b in result.scalars().all()]

    async def is_date_blocked(self, provider_id: UUID, day: date) -> bool:
        result = await self.db.execute(
            select(DateBlock.id).where(
                DateBlock.provider_id == provider_id,
                DateBlock.blocked_date == day,
            )
        )
        return result.first() is not None

    async def is_day_available(self, provider_id: UUID, day_of_week: int) -> Optional[WeeklyRule]:
        """Weekly rule for the day, or None when the provider does not work it."""
        rule = await self._get_weekly_rule(provider_id, day_of_week)
        if rule is None or rule.is_blocked:
            return None
        return rule

    async def _get_weekly_rule(self, provider_id: UUID, day_of_week: int) -> Optional[WeeklyRule]:
        result = await self.db.execute(
            select(WeeklyRule).where(
                WeeklyRule.provider_id == provider_id,
                WeeklyRule.day_of_week == day_of_week,
            )
        )
        return result.scalar_one_or_none()
