"""Provider availability: weekly working-hours rules and one-off date blocks.

Both variants share the ``availability`` table and are told apart by the
``kind`` column (single-table inheritance):

- ``WeeklyRule``: recurring hours for one day of week (0 = Sunday .. 6).
- ``DateBlock``: a calendar date on which the provider does not work. Stored
  with ``day_of_week = -1`` and ``is_blocked = True`` so the table stays
  readable by older tooling that keyed on the sentinel.
"""

from sqlalchemy import (
    Column, String, DateTime, Integer, Boolean, Date, Text, ForeignKey,
    CheckConstraint, Index, text,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import validates
import uuid
from datetime import datetime
from app.core.database import Base

DATE_BLOCK_SENTINEL = -1


class AvailabilityRule(Base):
    __tablename__ = "availability"
    __table_args__ = (
        CheckConstraint(
            "(kind = 'weekly' AND day_of_week BETWEEN 0 AND 6) "
            "OR (kind = 'date_block' AND day_of_week = -1 AND blocked_date IS NOT NULL)",
            name="ck_availability_variant",
        ),
        # One weekly rule per provider/day, one block per provider/date
        Index(
            "uq_availability_weekly_day", "provider_id", "day_of_week", unique=True,
            postgresql_where=text("kind = 'weekly'"), sqlite_where=text("kind = 'weekly'"),
        ),
        Index(
            "uq_availability_blocked_date", "provider_id", "blocked_date", unique=True,
            postgresql_where=text("kind = 'date_block'"), sqlite_where=text("kind = 'date_block'"),
        ),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    provider_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    kind = Column(String(16), nullable=False)
    day_of_week = Column(Integer, nullable=False)
    start_time = Column(String(5), nullable=False, default="00:00")
    end_time = Column(String(5), nullable=False, default="23:59")
    is_blocked = Column(Boolean, nullable=False, default=False)
    blocked_date = Column(Date, nullable=True)
    reason = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __mapper_args__ = {"polymorphic_on": kind}


class WeeklyRule(AvailabilityRule):
    __mapper_args__ = {"polymorphic_identity": "weekly"}

    @validates("day_of_week")
    def validate_day_of_week(self, key, value):
        if value is None or not 0 <= value <= 6:
            raise ValueError("day_of_week must be between 0 and 6 for a weekly rule")
        return value


class DateBlock(AvailabilityRule):
    __mapper_args__ = {"polymorphic_identity": "date_block"}

    def __init__(self, **kwargs):
        if kwargs.get("blocked_date") is None:
            raise ValueError("blocked_date is required for a date block")
        kwargs["day_of_week"] = DATE_BLOCK_SENTINEL
        kwargs["is_blocked"] = True
        kwargs.setdefault("start_time", "00:00")
        kwargs.setdefault("end_time", "23:59")
        super().__init__(**kwargs)
