"""Per-(provider, date) serialization for the booking commit.

Two layers:
- an in-process ``asyncio.Lock`` so concurrent requests handled by the same
  worker never interleave their check-then-insert;
- on PostgreSQL, ``pg_advisory_xact_lock`` so requests handled by different
  workers serialize too. The advisory lock is released when the surrounding
  transaction commits or rolls back.

The partial unique index on appointments remains the final guard.
"""

import asyncio
import hashlib
import logging
from contextlib import asynccontextmanager
from datetime import date
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


def advisory_key(provider_id: UUID, day: date) -> int:
    """Stable signed 64-bit key for pg_advisory_xact_lock."""
    digest = hashlib.sha256(f"{provider_id}:{day.isoformat()}".encode()).digest()
    return int.from_bytes(digest[:8], "big", signed=True)


class BookingLocks:
    """Registry of in-process locks, dropped once nobody holds or waits on them."""

    def __init__(self):
        self._locks: dict[tuple[UUID, date], asyncio.Lock] = {}
        self._users: dict[tuple[UUID, date], int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, db: AsyncSession, provider_id: UUID, day: date):
        key = (provider_id, day)
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                if db.bind is not None and db.bind.dialect.name == "postgresql":
                    await db.execute(
                        text("SELECT pg_advisory_xact_lock(:key)"),
                        {"key": advisory_key(provider_id, day)},
                    )
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]


booking_locks = BookingLocks()
