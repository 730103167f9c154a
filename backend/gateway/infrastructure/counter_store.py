"""Counter Stores — key-value storage with per-key TTL backing the rate limiter.

Invariants:
    - get() returns None for missing or expired keys
    - put() replaces the whole value and resets the TTL
    - Neither store offers an atomic read-modify-write; callers must not assume one

Design Decisions:
    - SqlCounterStore upserts through session.merge so the same code runs on
      PostgreSQL and SQLite
    - InMemoryCounterStore is per-process; it suits a single uvicorn worker and tests.
      Expired keys are swept on put at most once per sweep interval, so memory
      tracks the clients seen within one window, not all clients ever seen
"""

import logging
import time
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from sqlalchemy import delete, select

from gateway.infrastructure.database import DatabaseSessionManager
from gateway.models.counter_entry import CounterEntry

logger = logging.getLogger(__name__)


class SqlCounterStore:
    """Counter store persisted in the counter_entries table."""

    def __init__(
        self,
        manager: DatabaseSessionManager,
        now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self._manager = manager
        self._now = now

    async def get(self, key: str) -> str | None:
        async with self._manager.session() as db:
            result = await db.execute(
                select(CounterEntry.value).where(
                    CounterEntry.key == key,
                    CounterEntry.expires_at > self._now(),
                ),
            )
            return result.scalar_one_or_none()

    async def put(self, key: str, value: str, ttl_seconds: int) -> None:
        expires_at = self._now() + timedelta(seconds=ttl_seconds)
        async with self._manager.session() as db:
            await db.merge(CounterEntry(key=key, value=value, expires_at=expires_at))
            await db.commit()

    async def purge_expired(self) -> int:
        """Delete expired rows. Returns the number removed."""
        async with self._manager.session() as db:
            result = await db.execute(
                delete(CounterEntry).where(CounterEntry.expires_at <= self._now()),
            )
            await db.commit()
            removed = result.rowcount or 0
        if removed:
            logger.info(f"Purged {removed} expired counter entries")
        return removed


class InMemoryCounterStore:
    """Process-local counter store with lazy expiry and a periodic sweep."""

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sweep_interval_seconds: float = 60.0,
    ):
        self._entries: dict[str, tuple[str, float]] = {}
        self._clock = clock
        self._sweep_interval = sweep_interval_seconds
        self._last_sweep = clock()

    async def get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at <= self._clock():
            self._entries.pop(key, None)
            return None
        return value

    async def put(self, key: str, value: str, ttl_seconds: int) -> None:
        now = self._clock()
        # Keys of clients that never return are only dropped here
        if now - self._last_sweep >= self._sweep_interval:
            self._sweep(now)
        self._entries[key] = (value, now + ttl_seconds)

    async def purge_expired(self) -> int:
        """Drop expired entries. Returns the number removed."""
        return self._sweep(self._clock())

    def _sweep(self, now: float) -> int:
        expired = [key for key, (_, expires_at) in self._entries.items() if expires_at <= now]
        for key in expired:
            del self._entries[key]
        self._last_sweep = now
        if expired:
            logger.debug(f"Swept {len(expired)} expired counter entries")
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)
