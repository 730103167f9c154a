"""Analytics Sinks — where serialized AnalyticsEvent records end up.

Invariants:
    - write() takes the dict produced by AnalyticsEvent.to_record()
    - fetch_since() returns records in the same shape, oldest first
    - Sinks may raise; the recorder is responsible for swallowing failures
"""

from collections import deque
from datetime import datetime

from sqlalchemy import select

from gateway.infrastructure.database import DatabaseSessionManager
from gateway.models.analytics_event import AnalyticsEventRow


def _row_to_record(row: AnalyticsEventRow) -> dict:
    return {
        "endpoint": row.endpoint,
        "method": row.method,
        "country": row.country,
        "status": row.status,
        "responseTimeMs": row.response_time_ms,
        "success": row.success,
        "rateLimited": row.rate_limited,
        "requestId": row.request_id,
        "timestamp": row.occurred_at.isoformat(),
    }


class SqlAnalyticsSink:
    """Appends one analytics_events row per record."""

    def __init__(self, manager: DatabaseSessionManager):
        self._manager = manager

    async def write(self, record: dict) -> None:
        row = AnalyticsEventRow(
            endpoint=record["endpoint"][:255],
            method=record["method"],
            country=record["country"][:8],
            status=record["status"],
            response_time_ms=record["responseTimeMs"],
            success=record["success"],
            rate_limited=record["rateLimited"],
            request_id=record["requestId"],
            occurred_at=datetime.fromisoformat(record["timestamp"]),
        )
        async with self._manager.session() as db:
            db.add(row)
            await db.commit()

    async def fetch_since(self, since: datetime) -> list[dict]:
        async with self._manager.session() as db:
            result = await db.execute(
                select(AnalyticsEventRow)
                .where(AnalyticsEventRow.occurred_at >= since)
                .order_by(AnalyticsEventRow.occurred_at),
            )
            return [_row_to_record(row) for row in result.scalars().all()]


class InMemoryAnalyticsSink:
    """Bounded in-process buffer; oldest records are dropped at capacity."""

    def __init__(self, capacity: int = 10_000):
        self.records: deque[dict] = deque(maxlen=capacity)

    async def write(self, record: dict) -> None:
        self.records.append(dict(record))

    async def fetch_since(self, since: datetime) -> list[dict]:
        return [
            dict(r) for r in self.records
            if datetime.fromisoformat(r["timestamp"]) >= since
        ]
