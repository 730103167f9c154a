"""Services Container — every long-lived collaborator, built once per app.

Invariants:
    - build_services() is the only place backends are chosen from settings
    - The security header set and rate limits are resolved here, never per request
    - Explicit overrides (tests, embedding) win over settings-selected backends

Design Decisions:
    - A plain dataclass on app.state instead of FastAPI dependency overrides:
      the pipeline middleware needs the same objects outside the dependency system
"""

import logging
import random
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from gateway.config import Settings
from gateway.core.domain_types import EpochMillis, RateLimit, RateLimitTier
from gateway.core.repository_protocols import (
    AnalyticsSink, CounterStore, EmailSender, SubmissionSink,
)
from gateway.core.security_headers import SecurityHeaderSet, build_security_header_set
from gateway.infrastructure.analytics_sink import InMemoryAnalyticsSink, SqlAnalyticsSink
from gateway.infrastructure.counter_store import InMemoryCounterStore, SqlCounterStore
from gateway.infrastructure.database import DatabaseSessionManager
from gateway.infrastructure.email_client import ResendEmailClient
from gateway.infrastructure.submission_sink import LogSubmissionSink, SqlSubmissionSink
from gateway.infrastructure.task_supervisor import TaskSupervisor
from gateway.services.analytics_recorder import AnalyticsRecorder
from gateway.services.rate_limiter import SlidingWindowRateLimiter, epoch_millis

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class GatewayServices:
    settings: Settings
    counter_store: CounterStore
    rate_limiter: SlidingWindowRateLimiter
    rate_limits: dict[RateLimitTier, RateLimit]
    analytics_sink: AnalyticsSink
    analytics_recorder: AnalyticsRecorder
    submission_sink: SubmissionSink
    email_sender: EmailSender
    supervisor: TaskSupervisor
    security_headers: SecurityHeaderSet
    now: Callable[[], datetime] = utc_now
    rng: random.Random = field(default_factory=random.SystemRandom)
    db: DatabaseSessionManager | None = None

    async def startup(self) -> None:
        if self.db is not None and self.settings.is_sqlite:
            await self.db.create_tables()
        if isinstance(self.counter_store, (SqlCounterStore, InMemoryCounterStore)):
            try:
                await self.counter_store.purge_expired()
            except Exception as e:
                logger.warning(f"Counter purge skipped: {e}")

    async def shutdown(self) -> None:
        await self.supervisor.drain(self.settings.shutdown_drain_seconds)
        if isinstance(self.email_sender, ResendEmailClient):
            await self.email_sender.aclose()
        if self.db is not None:
            await self.db.dispose()


def build_services(
    settings: Settings,
    *,
    counter_store: CounterStore | None = None,
    analytics_sink: AnalyticsSink | None = None,
    submission_sink: SubmissionSink | None = None,
    email_sender: EmailSender | None = None,
    clock: Callable[[], EpochMillis] = epoch_millis,
    now: Callable[[], datetime] = utc_now,
    rng: random.Random | None = None,
) -> GatewayServices:
    """Wire collaborators according to settings, honoring explicit overrides."""
    db = None
    needs_db = (
        (counter_store is None and settings.counter_store_backend == "database")
        or (analytics_sink is None and settings.analytics_sink_backend == "database")
        or (submission_sink is None and settings.submission_sink_backend == "database")
    )
    if needs_db:
        db = DatabaseSessionManager(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )

    if counter_store is None:
        counter_store = (
            SqlCounterStore(db) if settings.counter_store_backend == "database"
            else InMemoryCounterStore()
        )
    if analytics_sink is None:
        analytics_sink = (
            SqlAnalyticsSink(db) if settings.analytics_sink_backend == "database"
            else InMemoryAnalyticsSink(settings.analytics_memory_capacity)
        )
    if submission_sink is None:
        submission_sink = (
            SqlSubmissionSink(db) if settings.submission_sink_backend == "database"
            else LogSubmissionSink()
        )
    if email_sender is None:
        email_sender = ResendEmailClient(
            api_key=settings.resend_api_key,
            api_url=settings.email_api_url,
            timeout_seconds=settings.email_timeout_seconds,
        )

    supervisor = TaskSupervisor("analytics")
    return GatewayServices(
        settings=settings,
        counter_store=counter_store,
        rate_limiter=SlidingWindowRateLimiter(counter_store, clock=clock),
        rate_limits=settings.rate_limits(),
        analytics_sink=analytics_sink,
        analytics_recorder=AnalyticsRecorder(analytics_sink, supervisor),
        submission_sink=submission_sink,
        email_sender=email_sender,
        supervisor=supervisor,
        security_headers=build_security_header_set(),
        now=now,
        rng=rng or random.SystemRandom(),
        db=db,
    )
