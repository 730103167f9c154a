"""Health Handler — verifies collaborator status reporting without 5xx."""

import asyncio

from gateway.services.handle_health import check_health
from tests.fakes import FailingCounterStore, FakeEmailSender


async def test_healthy_with_working_store(services):
    body = await check_health(services)
    assert body["status"] == "healthy"
    assert body["services"] == {"database": "operational", "email": "operational"}
    assert body["version"] == "1.0.0"
    assert body["timestamp"] == "2026-10-18T12:00:00+00:00"


async def test_store_failure_degrades(services):
    services.counter_store = FailingCounterStore()
    body = await check_health(services)
    assert body["status"] == "degraded"
    assert body["services"]["database"] == "degraded"


async def test_unconfigured_email_is_reported(services):
    services.email_sender = FakeEmailSender(configured=False)
    body = await check_health(services)
    assert body["services"]["email"] == "not_configured"
    assert body["status"] == "healthy"


class _Database:
    def __init__(self, alive: bool = True, delay: float = 0.0):
        self.alive = alive
        self.delay = delay

    async def health_check(self) -> bool:
        await asyncio.sleep(self.delay)
        return self.alive


async def test_live_database_is_operational(services):
    services.db = _Database()
    body = await check_health(services)
    assert body["services"]["database"] == "operational"


async def test_unreachable_database_degrades(services):
    services.db = _Database(alive=False)
    body = await check_health(services)
    assert body["status"] == "degraded"
    assert body["services"]["database"] == "degraded"


async def test_slow_database_degrades(services, monkeypatch):
    monkeypatch.setattr("gateway.services.handle_health.PROBE_TIMEOUT_SECONDS", 0.01)
    services.db = _Database(delay=0.5)
    body = await check_health(services)
    assert body["services"]["database"] == "degraded"
