"""API test fixtures — the full app over httpx ASGITransport with in-memory collaborators.

Invariants:
    - Every test gets a fresh app, so counter windows and analytics never leak
    - Clock, wall time and randomness are fixed
    - Analytics tasks are drained at teardown

Design Decisions:
    - ASGITransport skips lifespan; create_app() wires services eagerly so the
      app is usable without it
"""

import random
from datetime import datetime, timezone

import pytest
from httpx import ASGITransport, AsyncClient

from gateway.config import Settings
from gateway.main import create_app
from tests.fakes import FakeClock, FakeEmailSender, RecordingSubmissionSink

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        counter_store_backend="memory",
        analytics_sink_backend="memory",
        submission_sink_backend="log",
        static_dir="/nonexistent-static-dir",
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def email_sender():
    return FakeEmailSender()


@pytest.fixture
def submission_sink():
    return RecordingSubmissionSink()


@pytest.fixture
def app_factory(settings, clock, email_sender, submission_sink):
    def build(**overrides):
        params = dict(
            email_sender=email_sender,
            submission_sink=submission_sink,
            clock=clock,
            now=lambda: NOW,
            rng=random.Random(7),
        )
        params.update(overrides)
        return create_app(settings, **params)
    return build


@pytest.fixture
def app(app_factory):
    return app_factory()


@pytest.fixture
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
    await app.state.services.supervisor.drain(timeout=1.0)
