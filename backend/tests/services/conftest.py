"""Service test fixtures — in-memory collaborators wired through build_services.

Invariants:
    - No database, no network: every backend is in-memory or a fake
    - Clock and wall time are fixed so windows and booking dates are deterministic
"""

import random
from datetime import datetime, timezone

import pytest

from gateway.config import Settings
from gateway.core.request_state import RequestMeta, StageTracker
from gateway.services.container import build_services
from tests.fakes import FakeClock, FakeEmailSender, RecordingSubmissionSink

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        counter_store_backend="memory",
        analytics_sink_backend="memory",
        submission_sink_backend="log",
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
def services(settings, clock, email_sender, submission_sink):
    return build_services(
        settings,
        email_sender=email_sender,
        submission_sink=submission_sink,
        clock=clock,
        now=lambda: NOW,
        rng=random.Random(7),
    )


@pytest.fixture
def meta():
    return RequestMeta(
        request_id="req-1", client_ip="203.0.113.7", country="DE", user_agent="pytest",
    )


@pytest.fixture
def tracker():
    return StageTracker()
