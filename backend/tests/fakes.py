"""Test doubles for the gateway's collaborators.

Invariants:
    - Fakes implement the same protocols as the real stores and clients
    - Failing fakes raise on every call so fail-open paths are exercised
"""

import asyncio

from gateway.core.domain_types import EpochMillis
from gateway.core.format_email import EmailMessage
from gateway.core.repository_protocols import EmailResult
from gateway.infrastructure.counter_store import InMemoryCounterStore


class FakeClock:
    """Epoch-millisecond clock that only moves when told to."""

    def __init__(self, start_ms: int = 1_760_788_800_000):
        self.now_ms = start_ms

    def __call__(self) -> EpochMillis:
        return EpochMillis(self.now_ms)

    def advance(self, seconds: float) -> None:
        self.now_ms += int(seconds * 1000)


class FakeEmailSender:
    def __init__(
        self,
        configured: bool = True,
        result: EmailResult | None = None,
        delay: float = 0.0,
        raises: Exception | None = None,
    ):
        self._configured = configured
        self.result = result or EmailResult(ok=True, message_id="msg_1")
        self.delay = delay
        self.raises = raises
        self.sent: list[EmailMessage] = []

    @property
    def configured(self) -> bool:
        return self._configured

    async def send(self, message: EmailMessage) -> EmailResult:
        self.sent.append(message)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.raises is not None:
            raise self.raises
        return self.result


class FailingCounterStore:
    def __init__(self, fail_reads: bool = True, fail_writes: bool = True):
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes
        self.writes: list[tuple[str, str, int]] = []

    async def get(self, key: str) -> str | None:
        if self.fail_reads:
            raise ConnectionError("counter store unreachable")
        return None

    async def put(self, key: str, value: str, ttl_seconds: int) -> None:
        if self.fail_writes:
            raise ConnectionError("counter store unreachable")
        self.writes.append((key, value, ttl_seconds))


class InterleavingCounterStore(InMemoryCounterStore):
    """Yields to the event loop inside get(), so concurrent callers interleave."""

    async def get(self, key: str) -> str | None:
        value = await super().get(key)
        await asyncio.sleep(0)
        return value


class FailingAnalyticsSink:
    def __init__(self):
        self.attempts = 0

    async def write(self, record: dict) -> None:
        self.attempts += 1
        raise ConnectionError("analytics sink down")

    async def fetch_since(self, since) -> list[dict]:
        raise ConnectionError("analytics sink down")


class RecordingSubmissionSink:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.saved = []

    async def save(self, record) -> None:
        if self.fail:
            raise ConnectionError("archive unavailable")
        self.saved.append(record)


async def recorded_events(app) -> list[dict]:
    """Wait for scheduled analytics writes and return what the in-memory sink holds."""
    await app.state.services.supervisor.drain(timeout=1.0)
    return list(app.state.services.analytics_sink.records)
