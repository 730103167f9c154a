"""Sliding-Window Rate Limiter — verifies admission, expiry, fail-open and the race.

Tests:
    - N admitted, N+1 limited, rejected attempts never written
    - Window slides: the oldest entry expiring frees exactly one slot
    - Read, decode and write failures all admit the request
    - Concurrent checks on one key can all pass (non-atomic read-modify-write)
"""

import asyncio

from gateway.core.domain_types import RateLimit
from gateway.core.rate_window import decode_window
from gateway.infrastructure.counter_store import InMemoryCounterStore
from gateway.services.rate_limiter import SlidingWindowRateLimiter
from tests.fakes import FailingCounterStore, FakeClock, InterleavingCounterStore

LIMIT = RateLimit(5, 300)
KEY = "contact:203.0.113.7:window"


def _limiter(store=None, clock=None):
    clock = clock or FakeClock()
    store = store if store is not None else InMemoryCounterStore(clock=lambda: clock.now_ms / 1000)
    return SlidingWindowRateLimiter(store, clock=clock), store, clock


async def test_admits_up_to_count_then_limits():
    limiter, _, clock = _limiter()
    for _ in range(LIMIT.count):
        assert not (await limiter.check_and_record(KEY, LIMIT)).limited
        clock.advance(1)
    decision = await limiter.check_and_record(KEY, LIMIT)
    assert decision.limited
    assert decision.retry_after_seconds == 300 - LIMIT.count


async def test_rejected_attempts_are_not_recorded():
    limiter, store, _ = _limiter()
    for _ in range(LIMIT.count + 3):
        await limiter.check_and_record(KEY, LIMIT)
    assert len(decode_window(await store.get(KEY))) == LIMIT.count


async def test_window_slides_after_oldest_expires():
    limiter, _, clock = _limiter()
    await limiter.check_and_record(KEY, LIMIT)
    clock.advance(100)
    for _ in range(LIMIT.count - 1):
        await limiter.check_and_record(KEY, LIMIT)
    assert (await limiter.check_and_record(KEY, LIMIT)).limited

    clock.advance(200)  # first entry is now exactly window-old
    assert not (await limiter.check_and_record(KEY, LIMIT)).limited
    assert (await limiter.check_and_record(KEY, LIMIT)).limited


async def test_keys_are_independent():
    limiter, _, _ = _limiter()
    for _ in range(LIMIT.count):
        await limiter.check_and_record(KEY, LIMIT)
    other = await limiter.check_and_record("booking:203.0.113.7:window", LIMIT)
    assert not other.limited


async def test_read_failure_fails_open(caplog):
    limiter, _, _ = _limiter(store=FailingCounterStore())
    for _ in range(LIMIT.count + 2):
        assert not (await limiter.check_and_record(KEY, LIMIT)).limited
    assert "failing open" in caplog.text


async def test_write_failure_fails_open():
    limiter, _, _ = _limiter(store=FailingCounterStore(fail_reads=False))
    assert not (await limiter.check_and_record(KEY, LIMIT)).limited


async def test_corrupt_window_fails_open():
    store = InMemoryCounterStore()
    await store.put(KEY, "{not json", 300)
    limiter, _, _ = _limiter(store=store)
    assert not (await limiter.check_and_record(KEY, LIMIT)).limited


async def test_ttl_matches_window():
    store = FailingCounterStore(fail_reads=False, fail_writes=False)
    limiter, _, _ = _limiter(store=store)
    await limiter.check_and_record(KEY, LIMIT)
    assert store.writes[0][2] == LIMIT.window_seconds


async def test_concurrent_checks_at_the_limit_may_all_pass():
    clock = FakeClock()
    store = InterleavingCounterStore(clock=lambda: clock.now_ms / 1000)
    limiter = SlidingWindowRateLimiter(store, clock=clock)
    for _ in range(LIMIT.count - 1):
        await limiter.check_and_record(KEY, LIMIT)

    decisions = await asyncio.gather(
        *(limiter.check_and_record(KEY, LIMIT) for _ in range(3)),
    )
    assert all(not d.limited for d in decisions)
