"""Sliding-Window Rate Limiter — admission checks over the shared counter store.

Invariants:
    - A rejected attempt is never written back (it does not count)
    - An admitted attempt appends `now` and rewrites the window with TTL = window length
    - Any store failure (read, decode, write) fails OPEN: logged, request admitted
    - The read-check-write is not atomic. Concurrent calls for one key can each read
      the same pre-update window and all pass, so bursts of up to roughly
      2 x count are possible under load. This is accepted and covered by tests.

Design Decisions:
    - Availability over strict enforcement: a dead store must not take the
      contact form down with it
    - Clock injected as epoch milliseconds so windows can be tested without sleeping
"""

import logging
import time
from collections.abc import Callable

from gateway.core.domain_types import EpochMillis, RateLimit
from gateway.core.errors import UpstreamServiceError
from gateway.core.rate_window import (
    RateLimitDecision,
    decode_window,
    encode_window,
    is_over_limit,
    prune_window,
    retry_after_seconds,
)
from gateway.core.repository_protocols import CounterStore

logger = logging.getLogger(__name__)

ADMIT = RateLimitDecision(limited=False)


def epoch_millis() -> EpochMillis:
    return EpochMillis(int(time.time() * 1000))


class SlidingWindowRateLimiter:
    """check_and_record over any CounterStore."""

    def __init__(
        self, store: CounterStore, clock: Callable[[], EpochMillis] = epoch_millis,
    ):
        self._store = store
        self._clock = clock

    async def check_and_record(self, key: str, limit: RateLimit) -> RateLimitDecision:
        now = self._clock()
        try:
            stored = decode_window(await self._store.get(key))
        except Exception as e:
            self._log_store_failure("read", key, e)
            return ADMIT

        live = prune_window(stored, now, limit)
        if is_over_limit(live, limit):
            return RateLimitDecision(
                limited=True,
                retry_after_seconds=retry_after_seconds(live, now, limit),
            )

        live.append(now)
        try:
            await self._store.put(key, encode_window(live), limit.window_seconds)
        except Exception as e:
            self._log_store_failure("write", key, e)
        return ADMIT

    @staticmethod
    def _log_store_failure(operation: str, key: str, exc: Exception) -> None:
        error = UpstreamServiceError("counter store", f"{operation} failed: {exc}")
        logger.warning(
            f"Rate limiter failing open for {key}: {error.message}",
            extra={"error_code": error.code, "service": "counter_store"},
        )
