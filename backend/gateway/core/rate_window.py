"""Rate Window — pure sliding-window arithmetic over stored timestamp sequences.

Invariants:
    - A timestamp t counts toward the window at `now` iff t > now - window_ms
    - prune_window() preserves order and never adds entries
    - decode_window() rejects anything that is not a JSON list of integers

Design Decisions:
    - Stored value is a JSON array of epoch milliseconds so any string KV store
      can hold it without a schema
"""

import json
from dataclasses import dataclass

from gateway.core.domain_types import ClientId, EpochMillis, RateLimit


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of one admission check."""
    limited: bool
    retry_after_seconds: int = 0


def window_key(route: str, client: ClientId) -> str:
    """Counter store key for a route/client pair."""
    return f"{route}:{client}:window"


def decode_window(raw: str | None) -> list[int]:
    """Parse a stored window. Missing value is an empty window."""
    if raw is None:
        return []
    data = json.loads(raw)
    if not isinstance(data, list) or not all(
        isinstance(t, int) and not isinstance(t, bool) for t in data
    ):
        raise ValueError("rate window must be a JSON list of integers")
    return data


def encode_window(timestamps: list[int]) -> str:
    return json.dumps(timestamps, separators=(",", ":"))


def prune_window(timestamps: list[int], now: EpochMillis, limit: RateLimit) -> list[int]:
    """Drop entries that fell out of the trailing window."""
    cutoff = now - limit.window_ms
    return [t for t in timestamps if t > cutoff]


def is_over_limit(live: list[int], limit: RateLimit) -> bool:
    return len(live) >= limit.count


def retry_after_seconds(live: list[int], now: EpochMillis, limit: RateLimit) -> int:
    """Seconds until the oldest counted entry leaves the window (at least 1)."""
    if not live:
        return 1
    remaining_ms = min(live) + limit.window_ms - now
    return max(1, -(-remaining_ms // 1000))
