"""Domain Types — rich types that replace bare primitives across the gateway.

Invariants:
    - RouteTag is the single source of route identity (route table, rate-limit keys, logs)
    - RateLimit is immutable; count >= 1 and window_seconds >= 1
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType for identifiers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

ClientId = NewType("ClientId", str)
RequestId = NewType("RequestId", str)
EpochMillis = NewType("EpochMillis", int)


# ─── Value Types ─────────────────────────────────────────────────

@dataclass(frozen=True)
class RateLimit:
    """Admit at most `count` events in any trailing `window_seconds` span."""
    count: int
    window_seconds: int

    def __post_init__(self):
        if self.count < 1:
            raise ValueError("rate limit count must be >= 1")
        if self.window_seconds < 1:
            raise ValueError("rate limit window must be >= 1 second")

    @property
    def window_ms(self) -> int:
        return self.window_seconds * 1000


# ─── Enums ───────────────────────────────────────────────────────

class RouteTag(str, Enum):
    """Every operation the gateway dispatches to."""
    CONTACT = "contact"
    BOOKING = "booking"
    HEALTH = "health"
    ANALYTICS = "analytics"
    STATS = "stats"
    PROJECTS = "projects"
    REDIRECT = "redirect"


class RateLimitTier(str, Enum):
    """Named limit budgets. Several routes may share a tier but never a key."""
    CONTACT = "contact"
    BOOKING = "booking"
    API = "api"


class RequestStage(str, Enum):
    """Per-request pipeline states. RESPONDED is reachable from any stage."""
    RECEIVED = "received"
    ROUTED = "routed"
    RATE_CHECKED = "rate_checked"
    VALIDATED = "validated"
    SPAM_CHECKED = "spam_checked"
    HANDLED = "handled"
    HEADER_DECORATED = "header_decorated"
    RESPONDED = "responded"


class ServiceStatus(str, Enum):
    """Health states for the gateway and its collaborators."""
    HEALTHY = "healthy"
    OPERATIONAL = "operational"
    DEGRADED = "degraded"
    NOT_CONFIGURED = "not_configured"
