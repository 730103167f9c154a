"""Analytics Event — one telemetry record per request.

Invariants:
    - Built after the response is finalized; never mutated
    - to_record() is the only serialized form handed to sinks
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class AnalyticsEvent:
    endpoint: str
    method: str
    country: str
    status: int
    response_time_ms: float
    success: bool
    rate_limited: bool
    request_id: str
    timestamp: datetime

    def to_record(self) -> dict:
        return {
            "endpoint": self.endpoint,
            "method": self.method,
            "country": self.country,
            "status": self.status,
            "responseTimeMs": round(self.response_time_ms, 2),
            "success": self.success,
            "rateLimited": self.rate_limited,
            "requestId": self.request_id,
            "timestamp": self.timestamp.isoformat(),
        }


def is_success(status: int) -> bool:
    return 200 <= status < 400
