"""Site Stats — pure aggregation of recorded analytics events.

Invariants:
    - Inputs are AnalyticsEvent.to_record() dicts; missing keys count as zero/false
    - Returns flat JSON-serializable dicts
    - Never raises on an empty input
"""

from collections import Counter
from collections.abc import Iterable, Mapping

CONTACT_ENDPOINT = "/api/contact"
BOOKING_ENDPOINT = "/api/booking"
TOP_ENDPOINTS = 5


def _average_response_time(records: list[Mapping]) -> float:
    if not records:
        return 0.0
    total = sum(float(r.get("responseTimeMs") or 0) for r in records)
    return round(total / len(records), 2)


def _successful_posts(records: list[Mapping], endpoint: str) -> int:
    return sum(
        1 for r in records
        if r.get("endpoint") == endpoint and r.get("method") == "POST" and r.get("success")
    )


def compute_analytics_summary(records: Iterable[Mapping], window_hours: int) -> dict:
    """Traffic breakdown for GET /analytics."""
    records = list(records)
    endpoints = Counter(r.get("endpoint", "") for r in records)
    countries = Counter(r.get("country") or "unknown" for r in records)
    return {
        "windowHours": window_hours,
        "totalRequests": len(records),
        "pageViews": sum(
            1 for r in records if r.get("method") == "GET" and r.get("success")
        ),
        "contactSubmissions": _successful_posts(records, CONTACT_ENDPOINT),
        "bookingRequests": _successful_posts(records, BOOKING_ENDPOINT),
        "rateLimited": sum(1 for r in records if r.get("rateLimited")),
        "averageResponseTimeMs": _average_response_time(records),
        "topEndpoints": [
            {"endpoint": endpoint, "requests": count}
            for endpoint, count in endpoints.most_common(TOP_ENDPOINTS)
        ],
        "topCountries": [
            {"country": country, "requests": count}
            for country, count in countries.most_common(TOP_ENDPOINTS)
        ],
    }


def compute_site_stats(records: Iterable[Mapping], project_count: int) -> dict:
    """Headline numbers for GET /api/stats."""
    records = list(records)
    succeeded = sum(1 for r in records if r.get("success"))
    return {
        "totalRequests": len(records),
        "successRate": round(succeeded / len(records), 4) if records else 1.0,
        "averageResponseTimeMs": _average_response_time(records),
        "projects": project_count,
    }
