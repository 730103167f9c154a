"""Site Stats — verifies aggregation of recorded analytics events."""

from gateway.core.site_stats import compute_analytics_summary, compute_site_stats


def _record(endpoint, method="GET", status=200, ms=10.0, country="US", rate_limited=False):
    return {
        "endpoint": endpoint,
        "method": method,
        "country": country,
        "status": status,
        "responseTimeMs": ms,
        "success": 200 <= status < 400,
        "rateLimited": rate_limited,
        "requestId": "r",
        "timestamp": "2026-10-18T12:00:00+00:00",
    }


RECORDS = [
    _record("/health"),
    _record("/health", country="DE"),
    _record("/api/contact", "POST", ms=40.0),
    _record("/api/contact", "POST", status=400, ms=20.0),
    _record("/api/booking", "POST", ms=30.0),
    _record("/api/contact", "POST", status=429, ms=0.0, rate_limited=True),
]


def test_summary_counts():
    summary = compute_analytics_summary(RECORDS, 24)
    assert summary["windowHours"] == 24
    assert summary["totalRequests"] == 6
    assert summary["pageViews"] == 2
    assert summary["contactSubmissions"] == 1
    assert summary["bookingRequests"] == 1
    assert summary["rateLimited"] == 1
    assert summary["averageResponseTimeMs"] == round(110.0 / 6, 2)


def test_summary_top_lists_ordered_by_volume():
    summary = compute_analytics_summary(RECORDS, 24)
    assert summary["topEndpoints"][0] == {"endpoint": "/api/contact", "requests": 3}
    assert summary["topCountries"][0] == {"country": "US", "requests": 5}


def test_summary_of_nothing_is_zeroed():
    summary = compute_analytics_summary([], 24)
    assert summary["totalRequests"] == 0
    assert summary["averageResponseTimeMs"] == 0.0
    assert summary["topEndpoints"] == []


def test_site_stats():
    stats = compute_site_stats(RECORDS, 3)
    assert stats["totalRequests"] == 6
    assert stats["successRate"] == round(4 / 6, 4)
    assert stats["projects"] == 3


def test_site_stats_empty_success_rate_is_one():
    assert compute_site_stats([], 3)["successRate"] == 1.0
