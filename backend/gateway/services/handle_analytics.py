"""Analytics Handler — read side of recorded request telemetry.

Invariants:
    - Both views cover the last `analytics_window_hours` hours
    - A sink read failure yields zeroed numbers with status "degraded", never a 5xx
"""

import logging
from datetime import timedelta

from gateway.core.errors import UpstreamServiceError
from gateway.core.projects import PROJECTS
from gateway.core.site_stats import compute_analytics_summary, compute_site_stats
from gateway.services.container import GatewayServices

logger = logging.getLogger(__name__)


async def _recent_records(services: GatewayServices) -> tuple[list[dict], str]:
    since = services.now() - timedelta(hours=services.settings.analytics_window_hours)
    try:
        return await services.analytics_sink.fetch_since(since), "ok"
    except Exception as e:
        error = UpstreamServiceError("analytics sink", str(e) or type(e).__name__)
        logger.warning(
            f"Analytics read failed: {error.message}",
            extra={"error_code": error.code, "service": "analytics"},
        )
        return [], "degraded"


async def analytics_summary(services: GatewayServices) -> dict:
    records, status = await _recent_records(services)
    summary = compute_analytics_summary(records, services.settings.analytics_window_hours)
    return {"status": status, **summary}


async def site_stats(services: GatewayServices) -> dict:
    records, status = await _recent_records(services)
    return {"status": status, **compute_site_stats(records, len(PROJECTS))}
