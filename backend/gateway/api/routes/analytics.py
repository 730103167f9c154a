"""Analytics Routes — GET /analytics and GET /api/stats (api rate-limit tier)."""

from fastapi import Request

from gateway.api.request_context import get_services
from gateway.services.handle_analytics import analytics_summary, site_stats


async def get_analytics(request: Request):
    """Traffic summary over the configured window."""
    return await analytics_summary(get_services(request))


async def get_stats(request: Request):
    """Headline numbers for the public site."""
    return await site_stats(get_services(request))
