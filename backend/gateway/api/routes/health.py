"""Health Route — GET /health. Always 200; collaborator trouble shows as "degraded"."""

from fastapi import Request

from gateway.api.request_context import get_services
from gateway.services.handle_health import check_health


async def get_health(request: Request):
    return await check_health(get_services(request))
