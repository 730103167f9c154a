"""Route Dependencies — stage marking and sliding-window admission per route.

Invariants:
    - The rate check runs before the endpoint reads the request body
    - Each route has its own counter key even when routes share a tier
    - A limited request raises RateLimitError and flags request.state.rate_limited
"""

import logging
from collections.abc import Awaitable, Callable

from fastapi import Request

from gateway.api.request_context import get_meta, get_services, get_tracker
from gateway.core.domain_types import ClientId, RateLimitTier, RequestStage, RouteTag
from gateway.core.errors import RateLimitError
from gateway.core.rate_window import window_key

logger = logging.getLogger(__name__)


def route_entered(tag: RouteTag) -> Callable[[Request], Awaitable[None]]:
    async def mark_routed(request: Request) -> None:
        request.state.route_tag = tag
        get_tracker(request).advance(RequestStage.ROUTED)
    return mark_routed


def enforce_rate_limit(
    tag: RouteTag, tier: RateLimitTier,
) -> Callable[[Request], Awaitable[None]]:
    """Build a dependency that admits or rejects against the tier's budget."""

    async def check_rate_limit(request: Request) -> None:
        services = get_services(request)
        meta = get_meta(request)
        key = window_key(tag.value, ClientId(meta.client_ip))
        decision = await services.rate_limiter.check_and_record(
            key, services.rate_limits[tier],
        )
        if decision.limited:
            request.state.rate_limited = True
            logger.warning(
                f"Rate limit exceeded on {tag.value}, retry in {decision.retry_after_seconds}s",
                extra={
                    "request_id": meta.request_id,
                    "route": tag.value,
                    "client_id": meta.client_ip,
                },
            )
            raise RateLimitError(decision.retry_after_seconds)
        get_tracker(request).advance(RequestStage.RATE_CHECKED)

    return check_rate_limit
