"""Route Table — every RouteTag mapped to its path, methods, endpoint and rate-limit tier.

Invariants:
    - Every RouteTag appears exactly once; register_routes() refuses a partial table
    - Stage marking runs first, then the rate check, then the endpoint
    - Routes without a tier skip the rate check entirely

Design Decisions:
    - One typed table instead of a router module per endpoint: route coverage can be
      asserted in a single test, and the tier sits next to the path it protects
"""

from collections.abc import Callable
from dataclasses import dataclass

from fastapi import Depends, FastAPI

from gateway.api.dependencies import enforce_rate_limit, route_entered
from gateway.api.routes import analytics, booking, catalog, contact, health
from gateway.core.domain_types import RateLimitTier, RouteTag


@dataclass(frozen=True)
class RouteSpec:
    tag: RouteTag
    path: str
    methods: tuple[str, ...]
    endpoint: Callable
    tier: RateLimitTier | None = None


ROUTES: tuple[RouteSpec, ...] = (
    RouteSpec(RouteTag.CONTACT, "/api/contact", ("POST",), contact.post_contact,
              RateLimitTier.CONTACT),
    RouteSpec(RouteTag.BOOKING, "/api/booking", ("POST",), booking.post_booking,
              RateLimitTier.BOOKING),
    RouteSpec(RouteTag.HEALTH, "/health", ("GET",), health.get_health),
    RouteSpec(RouteTag.ANALYTICS, "/analytics", ("GET",), analytics.get_analytics,
              RateLimitTier.API),
    RouteSpec(RouteTag.STATS, "/api/stats", ("GET",), analytics.get_stats,
              RateLimitTier.API),
    RouteSpec(RouteTag.PROJECTS, "/api/projects", ("GET",), catalog.get_projects),
    RouteSpec(RouteTag.REDIRECT, "/redirect/{slug}", ("GET",), catalog.get_redirect),
)


def register_routes(app: FastAPI, routes: tuple[RouteSpec, ...] = ROUTES) -> None:
    tags = [route.tag for route in routes]
    missing = set(RouteTag) - set(tags)
    if missing or len(tags) != len(set(tags)):
        raise ValueError(
            f"Route table must map every RouteTag once (missing: {sorted(t.value for t in missing)})",
        )
    for route in routes:
        dependencies = [Depends(route_entered(route.tag))]
        if route.tier is not None:
            dependencies.append(Depends(enforce_rate_limit(route.tag, route.tier)))
        app.add_api_route(
            route.path,
            route.endpoint,
            methods=list(route.methods),
            dependencies=dependencies,
            name=route.tag.value,
        )
