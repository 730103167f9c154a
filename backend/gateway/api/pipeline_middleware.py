"""Request Pipeline Middleware — the per-request envelope around every route.

Invariants:
    - Static asset paths pass straight through: no headers, no analytics
    - OPTIONS on any path gets the CORS preflight response and nothing else
      except analytics
    - Every other response, rejections and 500s included, carries the security
      header set, Access-Control-Allow-Origin and X-Request-ID
    - Analytics is scheduled exactly once per request, after the response is built,
      and is never awaited here
    - Unhandled exceptions become InternalError; detail is exposed only in debug

Design Decisions:
    - Exceptions are caught here rather than by an Exception handler, which
      Starlette runs outside user middleware and would skip header decoration
"""

import logging
import time
import uuid

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from gateway.api.request_context import client_country, client_identifier
from gateway.config import Settings
from gateway.core.analytics_event import AnalyticsEvent, is_success
from gateway.core.domain_types import RequestStage
from gateway.core.errors import InternalError
from gateway.core.request_state import RequestMeta, StageTracker
from gateway.core.security_headers import apply_security_headers, is_static_asset

logger = logging.getLogger(__name__)

# Matches analytics_events.request_id
MAX_REQUEST_ID_LENGTH = 64


def preflight_response(settings: Settings) -> Response:
    return Response(
        status_code=200,
        headers={
            "Access-Control-Allow-Origin": settings.cors_allow_origin,
            "Access-Control-Allow-Methods": settings.cors_allow_methods,
            "Access-Control-Allow-Headers": settings.cors_allow_headers,
            "Access-Control-Max-Age": str(settings.cors_max_age_seconds),
        },
    )


def request_id_for(request: Request) -> str:
    """Reuse the edge ray id when it is printable and fits; otherwise mint one."""
    ray = request.headers.get("cf-ray", "").strip()
    if ray and len(ray) <= MAX_REQUEST_ID_LENGTH and ray.isprintable():
        return ray
    return uuid.uuid4().hex


class RequestPipelineMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        if is_static_asset(request.url.path):
            return await call_next(request)

        services = request.app.state.services
        settings = services.settings
        started = time.perf_counter()
        tracker = StageTracker()
        meta = RequestMeta(
            request_id=request_id_for(request),
            client_ip=client_identifier(request, settings.trust_proxy_headers),
            country=client_country(request),
            user_agent=request.headers.get("user-agent", ""),
        )
        request.state.request_id = meta.request_id
        request.state.meta = meta
        request.state.tracker = tracker
        request.state.rate_limited = False

        if request.method == "OPTIONS":
            response = preflight_response(settings)
            reached = tracker.stage
        else:
            response = await self._call_route(request, call_next, meta, settings)
            if response.status_code < 400:
                tracker.advance(RequestStage.HANDLED)
            reached = tracker.stage
            apply_security_headers(response.headers, services.security_headers)
            response.headers["Access-Control-Allow-Origin"] = settings.cors_allow_origin
            response.headers["X-Request-ID"] = meta.request_id
            tracker.advance(RequestStage.HEADER_DECORATED)
        tracker.advance(RequestStage.RESPONDED)

        elapsed_ms = (time.perf_counter() - started) * 1000
        route_tag = getattr(request.state, "route_tag", None)
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"({elapsed_ms:.1f}ms)",
            extra={
                "request_id": meta.request_id,
                "route": route_tag.value if route_tag else None,
                "client_id": meta.client_ip,
                "status": response.status_code,
                "stage": reached.value,
                "method": request.method,
                "path": request.url.path,
            },
        )
        services.analytics_recorder.schedule(AnalyticsEvent(
            endpoint=request.url.path,
            method=request.method,
            country=meta.country,
            status=response.status_code,
            response_time_ms=elapsed_ms,
            success=is_success(response.status_code),
            rate_limited=request.state.rate_limited,
            request_id=meta.request_id,
            timestamp=services.now(),
        ))
        return response

    @staticmethod
    async def _call_route(
        request: Request,
        call_next: RequestResponseEndpoint,
        meta: RequestMeta,
        settings: Settings,
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            logger.error(
                f"Unhandled exception on {request.url.path}: {e}",
                exc_info=True,
                extra={"request_id": meta.request_id, "error_code": "INTERNAL_ERROR"},
            )
            error = InternalError(
                detail=f"{type(e).__name__}: {e}", expose_detail=settings.debug,
            )
            return JSONResponse(status_code=error.http_status, content=error.to_response())
