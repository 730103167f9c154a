"""Edge Gateway — FastAPI application factory and ASGI entry point.

Invariants:
    - Routes come from the typed route table (no auto-discovery)
    - Services (stores, sinks, email, supervisor, header set) are built once per app
      and live on app.state.services
    - The pipeline middleware wraps every route, including error responses

Design Decisions:
    - create_app() factory so tests can inject settings and collaborators;
      the module-level `app` is what uvicorn serves
    - Services are built eagerly, not in lifespan: clients that skip lifespan
      (httpx ASGITransport) still see a fully wired app
    - Building services creates no database engine; it starts on first session, so
      importing this module for the module-level `app` touches no database
    - Static assets mounted under /assets only, so unknown paths keep the JSON 404
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from gateway.api.error_handlers import register_error_handlers
from gateway.api.pipeline_middleware import RequestPipelineMiddleware
from gateway.api.route_table import register_routes
from gateway.config import Settings, get_settings
from gateway.infrastructure.observability import setup_logging
from gateway.services.container import build_services

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, **overrides) -> FastAPI:
    """Build the gateway. `overrides` are passed to build_services()."""
    settings = settings or get_settings()
    services = build_services(settings, **overrides)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.log_level, settings.log_format)
        await services.startup()
        logger.info(f"{settings.app_name} {settings.version} started")
        yield
        logger.info(f"{settings.app_name} shutting down")
        await services.shutdown()

    app = FastAPI(
        title=settings.app_name,
        version=settings.version,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.services = services

    register_error_handlers(app)
    app.add_middleware(RequestPipelineMiddleware)
    register_routes(app)

    if os.path.isdir(settings.static_dir):
        app.mount("/assets", StaticFiles(directory=settings.static_dir), name="assets")

    return app


app = create_app()
