"""Error Handlers — global exception handlers for the gateway.

Invariants:
    - GatewayError → flat {error, code, ...} JSON with the error's status and headers
    - Starlette 404/405 → ENDPOINT_NOT_FOUND / METHOD_NOT_ALLOWED in the same shape
    - RequestValidationError → 400 with the first offending field
    - Anything else is caught by the pipeline middleware so that it still receives
      security headers and analytics

Design Decisions:
    - Handlers log at the error's own severity; rejections are not server errors
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from gateway.core.errors import (
    ErrorSeverity,
    GatewayError,
    MethodNotAllowedError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_gateway_error_handler(app)
    _register_http_exception_handler(app)
    _register_validation_error_handler(app)


def error_response(exc: GatewayError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status, content=exc.to_response(), headers=exc.headers,
    )


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


def _register_gateway_error_handler(app: FastAPI) -> None:

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError):
        """Render any gateway rejection or failure."""
        exc.context.request_id = exc.context.request_id or _request_id(request)
        exc.context.route = exc.context.route or request.url.path
        logger.log(
            _LOG_LEVELS[exc.severity],
            f"{type(exc).__name__}: {exc.message}",
            extra={
                "request_id": exc.context.request_id,
                "error_code": exc.code,
                "path": request.url.path,
                "status": exc.http_status,
            },
        )
        return error_response(exc)


def _register_http_exception_handler(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Routing misses raised by Starlette itself."""
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            error: GatewayError = NotFoundError()
        elif exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
            allow = (exc.headers or {}).get("Allow", "")
            error = MethodNotAllowedError(
                [m.strip() for m in allow.split(",") if m.strip()],
            )
        else:
            # Form parsing failures surface as a bare 400 from Starlette
            code = (
                "INVALID_BODY" if exc.status_code == status.HTTP_400_BAD_REQUEST
                else "HTTP_ERROR"
            )
            return JSONResponse(
                status_code=exc.status_code,
                content={"error": str(exc.detail), "code": code},
                headers=exc.headers,
            )
        logger.info(
            f"{error.code} for {request.method} {request.url.path}",
            extra={"request_id": _request_id(request), "error_code": error.code},
        )
        return error_response(error)


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors on path or query parameters."""
        errors = exc.errors()
        logger.warning(f"Validation error on {request.url.path}: {errors}")
        first = errors[0] if errors else {"loc": ("body",), "msg": "Invalid request"}
        field = str(first["loc"][-1]) if first.get("loc") else "body"
        return error_response(ValidationError(first["msg"], field))
