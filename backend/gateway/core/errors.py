"""Error Hierarchy — typed, categorized exceptions for every gateway failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - to_response() produces the flat {error, code, ...} body shared by all endpoints
    - Rejections (400/404/405/429) short-circuit the pipeline; UpstreamServiceError is
      caught at its call site and never reaches a client
    - InternalError exposes exception detail only when explicitly asked to

Design Decisions:
    - Single hierarchy with GatewayError base: one FastAPI handler renders them all
    - Extra response headers (Retry-After, Allow) travel on the exception itself
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    SPAM = "spam"
    RATE_LIMIT = "rate_limit"
    RESOURCE_NOT_FOUND = "resource_not_found"
    METHOD = "method"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context attached to an error for logs, never for the response body."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    request_id: str | None = None
    route: str | None = None
    debug_info: dict[str, Any] | None = None


class GatewayError(Exception):
    """Base exception for all gateway errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status
        self.headers = headers or {}

    def to_response(self) -> dict:
        """Convert to the public error body."""
        return {"error": self.message, "code": self.code}


# ─── Rejections (400-level) ─────────────────────────────────────

class ValidationError(GatewayError):
    """A request field failed sanitize-then-validate."""
    def __init__(
        self, message: str, field: str, code: str | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code or f"INVALID_{field.upper()}",
            ErrorCategory.VALIDATION, ErrorSeverity.WARNING, context, 400,
        )
        self.field = field

    def to_response(self) -> dict:
        return {**super().to_response(), "field": self.field}


class SpamRejection(GatewayError):
    """Submission flagged by the spam heuristic."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Message blocked by spam filter", "SPAM_DETECTED",
            ErrorCategory.SPAM, ErrorSeverity.WARNING, context, 400,
        )


class RateLimitError(GatewayError):
    """Client exceeded the sliding-window budget for a route."""
    def __init__(
        self, retry_after_seconds: int, context: ErrorContext | None = None,
    ):
        super().__init__(
            "Rate limit exceeded", "RATE_LIMITED",
            ErrorCategory.RATE_LIMIT, ErrorSeverity.WARNING, context, 429,
            headers={"Retry-After": str(retry_after_seconds)},
        )
        self.retry_after_seconds = retry_after_seconds

    def to_response(self) -> dict:
        return {**super().to_response(), "retryAfter": self.retry_after_seconds}


class NotFoundError(GatewayError):
    """Unknown endpoint or unmapped resource."""
    def __init__(
        self, message: str = "API endpoint not found",
        code: str = "ENDPOINT_NOT_FOUND", context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.INFO, context, 404,
        )


class MethodNotAllowedError(GatewayError):
    """Known path requested with an unsupported method."""
    def __init__(
        self, allowed: list[str] | None = None, context: ErrorContext | None = None,
    ):
        headers = {"Allow": ", ".join(allowed)} if allowed else None
        super().__init__(
            "Method not allowed", "METHOD_NOT_ALLOWED",
            ErrorCategory.METHOD, ErrorSeverity.INFO, context, 405,
            headers=headers,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(GatewayError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class UpstreamServiceError(GatewayError):
    """Email, analytics sink, or counter store call failed."""
    def __init__(
        self, service: str, message: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{service} unavailable: {message}",
            "UPSTREAM_SERVICE_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, context, 503,
        )
        self.service = service


class InternalError(GatewayError):
    """Unexpected failure. Generic to callers unless detail is enabled."""
    def __init__(
        self, detail: str | None = None, expose_detail: bool = False,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            "Internal server error", "INTERNAL_ERROR",
            ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL, context, 500,
        )
        self.detail = detail
        self.expose_detail = expose_detail

    def to_response(self) -> dict:
        body = super().to_response()
        if self.expose_detail and self.detail:
            body["detail"] = self.detail
        return body
