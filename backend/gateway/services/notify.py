"""Email Delivery — bounded, non-fatal calls to the email collaborator.

Invariants:
    - deliver_email() never raises; every failure becomes EmailResult(ok=False)
    - The call is bounded by an explicit timeout independent of the sender's own
"""

import asyncio
import logging

from gateway.core.errors import UpstreamServiceError
from gateway.core.format_email import EmailMessage
from gateway.core.repository_protocols import EmailResult, EmailSender

logger = logging.getLogger(__name__)


async def deliver_email(
    sender: EmailSender,
    message: EmailMessage,
    timeout_seconds: float,
    request_id: str | None = None,
) -> EmailResult:
    try:
        result = await asyncio.wait_for(sender.send(message), timeout=timeout_seconds)
    except asyncio.TimeoutError:
        result = EmailResult(ok=False, error="timeout")
    except Exception as e:
        result = EmailResult(ok=False, error=str(e) or type(e).__name__)

    if not result.ok and result.error != "not_configured":
        error = UpstreamServiceError("email", result.error or "unknown")
        logger.error(
            f"Email delivery failed, continuing: {error.message}",
            extra={
                "request_id": request_id,
                "error_code": error.code,
                "service": "email",
            },
        )
    return result
