"""Resend Email Client — wraps httpx.AsyncClient with retry, backoff, and result mapping.

Invariants:
    - send() never raises for delivery problems; it returns EmailResult(ok=False, error=...)
    - Rate limits (429) and transient errors (5xx, connection): bounded retries with
      exponential backoff and jitter
    - Client errors (4xx except 429): immediate failure, no retry
    - Without an API key nothing is sent and the result is "not_configured"

Design Decisions:
    - Every attempt is bounded by the httpx timeout; callers add an overall
      asyncio timeout on top
    - ±25% jitter on backoff: prevents thundering herd on the shared API quota
"""

import asyncio
import logging
import random

import httpx

from gateway.core.format_email import EmailMessage
from gateway.core.repository_protocols import EmailResult

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS = {429, 500, 502, 503, 504}


class ResendEmailClient:
    """Sends EmailMessage values through the Resend HTTP API."""

    def __init__(
        self,
        api_key: str,
        api_url: str = "https://api.resend.com/emails",
        timeout_seconds: float = 10.0,
        max_retries: int = 1,
        base_delay_ms: int = 250,
        max_delay_ms: int = 2000,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._api_key = api_key
        self._api_url = api_url
        self._client = http_client or httpx.AsyncClient(timeout=timeout_seconds)
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    async def send(self, message: EmailMessage) -> EmailResult:
        """Deliver a message, retrying transient failures."""
        if not self.configured:
            logger.info(
                "RESEND_API_KEY not configured - email not sent",
                extra={"service": "email"},
            )
            return EmailResult(ok=False, error="not_configured")

        error = "unknown"
        for attempt in range(self.max_retries + 1):
            try:
                response = await self._client.post(
                    self._api_url,
                    headers={"Authorization": f"Bearer {self._api_key}"},
                    json=self._payload(message),
                )
            except httpx.TimeoutException:
                error = "timeout"
            except httpx.TransportError as e:
                error = f"transport: {e}"
            else:
                if response.is_success:
                    message_id = self._message_id(response)
                    logger.info(
                        f"Email sent via Resend (attempt {attempt + 1})",
                        extra={"service": "email"},
                    )
                    return EmailResult(ok=True, message_id=message_id)
                error = f"status {response.status_code}: {response.text[:200]}"
                if response.status_code not in _RETRYABLE_STATUS:
                    break

            if attempt < self.max_retries:
                await asyncio.sleep(self._backoff_seconds(attempt))

        logger.error(f"Resend API error: {error}", extra={"service": "email"})
        return EmailResult(ok=False, error=error)

    async def aclose(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _payload(message: EmailMessage) -> dict:
        payload = {
            "from": message.sender,
            "to": list(message.to),
            "subject": message.subject,
            "text": message.text,
        }
        if message.html:
            payload["html"] = message.html
        if message.reply_to:
            payload["reply_to"] = message.reply_to
        if message.tags:
            payload["tags"] = [
                {"name": "category", "value": tag} for tag in message.tags
            ]
        return payload

    @staticmethod
    def _message_id(response: httpx.Response) -> str | None:
        try:
            return response.json().get("id")
        except ValueError:
            return None

    def _backoff_seconds(self, attempt: int) -> float:
        delay = min(self.base_delay_ms * (2 ** attempt), self.max_delay_ms)
        jitter = delay * random.uniform(-0.25, 0.25)
        return max(0.0, (delay + jitter) / 1000)
