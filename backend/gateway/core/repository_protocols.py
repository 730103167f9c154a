"""Boundary Protocols — contracts between core and the IO shell.

Invariants:
    - Core never imports from shell; dependency arrows point inward only
    - Every external collaborator is reached through one of these Protocols
    - Implementations are provided by infrastructure and wired in the services container

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no base class
    - EmailSender.send returns EmailResult instead of raising, matching the
      "send(message) → ok | error" contract of the delivery API
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from gateway.core.contact_form import SubmissionRecord
from gateway.core.format_email import EmailMessage


@dataclass(frozen=True)
class EmailResult:
    ok: bool
    error: str | None = None
    message_id: str | None = None


class CounterStore(Protocol):
    """Key-value store with per-key TTL. No atomic increment is assumed."""
    async def get(self, key: str) -> str | None: ...
    async def put(self, key: str, value: str, ttl_seconds: int) -> None: ...


class AnalyticsSink(Protocol):
    """Destination for serialized analytics records."""
    async def write(self, record: dict) -> None: ...
    async def fetch_since(self, since: datetime) -> list[dict]: ...


class SubmissionSink(Protocol):
    """Archive of accepted contact submissions for manual follow-up."""
    async def save(self, record: SubmissionRecord) -> None: ...


class EmailSender(Protocol):
    """Outbound email delivery."""
    @property
    def configured(self) -> bool: ...
    async def send(self, message: EmailMessage) -> EmailResult: ...
