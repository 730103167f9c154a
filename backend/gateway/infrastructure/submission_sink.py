"""Submission Sinks — archive accepted contact submissions for manual review."""

import logging

from gateway.core.contact_form import SubmissionRecord
from gateway.infrastructure.database import DatabaseSessionManager
from gateway.models.contact_submission import ContactSubmission

logger = logging.getLogger(__name__)


class SqlSubmissionSink:
    def __init__(self, manager: DatabaseSessionManager):
        self._manager = manager

    async def save(self, record: SubmissionRecord) -> None:
        async with self._manager.session() as db:
            db.add(ContactSubmission(
                name=record.name,
                email=record.email,
                company=record.company,
                project=record.project,
                message=record.message,
                submitted_at=record.timestamp,
                client_ip=record.ip,
                user_agent=record.user_agent,
            ))
            await db.commit()


class LogSubmissionSink:
    """Writes the submission to the application log instead of a table."""

    async def save(self, record: SubmissionRecord) -> None:
        logger.info(
            f"Contact submission archived: {record.email} ({record.project})",
            extra={"route": "contact"},
        )
