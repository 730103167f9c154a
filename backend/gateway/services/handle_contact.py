"""Contact Handler — sanitize, validate, screen and deliver a contact submission.

Invariants:
    - Blocked keywords are checked before field validation (SPAM_DETECTED wins)
    - Stages advance VALIDATED -> SPAM_CHECKED -> HANDLED only on success
    - Email and archive failures are logged and never change the 200 response
"""

import logging
from collections.abc import Mapping

from gateway.core.contact_form import (
    make_submission,
    reject_spam,
    sanitize_contact_fields,
    screen_spam_keywords,
    validate_contact_fields,
)
from gateway.core.domain_types import RequestStage
from gateway.core.format_email import format_contact_email
from gateway.core.request_state import RequestMeta, StageTracker
from gateway.schemas.contact import ContactResponse
from gateway.services.container import GatewayServices
from gateway.services.notify import deliver_email

logger = logging.getLogger(__name__)


async def submit_contact(
    services: GatewayServices,
    raw: Mapping[str, object],
    meta: RequestMeta,
    tracker: StageTracker,
) -> dict:
    fields = sanitize_contact_fields(raw)
    screen_spam_keywords(fields)
    validate_contact_fields(fields)
    tracker.advance(RequestStage.VALIDATED)

    reject_spam(fields)
    tracker.advance(RequestStage.SPAM_CHECKED)

    settings = services.settings
    record = make_submission(fields, meta.client_ip, meta.user_agent, services.now())
    email = format_contact_email(record, settings.email_from, settings.email_to)
    result = await deliver_email(
        services.email_sender, email, settings.email_timeout_seconds, meta.request_id,
    )

    try:
        await services.submission_sink.save(record)
    except Exception as e:
        logger.warning(
            f"Contact submission not archived: {e}",
            extra={"request_id": meta.request_id, "service": "submissions"},
        )

    logger.info(
        f"Contact submission accepted (email {'sent' if result.ok else 'skipped'})",
        extra={"request_id": meta.request_id, "route": "contact"},
    )
    tracker.advance(RequestStage.HANDLED)
    return ContactResponse().model_dump()
