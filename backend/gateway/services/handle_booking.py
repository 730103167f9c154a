"""Booking Handler — validate a booking request and answer with a calendar event.

Invariants:
    - Pydantic errors are reported as the gateway's flat ValidationError, first error only
    - A slot that starts in the past, or more than booking_horizon_days ahead, is
      rejected as INVALID_DATE before any timezone arithmetic runs
    - The confirmation email is best effort; the booking id is returned either way
"""

import logging
from collections.abc import Mapping
from datetime import timedelta

from pydantic import ValidationError as PydanticValidationError

from gateway.core.booking import build_calendar_event, generate_booking_id
from gateway.core.domain_types import EpochMillis, RequestStage
from gateway.core.errors import ValidationError
from gateway.core.format_email import format_booking_confirmation
from gateway.core.request_state import RequestMeta, StageTracker
from gateway.schemas.booking import BookingRequest, BookingResponse
from gateway.services.container import GatewayServices
from gateway.services.notify import deliver_email

logger = logging.getLogger(__name__)

_VALUE_ERROR_PREFIX = "Value error, "


def parse_booking(payload: Mapping[str, object]) -> BookingRequest:
    """Validate a decoded JSON body, mapping the first pydantic error to our codes."""
    try:
        return BookingRequest.model_validate(payload)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = str(first["loc"][0]) if first["loc"] else "body"
        message = first["msg"].removeprefix(_VALUE_ERROR_PREFIX)
        if first["type"] == "missing":
            if message == "Field required":
                message = f"{field} is required"
            raise ValidationError(message, field, code=f"MISSING_{field.upper()}") from None
        raise ValidationError(message, field) from None


async def request_booking(
    services: GatewayServices,
    payload: Mapping[str, object],
    meta: RequestMeta,
    tracker: StageTracker,
) -> dict:
    booking = parse_booking(payload)
    now = services.now()
    horizon = services.settings.booking_horizon_days
    # Local and UTC dates differ by at most a day; bounding the date first keeps
    # the UTC conversion and end time inside datetime range
    if booking.date > now.date() + timedelta(days=horizon):
        raise ValidationError(f"date must be within {horizon} days", "date")
    if booking.date < now.date() - timedelta(days=1):
        raise ValidationError("date must be in the future", "date")
    start = booking.start_datetime()
    if start <= now:
        raise ValidationError("date must be in the future", "date")
    tracker.advance(RequestStage.VALIDATED)

    booking_id = generate_booking_id(
        EpochMillis(int(now.timestamp() * 1000)), services.rng,
    )
    event = build_calendar_event(
        booking_id=booking_id,
        name=booking.name,
        email=booking.email,
        start=start,
        duration_minutes=booking.duration_minutes,
        timezone_name=booking.timezone,
        topic=booking.topic,
        now=now,
    )
    confirmation = format_booking_confirmation(
        booking_id=booking_id,
        name=booking.name,
        email=booking.email,
        calendar_event=event,
        sender=services.settings.email_from,
    )
    await deliver_email(
        services.email_sender, confirmation,
        services.settings.email_timeout_seconds, meta.request_id,
    )

    logger.info(
        f"Booking {booking_id} requested for {event['start']}",
        extra={"request_id": meta.request_id, "route": "booking"},
    )
    tracker.advance(RequestStage.HANDLED)
    return BookingResponse(booking_id=booking_id, calendar_event=event).model_dump(by_alias=True)
