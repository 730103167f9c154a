"""Booking Route — POST /api/booking with a JSON body."""

from fastapi import Request

from gateway.api.request_context import get_meta, get_services, get_tracker
from gateway.core.errors import ValidationError
from gateway.services.handle_booking import request_booking


async def post_booking(request: Request):
    """Accept a booking request and return its calendar event."""
    try:
        payload = await request.json()
    except ValueError:
        payload = None
    if not isinstance(payload, dict):
        raise ValidationError(
            "Request body must be a JSON object", "body", code="INVALID_JSON",
        )
    return await request_booking(
        get_services(request), payload, get_meta(request), get_tracker(request),
    )
