"""Contact Route — POST /api/contact.

Invariants:
    - Accepts urlencoded and multipart forms; a JSON object body is also accepted
    - A body that cannot be read as either is a 400 INVALID_BODY
"""

from fastapi import Request

from gateway.api.request_context import get_meta, get_services, get_tracker
from gateway.core.errors import ValidationError
from gateway.services.handle_contact import submit_contact


async def read_contact_body(request: Request) -> dict:
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            data = await request.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            raise ValidationError(
                "Request body must be a form or a JSON object", "body",
                code="INVALID_BODY",
            )
        return data
    form = await request.form()
    return dict(form)


async def post_contact(request: Request):
    """Accept a contact form submission."""
    body = await read_contact_body(request)
    return await submit_contact(
        get_services(request), body, get_meta(request), get_tracker(request),
    )
