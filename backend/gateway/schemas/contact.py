"""Contact Schemas — response shape for POST /api/contact.

The request side is parsed by core.contact_form, which accepts both form-encoded
and JSON bodies and must report errors in a fixed field order.
"""

from pydantic import BaseModel


class ContactResponse(BaseModel):
    success: bool = True
    message: str = "Message sent successfully"
