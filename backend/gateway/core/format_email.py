"""Email Formatting — pure builders for the messages handed to the email collaborator.

Invariants:
    - Builders never send; they return an immutable EmailMessage
    - Submitted text is HTML-escaped before it reaches the html body
"""

import html
from dataclasses import dataclass, field

from gateway.core.contact_form import SubmissionRecord


@dataclass(frozen=True)
class EmailMessage:
    sender: str
    to: tuple[str, ...]
    subject: str
    text: str
    html: str = ""
    reply_to: str | None = None
    tags: tuple[str, ...] = field(default_factory=tuple)


def format_contact_email(
    record: SubmissionRecord, sender: str, recipient: str,
) -> EmailMessage:
    """Notification for the site owner about a new contact submission."""
    company = record.company or "Not provided"
    text = (
        "New Contact Form Submission\n\n"
        f"Name: {record.name}\n"
        f"Email: {record.email}\n"
        f"Company: {company}\n"
        f"Project Type: {record.project}\n\n"
        f"Message:\n{record.message}\n\n"
        f"---\nSubmitted at: {record.timestamp}\n"
    )
    message_html = html.escape(record.message).replace("\n", "<br>")
    body_html = (
        "<h2>New Contact Form Submission</h2>"
        f"<p><strong>Name:</strong> {html.escape(record.name)}</p>"
        f"<p><strong>Email:</strong> {html.escape(record.email)}</p>"
        f"<p><strong>Company:</strong> {html.escape(company)}</p>"
        f"<p><strong>Project Type:</strong> {html.escape(record.project)}</p>"
        f"<p><strong>Message:</strong></p><p>{message_html}</p>"
        f"<hr><p><small>Submitted: {html.escape(record.timestamp)}</small></p>"
    )
    return EmailMessage(
        sender=sender,
        to=(recipient,),
        subject=f"New {record.project} inquiry from {record.name}",
        text=text,
        html=body_html,
        reply_to=record.email,
        tags=("contact-form",),
    )


def format_booking_confirmation(
    *, booking_id: str, name: str, email: str, calendar_event: dict, sender: str,
) -> EmailMessage:
    """Confirmation sent to the person who requested the booking."""
    text = (
        f"Hi {name},\n\n"
        "Thanks for your booking request. Details:\n\n"
        f"Reference: {booking_id}\n"
        f"Starts: {calendar_event['start']}\n"
        f"Ends: {calendar_event['end']}\n"
        f"Timezone: {calendar_event['timezone']}\n\n"
        "You will receive a confirmation once the slot is accepted.\n"
    )
    return EmailMessage(
        sender=sender,
        to=(email,),
        subject=f"Booking request received ({booking_id})",
        text=text,
        tags=("booking",),
    )
