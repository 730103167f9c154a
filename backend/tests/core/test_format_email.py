"""Email Formatting — verifies contact notifications and booking confirmations."""

from gateway.core.contact_form import SubmissionRecord
from gateway.core.format_email import format_booking_confirmation, format_contact_email

RECORD = SubmissionRecord(
    name="Jo",
    email="jo@example.com",
    company="",
    project="consulting",
    message="Budget is 5k & timeline\nis flexible",
    timestamp="2026-10-18T12:00:00+00:00",
    ip="203.0.113.7",
    user_agent="pytest",
)


def test_contact_email_subject_and_reply_to():
    message = format_contact_email(RECORD, "contact@flong.dev", "hello@flong.dev")
    assert message.subject == "New consulting inquiry from Jo"
    assert message.to == ("hello@flong.dev",)
    assert message.sender == "contact@flong.dev"
    assert message.reply_to == "jo@example.com"
    assert message.tags == ("contact-form",)


def test_contact_email_bodies():
    message = format_contact_email(RECORD, "contact@flong.dev", "hello@flong.dev")
    assert "Company: Not provided" in message.text
    assert "5k &amp; timeline<br>is flexible" in message.html


def test_booking_confirmation_goes_to_requester():
    event = {
        "start": "2026-11-02T14:00:00+00:00",
        "end": "2026-11-02T14:30:00+00:00",
        "timezone": "UTC",
    }
    message = format_booking_confirmation(
        booking_id="booking_1_abcdefghi", name="Jo", email="jo@example.com",
        calendar_event=event, sender="contact@flong.dev",
    )
    assert message.to == ("jo@example.com",)
    assert "booking_1_abcdefghi" in message.subject
    assert "2026-11-02T14:00:00+00:00" in message.text
