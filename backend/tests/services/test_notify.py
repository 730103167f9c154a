"""Email Delivery — verifies the bounded, non-fatal wrapper around the sender."""

from gateway.core.format_email import EmailMessage
from gateway.core.repository_protocols import EmailResult
from gateway.services.notify import deliver_email
from tests.fakes import FakeEmailSender

MESSAGE = EmailMessage(sender="a@x.dev", to=("b@x.dev",), subject="s", text="t")


async def test_successful_send_passes_result_through():
    sender = FakeEmailSender()
    result = await deliver_email(sender, MESSAGE, timeout_seconds=1.0)
    assert result.ok
    assert sender.sent == [MESSAGE]


async def test_timeout_becomes_failed_result(caplog):
    sender = FakeEmailSender(delay=0.5)
    result = await deliver_email(sender, MESSAGE, timeout_seconds=0.01, request_id="req-9")
    assert result == EmailResult(ok=False, error="timeout")
    assert "Email delivery failed" in caplog.text


async def test_sender_exception_becomes_failed_result():
    sender = FakeEmailSender(raises=RuntimeError("smtp exploded"))
    result = await deliver_email(sender, MESSAGE, timeout_seconds=1.0)
    assert not result.ok
    assert result.error == "smtp exploded"


async def test_not_configured_is_not_logged_as_error(caplog):
    sender = FakeEmailSender(result=EmailResult(ok=False, error="not_configured"))
    result = await deliver_email(sender, MESSAGE, timeout_seconds=1.0)
    assert result.error == "not_configured"
    assert "Email delivery failed" not in caplog.text
