"""Contact Route — verifies POST /api/contact end to end.

Tests:
    - Accepted form and JSON submissions return {success: true}
    - Validation, spam and rate-limit rejections use the flat error body
    - Email failures never change a 200
"""

from httpx import ASGITransport, AsyncClient

from gateway.core.repository_protocols import EmailResult
from tests.fakes import FakeEmailSender

VALID = {
    "name": "Jo",
    "email": "jo@example.com",
    "message": "Hello, interested in your consulting services",
}


async def test_valid_form_submission(client, email_sender):
    res = await client.post("/api/contact", data=VALID)
    assert res.status_code == 200
    assert res.json() == {"success": True, "message": "Message sent successfully"}
    assert len(email_sender.sent) == 1


async def test_json_submission_accepted(client):
    res = await client.post("/api/contact", json=VALID)
    assert res.status_code == 200


async def test_malformed_json_body(client):
    res = await client.post(
        "/api/contact", content=b"{nope", headers={"Content-Type": "application/json"},
    )
    assert res.status_code == 400
    assert res.json()["code"] == "INVALID_BODY"


async def test_short_message_rejected(client):
    res = await client.post("/api/contact", data={**VALID, "message": "hi"})
    assert res.status_code == 400
    body = res.json()
    assert body["code"] == "INVALID_MESSAGE"
    assert body["field"] == "message"
    assert "5" in body["error"] and "2000" in body["error"]


async def test_missing_email_rejected(client):
    res = await client.post("/api/contact", data={"name": "Jo", "message": VALID["message"]})
    assert res.status_code == 400
    assert res.json()["code"] == "MISSING_EMAIL"


async def test_spam_keyword_rejected(client, email_sender):
    res = await client.post(
        "/api/contact", data={**VALID, "message": "check out this bitcoin offer"},
    )
    assert res.status_code == 400
    assert res.json()["code"] == "SPAM_DETECTED"
    assert email_sender.sent == []


async def test_spam_keyword_wins_over_invalid_fields(client):
    res = await client.post(
        "/api/contact", data={"email": "x", "message": "cheap CASINO chips"},
    )
    assert res.json()["code"] == "SPAM_DETECTED"


async def test_sixth_submission_in_window_is_limited(client):
    for _ in range(5):
        assert (await client.post("/api/contact", data=VALID)).status_code == 200
    res = await client.post("/api/contact", data=VALID)
    assert res.status_code == 429
    body = res.json()
    assert body["code"] == "RATE_LIMITED"
    assert res.headers["Retry-After"] == str(body["retryAfter"])
    assert int(res.headers["Retry-After"]) == 300


async def test_window_reopens_after_expiry(client, clock):
    for _ in range(5):
        await client.post("/api/contact", data=VALID)
    assert (await client.post("/api/contact", data=VALID)).status_code == 429
    clock.advance(301)
    assert (await client.post("/api/contact", data=VALID)).status_code == 200


def _client_at(app, host: str) -> AsyncClient:
    return AsyncClient(
        transport=ASGITransport(app=app, client=(host, 51000)), base_url="http://test",
    )


async def test_rate_limit_is_per_client(app):
    async with _client_at(app, "198.51.100.1") as first:
        for _ in range(5):
            await first.post("/api/contact", data=VALID)
        assert (await first.post("/api/contact", data=VALID)).status_code == 429
    async with _client_at(app, "198.51.100.2") as other:
        assert (await other.post("/api/contact", data=VALID)).status_code == 200
    await app.state.services.supervisor.drain(timeout=1.0)


async def test_rotating_forwarding_headers_do_not_reset_the_window(client):
    statuses = []
    for i in range(8):
        res = await client.post(
            "/api/contact", data=VALID,
            headers={"X-Forwarded-For": f"10.0.0.{i}", "CF-Connecting-IP": f"10.1.0.{i}"},
        )
        statuses.append(res.status_code)
    assert statuses == [200] * 5 + [429] * 3


async def test_forwarding_headers_identify_clients_behind_a_trusted_proxy(
    app_factory, settings,
):
    settings.trust_proxy_headers = True
    app = app_factory()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        for _ in range(5):
            await c.post("/api/contact", data=VALID, headers={"CF-Connecting-IP": "198.51.100.1"})
        limited = await c.post(
            "/api/contact", data=VALID, headers={"CF-Connecting-IP": "198.51.100.1"},
        )
        other = await c.post(
            "/api/contact", data=VALID, headers={"X-Forwarded-For": "198.51.100.2, 10.0.0.1"},
        )
    await app.state.services.supervisor.drain(timeout=1.0)
    assert limited.status_code == 429
    assert other.status_code == 200


async def test_rate_check_runs_before_validation(client):
    for _ in range(5):
        await client.post("/api/contact", data={"name": ""})
    res = await client.post("/api/contact", data=VALID)
    assert res.status_code == 429


async def test_email_timeout_still_returns_200(app_factory, settings):
    settings.email_timeout_seconds = 0.01
    app = app_factory(email_sender=FakeEmailSender(delay=0.5))
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        res = await c.post("/api/contact", data=VALID)
    await app.state.services.supervisor.drain(timeout=1.0)
    assert res.status_code == 200


async def test_email_failure_result_still_returns_200(client, email_sender):
    email_sender.result = EmailResult(ok=False, error="status 500: boom")
    res = await client.post("/api/contact", data=VALID)
    assert res.status_code == 200
    assert res.json()["success"] is True
