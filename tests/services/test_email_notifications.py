"""Tests for report-ready emails and the Brevo client."""

import json

import httpx
import pytest

from angelic.agent.llm_fake import sample_report
from angelic.integrations.brevo import BrevoClient
from angelic.services.email_service import SUBJECTS, render_report_email, report_view_url, send_report_email

pytestmark = pytest.mark.unit


def _transport(status_code: int, captured: list):
    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(status_code, json={"messageId": "<abc@brevo>"})

    return httpx.MockTransport(handler)


def test_render_english_email():
    subject, html, text = render_report_email(sample_report("en"), "rep-1", "en")

    assert subject == SUBJECTS["en"]
    assert "72/100" in text
    assert report_view_url("rep-1") in html
    assert report_view_url("rep-1").endswith("/reports/rep-1")


def test_render_chinese_email():
    subject, html, text = render_report_email(sample_report("zh"), "rep-2", "zh")

    assert subject == SUBJECTS["zh"]
    assert "综合评分" in text


def test_idea_text_is_escaped_in_html():
    _, html, _ = render_report_email({"idea": "<script>x</script>", "overallScore": 10}, "r", "en")

    assert "<script>" not in html


async def test_unconfigured_client_skips_sending(settings_env):
    settings_env(BREVO_API_KEY="")
    captured: list = []

    sent = await BrevoClient(transport=_transport(201, captured)).send("a@example.com", "s", "<p>h</p>")

    assert sent is False
    assert captured == []


async def test_configured_client_posts_to_brevo(settings_env):
    settings_env(BREVO_API_KEY="xkeysib-test", EMAIL_FROM="reports@example.com")
    captured: list = []

    sent = await send_report_email(
        "founder@example.com",
        sample_report("en"),
        "rep-1",
        "en",
        client=BrevoClient(transport=_transport(201, captured)),
    )

    assert sent is True
    request = captured[0]
    assert request.headers["api-key"] == "xkeysib-test"
    payload = json.loads(request.content)
    assert payload["to"] == [{"email": "founder@example.com"}]
    assert payload["sender"]["email"] == "reports@example.com"
    assert payload["subject"] == SUBJECTS["en"]
    assert "textContent" in payload


async def test_rejected_send_returns_false(settings_env):
    settings_env(BREVO_API_KEY="xkeysib-test")

    sent = await BrevoClient(transport=_transport(400, [])).send("a@example.com", "s", "<p>h</p>")

    assert sent is False


async def test_transport_error_returns_false(settings_env):
    settings_env(BREVO_API_KEY="xkeysib-test")

    def handler(request):
        raise httpx.ConnectError("boom")

    sent = await BrevoClient(transport=httpx.MockTransport(handler)).send("a@example.com", "s", "<p>h</p>")

    assert sent is False
