"""Tests for report payments: config, PaymentIntent creation, status and webhook.

Stripe calls are patched; the webhook signature check is replaced by a
patched construct_event returning the event under test.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import stripe
from fastapi.testclient import TestClient

from angelic.agent.llm_fake import sample_report_json

pytestmark = pytest.mark.integration


@pytest.fixture
def stripe_on(settings_env):
    return settings_env(
        STRIPE_SECRET_KEY="sk_test_dummy",
        STRIPE_PUBLISHABLE_KEY="pk_test_dummy",
        STRIPE_WEBHOOK_SECRET="whsec_test_dummy",
    )


def _intent(intent_id: str = "pi_test_1"):
    intent = MagicMock()
    intent.id = intent_id
    intent.client_secret = f"{intent_id}_secret_abc"
    return intent


def _event(event_id: str, intent_id: str = "pi_test_1", report_type: str = "angelic") -> dict:
    return {
        "id": event_id,
        "type": "payment_intent.succeeded",
        "data": {"object": {"id": intent_id, "metadata": {"reportType": report_type}}},
    }


def _conversation(client: TestClient, headers: dict) -> str:
    response = client.post("/api/chat", json={"message": "A farm marketplace", "uiLanguage": "en"}, headers=headers)
    return response.json()["conversationId"]


def _create_payment(client: TestClient, conversation_id: str, intent_id: str = "pi_test_1"):
    with patch.object(stripe.PaymentIntent, "create_async", new=AsyncMock(return_value=_intent(intent_id))) as create:
        response = client.post("/api/create-report-payment", json={"conversationId": conversation_id})
    return response, create


def _webhook(client: TestClient, event: dict):
    with patch.object(stripe.Webhook, "construct_event", return_value=event):
        return client.post("/api/stripe-webhook", content=b"{}", headers={"stripe-signature": "t=1,v1=abc"})


def test_config_reports_disabled(api_client: TestClient):
    assert api_client.get("/api/payments/config").json() == {"enabled": False, "publishableKey": None}


def test_config_reports_enabled(api_client: TestClient, stripe_on):
    assert api_client.get("/api/payments/config").json() == {"enabled": True, "publishableKey": "pk_test_dummy"}


def test_create_payment_without_stripe_is_not_configured(api_client: TestClient):
    response = api_client.post("/api/create-report-payment", json={"conversationId": "c"})

    assert response.status_code == 503
    assert response.json()["code"] == "payment_not_configured"


def test_create_payment_requires_conversation(api_client: TestClient, stripe_on):
    assert api_client.post("/api/create-report-payment", json={}).status_code == 400
    response, _ = _create_payment(api_client, "missing")
    assert response.status_code == 404


def test_create_payment_uses_async_sdk(api_client: TestClient, stripe_on, registered_user):
    conversation_id = _conversation(api_client, registered_user["headers"])

    response, create = _create_payment(api_client, conversation_id)

    assert response.status_code == 200
    body = response.json()
    assert body["clientSecret"] == "pi_test_1_secret_abc"
    assert body["amount"] == 200
    create.assert_awaited_once()
    assert create.await_args.kwargs["metadata"]["conversationId"] == conversation_id

    status = api_client.get(f"/api/report-payment-status/{body['reportId']}").json()
    assert status["paymentStatus"] == "pending"


def test_webhook_without_secret_is_503(api_client: TestClient):
    response = api_client.post("/api/stripe-webhook", content=b"{}", headers={"stripe-signature": "x"})

    assert response.status_code == 503


def test_webhook_without_signature_is_400(api_client: TestClient, stripe_on):
    assert api_client.post("/api/stripe-webhook", content=b"{}").status_code == 400


def test_webhook_with_bad_signature_is_400(api_client: TestClient, stripe_on):
    error = stripe.SignatureVerificationError("bad signature", "t=1,v1=abc")
    with patch.object(stripe.Webhook, "construct_event", side_effect=error):
        response = api_client.post("/api/stripe-webhook", content=b"{}", headers={"stripe-signature": "t=1,v1=abc"})

    assert response.status_code == 400


def test_webhook_marks_report_paid_once(api_client: TestClient, stripe_on, registered_user):
    conversation_id = _conversation(api_client, registered_user["headers"])
    report_id = _create_payment(api_client, conversation_id)[0].json()["reportId"]

    first = _webhook(api_client, _event("evt_1"))
    with patch("angelic.services.report_service.ReportService.mark_paid", new=AsyncMock()) as mark_paid:
        duplicate = _webhook(api_client, _event("evt_1"))

    assert first.json() == {"received": True}
    assert duplicate.json() == {"received": True}
    mark_paid.assert_not_awaited()
    status = api_client.get(f"/api/report-payment-status/{report_id}").json()
    assert status["paymentStatus"] == "paid"
    assert status["paidAt"] is not None


def test_paid_report_is_pending_until_generated(api_client: TestClient, api_llm, stripe_on, registered_user, settings_env):
    settings_env(REPORT_PAYMENT_REQUIRED="true")
    headers = registered_user["headers"]
    conversation_id = _conversation(api_client, headers)
    report_id = _create_payment(api_client, conversation_id)[0].json()["reportId"]
    _webhook(api_client, _event("evt_2"))

    pending = api_client.get(f"/api/reports/{report_id}", headers=headers)
    assert pending.status_code == 409
    assert pending.json()["detail"] == "report_pending"

    api_llm.queue(sample_report_json("en"))
    generated = api_client.post(
        "/api/generate-angelic-report", json={"conversationId": conversation_id}, headers=headers
    )
    assert generated.status_code == 200
    assert generated.json()["reportId"] == report_id
    assert api_client.get(f"/api/reports/{report_id}", headers=headers).status_code == 200


def test_webhook_generates_report_for_requested_email(
    api_client: TestClient, api_llm, stripe_on, registered_user, settings_env
):
    settings_env(REPORT_PAYMENT_REQUIRED="true")
    headers = registered_user["headers"]
    conversation_id = _conversation(api_client, headers)
    # Payment is required, so the request itself only records the email
    api_client.post(
        "/api/request-report",
        json={"email": "founder@example.com", "conversationId": conversation_id},
        headers=headers,
    )
    report_id = _create_payment(api_client, conversation_id)[0].json()["reportId"]

    api_llm.queue(sample_report_json("en"))
    _webhook(api_client, _event("evt_3"))

    report = api_client.get(f"/api/reports/{report_id}", headers=headers)
    assert report.status_code == 200
    assert report.json()["report"]["overallScore"] == 72


def test_unlock_after_webhook_returns_filled_report(
    api_client: TestClient, api_llm, stripe_on, registered_user, settings_env
):
    settings_env(REPORT_PAYMENT_REQUIRED="true")
    headers = registered_user["headers"]
    conversation_id = _conversation(api_client, headers)
    api_client.post(
        "/api/request-report",
        json={"email": "founder@example.com", "conversationId": conversation_id},
        headers=headers,
    )
    report_id = _create_payment(api_client, conversation_id)[0].json()["reportId"]
    api_llm.queue(sample_report_json("en"))
    _webhook(api_client, _event("evt_4"))
    calls_after_webhook = len(api_llm.calls)

    unlocked = api_client.post(
        "/api/generate-angelic-report",
        json={"conversationId": conversation_id, "reportId": report_id},
        headers=headers,
    )

    assert unlocked.status_code == 200
    assert unlocked.json()["reportId"] == report_id
    assert unlocked.json()["report"]["overallScore"] == 72
    assert len(api_llm.calls) == calls_after_webhook
    reports = api_client.get("/api/my-reports", headers=headers).json()
    assert [r["id"] for r in reports] == [report_id]


def test_unlock_of_unpaid_report_is_402(api_client: TestClient, stripe_on, registered_user):
    headers = registered_user["headers"]
    conversation_id = _conversation(api_client, headers)
    report_id = _create_payment(api_client, conversation_id)[0].json()["reportId"]

    response = api_client.post(
        "/api/generate-angelic-report",
        json={"conversationId": conversation_id, "reportId": report_id},
        headers=headers,
    )

    assert response.status_code == 402


def test_unlock_of_unknown_report_is_404(api_client: TestClient, registered_user):
    headers = registered_user["headers"]
    conversation_id = _conversation(api_client, headers)

    response = api_client.post(
        "/api/generate-angelic-report",
        json={"conversationId": conversation_id, "reportId": "missing"},
        headers=headers,
    )

    assert response.status_code == 404
