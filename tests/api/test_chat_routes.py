"""Tests for /api/chat and the conversation endpoints."""

import pytest
from fastapi.testclient import TestClient

pytestmark = pytest.mark.integration


def _chat(client: TestClient, message: str, **extra):
    return client.post("/api/chat", json={"message": message, "uiLanguage": "en", **extra})


def test_anonymous_chat_creates_conversation(api_client: TestClient, api_llm):
    api_llm.queue("Who is your first customer?", "What do they pay today?\nHow often do they order?")

    response = _chat(api_client, "A marketplace for local farmers", sessionId="sess-1")

    assert response.status_code == 200
    body = response.json()
    assert body["response"] == "Who is your first customer?"
    assert body["conversationId"]
    assert body["followUpQuestions"] == ["What do they pay today?", "How often do they order?"]
    assert [m["role"] for m in body["messages"]] == ["user", "assistant"]


def test_second_turn_sends_stored_history(api_client: TestClient, api_llm):
    api_llm.queue("Who buys?", "", "Which city?", "")
    first = _chat(api_client, "A marketplace for local farmers", sessionId="sess-1").json()

    second = _chat(api_client, "Restaurants", sessionId="sess-1", conversationId=first["conversationId"])

    assert second.status_code == 200
    assert len(second.json()["messages"]) == 4
    chat_call = api_llm.calls[2]
    assert [m["content"] for m in chat_call["messages"]] == [
        "A marketplace for local farmers",
        "Who buys?",
        "Restaurants",
    ]


def test_session_reuses_latest_conversation(api_client: TestClient, api_llm):
    first = _chat(api_client, "Idea one", sessionId="sess-1").json()
    second = _chat(api_client, "More about it", sessionId="sess-1").json()

    assert first["conversationId"] == second["conversationId"]


def test_chat_without_identity_is_401(api_client: TestClient):
    assert _chat(api_client, "hello").status_code == 401


def test_chat_on_foreign_conversation_is_403(api_client: TestClient):
    conversation_id = _chat(api_client, "Idea", sessionId="sess-1").json()["conversationId"]

    response = _chat(api_client, "Hijack", sessionId="sess-2", conversationId=conversation_id)

    assert response.status_code == 403


def test_unknown_conversation_is_404(api_client: TestClient):
    assert _chat(api_client, "Idea", sessionId="sess-1", conversationId="missing").status_code == 404


@pytest.mark.parametrize("message", ["   ", "x" * 1001])
def test_invalid_message_is_422(api_client: TestClient, message: str):
    assert _chat(api_client, message, sessionId="sess-1").status_code == 422


def test_llm_failure_returns_ai_unavailable(api_client: TestClient, api_llm):
    api_llm.scenario = "llm_failure"

    response = _chat(api_client, "Idea", sessionId="sess-1")

    assert response.status_code == 503
    assert response.json()["code"] == "ai_unavailable"
    assert "debug_id" in response.json()


def test_rate_limit_returns_429(api_client: TestClient, settings_env):
    settings_env(CHAT_RATE_LIMIT="2")

    statuses = [_chat(api_client, f"Idea {n}", sessionId="sess-1").status_code for n in range(3)]

    assert statuses == [200, 200, 429]


def test_conversation_messages_for_session(api_client: TestClient):
    conversation_id = _chat(api_client, "Idea", sessionId="sess-1").json()["conversationId"]

    ok = api_client.get(f"/api/conversations/{conversation_id}/messages", params={"sessionId": "sess-1"})
    denied = api_client.get(f"/api/conversations/{conversation_id}/messages", params={"sessionId": "other"})
    anonymous = api_client.get(f"/api/conversations/{conversation_id}/messages")

    assert ok.status_code == 200
    assert len(ok.json()["messages"]) == 2
    assert denied.status_code == 403
    assert anonymous.status_code == 401


def test_associate_then_list(api_client: TestClient, registered_user):
    conversation_id = _chat(api_client, "Idea", sessionId="sess-1").json()["conversationId"]
    headers = registered_user["headers"]

    linked = api_client.post(
        "/api/conversations/associate",
        json={"conversationId": conversation_id, "sessionId": "sess-1"},
        headers=headers,
    )
    listed = api_client.get("/api/conversations", headers=headers)

    assert linked.status_code == 200
    assert [c["id"] for c in listed.json()] == [conversation_id]


def test_associate_with_wrong_session_is_403(api_client: TestClient, registered_user):
    conversation_id = _chat(api_client, "Idea", sessionId="sess-1").json()["conversationId"]

    response = api_client.post(
        "/api/conversations/associate",
        json={"conversationId": conversation_id, "sessionId": "sess-2"},
        headers=registered_user["headers"],
    )

    assert response.status_code == 403


def test_conversations_require_auth(api_client: TestClient):
    assert api_client.get("/api/conversations").status_code == 401


def test_health(api_client: TestClient):
    assert api_client.get("/api/health").json() == {"status": "healthy", "service": "angelic-backend"}
    assert api_client.get("/api/ready").json()["status"] == "ready"
