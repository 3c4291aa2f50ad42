"""API tests for the credit-gated career assistant."""

from careercrafter.models.ai_credit_ledger import AiCreditLedger
from careercrafter.models.chat import ChatUsageState
from careercrafter.platform.errors import ProviderError
from tests.conftest import TestingSessionLocal, create_job, create_user, set_message_count


def _send(client, email, message):
    return client.post(f"/api/v1/ai-chatbot/chat/{email}/message", json={"message": message})


def test_get_chat_creates_transcript_with_greeting(client, db):
    user = create_user(db)

    resp = client.get(f"/api/v1/ai-chatbot/chat/{user.email}")

    assert resp.status_code == 200
    data = resp.json()
    assert data["userEmail"] == user.email
    assert len(data["messages"]) == 1
    assert data["messages"][0]["role"] == "assistant"
    assert "CareerCrafter AI" in data["messages"][0]["content"]

    again = client.get(f"/api/v1/ai-chatbot/chat/{user.email}").json()
    assert again["id"] == data["id"]


def test_empty_message_is_rejected(client, db):
    user = create_user(db)

    resp = _send(client, user.email, "   ")

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Message is required"


def test_free_messages_then_upsell_without_calling_responder(client, db, responder):
    user = create_user(db, ai_credits=0)

    first = _send(client, user.email, "hello")
    second = _send(client, user.email, "How should I prepare for interviews?")
    third = _send(client, user.email, "Tell me more please")

    assert [r.status_code for r in (first, second, third)] == [200, 200, 200]

    first_data = first.json()
    assert first_data["userMessage"]["content"] == "hello"
    assert first_data["assistantMessage"]["content"].endswith("Free messages: 1 remaining")
    assert first_data["userAccess"] == {"allowed": True, "tier": "free", "remainingFree": 1, "messageCount": 1}

    assert second.json()["assistantMessage"]["content"].endswith("Free messages: 0 remaining")
    assert second.json()["userAccess"]["allowed"] is False

    third_data = third.json()
    assert "You've used your 2 free messages" in third_data["assistantMessage"]["content"]
    assert third_data["userAccess"]["tier"] == "blocked"
    assert third_data["userAccess"]["required"] == 10
    assert third_data["jobs"] == []

    assert len(responder.calls) == 2
    assert responder.calls[0]["tier"] == "free"
    assert responder.calls[0]["remaining_free"] == 2

    transcript = client.get(f"/api/v1/ai-chatbot/chat/{user.email}").json()["messages"]
    assert [m["role"] for m in transcript] == ["user", "assistant"] * 3


def test_credit_user_is_charged_per_reply_character(client, db, responder):
    user = create_user(db, ai_credits=100)
    set_message_count(db, user.email, 2)
    responder.reply_text = "x" * 300

    data = _send(client, user.email, "Any tips for salary negotiation?").json()

    assert data["assistantMessage"]["content"] == "x" * 300
    assert data["userAccess"]["tier"] == "credits"
    assert data["userAccess"]["credits"] == 70

    session = TestingSessionLocal()
    try:
        entry = session.query(AiCreditLedger).filter(AiCreditLedger.user_id == user.id).one()
        assert entry.delta == -30
        assert entry.balance_after == 70
    finally:
        session.close()


def test_premium_user_keeps_chatting_without_credit_minimum(client, db, responder):
    user = create_user(db, is_premium=True, ai_credits=20)
    set_message_count(db, user.email, 5)
    responder.reply_text = "y" * 50

    data = _send(client, user.email, "Review my career path").json()

    assert data["userAccess"]["allowed"] is True
    assert data["userAccess"]["tier"] == "premium"
    assert data["userAccess"]["credits"] == 15


def test_unknown_user_is_denied_without_responder_call(client, responder):
    data = _send(client, "ghost@test.com", "hello").json()

    assert data["userAccess"]["allowed"] is False
    assert data["userAccess"]["reason"] == "User not found"
    assert responder.calls == []

    session = TestingSessionLocal()
    try:
        assert session.query(ChatUsageState).count() == 0
    finally:
        session.close()


def test_job_search_intent_returns_jobs(client, db, responder):
    user = create_user(db)
    job = create_job(db, title="Senior React Developer", company="Brightpath")

    data = _send(client, user.email, "Can you find me a react job?").json()

    assert [j["id"] for j in data["jobs"]] == [job.id]
    content = data["assistantMessage"]["content"]
    assert "I found **1 matching position**" in content
    assert "**Senior React Developer** at Brightpath" in content
    assert content.endswith("Free messages: 1 remaining")
    assert responder.calls == []


def test_job_search_without_results_suggests_alerts(client, db):
    user = create_user(db)

    data = _send(client, user.email, "find me python jobs").json()

    assert data["jobs"] == []
    assert "Set Job Alerts" in data["assistantMessage"]["content"]


def test_responder_failure_uses_fallback_reply(client, db, responder):
    user = create_user(db)
    responder.error = ProviderError("chat", "all providers down")

    data = _send(client, user.email, "hello").json()

    assert data["assistantMessage"]["content"].startswith("I'm here to help!")


def test_fallback_reply_is_not_charged(client, db, responder):
    user = create_user(db, ai_credits=100)
    set_message_count(db, user.email, 2)
    responder.error = RuntimeError("model unavailable")

    data = _send(client, user.email, "Any tips for salary negotiation?").json()

    assert data["assistantMessage"]["content"].startswith("I'm here to help!")
    assert data["userAccess"]["tier"] == "credits"
    assert data["userAccess"]["credits"] == 100

    session = TestingSessionLocal()
    try:
        assert session.query(AiCreditLedger).count() == 0
    finally:
        session.close()


def test_user_status_reports_access_and_account(client, db):
    user = create_user(db, ai_credits=40, current_plan="credits_pack")
    set_message_count(db, user.email, 2)

    data = client.get(f"/api/v1/ai-chatbot/user-status/{user.email}").json()

    assert data["userAccess"] == {
        "allowed": True,
        "tier": "credits",
        "remainingFree": 0,
        "messageCount": 2,
        "credits": 40,
    }
    assert data["user"] == {
        "email": user.email,
        "isPremium": False,
        "aiCredits": 40,
        "currentPlan": "credits_pack",
        "role": "job_seeker",
    }


def test_user_status_for_unknown_user(client):
    data = client.get("/api/v1/ai-chatbot/user-status/nobody@test.com").json()

    assert data["userAccess"]["allowed"] is False
    assert data["user"]["email"] is None


def test_clear_chat_resets_transcript_but_not_usage(client, db):
    user = create_user(db)
    _send(client, user.email, "hello")

    resp = client.delete(f"/api/v1/ai-chatbot/chat/{user.email}")

    assert resp.status_code == 200
    assert resp.json() == {"message": "Chat cleared successfully"}
    messages = client.get(f"/api/v1/ai-chatbot/chat/{user.email}").json()["messages"]
    assert len(messages) == 1
    assert "Fresh start!" in messages[0]["content"]

    status = client.get(f"/api/v1/ai-chatbot/user-status/{user.email}").json()
    assert status["userAccess"]["messageCount"] == 1
    assert status["userAccess"]["remainingFree"] == 1


def test_clear_chat_can_reset_free_messages_when_enabled(client, db, monkeypatch):
    from careercrafter.platform.config import settings

    monkeypatch.setattr(settings, "CHAT_CLEAR_RESETS_FREE_MESSAGES", True)
    user = create_user(db)
    _send(client, user.email, "hello")
    _send(client, user.email, "hello again")

    client.delete(f"/api/v1/ai-chatbot/chat/{user.email}")

    status = client.get(f"/api/v1/ai-chatbot/user-status/{user.email}").json()
    assert status["userAccess"]["messageCount"] == 0
    assert status["userAccess"]["tier"] == "free"
