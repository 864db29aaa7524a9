"""Test suite for the HTTP host.

Validates:
- /health, /intents, /classify and /chat
- Request validation (422)
- Signature middleware when CHAT_API_SECRET is set
"""

import json

import pytest
from fastapi.testclient import TestClient

from chief_of_staff.ai_server import app
from chief_of_staff.utils.request_security import RequestSecurity


@pytest.fixture
def client(monkeypatch):
    monkeypatch.delenv("CHAT_API_SECRET", raising=False)
    with TestClient(app) as test_client:
        yield test_client


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_intents(client):
    response = client.get("/intents")

    assert response.status_code == 200
    assert "schedule_meeting" in response.json()["intents"]


def test_classify_routes_without_running_agents(client):
    response = client.post("/classify", json={"message": "Schedule a sync on Google Calendar and Outlook"})

    assert response.status_code == 200
    body = response.json()
    assert body["intent"] == "schedule_meeting"
    assert body["platforms"] == ["google", "microsoft"]
    assert body["agents"] == ["google", "microsoft"]
    assert body["parallel"] is True
    assert body["complexity"] == "high"


def test_chat_creates_task(client):
    response = client.post("/chat", json={"message": "Create a task to review the Q3 report", "user_id": "u-1"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["intent"] == "task_management"
    assert body["message"] == "Task created and organized"
    assert body["results"][0]["task"]["title"] == "review the Q3 report"


def test_chat_reports_partial_failure(client, monkeypatch):
    monkeypatch.delenv("GOOGLE_ACCESS_TOKEN", raising=False)
    client.app.state.orchestrator.registry.get("google").access_token = None

    response = client.post(
        "/chat", json={"message": "Send an email to jane@example.com via Gmail", "user_id": "u-1"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Some operations failed: Google access token not configured"
    assert body["partial_results"][0]["recipient"] == "jane@example.com"


@pytest.mark.parametrize("payload", [{}, {"message": "", "user_id": "u"}, {"message": "hi"}])
def test_chat_rejects_invalid_body(client, payload):
    assert client.post("/chat", json=payload).status_code == 422


def test_signature_required_when_secret_set(client, monkeypatch):
    monkeypatch.setenv("CHAT_API_SECRET", "s3cret")
    body = json.dumps({"message": "hello there"})

    unsigned = client.post("/classify", content=body, headers={"Content-Type": "application/json"})
    signed = client.post(
        "/classify",
        content=body,
        headers={
            "Content-Type": "application/json",
            "X-Chat-Signature": RequestSecurity.sign(body, "s3cret"),
        },
    )

    assert unsigned.status_code == 401
    assert unsigned.json() == {"detail": "Invalid request signature"}
    assert signed.status_code == 200
    assert signed.json()["intent"] == "general_query"
    # Unprotected paths never need a signature
    assert client.get("/health").status_code == 200


def test_non_utf8_body_is_rejected_not_crashed(client, monkeypatch):
    monkeypatch.setenv("CHAT_API_SECRET", "s3cret")
    body = b"\xc3\x28 not utf-8"
    headers = {"Content-Type": "application/json"}

    unsigned = client.post("/chat", content=body, headers=headers)
    signed = client.post(
        "/chat",
        content=body,
        headers={**headers, "X-Chat-Signature": RequestSecurity.sign(body, "s3cret")},
    )

    assert unsigned.status_code == 401
    # Signature checks out, so the body reaches FastAPI body parsing
    assert signed.status_code in (400, 422)


def test_verify_signature_rejects_malformed_headers():
    assert RequestSecurity.verify_signature("{}", "", "s") is False
    assert RequestSecurity.verify_signature("{}", "md5=abc", "s") is False
    assert RequestSecurity.verify_signature("{}", "nohash", "s") is False
    assert RequestSecurity.verify_signature("{}", RequestSecurity.sign("{}", "s"), "s") is True
