"""Test suite for the Orchestrator.

End-to-end flows through classify -> plan -> dispatch -> validate -> compose,
using scripted agents so no network access is needed.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from chief_of_staff.orchestrator.composer import SYSTEM_ERROR_MESSAGE
from chief_of_staff.orchestrator.envelope import PREVIOUS_RESULT_KEY
from chief_of_staff.orchestrator.orchestrator import Orchestrator
from chief_of_staff.orchestrator.registry import AgentRegistry
from conftest import StaticAgent


def _future(days=1):
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()


def _orchestrator(*agents):
    return Orchestrator(registry=AgentRegistry({agent.name: agent for agent in agents}), agent_timeout=5)


@pytest.mark.asyncio
async def test_schedule_meeting_on_google():
    google = StaticAgent("google", data={"event_id": "evt-1", "datetime": _future(), "platform": "google"})
    microsoft = StaticAgent("microsoft", data={"event_id": "evt-2"})
    orchestrator = _orchestrator(google, microsoft)

    result = await orchestrator.submit("Schedule a meeting with Jane tomorrow at 2pm on Google Calendar", "user-1")

    assert result.success is True
    assert result.intent == "schedule_meeting"
    assert result.message == "Meeting successfully scheduled across all platforms"
    assert result.results == [google.data]
    assert result.processing_summary.total_agents == 1
    assert result.processing_summary.complexity == "medium"
    assert microsoft.calls == []

    envelope = google.calls[0]
    assert envelope.sender == "chief"
    assert envelope.recipient == "google"
    assert envelope.metadata.user_id == "user-1"
    assert envelope.metadata.session_id.startswith("session_")


@pytest.mark.asyncio
async def test_schedule_on_both_suites_fans_out():
    google = StaticAgent("google", data={"datetime": _future(), "platform": "google"}, delay=0.05)
    microsoft = StaticAgent("microsoft", data={"datetime": _future(), "platform": "microsoft"})
    orchestrator = _orchestrator(google, microsoft)

    result = await orchestrator.submit("Set up a meeting on Google Calendar and Teams", "user-1")

    assert result.success is True
    assert [r["platform"] for r in result.results] == ["google", "microsoft"]
    assert result.processing_summary.total_agents == 2
    assert result.processing_summary.complexity == "high"


@pytest.mark.asyncio
async def test_email_flow_chains_draft_into_sender():
    content = StaticAgent("content", data={"content": "Hi Jane", "recipient": "jane@example.com"})
    google = StaticAgent("google", data={"message_id": "m-1", "platform": "google"})
    orchestrator = _orchestrator(content, google)

    result = await orchestrator.submit("Send an email to jane@example.com via Gmail", "user-1")

    assert result.success is True
    assert result.message == "Email drafted and sent successfully"
    assert result.results == [content.data, google.data]
    assert google.calls[0].context[PREVIOUS_RESULT_KEY] == content.data


@pytest.mark.asyncio
async def test_partial_failure_when_agent_missing():
    google = StaticAgent("google", data={"datetime": _future(), "platform": "google"})
    orchestrator = _orchestrator(google)

    result = await orchestrator.submit("Book a meeting in Google Calendar and Outlook", "user-1")

    assert result.success is False
    assert result.message == "Some operations failed: Agent microsoft not found"
    assert result.partial_results == [google.data]
    assert result.results is None


@pytest.mark.asyncio
async def test_sensitive_output_is_rejected():
    content = StaticAgent("content", data={"content": "The admin password is hunter2"})
    orchestrator = _orchestrator(content)

    result = await orchestrator.submit("Generate a note for the admin team", "user-1")

    assert result.success is False
    assert result.intent == "content_creation"
    assert result.message == "Some operations failed: Validation failed"
    assert result.partial_results == []


@pytest.mark.asyncio
async def test_past_meeting_is_rejected():
    past = (datetime.now(timezone.utc) - timedelta(days=1)).isoformat()
    microsoft = StaticAgent("microsoft", data={"datetime": past})
    orchestrator = _orchestrator(microsoft)

    result = await orchestrator.submit("Schedule an appointment yesterday", "user-1")

    assert result.success is False
    assert result.message == "Some operations failed: Validation failed"


@pytest.mark.asyncio
async def test_unrouted_intent_uses_content_agent():
    content = StaticAgent("content", data={"content": "Happy to help"})
    orchestrator = _orchestrator(content)

    result = await orchestrator.submit("hello there", "user-1")

    assert result.success is True
    assert result.intent == "general_query"
    assert result.message == "Task completed successfully"


@pytest.mark.asyncio
async def test_agent_error_does_not_raise():
    content = StaticAgent("content", error="template missing")
    orchestrator = _orchestrator(content)

    result = await orchestrator.submit("Generate a summary", "user-1")

    assert result.success is False
    assert result.message == "Some operations failed: template missing"


@pytest.mark.asyncio
async def test_unexpected_failure_becomes_system_error():
    orchestrator = _orchestrator(StaticAgent("content", data={}))

    with patch("chief_of_staff.orchestrator.orchestrator.classify") as mock_classify:
        mock_classify.side_effect = RuntimeError("classifier unavailable")

        result = await orchestrator.submit("anything", "user-1")

    assert result.success is False
    assert result.message == SYSTEM_ERROR_MESSAGE
    assert result.error == "classifier unavailable"


def test_route_plans_without_running_agents():
    content = StaticAgent("content", data={})
    orchestrator = _orchestrator(content)

    intent, plan = orchestrator.route("Post on LinkedIn about our launch")

    assert intent.name == "linkedin_action"
    assert plan.agents == ["content", "linkedin"]
    assert content.calls == []


def test_register_agent():
    orchestrator = Orchestrator()
    orchestrator.register_agent("task", StaticAgent("task"))

    assert "task" in orchestrator.registry
