"""Test suite for the decision router (execution planner)."""

import pytest

from chief_of_staff.orchestrator.decision_router import apply_rules, list_available_intents
from chief_of_staff.orchestrator.intent import Intent


def _intent(name, platforms=()):
    return Intent(name=name, platforms=list(platforms))


def test_schedule_with_both_suites_runs_in_parallel():
    plan = apply_rules(_intent("schedule_meeting", ["google", "microsoft"]))

    assert plan.agents == ["google", "microsoft"]
    assert plan.parallel is True


def test_schedule_with_single_suite_is_sequential():
    plan = apply_rules(_intent("schedule_meeting", ["google"]))

    assert plan.agents == ["google"]
    assert plan.parallel is False


def test_schedule_without_platform_defaults_to_microsoft():
    plan = apply_rules(_intent("schedule_meeting"))

    assert plan.agents == ["microsoft"]
    assert plan.parallel is False


@pytest.mark.parametrize(
    "name,platforms,agents",
    [
        ("email_action", ["google"], ["content", "google"]),
        ("email_action", [], ["content", "microsoft"]),
        ("email_action", ["microsoft", "linkedin"], ["content", "microsoft"]),
        ("linkedin_action", ["linkedin"], ["content", "linkedin"]),
        ("task_management", [], ["task"]),
        ("content_creation", ["google"], ["content"]),
    ],
)
def test_routing_table(name, platforms, agents):
    plan = apply_rules(_intent(name, platforms))

    assert plan.agents == agents
    assert plan.parallel is False
    assert plan.intent_type == name


@pytest.mark.parametrize("name", ["general_query", "search_action", "something_new"])
def test_unrouted_intents_fall_back_to_content(name):
    plan = apply_rules(_intent(name))

    assert plan.agents == ["content"]
    assert plan.parallel is False


def test_list_available_intents():
    assert list_available_intents() == [
        "content_creation",
        "email_action",
        "linkedin_action",
        "schedule_meeting",
        "task_management",
    ]
