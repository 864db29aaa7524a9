"""Decision router: Maps intents to execution plans.

Pure routing logic, no agent invocation. The rule table below is
configuration: each intent name maps to a builder that reads the detected
platforms and returns the plan.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List

from chief_of_staff.orchestrator.envelope import AgentType
from chief_of_staff.orchestrator.intent import Intent, IntentType, Platform


@dataclass
class ExecutionPlan:
    """Capabilities to run for one intent.

    Attributes:
        intent_type: The intent that generated this plan
        agents: Capability names in execution (and result) order
        parallel: Run all agents concurrently instead of chaining them
    """

    intent_type: str
    agents: List[str] = field(default_factory=list)
    parallel: bool = False

    def to_dict(self) -> Dict[str, object]:
        return {"intent": self.intent_type, "agents": list(self.agents), "parallel": self.parallel}


def _schedule_meeting(intent: Intent) -> ExecutionPlan:
    google = intent.has_platform(Platform.GOOGLE.value)
    microsoft = intent.has_platform(Platform.MICROSOFT.value)

    if google and microsoft:
        # Both calendars at once
        return ExecutionPlan(intent.name, [AgentType.GOOGLE.value, AgentType.MICROSOFT.value], parallel=True)
    if google:
        return ExecutionPlan(intent.name, [AgentType.GOOGLE.value])
    return ExecutionPlan(intent.name, [AgentType.MICROSOFT.value])


def _email_action(intent: Intent) -> ExecutionPlan:
    mail = AgentType.GOOGLE if intent.has_platform(Platform.GOOGLE.value) else AgentType.MICROSOFT
    # Sequential: draft content before the mail agent sends it
    return ExecutionPlan(intent.name, [AgentType.CONTENT.value, mail.value])


def _linkedin_action(intent: Intent) -> ExecutionPlan:
    return ExecutionPlan(intent.name, [AgentType.CONTENT.value, AgentType.LINKEDIN.value])


def _task_management(intent: Intent) -> ExecutionPlan:
    return ExecutionPlan(intent.name, [AgentType.TASK.value])


def _content_creation(intent: Intent) -> ExecutionPlan:
    return ExecutionPlan(intent.name, [AgentType.CONTENT.value])


# Decision rules: intent name -> plan builder
DECISION_RULES: Dict[str, Callable[[Intent], ExecutionPlan]] = {
    IntentType.SCHEDULE_MEETING.value: _schedule_meeting,
    IntentType.EMAIL_ACTION.value: _email_action,
    IntentType.LINKEDIN_ACTION.value: _linkedin_action,
    IntentType.TASK_MANAGEMENT.value: _task_management,
    IntentType.CONTENT_CREATION.value: _content_creation,
}

DEFAULT_AGENT = AgentType.CONTENT.value


def apply_rules(intent: Intent) -> ExecutionPlan:
    """Apply decision rules to an intent and return an execution plan.

    Intents without a rule fall back to the default content agent,
    sequentially.

    Args:
        intent: The classified intent

    Returns:
        ExecutionPlan specifying which agents to run and how
    """
    builder = DECISION_RULES.get(intent.name)
    if builder is None:
        return ExecutionPlan(intent.name, [DEFAULT_AGENT])
    return builder(intent)


def list_available_intents() -> List[str]:
    """Return all intent names that have a dedicated routing rule."""
    return sorted(DECISION_RULES.keys())
