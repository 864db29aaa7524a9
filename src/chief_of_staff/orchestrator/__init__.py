"""Orchestrator package: classification, planning, dispatch and validation.

Control plane for deciding which capability agents run and in what order.
No integration work happens here.
"""

from chief_of_staff.orchestrator.envelope import (
    PREVIOUS_RESULT_KEY,
    AgentType,
    Envelope,
    EnvelopeMetadata,
    Priority,
    Response,
    ResponseStatus,
)
from chief_of_staff.orchestrator.intent import Complexity, Intent, IntentType
from chief_of_staff.orchestrator.orchestrator import Orchestrator
from chief_of_staff.orchestrator.registry import AgentRegistry

__all__ = [
    "PREVIOUS_RESULT_KEY",
    "AgentRegistry",
    "AgentType",
    "Complexity",
    "Envelope",
    "EnvelopeMetadata",
    "Intent",
    "IntentType",
    "Orchestrator",
    "Priority",
    "Response",
    "ResponseStatus",
]
