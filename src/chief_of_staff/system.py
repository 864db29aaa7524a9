"""Wiring of the default orchestrator with every built-in capability agent."""

import logging
from typing import Optional

from chief_of_staff.agents import ContentAgent, GoogleAgent, LinkedInAgent, MicrosoftAgent, TaskAgent
from chief_of_staff.orchestrator.envelope import AgentType
from chief_of_staff.orchestrator.orchestrator import Orchestrator
from chief_of_staff.orchestrator.registry import AgentRegistry

logger = logging.getLogger(__name__)


def create_orchestrator(agent_timeout: Optional[float] = None) -> Orchestrator:
    """Build an orchestrator with the default agents.

    Integration agents read their tokens from the environment; an agent
    without a token still registers and answers with an error Response.
    """
    registry = AgentRegistry({
        AgentType.GOOGLE.value: GoogleAgent(),
        AgentType.MICROSOFT.value: MicrosoftAgent(),
        AgentType.LINKEDIN.value: LinkedInAgent(),
        AgentType.CONTENT.value: ContentAgent(),
        AgentType.TASK.value: TaskAgent(),
    })
    logger.info(f"Orchestrator created with agents: {', '.join(registry.names())}")
    return Orchestrator(registry=registry, agent_timeout=agent_timeout)
