"""Capability agents registered into the orchestrator."""

from chief_of_staff.agents.base import BaseAgent, IntegrationNotConfiguredError
from chief_of_staff.agents.content_agent import ContentAgent
from chief_of_staff.agents.google_agent import GoogleAgent
from chief_of_staff.agents.linkedin_agent import LinkedInAgent
from chief_of_staff.agents.microsoft_agent import MicrosoftAgent
from chief_of_staff.agents.task_agent import TaskAgent

__all__ = [
    "BaseAgent",
    "ContentAgent",
    "GoogleAgent",
    "IntegrationNotConfiguredError",
    "LinkedInAgent",
    "MicrosoftAgent",
    "TaskAgent",
]
