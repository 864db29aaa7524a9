"""Base class for capability agents."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from chief_of_staff.orchestrator.envelope import (
    PREVIOUS_RESULT_KEY,
    Envelope,
    Response,
    ResponseStatus,
    new_response_id,
)


class IntegrationNotConfiguredError(RuntimeError):
    """Raised when an integration agent has no access token."""


class BaseAgent(ABC):
    """Shared behaviour for every capability agent.

    Subclasses implement `handle`. `process` is the public contract and turns
    any exception into an error Response, so nothing escapes the agent.
    """

    def __init__(self, agent_type: str, config: Optional[Dict[str, Any]] = None):
        self.agent_type = agent_type
        self.config = config or {}
        self.logger = logging.getLogger(f"{__name__}.{agent_type}")

    async def process(self, envelope: Envelope) -> Response:
        try:
            return await self.handle(envelope)
        except Exception as e:
            self.logger.error(f"{self.agent_type} agent failed: {e}")
            return self.create_response(ResponseStatus.ERROR, error=str(e))

    @abstractmethod
    async def handle(self, envelope: Envelope) -> Response:
        """Do the agent's work for one envelope."""

    def create_response(
        self,
        status: ResponseStatus,
        data: Any = None,
        error: Optional[str] = None,
        next_agent: Optional[str] = None,
    ) -> Response:
        return Response(
            id=new_response_id(self.agent_type),
            status=status,
            data=data,
            error=error,
            next_agent=next_agent,
            source_agent=self.agent_type,
        )

    @staticmethod
    def previous_result(envelope: Envelope) -> Dict[str, Any]:
        """Payload chained in by the previous sequential step, or {}."""
        previous = envelope.context.get(PREVIOUS_RESULT_KEY)
        return previous if isinstance(previous, dict) else {}

    def success(self, data: Any) -> Response:
        return self.create_response(ResponseStatus.SUCCESS, data=data)

    def failure(self, error: str) -> Response:
        return self.create_response(ResponseStatus.ERROR, error=error)
