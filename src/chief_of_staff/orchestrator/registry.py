"""Registry of capability agents.

Maps capability names to agent instances. Populated by the host before the
first request and only read afterwards, so lookups take no lock.
"""

import logging
from typing import Dict, Iterator, List, Optional, Protocol, runtime_checkable

from chief_of_staff.orchestrator.envelope import Envelope, Response

logger = logging.getLogger(__name__)


@runtime_checkable
class CapabilityAgent(Protocol):
    """The one contract every agent satisfies.

    `process` must not raise; failures come back as an error Response.
    """

    async def process(self, envelope: Envelope) -> Response:
        ...


class AgentNotFoundError(KeyError):
    """Raised when a capability name has no registered agent."""


class AgentRegistry:
    """Capability name -> agent instance."""

    def __init__(self, agents: Optional[Dict[str, CapabilityAgent]] = None):
        self._agents: Dict[str, CapabilityAgent] = {}
        for name, agent in (agents or {}).items():
            self.register(name, agent)

    def register(self, name: str, agent: CapabilityAgent) -> None:
        """Register (or replace) the agent for a capability.

        Raises:
            TypeError: If the agent has no async `process` method
        """
        if not isinstance(agent, CapabilityAgent):
            raise TypeError(f"Agent for '{name}' must implement process(envelope)")
        if name in self._agents:
            logger.warning(f"Replacing agent registered for '{name}'")
        self._agents[str(name)] = agent
        logger.info(f"Agent {name} registered")

    def get(self, name: str) -> Optional[CapabilityAgent]:
        return self._agents.get(name)

    def require(self, name: str) -> CapabilityAgent:
        agent = self._agents.get(name)
        if agent is None:
            raise AgentNotFoundError(name)
        return agent

    def names(self) -> List[str]:
        return list(self._agents.keys())

    def __contains__(self, name: object) -> bool:
        return name in self._agents

    def __len__(self) -> int:
        return len(self._agents)

    def __iter__(self) -> Iterator[str]:
        return iter(self._agents)
