"""Dispatcher: executes an ExecutionPlan against the agent registry.

Sequential plans chain each successful payload into the next envelope's
context. Parallel plans fan out to every agent with the same envelope and
join in plan order.
"""

import asyncio
import logging
import os
import time
from typing import List, Optional

from chief_of_staff.orchestrator.decision_router import ExecutionPlan
from chief_of_staff.orchestrator.envelope import AgentType, Envelope, Response, error_response
from chief_of_staff.orchestrator.registry import AgentNotFoundError, AgentRegistry

logger = logging.getLogger(__name__)

DEFAULT_AGENT_TIMEOUT = 30.0


def _timeout_from_env() -> Optional[float]:
    raw = os.getenv("AGENT_TIMEOUT_SECONDS")
    if raw is None or raw == "":
        return DEFAULT_AGENT_TIMEOUT
    value = float(raw)
    # 0 or negative disables the bound
    return value if value > 0 else None


class Dispatcher:
    """Runs capability agents and measures each call.

    Every call returns a Response: unregistered names, timeouts and
    exceptions escaping a misbehaving agent all become error Responses.
    Cancellation of the caller is never swallowed.
    """

    def __init__(self, registry: AgentRegistry, agent_timeout: Optional[float] = None, use_env: bool = True):
        self.registry = registry
        if agent_timeout is None and use_env:
            agent_timeout = _timeout_from_env()
        self.agent_timeout = agent_timeout

    async def delegate(self, agent_name: str, envelope: Envelope) -> Response:
        """Invoke one agent and attach latency and source to its Response."""
        try:
            agent = self.registry.require(agent_name)
        except AgentNotFoundError:
            logger.warning(f"Agent {agent_name} not found")
            response = error_response(AgentType.CHIEF.value, f"Agent {agent_name} not found")
            response.source_agent = agent_name
            return response

        hop = envelope.derive(recipient=agent_name)
        started = time.perf_counter()
        try:
            if self.agent_timeout is None:
                response = await agent.process(hop)
            else:
                response = await asyncio.wait_for(agent.process(hop), timeout=self.agent_timeout)
        except asyncio.TimeoutError:
            logger.error(f"Agent {agent_name} timed out after {self.agent_timeout}s")
            response = error_response(agent_name, f"Agent {agent_name} timed out after {self.agent_timeout}s")
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.exception(f"Agent {agent_name} raised instead of returning a Response")
            response = error_response(agent_name, str(e))

        if not isinstance(response, Response):
            response = error_response(agent_name, f"Agent {agent_name} returned an invalid response")

        response.processing_time = (time.perf_counter() - started) * 1000.0
        response.source_agent = agent_name

        logger.info(
            f"Agent {agent_name} completed: status={response.status.value}, "
            f"processing_time={response.processing_time:.1f}ms"
        )
        return response

    async def execute_sequential(self, agents: List[str], envelope: Envelope) -> List[Response]:
        """Run agents one at a time, never short-circuiting on error."""
        results: List[Response] = []
        current = envelope

        for agent_name in agents:
            response = await self.delegate(agent_name, current)
            results.append(response)

            # Only successful payloads are chained forward
            if response.succeeded and response.data is not None:
                current = current.with_previous_result(response.data)

        return results

    async def execute_parallel(self, agents: List[str], envelope: Envelope) -> List[Response]:
        """Run all agents concurrently and return results in plan order."""
        async with asyncio.TaskGroup() as group:
            tasks = [group.create_task(self.delegate(agent_name, envelope)) for agent_name in agents]
        return [task.result() for task in tasks]

    async def execute(self, plan: ExecutionPlan, envelope: Envelope) -> List[Response]:
        logger.info(
            f"Executing plan for {plan.intent_type}: {' -> '.join(plan.agents)} "
            f"({'parallel' if plan.parallel else 'sequential'})"
        )
        if plan.parallel:
            return await self.execute_parallel(plan.agents, envelope)
        return await self.execute_sequential(plan.agents, envelope)
