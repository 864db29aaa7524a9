"""Orchestrator: Single entry point for request handling.

Accepts free text, classifies it, plans, dispatches to capability agents,
validates their output and composes one result.
"""

import logging
import uuid
from typing import Optional, Tuple

from chief_of_staff.orchestrator.classifier import classify
from chief_of_staff.orchestrator.composer import (
    OrchestrationResult,
    compose_final_response,
    system_error_result,
)
from chief_of_staff.orchestrator.decision_router import ExecutionPlan, apply_rules
from chief_of_staff.orchestrator.dispatcher import Dispatcher
from chief_of_staff.orchestrator.envelope import AgentType, Envelope, EnvelopeMetadata, Priority
from chief_of_staff.orchestrator.intent import Intent
from chief_of_staff.orchestrator.quality_gate import QualityGate, validate_results
from chief_of_staff.orchestrator.registry import AgentRegistry, CapabilityAgent

logger = logging.getLogger(__name__)


class Orchestrator:
    """Chief of staff: the only component that decides which agents run.

    Responsibilities:
    - Classify the request
    - Plan the execution (via decision_router)
    - Execute the plan (via the dispatcher)
    - Validate every successful output
    - Return one composed result, never an exception

    Agents must NOT call other agents or decide what runs next.
    """

    def __init__(
        self,
        registry: Optional[AgentRegistry] = None,
        quality_gate: Optional[QualityGate] = None,
        agent_timeout: Optional[float] = None,
    ):
        self.registry = registry if registry is not None else AgentRegistry()
        self.quality_gate = quality_gate or QualityGate()
        self.dispatcher = Dispatcher(self.registry, agent_timeout=agent_timeout)

    def register_agent(self, name: str, agent: CapabilityAgent) -> None:
        self.registry.register(name, agent)

    def route(self, user_text: str) -> Tuple[Intent, ExecutionPlan]:
        """Planning phase only: classify and pick agents without running them."""
        intent = classify(user_text)
        return intent, apply_rules(intent)

    def _build_envelope(self, user_text: str, user_id: str) -> Envelope:
        return Envelope(
            sender=AgentType.CHIEF.value,
            recipient=AgentType.CHIEF.value,
            task=user_text,
            context={},
            priority=Priority.MEDIUM,
            validation_required=True,
            metadata=EnvelopeMetadata(
                user_id=user_id,
                session_id=f"session_{uuid.uuid4().hex}",
                conversation_id=f"conv_{uuid.uuid4().hex}",
            ),
        )

    async def submit(self, user_text: str, user_id: str) -> OrchestrationResult:
        """Run the full pipeline once for a user request."""
        try:
            envelope = self._build_envelope(user_text, user_id)

            intent, plan = self.route(user_text)
            logger.info(
                f"User intent identified: {intent.name} "
                f"(confidence={intent.confidence}, platforms={intent.platforms}, "
                f"complexity={intent.complexity.value})"
            )

            results = await self.dispatcher.execute(plan, envelope)
            validated = await validate_results(self.quality_gate, results, envelope.metadata)
            result = compose_final_response(validated, intent)

            if result.success:
                logger.info(f"Request for {intent.name} completed: {result.message}")
            else:
                logger.warning(f"Request for {intent.name} partially failed: {result.message}")
            return result

        except Exception as e:
            logger.exception("Processing failed")
            return system_error_result(e)
