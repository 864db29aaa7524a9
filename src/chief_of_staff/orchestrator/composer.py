"""Response composer: merges validated agent responses into one result."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from chief_of_staff.orchestrator.envelope import Response, ResponseStatus
from chief_of_staff.orchestrator.intent import Intent

SUCCESS_MESSAGES = {
    "schedule_meeting": "Meeting successfully scheduled across all platforms",
    "email_action": "Email drafted and sent successfully",
    "linkedin_action": "LinkedIn post created and scheduled",
    "task_management": "Task created and organized",
    "content_creation": "Content generated successfully",
}
DEFAULT_SUCCESS_MESSAGE = "Task completed successfully"

SYSTEM_ERROR_MESSAGE = "I encountered an error processing your request. Please try again."


@dataclass
class ProcessingSummary:
    total_agents: int
    total_time: float
    complexity: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_agents": self.total_agents,
            "total_time": self.total_time,
            "complexity": self.complexity,
        }


@dataclass
class OrchestrationResult:
    """Final answer for one user request.

    Attributes:
        success: True only when every planned agent succeeded and passed validation
        message: Human-readable outcome
        intent: Name of the classified intent, when classification ran
        results: Ordered payloads on full success
        partial_results: Payloads of the successful subset on partial failure
        processing_summary: Agent count, summed latency and complexity on success
        error: Underlying message for unexpected system failures
        timestamp: UTC time the result was composed
    """

    success: bool
    message: str
    intent: Optional[str] = None
    results: Optional[List[Any]] = None
    partial_results: Optional[List[Any]] = None
    processing_summary: Optional[ProcessingSummary] = None
    error: Optional[str] = None
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "success": self.success,
            "message": self.message,
            "timestamp": self.timestamp,
        }
        if self.intent is not None:
            payload["intent"] = self.intent
        if self.results is not None:
            payload["results"] = self.results
        if self.partial_results is not None:
            payload["partial_results"] = self.partial_results
        if self.processing_summary is not None:
            payload["processing_summary"] = self.processing_summary.to_dict()
        if self.error is not None:
            payload["error"] = self.error
        return payload


def generate_success_message(intent_name: str) -> str:
    return SUCCESS_MESSAGES.get(intent_name, DEFAULT_SUCCESS_MESSAGE)


def compose_final_response(results: List[Response], intent: Intent) -> OrchestrationResult:
    successes = [r for r in results if r.status == ResponseStatus.SUCCESS]
    errors = [r for r in results if r.status == ResponseStatus.ERROR]

    if errors:
        return OrchestrationResult(
            success=False,
            message=f"Some operations failed: {', '.join(str(e.error) for e in errors)}",
            partial_results=[r.data for r in successes],
            intent=intent.name,
        )

    return OrchestrationResult(
        success=True,
        message=generate_success_message(intent.name),
        results=[r.data for r in successes],
        intent=intent.name,
        processing_summary=ProcessingSummary(
            total_agents=len(results),
            total_time=sum(r.processing_time or 0 for r in results),
            complexity=intent.complexity.value,
        ),
    )


def system_error_result(error: Exception) -> OrchestrationResult:
    return OrchestrationResult(success=False, message=SYSTEM_ERROR_MESSAGE, error=str(error))
