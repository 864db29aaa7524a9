"""Message contracts shared by the orchestrator and every capability agent.

An Envelope travels from the orchestrator to an agent; a Response travels back.
Both are plain data, nothing here performs IO.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional
import uuid


# Reserved context key under which a sequential step sees the previous step's data
PREVIOUS_RESULT_KEY = "previous_result"


class AgentType(str, Enum):
    """Capability tags used as sender/recipient and registry keys."""

    CHIEF = "chief"
    QA = "qa"
    GOOGLE = "google"
    MICROSOFT = "microsoft"
    LINKEDIN = "linkedin"
    CONTENT = "content"
    TASK = "task"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class ResponseStatus(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    PENDING = "pending"
    REQUIRES_INPUT = "requires_input"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class EnvelopeMetadata:
    """Request identity carried unchanged through every delegation hop."""

    user_id: str
    session_id: str
    conversation_id: str


@dataclass
class Envelope:
    """A unit of work handed to a capability agent.

    Attributes:
        sender: Capability tag of the producer (usually "chief")
        recipient: Capability tag of the agent that should handle it
        task: The free-text task, normally the user's request
        context: String-keyed mapping of extra inputs for the agent
        priority: Scheduling hint, not interpreted by the orchestrator
        validation_required: Whether the output must pass the quality gate
        metadata: User/session/conversation identifiers
        id: Unique envelope id
        created_at: UTC creation timestamp
    """

    sender: str
    recipient: str
    task: str
    metadata: EnvelopeMetadata
    context: Dict[str, Any] = field(default_factory=dict)
    priority: Priority = Priority.MEDIUM
    validation_required: bool = True
    id: str = field(default_factory=lambda: f"msg_{uuid.uuid4().hex}")
    created_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self):
        """Validate envelope structure."""
        if not isinstance(self.context, dict):
            raise TypeError("Envelope context must be a dictionary")
        bad_keys = [key for key in self.context if not isinstance(key, str)]
        if bad_keys:
            raise TypeError(f"Envelope context keys must be strings, got {bad_keys!r}")
        if not isinstance(self.priority, Priority):
            self.priority = Priority(self.priority)

    def derive(
        self,
        recipient: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        **changes: Any,
    ) -> "Envelope":
        """Create the envelope for the next delegation hop.

        The copy gets a fresh id and timestamp; the original is never mutated.
        """
        return replace(
            self,
            recipient=recipient if recipient is not None else self.recipient,
            context=dict(context if context is not None else self.context),
            id=f"msg_{uuid.uuid4().hex}",
            created_at=_utcnow(),
            **changes,
        )

    def with_previous_result(self, data: Any) -> "Envelope":
        """Return a copy whose context carries `data` under the chaining key."""
        return self.derive(context={**self.context, PREVIOUS_RESULT_KEY: data})


@dataclass
class Response:
    """What a capability agent returns for one envelope.

    `processing_time` is in milliseconds and is overwritten by the dispatcher
    with the measured wall-clock latency of the call.
    """

    id: str
    status: ResponseStatus
    data: Any = None
    error: Optional[str] = None
    next_agent: Optional[str] = None
    validation_passed: Optional[bool] = None
    processing_time: float = 0.0
    source_agent: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status == ResponseStatus.SUCCESS

    def eligible_for_validation(self) -> bool:
        """Only successful responses that carry data go through the gate."""
        return self.succeeded and self.data is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "status": self.status.value,
            "data": self.data,
            "error": self.error,
            "next_agent": self.next_agent,
            "validation_passed": self.validation_passed,
            "processing_time": self.processing_time,
            "source_agent": self.source_agent,
        }


def new_response_id(agent_type: str) -> str:
    """Response ids are always generated fresh by the producer."""
    return f"{agent_type}_{uuid.uuid4().hex}"


def error_response(agent_type: str, error: str) -> Response:
    return Response(
        id=new_response_id(agent_type),
        status=ResponseStatus.ERROR,
        error=error,
        source_agent=agent_type,
    )


@dataclass
class ValidationIssue:
    type: str
    message: str
    severity: Severity

    def to_dict(self) -> Dict[str, str]:
        return {"type": self.type, "message": self.message, "severity": self.severity.value}


@dataclass
class ValidationResult:
    """Outcome of the quality gate for one payload."""

    passed: bool
    issues: List[ValidationIssue] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "passed": self.passed,
            "issues": [issue.to_dict() for issue in self.issues],
            "recommendations": list(self.recommendations),
        }
