"""Intent data model and types.

Intents represent what the user asked for, derived purely from request text.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List
from enum import Enum


class IntentType(str, Enum):
    """Intent names produced by the classifier."""

    SCHEDULE_MEETING = "schedule_meeting"
    EMAIL_ACTION = "email_action"
    LINKEDIN_ACTION = "linkedin_action"
    TASK_MANAGEMENT = "task_management"
    SEARCH_ACTION = "search_action"
    CONTENT_CREATION = "content_creation"
    GENERAL_QUERY = "general_query"


class Complexity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Platform(str, Enum):
    """Platform groups recognised in request text."""

    GOOGLE = "google"
    MICROSOFT = "microsoft"
    LINKEDIN = "linkedin"


@dataclass
class Intent:
    """A classified user request.

    Attributes:
        name: The intent name (an IntentType value)
        entities: Extracted date/time/people/platform keywords
        confidence: Weight of the matching rule, in [0, 1]
        platforms: Detected platform groups, in detection order
        complexity: Derived from entities, platforms and intent name
    """

    name: str
    entities: Dict[str, Any] = field(default_factory=dict)
    confidence: float = 0.5
    platforms: List[str] = field(default_factory=list)
    complexity: Complexity = Complexity.LOW

    def __post_init__(self):
        """Validate intent structure."""
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("Intent name must be a non-empty string")
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Intent confidence must be in [0, 1], got {self.confidence}")
        if not isinstance(self.complexity, Complexity):
            self.complexity = Complexity(self.complexity)

    def has_platform(self, platform: str) -> bool:
        return platform in self.platforms

    def to_dict(self) -> Dict[str, Any]:
        return {
            "intent": self.name,
            "entities": self.entities,
            "confidence": self.confidence,
            "platforms": list(self.platforms),
            "complexity": self.complexity.value,
        }
