"""Task Management Agent

Keeps tasks in memory for the lifetime of the agent instance. Nothing is
persisted; a storage-backed agent can be registered in its place.
"""

import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from chief_of_staff.agents.base import BaseAgent
from chief_of_staff.orchestrator.envelope import AgentType, Envelope, Priority, Response
from chief_of_staff.utils.time_parsing import parse_due_date

CATEGORIES = ["work", "personal", "project", "meeting"]
DEFAULT_CATEGORY = "general"

_TITLE_PATTERN = re.compile(
    r"\b(?:create|add|new)\s+(?:an?\s+)?(?:task\s+)?(?:to\s+|for\s+)?[\"']?([^\"']+)[\"']?", re.IGNORECASE
)
# Trailing clauses that belong to other fields
_TITLE_END_PATTERN = re.compile(r"\s+(?:due|by|before|tags?|description)\b", re.IGNORECASE)
_DESCRIPTION_PATTERN = re.compile(r"description[:\s]+([^.]+)", re.IGNORECASE)
_TAGS_PATTERN = re.compile(r"tags?[:\s]+([^.]+)", re.IGNORECASE)


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Task:
    title: str
    priority: Priority = Priority.MEDIUM
    description: str = ""
    status: TaskStatus = TaskStatus.PENDING
    due_date: Optional[datetime] = None
    category: str = DEFAULT_CATEGORY
    tags: List[str] = field(default_factory=list)
    id: str = field(default_factory=lambda: f"task_{uuid.uuid4().hex}")
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "priority": self.priority.value,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "category": self.category,
            "tags": list(self.tags),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


def extract_title(task: str) -> str:
    match = _TITLE_PATTERN.search(task)
    if not match:
        return " ".join(task.split()[:5])
    return _TITLE_END_PATTERN.split(match.group(1), maxsplit=1)[0].strip()


def extract_priority(task: str) -> Priority:
    task_lower = task.lower()
    if "urgent" in task_lower:
        return Priority.URGENT
    if "high" in task_lower:
        return Priority.HIGH
    if "low" in task_lower:
        return Priority.LOW
    return Priority.MEDIUM


def extract_category(task: str) -> str:
    task_lower = task.lower()
    for category in CATEGORIES:
        if category in task_lower:
            return category
    return DEFAULT_CATEGORY


def extract_tags(task: str) -> List[str]:
    match = _TAGS_PATTERN.search(task)
    if not match:
        return []
    return [tag.strip() for tag in match.group(1).split(",") if tag.strip()]


def parse_task_details(task: str) -> Task:
    description = _DESCRIPTION_PATTERN.search(task)
    return Task(
        title=extract_title(task),
        description=description.group(1).strip() if description else "",
        priority=extract_priority(task),
        due_date=parse_due_date(task),
        category=extract_category(task),
        tags=extract_tags(task),
    )


class TaskAgent(BaseAgent):
    """Agent for creating and listing the user's tasks"""

    def __init__(self):
        super().__init__(AgentType.TASK.value)
        self._tasks: Dict[str, Task] = {}

    @staticmethod
    def determine_action(task: str) -> str:
        task_lower = task.lower()
        if "create" in task_lower and "task" in task_lower:
            return "create_task"
        if "list" in task_lower or "show tasks" in task_lower:
            return "list_tasks"
        return "create_task"

    async def handle(self, envelope: Envelope) -> Response:
        if self.determine_action(envelope.task) == "list_tasks":
            return await self.list_tasks(envelope)
        return await self.create_task(envelope)

    async def create_task(self, envelope: Envelope) -> Response:
        task = parse_task_details(envelope.task)
        self._tasks[task.id] = task

        self.logger.info(f"Task created: {task.id} {task.title!r}")
        return self.success({
            "task": task.to_dict(),
            "message": f'Task "{task.title}" created successfully',
            "task_id": task.id,
        })

    async def list_tasks(self, envelope: Envelope) -> Response:
        tasks = [task.to_dict() for task in self._tasks.values()]
        return self.success({"tasks": tasks, "total_count": len(tasks)})

    def get_tasks(self) -> List[Task]:
        return list(self._tasks.values())
