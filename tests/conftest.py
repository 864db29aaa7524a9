"""Shared fixtures: scriptable capability agents and envelopes."""

import asyncio
from typing import Any, List, Optional

import pytest

from chief_of_staff.orchestrator.envelope import (
    Envelope,
    EnvelopeMetadata,
    Response,
    ResponseStatus,
    error_response,
    new_response_id,
)


class StaticAgent:
    """Agent double that returns a fixed payload (or error) and records calls."""

    def __init__(self, name: str, data: Any = None, error: Optional[str] = None, delay: float = 0.0,
                 completions: Optional[List[str]] = None):
        self.name = name
        self.data = data
        self.error = error
        self.delay = delay
        self.calls: List[Envelope] = []
        self.completions = completions

    async def process(self, envelope: Envelope) -> Response:
        self.calls.append(envelope)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.completions is not None:
            self.completions.append(self.name)
        if self.error:
            return error_response(self.name, self.error)
        return Response(id=new_response_id(self.name), status=ResponseStatus.SUCCESS, data=self.data)


class RaisingAgent:
    """Breaks the contract by raising."""

    async def process(self, envelope: Envelope) -> Response:
        raise RuntimeError("agent exploded")


@pytest.fixture
def metadata():
    return EnvelopeMetadata(user_id="user-1", session_id="session-1", conversation_id="conv-1")


@pytest.fixture
def envelope(metadata):
    return Envelope(
        sender="chief",
        recipient="chief",
        task="Schedule a meeting with Jane tomorrow at 2pm on Google Calendar",
        context={"origin": "test"},
        metadata=metadata,
    )


def make_response(data: Any = None, status: ResponseStatus = ResponseStatus.SUCCESS, source: str = "content",
                  error: Optional[str] = None, processing_time: float = 0.0) -> Response:
    return Response(
        id=new_response_id(source),
        status=status,
        data=data,
        error=error,
        source_agent=source,
        processing_time=processing_time,
    )
