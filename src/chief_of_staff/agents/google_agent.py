"""Google Workspace Agent (Calendar, Gmail, Drive)"""

import os
from datetime import datetime, timedelta, timezone
from typing import Optional

from chief_of_staff.agents.base import BaseAgent, IntegrationNotConfiguredError
from chief_of_staff.clients.google_client import GoogleClient
from chief_of_staff.orchestrator.envelope import AgentType, Envelope, Response
from chief_of_staff.utils.text import find_email_address
from chief_of_staff.utils.time_parsing import parse_schedule_time

DEFAULT_MEETING_MINUTES = 60
DEFAULT_SUBJECT = "Message from Chief of Staff"


class GoogleAgent(BaseAgent):
    """Agent for Google Calendar, Gmail and Drive"""

    def __init__(
        self,
        access_token: Optional[str] = None,
        api_url: Optional[str] = None,
    ):
        super().__init__(AgentType.GOOGLE.value)
        self.access_token = access_token or os.getenv("GOOGLE_ACCESS_TOKEN")
        self.api_url = api_url or os.getenv("GOOGLE_API_URL", "https://www.googleapis.com")

    def set_access_token(self, token: str) -> None:
        self.access_token = token
        self.logger.info("Access token updated for Google APIs")

    def _get_client(self) -> GoogleClient:
        if not self.access_token:
            raise IntegrationNotConfiguredError("Google access token not configured")
        return GoogleClient(access_token=self.access_token, base_url=self.api_url)

    @staticmethod
    def determine_action(task: str) -> str:
        task_lower = task.lower()

        if "search calendar" in task_lower or "find meeting" in task_lower:
            return "search_calendar"
        if "search drive" in task_lower or "find file" in task_lower:
            return "search_drive"
        if any(word in task_lower for word in ("schedule", "meeting", "calendar")):
            return "schedule_meeting"
        if any(word in task_lower for word in ("email", "send", "gmail")):
            return "send_email"
        if "document" in task_lower or "create doc" in task_lower:
            return "create_document"
        return "unknown"

    async def handle(self, envelope: Envelope) -> Response:
        action = self.determine_action(envelope.task)

        if action == "schedule_meeting":
            return await self.schedule_meeting(envelope)
        if action == "send_email":
            return await self.send_email(envelope)
        if action == "search_calendar":
            return await self.search_calendar(envelope)
        if action == "search_drive":
            return await self.search_drive(envelope)
        if action == "create_document":
            return await self.create_document(envelope)
        return self.failure("Unknown action")

    async def schedule_meeting(self, envelope: Envelope) -> Response:
        context = envelope.context
        start = parse_schedule_time(envelope.task, context)
        end = start + timedelta(minutes=int(context.get("duration_minutes", DEFAULT_MEETING_MINUTES)))
        attendees = list(context.get("attendees", []))

        async with self._get_client() as client:
            event = await client.create_event(
                summary=context.get("title") or envelope.task[:100],
                start=start.isoformat(),
                end=end.isoformat(),
                attendees=attendees,
                description=context.get("description"),
            )

        self.logger.info(f"Meeting scheduled: {event.get('id')}")
        return self.success({
            "event_id": event.get("id"),
            "meeting_url": event.get("hangoutLink"),
            "html_link": event.get("htmlLink"),
            "attendees": attendees,
            "datetime": start.isoformat(),
            "end_time": end.isoformat(),
            "platform": "google",
        })

    async def send_email(self, envelope: Envelope) -> Response:
        draft = self.previous_result(envelope)
        recipient = (
            envelope.context.get("recipient")
            or draft.get("recipient")
            or find_email_address(envelope.task)
        )
        if not recipient:
            return self.failure("No email recipient provided")
        subject = draft.get("subject") or DEFAULT_SUBJECT
        body = draft.get("content") or envelope.task

        async with self._get_client() as client:
            sent = await client.send_email(to=recipient, subject=subject, body=body)

        self.logger.info(f"Email sent: {sent.get('id')}")
        return self.success({
            "message_id": sent.get("id"),
            "thread_id": sent.get("threadId"),
            "to": recipient,
            "subject": subject,
            "platform": "google",
        })

    async def search_calendar(self, envelope: Envelope) -> Response:
        async with self._get_client() as client:
            items = await client.list_events(
                time_min=datetime.now(timezone.utc).isoformat(),
                query=envelope.context.get("query"),
            )

        events = [
            {
                "id": item.get("id"),
                "title": item.get("summary"),
                "start_time": (item.get("start") or {}).get("dateTime"),
                "end_time": (item.get("end") or {}).get("dateTime"),
                "attendees": [a.get("email") for a in item.get("attendees", [])],
            }
            for item in items
        ]
        return self.success({"events": events, "total_found": len(events), "platform": "google"})

    async def search_drive(self, envelope: Envelope) -> Response:
        query = envelope.context.get("query") or envelope.task
        async with self._get_client() as client:
            files = await client.search_files(query)
        return self.success({"files": files, "total_found": len(files), "platform": "google"})

    async def create_document(self, envelope: Envelope) -> Response:
        draft = self.previous_result(envelope)
        context = envelope.context
        title = context.get("title") or draft.get("title") or envelope.task[:100]
        content = context.get("content") or draft.get("content")

        async with self._get_client() as client:
            document = await client.create_document(name=title, content=content)

        self.logger.info(f"Google Doc created: {document.get('id')}")
        return self.success({
            "document_id": document.get("id"),
            "title": document.get("name", title),
            "url": document.get("webViewLink"),
            "type": "document",
            "platform": "google",
        })
