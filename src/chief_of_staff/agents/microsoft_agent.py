"""Microsoft 365 Agent (Outlook calendar and mail, Teams meetings, OneDrive)"""

import os
from datetime import datetime, timedelta, timezone
from typing import Optional

from chief_of_staff.agents.base import BaseAgent, IntegrationNotConfiguredError
from chief_of_staff.clients.microsoft_graph_client import MicrosoftGraphClient
from chief_of_staff.orchestrator.envelope import AgentType, Envelope, Response
from chief_of_staff.utils.text import find_email_address
from chief_of_staff.utils.time_parsing import parse_schedule_time

DEFAULT_MEETING_MINUTES = 60
DEFAULT_SUBJECT = "Message from Chief of Staff"
SEARCH_WINDOW_DAYS = 7


def _graph_time(value: datetime) -> str:
    # Graph wants a naive local time plus a separate timeZone field
    return value.astimezone(timezone.utc).replace(tzinfo=None).isoformat()


class MicrosoftAgent(BaseAgent):
    """Agent for Microsoft Graph backed capabilities"""

    def __init__(
        self,
        access_token: Optional[str] = None,
        graph_url: Optional[str] = None,
    ):
        super().__init__(AgentType.MICROSOFT.value)
        self.access_token = access_token or os.getenv("MICROSOFT_ACCESS_TOKEN")
        self.graph_url = graph_url or os.getenv("MICROSOFT_GRAPH_URL", "https://graph.microsoft.com/v1.0")

    def set_access_token(self, token: str) -> None:
        self.access_token = token
        self.logger.info("Access token updated for Microsoft Graph")

    def _get_client(self) -> MicrosoftGraphClient:
        if not self.access_token:
            raise IntegrationNotConfiguredError("Microsoft access token not configured")
        return MicrosoftGraphClient(access_token=self.access_token, base_url=self.graph_url)

    @staticmethod
    def determine_action(task: str) -> str:
        task_lower = task.lower()

        if "search calendar" in task_lower or "find meeting" in task_lower:
            return "search_calendar"
        if "onedrive" in task_lower or "find file" in task_lower or "sharepoint" in task_lower:
            return "search_onedrive"
        if any(word in task_lower for word in ("schedule", "meeting", "calendar", "teams")):
            return "schedule_meeting"
        if any(word in task_lower for word in ("email", "send", "outlook", "mail")):
            return "send_email"
        return "unknown"

    async def handle(self, envelope: Envelope) -> Response:
        action = self.determine_action(envelope.task)

        if action == "schedule_meeting":
            return await self.schedule_meeting(envelope)
        if action == "send_email":
            return await self.send_email(envelope)
        if action == "search_calendar":
            return await self.search_calendar(envelope)
        if action == "search_onedrive":
            return await self.search_onedrive(envelope)
        return self.failure("Unknown Microsoft action")

    async def schedule_meeting(self, envelope: Envelope) -> Response:
        context = envelope.context
        start = parse_schedule_time(envelope.task, context)
        end = start + timedelta(minutes=int(context.get("duration_minutes", DEFAULT_MEETING_MINUTES)))
        attendees = list(context.get("attendees", []))

        async with self._get_client() as client:
            event = await client.create_event(
                subject=context.get("title") or envelope.task[:100],
                start=_graph_time(start),
                end=_graph_time(end),
                attendees=attendees,
                body=context.get("description"),
            )

        self.logger.info(f"Teams meeting created: {event.get('id')}")
        return self.success({
            "event_id": event.get("id"),
            "join_url": (event.get("onlineMeeting") or {}).get("joinUrl"),
            "web_link": event.get("webLink"),
            "attendees": attendees,
            "datetime": start.isoformat(),
            "end_time": end.isoformat(),
            "platform": "microsoft",
            "type": "teams",
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

        async with self._get_client() as client:
            await client.send_mail(to=recipient, subject=subject, body=draft.get("content") or envelope.task)

        self.logger.info(f"Outlook mail sent to {recipient}")
        return self.success({"to": recipient, "subject": subject, "status": "sent", "platform": "microsoft"})

    async def search_calendar(self, envelope: Envelope) -> Response:
        now = datetime.now(timezone.utc)
        async with self._get_client() as client:
            items = await client.list_events(
                start=_graph_time(now),
                end=_graph_time(now + timedelta(days=SEARCH_WINDOW_DAYS)),
            )

        events = [
            {
                "id": item.get("id"),
                "title": item.get("subject"),
                "start_time": (item.get("start") or {}).get("dateTime"),
                "end_time": (item.get("end") or {}).get("dateTime"),
                "location": (item.get("location") or {}).get("displayName"),
                "attendees": [
                    (a.get("emailAddress") or {}).get("address") for a in item.get("attendees", [])
                ],
            }
            for item in items
        ]
        return self.success({"events": events, "total_found": len(events), "platform": "microsoft"})

    async def search_onedrive(self, envelope: Envelope) -> Response:
        query = envelope.context.get("query") or envelope.task
        async with self._get_client() as client:
            items = await client.search_drive(query)

        files = [
            {
                "id": item.get("id"),
                "name": item.get("name"),
                "size": item.get("size"),
                "modified_time": item.get("lastModifiedDateTime"),
                "web_url": item.get("webUrl"),
            }
            for item in items
        ]
        return self.success({"files": files, "total_found": len(files), "platform": "microsoft"})
