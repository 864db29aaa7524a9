"""Client for Microsoft Graph (Outlook calendar, mail, OneDrive)"""

import logging
import httpx
from typing import Optional, Dict, Any, List

logger = logging.getLogger(__name__)


class MicrosoftGraphClient:
    """HTTP client for Microsoft Graph API"""

    def __init__(
        self,
        access_token: str,
        base_url: str = "https://graph.microsoft.com/v1.0",
        timeout: float = 30.0
    ):
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self.timeout = timeout
        self.client = None

    def _get_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.access_token}"}

    async def __aenter__(self):
        """Async context manager entry"""
        self.client = httpx.AsyncClient(
            headers=self._get_headers(),
            timeout=self.timeout
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        if self.client:
            await self.client.aclose()

    async def create_event(
        self,
        subject: str,
        start: str,
        end: str,
        attendees: Optional[List[str]] = None,
        body: Optional[str] = None,
        online_meeting: bool = True
    ) -> Dict[str, Any]:
        """Create an Outlook calendar event, optionally as a Teams meeting"""

        payload: Dict[str, Any] = {
            "subject": subject,
            "body": {"contentType": "text", "content": body or ""},
            "start": {"dateTime": start, "timeZone": "UTC"},
            "end": {"dateTime": end, "timeZone": "UTC"},
            "attendees": [
                {"emailAddress": {"address": email}, "type": "required"}
                for email in (attendees or [])
            ],
        }
        if online_meeting:
            payload["isOnlineMeeting"] = True
            payload["onlineMeetingProvider"] = "teamsForBusiness"

        try:
            response = await self.client.post(f"{self.base_url}/me/events", json=payload)
            response.raise_for_status()
            return response.json()
        except Exception as e:
            logger.error(f"Failed to create Outlook event: {e}")
            raise

    async def list_events(self, start: str, end: str, top: int = 10) -> List[Dict[str, Any]]:
        """List events in a time window"""

        try:
            response = await self.client.get(
                f"{self.base_url}/me/calendarView",
                params={"startDateTime": start, "endDateTime": end, "$top": top}
            )
            response.raise_for_status()
            return response.json().get("value", [])
        except Exception as e:
            logger.error(f"Failed to list Outlook events: {e}")
            raise

    async def send_mail(self, to: str, subject: str, body: str) -> None:
        """Send mail; Graph answers 202 with an empty body"""

        payload = {
            "message": {
                "subject": subject,
                "body": {"contentType": "text", "content": body},
                "toRecipients": [{"emailAddress": {"address": to}}],
            },
            "saveToSentItems": True,
        }

        try:
            response = await self.client.post(f"{self.base_url}/me/sendMail", json=payload)
            response.raise_for_status()
        except Exception as e:
            logger.error(f"Failed to send Outlook mail: {e}")
            raise

    async def search_drive(self, query: str) -> List[Dict[str, Any]]:
        """Search the user's OneDrive"""

        escaped = query.replace("'", "''")
        try:
            response = await self.client.get(f"{self.base_url}/me/drive/root/search(q='{escaped}')")
            response.raise_for_status()
            return response.json().get("value", [])
        except Exception as e:
            logger.error(f"Failed to search OneDrive: {e}")
            raise
