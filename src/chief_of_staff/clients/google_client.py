"""Client for Google Calendar, Gmail and Drive REST APIs"""

import base64
import logging
import uuid
import httpx
from email.message import EmailMessage
from typing import Optional, Dict, Any, List

logger = logging.getLogger(__name__)


class GoogleClient:
    """HTTP client for Google Workspace APIs (bearer token auth)"""

    def __init__(
        self,
        access_token: str,
        base_url: str = "https://www.googleapis.com",
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
        summary: str,
        start: str,
        end: str,
        attendees: Optional[List[str]] = None,
        description: Optional[str] = None,
        add_meet_link: bool = True,
        calendar_id: str = "primary"
    ) -> Dict[str, Any]:
        """Insert a calendar event"""

        payload: Dict[str, Any] = {
            "summary": summary,
            "description": description or "",
            "start": {"dateTime": start},
            "end": {"dateTime": end},
            "attendees": [{"email": email} for email in (attendees or [])],
        }
        params = {}
        if add_meet_link:
            payload["conferenceData"] = {
                "createRequest": {"requestId": uuid.uuid4().hex, "conferenceSolutionKey": {"type": "hangoutsMeet"}}
            }
            params["conferenceDataVersion"] = 1

        try:
            response = await self.client.post(
                f"{self.base_url}/calendar/v3/calendars/{calendar_id}/events",
                json=payload,
                params=params
            )
            response.raise_for_status()
            return response.json()
        except Exception as e:
            logger.error(f"Failed to create Google Calendar event: {e}")
            raise

    async def list_events(
        self,
        time_min: str,
        query: Optional[str] = None,
        max_results: int = 10,
        calendar_id: str = "primary"
    ) -> List[Dict[str, Any]]:
        """List upcoming calendar events"""

        params: Dict[str, Any] = {
            "timeMin": time_min,
            "maxResults": max_results,
            "singleEvents": True,
            "orderBy": "startTime",
        }
        if query:
            params["q"] = query

        try:
            response = await self.client.get(
                f"{self.base_url}/calendar/v3/calendars/{calendar_id}/events",
                params=params
            )
            response.raise_for_status()
            return response.json().get("items", [])
        except Exception as e:
            logger.error(f"Failed to list Google Calendar events: {e}")
            raise

    async def send_email(
        self,
        to: str,
        subject: str,
        body: str
    ) -> Dict[str, Any]:
        """Send a plain text email through Gmail"""

        message = EmailMessage()
        message["To"] = to
        message["Subject"] = subject
        message.set_content(body)
        raw = base64.urlsafe_b64encode(message.as_bytes()).decode()

        try:
            response = await self.client.post(
                f"{self.base_url}/gmail/v1/users/me/messages/send",
                json={"raw": raw}
            )
            response.raise_for_status()
            return response.json()
        except Exception as e:
            logger.error(f"Failed to send Gmail message: {e}")
            raise

    async def create_document(self, name: str, content: Optional[str] = None) -> Dict[str, Any]:
        """Create a Google Doc in Drive, optionally filled with plain text"""

        try:
            response = await self.client.post(
                f"{self.base_url}/drive/v3/files",
                params={"fields": "id,name,webViewLink"},
                json={"name": name, "mimeType": "application/vnd.google-apps.document"}
            )
            response.raise_for_status()
            document = response.json()

            if content:
                upload = await self.client.patch(
                    f"{self.base_url}/upload/drive/v3/files/{document['id']}",
                    params={"uploadType": "media"},
                    content=content.encode(),
                    headers={"Content-Type": "text/plain; charset=utf-8"}
                )
                upload.raise_for_status()

            return document
        except Exception as e:
            logger.error(f"Failed to create Google Doc: {e}")
            raise

    async def search_files(self, query: str, page_size: int = 10) -> List[Dict[str, Any]]:
        """Search Drive files by name"""

        escaped = query.replace("'", "\\'")
        try:
            response = await self.client.get(
                f"{self.base_url}/drive/v3/files",
                params={
                    "q": f"name contains '{escaped}' and trashed = false",
                    "pageSize": page_size,
                    "fields": "files(id,name,mimeType,modifiedTime,webViewLink)",
                }
            )
            response.raise_for_status()
            return response.json().get("files", [])
        except Exception as e:
            logger.error(f"Failed to search Google Drive: {e}")
            raise
