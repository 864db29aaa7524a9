"""Client for LinkedIn REST API"""

import logging
import httpx
from typing import Dict, Any

logger = logging.getLogger(__name__)


class LinkedInClient:
    """HTTP client for LinkedIn API v2"""

    def __init__(
        self,
        access_token: str,
        base_url: str = "https://api.linkedin.com/v2",
        timeout: float = 30.0
    ):
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self.timeout = timeout
        self.client = None

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.access_token}",
            "X-Restli-Protocol-Version": "2.0.0",
        }

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

    async def get_profile(self) -> Dict[str, Any]:
        """Get the authenticated member (OpenID userinfo)"""
        try:
            response = await self.client.get(f"{self.base_url}/userinfo")
            response.raise_for_status()
            return response.json()
        except Exception as e:
            logger.error(f"Failed to get LinkedIn profile: {e}")
            raise

    async def create_post(
        self,
        author_urn: str,
        text: str,
        visibility: str = "PUBLIC"
    ) -> Dict[str, Any]:
        """Publish a text share; the post id comes back in a header"""

        payload = {
            "author": author_urn,
            "lifecycleState": "PUBLISHED",
            "specificContent": {
                "com.linkedin.ugc.ShareContent": {
                    "shareCommentary": {"text": text},
                    "shareMediaCategory": "NONE",
                }
            },
            "visibility": {"com.linkedin.ugc.MemberNetworkVisibility": visibility},
        }

        try:
            response = await self.client.post(f"{self.base_url}/ugcPosts", json=payload)
            response.raise_for_status()
            return {
                "id": response.headers.get("x-restli-id", ""),
                "visibility": visibility,
            }
        except Exception as e:
            logger.error(f"Failed to create LinkedIn post: {e}")
            raise
