"""LinkedIn Agent"""

import os
import re
import uuid
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from chief_of_staff.agents.base import BaseAgent, IntegrationNotConfiguredError
from chief_of_staff.clients.linkedin_client import LinkedInClient
from chief_of_staff.orchestrator.envelope import AgentType, Envelope, Response
from chief_of_staff.utils.time_parsing import parse_schedule_time

_HASHTAG_PATTERN = re.compile(r"#(\w+)")
LONG_POST_CHARS = 1300
# Messaging and connection search need LinkedIn partner program access
PARTNER_ONLY_ACTIONS = {
    "send_message": "LinkedIn messaging requires partner API access",
    "search_connections": "LinkedIn connection search requires partner API access",
}


class LinkedInAgent(BaseAgent):
    """Agent for posting to LinkedIn and reading the member profile.

    Scheduled posts are not sent to LinkedIn; the agent returns the resolved
    `scheduled_for` time and leaves publishing to the host's scheduler.
    """

    def __init__(
        self,
        access_token: Optional[str] = None,
        api_url: Optional[str] = None,
    ):
        super().__init__(AgentType.LINKEDIN.value)
        self.access_token = access_token or os.getenv("LINKEDIN_ACCESS_TOKEN")
        self.api_url = api_url or os.getenv("LINKEDIN_API_URL", "https://api.linkedin.com/v2")
        # Posts published or scheduled through this agent, newest last
        self._posts: List[Dict[str, Any]] = []

    def set_access_token(self, token: str) -> None:
        self.access_token = token

    def _get_client(self) -> LinkedInClient:
        if not self.access_token:
            raise IntegrationNotConfiguredError("LinkedIn access token not configured")
        return LinkedInClient(access_token=self.access_token, base_url=self.api_url)

    @staticmethod
    def determine_action(task: str) -> str:
        task_lower = task.lower()

        if "post" in task_lower and ("schedule" in task_lower or "later" in task_lower):
            return "schedule_post"
        if any(word in task_lower for word in ("post", "share", "publish")):
            return "create_post"
        if any(word in task_lower for word in ("message", "send", "dm")):
            return "send_message"
        if any(word in task_lower for word in ("search", "find", "connections")):
            return "search_connections"
        if "profile" in task_lower or "about me" in task_lower:
            return "get_profile"
        if "analyze" in task_lower or "network" in task_lower:
            return "analyze_network"
        return "unknown"

    async def handle(self, envelope: Envelope) -> Response:
        action = self.determine_action(envelope.task)

        if action == "create_post":
            return await self.create_post(envelope)
        if action == "schedule_post":
            return await self.schedule_post(envelope)
        if action == "get_profile":
            return await self.get_profile(envelope)
        if action == "analyze_network":
            return await self.analyze_network(envelope)
        if action in PARTNER_ONLY_ACTIONS:
            return self.failure(PARTNER_ONLY_ACTIONS[action])
        return self.failure("Unknown LinkedIn action")

    def _post_content(self, envelope: Envelope) -> str:
        return (
            envelope.context.get("content")
            or self.previous_result(envelope).get("content")
            or envelope.task
        )

    def _remember_post(self, content: str, status: str) -> None:
        self._posts.append({
            "content": content,
            "status": status,
            "hashtags": _HASHTAG_PATTERN.findall(content),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })

    async def create_post(self, envelope: Envelope) -> Response:
        content = self._post_content(envelope)

        async with self._get_client() as client:
            profile = await client.get_profile()
            post = await client.create_post(author_urn=f"urn:li:person:{profile['sub']}", text=content)

        self._remember_post(content, "published")
        self.logger.info(f"LinkedIn post created: {post.get('id')}")
        return self.success({
            "post_id": post.get("id"),
            "content": content,
            "visibility": post.get("visibility", "PUBLIC"),
            "platform": "linkedin",
            "status": "published",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })

    async def schedule_post(self, envelope: Envelope) -> Response:
        content = self._post_content(envelope)
        scheduled_for = parse_schedule_time(envelope.task, envelope.context)

        self._remember_post(content, "scheduled")
        self.logger.info(f"LinkedIn post scheduled for {scheduled_for.isoformat()}")
        return self.success({
            "scheduled_post_id": f"scheduled_{uuid.uuid4().hex}",
            "content": content,
            "scheduled_for": scheduled_for.isoformat(),
            "platform": "linkedin",
            "status": "scheduled",
        })

    async def get_profile(self, envelope: Envelope) -> Response:
        async with self._get_client() as client:
            profile = await client.get_profile()

        return self.success({
            "profile": {
                "id": profile.get("sub"),
                "name": profile.get("name"),
                "email": profile.get("email"),
                "picture": profile.get("picture"),
            },
            "platform": "linkedin",
        })

    async def analyze_network(self, envelope: Envelope) -> Response:
        """Activity summary from the member profile and posts sent through this agent.

        Connection and follower data are partner-only, so the analysis covers
        the member's own posting activity.
        """
        async with self._get_client() as client:
            profile = await client.get_profile()

        published = [post for post in self._posts if post["status"] == "published"]
        scheduled = [post for post in self._posts if post["status"] == "scheduled"]
        hashtags = Counter(tag.lower() for post in self._posts for tag in post["hashtags"])
        average_length = (
            round(sum(len(post["content"]) for post in self._posts) / len(self._posts))
            if self._posts else 0
        )

        recommendations = ["Engage more with connections through posts and comments"]
        if not published:
            recommendations.append("Share industry insights to increase visibility")
        if self._posts and not hashtags:
            recommendations.append("Add relevant hashtags to reach beyond your connections")
        if average_length > LONG_POST_CHARS:
            recommendations.append(f"Keep posts under {LONG_POST_CHARS} characters so they are not truncated in the feed")

        return self.success({
            "network_analysis": {
                "member": profile.get("name"),
                "posts_published": len(published),
                "posts_scheduled": len(scheduled),
                "top_hashtags": dict(hashtags.most_common(5)),
                "average_post_length": average_length,
                "recommendations": recommendations,
            },
            "platform": "linkedin",
        })
