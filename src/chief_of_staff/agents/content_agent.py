"""Content Generation Agent

Template based drafting of emails, LinkedIn posts, replies and documents,
plus light editing and tone analysis. No LLM calls.
"""

import re
from typing import Any, Dict, List, Optional

from chief_of_staff.agents.base import BaseAgent
from chief_of_staff.orchestrator.envelope import AgentType, Envelope, Response
from chief_of_staff.utils.text import find_email_address, word_count

DEFAULT_HASHTAGS = ["productivity", "AI", "technology"]
DEFAULT_SECTIONS = ["Introduction", "Main Content", "Conclusion"]
_FILLER_WORDS = re.compile(r"\b(very|really|quite|somewhat)\s+", re.IGNORECASE)
_VAGUE_NOUNS = re.compile(r"\b(thing|stuff)\b", re.IGNORECASE)
_TOPIC_PATTERN = re.compile(r"\babout\s+([^.?!]+)", re.IGNORECASE)


class ContentAgent(BaseAgent):
    """Drafts text that other agents publish or send"""

    def __init__(self, user_style: Optional[Dict[str, Any]] = None):
        super().__init__(AgentType.CONTENT.value)
        self.user_style: Dict[str, Any] = dict(user_style or {})

    def update_user_style(self, new_style: Dict[str, Any]) -> None:
        self.user_style.update(new_style)
        self.logger.info(f"User style updated: {sorted(new_style)}")

    @staticmethod
    def determine_action(task: str) -> str:
        task_lower = task.lower()

        if "email" in task_lower or "draft" in task_lower:
            return "generate_email"
        if any(word in task_lower for word in ("linkedin", "post", "social")):
            return "generate_linkedin_post"
        if "reply" in task_lower or "respond" in task_lower:
            return "generate_response"
        if "document" in task_lower or "report" in task_lower:
            return "generate_document"
        if any(word in task_lower for word in ("improve", "enhance", "better")):
            return "improve_content"
        if any(word in task_lower for word in ("tone", "analyze", "style")):
            return "analyze_tone"
        return "generate_email"

    async def handle(self, envelope: Envelope) -> Response:
        action = self.determine_action(envelope.task)
        handler = {
            "generate_email": self.generate_email,
            "generate_linkedin_post": self.generate_linkedin_post,
            "generate_response": self.generate_response,
            "generate_document": self.generate_document,
            "improve_content": self.improve_content,
            "analyze_tone": self.analyze_tone,
        }[action]
        return await handler(envelope)

    def _setting(self, context: Dict[str, Any], key: str, default: Any) -> Any:
        # Explicit request context beats the stored user style
        return context.get(key) or self.user_style.get(key) or default

    @staticmethod
    def _topic(task: str, context: Dict[str, Any], default: str) -> str:
        if context.get("topic"):
            return context["topic"]
        match = _TOPIC_PATTERN.search(task)
        return match.group(1).strip() if match else default

    async def generate_email(self, envelope: Envelope) -> Response:
        context = envelope.context
        recipient = context.get("recipient") or find_email_address(envelope.task)
        subject = context.get("subject") or f"Regarding {self._topic(envelope.task, context, 'our collaboration')}"
        tone = self._setting(context, "tone", "professional")
        signature = self._setting(context, "signature", "Your AI Assistant")

        content = (
            f"Subject: {subject}\n\n"
            f"Dear {recipient or 'there'},\n\n"
            f"I hope this email finds you well. I wanted to reach out regarding "
            f"{self._topic(envelope.task, context, 'our upcoming project collaboration')}.\n\n"
            f"Thank you for your time and consideration.\n\n"
            f"Best regards,\n{signature}"
        )

        self.logger.info(f"Email content generated for {recipient or 'unknown recipient'}")
        return self.success({
            "type": "email",
            "content": content,
            "subject": subject,
            "recipient": recipient,
            "tone": tone,
            "word_count": word_count(content),
            "platform": "email",
        })

    async def generate_linkedin_post(self, envelope: Envelope) -> Response:
        context = envelope.context
        topic = self._topic(envelope.task, context, "Professional Update")
        tone = self._setting(context, "tone", "professional")
        hashtags: List[str] = list(self._setting(context, "hashtags", DEFAULT_HASHTAGS))
        call_to_action = context.get("call_to_action") or "What are your thoughts on this topic? I'd love to hear your experiences!"

        content = (
            f"Excited to share some thoughts on {topic}!\n\n"
            f"In today's fast-paced world, leveraging AI and technology has become essential "
            f"for staying competitive and efficient.\n\n"
            f"{call_to_action}\n\n"
            + " ".join(f"#{tag}" for tag in hashtags)
        )

        self.logger.info(f"LinkedIn post generated on {topic!r}")
        return self.success({
            "type": "linkedin_post",
            "content": content,
            "topic": topic,
            "tone": tone,
            "hashtags": hashtags,
            "character_count": len(content),
            "platform": "linkedin",
        })

    async def generate_response(self, envelope: Envelope) -> Response:
        context = envelope.context
        original = context.get("original_message", "")
        response_type = context.get("response_type", "professional")

        content = (
            "Thank you for your message! I appreciate you reaching out. "
            "I'll review your request and get back to you with a detailed response shortly."
        )
        return self.success({
            "type": "response",
            "content": content,
            "original_message": original,
            "response_type": response_type,
            "word_count": word_count(content),
            "platform": "response",
        })

    async def generate_document(self, envelope: Envelope) -> Response:
        context = envelope.context
        title = context.get("title") or self._topic(envelope.task, context, "Professional Document")
        sections: List[str] = list(context.get("sections") or DEFAULT_SECTIONS)

        parts = [f"# {title}"]
        for section in sections:
            if section == "Introduction":
                body = (
                    f"This document provides an overview of {title.lower()} "
                    f"and outlines key considerations for stakeholders."
                )
            elif section == "Conclusion":
                body = (
                    f"In summary, this document has covered the key aspects of {title.lower()}. "
                    f"For questions or additional information, please don't hesitate to reach out."
                )
            else:
                body = "[Content sections would be expanded based on specific requirements]"
            parts.append(f"## {section}\n{body}")
        content = "\n\n".join(parts)

        self.logger.info(f"Document generated: {title}")
        return self.success({
            "type": "document",
            "content": content,
            "title": title,
            "document_type": context.get("document_type", "document"),
            "sections": sections,
            "word_count": word_count(content),
            "platform": "document",
        })

    async def improve_content(self, envelope: Envelope) -> Response:
        context = envelope.context
        original = (
            context.get("content")
            or self.previous_result(envelope).get("content")
            or context.get("original_content")
        )
        if not original:
            return self.failure("No content provided to improve")

        improved = _VAGUE_NOUNS.sub("item", _FILLER_WORDS.sub("", original))

        improvements = []
        if len(improved) < len(original):
            improvements.append("Made content more concise")
        if "?" in improved and "?" not in original:
            improvements.append("Added engaging question")

        return self.success({
            "type": "improved_content",
            "original": original,
            "content": improved,
            "improvement_type": context.get("improvement_type", "general"),
            "improvements": improvements,
            "platform": "content",
        })

    async def analyze_tone(self, envelope: Envelope) -> Response:
        content = envelope.context.get("content") or envelope.task
        analysis = _tone_analysis(content)

        recommendations = []
        if analysis["sentiment"] == "negative":
            recommendations.append("Consider using more positive language")
        if analysis["readability_score"] < 60:
            recommendations.append("Simplify sentence structure for better readability")

        return self.success({
            "type": "tone_analysis",
            "content": content,
            "analysis": analysis,
            "recommendations": recommendations,
            "platform": "analysis",
        })


_POSITIVE_WORDS = {"great", "thanks", "thank", "excited", "happy", "glad", "appreciate", "excellent"}
_NEGATIVE_WORDS = {"unfortunately", "problem", "issue", "sorry", "angry", "disappointed", "bad", "fail"}
_INFORMAL_WORDS = {"hey", "gonna", "wanna", "lol", "btw", "yeah"}


def _tone_analysis(content: str) -> Dict[str, Any]:
    """Word-list sentiment and a sentence-length readability score (0-100)."""
    words = [w.strip(".,!?;:").lower() for w in content.split()]
    positive = sum(1 for w in words if w in _POSITIVE_WORDS)
    negative = sum(1 for w in words if w in _NEGATIVE_WORDS)

    if positive > negative:
        sentiment = "positive"
    elif negative > positive:
        sentiment = "negative"
    else:
        sentiment = "neutral"

    sentences = [s for s in re.split(r"[.!?]+", content) if s.strip()] or [content]
    avg_sentence = len(words) / len(sentences) if words else 0
    readability = max(0, min(100, round(100 - 2 * max(0.0, avg_sentence - 10))))

    return {
        "sentiment": sentiment,
        "formality": "casual" if any(w in _INFORMAL_WORDS for w in words) else "professional",
        "word_count": len(words),
        "readability_score": readability,
    }
