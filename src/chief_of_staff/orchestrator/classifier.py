"""Intent classifier: maps request text to an Intent.

Deterministic pattern matching only, no LLMs. The rule list is evaluated
top to bottom and the first match wins; list order is authoritative.
"""

import logging
import re
from typing import Any, Dict, List, Pattern, Tuple

from chief_of_staff.orchestrator.intent import Complexity, Intent, IntentType, Platform

logger = logging.getLogger(__name__)


# (pattern, intent, confidence weight). Substring matches, as in "posting" -> post.
INTENT_RULES: List[Tuple[Pattern[str], IntentType, float]] = [
    (re.compile(r"schedule|meeting|calendar|appointment", re.IGNORECASE), IntentType.SCHEDULE_MEETING, 0.9),
    (re.compile(r"email|send|draft|compose", re.IGNORECASE), IntentType.EMAIL_ACTION, 0.8),
    (re.compile(r"linkedin|post|share|network", re.IGNORECASE), IntentType.LINKEDIN_ACTION, 0.8),
    (re.compile(r"task|todo|remind|deadline", re.IGNORECASE), IntentType.TASK_MANAGEMENT, 0.7),
    (re.compile(r"search|find|look", re.IGNORECASE), IntentType.SEARCH_ACTION, 0.6),
    (re.compile(r"create|make|generate", re.IGNORECASE), IntentType.CONTENT_CREATION, 0.7),
]

DEFAULT_INTENT = IntentType.GENERAL_QUERY
DEFAULT_CONFIDENCE = 0.5

_DATE_PATTERN = re.compile(
    r"\b(today|tomorrow|next week|monday|tuesday|wednesday|thursday|friday|saturday|sunday"
    r"|\d{1,2}/\d{1,2}|\d{1,2}-\d{1,2})\b",
    re.IGNORECASE,
)
_TIME_PATTERN = re.compile(r"\b(\d{1,2}:\d{2}\s*(?:am|pm)?|\d{1,2}\s*(?:am|pm))\b", re.IGNORECASE)
_PERSON_PATTERN = re.compile(r"\b[A-Z][a-z]+\s+[A-Z][a-z]+\b")

# Raw keywords reported in entities["platforms"]
ENTITY_PLATFORM_KEYWORDS = ["google", "outlook", "teams", "linkedin", "gmail", "calendar"]

PLATFORM_KEYWORDS: Dict[Platform, List[str]] = {
    Platform.GOOGLE: ["google", "gmail", "gcal", "google calendar", "google meet"],
    Platform.MICROSOFT: ["outlook", "teams", "microsoft", "onedrive", "sharepoint"],
    Platform.LINKEDIN: ["linkedin", "professional network", "connections"],
}

# Intents that always add to the complexity score
COMPLEX_INTENTS = {IntentType.SCHEDULE_MEETING.value, IntentType.CONTENT_CREATION.value}


def parse_intent(text: str) -> Tuple[str, float]:
    """Return (intent name, confidence) of the first matching rule."""
    for pattern, intent_type, weight in INTENT_RULES:
        if pattern.search(text):
            return intent_type.value, weight
    return DEFAULT_INTENT.value, DEFAULT_CONFIDENCE


def extract_entities(text: str) -> Dict[str, Any]:
    """Pull date, time, people and platform keywords out of the text."""
    entities: Dict[str, Any] = {}

    date_match = _DATE_PATTERN.search(text)
    if date_match:
        entities["date"] = date_match.group(0)

    time_match = _TIME_PATTERN.search(text)
    if time_match:
        entities["time"] = time_match.group(0)

    people = _PERSON_PATTERN.findall(text)
    if people:
        entities["people"] = people

    lowered = text.lower()
    entities["platforms"] = [keyword for keyword in ENTITY_PLATFORM_KEYWORDS if keyword in lowered]

    return entities


def identify_platforms(text: str) -> List[str]:
    lowered = text.lower()
    return [
        platform.value
        for platform, keywords in PLATFORM_KEYWORDS.items()
        if any(keyword in lowered for keyword in keywords)
    ]


def assess_complexity(intent_name: str, entities: Dict[str, Any], platforms: List[str]) -> Complexity:
    """Score the request.

    +2 for more than one platform, +1 for more than two people, +1 for a
    structurally complex intent, +1 when a date or time is present.
    high >= 3, medium >= 1, otherwise low.
    """
    score = 0

    if len(platforms) > 1:
        score += 2

    if len(entities.get("people") or []) > 2:
        score += 1

    if intent_name in COMPLEX_INTENTS:
        score += 1

    if entities.get("date") or entities.get("time"):
        score += 1

    if score >= 3:
        return Complexity.HIGH
    if score >= 1:
        return Complexity.MEDIUM
    return Complexity.LOW


def classify(text: str) -> Intent:
    """Classify free text into an Intent. Never raises."""
    if not isinstance(text, str):
        text = ""

    name, confidence = parse_intent(text)
    entities = extract_entities(text)
    platforms = identify_platforms(text)
    complexity = assess_complexity(name, entities, platforms)

    intent = Intent(
        name=name,
        entities=entities,
        confidence=confidence,
        platforms=platforms,
        complexity=complexity,
    )
    logger.debug(f"Classified {text[:80]!r} as {name} ({confidence}), platforms={platforms}")
    return intent
