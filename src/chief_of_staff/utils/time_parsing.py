"""Turn phrases like "tomorrow at 2pm" into concrete UTC timestamps."""

import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

_TIME_PATTERN = re.compile(r"(?:\bat\b|@)\s*(\d{1,2})(?::(\d{2}))?\s*(am|pm)?\b", re.IGNORECASE)
_DAY_PATTERN = re.compile(
    r"\b(today|tomorrow|next week|monday|tuesday|wednesday|thursday|friday|saturday|sunday)\b",
    re.IGNORECASE,
)
_WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

DEFAULT_HOUR = 9


def parse_schedule_time(
    task: str,
    context: Optional[Dict[str, Any]] = None,
    now: Optional[datetime] = None,
) -> datetime:
    """Resolve the time a request refers to.

    An explicit `scheduled_time` in the context wins. Otherwise the day comes
    from today/tomorrow/next week/a weekday name (the next such day, never
    today) and the time from "at H[:MM] [am|pm]", defaulting to 9:00.
    A same-day time at or before `now` moves to the following day.
    """
    context = context or {}
    now = now or datetime.now(timezone.utc)

    explicit = context.get("scheduled_time")
    if isinstance(explicit, datetime):
        return explicit if explicit.tzinfo else explicit.replace(tzinfo=timezone.utc)
    if isinstance(explicit, str) and explicit:
        parsed = datetime.fromisoformat(explicit.replace("Z", "+00:00"))
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)

    scheduled = now
    day = None
    day_match = _DAY_PATTERN.search(task or "")
    if day_match:
        day = day_match.group(1).lower()
        if day == "tomorrow":
            scheduled = now + timedelta(days=1)
        elif day == "next week":
            scheduled = now + timedelta(days=7)
        elif day in _WEEKDAYS:
            ahead = (_WEEKDAYS.index(day) - now.weekday()) % 7 or 7
            scheduled = now + timedelta(days=ahead)

    time_match = _TIME_PATTERN.search(task or "")
    if time_match:
        hours = int(time_match.group(1))
        minutes = int(time_match.group(2) or 0)
        period = (time_match.group(3) or "").lower()
        if period == "pm" and hours != 12:
            hours += 12
        if period == "am" and hours == 12:
            hours = 0
        scheduled = scheduled.replace(hour=hours % 24, minute=minutes % 60, second=0, microsecond=0)
    else:
        scheduled = scheduled.replace(hour=DEFAULT_HOUR, minute=0, second=0, microsecond=0)

    # Same-day times that already passed roll over to the next day
    if day in (None, "today") and scheduled <= now:
        scheduled += timedelta(days=1)

    return scheduled


def parse_due_date(task: str, now: Optional[datetime] = None) -> Optional[datetime]:
    """Due date from "due/by/before today|tomorrow", else None."""
    match = re.search(r"\b(?:due|by|before)\s+([^.]+)", task or "", re.IGNORECASE)
    if not match:
        return None
    now = now or datetime.now(timezone.utc)
    phrase = match.group(1).lower()
    if "today" in phrase:
        return now
    if "tomorrow" in phrase:
        return now + timedelta(days=1)
    return None
