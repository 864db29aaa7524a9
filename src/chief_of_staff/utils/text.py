"""Small text helpers shared by capability agents."""

import re
from typing import Optional

_EMAIL_PATTERN = re.compile(r"[\w.+-]+@[\w-]+(?:\.[\w-]+)+")


def find_email_address(text: str) -> Optional[str]:
    match = _EMAIL_PATTERN.search(text or "")
    return match.group(0) if match else None


def word_count(text: str) -> int:
    return len(text.split())
