from __future__ import annotations

import enum

from .rules import (
    GREETING_PATTERN,
    HIRING_KEYWORDS,
    JOB_SEARCH_PATTERNS,
    JOB_SEARCH_PHRASES,
    PREMIUM_KEYWORDS,
)


class ChatIntent(str, enum.Enum):
    JOB_SEARCH = "job_search"
    HIRING = "hiring"
    PREMIUM = "premium"
    GREETING = "greeting"
    GENERAL = "general"


def classify_intent(message: str | None) -> ChatIntent:
    """Keyword intent detection; first match wins."""
    lower = (message or "").strip().lower()
    if not lower:
        return ChatIntent.GENERAL
    if any(pattern.search(lower) for pattern in JOB_SEARCH_PATTERNS) or any(
        phrase in lower for phrase in JOB_SEARCH_PHRASES
    ):
        return ChatIntent.JOB_SEARCH
    if any(keyword in lower for keyword in HIRING_KEYWORDS):
        return ChatIntent.HIRING
    if any(keyword in lower for keyword in PREMIUM_KEYWORDS):
        return ChatIntent.PREMIUM
    if GREETING_PATTERN.match(lower):
        return ChatIntent.GREETING
    return ChatIntent.GENERAL
