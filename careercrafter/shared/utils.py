"""Shared utility functions used across components."""

import re
from datetime import datetime, timezone
from typing import Any


def utcnow() -> datetime:
    """Return the current UTC datetime (timezone-aware)."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Return datetime as timezone-aware UTC. Returns None if input is None."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def isoformat_or_none(dt: datetime | None) -> str | None:
    dt = ensure_utc(dt)
    return dt.isoformat() if dt else None


def safe_string(value: Any, *, max_chars: int = 300) -> str:
    text = str(value or "").strip()
    if not text:
        return ""
    return re.sub(r"\s+", " ", text)[:max_chars]


def safe_string_list(value: Any, *, max_items: int = 20, max_chars: int = 160) -> list[str]:
    if not isinstance(value, list):
        return []
    out: list[str] = []
    for raw in value[:max_items]:
        text = safe_string(raw, max_chars=max_chars)
        if text:
            out.append(text)
    return out


def read_field(source: Any, *names: str, default: Any = None) -> Any:
    """Read the first present attribute/key from a mapping or ORM object."""
    for name in names:
        if isinstance(source, dict):
            value = source.get(name)
        else:
            value = getattr(source, name, None)
        if value is not None and value != "" and value != []:
            return value
    return default
