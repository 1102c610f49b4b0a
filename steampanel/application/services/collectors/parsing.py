"""Tolerant accessors for upstream JSON — every field may be absent or null."""

from datetime import datetime, timezone
from typing import Any


def dig(data: Any, *path: str) -> Any:
    """Walk nested dicts, returning None as soon as a level is missing."""
    current = data
    for key in path:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def as_int(value: Any, default: int = 0) -> int:
    if isinstance(value, bool):
        return int(value)
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def as_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def as_list(value: Any) -> list[dict[str, Any]]:
    """Return only the dict entries of ``value`` if it is a list."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def from_unix(value: Any) -> datetime | None:
    """Convert a Unix timestamp to an aware UTC datetime; 0/absent -> None."""
    seconds = as_int(value)
    if seconds <= 0:
        return None
    return datetime.fromtimestamp(seconds, tz=timezone.utc)
