from __future__ import annotations

from datetime import date, datetime


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp into a naive local datetime.

    Aware values (including a trailing ``Z``) are converted to local time.
    Raises ValueError/TypeError on anything unparseable.
    """
    if not isinstance(value, str):
        raise TypeError(f"Timestamp must be a string, got {type(value).__name__}")

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def to_iso(value: datetime) -> str:
    return value.isoformat(timespec="milliseconds")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
