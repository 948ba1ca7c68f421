from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

from .config import DEFAULT_TIMEZONE
from .models import CalendarEvent, RemoteEvent

PARIS = ZoneInfo(DEFAULT_TIMEZONE)


def normalize_date(text: str) -> str:
    """Convert a planning date label ``25/10/2022`` to ISO ``2022-10-25``."""
    parts = text.strip().split("/")
    if len(parts) != 3:
        raise ValueError(f"Cannot parse date from '{text}'")
    day, month, year = (part.strip() for part in parts)
    return f"{year}-{month}-{day}"


def normalize_datetime(day: str, range_text: str, index: int, tz: ZoneInfo = PARIS) -> datetime:
    """
    Build the start (index 0) or end (index 1) of a ``9.00 - 12.00`` range
    on ``day`` (ISO date) in ``tz``.
    """
    fragments = range_text.split("-")
    if len(fragments) != 2:
        raise ValueError(f"Cannot parse time range from '{range_text}'")
    if index not in (0, 1):
        raise ValueError(f"Time range index must be 0 or 1, got {index}")
    time_str = fragments[index].replace(".", ":").replace(" ", "").strip().rjust(5, "0")
    return datetime.fromisoformat(f"{day}T{time_str}").replace(tzinfo=tz)


def events_equal(local: CalendarEvent, remote: RemoteEvent) -> bool:
    return (
        local.summary == remote.name
        and (local.location or "") == (remote.location or "")
        and (local.description or "") == (remote.description or "")
    )
