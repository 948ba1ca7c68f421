from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

# Discord guild scheduled event enums
PRIVACY_GUILD_ONLY = 2
ENTITY_TYPE_EXTERNAL = 3


def event_key(moment: datetime) -> int:
    """Epoch milliseconds of ``moment``, the identity of an event everywhere."""
    return int(round(moment.timestamp() * 1000))


@dataclass(frozen=True)
class RawEvent:
    date: str
    start: datetime
    end: datetime
    classroom: str
    name: str
    type: str
    teacher: str


@dataclass
class CalendarEvent:
    uid: str
    summary: str
    start: datetime
    end: datetime
    description: str
    location: str

    @property
    def key(self) -> int:
        return event_key(self.start)

    def to_discord_body(self) -> dict:
        return {
            "name": self.summary,
            "privacy_level": PRIVACY_GUILD_ONLY,
            "entity_type": ENTITY_TYPE_EXTERNAL,
            "scheduled_start_time": self.start.isoformat(),
            "scheduled_end_time": self.end.isoformat(),
            "description": self.description,
            "entity_metadata": {"location": self.location},
        }


@dataclass
class RemoteEvent:
    id: str
    name: str
    start: datetime
    end: Optional[datetime]
    description: str
    location: str

    @property
    def key(self) -> int:
        return event_key(self.start)

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "RemoteEvent":
        end = payload.get("scheduled_end_time")
        metadata = payload.get("entity_metadata") or {}
        return cls(
            id=str(payload["id"]),
            name=payload.get("name", ""),
            start=datetime.fromisoformat(payload["scheduled_start_time"]),
            end=datetime.fromisoformat(end) if end else None,
            description=payload.get("description") or "",
            location=metadata.get("location") or "",
        )
