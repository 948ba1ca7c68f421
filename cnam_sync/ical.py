from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Iterable, List

from ics import Calendar
from ics import Event as IcsEvent
from ics.grammar.parse import ContentLine

from .models import CalendarEvent, RawEvent, event_key
from .modules import ModuleNameResolver

CALENDAR_NAME = "Planning CNAM"


async def build_calendar(events: Iterable[RawEvent], resolver: ModuleNameResolver) -> Calendar:
    """
    Turn scraped sessions into a calendar, resolving module names one by one.

    Entries are keyed by their start time; a later session starting at the
    same instant replaces the earlier one.
    """
    entries: Dict[str, IcsEvent] = {}
    for event in events:
        summary = await resolver.resolve(event.name)
        uid = str(event_key(event.start))
        entries[uid] = IcsEvent(
            name=summary,
            begin=event.start,
            end=event.end,
            uid=uid,
            description=f"{event.name} - {event.type}",
            location=f"{event.teacher} - {event.classroom}",
        )

    calendar = Calendar()
    calendar.extra.append(ContentLine(name="X-WR-CALNAME", value=CALENDAR_NAME))
    for entry in entries.values():
        calendar.events.add(entry)
    logging.info("Built calendar with %d event(s)", len(entries))
    return calendar


def save_calendar(calendar: Calendar, path: str | Path) -> Path:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    tmp = out.with_name(out.name + ".tmp")
    with open(tmp, "w", encoding="utf-8", newline="") as handle:
        handle.writelines(calendar.serialize_iter())
    os.replace(tmp, out)
    logging.info("Wrote %s", out)
    return out


def load_calendar_events(path: str | Path) -> List[CalendarEvent]:
    """Decode the persisted calendar back into events, in chronological order."""
    calendar = Calendar(Path(path).read_text(encoding="utf-8"))
    events: List[CalendarEvent] = []
    for entry in calendar.timeline:
        events.append(
            CalendarEvent(
                uid=entry.uid,
                summary=entry.name or "",
                start=entry.begin.datetime,
                end=entry.end.datetime,
                description=entry.description or "",
                location=entry.location or "",
            )
        )
    return events
