from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Protocol

import httpx

from .discord_api import DiscordClientError
from .models import CalendarEvent, RemoteEvent
from .utils import PARIS, events_equal

# Upper bound of mirrored events per guild.
MAX_DISCORD_EVENTS = 49


class EventsClient(Protocol):
    async def list_events(self) -> List[RemoteEvent]: ...

    async def create_event(self, event: CalendarEvent) -> RemoteEvent: ...

    async def delete_event(self, event_id: str) -> None: ...


@dataclass
class SyncReport:
    deleted: int = 0
    created: int = 0
    skipped: int = 0
    failed: int = 0

    @property
    def actions(self) -> int:
        return self.deleted + self.created


def select_upcoming(events: Iterable[CalendarEvent], now: datetime, max_events: int) -> List[CalendarEvent]:
    """First ``max_events`` events starting at or after ``now``, in input order."""
    batch: List[CalendarEvent] = []
    for event in events:
        if event.start < now:
            continue
        batch.append(event)
        if len(batch) >= max_events:
            break
    return batch


def _local_time(moment: datetime) -> str:
    return moment.astimezone(PARIS).strftime("%d/%m/%Y %H:%M")


async def sync_events(
    client: EventsClient,
    local_events: Iterable[CalendarEvent],
    now: Optional[datetime] = None,
    max_events: int = MAX_DISCORD_EVENTS,
    dry_run: bool = False,
) -> SyncReport:
    if now is None:
        now = datetime.now(timezone.utc)
    batch = select_upcoming(local_events, now, max_events)
    logging.debug("Upcoming events to mirror: %s", batch)

    local_by_key: Dict[int, CalendarEvent] = {}
    for event in batch:
        local_by_key.setdefault(event.key, event)

    report = SyncReport()
    remaining: List[RemoteEvent] = []
    for remote in await client.list_events():
        local = local_by_key.get(remote.key)
        if local is None:
            logging.info("Event %s at %s does not exist, removing...", remote.name, _local_time(remote.start))
        elif not events_equal(local, remote):
            logging.info("Event %s at %s values don't match, removing...", remote.name, _local_time(remote.start))
        else:
            remaining.append(remote)
            continue

        if dry_run:
            report.deleted += 1
            continue
        try:
            await client.delete_event(remote.id)
        except (DiscordClientError, httpx.HTTPError) as exc:
            logging.error("Failed to delete event %s: %s", remote.id, exc)
            report.failed += 1
            remaining.append(remote)
            continue
        report.deleted += 1

    existing = {remote.key for remote in remaining}
    for event in batch:
        if event.key in existing:
            logging.debug("Event %s at %s exists, skipping...", event.summary, _local_time(event.start))
            report.skipped += 1
            continue

        logging.info("Creating event %s at %s", event.summary, _local_time(event.start))
        if dry_run:
            report.created += 1
            continue
        try:
            created = await client.create_event(event)
        except (DiscordClientError, httpx.HTTPError) as exc:
            logging.error("Failed to create event %s at %s: %s", event.summary, _local_time(event.start), exc)
            report.failed += 1
            continue
        existing.add(created.key)
        report.created += 1

    logging.info(
        "Sync complete. %d actions (%d deleted, %d created, %d failed)",
        report.actions,
        report.deleted,
        report.created,
        report.failed,
    )
    return report
