from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime
from functools import partial
from typing import Optional

from .browser import fetch_planning_html
from .config import Settings
from .discord_api import DiscordEventsClient
from .ical import build_calendar, load_calendar_events, save_calendar
from .modules import JsonFileStore, ModuleCache, ModuleNameResolver
from .notifier import Notifier, build_notifier
from .schedule import HtmlFetcher, fetch_planning
from .sync import EventsClient, SyncReport, sync_events


class EmptyExtraction(RuntimeError):
    pass


class SyncService:
    """
    One scrape → calendar → Discord run, and the periodic loop around it.

    Runs are awaited one after another, so two runs never touch the
    calendar or module cache files at the same time.
    """

    def __init__(
        self,
        settings: Settings,
        fetch_html: HtmlFetcher,
        resolver: ModuleNameResolver,
        events_client: EventsClient,
        notifier: Notifier,
    ) -> None:
        self.settings = settings
        self.fetch_html = fetch_html
        self.resolver = resolver
        self.events_client = events_client
        self.notifier = notifier

    @classmethod
    def from_settings(cls, settings: Settings, headful: bool = False) -> "SyncService":
        cache = ModuleCache(JsonFileStore(settings.modules_cache_path))
        resolver = ModuleNameResolver(
            cache,
            base_url=settings.module_lookup_url,
            timeout_seconds=settings.http_timeout_seconds,
        )
        events_client = DiscordEventsClient(
            token=settings.discord_token,
            guild_id=settings.discord_guild_id,
            timeout_seconds=settings.http_timeout_seconds,
        )
        return cls(
            settings=settings,
            fetch_html=partial(fetch_planning_html, settings, headful),
            resolver=resolver,
            events_client=events_client,
            notifier=build_notifier(settings.webhook_url, settings.http_timeout_seconds),
        )

    async def run_once(self, now: Optional[datetime] = None, dry_run: bool = False) -> SyncReport:
        settings = self.settings
        debug_path = settings.debug_html_path if settings.debug else None
        planning = await fetch_planning(self.fetch_html, settings.timezone, debug_path)
        if not planning:
            raise EmptyExtraction("Planning is empty")

        logging.info("Found %d event(s), building iCal.", len(planning))
        calendar = await build_calendar(planning, self.resolver)
        await asyncio.to_thread(save_calendar, calendar, settings.calendar_path)

        logging.info("Starting Discord events refresh")
        local_events = await asyncio.to_thread(load_calendar_events, settings.calendar_path)
        return await sync_events(
            self.events_client,
            local_events,
            now=now,
            max_events=settings.max_discord_events,
            dry_run=dry_run,
        )

    async def run_safely(self, dry_run: bool = False) -> Optional[SyncReport]:
        try:
            return await self.run_once(dry_run=dry_run)
        except Exception as exc:
            logging.exception("Sync run failed")
            await self.notifier.notify(f"Sync failed: {exc}")
            return None

    async def run_forever(self) -> None:
        interval = self.settings.sync_interval_minutes * 60
        while True:
            started = time.monotonic()
            await self.run_safely()
            delay = max(0.0, interval - (time.monotonic() - started))
            logging.info("Next sync in %d second(s)", delay)
            await asyncio.sleep(delay)
