from __future__ import annotations

import logging
from typing import Any, Dict, List

import httpx

from .models import CalendarEvent, RemoteEvent

DISCORD_API_URL = "https://discord.com/api/v10"


class DiscordClientError(RuntimeError):
    """Raised when a Discord API call answers with a non-2xx status."""


class DiscordEventsClient:
    """
    Thin client for one guild's scheduled events.

    Only the three calls the sync needs are exposed: list, create and
    delete. A new ``httpx.AsyncClient`` is opened per request.
    """

    def __init__(
        self,
        token: str,
        guild_id: str,
        base_url: str = DISCORD_API_URL,
        timeout_seconds: float = 10.0,
    ) -> None:
        if not token or not guild_id:
            raise ValueError("token and guild_id are required")

        self._token = token
        self._guild_id = guild_id
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds

    @property
    def events_url(self) -> str:
        return f"{self._base_url}/guilds/{self._guild_id}/scheduled-events"

    async def _request(self, method: str, url: str, *, json: Any = None) -> httpx.Response:
        headers = {
            "Authorization": f"Bot {self._token}",
            "Accept": "application/json",
        }
        async with httpx.AsyncClient(timeout=self._timeout_seconds) as client:
            resp = await client.request(method=method, url=url, headers=headers, json=json)

        if resp.status_code // 100 != 2:
            raise DiscordClientError(f"Discord {method} failed (status={resp.status_code}): {resp.text}")
        return resp

    async def list_events(self) -> List[RemoteEvent]:
        resp = await self._request("GET", self.events_url)
        payload: List[Dict[str, Any]] = resp.json()
        events = [RemoteEvent.from_api(item) for item in payload]
        logging.info("Found %d existing Discord event(s)", len(events))
        return events

    async def create_event(self, event: CalendarEvent) -> RemoteEvent:
        resp = await self._request("POST", self.events_url, json=event.to_discord_body())
        return RemoteEvent.from_api(resp.json())

    async def delete_event(self, event_id: str) -> None:
        await self._request("DELETE", f"{self.events_url}/{event_id}")

