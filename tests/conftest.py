from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo

import pytest

from cnam_sync.config import Settings
from cnam_sync.discord_api import DiscordClientError
from cnam_sync.models import CalendarEvent, RemoteEvent

PARIS = ZoneInfo("Europe/Paris")


class FakeResponse:
    def __init__(self, status_code: int, text: str = "", json_data: Any = None):
        self.status_code = status_code
        self.text = text or str(json_data)
        self._json_data = json_data

    def json(self) -> Any:
        return self._json_data


class FakeAsyncClient:
    """
    Stand-in for httpx.AsyncClient.

    Tests queue responses in ``responses`` and inspect ``calls`` afterwards.
    """

    responses: List[FakeResponse] = []
    calls: List[Dict[str, Any]] = []

    def __init__(self, timeout: float | None = None):
        self._timeout = timeout

    async def __aenter__(self) -> "FakeAsyncClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None

    def _next(self, **call) -> FakeResponse:
        FakeAsyncClient.calls.append(call)
        return FakeAsyncClient.responses.pop(0)

    async def get(self, url: str, **kwargs) -> FakeResponse:
        return self._next(method="GET", url=url, **kwargs)

    async def post(self, url: str, **kwargs) -> FakeResponse:
        return self._next(method="POST", url=url, **kwargs)

    async def request(self, method: str, url: str, **kwargs) -> FakeResponse:
        return self._next(method=method, url=url, **kwargs)


@pytest.fixture
def fake_http(monkeypatch):
    import httpx

    FakeAsyncClient.responses = []
    FakeAsyncClient.calls = []
    monkeypatch.setattr(httpx, "AsyncClient", FakeAsyncClient)
    return FakeAsyncClient


class FakeEventsClient:
    """In-memory guild scheduled events."""

    def __init__(self, remote: Optional[List[RemoteEvent]] = None):
        self.remote: List[RemoteEvent] = list(remote or [])
        self.created: List[CalendarEvent] = []
        self.deleted: List[str] = []
        self.fail_create_keys: set[int] = set()
        self.fail_delete_ids: set[str] = set()
        self._next_id = 1000

    async def list_events(self) -> List[RemoteEvent]:
        return list(self.remote)

    async def create_event(self, event: CalendarEvent) -> RemoteEvent:
        if event.key in self.fail_create_keys:
            raise DiscordClientError("Discord POST failed (status=400)")
        self._next_id += 1
        remote = RemoteEvent(
            id=str(self._next_id),
            name=event.summary,
            start=event.start,
            end=event.end,
            description=event.description,
            location=event.location,
        )
        self.created.append(event)
        self.remote.append(remote)
        return remote

    async def delete_event(self, event_id: str) -> None:
        if event_id in self.fail_delete_ids:
            raise DiscordClientError("Discord DELETE failed (status=500)")
        self.deleted.append(event_id)
        self.remote = [event for event in self.remote if event.id != event_id]


class MemoryStore:
    def __init__(self, data: Optional[Dict[str, str]] = None) -> None:
        self.data: Dict[str, str] = dict(data or {})
        self.save_count = 0

    def load(self) -> Dict[str, str]:
        return dict(self.data)

    def save(self, data: Dict[str, str]) -> None:
        self.data = dict(data)
        self.save_count += 1


class FakeNotifier:
    def __init__(self) -> None:
        self.messages: List[str] = []

    async def notify(self, text: str) -> None:
        self.messages.append(text)


def make_event(start: datetime, summary: str = "Programmation Java", **overrides) -> CalendarEvent:
    fields = dict(
        uid=str(int(start.timestamp() * 1000)),
        summary=summary,
        start=start,
        end=start + timedelta(hours=3),
        description="NFA031 - Cours",
        location="M. Dupont - Salle 12",
    )
    fields.update(overrides)
    return CalendarEvent(**fields)


def as_remote(event: CalendarEvent, event_id: str = "1", **overrides) -> RemoteEvent:
    fields = dict(
        id=event_id,
        name=event.summary,
        start=event.start,
        end=event.end,
        description=event.description,
        location=event.location,
    )
    fields.update(overrides)
    return RemoteEvent(**fields)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        planning_url="https://example.test/planning",
        discord_token="token",
        discord_guild_id="1027180729618141184",
        timezone=PARIS,
        calendar_path=str(tmp_path / "calendar.ics"),
        modules_cache_path=str(tmp_path / "modules.cache"),
        debug_html_path=str(tmp_path / "debug.html"),
    )
