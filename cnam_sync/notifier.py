from __future__ import annotations

import logging
from typing import Optional, Protocol

import httpx


class Notifier(Protocol):
    async def notify(self, text: str) -> None: ...


class LogNotifier:
    """Used when no webhook is configured."""

    async def notify(self, text: str) -> None:
        logging.warning("Notification: %s", text)


class WebhookNotifier:
    """Posts plain text messages to a Discord webhook, fire-and-forget."""

    def __init__(self, url: str, timeout_seconds: float = 10.0) -> None:
        self._url = url
        self._timeout_seconds = timeout_seconds

    async def notify(self, text: str) -> None:
        try:
            async with httpx.AsyncClient(timeout=self._timeout_seconds) as client:
                resp = await client.post(self._url, json={"content": text})
        except httpx.HTTPError as exc:
            logging.warning("Webhook notification failed: %s", exc)
            return
        if resp.status_code // 100 != 2:
            logging.warning("Webhook notification failed (status=%s)", resp.status_code)


def build_notifier(webhook_url: Optional[str], timeout_seconds: float = 10.0) -> Notifier:
    if webhook_url:
        return WebhookNotifier(webhook_url, timeout_seconds=timeout_seconds)
    return LogNotifier()
