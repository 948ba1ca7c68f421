import httpx
import pytest

from cnam_sync.notifier import LogNotifier, WebhookNotifier, build_notifier

from conftest import FakeResponse


def test_build_notifier_picks_webhook_when_configured():
    assert isinstance(build_notifier("https://discord.test/api/webhooks/1/abc"), WebhookNotifier)
    assert isinstance(build_notifier(None), LogNotifier)


@pytest.mark.asyncio
async def test_webhook_posts_plain_content(fake_http):
    fake_http.responses = [FakeResponse(204)]

    await WebhookNotifier("https://discord.test/api/webhooks/1/abc").notify("Planning is empty")

    assert fake_http.calls == [
        {"method": "POST", "url": "https://discord.test/api/webhooks/1/abc", "json": {"content": "Planning is empty"}}
    ]


@pytest.mark.asyncio
async def test_webhook_errors_are_not_raised(fake_http):
    fake_http.responses = [FakeResponse(500, text="boom")]

    await WebhookNotifier("https://discord.test/api/webhooks/1/abc").notify("hello")


@pytest.mark.asyncio
async def test_webhook_transport_errors_are_not_raised(monkeypatch):
    class _BrokenClient:
        def __init__(self, timeout=None):
            pass

        async def __aenter__(self):
            return self

        async def __aexit__(self, exc_type, exc, tb):
            return None

        async def post(self, url, **kwargs):
            raise httpx.ConnectError("unreachable")

    monkeypatch.setattr(httpx, "AsyncClient", _BrokenClient)

    await WebhookNotifier("https://discord.test/api/webhooks/1/abc").notify("hello")
