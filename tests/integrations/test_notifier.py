"""Tests for Discord notifications."""

import json

import httpx
import pytest
import respx

from tunnel_supervisor.integrations.notifier import (
    DiscordNotifier,
    NotificationEvent,
    NullNotifier,
    build_embed,
)
from tunnel_supervisor.tunnels.models import Tunnel

WEBHOOK = "https://discord.example.com/api/webhooks/1/abc"


@pytest.fixture
def tunnel() -> Tunnel:
    return Tunnel(
        id="tunnel_1",
        name="api",
        zone_id="zone-1",
        hostname="api.example.com",
        port=8080,
        remote_id="remote-1",
        secret="c2VjcmV0",
    )


class TestBuildEmbed:
    @pytest.mark.parametrize(
        "event, title",
        [
            (NotificationEvent.STARTED, "✅ Tunnel Started"),
            (NotificationEvent.STOPPED, "🛑 Tunnel Stopped"),
            (NotificationEvent.CRASHED, "💥 Tunnel Crashed"),
            (NotificationEvent.HEALTH_FAILED, "⚠️ Health Check Failed"),
        ],
    )
    def test_titles(self, tunnel, event, title):
        embed = build_embed(event, tunnel)

        assert embed["title"] == title
        assert "**api**" in embed["description"]
        assert {"name": "Hostname", "value": "api.example.com", "inline": True} in embed["fields"]

    def test_health_failed_reports_action(self, tunnel):
        embed = build_embed(NotificationEvent.HEALTH_FAILED, tunnel.model_copy(update={"auto_restart": False}))

        assert {"name": "Action", "value": "No action", "inline": True} in embed["fields"]

    def test_secret_is_not_included(self, tunnel):
        for event in NotificationEvent:
            assert "c2VjcmV0" not in json.dumps(build_embed(event, tunnel))


class TestDiscordNotifier:
    """Test webhook delivery."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_posts_embed(self, tunnel):
        route = respx.post(WEBHOOK).mock(return_value=httpx.Response(204))

        await DiscordNotifier(WEBHOOK).notify(NotificationEvent.STARTED, tunnel)

        payload = json.loads(route.calls.last.request.content)
        assert payload["embeds"][0]["title"] == "✅ Tunnel Started"

    @pytest.mark.asyncio
    @respx.mock
    async def test_failures_do_not_raise(self, tunnel):
        respx.post(WEBHOOK).mock(side_effect=httpx.ConnectError("down"))

        await DiscordNotifier(WEBHOOK).notify(NotificationEvent.CRASHED, tunnel)

    @pytest.mark.asyncio
    @respx.mock
    async def test_error_status_does_not_raise(self, tunnel):
        respx.post(WEBHOOK).mock(return_value=httpx.Response(500))

        await DiscordNotifier(WEBHOOK).notify(NotificationEvent.STOPPED, tunnel)

    @pytest.mark.asyncio
    @respx.mock
    async def test_without_webhook_nothing_is_sent(self, tunnel):
        route = respx.post(WEBHOOK)

        await DiscordNotifier(None).notify(NotificationEvent.STARTED, tunnel)

        assert not route.called

    @pytest.mark.asyncio
    async def test_null_notifier(self, tunnel):
        await NullNotifier().notify(NotificationEvent.STARTED, tunnel)
