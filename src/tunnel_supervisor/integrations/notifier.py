"""Alert delivery for tunnel state transitions.

Notifications are fire-and-forget: a notifier never raises, and a failed
delivery is only logged.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Any, Protocol

import httpx

from ..common.logging import get_logger
from ..tunnels.models import Tunnel

logger = get_logger(__name__)

_WEBHOOK_TIMEOUT = 5.0


class NotificationEvent(str, Enum):
    """State transitions worth alerting on."""

    STARTED = "started"
    STOPPED = "stopped"
    CRASHED = "crashed"
    HEALTH_FAILED = "health-failed"


class Notifier(Protocol):
    async def notify(self, event: NotificationEvent, tunnel: Tunnel) -> None:
        """Deliver an alert; must not raise."""
        ...


class NullNotifier:
    """Notifier that drops every alert."""

    async def notify(self, event: NotificationEvent, tunnel: Tunnel) -> None:
        logger.debug("Notification dropped", notification=event.value, tunnel_id=tunnel.id)


RED = 15158332
GREEN = 3066993
ORANGE = 16776960


def _field(name: str, value: str) -> dict[str, Any]:
    return {"name": name, "value": value, "inline": True}


def build_embed(event: NotificationEvent, tunnel: Tunnel) -> dict[str, Any]:
    """Build the Discord embed for an event."""
    environment = tunnel.environment.value

    if event == NotificationEvent.STARTED:
        title, color = "✅ Tunnel Started", GREEN
        description = f"Tunnel **{tunnel.name}** is now running"
        fields = [
            _field("Hostname", tunnel.hostname),
            _field("Port", str(tunnel.port)),
            _field("Environment", environment),
        ]
    elif event == NotificationEvent.STOPPED:
        title, color = "🛑 Tunnel Stopped", RED
        description = f"Tunnel **{tunnel.name}** has been stopped"
        fields = [_field("Hostname", tunnel.hostname), _field("Environment", environment)]
    elif event == NotificationEvent.CRASHED:
        title, color = "💥 Tunnel Crashed", RED
        description = f"Tunnel **{tunnel.name}** has crashed unexpectedly"
        fields = [
            _field("Hostname", tunnel.hostname),
            _field("Environment", environment),
            _field("Auto-Restart", "Enabled" if tunnel.auto_restart else "Disabled"),
        ]
    else:
        title, color = "⚠️ Health Check Failed", ORANGE
        description = f"Health check failed for tunnel **{tunnel.name}**"
        fields = [
            _field("Hostname", tunnel.hostname),
            _field("Port", str(tunnel.port)),
            _field("Action", "Auto-restarting" if tunnel.auto_restart else "No action"),
        ]

    return {
        "title": title,
        "description": description,
        "color": color,
        "timestamp": datetime.now(UTC).isoformat(),
        "fields": fields,
    }


class DiscordNotifier:
    """Posts embeds to a Discord webhook."""

    def __init__(self, webhook_url: str | None, timeout: float = _WEBHOOK_TIMEOUT) -> None:
        self.webhook_url = webhook_url
        self.timeout = timeout

    async def notify(self, event: NotificationEvent, tunnel: Tunnel) -> None:
        if not self.webhook_url:
            return

        payload = {"embeds": [build_embed(event, tunnel)]}
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.webhook_url, json=payload)
                if response.status_code >= 400:
                    logger.warning(
                        "Failed to send Discord notification",
                        notification=event.value,
                        status_code=response.status_code,
                    )
        except Exception as e:
            logger.warning(
                "Failed to send Discord notification", notification=event.value, error=str(e)
            )
