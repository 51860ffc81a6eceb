"""Collaborators at the supervisor's boundary: provider, notifier, persistence."""

from .notifier import DiscordNotifier, NotificationEvent, Notifier, NullNotifier
from .provider import CloudflareProvider, ProvisionedTunnel, TunnelProvider
from .store import TunnelStore

__all__ = [
    "CloudflareProvider",
    "ProvisionedTunnel",
    "TunnelProvider",
    "DiscordNotifier",
    "NotificationEvent",
    "Notifier",
    "NullNotifier",
    "TunnelStore",
]
