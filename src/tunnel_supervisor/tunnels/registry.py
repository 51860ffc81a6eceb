"""Registry of live tunnel instances owned by the supervisor."""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime

from ..common.exceptions import AlreadyRunningError
from .process import TunnelProcess

logger = logging.getLogger(__name__)


@dataclass
class Instance:
    """Direct handle to a tunnel process spawned by this supervisor."""

    tunnel_id: str
    process: TunnelProcess
    pid: int
    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    watcher: "asyncio.Task[None] | None" = None


class InstanceRegistry:
    """In-memory map of tunnel id to live instance.

    Holds at most one instance per tunnel id. Instances exist only while the
    supervisor holds the process handle; they are not restored after a
    supervisor restart.
    """

    def __init__(self) -> None:
        self._instances: dict[str, Instance] = {}

    def add(self, instance: Instance) -> None:
        """Register a live instance.

        Raises:
            AlreadyRunningError: If the tunnel already has an instance
        """
        if instance.tunnel_id in self._instances:
            raise AlreadyRunningError(f"Tunnel {instance.tunnel_id} is already running")

        self._instances[instance.tunnel_id] = instance
        logger.info(f"Registered instance for tunnel {instance.tunnel_id} (pid {instance.pid})")

    def get(self, tunnel_id: str) -> Instance | None:
        return self._instances.get(tunnel_id)

    def remove(self, tunnel_id: str) -> Instance | None:
        """Remove and return a tunnel's instance, if any."""
        instance = self._instances.pop(tunnel_id, None)
        if instance is not None:
            logger.info(f"Removed instance for tunnel {tunnel_id}")
        return instance

    def discard(self, instance: Instance) -> bool:
        """Remove ``instance`` only if it is still the registered one.

        Returns:
            True if it was removed
        """
        if self._instances.get(instance.tunnel_id) is instance:
            del self._instances[instance.tunnel_id]
            logger.info(f"Removed exited instance for tunnel {instance.tunnel_id}")
            return True
        return False

    def is_current(self, tunnel_id: str, pid: int | None) -> bool:
        """Whether ``pid`` belongs to the tunnel's registered instance."""
        instance = self._instances.get(tunnel_id)
        return instance is not None and instance.pid == pid

    def list(self) -> list[Instance]:
        return list(self._instances.values())

    def __contains__(self, tunnel_id: object) -> bool:
        return tunnel_id in self._instances

    def __len__(self) -> int:
        return len(self._instances)
