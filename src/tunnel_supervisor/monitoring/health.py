"""Periodic local HTTP health probes for running tunnels.

Each tunnel with health checks enabled gets one asyncio task that probes
``http://localhost:<port><path>`` every ``interval`` seconds, presenting the
tunnel's hostname in the ``Host`` header so that virtual-hosted services
answer as they would through the tunnel.

A response below 500 counts as healthy: a 404 or 401 still proves the service
is up. Transport errors and 5xx count as unhealthy.

Results go to the supervisor as :class:`HealthChecked` events. When a probe
fails and the tunnel has auto-restart enabled, the task also emits
:class:`RestartRequested` and ends; the restart registers a fresh task for the
new process, so each failure produces at most one restart.
"""

import asyncio
from dataclasses import dataclass

import httpx

from ..common.logging import get_logger, get_tunnel_logger
from ..tunnels.events import HealthChecked, RestartRequested, SupervisorEvent
from ..tunnels.models import Tunnel

logger = get_logger(__name__)

DEFAULT_PROBE_TIMEOUT = 5.0
HEALTHY_STATUS_RANGE = range(200, 500)


@dataclass(frozen=True)
class ProbeTarget:
    """What a probe task needs to know about its tunnel."""

    tunnel_id: str
    pid: int | None
    hostname: str
    port: int
    path: str
    interval: float
    auto_restart: bool

    @property
    def url(self) -> str:
        return f"http://localhost:{self.port}{self.path}"

    @classmethod
    def from_tunnel(cls, tunnel: Tunnel, pid: int | None) -> "ProbeTarget":
        return cls(
            tunnel_id=tunnel.id,
            pid=pid,
            hostname=tunnel.hostname,
            port=tunnel.port,
            path=tunnel.health_check.path,
            interval=tunnel.health_check.interval,
            auto_restart=tunnel.auto_restart,
        )


@dataclass(frozen=True)
class ProbeResult:
    healthy: bool
    reachable: bool
    status_code: int | None = None
    error: str | None = None


class HealthProber:
    """Owns one probe task per registered tunnel."""

    def __init__(
        self,
        events: "asyncio.Queue[SupervisorEvent]",
        timeout: float = DEFAULT_PROBE_TIMEOUT,
    ) -> None:
        self._events = events
        self.timeout = timeout
        self._tasks: dict[str, asyncio.Task[None]] = {}

    def register(self, tunnel: Tunnel, pid: int | None) -> bool:
        """Start probing a tunnel, replacing any earlier registration.

        Returns:
            False if the tunnel has health checks disabled
        """
        if not tunnel.health_check.enabled:
            return False

        self.unregister(tunnel.id)
        target = ProbeTarget.from_tunnel(tunnel, pid)
        task = asyncio.create_task(self._run(target), name=f"health-probe:{tunnel.id}")
        self._tasks[tunnel.id] = task
        task.add_done_callback(lambda t, tunnel_id=tunnel.id: self._forget(tunnel_id, t))

        logger.info(
            "Starting health check",
            tunnel_id=tunnel.id,
            url=target.url,
            interval=target.interval,
        )
        return True

    def unregister(self, tunnel_id: str) -> bool:
        """Cancel a tunnel's probe task.

        Returns:
            True if a task was cancelled
        """
        task = self._tasks.pop(tunnel_id, None)
        if task is None:
            return False

        if not task.done():
            task.cancel()
        logger.info("Stopped health check", tunnel_id=tunnel_id)
        return True

    def is_registered(self, tunnel_id: str) -> bool:
        task = self._tasks.get(tunnel_id)
        return task is not None and not task.done()

    async def stop_all(self) -> None:
        """Cancel every probe task and wait for them to finish."""
        tasks = list(self._tasks.values())
        self._tasks.clear()
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    def _forget(self, tunnel_id: str, task: "asyncio.Task[None]") -> None:
        if self._tasks.get(tunnel_id) is task:
            del self._tasks[tunnel_id]

    async def probe(self, target: ProbeTarget) -> ProbeResult:
        """Issue one probe request."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(target.url, headers={"Host": target.hostname})
        except httpx.HTTPError as e:
            return ProbeResult(healthy=False, reachable=False, error=str(e) or type(e).__name__)

        return ProbeResult(
            healthy=response.status_code in HEALTHY_STATUS_RANGE,
            reachable=True,
            status_code=response.status_code,
        )

    async def _run(self, target: ProbeTarget) -> None:
        log = get_tunnel_logger(__name__, target.tunnel_id, url=target.url)
        while True:
            await asyncio.sleep(target.interval)

            result = await self.probe(target)
            await self._events.put(
                HealthChecked(
                    tunnel_id=target.tunnel_id,
                    pid=target.pid,
                    healthy=result.healthy,
                    reachable=result.reachable,
                    status_code=result.status_code,
                    error=result.error,
                )
            )

            if result.healthy:
                log.debug("Health check passed", status_code=result.status_code)
                continue

            log.warning(
                "Health check failed",
                status_code=result.status_code,
                error=result.error,
                auto_restart=target.auto_restart,
            )
            if target.auto_restart:
                # Unreachable services only warrant a restart while the tunnel
                # is running; the supervisor checks that before acting.
                reason = "health-check" if result.reachable else "unreachable"
                await self._events.put(
                    RestartRequested(tunnel_id=target.tunnel_id, pid=target.pid, reason=reason)
                )
                return
