"""In-memory uptime accounting for tunnels."""

import logging
import time
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class TunnelMetrics(BaseModel):
    """Cumulative counters for one tunnel."""

    cumulative_uptime_ms: int = Field(default=0, ge=0)
    requests: int = 0
    bandwidth: int = 0
    errors: int = 0
    last_request: datetime | None = None


class MetricsRecorder:
    """Tracks cumulative uptime per tunnel across start/stop brackets.

    Nothing here is persisted: the numbers are lost when the supervisor
    process exits.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._metrics: dict[str, TunnelMetrics] = {}
        self._started_at: dict[str, float] = {}

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def start(self, tunnel_id: str) -> None:
        """Open an uptime bracket for a tunnel."""
        self._started_at[tunnel_id] = self._now_ms()
        self._metrics.setdefault(tunnel_id, TunnelMetrics())

    def stop(self, tunnel_id: str) -> None:
        """Close the open bracket, if any, folding it into cumulative uptime."""
        started = self._started_at.pop(tunnel_id, None)
        if started is None:
            return

        metrics = self._metrics.get(tunnel_id)
        if metrics is not None:
            elapsed = max(0, self._now_ms() - started)
            self._metrics[tunnel_id] = metrics.model_copy(
                update={"cumulative_uptime_ms": metrics.cumulative_uptime_ms + elapsed}
            )

    def is_open(self, tunnel_id: str) -> bool:
        return tunnel_id in self._started_at

    def current_uptime(self, tunnel_id: str) -> int:
        """Cumulative uptime in milliseconds, including an open bracket."""
        metrics = self._metrics.get(tunnel_id)
        total = metrics.cumulative_uptime_ms if metrics else 0

        started = self._started_at.get(tunnel_id)
        if started is not None:
            total += max(0, self._now_ms() - started)

        return total

    def uptime_percentage(self, tunnel_id: str, created_at: datetime | None) -> float:
        """Uptime as a percentage of wall-clock time since the tunnel was created.

        Returns 0 when the creation time is unknown.
        """
        if created_at is None:
            return 0.0

        total_ms = self._now_ms() - int(created_at.timestamp() * 1000)
        if total_ms <= 0:
            return 0.0

        return self.current_uptime(tunnel_id) / total_ms * 100

    def get_metrics(self, tunnel_id: str, created_at: datetime | None = None) -> dict[str, Any]:
        """Snapshot of a tunnel's counters with live uptime figures."""
        metrics = self._metrics.get(tunnel_id) or TunnelMetrics()
        snapshot = metrics.model_dump()
        snapshot["uptime"] = self.current_uptime(tunnel_id)
        snapshot["uptime_percentage"] = self.uptime_percentage(tunnel_id, created_at)
        return snapshot

    def get_all_metrics(
        self, created: Mapping[str, datetime | None] | None = None
    ) -> dict[str, dict[str, Any]]:
        """Snapshots of every tunnel that has ever been started."""
        created = created or {}
        return {
            tunnel_id: self.get_metrics(tunnel_id, created.get(tunnel_id))
            for tunnel_id in self._metrics
        }

    def forget(self, tunnel_id: str) -> None:
        """Drop all numbers for a deleted tunnel."""
        self._started_at.pop(tunnel_id, None)
        if self._metrics.pop(tunnel_id, None) is not None:
            logger.debug(f"Dropped metrics for tunnel {tunnel_id}")
