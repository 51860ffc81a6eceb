"""Events delivered to the supervisor by probes and process watchers.

Background tasks never call back into the supervisor's mutation paths
directly; they put one of these on the supervisor's event queue. Every event
names the pid of the instance it is about, which lets the supervisor drop
events that arrive after that instance has been replaced.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime


@dataclass(frozen=True)
class SupervisorEvent:
    tunnel_id: str
    pid: int | None


@dataclass(frozen=True)
class ProcessExited(SupervisorEvent):
    """The process of a live instance has terminated."""

    returncode: int | None = None


@dataclass(frozen=True)
class HealthChecked(SupervisorEvent):
    """A health probe completed."""

    healthy: bool = False
    reachable: bool = True
    status_code: int | None = None
    error: str | None = None
    checked_at: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass(frozen=True)
class RestartRequested(SupervisorEvent):
    """A background check wants the tunnel restarted."""

    reason: str = "health-check"
