"""Tunnel models.

Persisted tunnels are immutable; every state change produces a new instance
through ``model_copy`` so the store, the supervisor and the health prober never
share a mutable record.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..common.utils import generate_tunnel_id


def utcnow() -> datetime:
    return datetime.now(UTC)


class TunnelStatus(str, Enum):
    """Tunnel status enumeration."""

    STOPPED = "stopped"
    RUNNING = "running"


class HealthStatus(str, Enum):
    """Outcome of the most recent health probe."""

    UNKNOWN = "unknown"
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


class Environment(str, Enum):
    """Deployment label attached to a tunnel."""

    PRODUCTION = "production"
    STAGING = "staging"
    DEVELOPMENT = "development"


class Service(BaseModel):
    """A sub-route forwarded by the tunnel.

    A service routes either a path on the tunnel's primary hostname or a whole
    alternate hostname to a local port.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True, extra="forbid")

    port: int = Field(ge=1, le=65535, description="Local port to forward to")
    path: str | None = Field(default=None, description="Path-based route")
    hostname: str | None = Field(default=None, description="Alternate hostname route")

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str | None) -> str | None:
        """Paths must be absolute."""
        if v is not None and not v.startswith("/"):
            raise ValueError("Service path must start with '/'")
        return v or None

    @model_validator(mode="after")
    def require_route(self) -> "Service":
        """A service needs a path or a hostname to be routable."""
        if not self.path and not self.hostname:
            raise ValueError("Service requires either a path or a hostname")
        return self


class HealthCheckConfig(BaseModel):
    """Health probe settings for a tunnel."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True, extra="forbid")

    enabled: bool = False
    interval: float = Field(default=30.0, gt=0, description="Seconds between probes")
    path: str = Field(default="/", description="Probe path on the local port")

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError("Health check path must start with '/'")
        return v


class TunnelStats(BaseModel):
    """Runtime counters persisted with the tunnel."""

    model_config = ConfigDict(frozen=True)

    last_started: datetime | None = None
    restart_count: int = Field(default=0, ge=0)
    last_health_check: datetime | None = None
    health_status: HealthStatus = HealthStatus.UNKNOWN


class TunnelDefinition(BaseModel):
    """User-supplied fields for creating a tunnel."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    name: str = Field(min_length=1, max_length=128)
    zone_id: str = Field(min_length=1, description="DNS zone receiving the route")
    hostname: str = Field(min_length=1, description="Primary public hostname")
    port: int = Field(ge=1, le=65535, description="Primary local port")
    services: list[Service] = Field(default_factory=list)
    environment: Environment = Environment.PRODUCTION
    health_check: HealthCheckConfig = Field(default_factory=HealthCheckConfig)
    auto_restart: bool = True
    auto_startup: bool = False


# Fields that ``update`` never lets a patch overwrite
IMMUTABLE_FIELDS = frozenset({"id", "remote_id", "account_id", "secret", "created_at"})
RUNTIME_FIELDS = frozenset({"status", "pid", "pid_started_at", "stats", "updated_at"})


class Tunnel(TunnelDefinition):
    """A persisted tunnel definition plus its runtime status."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True, extra="ignore")

    id: str = Field(default_factory=generate_tunnel_id, min_length=1)
    remote_id: str = Field(min_length=1, description="Provider-assigned tunnel id")
    account_id: str | None = Field(default=None, description="Provider account owning the tunnel")
    secret: str = Field(repr=False, description="Credential blob for the tunnel binary")

    status: TunnelStatus = TunnelStatus.STOPPED
    pid: int | None = None
    pid_started_at: float | None = Field(
        default=None, description="Creation time of the process behind pid"
    )
    stats: TunnelStats = Field(default_factory=TunnelStats)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime | None = None

    @property
    def is_marked_running(self) -> bool:
        """Whether the persisted record claims a live process."""
        return self.status == TunnelStatus.RUNNING and self.pid is not None

    def with_running(self, pid: int, pid_started_at: float | None) -> "Tunnel":
        """Create a copy marked running with the given process."""
        return self.model_copy(
            update={
                "status": TunnelStatus.RUNNING,
                "pid": pid,
                "pid_started_at": pid_started_at,
            }
        )

    def with_stopped(self) -> "Tunnel":
        """Create a copy marked stopped with no process."""
        return self.model_copy(
            update={"status": TunnelStatus.STOPPED, "pid": None, "pid_started_at": None}
        )

    def with_stats(self, **changes: Any) -> "Tunnel":
        """Create a copy with some stats fields replaced."""
        return self.model_copy(update={"stats": self.stats.model_copy(update=changes)})

    def definition_fields(self) -> dict[str, Any]:
        """The user-editable part of the tunnel as plain data."""
        return self.model_dump(include=set(TunnelDefinition.model_fields))


class StartResult(BaseModel):
    """Result of starting a tunnel."""

    success: bool = True
    message: str = "Tunnel started"
    pid: int


class TunnelStatusReport(BaseModel):
    """Authoritative liveness report for a tunnel."""

    id: str
    name: str
    status: TunnelStatus
    pid: int | None
    port: int
    hostname: str


class BulkResult(BaseModel):
    """Per-id outcome of a bulk operation."""

    id: str
    success: bool
    error: str | None = None
