"""Per-tunnel bounded log buffers."""

from collections import deque
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_CAPACITY = 100


class LogLevel(str, Enum):
    """Level of a captured tunnel log line."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LogEntry(BaseModel):
    """A single captured line of tunnel output."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    level: LogLevel
    message: str


def classify_stderr_line(line: str) -> LogLevel:
    """Derive the level of a line the tunnel binary wrote to stderr.

    The binary writes nearly everything to stderr, so the stream alone says
    nothing about severity; its own ``ERR``/``WRN`` markers and common failure
    words do.
    """
    if " ERR " in line or "error" in line or "failed" in line:
        return LogLevel.ERROR
    if " WRN " in line:
        return LogLevel.WARNING
    return LogLevel.INFO


class LogSink:
    """Append-only ring buffers of log entries, one per tunnel.

    Appending beyond ``capacity`` evicts the oldest entry of that tunnel.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("Log capacity must be at least 1")
        self.capacity = capacity
        self._buffers: dict[str, deque[LogEntry]] = {}

    def append(self, tunnel_id: str, level: LogLevel | str, message: str) -> LogEntry:
        entry = LogEntry(level=LogLevel(level), message=message)
        buffer = self._buffers.get(tunnel_id)
        if buffer is None:
            buffer = self._buffers[tunnel_id] = deque(maxlen=self.capacity)
        buffer.append(entry)
        return entry

    def read(self, tunnel_id: str) -> list[LogEntry]:
        """Return the buffered entries for a tunnel, oldest first."""
        return list(self._buffers.get(tunnel_id, ()))

    def clear(self, tunnel_id: str) -> None:
        self._buffers.pop(tunnel_id, None)

    def __contains__(self, tunnel_id: object) -> bool:
        return tunnel_id in self._buffers
