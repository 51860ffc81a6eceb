"""Health probing, uptime metrics and log capture."""

from .health import HealthProber, ProbeResult, ProbeTarget
from .logs import LogEntry, LogLevel, LogSink, classify_stderr_line
from .metrics import MetricsRecorder, TunnelMetrics

__all__ = [
    "HealthProber",
    "ProbeResult",
    "ProbeTarget",
    "LogEntry",
    "LogLevel",
    "LogSink",
    "classify_stderr_line",
    "MetricsRecorder",
    "TunnelMetrics",
]
