"""Tunnel Supervisor - a local control plane for cloudflared tunnels."""

from .common.exceptions import (
    AlreadyRunningError,
    BinaryNotFoundError,
    ConfigurationError,
    ExternalServiceError,
    NotFoundError,
    ProcessError,
    SupervisorError,
    ValidationError,
)
from .common.logging import get_logger, setup_logging
from .common.utils import validate_hostname, validate_port
from .config import SupervisorSettings
from .integrations import (
    CloudflareProvider,
    DiscordNotifier,
    NotificationEvent,
    Notifier,
    NullNotifier,
    ProvisionedTunnel,
    TunnelProvider,
    TunnelStore,
)
from .monitoring import HealthProber, LogEntry, LogLevel, LogSink, MetricsRecorder
from .supervisor import TunnelSupervisor
from .system import SystemStatus, check_requirements
from .tunnels import (
    BulkResult,
    Environment,
    HealthCheckConfig,
    HealthStatus,
    Service,
    StartResult,
    Tunnel,
    TunnelDefinition,
    TunnelStatus,
    TunnelStatusReport,
)

# Setup logging on package initialization
setup_logging(level="INFO")

logger = get_logger(__name__)

__version__ = "0.1.0"


__all__ = [
    # Supervisor
    "TunnelSupervisor",
    "SupervisorSettings",
    # Models
    "Tunnel",
    "TunnelDefinition",
    "TunnelStatus",
    "TunnelStatusReport",
    "StartResult",
    "BulkResult",
    "Service",
    "HealthCheckConfig",
    "HealthStatus",
    "Environment",
    # Collaborators
    "TunnelStore",
    "TunnelProvider",
    "CloudflareProvider",
    "ProvisionedTunnel",
    "Notifier",
    "DiscordNotifier",
    "NullNotifier",
    "NotificationEvent",
    # Monitoring
    "HealthProber",
    "MetricsRecorder",
    "LogSink",
    "LogEntry",
    "LogLevel",
    # System
    "SystemStatus",
    "check_requirements",
    # Exceptions
    "SupervisorError",
    "ValidationError",
    "NotFoundError",
    "AlreadyRunningError",
    "ProcessError",
    "BinaryNotFoundError",
    "ExternalServiceError",
    "ConfigurationError",
    # Utilities
    "get_logger",
    "setup_logging",
    "validate_hostname",
    "validate_port",
]
