"""Tunnel models, config rendering and process handles."""

from .config import ConfigRenderer, IngressRule, RenderedConfig, build_ingress_rules
from .events import HealthChecked, ProcessExited, RestartRequested, SupervisorEvent
from .models import (
    BulkResult,
    Environment,
    HealthCheckConfig,
    HealthStatus,
    Service,
    StartResult,
    Tunnel,
    TunnelDefinition,
    TunnelStats,
    TunnelStatus,
    TunnelStatusReport,
)
from .process import TunnelProcess, find_binary
from .registry import Instance, InstanceRegistry

__all__ = [
    # Models
    "Tunnel",
    "TunnelDefinition",
    "TunnelStatus",
    "TunnelStats",
    "HealthStatus",
    "HealthCheckConfig",
    "Environment",
    "Service",
    "StartResult",
    "TunnelStatusReport",
    "BulkResult",
    # Config
    "ConfigRenderer",
    "IngressRule",
    "RenderedConfig",
    "build_ingress_rules",
    # Events
    "SupervisorEvent",
    "ProcessExited",
    "HealthChecked",
    "RestartRequested",
    # Processes
    "TunnelProcess",
    "find_binary",
    "Instance",
    "InstanceRegistry",
]
