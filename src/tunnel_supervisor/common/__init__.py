"""Common utilities and shared functionality."""

from .exceptions import (
    AlreadyRunningError,
    BinaryNotFoundError,
    ConfigurationError,
    ExternalServiceError,
    NotFoundError,
    ProcessError,
    SupervisorError,
    ValidationError,
)
from .logging import get_logger, get_tunnel_logger, setup_logging
from .process import is_process_alive, process_create_time, terminate_pid
from .utils import (
    MAX_PORT,
    MIN_PORT,
    generate_tunnel_id,
    mask_sensitive_data,
    sanitize_log_data,
    validate_hostname,
    validate_port,
)

__all__ = [
    # Exceptions
    "SupervisorError",
    "ValidationError",
    "NotFoundError",
    "AlreadyRunningError",
    "ProcessError",
    "BinaryNotFoundError",
    "ExternalServiceError",
    "ConfigurationError",
    # Logging
    "get_logger",
    "get_tunnel_logger",
    "setup_logging",
    # Host processes
    "is_process_alive",
    "process_create_time",
    "terminate_pid",
    # Utils
    "validate_port",
    "validate_hostname",
    "generate_tunnel_id",
    "mask_sensitive_data",
    "sanitize_log_data",
    "MIN_PORT",
    "MAX_PORT",
]
