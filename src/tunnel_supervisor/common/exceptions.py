"""Custom exceptions for the tunnel supervisor."""


class SupervisorError(Exception):
    """Base exception for all tunnel supervisor errors."""
    pass


class ValidationError(SupervisorError, ValueError):
    """Raised when user input is rejected before any side effect."""
    pass


class NotFoundError(SupervisorError):
    """Raised when a tunnel id is unknown."""
    pass


class AlreadyRunningError(SupervisorError):
    """Raised when starting a tunnel that already has a live process."""
    pass


class ProcessError(SupervisorError):
    """Raised when spawning or terminating a tunnel process fails."""
    pass


class BinaryNotFoundError(ProcessError):
    """Raised when the tunnel binary is not found or not executable."""
    pass


class ExternalServiceError(SupervisorError):
    """Raised when the tunnel provider or another remote service fails."""
    pass


class ConfigurationError(SupervisorError):
    """Raised when configuration is invalid."""
    pass
