"""Utility functions for the tunnel supervisor."""

import random
import re
import string
import time
from typing import Any

from .exceptions import ValidationError

# Port range constants
MIN_PORT = 1
MAX_PORT = 65535

MAX_LABEL_LENGTH = 63
_LABEL_PATTERN = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?$")

_ID_ALPHABET = string.ascii_lowercase + string.digits


def validate_port(port: int, port_name: str = "Port") -> None:
    """Validate port number range.

    Args:
        port: Port number to validate
        port_name: Name of the port for error messages

    Raises:
        ValidationError: If port is not in valid range (1-65535)
    """
    if isinstance(port, bool) or not isinstance(port, int) or not (MIN_PORT <= port <= MAX_PORT):
        raise ValidationError(f"{port_name} must be between {MIN_PORT} and {MAX_PORT}")


def validate_hostname(hostname: str) -> str:
    """Validate that a hostname is a fully-qualified domain name.

    The hostname must contain at least one dot and every label must be 1-63
    alphanumeric or hyphen characters without a leading or trailing hyphen.

    Args:
        hostname: Hostname such as ``app.example.com``

    Returns:
        The hostname unchanged

    Raises:
        ValidationError: If the hostname is not a well-formed FQDN
    """
    if not isinstance(hostname, str) or not hostname:
        raise ValidationError("Hostname is required (e.g., app.example.com)")

    if "." not in hostname:
        raise ValidationError(
            "Hostname must be a full domain (e.g., app.example.com), not just a subdomain"
        )

    for label in hostname.split("."):
        if not label or len(label) > MAX_LABEL_LENGTH or not _LABEL_PATTERN.match(label):
            raise ValidationError(
                f"Invalid hostname format '{hostname}'. Must be a valid domain (e.g., app.example.com)"
            )

    return hostname


def generate_tunnel_id() -> str:
    """Generate a unique tunnel id of the form ``tunnel_<ms>_<9 chars>``."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"tunnel_{int(time.time() * 1000)}_{suffix}"


def mask_sensitive_data(
    value: str | None, mask_char: str = "*", show_chars: int = 4
) -> str:
    """Mask sensitive data for logging while preserving some characters for debugging.

    Args:
        value: Sensitive string to mask (e.g., tunnel secret, API token)
        mask_char: Character to use for masking
        show_chars: Number of characters to show at the end

    Returns:
        Masked string safe for logging
    """
    if not value:
        return "<None>"

    if len(value) <= show_chars:
        return mask_char * len(value)

    masked_length = len(value) - show_chars
    return mask_char * masked_length + value[-show_chars:]


SENSITIVE_FIELDS = frozenset(
    {
        "token",
        "password",
        "secret",
        "api_key",
        "auth_key",
        "authorization",
    }
)


def sanitize_log_data(data: dict[str, Any]) -> dict[str, Any]:
    """Sanitize dictionary data for safe logging by masking sensitive fields.

    Args:
        data: Dictionary potentially containing sensitive data

    Returns:
        Sanitized dictionary safe for logging
    """
    sanitized = {}
    for key, value in data.items():
        if any(field in key.lower() for field in SENSITIVE_FIELDS):
            sanitized[key] = mask_sensitive_data(str(value) if value else None)
        else:
            sanitized[key] = value

    return sanitized
