"""Tests for utility functions."""

import re

import pytest

from tunnel_supervisor.common.exceptions import ValidationError
from tunnel_supervisor.common.utils import (
    MAX_PORT,
    MIN_PORT,
    generate_tunnel_id,
    mask_sensitive_data,
    sanitize_log_data,
    validate_hostname,
    validate_port,
)


class TestValidatePort:
    """Test port validation function."""

    def test_valid_ports(self):
        validate_port(MIN_PORT, "Test port")
        validate_port(8080, "Local port")
        validate_port(MAX_PORT, "Max port")

    @pytest.mark.parametrize("port", [0, 65536, -1, "80", 80.5, True])
    def test_invalid_ports(self, port):
        with pytest.raises(ValidationError, match="Test port must be between 1 and 65535"):
            validate_port(port, "Test port")  # type: ignore[arg-type]

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            validate_port(0)


class TestValidateHostname:
    """Test hostname validation."""

    @pytest.mark.parametrize(
        "hostname",
        ["app.example.com", "a.b.example.com", "my-app.example.io", "x1.example.com"],
    )
    def test_valid_hostnames(self, hostname):
        assert validate_hostname(hostname) == hostname

    @pytest.mark.parametrize(
        "hostname",
        [
            "app",
            "-bad.example.com",
            "bad-.example.com",
            "under_score.example.com",
            "a..example.com",
            ".example.com",
            f"{'a' * 64}.example.com",
            "",
        ],
    )
    def test_invalid_hostnames(self, hostname):
        with pytest.raises(ValidationError):
            validate_hostname(hostname)

    def test_subdomain_only_message(self):
        with pytest.raises(ValidationError, match="not just a subdomain"):
            validate_hostname("app")


class TestGenerateTunnelId:
    """Test tunnel id generation."""

    def test_format(self):
        assert re.fullmatch(r"tunnel_\d{13}_[a-z0-9]{9}", generate_tunnel_id())

    def test_unique(self):
        assert len({generate_tunnel_id() for _ in range(100)}) == 100


class TestMaskSensitiveData:
    """Test sensitive data masking."""

    def test_mask_long_value(self):
        assert mask_sensitive_data("secret123token") == "**********oken"

    def test_mask_short_value(self):
        assert mask_sensitive_data("abc") == "***"

    def test_mask_custom_settings(self):
        assert mask_sensitive_data("abcdefgh", mask_char="#", show_chars=2) == "######gh"

    def test_mask_empty(self):
        assert mask_sensitive_data(None) == "<None>"
        assert mask_sensitive_data("") == "<None>"


class TestSanitizeLogData:
    """Test log data sanitization."""

    def test_masks_sensitive_keys(self):
        data = {
            "tunnel_id": "tunnel_1",
            "api_token": "abcdef123456",
            "TunnelSecret": "c2VjcmV0c2VjcmV0",
            "Authorization": "Bearer xyz123456",
        }

        sanitized = sanitize_log_data(data)

        assert sanitized["tunnel_id"] == "tunnel_1"
        assert sanitized["api_token"] == "********3456"
        assert sanitized["TunnelSecret"].endswith("cmV0")
        assert "xyz" not in sanitized["Authorization"]

    def test_does_not_modify_input(self):
        data = {"secret": "value12345"}

        sanitize_log_data(data)

        assert data == {"secret": "value12345"}
