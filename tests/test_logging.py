"""Test logging configuration."""

import logging
from pathlib import Path

import structlog
from structlog.testing import LogCapture

from tunnel_supervisor.common.logging import (
    get_logger,
    get_tunnel_logger,
    redact_secrets,
    setup_logging,
)


class TestLogging:
    """Test logging functionality."""

    def setup_method(self) -> None:
        """Reset logging configuration before each test."""
        structlog.reset_defaults()
        root_logger = logging.getLogger()
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

    def test_setup_logging_with_level(self) -> None:
        setup_logging(level="DEBUG")
        assert logging.getLogger().level == logging.DEBUG

    def test_setup_logging_accepts_lower_case_level(self) -> None:
        setup_logging(level="warning")
        assert logging.getLogger().level == logging.WARNING

    def test_setup_logging_replaces_handlers(self) -> None:
        setup_logging()
        setup_logging()
        assert len(logging.getLogger().handlers) == 1

    def test_setup_logging_with_file(self, tmp_path: Path) -> None:
        log_file = tmp_path / "supervisor.log"
        setup_logging(log_file=str(log_file))

        logging.getLogger("test_file").info("test message")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "test message" in log_file.read_text()

    def test_tunnel_logger_binds_context(self) -> None:
        cap = LogCapture()
        structlog.configure(processors=[cap])

        get_tunnel_logger("test", "tunnel_1", name="api").info("Tunnel started", pid=42)

        assert cap.entries[0]["event"] == "Tunnel started"
        assert cap.entries[0]["tunnel_id"] == "tunnel_1"
        assert cap.entries[0]["name"] == "api"
        assert cap.entries[0]["pid"] == 42

    def test_secrets_are_redacted(self) -> None:
        cap = LogCapture()
        structlog.configure(processors=[redact_secrets, cap])

        get_logger("test").info("Configured provider", api_token="abcdef123456", account="acct")

        assert cap.entries[0]["api_token"] == "********3456"
        assert cap.entries[0]["account"] == "acct"

    def test_redact_secrets_leaves_plain_fields(self) -> None:
        event = {"event": "Started", "tunnel_id": "tunnel_1"}
        assert redact_secrets(None, "info", event) == event
