"""Supervisor settings loaded from the environment."""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .common.logging import setup_logging

DEFAULT_API_BASE_URL = "https://api.cloudflare.com/client/v4"


class SupervisorSettings(BaseSettings):
    """Settings for the tunnel supervisor.

    Every field can be overridden with a ``TUNNEL_SUPERVISOR_`` prefixed
    environment variable, e.g. ``TUNNEL_SUPERVISOR_DATA_DIR``.
    """

    model_config = SettingsConfigDict(
        env_prefix="TUNNEL_SUPERVISOR_",
        str_strip_whitespace=True,
        extra="ignore",
    )

    # Storage
    data_dir: Path = Field(default=Path("data"), description="Persisted tunnel records")
    config_dir: Path = Field(
        default=Path("tunnel-configs"), description="Rendered ingress and credential files"
    )

    # Tunnel binary
    cloudflared_path: str = Field(default="cloudflared", description="Binary name or path")

    # Provider credentials
    account_id: str | None = None
    api_token: str | None = Field(default=None, repr=False)
    api_email: str | None = None
    api_key: str | None = Field(default=None, repr=False)
    api_base_url: str = DEFAULT_API_BASE_URL

    # Notifications
    discord_webhook: str | None = Field(default=None, repr=False)

    # Lifecycle timing
    restart_grace_period: float = Field(default=1.0, ge=0.0, le=30.0)
    stop_timeout: float = Field(default=5.0, gt=0.0, le=60.0)
    probe_timeout: float = Field(default=5.0, gt=0.0, le=60.0)
    log_capacity: int = Field(default=100, ge=1, le=10000)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_json: bool = False

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept lower-case level names."""
        return v.upper() if isinstance(v, str) else v

    def configure_logging(self, log_file: str | None = None) -> None:
        """Apply ``log_level`` and ``log_json`` to the process-wide logging setup."""
        setup_logging(level=self.log_level, json_format=self.log_json, log_file=log_file)

    @property
    def tunnels_file(self) -> Path:
        """Path of the JSON file holding tunnel records."""
        return self.data_dir / "tunnels.json"
