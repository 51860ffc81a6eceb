"""Rendering of on-disk artifacts for the tunnel binary.

Each tunnel gets two files in the config directory, keyed by tunnel id:

* ``<id>.yml`` - the ingress document listing routing rules
* ``<id>-credentials.json`` - the credential bundle the binary authenticates with

Ingress rules are matched top to bottom by the tunnel binary, and the document
always ends with a catch-all ``http_status:404`` rule so that hostnames and
paths that are not configured are refused instead of reaching the first
service.
"""

import json
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from ..common.logging import get_logger
from ..common.utils import mask_sensitive_data
from .models import Tunnel

logger = get_logger(__name__)

NOT_FOUND_SERVICE = "http_status:404"


@dataclass(frozen=True)
class IngressRule:
    """One routing rule of the ingress document."""

    service: str
    hostname: str | None = None
    path: str | None = None


@dataclass(frozen=True)
class RenderedConfig:
    """Paths of the artifacts written for a tunnel."""

    config_path: Path
    credentials_path: Path


def local_service(port: int) -> str:
    return f"http://localhost:{port}"


def build_ingress_rules(tunnel: Tunnel) -> list[IngressRule]:
    """Build the ordered ingress rules for a tunnel.

    Args:
        tunnel: Tunnel to route

    Returns:
        One rule per service (or a single primary-hostname rule when there are
        no services), terminated by the not-found fallback
    """
    rules: list[IngressRule] = []

    if tunnel.services:
        for service in tunnel.services:
            if service.path:
                rules.append(
                    IngressRule(
                        hostname=tunnel.hostname,
                        path=service.path,
                        service=local_service(service.port),
                    )
                )
            else:
                rules.append(
                    IngressRule(hostname=service.hostname, service=local_service(service.port))
                )
    else:
        rules.append(IngressRule(hostname=tunnel.hostname, service=local_service(tunnel.port)))

    rules.append(IngressRule(service=NOT_FOUND_SERVICE))
    return rules


def _yaml_scalar(value: str) -> str:
    # JSON strings are valid double-quoted YAML scalars
    return json.dumps(value)


class IngressDocumentBuilder:
    """Builder for the ingress YAML document."""

    def __init__(self) -> None:
        self._remote_id: str | None = None
        self._credentials_file: str | None = None
        self._rules: list[IngressRule] = []

    def set_tunnel(self, remote_id: str, credentials_file: Path) -> "IngressDocumentBuilder":
        """Set the tunnel identity and credentials location.

        Raises:
            ValueError: If the remote id is empty
        """
        if not remote_id or not remote_id.strip():
            raise ValueError("Remote tunnel id cannot be empty")

        self._remote_id = remote_id.strip()
        self._credentials_file = str(credentials_file)
        return self

    def add_rule(self, rule: IngressRule) -> "IngressDocumentBuilder":
        self._rules.append(rule)
        return self

    def add_rules(self, rules: list[IngressRule]) -> "IngressDocumentBuilder":
        for rule in rules:
            self.add_rule(rule)
        return self

    def build(self) -> str:
        """Render the document text.

        Raises:
            ValueError: If the tunnel identity is missing or the last rule is
                not a catch-all
        """
        if not self._remote_id or not self._credentials_file:
            raise ValueError("Tunnel not set. Call set_tunnel() first.")

        if not self._rules or self._rules[-1].hostname or self._rules[-1].path:
            raise ValueError("Ingress rules must end with a catch-all rule")

        lines = [
            f"tunnel: {self._remote_id}",
            f"credentials-file: {_yaml_scalar(self._credentials_file)}",
            "",
            "ingress:",
        ]
        for rule in self._rules:
            entries = []
            if rule.hostname:
                entries.append(f"hostname: {_yaml_scalar(rule.hostname)}")
            if rule.path:
                entries.append(f"path: {_yaml_scalar(rule.path)}")
            entries.append(f"service: {rule.service}")

            lines.append(f"  - {entries[0]}")
            lines.extend(f"    {entry}" for entry in entries[1:])

        return "\n".join(lines) + "\n"


def _atomic_write(path: Path, content: str, mode: int | None = None) -> None:
    fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w") as f:
            f.write(content)
        if mode is not None:
            os.chmod(temp_path, mode)
        os.replace(temp_path, path)
    except Exception:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise


class ConfigRenderer:
    """Writes and removes the per-tunnel artifacts in ``config_dir``."""

    def __init__(self, config_dir: Path, account_id: str | None = None) -> None:
        self.config_dir = Path(config_dir)
        self.account_id = account_id

    def config_path(self, tunnel_id: str) -> Path:
        return self.config_dir / f"{tunnel_id}.yml"

    def credentials_path(self, tunnel_id: str) -> Path:
        return self.config_dir / f"{tunnel_id}-credentials.json"

    def is_rendered(self, tunnel_id: str) -> bool:
        return self.config_path(tunnel_id).exists() and self.credentials_path(tunnel_id).exists()

    def render(self, tunnel: Tunnel) -> RenderedConfig:
        """Write both artifacts for a tunnel, overwriting earlier renders.

        Args:
            tunnel: Tunnel to render

        Returns:
            Paths of the written files
        """
        self.config_dir.mkdir(parents=True, exist_ok=True)
        config_path = self.config_path(tunnel.id)
        credentials_path = self.credentials_path(tunnel.id)

        document = (
            IngressDocumentBuilder()
            .set_tunnel(tunnel.remote_id, credentials_path.resolve())
            .add_rules(build_ingress_rules(tunnel))
            .build()
        )
        _atomic_write(config_path, document)

        credentials = {
            "AccountTag": tunnel.account_id or self.account_id,
            "TunnelSecret": tunnel.secret,
            "TunnelID": tunnel.remote_id,
        }
        _atomic_write(credentials_path, json.dumps(credentials, indent=2), mode=0o600)

        logger.info(
            "Rendered tunnel config",
            tunnel_id=tunnel.id,
            path=str(config_path),
            rules=len(build_ingress_rules(tunnel)),
            credentials=mask_sensitive_data(tunnel.secret, show_chars=8),
        )
        return RenderedConfig(config_path=config_path, credentials_path=credentials_path)

    def remove(self, tunnel_id: str) -> None:
        """Delete both artifacts; missing files are ignored."""
        for path in (self.config_path(tunnel_id), self.credentials_path(tunnel_id)):
            try:
                path.unlink()
                logger.info("Deleted config file", tunnel_id=tunnel_id, path=str(path))
            except FileNotFoundError:
                continue
