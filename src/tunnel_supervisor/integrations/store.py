"""JSON file persistence for tunnel records."""

import json
import os
import tempfile
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ..common.exceptions import NotFoundError, ValidationError
from ..common.logging import get_logger
from ..tunnels.models import Tunnel

logger = get_logger(__name__)

BACKUP_VERSION = "1.0"


class TunnelStore:
    """Keeps tunnel records in memory and mirrors every change to a JSON file.

    Writes merge at field level: ``update`` and ``update_stats`` replace only
    the fields they are given on the latest stored record, so a health-stats
    write never undoes a concurrent status write and vice versa.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._tunnels: dict[str, Tunnel] = {}
        self._loaded = False

    def load(self) -> list[Tunnel]:
        """Read all records from disk.

        A file that cannot be parsed is moved aside to ``<name>.corrupt`` and
        the store starts empty.
        """
        self._tunnels = {}
        self._loaded = True

        if not self.path.exists():
            return []

        try:
            raw = json.loads(self.path.read_text())
            tunnels = [Tunnel.model_validate(item) for item in raw]
        except (json.JSONDecodeError, TypeError, PydanticValidationError) as e:
            corrupt = self.path.with_suffix(self.path.suffix + ".corrupt")
            logger.error("Error loading tunnels", path=str(self.path), error=str(e), moved_to=str(corrupt))
            self.path.replace(corrupt)
            return []

        self._tunnels = {tunnel.id: tunnel for tunnel in tunnels}
        logger.info("Loaded tunnels", count=len(self._tunnels), path=str(self.path))
        return list(self._tunnels.values())

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.load()

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = [tunnel.model_dump(mode="json") for tunnel in self._tunnels.values()]

        fd, temp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".tunnels.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(payload, f, indent=2)
            os.replace(temp_path, self.path)
        except Exception:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise

    def list(self) -> list[Tunnel]:
        self._ensure_loaded()
        return list(self._tunnels.values())

    def get(self, tunnel_id: str) -> Tunnel | None:
        self._ensure_loaded()
        return self._tunnels.get(tunnel_id)

    def require(self, tunnel_id: str) -> Tunnel:
        """Get a tunnel or raise ``NotFoundError``."""
        tunnel = self.get(tunnel_id)
        if tunnel is None:
            raise NotFoundError(f"Tunnel '{tunnel_id}' not found")
        return tunnel

    def save(self, tunnel: Tunnel) -> Tunnel:
        """Insert or replace a whole record.

        A failed write leaves the in-memory records unchanged.
        """
        self._ensure_loaded()
        previous = self._tunnels.get(tunnel.id)
        self._tunnels[tunnel.id] = tunnel
        try:
            self._flush()
        except OSError:
            if previous is None:
                del self._tunnels[tunnel.id]
            else:
                self._tunnels[tunnel.id] = previous
            raise
        return tunnel

    def update(self, tunnel_id: str, **fields: Any) -> Tunnel:
        """Replace the given top-level fields of a stored record.

        Raises:
            NotFoundError: If the tunnel does not exist
        """
        current = self.require(tunnel_id)
        updated = current.model_copy(update=fields)
        self._tunnels[tunnel_id] = updated
        self._flush()
        return updated

    def update_stats(self, tunnel_id: str, **stats: Any) -> Tunnel:
        """Replace the given fields of a stored record's stats."""
        current = self.require(tunnel_id)
        updated = current.with_stats(**stats)
        self._tunnels[tunnel_id] = updated
        self._flush()
        return updated

    def remove(self, tunnel_id: str) -> bool:
        """Delete a record.

        Returns:
            True if a record was removed
        """
        self._ensure_loaded()
        if self._tunnels.pop(tunnel_id, None) is None:
            return False
        self._flush()
        return True

    def export_backup(self) -> dict[str, Any]:
        """Serialize every record for download."""
        return {
            "tunnels": [tunnel.model_dump(mode="json") for tunnel in self.list()],
            "export_date": datetime.now(UTC).isoformat(),
            "version": BACKUP_VERSION,
        }

    def import_backup(self, data: dict[str, Any]) -> int:
        """Upsert records from an exported backup.

        Imported records come back stopped: a pid from another host or an
        earlier boot means nothing here.

        Returns:
            Number of imported tunnels

        Raises:
            ValidationError: If the backup is malformed
        """
        items = data.get("tunnels")
        if not isinstance(items, list):
            raise ValidationError("Backup must contain a 'tunnels' list")

        try:
            tunnels = [Tunnel.model_validate(item).with_stopped() for item in items]
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid tunnel in backup: {e}") from e

        self._ensure_loaded()
        for tunnel in tunnels:
            self._tunnels[tunnel.id] = tunnel
        self._flush()

        logger.info("Imported tunnels from backup", count=len(tunnels))
        return len(tunnels)
