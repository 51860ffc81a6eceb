"""Host checks for the tunnel binary."""

import asyncio
import platform

from pydantic import BaseModel

from .common.exceptions import BinaryNotFoundError
from .common.logging import get_logger
from .tunnels.process import find_binary

logger = get_logger(__name__)

VERSION_TIMEOUT = 10.0


class SystemStatus(BaseModel):
    """Whether the tunnel binary is usable on this host."""

    installed: bool
    version: str | None = None
    path: str | None = None
    os: str
    arch: str


def get_system_info() -> dict[str, str]:
    """Operating system and architecture in the names cloudflared releases use."""
    system = platform.system().lower()
    machine = platform.machine().lower()

    arch_mapping = {
        "x86_64": "amd64",
        "amd64": "amd64",
        "i386": "386",
        "i686": "386",
        "armv7l": "arm",
        "aarch64": "arm64",
        "arm64": "arm64",
    }

    return {"os": system or "linux", "arch": arch_mapping.get(machine, machine or "amd64")}


async def check_requirements(binary: str = "cloudflared") -> SystemStatus:
    """Look up the tunnel binary and ask it for its version.

    A binary that is found but fails to report a version counts as not
    installed.
    """
    info = get_system_info()
    try:
        path = find_binary(binary)
    except BinaryNotFoundError as e:
        logger.warning("Tunnel binary not found", binary=binary, error=str(e))
        return SystemStatus(installed=False, **info)

    try:
        process = await asyncio.create_subprocess_exec(
            path,
            "--version",
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )
    except OSError as e:
        logger.warning("Failed to query tunnel binary version", path=path, error=str(e))
        return SystemStatus(installed=False, path=path, **info)

    try:
        stdout, _ = await asyncio.wait_for(process.communicate(), timeout=VERSION_TIMEOUT)
    except TimeoutError:
        logger.warning("Tunnel binary version check timed out", path=path, timeout=VERSION_TIMEOUT)
        try:
            process.kill()
        except ProcessLookupError:
            pass
        await process.wait()
        return SystemStatus(installed=False, path=path, **info)

    if process.returncode != 0:
        logger.warning("Tunnel binary version check failed", path=path, returncode=process.returncode)
        return SystemStatus(installed=False, path=path, **info)

    version = stdout.decode(errors="replace").strip()
    logger.info("Tunnel binary found", path=path, version=version)
    return SystemStatus(installed=True, version=version, path=path, **info)
