"""Async process handle for a single tunnel binary invocation."""

import asyncio
import os
import shutil
from collections.abc import Callable
from pathlib import Path

from ..common.exceptions import BinaryNotFoundError, ProcessError
from ..common.logging import get_tunnel_logger

LineCallback = Callable[[str, str], None]


def find_binary(binary: str) -> str:
    """Resolve the tunnel binary to an executable path.

    Args:
        binary: Bare command name (looked up on PATH) or a path

    Returns:
        Path to the executable

    Raises:
        BinaryNotFoundError: If the binary is missing or not executable
    """
    if os.sep in binary or (os.altsep and os.altsep in binary):
        path = Path(binary)
        if not path.is_file():
            raise BinaryNotFoundError(f"Binary not found: {binary}")
        if not os.access(path, os.X_OK):
            raise BinaryNotFoundError(f"Binary is not executable: {binary}")
        return str(path)

    found = shutil.which(binary)
    if found is None:
        raise BinaryNotFoundError(
            f"Tunnel binary '{binary}' not found in system PATH. "
            "Install cloudflared and ensure it is available in your PATH."
        )
    return found


class TunnelProcess:
    """Spawns ``<binary> tunnel --config <path> run <remote_id>`` and pumps its output.

    Every line the process writes is handed to ``on_line`` together with the
    name of the stream it came from (``"stdout"`` or ``"stderr"``).
    """

    def __init__(
        self,
        tunnel_id: str,
        binary_path: str,
        config_path: Path,
        remote_id: str,
        on_line: LineCallback | None = None,
    ) -> None:
        self.tunnel_id = tunnel_id
        self.binary_path = binary_path
        self.config_path = Path(config_path)
        self.remote_id = remote_id
        self._on_line = on_line
        self._process: asyncio.subprocess.Process | None = None
        self._pumps: list[asyncio.Task[None]] = []
        self._log = get_tunnel_logger(__name__, tunnel_id)

    @property
    def command(self) -> list[str]:
        return [
            self.binary_path,
            "tunnel",
            "--config",
            str(self.config_path),
            "run",
            self.remote_id,
        ]

    @property
    def pid(self) -> int | None:
        return self._process.pid if self._process else None

    @property
    def returncode(self) -> int | None:
        return self._process.returncode if self._process else None

    @property
    def output_tasks(self) -> list[asyncio.Task[None]]:
        """Tasks reading the process's stdout and stderr."""
        return list(self._pumps)

    def is_running(self) -> bool:
        return self._process is not None and self._process.returncode is None

    async def start(self) -> int:
        """Spawn the process.

        Returns:
            Pid of the new process

        Raises:
            ProcessError: If the process is already started or cannot be spawned
        """
        if self._process is not None:
            raise ProcessError(f"Process for tunnel {self.tunnel_id} already started")

        self._log.info("Starting tunnel process", config_path=str(self.config_path))
        try:
            self._process = await asyncio.create_subprocess_exec(
                *self.command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            self._log.error("Failed to start tunnel process", error=str(e))
            raise ProcessError(f"Failed to start tunnel: {e}") from e

        self._pumps = [
            asyncio.create_task(self._pump(self._process.stdout, "stdout")),
            asyncio.create_task(self._pump(self._process.stderr, "stderr")),
        ]
        self._log.info("Tunnel process started", pid=self._process.pid)
        return self._process.pid

    async def _pump(self, stream: asyncio.StreamReader | None, stream_name: str) -> None:
        if stream is None:
            return
        while True:
            try:
                raw = await stream.readline()
            except ValueError as e:
                # A single line longer than the reader's buffer limit
                self._log.warning("Dropped oversized output line", stream=stream_name, error=str(e))
                continue
            if not raw:
                break

            line = raw.decode(errors="replace").strip()
            if line and self._on_line is not None:
                self._on_line(stream_name, line)

    async def wait(self) -> int | None:
        """Wait for the process to exit and its output to drain.

        Returns:
            The exit code
        """
        if self._process is None:
            return None

        returncode = await self._process.wait()
        await asyncio.gather(*self._pumps, return_exceptions=True)
        return returncode

    async def stop(self, timeout: float = 5.0) -> None:
        """Terminate the process, force killing it after ``timeout`` seconds."""
        if not self.is_running() or self._process is None:
            return

        self._log.info("Stopping tunnel process", pid=self._process.pid)
        try:
            self._process.terminate()
        except ProcessLookupError:
            return

        try:
            await asyncio.wait_for(self._process.wait(), timeout=timeout)
        except TimeoutError:
            self._log.warning("Process did not terminate gracefully, force killing")
            try:
                self._process.kill()
            except ProcessLookupError:
                return
            await self._process.wait()
