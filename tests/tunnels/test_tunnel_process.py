"""Tests for the tunnel process handle."""

import asyncio
from unittest.mock import patch

import pytest

from tunnel_supervisor.common.exceptions import BinaryNotFoundError, ProcessError
from tunnel_supervisor.tunnels.process import TunnelProcess, find_binary


class TestFindBinary:
    """Test binary resolution."""

    def test_explicit_path(self, fake_binary):
        assert find_binary(str(fake_binary)) == str(fake_binary)

    def test_missing_path(self, tmp_path):
        with pytest.raises(BinaryNotFoundError, match="Binary not found"):
            find_binary(str(tmp_path / "cloudflared"))

    def test_non_executable_path(self, tmp_path):
        binary = tmp_path / "cloudflared"
        binary.touch(mode=0o644)

        with pytest.raises(BinaryNotFoundError, match="not executable"):
            find_binary(str(binary))

    def test_directory_is_rejected(self, tmp_path):
        with pytest.raises(BinaryNotFoundError):
            find_binary(str(tmp_path))

    def test_looks_up_path(self):
        with patch("shutil.which", return_value="/usr/local/bin/cloudflared") as which:
            assert find_binary("cloudflared") == "/usr/local/bin/cloudflared"
        which.assert_called_once_with("cloudflared")

    def test_not_on_path(self):
        with patch("shutil.which", return_value=None):
            with pytest.raises(BinaryNotFoundError, match="not found in system PATH"):
                find_binary("cloudflared")


class TestTunnelProcess:
    """Test spawning, output pumping and termination."""

    def make_process(self, tmp_path, lines=None):
        return TunnelProcess(
            "tunnel_1",
            "/usr/bin/cloudflared",
            tmp_path / "tunnel_1.yml",
            "remote-1",
            on_line=(lambda stream, line: lines.append((stream, line))) if lines is not None else None,
        )

    def test_command(self, tmp_path):
        process = self.make_process(tmp_path)

        assert process.command == [
            "/usr/bin/cloudflared",
            "tunnel",
            "--config",
            str(tmp_path / "tunnel_1.yml"),
            "run",
            "remote-1",
        ]
        assert process.pid is None
        assert not process.is_running()

    @pytest.mark.asyncio
    async def test_start_spawns_with_pipes(self, tmp_path, spawner):
        process = self.make_process(tmp_path)

        pid = await process.start()

        assert pid == spawner.last.pid
        assert process.is_running()
        assert spawner.calls == [tuple(process.command)]

    @pytest.mark.asyncio
    async def test_start_passes_pipes(self, tmp_path):
        process = self.make_process(tmp_path)

        with patch("asyncio.create_subprocess_exec") as mock_create:
            mock_create.return_value.pid = 321
            mock_create.return_value.stdout = None
            mock_create.return_value.stderr = None
            await process.start()

        mock_create.assert_called_once_with(
            *process.command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )

    @pytest.mark.asyncio
    async def test_start_failure(self, tmp_path, spawner):
        spawner.error = FileNotFoundError("No such file or directory")
        process = self.make_process(tmp_path)

        with pytest.raises(ProcessError, match="Failed to start tunnel"):
            await process.start()

        assert process.pid is None

    @pytest.mark.asyncio
    async def test_cannot_start_twice(self, tmp_path, spawner):
        process = self.make_process(tmp_path)
        await process.start()

        with pytest.raises(ProcessError, match="already started"):
            await process.start()

    @pytest.mark.asyncio
    async def test_output_is_pumped_to_callback(self, tmp_path, spawner):
        lines: list[tuple[str, str]] = []
        process = self.make_process(tmp_path, lines)
        await process.start()

        spawner.last.emit("stdout", "hello")
        spawner.last.emit("stderr", "  INF connected  ")
        spawner.last.emit("stderr", "")
        spawner.last.exit(0)

        assert await process.wait() == 0
        assert sorted(lines) == [("stderr", "INF connected"), ("stdout", "hello")]

    @pytest.mark.asyncio
    async def test_oversized_line_does_not_stop_pumping(self, tmp_path, spawner):
        lines: list[tuple[str, str]] = []
        process = self.make_process(tmp_path, lines)
        await process.start()

        spawner.last.emit("stderr", "x" * 100_000)
        for i in range(5):
            spawner.last.emit("stderr", f"line {i}")
        spawner.last.exit(0)

        assert await process.wait() == 0
        assert lines == [("stderr", f"line {i}") for i in range(5)]

    @pytest.mark.asyncio
    async def test_stop_terminates(self, tmp_path, spawner):
        process = self.make_process(tmp_path)
        await process.start()

        await process.stop(timeout=1.0)

        assert spawner.last.terminate_calls == 1
        assert spawner.last.kill_calls == 0
        assert not process.is_running()
        assert process.returncode == -15

    @pytest.mark.asyncio
    async def test_stop_kills_after_timeout(self, tmp_path, spawner):
        process = self.make_process(tmp_path)
        await process.start()
        fake = spawner.last
        fake.terminate = lambda: None  # ignores SIGTERM

        await process.stop(timeout=0.05)

        assert fake.kill_calls == 1
        assert process.returncode == -9

    @pytest.mark.asyncio
    async def test_stop_when_not_started(self, tmp_path):
        await self.make_process(tmp_path).stop()

    @pytest.mark.asyncio
    async def test_wait_when_not_started(self, tmp_path):
        assert await self.make_process(tmp_path).wait() is None
