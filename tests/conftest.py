"""Shared pytest fixtures for tunnel supervisor tests."""

import asyncio
from collections.abc import Callable
from typing import Any

import pytest
import pytest_asyncio

from tunnel_supervisor.common.exceptions import ExternalServiceError
from tunnel_supervisor.config import SupervisorSettings
from tunnel_supervisor.integrations.notifier import NotificationEvent
from tunnel_supervisor.integrations.provider import ProvisionedTunnel
from tunnel_supervisor.integrations.store import TunnelStore
from tunnel_supervisor.supervisor import TunnelSupervisor
from tunnel_supervisor.tunnels.models import Tunnel, TunnelDefinition


class FakeProcess:
    """Stand-in for ``asyncio.subprocess.Process`` that the test drives."""

    def __init__(self, pid: int) -> None:
        self.pid = pid
        self.returncode: int | None = None
        self.stdout = asyncio.StreamReader()
        self.stderr = asyncio.StreamReader()
        self.terminate_calls = 0
        self.kill_calls = 0
        self._exited = asyncio.Event()

    def emit(self, stream: str, line: str) -> None:
        getattr(self, stream).feed_data(line.encode() + b"\n")

    def exit(self, returncode: int = 0) -> None:
        if self.returncode is not None:
            return
        self.returncode = returncode
        self.stdout.feed_eof()
        self.stderr.feed_eof()
        self._exited.set()

    def terminate(self) -> None:
        self.terminate_calls += 1
        self.exit(-15)

    def kill(self) -> None:
        self.kill_calls += 1
        self.exit(-9)

    async def wait(self) -> int:
        await self._exited.wait()
        assert self.returncode is not None
        return self.returncode


class FakeSpawner:
    """Replacement for ``asyncio.create_subprocess_exec`` returning FakeProcess objects."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, ...]] = []
        self.processes: list[FakeProcess] = []
        self.error: Exception | None = None
        self._next_pid = 40000

    async def __call__(self, *args: str, **kwargs: Any) -> FakeProcess:
        self.calls.append(args)
        if self.error is not None:
            raise self.error
        self._next_pid += 1
        process = FakeProcess(self._next_pid)
        self.processes.append(process)
        return process

    @property
    def last(self) -> FakeProcess:
        return self.processes[-1]


class FakeProvider:
    """In-memory provider recording every call."""

    def __init__(self) -> None:
        self.provisioned: list[str] = []
        self.deprovisioned: list[str] = []
        self.routes: list[tuple[str, str, str]] = []
        self.deleted_routes: list[tuple[str, str]] = []
        self.failing: set[str] = set()

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.failing:
            raise ExternalServiceError(f"{operation} failed: provider unavailable")

    async def provision(self, name: str) -> ProvisionedTunnel:
        self._maybe_fail("provision")
        self.provisioned.append(name)
        return ProvisionedTunnel(
            remote_id=f"remote-{len(self.provisioned)}",
            secret="c2VjcmV0LXNlY3JldC1zZWNyZXQ=",
            account_id="account-1",
        )

    async def deprovision(self, remote_id: str) -> None:
        self._maybe_fail("deprovision")
        self.deprovisioned.append(remote_id)

    async def create_route(self, zone_id: str, remote_id: str, hostname: str) -> None:
        self._maybe_fail("create_route")
        self.routes.append((zone_id, remote_id, hostname))

    async def delete_route(self, zone_id: str, hostname: str) -> int:
        self._maybe_fail("delete_route")
        self.deleted_routes.append((zone_id, hostname))
        return 1


class RecordingNotifier:
    def __init__(self) -> None:
        self.sent: list[tuple[NotificationEvent, str]] = []

    async def notify(self, event: NotificationEvent, tunnel: Tunnel) -> None:
        self.sent.append((event, tunnel.id))

    def count(self, event: NotificationEvent) -> int:
        return sum(1 for sent, _ in self.sent if sent == event)


class FakeHost:
    """Pid table standing in for psutil lookups."""

    def __init__(self) -> None:
        self.alive: set[int] = set()
        self.terminated: list[int] = []

    def is_process_alive(self, pid: int | None, fingerprint: float | None = None) -> bool:
        return pid in self.alive

    def process_create_time(self, pid: int) -> float:
        return 1000.0

    def terminate_pid(self, pid: int, timeout: float = 5.0) -> None:
        self.terminated.append(pid)
        self.alive.discard(pid)


async def _wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("Condition not met in time")
        await asyncio.sleep(0.01)


@pytest.fixture
def wait_until():
    """Poll a predicate until it holds, failing after a timeout."""
    return _wait_until


@pytest.fixture
def fake_binary(tmp_path):
    """Create an executable placeholder for the cloudflared binary."""
    binary_path = tmp_path / "bin" / "cloudflared"
    binary_path.parent.mkdir()
    binary_path.touch(mode=0o755)
    return binary_path


@pytest.fixture
def settings(tmp_path, fake_binary):
    return SupervisorSettings(
        data_dir=tmp_path / "data",
        config_dir=tmp_path / "configs",
        cloudflared_path=str(fake_binary),
        restart_grace_period=0.0,
        stop_timeout=1.0,
        probe_timeout=1.0,
    )


@pytest.fixture
def spawner(monkeypatch):
    """Patch subprocess creation with FakeSpawner."""
    fake = FakeSpawner()
    monkeypatch.setattr("asyncio.create_subprocess_exec", fake)
    return fake


@pytest.fixture
def host(monkeypatch):
    """Patch the supervisor's pid inspection with FakeHost."""
    fake = FakeHost()
    monkeypatch.setattr("tunnel_supervisor.supervisor.is_process_alive", fake.is_process_alive)
    monkeypatch.setattr(
        "tunnel_supervisor.supervisor.process_create_time", fake.process_create_time
    )
    monkeypatch.setattr("tunnel_supervisor.supervisor.terminate_pid", fake.terminate_pid)
    return fake


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def store(settings):
    return TunnelStore(settings.tunnels_file)


@pytest.fixture
def definition() -> Callable[..., TunnelDefinition]:
    """Factory for tunnel definitions with overridable fields."""

    def make(**overrides: Any) -> TunnelDefinition:
        fields: dict[str, Any] = {
            "name": "api",
            "zone_id": "zone-1",
            "hostname": "api.example.com",
            "port": 8080,
        }
        fields.update(overrides)
        return TunnelDefinition(**fields)

    return make


@pytest_asyncio.fixture
async def supervisor(settings, store, provider, notifier, spawner, host):
    """Supervisor wired to fakes, shut down after the test."""
    sup = TunnelSupervisor(settings=settings, store=store, provider=provider, notifier=notifier)
    await sup.initialize()
    yield sup
    await sup.shutdown()
