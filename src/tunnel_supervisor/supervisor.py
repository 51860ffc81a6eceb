"""Process lifecycle supervisor for cloudflared tunnels.

The supervisor is the only component that mutates tunnel state. Public
operations on one tunnel id are serialized by a per-id lock; operations on
different ids run concurrently.

Background work never calls back into the mutation paths. Process watchers
and health probes put events on the supervisor's queue, and the dispatcher
handles each event in its own task under the same per-id lock as the public
operations. Every event carries the pid of the instance it concerns, and an
event for a pid that is no longer current is dropped.

Tunnels outlive the supervisor: a process started by an earlier supervisor
run keeps going, and :meth:`TunnelSupervisor.reconcile` reattaches to it
through the persisted pid and its creation-time fingerprint.
"""

import asyncio
from collections.abc import Awaitable, Callable, Iterable, Mapping
from functools import partial
from types import TracebackType
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from .common.exceptions import (
    AlreadyRunningError,
    ConfigurationError,
    ExternalServiceError,
    ProcessError,
    SupervisorError,
    ValidationError,
)
from .common.logging import get_logger, get_tunnel_logger
from .common.process import is_process_alive, process_create_time, terminate_pid
from .common.utils import validate_hostname
from .config import SupervisorSettings
from .integrations.notifier import DiscordNotifier, NotificationEvent, Notifier
from .integrations.provider import CloudflareProvider, TunnelProvider
from .integrations.store import TunnelStore
from .monitoring.health import HealthProber
from .monitoring.logs import LogEntry, LogLevel, LogSink, classify_stderr_line
from .monitoring.metrics import MetricsRecorder
from .tunnels.config import ConfigRenderer
from .tunnels.events import HealthChecked, ProcessExited, RestartRequested, SupervisorEvent
from .tunnels.models import (
    IMMUTABLE_FIELDS,
    RUNTIME_FIELDS,
    BulkResult,
    Environment,
    HealthStatus,
    StartResult,
    Tunnel,
    TunnelDefinition,
    TunnelStatus,
    TunnelStatusReport,
    utcnow,
)
from .tunnels.process import TunnelProcess, find_binary
from .tunnels.registry import Instance, InstanceRegistry

logger = get_logger(__name__)


def _format_validation_error(error: PydanticValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "tunnel"
        parts.append(f"{location}: {item['msg']}")
    return "; ".join(parts)


def _check_hostnames(definition: TunnelDefinition) -> None:
    validate_hostname(definition.hostname)
    for service in definition.services:
        if service.hostname:
            validate_hostname(service.hostname)


class TunnelSupervisor:
    """Creates, runs and watches tunnels.

    Collaborators default to the ones described by ``settings`` and can be
    injected for testing.
    """

    def __init__(
        self,
        settings: SupervisorSettings | None = None,
        store: TunnelStore | None = None,
        provider: TunnelProvider | None = None,
        notifier: Notifier | None = None,
        renderer: ConfigRenderer | None = None,
    ) -> None:
        self.settings = settings or SupervisorSettings()
        self.store = store or TunnelStore(self.settings.tunnels_file)
        self._owns_provider = provider is None
        self.provider: TunnelProvider = provider or CloudflareProvider(
            account_id=self.settings.account_id,
            api_token=self.settings.api_token,
            api_email=self.settings.api_email,
            api_key=self.settings.api_key,
            base_url=self.settings.api_base_url,
        )
        self.notifier: Notifier = notifier or DiscordNotifier(self.settings.discord_webhook)
        self.renderer = renderer or ConfigRenderer(
            self.settings.config_dir, self.settings.account_id
        )

        self.registry = InstanceRegistry()
        self.logs = LogSink(self.settings.log_capacity)
        self.metrics = MetricsRecorder()
        self._events: asyncio.Queue[SupervisorEvent] = asyncio.Queue()
        self.prober = HealthProber(self._events, timeout=self.settings.probe_timeout)

        self._locks: dict[str, asyncio.Lock] = {}
        self._dispatcher: asyncio.Task[None] | None = None
        self._handlers: set[asyncio.Task[None]] = set()

    async def __aenter__(self) -> "TunnelSupervisor":
        await self.initialize()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.shutdown()

    # Lifecycle of the supervisor itself

    async def initialize(self) -> None:
        """Start event dispatching and reconcile persisted state."""
        self._ensure_dispatcher()
        await self.reconcile()

    async def shutdown(self, stop_tunnels: bool = False) -> None:
        """Stop background work.

        Tunnel processes keep running unless ``stop_tunnels`` is set; the
        next supervisor run reattaches to them during reconcile.
        """
        if stop_tunnels:
            await self.bulk_stop([instance.tunnel_id for instance in self.registry.list()])

        await self.prober.stop_all()

        tasks: list[asyncio.Task[Any]] = [
            instance.watcher for instance in self.registry.list() if instance.watcher is not None
        ]
        for instance in self.registry.list():
            tasks.extend(instance.process.output_tasks)
        tasks.extend(self._handlers)
        if self._dispatcher is not None:
            tasks.append(self._dispatcher)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

        self._dispatcher = None
        self._handlers.clear()

        if self._owns_provider and isinstance(self.provider, CloudflareProvider):
            await self.provider.aclose()
        logger.info("Supervisor shut down", stopped_tunnels=stop_tunnels)

    async def reconcile(self) -> None:
        """Bring persisted state in line with the processes actually running.

        A persisted pid that is still alive (and still the same process) marks
        the tunnel running; anything else marks it stopped. Afterwards every
        ``auto_startup`` tunnel that is not running is started. Failures are
        logged and never abort the pass.
        """
        self._ensure_dispatcher()
        logger.info("Checking for existing tunnel processes")
        for tunnel in self.store.load():
            if tunnel.id in self.registry:
                continue

            log = get_tunnel_logger(__name__, tunnel.id, name=tunnel.name)
            if tunnel.pid is not None and is_process_alive(tunnel.pid, tunnel.pid_started_at):
                running = self.store.update(tunnel.id, status=TunnelStatus.RUNNING)
                self.metrics.start(tunnel.id)
                self.prober.register(running, running.pid)
                log.info("Found running tunnel", pid=tunnel.pid)
            elif tunnel.pid is not None or tunnel.status == TunnelStatus.RUNNING:
                self._mark_stopped(tunnel.id)
                log.info("Tunnel process not running, marked stopped", pid=tunnel.pid)

        for tunnel in self.store.list():
            if not tunnel.auto_startup or self._is_live(tunnel):
                continue

            logger.info("Auto-starting tunnel", tunnel_id=tunnel.id, name=tunnel.name)
            try:
                await self.start(tunnel.id)
            except Exception as e:
                logger.error("Failed to auto-start tunnel", tunnel_id=tunnel.id, error=str(e))

    # Queries

    def list_tunnels(self) -> list[Tunnel]:
        return self.store.list()

    def get_tunnel(self, tunnel_id: str) -> Tunnel:
        return self.store.require(tunnel_id)

    def get_logs(self, tunnel_id: str) -> list[LogEntry]:
        """Captured output of a tunnel, oldest first."""
        self.store.require(tunnel_id)
        return self.logs.read(tunnel_id)

    def get_metrics(self, tunnel_id: str) -> dict[str, Any]:
        tunnel = self.store.require(tunnel_id)
        return self.metrics.get_metrics(tunnel_id, tunnel.created_at)

    def get_all_metrics(self) -> dict[str, dict[str, Any]]:
        return self.metrics.get_all_metrics(
            {tunnel.id: tunnel.created_at for tunnel in self.store.list()}
        )

    async def status(self, tunnel_id: str) -> TunnelStatusReport:
        """Report whether a tunnel is really running.

        A record that claims a process which no longer exists is corrected to
        stopped.
        """
        async with self._lock(tunnel_id):
            tunnel = self.store.require(tunnel_id)
            instance = self.registry.get(tunnel_id)

            if instance is not None:
                pid: int | None = instance.pid
            elif tunnel.pid is not None and is_process_alive(tunnel.pid, tunnel.pid_started_at):
                pid = tunnel.pid
            else:
                pid = None
                if tunnel.pid is not None or tunnel.status == TunnelStatus.RUNNING:
                    tunnel = self._mark_stopped(tunnel_id)
                    logger.info("Process gone, status corrected", tunnel_id=tunnel_id)

            return TunnelStatusReport(
                id=tunnel.id,
                name=tunnel.name,
                status=TunnelStatus.RUNNING if pid is not None else TunnelStatus.STOPPED,
                pid=pid,
                port=tunnel.port,
                hostname=tunnel.hostname,
            )

    # Definition management

    async def create(self, definition: TunnelDefinition | Mapping[str, Any]) -> Tunnel:
        """Provision a tunnel remotely, route its hostname and persist it stopped.

        Raises:
            ValidationError: If the definition is invalid
            ExternalServiceError: If the provider rejects the tunnel or route
        """
        if not isinstance(definition, TunnelDefinition):
            try:
                definition = TunnelDefinition.model_validate(dict(definition))
            except PydanticValidationError as e:
                raise ValidationError(_format_validation_error(e)) from e
        _check_hostnames(definition)

        provisioned = await self.provider.provision(definition.name)
        try:
            await self.provider.create_route(
                definition.zone_id, provisioned.remote_id, definition.hostname
            )
        except ExternalServiceError:
            await self._discard_remote(definition, provisioned.remote_id, route_created=False)
            raise

        tunnel = Tunnel(
            remote_id=provisioned.remote_id,
            account_id=provisioned.account_id,
            secret=provisioned.secret,
            **definition.model_dump(),
        )
        try:
            self.renderer.render(tunnel)
            self.store.save(tunnel)
        except OSError as e:
            await self._discard_remote(definition, provisioned.remote_id, route_created=True)
            try:
                self.renderer.remove(tunnel.id)
            except OSError as cleanup_error:
                logger.warning(
                    "Failed to remove tunnel config", tunnel_id=tunnel.id, error=str(cleanup_error)
                )
            raise ConfigurationError(f"Failed to write tunnel config: {e}") from e

        logger.info(
            "Created tunnel",
            tunnel_id=tunnel.id,
            name=tunnel.name,
            hostname=tunnel.hostname,
            remote_id=tunnel.remote_id,
        )
        return tunnel

    async def update(self, tunnel_id: str, patch: Mapping[str, Any]) -> Tunnel:
        """Merge ``patch`` into a tunnel's definition.

        Identity and runtime fields in the patch are ignored. A live tunnel is
        restarted so the new config takes effect before this returns. Changing
        the hostname does not move the DNS route.

        Raises:
            NotFoundError: If the tunnel does not exist
            ValidationError: If the merged definition is invalid
        """
        async with self._lock(tunnel_id):
            current = self.store.require(tunnel_id)

            protected = IMMUTABLE_FIELDS | RUNTIME_FIELDS
            changes = {key: value for key, value in patch.items() if key not in protected}
            ignored = sorted(set(patch) - set(changes))
            if ignored:
                logger.debug("Ignoring protected fields in update", tunnel_id=tunnel_id, fields=ignored)

            try:
                definition = TunnelDefinition.model_validate(
                    {**current.definition_fields(), **changes}
                )
            except PydanticValidationError as e:
                raise ValidationError(_format_validation_error(e)) from e
            _check_hostnames(definition)

            fields = {name: getattr(definition, name) for name in TunnelDefinition.model_fields}
            fields["updated_at"] = utcnow()
            try:
                self.renderer.render(current.model_copy(update=fields))
            except OSError as e:
                raise ConfigurationError(f"Failed to write tunnel config: {e}") from e
            updated = self.store.update(tunnel_id, **fields)
            logger.info("Updated tunnel", tunnel_id=tunnel_id, fields=sorted(changes))

            if self._is_live(current):
                await self._restart_locked(tunnel_id)
                updated = self.store.require(tunnel_id)
            return updated

    async def set_auto_startup(self, tunnel_id: str, enabled: bool) -> Tunnel:
        async with self._lock(tunnel_id):
            self.store.require(tunnel_id)
            return self.store.update(tunnel_id, auto_startup=enabled, updated_at=utcnow())

    async def set_environment(self, tunnel_id: str, environment: Environment | str) -> Tunnel:
        """Relabel a tunnel's environment.

        Raises:
            ValidationError: If ``environment`` is not a known environment
        """
        try:
            value = Environment(environment)
        except ValueError as e:
            allowed = ", ".join(member.value for member in Environment)
            raise ValidationError(
                f"Invalid environment '{environment}'. Must be one of: {allowed}"
            ) from e

        async with self._lock(tunnel_id):
            self.store.require(tunnel_id)
            return self.store.update(tunnel_id, environment=value, updated_at=utcnow())

    async def delete(self, tunnel_id: str) -> None:
        """Stop a tunnel and remove it everywhere.

        Remote cleanup failures are logged and do not block the local removal.
        A failure to stop the process aborts the delete.

        Raises:
            NotFoundError: If the tunnel does not exist
            ProcessError: If the running process cannot be stopped
        """
        async with self._lock(tunnel_id):
            tunnel = self.store.require(tunnel_id)
            log = get_tunnel_logger(__name__, tunnel_id, name=tunnel.name)

            if self._is_live(tunnel):
                await self._stop_locked(tunnel)
            self.prober.unregister(tunnel_id)

            try:
                await self.provider.delete_route(tunnel.zone_id, tunnel.hostname)
            except SupervisorError as e:
                log.error("Error deleting DNS record", hostname=tunnel.hostname, error=str(e))

            try:
                await self.provider.deprovision(tunnel.remote_id)
            except SupervisorError as e:
                log.error("Error deleting remote tunnel", remote_id=tunnel.remote_id, error=str(e))

            self.renderer.remove(tunnel_id)
            self.logs.clear(tunnel_id)
            self.metrics.forget(tunnel_id)
            self.store.remove(tunnel_id)
            log.info("Deleted tunnel")

        self._locks.pop(tunnel_id, None)

    # Process lifecycle

    async def start(self, tunnel_id: str) -> StartResult:
        """Spawn the tunnel's process.

        Raises:
            NotFoundError: If the tunnel does not exist
            AlreadyRunningError: If the tunnel already has a live process
            ProcessError: If the binary is missing or cannot be spawned
        """
        async with self._lock(tunnel_id):
            return await self._start_locked(tunnel_id)

    async def stop(self, tunnel_id: str) -> Tunnel:
        """Terminate the tunnel's process and mark it stopped.

        Stopping a stopped tunnel only re-asserts the stopped state.

        Raises:
            NotFoundError: If the tunnel does not exist
            ProcessError: If a process found by pid cannot be terminated
        """
        async with self._lock(tunnel_id):
            return await self._stop_locked(self.store.require(tunnel_id))

    async def restart(self, tunnel_id: str) -> StartResult:
        """Stop, wait ``restart_grace_period`` seconds, start."""
        async with self._lock(tunnel_id):
            return await self._restart_locked(tunnel_id)

    async def bulk_start(self, tunnel_ids: Iterable[str]) -> list[BulkResult]:
        return await self._bulk(tunnel_ids, self.start)

    async def bulk_stop(self, tunnel_ids: Iterable[str]) -> list[BulkResult]:
        return await self._bulk(tunnel_ids, self.stop)

    async def bulk_delete(self, tunnel_ids: Iterable[str]) -> list[BulkResult]:
        return await self._bulk(tunnel_ids, self.delete)

    async def _bulk(
        self, tunnel_ids: Iterable[str], operation: Callable[[str], Awaitable[Any]]
    ) -> list[BulkResult]:
        async def run(tunnel_id: str) -> BulkResult:
            try:
                await operation(tunnel_id)
            except Exception as e:
                logger.warning(
                    "Bulk operation failed",
                    operation=getattr(operation, "__name__", str(operation)),
                    tunnel_id=tunnel_id,
                    error=str(e),
                )
                return BulkResult(id=tunnel_id, success=False, error=str(e))
            return BulkResult(id=tunnel_id, success=True)

        return list(await asyncio.gather(*(run(tunnel_id) for tunnel_id in tunnel_ids)))

    async def _start_locked(self, tunnel_id: str) -> StartResult:
        tunnel = self.store.require(tunnel_id)
        if tunnel_id in self.registry:
            raise AlreadyRunningError(f"Tunnel '{tunnel.name}' is already running")
        if tunnel.pid is not None and is_process_alive(tunnel.pid, tunnel.pid_started_at):
            raise AlreadyRunningError(
                f"Tunnel '{tunnel.name}' is already running (pid {tunnel.pid})"
            )

        self._ensure_dispatcher()
        binary = find_binary(self.settings.cloudflared_path)
        if not self.renderer.is_rendered(tunnel_id):
            try:
                self.renderer.render(tunnel)
            except OSError as e:
                raise ConfigurationError(f"Failed to write tunnel config: {e}") from e

        process = TunnelProcess(
            tunnel_id,
            binary,
            self.renderer.config_path(tunnel_id),
            tunnel.remote_id,
            on_line=partial(self._capture_line, tunnel_id),
        )
        pid = await process.start()

        instance = Instance(tunnel_id=tunnel_id, process=process, pid=pid)
        self.registry.add(instance)
        instance.watcher = asyncio.create_task(self._watch(instance), name=f"watch:{tunnel_id}")

        self.store.update(
            tunnel_id,
            status=TunnelStatus.RUNNING,
            pid=pid,
            pid_started_at=process_create_time(pid),
        )
        started = self.store.update_stats(
            tunnel_id,
            last_started=utcnow(),
            restart_count=tunnel.stats.restart_count + 1,
        )
        self.metrics.start(tunnel_id)
        self.prober.register(started, pid)

        get_tunnel_logger(__name__, tunnel_id, name=tunnel.name).info("Tunnel started", pid=pid)
        await self._notify(NotificationEvent.STARTED, started)
        return StartResult(pid=pid)

    async def _stop_locked(self, tunnel: Tunnel) -> Tunnel:
        log = get_tunnel_logger(__name__, tunnel.id, name=tunnel.name)

        # Leaving the registry first makes the watcher treat the exit as intentional
        instance = self.registry.remove(tunnel.id)
        if instance is not None:
            try:
                await instance.process.stop(timeout=self.settings.stop_timeout)
            except OSError as e:
                self.registry.add(instance)
                raise ProcessError(f"Failed to stop tunnel: {e}") from e
            log.info("Stopped tunnel process", pid=instance.pid)
        elif tunnel.pid is not None and is_process_alive(tunnel.pid, tunnel.pid_started_at):
            await asyncio.to_thread(terminate_pid, tunnel.pid, self.settings.stop_timeout)
            log.info("Killed tunnel process by pid", pid=tunnel.pid)

        stopped = self._mark_stopped(tunnel.id)
        self.prober.unregister(tunnel.id)
        await self._notify(NotificationEvent.STOPPED, stopped)
        return stopped

    async def _restart_locked(self, tunnel_id: str) -> StartResult:
        await self._stop_locked(self.store.require(tunnel_id))
        await asyncio.sleep(self.settings.restart_grace_period)
        return await self._start_locked(tunnel_id)

    async def _discard_remote(
        self, definition: TunnelDefinition, remote_id: str, route_created: bool
    ) -> None:
        """Undo the provider side of a failed create; cleanup errors are only logged."""
        if route_created:
            try:
                await self.provider.delete_route(definition.zone_id, definition.hostname)
            except SupervisorError as e:
                logger.warning(
                    "Failed to remove DNS route after create failure",
                    hostname=definition.hostname,
                    error=str(e),
                )
        try:
            await self.provider.deprovision(remote_id)
        except SupervisorError as e:
            logger.warning(
                "Failed to remove remote tunnel after create failure",
                remote_id=remote_id,
                error=str(e),
            )

    def _mark_stopped(self, tunnel_id: str) -> Tunnel:
        self.metrics.stop(tunnel_id)
        return self.store.update(
            tunnel_id, status=TunnelStatus.STOPPED, pid=None, pid_started_at=None
        )

    # Event handling

    def _ensure_dispatcher(self) -> None:
        if self._dispatcher is None or self._dispatcher.done():
            self._dispatcher = asyncio.create_task(self._dispatch(), name="supervisor-events")

    async def _dispatch(self) -> None:
        while True:
            event = await self._events.get()
            task = asyncio.create_task(self._handle_event(event))
            self._handlers.add(task)
            task.add_done_callback(self._handlers.discard)
            self._events.task_done()

    async def _handle_event(self, event: SupervisorEvent) -> None:
        try:
            async with self._lock(event.tunnel_id):
                if isinstance(event, ProcessExited):
                    await self._on_process_exited(event)
                elif isinstance(event, HealthChecked):
                    await self._on_health_checked(event)
                elif isinstance(event, RestartRequested):
                    await self._on_restart_requested(event)
        except Exception:
            logger.exception(
                "Failed to handle supervisor event",
                tunnel_id=event.tunnel_id,
                event=type(event).__name__,
            )

    def _is_event_current(self, tunnel: Tunnel, pid: int | None) -> bool:
        if tunnel.id in self.registry:
            return self.registry.is_current(tunnel.id, pid)
        return tunnel.status == TunnelStatus.RUNNING and tunnel.pid == pid

    async def _on_process_exited(self, event: ProcessExited) -> None:
        tunnel = self.store.get(event.tunnel_id)
        if tunnel is None:
            return
        self.logs.append(event.tunnel_id, LogLevel.INFO, f"Tunnel exited with code {event.returncode}")

        instance = self.registry.get(event.tunnel_id)
        if instance is not None and instance.pid != event.pid:
            logger.debug("Ignoring exit of a replaced instance", tunnel_id=event.tunnel_id, pid=event.pid)
            return

        crashed = instance is not None and self.registry.discard(instance)
        if tunnel.pid != event.pid:
            return

        stopped = self._mark_stopped(event.tunnel_id)
        self.prober.unregister(event.tunnel_id)
        logger.info(
            "Tunnel process exited",
            tunnel_id=event.tunnel_id,
            pid=event.pid,
            returncode=event.returncode,
            crashed=crashed,
        )
        if crashed:
            await self._notify(NotificationEvent.CRASHED, stopped)

    async def _on_health_checked(self, event: HealthChecked) -> None:
        tunnel = self.store.get(event.tunnel_id)
        if tunnel is None or not self._is_event_current(tunnel, event.pid):
            return

        previous = tunnel.stats.health_status
        health_status = HealthStatus.HEALTHY if event.healthy else HealthStatus.UNHEALTHY
        updated = self.store.update_stats(
            event.tunnel_id,
            last_health_check=event.checked_at,
            health_status=health_status,
        )

        # With auto-restart the alert is sent by the restart path
        if (
            health_status == HealthStatus.UNHEALTHY
            and previous != HealthStatus.UNHEALTHY
            and not tunnel.auto_restart
        ):
            await self._notify(NotificationEvent.HEALTH_FAILED, updated)

    async def _on_restart_requested(self, event: RestartRequested) -> None:
        tunnel = self.store.get(event.tunnel_id)
        if tunnel is None or not tunnel.auto_restart:
            return
        if not self._is_event_current(tunnel, event.pid):
            logger.debug("Skipping restart for a stale instance", tunnel_id=event.tunnel_id, pid=event.pid)
            return

        log = get_tunnel_logger(__name__, tunnel.id, name=tunnel.name)
        log.warning("Health check failed, auto-restarting", reason=event.reason)
        await self._notify(NotificationEvent.HEALTH_FAILED, tunnel)
        try:
            await self._restart_locked(tunnel.id)
        except SupervisorError as e:
            log.error("Auto-restart failed", error=str(e))

    async def _watch(self, instance: Instance) -> None:
        returncode = await instance.process.wait()
        await self._events.put(
            ProcessExited(tunnel_id=instance.tunnel_id, pid=instance.pid, returncode=returncode)
        )

    # Helpers

    def _lock(self, tunnel_id: str) -> asyncio.Lock:
        lock = self._locks.get(tunnel_id)
        if lock is None:
            lock = self._locks[tunnel_id] = asyncio.Lock()
        return lock

    def _is_live(self, tunnel: Tunnel) -> bool:
        if tunnel.id in self.registry:
            return True
        return tunnel.pid is not None and is_process_alive(tunnel.pid, tunnel.pid_started_at)

    def _capture_line(self, tunnel_id: str, stream: str, line: str) -> None:
        level = classify_stderr_line(line) if stream == "stderr" else LogLevel.INFO
        self.logs.append(tunnel_id, level, line)

    async def _notify(self, event: NotificationEvent, tunnel: Tunnel) -> None:
        try:
            await self.notifier.notify(event, tunnel)
        except Exception as e:
            logger.warning(
                "Notification failed", notification=event.value, tunnel_id=tunnel.id, error=str(e)
            )
