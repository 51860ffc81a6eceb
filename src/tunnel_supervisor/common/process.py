"""Host process inspection by pid.

The supervisor loses its direct process handles whenever it restarts, and the
persisted pid is then the only way to reach a tunnel process that is still
alive. These helpers wrap psutil so the pid-based paths can be mocked in tests.
"""

import psutil

from .exceptions import ProcessError
from .logging import get_logger

logger = get_logger(__name__)

# Creation times are reported with sub-second precision that varies by platform
FINGERPRINT_TOLERANCE = 1.0


def process_create_time(pid: int) -> float | None:
    """Return the creation time of a process, or None if it cannot be read."""
    try:
        return psutil.Process(pid).create_time()
    except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
        return None


def is_process_alive(pid: int | None, fingerprint: float | None = None) -> bool:
    """Check whether ``pid`` still refers to the tunnel process that was spawned.

    Args:
        pid: Persisted process id
        fingerprint: Creation time recorded at spawn; when given, a process
            with a different creation time is treated as a reused pid

    Returns:
        True if a matching, non-zombie process exists
    """
    if not pid or pid <= 0:
        return False

    try:
        process = psutil.Process(pid)
        if process.status() == psutil.STATUS_ZOMBIE:
            return False
        if fingerprint is not None:
            if abs(process.create_time() - fingerprint) > FINGERPRINT_TOLERANCE:
                logger.warning("Pid reused by another process", pid=pid)
                return False
        return True
    except psutil.NoSuchProcess:
        return False
    except psutil.AccessDenied:
        # Exists but is owned by someone else
        return fingerprint is None


def terminate_pid(pid: int, timeout: float = 5.0) -> None:
    """Terminate a process by pid, escalating to kill after ``timeout``.

    Raises:
        ProcessError: If the process exists but cannot be signalled
    """
    try:
        process = psutil.Process(pid)
        process.terminate()
        try:
            process.wait(timeout=timeout)
        except psutil.TimeoutExpired:
            logger.warning("Process did not terminate gracefully, force killing", pid=pid)
            process.kill()
    except psutil.NoSuchProcess:
        logger.debug("Process already gone", pid=pid)
    except psutil.Error as e:
        raise ProcessError(f"Failed to kill process {pid}: {e}") from e
