"""Tests for pid based process inspection."""

import os
import subprocess
import sys
from unittest.mock import Mock, patch

import psutil
import pytest

from tunnel_supervisor.common.exceptions import ProcessError
from tunnel_supervisor.common.process import (
    is_process_alive,
    process_create_time,
    terminate_pid,
)


class TestIsProcessAlive:
    """Test liveness checks."""

    def test_current_process_is_alive(self):
        assert is_process_alive(os.getpid())

    def test_matching_fingerprint(self):
        created = psutil.Process(os.getpid()).create_time()
        assert is_process_alive(os.getpid(), created)

    def test_reused_pid_is_not_alive(self):
        created = psutil.Process(os.getpid()).create_time()
        assert not is_process_alive(os.getpid(), created - 3600)

    @pytest.mark.parametrize("pid", [None, 0, -1])
    def test_invalid_pids(self, pid):
        assert not is_process_alive(pid)

    def test_missing_process(self):
        with patch("psutil.Process", side_effect=psutil.NoSuchProcess(999999)):
            assert not is_process_alive(999999)

    def test_zombie_is_not_alive(self):
        zombie = Mock()
        zombie.status.return_value = psutil.STATUS_ZOMBIE
        with patch("psutil.Process", return_value=zombie):
            assert not is_process_alive(1234)

    def test_access_denied(self):
        denied = Mock()
        denied.status.side_effect = psutil.AccessDenied(1234)
        with patch("psutil.Process", return_value=denied):
            assert is_process_alive(1234)
            assert not is_process_alive(1234, fingerprint=1000.0)


class TestProcessCreateTime:
    def test_current_process(self):
        assert process_create_time(os.getpid()) == psutil.Process(os.getpid()).create_time()

    def test_missing_process(self):
        with patch("psutil.Process", side_effect=psutil.NoSuchProcess(999999)):
            assert process_create_time(999999) is None


class TestTerminatePid:
    """Test termination by pid."""

    @pytest.mark.integration
    def test_terminates_real_process(self):
        child = subprocess.Popen([sys.executable, "-c", "import time; time.sleep(30)"])
        try:
            terminate_pid(child.pid, timeout=5.0)
            assert child.wait(timeout=5.0) is not None
        finally:
            if child.poll() is None:
                child.kill()

    def test_escalates_to_kill(self):
        stubborn = Mock()
        stubborn.wait.side_effect = psutil.TimeoutExpired(0.1)
        with patch("psutil.Process", return_value=stubborn):
            terminate_pid(1234, timeout=0.1)

        stubborn.terminate.assert_called_once()
        stubborn.kill.assert_called_once()

    def test_missing_process_is_ignored(self):
        with patch("psutil.Process", side_effect=psutil.NoSuchProcess(999999)):
            terminate_pid(999999)

    def test_access_denied_raises(self):
        protected = Mock()
        protected.terminate.side_effect = psutil.AccessDenied(1)
        with patch("psutil.Process", return_value=protected):
            with pytest.raises(ProcessError, match="Failed to kill process 1"):
                terminate_pid(1)
