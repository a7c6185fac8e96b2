"""Tests for zxdecode/server/client.py — launching and stopping the service process."""

from __future__ import annotations

import os
import subprocess
import sys
from unittest.mock import MagicMock, patch

import pytest

from zxdecode.server.client import ServiceClient, ServiceStartError, spawn_service

# Captured before any test patches subprocess.Popen, so specs stay real.
_POPEN = subprocess.Popen


def _process(returncode=None):
    process = MagicMock(spec=_POPEN)
    process.pid = 5150
    process.returncode = returncode
    process.poll.return_value = returncode
    return process


@patch("zxdecode.server.client.subprocess.Popen")
def test_spawn_passes_port_and_parent_pid(mock_popen):
    mock_popen.return_value = _process()

    with patch.object(ServiceClient, "ping", return_value=True):
        client = spawn_service(9000)

    cmd = mock_popen.call_args.args[0]
    assert cmd[:3] == [sys.executable, "-m", "zxdecode.server.service"]
    assert cmd[cmd.index("--port") + 1] == "9000"
    assert cmd[cmd.index("--parent-pid") + 1] == str(os.getpid())
    assert client.process is mock_popen.return_value


@patch("zxdecode.server.client.subprocess.Popen")
def test_spawn_waits_for_service(mock_popen):
    mock_popen.return_value = _process()

    with patch.object(ServiceClient, "ping", side_effect=[ConnectionRefusedError(), True]) as mock_ping:
        spawn_service(9000)

    assert mock_ping.call_count == 2


@patch("zxdecode.server.client.subprocess.Popen")
def test_spawn_fails_fast_when_service_exits(mock_popen):
    mock_popen.return_value = _process(returncode=1)

    with patch.object(ServiceClient, "ping") as mock_ping:
        with pytest.raises(ServiceStartError, match="exited with code 1"):
            spawn_service(9000)

    mock_ping.assert_not_called()


def test_close_terminates_spawned_process():
    process = _process()
    ServiceClient(9000, process=process).close()

    process.terminate.assert_called_once()
    process.wait.assert_called_once_with(timeout=5)
    process.kill.assert_not_called()


def test_close_kills_process_that_ignores_terminate():
    process = _process()
    process.wait.side_effect = [subprocess.TimeoutExpired("zxdecode", 5), 0]

    with ServiceClient(9000, process=process):
        pass

    process.kill.assert_called_once()


def test_close_without_process_is_noop():
    ServiceClient(9000).close()


def test_close_after_process_exited():
    process = _process(returncode=0)
    ServiceClient(9000, process=process).close()

    process.terminate.assert_not_called()
