import subprocess

import pytest

from gsm.config import Connection
from gsm.runner import LaunchError, execute


class RecordingRun:
    """Stand-in for subprocess.run returning a fixed exit code."""

    def __init__(self, returncode=0, exc=None):
        self.returncode = returncode
        self.exc = exc
        self.calls = []

    def __call__(self, cmd):
        self.calls.append(cmd)
        if self.exc is not None:
            raise self.exc
        return subprocess.CompletedProcess(cmd, self.returncode)


def _run(run):
    lines = []
    conn = Connection(name="Echo", key="abc123")
    execute(conn, executable="gs-netcat", run=run, print_func=lines.append)
    return lines


def test_successful_session_prints_banners():
    run = RecordingRun(0)

    lines = _run(run)

    assert run.calls == [["gs-netcat", "-i", "-s", "abc123"]]
    assert lines[0] == "[+] Attempting to connect to: Echo (Key: abc123)"
    assert lines[-1] == "[<] Disconnected from Echo successfully."


def test_non_zero_exit_raises_after_disconnect_banner():
    lines = []
    with pytest.raises(LaunchError):
        execute(
            Connection(name="Echo", key="abc123"),
            executable="gs-netcat",
            run=RecordingRun(3),
            print_func=lines.append,
        )

    assert lines[-1] == "[<] Disconnected from Echo (session ended, possibly with error: exit status 3)"


def test_missing_executable_raises_launch_error():
    lines = []
    with pytest.raises(LaunchError):
        execute(
            Connection(name="Echo", key="abc123"),
            executable="gs-netcat",
            run=RecordingRun(exc=FileNotFoundError("gs-netcat")),
            print_func=lines.append,
        )

    assert "not found" in lines[-1]
