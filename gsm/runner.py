"""Launch a saved connection in the controlling terminal."""

from __future__ import annotations

import logging
import subprocess
from typing import Callable, Optional

from .config import Connection
from .tui.command_builder import build_gsnetcat_command

logger = logging.getLogger(__name__)

PrintFunc = Callable[[str], None]


class LaunchError(Exception):
    """Raised when the connection process cannot be started or fails."""


def execute(
    connection: Connection,
    *,
    executable: Optional[str] = None,
    run: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    print_func: PrintFunc = print,
) -> None:
    """
    Run gs-netcat for *connection*, blocking until the session ends.

    The child inherits stdin/stdout/stderr. Connect and disconnect banners are
    printed around the call.

    Raises:
        LaunchError: if the executable is missing or exits with a non-zero code.
    """
    cmd = build_gsnetcat_command(connection, executable=executable)
    print_func(f"[+] Attempting to connect to: {connection.name} (Key: {connection.key})")
    print_func("    (Press Ctrl+C in the GSocket session to disconnect and return to GSM)")
    logger.info("Launching %s for %s", cmd[0], connection.name)

    try:
        rc = run(cmd).returncode
    except FileNotFoundError as exc:
        print_func(f"[<] Could not start {cmd[0]}: executable was not found on PATH.")
        raise LaunchError(f"{cmd[0]} executable was not found on PATH") from exc
    except OSError as exc:
        print_func(f"[<] Could not start {cmd[0]}: {exc}")
        raise LaunchError(f"failed to start {cmd[0]}: {exc}") from exc

    if rc != 0:
        print_func(f"[<] Disconnected from {connection.name} (session ended, possibly with error: exit status {rc})")
        logger.warning("%s exited with code %s for %s", cmd[0], rc, connection.name)
        raise LaunchError(f"{cmd[0]} exited with code {rc}")

    print_func(f"[<] Disconnected from {connection.name} successfully.")
    logger.info("Session for %s ended", connection.name)


__all__ = ["execute", "LaunchError"]
