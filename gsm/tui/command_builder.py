"""
Helpers for preparing the gs-netcat command used to open a connection.

Connections are opened interactively (``-i``) with the stored secret passed
through ``-s``. The executable name can be overridden for environments where
gs-netcat lives outside ``PATH``.
"""

from __future__ import annotations

import os
from typing import List, Optional

GS_NETCAT_COMMAND = "gs-netcat"


def resolve_executable(executable: Optional[str] = None) -> str:
    """Return the gs-netcat executable, honouring ``GSM_GS_NETCAT``."""
    return executable or os.environ.get("GSM_GS_NETCAT") or GS_NETCAT_COMMAND


def build_gsnetcat_command(connection, *, executable: Optional[str] = None) -> List[str]:
    """
    Return the argv list for launching gs-netcat for *connection*.

    Args:
        connection: :class:`gsm.config.Connection` (or any object with a ``key``).
        executable: Optional override for the gs-netcat binary.
    """
    key = (getattr(connection, "key", "") or "").strip()
    if not key:
        raise ValueError("Connection is missing a secret key")
    return [resolve_executable(executable), "-i", "-s", key]


__all__ = ["build_gsnetcat_command", "GS_NETCAT_COMMAND"]
