"""
Terminal UI package for GSM.

This module exposes the public entry point for running the Textual TUI.
The actual application lives in ``gsm.tui.app``. We import it lazily so that
the import and config subcommands never pay for loading Textual.
"""

from __future__ import annotations

from typing import Any

__all__ = ["run_app"]


def run_app(*args: Any, **kwargs: Any) -> Any:
    """Run the interactive UI once and return the chosen connection, if any."""
    from .app import run_app as _run_app

    return _run_app(*args, **kwargs)
