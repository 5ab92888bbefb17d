"""Helpers for presenting connection keys, tags and usage information."""

from __future__ import annotations

import datetime
from typing import Any, Optional

KEY_PREVIEW_CHARS = 20
RECENT_WINDOW = datetime.timedelta(days=7)


def format_key_preview(key: str, length: int = KEY_PREVIEW_CHARS) -> str:
    """Return the first *length* characters of a key followed by an ellipsis."""
    return (key or "")[:length] + "..."


def format_tags_description(connection: Any) -> str:
    """One-line tag summary shown under a connection name in the list."""
    tags = getattr(connection, "tags", None) or []
    if not tags:
        return ""
    return "# " + ", ".join(tags)


def format_usage(connection: Any) -> str:
    return f"{int(getattr(connection, 'usage', 0) or 0)} times"


def format_last_connected(
    last_connected: Optional[datetime.datetime],
    now: Optional[datetime.datetime] = None,
) -> str:
    """Create a user-facing string describing when a connection was last used.

    ``Today, HH:MM`` and ``Yesterday, HH:MM`` for the last two calendar days,
    ``Mon, 2 Jan 15:04`` style within a week and ``2 Jan 2006`` style beyond.
    """
    if last_connected is None:
        return "Never"

    if now is None:
        now = datetime.datetime.now(last_connected.tzinfo)
    elif (now.tzinfo is None) != (last_connected.tzinfo is None):
        # compare wall-clock times when only one side carries an offset
        now = now.replace(tzinfo=last_connected.tzinfo)
    elif last_connected.tzinfo is not None:
        last_connected = last_connected.astimezone(now.tzinfo)

    clock = last_connected.strftime("%H:%M")
    if now - last_connected < RECENT_WINDOW:
        day_delta = (now.date() - last_connected.date()).days
        if day_delta == 0:
            return f"Today, {clock}"
        if day_delta == 1:
            return f"Yesterday, {clock}"
        return f"{last_connected.strftime('%a')}, {last_connected.day} {last_connected.strftime('%b')} {clock}"
    return f"{last_connected.day} {last_connected.strftime('%b')} {last_connected.year}"


__all__ = [
    "format_key_preview",
    "format_tags_description",
    "format_usage",
    "format_last_connected",
]
