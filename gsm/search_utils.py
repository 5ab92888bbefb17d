from __future__ import annotations

from typing import Any


def filter_value(connection: Any) -> str:
    """Return the text a connection is matched against: its name followed by its tags."""
    name = str(getattr(connection, "name", "") or "")
    tags = getattr(connection, "tags", None) or []
    return " ".join([name, *[str(tag) for tag in tags]])


def connection_matches(connection: Any, query: str) -> bool:
    """Return True if connection matches the search query.

    The search checks the connection's name and tags in a case-insensitive
    manner.
    """
    if not query:
        return True
    return query.lower() in filter_value(connection).lower()


__all__ = ["connection_matches", "filter_value"]
