"""
Connection store for GSM.
Handles the connection records and their JSON file on disk.
"""

from __future__ import annotations

import contextlib
import copy
import datetime
import json
import logging
import os
import re
import stat
import tempfile
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from .platform_utils import get_config_path

logger = logging.getLogger(__name__)

_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


class ConfigError(Exception):
    """Raised when the connection store cannot be read or written."""


def parse_timestamp(value: Any) -> Optional[datetime.datetime]:
    """Parse an ISO-8601/RFC 3339 timestamp, returning ``None`` when unusable."""
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    # datetime only keeps microseconds; timestamps written by other tools may carry nanoseconds
    text = _FRACTION_RE.sub(r"\1", text)
    try:
        return datetime.datetime.fromisoformat(text)
    except ValueError:
        logger.warning("Ignoring malformed timestamp %r", value)
        return None


def format_timestamp(value: datetime.datetime) -> str:
    if value.tzinfo is None:
        value = value.astimezone()
    return value.isoformat()


@dataclass
class Connection:
    """A saved gsocket connection."""

    name: str
    key: str
    tags: List[str] = field(default_factory=list)
    usage: int = 0
    last_connected: Optional[datetime.datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Connection":
        if not isinstance(data, dict):
            raise ConfigError(f"Connection entry must be an object, got {type(data).__name__}")
        tags = data.get("tags") or []
        if not isinstance(tags, list):
            raise ConfigError(f"Tags of connection {data.get('name')!r} must be a list")
        try:
            usage = int(data.get("usage") or 0)
        except (TypeError, ValueError):
            usage = 0
        last_connected = data.get("last_connected", data.get("lastConnected"))
        return cls(
            name=str(data.get("name") or ""),
            key=str(data.get("key") or ""),
            tags=[str(tag) for tag in tags],
            usage=max(usage, 0),
            last_connected=parse_timestamp(last_connected),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name, "key": self.key}
        if self.tags:
            data["tags"] = list(self.tags)
        if self.usage:
            data["usage"] = self.usage
        if self.last_connected is not None:
            data["last_connected"] = format_timestamp(self.last_connected)
        return data


class ConnectionStore:
    """In-memory connection list backed by a single JSON file.

    The file is always read and written as a whole. Mutation helpers only
    touch the in-memory list, except :meth:`delete_by_index` and
    :meth:`record_usage` which persist immediately.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = os.path.abspath(os.path.expanduser(path or get_config_path()))
        self._connections: List[Connection] = []

    # ------------------------------------------------------------------ disk
    def load(self) -> List[Connection]:
        """Load the store from disk, creating an empty one when missing."""
        self._ensure_parent_dir()

        if not os.path.exists(self.path):
            logger.info("Config file not found at %s; creating a new empty config", self.path)
            self._connections = []
            self.save()
            return self.get_current()

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = f.read()
        except OSError as exc:
            raise ConfigError(f"failed to read config file '{self.path}': {exc}") from exc

        if not raw.strip():
            self._connections = []
            return self.get_current()

        try:
            data = json.loads(raw)
        except ValueError as exc:
            raise ConfigError(f"failed to parse config file '{self.path}': {exc}") from exc

        if not isinstance(data, dict):
            raise ConfigError(f"failed to parse config file '{self.path}': top level must be an object")

        entries = data.get("connections") or []
        if not isinstance(entries, list):
            raise ConfigError(f"failed to parse config file '{self.path}': 'connections' must be a list")

        self._connections = [Connection.from_dict(entry) for entry in entries]
        logger.debug("Loaded %d connection(s) from %s", len(self._connections), self.path)
        return self.get_current()

    def save(self) -> None:
        """Write the whole store to disk atomically."""
        payload = {"connections": [conn.to_dict() for conn in self._connections]}
        try:
            data = json.dumps(payload, indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"failed to encode config: {exc}") from exc

        parent = self._ensure_parent_dir()
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(prefix=".config-", suffix=".json", dir=parent)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(data)
                f.write("\n")
            os.chmod(tmp_path, 0o600)
            os.replace(tmp_path, self.path)
            tmp_path = None
        except OSError as exc:
            raise ConfigError(f"failed to write config file '{self.path}': {exc}") from exc
        finally:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
        logger.debug("Saved %d connection(s) to %s", len(self._connections), self.path)

    def _ensure_parent_dir(self) -> str:
        parent = os.path.dirname(self.path)
        if parent and not os.path.isdir(parent):
            try:
                os.makedirs(parent, mode=0o700, exist_ok=True)
            except OSError as exc:
                raise ConfigError(f"failed to create config directory '{parent}': {exc}") from exc
            self._ensure_secure_permissions(parent, 0o700)
        return parent or "."

    @staticmethod
    def _ensure_secure_permissions(path: str, mode: int) -> None:
        """Best effort at applying restrictive permissions to a directory."""
        try:
            if stat.S_IMODE(os.stat(path).st_mode) != mode:
                os.chmod(path, mode)
        except OSError as exc:
            logger.debug("Unable to set permissions on %s: %s", path, exc)

    # -------------------------------------------------------------- accessors
    def get_current(self) -> List[Connection]:
        """Return a copy of the loaded connections."""
        return copy.deepcopy(self._connections)

    def __len__(self) -> int:
        return len(self._connections)

    def find_index(self, name: str, key: str) -> int:
        """Return the index of the connection matching *name* and *key*, or ``-1``."""
        for index, conn in enumerate(self._connections):
            if conn.name == name and conn.key == key:
                return index
        return -1

    # -------------------------------------------------------------- mutation
    def add_connection(self, conn: Connection) -> None:
        self._connections.append(copy.deepcopy(conn))

    def update_by_index(self, index: int, conn: Connection) -> None:
        self._check_index(index)
        self._connections[index] = copy.deepcopy(conn)

    def delete_by_index(self, index: int) -> Connection:
        """Remove the connection at *index* and persist the store."""
        self._check_index(index)
        with self.transaction():
            removed = self._connections.pop(index)
            self.save()
        logger.info("Connection removed: %s", removed.name)
        return removed

    def record_usage(self, conn: Connection, when: Optional[datetime.datetime] = None) -> Optional[Connection]:
        """Bump the usage counter of *conn* and stamp its last connection time."""
        index = self.find_index(conn.name, conn.key)
        if index == -1:
            logger.warning("Cannot record usage for %s: connection no longer exists", conn.name)
            return None
        with self.transaction():
            current = self._connections[index]
            current.usage += 1
            current.last_connected = when or datetime.datetime.now().astimezone()
            self.save()
        return copy.deepcopy(current)

    @contextlib.contextmanager
    def transaction(self) -> Iterator["ConnectionStore"]:
        """Restore the in-memory list if the enclosed block raises."""
        snapshot = copy.deepcopy(self._connections)
        try:
            yield self
        except BaseException:
            self._connections = snapshot
            raise

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= len(self._connections):
            raise ConfigError(f"index out of bounds: {index}")


__all__ = ["Connection", "ConnectionStore", "ConfigError", "parse_timestamp", "format_timestamp"]
