"""Input events consumed by the controller and commands it hands back to the UI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Union

from gsm.config import Connection


@dataclass(frozen=True)
class KeyEvent:
    """A key press, named the way Textual names keys (``"enter"``, ``"shift+tab"``, ``"a"``)."""

    key: str
    character: Optional[str] = None

    @property
    def printable(self) -> Optional[str]:
        """The typed character, or ``None`` for control and navigation keys."""
        if self.character and len(self.character) == 1 and self.character.isprintable():
            return self.character
        return None


@dataclass(frozen=True)
class ResizeEvent:
    width: int
    height: int


Event = Union[KeyEvent, ResizeEvent]


@dataclass(frozen=True)
class Quit:
    """End the interactive loop, optionally yielding the chosen connection."""

    selection: Optional[Connection] = None


@dataclass(frozen=True)
class ClearScreen:
    """Repaint everything after a mode change."""


Command = Union[Quit, ClearScreen]
Commands = List[Command]


__all__ = [
    "ClearScreen",
    "Command",
    "Commands",
    "Event",
    "KeyEvent",
    "Quit",
    "ResizeEvent",
]
