"""Two-choice gate shown before a connection is deleted."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from rich.style import Style
from rich.text import Text

from gsm.tui.events import KeyEvent

CONFIRM_CHARACTERS = frozenset({"y"})
DECLINE_CHARACTERS = frozenset({"n", "q"})
DECLINE_KEYS = frozenset({"escape", "ctrl+c"})

HEADER_STYLE = Style.parse("bold color(196)")
HINT_STYLE = Style.parse("color(240)")


@dataclass(frozen=True)
class DeleteConfirmation:
    """The connection waiting for a yes/no answer, by store index and display name."""

    index: int
    name: str

    @staticmethod
    def decide(event: KeyEvent) -> Optional[bool]:
        """``True`` to delete, ``False`` to cancel, ``None`` for keys that are ignored."""
        if event.key in DECLINE_KEYS:
            return False
        char = (event.printable or "").lower()
        if char in CONFIRM_CHARACTERS:
            return True
        if char in DECLINE_CHARACTERS:
            return False
        return None

    def render(self) -> Text:
        text = Text()
        text.append(f"DELETE Connection: {self.name}?", style=HEADER_STYLE)
        text.append("\n\n")
        text.append(f"Are you sure you want to delete '{self.name}'?\n")
        text.append("This action cannot be undone.\n\n")
        text.append("(Y)es, delete it! / (N)o or (Esc) to cancel.", style=HINT_STYLE)
        return text


__all__ = ["DeleteConfirmation"]
