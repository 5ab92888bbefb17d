"""Inline three-field form used to add or edit a connection."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from rich.style import Style
from rich.text import Text

from gsm.tui.events import KeyEvent

FIELD_NAME = 0
FIELD_KEY = 1
FIELD_TAGS = 2
FIELD_COUNT = 3

NAME_CHAR_LIMIT = 100
KEY_CHAR_LIMIT = 256
TAGS_CHAR_LIMIT = 200
INPUT_WIDTH = 50

HEADER_STYLE = Style.parse("bold")
PLACEHOLDER_STYLE = Style.parse("color(240)")
CURSOR_STYLE = Style.parse("reverse")
HINT_STYLE = Style.parse("color(240)")


def parse_tags(raw: str) -> List[str]:
    """Split comma separated tags, trimming each and dropping empty ones.

    Order is preserved and duplicates are kept.
    """
    return [tag.strip() for tag in (raw or "").split(",") if tag.strip()]


@dataclass
class TextField:
    """Single-line text input with a character limit and a cursor."""

    placeholder: str = ""
    char_limit: int = 0
    value: str = ""
    cursor: int = 0
    focused: bool = False

    def set_value(self, value: str) -> None:
        if self.char_limit:
            value = value[: self.char_limit]
        self.value = value
        self.cursor = len(value)

    def focus(self) -> None:
        self.focused = True

    def blur(self) -> None:
        self.focused = False

    def insert(self, text: str) -> None:
        if self.char_limit:
            room = self.char_limit - len(self.value)
            if room <= 0:
                return
            text = text[:room]
        self.value = self.value[: self.cursor] + text + self.value[self.cursor:]
        self.cursor += len(text)

    def handle_key(self, event: KeyEvent) -> bool:
        """Apply an editing key. Returns ``False`` for keys the field ignores."""
        key = event.key
        if key == "backspace":
            if self.cursor > 0:
                self.value = self.value[: self.cursor - 1] + self.value[self.cursor:]
                self.cursor -= 1
        elif key == "delete":
            self.value = self.value[: self.cursor] + self.value[self.cursor + 1:]
        elif key == "left":
            self.cursor = max(self.cursor - 1, 0)
        elif key == "right":
            self.cursor = min(self.cursor + 1, len(self.value))
        elif key in ("home", "ctrl+a"):
            self.cursor = 0
        elif key in ("end", "ctrl+e"):
            self.cursor = len(self.value)
        elif key == "ctrl+u":
            self.value = self.value[self.cursor:]
            self.cursor = 0
        elif key == "ctrl+k":
            self.value = self.value[: self.cursor]
        elif event.printable is not None:
            self.insert(event.printable)
        else:
            return False
        return True

    def render(self, width: int = INPUT_WIDTH) -> Text:
        text = Text(no_wrap=True)
        if not self.value and not self.focused:
            text.append(self.placeholder, style=PLACEHOLDER_STYLE)
            return text
        if not self.value:
            text.append(" ", style=CURSOR_STYLE)
            text.append(self.placeholder, style=PLACEHOLDER_STYLE)
            return text

        offset = max(0, self.cursor - width + 1) if self.focused else 0
        visible = self.value[offset:offset + width]
        if not self.focused:
            text.append(visible)
            return text
        cursor = self.cursor - offset
        text.append(visible[:cursor])
        text.append(visible[cursor:cursor + 1] or " ", style=CURSOR_STYLE)
        text.append(visible[cursor + 1:])
        return text


def _new_fields() -> List[TextField]:
    return [
        TextField(placeholder="Name (optional, auto-gen from Key)", char_limit=NAME_CHAR_LIMIT),
        TextField(placeholder="GSocket Key (required)", char_limit=KEY_CHAR_LIMIT),
        TextField(placeholder="tag1,tag2 (optional)", char_limit=TAGS_CHAR_LIMIT),
    ]


@dataclass
class EditForm:
    fields: List[TextField] = field(default_factory=_new_fields)
    focus_index: int = FIELD_NAME

    @property
    def name(self) -> str:
        return self.fields[FIELD_NAME].value

    @property
    def key(self) -> str:
        return self.fields[FIELD_KEY].value

    @property
    def tags(self) -> str:
        return self.fields[FIELD_TAGS].value

    @property
    def focused_field(self) -> TextField:
        return self.fields[self.focus_index]

    def reset(self, name: str = "", key: str = "", tags: str = "") -> None:
        for text_field, value in zip(self.fields, (name, key, tags)):
            text_field.set_value(value)
        self.focus(FIELD_NAME)

    def focus(self, index: int) -> None:
        for position, text_field in enumerate(self.fields):
            if position == index:
                text_field.focus()
            else:
                text_field.blur()
        self.focus_index = index

    def blur(self) -> None:
        for text_field in self.fields:
            text_field.blur()

    def cycle_focus(self, forward: bool = True) -> int:
        step = 1 if forward else -1
        self.focus((self.focus_index + step) % FIELD_COUNT)
        return self.focus_index

    def handle_key(self, event: KeyEvent) -> bool:
        return self.focused_field.handle_key(event)

    def render(self, title: str, status: Optional[Text] = None) -> Text:
        text = Text()
        text.append(title, style=HEADER_STYLE)
        text.append("\n\n")
        text.append("Name:  ")
        text.append_text(self.fields[FIELD_NAME].render())
        text.append("\n\n")
        text.append("Key:   ")
        text.append_text(self.fields[FIELD_KEY].render())
        text.append("\n\n")
        text.append("Tags:  ")
        text.append_text(self.fields[FIELD_TAGS].render())
        text.append(" (comma-separated)")
        text.append("\n")
        if status is not None and status.plain:
            text.append("\n")
            text.append_text(status)
            text.append("\n")
        text.append("\n")
        text.append("(Tab/Shift+Tab • Enter to Save)", style=HINT_STYLE)
        return text


__all__ = [
    "EditForm",
    "FIELD_KEY",
    "FIELD_NAME",
    "FIELD_TAGS",
    "TextField",
    "parse_tags",
]
