"""Scrollable, filterable connection list with a synchronized detail panel."""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from rich.style import Style
from rich.text import Text

from gsm.config import Connection
from gsm.connection_display import (
    format_key_preview,
    format_last_connected,
    format_tags_description,
    format_usage,
)
from gsm.search_utils import connection_matches, filter_value

LIST_TITLE = "GSM | GSocket Manager"
FILTER_PLACEHOLDER = "Filter by name or tag... (type to search)"

LIST_WIDTH_PERCENT = 40
MIN_LIST_WIDTH = 30
DETAIL_RESERVED_WIDTH = 25
SEPARATOR_WIDTH = 1

ITEM_HEIGHT = 2
# title, blank line, filter/count line, blank line
HEADER_LINES = 4

TITLE_STYLE = Style.parse("bold color(231) on color(23)")
NORMAL_TITLE_STYLE = Style.parse("color(252)")
NORMAL_DESC_STYLE = Style.parse("color(245)")
SELECTED_TITLE_STYLE = Style.parse("bold color(231) on color(32)")
SELECTED_DESC_STYLE = Style.parse("color(228) on color(32)")
MUTED_STYLE = Style.parse("color(242)")
FILTER_PROMPT_STYLE = Style.parse("color(240)")
FILTER_CURSOR_STYLE = Style.parse("color(202)")
DETAIL_LABEL_STYLE = Style.parse("color(242)")
DETAIL_VALUE_STYLE = Style.parse("bold")


@dataclass(frozen=True)
class ConnectionItem:
    """List entry wrapping a connection with its display and filter capabilities."""

    connection: Connection

    @property
    def title(self) -> str:
        return self.connection.name

    @property
    def description(self) -> str:
        return format_tags_description(self.connection)

    @property
    def filter_value(self) -> str:
        return filter_value(self.connection)

    def matches(self, query: str) -> bool:
        return connection_matches(self.connection, query)


def compute_columns(width: int) -> Tuple[int, int]:
    """
    Return ``(list_width, detail_width)`` for a terminal *width*.

    The list takes 40% of the width but never less than 30 columns, and the
    detail panel keeps at least 25 columns (separator included). When both
    cannot fit, the list takes the whole width and ``detail_width`` is 0.
    """
    width = max(int(width or 0), 0)
    if width < MIN_LIST_WIDTH + DETAIL_RESERVED_WIDTH:
        return width, 0
    list_width = max(width * LIST_WIDTH_PERCENT // 100, MIN_LIST_WIDTH)
    list_width = min(list_width, width - DETAIL_RESERVED_WIDTH)
    return list_width, width - list_width - SEPARATOR_WIDTH


@dataclass
class ListView:
    items: List[ConnectionItem] = field(default_factory=list)
    filter_text: str = ""
    selection_index: int = 0
    width: int = 0
    height: int = 0

    @classmethod
    def from_connections(cls, connections: Iterable[Connection]) -> "ListView":
        return cls(items=[ConnectionItem(conn) for conn in connections])

    # ---------------------------------------------------------------- queries
    def visible_items(self) -> List[ConnectionItem]:
        needle = self.filter_text.strip()
        if not needle:
            return list(self.items)
        return [item for item in self.items if item.matches(needle)]

    def selected_item(self) -> Optional[ConnectionItem]:
        visible = self.visible_items()
        if not visible:
            return None
        return visible[min(max(self.selection_index, 0), len(visible) - 1)]

    @property
    def page_size(self) -> int:
        return max(1, (self.height - HEADER_LINES) // ITEM_HEIGHT)

    # ------------------------------------------------------------- mutations
    def set_size(self, width: int, height: int) -> None:
        self.width = max(width, 0)
        self.height = max(height, 0)

    def set_filter(self, text: str) -> None:
        self.filter_text = text
        self._clamp_selection()

    def append_filter(self, text: str) -> None:
        self.set_filter(self.filter_text + text)

    def delete_filter_char(self) -> None:
        self.set_filter(self.filter_text[:-1])

    def clear_filter(self) -> None:
        self.set_filter("")

    def move_selection(self, delta: int) -> None:
        self.selection_index += delta
        self._clamp_selection()

    def select_first(self) -> None:
        self.selection_index = 0

    def select_last(self) -> None:
        self.selection_index = len(self.visible_items()) - 1
        self._clamp_selection()

    def page(self, pages: int) -> None:
        self.move_selection(pages * self.page_size)

    def _clamp_selection(self) -> None:
        count = len(self.visible_items())
        self.selection_index = min(max(self.selection_index, 0), max(count - 1, 0))

    # -------------------------------------------------------------- rendering
    def render(self, *, filtering: bool = False) -> Text:
        text = Text(no_wrap=True, overflow="ellipsis")
        text.append(f" {LIST_TITLE} ", style=TITLE_STYLE)
        text.append("\n\n")

        visible = self.visible_items()
        if filtering or self.filter_text:
            text.append("Filter: ", style=FILTER_PROMPT_STYLE)
            if self.filter_text:
                text.append(self.filter_text)
            elif filtering:
                text.append(FILTER_PLACEHOLDER, style=MUTED_STYLE)
            if filtering:
                text.append("█", style=FILTER_CURSOR_STYLE)
        else:
            text.append(self._count_label(len(visible)), style=MUTED_STYLE)
        text.append("\n\n")

        if not visible:
            text.append("No connections." if not self.items else "No matches.", style=MUTED_STYLE)
            return text

        selected = min(max(self.selection_index, 0), len(visible) - 1)
        start = (selected // self.page_size) * self.page_size
        page = visible[start:start + self.page_size]
        for offset, item in enumerate(page):
            is_selected = start + offset == selected
            title_style = SELECTED_TITLE_STYLE if is_selected else NORMAL_TITLE_STYLE
            desc_style = SELECTED_DESC_STYLE if is_selected else NORMAL_DESC_STYLE
            text.append(f" {item.title} ", style=title_style)
            text.append("\n")
            text.append(f" {item.description} " if item.description else "", style=desc_style)
            if offset < len(page) - 1:
                text.append("\n")

        if len(visible) > self.page_size:
            pages = (len(visible) + self.page_size - 1) // self.page_size
            text.append(f"\n\n page {start // self.page_size + 1}/{pages}", style=MUTED_STYLE)
        return text

    def _count_label(self, visible_count: int) -> str:
        total = len(self.items)
        noun = "connection" if total == 1 else "connections"
        if self.filter_text and visible_count != total:
            return f"{visible_count} of {total} {noun}"
        return f"{total} {noun}"

    def render_detail(self, now: Optional[datetime.datetime] = None) -> Text:
        item = self.selected_item()
        if item is None:
            message = "No connections." if not self.items else "Select a connection."
            return Text(message, style=MUTED_STYLE)
        return render_detail_panel(item, now)


def render_detail_panel(item: ConnectionItem, now: Optional[datetime.datetime] = None) -> Text:
    conn = item.connection
    text = Text()
    text.append(conn.name, style=DETAIL_VALUE_STYLE)
    text.append("\n\n")
    rows = [
        ("Key: ", format_key_preview(conn.key)),
        ("Tags: ", ", ".join(conn.tags) if conn.tags else "-"),
        ("Usage: ", format_usage(conn)),
        ("Last Seen: ", format_last_connected(conn.last_connected, now)),
    ]
    for label, value in rows:
        text.append(label, style=DETAIL_LABEL_STYLE)
        text.append(value, style=DETAIL_VALUE_STYLE)
        text.append("\n")
    return text


__all__ = ["ConnectionItem", "ListView", "compute_columns", "render_detail_panel"]
