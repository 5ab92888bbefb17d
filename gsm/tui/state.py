"""UI session state owned by the controller."""

from __future__ import annotations

import copy
import enum
from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple

from rich.style import Style
from rich.text import Text

from gsm.config import Connection
from gsm.tui.delete_confirm import DeleteConfirmation
from gsm.tui.edit_form import EditForm
from gsm.tui.list_view import ListView, compute_columns

EDITING_NONE = -1
EDITING_NEW = -2

FOOTER_LINES = 1
STATUS_LINES = 1

STATUS_STYLES = {
    "error": Style.parse("bold color(196)"),
    "success": Style.parse("bold color(40)"),
    "none": Style.parse("color(242)"),
}


class Mode(enum.Enum):
    BROWSING = "browsing"
    FILTERING = "filtering"
    EDITING = "editing"
    CONFIRMING_DELETE = "confirming_delete"


class StatusKind(enum.Enum):
    NONE = "none"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class SessionState:
    """Everything the UI shows, rebuilt from the store after every successful mutation."""

    list_view: ListView = field(default_factory=ListView)
    form: EditForm = field(default_factory=EditForm)
    mode: Mode = Mode.BROWSING
    editing_index: int = EDITING_NONE
    pending_delete: Optional[DeleteConfirmation] = None
    status_message: str = ""
    status_kind: StatusKind = StatusKind.NONE
    width: int = 0
    height: int = 0

    @classmethod
    def from_connections(cls, connections: Iterable[Connection]) -> "SessionState":
        return cls(list_view=ListView.from_connections(connections))

    def copy(self) -> "SessionState":
        return copy.deepcopy(self)

    @property
    def is_modal(self) -> bool:
        return self.mode in (Mode.EDITING, Mode.CONFIRMING_DELETE)

    @property
    def editing_new(self) -> bool:
        return self.editing_index == EDITING_NEW

    # ----------------------------------------------------------------- status
    def set_status(self, message: str, kind: StatusKind = StatusKind.NONE) -> None:
        self.status_message = message
        self.status_kind = kind
        self._relayout()

    def clear_status(self) -> None:
        self.set_status("", StatusKind.NONE)

    def status_text(self) -> Text:
        if not self.status_message:
            return Text()
        return Text(self.status_message, style=STATUS_STYLES[self.status_kind.value])

    # ----------------------------------------------------------------- layout
    def set_viewport(self, width: int, height: int) -> None:
        self.width = max(width, 0)
        self.height = max(height, 0)
        self._relayout()

    def columns(self) -> Tuple[int, int]:
        return compute_columns(self.width)

    def body_height(self) -> int:
        height = self.height - FOOTER_LINES
        if self.status_message:
            height -= STATUS_LINES
        return max(height, 1)

    def _relayout(self) -> None:
        list_width, _detail_width = self.columns()
        self.list_view.set_size(list_width, self.body_height())


__all__ = ["EDITING_NEW", "EDITING_NONE", "Mode", "SessionState", "StatusKind"]
