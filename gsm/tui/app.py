from __future__ import annotations

import datetime
import logging
from typing import Optional

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Static

from gsm.config import Connection, ConnectionStore
from gsm.tui.controller import AppController
from gsm.tui.events import ClearScreen, Event, KeyEvent, Quit, ResizeEvent
from gsm.tui.state import Mode, SessionState, StatusKind

LOG = logging.getLogger(__name__)

FOOTER_HINTS = {
    Mode.BROWSING: "↑/↓ nav • q quit • / filter • e edit • d del • a add • Enter exec",
    Mode.FILTERING: "esc clear • tab apply • enter select",
    Mode.EDITING: "tab/shift+tab field • enter save • esc cancel",
    Mode.CONFIRMING_DELETE: "y delete • n/esc cancel",
}


class ListPanel(Static):
    """Connection list with its title and filter line."""

    def show_state(self, state: SessionState) -> None:
        self.update(state.list_view.render(filtering=state.mode == Mode.FILTERING))


class DetailsPanel(Static):
    """Shows information about the selected connection."""

    def show_state(self, state: SessionState, now: Optional[datetime.datetime] = None) -> None:
        self.update(state.list_view.render_detail(now))


class ModalPanel(Static):
    """Edit form or delete confirmation, shown in place of the list."""

    def show_state(self, state: SessionState, title: str = "") -> None:
        if state.mode == Mode.CONFIRMING_DELETE and state.pending_delete is not None:
            self.update(state.pending_delete.render())
            return
        status = state.status_text() if state.status_kind == StatusKind.ERROR else None
        self.update(state.form.render(title, status))


class StatusBar(Static):
    """Single-line status indicator."""

    def set_message(self, message: str, *, kind: StatusKind = StatusKind.NONE) -> None:
        self.set_class(kind == StatusKind.ERROR, "error")
        self.set_class(kind == StatusKind.SUCCESS, "success")
        self.display = bool(message)
        self.update(Text(message or ""))


class FooterBar(Static):
    """Key hints for the current mode."""

    def show_mode(self, mode: Mode) -> None:
        self.update(FOOTER_HINTS[mode])


class GsmTuiApp(App[Optional[Connection]]):
    """Textual interface for browsing, editing and launching gsocket connections.

    Every key press and resize is turned into a controller event; the app only
    executes the commands that come back and repaints from the new state.
    The app's return value is the connection chosen with Enter, or ``None``.
    """

    TITLE = "GSM"
    ENABLE_COMMAND_PALETTE = False
    CSS = """
    Screen {
        layout: vertical;
    }

    #body {
        height: 1fr;
    }

    #list-panel {
        height: 1fr;
        padding: 0 1;
    }

    #details {
        height: 1fr;
        width: 1fr;
        border-left: solid $secondary;
        padding: 0 1;
    }

    #modal {
        height: 1fr;
        padding: 1 2;
        display: none;
    }

    #status {
        height: 1;
        padding: 0 1;
    }

    #status.error {
        color: $error;
        text-style: bold;
    }

    #status.success {
        color: $success;
        text-style: bold;
    }

    #footer {
        height: 1;
        padding: 0 1;
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("ctrl+q", "quit_app", "Quit", show=False, priority=True),
    ]

    def __init__(self, store: ConnectionStore, *, controller: Optional[AppController] = None, **kwargs):
        super().__init__(**kwargs)
        self.store = store
        self.controller = controller or AppController(store)
        self.session = self.controller.initial_state()

    # --------------------------------------------------------------------- UI
    def compose(self) -> ComposeResult:
        with Horizontal(id="body"):
            yield ListPanel(id="list-panel")
            yield DetailsPanel(id="details")
        yield ModalPanel(id="modal")
        yield StatusBar(id="status")
        yield FooterBar(id="footer")

    def on_mount(self) -> None:
        self.body_row = self.query_one("#body", Horizontal)
        self.list_panel = self.query_one(ListPanel)
        self.details_panel = self.query_one(DetailsPanel)
        self.modal_panel = self.query_one(ModalPanel)
        self.status_bar = self.query_one(StatusBar)
        self.footer_bar = self.query_one(FooterBar)
        self.feed_event(ResizeEvent(self.size.width, self.size.height))

    # ---------------------------------------------------------------- bindings
    def action_quit_app(self) -> None:
        self.exit(None)

    # ----------------------------------------------------------------- events
    def on_resize(self, event: events.Resize) -> None:
        if not hasattr(self, "list_panel"):
            return
        self.feed_event(ResizeEvent(event.size.width, event.size.height))

    def on_key(self, event: events.Key) -> None:
        # Screen bindings (tab focus cycling, ctrl+c help) must not see keys.
        event.stop()
        event.prevent_default()
        self.feed_event(KeyEvent(event.key, event.character))

    def on_paste(self, event: events.Paste) -> None:
        event.stop()
        if self.session.mode not in (Mode.EDITING, Mode.FILTERING):
            return
        for char in event.text:
            if char.isprintable():
                self.feed_event(KeyEvent(char, char))

    def feed_event(self, event: Event) -> None:
        """Feed *event* to the controller and execute what it returns."""
        self.session, commands = self.controller.update(self.session, event)
        for command in commands:
            if isinstance(command, Quit):
                LOG.debug("Leaving TUI with selection %r", command.selection)
                self.exit(command.selection)
                return
            if isinstance(command, ClearScreen):
                self.refresh(layout=True)
        self.render_state()

    # -------------------------------------------------------------- rendering
    def render_state(self) -> None:
        state = self.session
        list_width, detail_width = state.columns()

        self.body_row.display = not state.is_modal
        self.modal_panel.display = state.is_modal
        if state.is_modal:
            self.modal_panel.show_state(state, self._form_title(state))
        else:
            self.list_panel.styles.width = list_width if detail_width else "1fr"
            self.list_panel.show_state(state)
            self.details_panel.display = detail_width > 0
            if detail_width:
                self.details_panel.show_state(state)

        in_form = state.mode == Mode.EDITING and state.status_kind == StatusKind.ERROR
        self.status_bar.set_message("" if in_form else state.status_message, kind=state.status_kind)
        self.footer_bar.show_mode(state.mode)

    def _form_title(self, state: SessionState) -> str:
        if state.editing_new:
            return "Add New Connection (Esc to Cancel)"
        current = self.store.get_current()
        if 0 <= state.editing_index < len(current):
            name = current[state.editing_index].name
        else:
            name = state.form.name
        return f"Editing Connection: {name} (Esc to Cancel)"


def run_app(store: ConnectionStore, **kwargs) -> Optional[Connection]:
    """Run the TUI once and return the connection the user chose, if any."""
    app = GsmTuiApp(store, **kwargs)
    try:
        return app.run()
    except KeyboardInterrupt:
        return None


__all__ = ["GsmTuiApp", "run_app"]
