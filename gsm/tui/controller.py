"""
Mode state machine for the interactive UI.

:class:`AppController` turns ``(state, event)`` into ``(new_state, commands)``.
It dispatches on the event kind (key or resize) and on the current mode, and
talks to the connection store through the handle it was constructed with.
The Textual application only feeds it events and executes the returned
commands.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence, Tuple

from gsm.config import ConfigError, Connection, ConnectionStore
from gsm.mnemonic import DEFAULT_WORD_COUNT, fallback_name, generate_mnemonic
from gsm.tui.delete_confirm import DeleteConfirmation
from gsm.tui.edit_form import FIELD_KEY, FIELD_NAME, parse_tags
from gsm.tui.events import ClearScreen, Commands, Event, KeyEvent, Quit, ResizeEvent
from gsm.tui.list_view import ConnectionItem
from gsm.tui.state import EDITING_NEW, EDITING_NONE, Mode, SessionState, StatusKind

LOG = logging.getLogger(__name__)

Namer = Callable[[str, int, Sequence[str]], str]
DictionaryLoader = Callable[[], Sequence[str]]

QUIT_KEYS = frozenset({"ctrl+c"})
CANCEL_KEYS = frozenset({"escape", "ctrl+c"})


def _default_dictionary() -> Sequence[str]:
    from gsm.wordlist import get_words

    return get_words()


class AppController:
    """Routes events to the active sub-component and performs store mutations."""

    def __init__(
        self,
        store: ConnectionStore,
        *,
        dictionary: Optional[DictionaryLoader] = None,
        namer: Namer = generate_mnemonic,
        word_count: int = DEFAULT_WORD_COUNT,
    ):
        self.store = store
        self._dictionary = dictionary or _default_dictionary
        self._namer = namer
        self._word_count = word_count

    def initial_state(self) -> SessionState:
        return SessionState.from_connections(self.store.get_current())

    # --------------------------------------------------------------- dispatch
    def update(self, state: SessionState, event: Event) -> Tuple[SessionState, Commands]:
        """Return the state that follows *event* and the commands to execute."""
        state = state.copy()
        if isinstance(event, ResizeEvent):
            state.set_viewport(event.width, event.height)
            return state, []
        if not isinstance(event, KeyEvent):
            LOG.debug("Ignoring unsupported event %r", event)
            return state, []

        handler = {
            Mode.CONFIRMING_DELETE: self._update_confirming_delete,
            Mode.EDITING: self._update_editing,
            Mode.FILTERING: self._update_filtering,
            Mode.BROWSING: self._update_browsing,
        }[state.mode]
        return handler(state, event)

    # --------------------------------------------------------------- browsing
    def _update_browsing(self, state: SessionState, event: KeyEvent) -> Tuple[SessionState, Commands]:
        state.clear_status()
        view = state.list_view
        key = event.key
        char = event.printable

        if key in QUIT_KEYS or char == "q":
            return state, [Quit(None)]
        if char == "a":
            return self._enter_add(state)
        if char == "e":
            return self._enter_edit(state)
        if char == "d":
            return self._enter_delete(state)
        if char == "/":
            state.mode = Mode.FILTERING
            return state, []
        if key == "enter":
            return self._select(state)
        if key == "escape":
            if view.filter_text:
                view.clear_filter()
            return state, []

        self._navigate(view, key, char)
        return state, []

    def _update_filtering(self, state: SessionState, event: KeyEvent) -> Tuple[SessionState, Commands]:
        state.clear_status()
        view = state.list_view
        key = event.key

        if key in QUIT_KEYS:
            return state, [Quit(None)]
        if key == "escape":
            view.clear_filter()
            state.mode = Mode.BROWSING
            return state, []
        if key == "enter":
            return self._select(state)
        if key in ("tab", "shift+tab"):
            state.mode = Mode.BROWSING
            return state, []
        if key == "backspace":
            view.delete_filter_char()
        elif key == "ctrl+u":
            view.clear_filter()
        elif event.printable is not None:
            view.append_filter(event.printable)
        elif key in ("up", "down", "pageup", "pagedown"):
            self._navigate(view, key, None)
        return state, []

    @staticmethod
    def _navigate(view, key: str, char: Optional[str]) -> None:
        if key == "up" or char == "k":
            view.move_selection(-1)
        elif key == "down" or char == "j":
            view.move_selection(1)
        elif key == "home" or char == "g":
            view.select_first()
        elif key == "end" or char == "G":
            view.select_last()
        elif key == "pageup":
            view.page(-1)
        elif key == "pagedown":
            view.page(1)

    def _select(self, state: SessionState) -> Tuple[SessionState, Commands]:
        item = state.list_view.selected_item()
        if item is None:
            return state, []
        LOG.info("Connection selected: %s", item.connection.name)
        return state, [Quit(item.connection)]

    def _resolve_index(self, item: Optional[ConnectionItem]) -> int:
        """Find the store index of a visible item by exact name and key."""
        if item is None:
            return -1
        return self.store.find_index(item.connection.name, item.connection.key)

    def _enter_add(self, state: SessionState) -> Tuple[SessionState, Commands]:
        state.mode = Mode.EDITING
        state.editing_index = EDITING_NEW
        state.form.reset()
        return state, []

    def _enter_edit(self, state: SessionState) -> Tuple[SessionState, Commands]:
        item = state.list_view.selected_item()
        index = self._resolve_index(item)
        if index == -1:
            if item is not None:
                LOG.debug("Edit target %s no longer in store", item.connection.name)
            return state, []
        conn = item.connection
        state.mode = Mode.EDITING
        state.editing_index = index
        state.form.reset(conn.name, conn.key, ", ".join(conn.tags))
        return state, []

    def _enter_delete(self, state: SessionState) -> Tuple[SessionState, Commands]:
        item = state.list_view.selected_item()
        index = self._resolve_index(item)
        if index == -1:
            return state, []
        state.mode = Mode.CONFIRMING_DELETE
        state.pending_delete = DeleteConfirmation(index=index, name=item.connection.name)
        return state, []

    # ---------------------------------------------------------------- editing
    def _update_editing(self, state: SessionState, event: KeyEvent) -> Tuple[SessionState, Commands]:
        key = event.key
        if key in CANCEL_KEYS:
            return self._cancel_edit(state)
        if key in ("tab", "shift+tab"):
            state.form.cycle_focus(forward=key == "tab")
            return state, []
        if key == "enter":
            return self._commit_edit(state)
        state.form.handle_key(event)
        return state, []

    def _cancel_edit(self, state: SessionState) -> Tuple[SessionState, Commands]:
        state.mode = Mode.BROWSING
        state.editing_index = EDITING_NONE
        state.form.reset()
        state.form.blur()
        state.set_status("Edit cancelled.", StatusKind.NONE)
        return state, [ClearScreen()]

    def _refocus(self, state: SessionState, field: int, message: str) -> Tuple[SessionState, Commands]:
        state.set_status(message, StatusKind.ERROR)
        state.form.focus(field)
        return state, []

    def _generate_name(self, state: SessionState, key: str) -> Tuple[str, str]:
        """Derive a name for a new connection; returns ``(name, info)``."""
        dictionary = self._dictionary()
        if not dictionary:
            state.set_status("Wordlist empty. Cannot generate name. Using key prefix.", StatusKind.ERROR)
            return fallback_name(key), ""
        try:
            name = self._namer(key, self._word_count, dictionary)
        except ValueError as exc:
            LOG.warning("Mnemonic generation failed: %s", exc)
            state.set_status(f"Error generating name: {exc}. Using key prefix.", StatusKind.ERROR)
            return fallback_name(key), ""
        return name, f" (Name auto-generated: {name})"

    def _name_taken(self, name: str, exclude_index: int) -> bool:
        return any(
            index != exclude_index and conn.name == name
            for index, conn in enumerate(self.store.get_current())
        )

    def _commit_edit(self, state: SessionState) -> Tuple[SessionState, Commands]:
        state.clear_status()
        form = state.form
        name = form.name.strip()
        key = form.key.strip()
        tags = parse_tags(form.tags)
        is_new = state.editing_new

        generated_info = ""
        if is_new and not name and key:
            name, generated_info = self._generate_name(state, key)

        if not name:
            return self._refocus(state, FIELD_NAME, "Connection name cannot be empty!")
        if not key:
            return self._refocus(state, FIELD_KEY, "GSocket key cannot be empty!")
        if self._name_taken(name, state.editing_index):
            return self._refocus(state, FIELD_NAME, f"Error: Connection name '{name}' already exists!")

        current = self.store.get_current()
        if is_new:
            conn = Connection(name=name, key=key, tags=tags)
            success = f"Connection '{name}' added{generated_info}."
        elif 0 <= state.editing_index < len(current):
            original = current[state.editing_index]
            conn = Connection(
                name=name,
                key=key,
                tags=tags,
                usage=original.usage,
                last_connected=original.last_connected,
            )
            success = f"Connection '{name}' updated."
        else:
            LOG.warning("Edit index %s is no longer valid", state.editing_index)
            state.mode = Mode.BROWSING
            state.editing_index = EDITING_NONE
            state.form.blur()
            state.set_status("Connection no longer exists; edit discarded.", StatusKind.ERROR)
            return state, [ClearScreen()]

        try:
            with self.store.transaction():
                if is_new:
                    self.store.add_connection(conn)
                else:
                    self.store.update_by_index(state.editing_index, conn)
                self.store.save()
        except ConfigError as exc:
            LOG.error("Failed to save connection %s: %s", name, exc)
            return self._refocus(state, FIELD_NAME, f"Error saving: {exc}")

        LOG.info("Connection %s: %s", "added" if is_new else "updated", name)
        if state.status_kind != StatusKind.ERROR:
            state.set_status(success, StatusKind.SUCCESS)
        state.mode = Mode.BROWSING
        state.editing_index = EDITING_NONE
        state.form.blur()
        return self.rebuild(state), [ClearScreen()]

    # ---------------------------------------------------------------- delete
    def _update_confirming_delete(self, state: SessionState, event: KeyEvent) -> Tuple[SessionState, Commands]:
        pending = state.pending_delete
        decision = DeleteConfirmation.decide(event)
        if decision is None or pending is None:
            return state, []

        state.mode = Mode.BROWSING
        state.pending_delete = None
        if not decision:
            state.set_status("Delete cancelled.", StatusKind.NONE)
            return state, [ClearScreen()]

        try:
            self.store.delete_by_index(pending.index)
        except ConfigError as exc:
            LOG.error("Failed to delete %s: %s", pending.name, exc)
            state.set_status(f"Error deleting '{pending.name}': {exc}", StatusKind.ERROR)
            return state, [ClearScreen()]

        state.set_status(f"Connection '{pending.name}' deleted.", StatusKind.SUCCESS)
        return self.rebuild(state), [ClearScreen()]

    # --------------------------------------------------------------- refresh
    def rebuild(self, state: SessionState) -> SessionState:
        """
        Reload the store and build a fresh session from it.

        Only the viewport size and the status message survive, so no filtered
        or cached view of the old data outlives a mutation.
        """
        try:
            connections = self.store.load()
        except ConfigError as exc:
            LOG.error("Failed to reload connections: %s", exc)
            state.set_status(f"Error reloading config: {exc}. Please restart GSM.", StatusKind.ERROR)
            return state

        fresh = SessionState.from_connections(connections)
        fresh.set_status(state.status_message, state.status_kind)
        fresh.set_viewport(state.width, state.height)
        return fresh


__all__ = ["AppController"]
