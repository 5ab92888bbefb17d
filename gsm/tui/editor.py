from __future__ import annotations

from typing import Callable, Optional, Sequence

from gsm.config import Connection, ConnectionStore
from gsm.mnemonic import DEFAULT_WORD_COUNT, fallback_name, generate_mnemonic
from gsm.tui.edit_form import parse_tags

PromptFunc = Callable[[str], str]
PrintFunc = Callable[[str], None]


class ConnectionAddSession:
    """
    Line-based prompt for adding a connection without starting the full-screen UI.

    The session interacts through ``input_func``/``print_func`` so it can run both interactively
    and under tests. It only builds the record; saving is left to the caller.
    """

    def __init__(
        self,
        store: ConnectionStore,
        *,
        dictionary: Sequence[str] = (),
        word_count: int = DEFAULT_WORD_COUNT,
        input_func: PromptFunc = input,
        print_func: PrintFunc = print,
    ):
        self.store = store
        self.dictionary = dictionary
        self.word_count = word_count
        self.input = input_func
        self.print = print_func

    def run(self) -> Optional[Connection]:
        """
        Prompt for a new connection. Returns the record or ``None`` on cancel.
        """

        try:
            return self._run()
        except (KeyboardInterrupt, EOFError):
            self.print("\nAdd cancelled.")
            return None

    def _run(self) -> Optional[Connection]:
        self.print("\n--- Add connection ---")
        self.print("Leave the name empty to generate one from the key, Ctrl+C to abort.\n")

        name = self._ask_name()
        key = self._ask_text("GSocket key (-s value)", required=True)
        tags = parse_tags(self._ask_text("Tags (comma separated, e.g., work,personal)"))

        if not name:
            name = self._generate_name(key)
            if self._name_taken(name):
                self.print(f"Auto-generated name '{name}' already exists. Nothing was added.")
                return None
            self.print(f"Name auto-generated: {name}")

        return Connection(name=name, key=key, tags=tags)

    # ------------------------------------------------------------------ helpers
    def _ask_name(self) -> str:
        while True:
            name = self._ask_text("Connection name (optional)")
            if name and self._name_taken(name):
                self.print(f"Connection name '{name}' already exists.")
                continue
            return name

    def _ask_text(self, label: str, *, required: bool = False) -> str:
        prompt = f"{label}: "
        while True:
            resp = self.input(prompt)
            if resp is None:
                resp = ""
            resp = resp.strip()
            if resp or not required:
                return resp
            self.print(f"{label} is required.")

    def _name_taken(self, name: str) -> bool:
        return any(conn.name == name for conn in self.store.get_current())

    def _generate_name(self, key: str) -> str:
        try:
            return generate_mnemonic(key, self.word_count, self.dictionary)
        except ValueError as exc:
            self.print(f"Could not generate a name ({exc}); using key prefix.")
            return fallback_name(key)


__all__ = ["ConnectionAddSession"]
