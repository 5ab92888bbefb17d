import io
import logging
import os

import pytest
from rich.console import Console

from gsm import main as gsm_main
from gsm.config import Connection, ConnectionStore
from gsm.runner import LaunchError

real_setup_logging = gsm_main.setup_logging


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(gsm_main, "setup_logging", lambda *args, **kwargs: None)


def _console():
    return Console(file=io.StringIO(), highlight=False, width=200)


def test_version(capsys):
    assert gsm_main.main(["version"]) == 0
    assert capsys.readouterr().out.strip() == "gsm 1.0.0"


def test_interactive_loop_launches_and_records_usage(make_store, store_path):
    store = make_store(Connection(name="Echo", key="abc123"))
    selections = [Connection(name="Echo", key="abc123"), None]
    launched = []
    printed = []

    rc = gsm_main.run_interactive(
        store,
        app_runner=lambda _store: selections.pop(0),
        launcher=launched.append,
        print_func=printed.append,
    )

    assert rc == 0
    assert [conn.name for conn in launched] == ["Echo"]
    assert printed == [gsm_main.RETURN_MESSAGE, gsm_main.GOODBYE_MESSAGE]
    [conn] = ConnectionStore(store_path).load()
    assert conn.usage == 1
    assert conn.last_connected is not None


def test_interactive_loop_survives_failed_session(make_store):
    store = make_store(Connection(name="Echo", key="abc123"))
    selections = [Connection(name="Echo", key="abc123"), None]
    printed = []

    def failing_launcher(conn):
        raise LaunchError("gs-netcat exited with code 255")

    rc = gsm_main.run_interactive(
        store,
        app_runner=lambda _store: selections.pop(0),
        launcher=failing_launcher,
        print_func=printed.append,
    )

    assert rc == 0
    assert printed[0] == gsm_main.RETURN_MESSAGE


def test_interactive_loop_fails_on_broken_store(store_path, capsys):
    os.makedirs(os.path.dirname(store_path))
    with open(store_path, "w") as f:
        f.write("[broken")

    rc = gsm_main.run_interactive(ConnectionStore(store_path), app_runner=lambda _store: None)

    assert rc == 1
    assert "Critical error loading config" in capsys.readouterr().err


def test_import_secret(make_store, store_path, small_dictionary):
    console = _console()

    rc = gsm_main.run_import(make_store(), secret="abc#lab", dictionary=small_dictionary, console=console)

    assert rc == 0
    output = console.file.getvalue()
    assert "[ PREPARED ]" in output
    assert "[ SUCCESS ]" in output
    assert ConnectionStore(store_path).load() == [Connection(name="W11W15W4", key="abc", tags=["lab"])]


def test_import_secret_collision_exits_with_error(make_store, small_dictionary):
    store = make_store(Connection(name="W11W15W4", key="other"))

    rc = gsm_main.run_import(store, secret="abc", dictionary=small_dictionary, console=_console())

    assert rc == 1
    assert len(store) == 1


def test_import_file_with_nothing_new(make_store, small_dictionary, tmp_path):
    path = tmp_path / "keys.txt"
    path.write_text("# only a comment\n", encoding="utf-8")
    console = _console()

    rc = gsm_main.run_import(make_store(), path=str(path), dictionary=small_dictionary, console=console)

    assert rc == 0
    output = console.file.getvalue()
    assert "[ SKIPPED ]" in output
    assert "[ INFO ] No new connections were imported." in output


def test_import_requires_exactly_one_source():
    with pytest.raises(SystemExit):
        gsm_main.main(["import"])
    with pytest.raises(SystemExit):
        gsm_main.main(["import", "--secret", "abc", "--file", "keys.txt"])


def test_import_command_uses_config_option(store_path):
    rc = gsm_main.main(["--config", store_path, "import", "--secret", "abc123#work"])

    assert rc == 0
    [conn] = ConnectionStore(store_path).load()
    assert conn.key == "abc123"
    assert conn.tags == ["work"]


def test_config_command_adds_connection(make_store, store_path):
    answers = iter(["Lab", "abc123", "work"])
    printed = []

    rc = gsm_main.run_config(make_store(), input_func=lambda prompt: next(answers), print_func=printed.append)

    assert rc == 0
    assert ConnectionStore(store_path).load() == [Connection(name="Lab", key="abc123", tags=["work"])]
    assert printed[-1].startswith("Config saved successfully")


def test_setup_logging_writes_log_file(tmp_path):
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    try:
        real_setup_logging("DEBUG", str(tmp_path / "logs"))
        logging.getLogger("gsm.test").info("hello")
        for handler in root.handlers:
            handler.flush()
        assert os.path.exists(tmp_path / "logs" / "gsm.log")
    finally:
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
        for handler in saved_handlers:
            root.addHandler(handler)
        root.setLevel(saved_level)
