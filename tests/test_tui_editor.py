from gsm.config import Connection
from gsm.tui.editor import ConnectionAddSession


class ScriptedInput:
    """Helper to feed deterministic answers into ConnectionAddSession."""

    def __init__(self, responses):
        self._responses = list(responses)

    def __call__(self, prompt: str) -> str:
        if not self._responses:
            raise AssertionError(f"No scripted response left for prompt: {prompt}")
        response = self._responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response


def _session(store, responses, dictionary=(), printed=None):
    sink = printed if printed is not None else []
    return ConnectionAddSession(
        store,
        dictionary=dictionary,
        input_func=ScriptedInput(responses),
        print_func=sink.append,
    )


def test_add_with_explicit_name_and_tags(make_store):
    store = make_store()
    session = _session(store, ["Lab", "abc123", " work, ,eu "])

    assert session.run() == Connection(name="Lab", key="abc123", tags=["work", "eu"])


def test_empty_name_is_generated_from_key(make_store, small_dictionary):
    store = make_store()
    printed = []
    session = _session(store, ["", "abc", ""], small_dictionary, printed)

    conn = session.run()

    assert conn.name == "W11W15W4"
    assert conn.tags == []
    assert "Name auto-generated: W11W15W4" in printed


def test_key_is_required(make_store):
    store = make_store()
    printed = []
    session = _session(store, ["Lab", "", "  ", "abc123", ""], printed=printed)

    assert session.run().key == "abc123"
    assert printed.count("GSocket key (-s value) is required.") == 2


def test_taken_name_is_asked_again(make_store):
    store = make_store(Connection(name="Lab", key="old"))
    printed = []
    session = _session(store, ["Lab", "Lab2", "abc123", ""], printed=printed)

    assert session.run().name == "Lab2"
    assert "Connection name 'Lab' already exists." in printed


def test_generated_name_collision_adds_nothing(make_store, small_dictionary):
    store = make_store(Connection(name="W11W15W4", key="other"))
    session = _session(store, ["", "abc", ""], small_dictionary)

    assert session.run() is None


def test_missing_dictionary_falls_back_to_key_prefix(make_store):
    session = _session(make_store(), ["", "abcdefghijk", ""])

    assert session.run().name == "GsConn-abcdefgh"


def test_ctrl_c_cancels(make_store):
    printed = []
    session = _session(make_store(), ["Lab", KeyboardInterrupt()], printed=printed)

    assert session.run() is None
    assert printed[-1] == "\nAdd cancelled."
