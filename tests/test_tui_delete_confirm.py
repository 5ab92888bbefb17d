import pytest

from gsm.tui.delete_confirm import DeleteConfirmation
from gsm.tui.events import KeyEvent


@pytest.mark.parametrize("event", [KeyEvent("y", "y"), KeyEvent("Y", "Y")])
def test_yes_confirms(event):
    assert DeleteConfirmation.decide(event) is True


@pytest.mark.parametrize(
    "event",
    [KeyEvent("n", "n"), KeyEvent("N", "N"), KeyEvent("q", "q"), KeyEvent("escape"), KeyEvent("ctrl+c")],
)
def test_declines(event):
    assert DeleteConfirmation.decide(event) is False


@pytest.mark.parametrize("event", [KeyEvent("x", "x"), KeyEvent("enter"), KeyEvent("down")])
def test_other_keys_are_ignored(event):
    assert DeleteConfirmation.decide(event) is None


def test_render_names_the_connection():
    rendered = DeleteConfirmation(index=0, name="Echo").render().plain

    assert "DELETE Connection: Echo?" in rendered
    assert "Are you sure you want to delete 'Echo'?" in rendered
