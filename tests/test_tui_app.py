import asyncio

from gsm.config import Connection, ConnectionStore
from gsm.tui.app import GsmTuiApp
from gsm.tui.state import Mode


def drive(app, keys, size=(100, 30), check=None):
    """Run *app* headless, press *keys* and optionally inspect it before it closes."""

    async def scenario():
        async with app.run_test(size=size) as pilot:
            await pilot.pause()
            for key in keys:
                await pilot.press(key)
            if check is not None:
                await pilot.pause()
                check(app)

    asyncio.run(scenario())
    return app.return_value


def test_enter_returns_selected_connection(make_store):
    store = make_store(Connection(name="Echo", key="abc123"), Connection(name="Foxtrot", key="def456"))

    result = drive(GsmTuiApp(store), ["down", "enter"])

    assert result == Connection(name="Foxtrot", key="def456")


def test_q_returns_none(make_store):
    store = make_store(Connection(name="Echo", key="abc123"))

    assert drive(GsmTuiApp(store), ["q"]) is None


def test_add_through_form_persists(make_store, store_path):
    store = make_store()

    drive(GsmTuiApp(store), ["a", "l", "a", "b", "tab", "k", "1", "enter", "q"])

    assert ConnectionStore(store_path).load() == [Connection(name="lab", key="k1")]


def test_tab_moves_form_focus_instead_of_widget_focus(make_store):
    store = make_store()
    seen = {}

    def check(app):
        seen["mode"] = app.session.mode
        seen["focus"] = app.session.form.focus_index
        seen["modal"] = app.modal_panel.display

    drive(GsmTuiApp(store), ["a", "tab", "tab"], check=check)

    assert seen == {"mode": Mode.EDITING, "focus": 2, "modal": True}


def test_narrow_terminal_hides_details(make_store):
    store = make_store(Connection(name="Echo", key="abc123"))
    seen = {}

    def check(app):
        seen["details"] = app.details_panel.display
        seen["width"] = app.session.width

    drive(GsmTuiApp(store), [], size=(40, 20), check=check)

    assert seen == {"details": False, "width": 40}


def test_status_bar_shows_cancelled_delete(make_store):
    store = make_store(Connection(name="Echo", key="abc123"))
    seen = {}

    def check(app):
        seen["status"] = app.session.status_message
        seen["visible"] = app.status_bar.display

    drive(GsmTuiApp(store), ["d", "n"], check=check)

    assert seen == {"status": "Delete cancelled.", "visible": True}
