from sshdeck.profile import Profile, ProfileField
from sshdeck.profile_store import ProfileStore
from sshdeck.tui.editor import EditorSession, KeyPress, Mode
from sshdeck.tui.view_model import BROWSE_HINT, EDIT_HINT, EMPTY_MESSAGE, build_view_model


def _session(tmp_path, profiles):
    store = ProfileStore(str(tmp_path / "config"), profiles)
    return EditorSession(store, debounce=0), store


def test_browsing_rows_mark_selection(tmp_path):
    session, store = _session(
        tmp_path, [Profile(name="web", hostname="10.0.0.1"), Profile(name="db")]
    )
    store.select(1)

    view = build_view_model(session, store)

    assert view.mode is Mode.BROWSING
    assert [(row.label, row.is_selected) for row in view.rows] == [
        ("web (10.0.0.1)", False),
        ("db", True),
    ]
    assert view.empty_message is None
    assert view.form == []
    assert view.focused_index is None
    assert view.hint == BROWSE_HINT
    assert view.title == f"SSH Hosts ({store.path})"


def test_empty_store_has_no_rows(tmp_path):
    session, store = _session(tmp_path, [])

    view = build_view_model(session, store)

    assert view.rows == []
    assert view.empty_message == EMPTY_MESSAGE


def test_editing_form_lists_every_field(tmp_path):
    session, store = _session(tmp_path, [Profile(name="web", user="deploy")])
    session.handle_key(KeyPress("e", "e"))
    session.handle_key(KeyPress("tab"))
    session.handle_key(KeyPress("tab"))

    view = build_view_model(session, store)

    assert view.mode is Mode.EDITING
    assert [item.label for item in view.form] == [field.label for field in ProfileField]
    assert view.focused_index == 2
    assert view.form[2].is_focused
    assert view.form[2].value == "deploy"
    assert view.form[1].value == ""
    assert not view.form[1].is_set
    assert view.hint == EDIT_HINT


def test_status_is_projected(tmp_path):
    session, store = _session(tmp_path, [Profile(name="web")])
    session.set_status("boom", error=True)

    view = build_view_model(session, store)

    assert view.status == "boom"
    assert view.status_is_error
