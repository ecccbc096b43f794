from snipman.snippet_manager import Snippet, SnippetManager
from snipman.state_manager import (
    KEYMAP,
    Action,
    AddState,
    AddStep,
    DeleteState,
    MenuState,
    StateManager,
    ViewState,
)


class _CountingSnippetManager(SnippetManager):
    def __init__(self, file_path, snippets=()):
        super().__init__(file_path)
        self.snippets = list(snippets)
        self.saves = 0

    def save_snippets(self):
        self.saves += 1
        return super().save_snippets()


def _make_session(tmp_path, *snippets):
    manager = _CountingSnippetManager(str(tmp_path / "snippets.txt"), snippets)
    return StateManager(manager), manager


def _three_snippets():
    return [
        Snippet(id=1, name="one", language="go", code="1"),
        Snippet(id=2, name="two", language="go", code="2"),
        Snippet(id=3, name="three", language="go", code="3"),
    ]


def _open(session, item_index):
    for _ in range(item_index):
        session.handle(Action.DOWN)
    session.handle(Action.CONFIRM)


def test_keymap_decodes_raw_keys():
    assert KEYMAP["enter"] is Action.CONFIRM
    assert KEYMAP["escape"] is Action.CANCEL
    assert KEYMAP["ctrl+s"] is Action.SAVE
    assert KEYMAP["q"] is Action.QUIT
    assert "x" not in KEYMAP


def test_starts_in_menu(tmp_path):
    session, _ = _make_session(tmp_path)

    assert session.state == MenuState(cursor=0)
    assert session.mode == "menu"
    assert session.running


def test_menu_cursor_is_clamped(tmp_path):
    session, _ = _make_session(tmp_path)

    session.handle(Action.UP)
    assert session.state.cursor == 0

    for _ in range(10):
        session.handle(Action.DOWN)
    assert session.state.cursor == 3


def test_menu_opens_each_mode(tmp_path):
    session, _ = _make_session(tmp_path)

    _open(session, 0)
    assert session.state == ViewState()

    session.handle(Action.CANCEL)
    _open(session, 1)
    assert session.state == AddState(step=AddStep.NAME)

    session.handle(Action.CANCEL)
    _open(session, 2)
    assert session.state == DeleteState(selection=0)


def test_menu_quit_item_stops_session(tmp_path):
    session, _ = _make_session(tmp_path)

    _open(session, 3)

    assert not session.running


def test_quit_works_from_any_state(tmp_path):
    session, _ = _make_session(tmp_path)
    _open(session, 2)

    session.handle(Action.QUIT)

    assert not session.running


def test_cancel_in_menu_is_noop(tmp_path):
    session, _ = _make_session(tmp_path)
    session.handle(Action.DOWN)

    session.handle(Action.CANCEL)

    assert session.state == MenuState(cursor=1)


def test_add_wizard_collects_fields_in_order(tmp_path):
    session, manager = _make_session(tmp_path)
    _open(session, 1)

    session.handle(Action.CONFIRM, "hello")
    assert session.state == AddState(step=AddStep.LANGUAGE, name="hello")

    session.handle(Action.CONFIRM, "python")
    assert session.state == AddState(
        step=AddStep.CODE, name="hello", language="python"
    )

    session.handle(Action.SAVE, "print(1)")

    assert session.state == MenuState()
    assert manager.get_snippets() == [
        Snippet(id=1, name="hello", language="python", code="print(1)")
    ]
    assert manager.saves == 1
    reloaded = SnippetManager(str(tmp_path / "snippets.txt"))
    assert reloaded.get_snippets() == manager.get_snippets()


def test_save_before_code_step_is_ignored(tmp_path):
    session, manager = _make_session(tmp_path)
    _open(session, 1)

    session.handle(Action.SAVE, "too early")
    assert session.state == AddState(step=AddStep.NAME)

    session.handle(Action.CONFIRM, "name")
    session.handle(Action.SAVE, "still too early")

    assert session.state == AddState(step=AddStep.LANGUAGE, name="name")
    assert manager.get_snippets() == []
    assert manager.saves == 0


def test_confirm_on_code_step_does_not_commit(tmp_path):
    session, manager = _make_session(tmp_path)
    _open(session, 1)
    session.handle(Action.CONFIRM, "n")
    session.handle(Action.CONFIRM, "l")

    session.handle(Action.CONFIRM, "code")

    assert session.state.step is AddStep.CODE
    assert manager.saves == 0


def test_cancel_discards_draft(tmp_path):
    session, manager = _make_session(tmp_path)
    _open(session, 1)
    session.handle(Action.CONFIRM, "draft")

    session.handle(Action.CANCEL)
    assert session.state == MenuState()

    _open(session, 1)
    assert session.state == AddState()
    assert manager.saves == 0


def test_view_never_mutates(tmp_path):
    session, manager = _make_session(tmp_path, *_three_snippets())
    _open(session, 0)

    for action in (Action.UP, Action.DOWN, Action.CONFIRM, Action.SAVE):
        session.handle(action, "text")

    assert session.state == ViewState()
    assert manager.get_snippets() == _three_snippets()
    assert manager.saves == 0


def test_delete_selection_is_clamped(tmp_path):
    session, _ = _make_session(tmp_path, *_three_snippets())
    _open(session, 2)

    session.handle(Action.UP)
    assert session.state.selection == 0

    for _ in range(5):
        session.handle(Action.DOWN)
    assert session.state.selection == 2


def test_delete_removes_selected_and_frees_id(tmp_path):
    session, manager = _make_session(tmp_path, *_three_snippets())
    _open(session, 2)
    session.handle(Action.DOWN)
    session.handle(Action.DOWN)

    session.handle(Action.CONFIRM)

    assert session.state == MenuState()
    assert [s.id for s in manager.get_snippets()] == [1, 2]
    assert manager.generate_id() == 3
    assert manager.saves == 1


def test_delete_on_empty_collection_is_noop(tmp_path):
    session, manager = _make_session(tmp_path)
    _open(session, 2)

    session.handle(Action.DOWN)
    assert session.state.selection == 0

    session.handle(Action.CONFIRM)

    assert session.state == MenuState()
    assert manager.saves == 0
    assert not (tmp_path / "snippets.txt").exists()


def test_delete_cancel_keeps_collection(tmp_path):
    session, manager = _make_session(tmp_path, *_three_snippets())
    _open(session, 2)
    session.handle(Action.DOWN)

    session.handle(Action.CANCEL)

    assert session.state == MenuState()
    assert len(manager.get_snippets()) == 3
    assert manager.saves == 0


def test_failed_save_is_reported_and_kept(tmp_path):
    manager = _CountingSnippetManager(str(tmp_path / "nope" / "snippets.txt"))
    session = StateManager(manager)
    _open(session, 1)
    session.handle(Action.CONFIRM, "hello")
    session.handle(Action.CONFIRM, "python")

    session.handle(Action.SAVE, "print(1)")

    assert session.status_message.startswith("Error saving snippets:")
    assert [s.name for s in manager.get_snippets()] == ["hello"]
    assert session.running

    session.handle(Action.DOWN)
    assert session.status_message is None
