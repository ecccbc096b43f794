"""Session state machine for the snippet manager.

Each mode is its own immutable state type carrying only the data that mode
needs, and every transition is looked up in a table keyed by
``(state type, action)``. Nothing in here knows about the terminal toolkit;
the UI decodes key names into :class:`Action` values through
``KEYMAP`` and calls :meth:`StateManager.handle`.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum, IntEnum

logger = logging.getLogger(__name__)

MENU_ITEMS = ["View Snippets", "Add Snippet", "Delete Snippet", "Quit"]


class Action(Enum):
    UP = "up"
    DOWN = "down"
    CONFIRM = "confirm"
    SAVE = "save"
    CANCEL = "cancel"
    QUIT = "quit"


KEYMAP = {
    "up": Action.UP,
    "down": Action.DOWN,
    "enter": Action.CONFIRM,
    "ctrl+s": Action.SAVE,
    "escape": Action.CANCEL,
    "q": Action.QUIT,
}


class AddStep(IntEnum):
    NAME = 0
    LANGUAGE = 1
    CODE = 2


@dataclass(frozen=True)
class MenuState:
    cursor: int = 0

    mode = "menu"


@dataclass(frozen=True)
class ViewState:
    mode = "view"


@dataclass(frozen=True)
class AddState:
    step: AddStep = AddStep.NAME
    name: str = ""
    language: str = ""

    mode = "add"


@dataclass(frozen=True)
class DeleteState:
    selection: int = 0

    mode = "delete"


def _clamp(value, upper):
    return max(0, min(value, upper))


class StateManager:
    def __init__(self, snippet_manager):
        self.snippet_manager = snippet_manager
        self.state = MenuState()
        self.running = True
        self.status_message = None

    @property
    def mode(self):
        return self.state.mode

    @property
    def snippets(self):
        return self.snippet_manager.get_snippets()

    def handle(self, action, text=""):
        """Apply one action. ``text`` is the active input buffer, if any."""
        logger.debug("Action %s, current state: %s", action.value, self.mode)
        self.status_message = None

        if action is Action.QUIT:
            logger.info("Quitting application")
            self.running = False
            return

        if action is Action.CANCEL:
            if not isinstance(self.state, MenuState):
                logger.debug("Returning to menu from %s", self.mode)
                self.state = MenuState()
            return

        transition = self.TRANSITIONS.get((type(self.state), action))
        if transition is not None:
            self.state = transition(self, self.state, text)

    def _persist_failed(self, saved):
        if not saved:
            self.status_message = (
                f"Error saving snippets: {self.snippet_manager.last_error}"
            )

    # menu

    def _menu_move(self, state, delta):
        return replace(state, cursor=_clamp(state.cursor + delta, len(MENU_ITEMS) - 1))

    def _menu_up(self, state, text):
        return self._menu_move(state, -1)

    def _menu_down(self, state, text):
        return self._menu_move(state, 1)

    def _menu_confirm(self, state, text):
        choice = MENU_ITEMS[state.cursor]
        if choice == "View Snippets":
            return ViewState()
        if choice == "Add Snippet":
            return AddState()
        if choice == "Delete Snippet":
            return DeleteState()
        self.running = False
        return state

    # add

    def _add_confirm(self, state, text):
        if state.step is AddStep.NAME:
            return replace(state, step=AddStep.LANGUAGE, name=text)
        if state.step is AddStep.LANGUAGE:
            return replace(state, step=AddStep.CODE, language=text)
        # Enter is a newline while editing code
        return state

    def _add_save(self, state, text):
        if state.step is not AddStep.CODE:
            return state
        saved = self.snippet_manager.add_snippet(state.name, state.language, text)
        self._persist_failed(saved)
        return MenuState()

    # delete

    def _delete_move(self, state, delta):
        upper = len(self.snippets) - 1
        return replace(state, selection=_clamp(state.selection + delta, upper))

    def _delete_up(self, state, text):
        return self._delete_move(state, -1)

    def _delete_down(self, state, text):
        return self._delete_move(state, 1)

    def _delete_confirm(self, state, text):
        if 0 <= state.selection < len(self.snippets):
            saved = self.snippet_manager.delete_snippet(state.selection)
            self._persist_failed(saved)
        return MenuState()

    TRANSITIONS = {
        (MenuState, Action.UP): _menu_up,
        (MenuState, Action.DOWN): _menu_down,
        (MenuState, Action.CONFIRM): _menu_confirm,
        (AddState, Action.CONFIRM): _add_confirm,
        (AddState, Action.SAVE): _add_save,
        (DeleteState, Action.UP): _delete_up,
        (DeleteState, Action.DOWN): _delete_down,
        (DeleteState, Action.CONFIRM): _delete_confirm,
    }
