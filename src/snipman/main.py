import argparse
import logging
import sys

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import VerticalScroll
from textual.widgets import Input, Static, TextArea

from snipman.settings_manager import SettingsManager
from snipman.snippet_manager import FIELD_PATTERN, SnippetManager
from snipman.snippet_views import render_help, render_state, render_status
from snipman.state_manager import KEYMAP, Action, AddStep, StateManager
from snipman.theme_manager import ThemeManager

# Application constants
APP_NAME = "Snippet Manager"
APP_VERSION = "1.0.0"

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

FIELD_PLACEHOLDERS = {
    AddStep.NAME: "Name",
    AddStep.LANGUAGE: "Language",
}

# Cancel and save must win over whatever widget has focus
PRIORITY_ACTIONS = {Action.CANCEL, Action.SAVE}

logger = logging.getLogger(__name__)


def build_bindings():
    return [
        Binding(
            key,
            f"dispatch('{action.value}')",
            action.value.title(),
            show=False,
            priority=action in PRIORITY_ACTIONS,
        )
        for key, action in KEYMAP.items()
    ]


class SnippetManagerApp(App):
    TITLE = APP_NAME
    AUTO_FOCUS = None
    ENABLE_COMMAND_PALETTE = False

    CSS = """
    #body-scroll {
        height: 1fr;
    }
    #field-input {
        margin: 0 4;
        width: 60;
    }
    #code-area {
        margin: 0 4;
    }
    #status {
        height: auto;
    }
    #help {
        height: auto;
        margin: 1 0;
    }
    """

    BINDINGS = build_bindings()

    def __init__(self, snippet_manager, snippet_theme, editor_width=40,
                 editor_height=10, show_line_numbers=True):
        super().__init__()
        self.session = StateManager(snippet_manager)
        # App.theme is textual's own theme name, keep ours separate
        self.snippet_theme = snippet_theme
        self.editor_width = editor_width
        self.editor_height = editor_height
        self.show_line_numbers = show_line_numbers

    def compose(self) -> ComposeResult:
        body_scroll = VerticalScroll(id="body-scroll")
        body_scroll.can_focus = False
        with body_scroll:
            yield Static(id="body")
            yield Input(id="field-input", restrict=FIELD_PATTERN)
            yield TextArea(id="code-area", show_line_numbers=self.show_line_numbers)
        yield Static(id="status")
        yield Static(id="help")

    def on_mount(self) -> None:
        code_area = self.query_one("#code-area", TextArea)
        code_area.styles.width = self.editor_width
        code_area.styles.height = self.editor_height
        self.sync_widgets(None)
        self.refresh_view()

    def action_dispatch(self, action_name):
        """Feed one decoded key action to the session"""
        action = Action(action_name)
        previous = self.session.state
        self.session.handle(action, self.current_text(action))

        if not self.session.running:
            self.exit()
            return

        self.sync_widgets(previous)
        self.refresh_view()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self.action_dispatch(Action.CONFIRM.value)

    def current_text(self, action):
        """Text of the input widget the action commits, if any"""
        if self.session.mode != "add":
            return ""
        if action is Action.SAVE:
            return self.query_one("#code-area", TextArea).text
        return self.query_one("#field-input", Input).value

    def sync_widgets(self, previous):
        state = self.session.state
        field_input = self.query_one("#field-input", Input)
        code_area = self.query_one("#code-area", TextArea)

        in_add = state.mode == "add"
        field_input.display = in_add and state.step is not AddStep.CODE
        code_area.display = in_add and state.step is AddStep.CODE

        if not in_add:
            self.screen.set_focus(None)
            return

        entered_step = (
            previous is None or previous.mode != "add" or previous.step != state.step
        )
        if not entered_step:
            return

        if state.step is AddStep.CODE:
            code_area.load_text("")
            code_area.focus()
        else:
            field_input.value = ""
            field_input.placeholder = FIELD_PLACEHOLDERS[state.step]
            field_input.focus()

    def refresh_view(self):
        state = self.session.state
        theme = self.snippet_theme
        self.query_one("#body", Static).update(
            render_state(state, self.session.snippets, theme)
        )
        self.query_one("#status", Static).update(
            render_status(self.session.status_message, theme)
        )
        self.query_one("#help", Static).update(render_help(state, theme))


def setup_logging(log_file):
    """Send the package's logs to a file, the terminal belongs to the UI"""
    handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger = logging.getLogger("snipman")
    package_logger.setLevel(logging.DEBUG)
    package_logger.addHandler(handler)
    return handler


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="snipman",
        description="Keep short code snippets in a local file from the terminal",
    )
    parser.add_argument(
        "--file",
        help="Snippet store to use (default: snippets.txt in the working directory)",
    )
    parser.add_argument(
        "--log-file",
        help="Where to write the debug log (default: debug.log)",
    )
    parser.add_argument(
        "--theme",
        choices=sorted(ThemeManager.get_themes()),
        help="Colour theme (default: Default)",
    )
    parser.add_argument(
        "--settings",
        help="Settings file (default: ~/.snipman_settings.json)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {APP_VERSION}",
    )
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    settings_manager = SettingsManager(args.settings)
    settings_manager.override(
        snippets_file=args.file,
        log_file=args.log_file,
        theme=args.theme,
    )

    try:
        setup_logging(settings_manager.get_log_file())
    except OSError as e:
        print(f"Error initializing: failed to open log file: {e}", file=sys.stderr)
        return 1

    snippet_manager = SnippetManager(settings_manager.get_snippets_file())
    app = SnippetManagerApp(
        snippet_manager,
        ThemeManager.get_theme(settings_manager.get_theme()),
        editor_width=settings_manager.get_setting("editor_width", 40),
        editor_height=settings_manager.get_setting("editor_height", 10),
        show_line_numbers=settings_manager.get_setting("show_line_numbers", True),
    )

    try:
        app.run()
    except Exception as e:
        logger.exception("Terminal session failed")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return app.return_code or 0


if __name__ == "__main__":
    sys.exit(main())
