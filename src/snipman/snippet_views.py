"""Rendering of each session state as rich text.

These are pure reads of the state and the snippet list; they never touch the
store.
"""

from rich.text import Text

from snipman.state_manager import MENU_ITEMS, AddStep

ITEM_INDENT = "    "
SEPARATOR = "----------------------"

ADD_PROMPTS = {
    AddStep.NAME: "Enter snippet name",
    AddStep.LANGUAGE: "Enter snippet language",
    AddStep.CODE: "Enter snippet code",
}

HELP_TEXT = {
    "menu": "↑/↓ navigate • enter select • q quit",
    "view": "Press 'esc' to return to menu",
    "add": "Enter to continue, Esc to cancel",
    "delete": "Use arrow keys to select, Enter to delete, 'esc' to cancel",
}


def render_title(title, theme):
    text = Text("  ")
    text.append(f" {title} ", style=theme.title_style)
    text.append("\n\n")
    return text


def render_menu(state, theme):
    text = render_title("Snippet Manager", theme)
    for index, item in enumerate(MENU_ITEMS):
        if index == state.cursor:
            text.append(f"  > {item}\n", style=f"bold {theme.selection}")
        else:
            text.append(f"{ITEM_INDENT}{item}\n", style=theme.text)
    return text


def render_view(snippets, theme):
    text = render_title("View Snippets", theme)
    if not snippets:
        text.append(f"{ITEM_INDENT}No snippets yet.\n", style=theme.muted)
    for snippet in snippets:
        header = (
            f"ID: {snippet.id}\n"
            f"Name: {snippet.name}\n"
            f"Language: {snippet.language}\n"
            f"Code:\n"
        )
        for line in header.splitlines():
            text.append(f"{ITEM_INDENT}{line}\n", style=theme.text)
        for line in snippet.code.split("\n"):
            text.append(f"{ITEM_INDENT}{line}\n", style=theme.text)
        text.append(f"{ITEM_INDENT}{SEPARATOR}\n", style=theme.muted)
    return text


def render_add(state, theme):
    text = render_title("Add Snippet", theme)
    text.append(f"{ITEM_INDENT}{ADD_PROMPTS[state.step]}:\n", style=theme.text)
    return text


def render_delete(snippets, selection, theme):
    text = render_title("Delete Snippet", theme)
    if not snippets:
        text.append(f"{ITEM_INDENT}No snippets to delete.\n", style=theme.muted)
        return text

    id_width = len(str(max(snippet.id for snippet in snippets)))
    for index, snippet in enumerate(snippets):
        style = theme.selection if index == selection else theme.text
        text.append(f"{ITEM_INDENT}{snippet.id:<{id_width}}: {snippet.name}\n", style=style)
    return text


def render_state(state, snippets, theme):
    if state.mode == "view":
        return render_view(snippets, theme)
    if state.mode == "add":
        return render_add(state, theme)
    if state.mode == "delete":
        return render_delete(snippets, state.selection, theme)
    return render_menu(state, theme)


def render_help(state, theme):
    if state.mode == "add" and state.step is AddStep.CODE:
        message = "(Press Ctrl+S to save, Esc to cancel)"
    else:
        message = HELP_TEXT[state.mode]
    return Text(f"{ITEM_INDENT}{message}", style=theme.muted)


def render_status(message, theme):
    if not message:
        return Text("")
    return Text(f"{ITEM_INDENT}{message}", style=f"bold {theme.error}")
