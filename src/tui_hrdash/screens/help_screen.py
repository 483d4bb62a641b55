"""Help modal screen showing keybindings."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import OptionList, Static
from textual.widgets.option_list import Option


HELP_ITEMS: list[tuple[str, str, str]] = [
    # (key_display, description, action_name_or_empty)
    # -- Common --
    ("↑ / ↓", "Previous / next task", ""),
    ("Enter", "Edit highlighted task", "edit_task"),
    ("Esc", "Cancel / Close modal", ""),
    ("Ctrl+S", "Save", "save"),
    ("?", "This help", ""),
    ("q", "Quit", "quit_app"),
    # -- Views --
    ("1 2 3 4", "Board / List / Calendar / Timeline", ""),
    ("[ / ]", "Previous / Next view", ""),
    ("T", "Toggle theme (dark/light)", "cycle_theme"),
    # -- Tasks --
    ("n", "New task", "add_task"),
    ("e", "Edit task", "edit_task"),
    ("d", "Delete task", "delete_task"),
    ("s", "Change status", "change_status"),
    # -- Selection --
    ("Space", "Select / deselect task", "toggle_select"),
    ("a / A", "Select / deselect all visible", "select_all"),
    ("b", "Bulk actions on selection", "bulk_actions"),
    # -- Filter & Sort --
    ("/", "Search", "focus_search"),
    ("m", "Assigned to me", "filter_mine"),
    ("r", "Clear filters", "clear_filters"),
    ("o / O", "Next sort field / toggle order", ""),
    # -- Board --
    ("h / l", "Move card to previous / next lane", ""),
    ("Mouse drag", "Drop a card on another lane", ""),
    # -- Calendar --
    ("< / >", "Previous / next month", ""),
    ("t", "Current month", "go_today"),
    # -- Export --
    ("Ctrl+E", "Export visible tasks (JSON/CSV)", "export"),
    # -- CLI --
    ("--demo", "Launch demo mode (tui-hrdash --demo)", ""),
    ("Cmd Palette", "Init theme (copy default to project)", "init_theme"),
]


class HelpScreen(ModalScreen[str]):
    """Modal screen showing keybindings as a selectable list."""

    BINDINGS = [
        ("escape", "close", "Close"),
        ("question_mark", "close", "Close"),
    ]

    DEFAULT_CSS = """
    HelpScreen {
        align: center middle;
    }
    #help-container {
        width: 80;
        max-height: 80%;
        background: $surface;
        border: thick $primary;
        padding: 1 2;
    }
    #help-title {
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
    }
    #help-list {
        height: auto;
        max-height: 100%;
    }
    """

    def compose(self) -> ComposeResult:
        with VerticalScroll(id="help-container"):
            yield Static("[bold]Keybindings[/bold]  (Enter to execute)", id="help-title")
            yield OptionList(
                *(
                    Option(f"  {key_display:<14} {desc}", id=action or None)
                    for key_display, desc, action in HELP_ITEMS
                ),
                id="help-list",
            )

    def on_mount(self) -> None:
        self.query_one("#help-list", OptionList).focus()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.dismiss(event.option.id or "")

    def action_close(self) -> None:
        self.dismiss("")
