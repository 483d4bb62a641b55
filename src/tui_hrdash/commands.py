"""Command Palette provider for TUI HR Dashboard."""

from __future__ import annotations

from dataclasses import dataclass

from textual.command import Hit, Hits, Provider


@dataclass(frozen=True)
class CommandDef:
    """A single command entry for the palette."""

    display: str
    action: str
    help: str = ""
    category: str = ""
    context: str = ""  # "" = always, otherwise a view mode value


COMMANDS: list[CommandDef] = [
    # -- File --
    CommandDef("Save", "save", "Save tasks (Ctrl+S)", "File"),
    CommandDef("Export", "export", "Export visible tasks to JSON/CSV (Ctrl+E)", "File"),
    CommandDef("Init Theme", "init_theme", "Copy default theme to project (.tui-hrdash/theme.yaml)", "File"),
    CommandDef("Quit", "quit_app", "Quit application (q)", "File"),
    # -- Tasks --
    CommandDef("New Task", "add_task", "Create a task (n)", "Tasks"),
    CommandDef("Edit Task", "edit_task", "Edit the highlighted task (e)", "Tasks"),
    CommandDef("Delete Task", "delete_task", "Delete the highlighted task (d)", "Tasks"),
    CommandDef("Change Status", "change_status", "Pick a new status for the task (s)", "Tasks"),
    # -- Selection --
    CommandDef("Toggle Selection", "toggle_select", "Select/deselect the task (Space)", "Selection"),
    CommandDef("Select All Visible", "select_all", "Select every visible task (a)", "Selection"),
    CommandDef("Deselect All Visible", "deselect_all", "Deselect every visible task (A)", "Selection"),
    CommandDef("Bulk Actions", "bulk_actions", "Change status or delete the selection (b)", "Selection"),
    # -- View --
    CommandDef("Board View", "show_board", "Switch to the board (1)", "View"),
    CommandDef("List View", "show_list", "Switch to the list (2)", "View"),
    CommandDef("Calendar View", "show_calendar", "Switch to the calendar (3)", "View"),
    CommandDef("Timeline View", "show_timeline", "Switch to the timeline (4)", "View"),
    CommandDef("Previous View", "prev_view", "Switch to previous view ([)", "View"),
    CommandDef("Next View", "next_view", "Switch to next view (])", "View"),
    CommandDef("Cycle Theme", "cycle_theme", "Switch between dark and light (T)", "View"),
    CommandDef("Help", "help", "Show keybindings (?)", "View"),
    # -- Filter & Sort --
    CommandDef("Search", "focus_search", "Focus the search box (/)", "Filter"),
    CommandDef("Clear Filters", "clear_filters", "Reset every filter (r)", "Filter"),
    CommandDef("Assigned to Me", "filter_mine", "Show only my tasks (m)", "Filter"),
    CommandDef("Cycle Sort Field", "cycle_sort", "Next sort field (o)", "Filter"),
    CommandDef("Toggle Sort Order", "toggle_sort_order", "Ascending/descending (O)", "Filter"),
    # -- Board (context-dependent) --
    CommandDef("Board: Move Card Left", "move_left", "Move card to previous lane (h)", "Board", "board"),
    CommandDef("Board: Move Card Right", "move_right", "Move card to next lane (l)", "Board", "board"),
    # -- Calendar (context-dependent) --
    CommandDef("Calendar: Previous Month", "prev_month", "Show previous month (<)", "Calendar", "calendar"),
    CommandDef("Calendar: Next Month", "next_month", "Show next month (>)", "Calendar", "calendar"),
    CommandDef("Calendar: Today", "go_today", "Jump to the current month (t)", "Calendar", "calendar"),
]


class HRCommandProvider(Provider):
    """Textual Command Palette provider for dashboard actions."""

    @property
    def _current_view(self) -> str:
        controller = getattr(self.app, "controller", None)
        return controller.current_view.value if controller is not None else ""

    def _visible_commands(self) -> list[CommandDef]:
        view = self._current_view
        return [cmd for cmd in COMMANDS if not cmd.context or cmd.context == view]

    async def discover(self) -> Hits:
        """Yield all commands available in the current context."""
        for cmd in self._visible_commands():
            yield Hit(
                1.0,
                cmd.display,
                self._make_callback(cmd.action),
                help=cmd.help,
            )

    async def search(self, query: str) -> Hits:
        """Search commands with fuzzy matching."""
        query = query.lower()
        for cmd in self._visible_commands():
            searchable = f"{cmd.display} {cmd.help} {cmd.category}".lower()
            if self._fuzzy_match(query, searchable):
                yield Hit(
                    self._score(query, cmd.display.lower()),
                    cmd.display,
                    self._make_callback(cmd.action),
                    help=cmd.help,
                )

    def _make_callback(self, action: str):
        """Create a callback that runs the given action on the app."""
        async def callback() -> None:
            await self.app.run_action(action)
        return callback

    @staticmethod
    def _fuzzy_match(query: str, text: str) -> bool:
        """Check if all characters of query appear in order in text."""
        it = iter(text)
        return all(ch in it for ch in query)

    @staticmethod
    def _score(query: str, text: str) -> float:
        """Score a match: higher is better (closer to 1.0)."""
        if not query:
            return 0.5
        if text == query:
            return 1.0
        if text.startswith(query):
            return 0.9
        if query in text:
            return 0.8
        return 0.7
