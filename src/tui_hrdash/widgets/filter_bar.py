"""Filter bar: search box, filter selects, due-date range and sort indicator."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.message import Message
from textual.widgets import Input, Select, Static

from tui_hrdash.filters import parse_date
from tui_hrdash.models import (
    ME,
    OVERDUE,
    PRIORITIES,
    SORT_ASC,
    SORT_FIELDS,
    STATUS_LABELS,
    Priority,
    Status,
    UserRecord,
)

STATUS_OPTIONS: list[tuple[str, str]] = [
    (STATUS_LABELS[s], s.value) for s in Status
] + [("Overdue", OVERDUE)]

PRIORITY_OPTIONS: list[tuple[str, str]] = [(PRIORITIES[p].label, p.value) for p in Priority]

# Select widget id → filter dimension
_SELECTS = {
    "filter-status": "status",
    "filter-priority": "priority",
    "filter-assignee": "assignedTo",
    "filter-department": "department",
}
# Input widget id → filter dimension
_DATE_INPUTS = {
    "filter-due-from": "dueDateFrom",
    "filter-due-to": "dueDateTo",
}


class FilterBar(Container):
    """Live filter controls.

    Typing in the search box posts :class:`SearchChanged` on every keystroke
    (the controller debounces). Other controls post :class:`FilterChanged`.
    """

    class SearchChanged(Message):
        def __init__(self, text: str) -> None:
            super().__init__()
            self.text = text

    class FilterChanged(Message):
        def __init__(self, name: str, value: Any) -> None:
            super().__init__()
            self.name = name
            self.value = value

    DEFAULT_CSS = """
    FilterBar {
        height: auto;
        padding: 0 1;
        background: $surface;
        border: round $surface-lighten-2;
        border-title-align: left;
    }
    FilterBar:focus-within {
        border: round $accent;
        border-title-color: $accent;
    }
    FilterBar Horizontal {
        height: auto;
    }
    FilterBar #filter-search {
        width: 2fr;
    }
    FilterBar Select {
        width: 1fr;
    }
    FilterBar .date-input {
        width: 16;
    }
    FilterBar #filter-bar-sort {
        color: $text-muted;
        height: 1;
    }
    """

    def compose(self) -> ComposeResult:
        with Horizontal(id="filter-row"):
            yield Input(placeholder="Search tasks...", id="filter-search")
            yield Select(STATUS_OPTIONS, prompt="All Statuses", id="filter-status")
            yield Select(PRIORITY_OPTIONS, prompt="All Priorities", id="filter-priority")
            yield Select([("Assigned to Me", ME)], prompt="All Assignees", id="filter-assignee")
            yield Select([], prompt="All Departments", id="filter-department")
            yield Input(placeholder="Due from", id="filter-due-from", classes="date-input")
            yield Input(placeholder="Due to", id="filter-due-to", classes="date-input")
        yield Static("", id="filter-bar-sort")

    def on_mount(self) -> None:
        self.border_title = "Filters"

    def set_directory(self, users: list[UserRecord], departments: list[str]) -> None:
        """Fill the assignee and department selects from the user directory."""
        with self.prevent(Select.Changed):
            self.query_one("#filter-assignee", Select).set_options(
                [("Assigned to Me", ME)] + [(u.display_name, u.email) for u in users]
            )
            self.query_one("#filter-department", Select).set_options(
                [(d, d) for d in departments]
            )

    def show_state(self, filters: Mapping[str, Any], sort_by: str, sort_order: str) -> None:
        """Reflect controller state without posting change messages."""
        with self.prevent(Input.Changed, Select.Changed):
            search = self.query_one("#filter-search", Input)
            if search.value != filters.get("search", ""):
                search.value = filters.get("search", "")
            for widget_id, name in _SELECTS.items():
                select = self.query_one(f"#{widget_id}", Select)
                value = filters.get(name)
                if value is None:
                    if not select.is_blank():
                        select.clear()
                elif select.value != value:
                    try:
                        select.value = value
                    except Exception:
                        select.clear()
            for widget_id, name in _DATE_INPUTS.items():
                inp = self.query_one(f"#{widget_id}", Input)
                value = str(filters.get(name) or "")
                if inp.value != value:
                    inp.value = value
        arrow = "↑" if sort_order == SORT_ASC else "↓"
        active = sum(1 for v in filters.values() if v)
        self.query_one("#filter-bar-sort", Static).update(
            f"Sort: {SORT_FIELDS.get(sort_by, sort_by)} {arrow}"
            + (f"   [b]{active}[/b] filter(s) active  (r: clear)" if active else "")
        )

    def focus_search(self) -> None:
        self.query_one("#filter-search", Input).focus()

    def on_input_changed(self, event: Input.Changed) -> None:
        event.stop()
        widget_id = event.input.id or ""
        if widget_id == "filter-search":
            self.post_message(self.SearchChanged(event.value))
        elif widget_id in _DATE_INPUTS:
            text = event.value.strip()
            # Only complete dates (or an emptied box) change the filter.
            if not text or parse_date(text) is not None:
                self.post_message(self.FilterChanged(_DATE_INPUTS[widget_id], text or None))

    def on_select_changed(self, event: Select.Changed) -> None:
        event.stop()
        name = _SELECTS.get(event.select.id or "")
        if name is None:
            return
        value = None if event.value is Select.BLANK else event.value
        self.post_message(self.FilterChanged(name, value))
