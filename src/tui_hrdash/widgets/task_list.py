"""Task list view widget based on DataTable."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Container
from textual.message import Message
from textual.widgets import DataTable, Static

from rich.text import Text

from tui_hrdash import theme
from tui_hrdash.models import STATUS_LABELS, format_date
from tui_hrdash.projections.listing import ListRow

_PROGRESS_BAR_WIDTH = 8

EMPTY_MESSAGE = "No tasks match your filters"

# (key, label, width)
COLUMNS: list[tuple[str, str, int | None]] = [
    ("selected", "✓", 2),
    ("title", "Title", 32),
    ("status", "Status", 14),
    ("priority", "Priority", 10),
    ("assignees", "Assignees", 22),
    ("due", "Due", 12),
    ("progress", "Progress", 14),
]


def _make_progress_cell(progress: int, bar_width: int = _PROGRESS_BAR_WIDTH) -> Text:
    progress = max(0, min(100, progress))
    filled = max(1, round(bar_width * progress / 100)) if progress > 0 else 0
    text = Text()
    text.append(f"{progress:>3}% ", style="bold")
    text.append("█" * filled, style=theme.color(theme.TIMELINE_BAR_DONE))
    text.append("░" * (bar_width - filled), style="dim")
    return text


class TaskList(Container):
    """Sortable, selectable table of the visible tasks."""

    DEFAULT_CSS = """
    TaskList {
        width: 1fr;
        height: 1fr;
    }
    TaskList DataTable {
        height: 1fr;
    }
    TaskList #task-list-empty {
        display: none;
        color: $text-muted;
        text-align: center;
        padding: 1;
    }
    TaskList.is-empty #task-list-empty {
        display: block;
    }
    TaskList.is-empty DataTable {
        display: none;
    }
    """

    class TaskHighlighted(Message):
        def __init__(self, item_id: str) -> None:
            super().__init__()
            self.item_id = item_id

    class TaskActivated(Message):
        """Enter or double click on a row."""

        def __init__(self, item_id: str) -> None:
            super().__init__()
            self.item_id = item_id

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._rows: tuple[ListRow, ...] = ()
        self._selection: frozenset[str] = frozenset()
        self._date_format = "YYYY-MM-DD"

    def compose(self) -> ComposeResult:
        yield Static(EMPTY_MESSAGE, id="task-list-empty")
        yield DataTable(id="task-table", cursor_type="row", zebra_stripes=True)

    def on_mount(self) -> None:
        self._rebuild_table()

    @property
    def row_count(self) -> int:
        return len(self._rows)

    def update_rows(
        self,
        rows: tuple[ListRow, ...],
        selection: frozenset[str] = frozenset(),
        date_format: str | None = None,
    ) -> None:
        self._rows = rows
        self._selection = selection
        if date_format is not None:
            self._date_format = date_format
        self._rebuild_table()

    def _rebuild_table(self) -> None:
        """Rebuild the DataTable from rows."""
        try:
            table = self.query_one("#task-table", DataTable)
        except Exception:
            return

        saved_id = self.highlighted_id
        table.clear(columns=True)
        for key, label, width in COLUMNS:
            table.add_column(label, key=key, width=width)
        for row in self._rows:
            table.add_row(*self._make_row(row), key=row.item.id)
        self.set_class(not self._rows, "is-empty")

        if saved_id:
            for idx, row in enumerate(self._rows):
                if row.item.id == saved_id:
                    table.move_cursor(row=idx, animate=False)
                    break

    def _make_row(self, row: ListRow) -> list:
        item = row.item
        selected = Text("✓", style=theme.color(theme.SELECTED)) if item.id in self._selection else ""
        status = Text(
            f"{item.status_icon} {STATUS_LABELS[item.status]}",
            style=theme.status_color(item.status),
        )
        priority = Text(f"{item.priority_icon} {row.priority_label}")
        due = format_date(item.due_date, self._date_format)
        due_cell: Text | str = due
        if row.overdue:
            due_cell = Text(due, style=f"bold {theme.color(theme.OVERDUE)}")
        return [
            selected,
            item.title,
            status,
            priority,
            row.assignees,
            due_cell,
            _make_progress_cell(item.progress),
        ]

    @property
    def highlighted_id(self) -> str | None:
        try:
            table = self.query_one("#task-table", DataTable)
        except Exception:
            return None
        if not self._rows or table.row_count == 0:
            return None
        if table.cursor_row is not None and table.cursor_row < len(self._rows):
            return self._rows[table.cursor_row].item.id
        return None

    def focus_table(self) -> None:
        try:
            self.query_one("#task-table", DataTable).focus()
        except Exception:
            pass

    def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        event.stop()
        if event.row_key is not None and event.row_key.value:
            self.post_message(self.TaskHighlighted(str(event.row_key.value)))

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        event.stop()
        if event.row_key is not None and event.row_key.value:
            self.post_message(self.TaskActivated(str(event.row_key.value)))
