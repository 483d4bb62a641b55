"""Month calendar widget."""

from __future__ import annotations

from datetime import date

from rich.table import Table
from rich.text import Text
from textual.binding import Binding
from textual.events import Click
from textual.message import Message
from textual.widget import Widget

from tui_hrdash import theme
from tui_hrdash.projections.calendar import (
    GRID_CELLS,
    GRID_COLS,
    WEEKDAY_NAMES,
    CalendarCell,
    CalendarGrid,
)

_TITLE_WIDTH = 14


class CalendarView(Widget, can_focus=True):
    """Renders a 6x7 month grid with up to three task titles per day."""

    DEFAULT_CSS = """
    CalendarView {
        height: 1fr;
        width: 1fr;
        padding: 0 1;
        overflow-y: auto;
    }
    CalendarView:focus {
        background: $boost;
    }
    """

    BINDINGS = [
        Binding("left", "cursor_left", show=False),
        Binding("right", "cursor_right", show=False),
        Binding("up", "cursor_up", show=False),
        Binding("down", "cursor_down", show=False),
        Binding("enter", "open_day", "Open day", show=False),
    ]

    class DaySelected(Message):
        """Enter on a day: the date and the ids of its items."""

        def __init__(self, day: date, item_ids: list[str]) -> None:
            super().__init__()
            self.day = day
            self.item_ids = item_ids

    class MonthChangeRequested(Message):
        def __init__(self, delta: int) -> None:
            super().__init__()
            self.delta = delta

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._grid: CalendarGrid | None = None
        self._cursor: int = 0

    @property
    def grid(self) -> CalendarGrid | None:
        return self._grid

    @property
    def selected_cell(self) -> CalendarCell | None:
        if self._grid is None:
            return None
        return self._grid.cells[self._cursor]

    def update_grid(self, grid: CalendarGrid) -> None:
        previous = self.selected_cell
        self._grid = grid
        self._cursor = self._initial_cursor(grid, previous.date if previous else None)
        self.refresh()

    @staticmethod
    def _initial_cursor(grid: CalendarGrid, keep: date | None) -> int:
        for idx, cell in enumerate(grid.cells):
            if keep is not None and cell.date == keep and cell.in_month:
                return idx
        for idx, cell in enumerate(grid.cells):
            if cell.is_today:
                return idx
        for idx, cell in enumerate(grid.cells):
            if cell.in_month:
                return idx
        return 0

    def _cell_text(self, idx: int, cell: CalendarCell) -> Text:
        text = Text()
        day_style = "bold"
        if cell.is_today:
            day_style = f"bold reverse {theme.color(theme.CALENDAR_TODAY)}"
        elif not cell.in_month:
            day_style = theme.color(theme.CALENDAR_OTHER_MONTH)
        marker = "▶" if idx == self._cursor and self.has_focus else " "
        text.append(f"{marker}{cell.date.day:>2}", style=day_style)
        for item in cell.visible_items:
            title = item.title
            if len(title) > _TITLE_WIDTH:
                title = title[: _TITLE_WIDTH - 1] + "…"
            text.append("\n")
            text.append(f"{item.status_icon} ", style=theme.status_color(item.status))
            text.append(title, style="dim" if not cell.in_month else "")
        if cell.overflow:
            text.append("\n")
            text.append(cell.overflow_label, style=f"italic {theme.color(theme.CALENDAR_OVERFLOW)}")
        return text

    def render(self) -> Table | Text:
        if self._grid is None:
            return Text("")
        table = Table(
            title=Text(f"◀  {self._grid.title}  ▶", style="bold"),
            caption="< > month · t today · arrows move · Enter open day",
            expand=True,
            show_lines=True,
        )
        for name in WEEKDAY_NAMES:
            table.add_column(name, ratio=1, justify="left", vertical="top")
        for week_idx, week in enumerate(self._grid.weeks):
            table.add_row(
                *(
                    self._cell_text(week_idx * GRID_COLS + col, cell)
                    for col, cell in enumerate(week)
                )
            )
        return table

    def on_focus(self) -> None:
        self.refresh()

    def on_blur(self) -> None:
        self.refresh()

    def _move(self, delta: int) -> None:
        if self._grid is None:
            return
        target = self._cursor + delta
        if not 0 <= target < GRID_CELLS:
            self.post_message(self.MonthChangeRequested(1 if delta > 0 else -1))
            return
        self._cursor = target
        self.refresh()

    def action_cursor_left(self) -> None:
        self._move(-1)

    def action_cursor_right(self) -> None:
        self._move(1)

    def action_cursor_up(self) -> None:
        self._move(-GRID_COLS)

    def action_cursor_down(self) -> None:
        self._move(GRID_COLS)

    def action_open_day(self) -> None:
        cell = self.selected_cell
        if cell is not None:
            self.post_message(self.DaySelected(cell.date, [item.id for item in cell.items]))

    def on_click(self, event: Click) -> None:
        self.focus()
        if self._grid is None or event.chain < 2:
            return
        # Double click opens the selected day.
        self.action_open_day()

