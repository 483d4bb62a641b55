"""Calendar projection: a fixed 6x7 month grid with items bucketed by due date."""

from __future__ import annotations

import calendar as _calendar
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta

from tui_hrdash.models import WorkItem

GRID_ROWS = 6
GRID_COLS = 7
GRID_CELLS = GRID_ROWS * GRID_COLS
MAX_VISIBLE_ITEMS = 3
WEEKDAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


@dataclass(frozen=True)
class CalendarCell:
    date: date
    in_month: bool
    is_today: bool
    items: tuple[WorkItem, ...] = ()

    @property
    def visible_items(self) -> tuple[WorkItem, ...]:
        return self.items[:MAX_VISIBLE_ITEMS]

    @property
    def overflow(self) -> int:
        """Number of items collapsed into the "+N more" marker."""
        return max(0, len(self.items) - MAX_VISIBLE_ITEMS)

    @property
    def overflow_label(self) -> str:
        return f"+{self.overflow} more" if self.overflow else ""


@dataclass(frozen=True)
class CalendarGrid:
    year: int
    month: int  # zero-based
    cells: tuple[CalendarCell, ...]

    @property
    def weeks(self) -> list[tuple[CalendarCell, ...]]:
        return [self.cells[i:i + GRID_COLS] for i in range(0, len(self.cells), GRID_COLS)]

    @property
    def title(self) -> str:
        return month_title(self.year, self.month)


def normalize_month(year: int, month: int) -> tuple[int, int]:
    """Fold an out-of-range zero-based month into (year, 0..11)."""
    extra_years, month = divmod(month, 12)
    return year + extra_years, month


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    return normalize_month(year, month + delta)


def month_title(year: int, month: int) -> str:
    year, month = normalize_month(year, month)
    return f"{_calendar.month_name[month + 1]} {year}"


def grid_start(year: int, month: int) -> date:
    """The Sunday on or before the first day of the month."""
    year, month = normalize_month(year, month)
    first = date(year, month + 1, 1)
    # date.weekday(): Monday=0 .. Sunday=6
    return first - timedelta(days=(first.weekday() + 1) % 7)


def generate_calendar(
    year: int,
    month: int,
    items: Iterable[WorkItem] = (),
    today: date | None = None,
) -> CalendarGrid:
    """Build the 42-cell grid for a zero-based *month*.

    Items are bucketed by ``due_date`` in input order; filtering happens
    upstream.
    """
    year, month = normalize_month(year, month)
    if today is None:
        today = date.today()

    by_date: dict[date, list[WorkItem]] = {}
    for item in items:
        if item.due_date is not None:
            by_date.setdefault(item.due_date, []).append(item)

    start = grid_start(year, month)
    cells = []
    for offset in range(GRID_CELLS):
        d = start + timedelta(days=offset)
        cells.append(
            CalendarCell(
                date=d,
                in_month=(d.year == year and d.month == month + 1),
                is_today=(d == today),
                items=tuple(by_date.get(d, ())),
            )
        )
    return CalendarGrid(year=year, month=month, cells=tuple(cells))
