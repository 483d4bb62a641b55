"""Sort engine for work item sequences."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from typing import Any

from tui_hrdash.models import PRIORITIES, SORT_DESC, SORT_FIELDS, WorkItem

# Undated items sort as if due on this day.
UNDATED_SENTINEL = date(2100, 1, 1)


def sort_key(item: WorkItem, sort_by: str) -> Any:
    """Extract the comparison key for *sort_by*. Returns None for unknown keys."""
    if sort_by == "priority":
        return PRIORITIES[item.priority].ordinal
    elif sort_by == "dueDate":
        return item.due_date or UNDATED_SENTINEL
    elif sort_by == "createdAt":
        return item.created_at
    elif sort_by == "title":
        return item.title.casefold()
    elif sort_by == "status":
        return item.status.value
    return None


def sort_items(items: Iterable[WorkItem], sort_by: str, sort_order: str = "asc") -> list[WorkItem]:
    """Return a new list ordered by *sort_by*.

    Ties keep their input order. Descending inverts the whole comparison,
    so undated items come first when sorting by due date descending.
    The input is never mutated.
    """
    result = list(items)
    if sort_by not in SORT_FIELDS:
        return result
    result.sort(key=lambda i: sort_key(i, sort_by), reverse=(sort_order == SORT_DESC))
    return result
