"""Filter predicate builder.

Turns the filter map held by the view controller into one predicate over
work items. Dimensions combine with AND; values that are absent, blank,
``"all"`` or malformed leave their dimension unconstrained.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from datetime import date, datetime
from typing import Any

from tui_hrdash.models import ALL, ME, OVERDUE, Priority, Status, WorkItem, is_overdue

Predicate = Callable[[WorkItem], bool]

RANGE_START = date(1900, 1, 1)
RANGE_END = date(2100, 12, 31)

_STATUS_VALUES = {s.value for s in Status}


def is_unconstrained(value: Any) -> bool:
    """True for values that mean "no filter" on a dimension."""
    if value is None:
        return True
    if isinstance(value, str):
        stripped = value.strip()
        return not stripped or stripped.lower() == ALL
    return False


def parse_date(value: Any) -> date | None:
    """Parse a date filter bound. Returns None when absent or malformed."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None


def resolve_filters(
    filters: Mapping[str, Any], current_user: str | None = None
) -> dict[str, Any]:
    """Return a copy of *filters* with session-dependent values resolved.

    ``assignedTo: "me"`` becomes the current user's identifier. Without a
    signed-in user it is dropped, leaving the dimension unconstrained.
    """
    resolved = dict(filters)
    assigned = resolved.get("assignedTo")
    if isinstance(assigned, str) and assigned.strip().lower() == ME:
        if current_user:
            resolved["assignedTo"] = current_user
        else:
            resolved.pop("assignedTo")
    return resolved


def normalize_due_range(filters: Mapping[str, Any]) -> tuple[date, date] | None:
    """Closed due-date range, or None when neither bound is set.

    A missing bound defaults to a far past/future date. ``from > to`` is
    returned as-is and simply matches nothing.
    """
    start = parse_date(filters.get("dueDateFrom"))
    end = parse_date(filters.get("dueDateTo"))
    if start is None and end is None:
        return None
    return (start or RANGE_START, end or RANGE_END)


def _member_value(value: Any) -> Any:
    """Unwrap a Status or Priority member to its string value."""
    if isinstance(value, (Status, Priority)):
        return value.value
    return value


def _search_predicate(text: str) -> Predicate:
    needle = text.strip().casefold()

    def match(item: WorkItem) -> bool:
        return needle in item.title.casefold() or needle in item.description.casefold()

    return match


def _status_predicate(value: str, now: datetime) -> Predicate | None:
    value = value.strip().lower()
    if value == OVERDUE:
        return lambda item: is_overdue(item, now)
    if value not in _STATUS_VALUES:
        return None
    return lambda item: item.status.value == value


def _priority_predicate(value: str) -> Predicate | None:
    try:
        priority = Priority(value.strip().upper())
    except ValueError:
        return None
    return lambda item: item.priority == priority


def _department_predicate(value: str) -> Predicate:
    wanted = value.strip().casefold()
    return lambda item: item.department.casefold() == wanted


def _range_predicate(start: date, end: date) -> Predicate:
    def match(item: WorkItem) -> bool:
        if item.due_date is None:
            return False
        return start <= item.due_date <= end

    return match


def dimension_predicates(
    filters: Mapping[str, Any], now: datetime | None = None
) -> dict[str, Predicate]:
    """Build one sub-predicate per active dimension.

    *filters* must already be resolved (see :func:`resolve_filters`).
    """
    if now is None:
        now = datetime.now()
    preds: dict[str, Predicate] = {}

    search = filters.get("search")
    if not is_unconstrained(search) and isinstance(search, str):
        preds["search"] = _search_predicate(search)

    status = _member_value(filters.get("status"))
    if not is_unconstrained(status) and isinstance(status, str):
        pred = _status_predicate(status, now)
        if pred is not None:
            preds["status"] = pred

    priority = _member_value(filters.get("priority"))
    if not is_unconstrained(priority) and isinstance(priority, str):
        pred = _priority_predicate(priority)
        if pred is not None:
            preds["priority"] = pred

    assigned = filters.get("assignedTo")
    if not is_unconstrained(assigned) and isinstance(assigned, str):
        if assigned.strip().lower() != ME:
            who = assigned.strip()
            preds["assignedTo"] = lambda item: who in item.assigned_to

    department = filters.get("department")
    if not is_unconstrained(department) and isinstance(department, str):
        preds["department"] = _department_predicate(department)

    due_range = normalize_due_range(filters)
    if due_range is not None:
        preds["dueDate"] = _range_predicate(*due_range)

    return preds


def build_predicate(
    filters: Mapping[str, Any],
    current_user: str | None = None,
    now: datetime | None = None,
) -> Predicate:
    """Compose every active dimension into a single AND predicate."""
    preds = list(dimension_predicates(resolve_filters(filters, current_user), now).values())
    if not preds:
        return lambda item: True

    def predicate(item: WorkItem) -> bool:
        return all(p(item) for p in preds)

    return predicate


def apply_filters(
    items: Iterable[WorkItem],
    filters: Mapping[str, Any],
    current_user: str | None = None,
    now: datetime | None = None,
) -> list[WorkItem]:
    """Return the items matching *filters*, preserving input order."""
    predicate = build_predicate(filters, current_user, now)
    return [item for item in items if predicate(item)]


def active_filters(filters: Mapping[str, Any]) -> dict[str, Any]:
    """Only the constrained entries of a filter map (for display)."""
    return {k: v for k, v in filters.items() if not is_unconstrained(v)}
