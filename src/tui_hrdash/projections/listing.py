"""List projection: one row descriptor per item."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime

from tui_hrdash.models import PRIORITIES, WorkItem, is_overdue


@dataclass(frozen=True)
class ListRow:
    item: WorkItem
    assignee_names: tuple[str, ...]
    overdue: bool
    priority_label: str
    priority_color: str

    @property
    def assignees(self) -> str:
        return ", ".join(self.assignee_names)


def project_rows(
    items: Iterable[WorkItem],
    resolve: Callable[[str], str] | None = None,
    now: datetime | None = None,
) -> tuple[ListRow, ...]:
    """Build list rows in sequence order.

    *resolve* maps an assignee identifier to a display name.
    """
    if now is None:
        now = datetime.now()
    rows = []
    for item in items:
        names = tuple(resolve(a) if resolve else a for a in item.assigned_to)
        info = PRIORITIES[item.priority]
        rows.append(
            ListRow(
                item=item,
                assignee_names=names,
                overdue=is_overdue(item, now),
                priority_label=info.label,
                priority_color=info.color,
            )
        )
    return tuple(rows)
