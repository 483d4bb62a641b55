"""Timeline (Gantt) layout: a shared date axis with per-item bar geometry.

Only items with both a start and a due date take part. Callers pre-filter
with :func:`schedulable`; :func:`layout_timeline` rejects anything else.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta

from tui_hrdash.models import WorkItem


@dataclass(frozen=True)
class TimelineBar:
    item: WorkItem
    left_pct: float
    width_pct: float
    inverted: bool = False

    @property
    def progress_pct(self) -> int:
        """Progress as a share of the bar's own width."""
        return max(0, min(100, self.item.progress))


@dataclass(frozen=True)
class TimelineDescriptor:
    bars: tuple[TimelineBar, ...] = ()
    min_date: date | None = None
    max_date: date | None = None
    total_span: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.bars


EMPTY_TIMELINE = TimelineDescriptor()


def schedulable(items: Iterable[WorkItem]) -> list[WorkItem]:
    """Items that have both ``start_date`` and ``due_date``."""
    return [item for item in items if item.has_schedule]


def layout_timeline(items: Iterable[WorkItem]) -> TimelineDescriptor:
    """Compute the axis and bar positions as percentages of the axis.

    An empty input yields :data:`EMPTY_TIMELINE` without touching the axis.
    A zero-length axis is treated as one day long. An inverted item
    (start after due) gets a zero-width bar flagged ``inverted``; its
    position is clamped onto the axis, and an axis built only from inverted
    items reports a span of 0.
    """
    included = list(items)
    if not included:
        return EMPTY_TIMELINE
    for item in included:
        if not item.has_schedule:
            raise ValueError(f"Task {item.id!r} lacks a start or due date")

    min_date = min(item.start_date for item in included)  # type: ignore[type-var]
    max_date = max(item.due_date for item in included)  # type: ignore[type-var]
    span = (max_date - min_date).days
    axis = span if span > 0 else 1

    bars = []
    for item in included:
        offset = (item.start_date - min_date).days  # type: ignore[operator]
        length = (item.due_date - item.start_date).days  # type: ignore[operator]
        inverted = length < 0
        bars.append(
            TimelineBar(
                item=item,
                left_pct=min(max(offset / axis * 100, 0.0), 100.0),
                width_pct=0.0 if inverted else length / axis * 100,
                inverted=inverted,
            )
        )
    return TimelineDescriptor(
        bars=tuple(bars), min_date=min_date, max_date=max_date, total_span=max(span, 0)
    )


def axis_ticks(descriptor: TimelineDescriptor, count: int = 5) -> list[tuple[float, date]]:
    """Evenly spaced (position percent, date) pairs along the axis."""
    if descriptor.is_empty or descriptor.min_date is None or count < 2:
        return []
    span = max(descriptor.total_span, 1)
    ticks: list[tuple[float, date]] = []
    for i in range(count):
        pct = i / (count - 1) * 100
        day = round(span * i / (count - 1))
        ticks.append((pct, descriptor.min_date + timedelta(days=day)))
    return ticks


def pct_to_col(pct: float, width: int) -> int:
    """Map an axis percentage onto a character column in ``[0, width)``."""
    if width <= 0:
        return 0
    col = int(round(pct / 100 * (width - 1)))
    return max(0, min(width - 1, col))
