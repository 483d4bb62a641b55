"""Board projection: status lanes."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from tui_hrdash.models import LANE_KEYS, STATUS_LABELS, Status, WorkItem


@dataclass(frozen=True)
class Lane:
    key: str
    title: str
    items: tuple[WorkItem, ...] = ()

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class BoardDescriptor:
    lanes: tuple[Lane, ...]

    def lane(self, key: str) -> Lane | None:
        for lane in self.lanes:
            if lane.key == key:
                return lane
        return None

    @property
    def total(self) -> int:
        return sum(len(lane) for lane in self.lanes)


def lane_title(key: str) -> str:
    try:
        return STATUS_LABELS[Status(key)]
    except ValueError:
        return key


def project_board(
    items: Iterable[WorkItem],
    lanes: Sequence[str] = LANE_KEYS,
    titles: Mapping[str, str] | None = None,
) -> BoardDescriptor:
    """Partition *items* into lanes by status, keeping their relative order.

    Items whose status has no lane in *lanes* are left out. *titles*
    overrides the default lane titles.
    """
    titles = titles or {}
    groups: dict[str, list[WorkItem]] = {key: [] for key in lanes}
    for item in items:
        bucket = groups.get(item.status.value)
        if bucket is not None:
            bucket.append(item)
    return BoardDescriptor(
        lanes=tuple(
            Lane(key, titles.get(key) or lane_title(key), tuple(groups[key]))
            for key in lanes
        )
    )


def neighbour_lane(key: str, direction: int, lanes: Sequence[str] = LANE_KEYS) -> str | None:
    """Lane key left (-1) or right (+1) of *key*; None at the edges."""
    try:
        idx = list(lanes).index(key)
    except ValueError:
        return None
    new_idx = idx + direction
    if 0 <= new_idx < len(lanes):
        return lanes[new_idx]
    return None
