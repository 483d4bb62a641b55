"""Drag-and-drop status transitions.

A drop (or a keyboard lane move) becomes a :class:`RequestStatusChange`
command. The handler validates the target lane and routes a status-only
change through the same mutation path a form edit uses.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

import structlog

from tui_hrdash.models import STATUS_LABELS, Status

logger = structlog.get_logger(__name__)

# (item_id, changes, notice) -> updated item or None
Mutator = Callable[..., Any]


@dataclass(frozen=True)
class RequestStatusChange:
    item_id: str
    target_status: str | None


def resolve_lane(target: str | Status | None) -> Status | None:
    """Map a lane key to a Status; None when absent or unknown."""
    if isinstance(target, Status):
        return target
    if not target:
        return None
    try:
        return Status(target)
    except ValueError:
        return None


class StatusTransitionHandler:
    def __init__(self, mutate: Mutator) -> None:
        self._mutate = mutate

    def handle(self, command: RequestStatusChange) -> bool:
        """Apply the command. Returns False when it was ignored or refused.

        An unresolvable target lane is ignored silently. Nothing but the
        status changes; progress and dependencies are left alone.
        """
        status = resolve_lane(command.target_status)
        if status is None or not command.item_id:
            logger.debug("drop_ignored", task_id=command.item_id, target=command.target_status)
            return False
        changes: Mapping[str, Any] = {"status": status}
        result = self._mutate(
            command.item_id, changes, f"Task moved to {STATUS_LABELS[status]}"
        )
        return result is not None
