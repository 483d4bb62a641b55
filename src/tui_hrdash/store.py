"""Task store interface and the bundled in-memory implementation.

The dashboard only talks to a :class:`TaskStore`. :class:`InMemoryTaskStore`
keeps tasks in memory and persists them to ``.tui-hrdash/tasks.yaml``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import fields, replace
from datetime import date, datetime
from pathlib import Path
from typing import Any, Protocol

import structlog
import yaml

from tui_hrdash.errors import NotFoundError, ValidationError
from tui_hrdash.filters import apply_filters
from tui_hrdash.models import (
    PRIORITIES,
    Priority,
    PriorityInfo,
    RecurringType,
    Status,
    WorkItem,
    is_overdue,
    work_item_to_dict,
)

logger = structlog.get_logger(__name__)

TASKS_FILE = "tasks.yaml"

Listener = Callable[[], None]

_FIELD_NAMES = {f.name for f in fields(WorkItem)}
_IMMUTABLE = {"id", "created_at"}


class TaskStore(Protocol):
    """Contract for the task record store consumed by the dashboard."""

    priorities: Mapping[Priority, PriorityInfo]

    def list(self) -> list[WorkItem]:
        """All items, in store order."""
        ...

    def get(self, item_id: str) -> WorkItem | None:
        ...

    def create(self, data: Mapping[str, Any]) -> WorkItem:
        """Create an item. Raises ValidationError."""
        ...

    def update(self, item_id: str, changes: Mapping[str, Any]) -> WorkItem:
        """Apply partial changes. Raises NotFoundError or ValidationError."""
        ...

    def delete(self, item_id: str) -> None:
        """Remove an item. Raises NotFoundError."""
        ...

    def search(self, query: str, filters: Mapping[str, Any]) -> list[WorkItem]:
        ...

    def overdue(self, now: datetime | None = None) -> list[WorkItem]:
        ...

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns a function that unregisters it."""
        ...


# ── Field coercion ──────────────────────────────────────────────


def _as_date(name: str, value: Any) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        raise ValidationError(f"Invalid date for {name}: {value!r}", field=name) from None


def _as_hours(name: str, value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        hours = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid number for {name}: {value!r}", field=name) from None
    if hours < 0:
        raise ValidationError(f"{name} must not be negative", field=name)
    return hours


def _as_tuple(value: Any) -> tuple[str, ...]:
    if value is None or value == "":
        return ()
    if isinstance(value, str):
        return tuple(part.strip() for part in value.split(",") if part.strip())
    return tuple(str(v) for v in value)


def coerce_fields(data: Mapping[str, Any]) -> dict[str, Any]:
    """Convert raw field values (form input, YAML) into WorkItem field types.

    Unknown keys are ignored. Raises ValidationError on bad values.
    """
    result: dict[str, Any] = {}
    for key, value in data.items():
        if key not in _FIELD_NAMES:
            continue
        if key == "title":
            title = str(value or "").strip()
            if not title:
                raise ValidationError("Title cannot be empty", field="title")
            result[key] = title
        elif key == "status":
            try:
                result[key] = value if isinstance(value, Status) else Status(str(value))
            except ValueError:
                raise ValidationError(f"Unknown status: {value!r}", field=key) from None
        elif key == "priority":
            try:
                result[key] = (
                    value if isinstance(value, Priority) else Priority(str(value).upper())
                )
            except ValueError:
                raise ValidationError(f"Unknown priority: {value!r}", field=key) from None
        elif key == "recurring_type":
            if value in (None, ""):
                result[key] = None
            else:
                try:
                    result[key] = (
                        value if isinstance(value, RecurringType) else RecurringType(str(value))
                    )
                except ValueError:
                    raise ValidationError(
                        f"Unknown recurrence: {value!r}", field=key
                    ) from None
        elif key in ("start_date", "due_date", "recurring_end_date"):
            result[key] = _as_date(key, value)
        elif key in ("estimated_hours", "actual_hours"):
            result[key] = _as_hours(key, value)
        elif key == "progress":
            try:
                progress = int(value or 0)
            except (TypeError, ValueError):
                raise ValidationError("Progress must be a number", field=key) from None
            if not 0 <= progress <= 100:
                raise ValidationError("Progress must be 0-100", field=key)
            result[key] = progress
        elif key == "recurring_interval":
            try:
                interval = int(value or 1)
            except (TypeError, ValueError):
                raise ValidationError("Interval must be a number", field=key) from None
            if interval < 1:
                raise ValidationError("Interval must be at least 1", field=key)
            result[key] = interval
        elif key in ("assigned_to", "dependencies", "tags"):
            result[key] = _as_tuple(value)
        elif key == "is_recurring":
            result[key] = bool(value)
        elif key == "created_at":
            if isinstance(value, datetime):
                result[key] = value
            else:
                try:
                    result[key] = datetime.fromisoformat(str(value))
                except ValueError:
                    raise ValidationError(
                        f"Invalid timestamp: {value!r}", field=key
                    ) from None
        elif key == "id":
            result[key] = str(value)
        else:
            result[key] = "" if value is None else str(value)
    return result


class InMemoryTaskStore:
    """Task store backed by an ordered dict, optionally persisted as YAML."""

    def __init__(self, items: Iterable[WorkItem] = (), path: Path | None = None) -> None:
        self.priorities: Mapping[Priority, PriorityInfo] = PRIORITIES
        self.path = path
        self.modified = False
        self._items: dict[str, WorkItem] = {item.id: item for item in items}
        self._listeners: list[Listener] = []

    # ── Persistence ──

    @classmethod
    def load(cls, project_dir: Path, config_dir: str = ".tui-hrdash") -> InMemoryTaskStore:
        """Load tasks from ``{project_dir}/{config_dir}/tasks.yaml``.

        A missing file yields an empty store. Entries that fail validation
        are skipped with a warning.
        """
        path = project_dir / config_dir / TASKS_FILE
        store = cls(path=path)
        if not path.is_file():
            return store
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as exc:
            logger.warning("tasks_file_unreadable", path=str(path), error=str(exc))
            return store
        raw_items = data.get("tasks", []) if isinstance(data, dict) else []
        for raw in raw_items:
            if not isinstance(raw, dict):
                continue
            try:
                item = WorkItem(**coerce_fields(raw))
            except (ValidationError, TypeError) as exc:
                logger.warning("task_skipped", path=str(path), error=str(exc))
                continue
            store._items[item.id] = item
        logger.info("tasks_loaded", path=str(path), count=len(store._items))
        return store

    def save(self) -> None:
        """Write all tasks to the backing file (no-op without a path)."""
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"tasks": [work_item_to_dict(item) for item in self._items.values()]}
        self.path.write_text(
            yaml.safe_dump(payload, sort_keys=False, allow_unicode=True), encoding="utf-8"
        )
        self.modified = False
        logger.info("tasks_saved", path=str(self.path), count=len(self._items))

    # ── Queries ──

    def list(self) -> list[WorkItem]:
        return list(self._items.values())

    def get(self, item_id: str) -> WorkItem | None:
        return self._items.get(item_id)

    def search(self, query: str, filters: Mapping[str, Any]) -> list[WorkItem]:
        return apply_filters(self._items.values(), {**filters, "search": query})

    def overdue(self, now: datetime | None = None) -> list[WorkItem]:
        return [item for item in self._items.values() if is_overdue(item, now)]

    # ── Mutations ──

    def create(self, data: Mapping[str, Any]) -> WorkItem:
        values = coerce_fields(data)
        if "title" not in values:
            raise ValidationError("Title cannot be empty", field="title")
        item = WorkItem(**values)
        if item.id in self._items:
            raise ValidationError(f"Duplicate task id: {item.id}", field="id")
        self._items[item.id] = item
        logger.info("task_created", task_id=item.id)
        self._changed()
        return item

    def update(self, item_id: str, changes: Mapping[str, Any]) -> WorkItem:
        current = self._items.get(item_id)
        if current is None:
            raise NotFoundError(item_id)
        frozen = sorted(_IMMUTABLE & set(changes))
        if frozen:
            raise ValidationError(f"{frozen[0]} cannot be changed", field=frozen[0])
        updated = replace(current, **coerce_fields(changes))
        self._items[item_id] = updated
        logger.info("task_updated", task_id=item_id, fields=sorted(changes))
        self._changed()
        return updated

    def delete(self, item_id: str) -> None:
        if item_id not in self._items:
            raise NotFoundError(item_id)
        del self._items[item_id]
        logger.info("task_deleted", task_id=item_id)
        self._changed()

    # ── Change notification ──

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _changed(self) -> None:
        self.modified = True
        for listener in list(self._listeners):
            listener()
