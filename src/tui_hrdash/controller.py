"""View controller: the single owner of view, filter, sort and selection state.

Every change to that state re-derives the visible sequence in full:
``store.list()`` → filter predicate → sort. Projections are computed on demand
from the derived sequence, and render listeners are told when it changes.
All writes to the task store go through the mutation methods here.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Protocol

import structlog

from tui_hrdash.errors import TaskStoreError
from tui_hrdash.filters import active_filters, build_predicate, is_unconstrained
from tui_hrdash.models import (
    FILTER_KEYS,
    LANE_KEYS,
    SORT_ASC,
    SORT_DESC,
    STATUS_LABELS,
    DashboardConfig,
    Status,
    ViewMode,
    WorkItem,
    is_overdue,
)
from tui_hrdash.projections.board import BoardDescriptor, project_board
from tui_hrdash.projections.calendar import CalendarGrid, generate_calendar, shift_month
from tui_hrdash.projections.listing import ListRow, project_rows
from tui_hrdash.projections.timeline import TimelineDescriptor, layout_timeline, schedulable
from tui_hrdash.sorting import sort_items
from tui_hrdash.store import TaskStore
from tui_hrdash.users import UserDirectory

logger = structlog.get_logger(__name__)


class Notifier(Protocol):
    def notify(self, message: str, *, severity: str = "information") -> None:
        ...


class TimerHandle(Protocol):
    def stop(self) -> None:
        ...


TimerFactory = Callable[[float, Callable[[], None]], TimerHandle]
RenderListener = Callable[["ViewController"], None]


@dataclass(frozen=True)
class DashboardStats:
    total: int = 0
    pending: int = 0
    in_progress: int = 0
    on_hold: int = 0
    completed: int = 0
    overdue: int = 0


class ViewController:
    """Owns the dashboard's view state and derives what each view shows.

    *set_timer* schedules the search debounce; it is called as
    ``set_timer(delay, callback)`` and must return a handle with ``stop()``
    (Textual's ``App.set_timer`` fits). Without one, searches apply at once.
    """

    def __init__(
        self,
        store: TaskStore,
        users: UserDirectory,
        notifier: Notifier,
        config: DashboardConfig | None = None,
        set_timer: TimerFactory | None = None,
        lane_titles: Mapping[str, str] | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.store = store
        self.users = users
        self.notifier = notifier
        self.config = config or DashboardConfig()
        self.lane_titles = dict(lane_titles or {})
        self._set_timer = set_timer
        self._clock = clock

        try:
            self.current_view = ViewMode(self.config.default_view)
        except ValueError:
            self.current_view = ViewMode.BOARD
        self.sort_by = self.config.sort_by
        self.sort_order = self.config.sort_order
        self._filters: dict[str, Any] = {}
        self._selection: set[str] = set()
        self._visible: list[WorkItem] = []
        self._search_timer: TimerHandle | None = None
        self._batch_depth = 0
        self._listeners: list[RenderListener] = []

        today = self._clock().date()
        self.calendar_year = today.year
        self.calendar_month = today.month - 1

        self._unsubscribe: Callable[[], None] | None = store.subscribe(self._on_store_changed)
        self.refresh()

    # ── Render listeners ──

    def add_listener(self, listener: RenderListener) -> Callable[[], None]:
        """Call *listener* after every re-derivation. Returns a remover."""
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def _emit(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # ── Derivation ──

    def refresh(self) -> None:
        """Re-read the store and re-apply the filter predicate and sort."""
        items = self.store.list()
        predicate = build_predicate(self._filters, self.users.current_user(), self._clock())
        self._visible = sort_items(
            (item for item in items if predicate(item)), self.sort_by, self.sort_order
        )
        # Deleted items leave the selection; filtered-out ones do not.
        known = {item.id for item in items}
        self._selection &= known
        self._emit()

    def _on_store_changed(self) -> None:
        if self._batch_depth == 0:
            self.refresh()

    @property
    def visible_items(self) -> tuple[WorkItem, ...]:
        return tuple(self._visible)

    @property
    def filters(self) -> dict[str, Any]:
        return dict(self._filters)

    @property
    def has_active_filters(self) -> bool:
        return bool(active_filters(self._filters))

    @property
    def search_pending(self) -> bool:
        return self._search_timer is not None

    # ── View ──

    def set_view(self, mode: ViewMode | str) -> None:
        mode = ViewMode(mode)
        if mode == self.current_view:
            return
        self.current_view = mode
        logger.debug("view_changed", view=mode.value)
        self._emit()

    # ── Filters ──

    def set_search(self, text: str) -> None:
        """Update the search text and schedule a debounced re-derivation."""
        text = text or ""
        if text == self._filters.get("search", ""):
            return
        if text:
            self._filters["search"] = text
        else:
            self._filters.pop("search", None)
        self._selection.clear()
        self._cancel_search_timer()
        if self._set_timer is None or self.config.search_debounce <= 0:
            self.refresh()
            return
        self._search_timer = self._set_timer(self.config.search_debounce, self._flush_search)

    def _flush_search(self) -> None:
        self._search_timer = None
        self.refresh()

    def _cancel_search_timer(self) -> None:
        if self._search_timer is not None:
            self._search_timer.stop()
            self._search_timer = None

    def set_filter(self, name: str, value: Any) -> None:
        """Set a non-text filter dimension and re-derive immediately."""
        if name == "search":
            self.set_search(value or "")
            return
        if name not in FILTER_KEYS:
            raise ValueError(f"Unknown filter: {name}")
        if is_unconstrained(value):
            self._filters.pop(name, None)
        else:
            self._filters[name] = value
        self._selection.clear()
        self._cancel_search_timer()
        logger.debug("filter_changed", name=name, value=str(value))
        self.refresh()

    def clear_filters(self) -> None:
        self._filters.clear()
        self._selection.clear()
        self._cancel_search_timer()
        self.refresh()

    # ── Sort ──

    def set_sort(self, sort_by: str, sort_order: str | None = None) -> None:
        self.sort_by = sort_by
        if sort_order in (SORT_ASC, SORT_DESC):
            self.sort_order = sort_order
        self.refresh()

    def toggle_sort_order(self) -> None:
        self.sort_order = SORT_DESC if self.sort_order == SORT_ASC else SORT_ASC
        self.refresh()

    # ── Projections ──

    def board(self) -> BoardDescriptor:
        return project_board(self._visible, LANE_KEYS, self.lane_titles)

    def rows(self) -> tuple[ListRow, ...]:
        return project_rows(self._visible, self.users.resolve, self._clock())

    def calendar(self) -> CalendarGrid:
        return generate_calendar(
            self.calendar_year, self.calendar_month, self._visible, self._clock().date()
        )

    def timeline(self) -> TimelineDescriptor:
        return layout_timeline(schedulable(self._visible))

    def stats(self) -> DashboardStats:
        """Counts over the whole collection, ignoring filters."""
        items = self.store.list()
        now = self._clock()
        counts = {status: 0 for status in Status}
        for item in items:
            counts[item.status] += 1
        return DashboardStats(
            total=len(items),
            pending=counts[Status.PENDING],
            in_progress=counts[Status.IN_PROGRESS],
            on_hold=counts[Status.ON_HOLD],
            completed=counts[Status.COMPLETED],
            overdue=sum(1 for item in items if is_overdue(item, now)),
        )

    def is_overdue(self, item: WorkItem) -> bool:
        return is_overdue(item, self._clock())

    # ── Calendar navigation ──

    def navigate_month(self, delta: int) -> None:
        self.calendar_year, self.calendar_month = shift_month(
            self.calendar_year, self.calendar_month, delta
        )
        self._emit()

    def go_to_today(self) -> None:
        today: date = self._clock().date()
        self.calendar_year, self.calendar_month = today.year, today.month - 1
        self._emit()

    # ── Mutations ──

    def _fail(self, event: str, exc: TaskStoreError, **context: Any) -> None:
        logger.warning(event, error=str(exc), **context)
        self.notifier.notify(str(exc), severity="error")

    def create_item(self, data: Mapping[str, Any]) -> WorkItem | None:
        try:
            item = self.store.create(data)
        except TaskStoreError as exc:
            self._fail("task_create_failed", exc)
            return None
        self.notifier.notify(f"Task created: {item.title}", severity="information")
        return item

    def update_item(
        self, item_id: str, changes: Mapping[str, Any], notice: str | None = None
    ) -> WorkItem | None:
        """Apply *changes* to one item. Returns None when the store refuses."""
        try:
            item = self.store.update(item_id, changes)
        except TaskStoreError as exc:
            self._fail("task_update_failed", exc, task_id=item_id)
            return None
        self.notifier.notify(notice or f"Task updated: {item.title}", severity="information")
        return item

    def delete_item(self, item_id: str) -> bool:
        try:
            self.store.delete(item_id)
        except TaskStoreError as exc:
            self._fail("task_delete_failed", exc, task_id=item_id)
            return False
        self._selection.discard(item_id)
        self.notifier.notify("Task deleted", severity="information")
        return True

    def bulk_update_status(self, status: Status | str) -> int:
        """Move every selected item to *status*. Returns how many changed."""
        status = Status(status)
        done = self._bulk(lambda item_id: self.store.update(item_id, {"status": status}))
        if done:
            self.notifier.notify(
                f"{done} task(s) moved to {STATUS_LABELS[status]}", severity="information"
            )
        return done

    def bulk_delete(self) -> int:
        done = self._bulk(self.store.delete)
        if done:
            self.notifier.notify(f"{done} task(s) deleted", severity="information")
        return done

    def _bulk(self, operation: Callable[[str], Any]) -> int:
        done = 0
        self._batch_depth += 1
        try:
            for item_id in sorted(self._selection):
                try:
                    operation(item_id)
                except TaskStoreError as exc:
                    self._fail("bulk_operation_failed", exc, task_id=item_id)
                    continue
                done += 1
        finally:
            self._batch_depth -= 1
        self.refresh()
        return done

    # ── Selection ──

    @property
    def selection(self) -> frozenset[str]:
        return frozenset(self._selection)

    def is_selected(self, item_id: str) -> bool:
        return item_id in self._selection

    def toggle_selection(self, item_id: str, checked: bool | None = None) -> None:
        """Add or remove one id. ``checked=None`` flips the current state."""
        if checked is None:
            checked = item_id not in self._selection
        if checked:
            self._selection.add(item_id)
        else:
            self._selection.discard(item_id)
        self._emit()

    def select_all_visible(self, checked: bool = True) -> None:
        visible = {item.id for item in self._visible}
        if checked:
            self._selection |= visible
        else:
            self._selection -= visible
        self._emit()

    def clear_selection(self) -> None:
        self._selection.clear()
        self._emit()

    def selected_items(self) -> list[WorkItem]:
        return [item for item in self.store.list() if item.id in self._selection]

    # ── Lifecycle ──

    def close(self) -> None:
        self._cancel_search_timer()
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
