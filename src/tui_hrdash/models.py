"""Data models for TUI HR Dashboard."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, NamedTuple


class Status(Enum):
    """Work item status. The value doubles as the board lane key."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    ON_HOLD = "on-hold"
    COMPLETED = "completed"


class Priority(Enum):
    """Work item priority."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class RecurringType(Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class ViewMode(Enum):
    """The four presentations of the task collection."""

    BOARD = "board"
    LIST = "list"
    CALENDAR = "calendar"
    TIMELINE = "timeline"

    @property
    def label(self) -> str:
        return VIEW_LABELS[self]


VIEW_LABELS = {
    ViewMode.BOARD: "Board",
    ViewMode.LIST: "List",
    ViewMode.CALENDAR: "Calendar",
    ViewMode.TIMELINE: "Timeline",
}


class PriorityInfo(NamedTuple):
    """Display label, color and sort ordinal of a priority."""

    label: str
    color: str
    ordinal: int


PRIORITIES: dict[Priority, PriorityInfo] = {
    Priority.LOW: PriorityInfo("Low", "#22c55e", 1),
    Priority.MEDIUM: PriorityInfo("Medium", "#eab308", 2),
    Priority.HIGH: PriorityInfo("High", "#f97316", 3),
    Priority.CRITICAL: PriorityInfo("Critical", "#ef4444", 4),
}

STATUS_LABELS = {
    Status.PENDING: "Pending",
    Status.IN_PROGRESS: "In Progress",
    Status.ON_HOLD: "On Hold",
    Status.COMPLETED: "Completed",
}

STATUS_ICONS = {
    Status.PENDING: "○",
    Status.IN_PROGRESS: "◐",
    Status.ON_HOLD: "◌",
    Status.COMPLETED: "●",
}

PRIORITY_ICONS = {
    Priority.LOW: "▽",
    Priority.MEDIUM: "▲",
    Priority.HIGH: "◆",
    Priority.CRITICAL: "‼",
}

LOCK_ICON = "🔒"

# Board lane keys, in display order.
LANE_KEYS: tuple[str, ...] = tuple(s.value for s in Status)

# Filter dimensions understood by the predicate builder.
FILTER_KEYS: tuple[str, ...] = (
    "search",
    "status",
    "priority",
    "assignedTo",
    "department",
    "dueDateFrom",
    "dueDateTo",
)
ALL = "all"
ME = "me"
OVERDUE = "overdue"

SORT_FIELDS: dict[str, str] = {
    "dueDate": "Due Date",
    "priority": "Priority",
    "createdAt": "Created Date",
    "title": "Title",
    "status": "Status",
}
SORT_ASC = "asc"
SORT_DESC = "desc"

DATE_FORMAT_PRESETS: dict[str, str] = {
    "YYYY-MM-DD": "%Y-%m-%d",
    "MM/DD/YYYY": "%m/%d/%Y",
    "DD/MM/YYYY": "%d/%m/%Y",
    "DD.MM.YYYY": "%d.%m.%Y",
    "MMM DD, YYYY": "%b %d, %Y",
    "MM-DD": "%m-%d",
}
DEFAULT_DATE_FORMAT = "YYYY-MM-DD"


def format_date(d: date | None, date_format: str = DEFAULT_DATE_FORMAT) -> str:
    """Format a date for display. Returns empty string for None."""
    if d is None:
        return ""
    fmt = DATE_FORMAT_PRESETS.get(date_format)
    if fmt is None:
        return d.isoformat()
    return d.strftime(fmt)


@dataclass(frozen=True)
class WorkItem:
    """A task record. Immutable; the store hands out snapshots."""

    title: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    description: str = ""
    priority: Priority = Priority.MEDIUM
    status: Status = Status.PENDING
    category: str = ""
    department: str = ""
    assigned_to: tuple[str, ...] = ()
    start_date: date | None = None
    due_date: date | None = None
    estimated_hours: float | None = None
    actual_hours: float | None = None
    progress: int = 0
    dependencies: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    is_recurring: bool = False
    recurring_type: RecurringType | None = None
    recurring_interval: int = 1
    recurring_end_date: date | None = None
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def priority_info(self) -> PriorityInfo:
        return PRIORITIES[self.priority]

    @property
    def status_icon(self) -> str:
        return STATUS_ICONS[self.status]

    @property
    def priority_icon(self) -> str:
        return PRIORITY_ICONS[self.priority]

    @property
    def has_schedule(self) -> bool:
        """True when both start and due dates are set."""
        return self.start_date is not None and self.due_date is not None


def is_overdue(item: WorkItem, now: datetime | date | None = None) -> bool:
    """Return True if the item is past due and not completed.

    Recomputed on every call; nothing is cached on the item.
    """
    if item.due_date is None or item.status == Status.COMPLETED:
        return False
    if now is None:
        now = datetime.now()
    today = now.date() if isinstance(now, datetime) else now
    return item.due_date < today


def has_incomplete_dependencies(item: WorkItem, item_map: dict[str, WorkItem]) -> bool:
    """Return True if any dependency of the item is not completed.

    Unknown dependency ids count as incomplete.
    """
    for dep_id in item.dependencies:
        dep = item_map.get(dep_id)
        if dep is None or dep.status != Status.COMPLETED:
            return True
    return False


def work_item_to_dict(item: WorkItem) -> dict[str, Any]:
    """Serialize an item into plain YAML/JSON friendly values."""
    return {
        "id": item.id,
        "title": item.title,
        "description": item.description,
        "priority": item.priority.value,
        "status": item.status.value,
        "category": item.category,
        "department": item.department,
        "assigned_to": list(item.assigned_to),
        "start_date": item.start_date.isoformat() if item.start_date else None,
        "due_date": item.due_date.isoformat() if item.due_date else None,
        "estimated_hours": item.estimated_hours,
        "actual_hours": item.actual_hours,
        "progress": item.progress,
        "dependencies": list(item.dependencies),
        "tags": list(item.tags),
        "is_recurring": item.is_recurring,
        "recurring_type": item.recurring_type.value if item.recurring_type else None,
        "recurring_interval": item.recurring_interval,
        "recurring_end_date": (
            item.recurring_end_date.isoformat() if item.recurring_end_date else None
        ),
        "created_at": item.created_at.isoformat(timespec="seconds"),
    }


@dataclass
class DashboardConfig:
    """Dashboard configuration stored in .tui-hrdash/config.toml."""

    name: str = ""
    default_view: str = ViewMode.BOARD.value
    sort_by: str = "dueDate"
    sort_order: str = SORT_ASC
    date_format: str = DEFAULT_DATE_FORMAT
    search_debounce_ms: int = 300
    theme_name: str = "default_dark"

    @property
    def search_debounce(self) -> float:
        """Debounce delay in seconds."""
        return max(0, self.search_debounce_ms) / 1000


@dataclass(frozen=True)
class UserRecord:
    """An entry in the user directory."""

    email: str
    name: str = ""
    department: str = ""

    @property
    def display_name(self) -> str:
        return self.name or self.email
