"""Full-field task create/edit form screen."""

from __future__ import annotations

from typing import Any

from textual.app import ComposeResult
from textual.containers import Horizontal, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Select, Static, TextArea

from tui_hrdash.errors import ValidationError
from tui_hrdash.models import (
    PRIORITIES,
    STATUS_LABELS,
    Priority,
    RecurringType,
    Status,
    UserRecord,
    WorkItem,
)
from tui_hrdash.store import coerce_fields

_NO_RECURRENCE = "none"


def _date_str(value) -> str:
    return value.isoformat() if value else ""


def _num_str(value) -> str:
    return "" if value is None else f"{value:g}"


class TaskEditScreen(ModalScreen[dict | None]):
    """Modal form for creating a task or editing all fields of one.

    Dismisses with a dict of raw field values: every field for a new task,
    only the changed ones for an edit. Invalid input keeps the form open.
    """

    BINDINGS = [
        ("escape", "cancel", "Cancel"),
        ("ctrl+s", "save", "Save"),
    ]

    DEFAULT_CSS = """
    TaskEditScreen {
        align: center middle;
    }
    #task-edit-container {
        width: 76;
        max-height: 90%;
        background: $surface;
        border: thick $primary;
        padding: 1 2;
    }
    #task-edit-title {
        text-style: bold;
        margin-bottom: 1;
    }
    .field-label {
        margin-top: 1;
        color: $text-muted;
    }
    .field-row {
        height: auto;
    }
    .field-row > Input, .field-row > Select {
        width: 1fr;
    }
    #field-description {
        height: 5;
    }
    #task-edit-buttons {
        align: center middle;
        height: 3;
        margin-top: 1;
    }
    #task-edit-buttons Button {
        margin: 0 1;
    }
    """

    def __init__(
        self,
        item: WorkItem | None = None,
        users: list[UserRecord] | None = None,
        defaults: dict[str, Any] | None = None,
    ) -> None:
        super().__init__()
        self._item = item
        self._users = users or []
        self._defaults = defaults or {}

    @property
    def is_new(self) -> bool:
        return self._item is None

    def _initial(self) -> dict[str, str]:
        item = self._item
        if item is None:
            return {
                "title": "",
                "description": "",
                "status": str(self._defaults.get("status", Status.PENDING.value)),
                "priority": str(self._defaults.get("priority", Priority.MEDIUM.value)),
                "category": "",
                "department": "",
                "assigned_to": ", ".join(self._defaults.get("assigned_to", ())),
                "start_date": "",
                "due_date": _date_str(self._defaults.get("due_date")),
                "estimated_hours": "",
                "actual_hours": "",
                "progress": "0",
                "dependencies": "",
                "tags": "",
                "recurring_type": _NO_RECURRENCE,
                "recurring_interval": "1",
                "recurring_end_date": "",
            }
        return {
            "title": item.title,
            "description": item.description,
            "status": item.status.value,
            "priority": item.priority.value,
            "category": item.category,
            "department": item.department,
            "assigned_to": ", ".join(item.assigned_to),
            "start_date": _date_str(item.start_date),
            "due_date": _date_str(item.due_date),
            "estimated_hours": _num_str(item.estimated_hours),
            "actual_hours": _num_str(item.actual_hours),
            "progress": str(item.progress),
            "dependencies": ", ".join(item.dependencies),
            "tags": ", ".join(item.tags),
            "recurring_type": (
                item.recurring_type.value if item.recurring_type else _NO_RECURRENCE
            ),
            "recurring_interval": str(item.recurring_interval),
            "recurring_end_date": _date_str(item.recurring_end_date),
        }

    def compose(self) -> ComposeResult:
        init = self._initial()
        heading = "New Task" if self.is_new else f"Edit Task  [dim]{self._item.id}[/dim]"
        known = ", ".join(u.email for u in self._users[:3])
        with VerticalScroll(id="task-edit-container"):
            yield Static(f"[bold]{heading}[/bold]", id="task-edit-title")

            yield Static("Title *", classes="field-label")
            yield Input(value=init["title"], id="field-title")

            yield Static("Description", classes="field-label")
            yield TextArea(init["description"], id="field-description")

            yield Static("Status / Priority", classes="field-label")
            with Horizontal(classes="field-row"):
                yield Select(
                    [(STATUS_LABELS[s], s.value) for s in Status],
                    value=init["status"],
                    allow_blank=False,
                    id="field-status",
                )
                yield Select(
                    [(PRIORITIES[p].label, p.value) for p in Priority],
                    value=init["priority"],
                    allow_blank=False,
                    id="field-priority",
                )

            yield Static("Category / Department", classes="field-label")
            with Horizontal(classes="field-row"):
                yield Input(value=init["category"], placeholder="e.g. Onboarding", id="field-category")
                yield Input(value=init["department"], placeholder="e.g. Human Resources", id="field-department")

            yield Static("Assigned to (comma separated)", classes="field-label")
            yield Input(value=init["assigned_to"], placeholder=known, id="field-assigned_to")

            yield Static("Start / Due date", classes="field-label")
            with Horizontal(classes="field-row"):
                yield Input(value=init["start_date"], placeholder="YYYY-MM-DD", id="field-start_date")
                yield Input(value=init["due_date"], placeholder="YYYY-MM-DD", id="field-due_date")

            yield Static("Estimated / Actual hours / Progress %", classes="field-label")
            with Horizontal(classes="field-row"):
                yield Input(value=init["estimated_hours"], id="field-estimated_hours")
                yield Input(value=init["actual_hours"], id="field-actual_hours")
                yield Input(value=init["progress"], placeholder="0-100", id="field-progress")

            yield Static("Depends on (task ids)", classes="field-label")
            yield Input(value=init["dependencies"], id="field-dependencies")

            yield Static("Tags", classes="field-label")
            yield Input(value=init["tags"], placeholder="tag1, tag2", id="field-tags")

            yield Static("Recurrence / Interval / Ends", classes="field-label")
            with Horizontal(classes="field-row"):
                yield Select(
                    [("Does not repeat", _NO_RECURRENCE)]
                    + [(r.value.capitalize(), r.value) for r in RecurringType],
                    value=init["recurring_type"],
                    allow_blank=False,
                    id="field-recurring_type",
                )
                yield Input(value=init["recurring_interval"], id="field-recurring_interval")
                yield Input(
                    value=init["recurring_end_date"],
                    placeholder="YYYY-MM-DD",
                    id="field-recurring_end_date",
                )

            with Horizontal(id="task-edit-buttons"):
                yield Button("Save", variant="primary", id="save-btn")
                yield Button("Cancel", variant="default", id="cancel-btn")

    def on_mount(self) -> None:
        self.query_one("#field-title", Input).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "save-btn":
            self.action_save()
        else:
            self.dismiss(None)

    def _values(self) -> dict[str, str]:
        values: dict[str, str] = {}
        for name in self._initial():
            if name == "description":
                values[name] = self.query_one("#field-description", TextArea).text
                continue
            widget = self.query_one(f"#field-{name}")
            if isinstance(widget, Select):
                values[name] = str(widget.value)
            else:
                values[name] = widget.value.strip()
        return values

    def collect(self) -> dict[str, Any] | None:
        """Raw field values to submit, or None when validation fails."""
        values = self._values()
        initial = self._initial()
        if self.is_new:
            changes = dict(values)
        else:
            changes = {k: v for k, v in values.items() if v != initial[k]}

        if "recurring_type" in changes:
            recurring = changes["recurring_type"]
            changes["recurring_type"] = "" if recurring == _NO_RECURRENCE else recurring
            changes["is_recurring"] = recurring != _NO_RECURRENCE

        try:
            coerce_fields(changes)
        except ValidationError as exc:
            self.notify(str(exc), severity="error")
            return None
        return changes

    def action_save(self) -> None:
        changes = self.collect()
        if changes is None:
            return
        self.dismiss(changes)

    def action_cancel(self) -> None:
        self.dismiss(None)
