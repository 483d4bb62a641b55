"""Demo data for --demo mode.

Provides:
- demo_tasks()      → HR sample tasks with dates relative to today
- demo_settings()   → users and the signed-in user for the demo session
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time, timedelta
from typing import Any

from tui_hrdash.models import Priority, RecurringType, Status, WorkItem

DEMO_NAME = "People Ops Q-Plan (Demo)"

_USERS = [
    {"email": "dana.park@acme.test", "name": "Dana Park", "department": "Human Resources"},
    {"email": "sam.rivera@acme.test", "name": "Sam Rivera", "department": "Talent Acquisition"},
    {"email": "alex.chen@acme.test", "name": "Alex Chen", "department": "Finance"},
    {"email": "jordan.lee@acme.test", "name": "Jordan Lee", "department": "IT"},
    {"email": "priya.nair@acme.test", "name": "Priya Nair", "department": "Human Resources"},
]

# (id, title, status, priority, category, department, assignees,
#  start offset, due offset, progress, dependencies)
_TASKS: list[tuple] = [
    ("hr-001", "Draft Q3 hiring plan", Status.COMPLETED, Priority.HIGH,
     "Recruiting", "Talent Acquisition", ("sam.rivera@acme.test",), -21, -10, 100, ()),
    ("hr-002", "Publish senior engineer job posting", Status.IN_PROGRESS, Priority.HIGH,
     "Recruiting", "Talent Acquisition", ("sam.rivera@acme.test",), -9, 2, 60, ("hr-001",)),
    ("hr-003", "Schedule onboarding for new hires", Status.PENDING, Priority.MEDIUM,
     "Onboarding", "Human Resources", ("dana.park@acme.test", "priya.nair@acme.test"),
     1, 8, 0, ("hr-002",)),
    ("hr-004", "Provision laptops and accounts", Status.PENDING, Priority.MEDIUM,
     "Onboarding", "IT", ("jordan.lee@acme.test",), 3, 9, 0, ("hr-003",)),
    ("hr-005", "Run monthly payroll reconciliation", Status.IN_PROGRESS, Priority.CRITICAL,
     "Payroll", "Finance", ("alex.chen@acme.test",), -3, 1, 40, ()),
    ("hr-006", "Update employee handbook leave policy", Status.ON_HOLD, Priority.LOW,
     "Policy", "Human Resources", ("priya.nair@acme.test",), -14, 20, 25, ()),
    ("hr-007", "Collect benefits enrollment forms", Status.PENDING, Priority.HIGH,
     "Benefits", "Human Resources", ("dana.park@acme.test",), -12, -2, 10, ()),
    ("hr-008", "Quarterly performance review cycle", Status.IN_PROGRESS, Priority.MEDIUM,
     "Performance", "Human Resources", ("dana.park@acme.test",), -5, 25, 15, ()),
    ("hr-009", "Exit interview summary report", Status.COMPLETED, Priority.LOW,
     "Offboarding", "Human Resources", ("priya.nair@acme.test",), -18, -15, 100, ()),
    ("hr-010", "Renew HRIS vendor contract", Status.PENDING, Priority.HIGH,
     "Vendors", "Finance", ("alex.chen@acme.test", "dana.park@acme.test"), None, 14, 0, ()),
    ("hr-011", "Security awareness training rollout", Status.PENDING, Priority.MEDIUM,
     "Training", "IT", ("jordan.lee@acme.test",), 5, 30, 0, ()),
    ("hr-012", "Plan team offsite logistics", Status.ON_HOLD, Priority.LOW,
     "Engagement", "Human Resources", (), None, None, 0, ()),
]


def _offset(today: date, days: int | None) -> date | None:
    return None if days is None else today + timedelta(days=days)


def demo_tasks(today: date | None = None) -> list[WorkItem]:
    """Build the demo task list so today falls inside the active work."""
    today = today or date.today()
    tasks: list[WorkItem] = []
    for n, (task_id, title, status, priority, category, dept, assignees,
            start, due, progress, deps) in enumerate(_TASKS):
        tasks.append(
            WorkItem(
                id=task_id,
                title=title,
                description=f"{category} task for the {dept} team.",
                status=status,
                priority=priority,
                category=category,
                department=dept,
                assigned_to=assignees,
                start_date=_offset(today, start),
                due_date=_offset(today, due),
                estimated_hours=8.0 + 4 * (n % 4),
                progress=progress,
                dependencies=deps,
                tags=(category.lower(),),
                created_at=datetime.combine(today - timedelta(days=30 - n), time(9, 0)),
            )
        )
    # Payroll repeats every month.
    tasks[4] = replace(tasks[4], is_recurring=True, recurring_type=RecurringType.MONTHLY)
    return tasks


def demo_settings() -> dict[str, Any]:
    """Settings overrides used in --demo mode."""
    return {
        "current_user": "dana.park@acme.test",
        "users": [dict(u) for u in _USERS],
    }
