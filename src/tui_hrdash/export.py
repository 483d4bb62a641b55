"""Export task sequences to JSON and CSV."""

from __future__ import annotations

import csv
import json
from collections.abc import Callable, Iterable
from datetime import datetime
from pathlib import Path

from tui_hrdash.models import STATUS_LABELS, WorkItem, is_overdue, work_item_to_dict

EXPORT_FORMATS = ("json", "csv")

CSV_HEADERS = [
    "id", "title", "status", "priority", "category", "department",
    "assigned_to", "start_date", "due_date", "progress",
    "estimated_hours", "actual_hours", "overdue", "tags", "description",
]


def export_json(
    items: Iterable[WorkItem], output_path: Path, now: datetime | None = None
) -> int:
    """Export tasks to a JSON file. Returns the number of tasks written."""
    tasks = []
    for item in items:
        d = work_item_to_dict(item)
        d["overdue"] = is_overdue(item, now)
        tasks.append(d)
    data = {
        "exported_at": (now or datetime.now()).isoformat(timespec="seconds"),
        "count": len(tasks),
        "tasks": tasks,
    }
    output_path.write_text(
        json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8"
    )
    return len(tasks)


def export_csv(
    items: Iterable[WorkItem],
    output_path: Path,
    resolve: Callable[[str], str] | None = None,
    now: datetime | None = None,
) -> int:
    """Export tasks to a CSV file. Assignees go through *resolve* when given."""
    rows: list[dict[str, str]] = []
    for item in items:
        assignees = [resolve(a) if resolve else a for a in item.assigned_to]
        rows.append({
            "id": item.id,
            "title": item.title,
            "status": STATUS_LABELS[item.status],
            "priority": item.priority_info.label,
            "category": item.category,
            "department": item.department,
            "assigned_to": "; ".join(assignees),
            "start_date": item.start_date.isoformat() if item.start_date else "",
            "due_date": item.due_date.isoformat() if item.due_date else "",
            "progress": str(item.progress),
            "estimated_hours": "" if item.estimated_hours is None else str(item.estimated_hours),
            "actual_hours": "" if item.actual_hours is None else str(item.actual_hours),
            "overdue": "yes" if is_overdue(item, now) else "no",
            "tags": "; ".join(item.tags),
            "description": item.description.replace("\n", " "),
        })

    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_HEADERS)
        writer.writeheader()
        writer.writerows(rows)
    return len(rows)


def export_items(
    items: Iterable[WorkItem],
    output_path: Path,
    fmt: str | None = None,
    resolve: Callable[[str], str] | None = None,
) -> int:
    """Export by explicit *fmt* or by the output file's extension."""
    fmt = (fmt or output_path.suffix.lstrip(".")).lower()
    if fmt == "json":
        return export_json(items, output_path)
    if fmt == "csv":
        return export_csv(items, output_path, resolve)
    raise ValueError(f"Unsupported export format: {fmt or '(none)'}")
