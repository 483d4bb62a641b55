"""Tests for the list projection."""

from datetime import date, datetime

from tui_hrdash.models import PRIORITIES, Priority, WorkItem
from tui_hrdash.projections.listing import project_rows

NOW = datetime(2025, 11, 15, 9, 0)


def test_rows_follow_input_order():
    items = [WorkItem(title="B", id="b"), WorkItem(title="A", id="a")]
    assert [r.item.id for r in project_rows(items, now=NOW)] == ["b", "a"]


def test_assignees_resolved():
    item = WorkItem(title="T", assigned_to=("ana@corp.test", "zed@corp.test"))
    names = {"ana@corp.test": "Ana Ruiz"}
    row = project_rows([item], resolve=lambda a: names.get(a, a), now=NOW)[0]
    assert row.assignee_names == ("Ana Ruiz", "zed@corp.test")
    assert row.assignees == "Ana Ruiz, zed@corp.test"


def test_raw_ids_without_resolver():
    row = project_rows([WorkItem(title="T", assigned_to=("x",))], now=NOW)[0]
    assert row.assignees == "x"


def test_overdue_and_priority():
    item = WorkItem(title="T", priority=Priority.HIGH, due_date=date(2025, 11, 1))
    row = project_rows([item], now=NOW)[0]
    assert row.overdue
    assert row.priority_label == PRIORITIES[Priority.HIGH].label
    assert row.priority_color == PRIORITIES[Priority.HIGH].color


def test_empty():
    assert project_rows([], now=NOW) == ()
