"""Tests for the sort engine."""

from datetime import date, datetime

import pytest

from tui_hrdash.models import SORT_FIELDS, Priority, Status, WorkItem
from tui_hrdash.sorting import UNDATED_SENTINEL, sort_items, sort_key


def _ids(items):
    return [i.id for i in items]


def _items():
    return [
        WorkItem(title="b", id="1", due_date=date(2025, 3, 1), priority=Priority.LOW,
                 created_at=datetime(2025, 1, 3)),
        WorkItem(title="a", id="2", priority=Priority.CRITICAL,
                 created_at=datetime(2025, 1, 1)),
        WorkItem(title="C", id="3", due_date=date(2025, 2, 1), priority=Priority.LOW,
                 status=Status.COMPLETED, created_at=datetime(2025, 1, 2)),
        WorkItem(title="d", id="4", due_date=date(2025, 3, 1), priority=Priority.HIGH,
                 status=Status.ON_HOLD, created_at=datetime(2025, 1, 4)),
    ]


class TestDueDate:
    def test_ascending_puts_undated_last(self):
        assert _ids(sort_items(_items(), "dueDate", "asc")) == ["3", "1", "4", "2"]

    def test_descending_puts_undated_first(self):
        assert _ids(sort_items(_items(), "dueDate", "desc")) == ["2", "1", "4", "3"]

    def test_undated_key_is_sentinel(self):
        assert sort_key(WorkItem(title="x"), "dueDate") == UNDATED_SENTINEL


class TestPriority:
    def test_ascending_by_ordinal(self):
        assert _ids(sort_items(_items(), "priority", "asc")) == ["1", "3", "4", "2"]

    def test_descending(self):
        assert _ids(sort_items(_items(), "priority", "desc"))[0] == "2"


def test_title_case_insensitive():
    assert _ids(sort_items(_items(), "title")) == ["2", "1", "3", "4"]


def test_created_at():
    assert _ids(sort_items(_items(), "createdAt")) == ["2", "3", "1", "4"]


def test_status_lexical():
    assert _ids(sort_items(_items(), "status")) == ["3", "4", "1", "2"]


def test_ties_keep_input_order():
    items = _items()
    assert _ids(sort_items(items, "priority"))[:2] == ["1", "3"]
    assert _ids(sort_items(list(reversed(items)), "priority"))[:2] == ["3", "1"]


def test_unknown_key_keeps_order():
    assert _ids(sort_items(_items(), "bogus")) == ["1", "2", "3", "4"]
    assert sort_key(WorkItem(title="x"), "bogus") is None


def test_input_not_mutated():
    items = _items()
    result = sort_items(items, "title")
    assert result is not items
    assert _ids(items) == ["1", "2", "3", "4"]


@pytest.mark.parametrize("order", ["asc", "desc"])
@pytest.mark.parametrize("sort_by", list(SORT_FIELDS))
def test_sorting_twice_is_stable(sort_by, order):
    once = sort_items(_items(), sort_by, order)
    assert _ids(sort_items(once, sort_by, order)) == _ids(once)
