"""Tests for the timeline layout calculator."""

from datetime import date

import pytest

from tui_hrdash.models import WorkItem
from tui_hrdash.projections.timeline import (
    EMPTY_TIMELINE,
    axis_ticks,
    layout_timeline,
    pct_to_col,
    schedulable,
)


def _item(id, start, due, progress=0):
    return WorkItem(title=id, id=id, start_date=start, due_date=due, progress=progress)


class TestLayout:
    def test_bar_math(self):
        items = [
            _item("axis", date(2025, 1, 1), date(2025, 1, 11)),
            _item("x", date(2025, 1, 3), date(2025, 1, 5)),
        ]
        desc = layout_timeline(items)
        assert desc.min_date == date(2025, 1, 1)
        assert desc.max_date == date(2025, 1, 11)
        assert desc.total_span == 10
        bar = desc.bars[1]
        assert bar.left_pct == pytest.approx(20.0)
        assert bar.width_pct == pytest.approx(20.0)
        assert desc.bars[0].width_pct == pytest.approx(100.0)

    def test_empty_input(self):
        assert layout_timeline([]) is EMPTY_TIMELINE
        assert EMPTY_TIMELINE.is_empty

    def test_zero_span_axis(self):
        d = date(2025, 5, 5)
        desc = layout_timeline([_item("a", d, d)])
        assert desc.total_span == 0
        assert desc.bars[0].left_pct == 0
        assert desc.bars[0].width_pct == 0

    def test_inverted_bar(self):
        items = [
            _item("ok", date(2025, 1, 1), date(2025, 1, 11)),
            _item("bad", date(2025, 1, 8), date(2025, 1, 4)),
        ]
        bar = layout_timeline(items).bars[1]
        assert bar.inverted
        assert bar.width_pct == 0

    def test_only_inverted_items_give_zero_span(self):
        desc = layout_timeline([_item("bad", date(2025, 1, 10), date(2025, 1, 5))])
        assert desc.total_span == 0
        assert desc.bars[0].left_pct == 0

    def test_inverted_start_past_axis_end_is_clamped(self):
        items = [
            _item("ok", date(2025, 1, 1), date(2025, 1, 15)),
            _item("bad", date(2025, 1, 20), date(2025, 1, 2)),
        ]
        desc = layout_timeline(items)
        assert desc.total_span == 14
        assert desc.bars[1].left_pct == 100.0
        assert desc.bars[1].inverted

    def test_partial_item_rejected(self):
        with pytest.raises(ValueError):
            layout_timeline([WorkItem(title="x", due_date=date(2025, 1, 1))])

    def test_progress_clamped(self):
        bar = layout_timeline([_item("a", date(2025, 1, 1), date(2025, 1, 2), progress=150)]).bars[0]
        assert bar.progress_pct == 100


def test_schedulable_excludes_partial_items():
    items = [
        _item("full", date(2025, 1, 1), date(2025, 1, 2)),
        WorkItem(title="due only", due_date=date(2025, 1, 2)),
        WorkItem(title="start only", start_date=date(2025, 1, 2)),
    ]
    assert [i.id for i in schedulable(items)] == ["full"]


class TestAxisTicks:
    def test_evenly_spaced(self):
        desc = layout_timeline([_item("a", date(2025, 1, 1), date(2025, 1, 9))])
        ticks = axis_ticks(desc)
        assert [pct for pct, _ in ticks] == [0, 25, 50, 75, 100]
        assert ticks[0][1] == date(2025, 1, 1)
        assert ticks[-1][1] == date(2025, 1, 9)

    def test_empty(self):
        assert axis_ticks(EMPTY_TIMELINE) == []


def test_pct_to_col_clamps():
    assert pct_to_col(0, 50) == 0
    assert pct_to_col(100, 50) == 49
    assert pct_to_col(250, 50) == 49
    assert pct_to_col(-10, 50) == 0
    assert pct_to_col(50, 0) == 0
