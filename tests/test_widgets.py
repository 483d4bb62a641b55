"""Tests for the view widgets, mounted in a bare harness app."""

from datetime import date

import pytest
from textual.app import App, ComposeResult
from textual.widgets import Input

from tui_hrdash.models import Status, WorkItem
from tui_hrdash.projections.board import project_board
from tui_hrdash.projections.calendar import generate_calendar
from tui_hrdash.projections.timeline import EMPTY_TIMELINE, layout_timeline
from tui_hrdash.widgets.calendar_view import CalendarView
from tui_hrdash.widgets.filter_bar import FilterBar
from tui_hrdash.widgets.kanban_board import KanbanBoard, KanbanCard
from tui_hrdash.widgets.timeline_chart import TimelineChart, TimelineView


PAUSE = 0.1


class Harness(App):
    def __init__(self, widget) -> None:
        super().__init__()
        self.widget = widget
        self.messages: list = []

    def compose(self) -> ComposeResult:
        yield self.widget

    def on_kanban_board_card_highlighted(self, event) -> None:
        self.messages.append(event)

    def on_calendar_view_day_selected(self, event) -> None:
        self.messages.append(event)

    def on_calendar_view_month_change_requested(self, event) -> None:
        self.messages.append(event)

    def on_filter_bar_filter_changed(self, event) -> None:
        self.messages.append(event)

    def on_filter_bar_search_changed(self, event) -> None:
        self.messages.append(event)


def _board_items():
    return [
        WorkItem(title="A", id="a", status=Status.PENDING),
        WorkItem(title="B", id="b", status=Status.PENDING),
        WorkItem(title="C", id="c", status=Status.COMPLETED, dependencies=("zzz",)),
        WorkItem(title="D", id="d", status=Status.ON_HOLD, dependencies=("a",)),
    ]


class TestKanbanBoard:
    @pytest.mark.asyncio
    async def test_cards_mounted_per_lane(self):
        board = KanbanBoard()
        app = Harness(board)
        async with app.run_test(size=(120, 30)) as pilot:
            items = _board_items()
            board.update_board(project_board(items), item_map={i.id: i for i in items})
            await pilot.pause(delay=PAUSE)
            assert len(board.query(KanbanCard)) == 4
            assert board.highlighted_id == "a"
            assert board.lane_of("d") == "on-hold"

    @pytest.mark.asyncio
    async def test_keyboard_navigation_skips_empty_lanes(self):
        board = KanbanBoard()
        app = Harness(board)
        async with app.run_test(size=(120, 30)) as pilot:
            board.update_board(project_board(_board_items()))
            await pilot.pause(delay=PAUSE)
            board.focus()
            await pilot.press("down")
            assert board.highlighted_id == "b"
            await pilot.press("right")
            # in-progress is empty, so the cursor lands on on-hold
            assert board.highlighted_id == "d"
            await pilot.press("right")
            assert board.highlighted_id == "c"
            await pilot.press("right")
            assert board.highlighted_id == "c"
            await pilot.pause(delay=PAUSE)
            assert [m.item_id for m in app.messages] == ["b", "d", "c"]

    @pytest.mark.asyncio
    async def test_highlight_kept_across_updates(self):
        board = KanbanBoard()
        app = Harness(board)
        async with app.run_test(size=(120, 30)) as pilot:
            items = _board_items()
            board.update_board(project_board(items))
            await pilot.pause(delay=PAUSE)
            board.focus()
            await pilot.press("down")
            board.update_board(project_board(list(reversed(items))))
            await pilot.pause(delay=PAUSE)
            assert board.highlighted_id == "b"
            board.update_board(project_board(items[2:]))
            await pilot.pause(delay=PAUSE)
            assert board.highlighted_id == "d"


    @pytest.mark.asyncio
    async def test_bracketed_text_rendered_literally(self):
        board = KanbanBoard()
        app = Harness(board)
        item = WorkItem(
            title="Review [bold] and [/] tags",
            id="r",
            assigned_to=("[red]ops",),
            due_date=date(2025, 11, 20),
        )
        async with app.run_test(size=(120, 30)) as pilot:
            board.update_board(project_board([item]), resolve=lambda who: who)
            await pilot.pause(delay=PAUSE)
            rendered = str(board.query_one(KanbanCard).render())
            assert "Review [bold] and [/] tags" in rendered
            assert "[red]ops" in rendered


class TestCalendarView:
    @pytest.mark.asyncio
    async def test_cursor_starts_on_today_and_opens_day(self):
        view = CalendarView()
        app = Harness(view)
        items = [WorkItem(title="Payroll", id="p", due_date=date(2025, 11, 15))]
        async with app.run_test(size=(120, 40)) as pilot:
            view.update_grid(generate_calendar(2025, 10, items, today=date(2025, 11, 15)))
            view.focus()
            await pilot.pause(delay=PAUSE)
            assert view.selected_cell.date == date(2025, 11, 15)
            await pilot.press("enter")
            await pilot.pause(delay=PAUSE)
            event = app.messages[-1]
            assert isinstance(event, CalendarView.DaySelected)
            assert event.day == date(2025, 11, 15)
            assert event.item_ids == ["p"]

    @pytest.mark.asyncio
    async def test_arrow_past_edge_requests_month(self):
        view = CalendarView()
        app = Harness(view)
        async with app.run_test(size=(120, 40)) as pilot:
            # November 2025 has no "today" here; the cursor starts on Nov 1
            view.update_grid(generate_calendar(2025, 10, today=date(2024, 1, 1)))
            view.focus()
            await pilot.pause(delay=PAUSE)
            assert view.selected_cell.date == date(2025, 11, 1)
            await pilot.press("right")
            assert view.selected_cell.date == date(2025, 11, 2)
            await pilot.press("up")
            await pilot.press("up")
            await pilot.pause(delay=PAUSE)
            event = app.messages[-1]
            assert isinstance(event, CalendarView.MonthChangeRequested)
            assert event.delta == -1

    @pytest.mark.asyncio
    async def test_cursor_date_kept_within_month(self):
        view = CalendarView()
        app = Harness(view)
        async with app.run_test(size=(120, 40)) as pilot:
            view.update_grid(generate_calendar(2025, 10, today=date(2025, 11, 15)))
            view.focus()
            await pilot.press("right")
            view.update_grid(generate_calendar(2025, 10, today=date(2025, 11, 15)))
            await pilot.pause(delay=PAUSE)
            assert view.selected_cell.date == date(2025, 11, 16)


class TestTimelineChart:
    @pytest.mark.asyncio
    async def test_empty_state(self):
        chart = TimelineChart()
        app = Harness(chart)
        async with app.run_test(size=(120, 30)) as pilot:
            chart.update_timeline(EMPTY_TIMELINE, date(2025, 11, 15))
            await pilot.pause(delay=PAUSE)
            assert chart.highlighted_id is None

    @pytest.mark.asyncio
    async def test_row_navigation(self):
        chart = TimelineChart()
        app = Harness(chart)
        items = [
            WorkItem(title="A", id="a", start_date=date(2025, 11, 1), due_date=date(2025, 11, 5)),
            WorkItem(title="B", id="b", start_date=date(2025, 11, 9), due_date=date(2025, 11, 3)),
        ]
        async with app.run_test(size=(120, 30)) as pilot:
            chart.update_timeline(layout_timeline(items), date(2025, 11, 2))
            await pilot.pause(delay=PAUSE)
            assert chart.highlighted_id == "a"
            chart.focus_view()
            await pilot.press("down")
            await pilot.pause(delay=PAUSE)
            assert chart.highlighted_id == "b"
            view = chart.query_one(TimelineView)
            assert view.bars[1].inverted


def _date_changes(app):
    return [
        m.value
        for m in app.messages
        if isinstance(m, FilterBar.FilterChanged) and m.name == "dueDateFrom"
    ]


class TestFilterBar:
    @pytest.mark.asyncio
    async def test_search_posts_every_keystroke(self):
        bar = FilterBar()
        app = Harness(bar)
        async with app.run_test(size=(160, 20)) as pilot:
            bar.focus_search()
            await pilot.press("a", "b")
            await pilot.pause(delay=PAUSE)
            texts = [m.text for m in app.messages if isinstance(m, FilterBar.SearchChanged)]
            assert texts == ["a", "ab"]

    @pytest.mark.asyncio
    async def test_partial_dates_are_not_posted(self):
        bar = FilterBar()
        app = Harness(bar)
        async with app.run_test(size=(160, 20)) as pilot:
            bar.query_one("#filter-due-from", Input).focus()
            await pilot.press(*"2025-11-0")
            await pilot.pause(delay=PAUSE)
            assert not _date_changes(app)
            await pilot.press("1")
            await pilot.pause(delay=PAUSE)
            assert _date_changes(app) == ["2025-11-01"]

    @pytest.mark.asyncio
    async def test_show_state_is_silent(self):
        bar = FilterBar()
        app = Harness(bar)
        async with app.run_test(size=(160, 20)) as pilot:
            await pilot.pause(delay=PAUSE)
            seen = len(app.messages)
            bar.show_state({"search": "pay", "status": "pending"}, "title", "desc")
            await pilot.pause(delay=PAUSE)
            assert bar.query_one("#filter-search", Input).value == "pay"
            assert len(app.messages) == seen
