"""Integration tests for the TUI app using Textual Pilot."""

import pytest
import yaml
from textual.widgets import ContentSwitcher

from tui_hrdash.app import HRDashApp
from tui_hrdash.models import Status, ViewMode
from tui_hrdash.screens.confirm_screen import ConfirmScreen
from tui_hrdash.screens.help_screen import HelpScreen
from tui_hrdash.screens.select_screen import SelectScreen
from tui_hrdash.screens.task_edit_screen import TaskEditScreen
from tui_hrdash.store import InMemoryTaskStore
from tui_hrdash.widgets.kanban_board import KanbanBoard
from tui_hrdash.widgets.task_list import TaskList


PAUSE = 0.1


@pytest.fixture
def sample_project(tmp_path):
    """Create a project directory with config, settings and tasks."""
    cfg_dir = tmp_path / ".tui-hrdash"
    cfg_dir.mkdir()
    (cfg_dir / "config.toml").write_text(
        '[dashboard]\nname = "People Ops"\n', encoding="utf-8"
    )
    (cfg_dir / "settings.yaml").write_text(
        "current_user: ana@corp.test\n"
        "users:\n"
        "  - {email: ana@corp.test, name: Ana Ruiz, department: HR}\n"
        "  - {email: ben@corp.test, name: Ben Okafor, department: Finance}\n",
        encoding="utf-8",
    )
    (cfg_dir / "tasks.yaml").write_text(
        yaml.safe_dump({"tasks": [
            {"id": "t1", "title": "Payroll run", "status": "pending",
             "due_date": "2025-11-10", "assigned_to": ["ben@corp.test"]},
            {"id": "t2", "title": "Onboarding", "status": "in-progress",
             "start_date": "2025-11-01", "due_date": "2025-11-20",
             "assigned_to": ["ana@corp.test"]},
            {"id": "t3", "title": "Handbook", "status": "on-hold"},
        ]}),
        encoding="utf-8",
    )
    return tmp_path


@pytest.fixture
def demo_app(tmp_path):
    return HRDashApp(project_dir=tmp_path, demo_mode=True)


@pytest.mark.asyncio
async def test_app_starts(sample_project):
    app = HRDashApp(project_dir=sample_project)
    async with app.run_test(size=(120, 40)) as pilot:
        await pilot.pause(delay=PAUSE)
        assert app.controller is not None
        assert len(app.controller.visible_items) == 3
        assert app.controller.current_view == ViewMode.BOARD
        assert "People Ops" in app.title


@pytest.mark.asyncio
async def test_app_starts_in_empty_dir(tmp_path):
    app = HRDashApp(project_dir=tmp_path)
    async with app.run_test(size=(120, 40)) as pilot:
        await pilot.pause(delay=PAUSE)
        assert app.controller.visible_items == ()
        assert tmp_path.name in app.title


@pytest.mark.asyncio
async def test_demo_title(demo_app):
    async with demo_app.run_test(size=(120, 40)) as pilot:
        await pilot.pause(delay=PAUSE)
        assert "[DEMO]" in demo_app.title
        assert len(demo_app.controller.visible_items) >= 10


@pytest.mark.asyncio
async def test_view_switching_keys(demo_app):
    async with demo_app.run_test(size=(120, 40)) as pilot:
        await pilot.pause(delay=PAUSE)
        switcher = demo_app.query_one("#view-switcher", ContentSwitcher)
        for key, mode in (("2", ViewMode.LIST), ("3", ViewMode.CALENDAR),
                          ("4", ViewMode.TIMELINE), ("1", ViewMode.BOARD)):
            await pilot.press(key)
            await pilot.pause(delay=PAUSE)
            assert demo_app.controller.current_view == mode
            assert switcher.current == mode.value


@pytest.mark.asyncio
async def test_adjacent_view_keys_wrap(demo_app):
    async with demo_app.run_test(size=(120, 40)) as pilot:
        await pilot.pause(delay=PAUSE)
        await pilot.press("left_square_bracket")
        await pilot.pause(delay=PAUSE)
        assert demo_app.controller.current_view == ViewMode.TIMELINE
        await pilot.press("right_square_bracket")
        await pilot.pause(delay=PAUSE)
        assert demo_app.controller.current_view == ViewMode.BOARD


@pytest.mark.asyncio
async def test_list_view_shares_sequence(demo_app):
    async with demo_app.run_test(size=(120, 40)) as pilot:
        await pilot.pause(delay=PAUSE)
        await pilot.press("2")
        await pilot.pause(delay=PAUSE)
        task_list = demo_app.query_one(TaskList)
        assert task_list.row_count == len(demo_app.controller.visible_items)


@pytest.mark.asyncio
async def test_search_is_debounced(demo_app):
    async with demo_app.run_test(size=(120, 40)) as pilot:
        await pilot.pause(delay=PAUSE)
        total = len(demo_app.controller.visible_items)
        await pilot.press("slash")
        await pilot.press(*"payroll")
        assert demo_app.controller.search_pending
        assert len(demo_app.controller.visible_items) == total
        await pilot.pause(delay=0.5)
        assert not demo_app.controller.search_pending
        titles = [i.title for i in demo_app.controller.visible_items]
        assert titles == ["Run monthly payroll reconciliation"]


@pytest.mark.asyncio
async def test_mine_filter_and_clear(demo_app):
    async with demo_app.run_test(size=(120, 40)) as pilot:
        await pilot.pause(delay=PAUSE)
        total = len(demo_app.controller.visible_items)
        await pilot.press("m")
        await pilot.pause(delay=PAUSE)
        me = demo_app.controller.users.current_user()
        visible = demo_app.controller.visible_items
        assert 0 < len(visible) < total
        assert all(me in item.assigned_to for item in visible)
        await pilot.press("r")
        await pilot.pause(delay=PAUSE)
        assert len(demo_app.controller.visible_items) == total


@pytest.mark.asyncio
async def test_mine_without_user_warns(sample_project):
    (sample_project / ".tui-hrdash" / "settings.yaml").write_text(
        "current_user: ''\n", encoding="utf-8"
    )
    app = HRDashApp(project_dir=sample_project)
    async with app.run_test(size=(120, 40)) as pilot:
        await pilot.pause(delay=PAUSE)
        await pilot.press("m")
        await pilot.pause(delay=PAUSE)
        assert app.controller.filters == {}


@pytest.mark.asyncio
async def test_app_help_modal(demo_app):
    async with demo_app.run_test(size=(120, 40)) as pilot:
        await pilot.pause(delay=PAUSE)
        await pilot.press("question_mark")
        await pilot.pause(delay=PAUSE)
        assert isinstance(demo_app.screen, HelpScreen)
        await pilot.press("escape")
        await pilot.pause(delay=PAUSE)
        assert not isinstance(demo_app.screen, HelpScreen)


@pytest.mark.asyncio
async def test_selection_and_bulk_status(demo_app):
    async with demo_app.run_test(size=(120, 40)) as pilot:
        await pilot.pause(delay=PAUSE)
        controller = demo_app.controller
        await pilot.press("space")
        await pilot.pause(delay=PAUSE)
        assert len(controller.selection) == 1

        await pilot.press("a")
        await pilot.pause(delay=PAUSE)
        assert controller.selection == {i.id for i in controller.visible_items}

        await pilot.press("b")
        await pilot.pause(delay=PAUSE)
        assert isinstance(demo_app.screen, SelectScreen)
        demo_app.screen.dismiss(Status.ON_HOLD.value)
        await pilot.pause(delay=PAUSE)
        assert all(i.status == Status.ON_HOLD for i in controller.store.list())

        await pilot.press("A")
        await pilot.pause(delay=PAUSE)
        assert controller.selection == frozenset()


@pytest.mark.asyncio
async def test_bulk_delete_confirms(demo_app):
    async with demo_app.run_test(size=(120, 40)) as pilot:
        await pilot.pause(delay=PAUSE)
        controller = demo_app.controller
        await pilot.press("space")
        await pilot.pause(delay=PAUSE)
        before = len(controller.store.list())
        await pilot.press("b")
        await pilot.pause(delay=PAUSE)
        demo_app.screen.dismiss("delete")
        await pilot.pause(delay=PAUSE)
        assert isinstance(demo_app.screen, ConfirmScreen)
        await pilot.press("y")
        await pilot.pause(delay=PAUSE)
        assert len(controller.store.list()) == before - 1
        assert controller.selection == frozenset()


@pytest.mark.asyncio
async def test_bulk_without_selection_is_noop(demo_app):
    async with demo_app.run_test(size=(120, 40)) as pilot:
        await pilot.pause(delay=PAUSE)
        await pilot.press("b")
        await pilot.pause(delay=PAUSE)
        assert not isinstance(demo_app.screen, SelectScreen)


@pytest.mark.asyncio
async def test_selection_cleared_by_filter_not_sort(demo_app):
    async with demo_app.run_test(size=(120, 40)) as pilot:
        await pilot.pause(delay=PAUSE)
        await pilot.press("space")
        await pilot.press("o")
        await pilot.pause(delay=PAUSE)
        assert len(demo_app.controller.selection) == 1
        await pilot.press("m")
        await pilot.pause(delay=PAUSE)
        assert demo_app.controller.selection == frozenset()


@pytest.mark.asyncio
async def test_card_drop_changes_status_only(demo_app):
    async with demo_app.run_test(size=(120, 40)) as pilot:
        await pilot.pause(delay=PAUSE)
        store = demo_app.controller.store
        item = next(i for i in store.list() if i.status == Status.PENDING and i.dependencies)
        board = demo_app.query_one(KanbanBoard)
        board.post_message(KanbanBoard.CardDropped(item.id, Status.COMPLETED.value))
        await pilot.pause(delay=PAUSE)
        moved = store.get(item.id)
        assert moved.status == Status.COMPLETED
        assert moved.progress == item.progress
        assert board.lane_of(item.id) == Status.COMPLETED.value


@pytest.mark.asyncio
async def test_drop_outside_lane_is_ignored(demo_app):
    async with demo_app.run_test(size=(120, 40)) as pilot:
        await pilot.pause(delay=PAUSE)
        store = demo_app.controller.store
        before = store.list()
        board = demo_app.query_one(KanbanBoard)
        board.post_message(KanbanBoard.CardDropped(before[0].id, None))
        await pilot.pause(delay=PAUSE)
        assert store.list() == before


@pytest.mark.asyncio
async def test_move_card_right(demo_app):
    async with demo_app.run_test(size=(120, 40)) as pilot:
        await pilot.pause(delay=PAUSE)
        board = demo_app.query_one(KanbanBoard)
        item_id = board.highlighted_id
        assert item_id is not None
        lane = board.lane_of(item_id)
        await pilot.press("l")
        await pilot.pause(delay=PAUSE)
        moved = demo_app.controller.store.get(item_id)
        assert moved.status.value != lane


@pytest.mark.asyncio
async def test_calendar_month_navigation(demo_app):
    async with demo_app.run_test(size=(120, 40)) as pilot:
        await pilot.pause(delay=PAUSE)
        controller = demo_app.controller
        await pilot.press("3")
        await pilot.pause(delay=PAUSE)
        start = (controller.calendar_year, controller.calendar_month)
        await pilot.press("greater_than_sign")
        await pilot.pause(delay=PAUSE)
        assert (controller.calendar_year, controller.calendar_month) != start
        await pilot.press("t")
        await pilot.pause(delay=PAUSE)
        assert (controller.calendar_year, controller.calendar_month) == start


@pytest.mark.asyncio
async def test_new_task_modal(demo_app):
    async with demo_app.run_test(size=(120, 40)) as pilot:
        await pilot.pause(delay=PAUSE)
        await pilot.press("n")
        await pilot.pause(delay=PAUSE)
        assert isinstance(demo_app.screen, TaskEditScreen)
        demo_app.screen.dismiss({"title": "Exit interview", "status": "pending"})
        await pilot.pause(delay=PAUSE)
        titles = [i.title for i in demo_app.controller.store.list()]
        assert "Exit interview" in titles


@pytest.mark.asyncio
async def test_delete_task_confirm(sample_project):
    app = HRDashApp(project_dir=sample_project)
    async with app.run_test(size=(120, 40)) as pilot:
        await pilot.pause(delay=PAUSE)
        item_id = app.query_one(KanbanBoard).highlighted_id
        await pilot.press("d")
        await pilot.pause(delay=PAUSE)
        assert isinstance(app.screen, ConfirmScreen)
        await pilot.press("y")
        await pilot.pause(delay=PAUSE)
        assert app.store.get(item_id) is None
        assert "[*]" in app.title


@pytest.mark.asyncio
async def test_save_writes_tasks(sample_project):
    app = HRDashApp(project_dir=sample_project)
    async with app.run_test(size=(120, 40)) as pilot:
        await pilot.pause(delay=PAUSE)
        app.controller.update_item("t3", {"status": "completed"})
        await pilot.press("ctrl+s")
        await pilot.pause(delay=PAUSE)
        assert not app.store.modified
    reloaded = InMemoryTaskStore.load(sample_project)
    assert reloaded.get("t3").status == Status.COMPLETED


@pytest.mark.asyncio
async def test_demo_mode_does_not_save(demo_app, tmp_path):
    async with demo_app.run_test(size=(120, 40)) as pilot:
        await pilot.pause(delay=PAUSE)
        await pilot.press("ctrl+s")
        await pilot.pause(delay=PAUSE)
    assert not (tmp_path / ".tui-hrdash").exists()
