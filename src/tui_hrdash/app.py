"""Main Textual App for TUI HR Dashboard."""

from __future__ import annotations

import os
from datetime import date
from pathlib import Path
from typing import Any

import structlog
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.widgets import ContentSwitcher, Footer, Header, Static

from tui_hrdash import theme
from tui_hrdash.commands import HRCommandProvider
from tui_hrdash.config import get_lane_titles, load_config, load_settings, save_config
from tui_hrdash.controller import ViewController
from tui_hrdash.dragdrop import RequestStatusChange, StatusTransitionHandler
from tui_hrdash.export import export_items
from tui_hrdash.models import (
    ME,
    SORT_FIELDS,
    STATUS_LABELS,
    DashboardConfig,
    Status,
    ViewMode,
    WorkItem,
)
from tui_hrdash.projections.board import neighbour_lane
from tui_hrdash.screens.confirm_screen import ConfirmScreen
from tui_hrdash.screens.help_screen import HelpScreen
from tui_hrdash.screens.prompt_screen import PromptScreen
from tui_hrdash.screens.select_screen import SelectScreen
from tui_hrdash.screens.task_edit_screen import TaskEditScreen
from tui_hrdash.store import InMemoryTaskStore
from tui_hrdash.users import SettingsUserDirectory
from tui_hrdash.widgets.calendar_view import CalendarView
from tui_hrdash.widgets.filter_bar import FilterBar
from tui_hrdash.widgets.kanban_board import KanbanBoard
from tui_hrdash.widgets.task_list import TaskList
from tui_hrdash.widgets.timeline_chart import TimelineChart
from tui_hrdash.widgets.view_tabs import ViewTabs

logger = structlog.get_logger(__name__)

_AUTOSAVE_DELAY = 2.0  # seconds

_BULK_DELETE = "delete"


class HRDashApp(App):
    """TUI HR Dashboard Application."""

    TITLE = "TUI HR Dashboard"
    CSS = """
    #main-content {
        height: 1fr;
        border: round $surface-lighten-2;
        border-title-align: left;
    }
    #main-content:focus-within {
        border: round $accent;
        border-title-color: $accent;
    }
    #view-switcher {
        height: 1fr;
    }
    #status-bar {
        dock: bottom;
        height: 1;
        padding: 0 1;
        background: $primary-background;
        color: $text;
    }
    """

    COMMANDS = App.COMMANDS | {HRCommandProvider}

    BINDINGS = [
        Binding("ctrl+s", "save", "Save", priority=True),
        Binding("ctrl+e", "export", "Export", show=False, priority=True),
        Binding("question_mark", "help", "Help"),
        Binding("q", "quit_app", "Quit"),
        # Views
        Binding("1", "show_board", "Board", show=False),
        Binding("2", "show_list", "List", show=False),
        Binding("3", "show_calendar", "Calendar", show=False),
        Binding("4", "show_timeline", "Timeline", show=False),
        Binding("left_square_bracket", "prev_view", "Prev View", show=False),
        Binding("right_square_bracket", "next_view", "Next View", show=False),
        Binding("T", "cycle_theme", "Cycle Theme", show=False),
        # Tasks
        Binding("n", "add_task", "New"),
        Binding("e", "edit_task", "Edit"),
        Binding("enter", "edit_task", "Edit", show=False),
        Binding("d", "delete_task", "Delete", show=False),
        Binding("s", "change_status", "Status", show=False),
        # Selection
        Binding("space", "toggle_select", "Select", show=False),
        Binding("a", "select_all", "Select all", show=False),
        Binding("A", "deselect_all", "Deselect all", show=False),
        Binding("b", "bulk_actions", "Bulk", show=False),
        # Filter & sort
        Binding("slash", "focus_search", "Search"),
        Binding("escape", "focus_content", show=False),
        Binding("m", "filter_mine", "Mine", show=False),
        Binding("r", "clear_filters", "Clear filters", show=False),
        Binding("o", "cycle_sort", "Sort", show=False),
        Binding("O", "toggle_sort_order", "Sort order", show=False),
        # Board
        Binding("h", "move_left", show=False),
        Binding("l", "move_right", show=False),
        # Calendar
        Binding("less_than_sign", "prev_month", show=False),
        Binding("greater_than_sign", "next_month", show=False),
        Binding("t", "go_today", show=False),
    ]

    def __init__(self, project_dir: Path, no_color: bool = False, demo_mode: bool = False) -> None:
        if no_color:
            os.environ["NO_COLOR"] = "1"
        super().__init__()
        self.project_dir = project_dir
        self.no_color = no_color
        self.demo_mode = demo_mode
        self.config: DashboardConfig = DashboardConfig()
        self.store: InMemoryTaskStore | None = None
        self.users: SettingsUserDirectory | None = None
        self.controller: ViewController | None = None
        self._transitions: StatusTransitionHandler | None = None
        self._autosave_timer: object | None = None
        self._unsubscribe_store = None

    def compose(self) -> ComposeResult:
        yield Header()
        yield ViewTabs()
        yield FilterBar()
        with Container(id="main-content"):
            with ContentSwitcher(initial=ViewMode.BOARD.value, id="view-switcher"):
                yield KanbanBoard(id=ViewMode.BOARD.value)
                yield TaskList(id=ViewMode.LIST.value)
                yield CalendarView(id=ViewMode.CALENDAR.value)
                yield TimelineChart(id=ViewMode.TIMELINE.value)
        yield Static("", id="status-bar")
        yield Footer()

    # ── Loading ──

    def on_mount(self) -> None:
        self.set_timer(0.01, self._load_project)

    def _load_project(self) -> None:
        if self.demo_mode:
            from tui_hrdash.demo_data import DEMO_NAME, demo_settings, demo_tasks

            self.config = DashboardConfig(name=DEMO_NAME)
            settings = load_settings(overrides=demo_settings())
            self.store = InMemoryTaskStore(demo_tasks())
        else:
            self.config = load_config(self.project_dir)
            settings = load_settings(self.project_dir)
            self.store = InMemoryTaskStore.load(self.project_dir)

        theme.load_theme(None if self.demo_mode else self.project_dir, self.config.theme_name)
        self.register_theme(theme.build_textual_theme())
        self.theme = "hrdash-theme"

        self.users = SettingsUserDirectory.from_settings(settings)
        self.controller = ViewController(
            self.store,
            self.users,
            notifier=self,
            config=self.config,
            set_timer=self.set_timer,
            lane_titles=get_lane_titles(settings),
        )
        self._transitions = StatusTransitionHandler(self.controller.update_item)
        self.controller.add_listener(self._on_controller_changed)
        self._unsubscribe_store = self.store.subscribe(self._mark_modified)

        try:
            self.query_one(FilterBar).set_directory(
                self.users.all_users(), self.users.departments()
            )
        except Exception:
            pass
        logger.info(
            "dashboard_loaded",
            project_dir=str(self.project_dir),
            demo=self.demo_mode,
            tasks=len(self.store.list()),
        )
        self._refresh_ui()
        self.action_focus_content()

    def on_unmount(self) -> None:
        if self.controller is not None:
            self.controller.close()
        if self._unsubscribe_store is not None:
            self._unsubscribe_store()

    # ── Rendering ──

    def _on_controller_changed(self, controller: ViewController) -> None:
        self._refresh_ui()

    def _refresh_ui(self) -> None:
        controller = self.controller
        if controller is None:
            return
        view = controller.current_view

        try:
            tabs = self.query_one(ViewTabs)
            tabs.set_active(view)
            stats = controller.stats()
            tabs.set_stats(
                f"{stats.total} tasks · {stats.in_progress} in progress · "
                f"{stats.overdue} overdue · {stats.completed} done"
            )
        except Exception:
            pass

        try:
            self.query_one(FilterBar).show_state(
                controller.filters, controller.sort_by, controller.sort_order
            )
        except Exception:
            pass

        try:
            self.query_one("#view-switcher", ContentSwitcher).current = view.value
        except Exception:
            pass

        self._render_active_view()
        self._update_status_bar()
        self._update_title()

        try:
            content = self.query_one("#main-content", Container)
            content.border_title = f"[{list(ViewMode).index(view) + 1}] {view.label}"
            content.border_subtitle = (
                f"{len(controller.visible_items)} of {len(controller.store.list())} tasks"
            )
        except Exception:
            pass

    def _render_active_view(self) -> None:
        controller = self.controller
        if controller is None:
            return
        view = controller.current_view
        try:
            if view == ViewMode.BOARD:
                self.query_one(KanbanBoard).update_board(
                    controller.board(),
                    controller.selection,
                    {item.id: item for item in controller.store.list()},
                    resolve=controller.users.resolve,
                    date_format=self.config.date_format,
                )
            elif view == ViewMode.LIST:
                self.query_one(TaskList).update_rows(
                    controller.rows(), controller.selection, self.config.date_format
                )
            elif view == ViewMode.CALENDAR:
                self.query_one(CalendarView).update_grid(controller.calendar())
            else:
                self.query_one(TimelineChart).update_timeline(controller.timeline(), date.today())
        except Exception:
            logger.exception("render_failed", view=view.value)

    def _update_status_bar(self) -> None:
        try:
            bar = self.query_one("#status-bar", Static)
        except Exception:
            return
        controller = self.controller
        parts: list[str] = []
        if self.demo_mode:
            demo = theme.color(theme.STATUSBAR_DEMO)
            parts.append(f"[bold {demo}]DEMO[/bold {demo}]")
        if controller is not None:
            if controller.selection:
                parts.append(f"{len(controller.selection)} selected (b: bulk actions)")
            if controller.filters.get("assignedTo") == ME:
                me = controller.users.current_user()
                parts.append(f"Mine: {controller.users.resolve(me) if me else '-'}")
            if controller.current_view == ViewMode.TIMELINE:
                hidden = len(controller.visible_items) - len(controller.timeline().bars)
                if hidden:
                    parts.append(f"{hidden} task(s) without start/due date not shown")
        bar.update(" | ".join(parts))

    def _update_title(self) -> None:
        name = self.config.name or self.project_dir.name
        mod = " [*]" if self.store is not None and self.store.modified and not self.demo_mode else ""
        demo = " [DEMO]" if self.demo_mode else ""
        self.title = f"TUI HR Dashboard - {name}{mod}{demo}"

    # ── Autosave ──

    def _mark_modified(self) -> None:
        if self.demo_mode:
            return
        if self._autosave_timer is not None:
            self._autosave_timer.stop()
        self._autosave_timer = self.set_timer(_AUTOSAVE_DELAY, self._do_autosave)

    def _do_autosave(self) -> None:
        self._autosave_timer = None
        if self.demo_mode or self.store is None:
            return
        if self.store.modified:
            self._save_store()
            self._update_title()

    def _save_store(self) -> bool:
        try:
            self.store.save()
        except OSError as e:
            logger.warning("tasks_save_failed", error=str(e))
            self.notify(f"Save failed: {e}", severity="error")
            return False
        return True

    # ── Helpers ──

    def _highlighted_id(self) -> str | None:
        if self.controller is None:
            return None
        view = self.controller.current_view
        try:
            if view == ViewMode.BOARD:
                return self.query_one(KanbanBoard).highlighted_id
            if view == ViewMode.LIST:
                return self.query_one(TaskList).highlighted_id
            if view == ViewMode.TIMELINE:
                return self.query_one(TimelineChart).highlighted_id
            cell = self.query_one(CalendarView).selected_cell
            if cell is not None and cell.items:
                return cell.items[0].id
        except Exception:
            pass
        return None

    def _highlighted_item(self) -> WorkItem | None:
        item_id = self._highlighted_id()
        if item_id is None or self.store is None:
            return None
        return self.store.get(item_id)

    def _edit_item(self, item: WorkItem) -> None:
        def _on_edited(changes: dict | None) -> None:
            if changes and self.controller is not None:
                self.controller.update_item(item.id, changes)

        self.push_screen(
            TaskEditScreen(item, self.users.all_users() if self.users else []),
            callback=_on_edited,
        )

    def _new_item(self, defaults: dict[str, Any] | None = None) -> None:
        def _on_created(data: dict | None) -> None:
            if data and self.controller is not None:
                self.controller.create_item(data)

        self.push_screen(
            TaskEditScreen(None, self.users.all_users() if self.users else [], defaults),
            callback=_on_created,
        )

    def _move_status(self, item_id: str, target: str | None) -> None:
        if self._transitions is not None:
            self._transitions.handle(RequestStatusChange(item_id, target))

    # ── Widget events ──

    def on_view_tabs_view_selected(self, event: ViewTabs.ViewSelected) -> None:
        if self.controller is not None:
            self.controller.set_view(event.mode)

    def on_filter_bar_search_changed(self, event: FilterBar.SearchChanged) -> None:
        if self.controller is not None:
            self.controller.set_search(event.text)

    def on_filter_bar_filter_changed(self, event: FilterBar.FilterChanged) -> None:
        if self.controller is not None:
            self.controller.set_filter(event.name, event.value)

    def on_kanban_board_card_dropped(self, event: KanbanBoard.CardDropped) -> None:
        self._move_status(event.item_id, event.target_lane)

    def on_kanban_board_card_activated(self, event: KanbanBoard.CardActivated) -> None:
        if self.store is not None and (item := self.store.get(event.item_id)):
            self._edit_item(item)

    def on_task_list_task_activated(self, event: TaskList.TaskActivated) -> None:
        if self.store is not None and (item := self.store.get(event.item_id)):
            self._edit_item(item)

    def on_calendar_view_month_change_requested(
        self, event: CalendarView.MonthChangeRequested
    ) -> None:
        if self.controller is not None:
            self.controller.navigate_month(event.delta)

    def on_calendar_view_day_selected(self, event: CalendarView.DaySelected) -> None:
        if self.store is None:
            return
        items = [item for item in map(self.store.get, event.item_ids) if item is not None]
        if not items:
            self._new_item({"due_date": event.day})
            return
        if len(items) == 1:
            self._edit_item(items[0])
            return

        def _on_picked(item_id: str | None) -> None:
            if item_id and self.store is not None and (item := self.store.get(item_id)):
                self._edit_item(item)

        self.push_screen(
            SelectScreen(
                f"Tasks due {event.day.isoformat()}",
                [(item.id, f"{item.status_icon} {item.title}") for item in items],
            ),
            callback=_on_picked,
        )

    # ── Actions: file ──

    def action_save(self) -> None:
        if self.demo_mode:
            self.notify("Demo mode: saving disabled", severity="warning")
            return
        if self._autosave_timer is not None:
            self._autosave_timer.stop()
            self._autosave_timer = None
        if self.store is not None and self._save_store():
            save_config(self.project_dir, self.config)
            self._update_title()
            self.notify("Saved", severity="information")

    def action_export(self) -> None:
        self.push_screen(
            PromptScreen("Export visible tasks to (json/csv)", "hr-tasks.json"),
            callback=self._on_export_filename,
        )

    def _on_export_filename(self, filename: str | None) -> None:
        if not filename or self.controller is None:
            return
        filename = filename.strip()
        base_dir = Path.cwd() if self.demo_mode else self.project_dir
        try:
            count = export_items(
                self.controller.visible_items,
                base_dir / filename,
                resolve=self.controller.users.resolve,
            )
        except (OSError, ValueError) as e:
            self.notify(f"Export failed: {e}", severity="error")
            return
        self.notify(f"Exported {count} task(s) to {filename}", severity="information")

    def action_init_theme(self) -> None:
        """Copy default theme to project .tui-hrdash/theme.yaml."""
        if self.demo_mode:
            self.notify("Demo mode: init-theme disabled", severity="warning")
            return
        try:
            dest = theme.init_theme(self.project_dir)
            self.notify(f"Created {dest.name}", severity="information")
        except FileExistsError:
            self.notify(".tui-hrdash/theme.yaml already exists", severity="warning")

    def action_help(self) -> None:
        self.push_screen(HelpScreen(), callback=self._on_help_action)

    def _on_help_action(self, action: str) -> None:
        if action:
            self.run_action(action)

    def action_quit_app(self) -> None:
        if self.demo_mode or self.store is None or not self.store.modified:
            self.exit()
            return
        self.push_screen(
            ConfirmScreen("Unsaved changes. Quit anyway?", confirm_label="Quit"),
            callback=self._on_quit_confirmed,
        )

    def _on_quit_confirmed(self, confirmed: bool) -> None:
        if confirmed:
            self.exit()

    # ── Actions: views ──

    def _show(self, mode: ViewMode) -> None:
        if self.controller is not None:
            self.controller.set_view(mode)
            self.action_focus_content()

    def action_show_board(self) -> None: self._show(ViewMode.BOARD)
    def action_show_list(self) -> None: self._show(ViewMode.LIST)
    def action_show_calendar(self) -> None: self._show(ViewMode.CALENDAR)
    def action_show_timeline(self) -> None: self._show(ViewMode.TIMELINE)

    def action_prev_view(self) -> None: self._switch_to_adjacent_view(-1)
    def action_next_view(self) -> None: self._switch_to_adjacent_view(1)

    def _switch_to_adjacent_view(self, direction: int) -> None:
        if self.controller is None:
            return
        modes = list(ViewMode)
        idx = modes.index(self.controller.current_view)
        self._show(modes[(idx + direction) % len(modes)])

    def action_focus_content(self) -> None:
        if self.controller is None:
            return
        view = self.controller.current_view
        try:
            if view == ViewMode.BOARD:
                self.query_one(KanbanBoard).focus()
            elif view == ViewMode.LIST:
                self.query_one(TaskList).focus_table()
            elif view == ViewMode.CALENDAR:
                self.query_one(CalendarView).focus()
            else:
                self.query_one(TimelineChart).focus_view()
        except Exception:
            pass

    def action_cycle_theme(self) -> None:
        """Switch between the dark and light presets."""
        next_name = theme.next_theme_name(self.config.theme_name)
        theme.load_theme(None if self.demo_mode else self.project_dir, next_name)
        self.register_theme(theme.build_textual_theme())
        self.theme = "hrdash-theme"
        self.config.theme_name = next_name
        if not self.demo_mode:
            save_config(self.project_dir, self.config)
        self._refresh_ui()
        self.notify(f"Theme: {theme.THEME_NAME}", severity="information")

    # ── Actions: tasks ──

    def action_add_task(self) -> None:
        defaults: dict[str, Any] = {}
        if self.controller is not None and self.controller.current_view == ViewMode.CALENDAR:
            cell = self.query_one(CalendarView).selected_cell
            if cell is not None:
                defaults["due_date"] = cell.date
        self._new_item(defaults)

    def action_edit_task(self) -> None:
        item = self._highlighted_item()
        if item is None:
            self.notify("No task selected", severity="warning")
            return
        self._edit_item(item)

    def action_delete_task(self) -> None:
        item = self._highlighted_item()
        if item is None:
            self.notify("No task selected", severity="warning")
            return

        def _on_confirmed(confirmed: bool) -> None:
            if confirmed and self.controller is not None:
                self.controller.delete_item(item.id)

        self.push_screen(
            ConfirmScreen(f"Delete task '{item.title}'?", title="Delete", confirm_label="Delete"),
            callback=_on_confirmed,
        )

    def action_change_status(self) -> None:
        item = self._highlighted_item()
        if item is None:
            self.notify("No task selected", severity="warning")
            return

        def _on_status(value: str | None) -> None:
            if value and value != item.status.value:
                self._move_status(item.id, value)

        self.push_screen(
            SelectScreen(
                f"Status for '{item.title}'",
                [(s.value, f"{STATUS_LABELS[s]}") for s in Status],
                current=item.status.value,
            ),
            callback=_on_status,
        )

    def action_move_left(self) -> None:
        self._move_lane(-1)

    def action_move_right(self) -> None:
        self._move_lane(1)

    def _move_lane(self, direction: int) -> None:
        if self.controller is None or self.controller.current_view != ViewMode.BOARD:
            return
        item = self._highlighted_item()
        if item is None:
            return
        target = neighbour_lane(item.status.value, direction)
        if target is not None:
            self._move_status(item.id, target)

    # ── Actions: selection ──

    def action_toggle_select(self) -> None:
        item_id = self._highlighted_id()
        if item_id is not None and self.controller is not None:
            self.controller.toggle_selection(item_id)

    def action_select_all(self) -> None:
        if self.controller is not None:
            self.controller.select_all_visible(True)

    def action_deselect_all(self) -> None:
        if self.controller is not None:
            self.controller.select_all_visible(False)

    def action_bulk_actions(self) -> None:
        if self.controller is None:
            return
        count = len(self.controller.selection)
        if not count:
            self.notify("No tasks selected (Space to select)", severity="warning")
            return
        options = [(s.value, f"Move to {STATUS_LABELS[s]}") for s in Status]
        options.append((_BULK_DELETE, f"Delete {count} task(s)"))
        self.push_screen(
            SelectScreen(f"Bulk action: {count} selected", options),
            callback=self._on_bulk_action,
        )

    def _on_bulk_action(self, action: str | None) -> None:
        if not action or self.controller is None:
            return
        if action != _BULK_DELETE:
            self.controller.bulk_update_status(action)
            return

        def _on_confirmed(confirmed: bool) -> None:
            if confirmed and self.controller is not None:
                self.controller.bulk_delete()

        self.push_screen(
            ConfirmScreen(
                f"Delete {len(self.controller.selection)} selected task(s)?",
                title="Bulk delete",
                confirm_label="Delete",
                details=[item.title for item in self.controller.selected_items()],
            ),
            callback=_on_confirmed,
        )

    # ── Actions: filter & sort ──

    def action_focus_search(self) -> None:
        self.query_one(FilterBar).focus_search()

    def action_clear_filters(self) -> None:
        if self.controller is not None:
            self.controller.clear_filters()

    def action_filter_mine(self) -> None:
        if self.controller is None:
            return
        if not self.controller.users.current_user():
            self.notify("No signed-in user (set current_user in settings.yaml)", severity="warning")
            return
        mine = self.controller.filters.get("assignedTo") == ME
        self.controller.set_filter("assignedTo", None if mine else ME)

    def action_cycle_sort(self) -> None:
        if self.controller is None:
            return
        fields = list(SORT_FIELDS)
        try:
            idx = fields.index(self.controller.sort_by)
        except ValueError:
            idx = -1
        self.controller.set_sort(fields[(idx + 1) % len(fields)])

    def action_toggle_sort_order(self) -> None:
        if self.controller is not None:
            self.controller.toggle_sort_order()

    # ── Actions: calendar ──

    def action_prev_month(self) -> None:
        if self.controller is not None and self.controller.current_view == ViewMode.CALENDAR:
            self.controller.navigate_month(-1)

    def action_next_month(self) -> None:
        if self.controller is not None and self.controller.current_view == ViewMode.CALENDAR:
            self.controller.navigate_month(1)

    def action_go_today(self) -> None:
        if self.controller is not None and self.controller.current_view == ViewMode.CALENDAR:
            self.controller.go_to_today()
