"""Kanban board custom widget."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import datetime

from textual.app import ComposeResult
from textual.containers import Container, Horizontal, VerticalScroll
from textual.errors import NoWidget
from textual.events import Click, MouseDown, MouseUp
from textual.message import Message
from textual.widgets import Static

from rich.text import Text

from tui_hrdash import theme
from tui_hrdash.models import LOCK_ICON, WorkItem, format_date, has_incomplete_dependencies, is_overdue
from tui_hrdash.projections.board import BoardDescriptor, Lane


class KanbanCard(Static):
    """A single card on the Kanban board."""

    DEFAULT_CSS = """
    KanbanCard {
        width: 100%;
        height: auto;
        margin: 0 0 1 0;
        padding: 0 1;
        border: solid $primary;
    }
    KanbanCard.card-highlighted {
        border: heavy $accent;
    }
    KanbanCard.card-selected {
        background: $boost;
    }
    KanbanCard.card-overdue {
        border-left: thick red;
    }
    """

    def __init__(
        self,
        item: WorkItem,
        *,
        selected: bool = False,
        locked: bool = False,
        overdue: bool = False,
        assignees: str = "",
        date_format: str = "YYYY-MM-DD",
        **kwargs,
    ) -> None:
        label = Text()
        if selected:
            label.append("✓ ", style=theme.color(theme.SELECTED))
        if locked:
            label.append(f"{LOCK_ICON} ", style=theme.color(theme.LOCK))
        label.append(f"{item.priority_icon} ")
        label.append(item.title)
        if assignees:
            label.append(f"\n  {assignees}", style="dim")
        if item.due_date:
            due = format_date(item.due_date, date_format)
            if overdue:
                label.append(f"\n  Due {due} (overdue)", style=theme.color(theme.OVERDUE))
            else:
                label.append(f"\n  Due {due}", style="dim")
        classes = kwargs.pop("classes", "")
        if selected:
            classes = f"{classes} card-selected".strip()
        if overdue:
            classes = f"{classes} card-overdue".strip()
        super().__init__(label, classes=classes, **kwargs)
        self.item_id = item.id


class KanbanLane(Container):
    """A single status lane in the Kanban board."""

    DEFAULT_CSS = """
    KanbanLane {
        width: 1fr;
        height: 1fr;
        border-right: solid $primary;
        padding: 0 1;
    }
    KanbanLane.lane-drop-target {
        background: $boost;
    }
    KanbanLane .lane-header {
        text-align: center;
        text-style: bold;
        height: 1;
        margin-bottom: 1;
    }
    KanbanLane .lane-empty {
        color: $text-muted;
        text-align: center;
    }
    """

    def __init__(self, lane: Lane, cards: list[KanbanCard], **kwargs) -> None:
        super().__init__(**kwargs)
        self.lane_key = lane.key
        self._lane = lane
        self._cards = cards

    def compose(self) -> ComposeResult:
        header = Text(self._lane.title, style="bold")
        header.append(f" ({len(self._lane)})")
        yield Static(header, classes="lane-header")
        with VerticalScroll():
            if not self._cards:
                yield Static("No tasks", classes="lane-empty")
            yield from self._cards


class KanbanBoard(Container):
    """Kanban board widget with one lane per status.

    Cards can be moved by dragging them onto another lane with the mouse;
    the board reports the drop and leaves the status change to the app.
    """

    can_focus = True

    DEFAULT_CSS = """
    KanbanBoard {
        height: 1fr;
    }
    KanbanBoard #kanban-lanes {
        height: 1fr;
    }
    """

    class CardHighlighted(Message):
        def __init__(self, item_id: str) -> None:
            super().__init__()
            self.item_id = item_id

    class CardActivated(Message):
        def __init__(self, item_id: str) -> None:
            super().__init__()
            self.item_id = item_id

    class CardDropped(Message):
        """A card was released over a lane (``target_lane`` None: over no lane)."""

        def __init__(self, item_id: str, target_lane: str | None) -> None:
            super().__init__()
            self.item_id = item_id
            self.target_lane = target_lane

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._board = BoardDescriptor(lanes=())
        self._selection: frozenset[str] = frozenset()
        self._item_map: dict[str, WorkItem] = {}
        self._resolve: Callable[[str], str] | None = None
        self._date_format = "YYYY-MM-DD"
        self._highlighted_id: str | None = None
        self._drag_id: str | None = None
        self._rebuild_timer = None

    def compose(self) -> ComposeResult:
        yield Horizontal(id="kanban-lanes")

    def on_mount(self) -> None:
        self._schedule_rebuild()

    @property
    def highlighted_id(self) -> str | None:
        return self._highlighted_id

    @property
    def board(self) -> BoardDescriptor:
        return self._board

    def update_board(
        self,
        board: BoardDescriptor,
        selection: frozenset[str] = frozenset(),
        item_map: Mapping[str, WorkItem] | None = None,
        resolve: Callable[[str], str] | None = None,
        date_format: str | None = None,
    ) -> None:
        self._board = board
        self._selection = selection
        self._item_map = dict(item_map or {})
        self._resolve = resolve
        if date_format:
            self._date_format = date_format
        if self._highlighted_id not in self._card_ids():
            ids = self._card_ids()
            self._highlighted_id = ids[0] if ids else None
        self._schedule_rebuild()

    def _card_ids(self) -> list[str]:
        return [item.id for lane in self._board.lanes for item in lane.items]

    def _schedule_rebuild(self) -> None:
        """Debounce rebuild to avoid DuplicateIds from async remove_children."""
        if self._rebuild_timer is not None:
            self._rebuild_timer.stop()
        self._rebuild_timer = self.set_timer(0.01, self._rebuild)

    async def _rebuild(self) -> None:
        self._rebuild_timer = None
        try:
            container = self.query_one("#kanban-lanes", Horizontal)
        except Exception:
            return
        await container.remove_children()
        now = datetime.now()
        for lane in self._board.lanes:
            cards = [self._make_card(item, now) for item in lane.items]
            await container.mount(KanbanLane(lane, cards, id=f"lane-{lane.key}"))
        self._apply_highlight()

    def _make_card(self, item: WorkItem, now: datetime) -> KanbanCard:
        names = [self._resolve(a) if self._resolve else a for a in item.assigned_to]
        return KanbanCard(
            item,
            selected=item.id in self._selection,
            locked=bool(item.dependencies)
            and has_incomplete_dependencies(item, self._item_map),
            overdue=is_overdue(item, now),
            assignees=", ".join(names),
            date_format=self._date_format,
            id=f"card-{item.id}",
        )

    def _apply_highlight(self) -> None:
        for card in self.query(KanbanCard):
            is_current = card.item_id == self._highlighted_id
            card.set_class(is_current, "card-highlighted")
            if is_current:
                card.scroll_visible()

    def _highlight(self, item_id: str | None) -> None:
        if item_id is None or item_id == self._highlighted_id:
            return
        self._highlighted_id = item_id
        self._apply_highlight()
        self.post_message(self.CardHighlighted(item_id))

    def _position(self) -> tuple[int, int] | None:
        for lane_idx, lane in enumerate(self._board.lanes):
            for card_idx, item in enumerate(lane.items):
                if item.id == self._highlighted_id:
                    return lane_idx, card_idx
        return None

    def lane_of(self, item_id: str) -> str | None:
        for lane in self._board.lanes:
            if any(item.id == item_id for item in lane.items):
                return lane.key
        return None

    # ── Keyboard ──

    def key_up(self) -> None:
        self._move_vertical(-1)

    def key_down(self) -> None:
        self._move_vertical(1)

    def key_left(self) -> None:
        self._move_horizontal(-1)

    def key_right(self) -> None:
        self._move_horizontal(1)

    def _move_vertical(self, direction: int) -> None:
        pos = self._position()
        if pos is None:
            return
        lane = self._board.lanes[pos[0]]
        idx = max(0, min(len(lane.items) - 1, pos[1] + direction))
        self._highlight(lane.items[idx].id)

    def _move_horizontal(self, direction: int) -> None:
        pos = self._position()
        lanes = self._board.lanes
        if pos is None:
            return
        lane_idx = pos[0] + direction
        # Skip empty lanes
        while 0 <= lane_idx < len(lanes) and not lanes[lane_idx].items:
            lane_idx += direction
        if not 0 <= lane_idx < len(lanes):
            return
        target = lanes[lane_idx]
        self._highlight(target.items[min(pos[1], len(target.items) - 1)].id)

    # ── Mouse ──

    @staticmethod
    def _card_for(widget) -> KanbanCard | None:
        node = widget
        while node is not None:
            if isinstance(node, KanbanCard):
                return node
            node = node.parent
        return None

    def on_click(self, event: Click) -> None:
        card = self._card_for(event.widget)
        if card is None:
            return
        self.focus()
        if event.chain >= 2:
            self.post_message(self.CardActivated(card.item_id))
        else:
            self._highlight(card.item_id)

    def on_mouse_down(self, event: MouseDown) -> None:
        card = self._card_for(event.widget)
        if card is None:
            return
        self.focus()
        self._highlight(card.item_id)
        self._drag_id = card.item_id
        self.capture_mouse()

    def on_mouse_up(self, event: MouseUp) -> None:
        drag_id, self._drag_id = self._drag_id, None
        if drag_id is None:
            return
        self.release_mouse()
        target = self._lane_at(event.screen_x, event.screen_y)
        if target is not None and target == self.lane_of(drag_id):
            return
        self.post_message(self.CardDropped(drag_id, target))

    def _lane_at(self, screen_x: int, screen_y: int) -> str | None:
        try:
            widget, _ = self.screen.get_widget_at(screen_x, screen_y)
        except NoWidget:
            return None
        node = widget
        while node is not None:
            if isinstance(node, KanbanLane):
                return node.lane_key
            node = node.parent
        return None
