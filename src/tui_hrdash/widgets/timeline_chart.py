"""Timeline (Gantt) chart custom widget."""

from __future__ import annotations

from datetime import date

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.events import Click
from textual.geometry import Size
from textual.message import Message
from textual.scroll_view import ScrollView
from textual.strip import Strip
from textual.widget import Widget

from rich.segment import Segment
from rich.style import Style
from rich.text import Text

from tui_hrdash import theme
from tui_hrdash.models import Status
from tui_hrdash.projections.timeline import (
    EMPTY_TIMELINE,
    TimelineBar,
    TimelineDescriptor,
    axis_ticks,
    pct_to_col,
)

LABEL_WIDTH = 28
MIN_CHART_WIDTH = 20

EMPTY_MESSAGE = "No tasks with both a start and a due date"


def _today_pct(descriptor: TimelineDescriptor, today: date) -> float | None:
    """Axis position of *today*, or None when it falls outside the axis."""
    if descriptor.min_date is None or descriptor.max_date is None:
        return None
    if not descriptor.min_date <= today <= descriptor.max_date:
        return None
    span = max(descriptor.total_span, 1)
    return (today - descriptor.min_date).days / span * 100


def _chart_width(total: int) -> int:
    return max(MIN_CHART_WIDTH, total - LABEL_WIDTH)


def _label(text: str, width: int = LABEL_WIDTH) -> str:
    if len(text) > width - 1:
        text = text[: width - 2] + "…"
    return text.ljust(width)


class TimelineHeader(Widget):
    """Fixed header showing evenly spaced axis dates and the today marker."""

    DEFAULT_CSS = """
    TimelineHeader {
        height: 2;
        background: $background;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._descriptor: TimelineDescriptor = EMPTY_TIMELINE
        self._today: date = date.today()

    def update_header(self, descriptor: TimelineDescriptor, today: date) -> None:
        self._descriptor = descriptor
        self._today = today
        self.refresh()

    def render_line(self, y: int) -> Strip:
        width = self.size.width
        if self._descriptor.is_empty or y > 1:
            return Strip.blank(width)
        chart_w = _chart_width(width)
        header_style = Style(color=theme.color(theme.TIMELINE_HEADER), bold=True)
        today_pct = _today_pct(self._descriptor, self._today)
        today_col = pct_to_col(today_pct, chart_w) if today_pct is not None else -1
        cells = [" "] * chart_w
        if y == 0:
            prefix = _label("Task")
            for pct, tick in axis_ticks(self._descriptor):
                label = tick.strftime("%b %d")
                col = pct_to_col(pct, chart_w)
                start = max(0, min(chart_w - len(label), col - len(label) // 2))
                cells[start:start + len(label)] = list(label)
        else:
            prefix = " " * LABEL_WIDTH
            for pct, _ in axis_ticks(self._descriptor):
                cells[pct_to_col(pct, chart_w)] = "┬"
            if today_col >= 0:
                cells[today_col] = "▼"

        today_style = Style(color=theme.color(theme.TIMELINE_TODAY_MARKER), bold=True)
        segments = [Segment(prefix, header_style)]
        for col, ch in enumerate(cells):
            is_marker = y == 1 and col == today_col
            segments.append(Segment(ch, today_style if is_marker else header_style))
        return Strip(segments)


class TimelineView(ScrollView):
    """Renders one bar per schedulable task (data rows only, no header)."""

    can_focus = True

    BINDINGS = [
        Binding("up", "cursor_up", show=False),
        Binding("down", "cursor_down", show=False),
    ]

    DEFAULT_CSS = """
    TimelineView {
        height: 1fr;
        background: $background;
        overflow-y: auto;
    }
    """

    class RowHighlighted(Message):
        def __init__(self, item_id: str) -> None:
            super().__init__()
            self.item_id = item_id

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._descriptor: TimelineDescriptor = EMPTY_TIMELINE
        self._today: date = date.today()
        self._highlighted_row: int = 0

    @property
    def bars(self) -> tuple[TimelineBar, ...]:
        return self._descriptor.bars

    @property
    def highlighted_id(self) -> str | None:
        bars = self._descriptor.bars
        if 0 <= self._highlighted_row < len(bars):
            return bars[self._highlighted_row].item.id
        return None

    def update_timeline(self, descriptor: TimelineDescriptor, today: date) -> None:
        keep = self.highlighted_id
        self._descriptor = descriptor
        self._today = today
        self._highlighted_row = 0
        for idx, bar in enumerate(descriptor.bars):
            if bar.item.id == keep:
                self._highlighted_row = idx
                break
        self.virtual_size = Size(self.size.width, len(descriptor.bars))
        self.refresh()

    def render_line(self, y: int) -> Strip:
        width = self.size.width
        # ScrollView doesn't offset y automatically
        virtual_y = y + int(self.scroll_y)
        bars = self._descriptor.bars
        if not bars:
            if y == 0:
                text = Text(f"  {EMPTY_MESSAGE}", style="dim")
                return Strip(text.render(self.app.console))
            return Strip.blank(width)
        if not 0 <= virtual_y < len(bars):
            return Strip.blank(width)
        return self._render_bar(bars[virtual_y], virtual_y, width)

    def _render_bar(self, bar: TimelineBar, row_y: int, width: int) -> Strip:
        chart_w = _chart_width(width)
        item = bar.item
        highlight = row_y == self._highlighted_row
        base = Style(reverse=True) if highlight and self.has_focus else Style(bold=highlight)

        status_style = Style(color=theme.status_color(item.status))
        segments: list[Segment] = [
            Segment(f"{item.status_icon} ", status_style),
            Segment(_label(item.title, LABEL_WIDTH - 2), base),
        ]

        today_pct = _today_pct(self._descriptor, self._today)
        today_col = pct_to_col(today_pct, chart_w) if today_pct is not None else -1
        today_style = Style(color=theme.color(theme.TIMELINE_TODAY_MARKER))

        start_col = pct_to_col(bar.left_pct, chart_w)
        if bar.inverted:
            bar_len = 0
        else:
            end_col = pct_to_col(bar.left_pct + bar.width_pct, chart_w)
            bar_len = max(1, end_col - start_col + 1)
        filled = int(bar_len * bar.progress_pct / 100)

        if item.status == Status.COMPLETED:
            done_style = Style(color=theme.color(theme.TIMELINE_BAR_DONE))
        else:
            done_style = status_style
        todo_style = Style(color=theme.color(theme.TIMELINE_BAR_TODO))
        inverted_style = Style(color=theme.color(theme.TIMELINE_INVERTED), bold=True)

        for c in range(chart_w):
            if bar.inverted and c == start_col:
                segments.append(Segment("!", inverted_style))
            elif start_col <= c < start_col + bar_len:
                if c - start_col < filled:
                    segments.append(Segment("█", done_style))
                else:
                    segments.append(Segment("░", todo_style))
            elif c == today_col:
                segments.append(Segment("│", today_style))
            else:
                segments.append(Segment(" "))
        return Strip(segments)

    def on_resize(self) -> None:
        self.virtual_size = Size(self.size.width, len(self._descriptor.bars))
        self.refresh()

    def on_focus(self) -> None:
        self.refresh()

    def on_blur(self) -> None:
        self.refresh()

    def _move(self, direction: int) -> None:
        bars = self._descriptor.bars
        if not bars:
            return
        row = max(0, min(len(bars) - 1, self._highlighted_row + direction))
        if row == self._highlighted_row:
            return
        self._highlighted_row = row
        if row < self.scroll_y:
            self.scroll_to(y=row, animate=False)
        elif row >= self.scroll_y + self.size.height:
            self.scroll_to(y=row - self.size.height + 1, animate=False)
        self.refresh()
        self.post_message(self.RowHighlighted(bars[row].item.id))

    def action_cursor_up(self) -> None:
        self._move(-1)

    def action_cursor_down(self) -> None:
        self._move(1)

    def on_click(self, event: Click) -> None:
        self.focus()
        row = event.y + int(self.scroll_y)
        bars = self._descriptor.bars
        if 0 <= row < len(bars) and row != self._highlighted_row:
            self._highlighted_row = row
            self.refresh()
            self.post_message(self.RowHighlighted(bars[row].item.id))


class TimelineChart(Container):
    """Timeline widget: axis header above a scrollable bar list."""

    DEFAULT_CSS = """
    TimelineChart {
        width: 1fr;
        height: 1fr;
    }
    TimelineChart #timeline-header {
        height: 2;
    }
    TimelineChart #timeline-view {
        height: 1fr;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._descriptor: TimelineDescriptor = EMPTY_TIMELINE
        self._today = date.today()

    def compose(self) -> ComposeResult:
        yield TimelineHeader(id="timeline-header")
        yield TimelineView(id="timeline-view")

    def on_mount(self) -> None:
        self._push_to_view()

    @property
    def highlighted_id(self) -> str | None:
        try:
            return self.query_one("#timeline-view", TimelineView).highlighted_id
        except Exception:
            return None

    def update_timeline(self, descriptor: TimelineDescriptor, today: date | None = None) -> None:
        self._descriptor = descriptor
        if today is not None:
            self._today = today
        self._push_to_view()

    def focus_view(self) -> None:
        try:
            self.query_one("#timeline-view", TimelineView).focus()
        except Exception:
            pass

    def _push_to_view(self) -> None:
        try:
            view = self.query_one("#timeline-view", TimelineView)
            header = self.query_one("#timeline-header", TimelineHeader)
        except Exception:
            return
        view.update_timeline(self._descriptor, self._today)
        header.update_header(self._descriptor, self._today)
