"""View tabs bar widget."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.events import Click
from textual.message import Message
from textual.widgets import Static

from tui_hrdash.models import ViewMode


class ViewTabs(Container):
    """A tab bar for switching between the board, list, calendar and timeline."""

    can_focus = True

    DEFAULT_CSS = """
    ViewTabs {
        height: 3;
        padding: 0;
        overflow: hidden;
        background: $surface-darken-1;
        border: round $surface-lighten-2;
        border-title-align: left;
    }
    ViewTabs:focus {
        border: round $accent;
        border-title-color: $accent;
    }
    ViewTabs Horizontal {
        height: 1;
    }
    ViewTabs .tab-button {
        width: auto;
        min-width: 10;
        padding: 0 1;
        color: $text-muted;
        background: $surface-darken-1;
        content-align: center middle;
    }
    ViewTabs .tab-active {
        color: $text;
        background: $primary;
        text-style: bold;
    }
    ViewTabs #view-stats {
        width: 1fr;
        content-align: right middle;
        color: $text-muted;
        padding: 0 1;
    }
    """

    class ViewSelected(Message):
        """Emitted when a view tab is clicked or navigated to."""

        def __init__(self, mode: ViewMode) -> None:
            super().__init__()
            self.mode = mode

    def __init__(self, active: ViewMode = ViewMode.BOARD) -> None:
        super().__init__()
        self._active = active

    def compose(self) -> ComposeResult:
        with Horizontal(id="view-tabs-container"):
            for i, mode in enumerate(ViewMode, start=1):
                yield Static(
                    f"{i} {mode.label}",
                    id=f"tab-{mode.value}",
                    classes="tab-button",
                )
            yield Static("", id="view-stats")

    def on_mount(self) -> None:
        self.border_title = "Views"
        self._apply_active()

    @property
    def active(self) -> ViewMode:
        return self._active

    def set_active(self, mode: ViewMode) -> None:
        self._active = mode
        self._apply_active()

    def set_stats(self, text: str) -> None:
        try:
            self.query_one("#view-stats", Static).update(text)
        except Exception:
            pass

    def _apply_active(self) -> None:
        for mode in ViewMode:
            try:
                tab = self.query_one(f"#tab-{mode.value}", Static)
            except Exception:
                continue
            tab.set_class(mode == self._active, "tab-active")

    def on_click(self, event: Click) -> None:
        widget_id = getattr(event.widget, "id", None) or ""
        if widget_id.startswith("tab-"):
            try:
                mode = ViewMode(widget_id[len("tab-"):])
            except ValueError:
                return
            self.post_message(self.ViewSelected(mode))

    def key_left(self) -> None:
        self._navigate(-1)

    def key_right(self) -> None:
        self._navigate(1)

    def _navigate(self, direction: int) -> None:
        modes = list(ViewMode)
        idx = (modes.index(self._active) + direction) % len(modes)
        self.post_message(self.ViewSelected(modes[idx]))
