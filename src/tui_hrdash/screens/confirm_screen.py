"""Yes/no modal used before deleting tasks or quitting with unsaved work."""

from __future__ import annotations

from collections.abc import Sequence

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Static

from rich.text import Text

MAX_DETAILS = 5


def detail_lines(details: Sequence[str], limit: int = MAX_DETAILS) -> Text:
    """Bulleted preview of affected tasks, truncated with an "and N more" line."""
    text = Text()
    for i, line in enumerate(details[:limit]):
        if i:
            text.append("\n")
        text.append(f"• {line}")
    hidden = len(details) - limit
    if hidden > 0:
        text.append(f"\n… and {hidden} more", style="italic dim")
    return text


class ConfirmScreen(ModalScreen[bool]):
    """Dismisses with True on confirm. Y and N answer without the mouse."""

    BINDINGS = [
        ("escape", "answer(False)", "Cancel"),
        ("n", "answer(False)", "No"),
        ("y", "answer(True)", "Yes"),
    ]

    DEFAULT_CSS = """
    ConfirmScreen {
        align: center middle;
    }
    #confirm-box {
        width: 60;
        height: auto;
        background: $surface;
        border: thick $primary;
        padding: 1 2;
    }
    ConfirmScreen.destructive #confirm-box {
        border: thick $error;
    }
    #confirm-title {
        text-style: bold;
    }
    #confirm-message {
        margin-top: 1;
    }
    #confirm-details {
        color: $text-muted;
        margin-top: 1;
    }
    #confirm-buttons {
        align: center middle;
        height: 3;
        margin-top: 1;
    }
    #confirm-buttons Button {
        margin: 0 1;
    }
    """

    def __init__(
        self,
        message: str,
        title: str = "Confirm",
        confirm_label: str = "Yes",
        details: Sequence[str] = (),
        destructive: bool = True,
    ) -> None:
        super().__init__(classes="destructive" if destructive else "")
        self.message = message
        self.title_text = title
        self.confirm_label = confirm_label
        self.details = list(details)
        self.destructive = destructive

    def compose(self) -> ComposeResult:
        with Vertical(id="confirm-box"):
            yield Static(Text(self.title_text), id="confirm-title")
            yield Static(Text(self.message), id="confirm-message")
            if self.details:
                yield Static(detail_lines(self.details), id="confirm-details")
            with Horizontal(id="confirm-buttons"):
                yield Button(
                    self.confirm_label,
                    variant="error" if self.destructive else "primary",
                    id="confirm-yes",
                )
                yield Button("Cancel", id="confirm-no")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "confirm-yes")

    def action_answer(self, confirmed: bool) -> None:
        self.dismiss(confirmed)
