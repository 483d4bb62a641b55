"""Pick-one modal for statuses, bulk actions and same-day tasks."""

from __future__ import annotations

from collections.abc import Sequence

from textual import events
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import OptionList, Static
from textual.widgets.option_list import Option

from rich.text import Text

# Digits 1-9 pick the matching row directly.
SHORTCUT_KEYS = "123456789"


def option_prompt(index: int, display: str, current: bool = False) -> Text:
    """Numbered option row. Task titles are shown verbatim, never as markup."""
    key = SHORTCUT_KEYS[index] if index < len(SHORTCUT_KEYS) else " "
    prompt = Text(f"{key} ", style="dim")
    prompt.append(display)
    if current:
        prompt.append("  (current)", style="italic dim")
    return prompt


class SelectScreen(ModalScreen[str | None]):
    """Dismisses with the chosen value, or None on escape."""

    BINDINGS = [("escape", "cancel", "Cancel")]

    DEFAULT_CSS = """
    SelectScreen {
        align: center middle;
    }
    #select-box {
        width: 60;
        height: auto;
        max-height: 70%;
        background: $surface;
        border: thick $primary;
        padding: 1 2;
    }
    #select-title {
        text-style: bold;
    }
    #select-hint {
        color: $text-muted;
        margin-bottom: 1;
    }
    #select-options {
        height: auto;
        max-height: 20;
    }
    """

    def __init__(
        self,
        title: str,
        options: Sequence[tuple[str, str]],
        current: str | None = None,
        hint: str = "Enter or 1-9 to choose, Esc to cancel",
    ) -> None:
        super().__init__()
        self._title = title
        self._values = [value for value, _ in options]
        self._options = list(options)
        self._current = current
        self._hint = hint

    def compose(self) -> ComposeResult:
        with Vertical(id="select-box"):
            yield Static(Text(self._title), id="select-title")
            if self._hint:
                yield Static(self._hint, id="select-hint")
            yield OptionList(
                *(
                    Option(option_prompt(i, display, value == self._current), id=value)
                    for i, (value, display) in enumerate(self._options)
                ),
                id="select-options",
            )

    def on_mount(self) -> None:
        options = self.query_one("#select-options", OptionList)
        if self._current in self._values:
            options.highlighted = self._values.index(self._current)
        options.focus()

    def on_key(self, event: events.Key) -> None:
        if event.character and event.character in SHORTCUT_KEYS:
            index = SHORTCUT_KEYS.index(event.character)
            if index < len(self._values):
                event.stop()
                self.dismiss(self._values[index])

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.dismiss(event.option.id)

    def action_cancel(self) -> None:
        self.dismiss(None)
