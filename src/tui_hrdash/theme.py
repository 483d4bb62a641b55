"""YAML-based centralized color system for TUI HR Dashboard.

Loads colors from default_theme.yaml and optionally merges
project-level overrides from {project_dir}/.tui-hrdash/theme.yaml.
"""

from __future__ import annotations

import shutil
import sys
from pathlib import Path
from typing import NamedTuple

import yaml
from textual.theme import Theme

from tui_hrdash.models import Priority, Status

THEMES = ("default_dark", "default_light")


class ColorPair(NamedTuple):
    """A pair of colors for dark and light themes."""

    dark: str
    light: str

    def resolve(self, is_dark: bool) -> str:
        return self.dark if is_dark else self.light


# ── Module-level variables (populated by _apply) ──────────────────

THEME_NAME: str = "default_dark"
IS_DARK: bool = True

STATUS_COLORS: dict[Status, ColorPair]
PRIORITY_COLORS: dict[Priority, ColorPair]

TIMELINE_HEADER: ColorPair
TIMELINE_BAR_DONE: ColorPair
TIMELINE_BAR_TODO: ColorPair
TIMELINE_TODAY_MARKER: ColorPair
TIMELINE_INVERTED: ColorPair

CALENDAR_TODAY: ColorPair
CALENDAR_OTHER_MONTH: ColorPair
CALENDAR_OVERFLOW: ColorPair

OVERDUE: ColorPair
SELECTED: ColorPair
LOCK: ColorPair
STATUSBAR_DEMO: ColorPair

_TEXTUAL: dict[str, dict[str, str]] = {}


# ── Internal helpers ──────────────────────────────────────────────

def _load_yaml(path: Path) -> dict:
    """Load a YAML file and return a dict (empty dict on error)."""
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return data if isinstance(data, dict) else {}
    except (OSError, yaml.YAMLError):
        return {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (returns a new dict)."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _pair(d: dict) -> ColorPair:
    """Convert a {dark: ..., light: ...} dict to a ColorPair."""
    return ColorPair(str(d.get("dark", "white")), str(d.get("light", "black")))


def _apply(data: dict) -> None:
    """Map parsed YAML data onto module-level constants."""
    mod = sys.modules[__name__]

    status = data.get("status", {})
    mod.STATUS_COLORS = {
        Status.PENDING: _pair(status.get("pending", {})),
        Status.IN_PROGRESS: _pair(status.get("in_progress", {})),
        Status.ON_HOLD: _pair(status.get("on_hold", {})),
        Status.COMPLETED: _pair(status.get("completed", {})),
    }

    priority = data.get("priority", {})
    mod.PRIORITY_COLORS = {p: _pair(priority.get(p.value.lower(), {})) for p in Priority}

    timeline = data.get("timeline", {})
    mod.TIMELINE_HEADER = _pair(timeline.get("header", {}))
    mod.TIMELINE_BAR_DONE = _pair(timeline.get("bar_done", {}))
    mod.TIMELINE_BAR_TODO = _pair(timeline.get("bar_todo", {}))
    mod.TIMELINE_TODAY_MARKER = _pair(timeline.get("today_marker", {}))
    mod.TIMELINE_INVERTED = _pair(timeline.get("inverted", {}))

    calendar = data.get("calendar", {})
    mod.CALENDAR_TODAY = _pair(calendar.get("today", {}))
    mod.CALENDAR_OTHER_MONTH = _pair(calendar.get("other_month", {}))
    mod.CALENDAR_OVERFLOW = _pair(calendar.get("overflow", {}))

    ui = data.get("ui", {})
    mod.OVERDUE = _pair(ui.get("overdue", {}))
    mod.SELECTED = _pair(ui.get("selected", {}))
    mod.LOCK = _pair(ui.get("lock", {}))
    mod.STATUSBAR_DEMO = _pair(ui.get("statusbar_demo", {}))

    textual = data.get("textual", {})
    mod._TEXTUAL = {
        variant: {str(k): str(v) for k, v in (textual.get(variant) or {}).items()}
        for variant in ("dark", "light")
    }


# ── Public API ────────────────────────────────────────────────────

def color(pair: ColorPair) -> str:
    """Resolve *pair* for the active theme."""
    return pair.resolve(IS_DARK)


def status_color(status: Status) -> str:
    return color(STATUS_COLORS[status])


def priority_color(priority: Priority) -> str:
    return color(PRIORITY_COLORS[priority])


def init_theme(project_dir: Path) -> Path:
    """Copy default_theme.yaml → {project_dir}/.tui-hrdash/theme.yaml.

    Raises FileExistsError if the destination already exists.
    """
    dest = project_dir / ".tui-hrdash" / "theme.yaml"
    if dest.exists():
        raise FileExistsError(str(dest))
    dest.parent.mkdir(parents=True, exist_ok=True)
    src = Path(__file__).parent / "default_theme.yaml"
    shutil.copy2(src, dest)
    return dest


def load_theme(project_dir: Path | None = None, theme_name: str = "default_dark") -> None:
    """Load the default theme and optionally merge project overrides.

    1. Load ``default_theme.yaml`` bundled with the package.
    2. If *project_dir* is given and ``{project_dir}/.tui-hrdash/theme.yaml``
       exists, deep-merge it on top of the defaults.
    3. Apply the merged data to module-level constants.
    """
    mod = sys.modules[__name__]
    mod.THEME_NAME = theme_name if theme_name in THEMES else THEMES[0]
    mod.IS_DARK = mod.THEME_NAME != "default_light"

    default_path = Path(__file__).parent / "default_theme.yaml"
    data = _load_yaml(default_path)

    if project_dir is not None:
        override_path = project_dir / ".tui-hrdash" / "theme.yaml"
        if override_path.is_file():
            override = _load_yaml(override_path)
            if override:
                data = _deep_merge(data, override)

    _apply(data)


def next_theme_name(current: str) -> str:
    """The theme after *current* in :data:`THEMES` (wrapping)."""
    idx = THEMES.index(current) if current in THEMES else -1
    return THEMES[(idx + 1) % len(THEMES)]


def build_textual_theme() -> Theme:
    """Build the Textual theme registered as ``hrdash-theme``."""
    palette = _TEXTUAL.get("dark" if IS_DARK else "light", {})
    return Theme(
        name="hrdash-theme",
        primary=palette.get("primary", "#3b82f6"),
        secondary=palette.get("secondary"),
        accent=palette.get("accent"),
        warning=palette.get("warning"),
        error=palette.get("error"),
        success=palette.get("success"),
        background=palette.get("background"),
        surface=palette.get("surface"),
        panel=palette.get("panel"),
        dark=IS_DARK,
    )


# Apply default theme on module import
load_theme()
