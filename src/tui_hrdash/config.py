"""Dashboard configuration management using tomlkit and PyYAML."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog
import tomlkit
import yaml

from tui_hrdash.models import (
    DATE_FORMAT_PRESETS,
    DEFAULT_DATE_FORMAT,
    SORT_ASC,
    SORT_DESC,
    SORT_FIELDS,
    DashboardConfig,
    ViewMode,
)

logger = structlog.get_logger(__name__)

CONFIG_DIR = ".tui-hrdash"
CONFIG_FILE = "config.toml"
SETTINGS_FILE = "settings.yaml"

_VIEW_VALUES = {v.value for v in ViewMode}


def _get_config_path(project_dir: Path) -> Path:
    return project_dir / CONFIG_DIR / CONFIG_FILE


def load_config(project_dir: Path) -> DashboardConfig:
    """Load dashboard configuration from .tui-hrdash/config.toml.

    Missing or unparsable files and out-of-range values fall back to defaults.
    """
    config_path = _get_config_path(project_dir)
    config = DashboardConfig()

    if not config_path.exists():
        return config

    try:
        doc = tomlkit.parse(config_path.read_text(encoding="utf-8"))
    except Exception as exc:
        logger.warning("config_unreadable", path=str(config_path), error=str(exc))
        return config

    section = doc.get("dashboard", {})
    config.name = str(section.get("name", ""))

    view = str(section.get("default_view", config.default_view))
    if view in _VIEW_VALUES:
        config.default_view = view

    sort_by = str(section.get("sort_by", config.sort_by))
    if sort_by in SORT_FIELDS:
        config.sort_by = sort_by

    sort_order = str(section.get("sort_order", config.sort_order))
    if sort_order in (SORT_ASC, SORT_DESC):
        config.sort_order = sort_order

    raw_fmt = str(section.get("date_format", DEFAULT_DATE_FORMAT))
    config.date_format = raw_fmt if raw_fmt in DATE_FORMAT_PRESETS else DEFAULT_DATE_FORMAT

    try:
        config.search_debounce_ms = max(0, int(section.get("search_debounce_ms", 300)))
    except (TypeError, ValueError):
        config.search_debounce_ms = 300

    if "theme_name" in section:
        config.theme_name = str(section.get("theme_name", "default_dark"))

    return config


def save_config(project_dir: Path, config: DashboardConfig) -> None:
    """Save dashboard configuration to .tui-hrdash/config.toml."""
    config_path = _get_config_path(project_dir)
    config_path.parent.mkdir(parents=True, exist_ok=True)

    doc = tomlkit.document()
    table = tomlkit.table()
    table.add("name", config.name)
    table.add("default_view", config.default_view)
    table.add("sort_by", config.sort_by)
    table.add("sort_order", config.sort_order)
    table.add("date_format", config.date_format)
    table.add("search_debounce_ms", config.search_debounce_ms)
    table.add("theme_name", config.theme_name)
    doc.add("dashboard", table)

    config_path.write_text(tomlkit.dumps(doc), encoding="utf-8")


# ── Settings (YAML) ─────────────────────────────────────────────

def _load_yaml(path: Path) -> dict:
    """Load a YAML file and return a dict (empty dict on error)."""
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return data if isinstance(data, dict) else {}
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("settings_unreadable", path=str(path), error=str(exc))
        return {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (returns a new dict)."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val  # lists are replaced, not appended
    return result


def load_settings(
    project_dir: Path | None = None, overrides: dict[str, Any] | None = None
) -> dict[str, Any]:
    """Load settings from default_settings.yaml + optional project override.

    1. Load ``default_settings.yaml`` bundled with the package.
    2. If *project_dir* is given and ``{project_dir}/.tui-hrdash/settings.yaml``
       exists, deep-merge it on top of the defaults.
    3. Deep-merge *overrides* (used by demo mode) last.
    """
    default_path = Path(__file__).parent / "default_settings.yaml"
    data = _load_yaml(default_path)

    if project_dir is not None:
        override_path = project_dir / CONFIG_DIR / SETTINGS_FILE
        if override_path.is_file():
            override = _load_yaml(override_path)
            if override:
                data = _deep_merge(data, override)

    if overrides:
        data = _deep_merge(data, overrides)
    return data


def get_lane_titles(settings: dict[str, Any]) -> dict[str, str]:
    """Custom board lane titles keyed by status value."""
    raw = settings.get("lanes", {})
    if not isinstance(raw, dict):
        return {}
    return {str(k): str(v) for k, v in raw.items() if v}
