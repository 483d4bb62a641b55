"""Tests for --demo mode data."""

from __future__ import annotations

from datetime import date

from tui_hrdash.demo_data import DEMO_NAME, demo_settings, demo_tasks
from tui_hrdash.models import Status, is_overdue
from tui_hrdash.users import SettingsUserDirectory

TODAY = date(2025, 11, 15)


def test_demo_tasks_have_unique_ids():
    ids = [t.id for t in demo_tasks(TODAY)]
    assert len(ids) == len(set(ids))


def test_demo_tasks_cover_every_lane():
    assert {t.status for t in demo_tasks(TODAY)} == set(Status)


def test_demo_tasks_relative_to_today():
    tasks = demo_tasks(TODAY)
    assert any(is_overdue(t, TODAY) for t in tasks)
    assert any(t.has_schedule and t.start_date <= TODAY <= t.due_date for t in tasks)
    assert any(t.due_date is None for t in tasks)


def test_demo_dependencies_resolve():
    tasks = demo_tasks(TODAY)
    ids = {t.id for t in tasks}
    deps = [d for t in tasks for d in t.dependencies]
    assert deps
    assert set(deps) <= ids


def test_demo_settings_sign_in_a_known_user():
    directory = SettingsUserDirectory.from_settings(demo_settings())
    current = directory.current_user()
    assert current is not None
    assert directory.resolve(current) != current


def test_demo_assignees_are_known_users():
    directory = SettingsUserDirectory.from_settings(demo_settings())
    known = {u.email for u in directory.all_users()}
    assignees = {a for t in demo_tasks(TODAY) for a in t.assigned_to}
    assert assignees <= known


def test_demo_name():
    assert "Demo" in DEMO_NAME
