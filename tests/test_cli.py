"""Tests for the Click command line."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from tui_hrdash.cli import main
from tui_hrdash.config import load_config
from tui_hrdash.store import InMemoryTaskStore


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def project(runner, tmp_path):
    result = runner.invoke(main, ["init", str(tmp_path), "--name", "People Ops"])
    assert result.exit_code == 0, result.output
    return tmp_path


class TestInit:
    def test_creates_config_and_tasks(self, project):
        assert load_config(project).name == "People Ops"
        assert len(InMemoryTaskStore.load(project).list()) >= 10

    def test_refuses_to_overwrite(self, runner, project):
        result = runner.invoke(main, ["init", str(project), "--name", "Again"])
        assert result.exit_code == 1
        assert "already exists" in result.output


class TestExport:
    def test_filtered_json(self, runner, project):
        out = project / "pending.json"
        result = runner.invoke(
            main, ["export", str(project), "-o", str(out), "--status", "pending"]
        )
        assert result.exit_code == 0, result.output
        data = json.loads(out.read_text(encoding="utf-8"))
        assert data["count"] > 0
        assert {t["status"] for t in data["tasks"]} == {"pending"}
        assert f"Exported {data['count']} task(s)" in result.output

    def test_sorted_by_config(self, runner, project):
        out = project / "all.json"
        runner.invoke(main, ["export", str(project), "-o", str(out)])
        dues = [t["due_date"] for t in json.loads(out.read_text())["tasks"] if t["due_date"]]
        assert dues == sorted(dues)

    def test_csv_format_option(self, runner, project):
        out = project / "tasks.out"
        result = runner.invoke(main, ["export", str(project), "-o", str(out), "--format", "csv"])
        assert result.exit_code == 0, result.output
        assert out.read_text(encoding="utf-8").startswith("id,title")

    def test_unknown_extension(self, runner, project):
        result = runner.invoke(main, ["export", str(project), "-o", str(project / "t.xlsx")])
        assert result.exit_code == 1
        assert "Export failed" in result.output


class TestInitTheme:
    def test_copies_theme_once(self, runner, tmp_path):
        result = runner.invoke(main, ["init-theme", str(tmp_path)])
        assert result.exit_code == 0, result.output
        assert (tmp_path / ".tui-hrdash" / "theme.yaml").is_file()

        result = runner.invoke(main, ["init-theme", str(tmp_path)])
        assert result.exit_code == 1
        assert "Already exists" in result.output


def test_version(runner):
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
