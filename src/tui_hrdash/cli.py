"""CLI entry point using Click."""

from __future__ import annotations

from pathlib import Path

import click
import structlog

from tui_hrdash.logging_utils import configure_logging

logger = structlog.get_logger(__name__)


class _DefaultGroup(click.Group):
    """Insert 'run' when the first arg is not a registered subcommand."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.no_args_is_help = False  # bare `tui-hrdash` routes to run

    def invoke(self, ctx):
        if not ctx._protected_args and not ctx.args:
            ctx._protected_args = ["run"]
        return super().invoke(ctx)

    def resolve_command(self, ctx, args):
        cmd_name = args[0] if args else None
        if cmd_name and cmd_name in self.commands:
            return super().resolve_command(ctx, args)
        return super().resolve_command(ctx, ["run"] + list(args))


def _ensure_dir(project_dir: Path) -> None:
    if not project_dir.exists():
        if click.confirm(f"'{project_dir}' does not exist. Create it?"):
            project_dir.mkdir(parents=True, exist_ok=True)
            click.echo(f"Created {project_dir}")
        else:
            raise SystemExit(0)
    elif not project_dir.is_dir():
        click.echo(f"Error: '{project_dir}' is not a directory.", err=True)
        raise SystemExit(1)


@click.group(cls=_DefaultGroup)
@click.option("--no-color", is_flag=True, help="Disable color output")
@click.option("--demo", is_flag=True, help="Launch with HR demo data (nothing is saved)")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write structured logs to this file (rotated)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    show_default=True,
)
@click.version_option(package_name="tui-hrdash")
@click.pass_context
def main(ctx, no_color: bool, demo: bool, log_file: str | None, log_level: str) -> None:
    """TUI HR Dashboard - board, list, calendar and timeline views of HR tasks."""
    configure_logging(log_file, log_level)
    ctx.ensure_object(dict)
    ctx.obj["no_color"] = no_color
    ctx.obj["demo"] = demo


@main.command()
@click.argument("path", default=".", type=click.Path())
@click.pass_context
def run(ctx, path: str) -> None:
    """Open the dashboard for the project folder PATH."""
    from tui_hrdash.app import HRDashApp

    no_color = ctx.obj["no_color"]
    demo = ctx.obj["demo"]

    project_dir = Path(path).resolve()
    if not demo:
        _ensure_dir(project_dir)
    logger.info("app_starting", project_dir=str(project_dir), demo=demo)
    app = HRDashApp(project_dir=project_dir, no_color=no_color, demo_mode=demo)
    app.run()


@main.command("init")
@click.argument("path", default=".", type=click.Path())
@click.option("--name", prompt="Dashboard name", default="HR Tasks", help="Dashboard name")
def init_cmd(path: str, name: str) -> None:
    """Initialize a dashboard project (config.toml + sample tasks.yaml)."""
    from tui_hrdash.config import CONFIG_DIR, save_config
    from tui_hrdash.demo_data import demo_tasks
    from tui_hrdash.models import DashboardConfig
    from tui_hrdash.store import TASKS_FILE, InMemoryTaskStore

    project_dir = Path(path).resolve()
    tasks_path = project_dir / CONFIG_DIR / TASKS_FILE
    if tasks_path.exists():
        click.echo(f"Tasks file already exists: {tasks_path}", err=True)
        raise SystemExit(1)

    project_dir.mkdir(parents=True, exist_ok=True)
    save_config(project_dir, DashboardConfig(name=name))
    click.echo(f"Created {project_dir / CONFIG_DIR / 'config.toml'}")

    InMemoryTaskStore(demo_tasks(), path=tasks_path).save()
    click.echo(f"Created {tasks_path}")

    click.echo(f"\nDashboard initialized at {project_dir}")
    click.echo("Run 'tui-hrdash' to open it.")


@main.command("init-theme")
@click.argument("path", default=".", type=click.Path())
def init_theme_cmd(path: str) -> None:
    """Copy default theme to .tui-hrdash/theme.yaml for customization."""
    from tui_hrdash.theme import init_theme

    project_dir = Path(path).resolve()
    _ensure_dir(project_dir)
    try:
        dest = init_theme(project_dir)
    except FileExistsError as e:
        click.echo(f"Already exists: {e}", err=True)
        raise SystemExit(1)
    click.echo(f"Created {dest}")


@main.command("export")
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False))
@click.option(
    "--format", "fmt",
    type=click.Choice(["json", "csv"]),
    default=None,
    help="Output format (defaults to the output file's extension)",
)
@click.option("--output", "-o", type=click.Path(dir_okay=False), required=True)
@click.option("--status", default=None, help="Status filter (e.g. pending, overdue)")
@click.option("--priority", default=None, help="Priority filter (LOW..CRITICAL)")
@click.option("--assignee", default=None, help="Assignee identifier or 'me'")
@click.option("--search", default=None, help="Search text in title/description")
def export_cmd(
    path: str,
    fmt: str | None,
    output: str,
    status: str | None,
    priority: str | None,
    assignee: str | None,
    search: str | None,
) -> None:
    """Export the tasks of PATH, filtered and sorted as configured."""
    from tui_hrdash.config import load_config, load_settings
    from tui_hrdash.export import export_items
    from tui_hrdash.filters import apply_filters
    from tui_hrdash.sorting import sort_items
    from tui_hrdash.store import InMemoryTaskStore
    from tui_hrdash.users import SettingsUserDirectory

    project_dir = Path(path).resolve()
    config = load_config(project_dir)
    users = SettingsUserDirectory.from_settings(load_settings(project_dir))
    store = InMemoryTaskStore.load(project_dir)

    filters = {
        "status": status,
        "priority": priority,
        "assignedTo": assignee,
        "search": search,
    }
    items = apply_filters(store.list(), filters, users.current_user())
    items = sort_items(items, config.sort_by, config.sort_order)
    try:
        count = export_items(items, Path(output), fmt, users.resolve)
    except (OSError, ValueError) as e:
        click.echo(f"Export failed: {e}", err=True)
        raise SystemExit(1)
    click.echo(f"Exported {count} task(s) to {output}")
