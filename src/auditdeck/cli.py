"""
auditdeck CLI: main entry point.

Reads audit results from the configured audit engine and renders them in
the terminal, or launches the interactive dashboard.

Commands:
- summary / resolve: audit results table and setup deep links
- templates / assess: compliance templates and assessments
- trends / snapshot: score history and snapshots
- export: CSV, spreadsheet and trend CSV downloads
- dashboard: interactive TUI
- config: configuration management
"""

import asyncio
from typing import Optional

import structlog
import typer
from rich.console import Console

from .audit.models import TREND_WINDOWS, ExportKind
from .audit.setup_paths import resolve_setup_url
from .commands.config import config_app
from .core.errors import AuditEngineError, extract_error_message
from .core.logging import setup_logging
from .core.settings import Settings, load_settings
from .dashboard.controller import AuditDashboard, Toast
from .dashboard.downloads import write_blob
from .engine import create_engine
from .ui.render import assessment_table, results_table, summary_panel, trend_table

log = structlog.get_logger()

app = typer.Typer(
    help=(
        "auditdeck: review security audit results from an audit engine.\n\n"
        "Shows the score, severity-ordered results with Setup deep links, "
        "compliance assessments and score trends, and saves exports."
    ),
    context_settings={"help_option_names": ["-h", "--help"]},
    no_args_is_help=True,
)

console = Console()

app.add_typer(config_app, name="config", help="Manage auditdeck TOML configuration")

TOAST_STYLES = {"success": "green", "warning": "yellow", "info": "cyan"}


def _print_toast(toast: Toast) -> None:
    style = TOAST_STYLES.get(toast.variant, "red")
    console.print(f"[{style}]{toast.title}:[/] {toast.message}")


def _settings(ctx: typer.Context) -> Settings:
    return (ctx.obj or {}).get("settings") or load_settings()


def _dashboard(ctx: typer.Context) -> AuditDashboard:
    settings = _settings(ctx)
    try:
        engine = create_engine(settings)
    except AuditEngineError as e:
        console.print(f"[red]Error: {extract_error_message(e)}[/]")
        raise typer.Exit(1)
    return AuditDashboard.from_settings(engine, settings, notifier=_print_toast)


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose output"
    ),
    config: Optional[str] = typer.Option(
        None, "--config", "-c", help="Path to configuration file"
    ),
):
    """
    Main callback for global setup.
    """
    setup_logging(verbose)
    ctx.obj = {"settings": load_settings(config), "config": config}


@app.command("summary")
def summary_cmd(
    ctx: typer.Context,
    sort: Optional[str] = typer.Option(
        None, "--sort", "-s", help="Column to sort by (status, testName, message)"
    ),
    desc: bool = typer.Option(False, "--desc", help="Sort descending"),
):
    """Show the security score and audit results."""
    settings = _settings(ctx)
    dashboard = _dashboard(ctx)
    if not asyncio.run(dashboard.load()):
        console.print(f"[red]Error: {dashboard.state.error_message}[/]")
        raise typer.Exit(1)

    if sort or desc:
        dashboard.sort(sort or dashboard.state.sort_column, "desc" if desc else "asc")

    state = dashboard.state
    console.print(summary_panel(state.summary))
    console.print(
        results_table(
            state.rows,
            instance_url=settings.dashboard.instance_url,
            sort_column=state.sort_column,
            sort_direction=state.sort_direction,
        )
    )
    if state.trend and state.trend.snapshot_count:
        console.print(trend_table(state.trend))


@app.command("resolve")
def resolve_cmd(
    text: str = typer.Argument(..., help="Remediation text containing a Setup path"),
):
    """Resolve the Setup deep link named in remediation text."""
    url = resolve_setup_url(text)
    if url is None:
        console.print("[yellow]No Setup path found in text[/]")
        raise typer.Exit(1)
    console.print(url)


@app.command("templates")
def templates_cmd(ctx: typer.Context):
    """List compliance templates."""
    dashboard = _dashboard(ctx)
    try:
        templates = asyncio.run(dashboard.engine.list_templates())
    except AuditEngineError as e:
        console.print(f"[red]Error: {extract_error_message(e)}[/]")
        raise typer.Exit(1)

    if not templates:
        console.print("[yellow]No compliance templates available[/]")
        return
    for t in templates:
        console.print(f"[cyan]{t.id}[/]  {t.name}  [dim]{t.description}[/]")


@app.command("assess")
def assess_cmd(
    ctx: typer.Context,
    template_id: str = typer.Argument(..., help="Compliance template id"),
):
    """Run a compliance assessment."""
    dashboard = _dashboard(ctx)
    assessment = asyncio.run(dashboard.run_assessment(template_id))
    if assessment is None:
        raise typer.Exit(1)
    console.print(assessment_table(assessment))


@app.command("trends")
def trends_cmd(
    ctx: typer.Context,
    days: int = typer.Option(30, "--days", "-d", help=f"Day window {list(TREND_WINDOWS)}"),
):
    """Show score trend over a day window."""
    dashboard = _dashboard(ctx)
    if not asyncio.run(dashboard.set_trend_window(days)):
        raise typer.Exit(1)
    console.print(trend_table(dashboard.state.trend))


@app.command("snapshot")
def snapshot_cmd(
    ctx: typer.Context,
    template: Optional[str] = typer.Option(
        None, "--template", "-t", help="Compliance template name to record"
    ),
):
    """Save a snapshot of the current audit summary."""
    dashboard = _dashboard(ctx)
    if asyncio.run(dashboard.save_snapshot(template)) is None:
        raise typer.Exit(1)


@app.command("export")
def export_cmd(
    ctx: typer.Context,
    kind: ExportKind = typer.Argument(..., help="csv, xlsx or trend-csv"),
    out: Optional[str] = typer.Option(None, "--out", "-o", help="Output directory"),
    days: int = typer.Option(30, "--days", "-d", help="Day window for trend-csv"),
):
    """Export audit results or trends to a file."""
    settings = _settings(ctx)
    dashboard = _dashboard(ctx)
    blob = asyncio.run(dashboard.export(kind, days))
    if blob is None:
        raise typer.Exit(1)
    path = write_blob(blob, out or settings.exports.out_dir)
    console.print(f"[green]✓ Wrote {path}[/]")


@app.command("dashboard")
def dashboard_cmd(ctx: typer.Context):
    """Launch the interactive TUI dashboard."""
    from .ui.app import launch

    try:
        launch(_settings(ctx))
    except AuditEngineError as e:
        console.print(f"[red]Error: {extract_error_message(e)}[/]")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Dashboard closed[/]")


@app.command("version")
def version_cmd():
    """Show version information."""
    from . import __version__

    console.print(f"auditdeck version: [cyan]{__version__}[/]")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
