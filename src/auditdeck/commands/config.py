"""Config commands for auditdeck CLI."""

import os

import structlog
import typer
from rich.console import Console
from rich.table import Table

from ..core.logging import mask_token
from ..core.settings import CONFIG_FILENAME, Settings, load_settings, save_settings

console = Console()
log = structlog.get_logger()

config_app = typer.Typer(
    help="Manage auditdeck TOML configuration",
    no_args_is_help=True,
)


@config_app.command("init")
def config_init(
    config: str = typer.Option(
        CONFIG_FILENAME, "--config", "-c", help="Path to TOML configuration file"
    ),
    engine_url: str = typer.Option(
        "", "--engine-url", help="Base URL of a remote audit engine"
    ),
):
    """Initialize a configuration file."""
    if os.path.exists(config):
        console.print(f"[yellow]Configuration file '{config}' already exists.[/]")
        raise typer.Exit(1)

    settings = Settings()
    if engine_url:
        settings.engine.kind = "http"
        settings.engine.base_url = engine_url
    path = save_settings(config, settings)
    log.info("config.initialized", path=path, engine=settings.engine.kind)
    console.print(f"[green]Created configuration file: {path}[/]")


@config_app.command("show")
def config_show(
    config: str = typer.Option(
        CONFIG_FILENAME, "--config", "-c", help="Path to TOML configuration file"
    ),
):
    """Display the current configuration."""
    settings = load_settings(config)
    table = Table(title="auditdeck Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="magenta")

    table.add_row("Engine", settings.engine.kind)
    if settings.engine.kind == "http":
        table.add_row("Engine URL", settings.engine.base_url or "(not set)")
        table.add_row("API token", mask_token(settings.engine.api_token))
        table.add_row("Timeout (s)", str(settings.engine.timeout_sec))
        table.add_row("Verify SSL", str(settings.engine.verify_ssl))
    else:
        table.add_row("Data directory", settings.engine.data_dir)
    table.add_row(
        "Default sort",
        f"{settings.dashboard.sort_column} ({settings.dashboard.sort_direction})",
    )
    table.add_row("Trend window (days)", str(settings.dashboard.trend_days))
    table.add_row("Instance URL", settings.dashboard.instance_url or "(not set)")
    table.add_row("Exports directory", settings.exports.out_dir)

    console.print(table)
