"""CLI entry point for the plugin manager."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.syntax import Syntax
from rich.table import Table

from plugin_manager.config import DEFAULT_CONFIG_TEMPLATE, PipelineConfig, load_config
from plugin_manager.config.loader import CONFIG_FILENAME
from plugin_manager.files import CollectionWriter, read_directory
from plugin_manager.log import configure_logging
from plugin_manager.models import PluginManagerError
from plugin_manager.plugins import PluginLoader

app = typer.Typer(
    name="plugin-manager",
    help="Run an ordered pipeline of plugins over a directory of files.",
)

config_app = typer.Typer(help="Manage plugin-manager configuration.")
app.add_typer(config_app, name="config")

plugins_app = typer.Typer(help="Inspect installed plugins.")
app.add_typer(plugins_app, name="plugins")

# Global state
_config: PipelineConfig | None = None


def _get_config() -> PipelineConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help=f"Path to {CONFIG_FILENAME}")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    configure_logging(_config.log_level, _config.log_format)


def _display_written(paths: list[Path], dry_run: bool) -> None:
    title = "Would write" if dry_run else "Written"
    table = Table(title=f"{title} ({len(paths)})")
    table.add_column("Path", style="cyan")
    table.add_column("Size", justify="right")
    for p in paths:
        size = f"{p.stat().st_size} B" if not dry_run and p.exists() else "-"
        table.add_row(str(p), size)
    rprint(table)


@app.command()
def run(
    source: str | None = typer.Argument(None, help="Source directory (default: config source.directory)"),
    output: Annotated[
        str | None, typer.Option("--output", "-o", help="Output directory")
    ] = None,
    plugin: Annotated[
        list[str] | None,
        typer.Option("--plugin", "-p", help="Plugin reference, repeatable (module:attr or entry point name)"),
    ] = None,
    dry_run: bool = typer.Option(False, "--dry-run", help="Run plugins but don't write output"),
) -> None:
    """Read SOURCE, run plugins in order, and write the result."""
    cfg = _get_config()
    source_dir = Path(source or cfg.source.directory)
    output_dir = Path(output or cfg.output.directory)
    references = list(plugin) if plugin else list(cfg.plugins)

    try:
        files = read_directory(source_dir, cfg.source.ignore_patterns)
    except OSError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    rprint(
        f"[bold]Running[/bold] {len(references)} plugin(s) over "
        f"{len(files)} file(s) from {source_dir}..."
    )

    try:
        manager = PluginLoader(cfg).build_manager(references)
        result = asyncio.run(manager.run_plugins(files))
    except PluginManagerError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if not isinstance(result, dict):
        rprint(f"[red]Error:[/red] plugins returned {type(result).__name__}, expected a mapping")
        raise typer.Exit(1)

    try:
        written = CollectionWriter(output_dir).write(result, dry_run=dry_run)
    except (ValueError, TypeError, OSError) as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if dry_run:
        rprint("[yellow](dry run, nothing written)[/yellow]")
    _display_written(written, dry_run)


@plugins_app.command("list")
def plugins_list() -> None:
    """List plugins registered via entry points."""
    names = PluginLoader(_get_config()).discover()
    if not names:
        rprint(f"[yellow]No plugins registered under '{PluginLoader.GROUP}'.[/yellow]")
        return
    table = Table(title=f"Installed plugins ({len(names)})")
    table.add_column("Name", style="cyan")
    for name in sorted(names):
        table.add_row(name)
    rprint(table)


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default plugin-manager.yaml in current directory."""
    target = Path(CONFIG_FILENAME)
    if target.exists() and not force:
        rprint(f"[yellow]{CONFIG_FILENAME} already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")
