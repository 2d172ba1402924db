"""CLI entry point for sitesmith."""

from __future__ import annotations

import json
import logging
import signal
import time
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.logging import RichHandler
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from sitesmith.config import SiteConfig, is_production_env, load_config
from sitesmith.config.loader import DEFAULT_CONFIG_TEMPLATE
from sitesmith.errors import BuildCancelled, BuildError, ConfigError, SiteError
from sitesmith.filters import default_registry
from sitesmith.output import OutputWriter
from sitesmith.pipeline import BuildReport, ReportError, SiteBuilder
from sitesmith.plugins import PluginLoader
from sitesmith.render import highlight_css
from sitesmith.watch import SiteWatcher

app = typer.Typer(
    name="sitesmith",
    help="Build a static site from Markdown and Jinja2 templates.",
)

config_app = typer.Typer(help="Manage sitesmith configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: SiteConfig | None = None

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        return json.dumps({
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        })


def _configure_logging(cfg: SiteConfig, verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else _LOG_LEVELS[cfg.log_level]
    if cfg.log_format == "json":
        handler: logging.Handler = logging.StreamHandler()
        handler.setFormatter(_JsonFormatter())
    else:
        handler = RichHandler(show_path=False)
    logging.basicConfig(level=level, format="%(message)s", handlers=[handler], force=True)


def _get_config() -> SiteConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to sitesmith.yaml")
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ConfigError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    _configure_logging(_config, verbose)


def _display_errors(errors: list[ReportError]) -> None:
    table = Table(title=f"Errors ({len(errors)})")
    table.add_column("File", style="cyan")
    table.add_column("Kind", style="magenta")
    table.add_column("Error", style="red")
    for e in errors:
        table.add_row(e.file or "-", e.kind, e.error)
    rprint(table)


def _display_report(report: BuildReport) -> None:
    mode = "production" if report.is_production else "development"
    border = "green" if report.ok else "red"
    rprint(Panel(
        f"[dim]Mode:[/dim]       {mode}\n"
        f"[dim]Documents:[/dim]  {report.documents}\n"
        f"[dim]Written:[/dim]    {len(report.written)}\n"
        f"[dim]Copied:[/dim]     {len(report.copied)}\n"
        f"[dim]Errors:[/dim]     {len(report.errors)}\n"
        f"[dim]Duration:[/dim]   {report.duration:.2f}s",
        title="Build Complete" if report.ok else "Build Finished With Errors",
        border_style=border,
    ))
    if report.errors:
        _display_errors(report.errors)


def _run_build(builder: SiteBuilder, *, clean: bool = False, dry_run: bool = False) -> BuildReport | None:
    """Run one build, printing errors. Returns None when the build aborted."""
    try:
        report = builder.build(clean=clean, dry_run=dry_run)
    except BuildError as e:
        rprint(f"[red]Build failed:[/red] {len(e.errors)} fatal error(s)")
        _display_errors([ReportError.from_exception(err) for err in e.errors])
        return None
    except BuildCancelled as e:
        rprint(f"[yellow]{e}[/yellow]")
        return None
    except SiteError as e:
        rprint(f"[red]Build failed:[/red] {e}")
        return None
    _display_report(report)
    return report


def _make_builder(cfg: SiteConfig, production: bool | None) -> SiteBuilder:
    is_prod = production if production is not None else is_production_env()
    try:
        return SiteBuilder(cfg, is_production=is_prod)
    except SiteError as e:
        rprint(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def build(
    production: Annotated[
        bool | None,
        typer.Option(
            "--production/--development",
            help="Exclude drafts from collections (default: BUILD_ENV=production)",
        ),
    ] = None,
    clean: Annotated[bool, typer.Option("--clean", help="Remove the output directory first")] = False,
    workers: Annotated[
        int | None, typer.Option("--workers", "-w", min=1, help="Override worker_count")
    ] = None,
    dry_run: bool = typer.Option(False, "--dry-run", help="Render without writing"),
) -> None:
    """Build the site into the output directory."""
    cfg = _get_config()
    if workers is not None:
        cfg = cfg.model_copy(update={"worker_count": workers})

    builder = _make_builder(cfg, production)
    report = _run_build(builder, clean=clean, dry_run=dry_run)
    if report is None or not report.ok:
        raise typer.Exit(1)


@app.command()
def watch(
    production: Annotated[
        bool | None,
        typer.Option("--production/--development", help="Exclude drafts from collections"),
    ] = None,
    debounce: float = typer.Option(0.5, "--debounce", help="Quiet period before rebuilding (seconds)"),
) -> None:
    """Build, then rebuild whenever a source file changes."""
    cfg = _get_config()
    builder = _make_builder(cfg, production)
    _run_build(builder)

    watcher = SiteWatcher(cfg.content_root, cfg.output_root, debounce_seconds=debounce)
    watcher.start()
    rprint(f"[bold]Watching[/bold] {cfg.content_root} (Ctrl+C to stop)")

    stop = False

    def _signal_handler(sig, frame):
        nonlocal stop
        stop = True
        builder.cancel()

    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    try:
        while not stop:
            time.sleep(0.2)
            changed = watcher.take_changes()
            if changed:
                rprint(f"[dim]{len(changed)} file(s) changed, rebuilding...[/dim]")
                _run_build(builder)
    finally:
        watcher.stop()


@app.command()
def clean() -> None:
    """Remove the output directory."""
    cfg = _get_config()
    if OutputWriter(cfg.output_root).clean():
        rprint(f"[green]Removed[/green] {cfg.output_root}")
    else:
        rprint(f"[dim]Nothing to remove at {cfg.output_root}[/dim]")


@app.command("filters")
def list_filters() -> None:
    """List the template filters available to templates."""
    cfg = _get_config()
    registry = default_registry(cfg)
    try:
        PluginLoader(cfg).load_pipeline().register_filters(registry)
    except SiteError as e:
        rprint(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(1)

    table = Table(title=f"Filters ({len(registry)})")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Summary")
    for name in registry.names():
        doc = (registry.get(name).__doc__ or "").strip().splitlines()
        table.add_row(name, doc[0] if doc else "-")
    rprint(table)


@app.command("highlight-css")
def highlight_css_cmd(
    style: str | None = typer.Option(None, "--style", help="Pygments style (default: from config)"),
    output: str | None = typer.Option(None, "--output", "-o", help="Write CSS to file"),
) -> None:
    """Print the stylesheet for highlighted code blocks."""
    cfg = _get_config()
    css = highlight_css(style or cfg.highlight.style)
    if output:
        Path(output).write_text(css)
        rprint(f"[green]Written to[/green] {output}")
    else:
        typer.echo(css)


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False, sort_keys=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default sitesmith.yaml in current directory."""
    target = Path("sitesmith.yaml")
    if target.exists() and not force:
        rprint("[yellow]sitesmith.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")


if __name__ == "__main__":
    app()
