"""Main Typer application.

Entry point: ``pubforge`` (configured via pyproject.toml console_scripts).

Commands: publish, snapshots, targets.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from pubforge.config import settings
from pubforge.core.snapshot_store import (
    SnapshotCorruptionError,
    SnapshotPersistError,
    SnapshotStore,
)
from pubforge.models.config import ConfigError, load_build_config
from pubforge.models.publish import PublishMode, PublishOptions
from pubforge.plugins.loader import TargetLoader, TargetResolutionError, import_object
from pubforge.routing.dispatcher import (
    MakeError,
    PublishDispatcher,
    PublishReport,
    TargetInvocationError,
)

console = Console()

_RUN_ERRORS = (
    ConfigError,
    TargetResolutionError,
    MakeError,
    SnapshotPersistError,
    SnapshotCorruptionError,
    TargetInvocationError,
)

app = typer.Typer(
    name="pubforge",
    help="pubforge: publish make output to pluggable targets, now or later.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@app.callback()
def main_callback(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log at DEBUG level."
    ),
) -> None:
    """Configure logging for every command."""
    _configure_logging("DEBUG" if verbose else settings.log_level)


@app.command(name="publish", help="Make and publish, or create / resume a dry run.")
def publish_cmd(
    dir: Path = typer.Argument(Path("."), help="Project directory."),
    target: Optional[List[str]] = typer.Option(
        None,
        "--target",
        "-t",
        help="Publish target name (repeatable). Defaults to the configured publishers.",
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Run make and save its output for a later publish."
    ),
    dry_run_resume: bool = typer.Option(
        False, "--dry-run-resume", help="Publish previously saved dry-run output."
    ),
    interactive: bool = typer.Option(
        True, "--interactive/--non-interactive", help="Show progress while running."
    ),
    make: Optional[str] = typer.Option(
        None,
        "--make",
        help="Make step as 'module:callable'. Defaults to the 'make' build option.",
    ),
) -> None:
    """Publish the project's make output."""
    try:
        options = PublishOptions(
            dir=dir,
            interactive=interactive,
            publish_targets=target or None,
            dry_run=dry_run,
            dry_run_resume=dry_run_resume,
        )
    except ValidationError as exc:
        message = exc.errors()[0]["msg"].removeprefix("Value error, ")
        console.print(f"[bold red]Invalid options:[/bold red] {message}")
        raise typer.Exit(code=1)

    try:
        config = load_build_config(dir)
        make_fn = None
        make_path = make or config.extra.get("make")
        if options.mode is not PublishMode.RESUME and make_path:
            make_fn = import_object(make_path)

        dispatcher = PublishDispatcher(config, make=make_fn)
        if interactive:
            with console.status(f"[bold cyan]Publishing ({options.mode.value})...[/bold cyan]"):
                report = asyncio.run(dispatcher.run(options))
        else:
            report = asyncio.run(dispatcher.run(options))
    except _RUN_ERRORS as exc:
        console.print(f"[bold red]Publish failed:[/bold red] {exc}")
        raise typer.Exit(code=1)
    except (ImportError, AttributeError, ValueError) as exc:
        console.print(f"[bold red]Publish failed:[/bold red] {exc}")
        raise typer.Exit(code=1)

    _print_report(report)


def _print_report(report: PublishReport) -> None:
    lines = [
        f"[bold]Mode:[/bold]        {report.mode.value}",
        f"[bold]Targets:[/bold]     {', '.join(report.targets) or '-'}",
        f"[bold]Groups:[/bold]      {report.groups}",
        f"[bold]Invocations:[/bold] {report.invocations}",
    ]
    if report.snapshot_record is not None:
        lines.append(f"[bold]Snapshot:[/bold]    {report.snapshot_record}")
    console.print(
        Panel(
            "\n".join(lines),
            title="[bold]Publish complete[/bold]",
            border_style="green",
            padding=(1, 2),
        )
    )


@app.command(name="snapshots", help="List dry-run snapshot records.")
def snapshots_cmd(
    dir: Path = typer.Argument(Path("."), help="Project directory."),
) -> None:
    """List the snapshot records waiting to be resumed."""
    try:
        config = load_build_config(dir)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=1)

    store = SnapshotStore(config.snapshot_root(dir))
    records = store.list_records()
    if not records:
        console.print(f"[dim]No snapshot records in {store.root}.[/dim]")
        return

    console.print(f"[dim]{store.root}[/dim]")
    table = Table(title="Snapshot Records")
    table.add_column("Record", style="cyan")
    table.add_column("Artifact sets", justify="right", style="green")
    for record in records:
        table.add_row(record.name, str(record.artifact_set_count))
    console.print(table)


@app.command(name="targets", help="List publish targets that can be loaded by name.")
def targets_cmd() -> None:
    """List built-in, installed, and injected publish targets."""
    available = TargetLoader().available()

    table = Table(title="Publish Targets")
    table.add_column("Name", style="cyan")
    table.add_column("Source")
    for name, source in available.items():
        table.add_row(name, source)
    console.print(table)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
