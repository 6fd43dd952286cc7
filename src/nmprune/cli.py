"""CLI interface for nmprune."""

import logging
import threading
from pathlib import Path
from typing import Optional

import typer
from rich.logging import RichHandler

from nmprune import __version__
from nmprune.config import build_config
from nmprune.deleter import delete_entries
from nmprune.display import (
    MAX_LISTED_WARNINGS,
    confirm_deletion,
    console,
    err_console,
    printable,
    show_deletion_progress,
    show_deletion_summary,
    show_matches,
    show_scan_summary,
    show_scanning_progress,
    show_warnings,
)
from nmprune.errors import ConfigError
from nmprune.models import DeletionProgress, ScanProgress, format_size
from nmprune.report import (
    EXIT_CONFIG_ERROR,
    EXIT_INTERRUPTED,
    build_deletion_summary,
    build_scan_summary,
    exit_code,
)
from nmprune.scanner import scan

# Create Typer app
app = typer.Typer(
    name="nmprune",
    help="Efficiently find and delete node_modules directories",
    add_completion=False,
)


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False, show_time=False)],
    )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"nmprune version {__version__}")
        raise typer.Exit()


@app.command()
def main(
    directory: Path = typer.Argument(
        Path("."), help="Directory to start scanning from (default: current)"
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Simulate deletion without actually deleting"),
    verbose: bool = typer.Option(False, "--verbose", help="Verbose output"),
    depth: Optional[int] = typer.Option(None, "--depth", help="Maximum recursion depth"),
    exclude: Optional[list[str]] = typer.Option(
        None, "--exclude", help="Paths to exclude (comma-separated, repeatable)"
    ),
    name: Optional[str] = typer.Option(
        None, "--name", "-n", help="Directory name to look for (default: node_modules)"
    ),
    jobs: Optional[int] = typer.Option(
        None, "--jobs", "-j", help="Parallel workers (default: CPU count)"
    ),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip the confirmation prompt"),
    version: bool = typer.Option(
        None,
        "--version",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Find directories named NAME under DIRECTORY, report their size and delete them."""
    _setup_logging(verbose)

    try:
        config = build_config(
            root=directory,
            target_name=name,
            max_depth=depth,
            exclude=exclude or [],
            dry_run=dry_run,
            verbose=verbose,
            jobs=jobs,
        )
    except ConfigError as e:
        console.print(f"[red]Error: {printable(str(e))}[/red]")
        raise typer.Exit(EXIT_CONFIG_ERROR)

    cancel_event = threading.Event()

    # Scan phase
    with show_scanning_progress() as progress:
        task = progress.add_task(f"Scanning for {printable(config.target_name)}...", total=None)

        def update_scan(event: ScanProgress) -> None:
            found = f"Found {event.count} ({format_size(event.total_bytes)})"
            progress.update(task, description=f"{found} {printable(event.current_path)}")

        result = scan(config, on_progress=update_scan, cancel_event=cancel_event)

    if verbose and result.entries:
        show_matches(result)
    show_scan_summary(build_scan_summary(result), config.target_name)
    show_warnings(result, limit=None if verbose else MAX_LISTED_WARNINGS)

    if result.cancelled:
        console.print("[yellow]Scan interrupted, nothing was deleted.[/yellow]")
        raise typer.Exit(EXIT_INTERRUPTED)

    if not result.entries:
        return

    # Confirmation
    if not config.dry_run and not yes:
        console.print()
        try:
            confirmed = confirm_deletion()
        except KeyboardInterrupt:
            console.print("\n[yellow]Deletion cancelled.[/yellow]")
            raise typer.Exit(EXIT_INTERRUPTED)
        if not confirmed:
            console.print("[yellow]Deletion cancelled.[/yellow]")
            return

    # Deletion phase
    with show_deletion_progress() as progress:
        label = "Simulating..." if config.dry_run else "Deleting..."
        task = progress.add_task(label, total=len(result.entries))

        def update_deletion(event: DeletionProgress) -> None:
            progress.update(
                task,
                completed=event.completed,
                description=f"{label} freed {format_size(event.freed_bytes)}",
            )

        report = delete_entries(
            result.entries,
            dry_run=config.dry_run,
            on_progress=update_deletion,
            cancel_event=cancel_event,
            jobs=config.jobs,
        )

    show_deletion_summary(build_deletion_summary(report), report)

    if report.cancelled:
        console.print("[yellow]Deletion interrupted; the last directory may be partially removed.[/yellow]")

    code = exit_code(result, report)
    if code:
        raise typer.Exit(code)


if __name__ == "__main__":
    app()
