"""Rich terminal display for nmprune."""

import os
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)
from rich.table import Table

from nmprune.models import DeletionReport, DeletionSummary, ScanResult, ScanSummary, format_size

console = Console()
err_console = Console(stderr=True)

# Warnings listed before the rest are elided
MAX_LISTED_WARNINGS = 20


def printable(value: str | Path) -> str:
    """
    Make a path or message safe to embed in Rich markup.

    Names that are not valid UTF-8 arrive with surrogate escapes and are
    shown with replacement characters; square brackets are escaped so a
    name like ``proj[/]`` prints literally.
    """
    text = os.fsencode(value).decode("utf-8", "replace")
    return escape(text)


def show_scanning_progress() -> Progress:
    """Create spinner for scanning (the number of matches is not known up front)."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )


def show_deletion_progress() -> Progress:
    """Create progress bar for deletion."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.completed}/{task.total}"),
        TimeElapsedColumn(),
        TimeRemainingColumn(),
        console=console,
    )


def show_matches(result: ScanResult) -> None:
    """Display every match with its size."""
    table = Table(title="Matches", show_header=True, header_style="bold")
    table.add_column("Path")
    table.add_column("Size", justify="right")
    table.add_column("Depth", justify="right")

    for entry in sorted(result.entries, key=lambda e: e.size_bytes, reverse=True):
        table.add_row(printable(entry.path), entry.size_human, str(entry.depth))

    console.print(table)


def show_scan_summary(summary: ScanSummary, target_name: str = "node_modules") -> None:
    """Display scan totals."""
    console.print(f"\n[bold]Scan complete in {summary.elapsed:.2f}s:[/bold]")
    console.print(f"- Folders found: {summary.count}")
    console.print(f"- Total size: {summary.size_human}")
    console.print(f"- Estimated savings: [green]{summary.size_human}[/green]")

    if summary.count == 0:
        console.print(f"\n[yellow]No {printable(target_name)} directories found.[/yellow]")


def show_warnings(result: ScanResult, limit: int | None = MAX_LISTED_WARNINGS) -> None:
    """Display paths skipped during the scan. ``limit=None`` lists all of them."""
    if not result.warnings:
        return

    console.print(f"\n[yellow]! {len(result.warnings)} path(s) skipped during scan[/yellow]")
    listed = result.warnings if limit is None else result.warnings[:limit]
    for warning in listed:
        console.print(f"  [dim]{printable(warning.path)}: {printable(warning.message)}[/dim]")

    hidden = len(result.warnings) - len(listed)
    if hidden > 0:
        console.print(f"  [dim]... and {hidden} more (use --verbose to see all)[/dim]")


def show_deletion_summary(summary: DeletionSummary, report: DeletionReport) -> None:
    """Display deletion totals and failed entries."""
    if report.dry_run:
        console.print("\n[yellow]DRY RUN - No files were deleted[/yellow]")
        console.print(f"- Folders that would be deleted: {summary.succeeded_count}")
        console.print(f"- Space that would be freed: {summary.size_human}")
        return

    console.print(f"\n[bold]Deletion complete in {summary.elapsed:.2f}s:[/bold]")
    console.print(f"- Folders deleted: {summary.succeeded_count}")
    if summary.failed_count:
        console.print(f"- [red]Folders failed: {summary.failed_count}[/red]")
    console.print(f"- Space freed: [green]{summary.size_human}[/green]")

    for outcome in report.failures:
        freed = f" ({format_size(outcome.freed_bytes)} freed)" if outcome.freed_bytes else ""
        error = printable(outcome.error_detail or "")
        console.print(f"  [red]✗[/red] {printable(outcome.path)}: {error}{freed}")


def confirm_deletion(message: str = "Proceed with deletion? (yes/no)") -> bool:
    """Ask for confirmation. Only an explicit 'yes' counts."""
    from rich.prompt import Prompt

    answer = Prompt.ask(message, console=console, default="no", show_default=False)
    return answer.strip().lower() == "yes"
