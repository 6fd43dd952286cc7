"""Parallel deletion of scan matches for nmprune."""

import logging
import shutil
import stat
import threading
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Callable, Optional

from nmprune.models import DeletionOutcome, DeletionProgress, DeletionReport, MatchEntry
from nmprune.scanner import default_workers
from nmprune.sizer import get_directory_size

log = logging.getLogger(__name__)

DeletionProgressCallback = Callable[[DeletionProgress], None]


def _check_deletable(path: Path) -> str | None:
    """Return why ``path`` must not be removed, or None if it is a real directory."""
    try:
        mode = path.lstat().st_mode
    except FileNotFoundError:
        return "path no longer exists"
    except OSError as e:
        return f"cannot stat path: {e}"

    if stat.S_ISLNK(mode):
        return "path is now a symlink, refusing to delete"
    if not stat.S_ISDIR(mode):
        return "path is no longer a directory"
    return None


def _remaining_bytes(path: Path) -> int | None:
    """Bytes still on disk under ``path`` after a failed removal, None if unmeasurable."""
    try:
        if not path.exists():
            return 0
    except OSError:
        return None
    return get_directory_size(path)


def delete_entry(entry: MatchEntry, dry_run: bool = False) -> DeletionOutcome:
    """
    Remove one matched directory.

    Args:
        entry: Match to delete
        dry_run: If True, don't actually delete

    Returns:
        DeletionOutcome; failures are recorded, never raised
    """
    path = Path(entry.path)

    if dry_run:
        return DeletionOutcome(path=str(path), freed_bytes=entry.size_bytes, succeeded=True)

    reason = _check_deletable(path)
    if reason:
        log.info("Not deleting %s: %s", path, reason)
        return DeletionOutcome(path=str(path), freed_bytes=0, succeeded=False, error_detail=reason)

    try:
        shutil.rmtree(path)
    except PermissionError as e:
        error = f"Permission denied: {e}"
    except OSError as e:
        error = f"OS error: {e}"
    else:
        log.debug("Deleted %s (%d bytes)", path, entry.size_bytes)
        return DeletionOutcome(path=str(path), freed_bytes=entry.size_bytes, succeeded=True)

    remaining = _remaining_bytes(path)
    freed = max(0, entry.size_bytes - remaining) if remaining is not None else 0
    log.info("Failed to delete %s: %s", path, error)
    return DeletionOutcome(path=str(path), freed_bytes=freed, succeeded=False, error_detail=error)


def delete_entries(
    entries: list[MatchEntry],
    dry_run: bool = False,
    on_progress: Optional[DeletionProgressCallback] = None,
    cancel_event: Optional[threading.Event] = None,
    jobs: Optional[int] = None,
) -> DeletionReport:
    """
    Delete every entry in parallel, best effort.

    Entries never overlap (the scan never reports a target inside another
    target), so deletions need no coordination. A failure is recorded in its
    own outcome and does not stop the others.

    Args:
        entries: Matches from a completed scan
        dry_run: If True, report what would be freed without touching the filesystem
        on_progress: Optional callback(DeletionProgress) fired after each outcome
        cancel_event: Optional event; once set, entries not yet started are skipped
        jobs: Worker pool size (default: CPU count)

    Returns:
        DeletionReport with one outcome per attempted entry
    """
    start = time.perf_counter()
    cancel_event = cancel_event or threading.Event()
    outcomes: list[DeletionOutcome] = []
    total = len(entries)
    freed = 0

    def record(outcome: DeletionOutcome, notify: bool = True) -> None:
        nonlocal freed
        outcomes.append(outcome)
        freed += outcome.freed_bytes
        if notify and on_progress:
            on_progress(
                DeletionProgress(
                    completed=len(outcomes),
                    total=total,
                    freed_bytes=freed,
                    current_path=outcome.path,
                )
            )

    if dry_run:
        for entry in entries:
            if cancel_event.is_set():
                break
            record(delete_entry(entry, dry_run=True))
    elif entries:
        max_workers = min(default_workers(jobs), total)
        recorded: set[Future] = set()

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [executor.submit(delete_entry, entry) for entry in entries]
            pending = set(futures)

            try:
                while pending:
                    done, pending = wait(pending, return_when=FIRST_COMPLETED)

                    # Outcomes are recorded only here, on the coordinating thread
                    for future in done:
                        if not future.cancelled():
                            recorded.add(future)
                            record(future.result())

                    if cancel_event.is_set():
                        for future in pending:
                            future.cancel()
            except KeyboardInterrupt:
                log.warning("Interrupted, letting in-flight deletions finish")
                cancel_event.set()
                for future in pending:
                    future.cancel()

        # Deletions that finished while the interrupt was being handled
        for future in futures:
            if future not in recorded and not future.cancelled():
                record(future.result(), notify=False)

    cancelled = cancel_event.is_set()
    if cancelled:
        log.warning("Deletion cancelled after %d of %d entries", len(outcomes), total)

    return DeletionReport(
        outcomes=outcomes,
        total_freed=freed,
        elapsed=time.perf_counter() - start,
        dry_run=dry_run,
        cancelled=cancelled,
    )
