"""Parallel target discovery for nmprune.

The scan is a pool of threads fed with one pending directory per task.
Each task reads its directory, measures the targets it finds and hands the
remaining subdirectories back to the coordinator, which submits them as new
tasks. Matches and warnings go to a single locked collector, the only state
shared between workers.
"""

import logging
import os
import threading
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Callable, Optional

from nmprune.matcher import Decision, PathMatcher
from nmprune.models import MatchEntry, ScanConfig, ScanProgress, ScanResult, ScanWarning
from nmprune.sizer import get_directory_size
from nmprune.walker import record_warning, visit

log = logging.getLogger(__name__)

ScanProgressCallback = Callable[[ScanProgress], None]


def default_workers(jobs: Optional[int] = None) -> int:
    """Worker pool size: ``jobs`` if given, else available CPU parallelism."""
    return jobs or os.cpu_count() or 1


class ResultCollector:
    """Thread-safe accumulator for matches and warnings."""

    def __init__(self, on_progress: Optional[ScanProgressCallback] = None):
        self._lock = threading.Lock()
        self._on_progress = on_progress
        self._entries: list[MatchEntry] = []
        self._warnings: list[ScanWarning] = []
        self._total_bytes = 0

    def add(self, entry: MatchEntry) -> ScanProgress:
        """Record a match and emit a progress snapshot."""
        with self._lock:
            self._entries.append(entry)
            self._total_bytes += entry.size_bytes
            progress = ScanProgress(
                count=len(self._entries),
                total_bytes=self._total_bytes,
                current_path=str(entry.path),
            )

        if self._on_progress:
            self._on_progress(progress)
        return progress

    def add_warnings(self, warnings: list[ScanWarning]) -> None:
        if not warnings:
            return
        with self._lock:
            self._warnings.extend(warnings)

    def result(self, elapsed: float, cancelled: bool = False) -> ScanResult:
        """Freeze the collected state into a ScanResult."""
        with self._lock:
            return ScanResult(
                entries=list(self._entries),
                total_bytes=self._total_bytes,
                elapsed=elapsed,
                warnings=list(self._warnings),
                cancelled=cancelled,
            )


def _record_match(
    path: Path,
    depth: int,
    collector: ResultCollector,
    warnings: list[ScanWarning],
) -> None:
    """Measure a target directory and add it to the collector."""
    size = get_directory_size(path, warnings)

    # Removed while we were measuring it
    if not path.is_dir():
        record_warning(warnings, path, "vanished during scan")
        return

    log.debug("Found %s (%d bytes, depth %d)", path, size, depth)
    collector.add(MatchEntry(path=path, size_bytes=size, depth=depth))


def _scan_directory(
    directory: Path,
    depth: int,
    config: ScanConfig,
    matcher: PathMatcher,
    collector: ResultCollector,
    cancel_event: threading.Event,
) -> list[tuple[Path, int]]:
    """Worker task: visit one directory, record its targets, return what to descend into."""
    if cancel_event.is_set():
        return []

    warnings: list[ScanWarning] = []
    matches, pending = visit(directory, depth, config.max_depth, matcher, warnings)

    for path, match_depth in matches:
        if cancel_event.is_set():
            break
        _record_match(path, match_depth, collector, warnings)

    collector.add_warnings(warnings)
    return pending


def scan(
    config: ScanConfig,
    on_progress: Optional[ScanProgressCallback] = None,
    cancel_event: Optional[threading.Event] = None,
) -> ScanResult:
    """
    Find and measure every target directory under ``config.root``.

    Args:
        config: Resolved scan configuration
        on_progress: Optional callback(ScanProgress) fired once per match, from worker threads
        cancel_event: Optional event; once set, no new directories are read

    Returns:
        ScanResult with entries in discovery order
    """
    start = time.perf_counter()
    cancel_event = cancel_event or threading.Event()
    matcher = PathMatcher(config.target_name, config.exclude_paths)
    collector = ResultCollector(on_progress)

    root = config.root
    decision = matcher.decide(root)

    if decision is Decision.SKIP:
        log.info("Root %s is excluded, nothing to scan", root)
        return collector.result(time.perf_counter() - start)

    if decision is Decision.REPORT:
        warnings: list[ScanWarning] = []
        _record_match(root, 0, collector, warnings)
        collector.add_warnings(warnings)
        return collector.result(time.perf_counter() - start)

    if config.max_depth == 0:
        return collector.result(time.perf_counter() - start)

    max_workers = default_workers(config.jobs)
    log.debug("Scanning %s with %d workers", root, max_workers)

    def submit(executor: ThreadPoolExecutor, directory: Path, depth: int) -> Future:
        return executor.submit(
            _scan_directory, directory, depth, config, matcher, collector, cancel_event
        )

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        pending = {submit(executor, root, 0)}

        try:
            while pending:
                done, pending = wait(pending, return_when=FIRST_COMPLETED)

                for future in done:
                    if future.cancelled():
                        continue
                    children = future.result()
                    if not cancel_event.is_set():
                        pending.update(submit(executor, path, depth) for path, depth in children)

                if cancel_event.is_set():
                    for future in pending:
                        future.cancel()
        except KeyboardInterrupt:
            log.warning("Interrupted, waiting for in-flight directories")
            cancel_event.set()
            for future in pending:
                future.cancel()

    cancelled = cancel_event.is_set()
    elapsed = time.perf_counter() - start
    result = collector.result(elapsed, cancelled=cancelled)
    log.info(
        "Scan of %s found %d directories (%d bytes) in %.2fs",
        root,
        result.count,
        result.total_bytes,
        elapsed,
    )
    return result
