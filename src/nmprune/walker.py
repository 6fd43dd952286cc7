"""Directory tree traversal for target discovery.

The walk is depth-first with an explicit stack, so arbitrarily deep trees
never hit the recursion limit. Children are visited in ``os.scandir`` order.
Symlinked directories are never followed.
"""

import logging
import os
from pathlib import Path
from typing import Iterator, Optional

from nmprune.matcher import Decision, PathMatcher
from nmprune.models import ScanWarning

log = logging.getLogger(__name__)


def record_warning(warnings: Optional[list[ScanWarning]], path: str | Path, error: Exception | str) -> None:
    """Log a non-fatal scan problem and append it to ``warnings`` if given."""
    message = error if isinstance(error, str) else _describe_error(error)
    log.info("Skipping %s: %s", path, message)
    if warnings is not None:
        warnings.append(ScanWarning(path=str(path), message=message))


def _describe_error(error: Exception) -> str:
    if isinstance(error, PermissionError):
        return "permission denied"
    if isinstance(error, FileNotFoundError):
        return "vanished during scan"
    if isinstance(error, OSError) and error.strerror:
        return error.strerror.lower()
    return str(error)


def list_subdirectories(
    directory: Path,
    warnings: Optional[list[ScanWarning]] = None,
) -> list[Path]:
    """
    List the child directories of ``directory``.

    Symlinks are never returned. Broken symlinks and unreadable entries are
    recorded as warnings and skipped.

    Args:
        directory: Directory to read
        warnings: Optional list collecting non-fatal problems

    Returns:
        Child directory paths in scandir order
    """
    children: list[Path] = []

    try:
        with os.scandir(directory) as entries:
            for entry in entries:
                try:
                    if entry.is_symlink():
                        if not os.path.exists(entry.path):
                            record_warning(warnings, entry.path, "broken symlink")
                        continue

                    if entry.is_dir(follow_symlinks=False):
                        children.append(Path(entry.path))

                except OSError as e:
                    record_warning(warnings, entry.path, e)

    except OSError as e:
        record_warning(warnings, directory, e)

    return children


def visit(
    directory: Path,
    depth: int,
    max_depth: Optional[int],
    matcher: PathMatcher,
    warnings: Optional[list[ScanWarning]] = None,
) -> tuple[list[tuple[Path, int]], list[tuple[Path, int]]]:
    """
    Read one directory and classify its children.

    Each child is decided exactly once: excluded children are dropped,
    targets are returned as matches and never entered, the rest are
    returned as pending while they are still within ``max_depth``.

    Args:
        directory: Directory to read (already known not to be excluded or a target)
        depth: Depth of ``directory`` below the scan root
        max_depth: Deepest level whose children are still visited, None for unbounded
        matcher: Target/exclusion predicate
        warnings: Optional list collecting non-fatal problems

    Returns:
        Tuple of (matches, pending), each a list of (path, depth)
    """
    matches: list[tuple[Path, int]] = []
    pending: list[tuple[Path, int]] = []
    child_depth = depth + 1

    for child in list_subdirectories(directory, warnings):
        decision = matcher.decide(child)

        if decision is Decision.SKIP:
            log.debug("Excluding %s", child)
        elif decision is Decision.REPORT:
            matches.append((child, child_depth))
        elif max_depth is None or child_depth < max_depth:
            pending.append((child, child_depth))

    return matches, pending


def walk(
    root: Path,
    max_depth: Optional[int],
    matcher: PathMatcher,
    warnings: Optional[list[ScanWarning]] = None,
) -> Iterator[tuple[Path, int]]:
    """
    Yield every target directory under ``root`` with its depth.

    ``root`` itself has depth 0 and is evaluated like any other directory,
    so a root that is itself a target is yielded and not entered.

    Args:
        root: Directory to start from
        max_depth: Deepest level whose children are still visited, None for unbounded
        matcher: Target/exclusion predicate
        warnings: Optional list collecting non-fatal problems

    Yields:
        (path, depth) tuples for matched directories
    """
    root = Path(root)
    decision = matcher.decide(root)

    if decision is Decision.SKIP:
        log.debug("Excluding %s", root)
        return
    if decision is Decision.REPORT:
        yield root, 0
        return
    if max_depth is not None and max_depth <= 0:
        return

    stack: list[tuple[Path, int]] = [(root, 0)]
    while stack:
        directory, depth = stack.pop()
        matches, pending = visit(directory, depth, max_depth, matcher, warnings)
        yield from matches
        # Reversed so the first scandir child is popped first
        stack.extend(reversed(pending))
