"""Target and exclusion matching for nmprune."""

import os
from enum import Enum
from pathlib import Path
from typing import Iterable

from nmprune.models import DEFAULT_TARGET_NAME


class Decision(str, Enum):
    """What the walker does with a visited directory."""

    SKIP = "skip"  # Excluded: no match check, no descent
    REPORT = "report"  # Target: record it, never look inside
    DESCEND = "descend"


def normalize_path(path: str | Path) -> Path:
    """
    Normalize a path without touching the filesystem.

    Expands ~, makes the path absolute against the current directory,
    collapses . and .. and drops trailing separators. The path does not
    need to exist.
    """
    return Path(os.path.abspath(os.path.expanduser(os.fspath(path))))


class PathMatcher:
    """Decides whether a directory is a target or lies in an excluded subtree."""

    def __init__(
        self,
        target_name: str = DEFAULT_TARGET_NAME,
        exclude_paths: Iterable[str | Path] = (),
    ):
        self.target_name = target_name
        self.exclude_paths = frozenset(normalize_path(p) for p in exclude_paths)

    def is_target(self, path: Path) -> bool:
        """True if the last path component equals the target name exactly."""
        return Path(path).name == self.target_name

    def is_excluded(self, path: Path) -> bool:
        """True if path equals or descends from any excluded path."""
        if not self.exclude_paths:
            return False

        path = normalize_path(path)
        if path in self.exclude_paths:
            return True
        return any(parent in self.exclude_paths for parent in path.parents)

    def decide(self, path: Path) -> Decision:
        """Evaluate the traversal decision for a directory, exclusion first."""
        if self.is_excluded(path):
            return Decision.SKIP
        if self.is_target(path):
            return Decision.REPORT
        return Decision.DESCEND
