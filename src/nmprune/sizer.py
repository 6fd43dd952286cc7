"""Directory size calculation for nmprune."""

import os
from pathlib import Path
from typing import Optional

from nmprune.models import ScanWarning
from nmprune.walker import record_warning


def get_directory_size(path: Path, warnings: Optional[list[ScanWarning]] = None) -> int:
    """
    Sum the apparent size of every regular file under ``path``.

    Uses os.scandir with an explicit stack instead of rglob("*"). Symlinks
    are neither followed nor counted. Hard-linked files are counted once per
    link, so the total can exceed the space actually reclaimed.

    Args:
        path: Directory to measure
        warnings: Optional list collecting entries that could not be read

    Returns:
        Total bytes; unreadable entries contribute nothing
    """
    total_size = 0
    stack: list[str] = [os.fspath(path)]

    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as entries:
                for entry in entries:
                    try:
                        if entry.is_file(follow_symlinks=False):
                            total_size += entry.stat(follow_symlinks=False).st_size
                        elif entry.is_dir(follow_symlinks=False):
                            stack.append(entry.path)
                    except OSError as e:
                        record_warning(warnings, entry.path, e)
        except OSError as e:
            record_warning(warnings, current, e)

    return total_size
