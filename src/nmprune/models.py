"""Data models for nmprune."""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_TARGET_NAME = "node_modules"


def format_size(size_bytes: int) -> str:
    """Format bytes to human-readable string (binary units, two decimals)."""
    if size_bytes >= 1024**4:
        return f"{size_bytes / 1024**4:.2f} TB"
    elif size_bytes >= 1024**3:
        return f"{size_bytes / 1024**3:.2f} GB"
    elif size_bytes >= 1024**2:
        return f"{size_bytes / 1024**2:.2f} MB"
    elif size_bytes >= 1024:
        return f"{size_bytes / 1024:.2f} KB"
    else:
        return f"{size_bytes} B"


class ScanConfig(BaseModel):
    """Resolved configuration for one scan. Built by ``config.build_config``."""

    model_config = ConfigDict(frozen=True)

    root: Path = Field(..., description="Absolute, normalized directory to scan")
    target_name: str = Field(DEFAULT_TARGET_NAME, min_length=1, description="Directory name to match")
    max_depth: Optional[int] = Field(None, ge=0, description="Maximum traversal depth (root is 0)")
    exclude_paths: frozenset[Path] = Field(
        default_factory=frozenset,
        description="Normalized paths whose subtrees are skipped",
    )
    dry_run: bool = Field(False, description="Report what would be deleted without deleting")
    verbose: bool = Field(False, description="Verbose output")
    jobs: Optional[int] = Field(None, ge=1, description="Worker pool size (default: CPU count)")


class MatchEntry(BaseModel):
    """A discovered target directory with its measured size."""

    model_config = ConfigDict(frozen=True)

    path: Path = Field(..., description="Absolute normalized path of the directory")
    size_bytes: int = Field(..., ge=0, description="Apparent size measured during the scan")
    depth: int = Field(..., ge=0, description="Depth below the scan root")

    @property
    def size_human(self) -> str:
        """Human-readable size string."""
        return format_size(self.size_bytes)


class ScanWarning(BaseModel):
    """A non-fatal problem hit while scanning."""

    path: str = Field(..., description="Path that could not be read")
    message: str = Field(..., description="What went wrong")


class ScanProgress(BaseModel):
    """Snapshot emitted after each recorded match."""

    count: int = Field(..., description="Matches recorded so far")
    total_bytes: int = Field(..., description="Bytes across matches recorded so far")
    current_path: str = Field(..., description="Most recently recorded match")


class ScanResult(BaseModel):
    """Outcome of a scan."""

    entries: list[MatchEntry] = Field(default_factory=list, description="Matches in discovery order")
    total_bytes: int = Field(0, description="Sum of entry sizes")
    elapsed: float = Field(0.0, description="Scan duration in seconds")
    warnings: list[ScanWarning] = Field(default_factory=list)
    cancelled: bool = Field(False, description="Whether the scan was interrupted")

    @property
    def count(self) -> int:
        """Number of matches."""
        return len(self.entries)

    @property
    def size_human(self) -> str:
        """Human-readable total size."""
        return format_size(self.total_bytes)


class DeletionOutcome(BaseModel):
    """Result of attempting to delete one match."""

    path: str = Field(..., description="Path that was deleted")
    freed_bytes: int = Field(0, description="Bytes freed")
    succeeded: bool = Field(True, description="Whether deletion succeeded")
    error_detail: Optional[str] = Field(None, description="Error message if failed")


class DeletionProgress(BaseModel):
    """Snapshot emitted after each deletion outcome."""

    completed: int = Field(..., description="Entries finished so far")
    total: int = Field(..., description="Entries submitted for deletion")
    freed_bytes: int = Field(..., description="Bytes freed so far")
    current_path: str = Field(..., description="Most recently finished entry")


class DeletionReport(BaseModel):
    """Outcome of a deletion batch."""

    outcomes: list[DeletionOutcome] = Field(default_factory=list)
    total_freed: int = Field(0, description="Sum of freed bytes")
    elapsed: float = Field(0.0, description="Deletion duration in seconds")
    dry_run: bool = Field(False, description="Whether this was a dry run")
    cancelled: bool = Field(False, description="Whether the batch was interrupted")

    @property
    def failures(self) -> list[DeletionOutcome]:
        """Outcomes that did not succeed."""
        return [o for o in self.outcomes if not o.succeeded]


class ScanSummary(BaseModel):
    """Aggregated view of a scan."""

    count: int
    total_bytes: int
    elapsed: float
    warning_count: int = 0

    @property
    def size_human(self) -> str:
        return format_size(self.total_bytes)


class DeletionSummary(BaseModel):
    """Aggregated view of a deletion batch."""

    succeeded_count: int
    failed_count: int
    total_freed: int
    elapsed: float

    @property
    def size_human(self) -> str:
        return format_size(self.total_freed)
