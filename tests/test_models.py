"""Tests for data models."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from nmprune.models import (
    DeletionOutcome,
    DeletionReport,
    MatchEntry,
    ScanConfig,
    ScanResult,
    format_size,
)


class TestFormatSize:
    def test_bytes(self):
        assert format_size(0) == "0 B"
        assert format_size(512) == "512 B"

    def test_kilobytes(self):
        assert format_size(1024) == "1.00 KB"
        assert format_size(1536) == "1.50 KB"

    def test_megabytes(self):
        assert format_size(5 * 1024**2) == "5.00 MB"

    def test_gigabytes(self):
        assert format_size(3 * 1024**3 // 2) == "1.50 GB"

    def test_terabytes(self):
        assert format_size(2 * 1024**4) == "2.00 TB"


class TestScanConfig:
    def test_defaults(self):
        config = ScanConfig(root=Path("/tmp"))
        assert config.target_name == "node_modules"
        assert config.max_depth is None
        assert config.exclude_paths == frozenset()

    def test_is_immutable(self):
        config = ScanConfig(root=Path("/tmp"))
        with pytest.raises(ValidationError):
            config.max_depth = 3

    def test_rejects_negative_depth(self):
        with pytest.raises(ValidationError):
            ScanConfig(root=Path("/tmp"), max_depth=-1)

    def test_rejects_empty_target_name(self):
        with pytest.raises(ValidationError):
            ScanConfig(root=Path("/tmp"), target_name="")

    def test_rejects_zero_jobs(self):
        with pytest.raises(ValidationError):
            ScanConfig(root=Path("/tmp"), jobs=0)


class TestMatchEntry:
    def test_size_human(self):
        entry = MatchEntry(path=Path("/p/node_modules"), size_bytes=2048, depth=1)
        assert entry.size_human == "2.00 KB"

    def test_is_immutable(self):
        entry = MatchEntry(path=Path("/p/node_modules"), size_bytes=1, depth=1)
        with pytest.raises(ValidationError):
            entry.size_bytes = 2

    def test_rejects_negative_size(self):
        with pytest.raises(ValidationError):
            MatchEntry(path=Path("/p/node_modules"), size_bytes=-1, depth=1)


class TestScanResult:
    def test_empty(self):
        result = ScanResult()
        assert result.count == 0
        assert result.total_bytes == 0
        assert result.size_human == "0 B"
        assert not result.cancelled

    def test_count(self):
        entries = [MatchEntry(path=Path(f"/p{i}/node_modules"), size_bytes=1, depth=1) for i in range(3)]
        assert ScanResult(entries=entries, total_bytes=3).count == 3


class TestDeletionReport:
    def test_failures(self):
        report = DeletionReport(
            outcomes=[
                DeletionOutcome(path="/a", freed_bytes=10, succeeded=True),
                DeletionOutcome(path="/b", freed_bytes=0, succeeded=False, error_detail="denied"),
            ],
            total_freed=10,
        )
        assert [o.path for o in report.failures] == ["/b"]

    def test_outcome_defaults(self):
        outcome = DeletionOutcome(path="/a")
        assert outcome.succeeded
        assert outcome.freed_bytes == 0
        assert outcome.error_detail is None
