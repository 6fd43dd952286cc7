"""Tests for report summaries."""

from pathlib import Path

import pytest

from nmprune.models import DeletionOutcome, DeletionReport, MatchEntry, ScanResult, ScanWarning
from nmprune.report import (
    EXIT_DELETION_FAILED,
    EXIT_INTERRUPTED,
    EXIT_OK,
    build_deletion_summary,
    build_scan_summary,
    exit_code,
)


def make_scan(sizes: list[int], **kwargs) -> ScanResult:
    entries = [
        MatchEntry(path=Path(f"/p{i}/node_modules"), size_bytes=size, depth=2)
        for i, size in enumerate(sizes)
    ]
    return ScanResult(entries=entries, total_bytes=sum(sizes), elapsed=1.5, **kwargs)


def make_report(results: list[tuple[bool, int]], **kwargs) -> DeletionReport:
    outcomes = [
        DeletionOutcome(
            path=f"/p{i}/node_modules",
            freed_bytes=freed,
            succeeded=ok,
            error_detail=None if ok else "Permission denied",
        )
        for i, (ok, freed) in enumerate(results)
    ]
    return DeletionReport(
        outcomes=outcomes, total_freed=sum(f for _, f in results), elapsed=0.5, **kwargs
    )


class TestBuildScanSummary:
    def test_counts_and_totals(self):
        summary = build_scan_summary(make_scan([100, 200, 300]))

        assert summary.count == 3
        assert summary.total_bytes == 600
        assert summary.elapsed == 1.5
        assert summary.warning_count == 0

    def test_empty_scan(self):
        summary = build_scan_summary(make_scan([]))

        assert summary.count == 0
        assert summary.total_bytes == 0

    def test_counts_warnings(self):
        warnings = [ScanWarning(path="/x", message="permission denied")]
        summary = build_scan_summary(make_scan([1], warnings=warnings))

        assert summary.warning_count == 1

    def test_does_not_mutate_input(self):
        result = make_scan([10, 20])
        before = result.model_dump()

        build_scan_summary(result)

        assert result.model_dump() == before


class TestBuildDeletionSummary:
    def test_all_succeeded(self):
        summary = build_deletion_summary(make_report([(True, 100), (True, 50)]))

        assert summary.succeeded_count == 2
        assert summary.failed_count == 0
        assert summary.total_freed == 150
        assert summary.elapsed == 0.5

    def test_partial_failure_counts_freed_bytes(self):
        summary = build_deletion_summary(make_report([(True, 100), (False, 30), (False, 0)]))

        assert summary.succeeded_count == 1
        assert summary.failed_count == 2
        assert summary.total_freed == 130

    def test_empty_report(self):
        summary = build_deletion_summary(DeletionReport())

        assert summary.succeeded_count == 0
        assert summary.failed_count == 0
        assert summary.total_freed == 0


class TestExitCode:
    def test_scan_only(self):
        assert exit_code(make_scan([1])) == EXIT_OK

    def test_zero_matches(self):
        assert exit_code(make_scan([])) == EXIT_OK

    def test_successful_deletion(self):
        assert exit_code(make_scan([1]), make_report([(True, 1)])) == EXIT_OK

    def test_dry_run(self):
        assert exit_code(make_scan([1]), make_report([(True, 1)], dry_run=True)) == EXIT_OK

    def test_failed_deletion(self):
        report = make_report([(True, 1), (False, 0)])
        assert exit_code(make_scan([1, 1]), report) == EXIT_DELETION_FAILED

    @pytest.mark.parametrize("scan_cancelled,deletion_cancelled", [(True, False), (False, True)])
    def test_interrupted(self, scan_cancelled, deletion_cancelled):
        scan = make_scan([1], cancelled=scan_cancelled)
        report = make_report([(True, 1)], cancelled=deletion_cancelled)

        assert exit_code(scan, report) == EXIT_INTERRUPTED
