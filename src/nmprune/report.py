"""Summaries of scan and deletion reports for nmprune."""

from typing import Optional

from nmprune.models import DeletionReport, DeletionSummary, ScanResult, ScanSummary

EXIT_OK = 0
EXIT_DELETION_FAILED = 1
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130


def build_scan_summary(result: ScanResult) -> ScanSummary:
    """
    Aggregate a scan result.

    Args:
        result: ScanResult from ``scanner.scan``

    Returns:
        ScanSummary with count, total bytes, elapsed and warning count
    """
    return ScanSummary(
        count=len(result.entries),
        total_bytes=sum(e.size_bytes for e in result.entries),
        elapsed=result.elapsed,
        warning_count=len(result.warnings),
    )


def build_deletion_summary(report: DeletionReport) -> DeletionSummary:
    """
    Aggregate a deletion report.

    Args:
        report: DeletionReport from ``deleter.delete_entries``

    Returns:
        DeletionSummary with success/failure counts, bytes freed and elapsed
    """
    succeeded = sum(1 for o in report.outcomes if o.succeeded)
    return DeletionSummary(
        succeeded_count=succeeded,
        failed_count=len(report.outcomes) - succeeded,
        total_freed=sum(o.freed_bytes for o in report.outcomes),
        elapsed=report.elapsed,
    )


def exit_code(scan: ScanResult, deletion: Optional[DeletionReport] = None) -> int:
    """Process exit status for a finished run."""
    if scan.cancelled or (deletion is not None and deletion.cancelled):
        return EXIT_INTERRUPTED
    if deletion is not None and deletion.failures:
        return EXIT_DELETION_FAILED
    return EXIT_OK
