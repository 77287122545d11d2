"""Aggregate per-file log analyses into one scan result."""

from __future__ import annotations

from collections import deque
from collections.abc import Sequence

from devprobe.models.logs import FileAnalysis, LogScanResult

MAX_AGGREGATE_LINES = 20


def summarize(
    results: Sequence[FileAnalysis],
    total_files: int | None = None,
    max_lines: int = MAX_AGGREGATE_LINES,
    root_accessible: bool = True,
) -> LogScanResult:
    """Combine file analyses in processing order.

    *total_files* is the number of candidates found before the caller
    capped the list; it defaults to the number of results.
    """
    warnings = 0
    errors = 0
    entry_count = 0
    recent: deque[str] = deque(maxlen=max_lines)

    for result in results:
        warnings += result.analysis.warnings
        errors += result.analysis.errors
        entry_count += len(result.analysis.performance_lines)
        recent.extend(result.analysis.performance_lines)

    scanned = tuple(str(r.path) for r in results)
    summary = (
        f"Scanned {len(scanned)} log files. Found {warnings} warnings, {errors} errors, "
        f"and {entry_count} performance-related entries."
    )
    return LogScanResult(
        scanned_files=scanned,
        total_files=len(scanned) if total_files is None else total_files,
        warning_count=warnings,
        error_count=errors,
        performance_issues=tuple(recent),
        summary=summary,
        root_accessible=root_accessible,
    )
