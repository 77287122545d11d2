"""Log scan dataclasses."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any


@dataclass(frozen=True, slots=True)
class BoundedRead:
    """Text retrieved from a file, possibly only its tail.

    ``error`` is set (and ``text`` empty) when the file could not be read;
    callers treat that as "no findings".
    """

    text: str = ""
    truncated: bool = False
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True, slots=True)
class LogAnalysis:
    """Findings extracted from one log file."""

    warnings: int = 0
    errors: int = 0
    performance_lines: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class FileAnalysis:
    """A log file path paired with its analysis."""

    path: Path
    analysis: LogAnalysis


@dataclass(frozen=True, slots=True)
class LogScanResult:
    """Aggregated result of scanning a directory tree for log issues."""

    scanned_files: tuple[str, ...] = ()
    total_files: int = 0
    warning_count: int = 0
    error_count: int = 0
    performance_issues: tuple[str, ...] = ()
    summary: str = ""
    root_accessible: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "scannedFiles": list(self.scanned_files),
            "totalFiles": self.total_files,
            "warningCount": self.warning_count,
            "errorCount": self.error_count,
            "performanceIssues": list(self.performance_issues),
            "summary": self.summary,
            "rootAccessible": self.root_accessible,
        }
