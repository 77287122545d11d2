"""Log scan pipeline: locate, tail-read, analyze, summarize."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from devprobe.core.extractor import analyze
from devprobe.core.log_locator import DEFAULT_DIR_MARKERS, DEFAULT_NAME_MARKERS, LogMatcher, find_log_files
from devprobe.core.reader import DEFAULT_TAIL_BYTES, read_bounded
from devprobe.core.summarizer import summarize
from devprobe.core.walker import list_dir
from devprobe.models.logs import FileAnalysis, LogScanResult
from devprobe.settings import Settings

log = logging.getLogger(__name__)

DEFAULT_MAX_LOG_FILES = 20


@dataclass(frozen=True, slots=True)
class LogScanOptions:
    max_files: int = DEFAULT_MAX_LOG_FILES
    tail_bytes: int = DEFAULT_TAIL_BYTES
    matcher: LogMatcher = LogMatcher()

    @classmethod
    def from_settings(cls, settings: Settings) -> LogScanOptions:
        """Build options from the ``logs.*`` settings keys."""
        return cls(
            max_files=settings.get_int("logs.max_files", DEFAULT_MAX_LOG_FILES),
            tail_bytes=settings.get_int("logs.tail_bytes", DEFAULT_TAIL_BYTES),
            matcher=LogMatcher(
                name_markers=settings.get_strings("logs.name_markers", DEFAULT_NAME_MARKERS),
                dir_markers=settings.get_strings("logs.dir_markers", DEFAULT_DIR_MARKERS),
            ),
        )


def scan_logs(
    root: Path | str,
    options: LogScanOptions | None = None,
    settings: Settings | None = None,
) -> LogScanResult:
    """Scan log files under *root* for warnings, errors and slowness hints.

    At most ``options.max_files`` candidates are read, each limited to its
    last ``options.tail_bytes`` bytes. Files that fail to read count as
    having no findings.
    """
    if options is None:
        options = LogScanOptions.from_settings(settings or Settings.instance())

    if not list_dir(root).ok:
        log.info("Log root not accessible: %s", root)
        return summarize([], total_files=0, root_accessible=False)

    candidates = find_log_files(root, options.matcher)
    results: list[FileAnalysis] = []
    for path in candidates[: options.max_files]:
        read = read_bounded(path, options.tail_bytes)
        results.append(FileAnalysis(path=path, analysis=analyze(read.text)))

    return summarize(results, total_files=len(candidates))
