"""Locate candidate log files below a directory."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from devprobe.core.walker import list_dir

log = logging.getLogger(__name__)

DEFAULT_NAME_MARKERS = ("amazon-q", "lserver")
DEFAULT_DIR_MARKERS = ("amazon-q",)
LOG_SUFFIX = ".log"


@dataclass(frozen=True, slots=True)
class LogMatcher:
    """Name and path heuristics that mark a file as a log candidate."""

    name_markers: tuple[str, ...] = DEFAULT_NAME_MARKERS
    dir_markers: tuple[str, ...] = DEFAULT_DIR_MARKERS

    def matches(self, name: str, parent: str) -> bool:
        lowered_name = name.lower()
        if lowered_name.endswith(LOG_SUFFIX):
            return True
        if any(marker in lowered_name for marker in self.name_markers):
            return True
        lowered_parent = parent.lower()
        return any(marker in lowered_parent for marker in self.dir_markers)


def find_log_files(root: Path | str, matcher: LogMatcher | None = None) -> list[Path]:
    """Return candidate log files under *root* in depth-first name order.

    There is no visit budget here; callers bound the work by slicing the
    result before reading any file. Unreadable directories are skipped.
    """
    matcher = matcher or LogMatcher()
    found: list[Path] = []
    _scan(os.fspath(root), matcher, found)
    log.debug("Found %d log candidates under %s", len(found), root)
    return found


def _scan(dir_path: str, matcher: LogMatcher, found: list[Path]) -> None:
    for entry in list_dir(dir_path).entries:
        try:
            if entry.is_dir(follow_symlinks=False):
                _scan(entry.path, matcher, found)
            elif entry.is_file(follow_symlinks=False) and matcher.matches(entry.name, dir_path):
                found.append(Path(entry.path))
        except OSError:
            log.debug("Cannot stat: %s", entry.path)
