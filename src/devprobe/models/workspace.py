"""Workspace walk state and statistics dataclasses."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class WalkState:
    """Mutable accounting for one budgeted traversal.

    Created per ``walk()`` call and passed explicitly down the recursion,
    so concurrent walks never share counters.
    """

    budget: int
    file_count: int = 0
    dir_sizes: dict[str, int] = field(default_factory=dict)
    stopped: bool = False

    @property
    def exhausted(self) -> bool:
        return self.file_count >= self.budget

    def add_dir_size(self, name: str, size: int) -> None:
        self.dir_sizes[name] = self.dir_sizes.get(name, 0) + size


@dataclass(frozen=True, slots=True)
class DirListing:
    """Entries of one directory read; ``error`` is set when the read failed."""

    entries: tuple[os.DirEntry, ...] = ()
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True, slots=True)
class WalkOutcome:
    """Raw result of a budgeted tree walk (sizes in bytes)."""

    file_count: int = 0
    dir_sizes: dict[str, int] = field(default_factory=dict)
    stopped_early: bool = False
    root_accessible: bool = True


@dataclass(frozen=True, slots=True)
class WorkspaceStats:
    """Workspace statistics reported to callers (sizes in megabytes)."""

    total_files: int
    directory_sizes: dict[str, float]
    complexity_score: float
    scan_stopped: bool
    root_accessible: bool = True

    @property
    def scanned_files(self) -> int:
        return self.total_files

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalFiles": self.total_files,
            "directorySizes": dict(self.directory_sizes),
            "complexityScore": self.complexity_score,
            "scanStopped": self.scan_stopped,
            "scannedFiles": self.scanned_files,
            "rootAccessible": self.root_accessible,
        }
