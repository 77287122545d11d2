"""Workspace statistics pipeline: tree walk followed by scoring."""

from __future__ import annotations

import logging
from pathlib import Path

from devprobe.core.scorer import complexity_score
from devprobe.core.walker import DEFAULT_MAX_FILES, WalkOptions, walk
from devprobe.models.workspace import WorkspaceStats
from devprobe.settings import Settings
from devprobe.utils import bytes_to_mb

log = logging.getLogger(__name__)


def workspace_stats(
    root: Path | str,
    max_files: int | None = None,
    options: WalkOptions | None = None,
    settings: Settings | None = None,
) -> WorkspaceStats:
    """Analyze file count, major directory sizes and complexity of *root*.

    Explicit arguments win over ``workspace.*`` settings, which win over
    the built-in defaults.
    """
    settings = settings or Settings.instance()
    if max_files is None:
        max_files = settings.get_int("workspace.max_files", DEFAULT_MAX_FILES)
    if options is None:
        options = WalkOptions.from_settings(settings)

    outcome = walk(root, max_files, options)
    if not outcome.root_accessible:
        log.info("Workspace root not accessible: %s", root)

    return WorkspaceStats(
        total_files=outcome.file_count,
        directory_sizes={name: bytes_to_mb(size) for name, size in outcome.dir_sizes.items()},
        complexity_score=complexity_score(outcome.file_count, outcome.dir_sizes),
        scan_stopped=outcome.stopped_early,
        root_accessible=outcome.root_accessible,
    )
