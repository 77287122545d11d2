"""Budgeted workspace tree walk and unbounded directory sizing.

Two routines with different bounds:

* :func:`walk` enumerates a tree depth-first and stops once it has
  counted ``budget`` files and meets one more.
* :func:`dir_size` sums every file below a directory with no budget.
  The walker calls it only for "major" directories (dependency caches,
  VCS metadata), which are always sized in full.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from devprobe.models.workspace import DirListing, WalkOutcome, WalkState

log = logging.getLogger(__name__)

DEFAULT_MAX_FILES = 20000

DEFAULT_MAJOR_DIRS = (".git", "node_modules", ".dart_tool")
DEFAULT_MAJOR_MARKERS = ("wawapp",)
DEFAULT_IGNORE_DIRS = (
    ".git", "node_modules", ".dart_tool", ".gradle", ".idea", ".vscode",
    "build", "dist", "out", ".next", "target", "bin", "obj",
)


@dataclass(frozen=True, slots=True)
class WalkOptions:
    """Which directories are sized and which are skipped during a walk."""

    major_dirs: frozenset[str] = frozenset(DEFAULT_MAJOR_DIRS)
    major_markers: tuple[str, ...] = DEFAULT_MAJOR_MARKERS
    ignore_dirs: frozenset[str] = frozenset(DEFAULT_IGNORE_DIRS)

    @classmethod
    def from_settings(cls, settings) -> WalkOptions:
        """Build options from the ``workspace.*`` settings keys."""
        return cls(
            major_dirs=frozenset(settings.get_strings("workspace.major_dirs", DEFAULT_MAJOR_DIRS)),
            major_markers=settings.get_strings("workspace.major_markers", DEFAULT_MAJOR_MARKERS),
            ignore_dirs=frozenset(settings.get_strings("workspace.ignore_dirs", DEFAULT_IGNORE_DIRS)),
        )

    def is_major(self, name: str) -> bool:
        """Exact match on the major names, or case-insensitive marker substring."""
        if name in self.major_dirs:
            return True
        lowered = name.lower()
        return any(marker.lower() in lowered for marker in self.major_markers)

    def is_ignored(self, name: str) -> bool:
        return name in self.ignore_dirs


def list_dir(path: Path | str) -> DirListing:
    """Read one directory, sorted by name; failures give an empty listing."""
    try:
        with os.scandir(path) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as e:
        log.debug("Cannot read %s: %s", path, e)
        return DirListing(error=str(e))
    return DirListing(entries=tuple(entries))


def dir_size(path: Path | str) -> int:
    """Total size in bytes of all regular files below *path*.

    Symlinks are not followed. Unreadable entries count as zero.
    """
    total = 0
    stack: list[Path | str] = [path]
    while stack:
        listing = list_dir(stack.pop())
        for entry in listing.entries:
            try:
                if entry.is_file(follow_symlinks=False):
                    total += entry.stat(follow_symlinks=False).st_size
                elif entry.is_dir(follow_symlinks=False):
                    stack.append(entry.path)
            except OSError:
                log.debug("Cannot stat: %s", entry.path)
    return total


def walk(
    root: Path | str,
    budget: int = DEFAULT_MAX_FILES,
    options: WalkOptions | None = None,
) -> WalkOutcome:
    """Count files under *root*, visiting at most *budget* of them.

    Every non-directory entry counts as a file. Directories in the ignore
    set are not descended into; major directories are sized with
    :func:`dir_size` whether or not they are ignored. A root that cannot
    be read yields an empty outcome with ``root_accessible=False``.

    The stop is lazy: only a file met after the budget is spent ends the
    walk. Directories reached before that file are still opened, and
    major ones among them are still sized, so a major directory's size
    never depends on the budget. A tree holding exactly *budget* files
    is walked in full with ``stopped_early=False``.
    """
    if budget <= 0:
        raise ValueError(f"budget must be positive, got {budget}")
    options = options or WalkOptions()

    root_listing = list_dir(root)
    if not root_listing.ok:
        return WalkOutcome(root_accessible=False)

    state = WalkState(budget=budget)
    _walk_listing(root_listing, state, options)
    log.debug(
        "Walked %s: %d files, %d major dirs, stopped=%s",
        root, state.file_count, len(state.dir_sizes), state.stopped,
    )
    return WalkOutcome(
        file_count=state.file_count,
        dir_sizes=dict(state.dir_sizes),
        stopped_early=state.stopped,
    )


def _walk_listing(listing: DirListing, state: WalkState, options: WalkOptions) -> None:
    for entry in listing.entries:
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError:
            log.debug("Cannot stat: %s", entry.path)
            continue

        if not is_dir:
            if state.exhausted:
                state.stopped = True
                return
            state.file_count += 1
            continue

        if options.is_major(entry.name):
            state.add_dir_size(entry.name, dir_size(entry.path))

        if not options.is_ignored(entry.name):
            _walk_listing(list_dir(entry.path), state, options)
            if state.stopped:
                return
