"""Probe collecting recent log files written by AI assistant extensions."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from devprobe.core.reader import read_bounded
from devprobe.models.probe import Probe
from devprobe.models.probe_result import ProbeResult
from devprobe.utils import vscode_user_dir

log = logging.getLogger(__name__)

_LOG_SUFFIXES = (".log", ".txt")
_TRUNCATED_MARKER = "...[truncated]...\n"

# Result key -> extension storage directory name.
_EXTENSIONS = {
    "amazonQLogs": "amazonwebservices.amazon-q-vscode",
    "claudeCodeLogs": "anthropic.claude-code",
}


@dataclass(slots=True)
class LogFile:
    path: Path
    size: int
    modified: float
    content: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "path": str(self.path),
            "name": self.path.name,
            "size": self.size,
            "modified": datetime.fromtimestamp(self.modified, timezone.utc).isoformat(),
        }
        if self.content is not None:
            data["content"] = self.content
        return data


def find_extension_logs(storage: Path, extension_dir: str) -> list[LogFile]:
    """Find ``<workspace>/<extension_dir>/logs/*.log|*.txt``, newest first."""
    found: list[LogFile] = []
    try:
        workspaces = sorted(p for p in storage.iterdir() if p.is_dir())
    except OSError:
        log.debug("Cannot read %s", storage)
        return []

    for workspace in workspaces:
        logs_dir = workspace / extension_dir / "logs"
        if not logs_dir.is_dir():
            continue
        try:
            for path in sorted(logs_dir.iterdir()):
                if path.suffix in _LOG_SUFFIXES and path.is_file():
                    stat = path.stat()
                    found.append(LogFile(path=path, size=stat.st_size, modified=stat.st_mtime))
        except OSError:
            log.debug("Cannot read %s", logs_dir)

    found.sort(key=lambda f: f.modified, reverse=True)
    return found


def read_recent(logs: list[LogFile], max_files: int, max_bytes: int) -> None:
    """Attach the (tail of the) content of the newest *max_files* logs."""
    for log_file in logs[:max_files]:
        read = read_bounded(log_file.path, max_bytes)
        if not read.ok:
            log_file.content = f"Error reading file: {read.error}"
        elif read.truncated:
            log_file.content = _TRUNCATED_MARKER + read.text
        else:
            log_file.content = read.text


class ExtensionLogsProbe(Probe):
    """Reads recent Amazon Q and Claude Code extension logs from workspace storage."""

    id = "extension_logs"
    name = "Extension Logs"
    description = "Most recent Amazon Q and Claude Code log files from VS Code workspace storage."
    category = "logs"

    def __init__(
        self,
        storage: Path | None = None,
        include_content: bool = True,
        max_files: int = 5,
        max_bytes: int = 50_000,
    ) -> None:
        self._storage = storage
        self.include_content = include_content
        self.max_files = max_files
        self.max_bytes = max_bytes

    @property
    def storage(self) -> Path:
        return self._storage or vscode_user_dir() / "workspaceStorage"

    def collect(self) -> ProbeResult:
        storage = self.storage
        data: dict[str, Any] = {key: [] for key in _EXTENSIONS}
        data["errors"] = []

        if not storage.is_dir():
            data["errors"].append(f"Workspace storage path not accessible: {storage}")
            return self._result(data, "Workspace storage not found")

        for key, extension_dir in _EXTENSIONS.items():
            logs = find_extension_logs(storage, extension_dir)
            if self.include_content:
                read_recent(logs, self.max_files, self.max_bytes)
            data[key] = [f.to_dict() for f in logs]

        counts = ", ".join(f"{len(data[key])} {key}" for key in _EXTENSIONS)
        return self._result(data, f"Found {counts}")
