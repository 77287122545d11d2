"""Probe reporting versions of installed development tools."""

from __future__ import annotations

import logging
import re
import shutil
from dataclasses import asdict, dataclass

from devprobe.models.probe import Probe
from devprobe.models.probe_result import ProbeResult
from devprobe.utils import CommandError, run_command

log = logging.getLogger(__name__)

_GENERIC_VERSION_RE = re.compile(r"(\d+\.\d+(?:\.\d+)?)")

# Tool-specific patterns, tried before the generic one.
_VERSION_PATTERNS: dict[str, re.Pattern[str]] = {
    "flutter": re.compile(r"Flutter\s+([\d.]+)", re.IGNORECASE),
    "dart": re.compile(r"Dart\s+SDK\s+version:\s+([\d.]+)", re.IGNORECASE),
    "java": re.compile(r"version\s+\"?([\d._]+)", re.IGNORECASE),
    "gradle": re.compile(r"Gradle\s+([\d.]+)", re.IGNORECASE),
    "node": re.compile(r"v?(\d+\.\d+\.\d+)"),
    "git": re.compile(r"git version\s+([\d.]+)", re.IGNORECASE),
}

# (command, version argument)
_TOOLS = (
    ("flutter", "--version"),
    ("dart", "--version"),
    ("java", "-version"),
    ("gradle", "--version"),
    ("firebase", "--version"),
    ("node", "--version"),
    ("npm", "--version"),
    ("git", "--version"),
    ("code", "--version"),
)


@dataclass(slots=True)
class ToolVersion:
    available: bool
    version: str | None = None
    path: str | None = None
    error: str | None = None
    raw_output: str | None = None


def parse_version(output: str, command: str) -> str:
    """Extract a version number from a tool's ``--version`` output.

    Falls back to the first line of output when nothing looks like a
    version.
    """
    pattern = _VERSION_PATTERNS.get(command)
    if pattern:
        match = pattern.search(output)
        if match:
            return match.group(1)
    match = _GENERIC_VERSION_RE.search(output)
    if match:
        return match.group(1)
    lines = output.splitlines()
    return lines[0].strip() if lines else "Unknown"


def check_tool(command: str, version_arg: str = "--version") -> ToolVersion:
    """Run ``command version_arg`` and describe the result."""
    path = shutil.which(command)
    if path is None:
        return ToolVersion(available=False, error=f"{command} not found on PATH")
    try:
        output = run_command([path, version_arg])
    except CommandError as exc:
        log.debug("Version check failed for %s: %s", command, exc)
        return ToolVersion(available=False, path=path, error=str(exc))
    return ToolVersion(
        available=True,
        version=parse_version(output, command),
        path=path,
        raw_output=output,
    )


class ToolVersionsProbe(Probe):
    """Checks the SDKs and CLIs a mobile/web developer typically needs."""

    id = "tool_versions"
    name = "Toolchain Versions"
    description = "Availability and versions of Flutter, Dart, Java, Gradle, Firebase, Node, npm, Git and VS Code."
    category = "toolchain"

    def collect(self) -> ProbeResult:
        data = {}
        for command, version_arg in _TOOLS:
            data[command] = _camel_keys(asdict(check_tool(command, version_arg)))
        available = [name for name, info in data.items() if info["available"]]
        summary = f"{len(available)}/{len(data)} tools available"
        return self._result(data, summary)


def _camel_keys(info: dict) -> dict:
    out = {}
    for key, value in info.items():
        if value is None:
            continue
        head, *rest = key.split("_")
        out[head + "".join(part.title() for part in rest)] = value
    return out
