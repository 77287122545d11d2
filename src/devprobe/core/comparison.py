"""Explain performance differences between two machine profiles.

A profile is the JSON a user gathers on each machine, shaped like::

    {
        "system": {"cpu": {"logicalCores": 8}, "memory": {"totalGB": 16},
                   "disk": {"drives": [{"type": "SSD"}]}},
        "vscode": {"version": "1.85.1", "amazonQExtension": {"installed": true}},
        "workspace": {"totalFiles": 1200, "complexityScore": 3.4,
                      "directorySizes": {"node_modules": 250.5}},
    }

Missing keys are treated as zero / not installed. Numbers given as
strings (``"8"``) are parsed; any other non-numeric value counts as zero.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any

log = logging.getLogger(__name__)

_VERSION_RE = re.compile(r"(\d+)\.(\d+)\.(\d+)")


@dataclass(slots=True)
class PerformanceComparison:
    """Why this machine is faster (or slower) than the other one."""

    summary: str = ""
    advantages: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)
    hardware: list[str] = field(default_factory=list)
    software: list[str] = field(default_factory=list)
    workspace: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary,
            "advantages": list(self.advantages),
            "recommendations": list(self.recommendations),
            "details": {
                "hardware": list(self.hardware),
                "software": list(self.software),
                "workspace": list(self.workspace),
            },
        }


def parse_version(version: str) -> int:
    """Turn 'X.Y.Z' into a sortable integer; unparsable versions give 0."""
    match = _VERSION_RE.search(version or "")
    if not match:
        return 0
    major, minor, patch = (int(g) for g in match.groups())
    return major * 10000 + minor * 100 + patch


def _get(profile: dict[str, Any], *keys: str, default: Any = 0) -> Any:
    node: Any = profile
    for key in keys:
        if not isinstance(node, dict) or key not in node:
            return default
        node = node[key]
    return default if node is None else node


def _num(profile: dict[str, Any], *keys: str) -> int | float:
    raw = value = _get(profile, *keys)
    if isinstance(value, str):
        try:
            value = int(value)
        except ValueError:
            try:
                value = float(value)
            except ValueError:
                pass
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        value = None
    elif isinstance(value, float) and not math.isfinite(value):
        value = None
    if value is None:
        log.debug("Ignoring non-numeric %s: %r", ".".join(keys), raw)
        return 0
    return value


def _has_ssd(profile: dict[str, Any]) -> bool:
    drives = _get(profile, "system", "disk", "drives", default=[])
    if not isinstance(drives, list):
        return False
    return any(isinstance(d, dict) and d.get("type") == "SSD" for d in drives)


def compare_profiles(this: dict[str, Any], other: dict[str, Any]) -> PerformanceComparison:
    """Compare hardware, editor and workspace of two machine profiles."""
    result = PerformanceComparison()
    _compare_hardware(this, other, result)
    _compare_software(this, other, result)
    _compare_workspace(this, other, result)

    if result.advantages:
        result.summary = f"This machine is faster due to: {', '.join(result.advantages)}"
    else:
        result.summary = (
            "No clear hardware/software advantages detected. "
            "Performance differences may be due to other factors."
        )
    return result


def _compare_hardware(this: dict, other: dict, result: PerformanceComparison) -> None:
    this_cores = _num(this, "system", "cpu", "logicalCores")
    other_cores = _num(other, "system", "cpu", "logicalCores")
    if this_cores > other_cores:
        result.advantages.append(f"More CPU cores ({this_cores} vs {other_cores})")
        result.hardware.append(f"CPU advantage: {this_cores - other_cores} additional cores")
    elif this_cores < other_cores:
        result.recommendations.append(
            f"Upgrade CPU or use a machine with more cores (currently {this_cores} vs {other_cores})"
        )

    this_mem = _num(this, "system", "memory", "totalGB")
    other_mem = _num(other, "system", "memory", "totalGB")
    if this_mem > other_mem:
        result.advantages.append(f"More RAM ({this_mem}GB vs {other_mem}GB)")
        result.hardware.append(f"Memory advantage: {round(this_mem - other_mem, 2)}GB additional RAM")
    elif this_mem < other_mem:
        result.recommendations.append(f"Add more RAM (currently {this_mem}GB vs {other_mem}GB)")

    this_ssd = _has_ssd(this)
    other_ssd = _has_ssd(other)
    if this_ssd and not other_ssd:
        result.advantages.append("SSD storage vs HDD")
        result.hardware.append("SSD provides significantly faster file I/O for indexing and compilation")
    elif other_ssd and not this_ssd:
        result.recommendations.append("Upgrade to SSD storage for faster file operations")


def _compare_software(this: dict, other: dict, result: PerformanceComparison) -> None:
    this_version = str(_get(this, "vscode", "version", default=""))
    other_version = str(_get(other, "vscode", "version", default=""))
    if parse_version(this_version) > parse_version(other_version):
        result.advantages.append(f"Newer VS Code version ({this_version} vs {other_version})")
        result.software.append("Newer VS Code versions often include performance improvements")
    elif parse_version(this_version) < parse_version(other_version):
        result.recommendations.append(f"Update VS Code to latest version (currently {this_version})")

    this_q = bool(_get(this, "vscode", "amazonQExtension", "installed", default=False))
    other_q = bool(_get(other, "vscode", "amazonQExtension", "installed", default=False))
    if this_q and not other_q:
        result.software.append("Amazon Q extension is properly installed")
    elif other_q and not this_q:
        result.recommendations.append("Install Amazon Q extension")


def _compare_workspace(this: dict, other: dict, result: PerformanceComparison) -> None:
    this_files = _num(this, "workspace", "totalFiles")
    other_files = _num(other, "workspace", "totalFiles")
    if this_files < other_files:
        result.advantages.append(f"Fewer files to index ({this_files} vs {other_files})")
        result.workspace.append(f"{other_files - this_files} fewer files to process")
    elif this_files > other_files:
        result.recommendations.append(
            "Consider cleaning up unused files or using .gitignore to exclude build artifacts"
        )

    this_score = _num(this, "workspace", "complexityScore")
    other_score = _num(other, "workspace", "complexityScore")
    if this_score < other_score:
        result.advantages.append(f"Lower workspace complexity ({this_score} vs {other_score})")
        result.workspace.append("Simpler workspace structure reduces indexing overhead")

    this_nm = _num(this, "workspace", "directorySizes", "node_modules")
    other_nm = _num(other, "workspace", "directorySizes", "node_modules")
    if this_nm < other_nm:
        result.advantages.append(f"Smaller node_modules ({this_nm}MB vs {other_nm}MB)")
    elif this_nm > other_nm:
        result.recommendations.append("Clean up node_modules or exclude from VS Code indexing")
