"""devprobe data models."""

from devprobe.models.probe import Probe, ProbeError
from devprobe.models.probe_result import ProbeResult
from devprobe.models.logs import BoundedRead, FileAnalysis, LogAnalysis, LogScanResult
from devprobe.models.workspace import DirListing, WalkOutcome, WalkState, WorkspaceStats

__all__ = [
    "BoundedRead",
    "DirListing",
    "FileAnalysis",
    "LogAnalysis",
    "LogScanResult",
    "Probe",
    "ProbeError",
    "ProbeResult",
    "WalkOutcome",
    "WalkState",
    "WorkspaceStats",
]
