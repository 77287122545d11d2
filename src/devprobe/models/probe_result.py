"""Probe result dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class ProbeResult:
    """Result of running a single diagnostic probe."""

    probe_id: str
    probe_name: str
    data: dict[str, Any] = field(default_factory=dict)
    summary: str = ""
    error: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "probe_id": self.probe_id,
            "probe_name": self.probe_name,
            "summary": self.summary,
            "error": self.error,
            "data": self.data,
        }
