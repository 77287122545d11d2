"""Base probe interface."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from devprobe.models.probe_result import ProbeResult

log = logging.getLogger(__name__)


class ProbeError(Exception):
    """Raised by a probe when its data source cannot be queried."""


class Probe(ABC):
    """Base class for all diagnostic probes.

    A probe gathers one kind of information about the machine (hardware,
    editor, toolchain...) and returns it as a JSON-serializable dict.
    Probes are read-only: they MUST NOT modify the system.
    """

    @property
    @abstractmethod
    def id(self) -> str:
        """Unique identifier, e.g. 'system_info'."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name, e.g. 'System Hardware'."""

    @property
    @abstractmethod
    def description(self) -> str:
        """What this probe reports."""

    @property
    @abstractmethod
    def category(self) -> str:
        """Category: 'hardware', 'editor', 'toolchain', 'environment', 'logs'."""

    @property
    def sort_order(self) -> int:
        """Display order within category (lower = first). Default 50."""
        return 50

    @abstractmethod
    def collect(self) -> ProbeResult:
        """Gather data. May raise ProbeError; the engine records it."""

    @property
    def unavailable_reason(self) -> str | None:
        """Why this probe cannot work on this system, or None if supported."""
        return None

    def is_available(self) -> bool:
        """Check if this probe is applicable on the current system."""
        return self.unavailable_reason is None

    def _result(self, data: dict, summary: str = "") -> ProbeResult:
        return ProbeResult(probe_id=self.id, probe_name=self.name, data=data, summary=summary)
