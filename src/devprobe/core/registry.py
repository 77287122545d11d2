"""Central probe registry.

Availability checks shell out or touch the filesystem, so each probe is
asked once and the answer is cached until :meth:`ProbeRegistry.refresh`.
"""

from __future__ import annotations

import logging
from typing import Iterator

from devprobe.models.probe import Probe

log = logging.getLogger(__name__)

BUILTIN_SOURCE = "builtin"


class ProbeRegistry:
    """Stores and retrieves registered diagnostic probes."""

    def __init__(self) -> None:
        self._probes: dict[str, Probe] = {}
        self._sources: dict[str, str] = {}
        self._available: dict[str, bool] = {}

    def register(self, probe: Probe, source: str = BUILTIN_SOURCE) -> bool:
        """Register a probe instance; returns False for a duplicate id."""
        if probe.id in self._probes:
            log.warning(
                "Probe '%s' from %s already registered from %s, skipping duplicate",
                probe.id, source, self._sources[probe.id],
            )
            return False
        self._probes[probe.id] = probe
        self._sources[probe.id] = source
        log.debug("Registered probe: %s (%s) from %s", probe.id, probe.name, source)
        return True

    def get(self, probe_id: str) -> Probe | None:
        """Get a probe by its ID."""
        return self._probes.get(probe_id)

    def source(self, probe_id: str) -> str | None:
        """Where a probe was loaded from: ``"builtin"`` or a module path."""
        return self._sources.get(probe_id)

    def get_all(self) -> list[Probe]:
        """Get all registered probes, ordered by category and sort order."""
        return sorted(self._probes.values(), key=lambda p: (p.category, p.sort_order, p.id))

    def get_by_category(self, category: str) -> list[Probe]:
        """Get all probes in a given category."""
        return [p for p in self.get_all() if p.category == category]

    def is_available(self, probe_id: str) -> bool:
        """Cached availability; unknown ids and failing checks count as unavailable."""
        if probe_id not in self._available:
            probe = self._probes.get(probe_id)
            if probe is None:
                return False
            try:
                self._available[probe_id] = bool(probe.is_available())
            except Exception:
                log.exception("Error checking availability for probe '%s'", probe_id)
                self._available[probe_id] = False
        return self._available[probe_id]

    def get_available(self) -> list[Probe]:
        """Get all probes that are available on this system."""
        return [p for p in self.get_all() if self.is_available(p.id)]

    def refresh(self) -> None:
        """Forget cached availability so the next query asks each probe again."""
        self._available.clear()

    def __len__(self) -> int:
        return len(self._probes)

    def __iter__(self) -> Iterator[Probe]:
        return iter(self.get_all())

    def __contains__(self, probe_id: str) -> bool:
        return probe_id in self._probes
