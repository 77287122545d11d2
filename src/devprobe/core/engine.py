"""Probe collection orchestration engine."""

from __future__ import annotations

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable

from devprobe.core.registry import ProbeRegistry
from devprobe.models.probe import Probe, ProbeError
from devprobe.models.probe_result import ProbeResult

log = logging.getLogger(__name__)

ProgressCallback = Callable[[str, str], None]  # (probe_id, status_message)


class ProbeEngine:
    """Runs probes and gathers their results."""

    def __init__(self, registry: ProbeRegistry) -> None:
        self.registry = registry

    def collect(
        self,
        probe_ids: list[str] | None = None,
        category: str | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> list[ProbeResult]:
        """Run the specified probes.

        Probes mostly wait on external commands, so up to four run at
        once on multi-core machines. Results come back in probe order
        regardless of completion order. A probe that raises yields a
        result with ``error`` set instead of aborting the others.

        Args:
            probe_ids: Specific probe IDs to run. If None, run all available.
            category: Filter probes by category.
            on_progress: Optional callback for progress updates.
        """
        probes = self._resolve_probes(probe_ids, category)
        if not probes:
            return []

        if (os.cpu_count() or 1) > 1 and len(probes) > 1:
            return self._collect_parallel(probes, on_progress)
        return [self._run_probe(probe, on_progress) for probe in probes]

    def _collect_parallel(
        self,
        probes: list[Probe],
        on_progress: ProgressCallback | None,
    ) -> list[ProbeResult]:
        lock = threading.Lock()

        def progress(probe_id: str, status: str) -> None:
            if on_progress:
                with lock:
                    on_progress(probe_id, status)

        max_workers = min(4, len(probes))
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [executor.submit(self._run_probe, probe, progress) for probe in probes]
            return [future.result() for future in futures]

    @staticmethod
    def _run_probe(probe: Probe, on_progress: ProgressCallback | None) -> ProbeResult:
        if on_progress:
            on_progress(probe.id, "collecting")
        try:
            result = probe.collect()
        except ProbeError as exc:
            log.warning("Probe '%s' failed: %s", probe.id, exc)
            if on_progress:
                on_progress(probe.id, "error")
            return ProbeResult(probe_id=probe.id, probe_name=probe.name, error=str(exc))
        except Exception as exc:
            log.exception("Probe '%s' failed during collection", probe.id)
            if on_progress:
                on_progress(probe.id, "error")
            return ProbeResult(probe_id=probe.id, probe_name=probe.name, error=str(exc) or type(exc).__name__)
        if on_progress:
            on_progress(probe.id, "done")
        return result

    def _resolve_probes(self, probe_ids: list[str] | None, category: str | None) -> list[Probe]:
        """Resolve which probes to run."""
        if probe_ids:
            result: list[Probe] = []
            for pid in probe_ids:
                probe = self.registry.get(pid)
                if probe is None:
                    log.warning("Probe '%s' not found, skipping", pid)
                elif not self.registry.is_available(pid):
                    log.info("Probe '%s' not available on this system, skipping", pid)
                else:
                    result.append(probe)
            return result

        available = self.registry.get_available()
        if category:
            available = [p for p in available if p.category == category]
        return available
