"""Example external probe for devprobe.

This demonstrates how to write a custom diagnostic probe.
Place probe directories in ~/.local/share/devprobe/probes/ to be
discovered, or list their parent directory under ``probes.plugin_paths``
in settings.json.
"""

from __future__ import annotations

import platform
import sys

from devprobe.models.probe import Probe
from devprobe.models.probe_result import ProbeResult


class ExampleProbe(Probe):
    """Example probe reporting the Python interpreter devprobe runs on."""

    @property
    def id(self) -> str:
        return "example"

    @property
    def name(self) -> str:
        return "Example Probe"

    @property
    def description(self) -> str:
        return "An example probe showing how to extend devprobe with custom diagnostics."

    @property
    def category(self) -> str:
        return "environment"

    @property
    def unavailable_reason(self) -> str | None:
        return "Example probe, disabled by default"

    def collect(self) -> ProbeResult:
        data = {
            "implementation": platform.python_implementation(),
            "version": platform.python_version(),
            "executable": sys.executable,
        }
        return self._result(data, summary=f"{data['implementation']} {data['version']}")
