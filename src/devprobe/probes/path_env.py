"""Probe reporting PATH entries and SDK home variables."""

from __future__ import annotations

import os
from collections.abc import Mapping

from devprobe.models.probe import Probe
from devprobe.models.probe_result import ProbeResult

# Reported name -> environment variables to read, first set one wins.
_HOME_VARS = {
    "JAVA_HOME": ("JAVA_HOME",),
    "ANDROID_HOME": ("ANDROID_SDK_ROOT", "ANDROID_HOME"),
    "GRADLE_HOME": ("GRADLE_HOME",),
    "FLUTTER_HOME": ("FLUTTER_ROOT", "FLUTTER_HOME"),
    "DART_HOME": ("DART_HOME",),
    "NODE_HOME": ("NODE_HOME",),
    "PYTHON_HOME": ("PYTHON_HOME",),
}


def inspect_environment(env: Mapping[str, str]) -> dict:
    """Split PATH and pick out the SDK home variables from *env*."""
    path_entries = [p for p in env.get("PATH", "").split(os.pathsep) if p.strip()]
    data: dict = {"PATH": path_entries}
    for name, candidates in _HOME_VARS.items():
        value = next((env[var] for var in candidates if env.get(var)), None)
        if value is not None:
            data[name] = value
    data["missingPathEntries"] = [p for p in path_entries if not os.path.isdir(p)]
    return data


class PathEnvProbe(Probe):
    id = "path_env"
    name = "PATH and SDK Homes"
    description = "PATH entries and JAVA_HOME, ANDROID_HOME, FLUTTER_HOME and similar variables."
    category = "environment"

    def collect(self) -> ProbeResult:
        data = inspect_environment(os.environ)
        homes = [k for k in _HOME_VARS if k in data]
        summary = f"{len(data['PATH'])} PATH entries, homes set: {', '.join(homes) or 'none'}"
        return self._result(data, summary)
