"""Probe discovery and loading."""

from __future__ import annotations

import importlib
import importlib.util
import inspect
import logging
import pkgutil
from pathlib import Path
from types import ModuleType

from devprobe.core.registry import BUILTIN_SOURCE, ProbeRegistry
from devprobe.models.probe import Probe
from devprobe.settings import Settings
from devprobe.utils import xdg_data_home

log = logging.getLogger(__name__)


def _user_probe_dir() -> Path:
    return xdg_data_home() / "devprobe" / "probes"


def _find_probes_in_module(module: ModuleType) -> list[type[Probe]]:
    """Find all concrete Probe subclasses defined in a module."""
    probes: list[type[Probe]] = []
    for _, obj in inspect.getmembers(module, inspect.isclass):
        if issubclass(obj, Probe) and obj is not Probe and not inspect.isabstract(obj):
            probes.append(obj)
    return probes


def _load_builtin_probes() -> list[tuple[type[Probe], str]]:
    """Load probes from the devprobe.probes package."""
    import devprobe.probes as probes_pkg

    found: list[tuple[type[Probe], str]] = []
    for _importer, modname, _ispkg in pkgutil.iter_modules(probes_pkg.__path__):
        try:
            module = importlib.import_module(f"devprobe.probes.{modname}")
            found.extend((cls, BUILTIN_SOURCE) for cls in _find_probes_in_module(module))
        except Exception:
            log.exception("Failed to load built-in probe module: %s", modname)
    return found


def _load_probes_from_directory(directory: Path) -> list[tuple[type[Probe], str]]:
    """Load probes from an external directory of modules or packages.

    A package directory provides ``probe.py``, falling back to its
    ``__init__.py``. Entries are visited in name order.
    """
    if not directory.is_dir():
        return []

    found: list[tuple[type[Probe], str]] = []
    for path in sorted(directory.iterdir()):
        if path.is_dir() and (path / "__init__.py").exists():
            module_file = path / "probe.py"
            if not module_file.exists():
                module_file = path / "__init__.py"
        elif path.suffix == ".py" and path.name != "__init__.py":
            module_file = path
        else:
            continue

        try:
            spec = importlib.util.spec_from_file_location(f"devprobe_ext_probe_{path.stem}", module_file)
            if spec is None or spec.loader is None:
                continue
            module = importlib.util.module_from_spec(spec)
            spec.loader.exec_module(module)
            found.extend((cls, str(module_file)) for cls in _find_probes_in_module(module))
        except Exception:
            log.exception("Failed to load probe from: %s", module_file)
    return found


def load_probes(registry: ProbeRegistry, settings: Settings | None = None) -> None:
    """Discover and register all probes.

    Searches in order: built-in, user-local, then ``probes.plugin_paths``.
    The first probe registered under an id wins, so an external probe
    cannot replace a built-in one. Ids listed in ``probes.disabled`` are
    not instantiated at all.
    """
    settings = settings or Settings.instance()
    disabled = set(settings.get_strings("probes.disabled", ()))
    candidates: list[tuple[type[Probe], str]] = []

    candidates.extend(_load_builtin_probes())
    candidates.extend(_load_probes_from_directory(_user_probe_dir()))
    for path in settings.get_strings("probes.plugin_paths", ()):
        candidates.extend(_load_probes_from_directory(Path(path).expanduser()))

    for cls, source in candidates:
        try:
            probe = cls()
        except Exception:
            log.exception("Failed to instantiate probe: %s", cls.__name__)
            continue
        if probe.id in disabled:
            log.info("Probe '%s' disabled in settings", probe.id)
            continue
        registry.register(probe, source)

    log.info("Loaded %d probes", len(registry))
