"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from devprobe.models.probe import Probe
from devprobe.models.probe_result import ProbeResult
from devprobe.settings import Settings


class FakeProbe(Probe):
    """Test probe that doesn't touch the system."""

    def __init__(
        self,
        probe_id: str = "fake",
        available: bool = True,
        fail: bool = False,
        category: str = "hardware",
    ):
        self._id = probe_id
        self._available = available
        self._fail = fail
        self._category = category
        self.calls = 0

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return f"Fake Probe ({self._id})"

    @property
    def description(self) -> str:
        return "A fake probe for testing"

    @property
    def category(self) -> str:
        return self._category

    def is_available(self) -> bool:
        return self._available

    def collect(self) -> ProbeResult:
        self.calls += 1
        if self._fail:
            raise RuntimeError("collect failed")
        return self._result({"probe": self._id, "value": 42}, summary="ok")


@pytest.fixture(autouse=True)
def isolate_settings(tmp_path, monkeypatch):
    """Point XDG dirs at a temp directory and reset the settings singleton."""
    config_home = tmp_path / "xdg_config"
    data_home = tmp_path / "xdg_data"
    config_home.mkdir()
    data_home.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    monkeypatch.setenv("XDG_DATA_HOME", str(data_home))
    monkeypatch.setattr(Settings, "_instance", None)
    return config_home / "devprobe" / "settings.json"


@pytest.fixture
def write_settings(isolate_settings):
    """Write a settings file and return a fresh Settings instance for it."""
    import json

    def _write(data) -> Settings:
        isolate_settings.parent.mkdir(parents=True, exist_ok=True)
        isolate_settings.write_text(json.dumps(data), encoding="utf-8")
        return Settings(isolate_settings)

    return _write


@pytest.fixture
def make_tree(tmp_path):
    """Create files from a {relative_path: size_or_bytes} mapping under tmp_path/ws."""

    def _make(spec: dict) -> Path:
        root = tmp_path / "ws"
        root.mkdir(exist_ok=True)
        for rel, content in spec.items():
            path = root / rel
            if rel.endswith("/"):
                path.mkdir(parents=True, exist_ok=True)
                continue
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, int):
                content = b"x" * content
            elif isinstance(content, str):
                content = content.encode()
            path.write_bytes(content)
        return root

    return _make
