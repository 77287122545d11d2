"""Probe reporting the VS Code version, extensions and AI assistant settings."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any

from devprobe.models.probe import Probe
from devprobe.models.probe_result import ProbeResult
from devprobe.utils import CommandError, has_command, run_command, vscode_extensions_dir, vscode_user_dir

log = logging.getLogger(__name__)

_EXTENSION_LINE_RE = re.compile(r"^(.+)@(.+)$")
# Installed extension directories are named "<publisher>.<name>-<version>".
_EXTENSION_DIR_RE = re.compile(r"^(.+?)-(\d+\.\d+\.\d+.*)$")

_SETTING_MARKERS = ("amazonq", "amazon-q")
_AMAZON_Q_PREFIXES = ("amazonQ.", "aws.")
_CLAUDE_PREFIXES = ("claude.", "anthropic.")

# Group 1 is a string literal, kept verbatim; anything else matched is dropped.
_STRING = r'("(?:\\.|[^"\\])*")'
_COMMENT_RE = re.compile(_STRING + r"|//[^\n]*|/\*.*?\*/", re.DOTALL)
_TRAILING_COMMA_RE = re.compile(_STRING + r"|,(?=\s*[}\]])")

# (result key, predicate on lowercase extension id, read package.json metadata)
_HIGHLIGHTS = (
    ("amazonQ", lambda ext_id: "amazon-q" in ext_id, True),
    ("claudeCode", lambda ext_id: "claude" in ext_id and "anthropic" in ext_id, True),
    ("flutter", lambda ext_id: "dart-code.flutter" in ext_id, False),
    ("dart", lambda ext_id: "dart-code.dart-code" in ext_id, False),
)


def parse_extension_list(output: str) -> list[dict[str, str]]:
    """Parse ``code --list-extensions --show-versions`` output."""
    extensions = []
    for line in output.splitlines():
        match = _EXTENSION_LINE_RE.match(line.strip())
        if match:
            extensions.append({"id": match.group(1), "version": match.group(2)})
    return extensions


def extensions_from_directory(directory: Path) -> list[dict[str, str]]:
    """List installed extensions from the extensions directory names."""
    extensions = []
    try:
        names = sorted(p.name for p in directory.iterdir() if p.is_dir())
    except OSError:
        log.debug("Cannot read %s", directory)
        return []
    for name in names:
        match = _EXTENSION_DIR_RE.match(name)
        if match:
            extensions.append({"id": match.group(1), "version": match.group(2)})
    return extensions


def filter_settings(settings: dict[str, Any]) -> dict[str, Any]:
    """Keep settings keys mentioning Amazon Q anywhere, in any case."""
    return {k: v for k, v in settings.items() if any(m in k.lower() for m in _SETTING_MARKERS)}


def settings_with_prefix(settings: dict[str, Any], prefixes: tuple[str, ...]) -> dict[str, Any]:
    """Keep settings whose key starts with one of *prefixes* (case-sensitive)."""
    return {k: v for k, v in settings.items() if k.startswith(prefixes)}


def amazonq_settings(settings: dict[str, Any]) -> dict[str, Any]:
    return settings_with_prefix(settings, _AMAZON_Q_PREFIXES)


def claude_settings(settings: dict[str, Any]) -> dict[str, Any]:
    return settings_with_prefix(settings, _CLAUDE_PREFIXES)


def strip_json_comments(text: str) -> str:
    """Turn VS Code's JSON-with-comments into plain JSON.

    Drops ``//`` and ``/* */`` comments and commas left before a closing
    bracket. String literals are kept as they are, so a URL such as
    ``"http://host"`` survives.
    """
    text = _COMMENT_RE.sub(lambda m: m.group(1) or "", text)
    return _TRAILING_COMMA_RE.sub(lambda m: m.group(1) or "", text)


def _read_json(path: Path) -> Any:
    try:
        return json.loads(strip_json_comments(path.read_text(encoding="utf-8")))
    except FileNotFoundError:
        return None
    except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
        log.debug("Cannot parse %s: %s", path, e)
        return None


def _read_settings_file(path: Path) -> dict[str, Any] | None:
    data = _read_json(path)
    return data if isinstance(data, dict) else None


def read_settings(workspace: Path | str | None = None) -> dict[str, Any]:
    """Read user and workspace ``settings.json`` and merge them.

    Workspace values override user values. A file that is missing or
    does not parse to an object is reported in ``errors`` and treated
    as empty for the merge.
    """
    user_path = vscode_user_dir() / "settings.json"
    workspace_path = Path(workspace or Path.cwd()) / ".vscode" / "settings.json"
    errors = []

    user = _read_settings_file(user_path)
    if user is None:
        errors.append(f"Failed to read user settings from: {user_path}")
    workspace_settings = _read_settings_file(workspace_path)
    if workspace_settings is None:
        errors.append(f"Failed to read workspace settings from: {workspace_path}")

    return {
        "userSettings": user,
        "workspaceSettings": workspace_settings,
        "mergedSettings": {**(user or {}), **(workspace_settings or {})},
        "paths": {"userSettingsPath": str(user_path), "workspaceSettingsPath": str(workspace_path)},
        "errors": errors,
    }


class VSCodeInfoProbe(Probe):
    """Reports what VS Code looks like on this machine."""

    id = "vscode_info"
    name = "VS Code"
    description = "VS Code version, installed extensions and AI assistant settings."
    category = "editor"

    def __init__(self, workspace: Path | None = None) -> None:
        self._workspace = workspace

    @property
    def unavailable_reason(self) -> str | None:
        if not has_command("code") and not vscode_extensions_dir().is_dir():
            return "VS Code not found"
        return None

    def collect(self) -> ProbeResult:
        errors: list[str] = []
        extensions = self._list_extensions(errors)
        data: dict[str, Any] = {
            "version": self._version(),
            "totalExtensions": len(extensions),
            "extensions": extensions,
            "settings": self._settings(),
            "errors": errors,
        }
        for key, predicate, with_metadata in _HIGHLIGHTS:
            match = next((dict(e) for e in extensions if predicate(e["id"].lower())), None)
            if match and with_metadata:
                match["metadata"] = self._metadata(match)
            data[key] = match

        q = data["amazonQ"]
        data["amazonQExtension"] = (
            {"installed": True, "version": q["version"], "path": q.get("path")} if q else {"installed": False}
        )
        summary = f"VS Code {data['version']}, {len(extensions)} extensions"
        return self._result(data, summary)

    @staticmethod
    def _version() -> str:
        try:
            return run_command(["code", "--version"]).splitlines()[0]
        except (CommandError, IndexError):
            return "Not installed or not accessible"

    @staticmethod
    def _list_extensions(errors: list[str]) -> list[dict[str, str]]:
        try:
            return parse_extension_list(run_command(["code", "--list-extensions", "--show-versions"], timeout=30))
        except CommandError as exc:
            errors.append(str(exc))
        return extensions_from_directory(vscode_extensions_dir())

    @staticmethod
    def _metadata(extension: dict[str, Any]) -> dict[str, Any] | None:
        ext_dir = vscode_extensions_dir() / f"{extension['id']}-{extension['version']}"
        extension["path"] = str(ext_dir)
        package = _read_json(ext_dir / "package.json")
        if not isinstance(package, dict):
            return None
        return {k: package[k] for k in ("displayName", "version", "publisher", "engines") if k in package}

    def _settings(self) -> dict[str, dict[str, Any]]:
        settings = read_settings(self._workspace)
        return {
            "user": filter_settings(settings["userSettings"] or {}),
            "workspace": filter_settings(settings["workspaceSettings"] or {}),
            "claude": claude_settings(settings["mergedSettings"]),
        }
