"""Named tools exposing probes and scans to request/response callers.

Every tool takes a JSON object of arguments and answers with
pretty-printed JSON text. Failures never propagate: they come back as
an ``{"error": ...}`` payload with ``is_error`` set.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable

from devprobe.core.comparison import compare_profiles
from devprobe.core.log_scan import scan_logs
from devprobe.core.registry import ProbeRegistry
from devprobe.core.walker import DEFAULT_MAX_FILES
from devprobe.core.workspace import workspace_stats
from devprobe.probes.vscode_info import amazonq_settings, claude_settings, read_settings

log = logging.getLogger(__name__)


class ToolError(Exception):
    """Raised for unknown tools or invalid arguments."""


@dataclass(frozen=True, slots=True)
class Tool:
    name: str
    description: str
    input_schema: dict[str, Any]
    handler: Callable[[dict[str, Any]], Any]

    def describe(self) -> dict[str, Any]:
        return {"name": self.name, "description": self.description, "inputSchema": self.input_schema}


@dataclass(frozen=True, slots=True)
class ToolResponse:
    text: str
    is_error: bool = False


def _schema(properties: dict[str, Any] | None = None, required: list[str] | None = None) -> dict[str, Any]:
    return {"type": "object", "properties": properties or {}, "required": required or []}


def _workspace_arg(args: dict[str, Any]) -> str | None:
    workspace = args.get("workspaceDir")
    if workspace is not None and not isinstance(workspace, str):
        raise ToolError(f"workspaceDir must be a string, got {workspace!r}")
    return workspace or None


# Tool name -> (probe id, description)
_PROBE_TOOLS = {
    "devenv_system_info": ("system_info", "Collect OS, CPU, RAM and disk details"),
    "devenv_vscode_info": ("vscode_info", "Get VS Code version, extensions and AI assistant settings"),
    "devenv_tool_versions": ("tool_versions", "Check versions of Flutter, Dart, Java, Gradle, Node and other tools"),
    "devenv_path_info": ("path_env", "Inspect PATH entries and SDK home variables"),
    "devenv_extension_logs": ("extension_logs", "Read recent Amazon Q and Claude Code extension logs"),
}


class Toolbox:
    """The set of tools built on top of a probe registry."""

    def __init__(self, registry: ProbeRegistry) -> None:
        self.registry = registry
        self._tools: dict[str, Tool] = {}
        for tool_name, (probe_id, description) in _PROBE_TOOLS.items():
            if probe_id in registry:
                self._add(tool_name, description, _schema(), self._probe_handler(probe_id))

        self._add(
            "devenv_workspace_stats",
            "Analyze workspace file count, directory sizes, and complexity score",
            _schema(
                {
                    "rootPath": {"type": "string", "description": "Root path to analyze"},
                    "maxFiles": {
                        "type": "number",
                        "description": f"Maximum files to scan (default: {DEFAULT_MAX_FILES})",
                        "default": DEFAULT_MAX_FILES,
                    },
                },
                ["rootPath"],
            ),
            self._workspace_stats,
        )
        self._add(
            "devenv_logs_scan",
            "Scan extension log files for warnings, errors and performance issues",
            _schema(
                {"logRoot": {"type": "string", "description": "Root directory to scan for logs"}},
                ["logRoot"],
            ),
            lambda args: scan_logs(args["logRoot"]).to_dict(),
        )
        self._add(
            "devenv_perf_summary",
            "Compare two machine profiles and explain performance differences",
            _schema(
                {
                    "thisMachine": {"type": "object", "description": "Hardware + VS Code + workspace stats from this machine"},
                    "otherMachine": {"type": "object", "description": "Hardware + VS Code + workspace stats from other machine"},
                },
                ["thisMachine", "otherMachine"],
            ),
            lambda args: compare_profiles(args["thisMachine"], args["otherMachine"]).to_dict(),
        )

        workspace_dir = {
            "workspaceDir": {
                "type": "string",
                "description": "Optional workspace directory path (defaults to current directory)",
            },
        }
        self._add(
            "devenv_settings_reader",
            "Read and merge VS Code user settings and workspace settings",
            _schema(workspace_dir),
            lambda args: read_settings(_workspace_arg(args)),
        )
        self._add(
            "devenv_amazonq_settings",
            "Get Amazon Q specific settings from VS Code configuration",
            _schema(workspace_dir),
            lambda args: amazonq_settings(read_settings(_workspace_arg(args))["mergedSettings"]),
        )
        self._add(
            "devenv_claude_settings",
            "Get Claude Code specific settings from VS Code configuration",
            _schema(workspace_dir),
            lambda args: claude_settings(read_settings(_workspace_arg(args))["mergedSettings"]),
        )

    def _add(self, name: str, description: str, schema: dict[str, Any], handler: Callable) -> None:
        self._tools[name] = Tool(name=name, description=description, input_schema=schema, handler=handler)

    def _probe_handler(self, probe_id: str) -> Callable[[dict[str, Any]], Any]:
        def handler(_args: dict[str, Any]) -> Any:
            return self.registry.get(probe_id).collect().data

        return handler

    @staticmethod
    def _workspace_stats(args: dict[str, Any]) -> dict[str, Any]:
        max_files = args.get("maxFiles") or None
        if max_files is not None and (isinstance(max_files, bool) or not isinstance(max_files, (int, float))):
            raise ToolError(f"maxFiles must be a number, got {max_files!r}")
        return workspace_stats(args["rootPath"], int(max_files) if max_files else None).to_dict()

    def list(self) -> list[dict[str, Any]]:
        return [tool.describe() for tool in self._tools.values()]

    def names(self) -> list[str]:
        return list(self._tools)

    def call(self, name: str, arguments: dict[str, Any] | None = None) -> ToolResponse:
        """Run a tool; any failure is returned as an error response."""
        arguments = arguments or {}
        try:
            tool = self._tools.get(name)
            if tool is None:
                raise ToolError(f"Unknown tool: {name}")
            if not isinstance(arguments, dict):
                raise ToolError("Tool arguments must be a JSON object")
            missing = [key for key in tool.input_schema["required"] if key not in arguments]
            if missing:
                raise ToolError(f"Missing required arguments: {', '.join(missing)}")
            result = tool.handler(arguments)
        except Exception as exc:
            if not isinstance(exc, ToolError):
                log.exception("Tool '%s' failed", name)
            return ToolResponse(text=json.dumps({"error": str(exc)}, indent=2), is_error=True)
        return ToolResponse(text=json.dumps(result, indent=2, default=str))
