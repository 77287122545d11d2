"""Tests for the built-in probes.

External commands are monkeypatched; nothing here depends on which
tools happen to be installed.
"""

from __future__ import annotations

import json
import os

import pytest

from devprobe.probes import extension_logs, system_info, tool_versions, vscode_info
from devprobe.probes.extension_logs import ExtensionLogsProbe, find_extension_logs, read_recent
from devprobe.probes.path_env import PathEnvProbe, inspect_environment
from devprobe.probes.system_info import SystemInfoProbe
from devprobe.probes.tool_versions import ToolVersionsProbe, check_tool, parse_version
from devprobe.probes.vscode_info import (
    VSCodeInfoProbe,
    amazonq_settings,
    claude_settings,
    extensions_from_directory,
    filter_settings,
    parse_extension_list,
    strip_json_comments,
)
from devprobe.utils import CommandError


def _fail(*_args, **_kwargs):
    raise CommandError("Command not found: code")


class TestPathEnv:
    def test_splits_path_and_reports_missing(self, tmp_path):
        missing = str(tmp_path / "gone")
        env = {"PATH": os.pathsep.join([str(tmp_path), "", missing])}
        data = inspect_environment(env)

        assert data["PATH"] == [str(tmp_path), missing]
        assert data["missingPathEntries"] == [missing]

    def test_home_variables_prefer_new_names(self):
        env = {
            "ANDROID_HOME": "/old/android",
            "ANDROID_SDK_ROOT": "/new/android",
            "FLUTTER_HOME": "/opt/flutter",
            "JAVA_HOME": "/usr/lib/jvm/17",
        }
        data = inspect_environment(env)

        assert data["ANDROID_HOME"] == "/new/android"
        assert data["FLUTTER_HOME"] == "/opt/flutter"
        assert data["JAVA_HOME"] == "/usr/lib/jvm/17"
        assert "GRADLE_HOME" not in data

    def test_empty_environment(self):
        assert inspect_environment({}) == {"PATH": [], "missingPathEntries": []}

    def test_collect_uses_process_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("PATH", str(tmp_path))
        monkeypatch.setenv("JAVA_HOME", "/jdk")
        result = PathEnvProbe().collect()

        assert result.probe_id == "path_env"
        assert result.data["PATH"] == [str(tmp_path)]
        assert "JAVA_HOME" in result.summary


class TestToolVersions:
    @pytest.mark.parametrize(
        "command, output, expected",
        [
            ("flutter", "Flutter 3.16.5 • channel stable • https://github.com/flutter/flutter.git", "3.16.5"),
            ("dart", "Dart SDK version: 3.2.3 (stable) on \"linux_x64\"", "3.2.3"),
            ("java", 'openjdk version "17.0.9" 2023-10-17\nOpenJDK Runtime Environment', "17.0.9"),
            ("gradle", "\n------------------------------------------------------------\nGradle 8.5\n", "8.5"),
            ("node", "v20.10.0", "20.10.0"),
            ("npm", "10.2.3", "10.2.3"),
            ("git", "git version 2.43.0", "2.43.0"),
            ("code", "1.85.1\n0ee08df0cf4527e40edc9aa28f4b5bd38bbff2b2\nx64", "1.85.1"),
        ],
    )
    def test_parse_version(self, command, output, expected):
        assert parse_version(output, command) == expected

    def test_parse_version_falls_back_to_first_line(self):
        assert parse_version("nightly build\nmore", "firebase") == "nightly build"
        assert parse_version("", "firebase") == "Unknown"

    def test_check_tool_missing(self, monkeypatch):
        monkeypatch.setattr(tool_versions.shutil, "which", lambda cmd: None)
        info = check_tool("flutter")

        assert info.available is False
        assert info.error == "flutter not found on PATH"

    def test_check_tool_success(self, monkeypatch):
        calls = []
        monkeypatch.setattr(tool_versions.shutil, "which", lambda cmd: f"/usr/bin/{cmd}")

        def fake_run(args, timeout=10):
            calls.append(args)
            return "git version 2.43.0"

        monkeypatch.setattr(tool_versions, "run_command", fake_run)
        info = check_tool("git")

        assert calls == [["/usr/bin/git", "--version"]]
        assert info.available is True
        assert info.version == "2.43.0"
        assert info.path == "/usr/bin/git"
        assert info.raw_output == "git version 2.43.0"

    def test_check_tool_command_failure(self, monkeypatch):
        monkeypatch.setattr(tool_versions.shutil, "which", lambda cmd: "/usr/bin/java")
        monkeypatch.setattr(tool_versions, "run_command", _fail)
        info = check_tool("java", "-version")

        assert info.available is False
        assert info.path == "/usr/bin/java"
        assert info.error

    def test_collect_reports_every_tool(self, monkeypatch):
        monkeypatch.setattr(
            tool_versions.shutil, "which", lambda cmd: "/usr/bin/node" if cmd == "node" else None
        )
        monkeypatch.setattr(tool_versions, "run_command", lambda args, timeout=10: "v20.10.0")
        result = ToolVersionsProbe().collect()

        assert set(result.data) == {
            "flutter", "dart", "java", "gradle", "firebase", "node", "npm", "git", "code",
        }
        assert result.data["node"] == {
            "available": True,
            "version": "20.10.0",
            "path": "/usr/bin/node",
            "rawOutput": "v20.10.0",
        }
        assert result.data["git"] == {"available": False, "error": "git not found on PATH"}
        assert result.summary == "1/9 tools available"


@pytest.fixture
def vscode_home(tmp_path, monkeypatch):
    """Fake VS Code user and extension directories; the `code` CLI is missing."""
    user_dir = tmp_path / "Code" / "User"
    ext_dir = tmp_path / "extensions"
    user_dir.mkdir(parents=True)
    ext_dir.mkdir()
    monkeypatch.setattr(vscode_info, "vscode_user_dir", lambda: user_dir)
    monkeypatch.setattr(vscode_info, "vscode_extensions_dir", lambda: ext_dir)
    monkeypatch.setattr(vscode_info, "run_command", _fail)
    monkeypatch.setattr(vscode_info, "has_command", lambda name: False)
    return user_dir, ext_dir


class TestVSCodeInfo:
    def test_parse_extension_list(self):
        output = "amazonwebservices.amazon-q-vscode@1.40.0\n\nms-python.python@2024.0.1\nnot an extension\n"
        assert parse_extension_list(output) == [
            {"id": "amazonwebservices.amazon-q-vscode", "version": "1.40.0"},
            {"id": "ms-python.python", "version": "2024.0.1"},
        ]

    def test_extensions_from_directory(self, tmp_path):
        for name in ("dart-code.flutter-3.80.0", "amazonwebservices.amazon-q-vscode-1.40.0", "extensions.json"):
            (tmp_path / name).mkdir()
        (tmp_path / "stray-file-1.0.0").write_text("")

        assert extensions_from_directory(tmp_path) == [
            {"id": "amazonwebservices.amazon-q-vscode", "version": "1.40.0"},
            {"id": "dart-code.flutter", "version": "3.80.0"},
        ]

    def test_extensions_from_missing_directory(self, tmp_path):
        assert extensions_from_directory(tmp_path / "missing") == []

    def test_filter_settings(self):
        settings = {
            "amazonQ.telemetry": False,
            "aws.amazon-q.suggestions": True,
            "editor.fontSize": 14,
        }
        assert filter_settings(settings) == {"amazonQ.telemetry": False, "aws.amazon-q.suggestions": True}

    def test_prefix_filters_are_case_sensitive(self):
        settings = {
            "amazonQ.telemetry": False,
            "aws.profile": "dev",
            "AWS.region": "eu-west-1",
            "claude.model": "opus",
            "anthropic.apiUrl": "https://api.example",
            "editor.claude.hint": True,
        }
        assert amazonq_settings(settings) == {"amazonQ.telemetry": False, "aws.profile": "dev"}
        assert claude_settings(settings) == {"claude.model": "opus", "anthropic.apiUrl": "https://api.example"}

    def test_strip_json_comments(self):
        text = (
            "{\n"
            "  // leading comment\n"
            '  "url": "http://example.com/*not a comment*/", // trailing\n'
            '  /* block\n     comment */ "list": [1, 2,],\n'
            '  "quote": "say \\"hi\\" // still text",\n'
            "}\n"
        )
        assert json.loads(strip_json_comments(text)) == {
            "url": "http://example.com/*not a comment*/",
            "list": [1, 2],
            "quote": 'say "hi" // still text',
        }

    def test_collect_reads_commented_settings(self, vscode_home, tmp_path):
        user_dir, _ = vscode_home
        (user_dir / "settings.json").write_text(
            "{\n"
            "  // my editor prefs\n"
            '  "amazonQ.telemetry": false,\n'
            '  "aws.profile": "dev",\n'
            '  "claude.model": "opus"\n'
            "}\n"
        )
        workspace = tmp_path / "project"
        (workspace / ".vscode").mkdir(parents=True)
        (workspace / ".vscode" / "settings.json").write_text('{"claude.model": "sonnet"}')

        settings = VSCodeInfoProbe(workspace=workspace).collect().data["settings"]

        assert settings == {
            "user": {"amazonQ.telemetry": False},
            "workspace": {},
            "claude": {"claude.model": "sonnet"},
        }

    def test_unavailable_without_code_or_extensions(self, vscode_home):
        _, ext_dir = vscode_home
        ext_dir.rmdir()
        assert VSCodeInfoProbe().unavailable_reason == "VS Code not found"

    def test_collect_from_directories(self, vscode_home, tmp_path):
        user_dir, ext_dir = vscode_home
        q_dir = ext_dir / "amazonwebservices.amazon-q-vscode-1.40.0"
        q_dir.mkdir()
        (q_dir / "package.json").write_text(json.dumps({
            "displayName": "Amazon Q",
            "version": "1.40.0",
            "publisher": "AmazonWebServices",
            "engines": {"vscode": "^1.83.0"},
            "main": "./dist/extension.js",
        }))
        (ext_dir / "dart-code.dart-code-3.80.0").mkdir()
        (user_dir / "settings.json").write_text(json.dumps({"amazonQ.shareContentWithAWS": False, "x": 1}))
        workspace = tmp_path / "project"
        (workspace / ".vscode").mkdir(parents=True)
        (workspace / ".vscode" / "settings.json").write_text("{ not json")

        probe = VSCodeInfoProbe(workspace=workspace)
        assert probe.is_available()
        data = probe.collect().data

        assert data["version"] == "Not installed or not accessible"
        assert data["totalExtensions"] == 2
        assert data["errors"] == ["Command not found: code"]
        assert data["settings"] == {
            "user": {"amazonQ.shareContentWithAWS": False},
            "workspace": {},
            "claude": {},
        }
        assert data["amazonQ"]["metadata"] == {
            "displayName": "Amazon Q",
            "version": "1.40.0",
            "publisher": "AmazonWebServices",
            "engines": {"vscode": "^1.83.0"},
        }
        assert data["amazonQExtension"] == {"installed": True, "version": "1.40.0", "path": str(q_dir)}
        assert data["dart"] == {"id": "dart-code.dart-code", "version": "3.80.0"}
        assert data["claudeCode"] is None
        assert data["flutter"] is None

    def test_collect_uses_code_cli(self, vscode_home, monkeypatch, tmp_path):
        outputs = {
            "--version": "1.85.1\n0ee08df\nx64",
            "--list-extensions": "anthropic.claude-code@2.0.1\n",
        }
        monkeypatch.setattr(vscode_info, "run_command", lambda args, timeout=10: outputs[args[1]])
        data = VSCodeInfoProbe(workspace=tmp_path).collect().data

        assert data["version"] == "1.85.1"
        assert data["errors"] == []
        assert data["claudeCode"]["id"] == "anthropic.claude-code"
        assert data["claudeCode"]["metadata"] is None
        assert data["amazonQExtension"] == {"installed": False}


class TestExtensionLogs:
    @pytest.fixture
    def storage(self, tmp_path):
        storage = tmp_path / "workspaceStorage"
        files = {
            "ws1/amazonwebservices.amazon-q-vscode/logs/old.log": ("old entry", 1_700_000_000),
            "ws2/amazonwebservices.amazon-q-vscode/logs/new.txt": ("0123456789", 1_700_000_500),
            "ws2/amazonwebservices.amazon-q-vscode/logs/state.json": ("{}", 1_700_000_900),
            "ws1/anthropic.claude-code/logs/claude.log": ("claude", 1_700_000_100),
        }
        for rel, (content, mtime) in files.items():
            path = storage / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
            os.utime(path, (mtime, mtime))
        return storage

    def test_find_newest_first(self, storage):
        logs = find_extension_logs(storage, "amazonwebservices.amazon-q-vscode")
        assert [f.path.name for f in logs] == ["new.txt", "old.log"]

    def test_find_in_missing_storage(self, tmp_path):
        assert find_extension_logs(tmp_path / "missing", "anthropic.claude-code") == []

    def test_read_recent_truncates_and_limits(self, storage):
        logs = find_extension_logs(storage, "amazonwebservices.amazon-q-vscode")
        read_recent(logs, max_files=1, max_bytes=5)

        assert logs[0].content == "...[truncated]...\n56789"
        assert logs[1].content is None

    def test_read_recent_reports_errors(self, storage):
        logs = find_extension_logs(storage, "anthropic.claude-code")
        logs[0].path.unlink()
        read_recent(logs, max_files=5, max_bytes=100)

        assert logs[0].content.startswith("Error reading file: ")

    def test_collect(self, storage):
        data = ExtensionLogsProbe(storage=storage).collect().data

        assert [f["name"] for f in data["amazonQLogs"]] == ["new.txt", "old.log"]
        assert data["amazonQLogs"][1]["content"] == "old entry"
        assert data["amazonQLogs"][1]["modified"] == "2023-11-14T22:13:20+00:00"
        assert data["claudeCodeLogs"][0]["size"] == 6
        assert data["errors"] == []

    def test_collect_without_content(self, storage):
        data = ExtensionLogsProbe(storage=storage, include_content=False).collect().data
        assert "content" not in data["claudeCodeLogs"][0]

    def test_collect_missing_storage(self, tmp_path):
        missing = tmp_path / "nowhere"
        result = ExtensionLogsProbe(storage=missing).collect()

        assert result.data["amazonQLogs"] == []
        assert result.data["errors"] == [f"Workspace storage path not accessible: {missing}"]

    def test_default_storage_under_vscode_user_dir(self, monkeypatch, tmp_path):
        monkeypatch.setattr(extension_logs, "vscode_user_dir", lambda: tmp_path / "User")
        assert ExtensionLogsProbe().storage == tmp_path / "User" / "workspaceStorage"


class TestSystemInfo:
    def test_read_meminfo(self, tmp_path):
        meminfo = tmp_path / "meminfo"
        meminfo.write_text("MemTotal:       16384000 kB\nMemFree:  1024 kB\nMemAvailable:   8192000 kB\nHugePages_Total: 0\n")
        fields = system_info._read_meminfo(meminfo)

        assert fields["MemTotal"] == 16384000 * 1024
        assert fields["MemAvailable"] == 8192000 * 1024

    def test_darwin_free_bytes(self):
        vm_stat = (
            "Mach Virtual Memory Statistics: (page size of 16384 bytes)\n"
            "Pages free:                               10.\n"
            "Pages active:                            500.\n"
            "Pages inactive:                           20.\n"
        )
        assert system_info._darwin_free_bytes(vm_stat) == 30 * 16384

    def test_linux_drives(self, tmp_path):
        devices = {"nvme0n1": "0", "sda": "1", "loop0": "0", "zram0": "0"}
        for name, rotational in devices.items():
            queue = tmp_path / name / "queue"
            queue.mkdir(parents=True)
            (queue / "rotational").write_text(rotational + "\n")
            (tmp_path / name / "size").write_text(str(2 * 1024 ** 3 // 512) + "\n")
        (tmp_path / "sdb").mkdir()

        assert system_info._linux_drives(tmp_path) == [
            {"name": "nvme0n1", "type": "SSD", "sizeGB": 2.0},
            {"name": "sda", "type": "HDD", "sizeGB": 2.0},
        ]

    def test_first(self):
        assert system_info._first([{"Name": "cpu"}, {"Name": "other"}]) == {"Name": "cpu"}
        assert system_info._first({"Name": "cpu"}) == {"Name": "cpu"}
        assert system_info._first(None) == {}

    def test_collect_shape(self):
        result = SystemInfoProbe().collect()

        assert set(result.data) == {"os", "cpu", "memory", "disk"}
        assert set(result.data["os"]) == {"name", "release", "version", "arch"}
        assert result.data["cpu"]["logicalCores"] >= 1
        assert "drives" in result.data["disk"]
        assert result.summary
