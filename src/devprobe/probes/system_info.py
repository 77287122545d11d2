"""Probe reporting OS, CPU, memory and disk information."""

from __future__ import annotations

import json
import logging
import os
import platform
import re
import shutil
from pathlib import Path
from typing import Any

from devprobe.models.probe import Probe
from devprobe.models.probe_result import ProbeResult
from devprobe.utils import CommandError, bytes_to_gb, run_command

log = logging.getLogger(__name__)

_MEMINFO = Path("/proc/meminfo")
_CPUINFO = Path("/proc/cpuinfo")
_SYS_BLOCK = Path("/sys/block")

# Virtual block devices that never back a real disk.
_VIRTUAL_BLOCK_PREFIXES = ("loop", "ram", "zram", "dm-", "sr", "md")


def _powershell_json(command: str) -> Any:
    """Run a PowerShell command that ends in ConvertTo-Json and parse it."""
    output = run_command(["powershell", "-NoProfile", "-Command", command], timeout=30)
    try:
        return json.loads(output) if output else None
    except json.JSONDecodeError as exc:
        raise CommandError(f"Unexpected PowerShell output: {exc}")


def _first(data: Any) -> dict[str, Any]:
    """PowerShell returns an object for one result and a list for many."""
    if isinstance(data, list):
        return data[0] if data and isinstance(data[0], dict) else {}
    return data if isinstance(data, dict) else {}


def _read_meminfo(path: Path = _MEMINFO) -> dict[str, int]:
    """Parse /proc/meminfo into bytes per field."""
    fields: dict[str, int] = {}
    for line in path.read_text().splitlines():
        match = re.match(r"^(\w+):\s+(\d+)(?:\s+kB)?", line)
        if match:
            fields[match.group(1)] = int(match.group(2)) * 1024
    return fields


class SystemInfoProbe(Probe):
    """Collects hardware details using only portable sources where possible."""

    id = "system_info"
    name = "System Hardware"
    description = "Operating system, CPU model and cores, memory and disk information."
    category = "hardware"
    sort_order = 10

    def collect(self) -> ProbeResult:
        system = platform.system()
        data = {
            "os": self._os_info(),
            "cpu": self._cpu_info(system),
            "memory": self._memory_info(system),
            "disk": self._disk_info(system),
        }
        cpu = data["cpu"]
        memory = data["memory"]
        summary = (
            f"{data['os']['name']} {data['os']['release']}, "
            f"{cpu['logicalCores']} logical cores, {memory.get('totalGB', '?')} GB RAM"
        )
        return self._result(data, summary)

    @staticmethod
    def _os_info() -> dict[str, str]:
        return {
            "name": platform.system() or "Unknown",
            "release": platform.release() or "Unknown",
            "version": platform.version() or "Unknown",
            "arch": platform.machine() or "Unknown",
        }

    def _cpu_info(self, system: str) -> dict[str, Any]:
        return {
            "name": self._cpu_model(system),
            "logicalCores": os.cpu_count() or 0,
        }

    @staticmethod
    def _cpu_model(system: str) -> str:
        try:
            if system == "Linux":
                for line in _CPUINFO.read_text().splitlines():
                    if line.startswith("model name"):
                        return line.split(":", 1)[1].strip()
            elif system == "Darwin":
                return run_command(["sysctl", "-n", "machdep.cpu.brand_string"])
            elif system == "Windows":
                cpu = _first(_powershell_json(
                    "Get-CimInstance Win32_Processor | Select-Object Name | ConvertTo-Json"
                ))
                if cpu.get("Name"):
                    return cpu["Name"]
        except (OSError, CommandError) as exc:
            log.debug("Cannot read CPU model: %s", exc)
        return platform.processor() or "Unknown"

    @staticmethod
    def _memory_info(system: str) -> dict[str, float]:
        try:
            if system == "Linux":
                fields = _read_meminfo()
                total = fields.get("MemTotal", 0)
                available = fields.get("MemAvailable", fields.get("MemFree", 0))
            elif system == "Darwin":
                total = int(run_command(["sysctl", "-n", "hw.memsize"]))
                available = _darwin_free_bytes(run_command(["vm_stat"]))
            elif system == "Windows":
                mem = _first(_powershell_json(
                    "Get-CimInstance Win32_OperatingSystem | "
                    "Select-Object TotalVisibleMemorySize,FreePhysicalMemory | ConvertTo-Json"
                ))
                total = int(mem.get("TotalVisibleMemorySize") or 0) * 1024
                available = int(mem.get("FreePhysicalMemory") or 0) * 1024
            else:
                return {}
        except (OSError, ValueError, CommandError) as exc:
            log.debug("Cannot read memory info: %s", exc)
            return {}
        return {"totalGB": bytes_to_gb(total), "availableGB": bytes_to_gb(available)}

    @staticmethod
    def _disk_info(system: str) -> dict[str, Any]:
        root = Path(os.environ.get("SystemDrive", "C:") + "\\") if system == "Windows" else Path("/")
        info: dict[str, Any] = {"drives": []}
        try:
            usage = shutil.disk_usage(root)
            info["totalSpaceGB"] = bytes_to_gb(usage.total)
            info["freeSpaceGB"] = bytes_to_gb(usage.free)
        except OSError as exc:
            log.debug("Cannot read disk usage of %s: %s", root, exc)

        try:
            if system == "Linux":
                info["drives"] = _linux_drives()
            elif system == "Windows":
                info["drives"] = _windows_drives()
        except (OSError, CommandError) as exc:
            log.debug("Cannot list drives: %s", exc)
        return info


def _darwin_free_bytes(vm_stat: str) -> int:
    """Free + inactive pages from ``vm_stat`` output, in bytes."""
    page_size = 4096
    match = re.search(r"page size of (\d+) bytes", vm_stat)
    if match:
        page_size = int(match.group(1))
    pages = 0
    for key in ("Pages free", "Pages inactive"):
        found = re.search(rf"{key}:\s+(\d+)", vm_stat)
        if found:
            pages += int(found.group(1))
    return pages * page_size


def _linux_drives(sys_block: Path = _SYS_BLOCK) -> list[dict[str, Any]]:
    """Describe physical block devices using sysfs."""
    drives = []
    for device in sorted(sys_block.iterdir()):
        if device.name.startswith(_VIRTUAL_BLOCK_PREFIXES):
            continue
        try:
            rotational = (device / "queue" / "rotational").read_text().strip()
            sectors = int((device / "size").read_text().strip() or 0)
        except (OSError, ValueError):
            log.debug("Cannot read block device: %s", device)
            continue
        drives.append({
            "name": device.name,
            "type": "HDD" if rotational == "1" else "SSD",
            "sizeGB": bytes_to_gb(sectors * 512),
        })
    return drives


def _windows_drives() -> list[dict[str, Any]]:
    data = _powershell_json("Get-PhysicalDisk | Select-Object FriendlyName,MediaType,Size | ConvertTo-Json")
    disks = data if isinstance(data, list) else [data] if isinstance(data, dict) else []
    return [
        {
            "name": d.get("FriendlyName") or "Unknown",
            "type": d.get("MediaType") or "Unknown",
            "sizeGB": bytes_to_gb(d.get("Size") or 0),
        }
        for d in disks
        if isinstance(d, dict)
    ]
