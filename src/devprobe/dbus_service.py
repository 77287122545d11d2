"""D-Bus service exposing devprobe tools on the session bus.

D-Bus methods use PascalCase per D-Bus convention, and type signatures
like "s" are D-Bus protocol types, not Python syntax.
"""

from __future__ import annotations

import asyncio
import json
import logging

from dbus_next import BusType
from dbus_next.aio import MessageBus
from dbus_next.service import ServiceInterface, method

from devprobe.core.probe_loader import load_probes
from devprobe.core.registry import ProbeRegistry
from devprobe.core.tools import Toolbox, ToolResponse

log = logging.getLogger(__name__)

_BUS_NAME = "io.github.devprobe"
_OBJECT_PATH = "/io/github/devprobe"
_INTERFACE = "io.github.devprobe.Tools"


def _decode_arguments(arguments_json: str) -> dict | None:
    if not arguments_json.strip():
        return {}
    try:
        arguments = json.loads(arguments_json)
    except json.JSONDecodeError:
        return None
    return arguments if isinstance(arguments, dict) else None


def _encode_response(response: ToolResponse) -> str:
    return json.dumps({"text": response.text, "isError": response.is_error})


# noinspection PyPep8Naming
class DevprobeDBusService(ServiceInterface):
    """Stateless request/response interface over the devprobe toolbox."""

    def __init__(self, toolbox: Toolbox | None = None) -> None:
        super().__init__(_INTERFACE)
        if toolbox is None:
            registry = ProbeRegistry()
            load_probes(registry)
            toolbox = Toolbox(registry)
        self._toolbox = toolbox

    @method()
    def ListTools(self) -> "s":  # type: ignore[override]
        """List tool definitions as JSON."""
        return json.dumps(self._toolbox.list())

    @method()
    def CallTool(self, name: "s", arguments_json: "s") -> "s":  # type: ignore[override]
        """Call a tool with JSON-encoded arguments; returns {"text", "isError"}."""
        arguments = _decode_arguments(arguments_json)
        if arguments is None:
            error = ToolResponse(text=json.dumps({"error": "Arguments must be a JSON object"}), is_error=True)
            return _encode_response(error)
        log.info("CallTool %s", name)
        return _encode_response(self._toolbox.call(name, arguments))


async def run_service() -> None:
    """Start the D-Bus service."""
    bus = await MessageBus(bus_type=BusType.SESSION).connect()
    service = DevprobeDBusService()
    bus.export(_OBJECT_PATH, service)
    await bus.request_name(_BUS_NAME)
    log.info("D-Bus service started on %s", _BUS_NAME)
    await bus.wait_for_disconnect()


def start_service() -> None:
    """Entry point to start the D-Bus service."""
    asyncio.run(run_service())
