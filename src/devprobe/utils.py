"""Shared utility functions."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys
from pathlib import Path

log = logging.getLogger(__name__)

# Default timeout for external commands (seconds).
_COMMAND_TIMEOUT = 10


class CommandError(Exception):
    """Raised when an external command is missing, fails or times out."""


def has_command(name: str) -> bool:
    """Check if a command exists on the system."""
    return shutil.which(name) is not None


def run_command(args: list[str], timeout: float = _COMMAND_TIMEOUT) -> str:
    """Run a command and return its trimmed output.

    Some tools (``java -version``) print to stderr only, so stderr is
    returned when stdout is empty.

    Raises:
        CommandError: If the executable is missing, exits non-zero or
            does not finish within *timeout* seconds.
    """
    log.debug("Running: %s", " ".join(args))
    try:
        proc = subprocess.run(args, capture_output=True, text=True, timeout=timeout)
    except FileNotFoundError:
        raise CommandError(f"Command not found: {args[0]}")
    except subprocess.TimeoutExpired:
        raise CommandError(f"Command timed out after {timeout}s: {' '.join(args)}")
    except OSError as exc:
        raise CommandError(f"Cannot run {args[0]}: {exc}")

    if proc.returncode != 0:
        stderr = (proc.stderr or "").strip()
        raise CommandError(f"{' '.join(args)} failed (exit {proc.returncode}): {stderr}")

    return (proc.stdout or "").strip() or (proc.stderr or "").strip()


def xdg_config_home() -> Path:
    """Return XDG_CONFIG_HOME, defaulting to ~/.config."""
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))


def xdg_data_home() -> Path:
    """Return XDG_DATA_HOME, defaulting to ~/.local/share."""
    return Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share"))


def bytes_to_mb(size_bytes: int) -> float:
    """Convert bytes to megabytes rounded to 2 decimals."""
    return round(size_bytes / (1024 * 1024), 2)


def bytes_to_gb(size_bytes: float) -> float:
    """Convert bytes to gigabytes rounded to 2 decimals."""
    return round(size_bytes / (1024 ** 3), 2)


def vscode_user_dir() -> Path:
    """Return the VS Code per-user data directory (``.../Code/User``)."""
    home = Path.home()
    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA")
        base = Path(appdata) if appdata else home / "AppData" / "Roaming"
    elif sys.platform == "darwin":
        base = home / "Library" / "Application Support"
    else:
        base = xdg_config_home()
    return base / "Code" / "User"


def vscode_extensions_dir() -> Path:
    """Return the directory VS Code installs extensions into."""
    return Path.home() / ".vscode" / "extensions"
