"""CLI interface for devprobe."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click

from devprobe.core.comparison import compare_profiles
from devprobe.core.engine import ProbeEngine
from devprobe.core.log_scan import scan_logs
from devprobe.core.probe_loader import load_probes
from devprobe.core.registry import ProbeRegistry
from devprobe.core.tools import Toolbox
from devprobe.core.workspace import workspace_stats


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _build_registry() -> ProbeRegistry:
    registry = ProbeRegistry()
    load_probes(registry)
    return registry


def _echo_json(data) -> None:
    click.echo(json.dumps(data, indent=2, default=str))


@click.group()
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug)")
def main(verbose: int) -> None:
    """devprobe: diagnostics for a developer machine."""
    _setup_logging(verbose)


# ── workspace ────────────────────────────────────────────────────────────

@main.command()
@click.argument("root", type=click.Path(file_okay=False, path_type=Path))
@click.option("--max-files", "-n", type=click.IntRange(min=1), default=None, help="File budget (default 20000)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def workspace(root: Path, max_files: int | None, as_json: bool) -> None:
    """Count files, size major directories and score ROOT's complexity."""
    stats = workspace_stats(root, max_files)

    if as_json:
        _echo_json(stats.to_dict())
        return

    if not stats.root_accessible:
        click.echo(click.style(f"Cannot read {root}", fg="red"), err=True)
        sys.exit(1)

    stopped = click.style(" (budget reached, scan stopped early)", fg="yellow") if stats.scan_stopped else ""
    click.echo(f"\n  Files:       {stats.total_files:,}{stopped}")
    click.echo(f"  Complexity:  {click.style(str(stats.complexity_score), fg='cyan', bold=True)} / 20")
    if stats.directory_sizes:
        click.echo("  Major directories:")
        for name, size_mb in sorted(stats.directory_sizes.items(), key=lambda x: x[1], reverse=True):
            click.echo(f"    {name:25s} {size_mb:>10.2f} MB")
    click.echo()


# ── logs ─────────────────────────────────────────────────────────────────

@main.command()
@click.argument("root", type=click.Path(file_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def logs(root: Path, as_json: bool) -> None:
    """Scan log files under ROOT for warnings, errors and slowness."""
    result = scan_logs(root)

    if as_json:
        _echo_json(result.to_dict())
        return

    if not result.root_accessible:
        click.echo(click.style(f"Cannot read {root}", fg="red"), err=True)
        sys.exit(1)

    click.echo(f"\n  {result.summary}")
    if result.total_files > len(result.scanned_files):
        click.echo(click.style(
            f"  Only the first {len(result.scanned_files)} of {result.total_files} log files were read.",
            fg="yellow",
        ))
    if result.performance_issues:
        click.echo("\n  Recent performance-related entries:")
        for line in result.performance_issues:
            click.echo(f"    {line}")
    click.echo()


# ── probe / list ─────────────────────────────────────────────────────────

@main.command()
@click.argument("probe_ids", nargs=-1)
@click.option("--category", "-c", default=None, help="Run all probes in this category")
def probe(probe_ids: tuple[str, ...], category: str | None) -> None:
    """Run diagnostic probes and print their results as JSON."""
    engine = ProbeEngine(_build_registry())
    results = engine.collect(probe_ids=list(probe_ids) or None, category=category)
    _echo_json([r.to_dict() for r in results])
    if any(r.error for r in results):
        sys.exit(1)


@main.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_cmd(as_json: bool) -> None:
    """List probes and whether they work on this system."""
    registry = _build_registry()

    if as_json:
        _echo_json([
            {
                "id": p.id,
                "name": p.name,
                "description": p.description,
                "category": p.category,
                "available": registry.is_available(p.id),
                "unavailable_reason": None if registry.is_available(p.id) else p.unavailable_reason,
                "source": registry.source(p.id),
            }
            for p in registry
        ])
        return

    for p in registry:
        status = click.style("available", fg="green") if registry.is_available(p.id) else click.style(
            f"not available ({p.unavailable_reason})", fg="bright_black"
        )
        click.echo(f"  {click.style(p.id, fg='cyan', bold=True):30s} {p.category:12s} {status}")
        click.echo(f"    {p.description}")


# ── compare ──────────────────────────────────────────────────────────────

@main.command()
@click.argument("this_profile", type=click.File("r"))
@click.argument("other_profile", type=click.File("r"))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def compare(this_profile, other_profile, as_json: bool) -> None:
    """Explain why this machine is faster or slower than another.

    Both arguments are JSON machine profiles (system, vscode, workspace).
    """
    try:
        this = json.load(this_profile)
        other = json.load(other_profile)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"Invalid profile JSON: {exc}")
    if not isinstance(this, dict) or not isinstance(other, dict):
        raise click.BadParameter("Profiles must be JSON objects")

    result = compare_profiles(this, other)
    if as_json:
        _echo_json(result.to_dict())
        return

    click.echo(f"\n  {result.summary}\n")
    for line in result.advantages:
        click.echo(f"  {click.style('+', fg='green')} {line}")
    for line in result.recommendations:
        click.echo(f"  {click.style('→', fg='yellow')} {line}")
    click.echo()


# ── tools ────────────────────────────────────────────────────────────────

@main.group()
def tools() -> None:
    """Named tool interface (same tools as the D-Bus service)."""


@tools.command("list")
def tools_list() -> None:
    """List tool definitions as JSON."""
    _echo_json(Toolbox(_build_registry()).list())


@tools.command("call")
@click.argument("name")
@click.option("--args", "args_json", default="{}", help="Tool arguments as a JSON object")
def tools_call(name: str, args_json: str) -> None:
    """Call tool NAME and print its JSON response."""
    try:
        arguments = json.loads(args_json)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"Invalid JSON: {exc}", param_hint="--args")

    response = Toolbox(_build_registry()).call(name, arguments)
    click.echo(response.text)
    if response.is_error:
        sys.exit(1)


# ── service ──────────────────────────────────────────────────────────────

@main.group()
def service() -> None:
    """D-Bus service management."""


@service.command("start")
def service_start() -> None:
    """Start the D-Bus service in foreground."""
    from devprobe.dbus_service import start_service

    click.echo("Starting devprobe D-Bus service...")
    start_service()
