"""``depwalk resolve <path>``: Resolve a project's dependency graph and report problems.

Loads the project in PATH, validates its lock snapshot, walks the full
dependency graph through the provider chain, and prints the graph followed
by every diagnostic.

Exit Codes:
    0: Resolution produced no error diagnostics (warnings allowed).
    1: At least one error diagnostic (stale snapshot, unresolved library).
    2: The project or its provider configuration could not be loaded.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from depwalk.cli.output import (
    diagnostic_to_dict,
    graph_to_dict,
    print_diagnostics,
    print_graph,
    print_json,
)
from depwalk.config import DEFAULT_FEED_TIMEOUT, HostConfig
from depwalk.exceptions import DepwalkError
from depwalk.host import ProjectHost


@click.command("resolve")
@click.argument("path", type=click.Path(exists=True, file_okay=False))
@click.option(
    "--runtime", "-r", "runtime_profile",
    required=True,
    envvar="DEPWALK_RUNTIME",
    help="Target runtime profile identifier.",
)
@click.option(
    "--packages",
    type=click.Path(file_okay=False),
    default=None,
    envvar="DEPWALK_PACKAGES",
    help="Packages directory (default: from global.yaml, else <root>/packages).",
)
@click.option(
    "--runtime-dir",
    type=click.Path(file_okay=False),
    default=None,
    envvar="DEPWALK_RUNTIME_DIR",
    help="Directory of <profile>.yaml runtime profile definitions.",
)
@click.option(
    "--shared-cache",
    type=click.Path(file_okay=False),
    default=None,
    envvar="DEPWALK_SHARED_CACHE",
    help="Machine-wide shared library cache directory.",
)
@click.option(
    "--feed",
    default=None,
    envvar="DEPWALK_FEED_URL",
    help="Base URL of a JSON package feed (disabled when omitted).",
)
@click.option(
    "--feed-timeout",
    type=float,
    default=DEFAULT_FEED_TIMEOUT,
    show_default=True,
    help="Seconds allowed per feed lookup.",
)
@click.option(
    "--tolerate-stale",
    is_flag=True,
    default=False,
    help="Keep using a lock snapshot whose fingerprint no longer matches.",
)
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format: text (default) or json.",
)
def resolve_command(
    path: str,
    runtime_profile: str,
    packages: str | None,
    runtime_dir: str | None,
    shared_cache: str | None,
    feed: str | None,
    feed_timeout: float,
    tolerate_stale: bool,
    output_format: str,
) -> None:
    """Resolve the dependency graph of the project in PATH.

    Exit code 0 when there are no errors, 1 on error diagnostics, 2 if the
    project manifest or a provider configuration cannot be loaded.
    """
    config = HostConfig(
        project_dir=Path(path),
        runtime_profile=runtime_profile,
        packages_dir=Path(packages) if packages else None,
        tolerate_stale_snapshot=tolerate_stale,
        runtime_dir=Path(runtime_dir) if runtime_dir else None,
        shared_cache_dir=Path(shared_cache) if shared_cache else None,
        feed_url=feed,
        feed_timeout=feed_timeout,
    )
    try:
        host = ProjectHost(config)
    except DepwalkError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    try:
        diagnostics = host.get_all_diagnostics()
        if output_format == "json":
            print_json({
                "project": str(host.project.identity),
                "runtime_profile": runtime_profile,
                "providers": host.chain.describe(),
                "graph": graph_to_dict(host.graph),
                "diagnostics": [diagnostic_to_dict(d) for d in diagnostics],
            })
        else:
            print_graph(host.graph, runtime_profile)
            print_diagnostics(diagnostics)
    finally:
        host.close()

    sys.exit(1 if host.diagnostics.has_errors else 0)
