"""depwalk CLI: Report dependency resolution for a project.

Entry point for the ``depwalk`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    resolve   Resolve a project's dependency graph and print diagnostics.
    snapshot  Summarize, check, and diff lock snapshot files.

Usage::

    depwalk resolve ./src/App --runtime py312
    depwalk resolve ./src/App --runtime py312 --tolerate-stale --format json
    depwalk snapshot ./src/App/project.lock.json --diff new.lock.json
"""

from __future__ import annotations

import logging

import click

from depwalk import __version__
from depwalk.cli.resolve import resolve_command
from depwalk.cli.snapshot_cmd import snapshot_command


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", count=True, help="Log provider decisions (-vv for debug).")
def cli(verbose: int) -> None:
    """depwalk: Multi-provider dependency resolution with lock snapshot validation."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG if verbose > 1 else logging.INFO,
            format="%(levelname)s %(name)s: %(message)s",
        )


# Register all subcommands
cli.add_command(resolve_command)
cli.add_command(snapshot_command)
