"""``depwalk snapshot <file>``: Inspect a lock snapshot.

Prints the snapshot's fingerprint and libraries, runs the internal
consistency checks, and optionally compares it with another snapshot.

Exit Codes:
    0: Snapshot is readable and consistent.
    1: Snapshot has consistency errors or a different format version.
    2: Snapshot could not be read.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from depwalk.cli.output import print_json, print_snapshot_diff, print_snapshot_summary
from depwalk.core.lockfile import LockSnapshot
from depwalk.exceptions import LockSnapshotError


def _load(path: str) -> LockSnapshot:
    try:
        return LockSnapshot.read(Path(path))
    except (OSError, LockSnapshotError) as exc:
        click.echo(f"Error: cannot read {path}: {exc}", err=True)
        sys.exit(2)


@click.command("snapshot")
@click.argument("lock_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--diff", "other",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Compare against another snapshot (e.g., a freshly restored one).",
)
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format: text (default) or json.",
)
def snapshot_command(lock_file: str, other: str | None, output_format: str) -> None:
    """Summarize and check the lock snapshot LOCK_FILE."""
    snapshot = _load(lock_file)
    errors = snapshot.validate()
    if not snapshot.format_matches:
        errors.insert(0, f"Unsupported format version {snapshot.format_version}")
    diff = snapshot.diff(_load(other)) if other else None

    if output_format == "json":
        data = snapshot.to_dict()
        data["errors"] = errors
        if diff is not None:
            data["diff"] = diff
        print_json(data)
    else:
        print_snapshot_summary(snapshot, errors)
        if diff is not None:
            print_snapshot_diff(diff)

    sys.exit(1 if errors else 0)
