"""Rich output formatting helpers for the depwalk CLI.

Provides consistent terminal output for resolved graphs, diagnostics and
lock snapshot summaries, plus the JSON shapes used by ``--format json``.

Style mapping:
    Sources: project = bold green, cache = cyan, runtime = blue,
    shared cache = magenta, feed = yellow, unresolved = bold red.
    Severities: ERROR = bold red, WARNING = yellow.
"""

from __future__ import annotations

import json
from typing import Any

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from depwalk.core.dependency.graph import DependencyGraph, LibrarySource
from depwalk.core.diagnostics import Diagnostic, Severity
from depwalk.core.lockfile import LockSnapshot

_SOURCE_STYLES: dict[LibrarySource, str] = {
    LibrarySource.PROJECT: "bold green",
    LibrarySource.CACHE: "cyan",
    LibrarySource.RUNTIME: "blue",
    LibrarySource.SHARED_CACHE: "magenta",
    LibrarySource.FEED: "yellow",
    LibrarySource.UNRESOLVED: "bold red",
}

_SEVERITY_STYLES: dict[Severity, str] = {
    Severity.ERROR: "bold red",
    Severity.WARNING: "yellow",
}

console = Console()


def source_style(source: LibrarySource) -> str:
    """Return the Rich style string for a resolution source."""
    return _SOURCE_STYLES.get(source, "white")


def print_graph(graph: DependencyGraph, runtime_profile: str) -> None:
    """Print every library in walk order with its source and dependents."""
    table = Table(
        title=f"Dependencies of {graph.root_name} ({runtime_profile})",
        show_header=True,
        header_style="bold",
    )
    table.add_column("Library", style="bold")
    table.add_column("Version")
    table.add_column("Source", justify="center")
    table.add_column("Required By", style="dim")

    for node in graph:
        dependents = ", ".join(d.name for d in graph.dependents_of(node.name)) or "-"
        table.add_row(
            node.name,
            node.version,
            Text(node.source.value, style=source_style(node.source)),
            dependents,
        )
    console.print(table)


def print_diagnostics(diagnostics: tuple[Diagnostic, ...] | list[Diagnostic]) -> None:
    """Print diagnostics, or a success panel when there are none."""
    if not diagnostics:
        console.print(Panel("[bold green]No problems found[/bold green]", title="Diagnostics"))
        return

    errors = sum(1 for d in diagnostics if d.is_error)
    warnings = len(diagnostics) - errors
    title_style = "bold red" if errors else "yellow"
    console.print(
        Panel(
            f"[{title_style}]{errors} error(s), {warnings} warning(s)[/{title_style}]",
            title="Diagnostics",
        )
    )
    for diag in diagnostics:
        style = _SEVERITY_STYLES[diag.severity]
        console.print(
            f"  [{style}]{diag.severity.name}[/{style}] "
            f"[dim]{diag.source_path}[/dim]\n    {diag.message}"
        )


def print_snapshot_summary(snapshot: LockSnapshot, errors: list[str]) -> None:
    """Print a lock snapshot's fingerprint, libraries and consistency errors."""
    fp = snapshot.fingerprint
    header = (
        f"[bold]{fp.name}@{fp.version}[/bold]  profile: {snapshot.runtime_profile or '-'}"
        if fp is not None
        else "[dim]no fingerprint[/dim]"
    )
    console.print(
        Panel(header, title=f"Lock snapshot (format {snapshot.format_version})")
    )

    table = Table(show_header=True, header_style="bold")
    table.add_column("Library", style="bold")
    table.add_column("Version")
    table.add_column("Source")
    table.add_column("Dependencies", style="dim")
    for library in snapshot.libraries:
        table.add_row(
            library.name,
            library.version,
            library.source,
            ", ".join(sorted(library.dependencies)) or "-",
        )
    console.print(table)

    if errors:
        console.print("[bold red]Consistency errors:[/bold red]")
        for error in errors:
            console.print(f"  [red]- {error}[/red]")


def print_snapshot_diff(diff: dict[str, Any]) -> None:
    """Print the result of ``LockSnapshot.diff``."""
    if not (diff["added"] or diff["removed"] or diff["changed"]):
        console.print("[dim]Snapshots are identical.[/dim]")
        return
    for name in diff["added"]:
        console.print(f"  [green]+ {name}[/green]")
    for name in diff["removed"]:
        console.print(f"  [red]- {name}[/red]")
    for change in diff["changed"]:
        console.print(
            f"  [yellow]~ {change['name']}[/yellow] {change['field']}: "
            f"{change['old']} -> {change['new']}"
        )


def graph_to_dict(graph: DependencyGraph) -> dict[str, Any]:
    """JSON-ready representation of a resolved graph."""
    return {
        "root": graph.root_name,
        "libraries": [
            {
                "name": node.name,
                "version": node.version,
                "source": node.source.value,
                "path": node.path,
                "dependencies": [d.name for d in graph.dependencies_of(node.name)],
            }
            for node in graph
        ],
        "cycles": graph.cycles,
    }


def diagnostic_to_dict(diag: Diagnostic) -> dict[str, Any]:
    return {
        "severity": diag.severity.name.lower(),
        "code": diag.code.value,
        "message": diag.message,
        "source_path": diag.source_path,
    }


def print_json(data: Any) -> None:
    """Print data as formatted JSON, unstyled so it stays machine-readable."""
    click.echo(json.dumps(data, indent=2, default=str))
