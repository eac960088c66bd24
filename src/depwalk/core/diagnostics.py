"""Diagnostics: uniform reporting of snapshot and resolution problems.

Diagnostics are accumulated, never raised. Two producers feed them:

- Lock snapshot validation (missing, unreadable, wrong format version,
  fingerprint drift against the manifest).
- The resolved dependency graph (unresolved libraries, cycles, version
  conflicts between requesters).

``DiagnosticsAggregator`` computes each view lazily, at most once, and
returns the same tuple on every call.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from pathlib import Path
from typing import Callable, Iterable

from depwalk.core.dependency.graph import DependencyGraph
from depwalk.core.once import ComputeOnce


class Severity(IntEnum):
    """Diagnostic severity. The integer encoding orders WARNING < ERROR."""

    WARNING = 1
    ERROR = 2


class DiagnosticCode(str, Enum):
    """The condition a diagnostic reports."""

    MISSING_SNAPSHOT = "missing-snapshot"
    SNAPSHOT_FORMAT_MISMATCH = "snapshot-format-mismatch"
    SNAPSHOT_FINGERPRINT_MISMATCH = "snapshot-fingerprint-mismatch"
    UNRESOLVED_LIBRARY = "unresolved-library"
    CYCLIC_DEPENDENCY = "cyclic-dependency"
    VERSION_CONFLICT = "version-conflict"


@dataclass(frozen=True)
class Diagnostic:
    """A single reported problem.

    Attributes:
        message: Human-readable description, actionable where possible.
        source_path: File the problem should be attributed to (manifest or
            lock snapshot).
        severity: ERROR or WARNING.
        code: The taxonomy entry this diagnostic belongs to.
    """

    message: str
    source_path: str
    severity: Severity
    code: DiagnosticCode

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    def __str__(self) -> str:
        return f"{self.source_path}: {self.severity.name.lower()}: {self.message}"


RESTORE_ADVICE = "Please run restore to generate a new lock snapshot."


def missing_snapshot_diagnostic(lock_path: Path, reason: str | None = None) -> Diagnostic:
    """The single error reported when no usable snapshot exists."""
    if reason is None:
        message = f"The expected lock snapshot doesn't exist. {RESTORE_ADVICE}"
    else:
        message = f"The lock snapshot could not be read ({reason}). {RESTORE_ADVICE}"
    return Diagnostic(
        message=message,
        source_path=str(lock_path),
        severity=Severity.ERROR,
        code=DiagnosticCode.MISSING_SNAPSHOT,
    )


def graph_diagnostics(graph: DependencyGraph, manifest_path: Path) -> list[Diagnostic]:
    """Report problems found in a walked graph.

    Order: unresolved libraries (walk order), cycles, version conflicts.
    """
    source = str(manifest_path)
    results: list[Diagnostic] = []

    for node in graph.unresolved():
        requests = graph.requests_for(node.name)
        if requests:
            requesters = ", ".join(sorted({requester for requester, _ in requests}))
            wanted = str(requests[0][1])
            message = (
                f"The dependency {wanted} could not be resolved "
                f"(required by {requesters})."
            )
        else:
            message = f"The dependency {node.identity} could not be resolved."
        results.append(
            Diagnostic(message, source, Severity.ERROR, DiagnosticCode.UNRESOLVED_LIBRARY)
        )

    for cycle in graph.cycles:
        results.append(
            Diagnostic(
                f"Cyclic dependency detected: {' -> '.join(cycle)}",
                source,
                Severity.WARNING,
                DiagnosticCode.CYCLIC_DEPENDENCY,
            )
        )

    for conflict in graph.conflicts:
        results.append(
            Diagnostic(
                f"{conflict.requester} requires {conflict.requested} but "
                f"{conflict.selected} was selected",
                source,
                Severity.WARNING,
                DiagnosticCode.VERSION_CONFLICT,
            )
        )

    return results


class DiagnosticsAggregator:
    """Collects snapshot and graph diagnostics behind compute-once cells.

    Args:
        snapshot_source: Produces the snapshot diagnostics (either the single
            "run restore" error or the validation results).
        graph_source: Produces the diagnostics of the walked graph.

    Each source is invoked at most once, even under concurrent access, and
    every accessor returns the same tuple instance on repeated calls.
    """

    def __init__(
        self,
        snapshot_source: Callable[[], Iterable[Diagnostic]],
        graph_source: Callable[[], Iterable[Diagnostic]],
    ) -> None:
        self._snapshot = ComputeOnce(lambda: tuple(snapshot_source()))
        self._graph = ComputeOnce(lambda: tuple(graph_source()))
        self._all = ComputeOnce(lambda: self._snapshot.get() + self._graph.get())

    def snapshot_diagnostics(self) -> tuple[Diagnostic, ...]:
        return self._snapshot.get()

    def dependency_diagnostics(self) -> tuple[Diagnostic, ...]:
        return self._graph.get()

    def all_diagnostics(self) -> tuple[Diagnostic, ...]:
        """Snapshot diagnostics followed by graph diagnostics."""
        return self._all.get()

    @property
    def has_errors(self) -> bool:
        return any(d.is_error for d in self.all_diagnostics())
