"""Dependency graph data structure and graph algorithms.

Implements the resolved dependency graph: library description nodes keyed by
name (one authoritative resolution per library), resolved edges between
them, cycle detection, transitive dependency computation (BFS), and reverse
lookups used by diagnostics and reporting.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from depwalk.core.dependency.constraints import LibraryIdentity, LibraryRange


# ---------------------------------------------------------------------------
# LibrarySource: Where a description came from
# ---------------------------------------------------------------------------


class LibrarySource(str, Enum):
    """Resolution source tag carried by every library description.

    The string values are the tags persisted in lock snapshots.
    """

    PROJECT = "local-project-reference"
    CACHE = "cache-resolved"
    RUNTIME = "runtime-reference"
    SHARED_CACHE = "system-shared-cache"
    FEED = "feed-reference"
    UNRESOLVED = "unresolved"


# ---------------------------------------------------------------------------
# LibraryDescription: A vertex in the graph
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LibraryDescription:
    """A resolved (or placeholder) library as produced by a provider.

    Immutable once produced: providers hand these to the walker, which only
    links them together.

    Attributes:
        identity: The library name and the version the provider selected.
        source: Which provider variant produced the description.
        dependencies: Outgoing dependency edges, in declaration order.
        path: Optional locator (project directory, package directory, ...).
    """

    identity: LibraryIdentity
    source: LibrarySource
    dependencies: tuple[LibraryRange, ...] = ()
    path: str | None = None

    @property
    def name(self) -> str:
        return self.identity.name

    @property
    def version(self) -> str:
        return self.identity.version

    @property
    def resolved(self) -> bool:
        """False only for placeholders produced by the unresolved provider."""
        return self.source is not LibrarySource.UNRESOLVED


@dataclass(frozen=True)
class VersionConflict:
    """A requester whose constraint the already-selected library misses.

    The walker never re-resolves on conflict; the record exists so the
    disagreement can be reported.
    """

    requester: str
    requested: LibraryRange
    selected: LibraryIdentity


# ---------------------------------------------------------------------------
# DependencyGraph
# ---------------------------------------------------------------------------


class DependencyGraph:
    """The resolved dependency graph of one project for one runtime profile.

    Invariant: each library name appears at most once. All requesters of a
    name link to that single node, whatever constraints they declared.
    Cycles may exist among the edges; the walker records them in ``cycles``.

    Iteration yields descriptions in the order they were added, which for a
    walked graph is breadth-first order from the root.

    Thread safety: This class is NOT thread-safe. The walker owns the graph
    while building it; afterwards callers should treat it as read-only.
    """

    def __init__(self, root_name: str | None = None) -> None:
        self.root_name = root_name
        self._nodes: dict[str, LibraryDescription] = {}
        self._edges: dict[str, list[str]] = {}
        self._requests: dict[str, list[tuple[str, LibraryRange]]] = {}
        self.cycles: list[list[str]] = []
        self.conflicts: list[VersionConflict] = []

    # -- Construction -------------------------------------------------------

    def add(self, description: LibraryDescription) -> None:
        """Add a library node.

        Raises:
            ValueError: If a library with the same name is already present.
        """
        if description.name in self._nodes:
            raise ValueError(
                f"Library {description.name!r} is already in the graph "
                f"as {self._nodes[description.name].identity}"
            )
        self._nodes[description.name] = description
        self._edges[description.name] = []

    def link(self, requester: str, target: str) -> None:
        """Record a resolved edge from *requester* to *target*."""
        targets = self._edges.setdefault(requester, [])
        if target not in targets:
            targets.append(target)

    def record_request(self, requester: str, requested: LibraryRange) -> None:
        """Remember that *requester* asked for *requested*."""
        self._requests.setdefault(requested.name, []).append((requester, requested))

    def record_conflict(self, conflict: VersionConflict) -> None:
        self.conflicts.append(conflict)

    # -- Queries ------------------------------------------------------------

    @property
    def root(self) -> LibraryDescription | None:
        """Return the root project node, or None for an empty graph."""
        if self.root_name is None:
            return None
        return self._nodes.get(self.root_name)

    @property
    def libraries(self) -> list[LibraryDescription]:
        """Return every node in walk order."""
        return list(self._nodes.values())

    def get(self, name: str) -> LibraryDescription | None:
        return self._nodes.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._nodes

    def __iter__(self) -> Iterator[LibraryDescription]:
        return iter(list(self._nodes.values()))

    def __len__(self) -> int:
        return len(self._nodes)

    def dependencies_of(self, name: str) -> list[LibraryDescription]:
        """Return the nodes *name* links to, in declaration order."""
        return [self._nodes[t] for t in self._edges.get(name, []) if t in self._nodes]

    def dependents_of(self, name: str) -> list[LibraryDescription]:
        """Return the nodes that link to *name*."""
        return [
            self._nodes[src]
            for src, targets in self._edges.items()
            if name in targets and src in self._nodes
        ]

    def requests_for(self, name: str) -> list[tuple[str, LibraryRange]]:
        """Return every (requester, range) pair that targeted *name*."""
        return list(self._requests.get(name, []))

    def unresolved(self) -> list[LibraryDescription]:
        """Return placeholder nodes, in walk order."""
        return [node for node in self._nodes.values() if not node.resolved]

    def by_source(self, source: LibrarySource) -> list[LibraryDescription]:
        return [node for node in self._nodes.values() if node.source is source]

    # -- Algorithms ---------------------------------------------------------

    def detect_cycles(self) -> list[list[str]]:
        """Detect circular dependencies using iterative DFS coloring.

        Each stack frame pairs a node with an iterator over its remaining
        edges, so arbitrarily long dependency chains are handled.

        Returns:
            A list of cycles, where each cycle is a list of library names
            forming the cycle path (e.g., ["A", "B", "A"]). A library that
            depends on itself yields ``[name, name]``. Empty if no cycles.
        """
        WHITE, GRAY, BLACK = 0, 1, 2
        color: dict[str, int] = {name: WHITE for name in self._nodes}
        cycles: list[list[str]] = []

        for start in self._nodes:
            if color[start] != WHITE:
                continue
            color[start] = GRAY
            path: list[str] = [start]
            stack: list[tuple[str, Iterator[str]]] = [
                (start, iter(self._edges.get(start, [])))
            ]
            while stack:
                u, targets = stack[-1]
                for v in targets:
                    state = color.get(v, BLACK)
                    if state == GRAY:
                        # Back edge: the cycle is the path suffix starting at v
                        cycles.append(path[path.index(v):] + [v])
                    elif state == WHITE:
                        color[v] = GRAY
                        path.append(v)
                        stack.append((v, iter(self._edges.get(v, []))))
                        break
                else:
                    stack.pop()
                    path.pop()
                    color[u] = BLACK

        return cycles

    def transitive_dependencies(self, name: str) -> set[str]:
        """Compute the names reachable from *name* via BFS.

        Returns:
            Set of library names in the transitive closure. Does NOT include
            *name* itself unless it sits on a cycle.
        """
        visited: set[str] = set()
        queue: deque[str] = deque([name])

        while queue:
            current = queue.popleft()
            for target in self._edges.get(current, []):
                if target not in visited:
                    visited.add(target)
                    queue.append(target)

        return visited
