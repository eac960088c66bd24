"""Breadth-first dependency graph walker over a provider chain.

The walker owns graph construction. Starting from the root project it
resolves every dependency edge through the provider chain, accepting the
first provider that succeeds, and links all requesters of a name to the one
node resolved for it.

Termination: each name is resolved at most once (the graph doubles as the
visited set) and the chain always ends with a provider that never declines,
so the walk performs at most one resolution per distinct declared name even
when declarations are cyclic.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import TYPE_CHECKING

from depwalk.core.dependency.constraints import LibraryRange, VersionConstraint
from depwalk.core.dependency.graph import (
    DependencyGraph,
    LibraryDescription,
    LibrarySource,
    VersionConflict,
)

if TYPE_CHECKING:
    from depwalk.core.providers.base import ProviderChain

logger = logging.getLogger(__name__)

# Sources whose version is chosen without regard to the requested constraint.
_VERSION_AGNOSTIC_SOURCES = frozenset({
    LibrarySource.PROJECT,
    LibrarySource.RUNTIME,
    LibrarySource.UNRESOLVED,
})


class DependencyWalker:
    """Builds a ``DependencyGraph`` by walking a provider chain.

    Version constraint conflicts are not errors. When a later requester's
    constraint is not met by the node already chosen for that name, the
    walker keeps the node and records a ``VersionConflict``; it never
    re-resolves. Cycles are recorded in ``graph.cycles`` after the walk.

    Args:
        chain: The provider chain to query, in priority order.
    """

    def __init__(self, chain: ProviderChain) -> None:
        self._chain = chain

    def walk(self, root_name: str, root_version: str, runtime_profile: str) -> DependencyGraph:
        """Resolve the full transitive graph of ``root_name@root_version``.

        Returns:
            The resolved graph. Nodes nobody could resolve are present as
            ``unresolved`` placeholders.
        """
        graph = DependencyGraph(root_name)
        root = self._chain.resolve(
            LibraryRange(root_name, VersionConstraint.exact(root_version)),
            runtime_profile,
        )
        graph.add(root)

        queue: deque[LibraryDescription] = deque([root])
        while queue:
            node = queue.popleft()
            for requested in node.dependencies:
                graph.record_request(node.name, requested)
                existing = graph.get(requested.name)
                if existing is None:
                    resolved = self._chain.resolve(requested, runtime_profile)
                    graph.add(resolved)
                    queue.append(resolved)
                else:
                    self._check_conflict(graph, node.name, requested, existing)
                graph.link(node.name, requested.name)

        graph.cycles = graph.detect_cycles()
        logger.debug(
            "Walked %s@%s for %s: %d libraries, %d unresolved, %d cycles",
            root_name, root_version, runtime_profile, len(graph),
            len(graph.unresolved()), len(graph.cycles),
        )
        return graph

    @staticmethod
    def _check_conflict(
        graph: DependencyGraph,
        requester: str,
        requested: LibraryRange,
        selected: LibraryDescription,
    ) -> None:
        if selected.source in _VERSION_AGNOSTIC_SOURCES:
            return
        try:
            satisfied = requested.constraint.satisfies(selected.version)
        except ValueError:
            logger.debug("Cannot compare %s against %s", requested, selected.identity)
            return
        if not satisfied:
            graph.record_conflict(VersionConflict(requester, requested, selected.identity))
