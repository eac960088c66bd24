"""Lock snapshot factory --- constructing snapshots from walked graphs.

The ``from_graph`` function captures a ``DependencyGraph`` produced by the
walker, together with the fingerprint of the manifest it was walked for.
This is what a restore step persists after a successful full resolution::

    graph = DependencyWalker(chain).walk(manifest.name, manifest.version, "py312")
    snapshot = LockSnapshot.from_graph(graph, manifest, "py312")
    snapshot.write(manifest.lock_file_path)
"""

from __future__ import annotations

from typing import Any

from depwalk.core.lockfile.models import LockedLibrary, ManifestFingerprint


def _from_graph(cls: type, graph: Any, manifest: Any, runtime_profile: str) -> Any:
    """Create a snapshot holding every node of *graph*.

    Args:
        graph: A walked ``DependencyGraph``.
        manifest: The ``Manifest`` the graph was walked for; supplies the
            fingerprint.
        runtime_profile: The runtime profile the graph was walked for.

    Returns:
        A new ``LockSnapshot`` in the current format.
    """
    snap = cls(
        fingerprint=ManifestFingerprint.from_manifest(manifest),
        runtime_profile=runtime_profile,
    )
    for node in graph:
        snap.add_library(
            LockedLibrary(
                name=node.name,
                version=node.version,
                source=node.source.value,
                dependencies={dep.name: dep.constraint.raw for dep in node.dependencies},
                path=node.path or "",
            )
        )
    return snap
