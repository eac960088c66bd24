"""Dependency graph model and the breadth-first graph walker.

All public names are re-exported here so callers can write
``from depwalk.core.dependency import DependencyGraph``.

The walker lives in ``depwalk.core.dependency.walker`` and is imported from
there; it depends on the provider chain, which in turn depends on the types
in this package.
"""

from depwalk.core.dependency.constraints import (
    LibraryIdentity,
    LibraryRange,
    VersionConstraint,
    is_version,
    normalize_version,
    parse_version,
)
from depwalk.core.dependency.graph import (
    DependencyGraph,
    LibraryDescription,
    LibrarySource,
    VersionConflict,
)

__all__ = [
    "DependencyGraph",
    "LibraryDescription",
    "LibraryIdentity",
    "LibraryRange",
    "LibrarySource",
    "VersionConflict",
    "VersionConstraint",
    "is_version",
    "normalize_version",
    "parse_version",
]
