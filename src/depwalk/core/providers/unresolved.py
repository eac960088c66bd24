"""The provider of last resort: placeholders for anything nobody resolved."""

from __future__ import annotations

from depwalk.core.dependency.constraints import LibraryIdentity, LibraryRange
from depwalk.core.dependency.graph import LibraryDescription, LibrarySource

PLACEHOLDER_VERSION = "0.0.0"


class UnresolvedProvider:
    """Always succeeds with a description tagged ``unresolved``.

    The placeholder's version is the lowest version the constraint names
    (``>=2.0.0`` gives ``2.0.0``), or ``0.0.0`` when it names none or is
    malformed. It has no dependencies, so the walk never continues below a
    placeholder.
    """

    source = LibrarySource.UNRESOLVED

    def try_resolve(self, requested: LibraryRange, runtime_profile: str) -> LibraryDescription:
        try:
            version = requested.constraint.floor() or PLACEHOLDER_VERSION
        except ValueError:
            version = PLACEHOLDER_VERSION
        return LibraryDescription(
            identity=LibraryIdentity(requested.name, version),
            source=self.source,
        )
