"""Resolve previously restored packages recorded in a lock snapshot."""

from __future__ import annotations

import logging
from pathlib import Path

from depwalk.core.dependency.constraints import (
    LibraryIdentity,
    LibraryRange,
    VersionConstraint,
)
from depwalk.core.dependency.graph import LibraryDescription, LibrarySource
from depwalk.core.lockfile import LockedLibrary, LockSnapshot
from depwalk.core.once import ComputeOnce

logger = logging.getLogger(__name__)


class CacheResolvedProvider:
    """Serves libraries that a restore recorded as ``cache-resolved``.

    A request resolves when the snapshot holds an entry of that name whose
    version satisfies the constraint, the snapshot was computed for the same
    runtime profile, and the restored package directory
    ``<packages_dir>/<name>/<version>`` exists. The packages directory is
    only read, never written.

    Only include this provider in a chain after the snapshot has been
    validated against the current manifest.
    """

    source = LibrarySource.CACHE

    def __init__(self, packages_dir: Path, snapshot: LockSnapshot) -> None:
        self.packages_dir = Path(packages_dir)
        self._snapshot = snapshot
        self._index: ComputeOnce[dict[str, LockedLibrary]] = ComputeOnce(self._build_index)

    def _build_index(self) -> dict[str, LockedLibrary]:
        index = {
            library.name: library
            for library in self._snapshot.libraries
            if library.source == LibrarySource.CACHE.value
        }
        logger.debug("Indexed %d cached libraries from lock snapshot", len(index))
        return index

    def package_path(self, name: str, version: str) -> Path:
        return self.packages_dir / name / version

    def try_resolve(
        self, requested: LibraryRange, runtime_profile: str
    ) -> LibraryDescription | None:
        library = self._index.get().get(requested.name)
        if library is None:
            return None
        if self._snapshot.runtime_profile and self._snapshot.runtime_profile != runtime_profile:
            logger.debug(
                "Snapshot was computed for %s, not %s; declining %s",
                self._snapshot.runtime_profile, runtime_profile, requested,
            )
            return None
        try:
            if not requested.constraint.satisfies(library.version):
                return None
        except ValueError:
            logger.warning("Ignoring cached %s with unusable version %r", library.name, library.version)
            return None
        path = self.package_path(library.name, library.version)
        if not path.is_dir():
            logger.debug("Package %s@%s is not restored at %s", library.name, library.version, path)
            return None
        try:
            dependencies = tuple(
                LibraryRange(name, VersionConstraint.from_spec(constraint))
                for name, constraint in sorted(library.dependencies.items())
            )
        except ValueError:
            logger.warning(
                "Ignoring cached %s@%s with malformed dependency constraints",
                library.name, library.version, exc_info=True,
            )
            return None
        return LibraryDescription(
            identity=LibraryIdentity(library.name, library.version),
            source=self.source,
            dependencies=dependencies,
            path=str(path),
        )
