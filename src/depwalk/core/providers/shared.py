"""Resolve libraries from a machine-wide shared cache.

The shared cache is a directory tree populated by other tools::

    <shared_cache_dir>/<name>/<version>/...

It is consulted read-only and only as a fallback after project, cache and
runtime providers have declined.
"""

from __future__ import annotations

import logging
from pathlib import Path

from depwalk.core.dependency.constraints import (
    LibraryIdentity,
    LibraryRange,
    is_version,
    parse_version,
)
from depwalk.core.dependency.graph import LibraryDescription, LibrarySource
from depwalk.core.once import ComputeOnce

logger = logging.getLogger(__name__)


class SystemSharedCacheProvider:
    """Picks the highest cached version satisfying the constraint.

    The directory listing is indexed once per provider instance. Entries
    whose directory name is not a semantic version are ignored. Shared
    cache entries carry no dependency metadata.
    """

    source = LibrarySource.SHARED_CACHE

    def __init__(self, cache_dir: Path | None) -> None:
        self.cache_dir = Path(cache_dir) if cache_dir is not None else None
        self._index: ComputeOnce[dict[str, list[str]]] = ComputeOnce(self._scan)

    def _scan(self) -> dict[str, list[str]]:
        index: dict[str, list[str]] = {}
        if self.cache_dir is None or not self.cache_dir.is_dir():
            return index
        try:
            for library_dir in self.cache_dir.iterdir():
                if not library_dir.is_dir():
                    continue
                versions = [
                    child.name
                    for child in library_dir.iterdir()
                    if child.is_dir() and is_version(child.name)
                ]
                if versions:
                    versions.sort(key=parse_version, reverse=True)
                    index[library_dir.name] = versions
        except PermissionError:
            logger.warning("Permission denied: %s", self.cache_dir)
        logger.debug("Indexed %d libraries in shared cache %s", len(index), self.cache_dir)
        return index

    def try_resolve(
        self, requested: LibraryRange, runtime_profile: str
    ) -> LibraryDescription | None:
        for version in self._index.get().get(requested.name, []):
            if requested.constraint.satisfies(version):
                return LibraryDescription(
                    identity=LibraryIdentity(requested.name, version),
                    source=self.source,
                    path=str(self.cache_dir / requested.name / version),
                )
        return None
