"""Data models for the ``project.lock.json`` lock snapshot.

These are pure data holders with no I/O, safe to import from providers and
the host without circular-dependency concerns.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from depwalk.core.dependency.graph import LibrarySource

# Expected value of the snapshot's ``format_version`` field. Compared by
# exact equality: a snapshot written in any other format is never trusted.
LOCK_FORMAT_VERSION: int = 2

KNOWN_SOURCES: frozenset[str] = frozenset(source.value for source in LibrarySource)


# ---------------------------------------------------------------------------
# LockedLibrary: A single entry in the snapshot
# ---------------------------------------------------------------------------


@dataclass
class LockedLibrary:
    """One node of the persisted dependency graph.

    Attributes:
        name: Library name.
        version: Resolved semantic version.
        source: Resolution source tag (a ``LibrarySource`` value) at the
            time the snapshot was written.
        dependencies: Mapping of dependency name to the constraint the
            library declared for it.
        path: Locator recorded by the provider, if any.
    """

    name: str
    version: str
    source: str = LibrarySource.CACHE.value
    dependencies: dict[str, str] = field(default_factory=dict)
    path: str = ""


# ---------------------------------------------------------------------------
# ManifestFingerprint: What the snapshot was computed against
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ManifestFingerprint:
    """The manifest fields that decide snapshot validity.

    Equality is exact on name and version and set equality on the declared
    dependency names, so declaration order never matters.
    """

    name: str
    version: str
    dependency_names: frozenset[str] = frozenset()

    @classmethod
    def from_manifest(cls, manifest) -> ManifestFingerprint:
        return cls(
            name=manifest.name,
            version=manifest.version,
            dependency_names=manifest.declared_dependency_names(),
        )

    def differences(self, current: ManifestFingerprint) -> list[str]:
        """Describe how *current* (the manifest) differs from this fingerprint."""
        diffs: list[str] = []
        if self.name != current.name:
            diffs.append(f"project name changed from {self.name!r} to {current.name!r}")
        if self.version != current.version:
            diffs.append(
                f"project version changed from {self.version} to {current.version}"
            )
        added = sorted(current.dependency_names - self.dependency_names)
        removed = sorted(self.dependency_names - current.dependency_names)
        if added:
            diffs.append(f"dependencies added: {', '.join(added)}")
        if removed:
            diffs.append(f"dependencies removed: {', '.join(removed)}")
        return diffs
