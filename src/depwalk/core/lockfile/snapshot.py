"""Lock snapshot core class --- library entries, validity, and serialization.

The ``LockSnapshot`` class represents a ``project.lock.json`` file: a
persisted copy of a previously computed dependency graph plus the manifest
fingerprint it was computed against. It provides:

- **Library management:** add, get, count, and list locked libraries.
- **Validity:** ``is_valid_for`` and ``get_diagnostics`` against the current
  manifest.
- **Serialization:** deterministic ``to_dict``, ``to_json``, and ``write``.

A snapshot is written once per successful restore and never mutated after
it has been read; a new snapshot replaces the old file wholesale.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from depwalk import __version__
from depwalk.core.diagnostics import (
    RESTORE_ADVICE,
    Diagnostic,
    DiagnosticCode,
    Severity,
)
from depwalk.core.lockfile.models import (
    LOCK_FORMAT_VERSION,
    LockedLibrary,
    ManifestFingerprint,
)


class LockSnapshot:
    """A persisted dependency graph and the fingerprint it was computed for.

    Example::

        snap = LockSnapshot(
            fingerprint=ManifestFingerprint("App", "1.0.0", frozenset({"Lib"})),
            runtime_profile="py312",
        )
        snap.add_library(LockedLibrary(name="Lib", version="2.0.0"))
        snap.write(Path("project.lock.json"))
    """

    def __init__(
        self,
        format_version: int = LOCK_FORMAT_VERSION,
        fingerprint: ManifestFingerprint | None = None,
        runtime_profile: str = "",
    ) -> None:
        self.format_version = format_version
        self.fingerprint = fingerprint
        self.runtime_profile = runtime_profile
        self._libraries: dict[str, LockedLibrary] = {}

    # -- Library management -------------------------------------------------

    def add_library(self, library: LockedLibrary) -> None:
        """Add a locked library entry, replacing any entry of the same name."""
        self._libraries[library.name] = library

    def get_library(self, name: str) -> LockedLibrary | None:
        return self._libraries.get(name)

    @property
    def libraries(self) -> list[LockedLibrary]:
        """Return all entries sorted by name."""
        return [self._libraries[name] for name in sorted(self._libraries)]

    @property
    def library_count(self) -> int:
        return len(self._libraries)

    @property
    def library_names(self) -> list[str]:
        return sorted(self._libraries)

    # -- Validity -----------------------------------------------------------

    @property
    def format_matches(self) -> bool:
        return self.format_version == LOCK_FORMAT_VERSION

    def is_valid_for(self, manifest) -> bool:
        """Return True when this snapshot can be trusted for *manifest*.

        Requires the exact expected format version and a fingerprint equal
        to the manifest's current name, version and dependency-name set.
        """
        if not self.format_matches or self.fingerprint is None:
            return False
        return self.fingerprint == ManifestFingerprint.from_manifest(manifest)

    def get_diagnostics(self, manifest, lock_path: Path | None = None) -> list[Diagnostic]:
        """Explain why this snapshot is not valid for *manifest*.

        Returns an empty list exactly when ``is_valid_for(manifest)`` is True.
        A format mismatch suppresses fingerprint comparison, because data in
        another format cannot be reinterpreted.
        """
        source = str(lock_path if lock_path is not None else manifest.lock_file_path)

        if not self.format_matches:
            return [
                Diagnostic(
                    f"The lock snapshot format version {self.format_version} does not "
                    f"match the expected version {LOCK_FORMAT_VERSION}. {RESTORE_ADVICE}",
                    source,
                    Severity.ERROR,
                    DiagnosticCode.SNAPSHOT_FORMAT_MISMATCH,
                )
            ]

        current = ManifestFingerprint.from_manifest(manifest)
        if self.fingerprint is None:
            diffs = ["the snapshot does not record a project fingerprint"]
        else:
            diffs = self.fingerprint.differences(current)
        if not diffs:
            return []
        return [
            Diagnostic(
                f"The lock snapshot is out of date with {manifest.manifest_path.name} "
                f"({'; '.join(diffs)}). {RESTORE_ADVICE}",
                source,
                Severity.ERROR,
                DiagnosticCode.SNAPSHOT_FINGERPRINT_MISMATCH,
            )
        ]

    # -- Serialization ------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Serialize the snapshot to a dict matching the on-disk schema.

        The output is deterministic apart from ``generated_at``: libraries
        are sorted by name and dependency names are sorted.
        """
        libraries: dict[str, Any] = {}
        for library in self.libraries:
            entry: dict[str, Any] = {
                "version": library.version,
                "source": library.source,
                "dependencies": dict(sorted(library.dependencies.items())),
            }
            if library.path:
                entry["path"] = library.path
            libraries[library.name] = entry

        project: dict[str, Any] | None = None
        if self.fingerprint is not None:
            project = {
                "name": self.fingerprint.name,
                "version": self.fingerprint.version,
                "dependencies": sorted(self.fingerprint.dependency_names),
            }

        return {
            "format_version": self.format_version,
            "generated_by": f"depwalk {__version__}",
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "project": project,
            "runtime_profile": self.runtime_profile,
            "libraries": libraries,
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)

    def write(self, path: Path) -> None:
        """Write the snapshot to disk as JSON, replacing any existing file.

        Creates parent directories if they do not exist.
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json(), encoding="utf-8")
