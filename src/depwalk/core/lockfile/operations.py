"""Lock snapshot operations --- deserialization, consistency checks, and diffing.

This module extends the ``LockSnapshot`` class (defined in ``snapshot.py``)
with classmethods and instance methods for:

- **Deserialization:** ``from_dict``, ``from_json``, ``read`` (disk).
- **Consistency:** ``validate`` checks a snapshot's internal structure.
- **Diffing:** structured comparison of two snapshots.

These are attached to the ``LockSnapshot`` class at import time (in
``__init__.py``) to keep each source file focused.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from depwalk.core.dependency.constraints import is_version
from depwalk.core.lockfile.models import (
    KNOWN_SOURCES,
    LOCK_FORMAT_VERSION,
    LockedLibrary,
    ManifestFingerprint,
)
from depwalk.exceptions import LockSnapshotError


def _require(data: dict[str, Any], key: str, kind: type, where: str) -> Any:
    value = data.get(key)
    if not isinstance(value, kind) or isinstance(value, bool):
        raise LockSnapshotError(
            f"{where}: field {key!r} must be of type {kind.__name__}, got {value!r}"
        )
    return value


def _from_dict(cls: type, data: dict[str, Any]) -> Any:
    """Deserialize a snapshot from a dict (parsed JSON).

    Only ``format_version`` is read from a snapshot written in another
    format; the rest of such a document is not interpreted and the result
    carries no fingerprint and no libraries.

    Raises:
        LockSnapshotError: If the document is not a mapping or a required
            field has the wrong shape.
    """
    if not isinstance(data, dict):
        raise LockSnapshotError("lock snapshot must be a JSON object")

    format_version = _require(data, "format_version", int, "lock snapshot")
    snap = cls(format_version=format_version)
    if format_version != LOCK_FORMAT_VERSION:
        return snap

    project = _require(data, "project", dict, "lock snapshot")
    dependency_names = _require(project, "dependencies", list, "project")
    snap.fingerprint = ManifestFingerprint(
        name=_require(project, "name", str, "project"),
        version=_require(project, "version", str, "project"),
        dependency_names=frozenset(str(n) for n in dependency_names),
    )
    snap.runtime_profile = str(data.get("runtime_profile") or "")

    libraries = data.get("libraries") or {}
    if not isinstance(libraries, dict):
        raise LockSnapshotError("lock snapshot: 'libraries' must be an object")
    for name, entry in libraries.items():
        if not isinstance(entry, dict):
            raise LockSnapshotError(f"library {name!r}: entry must be an object")
        dependencies = entry.get("dependencies") or {}
        if not isinstance(dependencies, dict):
            raise LockSnapshotError(f"library {name!r}: 'dependencies' must be an object")
        snap.add_library(
            LockedLibrary(
                name=name,
                version=str(entry.get("version", "")),
                source=str(entry.get("source", "")),
                dependencies={str(k): str(v) for k, v in dependencies.items()},
                path=str(entry.get("path", "")),
            )
        )

    return snap


def _from_json(cls: type, json_str: str) -> Any:
    """Deserialize from a JSON string.

    Raises:
        LockSnapshotError: If the string is not valid JSON or not a valid
            snapshot document.
    """
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as exc:
        raise LockSnapshotError(f"invalid JSON: {exc}") from exc
    return cls.from_dict(data)


def _read(cls: type, path: Path) -> Any:
    """Read a snapshot from disk.

    Raises:
        FileNotFoundError: If the file does not exist.
        LockSnapshotError: If the file cannot be decoded or parsed.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise LockSnapshotError(f"{path}: not UTF-8 text") from exc
    return cls.from_json(text)


def _validate(self: Any) -> list[str]:
    """Check the snapshot for internal consistency.

    Performs the following checks:

    1. **Dependency completeness:** every dependency a library names must
       itself be an entry in the snapshot.
    2. **Versions:** every library has a well-formed semantic version.
    3. **Source tags:** every library carries a known resolution source.

    Cycles are not errors here; they are legal in a resolved graph.

    Returns:
        List of error messages. Empty means the snapshot is consistent.
    """
    errors: list[str] = []

    for name, library in sorted(self._libraries.items()):
        for dep_name in sorted(library.dependencies):
            if dep_name not in self._libraries:
                errors.append(
                    f"Library {name!r} depends on {dep_name!r} which is "
                    f"not in the snapshot"
                )

    for name, library in sorted(self._libraries.items()):
        if not library.version:
            errors.append(f"Library {name!r} has empty version string")
        elif not is_version(library.version):
            errors.append(f"Library {name!r} has invalid version {library.version!r}")

    for name, library in sorted(self._libraries.items()):
        if library.source not in KNOWN_SOURCES:
            errors.append(f"Library {name!r} has unknown source {library.source!r}")

    return errors


def _diff(self: Any, other: Any) -> dict[str, Any]:
    """Compare two snapshots and return differences.

    - **added**: Libraries present in ``other`` but not in ``self``.
    - **removed**: Libraries present in ``self`` but not in ``other``.
    - **changed**: Libraries present in both with a different version,
      source, or dependency set.

    Args:
        other: The snapshot to compare against (typically the newer one).

    Returns:
        Dict with keys 'added', 'removed', 'changed'.
    """
    self_names = set(self._libraries)
    other_names = set(other._libraries)

    changes: list[dict[str, Any]] = []
    for name in sorted(self_names & other_names):
        old = self._libraries[name]
        new = other._libraries[name]
        for field_name in ("version", "source"):
            if getattr(old, field_name) != getattr(new, field_name):
                changes.append({
                    "name": name,
                    "field": field_name,
                    "old": getattr(old, field_name),
                    "new": getattr(new, field_name),
                })
        if old.dependencies != new.dependencies:
            changes.append({
                "name": name,
                "field": "dependencies",
                "old": dict(sorted(old.dependencies.items())),
                "new": dict(sorted(new.dependencies.items())),
            })

    return {
        "added": sorted(other_names - self_names),
        "removed": sorted(self_names - other_names),
        "changed": changes,
    }
