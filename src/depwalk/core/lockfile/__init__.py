"""Lock snapshots --- persisted dependency graphs and their validation.

This package implements the ``project.lock.json`` snapshot format. A
snapshot records a previously computed dependency graph together with the
manifest fingerprint (project name, version, dependency-name set) it was
computed against, and is validated against the current manifest before any
provider is allowed to trust it.

The package is split into focused submodules:

- ``models``: Data classes (``LockedLibrary``, ``ManifestFingerprint``) and
  the ``LOCK_FORMAT_VERSION`` constant.
- ``snapshot``: The ``LockSnapshot`` class with library management,
  validity checks, diagnostics and serialization.
- ``operations``: Deserialization (``from_dict``, ``from_json``, ``read``),
  internal consistency checks, and diffing.
- ``factory``: The ``from_graph`` factory method.

All public names are re-exported here.
"""

from depwalk.core.lockfile.models import (
    KNOWN_SOURCES,
    LOCK_FORMAT_VERSION,
    LockedLibrary,
    ManifestFingerprint,
)
from depwalk.core.lockfile.snapshot import LockSnapshot

# Attach operations to LockSnapshot as methods/classmethods
from depwalk.core.lockfile import operations as _ops
from depwalk.core.lockfile import factory as _factory

LockSnapshot.from_dict = classmethod(_ops._from_dict)
LockSnapshot.from_json = classmethod(_ops._from_json)
LockSnapshot.read = classmethod(_ops._read)
LockSnapshot.validate = _ops._validate
LockSnapshot.diff = _ops._diff
LockSnapshot.from_graph = classmethod(_factory._from_graph)

__all__ = [
    "KNOWN_SOURCES",
    "LOCK_FORMAT_VERSION",
    "LockSnapshot",
    "LockedLibrary",
    "ManifestFingerprint",
]
