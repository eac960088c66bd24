"""Runtime profiles and the provider for libraries they ship.

A runtime profile describes a target execution environment and the
libraries bundled with it. Profiles are defined as YAML files named after
the profile identifier::

    # <runtime_dir>/py312.yaml
    reference_dir: lib      # optional, relative to the definition file
    libraries:
      Runtime.Core: 3.12.0
      Runtime.Json: 3.12.0

Libraries shipped with a profile resolve by name alone: the profile, not the
requester, decides the version.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from depwalk.core.dependency.constraints import (
    LibraryIdentity,
    LibraryRange,
    is_version,
    normalize_version,
)
from depwalk.core.dependency.graph import LibraryDescription, LibrarySource
from depwalk.exceptions import ProviderError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuntimeProfile:
    """A runtime profile and the libraries it ships.

    Attributes:
        identifier: Profile identifier (e.g., "py312").
        libraries: Mapping of library name to the shipped version.
        reference_dir: Directory holding the shipped libraries, if known.
    """

    identifier: str
    libraries: dict[str, str] = field(default_factory=dict)
    reference_dir: Path | None = None


def load_profile(path: Path) -> RuntimeProfile:
    """Load a runtime profile definition file.

    Raises:
        ProviderError: If the file is unreadable or malformed.
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError, UnicodeDecodeError) as exc:
        raise ProviderError(f"Unable to read runtime profile {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ProviderError(f"{path}: expected a mapping at the top level")

    raw_libraries = data.get("libraries") or {}
    if not isinstance(raw_libraries, dict):
        raise ProviderError(f"{path}: 'libraries' must be a mapping")
    libraries: dict[str, str] = {}
    for name, version in raw_libraries.items():
        version = str(version)
        if not is_version(version):
            raise ProviderError(f"{path}: invalid version {version!r} for {name!r}")
        libraries[str(name)] = normalize_version(version)

    reference_dir = data.get("reference_dir")
    return RuntimeProfile(
        identifier=path.stem,
        libraries=libraries,
        reference_dir=(path.parent / reference_dir) if reference_dir else None,
    )


class RuntimeCatalog:
    """Runtime profiles by identifier.

    Profiles come from explicit ``RuntimeProfile`` values, from
    ``<runtime_dir>/<identifier>.yaml`` files, or both; explicit profiles
    win. File-backed profiles are loaded on first use, once.
    """

    def __init__(
        self,
        runtime_dir: Path | None = None,
        profiles: list[RuntimeProfile] | None = None,
    ) -> None:
        self.runtime_dir = Path(runtime_dir) if runtime_dir is not None else None
        self._profiles: dict[str, RuntimeProfile | None] = {
            p.identifier: p for p in (profiles or [])
        }
        self._lock = threading.Lock()

    def get(self, identifier: str) -> RuntimeProfile | None:
        """Return the profile named *identifier*, or None if undefined.

        Raises:
            ProviderError: If the profile's definition file is malformed.
        """
        with self._lock:
            if identifier not in self._profiles:
                self._profiles[identifier] = self._load(identifier)
            return self._profiles[identifier]

    def _load(self, identifier: str) -> RuntimeProfile | None:
        if self.runtime_dir is None:
            return None
        path = self.runtime_dir / f"{identifier}.yaml"
        if not path.is_file():
            logger.debug("No runtime profile definition at %s", path)
            return None
        return load_profile(path)


class RuntimeReferenceProvider:
    """Resolves libraries shipped with the target runtime profile.

    The requested version constraint is ignored; the profile defines the
    version. Shipped libraries have no dependency edges.
    """

    source = LibrarySource.RUNTIME

    def __init__(self, catalog: RuntimeCatalog) -> None:
        self._catalog = catalog

    def try_resolve(
        self, requested: LibraryRange, runtime_profile: str
    ) -> LibraryDescription | None:
        profile = self._catalog.get(runtime_profile)
        if profile is None:
            return None
        version = profile.libraries.get(requested.name)
        if version is None:
            return None
        path = None
        if profile.reference_dir is not None:
            path = str(profile.reference_dir / requested.name)
        return LibraryDescription(
            identity=LibraryIdentity(requested.name, version),
            source=self.source,
            path=path,
        )
