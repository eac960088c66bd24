"""Project manifests and sibling project discovery.

A project is a directory containing ``project.yaml``. The project's name is
its directory name. The manifest declares a version and dependencies, both
common and per runtime profile::

    version: 1.0.0
    dependencies:
      Lib: 2.0.0            # bare version == minimum version (>=2.0.0)
      Helpers: "^1.1.0"
      Sibling: "*"
    frameworks:
      py312:
        dependencies:
          Compat: ">=0.3.0"

``ProjectResolver`` finds sibling projects within the same source tree so
that local development copies win over packaged versions of the same name.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from depwalk.config import (
    GLOBAL_SETTINGS_FILE_NAME,
    LOCK_FILE_NAME,
    MANIFEST_FILE_NAME,
    load_global_settings,
)
from depwalk.core.dependency.constraints import (
    LibraryIdentity,
    LibraryRange,
    VersionConstraint,
    is_version,
    normalize_version,
)
from depwalk.core.once import ComputeOnce
from depwalk.exceptions import ManifestUnresolvableError

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_VERSION = "1.0.0"


@dataclass
class Manifest:
    """A project's declared identity, version, and dependency list."""

    name: str
    version: str
    project_dir: Path
    dependencies: list[LibraryRange] = field(default_factory=list)
    framework_dependencies: dict[str, list[LibraryRange]] = field(default_factory=dict)

    @property
    def identity(self) -> LibraryIdentity:
        return LibraryIdentity(self.name, self.version)

    @property
    def manifest_path(self) -> Path:
        return self.project_dir / MANIFEST_FILE_NAME

    @property
    def lock_file_path(self) -> Path:
        return self.project_dir / LOCK_FILE_NAME

    @property
    def frameworks(self) -> list[str]:
        return sorted(self.framework_dependencies)

    def dependencies_for(self, runtime_profile: str) -> list[LibraryRange]:
        """Return the dependency edges that apply to *runtime_profile*.

        Profile-specific declarations replace a common declaration of the
        same name; order is common first, then profile-only additions.
        """
        specific = {d.name: d for d in self.framework_dependencies.get(runtime_profile, [])}
        merged = [specific.pop(d.name, d) for d in self.dependencies]
        merged.extend(specific.values())
        return merged

    def declared_dependency_names(self) -> frozenset[str]:
        """All dependency names declared in any group."""
        names = {d.name for d in self.dependencies}
        for group in self.framework_dependencies.values():
            names.update(d.name for d in group)
        return frozenset(names)


def _parse_dependencies(raw: Any, where: str) -> list[LibraryRange]:
    if raw is None:
        return []
    if isinstance(raw, list):
        raw = {name: None for name in raw}
    if not isinstance(raw, dict):
        raise ManifestUnresolvableError(f"{where}: dependencies must be a mapping")
    ranges: list[LibraryRange] = []
    for name, spec in raw.items():
        if isinstance(spec, dict):
            spec = spec.get("version")
        try:
            constraint = VersionConstraint.from_spec(None if spec is None else str(spec))
        except ValueError as exc:
            raise ManifestUnresolvableError(
                f"{where}: invalid version constraint for {name!r}: {exc}"
            ) from exc
        ranges.append(LibraryRange(str(name), constraint))
    return ranges


def load_manifest(project_dir: Path) -> Manifest:
    """Load the manifest of the project in *project_dir*.

    Raises:
        ManifestUnresolvableError: If the manifest is missing, is not valid
            YAML, or declares malformed fields.
    """
    project_dir = Path(project_dir)
    path = project_dir / MANIFEST_FILE_NAME
    if not path.is_file():
        raise ManifestUnresolvableError(
            f"Unable to resolve project {project_dir.name!r} from {project_dir}"
        )
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError, UnicodeDecodeError) as exc:
        raise ManifestUnresolvableError(f"Unable to read {path}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ManifestUnresolvableError(f"{path}: expected a mapping at the top level")

    version = str(data.get("version") or DEFAULT_PROJECT_VERSION)
    if not is_version(version):
        raise ManifestUnresolvableError(f"{path}: invalid version {version!r}")
    version = normalize_version(version)

    raw_frameworks = data.get("frameworks") or {}
    if not isinstance(raw_frameworks, dict):
        raise ManifestUnresolvableError(f"{path}: frameworks must be a mapping")
    frameworks: dict[str, list[LibraryRange]] = {}
    for profile, section in raw_frameworks.items():
        section = section or {}
        if not isinstance(section, dict):
            raise ManifestUnresolvableError(f"{path}: framework {profile!r} must be a mapping")
        frameworks[str(profile)] = _parse_dependencies(
            section.get("dependencies"), f"{path} [{profile}]"
        )

    return Manifest(
        name=project_dir.name,
        version=version,
        project_dir=project_dir,
        dependencies=_parse_dependencies(data.get("dependencies"), str(path)),
        framework_dependencies=frameworks,
    )


def resolve_root_directory(project_dir: Path) -> Path:
    """Return the source tree root for *project_dir*.

    The root is the nearest ancestor (or the directory itself) holding
    ``global.yaml``; without one, the project's parent directory.
    """
    project_dir = Path(project_dir).resolve()
    for candidate in (project_dir, *project_dir.parents):
        if (candidate / GLOBAL_SETTINGS_FILE_NAME).is_file():
            return candidate
    return project_dir.parent


class ProjectResolver:
    """Locate projects by name within a source tree.

    Search paths, in priority order: the project's parent directory,
    ``<root>/src``, ``<root>/test``, then every entry of the ``projects``
    list in ``global.yaml``. The first search path containing
    ``<name>/project.yaml`` wins.

    The name index is built lazily, at most once per instance.
    """

    def __init__(
        self,
        project_dir: Path,
        root_dir: Path,
        settings: dict[str, Any] | None = None,
    ) -> None:
        self._project_dir = Path(project_dir).resolve()
        self._root_dir = Path(root_dir).resolve()
        if settings is None:
            settings = load_global_settings(self._root_dir)
        self.search_paths = self._build_search_paths(settings)
        self._index: ComputeOnce[dict[str, Path]] = ComputeOnce(self._scan)
        self._loaded: dict[str, Manifest | None] = {}

    def _build_search_paths(self, settings: dict[str, Any]) -> list[Path]:
        candidates = [
            self._project_dir.parent,
            self._root_dir / "src",
            self._root_dir / "test",
        ]
        for entry in settings.get("projects") or []:
            candidates.append((self._root_dir / str(entry)).resolve())
        paths: list[Path] = []
        for path in candidates:
            if path not in paths:
                paths.append(path)
        return paths

    def _scan(self) -> dict[str, Path]:
        index: dict[str, Path] = {}
        for search_path in self.search_paths:
            if not search_path.is_dir():
                continue
            for child in sorted(search_path.iterdir()):
                if child.name not in index and (child / MANIFEST_FILE_NAME).is_file():
                    index[child.name] = child
        logger.debug("Indexed %d projects under %s", len(index), self._root_dir)
        return index

    @property
    def project_names(self) -> list[str]:
        return sorted(self._index.get())

    def try_resolve_project(self, name: str) -> Manifest | None:
        """Return the manifest of project *name*, or None if unknown.

        A sibling whose manifest cannot be parsed is logged and treated as
        absent; only the root project's manifest errors are fatal.
        """
        if name in self._loaded:
            return self._loaded[name]
        project_dir = self._index.get().get(name)
        manifest: Manifest | None = None
        if project_dir is not None:
            try:
                manifest = load_manifest(project_dir)
            except ManifestUnresolvableError:
                logger.warning("Skipping unreadable project: %s", project_dir, exc_info=True)
        self._loaded[name] = manifest
        return manifest
