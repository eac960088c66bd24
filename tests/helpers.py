"""Shared builders for depwalk tests: manifests, snapshots, stub providers."""

from __future__ import annotations

from pathlib import Path

import yaml

from depwalk.core.dependency import (
    LibraryDescription,
    LibraryIdentity,
    LibraryRange,
    LibrarySource,
    VersionConstraint,
)
from depwalk.core.lockfile import LockedLibrary, LockSnapshot, ManifestFingerprint
from depwalk.core.manifest import Manifest


def write_manifest(
    project_dir: Path,
    version: str = "1.0.0",
    dependencies: dict[str, str] | None = None,
    frameworks: dict[str, dict[str, str]] | None = None,
) -> Path:
    """Create ``project_dir/project.yaml`` and return the project directory."""
    project_dir.mkdir(parents=True, exist_ok=True)
    data: dict = {"version": version}
    if dependencies is not None:
        data["dependencies"] = dependencies
    if frameworks:
        data["frameworks"] = {
            profile: {"dependencies": deps} for profile, deps in frameworks.items()
        }
    (project_dir / "project.yaml").write_text(yaml.safe_dump(data))
    return project_dir


def make_manifest(
    name: str = "App",
    version: str = "1.0.0",
    dependencies: dict[str, str] | None = None,
    project_dir: Path | None = None,
) -> Manifest:
    """Build an in-memory Manifest without touching disk."""
    return Manifest(
        name=name,
        version=version,
        project_dir=project_dir or Path("/projects") / name,
        dependencies=[
            LibraryRange(dep, VersionConstraint.from_spec(spec))
            for dep, spec in (dependencies or {}).items()
        ],
    )


def make_snapshot(
    name: str = "App",
    version: str = "1.0.0",
    libraries: dict[str, tuple[str, dict[str, str]]] | None = None,
    runtime_profile: str = "py312",
    format_version: int | None = None,
    source: str = LibrarySource.CACHE.value,
) -> LockSnapshot:
    """Build a snapshot whose fingerprint declares every non-root library.

    ``libraries`` maps name -> (version, dependencies).
    """
    libraries = libraries or {}
    kwargs = {} if format_version is None else {"format_version": format_version}
    snap = LockSnapshot(
        fingerprint=ManifestFingerprint(name, version, frozenset(libraries)),
        runtime_profile=runtime_profile,
        **kwargs,
    )
    for lib_name, (lib_version, deps) in libraries.items():
        snap.add_library(
            LockedLibrary(name=lib_name, version=lib_version, source=source, dependencies=deps)
        )
    return snap


def restore_packages(packages_dir: Path, *identities: tuple[str, str]) -> None:
    """Create ``<packages>/<name>/<version>`` directories as a restore would."""
    for name, version in identities:
        (packages_dir / name / version).mkdir(parents=True, exist_ok=True)


class StaticProvider:
    """In-memory provider for walker tests; records every request it sees.

    ``libraries`` maps name -> (version, {dependency: constraint}).
    """

    def __init__(
        self,
        libraries: dict[str, tuple[str, dict[str, str]]],
        source: LibrarySource = LibrarySource.CACHE,
        honor_constraints: bool = True,
    ) -> None:
        self.libraries = libraries
        self.source = source
        self.honor_constraints = honor_constraints
        self.calls: list[str] = []

    def try_resolve(self, requested: LibraryRange, runtime_profile: str):
        self.calls.append(requested.name)
        entry = self.libraries.get(requested.name)
        if entry is None:
            return None
        version, deps = entry
        if self.honor_constraints and not requested.constraint.satisfies(version):
            return None
        return LibraryDescription(
            identity=LibraryIdentity(requested.name, version),
            source=self.source,
            dependencies=tuple(
                LibraryRange(dep, VersionConstraint.from_spec(spec))
                for dep, spec in deps.items()
            ),
        )
