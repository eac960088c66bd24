"""Resolve sibling projects of the same source tree."""

from __future__ import annotations

from depwalk.core.dependency.constraints import LibraryRange
from depwalk.core.dependency.graph import LibraryDescription, LibrarySource
from depwalk.core.manifest import ProjectResolver


class ProjectReferenceProvider:
    """Resolves a name to a project found by a ``ProjectResolver``.

    The version constraint is ignored: a local project always overrides
    packaged versions of the same name, so that edits to a sibling are
    picked up without a restore. The description's dependencies are the
    sibling's manifest dependencies for the requested runtime profile.
    """

    source = LibrarySource.PROJECT

    def __init__(self, resolver: ProjectResolver) -> None:
        self._resolver = resolver

    def try_resolve(
        self, requested: LibraryRange, runtime_profile: str
    ) -> LibraryDescription | None:
        manifest = self._resolver.try_resolve_project(requested.name)
        if manifest is None:
            return None
        return LibraryDescription(
            identity=manifest.identity,
            source=self.source,
            dependencies=tuple(manifest.dependencies_for(runtime_profile)),
            path=str(manifest.project_dir),
        )
