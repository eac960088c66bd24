"""Project host: manifest -> snapshot validation -> provider chain -> walk.

``ProjectHost`` is the entry point callers use. Construction performs the
whole resolution synchronously:

1. Resolve the root directory and load the root manifest. A missing or
   malformed root manifest raises ``ManifestUnresolvableError`` before
   anything else happens.
2. Read ``project.lock.json`` if present and validate it against the
   manifest.
3. Build the provider chain. The cache-resolved provider is included only
   when the snapshot is valid, or when the caller tolerates a stale
   fingerprint and the snapshot's format version matches. Without it,
   every package-sourced dependency resolves as ``unresolved``, which
   prompts a restore.
4. Walk the graph from the root project.

Diagnostics are computed lazily on first request and cached.
"""

from __future__ import annotations

import logging
from pathlib import Path

from depwalk.config import HostConfig, load_global_settings, resolve_packages_dir
from depwalk.core.dependency.graph import DependencyGraph
from depwalk.core.dependency.walker import DependencyWalker
from depwalk.core.diagnostics import (
    Diagnostic,
    DiagnosticsAggregator,
    graph_diagnostics,
    missing_snapshot_diagnostic,
)
from depwalk.core.lockfile import LockSnapshot
from depwalk.core.manifest import (
    Manifest,
    ProjectResolver,
    load_manifest,
    resolve_root_directory,
)
from depwalk.core.providers import (
    CacheResolvedProvider,
    FeedProvider,
    LibraryProvider,
    ProjectReferenceProvider,
    ProviderChain,
    RuntimeCatalog,
    RuntimeReferenceProvider,
    SystemSharedCacheProvider,
    UnresolvedProvider,
)
from depwalk.exceptions import LockSnapshotError

logger = logging.getLogger(__name__)


class ProjectHost:
    """Resolved dependency state of one project for one runtime profile.

    Args:
        config: Host inputs.
        runtime_catalog: Runtime profile definitions. Defaults to a catalog
            reading ``config.runtime_dir``.
        extra_providers: Providers inserted after the built-in ones and
            before the unresolved placeholder provider.

    Raises:
        ManifestUnresolvableError: If the root project cannot be loaded.
        ProviderError: If a provider's configuration is malformed (for
            example a runtime profile naming an invalid version). Providers
            are closed before the error propagates.
    """

    def __init__(
        self,
        config: HostConfig,
        runtime_catalog: RuntimeCatalog | None = None,
        extra_providers: list[LibraryProvider] | None = None,
    ) -> None:
        self.config = config
        self.project_dir: Path = config.project_dir
        self.root_dir = resolve_root_directory(self.project_dir)
        settings = load_global_settings(self.root_dir)
        self.packages_dir = (
            config.packages_dir
            if config.packages_dir is not None
            else resolve_packages_dir(self.root_dir, settings)
        )

        self.project: Manifest = load_manifest(self.project_dir)
        project_resolver = ProjectResolver(self.project_dir, self.root_dir, settings)

        self.snapshot: LockSnapshot | None = None
        self.snapshot_error: str | None = None
        self.snapshot_valid = False
        self._read_snapshot()

        use_cache = self.snapshot is not None and (
            self.snapshot_valid
            or (config.tolerate_stale_snapshot and self.snapshot.format_matches)
        )

        providers: list[LibraryProvider] = [ProjectReferenceProvider(project_resolver)]
        if use_cache:
            providers.append(CacheResolvedProvider(self.packages_dir, self.snapshot))
        providers.append(
            RuntimeReferenceProvider(runtime_catalog or RuntimeCatalog(config.runtime_dir))
        )
        providers.append(SystemSharedCacheProvider(config.shared_cache_dir))
        if config.feed_url:
            providers.append(FeedProvider(config.feed_url, timeout=config.feed_timeout))
        providers.extend(extra_providers or [])
        providers.append(UnresolvedProvider())
        self.chain = ProviderChain(providers)
        logger.debug("Provider chain for %s: %s", self.project.name, self.chain.describe())

        try:
            self.graph: DependencyGraph = DependencyWalker(self.chain).walk(
                self.project.name, self.project.version, config.runtime_profile
            )
        except Exception:
            # No host reaches the caller, so nothing else can close the providers.
            self.close()
            raise

        self._diagnostics = DiagnosticsAggregator(
            self._snapshot_diagnostics,
            lambda: graph_diagnostics(self.graph, self.project.manifest_path),
        )

    @property
    def lock_file_path(self) -> Path:
        return self.project.lock_file_path

    @property
    def runtime_profile(self) -> str:
        return self.config.runtime_profile

    def close(self) -> None:
        """Release provider resources (HTTP clients of network providers)."""
        for provider in self.chain.providers:
            close = getattr(provider, "close", None)
            if callable(close):
                close()

    def _read_snapshot(self) -> None:
        path = self.lock_file_path
        if not path.is_file():
            logger.debug("No lock snapshot at %s", path)
            return
        try:
            self.snapshot = LockSnapshot.read(path)
        except (OSError, LockSnapshotError) as exc:
            logger.warning("Unable to read lock snapshot %s: %s", path, exc)
            self.snapshot_error = str(exc)
            return
        self.snapshot_valid = self.snapshot.is_valid_for(self.project)
        if not self.snapshot_valid:
            logger.info("Lock snapshot %s is not valid for %s", path, self.project.identity)

    def _snapshot_diagnostics(self) -> list[Diagnostic]:
        if self.snapshot is None:
            return [missing_snapshot_diagnostic(self.lock_file_path, self.snapshot_error)]
        return self.snapshot.get_diagnostics(self.project, self.lock_file_path)

    # -- Diagnostics --------------------------------------------------------

    @property
    def diagnostics(self) -> DiagnosticsAggregator:
        return self._diagnostics

    def get_lock_snapshot_diagnostics(self) -> tuple[Diagnostic, ...]:
        """Snapshot diagnostics: the "run restore" error or validation results."""
        return self._diagnostics.snapshot_diagnostics()

    def get_dependency_diagnostics(self) -> tuple[Diagnostic, ...]:
        return self._diagnostics.dependency_diagnostics()

    def get_all_diagnostics(self) -> tuple[Diagnostic, ...]:
        """Snapshot diagnostics followed by graph diagnostics."""
        return self._diagnostics.all_diagnostics()
