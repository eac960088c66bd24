"""Host configuration and source-tree conventions.

Every setting the host needs is carried by an explicit ``HostConfig`` value
threaded through construction; nothing here is read from module-level
mutable state. File name conventions and defaults live as constants so the
CLI and tests share them.

Source tree layout::

    <root>/
        global.yaml          # optional: projects search dirs, packages dir
        packages/            # default packages directory (restore target)
        src/<project>/project.yaml
        src/<project>/project.lock.json
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

MANIFEST_FILE_NAME: str = "project.yaml"
LOCK_FILE_NAME: str = "project.lock.json"
GLOBAL_SETTINGS_FILE_NAME: str = "global.yaml"
DEFAULT_PACKAGES_DIR_NAME: str = "packages"

# Seconds a network-backed provider may spend on one lookup.
DEFAULT_FEED_TIMEOUT: float = 5.0


@dataclass
class HostConfig:
    """Inputs for one project host.

    Attributes:
        project_dir: Directory containing the root project's manifest.
        runtime_profile: Target runtime profile identifier (e.g., "py312").
        packages_dir: Explicit packages directory. None means the
            root-relative convention (see ``resolve_packages_dir``).
        tolerate_stale_snapshot: Keep using a lock snapshot whose
            fingerprint no longer matches the manifest. Never applies to a
            snapshot with a different format version.
        runtime_dir: Directory of ``<profile>.yaml`` runtime definitions.
        shared_cache_dir: Machine-wide shared library cache, if any.
        feed_url: Base URL of a JSON package feed. None disables the feed
            provider.
        feed_timeout: Per-lookup deadline for the feed provider, seconds.
    """

    project_dir: Path
    runtime_profile: str
    packages_dir: Path | None = None
    tolerate_stale_snapshot: bool = False
    runtime_dir: Path | None = None
    shared_cache_dir: Path | None = None
    feed_url: str | None = None
    feed_timeout: float = DEFAULT_FEED_TIMEOUT

    def __post_init__(self) -> None:
        self.project_dir = Path(self.project_dir).resolve()
        if self.packages_dir is not None:
            self.packages_dir = Path(self.packages_dir)
        if self.runtime_dir is not None:
            self.runtime_dir = Path(self.runtime_dir)
        if self.shared_cache_dir is not None:
            self.shared_cache_dir = Path(self.shared_cache_dir)
        if self.feed_timeout <= 0:
            raise ValueError(f"feed_timeout must be positive, got {self.feed_timeout}")


def load_global_settings(root_dir: Path) -> dict[str, Any]:
    """Read ``<root>/global.yaml``.

    A missing file yields an empty mapping. A malformed file is logged and
    treated as empty so that a typo there cannot prevent project loading.
    """
    path = root_dir / GLOBAL_SETTINGS_FILE_NAME
    if not path.is_file():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError, UnicodeDecodeError):
        logger.warning("Ignoring unreadable settings file: %s", path, exc_info=True)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring settings file without a mapping: %s", path)
        return {}
    return data


def resolve_packages_dir(root_dir: Path, settings: dict[str, Any] | None = None) -> Path:
    """Return the packages directory for a source tree.

    Uses the ``packages`` key of ``global.yaml`` (relative to the root)
    when present, otherwise ``<root>/packages``.
    """
    if settings is None:
        settings = load_global_settings(root_dir)
    configured = settings.get("packages")
    if isinstance(configured, str) and configured.strip():
        return (root_dir / configured).resolve()
    return root_dir / DEFAULT_PACKAGES_DIR_NAME
