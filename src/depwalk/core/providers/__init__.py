"""Library providers and the priority-ordered provider chain.

Priority order used by the host:

1. ``ProjectReferenceProvider``: sibling projects (local override).
2. ``CacheResolvedProvider``: restored packages from a valid lock snapshot.
3. ``RuntimeReferenceProvider``: libraries shipped with the runtime profile.
4. ``SystemSharedCacheProvider``: machine-wide shared cache fallback.
5. ``FeedProvider``: optional, network-backed package feed.
6. ``UnresolvedProvider``: placeholder, never declines.
"""

from depwalk.core.providers.base import LibraryProvider, ProviderChain
from depwalk.core.providers.cache import CacheResolvedProvider
from depwalk.core.providers.feed import FeedProvider
from depwalk.core.providers.project import ProjectReferenceProvider
from depwalk.core.providers.runtime import (
    RuntimeCatalog,
    RuntimeProfile,
    RuntimeReferenceProvider,
    load_profile,
)
from depwalk.core.providers.shared import SystemSharedCacheProvider
from depwalk.core.providers.unresolved import UnresolvedProvider

__all__ = [
    "CacheResolvedProvider",
    "FeedProvider",
    "LibraryProvider",
    "ProjectReferenceProvider",
    "ProviderChain",
    "RuntimeCatalog",
    "RuntimeProfile",
    "RuntimeReferenceProvider",
    "SystemSharedCacheProvider",
    "UnresolvedProvider",
    "load_profile",
]
