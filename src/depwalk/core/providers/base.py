"""Library provider contract and the priority-ordered provider chain.

A provider maps a requested library (name plus version constraint) and a
runtime profile to a ``LibraryDescription``, or declines by returning None.
Providers are plain classes sharing one method; no base class is needed.

Contract for implementers:

- ``try_resolve`` is a pure function of its arguments plus provider-local
  state (e.g., an index over an on-disk cache). It never mutates graph state
  and never writes to its backing store.
- Lazy indexes are built at most once per provider instance.
- A provider backed by the network enforces a deadline per call and treats
  a timeout as "not found".
"""

from __future__ import annotations

import logging
from typing import Iterable, Protocol, runtime_checkable

from depwalk.core.dependency.constraints import LibraryRange
from depwalk.core.dependency.graph import LibraryDescription, LibrarySource
from depwalk.core.providers.unresolved import UnresolvedProvider

logger = logging.getLogger(__name__)


@runtime_checkable
class LibraryProvider(Protocol):
    """The capability every resolution strategy implements."""

    source: LibrarySource

    def try_resolve(
        self, requested: LibraryRange, runtime_profile: str
    ) -> LibraryDescription | None:
        """Return a description of *requested*, or None to decline."""
        ...


class ProviderChain:
    """An ordered list of providers; the first one that resolves wins.

    The chain always terminates in a provider that never declines: if the
    given providers do not end with one tagged ``unresolved``, an
    ``UnresolvedProvider`` is appended.
    """

    def __init__(self, providers: Iterable[LibraryProvider]) -> None:
        chain = list(providers)
        if not chain or chain[-1].source is not LibrarySource.UNRESOLVED:
            chain.append(UnresolvedProvider())
        self._providers: tuple[LibraryProvider, ...] = tuple(chain)

    @property
    def providers(self) -> tuple[LibraryProvider, ...]:
        return self._providers

    @property
    def sources(self) -> list[LibrarySource]:
        return [p.source for p in self._providers]

    def includes(self, source: LibrarySource) -> bool:
        return source in self.sources

    def describe(self) -> list[str]:
        """Provider class names in priority order, for reporting."""
        return [type(p).__name__ for p in self._providers]

    def resolve(self, requested: LibraryRange, runtime_profile: str) -> LibraryDescription:
        """Query each provider in order and return the first success."""
        for provider in self._providers:
            description = provider.try_resolve(requested, runtime_profile)
            if description is not None:
                logger.debug(
                    "%s resolved %s as %s", type(provider).__name__, requested,
                    description.identity,
                )
                return description
        # Unreachable while the chain ends with an UnresolvedProvider.
        raise RuntimeError(f"No provider resolved {requested}")  # pragma: no cover
