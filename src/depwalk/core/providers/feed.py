"""Resolve library metadata from a JSON package feed over HTTP.

Opt-in: the host only adds this provider when a feed URL is configured. The
feed serves one index document per library::

    GET <feed_url>/<name>/index.json

    {"versions": {"2.0.0": {"dependencies": {"Helpers": ">=1.1.0"}},
                  "2.1.0": {"dependencies": {}}}}

Each lookup is bounded by a deadline. Timeouts, HTTP errors and malformed
documents are logged and treated as "not found", so the chain falls through
to the next provider instead of aborting the walk. Nothing is downloaded
besides the index document.
"""

from __future__ import annotations

import logging
import threading
from typing import Any

import httpx

from depwalk.config import DEFAULT_FEED_TIMEOUT
from depwalk.core.dependency.constraints import (
    LibraryIdentity,
    LibraryRange,
    VersionConstraint,
    is_version,
    parse_version,
)
from depwalk.core.dependency.graph import LibraryDescription, LibrarySource

logger = logging.getLogger(__name__)

USER_AGENT: str = "depwalk-feed/0.1"


class FeedProvider:
    """Picks the highest feed version satisfying the constraint.

    Args:
        feed_url: Base URL of the feed.
        timeout: Deadline for one index lookup, in seconds.
        client: Optional preconfigured ``httpx.Client`` (tests pass one with
            a mock transport). The provider never closes a client it did not
            create.
    """

    source = LibrarySource.FEED

    def __init__(
        self,
        feed_url: str,
        timeout: float = DEFAULT_FEED_TIMEOUT,
        client: httpx.Client | None = None,
    ) -> None:
        self.feed_url = feed_url.rstrip("/")
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None
        self._indexes: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()

    def _get_client(self) -> httpx.Client:
        with self._lock:
            if self._client is None:
                self._client = httpx.Client(
                    headers={"User-Agent": USER_AGENT},
                    follow_redirects=True,
                )
            return self._client

    def close(self) -> None:
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None

    def _fetch_index(self, name: str) -> dict[str, Any]:
        url = f"{self.feed_url}/{name}/index.json"
        try:
            resp = self._get_client().get(url, timeout=self.timeout)
            if resp.status_code == 404:
                logger.debug("Feed has no entry for %s", name)
                return {}
            resp.raise_for_status()
            data = resp.json()
        except httpx.TimeoutException:
            logger.warning("Timeout fetching %s", url)
            return {}
        except httpx.HTTPStatusError as exc:
            logger.warning("HTTP %d from %s", exc.response.status_code, url)
            return {}
        except (httpx.RequestError, ValueError) as exc:
            logger.warning("Request error for %s: %s", url, exc)
            return {}
        versions = data.get("versions") if isinstance(data, dict) else None
        if not isinstance(versions, dict):
            logger.warning("Malformed feed index for %s", name)
            return {}
        return {v: meta for v, meta in versions.items() if is_version(str(v))}

    def _index_for(self, name: str) -> dict[str, Any]:
        with self._lock:
            cached = self._indexes.get(name)
        if cached is not None:
            return cached
        index = self._fetch_index(name)
        with self._lock:
            return self._indexes.setdefault(name, index)

    def try_resolve(
        self, requested: LibraryRange, runtime_profile: str
    ) -> LibraryDescription | None:
        index = self._index_for(requested.name)
        for version in sorted(index, key=parse_version, reverse=True):
            if not requested.constraint.satisfies(version):
                continue
            meta = index[version] if isinstance(index[version], dict) else {}
            raw_deps = meta.get("dependencies") or {}
            try:
                dependencies = tuple(
                    LibraryRange(str(dep), VersionConstraint.from_spec(spec))
                    for dep, spec in sorted(raw_deps.items())
                )
            except (AttributeError, ValueError):
                logger.warning("Malformed dependencies for %s@%s in feed", requested.name, version)
                dependencies = ()
            return LibraryDescription(
                identity=LibraryIdentity(requested.name, version),
                source=self.source,
                dependencies=dependencies,
                path=f"{self.feed_url}/{requested.name}/{version}",
            )
        return None
