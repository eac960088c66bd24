"""Compute-once memoization cell.

Several components hold state that is expensive to build and must be built
at most once per instance even when queried from several threads: provider
indexes over on-disk caches and the diagnostics collections. ``ComputeOnce``
makes that explicit instead of relying on implicit laziness.
"""

from __future__ import annotations

import threading
from typing import Callable, Generic, TypeVar

T = TypeVar("T")

_UNSET = object()


class ComputeOnce(Generic[T]):
    """A lazily computed value guarded by a lock.

    The factory runs on the first ``get()`` and never again; every later
    call returns the very same object. If the factory raises, nothing is
    cached and the next ``get()`` retries.

    Example::

        index = ComputeOnce(lambda: scan(directory))
        index.get()  # scans
        index.get()  # cached
    """

    def __init__(self, factory: Callable[[], T]) -> None:
        self._factory = factory
        self._value: object = _UNSET
        self._lock = threading.Lock()

    @property
    def is_computed(self) -> bool:
        return self._value is not _UNSET

    def get(self) -> T:
        value = self._value
        if value is not _UNSET:
            return value  # type: ignore[return-value]
        with self._lock:
            if self._value is _UNSET:
                self._value = self._factory()
            return self._value  # type: ignore[return-value]
