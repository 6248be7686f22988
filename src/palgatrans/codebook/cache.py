"""In-memory cache for catalogs and materialized codebooks.

One cache is owned by the translation context and handed to the
registry and the housekeeping codebook. Entries are filled lazily on
first access and kept for the lifetime of the cache; the remote catalog
is treated as immutable while it lives. Builds for the same key are
serialized so overlapping runs never materialize a codebook twice.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Hashable
from typing import Any

_MISSING = object()


class CodebookCache:
    """Keyed lazy-fill cache with a lock per key.

    ``None`` is a legitimate cached value (e.g. a version that does not
    exist online), so it is remembered like any other result.
    """

    def __init__(self) -> None:
        self._store: dict[Hashable, Any] = {}
        self._locks: dict[Hashable, threading.Lock] = {}
        self._guard = threading.Lock()

    def _lock_for(self, key: Hashable) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    def get_or_build(self, key: Hashable, build: Callable[[], Any]) -> Any:
        """Return the cached value for ``key``, building it on first use.

        Exceptions raised by ``build`` propagate and nothing is cached, so
        a later call retries the build.
        """
        value = self._store.get(key, _MISSING)
        if value is not _MISSING:
            return value
        with self._lock_for(key):
            value = self._store.get(key, _MISSING)
            if value is _MISSING:
                value = build()
                self._store[key] = value
            return value

    def has(self, key: Hashable) -> bool:
        return key in self._store

    def get(self, key: Hashable) -> Any:
        """Return the cached value or None when absent."""
        value = self._store.get(key, _MISSING)
        return None if value is _MISSING else value

    def keys(self) -> list[Hashable]:
        return list(self._store)

    def clear(self) -> None:
        with self._guard:
            self._store.clear()
            self._locks.clear()

    def __len__(self) -> int:
        return len(self._store)
