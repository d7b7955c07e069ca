"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

In-process cache repositories built on cachetools.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from threading import RLock
from typing import Any

from cachetools import Cache, TTLCache

from ..repository import ModelRepository
from ..types import UNBOUNDED, ById, M, Where, model_id, take

logger = logging.getLogger("modelstore.adapters.ttl_cache")


class TTLCacheModelRepository(ModelRepository[M]):
    """
    Size and time bounded repository meant to serve as a cache layer.

    Entries silently disappear once they expire or get evicted by the size
    bound, which is the expected behaviour for a cache repository.
    Accepts `ById` and `Where` queries.

    Args:
        maxsize: Maximum number of cached models.
        ttl_s: Time-to-live of each entry in seconds.
        cache: Prebuilt cachetools cache; overrides `maxsize`/`ttl_s`.
    """

    backend_id = "ttl_cache"

    def __init__(
        self,
        *,
        maxsize: int = 1024,
        ttl_s: float = 300.0,
        cache: Cache | None = None,
    ) -> None:
        if cache is None:
            if maxsize <= 0:
                raise ValueError("maxsize must be > 0")
            if ttl_s <= 0:
                raise ValueError("ttl_s must be > 0")
            cache = TTLCache(maxsize=maxsize, ttl=ttl_s)
        self._cache: Cache = cache
        self._lock = RLock()
        logger.debug("Initialized %s (maxsize=%s)", self.backend_id, cache.maxsize)

    def _matcher(self, query: Any) -> Callable[[M], bool]:
        if isinstance(query, ById):
            return lambda model: model.id == query.id
        if isinstance(query, Where):
            return query.matches
        self._unsupported(query, "ById and Where")

    def _snapshot(self) -> list[M]:
        with self._lock:
            rows = (self._cache.get(key) for key in list(self._cache))
            return [model for model in rows if model is not None]

    def create(self, model: M) -> None:
        with self._lock:
            self._cache[model.id] = model

    def exists(self, ref: str | M) -> bool:
        with self._lock:
            return model_id(ref) in self._cache

    def find(self, id: str) -> M | None:
        with self._lock:
            return self._cache.get(id)

    def find_by_query(self, query: Any) -> M | None:
        matcher = self._matcher(query)
        return next((m for m in self._snapshot() if matcher(m)), None)

    def find_many(self, ids: Iterable[str], limit: int = UNBOUNDED) -> list[M]:
        found = (self.find(id) for id in dict.fromkeys(ids))
        return take((m for m in found if m is not None), limit)

    def find_many_by_query(self, query: Any, limit: int = UNBOUNDED) -> list[M]:
        matcher = self._matcher(query)
        return take((m for m in self._snapshot() if matcher(m)), limit)

    def find_all(self) -> list[M]:
        return self._snapshot()

    def delete(self, ref: str | M) -> None:
        with self._lock:
            self._cache.pop(model_id(ref), None)

    def delete_by_query(self, query: Any) -> None:
        model = self.find_by_query(query)
        if model is not None:
            self.delete(model.id)

    def delete_many(self, ids: Iterable[str]) -> None:
        with self._lock:
            for id in ids:
                self._cache.pop(id, None)

    def delete_many_by_query(self, query: Any, limit: int = UNBOUNDED) -> None:
        self.delete_many([m.id for m in self.find_many_by_query(query, limit)])


class LoadingCacheModelRepository(TTLCacheModelRepository[M]):
    """
    Cache repository that loads missing entries on lookup.

    `find` and `find_many` call `loader(id)` for ids not present and store
    every non-`None` result. `exists` and query lookups never load.

    Args:
        loader: Callable returning the model for an id, or `None`.
    """

    backend_id = "loading_cache"

    def __init__(
        self,
        loader: Callable[[str], M | None],
        *,
        maxsize: int = 1024,
        ttl_s: float = 300.0,
        cache: Cache | None = None,
    ) -> None:
        super().__init__(maxsize=maxsize, ttl_s=ttl_s, cache=cache)
        self._loader = loader

    def find(self, id: str) -> M | None:
        with self._lock:
            model = self._cache.get(id)
        if model is not None:
            return model
        # the lock is not held while loading; concurrent misses may load twice
        model = self._loader(id)
        if model is not None:
            with self._lock:
                self._cache[id] = model
        return model
