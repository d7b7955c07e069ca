"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Caching decorator composing a source repository with a cache repository.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from .errors import RepositoryConfigError
from .repository import ModelRepository
from .types import UNBOUNDED, M, model_id

logger = logging.getLogger("modelstore.cached")


class CachedModelRepository(ModelRepository[M]):
    """
    Repository decorator backed by a source of truth and an auxiliary cache.

    Plain operations (`create`, `find`, `delete`, ...) go to the source
    repository unchanged. Cache-tagged operations work against the cache
    repository:

    - ``get*`` reads the cache only; ``get_or_find*`` falls back to the
      source on a miss without writing the result back to the cache.
    - ``cache`` writes to the cache only; nothing is mirrored automatically.
    - ``delete*_cached`` evicts entries from the cache and re-creates them
      in the source, so cached content is never discarded.

    The two repositories are managed independently: a model may live in
    either, both or neither. Sequences touching both stores are not atomic.

    Args:
        source: Authoritative repository.
        cache: Cache repository; may be set later with `set_cache_repository`.
    """

    def __init__(
        self,
        source: ModelRepository[M],
        cache: ModelRepository[M] | None = None,
    ) -> None:
        self._source = source
        self._cache = cache
        self.backend_id = f"cached:{source.backend_id}"

    @property
    def source_repository(self) -> ModelRepository[M]:
        return self._source

    @property
    def cache_repository(self) -> ModelRepository[M] | None:
        return self._cache

    def set_cache_repository(self, repository: ModelRepository[M] | None) -> None:
        """
        Swap the repository serving cache-tagged operations.

        Existing cache content is neither migrated nor invalidated. Callers
        must not swap concurrently with in-flight cache operations.
        """
        previous = self._cache
        self._cache = repository
        logger.info(
            "Cache repository swapped (%s -> %s)",
            previous.backend_id if previous is not None else None,
            repository.backend_id if repository is not None else None,
        )

    def _require_cache(self) -> ModelRepository[M]:
        cache = self._cache
        if cache is None:
            raise RepositoryConfigError(
                f"{self.backend_id} has no cache repository configured"
            )
        return cache

    # -- source operations -------------------------------------------------

    def create(self, model: M) -> None:
        self._source.create(model)

    def exists(self, ref: str | M) -> bool:
        return self._source.exists(ref)

    def find(self, id: str) -> M | None:
        return self._source.find(id)

    def find_by_query(self, query: Any) -> M | None:
        return self._source.find_by_query(query)

    def find_many(self, ids: Iterable[str], limit: int = UNBOUNDED) -> list[M]:
        return self._source.find_many(ids, limit)

    def find_many_by_query(self, query: Any, limit: int = UNBOUNDED) -> list[M]:
        return self._source.find_many_by_query(query, limit)

    def find_all(self) -> list[M]:
        return self._source.find_all()

    def delete(self, ref: str | M) -> None:
        self._source.delete(ref)

    def delete_by_query(self, query: Any) -> None:
        self._source.delete_by_query(query)

    def delete_many(self, ids: Iterable[str]) -> None:
        self._source.delete_many(ids)

    def delete_many_by_query(self, query: Any, limit: int = UNBOUNDED) -> None:
        self._source.delete_many_by_query(query, limit)

    # -- cache operations --------------------------------------------------

    def cache(self, model: M) -> None:
        """Store `model` in the cache repository."""
        self._require_cache().create(model)

    def get(self, id: str) -> M | None:
        """Return the cached model under `id`; the source is never consulted."""
        return self._require_cache().find(id)

    def get_or_find(self, id: str) -> M | None:
        """
        Return the cached model, falling back to the source on a miss.

        A model found in the source is not written back to the cache.
        """
        model = self.get(id)
        if model is None:
            logger.debug("Cache miss for %s, falling back to source", id)
            model = self._source.find(id)
        return model

    def get_by_query(self, query: Any) -> M | None:
        return self._require_cache().find_by_query(query)

    def get_or_find_by_query(self, query: Any) -> M | None:
        """Query-based counterpart of `get_or_find`."""
        model = self.get_by_query(query)
        if model is None:
            logger.debug("Cache miss for query %r, falling back to source", query)
            model = self._source.find_by_query(query)
        return model

    # Batch reads are cache-only; unlike get_or_find they never fall back.

    def get_many(self, ids: Iterable[str], limit: int = UNBOUNDED) -> list[M]:
        return self._require_cache().find_many(ids, limit)

    def get_many_by_query(self, query: Any, limit: int = UNBOUNDED) -> list[M]:
        return self._require_cache().find_many_by_query(query, limit)

    def get_all(self) -> list[M]:
        return self._require_cache().find_all()

    def delete_cached(self, ref: str | M) -> None:
        """
        Evict one model from the cache into the source.

        No-op when the cache holds nothing under that id.
        """
        cache = self._require_cache()
        id = model_id(ref)
        model = cache.find(id)
        if model is None:
            return
        cache.delete(id)
        self._source.create(model)
        logger.debug("Evicted %s from cache to source", id)

    def delete_by_query_cached(self, query: Any) -> None:
        """Evict the first cached model matching `query` into the source."""
        cache = self._require_cache()
        model = cache.find_by_query(query)
        if model is None:
            return
        cache.delete_by_query(query)
        self._source.create(model)
        logger.debug("Evicted %s from cache to source", model.id)

    def delete_many_cached(self, ids: Iterable[str]) -> None:
        """
        Evict cached models whose id is in `ids` into the source.

        Whatever the cache returns is re-created; there is no per-id
        presence check as in `delete_cached`.
        """
        cache = self._require_cache()
        ids = list(ids)
        models = cache.find_many(ids)
        cache.delete_many(ids)
        for model in models:
            self._source.create(model)
        logger.debug("Evicted %d model(s) from cache to source", len(models))

    def delete_many_by_query_cached(
        self,
        query: Any,
        limit: int = UNBOUNDED,
    ) -> None:
        """Evict at most `limit` cached models matching `query` into the source."""
        cache = self._require_cache()
        models = cache.find_many_by_query(query, limit)
        cache.delete_many_by_query(query, limit)
        for model in models:
            self._source.create(model)
        logger.debug("Evicted %d model(s) from cache to source", len(models))
