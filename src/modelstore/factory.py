"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Factory helpers for selecting repository backends from settings.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from .adapters.in_memory import InMemoryModelRepository
from .adapters.json_files import JsonFileModelRepository
from .adapters.ttl_cache import TTLCacheModelRepository
from .cached import CachedModelRepository
from .codec import ModelCodec
from .errors import RepositoryConfigError
from .repository import ModelRepository
from .settings import RepositorySettings
from .types import M

logger = logging.getLogger("modelstore.factory")


def create_repository(
    backend: str,
    model_type: type[M],
    *,
    settings: RepositorySettings | None = None,
    codec: ModelCodec | None = None,
    redis_client: Any | None = None,
    mongo_collection: Any | None = None,
) -> ModelRepository[M]:
    """
    Build one repository for `backend`.

    Backends:
    - `inmemory`
    - `ttl_cache`
    - `json`
    - `redis` (uses `redis_client` when supplied, else `settings.redis_url`)
    - `mongo` (uses `mongo_collection` when supplied, else `settings.mongo_*`)
    """
    settings = settings or RepositorySettings()
    key = backend.strip().lower()

    if key in ("mem", "memory", "inmemory", "in_memory"):
        return InMemoryModelRepository()

    if key in ("ttl_cache", "cache", "cachetools"):
        try:
            return TTLCacheModelRepository(
                maxsize=settings.cache_maxsize,
                ttl_s=settings.cache_ttl_s,
            )
        except ValueError as exc:
            raise RepositoryConfigError(f"Invalid cache settings: {exc}") from exc

    if key in ("json", "json_files", "file"):
        folder = Path(settings.json_folder) / model_type.__name__.lower()
        return JsonFileModelRepository(folder, model_type, codec=codec)

    if key in ("redis",):
        from .adapters.redis import RedisModelRepository

        client = redis_client
        if client is None:
            try:
                import redis
            except ModuleNotFoundError as exc:  # pragma: no cover
                raise RuntimeError(
                    "Redis repository backend requires `redis` to be installed."
                ) from exc
            client = redis.Redis.from_url(settings.redis_url)

        return RedisModelRepository(
            client,
            model_type,
            namespace=settings.redis_namespace,
            ttl_s=settings.redis_ttl_s,
            codec=codec,
        )

    if key in ("mongo", "mongodb"):
        from .adapters.mongo import MongoModelRepository

        collection = mongo_collection
        if collection is None:
            try:
                import pymongo
            except ModuleNotFoundError as exc:  # pragma: no cover
                raise RuntimeError(
                    "Mongo repository backend requires `pymongo` to be installed."
                ) from exc
            client = pymongo.MongoClient(settings.mongo_url)
            name = settings.mongo_collection or model_type.__name__.lower()
            collection = client[settings.mongo_database][name]

        return MongoModelRepository(collection, model_type, codec=codec)

    raise RepositoryConfigError(f"Unknown repository backend: {backend}")


def create_repository_from_env(
    model_type: type[M],
    *,
    codec: ModelCodec | None = None,
    redis_client: Any | None = None,
    mongo_collection: Any | None = None,
) -> ModelRepository[M]:
    """Create the source repository selected by `MODELSTORE_BACKEND`."""
    settings = RepositorySettings.from_env()
    repository = create_repository(
        settings.backend,
        model_type,
        settings=settings,
        codec=codec,
        redis_client=redis_client,
        mongo_collection=mongo_collection,
    )
    logger.info(
        "Created %s repository for %s", repository.backend_id, model_type.__name__
    )
    return repository


def create_cached_repository_from_env(
    model_type: type[M],
    *,
    codec: ModelCodec | None = None,
    redis_client: Any | None = None,
    mongo_collection: Any | None = None,
) -> CachedModelRepository[M]:
    """
    Create a cached repository from `MODELSTORE_BACKEND` and
    `MODELSTORE_CACHE_BACKEND` (defaults to `ttl_cache`).
    """
    settings = RepositorySettings.from_env()
    source = create_repository(
        settings.backend,
        model_type,
        settings=settings,
        codec=codec,
        redis_client=redis_client,
        mongo_collection=mongo_collection,
    )
    cache = create_repository(
        settings.cache_backend or "ttl_cache",
        model_type,
        settings=settings,
        codec=codec,
        redis_client=redis_client,
        mongo_collection=mongo_collection,
    )
    logger.info(
        "Created cached repository for %s (source=%s, cache=%s)",
        model_type.__name__,
        source.backend_id,
        cache.backend_id,
    )
    return CachedModelRepository(source, cache)
