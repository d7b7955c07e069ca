"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Generic model repositories with pluggable storage backends.

Provides a ``ModelRepository`` contract, a ``CachedModelRepository``
decorator composing a source repository with a cache repository, and
executor-backed async wrappers.

Quick start::

    from modelstore import (
        CachedModelRepository,
        InMemoryModelRepository,
        TTLCacheModelRepository,
    )

    users = CachedModelRepository(
        InMemoryModelRepository(),
        TTLCacheModelRepository(maxsize=256, ttl_s=60),
    )
    users.cache(user)
    users.get_or_find(user.id)
"""

from .adapters import (
    InMemoryModelRepository,
    JsonFileModelRepository,
    LoadingCacheModelRepository,
    MongoModelRepository,
    RedisModelRepository,
    TTLCacheModelRepository,
)
from .cached import CachedModelRepository
from .codec import (
    DocumentCodec,
    JsonModelCodec,
    ModelCodec,
    ModelCodecError,
    PydanticModelCodec,
)
from .concurrency import AsyncCachedModelRepository, AsyncModelRepository
from .errors import (
    ModelStoreError,
    RepositoryConfigError,
    StorageFailureError,
    UnsupportedQueryError,
)
from .factory import (
    create_cached_repository_from_env,
    create_repository,
    create_repository_from_env,
)
from .repository import ModelRepository
from .settings import RepositorySettings
from .types import UNBOUNDED, ById, Model, Native, Query, Where, model_id

__all__ = [
    "UNBOUNDED",
    "Model",
    "Query",
    "ById",
    "Where",
    "Native",
    "model_id",
    "ModelRepository",
    "CachedModelRepository",
    "AsyncModelRepository",
    "AsyncCachedModelRepository",
    "ModelCodec",
    "DocumentCodec",
    "JsonModelCodec",
    "PydanticModelCodec",
    "ModelCodecError",
    "ModelStoreError",
    "UnsupportedQueryError",
    "StorageFailureError",
    "RepositoryConfigError",
    "InMemoryModelRepository",
    "TTLCacheModelRepository",
    "LoadingCacheModelRepository",
    "JsonFileModelRepository",
    "RedisModelRepository",
    "MongoModelRepository",
    "RepositorySettings",
    "create_repository",
    "create_repository_from_env",
    "create_cached_repository_from_env",
]
