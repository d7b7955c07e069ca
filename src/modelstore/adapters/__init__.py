"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

This module provides the storage backend adapters for modelstore.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from .in_memory import InMemoryModelRepository
from .json_files import JsonFileModelRepository
from .ttl_cache import LoadingCacheModelRepository, TTLCacheModelRepository

RedisModelRepository = None  # type: ignore[assignment]
MongoModelRepository = None  # type: ignore[assignment]


__all__ = [
    "InMemoryModelRepository",
    "TTLCacheModelRepository",
    "LoadingCacheModelRepository",
    "JsonFileModelRepository",
    "RedisModelRepository",
    "MongoModelRepository",
]

try:
    from .redis import RedisModelRepository as _RedisModelRepository
except ModuleNotFoundError:  # optional dependency: redis
    pass
else:
    RedisModelRepository = _RedisModelRepository

try:
    from .mongo import MongoModelRepository as _MongoModelRepository
except ModuleNotFoundError:  # optional dependency: pymongo
    pass
else:
    MongoModelRepository = _MongoModelRepository

if TYPE_CHECKING:
    # For type checking, import all repository classes directly
    from .redis import RedisModelRepository
    from .mongo import MongoModelRepository
