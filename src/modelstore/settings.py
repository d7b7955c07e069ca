"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Repository backend settings and explicit config loading.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, TypeVar

from .errors import RepositoryConfigError

_N = TypeVar("_N", int, float)


def _env_first(*names: str, default: str | None = None) -> str | None:
    """
    Return the first non-empty environment variable in `names`.

    Args:
        *names: Environment variable names to check in order.
        default: Value returned if no non-empty variable is found.
    """
    for name in names:
        raw = os.getenv(name)
        if raw is None:
            continue
        value = raw.strip()
        if value:
            return value
    return default


def _env_number(name: str, default: str, convert: Callable[[str], _N]) -> _N:
    raw = _env_first(name, default=default) or default
    try:
        return convert(raw)
    except ValueError as exc:
        raise RepositoryConfigError(
            f"{name} must be {convert.__name__}, got {raw!r}"
        ) from exc


def _redis_url_from_env() -> str:
    url = _env_first("MODELSTORE_REDIS_URL")
    if url:
        return url
    host = _env_first("MODELSTORE_REDIS_HOST", default="localhost") or "localhost"
    port = _env_first("MODELSTORE_REDIS_PORT", default="6379") or "6379"
    db = _env_first("MODELSTORE_REDIS_DB", default="0") or "0"
    password = _env_first("MODELSTORE_REDIS_PASSWORD", default="") or ""
    if password:
        return f"redis://:{password}@{host}:{port}/{db}"
    return f"redis://{host}:{port}/{db}"


@dataclass(frozen=True, slots=True)
class RepositorySettings:
    """Explicit settings used to build source and cache repositories."""

    backend: str = "inmemory"
    cache_backend: str | None = None

    cache_maxsize: int = 1024
    cache_ttl_s: float = 300.0

    json_folder: str = "./data"

    redis_url: str = "redis://localhost:6379/0"
    redis_namespace: str = "modelstore"
    redis_ttl_s: int | None = 3600

    mongo_url: str = "mongodb://localhost:27017"
    mongo_database: str = "modelstore"
    mongo_collection: str | None = None

    @staticmethod
    def from_env() -> "RepositorySettings":
        """Load settings from `MODELSTORE_*` environment variables."""
        backend = _env_first("MODELSTORE_BACKEND", default="inmemory") or "inmemory"
        cache_backend = _env_first("MODELSTORE_CACHE_BACKEND")
        redis_ttl = _env_number("MODELSTORE_REDIS_TTL_S", "3600", int)
        return RepositorySettings(
            backend=backend.lower(),
            cache_backend=cache_backend.lower() if cache_backend else None,
            cache_maxsize=_env_number("MODELSTORE_CACHE_MAXSIZE", "1024", int),
            cache_ttl_s=_env_number("MODELSTORE_CACHE_TTL_S", "300", float),
            json_folder=_env_first("MODELSTORE_JSON_FOLDER") or "./data",
            redis_url=_redis_url_from_env(),
            redis_namespace=_env_first("MODELSTORE_REDIS_NAMESPACE") or "modelstore",
            redis_ttl_s=redis_ttl if redis_ttl > 0 else None,
            mongo_url=_env_first("MODELSTORE_MONGO_URL") or "mongodb://localhost:27017",
            mongo_database=_env_first("MODELSTORE_MONGO_DATABASE") or "modelstore",
            mongo_collection=_env_first("MODELSTORE_MONGO_COLLECTION"),
        )
