"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Redis-backed key-value repository with per-entry expiry.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import Any

from redis.exceptions import RedisError

from ..codec import JsonModelCodec, ModelCodec
from ..errors import StorageFailureError
from ..repository import ModelRepository
from ..types import UNBOUNDED, ById, M, model_id, take

logger = logging.getLogger("modelstore.adapters.redis")


class RedisModelRepository(ModelRepository[M]):
    """
    Repository storing each model as one Redis string key.

    Keys are ``{namespace}:{type_name}:{id}`` and expire after `ttl_s`
    seconds (no expiry when `ttl_s` is `None`). Only `ById` queries are
    supported.

    Requires ``redis`` (``pip install redis``).

    Args:
        redis: A synchronous ``redis.Redis`` client instance.
        model_type: Class used to decode stored models.
        namespace: Key prefix for namespacing.
        ttl_s: Entry expiry in seconds.
        codec: String codec; defaults to `JsonModelCodec`.
    """

    backend_id = "redis"

    def __init__(
        self,
        redis: Any,
        model_type: type[M],
        *,
        namespace: str = "modelstore",
        ttl_s: int | None = 3600,
        codec: ModelCodec | None = None,
        type_name: str | None = None,
    ) -> None:
        if ttl_s is not None and ttl_s <= 0:
            raise ValueError("ttl_s must be > 0 or None")
        self._redis = redis
        self._model_type = model_type
        self._namespace = namespace
        self._type_name = type_name or model_type.__name__
        self._ttl_s = ttl_s
        self._codec: ModelCodec = codec or JsonModelCodec()

    def format_id(self, id: str) -> str:
        """Return the Redis key used for model `id`."""
        return f"{self._namespace}:{self._type_name}:{id}"

    def _query_id(self, query: Any) -> str:
        if isinstance(query, ById):
            return query.id
        self._unsupported(query, "ById")

    @contextmanager
    def _guard(self, action: str) -> Iterator[None]:
        try:
            yield
        except RedisError as exc:
            logger.warning("Redis %s failed: %s", action, exc)
            raise StorageFailureError(self.backend_id, f"{action} failed") from exc

    def _decode(self, raw: str | bytes) -> M:
        return self._codec.decode(raw, self._model_type)

    def create(self, model: M) -> None:
        with self._guard("create"):
            self._redis.set(
                self.format_id(model.id),
                self._codec.encode_str(model),
                ex=self._ttl_s,
            )

    def exists(self, ref: str | M) -> bool:
        with self._guard("exists"):
            return bool(self._redis.exists(self.format_id(model_id(ref))))

    def find(self, id: str) -> M | None:
        with self._guard("find"):
            raw = self._redis.get(self.format_id(id))
        if raw is None:
            return None
        return self._decode(raw)

    def find_by_query(self, query: Any) -> M | None:
        return self.find(self._query_id(query))

    def find_many(self, ids: Iterable[str], limit: int = UNBOUNDED) -> list[M]:
        keys = [self.format_id(id) for id in dict.fromkeys(ids)]
        if not keys:
            return []
        with self._guard("find_many"):
            rows = self._redis.mget(keys)
        return take((self._decode(raw) for raw in rows if raw is not None), limit)

    def find_many_by_query(self, query: Any, limit: int = UNBOUNDED) -> list[M]:
        model = self.find_by_query(query)
        return take([model] if model is not None else [], limit)

    def find_all(self) -> list[M]:
        with self._guard("find_all"):
            keys = list(self._redis.scan_iter(match=self.format_id("*")))
            if not keys:
                return []
            rows = self._redis.mget(keys)
        return [self._decode(raw) for raw in rows if raw is not None]

    def delete(self, ref: str | M) -> None:
        with self._guard("delete"):
            self._redis.delete(self.format_id(model_id(ref)))

    def delete_by_query(self, query: Any) -> None:
        self.delete(self._query_id(query))

    def delete_many(self, ids: Iterable[str]) -> None:
        keys = [self.format_id(id) for id in ids]
        if not keys:
            return
        with self._guard("delete_many"):
            self._redis.delete(*keys)

    def delete_many_by_query(self, query: Any, limit: int = UNBOUNDED) -> None:
        id = self._query_id(query)
        if limit != 0:
            self.delete(id)
