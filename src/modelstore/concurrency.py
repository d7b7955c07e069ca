"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Executor-backed async wrappers for model repositories.

Every ``<op>_async`` method submits the matching synchronous call to an
executor and returns a ``concurrent.futures.Future`` resolving to the same
value or raising the same error. Asyncio callers can await the handle with
``asyncio.wrap_future``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Any, Generic, TypeVar

from .cached import CachedModelRepository
from .repository import ModelRepository
from .types import UNBOUNDED, M

logger = logging.getLogger("modelstore.concurrency")

R = TypeVar("R")


class AsyncModelRepository(Generic[M]):
    """
    Non-blocking facade over one `ModelRepository`.

    Sync operations are forwarded as-is; async counterparts run on the
    executor. When no executor is supplied, a dedicated single-worker
    executor is created and owned by this wrapper, so calls run one at a
    time in submission order.

    Args:
        repository: Wrapped repository.
        executor: Execution context for async calls.
    """

    def __init__(
        self,
        repository: ModelRepository[M],
        *,
        executor: Executor | None = None,
    ) -> None:
        self._repository = repository
        self._owns_executor = executor is None
        if executor is None:
            executor = ThreadPoolExecutor(
                max_workers=1,
                thread_name_prefix=f"modelstore-{repository.backend_id}",
            )
        self._executor = executor

    @property
    def repository(self) -> ModelRepository[M]:
        return self._repository

    @property
    def executor(self) -> Executor:
        return self._executor

    def _submit(self, fn: Callable[..., R], *args: Any) -> Future[R]:
        return self._executor.submit(fn, *args)

    def close(self, *, wait: bool = True) -> None:
        """Shut down the executor if this wrapper created it."""
        if self._owns_executor:
            logger.debug(
                "Shutting down owned executor for %s", self._repository.backend_id
            )
            self._executor.shutdown(wait=wait)

    def __enter__(self) -> "AsyncModelRepository[M]":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # -- synchronous forwarding -------------------------------------------

    def create(self, model: M) -> None:
        self._repository.create(model)

    def exists(self, ref: str | M) -> bool:
        return self._repository.exists(ref)

    def find(self, id: str) -> M | None:
        return self._repository.find(id)

    def find_by_query(self, query: Any) -> M | None:
        return self._repository.find_by_query(query)

    def find_many(self, ids: Iterable[str], limit: int = UNBOUNDED) -> list[M]:
        return self._repository.find_many(ids, limit)

    def find_many_by_query(self, query: Any, limit: int = UNBOUNDED) -> list[M]:
        return self._repository.find_many_by_query(query, limit)

    def find_all(self) -> list[M]:
        return self._repository.find_all()

    def delete(self, ref: str | M) -> None:
        self._repository.delete(ref)

    def delete_by_query(self, query: Any) -> None:
        self._repository.delete_by_query(query)

    def delete_many(self, ids: Iterable[str]) -> None:
        self._repository.delete_many(ids)

    def delete_many_by_query(self, query: Any, limit: int = UNBOUNDED) -> None:
        self._repository.delete_many_by_query(query, limit)

    # -- async counterparts ------------------------------------------------

    def create_async(self, model: M) -> Future[None]:
        return self._submit(self._repository.create, model)

    def exists_async(self, ref: str | M) -> Future[bool]:
        return self._submit(self._repository.exists, ref)

    def find_async(self, id: str) -> Future[M | None]:
        return self._submit(self._repository.find, id)

    def find_by_query_async(self, query: Any) -> Future[M | None]:
        return self._submit(self._repository.find_by_query, query)

    def find_many_async(
        self,
        ids: Iterable[str],
        limit: int = UNBOUNDED,
    ) -> Future[list[M]]:
        # Snapshot so a caller-side generator is not consumed on the worker.
        return self._submit(self._repository.find_many, list(ids), limit)

    def find_many_by_query_async(
        self,
        query: Any,
        limit: int = UNBOUNDED,
    ) -> Future[list[M]]:
        return self._submit(self._repository.find_many_by_query, query, limit)

    def find_all_async(self) -> Future[list[M]]:
        return self._submit(self._repository.find_all)

    def delete_async(self, ref: str | M) -> Future[None]:
        return self._submit(self._repository.delete, ref)

    def delete_by_query_async(self, query: Any) -> Future[None]:
        return self._submit(self._repository.delete_by_query, query)

    def delete_many_async(self, ids: Iterable[str]) -> Future[None]:
        return self._submit(self._repository.delete_many, list(ids))

    def delete_many_by_query_async(
        self,
        query: Any,
        limit: int = UNBOUNDED,
    ) -> Future[None]:
        return self._submit(self._repository.delete_many_by_query, query, limit)


class AsyncCachedModelRepository(AsyncModelRepository[M]):
    """Non-blocking facade over a `CachedModelRepository`."""

    def __init__(
        self,
        repository: CachedModelRepository[M],
        *,
        executor: Executor | None = None,
    ) -> None:
        super().__init__(repository, executor=executor)
        self._cached = repository

    @property
    def repository(self) -> CachedModelRepository[M]:
        return self._cached

    def set_cache_repository(self, repository: ModelRepository[M] | None) -> None:
        self._cached.set_cache_repository(repository)

    # -- synchronous forwarding -------------------------------------------

    def cache(self, model: M) -> None:
        self._cached.cache(model)

    def get(self, id: str) -> M | None:
        return self._cached.get(id)

    def get_or_find(self, id: str) -> M | None:
        return self._cached.get_or_find(id)

    def get_by_query(self, query: Any) -> M | None:
        return self._cached.get_by_query(query)

    def get_or_find_by_query(self, query: Any) -> M | None:
        return self._cached.get_or_find_by_query(query)

    def get_many(self, ids: Iterable[str], limit: int = UNBOUNDED) -> list[M]:
        return self._cached.get_many(ids, limit)

    def get_many_by_query(self, query: Any, limit: int = UNBOUNDED) -> list[M]:
        return self._cached.get_many_by_query(query, limit)

    def get_all(self) -> list[M]:
        return self._cached.get_all()

    def delete_cached(self, ref: str | M) -> None:
        self._cached.delete_cached(ref)

    def delete_by_query_cached(self, query: Any) -> None:
        self._cached.delete_by_query_cached(query)

    def delete_many_cached(self, ids: Iterable[str]) -> None:
        self._cached.delete_many_cached(ids)

    def delete_many_by_query_cached(
        self,
        query: Any,
        limit: int = UNBOUNDED,
    ) -> None:
        self._cached.delete_many_by_query_cached(query, limit)

    # -- async counterparts ------------------------------------------------

    def cache_async(self, model: M) -> Future[None]:
        return self._submit(self._cached.cache, model)

    def get_async(self, id: str) -> Future[M | None]:
        return self._submit(self._cached.get, id)

    def get_or_find_async(self, id: str) -> Future[M | None]:
        return self._submit(self._cached.get_or_find, id)

    def get_by_query_async(self, query: Any) -> Future[M | None]:
        return self._submit(self._cached.get_by_query, query)

    def get_or_find_by_query_async(self, query: Any) -> Future[M | None]:
        return self._submit(self._cached.get_or_find_by_query, query)

    def get_many_async(
        self,
        ids: Iterable[str],
        limit: int = UNBOUNDED,
    ) -> Future[list[M]]:
        return self._submit(self._cached.get_many, list(ids), limit)

    def get_many_by_query_async(
        self,
        query: Any,
        limit: int = UNBOUNDED,
    ) -> Future[list[M]]:
        return self._submit(self._cached.get_many_by_query, query, limit)

    def get_all_async(self) -> Future[list[M]]:
        return self._submit(self._cached.get_all)

    def delete_cached_async(self, ref: str | M) -> Future[None]:
        return self._submit(self._cached.delete_cached, ref)

    def delete_by_query_cached_async(self, query: Any) -> Future[None]:
        return self._submit(self._cached.delete_by_query_cached, query)

    def delete_many_cached_async(self, ids: Iterable[str]) -> Future[None]:
        return self._submit(self._cached.delete_many_cached, list(ids))

    def delete_many_by_query_cached_async(
        self,
        query: Any,
        limit: int = UNBOUNDED,
    ) -> Future[None]:
        return self._submit(self._cached.delete_many_by_query_cached, query, limit)
