"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Dict-backed model repository.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, MutableMapping
from threading import Lock
from typing import Any

from ..repository import ModelRepository
from ..types import UNBOUNDED, ById, M, Where, model_id, take


class InMemoryModelRepository(ModelRepository[M]):
    """
    Process-local repository holding models in a mutable mapping.

    Suitable for tests and single-process use; content is lost on restart.
    Accepts `ById` and `Where` queries. Iteration order is insertion order.
    """

    backend_id = "inmemory"

    def __init__(self, rows: MutableMapping[str, M] | None = None) -> None:
        self._rows: MutableMapping[str, M] = {} if rows is None else rows
        self._lock = Lock()

    def _matcher(self, query: Any) -> Callable[[M], bool]:
        if isinstance(query, ById):
            return lambda model: model.id == query.id
        if isinstance(query, Where):
            return query.matches
        self._unsupported(query, "ById and Where")

    def _snapshot(self) -> list[M]:
        with self._lock:
            return list(self._rows.values())

    def create(self, model: M) -> None:
        with self._lock:
            self._rows[model.id] = model

    def exists(self, ref: str | M) -> bool:
        with self._lock:
            return model_id(ref) in self._rows

    def find(self, id: str) -> M | None:
        with self._lock:
            return self._rows.get(id)

    def find_by_query(self, query: Any) -> M | None:
        matcher = self._matcher(query)
        return next((m for m in self._snapshot() if matcher(m)), None)

    def find_many(self, ids: Iterable[str], limit: int = UNBOUNDED) -> list[M]:
        wanted = set(ids)
        return take((m for m in self._snapshot() if m.id in wanted), limit)

    def find_many_by_query(self, query: Any, limit: int = UNBOUNDED) -> list[M]:
        matcher = self._matcher(query)
        return take((m for m in self._snapshot() if matcher(m)), limit)

    def find_all(self) -> list[M]:
        return self._snapshot()

    def delete(self, ref: str | M) -> None:
        with self._lock:
            self._rows.pop(model_id(ref), None)

    def delete_by_query(self, query: Any) -> None:
        model = self.find_by_query(query)
        if model is not None:
            self.delete(model.id)

    def delete_many(self, ids: Iterable[str]) -> None:
        with self._lock:
            for id in ids:
                self._rows.pop(id, None)

    def delete_many_by_query(self, query: Any, limit: int = UNBOUNDED) -> None:
        self.delete_many([m.id for m in self.find_many_by_query(query, limit)])
