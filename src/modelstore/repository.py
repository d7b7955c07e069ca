"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Abstract CRUD contract shared by every model repository.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any, Generic, NoReturn

from .errors import UnsupportedQueryError
from .types import UNBOUNDED, M, model_id


class ModelRepository(ABC, Generic[M]):
    """
    CRUD contract over a collection of models keyed by `model.id`.

    Absence is never an error: lookups return `None` or an empty list and
    deletes of missing ids are no-ops. A negative `limit` means unbounded.
    """

    backend_id: str = "repository"

    @abstractmethod
    def create(self, model: M) -> None:
        """Upsert `model` under its own id."""

    def exists(self, ref: str | M) -> bool:
        """Return whether a model is stored under the id of `ref`."""
        return self.find(model_id(ref)) is not None

    @abstractmethod
    def find(self, id: str) -> M | None:
        """Return the model stored under `id`, or `None`."""

    @abstractmethod
    def find_by_query(self, query: Any) -> M | None:
        """Return the first model matching `query`, or `None`."""

    @abstractmethod
    def find_many(self, ids: Iterable[str], limit: int = UNBOUNDED) -> list[M]:
        """Return stored models whose id is in `ids`, truncated to `limit`."""

    @abstractmethod
    def find_many_by_query(self, query: Any, limit: int = UNBOUNDED) -> list[M]:
        """Return models matching `query`, truncated to `limit`."""

    @abstractmethod
    def find_all(self) -> list[M]:
        """Return every stored model."""

    @abstractmethod
    def delete(self, ref: str | M) -> None:
        """Remove the model stored under the id of `ref`."""

    @abstractmethod
    def delete_by_query(self, query: Any) -> None:
        """Remove the first model matching `query`."""

    @abstractmethod
    def delete_many(self, ids: Iterable[str]) -> None:
        """Remove every model whose id is in `ids`."""

    @abstractmethod
    def delete_many_by_query(self, query: Any, limit: int = UNBOUNDED) -> None:
        """Remove at most `limit` models matching `query`."""

    def _unsupported(self, query: Any, accepted: str) -> NoReturn:
        raise UnsupportedQueryError(self.backend_id, query, accepted=accepted)
