"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Model identity contract, query variants and limit helpers.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from itertools import islice
from typing import Any, Generic, Protocol, TypeAlias, TypeVar, runtime_checkable

UNBOUNDED = -1


@runtime_checkable
class Model(Protocol):
    """Any entity exposing a stable, collection-unique string identifier."""

    @property
    def id(self) -> str: ...


M = TypeVar("M", bound=Model)


@dataclass(frozen=True, slots=True)
class ById:
    """Match the single model stored under `id`."""

    id: str


@dataclass(frozen=True, slots=True)
class Where(Generic[M]):
    """Match every model for which `predicate(model)` is true."""

    predicate: Callable[[M], bool]

    def matches(self, model: M) -> bool:
        return bool(self.predicate(model))


@dataclass(frozen=True, slots=True)
class Native:
    """
    Backend-specific filter forwarded verbatim.

    Only backends with their own query language (document stores) accept it.
    """

    value: Any


Query: TypeAlias = ById | Where[Any] | Native


def model_id(ref: str | Model) -> str:
    """Return the identifier of `ref`, which is either an id or a model."""
    if isinstance(ref, str):
        return ref
    return ref.id


def take(items: Iterable[M], limit: int) -> list[M]:
    """
    Materialize `items` truncated to `limit` entries.

    A negative `limit` means unbounded.
    """
    if limit < 0:
        return list(items)
    return list(islice(items, limit))
