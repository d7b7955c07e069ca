"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

MongoDB collection repository using the synchronous pymongo driver.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from pymongo.errors import PyMongoError

from ..codec import DocumentCodec, JsonModelCodec
from ..errors import StorageFailureError
from ..repository import ModelRepository
from ..types import UNBOUNDED, ById, M, Native, model_id

logger = logging.getLogger("modelstore.adapters.mongo")


class MongoModelRepository(ModelRepository[M]):
    """
    Repository mapping each model to one document keyed by ``_id``.

    Accepts `ById` queries and `Native` filters, either a mapping or its
    JSON text, e.g. ``Native({"name": "emmily"})``.

    Requires ``pymongo`` (``pip install pymongo``).

    Args:
        collection: A ``pymongo.collection.Collection`` instance.
        model_type: Class used to decode stored documents.
        codec: Document codec; defaults to `JsonModelCodec`.
    """

    backend_id = "mongo"

    def __init__(
        self,
        collection: Any,
        model_type: type[M],
        *,
        codec: DocumentCodec | None = None,
    ) -> None:
        self._collection = collection
        self._model_type = model_type
        self._codec: DocumentCodec = codec or JsonModelCodec()

    def _filter(self, query: Any) -> dict[str, Any]:
        if isinstance(query, ById):
            return {"_id": query.id}
        if isinstance(query, Native):
            value = query.value
            if isinstance(value, str):
                try:
                    value = json.loads(value)
                except json.JSONDecodeError:
                    self._unsupported(query, "ById and Native(dict | JSON object)")
            if isinstance(value, Mapping):
                return dict(value)
        self._unsupported(query, "ById and Native(dict | JSON object)")

    @contextmanager
    def _guard(self, action: str) -> Iterator[None]:
        try:
            yield
        except PyMongoError as exc:
            logger.warning("Mongo %s failed: %s", action, exc)
            raise StorageFailureError(self.backend_id, f"{action} failed") from exc

    def _to_document(self, model: M) -> dict[str, Any]:
        document = self._codec.to_payload(model)
        document["_id"] = model.id
        return document

    def _from_document(self, document: Mapping[str, Any]) -> M:
        payload = dict(document)
        payload.pop("_id", None)
        return self._codec.from_payload(payload, self._model_type)

    def _find(self, filter: dict[str, Any], limit: int) -> list[M]:
        if limit == 0:
            return []
        with self._guard("find"):
            cursor = self._collection.find(filter)
            if limit > 0:
                cursor = cursor.limit(limit)
            documents = list(cursor)
        return [self._from_document(document) for document in documents]

    def create(self, model: M) -> None:
        with self._guard("create"):
            self._collection.replace_one(
                {"_id": model.id},
                self._to_document(model),
                upsert=True,
            )

    def exists(self, ref: str | M) -> bool:
        with self._guard("exists"):
            return (
                self._collection.count_documents({"_id": model_id(ref)}, limit=1) > 0
            )

    def find(self, id: str) -> M | None:
        return self.find_by_query(ById(id))

    def find_by_query(self, query: Any) -> M | None:
        filter = self._filter(query)
        with self._guard("find_one"):
            document = self._collection.find_one(filter)
        if document is None:
            return None
        return self._from_document(document)

    def find_many(self, ids: Iterable[str], limit: int = UNBOUNDED) -> list[M]:
        return self._find({"_id": {"$in": list(ids)}}, limit)

    def find_many_by_query(self, query: Any, limit: int = UNBOUNDED) -> list[M]:
        return self._find(self._filter(query), limit)

    def find_all(self) -> list[M]:
        return self._find({}, UNBOUNDED)

    def delete(self, ref: str | M) -> None:
        with self._guard("delete"):
            self._collection.delete_one({"_id": model_id(ref)})

    def delete_by_query(self, query: Any) -> None:
        filter = self._filter(query)
        with self._guard("delete_one"):
            self._collection.delete_one(filter)

    def delete_many(self, ids: Iterable[str]) -> None:
        with self._guard("delete_many"):
            self._collection.delete_many({"_id": {"$in": list(ids)}})

    def delete_many_by_query(self, query: Any, limit: int = UNBOUNDED) -> None:
        filter = self._filter(query)
        if limit < 0:
            with self._guard("delete_many"):
                self._collection.delete_many(filter)
            return
        if limit == 0:
            return
        # delete_many has no limit; resolve the bounded id set first.
        with self._guard("delete_many"):
            ids = [
                document["_id"]
                for document in self._collection.find(filter, {"_id": 1}).limit(limit)
            ]
            if ids:
                self._collection.delete_many({"_id": {"$in": ids}})
