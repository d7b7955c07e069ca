"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Directory-backed repository storing one JSON file per model.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from ..codec import JsonModelCodec, ModelCodec
from ..errors import StorageFailureError
from ..repository import ModelRepository
from ..types import UNBOUNDED, ById, M, model_id, take

logger = logging.getLogger("modelstore.adapters.json_files")

_SUFFIX = ".json"


class JsonFileModelRepository(ModelRepository[M]):
    """
    Repository writing each model to ``<folder>/<id>.json``.

    The folder is created on construction. Only `ById` queries are
    supported. Filesystem errors surface as `StorageFailureError`.

    Args:
        folder: Directory holding the model files.
        model_type: Class used to decode stored models.
        codec: String codec; defaults to `JsonModelCodec`.
    """

    backend_id = "json"

    def __init__(
        self,
        folder: str | os.PathLike[str],
        model_type: type[M],
        *,
        codec: ModelCodec | None = None,
    ) -> None:
        self._folder = Path(folder)
        self._model_type = model_type
        self._codec: ModelCodec = codec or JsonModelCodec()
        try:
            self._folder.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageFailureError(
                self.backend_id,
                f"unable to create folder {self._folder} for {model_type.__name__}",
            ) from exc
        self._root = self._folder.resolve()
        logger.debug("Storing %s models under %s", model_type.__name__, self._folder)

    @property
    def folder(self) -> Path:
        return self._folder

    def _path(self, id: str) -> Path:
        path = self._folder / f"{id}{_SUFFIX}"
        # ids map to files directly inside the folder, never below or above it
        if path.resolve().parent != self._root:
            raise StorageFailureError(
                self.backend_id,
                f"model id {id!r} does not name a file in {self._folder}",
            )
        return path

    def _query_id(self, query: Any) -> str:
        if isinstance(query, ById):
            return query.id
        self._unsupported(query, "ById")

    def _read(self, path: Path) -> M | None:
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StorageFailureError(self.backend_id, f"unable to read {path}") from exc
        return self._codec.decode(raw, self._model_type)

    def _model_paths(self) -> list[Path]:
        try:
            return sorted(self._folder.glob(f"*{_SUFFIX}"))
        except OSError as exc:
            raise StorageFailureError(
                self.backend_id, f"unable to list {self._folder}"
            ) from exc

    def create(self, model: M) -> None:
        path = self._path(model.id)
        tmp = path.with_name(f".{path.name}.tmp")
        try:
            tmp.write_text(self._codec.encode_str(model), encoding="utf-8")
            os.replace(tmp, path)
        except OSError as exc:
            tmp.unlink(missing_ok=True)
            raise StorageFailureError(
                self.backend_id, f"unable to write model {model.id}"
            ) from exc

    def exists(self, ref: str | M) -> bool:
        return self._path(model_id(ref)).is_file()

    def find(self, id: str) -> M | None:
        return self._read(self._path(id))

    def find_by_query(self, query: Any) -> M | None:
        return self.find(self._query_id(query))

    def find_many(self, ids: Iterable[str], limit: int = UNBOUNDED) -> list[M]:
        wanted = set(ids)
        found = (
            self._read(path)
            for path in self._model_paths()
            if path.name[: -len(_SUFFIX)] in wanted
        )
        return take((m for m in found if m is not None), limit)

    def find_many_by_query(self, query: Any, limit: int = UNBOUNDED) -> list[M]:
        model = self.find_by_query(query)
        return take([model] if model is not None else [], limit)

    def find_all(self) -> list[M]:
        found = (self._read(path) for path in self._model_paths())
        return [m for m in found if m is not None]

    def delete(self, ref: str | M) -> None:
        path = self._path(model_id(ref))
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageFailureError(
                self.backend_id, f"unable to delete model {model_id(ref)}"
            ) from exc

    def delete_by_query(self, query: Any) -> None:
        self.delete(self._query_id(query))

    def delete_many(self, ids: Iterable[str]) -> None:
        for id in ids:
            self.delete(id)

    def delete_many_by_query(self, query: Any, limit: int = UNBOUNDED) -> None:
        id = self._query_id(query)
        if limit != 0:
            self.delete(id)
