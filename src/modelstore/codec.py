"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Model codecs used by file, key-value and document-store adapters.
"""

from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from typing import Any, Protocol

from pydantic import BaseModel, ValidationError

from .errors import ModelStoreError
from .types import Model


class ModelCodecError(ModelStoreError):
    """Raised when a model cannot be encoded or decoded."""


class ModelCodec(Protocol):
    """Opaque string/bytes encoding of models."""

    def encode_str(self, model: Model) -> str: ...

    def encode_bytes(self, model: Model) -> bytes: ...

    def decode(self, source: str | bytes, model_type: type[Any]) -> Any: ...


class DocumentCodec(ModelCodec, Protocol):
    """Codec that can also map models to and from JSON-compatible dicts."""

    def to_payload(self, model: Model) -> dict[str, Any]: ...

    def from_payload(self, payload: dict[str, Any], model_type: type[Any]) -> Any: ...


class JsonModelCodec:
    """
    JSON codec for dataclass models.

    Models are rebuilt with ``model_type(**fields)``, so nested values come
    back as plain JSON types.
    """

    def __init__(self, *, ensure_ascii: bool = False) -> None:
        self._ensure_ascii = ensure_ascii

    def to_payload(self, model: Model) -> dict[str, Any]:
        if not is_dataclass(model) or isinstance(model, type):
            raise ModelCodecError(
                f"JsonModelCodec encodes dataclass instances, got {type(model).__name__}"
            )
        return asdict(model)

    def from_payload(self, payload: dict[str, Any], model_type: type[Any]) -> Any:
        try:
            return model_type(**payload)
        except TypeError as exc:
            raise ModelCodecError(
                f"Cannot build {model_type.__name__} from payload: {exc}"
            ) from exc

    def encode_str(self, model: Model) -> str:
        return json.dumps(
            self.to_payload(model),
            ensure_ascii=self._ensure_ascii,
            separators=(",", ":"),
            default=str,
        )

    def encode_bytes(self, model: Model) -> bytes:
        return self.encode_str(model).encode("utf-8")

    def decode(self, source: str | bytes, model_type: type[Any]) -> Any:
        if isinstance(source, bytes):
            source = source.decode("utf-8")
        try:
            payload = json.loads(source)
        except json.JSONDecodeError as exc:
            raise ModelCodecError(f"Invalid JSON for {model_type.__name__}") from exc
        if not isinstance(payload, dict):
            raise ModelCodecError(
                f"Expected a JSON object for {model_type.__name__}"
            )
        return self.from_payload(payload, model_type)


class PydanticModelCodec:
    """JSON codec for pydantic models exposing an `id` field."""

    def to_payload(self, model: Model) -> dict[str, Any]:
        return self._require(model).model_dump(mode="json")

    def from_payload(self, payload: dict[str, Any], model_type: type[Any]) -> Any:
        try:
            return model_type.model_validate(payload)
        except ValidationError as exc:
            raise ModelCodecError(str(exc)) from exc

    def encode_str(self, model: Model) -> str:
        return self._require(model).model_dump_json()

    def encode_bytes(self, model: Model) -> bytes:
        return self.encode_str(model).encode("utf-8")

    def decode(self, source: str | bytes, model_type: type[Any]) -> Any:
        if not (isinstance(model_type, type) and issubclass(model_type, BaseModel)):
            raise ModelCodecError(
                f"PydanticModelCodec decodes BaseModel subclasses, got {model_type!r}"
            )
        try:
            return model_type.model_validate_json(source)
        except ValidationError as exc:
            raise ModelCodecError(str(exc)) from exc

    @staticmethod
    def _require(model: Model) -> BaseModel:
        if not isinstance(model, BaseModel):
            raise ModelCodecError(
                f"PydanticModelCodec encodes BaseModel instances, "
                f"got {type(model).__name__}"
            )
        return model
