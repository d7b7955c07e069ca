"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Error taxonomy shared by repositories, adapters and factories.
"""

from __future__ import annotations

from typing import Any


class ModelStoreError(RuntimeError):
    """Base class for every error raised by modelstore."""


class UnsupportedQueryError(ModelStoreError, TypeError):
    """Raised when a backend cannot interpret the query value it received."""

    def __init__(self, backend: str, query: Any, *, accepted: str) -> None:
        self.backend = backend
        self.query = query
        super().__init__(
            f"{backend} only accepts {accepted} queries, "
            f"got {type(query).__name__}"
        )


class StorageFailureError(ModelStoreError):
    """
    Raised when the underlying store fails (file, network, driver errors).

    The original exception is chained as `__cause__`.
    """

    def __init__(self, backend: str, message: str) -> None:
        self.backend = backend
        super().__init__(f"{backend}: {message}")


class RepositoryConfigError(ModelStoreError, ValueError):
    """Raised for missing collaborators or invalid repository configuration."""
