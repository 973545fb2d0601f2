"""Abstract repository interfaces for infrastructure operations."""

from acmestore.infrastructure.repositories.storage_repository import (
    StorageRepository,
    split_key,
)

__all__ = [
    "StorageRepository",
    "split_key",
]
