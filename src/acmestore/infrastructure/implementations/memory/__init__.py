"""In-memory infrastructure implementations for embedding and tests."""

from acmestore.infrastructure.implementations.memory.storage_repository import (
    InMemoryStorageRepository,
)

__all__ = [
    "InMemoryStorageRepository",
]
