"""Local file-based infrastructure implementations."""

from acmestore.infrastructure.implementations.local.storage_repository import (
    LocalStorageRepository,
)

__all__ = [
    "LocalStorageRepository",
]
