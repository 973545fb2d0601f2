"""
In-memory storage repository implementation.

Replacing a dictionary entry is atomic, so the contract holds trivially.
Nothing survives the process; use it to embed the store in tests of the
orchestration layer.
"""

from loguru import logger

from acmestore.domain.errors import CorruptError, NotFoundError
from acmestore.infrastructure.repositories.storage_repository import (
    StorageRepository,
    split_key,
)


class InMemoryStorageRepository(StorageRepository):
    """Dictionary-backed storage."""

    def __init__(self):
        self._resources: dict[str, bytes] = {}
        self.private_keys: set[str] = set()

        logger.info("Initialized InMemoryStorageRepository")

    async def write(self, key: str, content: bytes, *, private: bool = False) -> None:
        """Store a copy of the content."""
        split_key(key)
        self._resources[key] = bytes(content)

        if private:
            self.private_keys.add(key)
        else:
            self.private_keys.discard(key)

        logger.debug(f"Stored {key} ({len(content)} bytes)")

    async def read(self, key: str) -> bytes:
        """Read a resource."""
        split_key(key)
        if key not in self._resources:
            raise NotFoundError(f"{key} not found", key=key)

        content = self._resources[key]
        if not content:
            raise CorruptError(f"{key} is empty", key=key)
        return content

    async def exists(self, key: str) -> bool:
        """Check if a resource exists."""
        split_key(key)
        return key in self._resources
