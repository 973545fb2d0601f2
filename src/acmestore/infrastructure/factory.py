"""
Infrastructure factory for storage provider selection.

Selects the storage implementation based on configuration:
- local: File-based atomic storage
- memory: Dictionary-backed storage, nothing is persisted

Usage:
    from acmestore.infrastructure import InfrastructureFactory
    from acmestore.config import get_settings

    # Option 1: From settings
    factory = InfrastructureFactory.from_settings(get_settings())

    # Option 2: Manual configuration
    factory = InfrastructureFactory(provider="local", base_dir="/var/lib/acme")

    storage = factory.get_storage_repository()
"""

from typing import TYPE_CHECKING, Literal

from loguru import logger

from acmestore.infrastructure.repositories import StorageRepository

if TYPE_CHECKING:
    from acmestore.config import Settings

StorageProvider = Literal["local", "memory"]


class InfrastructureFactory:
    """
    Factory for creating storage repository instances.

    Provides dependency injection for provider-agnostic operations.
    """

    def __init__(self, provider: StorageProvider | None = None, **config):
        """
        Initialize infrastructure factory.

        Args:
            provider: Storage provider ("local", "memory"), "local" if None
            **config: Provider-specific configuration options
                (base_dir, public_file_mode, directory_mode, durable)
        """
        if provider is None:
            provider = "local"

        self.provider = provider
        self.config = config

        logger.info(f"Initialized InfrastructureFactory with provider: {provider}")

    @classmethod
    def from_settings(cls, settings: "Settings") -> "InfrastructureFactory":
        """
        Create factory from Settings object.

        Args:
            settings: Settings from config.py

        Returns:
            InfrastructureFactory configured from settings
        """
        config = {
            "base_dir": settings.get_storage_base_dir(),
            "public_file_mode": settings.storage_public_file_mode,
            "directory_mode": settings.storage_directory_mode,
            "durable": settings.storage_durable_writes,
        }

        return cls(provider=settings.storage_provider, **config)

    def get_storage_repository(self) -> StorageRepository:
        """
        Get storage repository for configured provider.

        Returns:
            StorageRepository implementation

        Raises:
            ValueError: If provider is not supported
        """
        if self.provider == "local":
            from acmestore.infrastructure.implementations.local import (
                LocalStorageRepository,
            )

            return LocalStorageRepository(
                base_dir=self.config.get("base_dir", "./.acmestore"),
                public_file_mode=self.config.get("public_file_mode", 0o644),
                directory_mode=self.config.get("directory_mode", 0o700),
                durable=self.config.get("durable", True),
            )

        elif self.provider == "memory":
            from acmestore.infrastructure.implementations.memory import (
                InMemoryStorageRepository,
            )

            return InMemoryStorageRepository()

        else:
            raise ValueError(f"Unsupported provider: {self.provider}")
