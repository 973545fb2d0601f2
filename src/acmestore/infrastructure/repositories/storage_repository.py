"""
Abstract interface for the atomic storage primitive.

The only component that touches the durable medium. Keys are relative,
slash-separated names such as ``domains/example.com/key_pair.pem``.
"""

from abc import ABC, abstractmethod

from acmestore.domain.errors import InvalidInputError


class StorageRepository(ABC):
    """
    Abstract interface for atomic storage operations.

    Implementations must provide:
    - All-or-nothing writes: readers see the old complete content or the
      new complete content, never a mix, even if the process dies mid-write
    - Owner-only access for private content, from the moment it is visible
    - Typed failures: NotFoundError, CorruptError, StorageFailureError
    """

    @abstractmethod
    async def write(self, key: str, content: bytes, *, private: bool = False) -> None:
        """
        Write a resource atomically, replacing any previous content.

        Args:
            key: Resource identifier
            content: Complete new content
            private: Restrict access to the owner (key material)

        Raises:
            InvalidInputError: If the key is not a valid resource name
            StorageFailureError: If staging or committing fails
        """
        pass

    @abstractmethod
    async def read(self, key: str) -> bytes:
        """
        Read a resource.

        Args:
            key: Resource identifier

        Returns:
            Stored content

        Raises:
            NotFoundError: If the resource does not exist
            CorruptError: If the stored content is empty
            StorageFailureError: If reading fails
        """
        pass

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """
        Check if a resource exists.

        Args:
            key: Resource identifier

        Returns:
            True if the resource exists, False otherwise
        """
        pass


def split_key(key: str) -> tuple[str, ...]:
    """
    Validate a resource identifier and split it into its segments.

    Segments must be non-empty and must not start with a dot, which rules
    out ``..`` traversal and the names used for staged content.

    Raises:
        InvalidInputError: If the key is not a valid resource name
    """
    if not isinstance(key, str) or not key:
        raise InvalidInputError(f"Invalid storage key: {key!r}")

    parts = tuple(key.split("/"))
    for part in parts:
        if not part or part.startswith(".") or "\\" in part or "\x00" in part:
            raise InvalidInputError(f"Invalid storage key: {key!r}", key=key)
    return parts
