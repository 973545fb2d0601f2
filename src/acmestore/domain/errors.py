"""
Typed failures raised by the store.

Callers translate these into operator diagnostics and retry decisions;
the store itself never retries and never masks a failure.
"""


class RepositoryError(Exception):
    """Base class for every failure surfaced by the repository."""

    def __init__(self, message: str, key: str | None = None):
        super().__init__(message)
        self.key = key


class NotFoundError(RepositoryError):
    """Raised when loading a slot that has never been stored."""


class CorruptError(RepositoryError):
    """Raised when stored bytes are empty or fail to decode."""


class StorageFailureError(RepositoryError):
    """Raised when the durable medium fails during read, write or commit."""


class InvalidInputError(RepositoryError, ValueError):
    """Raised for unusable input: bad domain, incomplete key pair, missing common name."""


class DecodeError(ValueError):
    """Raised by serializers when bytes cannot be turned back into an entity."""
