"""Common serializer contract."""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

T = TypeVar("T")


class Serializer(ABC, Generic[T]):
    """
    Bidirectional transform between an entity and bytes.

    ``decode(encode(x)) == x`` for every valid ``x``. ``decode`` raises
    DecodeError on malformed bytes and never returns a partial entity;
    ``encode`` raises InvalidInputError for an invalid entity.
    """

    @abstractmethod
    def encode(self, entity: T) -> bytes:
        pass

    @abstractmethod
    def decode(self, data: bytes) -> T:
        pass
