"""Distinguished name serializer (JSON document)."""

from pydantic import ValidationError

from acmestore.domain.errors import DecodeError, InvalidInputError
from acmestore.domain.models import DistinguishedName
from acmestore.serializers.base import Serializer


class DistinguishedNameSerializer(Serializer[DistinguishedName]):
    """Serializes distinguished names with pydantic's JSON support."""

    def encode(self, entity: DistinguishedName) -> bytes:
        if not isinstance(entity, DistinguishedName):
            raise InvalidInputError(
                f"Expected a DistinguishedName, got {type(entity).__name__}"
            )
        return entity.model_dump_json(indent=2).encode("utf-8")

    def decode(self, data: bytes) -> DistinguishedName:
        try:
            return DistinguishedName.model_validate_json(data)
        except ValidationError as e:
            raise DecodeError(
                f"Invalid distinguished name document: {e.error_count()} error(s)"
            ) from e
