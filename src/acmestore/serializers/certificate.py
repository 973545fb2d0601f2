"""
Certificate serializer.

Certificates are stored as their full chain, leaf first, and kept opaque:
only the PEM armour and base64 bodies are checked.
"""

from acmestore.domain.errors import DecodeError, InvalidInputError
from acmestore.domain.models import Certificate
from acmestore.serializers.base import Serializer
from acmestore.serializers.pem import decode_text, single_block, split_pem_blocks

CERTIFICATE_LABEL = "CERTIFICATE"
CERTIFICATE_LABELS = frozenset({CERTIFICATE_LABEL})


class CertificateSerializer(Serializer[Certificate]):
    """Serializes a certificate and its issuers to concatenated PEM."""

    def encode(self, entity: Certificate) -> bytes:
        for link in (entity, *entity.chain()):
            try:
                single_block(link.pem, CERTIFICATE_LABELS)
            except DecodeError as e:
                raise InvalidInputError(f"Invalid certificate PEM: {e}") from e

        return entity.full_chain_pem().encode("ascii")

    def decode(self, data: bytes) -> Certificate:
        blocks = split_pem_blocks(decode_text(data))

        labels = {label for label, _ in blocks}
        if labels != {CERTIFICATE_LABEL}:
            raise DecodeError(
                f"Certificate chain holds unexpected blocks: {sorted(labels)}"
            )

        # Rebuild the issuer links from the root end of the chain
        certificate = None
        for _, block in reversed(blocks):
            certificate = Certificate(pem=block, issuer=certificate)
        return certificate
