"""
Key pair serializer.

Both halves are stored as one PEM bundle (private block, then public
block) so a key pair is a single unit of atomicity on disk.
"""

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization

from acmestore.domain.errors import DecodeError, InvalidInputError
from acmestore.domain.models import KeyPair, algorithm_of
from acmestore.serializers.base import Serializer
from acmestore.serializers.pem import decode_text, single_block, split_pem_blocks

PRIVATE_KEY_LABELS = frozenset({"PRIVATE KEY", "RSA PRIVATE KEY", "EC PRIVATE KEY"})
PUBLIC_KEY_LABELS = frozenset({"PUBLIC KEY"})


class KeyPairSerializer(Serializer[KeyPair]):
    """Serializes key pairs to a validated PEM bundle."""

    def encode(self, entity: KeyPair) -> bytes:
        try:
            private_block = single_block(entity.private_key_pem, PRIVATE_KEY_LABELS)
            public_block = single_block(entity.public_key_pem, PUBLIC_KEY_LABELS)
            algorithm = self._verify(private_block, public_block)
        except DecodeError as e:
            raise InvalidInputError(f"Incomplete key pair: {e}") from e

        if algorithm != entity.algorithm:
            raise InvalidInputError(
                f"Key pair tagged {entity.algorithm!r} holds a {algorithm!r} key"
            )

        return (private_block + public_block).encode("ascii")

    def decode(self, data: bytes) -> KeyPair:
        blocks = split_pem_blocks(decode_text(data))

        private_blocks = [block for label, block in blocks if label in PRIVATE_KEY_LABELS]
        public_blocks = [block for label, block in blocks if label in PUBLIC_KEY_LABELS]
        if len(private_blocks) != 1 or len(public_blocks) != 1 or len(blocks) != 2:
            raise DecodeError(
                "Key pair bundle must hold exactly one private and one public key"
            )

        algorithm = self._verify(private_blocks[0], public_blocks[0])
        return KeyPair(
            public_key_pem=public_blocks[0],
            private_key_pem=private_blocks[0],
            algorithm=algorithm,
        )

    @staticmethod
    def _verify(private_pem: str, public_pem: str) -> str:
        """Load both halves, check they belong together, return the algorithm."""
        try:
            private_key = serialization.load_pem_private_key(
                private_pem.encode("ascii"), password=None
            )
            public_key = serialization.load_pem_public_key(public_pem.encode("ascii"))
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise DecodeError(f"Unreadable key material: {e}") from e

        spki = (serialization.Encoding.DER, serialization.PublicFormat.SubjectPublicKeyInfo)
        if private_key.public_key().public_bytes(*spki) != public_key.public_bytes(*spki):
            raise DecodeError("Public key does not match private key")

        try:
            return algorithm_of(private_key)
        except ValueError as e:
            raise DecodeError(str(e)) from e
