"""Pure, stateless transforms between entities and their stored bytes."""

from acmestore.serializers.base import Serializer
from acmestore.serializers.certificate import CertificateSerializer
from acmestore.serializers.distinguished_name import DistinguishedNameSerializer
from acmestore.serializers.key_pair import KeyPairSerializer

__all__ = [
    "CertificateSerializer",
    "DistinguishedNameSerializer",
    "KeyPairSerializer",
    "Serializer",
]
