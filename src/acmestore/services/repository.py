"""
Repository façade for ACME material.

Maps (account | domain, kind) slots to storage keys, serializes entities
and delegates durable writes to the atomic storage primitive.

Consistency notes:
- Each slot is written atomically on its own
- store_certificate_response writes key pair, distinguished name and
  certificate as independent writes, the certificate last, so a crash
  never publishes a certificate ahead of its key. A crash in between
  leaves earlier slots updated and later ones stale until the issuance
  is re-run.
"""

from typing import TypeVar

from loguru import logger

from acmestore.config import Settings, get_settings
from acmestore.core.trace_context import trace_scope
from acmestore.domain.errors import CorruptError, DecodeError, InvalidInputError
from acmestore.domain.identifiers import SlotKind, account_key, domain_key, normalize_domain
from acmestore.domain.models import (
    Certificate,
    CertificateResponse,
    DistinguishedName,
    KeyPair,
)
from acmestore.domain.repository import RepositoryInterface
from acmestore.infrastructure import InfrastructureFactory
from acmestore.infrastructure.repositories import StorageRepository
from acmestore.serializers import (
    CertificateSerializer,
    DistinguishedNameSerializer,
    KeyPairSerializer,
    Serializer,
)

T = TypeVar("T")


class AcmeRepository(RepositoryInterface):
    """
    Stores account keys, domain keys, distinguished names and certificates.

    Errors surface as typed failures; nothing is retried or masked.
    """

    def __init__(
        self,
        storage: StorageRepository,
        *,
        key_pair_serializer: Serializer[KeyPair] | None = None,
        distinguished_name_serializer: Serializer[DistinguishedName] | None = None,
        certificate_serializer: Serializer[Certificate] | None = None,
    ):
        """
        Initialize the repository.

        Args:
            storage: Atomic storage primitive
            key_pair_serializer: Serializer for key pairs
            distinguished_name_serializer: Serializer for distinguished names
            certificate_serializer: Serializer for certificates
        """
        self.storage = storage
        self.key_pair_serializer = key_pair_serializer or KeyPairSerializer()
        self.distinguished_name_serializer = (
            distinguished_name_serializer or DistinguishedNameSerializer()
        )
        self.certificate_serializer = certificate_serializer or CertificateSerializer()

    async def _load(self, key: str, serializer: Serializer[T]) -> T:
        """Read a slot and decode it, reporting undecodable content as corrupt."""
        data = await self.storage.read(key)
        try:
            return serializer.decode(data)
        except DecodeError as e:
            logger.error(f"Stored resource {key} is corrupt: {e}")
            raise CorruptError(f"{key} is corrupt: {e}", key=key) from e

    # ========================================================================
    # Certificate response
    # ========================================================================

    async def store_certificate_response(
        self, certificate_response: CertificateResponse
    ) -> None:
        distinguished_name = certificate_response.distinguished_name
        common_name = getattr(distinguished_name, "common_name", None)
        if not common_name or not common_name.strip():
            raise InvalidInputError("Certificate response has no common name")

        domain = normalize_domain(common_name)

        # Encode everything first so an invalid entity aborts before any write
        writes = [
            (
                domain_key(domain, SlotKind.KEY_PAIR),
                self.key_pair_serializer.encode(certificate_response.key_pair),
                True,
            ),
            (
                domain_key(domain, SlotKind.DISTINGUISHED_NAME),
                self.distinguished_name_serializer.encode(distinguished_name),
                False,
            ),
            (
                domain_key(domain, SlotKind.CERTIFICATE),
                self.certificate_serializer.encode(certificate_response.certificate),
                False,
            ),
        ]

        with trace_scope():
            logger.info(f"Storing certificate response for {domain}")
            for key, content, private in writes:
                await self.storage.write(key, content, private=private)
            logger.info(f"Stored certificate response for {domain}")

    # ========================================================================
    # Account key pair
    # ========================================================================

    async def store_account_key_pair(self, key_pair: KeyPair) -> None:
        content = self.key_pair_serializer.encode(key_pair)
        await self.storage.write(account_key(SlotKind.KEY_PAIR), content, private=True)

    async def has_account_key_pair(self) -> bool:
        return await self.storage.exists(account_key(SlotKind.KEY_PAIR))

    async def load_account_key_pair(self) -> KeyPair:
        return await self._load(account_key(SlotKind.KEY_PAIR), self.key_pair_serializer)

    # ========================================================================
    # Domain key pair
    # ========================================================================

    async def store_domain_key_pair(self, domain: str, key_pair: KeyPair) -> None:
        key = domain_key(domain, SlotKind.KEY_PAIR)
        await self.storage.write(key, self.key_pair_serializer.encode(key_pair), private=True)

    async def has_domain_key_pair(self, domain: str) -> bool:
        return await self.storage.exists(domain_key(domain, SlotKind.KEY_PAIR))

    async def load_domain_key_pair(self, domain: str) -> KeyPair:
        return await self._load(
            domain_key(domain, SlotKind.KEY_PAIR), self.key_pair_serializer
        )

    # ========================================================================
    # Domain distinguished name
    # ========================================================================

    async def store_domain_distinguished_name(
        self, domain: str, distinguished_name: DistinguishedName
    ) -> None:
        key = domain_key(domain, SlotKind.DISTINGUISHED_NAME)
        content = self.distinguished_name_serializer.encode(distinguished_name)
        await self.storage.write(key, content)

    async def has_domain_distinguished_name(self, domain: str) -> bool:
        return await self.storage.exists(domain_key(domain, SlotKind.DISTINGUISHED_NAME))

    async def load_domain_distinguished_name(self, domain: str) -> DistinguishedName:
        return await self._load(
            domain_key(domain, SlotKind.DISTINGUISHED_NAME),
            self.distinguished_name_serializer,
        )

    # ========================================================================
    # Domain certificate
    # ========================================================================

    async def store_domain_certificate(
        self, domain: str, certificate: Certificate
    ) -> None:
        key = domain_key(domain, SlotKind.CERTIFICATE)
        await self.storage.write(key, self.certificate_serializer.encode(certificate))

    async def has_domain_certificate(self, domain: str) -> bool:
        return await self.storage.exists(domain_key(domain, SlotKind.CERTIFICATE))

    async def load_domain_certificate(self, domain: str) -> Certificate:
        return await self._load(
            domain_key(domain, SlotKind.CERTIFICATE), self.certificate_serializer
        )


def get_repository(settings: Settings | None = None) -> AcmeRepository:
    """
    Build a repository over the storage provider selected by settings.

    Usage:
        from acmestore.services.repository import get_repository

        repository = get_repository()
        if not await repository.has_account_key_pair():
            ...

    Args:
        settings: Settings to use, the cached settings if omitted

    Returns:
        AcmeRepository instance
    """
    factory = InfrastructureFactory.from_settings(settings or get_settings())
    return AcmeRepository(factory.get_storage_repository())
