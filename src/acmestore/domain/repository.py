"""
Repository contract consumed by the ACME orchestration and CLI layers.

Callers use the ``has_*`` checks to decide whether to reuse stored key
material or to generate new material before starting an issuance.
"""

from abc import ABC, abstractmethod

from acmestore.domain.models import (
    Certificate,
    CertificateResponse,
    DistinguishedName,
    KeyPair,
)


class RepositoryInterface(ABC):
    """
    Abstract interface for ACME material storage.

    Every store overwrites the previous value of its slot atomically.
    There is no delete operation.
    """

    @abstractmethod
    async def store_certificate_response(
        self, certificate_response: CertificateResponse
    ) -> None:
        """
        Extract the elements of an issuance response and store them.

        The distinguished name common name is used as the domain to store
        the key pair, the distinguished name and the certificate.

        Args:
            certificate_response: Response of a completed issuance

        Raises:
            InvalidInputError: If the response has no usable common name
            StorageFailureError: If one of the writes fails
        """
        pass

    @abstractmethod
    async def store_account_key_pair(self, key_pair: KeyPair) -> None:
        """
        Store the key pair used to authenticate against the ACME server.

        Raises:
            InvalidInputError: If the key pair is incomplete
            StorageFailureError: If the write fails
        """
        pass

    @abstractmethod
    async def has_account_key_pair(self) -> bool:
        """Check if an account key pair is stored."""
        pass

    @abstractmethod
    async def load_account_key_pair(self) -> KeyPair:
        """
        Load the account key pair.

        Raises:
            NotFoundError: If no account key pair is stored
            CorruptError: If the stored key pair is malformed
        """
        pass

    @abstractmethod
    async def store_domain_key_pair(self, domain: str, key_pair: KeyPair) -> None:
        """Store the key pair of a domain."""
        pass

    @abstractmethod
    async def has_domain_key_pair(self, domain: str) -> bool:
        """Check if a key pair is stored for a domain."""
        pass

    @abstractmethod
    async def load_domain_key_pair(self, domain: str) -> KeyPair:
        """Load the key pair of a domain."""
        pass

    @abstractmethod
    async def store_domain_distinguished_name(
        self, domain: str, distinguished_name: DistinguishedName
    ) -> None:
        """Store the distinguished name of a domain."""
        pass

    @abstractmethod
    async def has_domain_distinguished_name(self, domain: str) -> bool:
        """Check if a distinguished name is stored for a domain."""
        pass

    @abstractmethod
    async def load_domain_distinguished_name(self, domain: str) -> DistinguishedName:
        """Load the distinguished name of a domain."""
        pass

    @abstractmethod
    async def store_domain_certificate(
        self, domain: str, certificate: Certificate
    ) -> None:
        """Store the certificate of a domain, replacing the previous one."""
        pass

    @abstractmethod
    async def has_domain_certificate(self, domain: str) -> bool:
        """Check if a certificate is stored for a domain."""
        pass

    @abstractmethod
    async def load_domain_certificate(self, domain: str) -> Certificate:
        """Load the certificate of a domain, with its issuer chain."""
        pass
