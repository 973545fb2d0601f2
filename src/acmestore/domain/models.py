"""
Entities persisted by the store.

- KeyPair: account or domain asymmetric key pair, PEM encoded
- DistinguishedName: CSR subject fields for a domain
- Certificate: issued certificate linked to its issuer chain
- CertificateRequest / CertificateResponse: transient issuance values
"""

from collections.abc import Iterator
from dataclasses import dataclass

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed448, ed25519, rsa
from cryptography.hazmat.primitives.asymmetric.types import (
    PrivateKeyTypes,
    PublicKeyTypes,
)
from pydantic import BaseModel, ConfigDict, Field


def algorithm_of(key: PrivateKeyTypes | PublicKeyTypes) -> str:
    """
    Get the algorithm tag of a private or public key object.

    Args:
        key: Key loaded with cryptography

    Returns:
        One of "rsa", "ec", "ed25519", "ed448"

    Raises:
        ValueError: If the key type is not supported
    """
    if isinstance(key, rsa.RSAPrivateKey | rsa.RSAPublicKey):
        return "rsa"
    if isinstance(key, ec.EllipticCurvePrivateKey | ec.EllipticCurvePublicKey):
        return "ec"
    if isinstance(key, ed25519.Ed25519PrivateKey | ed25519.Ed25519PublicKey):
        return "ed25519"
    if isinstance(key, ed448.Ed448PrivateKey | ed448.Ed448PublicKey):
        return "ed448"
    raise ValueError(f"Unsupported key type: {type(key).__name__}")


@dataclass(frozen=True)
class KeyPair:
    """
    Asymmetric key pair.

    Attributes:
        public_key_pem: SubjectPublicKeyInfo PEM
        private_key_pem: Unencrypted private key PEM
        algorithm: Algorithm tag (rsa, ec, ed25519, ed448)
    """

    public_key_pem: str
    private_key_pem: str
    algorithm: str

    @classmethod
    def from_private_key(cls, private_key: PrivateKeyTypes) -> "KeyPair":
        """
        Build a normalised key pair from a private key object.

        Args:
            private_key: Key generated or loaded with cryptography

        Returns:
            KeyPair with PKCS#8 private PEM and SubjectPublicKeyInfo public PEM
        """
        private_pem = private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        ).decode("ascii")
        public_pem = (
            private_key.public_key()
            .public_bytes(
                encoding=serialization.Encoding.PEM,
                format=serialization.PublicFormat.SubjectPublicKeyInfo,
            )
            .decode("ascii")
        )
        return cls(
            public_key_pem=public_pem,
            private_key_pem=private_pem,
            algorithm=algorithm_of(private_key),
        )

    def load_private_key(self) -> PrivateKeyTypes:
        """Load the private half as a cryptography key object."""
        return serialization.load_pem_private_key(
            self.private_key_pem.encode("ascii"), password=None
        )

    def __repr__(self) -> str:
        return f"KeyPair(algorithm={self.algorithm!r})"


class DistinguishedName(BaseModel):
    """Subject fields used to build the CSR of a domain."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    common_name: str = Field(..., min_length=1, description="Domain (CN)")
    country_name: str | None = Field(None, description="Country (C)")
    state_or_province_name: str | None = Field(None, description="State (ST)")
    locality_name: str | None = Field(None, description="Locality (L)")
    organization_name: str | None = Field(None, description="Organization (O)")
    organizational_unit_name: str | None = Field(
        None, description="Organizational unit (OU)"
    )
    email_address: str | None = Field(None, description="Contact email address")
    subject_alternative_names: tuple[str, ...] = Field(
        default=(), description="Additional domains covered by the certificate"
    )


@dataclass(frozen=True)
class Certificate:
    """
    Issued certificate and its trust chain.

    Attributes:
        pem: PEM encoded certificate (a single CERTIFICATE block)
        issuer: Certificate of the issuer, None for the last link
    """

    pem: str
    issuer: "Certificate | None" = None

    def chain(self) -> Iterator["Certificate"]:
        """Iterate over the issuer certificates, closest issuer first."""
        issuer = self.issuer
        while issuer is not None:
            yield issuer
            issuer = issuer.issuer

    def full_chain_pem(self) -> str:
        """Get the leaf certificate followed by every issuer, PEM encoded."""
        return "".join(
            link.pem if link.pem.endswith("\n") else f"{link.pem}\n"
            for link in (self, *self.chain())
        )


@dataclass(frozen=True)
class CertificateRequest:
    """Inputs of a certificate signing request."""

    distinguished_name: DistinguishedName
    key_pair: KeyPair


@dataclass(frozen=True)
class CertificateResponse:
    """Outcome of an issuance: the request sent and the certificate received."""

    certificate_request: CertificateRequest
    certificate: Certificate

    @property
    def distinguished_name(self) -> DistinguishedName:
        return self.certificate_request.distinguished_name

    @property
    def key_pair(self) -> KeyPair:
        return self.certificate_request.key_pair
