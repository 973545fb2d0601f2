"""
acmestore - crash-consistent storage for ACME client material.

Stores the account key pair and, per domain, the key pair, the CSR
distinguished name and the issued certificate chain.
"""

from acmestore.domain.errors import (
    CorruptError,
    DecodeError,
    InvalidInputError,
    NotFoundError,
    RepositoryError,
    StorageFailureError,
)
from acmestore.domain.models import (
    Certificate,
    CertificateRequest,
    CertificateResponse,
    DistinguishedName,
    KeyPair,
)
from acmestore.domain.repository import RepositoryInterface
from acmestore.services.repository import AcmeRepository, get_repository

__all__ = [
    "AcmeRepository",
    "Certificate",
    "CertificateRequest",
    "CertificateResponse",
    "CorruptError",
    "DecodeError",
    "DistinguishedName",
    "InvalidInputError",
    "KeyPair",
    "NotFoundError",
    "RepositoryError",
    "RepositoryInterface",
    "StorageFailureError",
    "get_repository",
]
