"""Tests for the ACME repository façade."""

import os
import stat

import pytest
from loguru import logger

from acmestore.core.logging import add_trace_id
from acmestore.domain.errors import (
    CorruptError,
    InvalidInputError,
    NotFoundError,
    StorageFailureError,
)
from acmestore.domain.models import (
    Certificate,
    CertificateRequest,
    CertificateResponse,
    DistinguishedName,
    KeyPair,
)
from acmestore.infrastructure.implementations.local import LocalStorageRepository
from acmestore.infrastructure.implementations.memory import InMemoryStorageRepository
from acmestore.services.repository import AcmeRepository


class RecordingStorage(InMemoryStorageRepository):
    """In-memory storage recording writes and failing on demand."""

    def __init__(self, fail_on: str | None = None):
        super().__init__()
        self.fail_on = fail_on
        self.written: list[str] = []

    async def write(self, key, content, *, private=False):
        if self.fail_on and key.endswith(self.fail_on):
            raise StorageFailureError(f"Failed to write {key}", key=key)
        await super().write(key, content, private=private)
        self.written.append(key)


@pytest.fixture
def repository(temp_dir):
    """Create a repository over local storage."""
    return AcmeRepository(LocalStorageRepository(base_dir=temp_dir))


# ============================================================================
# Scenarios
# ============================================================================


@pytest.mark.asyncio
async def test_account_key_pair_scenario(repository, key_pair):
    """Test storing then loading the account key pair."""
    await repository.store_account_key_pair(key_pair)

    assert await repository.has_account_key_pair() is True
    assert await repository.load_account_key_pair() == key_pair


@pytest.mark.asyncio
async def test_certificate_response_scenario(repository, certificate_response):
    """Test a response for example.com is stored under example.com."""
    await repository.store_certificate_response(certificate_response)

    assert await repository.has_domain_certificate("example.com") is True
    assert (
        await repository.load_domain_certificate("example.com")
        == certificate_response.certificate
    )
    assert (
        await repository.load_domain_distinguished_name("example.com")
        == certificate_response.distinguished_name
    )
    assert (
        await repository.load_domain_key_pair("example.com")
        == certificate_response.key_pair
    )


@pytest.mark.asyncio
async def test_load_missing_domain_key_pair(repository):
    """Test loading from an empty repository raises NotFoundError."""
    with pytest.raises(NotFoundError):
        await repository.load_domain_key_pair("missing.example")


@pytest.mark.asyncio
async def test_corrupted_domain_key_pair(repository, key_pair, temp_dir):
    """Test out-of-band corruption is reported as CorruptError."""
    await repository.store_domain_key_pair("example.com", key_pair)
    key_file = temp_dir / "domains" / "example.com" / "key_pair.pem"
    key_file.write_bytes(key_file.read_bytes()[:100])

    with pytest.raises(CorruptError) as exc_info:
        await repository.load_domain_key_pair("example.com")

    assert exc_info.value.key == "domains/example.com/key_pair.pem"


@pytest.mark.asyncio
async def test_emptied_domain_key_pair(repository, key_pair, temp_dir):
    """Test a zero-length key file is reported as CorruptError."""
    await repository.store_domain_key_pair("example.com", key_pair)
    (temp_dir / "domains" / "example.com" / "key_pair.pem").write_bytes(b"")

    with pytest.raises(CorruptError):
        await repository.load_domain_key_pair("example.com")


# ============================================================================
# Existence semantics
# ============================================================================


@pytest.mark.asyncio
async def test_has_is_false_before_any_store(repository):
    """Test every has_* check on an empty repository."""
    assert await repository.has_account_key_pair() is False
    assert await repository.has_domain_key_pair("example.com") is False
    assert await repository.has_domain_distinguished_name("example.com") is False
    assert await repository.has_domain_certificate("example.com") is False


@pytest.mark.asyncio
async def test_has_is_true_after_each_store(
    repository, key_pair, distinguished_name, certificate
):
    """Test each store flips exactly its own slot."""
    await repository.store_domain_key_pair("example.com", key_pair)
    assert await repository.has_domain_key_pair("example.com") is True
    assert await repository.has_domain_distinguished_name("example.com") is False

    await repository.store_domain_distinguished_name("example.com", distinguished_name)
    assert await repository.has_domain_distinguished_name("example.com") is True
    assert await repository.has_domain_certificate("example.com") is False

    await repository.store_domain_certificate("example.com", certificate)
    assert await repository.has_domain_certificate("example.com") is True
    assert await repository.has_account_key_pair() is False


@pytest.mark.asyncio
async def test_domain_lookups_are_normalised(repository, key_pair):
    """Test case and trailing dot do not create separate slots."""
    await repository.store_domain_key_pair("Example.COM.", key_pair)

    assert await repository.has_domain_key_pair("example.com") is True
    assert await repository.load_domain_key_pair("EXAMPLE.com") == key_pair


@pytest.mark.asyncio
async def test_domain_named_account_does_not_touch_account_slot(
    repository, key_pair
):
    """Test the account slot lives in its own key space."""
    await repository.store_domain_key_pair("account", key_pair)

    assert await repository.has_account_key_pair() is False


@pytest.mark.asyncio
async def test_invalid_domain_is_rejected(repository, key_pair):
    with pytest.raises(InvalidInputError):
        await repository.store_domain_key_pair("../account", key_pair)
    with pytest.raises(InvalidInputError):
        await repository.has_domain_certificate("")


# ============================================================================
# Overwrite and idempotence
# ============================================================================


@pytest.mark.asyncio
async def test_store_same_value_twice(repository, certificate):
    """Test idempotent stores leave the slot readable with that value."""
    await repository.store_domain_certificate("example.com", certificate)
    await repository.store_domain_certificate("example.com", certificate)

    assert await repository.load_domain_certificate("example.com") == certificate


@pytest.mark.asyncio
async def test_renewal_supersedes_certificate(repository, certificate, pem_factory):
    """Test a later store replaces the previous certificate."""
    renewed = Certificate(
        pem=pem_factory("CERTIFICATE", b"renewed leaf"), issuer=certificate.issuer
    )

    await repository.store_domain_certificate("example.com", certificate)
    await repository.store_domain_certificate("example.com", renewed)

    assert await repository.load_domain_certificate("example.com") == renewed


@pytest.mark.asyncio
async def test_incomplete_key_pair_never_replaces_stored_one(
    repository, key_pair, other_key_pair
):
    """Test an invalid key pair is rejected and the stored one survives."""
    await repository.store_account_key_pair(key_pair)
    broken = KeyPair(
        public_key_pem=other_key_pair.public_key_pem,
        private_key_pem=key_pair.private_key_pem,
        algorithm="ec",
    )

    with pytest.raises(InvalidInputError):
        await repository.store_account_key_pair(broken)

    assert await repository.load_account_key_pair() == key_pair


# ============================================================================
# Permissions
# ============================================================================


@pytest.mark.asyncio
async def test_key_material_is_owner_only(
    repository, temp_dir, key_pair, certificate_response
):
    """Test committed key pairs are readable by the owner only."""
    await repository.store_account_key_pair(key_pair)
    await repository.store_certificate_response(certificate_response)

    for path in (
        temp_dir / "account" / "key_pair.pem",
        temp_dir / "domains" / "example.com" / "key_pair.pem",
    ):
        assert stat.S_IMODE(os.stat(path).st_mode) == 0o600


# ============================================================================
# Certificate response decomposition
# ============================================================================


@pytest.mark.asyncio
async def test_certificate_response_write_order(certificate_response):
    """Test the certificate is committed after its key pair."""
    storage = RecordingStorage()
    repository = AcmeRepository(storage)

    await repository.store_certificate_response(certificate_response)

    assert storage.written == [
        "domains/example.com/key_pair.pem",
        "domains/example.com/distinguished_name.json",
        "domains/example.com/fullchain.pem",
    ]
    assert storage.private_keys == {"domains/example.com/key_pair.pem"}


@pytest.mark.asyncio
async def test_certificate_response_uses_normalised_common_name(
    key_pair, certificate
):
    """Test the common name is normalised into the domain identifier."""
    storage = RecordingStorage()
    repository = AcmeRepository(storage)
    response = CertificateResponse(
        certificate_request=CertificateRequest(
            distinguished_name=DistinguishedName(common_name="WWW.Example.org."),
            key_pair=key_pair,
        ),
        certificate=certificate,
    )

    await repository.store_certificate_response(response)

    assert await repository.has_domain_certificate("www.example.org") is True


@pytest.mark.asyncio
async def test_certificate_response_interrupted_before_certificate(
    certificate_response,
):
    """Test a failed certificate write leaves earlier slots committed."""
    storage = RecordingStorage(fail_on="fullchain.pem")
    repository = AcmeRepository(storage)

    with pytest.raises(StorageFailureError):
        await repository.store_certificate_response(certificate_response)

    assert await repository.has_domain_key_pair("example.com") is True
    assert await repository.has_domain_distinguished_name("example.com") is True
    assert await repository.has_domain_certificate("example.com") is False

    # Re-running the issuance heals the slot
    storage.fail_on = None
    await repository.store_certificate_response(certificate_response)
    assert (
        await repository.load_domain_certificate("example.com")
        == certificate_response.certificate
    )


@pytest.mark.asyncio
async def test_certificate_response_without_usable_common_name(
    key_pair, certificate
):
    """Test a blank common name is rejected before any write."""
    storage = RecordingStorage()
    repository = AcmeRepository(storage)
    response = CertificateResponse(
        certificate_request=CertificateRequest(
            distinguished_name=DistinguishedName(common_name="   "),
            key_pair=key_pair,
        ),
        certificate=certificate,
    )

    with pytest.raises(InvalidInputError):
        await repository.store_certificate_response(response)

    assert storage.written == []


@pytest.mark.asyncio
async def test_certificate_response_with_invalid_certificate_writes_nothing(
    distinguished_name, key_pair
):
    """Test all entities are validated before the first write."""
    storage = RecordingStorage()
    repository = AcmeRepository(storage)
    response = CertificateResponse(
        certificate_request=CertificateRequest(
            distinguished_name=distinguished_name, key_pair=key_pair
        ),
        certificate=Certificate(pem="-----BEGIN CERTIFICATE-----\ntrunc"),
    )

    with pytest.raises(InvalidInputError):
        await repository.store_certificate_response(response)

    assert storage.written == []


@pytest.mark.asyncio
async def test_loads_through_memory_provider(key_pair):
    """Test the façade works on any storage provider."""
    repository = AcmeRepository(InMemoryStorageRepository())

    await repository.store_domain_key_pair("example.net", key_pair)

    assert await repository.load_domain_key_pair("example.net") == key_pair
    with pytest.raises(NotFoundError):
        await repository.load_account_key_pair()


@pytest.mark.asyncio
async def test_corrupt_distinguished_name_in_memory(distinguished_name):
    """Test CorruptError chains the underlying decode error."""
    storage = InMemoryStorageRepository()
    repository = AcmeRepository(storage)
    await storage.write("domains/example.com/distinguished_name.json", b"{broken")

    with pytest.raises(CorruptError) as exc_info:
        await repository.load_domain_distinguished_name("example.com")

    assert exc_info.value.__cause__ is not None


@pytest.mark.asyncio
async def test_certificate_response_writes_share_one_trace_id(certificate_response):
    """Test the three writes of a response are logged under one trace id."""
    repository = AcmeRepository(InMemoryStorageRepository())
    records = []
    sink_id = logger.add(
        lambda message: records.append(message.record),
        level="DEBUG",
        filter=add_trace_id,
    )

    try:
        await repository.store_certificate_response(certificate_response)
        await repository.store_certificate_response(certificate_response)
    finally:
        logger.remove(sink_id)

    write_trace_ids = [
        record["extra"]["trace_id"]
        for record in records
        if record["message"].startswith("Stored domains/")
    ]
    assert len(write_trace_ids) == 6
    first, second = set(write_trace_ids[:3]), set(write_trace_ids[3:])
    assert len(first) == 1 and len(second) == 1
    assert first != second
    assert "N/A" not in first | second
