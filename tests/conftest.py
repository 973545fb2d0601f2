"""Global pytest configuration and fixtures for all tests."""

import base64
import os
import shutil
import tempfile
from pathlib import Path

import pytest
from cryptography.hazmat.primitives.asymmetric import ec

from acmestore.domain.models import (
    Certificate,
    CertificateRequest,
    CertificateResponse,
    DistinguishedName,
    KeyPair,
)


@pytest.fixture(scope="session", autouse=True)
def set_test_env_vars():
    """
    Set environment variables for testing.

    Keeps every test on the local provider and away from the user's
    real store in the home directory.
    """
    # Store original values to restore after tests
    original_env = {}
    session_dir = tempfile.mkdtemp()

    test_env_vars = {
        "STORAGE_PROVIDER": "local",
        "STORAGE_BASE_DIR": session_dir,
        "LOG_LEVEL": "DEBUG",
    }

    for key, value in test_env_vars.items():
        original_env[key] = os.environ.get(key)
        os.environ[key] = value

    yield

    # Restore original environment after all tests
    for key, original_value in original_env.items():
        if original_value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = original_value
    shutil.rmtree(session_dir, ignore_errors=True)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    # Cleanup
    shutil.rmtree(temp_path)


def make_pem(label: str, payload: bytes) -> str:
    """Wrap a payload in PEM armour."""
    body = base64.b64encode(payload).decode("ascii")
    lines = [body[i : i + 64] for i in range(0, len(body), 64)]
    return f"-----BEGIN {label}-----\n" + "\n".join(lines) + f"\n-----END {label}-----\n"


@pytest.fixture
def pem_factory():
    """Factory for PEM blocks with arbitrary payloads."""
    return make_pem


@pytest.fixture
def key_pair():
    """Create an EC P-256 key pair."""
    return KeyPair.from_private_key(ec.generate_private_key(ec.SECP256R1()))


@pytest.fixture
def other_key_pair():
    """Create a second, unrelated EC P-256 key pair."""
    return KeyPair.from_private_key(ec.generate_private_key(ec.SECP256R1()))


@pytest.fixture
def certificate():
    """Create an opaque certificate with a two-link issuer chain."""
    root = Certificate(pem=make_pem("CERTIFICATE", b"root certificate " * 8))
    intermediate = Certificate(
        pem=make_pem("CERTIFICATE", b"intermediate certificate " * 8), issuer=root
    )
    return Certificate(
        pem=make_pem("CERTIFICATE", b"leaf certificate for example.com " * 8),
        issuer=intermediate,
    )


@pytest.fixture
def distinguished_name():
    """Create a distinguished name for example.com."""
    return DistinguishedName(
        common_name="example.com",
        country_name="FR",
        organization_name="Example Corp",
        email_address="admin@example.com",
        subject_alternative_names=("www.example.com",),
    )


@pytest.fixture
def certificate_response(distinguished_name, key_pair, certificate):
    """Create the response of a completed issuance for example.com."""
    return CertificateResponse(
        certificate_request=CertificateRequest(
            distinguished_name=distinguished_name, key_pair=key_pair
        ),
        certificate=certificate,
    )
