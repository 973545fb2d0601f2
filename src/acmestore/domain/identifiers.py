"""
Slot addressing.

A slot is (account | domain, kind). Account slots live under ``account/``
and domain slots under ``domains/<domain>/`` so no domain name can ever
address the account key space.
"""

import re
from enum import StrEnum

from acmestore.domain.errors import InvalidInputError

ACCOUNT_PREFIX = "account"
DOMAINS_PREFIX = "domains"

MAX_DOMAIN_LENGTH = 253
MAX_LABEL_LENGTH = 63

_LABEL_RE = re.compile(r"^[a-z0-9](?:[a-z0-9-]*[a-z0-9])?$")


class SlotKind(StrEnum):
    """Entity kinds stored per slot, valued by their file name."""

    KEY_PAIR = "key_pair.pem"
    DISTINGUISHED_NAME = "distinguished_name.json"
    CERTIFICATE = "fullchain.pem"


def normalize_domain(domain: str) -> str:
    """
    Normalise a domain identifier.

    Strips whitespace and the trailing dot, lower-cases, converts
    internationalised names to IDNA ASCII. A leftmost ``*`` label is kept.

    Args:
        domain: Domain as given by the caller

    Returns:
        Normalised domain

    Raises:
        InvalidInputError: If the domain is empty or not a valid host name
    """
    if not isinstance(domain, str):
        raise InvalidInputError(f"Domain must be a string, got {type(domain).__name__}")

    candidate = domain.strip().removesuffix(".").lower()
    if not candidate:
        raise InvalidInputError("Domain must not be empty")

    if not candidate.isascii():
        try:
            candidate = candidate.encode("idna").decode("ascii")
        except UnicodeError as e:
            raise InvalidInputError(f"Invalid internationalised domain: {domain!r}") from e

    if len(candidate) > MAX_DOMAIN_LENGTH:
        raise InvalidInputError(f"Domain longer than {MAX_DOMAIN_LENGTH} characters")

    labels = candidate.split(".")
    for index, label in enumerate(labels):
        if label == "*" and index == 0 and len(labels) > 1:
            continue
        if len(label) > MAX_LABEL_LENGTH or not _LABEL_RE.match(label):
            raise InvalidInputError(f"Invalid domain: {domain!r}")

    return candidate


def account_key(kind: SlotKind) -> str:
    """Get the storage key of an account slot."""
    if kind is not SlotKind.KEY_PAIR:
        raise InvalidInputError(f"The account slot only holds a key pair, not {kind.name}")
    return f"{ACCOUNT_PREFIX}/{kind.value}"


def domain_key(domain: str, kind: SlotKind) -> str:
    """
    Get the storage key of a domain slot.

    Wildcard names are stored under ``_`` in place of ``*``; underscores
    never survive normalisation, so the mapping cannot collide.

    Args:
        domain: Domain identifier (normalised here)
        kind: Entity kind

    Returns:
        Relative storage key
    """
    directory = normalize_domain(domain).replace("*", "_")
    return f"{DOMAINS_PREFIX}/{directory}/{kind.value}"
