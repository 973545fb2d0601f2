"""PEM armour parsing shared by the key pair and certificate serializers."""

import base64
import binascii
import re

from acmestore.domain.errors import DecodeError

_PEM_BLOCK_RE = re.compile(
    r"-----BEGIN ([A-Z0-9 ]+)-----\r?\n(.*?)-----END ([A-Z0-9 ]+)-----\r?\n?",
    re.DOTALL,
)


def split_pem_blocks(text: str) -> list[tuple[str, str]]:
    """
    Split PEM text into its blocks.

    Args:
        text: One or more concatenated PEM blocks

    Returns:
        (label, block) pairs in order, each block ending with a newline

    Raises:
        DecodeError: If the text holds no block, a truncated block, a
            mismatched END label, a non-base64 body or stray content
    """
    if not text.isascii():
        raise DecodeError("PEM text must be ASCII")

    blocks: list[tuple[str, str]] = []
    position = 0

    for match in _PEM_BLOCK_RE.finditer(text):
        if text[position : match.start()].strip():
            raise DecodeError("Unexpected content between PEM blocks")

        label, body, end_label = match.groups()
        if label != end_label:
            raise DecodeError(f"PEM block BEGIN {label} closed by END {end_label}")

        compact = "".join(body.split())
        if not compact:
            raise DecodeError(f"Empty PEM block {label}")
        try:
            base64.b64decode(compact, validate=True)
        except (binascii.Error, ValueError) as e:
            raise DecodeError(f"Invalid base64 body in PEM block {label}") from e

        blocks.append((label, match.group(0).rstrip("\r\n") + "\n"))
        position = match.end()

    if text[position:].strip():
        raise DecodeError("Truncated PEM block or trailing content")
    if not blocks:
        raise DecodeError("No PEM block found")

    return blocks


def decode_text(data: bytes) -> str:
    """Decode stored bytes as ASCII text, raising DecodeError otherwise."""
    try:
        return data.decode("ascii")
    except UnicodeDecodeError as e:
        raise DecodeError("Stored PEM data is not ASCII") from e


def single_block(pem: str, labels: frozenset[str]) -> str:
    """
    Check that text is exactly one PEM block in canonical form.

    Canonical means the text is the block as split_pem_blocks returns it:
    no surrounding whitespace and a single ``\\n`` after the END line. Only
    canonical blocks are accepted for storage, so reading them back yields
    the very same text.

    Raises:
        DecodeError: If the text is not a single canonical block of one of
            the given labels
    """
    if not isinstance(pem, str):
        raise DecodeError("PEM must be text")
    blocks = split_pem_blocks(pem)
    if len(blocks) != 1 or blocks[0][0] not in labels:
        raise DecodeError(f"Expected a single {' or '.join(sorted(labels))} block")
    if blocks[0][1] != pem:
        raise DecodeError("PEM block must end with its END line and one newline")
    return pem
