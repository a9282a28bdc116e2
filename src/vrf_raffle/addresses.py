from __future__ import annotations

from typing import List

import base58

# Public keys are 32 raw bytes, base58 encoded
PUBKEY_LEN = 32


class InvalidAddress(ValueError):
    pass


def normalize_address(address: str) -> str:
    """
    Validates a base58 public key and returns its canonical encoding.
    Surrounding whitespace is ignored.
    """
    s = address.strip() if isinstance(address, str) else ""
    if not s:
        raise InvalidAddress("Empty address")
    try:
        raw = base58.b58decode(s)
    except ValueError as e:
        raise InvalidAddress(f"Address {s!r} is not base58: {e}")
    if len(raw) != PUBKEY_LEN:
        raise InvalidAddress(
            f"Address {s!r} decodes to {len(raw)} bytes, expected {PUBKEY_LEN}"
        )
    return base58.b58encode(raw).decode("ascii")


def address_from_bytes(raw: bytes) -> str:
    if len(raw) != PUBKEY_LEN:
        raise InvalidAddress(f"Expected {PUBKEY_LEN} bytes, got {len(raw)}")
    return base58.b58encode(raw).decode("ascii")


def parse_address_list(text: str) -> List[str]:
    """Comma or whitespace separated list; order and duplicates are kept."""
    parts = text.replace(",", " ").split()
    return [normalize_address(p) for p in parts]
