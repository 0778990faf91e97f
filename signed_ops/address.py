"""
signed_ops.address
==================

20-byte account addresses as used by the verifier contract.

Format
------
Addresses travel as 0x-prefixed hex (40 nibbles). Case is not significant
for equality; EIP-55 mixed-case checksums are validated when present and can
be produced with `to_checksum_address`.

This module provides:
- normalize(address) -> lowercase 0x-hex, validated
- is_valid(address) -> bool
- to_checksum_address(address) -> EIP-55 form
- addresses_are_equal(a, b) -> bool (case-insensitive)
- address_to_bytes32(address) -> 32-byte word (left-padded)
- from_public_key(pubkey) -> address
"""

from __future__ import annotations

import re
from typing import Union

from coincurve import PublicKey

from .utils.bytes import BytesLike, ensure_bytes, from_hex, left_pad32, to_hex
from .utils.ecdsa import public_key_to_address
from .utils.hash import keccak256

ZERO_ADDRESS = "0x" + "00" * 20

_ADDR_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")

__all__ = [
    "ZERO_ADDRESS",
    "AddressError",
    "normalize",
    "is_valid",
    "to_checksum_address",
    "addresses_are_equal",
    "address_to_bytes32",
    "from_public_key",
    "to_bytes",
    "from_bytes",
]


class AddressError(ValueError):
    """Raised for malformed addresses."""


def _checksum(lower_hex: str) -> str:
    digest = keccak256(lower_hex.encode("ascii")).hex()
    return "".join(
        c.upper() if c.isalpha() and int(digest[i], 16) >= 8 else c
        for i, c in enumerate(lower_hex)
    )


def normalize(address: str) -> str:
    """
    Validate and lowercase an address.

    Mixed-case input must carry a valid EIP-55 checksum; all-lower and
    all-upper input is accepted as-is.
    """
    if not isinstance(address, str):
        raise AddressError(f"address must be a string, got {type(address)!r}")
    if address.startswith("0X"):
        address = "0x" + address[2:]
    if not _ADDR_RE.match(address):
        raise AddressError(f"malformed address: {address!r}")
    body = address[2:]
    if body != body.lower() and body != body.upper() and _checksum(body.lower()) != body:
        raise AddressError(f"bad EIP-55 checksum: {address!r}")
    return "0x" + body.lower()


def is_valid(address: str) -> bool:
    try:
        normalize(address)
    except AddressError:
        return False
    return True


def to_checksum_address(address: str) -> str:
    return "0x" + _checksum(normalize(address)[2:])


def addresses_are_equal(a: str, b: str) -> bool:
    """Case-insensitive comparison; False when either side is empty."""
    if not a or not b:
        return False
    return normalize(a) == normalize(b)


def address_to_bytes32(address: str) -> bytes:
    return left_pad32(from_hex(normalize(address)))


def from_public_key(public_key: Union[BytesLike, str]) -> str:
    """Derive the address of a compressed (33 byte) or uncompressed (65 byte) public key."""
    return public_key_to_address(PublicKey(ensure_bytes(public_key)))


def to_bytes(address: str) -> bytes:
    return from_hex(normalize(address))


def from_bytes(raw: BytesLike) -> str:
    raw = bytes(raw)
    if len(raw) != 20:
        raise AddressError(f"address must be 20 bytes, got {len(raw)}")
    return to_hex(raw)
