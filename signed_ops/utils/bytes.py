"""
Hex and fixed-width integer helpers.

Digests, addresses and signatures cross the package boundary as 0x-prefixed
lowercase hex; internally they are `bytes`. Integers are unsigned and are
range-checked against their Solidity width before being encoded.
"""

from __future__ import annotations

from typing import Union

BytesLike = Union[bytes, bytearray, memoryview]

WORD_SIZE = 32
UINT256_MAX = (1 << 256) - 1


def strip_hex_prefix(s: str) -> str:
    return s[2:] if s[:2] in ("0x", "0X") else s


def from_hex(s: str) -> bytes:
    """Decode hex with or without a 0x prefix. Odd-length input is rejected."""
    if not isinstance(s, str):
        raise TypeError(f"expected a hex string, got {type(s)!r}")
    body = strip_hex_prefix(s)
    if len(body) % 2:
        raise ValueError(f"odd-length hex: {s!r}")
    try:
        return bytes.fromhex(body)
    except ValueError:
        raise ValueError(f"not a hex string: {s!r}") from None


def ensure_bytes(data: Union[BytesLike, str]) -> bytes:
    """bytes-like values pass through; strings are decoded as hex."""
    if isinstance(data, str):
        return from_hex(data)
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise TypeError(f"expected bytes or hex string, got {type(data)!r}")


def to_hex(b: BytesLike, prefix: bool = True) -> str:
    h = bytes(b).hex()
    return "0x" + h if prefix else h


def to_uint(value: Union[int, str], bits: int = 256) -> int:
    """
    Coerce an int, decimal string or 0x-hex string to an unsigned integer and
    check that it fits in `bits` bits.
    """
    if isinstance(value, int):
        n = int(value)
    elif isinstance(value, str):
        s = value.strip()
        n = int(s, 16) if s[:2] in ("0x", "0X") else int(s, 10)
    else:
        raise TypeError(f"expected int or numeric string, got {type(value)!r}")
    if not 0 <= n < (1 << bits):
        raise ValueError(f"value {n} does not fit in uint{bits}")
    return n


def uint_to_bytes32(n: int) -> bytes:
    """Big-endian 32-byte word for an unsigned integer (ABI uint256)."""
    return to_uint(n).to_bytes(WORD_SIZE, "big")


def left_pad32(b: BytesLike) -> bytes:
    raw = bytes(b)
    if len(raw) > WORD_SIZE:
        raise ValueError(f"cannot left-pad {len(raw)} bytes into a 32-byte word")
    return raw.rjust(WORD_SIZE, b"\x00")


__all__ = [
    "BytesLike",
    "WORD_SIZE",
    "UINT256_MAX",
    "ensure_bytes",
    "to_hex",
    "strip_hex_prefix",
    "from_hex",
    "to_uint",
    "uint_to_bytes32",
    "left_pad32",
]
