"""
Tightly packed ("non-standard packed mode") ABI encoding.

This mirrors Solidity's `abi.encodePacked(...)` for the static types used by
the signed-operations verifier, so `solidity_keccak(...)` reproduces
`keccak256(abi.encodePacked(...))` byte-for-byte.

Supported type names:
  - uint8 .. uint256     big-endian, N/8 bytes
  - bool                 1 byte
  - address              20 bytes
  - bytes1 .. bytes32    verbatim, exact width required
  - bytes                raw bytes (dynamic, no length prefix)
  - string               UTF-8 bytes (dynamic, no length prefix)
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Tuple

from .bytes import ensure_bytes, to_hex, to_uint
from .hash import keccak256

_UINT_RE = re.compile(r"^uint(\d{1,3})$")
_BYTES_N_RE = re.compile(r"^bytes(\d{1,2})$")

TypedValue = Tuple[str, Any]


def encode_packed_value(type_name: str, value: Any) -> bytes:
    m = _UINT_RE.match(type_name)
    if m:
        bits = int(m.group(1))
        if bits % 8 != 0 or not 8 <= bits <= 256:
            raise ValueError(f"invalid integer type: {type_name}")
        return to_uint(value, bits).to_bytes(bits // 8, "big")

    if type_name == "bool":
        return b"\x01" if bool(value) else b"\x00"

    if type_name == "address":
        raw = ensure_bytes(value)
        if len(raw) != 20:
            raise ValueError(f"address must be 20 bytes, got {len(raw)}")
        return raw

    m = _BYTES_N_RE.match(type_name)
    if m:
        width = int(m.group(1))
        if not 1 <= width <= 32:
            raise ValueError(f"invalid fixed bytes type: {type_name}")
        raw = ensure_bytes(value)
        if len(raw) != width:
            raise ValueError(f"{type_name} expects {width} bytes, got {len(raw)}")
        return raw

    if type_name == "bytes":
        return ensure_bytes(value)

    if type_name == "string":
        if not isinstance(value, str):
            raise TypeError("string values must be str")
        return value.encode("utf-8")

    raise ValueError(f"unsupported packed type: {type_name}")


def solidity_pack(*values: TypedValue) -> bytes:
    """Concatenate the packed encodings of (type, value) pairs, in order."""
    return b"".join(encode_packed_value(t, v) for t, v in values)


def solidity_keccak(*values: TypedValue) -> bytes:
    """keccak256(abi.encodePacked(...)) over (type, value) pairs."""
    return keccak256(solidity_pack(*values))


def solidity_keccak_hex(*values: TypedValue) -> str:
    return to_hex(solidity_keccak(*values))


def pack_words(words: Iterable[bytes]) -> bytes:
    """Concatenate pre-encoded 32-byte words, checking their width."""
    out = bytearray()
    for w in words:
        if len(w) != 32:
            raise ValueError(f"expected 32-byte word, got {len(w)} bytes")
        out += w
    return bytes(out)


__all__ = [
    "TypedValue",
    "encode_packed_value",
    "solidity_pack",
    "solidity_keccak",
    "solidity_keccak_hex",
    "pack_words",
]
