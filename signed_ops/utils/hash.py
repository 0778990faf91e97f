from __future__ import annotations

from typing import Union

from Crypto.Hash import keccak as _keccak

from .bytes import BytesLike, ensure_bytes, to_hex

# --- Keccak-256 (Ethereum-style) ----------------------------------------------
# NIST SHA3-256 in hashlib uses different padding; the verifier contract uses
# the original Keccak-256, which pycryptodome exposes as Crypto.Hash.keccak.


def _new_keccak256():
    return _keccak.new(digest_bits=256)


def keccak256(data: Union[BytesLike, str]) -> bytes:
    """Return Keccak-256 digest of *data* (bytes, or 0x-hex string)."""
    h = _new_keccak256()
    h.update(ensure_bytes(data))
    return h.digest()


def keccak256_hex(data: Union[BytesLike, str], *, prefix: bool = True) -> str:
    """Return hex string of Keccak-256 digest (0x-prefixed by default)."""
    return to_hex(keccak256(data), prefix=prefix)


def hash_string(text: str) -> str:
    """Keccak-256 of the UTF-8 encoding of *text*, as a 0x-hex digest."""
    return keccak256_hex(text.encode("utf-8"))


def hash_bytes(data: Union[BytesLike, str]) -> str:
    """Keccak-256 of raw bytes (or a 0x-hex string decoded to bytes)."""
    return keccak256_hex(data)


class Keccak256:
    """Streaming Keccak-256 hasher with update()/digest()/hexdigest()."""

    __slots__ = ("_h",)

    def __init__(self) -> None:
        self._h = _new_keccak256()

    def update(self, data: BytesLike) -> "Keccak256":
        self._h.update(ensure_bytes(data))
        return self

    def digest(self) -> bytes:
        return self._h.digest()

    def hexdigest(self, *, prefix: bool = True) -> str:
        return to_hex(self.digest(), prefix=prefix)


__all__ = [
    "keccak256",
    "keccak256_hex",
    "hash_string",
    "hash_bytes",
    "Keccak256",
]
