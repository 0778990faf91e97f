"""
Utility helpers for signed operations.

Re-exports:
- bytes: hex helpers and uint/word coercion
- hash: Keccak-256 convenience wrappers
- packed: tightly packed ABI encoding (abi.encodePacked)
- ecdsa: secp256k1 sign / recover
"""

from .bytes import (ensure_bytes, from_hex, left_pad32, strip_hex_prefix,
                    to_hex, to_uint, uint_to_bytes32)
from .ecdsa import ec_recover, private_key_to_address, sign_digest
from .hash import hash_bytes, hash_string, keccak256, keccak256_hex
from .packed import solidity_keccak, solidity_keccak_hex, solidity_pack

__all__ = [
    # bytes
    "to_hex",
    "from_hex",
    "ensure_bytes",
    "strip_hex_prefix",
    "to_uint",
    "uint_to_bytes32",
    "left_pad32",
    # hash
    "keccak256",
    "keccak256_hex",
    "hash_string",
    "hash_bytes",
    # packed
    "solidity_pack",
    "solidity_keccak",
    "solidity_keccak_hex",
    # ecdsa
    "ec_recover",
    "sign_digest",
    "private_key_to_address",
]
