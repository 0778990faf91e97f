"""
secp256k1 signing and public-key recovery over 32-byte digests.

Signatures are 65 bytes laid out as r (32) ‖ s (32) ‖ v (1). `v` is written as
27/28; recovery also accepts the raw recovery ids 0/1.
"""

from __future__ import annotations

from typing import Union

from coincurve import PrivateKey, PublicKey

from ..errors import InvalidSignature
from .bytes import BytesLike, ensure_bytes, to_hex
from .hash import keccak256

SIGNATURE_LENGTH = 65


def public_key_to_address(public_key: PublicKey) -> str:
    """Lowercase 0x address: last 20 bytes of keccak(uncompressed pubkey[1:])."""
    uncompressed = public_key.format(compressed=False)
    return to_hex(keccak256(uncompressed[1:])[-20:])


def private_key_to_address(private_key: Union[BytesLike, str]) -> str:
    return public_key_to_address(PrivateKey(ensure_bytes(private_key)).public_key)


def _recovery_id(v: int, signature: bytes) -> int:
    if v in (27, 28):
        return v - 27
    if v in (0, 1):
        return v
    raise InvalidSignature(f"invalid recovery id v={v}", signature=to_hex(signature))


def ec_recover(digest: Union[BytesLike, str], signature: Union[BytesLike, str]) -> str:
    """
    Recover the signer address from a 32-byte digest and a 65-byte signature.

    Raises InvalidSignature if the signature is malformed or no key recovers.
    """
    msg = ensure_bytes(digest)
    if len(msg) != 32:
        raise ValueError(f"digest must be 32 bytes, got {len(msg)}")
    try:
        sig = ensure_bytes(signature)
    except ValueError as e:
        raise InvalidSignature(f"signature is not valid hex: {e}") from e
    if len(sig) != SIGNATURE_LENGTH:
        raise InvalidSignature(
            f"signature must be {SIGNATURE_LENGTH} bytes, got {len(sig)}", signature=to_hex(sig)
        )
    rec_id = _recovery_id(sig[64], sig)
    try:
        pub = PublicKey.from_signature_and_message(sig[:64] + bytes([rec_id]), msg, hasher=None)
    except Exception as e:
        raise InvalidSignature(f"unable to recover public key: {e}", signature=to_hex(sig)) from e
    return public_key_to_address(pub)


def sign_digest(private_key: Union[BytesLike, str], digest: Union[BytesLike, str]) -> bytes:
    """
    Sign a 32-byte digest directly (no prefix). Returns r ‖ s ‖ v with v in {27, 28}.

    libsecp256k1 uses RFC6979 deterministic nonces, so equal inputs give equal signatures.
    """
    msg = ensure_bytes(digest)
    if len(msg) != 32:
        raise ValueError(f"digest must be 32 bytes, got {len(msg)}")
    sig = PrivateKey(ensure_bytes(private_key)).sign_recoverable(msg, hasher=None)
    return sig[:64] + bytes([sig[64] + 27])


__all__ = [
    "SIGNATURE_LENGTH",
    "ec_recover",
    "sign_digest",
    "public_key_to_address",
    "private_key_to_address",
]
