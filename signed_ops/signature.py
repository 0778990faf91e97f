"""
signed_ops.signature
====================

Typed signatures: a 65-byte secp256k1 signature (r ‖ s ‖ v, v in {27, 28})
followed by one tag byte naming how the signed digest was derived from the
operation (or cancel) digest:

    tag 0  NO_PREPEND    signature is over the digest itself (typed-data signers)
    tag 1  DECIMAL       over keccak("\\x19Ethereum Signed Message:\\n32" ‖ digest)
    tag 2  HEXADECIMAL   over keccak("\\x19Ethereum Signed Message:\\n\\x20" ‖ digest)

Wire form is 0x-hex of the 66 bytes, i.e. the raw signature hex followed by
"00", "01" or "02".
"""

from __future__ import annotations

from enum import IntEnum
from typing import Tuple, Union

from .errors import InvalidSignature, UnsupportedSignatureType
from .utils.bytes import BytesLike, ensure_bytes, to_hex
from .utils.ecdsa import SIGNATURE_LENGTH, ec_recover
from .utils.packed import solidity_keccak

TYPED_SIGNATURE_LENGTH = SIGNATURE_LENGTH + 1

PREPEND_DEC = "\x19Ethereum Signed Message:\n32"
PREPEND_HEX = "\x19Ethereum Signed Message:\n\x20"


class SignatureType(IntEnum):
    NO_PREPEND = 0
    DECIMAL = 1
    HEXADECIMAL = 2


def _to_bytes(sig: Union[BytesLike, str]) -> bytes:
    try:
        return ensure_bytes(sig)
    except (TypeError, ValueError) as e:
        raise InvalidSignature(f"signature is not valid hex: {e}") from e


def _sig_type(value: int, signature: str | None = None) -> SignatureType:
    try:
        return SignatureType(value)
    except ValueError:
        raise UnsupportedSignatureType(sig_type=int(value), signature=signature) from None


def prepended_digest(digest: Union[BytesLike, str], sig_type: Union[SignatureType, int]) -> bytes:
    """The digest actually signed for a given tag."""
    raw = ensure_bytes(digest)
    if len(raw) != 32:
        raise ValueError(f"digest must be 32 bytes, got {len(raw)}")
    t = _sig_type(int(sig_type))
    if t is SignatureType.NO_PREPEND:
        return raw
    prefix = PREPEND_DEC if t is SignatureType.DECIMAL else PREPEND_HEX
    return solidity_keccak(("string", prefix), ("bytes32", raw))


def fix_raw_signature(signature: Union[BytesLike, str]) -> bytes:
    """
    Validate a 65-byte r ‖ s ‖ v signature and normalise v from {0, 1} to {27, 28}.
    """
    sig = _to_bytes(signature)
    if len(sig) != SIGNATURE_LENGTH:
        raise InvalidSignature(f"invalid raw signature length {len(sig)}", signature=to_hex(sig))
    v = sig[64]
    if v in (0, 1):
        v += 27
    elif v not in (27, 28):
        raise InvalidSignature(f"invalid v value: {v}", signature=to_hex(sig))
    return sig[:64] + bytes([v])


def create_typed_signature(
    signature: Union[BytesLike, str], sig_type: Union[SignatureType, int]
) -> str:
    """Append the tag byte to a raw signature."""
    t = _sig_type(int(sig_type))
    return to_hex(fix_raw_signature(signature) + bytes([int(t)]))


def split_typed_signature(typed_signature: Union[BytesLike, str]) -> Tuple[bytes, SignatureType]:
    sig = _to_bytes(typed_signature)
    if len(sig) != TYPED_SIGNATURE_LENGTH:
        raise InvalidSignature(
            f"typed signature must be {TYPED_SIGNATURE_LENGTH} bytes, got {len(sig)}",
            signature=to_hex(sig),
        )
    return sig[:SIGNATURE_LENGTH], _sig_type(sig[-1], to_hex(sig))


def ec_recover_typed_signature(digest: Union[BytesLike, str], typed_signature: Union[BytesLike, str]) -> str:
    """Recover the signer address of `digest` from a typed signature."""
    raw, sig_type = split_typed_signature(typed_signature)
    return ec_recover(prepended_digest(digest, sig_type), raw)


# Names matching the codec's encode / decode-and-recover roles.
encode = create_typed_signature
decode_and_recover = ec_recover_typed_signature


__all__ = [
    "TYPED_SIGNATURE_LENGTH",
    "PREPEND_DEC",
    "PREPEND_HEX",
    "SignatureType",
    "prepended_digest",
    "fix_raw_signature",
    "create_typed_signature",
    "split_typed_signature",
    "ec_recover_typed_signature",
    "encode",
    "decode_and_recover",
]
