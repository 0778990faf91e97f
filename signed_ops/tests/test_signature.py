import pytest

from signed_ops.errors import InvalidSignature, UnsupportedSignatureType
from signed_ops.signature import (PREPEND_DEC, PREPEND_HEX, SignatureType, create_typed_signature,
                                  decode_and_recover, ec_recover_typed_signature, encode,
                                  fix_raw_signature, prepended_digest, split_typed_signature)
from signed_ops.utils.ecdsa import ec_recover, sign_digest
from signed_ops.utils.hash import keccak256

from .vectors import (EMPTY_OPERATION_HASH, PRIVATE_KEY, SIG_DECIMAL, SIG_HEXADECIMAL,
                      SIG_NO_PREPEND, SIGNER)


@pytest.mark.parametrize("typed_sig", [SIG_NO_PREPEND, SIG_DECIMAL, SIG_HEXADECIMAL])
def test_golden_signatures_recover_signer(typed_sig):
    assert ec_recover_typed_signature(EMPTY_OPERATION_HASH, typed_sig) == SIGNER
    assert decode_and_recover(EMPTY_OPERATION_HASH, typed_sig) == SIGNER


def test_tag_selects_prepended_digest():
    raw, tag = split_typed_signature(SIG_DECIMAL)
    assert tag is SignatureType.DECIMAL
    # the same raw bytes under another tag recover a different address
    assert ec_recover_typed_signature(EMPTY_OPERATION_HASH, raw + b"\x00") != SIGNER


def test_prepended_digest_prefixes():
    d = bytes.fromhex(EMPTY_OPERATION_HASH[2:])
    assert prepended_digest(d, SignatureType.NO_PREPEND) == d
    assert prepended_digest(d, SignatureType.DECIMAL) == keccak256(PREPEND_DEC.encode() + d)
    assert prepended_digest(d, SignatureType.HEXADECIMAL) == keccak256(PREPEND_HEX.encode() + d)
    assert PREPEND_DEC.encode().endswith(b"\n32")
    assert PREPEND_HEX.encode().endswith(b"\n ")


@pytest.mark.parametrize("tag", list(SignatureType))
def test_tag_round_trip_matches_direct_recovery(tag):
    digest = keccak256(b"round trip")
    raw = sign_digest(PRIVATE_KEY, prepended_digest(digest, tag))
    typed = encode(raw, tag)
    assert typed.endswith(f"{int(tag):02x}")
    assert len(typed) == 2 + 66 * 2
    assert decode_and_recover(digest, typed) == ec_recover(prepended_digest(digest, tag), raw)
    assert decode_and_recover(digest, typed) == SIGNER


def test_fix_raw_signature_normalises_v():
    raw, _ = split_typed_signature(SIG_NO_PREPEND)
    low_v = raw[:64] + bytes([raw[64] - 27])
    assert fix_raw_signature(low_v) == raw
    assert fix_raw_signature(raw) == raw
    assert create_typed_signature(low_v, SignatureType.NO_PREPEND) == SIG_NO_PREPEND
    with pytest.raises(InvalidSignature):
        fix_raw_signature(raw[:64] + b"\x05")
    with pytest.raises(InvalidSignature):
        fix_raw_signature(raw[:60])


def test_unknown_tag_is_unsupported():
    bad = SIG_DECIMAL[:-2] + "07"
    with pytest.raises(UnsupportedSignatureType) as exc:
        ec_recover_typed_signature(EMPTY_OPERATION_HASH, bad)
    assert exc.value.sig_type == 7
    with pytest.raises(UnsupportedSignatureType):
        create_typed_signature(SIG_DECIMAL[:-2], 9)


@pytest.mark.parametrize(
    "typed_sig",
    [
        SIG_DECIMAL[:-4] + "01",  # 65 bytes
        SIG_DECIMAL + "00",  # 67 bytes
        "0x",
        "0xabc",
        SIG_DECIMAL[:130] + "0501",  # v = 5
    ],
)
def test_malformed_typed_signatures(typed_sig):
    with pytest.raises(InvalidSignature):
        ec_recover_typed_signature(EMPTY_OPERATION_HASH, typed_sig)
