"""
Struct hashing for signed operations.

Each struct hash is keccak256 over the concatenation of 32-byte words:
the struct's type hash first, then each field in descriptor order, with

  - integers and bools     -> uint256 big-endian word
  - addresses              -> left-padded to 32 bytes
  - nested structs         -> their own struct hash
  - `bytes` fields         -> keccak256(bytes)
  - `Action[]`             -> keccak256(concat(hash_action(a) for a in actions))

The final operation digest binds the struct hash to a verifying contract and
chain:  keccak256(0x1901 ‖ domain_hash ‖ struct_hash).

Everything here is pure and synchronous; digests are 0x-prefixed hex.
"""

from __future__ import annotations

from typing import Sequence, Union

from ..address import address_to_bytes32
from ..types.operation import Action, AssetAmount, Operation
from ..utils.bytes import from_hex, to_hex, uint_to_bytes32
from ..utils.hash import Keccak256, keccak256, keccak256_hex
from ..utils.packed import pack_words, solidity_keccak_hex
from .descriptors import (ACTION, ASSET_AMOUNT, CANCEL_TAG, DOMAIN_NAME,
                          DOMAIN_VERSION, EIP191_PREFIX, EIP712_DOMAIN,
                          OPERATION)

Digest = str

_DOMAIN_NAME_HASH = keccak256(DOMAIN_NAME.encode("utf-8"))
_DOMAIN_VERSION_HASH = keccak256(DOMAIN_VERSION.encode("utf-8"))


def _digest_bytes(digest: Union[Digest, bytes]) -> bytes:
    raw = from_hex(digest) if isinstance(digest, str) else bytes(digest)
    if len(raw) != 32:
        raise ValueError(f"digest must be 32 bytes, got {len(raw)}")
    return raw


def hash_asset_amount(amount: AssetAmount) -> Digest:
    return keccak256_hex(
        pack_words(
            (
                ASSET_AMOUNT.type_hash,
                uint_to_bytes32(1 if amount.sign else 0),
                uint_to_bytes32(amount.denomination),
                uint_to_bytes32(amount.ref),
                uint_to_bytes32(amount.value),
            )
        )
    )


def hash_action(action: Action) -> Digest:
    return keccak256_hex(
        pack_words(
            (
                ACTION.type_hash,
                uint_to_bytes32(action.action_type),
                address_to_bytes32(action.primary_account_owner),
                uint_to_bytes32(action.primary_account_number),
                from_hex(hash_asset_amount(action.amount)),
                uint_to_bytes32(action.primary_market_id),
                uint_to_bytes32(action.secondary_market_id),
                address_to_bytes32(action.other_address),
                address_to_bytes32(action.secondary_account_owner),
                uint_to_bytes32(action.secondary_account_number),
                keccak256(action.data),
            )
        )
    )


def hash_actions(actions: Sequence[Action]) -> Digest:
    """Order-sensitive hash of an action list; the empty list hashes to keccak256(b"")."""
    h = Keccak256()
    for action in actions:
        h.update(from_hex(hash_action(action)))
    return h.hexdigest()


def hash_operation_struct(operation: Operation) -> Digest:
    """The struct ("basic") hash of an operation, before domain binding. `signer` is not hashed."""
    return keccak256_hex(
        pack_words(
            (
                OPERATION.type_hash,
                from_hex(hash_actions(operation.actions)),
                uint_to_bytes32(operation.expiration),
                uint_to_bytes32(operation.salt),
                address_to_bytes32(operation.sender),
            )
        )
    )


def domain_hash(chain_id: int, verifying_contract: str) -> Digest:
    return keccak256_hex(
        pack_words(
            (
                EIP712_DOMAIN.type_hash,
                _DOMAIN_NAME_HASH,
                _DOMAIN_VERSION_HASH,
                uint_to_bytes32(chain_id),
                address_to_bytes32(verifying_contract),
            )
        )
    )


def typed_data_digest(domain: Union[Digest, bytes], struct_hash: Union[Digest, bytes]) -> Digest:
    """keccak256(0x1901 ‖ domain ‖ struct_hash)."""
    return keccak256_hex(EIP191_PREFIX + _digest_bytes(domain) + _digest_bytes(struct_hash))


def hash_operation(operation: Operation, *, chain_id: int, verifying_contract: str) -> Digest:
    """Final signable digest of an operation for one verifier deployment."""
    return typed_data_digest(
        domain_hash(chain_id, verifying_contract), hash_operation_struct(operation)
    )


def cancel_hash(operation_digest: Union[Digest, bytes]) -> Digest:
    """
    keccak256(abi.encodePacked("cancel", operation_digest)).

    Checked by an off-chain service rather than the verifier, so it carries no
    0x1901/domain wrapper.
    """
    return solidity_keccak_hex(("string", CANCEL_TAG), ("bytes32", _digest_bytes(operation_digest)))


def normalize_digest(digest: Union[Digest, bytes]) -> Digest:
    return to_hex(_digest_bytes(digest))


__all__ = [
    "Digest",
    "hash_asset_amount",
    "hash_action",
    "hash_actions",
    "hash_operation_struct",
    "domain_hash",
    "typed_data_digest",
    "hash_operation",
    "cancel_hash",
    "normalize_digest",
]
