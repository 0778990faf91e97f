"""
Typed-data (EIP-712 style) hashing for signed operations.

- descriptors: frozen field orders and type strings matching the verifier
- hashing:     struct hashes, domain hash, final and cancel digests
- payload:     typed-data request objects for external signers
"""

from .descriptors import (ACTION, ASSET_AMOUNT, EIP712_DOMAIN, OPERATION,
                          StructDescriptor)
from .hashing import (cancel_hash, domain_hash, hash_action, hash_actions,
                      hash_asset_amount, hash_operation,
                      hash_operation_struct, typed_data_digest)
from .payload import build_typed_data, parse_typed_data

__all__ = [
    "StructDescriptor",
    "EIP712_DOMAIN",
    "ASSET_AMOUNT",
    "ACTION",
    "OPERATION",
    "hash_asset_amount",
    "hash_action",
    "hash_actions",
    "hash_operation_struct",
    "domain_hash",
    "typed_data_digest",
    "hash_operation",
    "cancel_hash",
    "build_typed_data",
    "parse_typed_data",
]
