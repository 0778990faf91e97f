"""
signed_ops.wallet
=================

Signer backends for `SignedOperations`:

- `LocalKeySigner` holds secp256k1 keys in-process.
- `JsonRpcSigner` forwards to a node or wallet provider over HTTP JSON-RPC.
"""

from .local import LocalKeySigner
from .rpc import JsonRpcSigner
from .signer import OperationSigner, TypedDataMethod

__all__ = ["OperationSigner", "TypedDataMethod", "LocalKeySigner", "JsonRpcSigner"]
