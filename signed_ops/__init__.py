"""
signed-ops: digests and signatures for SignedOperationProxy operations.
Convenience exports for the most common APIs.
"""

from .version import __version__  # noqa: F401

# Config & errors
from .config import ProxyConfig  # noqa: F401
from .errors import (  # noqa: F401
    ConfigurationMismatch,
    InvalidSignature,
    RpcError,
    SignedOpsError,
    SignerRejected,
    UnsupportedSignatureType,
)

# Types
from .types import (  # noqa: F401
    Action,
    ActionType,
    AmountDenomination,
    AmountReference,
    AssetAmount,
    Operation,
    SignedOperation,
)

# Hashing & signatures
from .typed import build_typed_data, cancel_hash, domain_hash, hash_operation  # noqa: F401
from .signature import (  # noqa: F401
    SignatureType,
    create_typed_signature,
    ec_recover_typed_signature,
)

# Signing / verification
from .operations import SignedOperations  # noqa: F401
from .wallet import JsonRpcSigner, LocalKeySigner, OperationSigner, TypedDataMethod  # noqa: F401

# Proxy contract
from .contracts import ContractCaller, SignedOperationProxy  # noqa: F401

__all__ = [
    "__version__",
    "ProxyConfig",
    "SignedOpsError",
    "InvalidSignature",
    "UnsupportedSignatureType",
    "SignerRejected",
    "ConfigurationMismatch",
    "RpcError",
    "ActionType",
    "AmountDenomination",
    "AmountReference",
    "AssetAmount",
    "Action",
    "Operation",
    "SignedOperation",
    "domain_hash",
    "hash_operation",
    "cancel_hash",
    "build_typed_data",
    "SignatureType",
    "create_typed_signature",
    "ec_recover_typed_signature",
    "SignedOperations",
    "OperationSigner",
    "TypedDataMethod",
    "LocalKeySigner",
    "JsonRpcSigner",
    "ContractCaller",
    "SignedOperationProxy",
]
