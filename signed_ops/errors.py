"""
Typed error classes for signed operations.

Signature decoding, signer dispatch and configuration checks raise these so
callers can catch specific failure modes while still being able to catch the
base `SignedOpsError`. Hashing functions never raise them for well-typed input.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Optional

__all__ = [
    "SignedOpsError",
    "InvalidSignature",
    "UnsupportedSignatureType",
    "SignerRejected",
    "ConfigurationMismatch",
    "RpcError",
    "JsonRpcCode",
    "from_jsonrpc_error",
]


class SignedOpsError(Exception):
    """Base class for all signed-operations errors."""


class JsonRpcCode(IntEnum):
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603
    SERVER_ERROR = -32000

    # EIP-1193 provider errors
    USER_REJECTED = 4001
    UNAUTHORIZED = 4100
    UNSUPPORTED_METHOD = 4200


@dataclass(slots=True)
class InvalidSignature(SignedOpsError):
    """
    Raised for malformed raw signature bytes: wrong length, out-of-range
    recovery id, or a signature from which no public key can be recovered.
    """

    message: str
    signature: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        suffix = f" sig={self.signature}" if self.signature else ""
        return f"InvalidSignature: {self.message}{suffix}"


@dataclass(slots=True)
class UnsupportedSignatureType(SignedOpsError):
    """Raised when the trailing tag byte of a typed signature is unknown."""

    sig_type: int
    signature: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"UnsupportedSignatureType: {self.sig_type}"


@dataclass(slots=True)
class SignerRejected(SignedOpsError):
    """
    Raised when an external signer returns an error or declines a request.

    Fields:
      - message: the signer's own error message, passed through verbatim
      - method: signing method that was dispatched (e.g. "eth_signTypedData_v3")
      - code: provider error code if one was reported
      - data: optional error payload from the provider
    """

    message: str
    method: Optional[str] = None
    code: Optional[int] = None
    data: Optional[Any] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        where = f" [{self.method}]" if self.method else ""
        code = f" code={self.code}" if self.code is not None else ""
        return f"SignerRejected{where}{code}: {self.message}"


@dataclass(slots=True)
class ConfigurationMismatch(SignedOpsError):
    """
    Raised when the configured chain id / verifying contract disagrees with
    what a provider or caller reports. Digests computed under a stale domain
    would silently never verify on-chain.
    """

    message: str
    expected: Optional[Any] = None
    got: Optional[Any] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        bits = [self.message]
        if self.expected is not None or self.got is not None:
            bits.append(f"expected={self.expected!r} got={self.got!r}")
        return "ConfigurationMismatch: " + " ".join(bits)


@dataclass(slots=True)
class RpcError(SignedOpsError):
    """Raised when a JSON-RPC call fails at the transport or protocol level."""

    method: Optional[str]
    code: int
    message: str
    data: Optional[Any] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        parts = [f"RPC[{self.method or '-'}] code={self.code} msg={self.message!r}"]
        if self.data is not None:
            parts.append(f"data={self.data!r}")
        return " ".join(parts)

    @property
    def code_enum(self) -> Optional[JsonRpcCode]:
        try:
            return JsonRpcCode(self.code)
        except ValueError:
            return None


def from_jsonrpc_error(err_obj: Dict[str, Any], *, method: Optional[str] = None) -> RpcError:
    """
    Convert a JSON-RPC error object into RpcError.

    `err_obj` should resemble: {"code": int, "message": str, "data": any?}
    """
    code = int(err_obj.get("code", JsonRpcCode.SERVER_ERROR))
    message = str(err_obj.get("message", "Unknown JSON-RPC error"))
    return RpcError(method=method, code=code, message=message, data=err_obj.get("data"))
