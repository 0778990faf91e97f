"""
signed_ops.wallet.signer
========================

The signer seam used by `SignedOperations`.

A backend signs on behalf of an address it controls, in one of two ways:

- `eth_sign(digest, signer)`: the node-style personal sign of a 32-byte
  digest. The backend prefixes it with "\\x19Ethereum Signed Message:\\n32"
  before signing, so the result is tagged DECIMAL.
- `sign_typed_data(signer, payload, method)`: typed-data signing of the
  payload built by `signed_ops.typed.build_typed_data`. The result is over
  the typed-data digest itself and is tagged NO_PREPEND.

Both return the raw 65-byte signature as 0x-hex (v may come back as 0/1 or
27/28; callers normalise). Failures are raised as `SignerRejected`.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, Protocol, runtime_checkable


class TypedDataMethod(str, Enum):
    """Typed-data RPC dialects."""

    ETH_SIGN_TYPED_DATA = "eth_signTypedData"
    # MetaMask: payload is sent JSON-encoded as a string
    ETH_SIGN_TYPED_DATA_V3 = "eth_signTypedData_v3"


@runtime_checkable
class OperationSigner(Protocol):
    async def eth_sign(self, digest: str, signer: str) -> str:
        ...

    async def sign_typed_data(
        self, signer: str, payload: Mapping[str, Any], method: TypedDataMethod
    ) -> str:
        ...


__all__ = ["TypedDataMethod", "OperationSigner"]
