"""
Signer backend that forwards to an external provider over JSON-RPC.

    eth_sign                [address, digest]
    eth_signTypedData       [address, payload-object]
    eth_signTypedData_v3    [address, json.dumps(payload)]

Any JSON-RPC error (including a user declining in the wallet) is raised as
`SignerRejected` carrying the provider's message and code.
"""

from __future__ import annotations

import json
from typing import Any, List, Mapping, Optional

from ..config import ProxyConfig
from ..errors import RpcError, SignerRejected
from ..logging import get_logger
from ..rpc.http import AsyncRpcClient
from ..utils.bytes import to_uint
from .signer import TypedDataMethod

log = get_logger(__name__)


class JsonRpcSigner:
    def __init__(self, rpc: AsyncRpcClient) -> None:
        self._rpc = rpc

    @classmethod
    def from_config(cls, config: ProxyConfig, **kw: Any) -> "JsonRpcSigner":
        return cls(AsyncRpcClient.from_config(config, **kw))

    async def __aenter__(self) -> "JsonRpcSigner":
        await self._rpc.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        await self.aclose()

    async def aclose(self) -> None:
        await self._rpc.aclose()

    async def _call(self, method: str, params: List[Any]) -> Any:
        try:
            return await self._rpc.request(method, params)
        except RpcError as e:
            log.warning("signer rejected request", extra={"method": method, "code": e.code})
            raise SignerRejected(e.message, method=method, code=e.code, data=e.data) from e

    async def _call_signature(self, method: str, params: List[Any]) -> str:
        result = await self._call(method, params)
        if not isinstance(result, str):
            raise SignerRejected(f"signer returned a non-string result: {result!r}", method=method)
        return result

    async def eth_sign(self, digest: str, signer: str) -> str:
        return await self._call_signature("eth_sign", [signer, digest])

    async def sign_typed_data(
        self,
        signer: str,
        payload: Mapping[str, Any],
        method: TypedDataMethod = TypedDataMethod.ETH_SIGN_TYPED_DATA,
    ) -> str:
        method = TypedDataMethod(method)
        data: Any = dict(payload)
        if method is TypedDataMethod.ETH_SIGN_TYPED_DATA_V3:
            data = json.dumps(data, separators=(",", ":"))
        return await self._call_signature(method.value, [signer, data])

    async def chain_id(self) -> int:
        """Chain id reported by the provider (`eth_chainId`)."""
        return to_uint(await self._call("eth_chainId", []))

    async def accounts(self) -> List[str]:
        result: Optional[List[str]] = await self._call("eth_accounts", [])
        return [a.lower() for a in result or []]


__all__ = ["JsonRpcSigner"]
