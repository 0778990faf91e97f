"""
HTTP JSON-RPC client (async).

Used by `signed_ops.wallet.JsonRpcSigner` to reach an external signer
(a node or wallet provider exposing `eth_sign` / `eth_signTypedData*`).

- One request per call. No retries: a signing request may prompt a user, so
  replaying it on a transport hiccup is never safe.
- The request timeout comes from `ProxyConfig.request_timeout`; None means wait
  for the provider indefinitely.
- Tests inject an `httpx.MockTransport` through the `transport` argument.

Example:
    from signed_ops.rpc.http import AsyncRpcClient
    async with AsyncRpcClient("http://localhost:8545") as rpc:
        chain_id = await rpc.request("eth_chainId")
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from itertools import count
from typing import Any, Dict, Iterator, Mapping, Optional, Sequence, Union

import httpx

from ..config import ProxyConfig
from ..errors import JsonRpcCode, RpcError, from_jsonrpc_error
from ..logging import get_logger
from ..version import __version__

JSON = Union[dict, list, str, int, float, bool, None]
Params = Union[Sequence[Any], Mapping[str, Any], None]

log = get_logger(__name__)


@dataclass
class AsyncRpcClient:
    """Asynchronous JSON-RPC 2.0 client over HTTP."""

    url: str
    timeout: Optional[float] = None
    headers: Optional[Mapping[str, str]] = None
    transport: Optional[httpx.AsyncBaseTransport] = None
    _ids: Iterator[int] = field(init=False, default_factory=lambda: count(1))
    _client: Optional[httpx.AsyncClient] = field(init=False, default=None)

    @classmethod
    def from_config(cls, config: ProxyConfig, **kw: Any) -> "AsyncRpcClient":
        return cls(
            url=config.rpc_url,
            timeout=config.request_timeout,
            **kw,
        )

    # --- lifecycle -------------------------------------------------------

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            merged: Dict[str, str] = {
                "Content-Type": "application/json",
                "Accept": "application/json",
                "User-Agent": f"signed-ops-py/{__version__}",
            }
            if self.headers:
                merged.update(dict(self.headers))
            self._client = httpx.AsyncClient(
                timeout=self.timeout, headers=merged, transport=self.transport
            )
        return self._client

    async def __aenter__(self) -> "AsyncRpcClient":
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    # --- public API ------------------------------------------------------

    async def request(self, method: str, params: Params = None) -> JSON:
        """Perform a single JSON-RPC request and return `result` or raise RpcError."""
        payload = self._make_payload(method, params)
        body = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
        client = self._ensure_client()
        log.debug("rpc request", extra={"method": method, "rpc_id": payload["id"]})
        try:
            resp = await client.post(self.url, content=body)
        except httpx.TimeoutException as e:
            raise RpcError(method=method, code=-32098, message="Request timed out", data=str(e)) from e
        except httpx.TransportError as e:
            raise RpcError(method=method, code=-32098, message="Network error", data=str(e)) from e
        return self._handle_response(method, resp)

    # --- internals -------------------------------------------------------

    def _make_payload(self, method: str, params: Params) -> Dict[str, Any]:
        if params is None:
            params = []
        elif isinstance(params, Mapping):
            params = dict(params)
        elif isinstance(params, Sequence) and not isinstance(params, (str, bytes, bytearray)):
            params = list(params)
        else:
            params = [params]  # type: ignore[list-item]
        return {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}

    def _handle_response(self, method: str, resp: httpx.Response) -> JSON:
        try:
            data = resp.json()
        except ValueError as e:
            raise RpcError(
                method=method,
                code=JsonRpcCode.INTERNAL_ERROR,
                message="Non-JSON response from RPC",
                data=f"HTTP {resp.status_code}: {resp.text[:256]}",
            ) from e
        if not isinstance(data, dict):
            raise RpcError(method=method, code=JsonRpcCode.INTERNAL_ERROR, message="Malformed RPC response", data=data)
        err = data.get("error")
        if err:
            if not isinstance(err, dict):
                err = {"code": JsonRpcCode.SERVER_ERROR, "message": str(err)}
            raise from_jsonrpc_error(err, method=method)
        if resp.status_code >= 400:
            raise RpcError(method=method, code=JsonRpcCode.SERVER_ERROR, message=f"HTTP {resp.status_code}", data=resp.text[:256])
        if "result" not in data:
            raise RpcError(method=method, code=JsonRpcCode.INTERNAL_ERROR, message="Missing result in RPC response", data=data)
        return data["result"]


__all__ = ["AsyncRpcClient", "JSON", "Params"]
