"""JSON-RPC transport for external signers."""

from .http import AsyncRpcClient

__all__ = ["AsyncRpcClient"]
