"""
Proxy configuration: chain id, verifying contract, and signer RPC endpoint.

- Loads defaults and supports overrides via environment variables (SIGNED_OPS_*).
- Immutable: the domain digest is derived from `chain_id` and
  `verifying_contract`, so a config is never mutated after construction;
  build a new one with `with_overrides`.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .address import AddressError, ZERO_ADDRESS, addresses_are_equal, normalize
from .errors import ConfigurationMismatch

_DEFAULT_RPC = "http://127.0.0.1:8545"
_DEFAULT_CHAIN_ID = 1

_HEX_RE = re.compile(r"^0x[0-9a-fA-F]+$")


def _parse_chain_id(val: Any, default: int = _DEFAULT_CHAIN_ID) -> int:
    """
    Accepts int, decimal str, or 0x-hex str and returns int.
    """
    if val is None or val == "":
        return int(default)
    if isinstance(val, int):
        return val
    s = str(val).strip()
    if _HEX_RE.match(s):
        return int(s, 16)
    return int(s, 10)


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    return v if v is not None else default


def _ensure_scheme(url: Optional[str], allowed: tuple[str, ...]) -> Optional[str]:
    if not url:
        return url
    lower = url.lower()
    if not any(lower.startswith(f"{sch}://") for sch in allowed):
        raise ValueError(f"URL must start with {allowed}, got: {url!r}")
    return url


@dataclass(frozen=True, slots=True)
class ProxyConfig:
    # Domain
    chain_id: int = _DEFAULT_CHAIN_ID
    verifying_contract: str = ZERO_ADDRESS
    # Signer transport (JsonRpcSigner only)
    rpc_url: str = field(default=_DEFAULT_RPC)
    request_timeout: Optional[float] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "chain_id", _parse_chain_id(self.chain_id))
        if self.chain_id < 0:
            raise ValueError(f"chain id must be non-negative, got {self.chain_id}")
        try:
            object.__setattr__(self, "verifying_contract", normalize(self.verifying_contract))
        except AddressError as e:
            raise ConfigurationMismatch(
                f"invalid verifying contract address: {e}", got=self.verifying_contract
            ) from e
        _ensure_scheme(self.rpc_url, ("http", "https"))

    @classmethod
    def from_env(cls, prefix: str = "SIGNED_OPS_") -> "ProxyConfig":
        """
        Create config from environment variables:

        SIGNED_OPS_CHAIN_ID        (int or 0x-hex)
        SIGNED_OPS_PROXY_ADDRESS   (0x-hex verifying contract)
        SIGNED_OPS_RPC_URL         (http/https)
        SIGNED_OPS_TIMEOUT         (float seconds; unset = no timeout)
        """
        timeout = _env(f"{prefix}TIMEOUT")
        return cls(
            chain_id=_parse_chain_id(_env(f"{prefix}CHAIN_ID")),
            verifying_contract=_env(f"{prefix}PROXY_ADDRESS", ZERO_ADDRESS) or ZERO_ADDRESS,
            rpc_url=_env(f"{prefix}RPC_URL", _DEFAULT_RPC) or _DEFAULT_RPC,
            request_timeout=float(timeout) if timeout else None,
        )

    def with_overrides(self, **overrides: Any) -> "ProxyConfig":
        """
        Copy with keyword overrides. Unknown keys and None values are ignored.
        """
        data = self.to_dict()
        data.update({k: v for k, v in overrides.items() if k in data and v is not None})
        return ProxyConfig(**data)

    def ensure_matches(
        self, *, chain_id: Optional[int] = None, verifying_contract: Optional[str] = None
    ) -> None:
        """
        Raise ConfigurationMismatch if an observed chain id or contract address
        differs from this configuration.
        """
        if chain_id is not None and _parse_chain_id(chain_id) != self.chain_id:
            raise ConfigurationMismatch(
                "chain id differs from configuration", expected=self.chain_id, got=chain_id
            )
        if verifying_contract is not None and not addresses_are_equal(
            verifying_contract, self.verifying_contract
        ):
            raise ConfigurationMismatch(
                "verifying contract differs from configuration",
                expected=self.verifying_contract,
                got=verifying_contract,
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "chain_id": int(self.chain_id),
            "verifying_contract": self.verifying_contract,
            "rpc_url": self.rpc_url,
            "request_timeout": self.request_timeout,
        }


__all__ = ["ProxyConfig"]
