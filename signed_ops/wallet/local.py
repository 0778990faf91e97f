"""
In-process secp256k1 signer backed by coincurve keys.

Behaves like a node holding unlocked accounts: `eth_sign` applies the
personal-message prefix, `sign_typed_data` recomputes the typed-data digest
from the payload and signs it directly.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List, Mapping, Union

from coincurve import PrivateKey

from ..errors import SignerRejected
from ..logging import get_logger
from ..signature import SignatureType, prepended_digest
from ..typed.hashing import hash_operation
from ..typed.payload import parse_typed_data
from ..utils.bytes import BytesLike, ensure_bytes, to_hex
from ..utils.ecdsa import public_key_to_address, sign_digest
from .signer import TypedDataMethod

log = get_logger(__name__)


class LocalKeySigner:
    def __init__(self, keys: Iterable[Union[BytesLike, str]] = ()) -> None:
        self._keys: Dict[str, PrivateKey] = {}
        for k in keys:
            self.add_key(k)

    @classmethod
    def generate(cls, n: int = 1) -> "LocalKeySigner":
        """A signer holding `n` fresh random keys (tests, local tooling)."""
        return cls(PrivateKey().secret for _ in range(n))

    def add_key(self, private_key: Union[BytesLike, str]) -> str:
        """Register a 32-byte private key; returns its lowercase address."""
        raw = ensure_bytes(private_key)
        if len(raw) != 32:
            raise ValueError(f"private key must be 32 bytes, got {len(raw)}")
        pk = PrivateKey(raw)
        address = public_key_to_address(pk.public_key)
        self._keys[address] = pk
        return address

    @property
    def addresses(self) -> List[str]:
        return list(self._keys)

    def _key_for(self, signer: str, method: str) -> PrivateKey:
        pk = self._keys.get(signer.lower()) if isinstance(signer, str) else None
        if pk is None:
            log.warning("unknown signer", extra={"signer": signer, "method": method})
            raise SignerRejected(f"unknown account {signer}", method=method)
        return pk

    async def eth_sign(self, digest: str, signer: str) -> str:
        pk = self._key_for(signer, "eth_sign")
        msg = prepended_digest(digest, SignatureType.DECIMAL)
        return to_hex(sign_digest(pk.secret, msg))

    async def sign_typed_data(
        self,
        signer: str,
        payload: Union[Mapping[str, Any], str],
        method: TypedDataMethod = TypedDataMethod.ETH_SIGN_TYPED_DATA,
    ) -> str:
        name = TypedDataMethod(method).value
        pk = self._key_for(signer, name)
        try:
            data = json.loads(payload) if isinstance(payload, str) else payload
            operation, chain_id, verifying_contract = parse_typed_data(data)
        except (ValueError, KeyError, TypeError) as e:
            raise SignerRejected(f"unsupported typed-data payload: {e}", method=name) from e
        digest = hash_operation(operation, chain_id=chain_id, verifying_contract=verifying_contract)
        return to_hex(sign_digest(pk.secret, digest))


__all__ = ["LocalKeySigner"]
