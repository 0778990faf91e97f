"""
signed_ops.operations
=====================

`SignedOperations` computes operation / cancel digests for one verifier
deployment, asks a signer backend to sign them, and checks typed signatures
against the address that should have produced them.

    from signed_ops import ProxyConfig, SignedOperations
    from signed_ops.wallet import LocalKeySigner

    signer = LocalKeySigner([private_key])
    ops = SignedOperations(ProxyConfig(chain_id=1, verifying_contract=proxy), signer)

    signed = await ops.sign_operation(op)             # eth_sign, DECIMAL tag
    assert ops.operation_has_valid_signature(signed)

Hashing and verification are synchronous. Only the `eth_sign_*` and
`sign_operation` methods are coroutines; each makes exactly one call to the
backend and lets its `SignerRejected` propagate.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence, Union

from . import logging as slog
from .address import addresses_are_equal
from .config import ProxyConfig
from .errors import ConfigurationMismatch
from .signature import (SignatureType, create_typed_signature,
                        ec_recover_typed_signature)
from .typed import hashing
from .typed.payload import build_typed_data
from .types.operation import Action, AssetAmount, Operation, SignedOperation
from .wallet.signer import OperationSigner, TypedDataMethod

log = slog.get_logger(__name__)

ETH_SIGN = "eth_sign"

SigningMethod = Union[TypedDataMethod, str]


class SignedOperations:
    def __init__(self, config: ProxyConfig, signer: Optional[OperationSigner] = None) -> None:
        self.config = config
        self.signer = signer

    @property
    def chain_id(self) -> int:
        return self.config.chain_id

    @property
    def verifying_contract(self) -> str:
        return self.config.verifying_contract

    # ------------------------------------------------------------------
    # Hashing
    # ------------------------------------------------------------------

    def get_domain_hash(self) -> str:
        return hashing.domain_hash(self.chain_id, self.verifying_contract)

    def get_operation_hash(self, operation: Operation) -> str:
        """Final 0x1901-wrapped digest of `operation` under this deployment's domain."""
        return hashing.typed_data_digest(
            self.get_domain_hash(), hashing.hash_operation_struct(operation)
        )

    def get_actions_hash(self, actions: Sequence[Action]) -> str:
        return hashing.hash_actions(actions)

    def get_action_hash(self, action: Action) -> str:
        return hashing.hash_action(action)

    def get_asset_amount_hash(self, amount: AssetAmount) -> str:
        return hashing.hash_asset_amount(amount)

    def get_cancel_hash(self, operation_or_hash: Union[Operation, str]) -> str:
        if isinstance(operation_or_hash, Operation):
            operation_or_hash = self.get_operation_hash(operation_or_hash)
        return hashing.cancel_hash(operation_or_hash)

    def build_typed_data(self, operation: Operation) -> Dict[str, Any]:
        return build_typed_data(
            operation, chain_id=self.chain_id, verifying_contract=self.verifying_contract
        )

    # ------------------------------------------------------------------
    # Verification
    # ------------------------------------------------------------------

    def operation_has_valid_signature(self, signed_operation: SignedOperation) -> bool:
        return self.operation_by_hash_has_valid_signature(
            self.get_operation_hash(signed_operation),
            signed_operation.typed_signature,
            signed_operation.signer,
        )

    def operation_by_hash_has_valid_signature(
        self, operation_hash: str, typed_signature: str, expected_signer: str
    ) -> bool:
        """
        True if `typed_signature` over `operation_hash` recovers to `expected_signer`.

        A well-formed signature from another key yields False; a malformed one
        raises InvalidSignature or UnsupportedSignatureType.
        """
        recovered = ec_recover_typed_signature(operation_hash, typed_signature)
        return addresses_are_equal(recovered, expected_signer)

    def cancel_operation_has_valid_signature(
        self, operation: Operation, typed_signature: str
    ) -> bool:
        return self.cancel_operation_by_hash_has_valid_signature(
            self.get_operation_hash(operation), typed_signature, operation.signer
        )

    def cancel_operation_by_hash_has_valid_signature(
        self, operation_hash: str, typed_signature: str, expected_signer: str
    ) -> bool:
        recovered = ec_recover_typed_signature(self.get_cancel_hash(operation_hash), typed_signature)
        return addresses_are_equal(recovered, expected_signer)

    # ------------------------------------------------------------------
    # Signing
    # ------------------------------------------------------------------

    def _require_signer(self) -> OperationSigner:
        if self.signer is None:
            raise RuntimeError("SignedOperations was constructed without a signer backend")
        return self.signer

    async def _eth_sign_digest(self, digest: str, signer: str) -> str:
        backend = self._require_signer()
        with slog.signing_scope(signer=signer, method=ETH_SIGN, chain_id=self.chain_id):
            log.debug("requesting signature", extra={"digest": digest})
            raw = await backend.eth_sign(digest, signer)
        return create_typed_signature(raw, SignatureType.DECIMAL)

    async def eth_sign_operation(self, operation: Operation) -> str:
        """Personal-sign the operation digest; the result carries the DECIMAL tag."""
        return await self._eth_sign_digest(self.get_operation_hash(operation), operation.signer)

    async def eth_sign_typed_operation(
        self,
        operation: Operation,
        method: TypedDataMethod = TypedDataMethod.ETH_SIGN_TYPED_DATA,
    ) -> str:
        """Typed-data sign the operation; the result carries the NO_PREPEND tag."""
        backend = self._require_signer()
        method = TypedDataMethod(method)
        payload = self.build_typed_data(operation)
        with slog.signing_scope(signer=operation.signer, method=method.value, chain_id=self.chain_id):
            log.debug("requesting typed-data signature")
            raw = await backend.sign_typed_data(operation.signer, payload, method)
        return create_typed_signature(raw, SignatureType.NO_PREPEND)

    async def eth_sign_typed_operation_with_metamask(self, operation: Operation) -> str:
        return await self.eth_sign_typed_operation(
            operation, TypedDataMethod.ETH_SIGN_TYPED_DATA_V3
        )

    async def eth_sign_cancel_operation(self, operation: Operation) -> str:
        return await self.eth_sign_cancel_operation_by_hash(
            self.get_operation_hash(operation), operation.signer
        )

    async def eth_sign_cancel_operation_by_hash(self, operation_hash: str, signer: str) -> str:
        return await self._eth_sign_digest(self.get_cancel_hash(operation_hash), signer)

    async def sign_operation(
        self, operation: Operation, method: SigningMethod = ETH_SIGN
    ) -> SignedOperation:
        """
        Sign `operation` with `method` ("eth_sign", "eth_signTypedData" or
        "eth_signTypedData_v3") and attach the typed signature.
        """
        name = method.value if isinstance(method, TypedDataMethod) else str(method)
        if name == ETH_SIGN:
            typed_signature = await self.eth_sign_operation(operation)
        else:
            try:
                typed_method = TypedDataMethod(name)
            except ValueError:
                raise ValueError(f"unknown signing method: {name!r}") from None
            typed_signature = await self.eth_sign_typed_operation(operation, typed_method)
        return operation.with_signature(typed_signature)

    # ------------------------------------------------------------------
    # Network checks
    # ------------------------------------------------------------------

    def ensure_chain_id(self, observed: Union[int, str]) -> None:
        """Raise ConfigurationMismatch if `observed` differs from the configured chain id."""
        self.config.ensure_matches(chain_id=observed)

    async def check_signer_network(self) -> int:
        """
        Ask the signer backend for its chain id and compare it with the
        configuration. Backends without a `chain_id()` coroutine are skipped.
        """
        backend = self._require_signer()
        probe = getattr(backend, "chain_id", None)
        if probe is None:
            return self.chain_id
        observed = await probe()
        if observed != self.chain_id:
            log.warning(
                "signer network differs from configuration",
                extra={"expected": self.chain_id, "observed": observed},
            )
            raise ConfigurationMismatch(
                "signer reports a different chain id", expected=self.chain_id, got=observed
            )
        return observed


__all__ = ["SignedOperations", "SigningMethod", "ETH_SIGN"]
