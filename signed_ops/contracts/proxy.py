"""
signed_ops.contracts.proxy
==========================

Calls against the on-chain `SignedOperationProxy` verifier.

ABI binding and transaction submission are left to a caller-supplied
`ContractCaller`; this module only decides which function to invoke and
with what arguments:

    cancel(operation)                                      (send, from op.signer)
    g_isOperational()                                      (call)
    getOperationsAreInvalid([(operationHash, operationSigner), ...])   (call)
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

from ..address import normalize
from ..logging import get_logger
from ..operations import SignedOperations
from ..typed.hashing import normalize_digest
from ..types.operation import Operation

log = get_logger(__name__)

FN_CANCEL = "cancel"
FN_IS_OPERATIONAL = "g_isOperational"
FN_OPERATIONS_ARE_INVALID = "getOperationsAreInvalid"


class ContractCaller(Protocol):
    async def call(self, fn: str, args: Sequence[Any], options: Mapping[str, Any]) -> Any:
        ...

    async def send(self, fn: str, args: Sequence[Any], options: Mapping[str, Any]) -> Any:
        ...


def operations_are_invalid_query(
    operations: Sequence[Operation], ops: SignedOperations
) -> List[Dict[str, str]]:
    """Argument list for `getOperationsAreInvalid`, one entry per operation."""
    return [
        {"operationHash": ops.get_operation_hash(op), "operationSigner": op.signer}
        for op in operations
    ]


class SignedOperationProxy:
    def __init__(self, ops: SignedOperations, caller: ContractCaller) -> None:
        self.ops = ops
        self.caller = caller

    @property
    def address(self) -> str:
        return self.ops.verifying_contract

    async def cancel_operation(
        self, operation: Operation, options: Optional[Mapping[str, Any]] = None
    ) -> Any:
        """Invalidate `operation` on-chain; the transaction is sent from `operation.signer`."""
        opts = dict(options or {})
        opts.setdefault("from", operation.signer)
        return await self.cancel_operation_by_hash(self.ops.get_operation_hash(operation), opts)

    async def cancel_operation_by_hash(
        self, operation_hash: str, options: Optional[Mapping[str, Any]] = None
    ) -> Any:
        opts = dict(options or {})
        if "from" in opts:
            opts["from"] = normalize(opts["from"])
        digest = normalize_digest(operation_hash)
        log.debug("sending cancel", extra={"operation_hash": digest, "proxy": self.address})
        return await self.caller.send(FN_CANCEL, [digest], opts)

    async def is_operational(self, options: Optional[Mapping[str, Any]] = None) -> bool:
        return bool(await self.caller.call(FN_IS_OPERATIONAL, [], dict(options or {})))

    async def get_operations_are_invalid(
        self, operations: Sequence[Operation], options: Optional[Mapping[str, Any]] = None
    ) -> List[bool]:
        query = operations_are_invalid_query(operations, self.ops)
        result = await self.caller.call(FN_OPERATIONS_ARE_INVALID, [query], dict(options or {}))
        flags = [bool(x) for x in result]
        if len(flags) != len(query):
            raise ValueError(
                f"{FN_OPERATIONS_ARE_INVALID} returned {len(flags)} results for {len(query)} operations"
            )
        return flags


__all__ = [
    "ContractCaller",
    "SignedOperationProxy",
    "operations_are_invalid_query",
    "FN_CANCEL",
    "FN_IS_OPERATIONAL",
    "FN_OPERATIONS_ARE_INVALID",
]
