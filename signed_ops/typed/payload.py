"""
Typed-data signing payloads.

`build_typed_data` produces the object sent to `eth_signTypedData` /
`eth_signTypedData_v3`:

    {
      "types":       {"EIP712Domain": [...], "Operation": [...], "Action": [...], "AssetAmount": [...]},
      "domain":      {"name": "SignedOperationProxy", "version": "1.0", "chainId": 1, "verifyingContract": "0x.."},
      "primaryType": "Operation",
      "message":     {"actions": [...], "expiration": "0", "salt": "0", "sender": "0x.."}
    }

Message integers are base-10 strings, addresses lowercase hex and `data`
0x-hex. `parse_typed_data` reverses the mapping so a local signer can
recompute the digest it is asked to sign.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Tuple

from ..address import normalize
from ..types.operation import Action, AssetAmount, Operation
from ..utils.bytes import to_hex, to_uint
from .descriptors import (DOMAIN_NAME, DOMAIN_VERSION, PRIMARY_TYPE,
                          typed_data_types)

TypedData = Dict[str, Any]


def domain_data(chain_id: int, verifying_contract: str) -> Dict[str, Any]:
    return {
        "name": DOMAIN_NAME,
        "version": DOMAIN_VERSION,
        "chainId": int(chain_id),
        "verifyingContract": normalize(verifying_contract),
    }


def asset_amount_message(amount: AssetAmount) -> Dict[str, Any]:
    return {
        "sign": amount.sign,
        "denomination": str(amount.denomination),
        "ref": str(amount.ref),
        "value": str(amount.value),
    }


def action_message(action: Action) -> Dict[str, Any]:
    # Typed-data field names follow the verifier's struct, not the Action record.
    return {
        "actionType": str(action.action_type),
        "accountOwner": action.primary_account_owner,
        "accountNumber": str(action.primary_account_number),
        "assetAmount": asset_amount_message(action.amount),
        "primaryMarketId": str(action.primary_market_id),
        "secondaryMarketId": str(action.secondary_market_id),
        "otherAddress": action.other_address,
        "otherAccountOwner": action.secondary_account_owner,
        "otherAccountNumber": str(action.secondary_account_number),
        "data": to_hex(action.data),
    }


def operation_message(operation: Operation) -> Dict[str, Any]:
    return {
        "actions": [action_message(a) for a in operation.actions],
        "expiration": str(operation.expiration),
        "salt": str(operation.salt),
        "sender": operation.sender,
    }


def build_typed_data(operation: Operation, *, chain_id: int, verifying_contract: str) -> TypedData:
    return {
        "types": typed_data_types(),
        "domain": domain_data(chain_id, verifying_contract),
        "primaryType": PRIMARY_TYPE,
        "message": operation_message(operation),
    }


def parse_typed_data(payload: Mapping[str, Any]) -> Tuple[Operation, int, str]:
    """
    Inverse of `build_typed_data`: returns (operation, chain_id, verifying_contract).

    The operation's `signer` is not part of the payload and comes back as the
    zero address. Raises ValueError for payloads of another type or domain.
    """
    if payload.get("primaryType") != PRIMARY_TYPE:
        raise ValueError(f"unexpected primaryType: {payload.get('primaryType')!r}")
    if dict(payload.get("types") or {}) != typed_data_types():
        raise ValueError("typed-data types do not match the signed-operation structs")

    domain = payload["domain"]
    if domain.get("name") != DOMAIN_NAME or domain.get("version") != DOMAIN_VERSION:
        raise ValueError(f"unexpected domain: {domain!r}")

    msg = payload["message"]
    actions = tuple(
        Action(
            action_type=a["actionType"],
            primary_account_owner=a["accountOwner"],
            primary_account_number=a["accountNumber"],
            amount=AssetAmount.from_dict(a["assetAmount"]),
            primary_market_id=a["primaryMarketId"],
            secondary_market_id=a["secondaryMarketId"],
            other_address=a["otherAddress"],
            secondary_account_owner=a["otherAccountOwner"],
            secondary_account_number=a["otherAccountNumber"],
            data=a["data"],
        )
        for a in msg["actions"]
    )
    operation = Operation(
        actions=actions,
        expiration=msg["expiration"],
        salt=msg["salt"],
        sender=msg["sender"],
    )
    return operation, to_uint(domain["chainId"]), normalize(domain["verifyingContract"])


__all__ = [
    "TypedData",
    "domain_data",
    "asset_amount_message",
    "action_message",
    "operation_message",
    "build_typed_data",
    "parse_typed_data",
]
