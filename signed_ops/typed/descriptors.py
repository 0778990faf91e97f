"""
Frozen struct descriptors for the SignedOperationProxy typed-data scheme.

Field order and type strings below are the verifier contract's hardcoded
values. They are data, not derived: the nesting order (Operation ‖ Action ‖
AssetAmount) does not follow the alphabetical rule of generic typed-data
encoders and must not be regenerated or re-sorted.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

from ..utils.hash import keccak256

DOMAIN_NAME = "SignedOperationProxy"
DOMAIN_VERSION = "1.0"

EIP191_PREFIX = b"\x19\x01"
CANCEL_TAG = "cancel"

Field = Tuple[str, str]  # (name, solidity type)


@dataclass(frozen=True)
class StructDescriptor:
    name: str
    fields: Tuple[Field, ...]
    type_string: str

    @property
    def type_hash(self) -> bytes:
        return _TYPE_HASHES[self.type_string]

    def field_names(self) -> List[str]:
        return [n for n, _ in self.fields]

    def to_typed_data(self) -> List[Dict[str, str]]:
        """[{"name": ..., "type": ...}, ...] in field order."""
        return [{"name": n, "type": t} for n, t in self.fields]


def _signature(name: str, fields: Tuple[Field, ...]) -> str:
    return name + "(" + ",".join(f"{t} {n}" for n, t in fields) + ")"


_DOMAIN_FIELDS: Tuple[Field, ...] = (
    ("name", "string"),
    ("version", "string"),
    ("chainId", "uint256"),
    ("verifyingContract", "address"),
)

_ASSET_AMOUNT_FIELDS: Tuple[Field, ...] = (
    ("sign", "bool"),
    ("denomination", "uint8"),
    ("ref", "uint8"),
    ("value", "uint256"),
)

_ACTION_FIELDS: Tuple[Field, ...] = (
    ("actionType", "uint8"),
    ("accountOwner", "address"),
    ("accountNumber", "uint256"),
    ("assetAmount", "AssetAmount"),
    ("primaryMarketId", "uint256"),
    ("secondaryMarketId", "uint256"),
    ("otherAddress", "address"),
    ("otherAccountOwner", "address"),
    ("otherAccountNumber", "uint256"),
    ("data", "bytes"),
)

_OPERATION_FIELDS: Tuple[Field, ...] = (
    ("actions", "Action[]"),
    ("expiration", "uint256"),
    ("salt", "uint256"),
    ("sender", "address"),
)

EIP712_DOMAIN_STRING = (
    "EIP712Domain("
    "string name,"
    "string version,"
    "uint256 chainId,"
    "address verifyingContract"
    ")"
)

EIP712_ASSET_AMOUNT_STRING = (
    "AssetAmount("
    "bool sign,"
    "uint8 denomination,"
    "uint8 ref,"
    "uint256 value"
    ")"
)

EIP712_ACTION_STRING = (
    "Action("
    "uint8 actionType,"
    "address accountOwner,"
    "uint256 accountNumber,"
    "AssetAmount assetAmount,"
    "uint256 primaryMarketId,"
    "uint256 secondaryMarketId,"
    "address otherAddress,"
    "address otherAccountOwner,"
    "uint256 otherAccountNumber,"
    "bytes data"
    ")"
    + EIP712_ASSET_AMOUNT_STRING
)

EIP712_OPERATION_STRING = (
    "Operation("
    "Action[] actions,"
    "uint256 expiration,"
    "uint256 salt,"
    "address sender"
    ")"
    + EIP712_ACTION_STRING
)

_TYPE_HASHES: Dict[str, bytes] = {
    s: keccak256(s.encode("utf-8"))
    for s in (
        EIP712_DOMAIN_STRING,
        EIP712_ASSET_AMOUNT_STRING,
        EIP712_ACTION_STRING,
        EIP712_OPERATION_STRING,
    )
}

EIP712_DOMAIN = StructDescriptor("EIP712Domain", _DOMAIN_FIELDS, EIP712_DOMAIN_STRING)
ASSET_AMOUNT = StructDescriptor("AssetAmount", _ASSET_AMOUNT_FIELDS, EIP712_ASSET_AMOUNT_STRING)
ACTION = StructDescriptor("Action", _ACTION_FIELDS, EIP712_ACTION_STRING)
OPERATION = StructDescriptor("Operation", _OPERATION_FIELDS, EIP712_OPERATION_STRING)

# Each descriptor's own leading signature must agree with its field list.
for _d in (EIP712_DOMAIN, ASSET_AMOUNT, ACTION, OPERATION):
    if not _d.type_string.startswith(_signature(_d.name, _d.fields)):
        raise RuntimeError(f"type string for {_d.name} disagrees with its fields")
del _d

PRIMARY_TYPE = OPERATION.name


def typed_data_types() -> Dict[str, List[Dict[str, str]]]:
    """The `types` section of a typed-data signing request."""
    return {
        EIP712_DOMAIN.name: EIP712_DOMAIN.to_typed_data(),
        OPERATION.name: OPERATION.to_typed_data(),
        ACTION.name: ACTION.to_typed_data(),
        ASSET_AMOUNT.name: ASSET_AMOUNT.to_typed_data(),
    }


__all__ = [
    "DOMAIN_NAME",
    "DOMAIN_VERSION",
    "EIP191_PREFIX",
    "CANCEL_TAG",
    "StructDescriptor",
    "EIP712_DOMAIN_STRING",
    "EIP712_ASSET_AMOUNT_STRING",
    "EIP712_ACTION_STRING",
    "EIP712_OPERATION_STRING",
    "EIP712_DOMAIN",
    "ASSET_AMOUNT",
    "ACTION",
    "OPERATION",
    "PRIMARY_TYPE",
    "typed_data_types",
]
