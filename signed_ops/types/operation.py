"""
Operation value types.

Immutable records for the structures a signer approves:

    Operation
      └─ actions: tuple[Action, ...]
           └─ amount: AssetAmount

Each record validates its integer ranges and normalises addresses (lowercase
0x-hex) on construction, and converts to/from the camelCase JSON shape used
by the protocol's JavaScript clients. Integers are written as base-10 strings
on the wire and accepted as int, decimal string or 0x-hex string.

Nothing here hashes or signs; see `signed_ops.typed.hashing`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import IntEnum
from typing import Any, Dict, Mapping, Tuple

from ..address import ZERO_ADDRESS, normalize
from ..utils.bytes import ensure_bytes, to_hex, to_uint


class ActionType(IntEnum):
    DEPOSIT = 0
    WITHDRAW = 1
    TRANSFER = 2
    BUY = 3
    SELL = 4
    TRADE = 5
    LIQUIDATE = 6
    VAPORIZE = 7
    CALL = 8


class AmountDenomination(IntEnum):
    WEI = 0
    PAR = 1


class AmountReference(IntEnum):
    DELTA = 0
    TARGET = 1


def _set(obj: Any, name: str, value: Any) -> None:
    object.__setattr__(obj, name, value)


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        v = value.strip().lower()
        if v in ("true", "1"):
            return True
        if v in ("false", "0"):
            return False
        raise ValueError(f"not a boolean: {value!r}")
    return bool(value)


@dataclass(slots=True, frozen=True)
class AssetAmount:
    sign: bool
    denomination: int
    ref: int
    value: int

    def __post_init__(self) -> None:
        _set(self, "sign", _as_bool(self.sign))
        _set(self, "denomination", to_uint(self.denomination, 8))
        _set(self, "ref", to_uint(self.ref, 8))
        _set(self, "value", to_uint(self.value))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sign": self.sign,
            "denomination": str(self.denomination),
            "ref": str(self.ref),
            "value": str(self.value),
        }

    @staticmethod
    def from_dict(d: Mapping[str, Any]) -> "AssetAmount":
        return AssetAmount(
            sign=d["sign"],
            denomination=d["denomination"],
            ref=d["ref"],
            value=d["value"],
        )


@dataclass(slots=True, frozen=True)
class Action:
    action_type: int
    primary_account_owner: str
    primary_account_number: int
    amount: AssetAmount
    primary_market_id: int
    secondary_market_id: int = 0
    other_address: str = ZERO_ADDRESS
    secondary_account_owner: str = ZERO_ADDRESS
    secondary_account_number: int = 0
    data: bytes = b""

    def __post_init__(self) -> None:
        _set(self, "action_type", to_uint(self.action_type, 8))
        _set(self, "primary_account_owner", normalize(self.primary_account_owner))
        _set(self, "primary_account_number", to_uint(self.primary_account_number))
        if isinstance(self.amount, Mapping):
            _set(self, "amount", AssetAmount.from_dict(self.amount))
        elif not isinstance(self.amount, AssetAmount):
            raise TypeError(f"amount must be an AssetAmount, got {type(self.amount)!r}")
        _set(self, "primary_market_id", to_uint(self.primary_market_id))
        _set(self, "secondary_market_id", to_uint(self.secondary_market_id))
        _set(self, "other_address", normalize(self.other_address))
        _set(self, "secondary_account_owner", normalize(self.secondary_account_owner))
        _set(self, "secondary_account_number", to_uint(self.secondary_account_number))
        _set(self, "data", ensure_bytes(self.data))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "actionType": str(self.action_type),
            "primaryAccountOwner": self.primary_account_owner,
            "primaryAccountNumber": str(self.primary_account_number),
            "amount": self.amount.to_dict(),
            "primaryMarketId": str(self.primary_market_id),
            "secondaryMarketId": str(self.secondary_market_id),
            "otherAddress": self.other_address,
            "secondaryAccountOwner": self.secondary_account_owner,
            "secondaryAccountNumber": str(self.secondary_account_number),
            "data": to_hex(self.data),
        }

    @staticmethod
    def from_dict(d: Mapping[str, Any]) -> "Action":
        return Action(
            action_type=d["actionType"],
            primary_account_owner=d["primaryAccountOwner"],
            primary_account_number=d["primaryAccountNumber"],
            amount=AssetAmount.from_dict(d["amount"]),
            primary_market_id=d["primaryMarketId"],
            secondary_market_id=d.get("secondaryMarketId", 0),
            other_address=d.get("otherAddress", ZERO_ADDRESS),
            secondary_account_owner=d.get("secondaryAccountOwner", ZERO_ADDRESS),
            secondary_account_number=d.get("secondaryAccountNumber", 0),
            data=d.get("data", "0x"),
        )


@dataclass(slots=True, frozen=True)
class Operation:
    """
    An ordered list of actions plus replay/expiry metadata.

    `sender` is hashed (the relayer allowed to submit it on-chain); `signer`
    is metadata naming who must sign and is excluded from the digest.
    `expiration` is a unix timestamp, 0 meaning it never expires.
    """

    actions: Tuple[Action, ...]
    expiration: int = 0
    salt: int = 0
    sender: str = ZERO_ADDRESS
    signer: str = ZERO_ADDRESS

    def __post_init__(self) -> None:
        acts = tuple(
            a if isinstance(a, Action) else Action.from_dict(a) for a in self.actions
        )
        _set(self, "actions", acts)
        _set(self, "expiration", to_uint(self.expiration))
        _set(self, "salt", to_uint(self.salt))
        _set(self, "sender", normalize(self.sender))
        _set(self, "signer", normalize(self.signer))

    def with_signature(self, typed_signature: str) -> "SignedOperation":
        kwargs = {f.name: getattr(self, f.name) for f in fields(Operation)}
        return SignedOperation(**kwargs, typed_signature=typed_signature)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "actions": [a.to_dict() for a in self.actions],
            "expiration": str(self.expiration),
            "salt": str(self.salt),
            "sender": self.sender,
            "signer": self.signer,
        }

    @staticmethod
    def from_dict(d: Mapping[str, Any]) -> "Operation":
        return Operation(
            actions=tuple(Action.from_dict(a) for a in d.get("actions", ())),
            expiration=d.get("expiration", 0),
            salt=d.get("salt", 0),
            sender=d.get("sender", ZERO_ADDRESS),
            signer=d.get("signer", ZERO_ADDRESS),
        )


@dataclass(slots=True, frozen=True)
class SignedOperation(Operation):
    typed_signature: str = field(kw_only=True)

    def to_dict(self) -> Dict[str, Any]:
        d = Operation.to_dict(self)
        d["typedSignature"] = self.typed_signature
        return d

    def unsigned(self) -> Operation:
        return Operation(
            actions=self.actions,
            expiration=self.expiration,
            salt=self.salt,
            sender=self.sender,
            signer=self.signer,
        )

    @staticmethod
    def from_dict(d: Mapping[str, Any]) -> "SignedOperation":
        return Operation.from_dict(d).with_signature(d["typedSignature"])


__all__ = [
    "ActionType",
    "AmountDenomination",
    "AmountReference",
    "AssetAmount",
    "Action",
    "Operation",
    "SignedOperation",
]
