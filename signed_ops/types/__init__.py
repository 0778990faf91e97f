"""
Value types for signed operations.

`operation` holds the frozen dataclasses (Operation, Action, AssetAmount,
SignedOperation) and the enums for their small-integer fields.
"""

from .operation import (Action, ActionType, AmountDenomination,
                        AmountReference, AssetAmount, Operation,
                        SignedOperation)

Address = str  # 0x-prefixed 20-byte hex
Digest = str  # 0x-prefixed 32-byte hex
TypedSignature = str  # 0x-prefixed 66-byte hex (65-byte signature + tag)

__all__ = [
    "Address",
    "Digest",
    "TypedSignature",
    "ActionType",
    "AmountDenomination",
    "AmountReference",
    "AssetAmount",
    "Action",
    "Operation",
    "SignedOperation",
]
