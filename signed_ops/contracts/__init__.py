"""Argument builders and call helpers for the on-chain proxy contract."""

from .proxy import ContractCaller, SignedOperationProxy, operations_are_invalid_query

__all__ = ["ContractCaller", "SignedOperationProxy", "operations_are_invalid_query"]
