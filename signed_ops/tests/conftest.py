from __future__ import annotations

import pytest

from signed_ops import logging as slog
from signed_ops.config import ProxyConfig
from signed_ops.operations import SignedOperations
from signed_ops.types.operation import Operation
from signed_ops.wallet.local import LocalKeySigner

from .vectors import PRIVATE_KEY, PROXY, SIGNER, make_operation


@pytest.fixture(autouse=True)
def _clean_log_context():
    slog.clear_context()
    yield
    slog.clear_context()


@pytest.fixture
def config() -> ProxyConfig:
    return ProxyConfig(chain_id=1, verifying_contract=PROXY)


@pytest.fixture
def empty_operation() -> Operation:
    return Operation(actions=(), signer=SIGNER)


@pytest.fixture
def operation() -> Operation:
    return make_operation()


@pytest.fixture
def local_signer() -> LocalKeySigner:
    return LocalKeySigner([PRIVATE_KEY])


@pytest.fixture
def ops(config: ProxyConfig, local_signer: LocalKeySigner) -> SignedOperations:
    return SignedOperations(config, local_signer)
