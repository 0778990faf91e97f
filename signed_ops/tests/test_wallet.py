import json

import httpx
import pytest

from signed_ops.errors import ConfigurationMismatch, SignerRejected
from signed_ops.operations import SignedOperations
from signed_ops.rpc.http import AsyncRpcClient
from signed_ops.signature import SignatureType, prepended_digest
from signed_ops.typed.hashing import hash_operation
from signed_ops.typed.payload import build_typed_data
from signed_ops.utils.ecdsa import ec_recover
from signed_ops.wallet import JsonRpcSigner, LocalKeySigner, OperationSigner, TypedDataMethod

from .providers import FakeProvider
from .vectors import EMPTY_OPERATION_HASH, PRIVATE_KEY, PROXY, SIGNER

RPC_URL = "http://signer.test/rpc"


def _rpc_signer(provider: FakeProvider) -> JsonRpcSigner:
    return JsonRpcSigner(AsyncRpcClient(RPC_URL, transport=httpx.MockTransport(provider)))


def test_backends_satisfy_protocol(local_signer):
    assert isinstance(local_signer, OperationSigner)
    assert isinstance(_rpc_signer(FakeProvider()), OperationSigner)


# --- LocalKeySigner ------------------------------------------------------------


def test_local_signer_addresses():
    signer = LocalKeySigner([PRIVATE_KEY])
    assert signer.addresses == [SIGNER]
    assert len(LocalKeySigner.generate(2).addresses) == 2
    with pytest.raises(ValueError):
        signer.add_key(b"\x01" * 31)


@pytest.mark.asyncio
async def test_local_eth_sign_applies_personal_prefix(local_signer):
    raw = await local_signer.eth_sign(EMPTY_OPERATION_HASH, SIGNER)
    prefixed = prepended_digest(EMPTY_OPERATION_HASH, SignatureType.DECIMAL)
    assert ec_recover(prefixed, raw) == SIGNER
    assert ec_recover(EMPTY_OPERATION_HASH, raw) != SIGNER


@pytest.mark.asyncio
async def test_local_typed_data_signs_recomputed_digest(local_signer, operation):
    payload = build_typed_data(operation, chain_id=1, verifying_contract=PROXY)
    digest = hash_operation(operation, chain_id=1, verifying_contract=PROXY)
    raw = await local_signer.sign_typed_data(SIGNER, payload, TypedDataMethod.ETH_SIGN_TYPED_DATA)
    assert ec_recover(digest, raw) == SIGNER
    # the v3 dialect may hand over the JSON string
    raw_v3 = await local_signer.sign_typed_data(
        SIGNER, json.dumps(payload), TypedDataMethod.ETH_SIGN_TYPED_DATA_V3
    )
    assert raw_v3 == raw


@pytest.mark.asyncio
async def test_local_signer_rejects_unknown_account_and_payload(local_signer, operation):
    with pytest.raises(SignerRejected) as exc:
        await local_signer.eth_sign(EMPTY_OPERATION_HASH, "0x" + "77" * 20)
    assert exc.value.method == "eth_sign"

    payload = build_typed_data(operation, chain_id=1, verifying_contract=PROXY)
    payload["primaryType"] = "Mail"
    with pytest.raises(SignerRejected):
        await local_signer.sign_typed_data(SIGNER, payload)


# --- JsonRpcSigner -------------------------------------------------------------


@pytest.mark.asyncio
async def test_rpc_signer_request_shapes(operation):
    provider = FakeProvider()
    signer = _rpc_signer(provider)
    payload = build_typed_data(operation, chain_id=1, verifying_contract=PROXY)
    async with signer:
        await signer.eth_sign(EMPTY_OPERATION_HASH, SIGNER)
        await signer.sign_typed_data(SIGNER, payload, TypedDataMethod.ETH_SIGN_TYPED_DATA)
        await signer.sign_typed_data(SIGNER, payload, TypedDataMethod.ETH_SIGN_TYPED_DATA_V3)

    (m1, p1), (m2, p2), (m3, p3) = provider.calls
    assert (m1, p1) == ("eth_sign", [SIGNER, EMPTY_OPERATION_HASH])
    assert m2 == "eth_signTypedData" and p2 == [SIGNER, payload]
    assert m3 == "eth_signTypedData_v3" and isinstance(p3[1], str)
    assert json.loads(p3[1]) == payload


@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["eth_sign", "eth_signTypedData", "eth_signTypedData_v3"])
async def test_rpc_signer_end_to_end(config, operation, method):
    async with _rpc_signer(FakeProvider()) as backend:
        ops = SignedOperations(config, backend)
        signed = await ops.sign_operation(operation, method)
        cancel = await ops.eth_sign_cancel_operation(operation)
    assert ops.operation_has_valid_signature(signed)
    assert ops.cancel_operation_has_valid_signature(operation, cancel)


@pytest.mark.asyncio
async def test_rpc_signer_surfaces_rejection(config, operation):
    async with _rpc_signer(FakeProvider(reject=True)) as backend:
        ops = SignedOperations(config, backend)
        with pytest.raises(SignerRejected) as exc:
            await ops.eth_sign_typed_operation_with_metamask(operation)
    assert exc.value.code == 4001
    assert exc.value.method == "eth_signTypedData_v3"
    assert exc.value.message == "User denied message signature."


@pytest.mark.asyncio
async def test_rpc_signer_network_helpers(config):
    async with _rpc_signer(FakeProvider(chain_id=5)) as backend:
        assert await backend.chain_id() == 5
        assert await backend.accounts() == [SIGNER]
        with pytest.raises(ConfigurationMismatch):
            await SignedOperations(config, backend).check_signer_network()
