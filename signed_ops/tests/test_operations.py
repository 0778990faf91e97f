from dataclasses import replace

import pytest

from signed_ops.config import ProxyConfig
from signed_ops.errors import ConfigurationMismatch, SignerRejected, UnsupportedSignatureType
from signed_ops.operations import SignedOperations
from signed_ops.signature import SignatureType, split_typed_signature
from signed_ops.types.operation import SignedOperation
from signed_ops.wallet import LocalKeySigner, TypedDataMethod

from .vectors import (ACTION_HASH, ASSET_AMOUNT_HASH, DOMAIN_HASH_CHAIN_1,
                      EMPTY_OPERATION_CANCEL_HASH, EMPTY_OPERATION_HASH,
                      ONE_ACTION_OPERATION_HASH, PROXY, SIG_DECIMAL, SIG_HEXADECIMAL,
                      SIG_NO_PREPEND, SIGNER, make_action, make_asset_amount)

STRANGER = "0x" + "77" * 20
OTHER_PROXY = "0x" + "55" * 20


def test_hash_accessors(ops, operation, empty_operation):
    assert ops.get_domain_hash() == DOMAIN_HASH_CHAIN_1
    assert ops.get_operation_hash(empty_operation) == EMPTY_OPERATION_HASH
    assert ops.get_operation_hash(operation) == ONE_ACTION_OPERATION_HASH
    assert ops.get_action_hash(make_action()) == ACTION_HASH
    assert ops.get_asset_amount_hash(make_asset_amount()) == ASSET_AMOUNT_HASH
    assert ops.get_actions_hash(operation.actions) != ops.get_actions_hash(())
    assert ops.get_cancel_hash(EMPTY_OPERATION_HASH) == EMPTY_OPERATION_CANCEL_HASH
    assert ops.get_cancel_hash(empty_operation) == EMPTY_OPERATION_CANCEL_HASH


def test_hashing_needs_no_signer(config, empty_operation):
    ops = SignedOperations(config)
    assert ops.get_operation_hash(empty_operation) == EMPTY_OPERATION_HASH


@pytest.mark.parametrize("typed_sig", [SIG_NO_PREPEND, SIG_DECIMAL, SIG_HEXADECIMAL])
def test_verify_golden_signatures(ops, empty_operation, typed_sig):
    assert ops.operation_has_valid_signature(empty_operation.with_signature(typed_sig))
    assert ops.operation_by_hash_has_valid_signature(EMPTY_OPERATION_HASH, typed_sig, SIGNER.upper().replace("0X", "0x"))
    assert not ops.operation_by_hash_has_valid_signature(EMPTY_OPERATION_HASH, typed_sig, STRANGER)


def test_verify_returns_false_for_other_chain(empty_operation):
    other = SignedOperations(ProxyConfig(chain_id=42, verifying_contract=PROXY))
    assert not other.operation_has_valid_signature(empty_operation.with_signature(SIG_DECIMAL))


@pytest.mark.asyncio
async def test_verify_returns_false_for_other_contract(ops, operation):
    other = SignedOperations(ProxyConfig(chain_id=1, verifying_contract=OTHER_PROXY))
    assert other.get_operation_hash(operation) != ops.get_operation_hash(operation)

    signed = operation.with_signature(await ops.eth_sign_operation(operation))
    assert ops.operation_has_valid_signature(signed)
    assert not other.operation_has_valid_signature(signed)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "changes",
    [
        {"salt": 43},
        {"expiration": 1700000001},
        {"sender": "0x" + "44" * 20},
        {"actions": ()},
        {"actions": (replace(make_action(), primary_account_number=8),)},
        {"actions": (make_action(), make_action())},
    ],
    ids=["salt", "expiration", "sender", "no-actions", "action-field", "extra-action"],
)
async def test_altered_operation_fails_verification(ops, operation, changes):
    signed = operation.with_signature(await ops.eth_sign_operation(operation))
    assert ops.operation_has_valid_signature(signed)
    assert not ops.operation_has_valid_signature(replace(signed, **changes))


@pytest.mark.asyncio
async def test_signature_from_another_key_fails_verification(config, ops, operation):
    other = LocalKeySigner.generate(1)
    (other_address,) = other.addresses
    assert other_address != SIGNER

    impostor = SignedOperations(config, other)
    typed = await impostor.eth_sign_operation(replace(operation, signer=other_address))
    assert not ops.operation_has_valid_signature(operation.with_signature(typed))

    cancel = await impostor.eth_sign_cancel_operation(replace(operation, signer=other_address))
    assert not ops.cancel_operation_has_valid_signature(operation, cancel)


def test_verify_raises_for_malformed_signature(ops, empty_operation):
    with pytest.raises(UnsupportedSignatureType):
        ops.operation_has_valid_signature(empty_operation.with_signature(SIG_DECIMAL[:-2] + "03"))


@pytest.mark.asyncio
async def test_eth_sign_operation_round_trip(ops, operation):
    typed = await ops.eth_sign_operation(operation)
    _, tag = split_typed_signature(typed)
    assert tag is SignatureType.DECIMAL
    assert ops.operation_has_valid_signature(operation.with_signature(typed))


@pytest.mark.asyncio
@pytest.mark.parametrize("method", list(TypedDataMethod))
async def test_typed_data_sign_round_trip(ops, operation, method):
    typed = await ops.eth_sign_typed_operation(operation, method)
    _, tag = split_typed_signature(typed)
    assert tag is SignatureType.NO_PREPEND
    assert ops.operation_has_valid_signature(operation.with_signature(typed))


@pytest.mark.asyncio
async def test_metamask_shortcut(ops, operation):
    typed = await ops.eth_sign_typed_operation_with_metamask(operation)
    assert typed == await ops.eth_sign_typed_operation(operation, TypedDataMethod.ETH_SIGN_TYPED_DATA_V3)


@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["eth_sign", "eth_signTypedData", TypedDataMethod.ETH_SIGN_TYPED_DATA_V3])
async def test_sign_operation_returns_signed_operation(ops, operation, method):
    signed = await ops.sign_operation(operation, method)
    assert isinstance(signed, SignedOperation)
    assert signed.unsigned() == operation
    assert ops.operation_has_valid_signature(signed)


@pytest.mark.asyncio
async def test_sign_operation_rejects_unknown_method(ops, operation):
    with pytest.raises(ValueError):
        await ops.sign_operation(operation, "personal_sign")


@pytest.mark.asyncio
async def test_cancel_signatures_are_isolated(ops, operation):
    op_sig = await ops.eth_sign_operation(operation)
    cancel_sig = await ops.eth_sign_cancel_operation(operation)

    assert ops.cancel_operation_has_valid_signature(operation, cancel_sig)
    assert not ops.cancel_operation_has_valid_signature(operation, op_sig)
    assert not ops.operation_has_valid_signature(operation.with_signature(cancel_sig))

    by_hash = await ops.eth_sign_cancel_operation_by_hash(ONE_ACTION_OPERATION_HASH, SIGNER)
    assert by_hash == cancel_sig
    assert ops.cancel_operation_by_hash_has_valid_signature(ONE_ACTION_OPERATION_HASH, by_hash, SIGNER)
    assert not ops.cancel_operation_by_hash_has_valid_signature(ONE_ACTION_OPERATION_HASH, by_hash, STRANGER)


@pytest.mark.asyncio
async def test_unknown_signer_is_rejected(ops, operation):
    with pytest.raises(SignerRejected):
        await ops.eth_sign_operation(replace(operation, signer=STRANGER))


@pytest.mark.asyncio
async def test_signing_without_backend_fails(config, operation):
    with pytest.raises(RuntimeError):
        await SignedOperations(config).eth_sign_operation(operation)


def test_build_typed_data_uses_config(ops, operation):
    payload = ops.build_typed_data(operation)
    assert payload["domain"]["chainId"] == 1
    assert payload["domain"]["verifyingContract"] == PROXY
    assert payload["primaryType"] == "Operation"


def test_ensure_chain_id(ops):
    ops.ensure_chain_id(1)
    ops.ensure_chain_id("0x1")
    with pytest.raises(ConfigurationMismatch):
        ops.ensure_chain_id(5)


class _NetworkSigner(LocalKeySigner):
    def __init__(self, chain: int, keys=()):
        super().__init__(keys)
        self._chain = chain

    async def chain_id(self) -> int:
        return self._chain


@pytest.mark.asyncio
async def test_check_signer_network(config):
    assert await SignedOperations(config, _NetworkSigner(1)).check_signer_network() == 1
    with pytest.raises(ConfigurationMismatch) as exc:
        await SignedOperations(config, _NetworkSigner(5)).check_signer_network()
    assert exc.value.got == 5
    # backends that cannot report a chain are not probed
    assert await SignedOperations(config, LocalKeySigner()).check_signer_network() == 1
