import copy

import pytest

from signed_ops.typed.payload import build_typed_data, parse_typed_data

from .vectors import PROXY, SIGNER, make_operation


def test_payload_shape():
    op = make_operation()
    payload = build_typed_data(op, chain_id=1, verifying_contract=PROXY)
    assert payload["primaryType"] == "Operation"
    assert payload["domain"] == {
        "name": "SignedOperationProxy",
        "version": "1.0",
        "chainId": 1,
        "verifyingContract": PROXY,
    }
    msg = payload["message"]
    assert set(msg) == {"actions", "expiration", "salt", "sender"}
    assert msg["expiration"] == "1700000000" and msg["salt"] == "42"
    action = msg["actions"][0]
    assert action["accountOwner"] == "0x" + "11" * 20
    assert action["otherAccountOwner"] == "0x" + "22" * 20
    assert action["otherAccountNumber"] == "3"
    assert action["assetAmount"] == {"sign": True, "denomination": "0", "ref": "0", "value": str(10**18)}
    assert action["data"] == "0xdeadbeef"


def test_parse_inverts_build():
    op = make_operation()
    payload = build_typed_data(op, chain_id=42, verifying_contract=PROXY)
    parsed, chain_id, contract = parse_typed_data(payload)
    assert (chain_id, contract) == (42, PROXY)
    # signer is not part of the payload
    assert parsed.signer != SIGNER
    assert parsed == make_operation(signer=parsed.signer)


@pytest.mark.parametrize(
    "mutate",
    [
        lambda p: p.update(primaryType="Mail"),
        lambda p: p["domain"].update(name="Other"),
        lambda p: p["domain"].update(version="2.0"),
        lambda p: p["types"]["Operation"].reverse(),
    ],
)
def test_parse_rejects_foreign_payloads(mutate):
    payload = copy.deepcopy(build_typed_data(make_operation(), chain_id=1, verifying_contract=PROXY))
    mutate(payload)
    with pytest.raises(ValueError):
        parse_typed_data(payload)
