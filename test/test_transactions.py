from typing import cast

import pytest
from eth_utils.address import to_checksum_address
from hexbytes import HexBytes
from safe_hashes.eip712 import hash_eip712_data
from safe_hashes.exceptions import InvalidInput, UnsupportedVersion
from safe_hashes.models import (
    ChainContext,
    DelegateCallTrust,
    GasTokenRisk,
    SafeOperation,
    SafeTx,
)
from safe_hashes.transactions import (
    approval_hash,
    build_approval,
    delegate_call_trust,
    encode_approve_hash,
    gas_token_risk,
    nested_transaction_hashes,
    safe_tx_typed_data,
    transaction_hashes,
)
from web3.constants import CHECKSUM_ADDRESSS_ZERO

SAFE = to_checksum_address("0x657ff0d4ec65d82b2bc1247b0a558bcd2f80a0f1")
NESTED_SAFE = to_checksum_address("0x6bc56d6ce87c86cb0756c616becfd3cd32b09251")
MULTI_SEND_CALL_ONLY = to_checksum_address("0x40A2aCCbd92BCA938b02010E17A5b8929b49130D")

# addOwnerWithThreshold(NESTED_SAFE, 2)
ADD_OWNER_DATA = HexBytes(
    "0x0d582f13"
    "0000000000000000000000006bc56d6ce87c86cb0756c616becfd3cd32b09251"
    "0000000000000000000000000000000000000000000000000000000000000002"
)

MAINNET = ChainContext(chain_id=1, verifying_contract=SAFE)


def make_safetx(**kwargs) -> SafeTx:
    fields = dict(
        to=SAFE,
        value=0,
        data=ADD_OWNER_DATA,
        operation=SafeOperation.CALL,
        safe_tx_gas=0,
        base_gas=0,
        gas_price=0,
        gas_token=CHECKSUM_ADDRESSS_ZERO,
        refund_receiver=CHECKSUM_ADDRESSS_ZERO,
        nonce=7,
    )
    fields.update(kwargs)
    return SafeTx(**fields)


def test_current_layout():
    hashes = transaction_hashes(MAINNET, make_safetx(), "1.3.0")
    assert hashes.domain_hash == HexBytes(
        "0xe6e5ec650f0e1b3b8e9efdcb797db136dda31311ccdb962ab5959ae7b3b44dca"
    )
    assert hashes.message_hash == HexBytes(
        "0xe4fd096a74b651afc08b490d455ca4a13cd3b876dda6a53eb556f26f4f32fba6"
    )
    assert hashes.safe_tx_hash == HexBytes(
        "0xd843e9424fffdd9f0f6fd6875c3e6c929173cc3cb0852415eea7f9b2b4ff16bb"
    )
    assert len(hashes.encoded_message) == 11 * 32


def test_legacy_domain():
    hashes = transaction_hashes(MAINNET, make_safetx(), "1.1.1")
    assert hashes.domain_hash == HexBytes(
        "0x550a1fb8aeb467a0e4f4ac89d5e77564095ec67ab744edad49a901373679e484"
    )
    # The SafeTx struct is unchanged between 1.0.0 and 1.3.0.
    assert hashes.message_hash == HexBytes(
        "0xe4fd096a74b651afc08b490d455ca4a13cd3b876dda6a53eb556f26f4f32fba6"
    )
    assert hashes.safe_tx_hash == HexBytes(
        "0x6ec58c8f146f44b84afd87216bcdda36f0fd06232e2ef91cc1944108cbbb973f"
    )


def test_legacy_everything():
    hashes = transaction_hashes(MAINNET, make_safetx(), "0.1.0")
    assert hashes.message_hash == HexBytes(
        "0x60982c5c5365be12d06391216d489a68a1beb1070b3723b860cf5449d8838978"
    )
    assert hashes.safe_tx_hash == HexBytes(
        "0x083503675d387809d488b1ca1e0c23140f7479e3aaeeb8f665b9d8e4db717ee9"
    )


def test_data_changes_message_not_domain():
    data = HexBytes(ADD_OWNER_DATA[:-1] + b"\x03")
    hashes = transaction_hashes(MAINNET, make_safetx(data=data), "1.3.0")
    assert hashes.domain_hash == HexBytes(
        "0xe6e5ec650f0e1b3b8e9efdcb797db136dda31311ccdb962ab5959ae7b3b44dca"
    )
    assert hashes.message_hash == HexBytes(
        "0x070f87f7b86f2c9fd125c7d8710c2e52bbfaebd1a743a9ab267758cb7385bb53"
    )
    assert hashes.safe_tx_hash == HexBytes(
        "0x463b1a6217ffdaaa4da68459401606a058c5fdf092fbf39ec23523804688d336"
    )


def test_eth_transfer():
    safetx = make_safetx(to=NESTED_SAFE, value=10**18, data=HexBytes(b""))
    hashes = transaction_hashes(MAINNET, safetx, "1.3.0")
    assert hashes.message_hash == HexBytes(
        "0x7de73cde29d9bb9e84bd9858a873c04d0f0701218e4eb0ec46c8cf5220f8fd1b"
    )
    assert hashes.safe_tx_hash == HexBytes(
        "0x846bff1bab5298a245478f08d303af19b7913a7ef198dc14af480f624f85686a"
    )


def test_unsupported_version_propagates():
    with pytest.raises(UnsupportedVersion):
        transaction_hashes(MAINNET, make_safetx(), "0.0.0")
    with pytest.raises(UnsupportedVersion):
        transaction_hashes(MAINNET, make_safetx(), "")


@pytest.mark.parametrize("version", ["1.3.0", "1.1.1"])
def test_matches_safe_eth(version: str):
    from eth_typing import URI
    from safe_eth.eth import EthereumClient
    from safe_eth.safe import SafeTx as SafeLibTx

    safetx = make_safetx(safe_tx_gas=50000, gas_price=3, refund_receiver=NESTED_SAFE)
    libtx = SafeLibTx(
        ethereum_client=EthereumClient(ethereum_node_url=cast(URI, "dummy")),
        safe_address=SAFE,
        to=safetx.to,
        value=safetx.value,
        data=safetx.data,
        operation=safetx.operation.value,
        safe_tx_gas=safetx.safe_tx_gas,
        base_gas=safetx.base_gas,
        gas_price=safetx.gas_price,
        gas_token=safetx.gas_token,
        refund_receiver=safetx.refund_receiver,
        signatures=None,
        safe_nonce=safetx.nonce,
        safe_version=version,
        chain_id=MAINNET.chain_id,
    )
    hashes = transaction_hashes(MAINNET, safetx, version)
    assert hashes.safe_tx_hash == HexBytes(libtx.safe_tx_hash)


@pytest.mark.parametrize("version", ["0.1.0", "1.0.0", "1.1.1", "1.2.0", "1.4.1+L2"])
def test_typed_data_hash(version: str):
    safetx = make_safetx(value=5, gas_token=NESTED_SAFE)
    typed_data = safe_tx_typed_data(MAINNET, safetx, version)
    hashes = transaction_hashes(MAINNET, safetx, version)
    assert hash_eip712_data(typed_data) == hashes.safe_tx_hash


def test_typed_data_legacy_field_name():
    typed_data = safe_tx_typed_data(MAINNET, make_safetx(base_gas=9), "0.1.0")
    names = [field["name"] for field in typed_data["types"]["SafeTx"]]
    assert "dataGas" in names and "baseGas" not in names
    assert typed_data["message"]["dataGas"] == 9
    assert "chainId" not in typed_data["domain"]


def test_delegate_call_trust():
    assert delegate_call_trust(make_safetx()) is DelegateCallTrust.NOT_DELEGATECALL
    trusted = make_safetx(to=MULTI_SEND_CALL_ONLY, operation=SafeOperation.DELEGATECALL)
    assert delegate_call_trust(trusted) is DelegateCallTrust.TRUSTED
    untrusted = make_safetx(to=NESTED_SAFE, operation=SafeOperation.DELEGATECALL)
    assert delegate_call_trust(untrusted) is DelegateCallTrust.UNTRUSTED


def test_trust_does_not_change_hashes():
    call = make_safetx(to=MULTI_SEND_CALL_ONLY)
    delegate = call._replace(operation=SafeOperation.DELEGATECALL)
    assert (
        transaction_hashes(MAINNET, call, "1.3.0").domain_hash
        == transaction_hashes(MAINNET, delegate, "1.3.0").domain_hash
    )


def test_gas_token_risk():
    assert gas_token_risk(make_safetx()) is GasTokenRisk.NONE
    assert gas_token_risk(make_safetx(gas_token=NESTED_SAFE)) is GasTokenRisk.CUSTOM_TOKEN
    assert (
        gas_token_risk(make_safetx(refund_receiver=NESTED_SAFE))
        is GasTokenRisk.CUSTOM_RECEIVER
    )
    both = make_safetx(gas_token=NESTED_SAFE, refund_receiver=SAFE)
    assert gas_token_risk(both) is GasTokenRisk.TOKEN_AND_RECEIVER
    assert (
        gas_token_risk(both._replace(gas_price=1))
        is GasTokenRisk.TOKEN_AND_RECEIVER_WITH_GAS_PRICE
    )


def test_approve_hash_round_trip():
    safe_tx_hash = HexBytes(
        "0xcb8bbe7bf8f8a1f3f57658e450d07d4422356ac042d96a87ba425b19e67a78a1"
    )
    data = encode_approve_hash(safe_tx_hash)
    assert data[:4] == HexBytes("0xd4d9bdcd")
    assert len(data) == 36
    assert approval_hash(data) == safe_tx_hash


def test_approval_hash_rejects_other_calls():
    with pytest.raises(InvalidInput):
        approval_hash(ADD_OWNER_DATA)
    with pytest.raises(InvalidInput):
        approval_hash(HexBytes("0xd4d9bdcd") + b"\x00" * 31)
    with pytest.raises(InvalidInput):
        encode_approve_hash(b"\x00" * 20)


def test_build_approval():
    approval = build_approval(SAFE, b"\x11" * 32, 4)
    assert approval.to == SAFE
    assert approval.value == 0
    assert approval.operation is SafeOperation.CALL
    assert approval.gas_token == CHECKSUM_ADDRESSS_ZERO
    assert approval.refund_receiver == CHECKSUM_ADDRESSS_ZERO
    assert approval.nonce == 4


def test_nested_approval():
    approval, hashes = nested_transaction_hashes(
        chain_id=11155111,
        primary_safe=SAFE,
        safe_tx_hash=HexBytes(
            "0xcb8bbe7bf8f8a1f3f57658e450d07d4422356ac042d96a87ba425b19e67a78a1"
        ),
        nested_safe=NESTED_SAFE,
        nested_nonce=4,
        nested_version="1.4.1",
    )
    assert approval.to == SAFE
    assert hashes.domain_hash == HexBytes(
        "0x55f6c329a7834e2a4e789f5526f328fa75d14fe75b97b0001be40caf46ca92a1"
    )
    assert hashes.message_hash == HexBytes(
        "0xcd411ee5d49344391ef8d37b76e19dfacf505bbb20e856ac907acb5958ecbdf0"
    )
    assert hashes.safe_tx_hash == HexBytes(
        "0x86eb3f93f2670d119a4ecb8eeaa4dafe31a28abcafe06688d47e195a3dd7abb0"
    )
