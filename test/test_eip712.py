import pytest
from eth_utils.address import to_checksum_address
from hexbytes import HexBytes
from safe_hashes.constants import (
    DOMAIN_SEPARATOR_TYPEHASH,
    DOMAIN_SEPARATOR_TYPEHASH_OLD,
    SAFE_MSG_TYPEHASH,
    SAFE_TX_TYPEHASH,
    SAFE_TX_TYPEHASH_OLD,
)
from safe_hashes.eip712 import (
    current_domain_hash,
    domain_hash,
    domain_typed_data,
    eip712_digest,
    encode_data,
    keccak,
)
from safe_hashes.models import ChainContext

ARBITRUM = ChainContext(
    chain_id=42161,
    verifying_contract=to_checksum_address("0x111CEEee040739fD91D29C34C33E6B3E112F2177"),
)


def test_keccak_empty():
    assert keccak(b"") == HexBytes(
        "0xc5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
    )


@pytest.mark.parametrize(
    "signature,typehash",
    [
        ("EIP712Domain(uint256 chainId,address verifyingContract)", DOMAIN_SEPARATOR_TYPEHASH),
        ("EIP712Domain(address verifyingContract)", DOMAIN_SEPARATOR_TYPEHASH_OLD),
        (
            "SafeTx(address to,uint256 value,bytes data,uint8 operation,uint256 safeTxGas,"
            "uint256 baseGas,uint256 gasPrice,address gasToken,address refundReceiver,"
            "uint256 nonce)",
            SAFE_TX_TYPEHASH,
        ),
        (
            "SafeTx(address to,uint256 value,bytes data,uint8 operation,uint256 safeTxGas,"
            "uint256 dataGas,uint256 gasPrice,address gasToken,address refundReceiver,"
            "uint256 nonce)",
            SAFE_TX_TYPEHASH_OLD,
        ),
        ("SafeMessage(bytes message)", SAFE_MSG_TYPEHASH),
    ],
)
def test_typehashes(signature: str, typehash: str):
    assert keccak(signature.encode()) == HexBytes(typehash)


def test_dynamic_fields_are_hashed():
    typehash = HexBytes(SAFE_MSG_TYPEHASH)
    payload = b"\x01\x02\x03"
    encoded = encode_data(typehash, [("bytes", payload)])
    assert len(encoded) == 64
    assert encoded[:32] == typehash
    assert encoded[32:] == keccak(payload)
    # Strings are hashed as their UTF-8 bytes.
    assert encode_data(typehash, [("string", "abc")]) == encode_data(
        typehash, [("bytes", b"abc")]
    )


def test_static_fields_are_words():
    encoded = encode_data(
        HexBytes(DOMAIN_SEPARATOR_TYPEHASH),
        [("uint256", 1), ("address", ARBITRUM.verifying_contract)],
    )
    assert len(encoded) == 96
    assert encoded[32:64] == (1).to_bytes(32, "big")
    assert encoded[76:] == HexBytes(ARBITRUM.verifying_contract)


def test_arbitrum_domain_hash():
    expected = HexBytes("0x1cf7f9b1efe3bc47fe02fd27c649fea19e79d66040683a1c86c7490c80bf7291")
    assert domain_hash(ARBITRUM, "1.4.1") == expected
    assert domain_hash(ARBITRUM, "1.3.0+L2") == expected
    assert current_domain_hash(ARBITRUM) == expected


def test_arbitrum_digest():
    digest = eip712_digest(
        HexBytes("0x1cf7f9b1efe3bc47fe02fd27c649fea19e79d66040683a1c86c7490c80bf7291"),
        HexBytes("0xd9109ea63c50ecd3b80b6b27ed5c5a9fd3d546c2169dfb69bfa7ba24cd14c7a5"),
    )
    assert digest == HexBytes(
        "0x0cb7250b8becd7069223c54e2839feaed4cee156363fbfe5dd0a48e75c4e25b3"
    )


def test_digest_rejects_short_hashes():
    with pytest.raises(ValueError):
        eip712_digest(b"\x00" * 31, b"\x00" * 32)
    with pytest.raises(ValueError):
        eip712_digest(b"\x00" * 32, b"")


def test_legacy_domain_ignores_chain_id():
    other_chain = ARBITRUM._replace(chain_id=1)
    assert domain_hash(ARBITRUM, "1.1.1") == domain_hash(other_chain, "1.1.1")
    assert domain_hash(ARBITRUM, "1.3.0") != domain_hash(other_chain, "1.3.0")


def test_domain_typed_data_layout():
    domain_types, domain = domain_typed_data(ARBITRUM, "1.1.1")
    assert domain_types == [{"name": "verifyingContract", "type": "address"}]
    assert domain == {"verifyingContract": ARBITRUM.verifying_contract}

    domain_types, domain = domain_typed_data(ARBITRUM, "1.3.0")
    assert [t["name"] for t in domain_types] == ["chainId", "verifyingContract"]
    assert domain["chainId"] == 42161
