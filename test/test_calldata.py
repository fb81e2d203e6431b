from eth_utils.address import to_checksum_address
from hexbytes import HexBytes
from safe_hashes.calldata import (
    approve_hash_call,
    classify_intent,
    describe_method,
    parse_decoded_call,
    sensitive_methods,
)
from safe_hashes.models import CallIntent, DecodedCall

SAFE = to_checksum_address("0x657ff0d4ec65d82b2bc1247b0a558bcd2f80a0f1")
OTHER = to_checksum_address("0x6bc56d6ce87c86cb0756c616becfd3cd32b09251")


def test_classify_intent():
    assert classify_intent(SAFE, SAFE.lower(), 0, b"") is CallIntent.ON_CHAIN_REJECTION
    assert classify_intent(SAFE, SAFE, 1, b"") is CallIntent.SELF_TRANSFER
    assert classify_intent(SAFE, OTHER, 0, b"") is CallIntent.ZERO_VALUE_TRANSFER
    assert classify_intent(SAFE, OTHER, 1, b"") is CallIntent.TRANSFER
    assert classify_intent(SAFE, SAFE, 0, b"\x00") is CallIntent.CONTRACT_CALL


def test_describe_method():
    assert describe_method(CallIntent.ON_CHAIN_REJECTION, None) == "0x (On-Chain Rejection)"
    assert describe_method(CallIntent.CONTRACT_CALL, None) == "Unknown"
    decoded = DecodedCall(method="transfer", parameters=[])
    assert describe_method(CallIntent.CONTRACT_CALL, decoded) == "transfer"


def test_parse_decoded_call():
    assert parse_decoded_call(None) is None
    assert parse_decoded_call({}) is None
    decoded = parse_decoded_call({"method": "changeThreshold", "parameters": None})
    assert decoded == DecodedCall(method="changeThreshold", parameters=[])


def test_sensitive_methods_top_level():
    decoded = DecodedCall(
        method="addOwnerWithThreshold",
        parameters=[{"name": "owner", "type": "address", "value": OTHER}],
    )
    assert sensitive_methods(decoded) == ["addOwnerWithThreshold"]
    assert sensitive_methods(DecodedCall(method="transfer", parameters=[])) == []
    assert sensitive_methods(None) == []


def test_sensitive_methods_in_multisend():
    decoded = DecodedCall(
        method="multiSend",
        parameters=[
            {
                "name": "transactions",
                "type": "bytes",
                "valueDecoded": [
                    {"to": SAFE, "dataDecoded": {"method": "removeOwner"}},
                    {"to": OTHER, "dataDecoded": {"method": "transfer"}},
                    {"to": SAFE, "dataDecoded": {"method": "changeThreshold"}},
                ],
            }
        ],
    )
    assert sensitive_methods(decoded) == ["removeOwner", "changeThreshold"]


def test_approve_hash_call():
    decoded = approve_hash_call(b"\xab" * 32)
    assert decoded.method == "approveHash"
    assert decoded.parameters[0]["value"] == HexBytes(b"\xab" * 32).to_0x_hex()
