"""Classify what a Safe transaction's call data is meant to do.

Decoding call data into method names is left to an external decoder such as
the Safe Transaction Service, which supplies a `dataDecoded` object.
"""

from typing import Any, Iterator, Mapping, Optional

from hexbytes import HexBytes

from .constants import SENSITIVE_METHODS
from .models import CallIntent, DecodedCall
from .validation import to_checksum_address

UNKNOWN = "Unknown"


def classify_intent(safe: str, to: str, value: int, data: bytes) -> CallIntent:
    """Interpret a transaction from its target and value.

    Without call data, a zero-value transaction to the Safe itself is the
    conventional on-chain rejection of a pending nonce.
    """
    if len(data) > 0:
        return CallIntent.CONTRACT_CALL
    to_self = to_checksum_address(to) == to_checksum_address(safe)
    if to_self and value == 0:
        return CallIntent.ON_CHAIN_REJECTION
    elif to_self:
        return CallIntent.SELF_TRANSFER
    elif value == 0:
        return CallIntent.ZERO_VALUE_TRANSFER
    return CallIntent.TRANSFER


def parse_decoded_call(data_decoded: Optional[Mapping[str, Any]]) -> Optional[DecodedCall]:
    if not data_decoded or not data_decoded.get("method"):
        return None
    return DecodedCall(
        method=str(data_decoded["method"]),
        parameters=list(data_decoded.get("parameters") or []),
    )


def approve_hash_call(safe_tx_hash: bytes) -> DecodedCall:
    return DecodedCall(
        method="approveHash",
        parameters=[
            {
                "name": "hashToApprove",
                "type": "bytes32",
                "value": HexBytes(safe_tx_hash).to_0x_hex(),
            }
        ],
    )


def _nested_methods(parameters: list[dict[str, Any]]) -> Iterator[str]:
    # Batched calls (e.g. multiSend) carry their decoded inner calls in
    # `valueDecoded`, either as a list or as a single object.
    for parameter in parameters:
        value_decoded = parameter.get("valueDecoded")
        if isinstance(value_decoded, list):
            inner_calls = value_decoded
        elif isinstance(value_decoded, dict):
            inner_calls = [value_decoded]
        else:
            continue
        for inner in inner_calls:
            if not isinstance(inner, dict):
                continue
            decoded = inner.get("dataDecoded")
            if isinstance(decoded, dict) and decoded.get("method"):
                yield str(decoded["method"])
            elif inner.get("method"):
                yield str(inner["method"])


def sensitive_methods(decoded: Optional[DecodedCall]) -> list[str]:
    """Return the called methods that change the owners or threshold."""
    if decoded is None:
        return []
    methods = [decoded.method, *_nested_methods(decoded.parameters)]
    return [method for method in methods if method in SENSITIVE_METHODS]


def describe_method(intent: CallIntent, decoded: Optional[DecodedCall]) -> str:
    if intent is not CallIntent.CONTRACT_CALL:
        return f"0x ({intent.value})"
    if decoded is None:
        return UNKNOWN
    return decoded.method
