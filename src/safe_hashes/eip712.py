"""EIP-712 structured data encoding and hashing.

See https://eips.ethereum.org/EIPS/eip-712#definition-of-encodedata.
"""

import logging
from typing import (
    Any,
    Sequence,
)

from hexbytes import (
    HexBytes,
)

from .constants import DOMAIN_SEPARATOR_TYPEHASH
from .models import ChainContext
from .version import resolve

logger = logging.getLogger(__name__)

EIP712_PREFIX = b"\x19\x01"
DYNAMIC_TYPES = ("bytes", "string")

Field = tuple[str, Any]


def keccak(data: bytes) -> HexBytes:
    from eth_utils.crypto import keccak as keccak256

    return HexBytes(keccak256(data))


def encode_data(typehash: bytes, fields: Sequence[Field]) -> HexBytes:
    """ABI-encode `typehash` followed by each `(abi_type, value)` field.

    Dynamic `bytes` and `string` values are replaced by the Keccak-256 of
    their contents and encoded as `bytes32`.
    """
    from eth_abi.abi import encode as abi_encode

    types: list[str] = ["bytes32"]
    values: list[Any] = [bytes(typehash)]
    for abi_type, value in fields:
        if abi_type in DYNAMIC_TYPES:
            if isinstance(value, str):
                value = value.encode("utf-8")
            types.append("bytes32")
            values.append(bytes(keccak(value)))
        else:
            types.append(abi_type)
            values.append(value)
    return HexBytes(abi_encode(types, values))


def hash_struct(typehash: bytes, fields: Sequence[Field]) -> HexBytes:
    return keccak(encode_data(typehash, fields))


def eip712_digest(domain_hash: bytes, struct_hash: bytes) -> HexBytes:
    """Compute `keccak256(0x19 || 0x01 || domain_hash || struct_hash)`."""
    if len(domain_hash) != 32 or len(struct_hash) != 32:
        raise ValueError("EIP-712 domain and struct hashes must be 32 bytes.")
    return keccak(EIP712_PREFIX + bytes(domain_hash) + bytes(struct_hash))


def domain_hash(chain: ChainContext, version: str) -> HexBytes:
    """Compute the Safe `EIP712Domain` hash.

    Safe < 1.2.0 uses the legacy `EIP712Domain(address verifyingContract)`
    layout, which drops the chain ID altogether.
    """
    typehashes = resolve(version)
    fields: list[Field] = []
    if typehashes.domain_has_chain_id:
        fields.append(("uint256", chain.chain_id))
    fields.append(("address", chain.verifying_contract))
    return hash_struct(typehashes.domain_separator_typehash, fields)


def current_domain_hash(chain: ChainContext) -> HexBytes:
    """Domain hash using the chain ID layout regardless of Safe version."""
    return hash_struct(
        HexBytes(DOMAIN_SEPARATOR_TYPEHASH),
        [("uint256", chain.chain_id), ("address", chain.verifying_contract)],
    )


def personal_message_hash(message: bytes) -> HexBytes:
    """EIP-191 `personal_sign` hash of raw message bytes."""
    from eth_account.messages import (
        _hash_eip191_message,  # pyright: ignore[reportPrivateUsage]
        encode_defunct,
    )

    return HexBytes(_hash_eip191_message(encode_defunct(primitive=message)))


def hash_eip712_data(data: Any) -> HexBytes:  # using eth_account
    """Compute EIP-712 typed data hash.

    This replicates `eth_account.account.sign_typed_data()` except it
    doesn't require a private key.
    """
    from eth_account.messages import (
        _hash_eip191_message,  # pyright: ignore[reportPrivateUsage]
        encode_typed_data,
    )

    encoded = encode_typed_data(full_message=data)
    return HexBytes(_hash_eip191_message(encoded))


def domain_typed_data(
    chain: ChainContext, version: str
) -> tuple[list[dict[str, str]], dict[str, Any]]:
    """Return the `EIP712Domain` type and domain values of a Safe."""
    domain_types = [{"name": "verifyingContract", "type": "address"}]
    domain: dict[str, Any] = {"verifyingContract": chain.verifying_contract}
    if resolve(version).domain_has_chain_id:
        domain_types.insert(0, {"name": "chainId", "type": "uint256"})
        domain = {"chainId": chain.chain_id, **domain}
    return domain_types, domain
