"""Safe off-chain message hashes.

A Safe signs an off-chain message as the EIP-712 struct
`SafeMessage(bytes message)` where `message` is the EIP-191 personal message
hash of the text. Per the EIP-712 rule for dynamic values, the struct field
is `keccak256(abi.encode(bytes32(safe_message)))`.

When a nested Safe signs on behalf of a primary Safe, the nested Safe signs
an EIP-712 object whose payload is the primary Safe's message hash, so two
independent domains are involved.
"""

import logging
from typing import TYPE_CHECKING, Any

from hexbytes import HexBytes

from .constants import SAFE_MSG_TYPEHASH
from .eip712 import (
    current_domain_hash,
    domain_hash,
    domain_typed_data,
    eip712_digest,
    hash_struct,
    personal_message_hash,
)
from .models import ChainContext, MessageHashes
from .version import validate_version

if TYPE_CHECKING:
    from eth_typing import ChecksumAddress

logger = logging.getLogger(__name__)


def normalize_message(raw: bytes) -> bytes:
    """Normalise CRLF line endings to LF by deleting every CR byte."""
    return raw.replace(b"\r", b"")


def safe_message_struct_hash(safe_message: bytes) -> HexBytes:
    """Hash `SafeMessage(bytes message)` for a 32-byte message payload."""
    from eth_abi.abi import encode as abi_encode

    encoded = abi_encode(["bytes32"], [bytes(safe_message)])
    return hash_struct(HexBytes(SAFE_MSG_TYPEHASH), [("bytes", encoded)])


def _message_hashes(
    chain: ChainContext, safe_message: HexBytes, version: str
) -> MessageHashes:
    domain = domain_hash(chain, version)
    message_hash = safe_message_struct_hash(safe_message)
    return MessageHashes(
        safe_message=safe_message,
        domain_hash=domain,
        message_hash=message_hash,
        safe_message_hash=eip712_digest(domain, message_hash),
    )


def offchain_message_hashes(
    chain: ChainContext, raw: bytes, version: str
) -> MessageHashes:
    """Compute the hashes a Safe owner signs for an off-chain message."""
    validate_version(version)
    safe_message = personal_message_hash(normalize_message(raw))
    hashes = _message_hashes(chain, safe_message, version)
    logger.info(
        f"Safe message hash for {chain.verifying_contract} "
        f"(chain {chain.chain_id}): {hashes.safe_message_hash.to_0x_hex()}"
    )
    return hashes


def nested_offchain_message_hashes(
    chain: ChainContext,
    nested_safe: "ChecksumAddress",
    raw: bytes,
    nested_version: str,
) -> MessageHashes:
    """Compute the hashes an owner of a nested Safe signs for a message.

    `chain.verifying_contract` is the primary Safe. The returned
    `safe_message` is the EIP-712 object the nested Safe signs; its domain
    always uses the chain ID layout, even for a legacy primary Safe.
    """
    validate_version(nested_version)
    personal_hash = personal_message_hash(normalize_message(raw))

    # The payload is hashed as a `bytes` value, which for a single word is
    # the same as keccak256(abi.encode(bytes32(personal_hash))).
    inner_struct_hash = hash_struct(
        HexBytes(SAFE_MSG_TYPEHASH), [("bytes", personal_hash)]
    )
    safe_msg = eip712_digest(current_domain_hash(chain), inner_struct_hash)

    nested_chain = ChainContext(chain_id=chain.chain_id, verifying_contract=nested_safe)
    hashes = _message_hashes(nested_chain, safe_msg, nested_version)
    logger.info(
        f"Nested Safe message hash for {nested_safe} "
        f"(chain {chain.chain_id}): {hashes.safe_message_hash.to_0x_hex()}"
    )
    return hashes


def safe_message_typed_data(
    chain: ChainContext, safe_message: bytes, version: str
) -> dict[str, Any]:
    """Return the `SafeMessage` EIP-712 typed data a wallet is asked to sign."""
    domain_types, domain = domain_typed_data(chain, version)
    return {
        "types": {
            "EIP712Domain": domain_types,
            "SafeMessage": [{"name": "message", "type": "bytes"}],
        },
        "primaryType": "SafeMessage",
        "domain": domain,
        "message": {"message": HexBytes(safe_message).to_0x_hex()},
    }
