import logging
from typing import (
    TYPE_CHECKING,
    Any,
)

from hexbytes import (
    HexBytes,
)

from .constants import (
    APPROVE_HASH_SELECTOR,
    MULTI_SEND_CALL_ONLY_ADDRESSES,
    SAFE_MIGRATION_ADDRESSES,
    SAFE_TX_TYPEHASH_OLD,
    SIGN_MESSAGE_LIB_ADDRESSES,
)
from .eip712 import (
    Field,
    domain_hash,
    domain_typed_data,
    eip712_digest,
    encode_data,
    keccak,
)
from .exceptions import InvalidInput
from .models import (
    ChainContext,
    DelegateCallTrust,
    GasTokenRisk,
    SafeOperation,
    SafeTx,
    TxHashes,
)
from .validation import to_checksum_address
from .version import resolve

if TYPE_CHECKING:
    from eth_typing import ChecksumAddress

logger = logging.getLogger(__name__)

TRUSTED_FOR_DELEGATE_CALL = frozenset(
    to_checksum_address(address)
    for address in (
        *MULTI_SEND_CALL_ONLY_ADDRESSES,
        *SAFE_MIGRATION_ADDRESSES,
        *SIGN_MESSAGE_LIB_ADDRESSES,
    )
)


def safetx_fields(safetx: SafeTx) -> list[Field]:
    """EIP-712 fields of `SafeTx`, in struct order, after the typehash."""
    return [
        ("address", safetx.to),
        ("uint256", safetx.value),
        ("bytes", safetx.data),
        ("uint8", safetx.operation.value),
        ("uint256", safetx.safe_tx_gas),
        ("uint256", safetx.base_gas),
        ("uint256", safetx.gas_price),
        ("address", safetx.gas_token),
        ("address", safetx.refund_receiver),
        ("uint256", safetx.nonce),
    ]


def transaction_hashes(
    chain: ChainContext,
    safetx: SafeTx,
    version: str,
) -> TxHashes:
    """Compute the domain, message and SafeTx hashes of a Safe transaction.

    Raises `UnsupportedVersion` if the Safe version is not supported.
    """
    typehashes = resolve(version)
    encoded = encode_data(typehashes.safe_tx_typehash, safetx_fields(safetx))
    message_hash = keccak(encoded)
    domain = domain_hash(chain, version)
    safe_tx_hash = eip712_digest(domain, message_hash)
    logger.info(
        f"SafeTx hash for {chain.verifying_contract} "
        f"(chain {chain.chain_id}, nonce {safetx.nonce}): {safe_tx_hash.to_0x_hex()}"
    )
    return TxHashes(
        domain_hash=domain,
        message_hash=message_hash,
        safe_tx_hash=safe_tx_hash,
        encoded_message=encoded,
    )


def is_trusted_delegate(address: str) -> bool:
    return to_checksum_address(address) in TRUSTED_FOR_DELEGATE_CALL


def delegate_call_trust(safetx: SafeTx) -> DelegateCallTrust:
    if safetx.operation is not SafeOperation.DELEGATECALL:
        return DelegateCallTrust.NOT_DELEGATECALL
    if is_trusted_delegate(safetx.to):
        return DelegateCallTrust.TRUSTED
    return DelegateCallTrust.UNTRUSTED


def gas_token_risk(safetx: SafeTx) -> GasTokenRisk:
    """Classify gas refund settings that can hide a transfer of funds."""
    from web3.constants import CHECKSUM_ADDRESSS_ZERO

    custom_token = safetx.gas_token != CHECKSUM_ADDRESSS_ZERO
    custom_receiver = safetx.refund_receiver != CHECKSUM_ADDRESSS_ZERO
    if custom_token and custom_receiver:
        if safetx.gas_price != 0:
            return GasTokenRisk.TOKEN_AND_RECEIVER_WITH_GAS_PRICE
        return GasTokenRisk.TOKEN_AND_RECEIVER
    elif custom_token:
        return GasTokenRisk.CUSTOM_TOKEN
    elif custom_receiver:
        return GasTokenRisk.CUSTOM_RECEIVER
    return GasTokenRisk.NONE


def encode_approve_hash(safe_tx_hash: bytes) -> HexBytes:
    """Build `approveHash(bytes32)` calldata: selector followed by the hash."""
    if len(safe_tx_hash) != 32:
        raise InvalidInput("Safe transaction hash must be 32 bytes.")
    return HexBytes(HexBytes(APPROVE_HASH_SELECTOR) + bytes(safe_tx_hash))


def approval_hash(data: bytes) -> HexBytes:
    """Return the hash approved by `approveHash(bytes32)` calldata."""
    selector = HexBytes(APPROVE_HASH_SELECTOR)
    if len(data) != len(selector) + 32 or data[: len(selector)] != selector:
        raise InvalidInput("Call data is not an approveHash(bytes32) call.")
    return HexBytes(data[len(selector) :])


def build_approval(
    target_safe: "ChecksumAddress",
    safe_tx_hash: bytes,
    nested_nonce: int,
) -> SafeTx:
    """Build the transaction a nested Safe submits to approve `safe_tx_hash`."""
    from web3.constants import CHECKSUM_ADDRESSS_ZERO

    return SafeTx(
        to=target_safe,
        value=0,
        data=encode_approve_hash(safe_tx_hash),
        operation=SafeOperation.CALL,
        safe_tx_gas=0,
        base_gas=0,
        gas_price=0,
        gas_token=CHECKSUM_ADDRESSS_ZERO,
        refund_receiver=CHECKSUM_ADDRESSS_ZERO,
        nonce=nested_nonce,
    )


def nested_transaction_hashes(
    *,
    chain_id: int,
    primary_safe: "ChecksumAddress",
    safe_tx_hash: bytes,
    nested_safe: "ChecksumAddress",
    nested_nonce: int,
    nested_version: str,
) -> tuple[SafeTx, TxHashes]:
    """Hash the `approveHash` transaction of a nested Safe.

    The approval is signed by the owners of the nested Safe, so its domain
    is keyed to the nested Safe, not to the primary Safe.
    """
    approval = build_approval(primary_safe, safe_tx_hash, nested_nonce)
    hashes = transaction_hashes(
        ChainContext(chain_id=chain_id, verifying_contract=nested_safe),
        approval,
        nested_version,
    )
    return approval, hashes


def safe_tx_typed_data(
    chain: ChainContext,
    safetx: SafeTx,
    version: str,
) -> dict[str, Any]:
    """Return the EIP-712 typed data a wallet is asked to sign."""
    typehashes = resolve(version)
    legacy_tx = typehashes.safe_tx_typehash == HexBytes(SAFE_TX_TYPEHASH_OLD)
    base_gas_name = "dataGas" if legacy_tx else "baseGas"

    domain_types, domain = domain_typed_data(chain, version)

    return {
        "types": {
            "EIP712Domain": domain_types,
            "SafeTx": [
                {"name": "to", "type": "address"},
                {"name": "value", "type": "uint256"},
                {"name": "data", "type": "bytes"},
                {"name": "operation", "type": "uint8"},
                {"name": "safeTxGas", "type": "uint256"},
                {"name": base_gas_name, "type": "uint256"},
                {"name": "gasPrice", "type": "uint256"},
                {"name": "gasToken", "type": "address"},
                {"name": "refundReceiver", "type": "address"},
                {"name": "nonce", "type": "uint256"},
            ],
        },
        "primaryType": "SafeTx",
        "domain": domain,
        "message": {
            "to": safetx.to,
            "value": safetx.value,
            "data": safetx.data.to_0x_hex(),
            "operation": safetx.operation.value,
            "safeTxGas": safetx.safe_tx_gas,
            base_gas_name: safetx.base_gas,
            "gasPrice": safetx.gas_price,
            "gasToken": safetx.gas_token,
            "refundReceiver": safetx.refund_receiver,
            "nonce": safetx.nonce,
        },
    }
