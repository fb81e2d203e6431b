from enum import Enum
from typing import (
    TYPE_CHECKING,
    Any,
    NamedTuple,
    Optional,
)

from hexbytes import (
    HexBytes,
)

if TYPE_CHECKING:
    from eth_typing import ChecksumAddress


class SafeOperation(Enum):
    CALL = 0
    DELEGATECALL = 1


class DelegateCallTrust(Enum):
    NOT_DELEGATECALL = 0
    TRUSTED = 1
    UNTRUSTED = 2


class GasTokenRisk(Enum):
    NONE = 0
    CUSTOM_TOKEN = 1
    CUSTOM_RECEIVER = 2
    TOKEN_AND_RECEIVER = 3
    TOKEN_AND_RECEIVER_WITH_GAS_PRICE = 4


class CallIntent(Enum):
    ON_CHAIN_REJECTION = "On-Chain Rejection"
    SELF_TRANSFER = "ETH Self-Transfer"
    ZERO_VALUE_TRANSFER = "Zero-Value ETH Transfer"
    TRANSFER = "ETH Transfer"
    CONTRACT_CALL = "Contract Call"


class ChainContext(NamedTuple):
    chain_id: int
    verifying_contract: "ChecksumAddress"


class TypehashSet(NamedTuple):
    domain_separator_typehash: HexBytes
    safe_tx_typehash: HexBytes
    # Domains of Safe < 1.2.0 do not commit to a chain ID.
    domain_has_chain_id: bool


class SafeTx(NamedTuple):
    to: "ChecksumAddress"
    value: int
    data: HexBytes
    operation: SafeOperation
    safe_tx_gas: int
    base_gas: int
    gas_price: int
    gas_token: "ChecksumAddress"
    refund_receiver: "ChecksumAddress"
    nonce: int


class DecodedCall(NamedTuple):
    method: str
    parameters: list[dict[str, Any]]


class TxHashes(NamedTuple):
    domain_hash: HexBytes
    message_hash: HexBytes
    safe_tx_hash: HexBytes
    encoded_message: HexBytes


class MessageHashes(NamedTuple):
    safe_message: HexBytes
    domain_hash: HexBytes
    message_hash: HexBytes
    safe_message_hash: HexBytes


class TransactionReport(NamedTuple):
    """Everything computed for one Safe transaction."""

    chain: ChainContext
    version: str
    safetx: SafeTx
    hashes: TxHashes
    intent: CallIntent
    decoded: Optional[DecodedCall]
    delegate_call_trust: DelegateCallTrust
    gas_token_risk: GasTokenRisk
    sensitive_methods: list[str]


class MessageReport(NamedTuple):
    chain: ChainContext
    version: str
    message: bytes
    hashes: MessageHashes
