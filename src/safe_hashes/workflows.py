"""Common logic for command implementations."""

import logging
from typing import (
    TYPE_CHECKING,
    Any,
    Optional,
    Sequence,
)

import click

from .calldata import (
    approve_hash_call,
    classify_intent,
    parse_decoded_call,
    sensitive_methods,
)
from .console import console, make_status_logger
from .constants import SYMBOL_WARNING, UNKNOWN_VERSION
from .exceptions import AmbiguousSelection, InvalidInput, MissingNestedParameter
from .messages import (
    nested_offchain_message_hashes,
    offchain_message_hashes,
    safe_message_typed_data,
)
from .models import (
    ChainContext,
    DecodedCall,
    MessageReport,
    SafeTx,
    TransactionReport,
)
from .networks import get_chain_id, get_network_name
from .source import (
    ServiceTransaction,
    parse_candidates,
    parse_safe_version,
    select_transaction,
)
from .transactions import (
    delegate_call_trust,
    gas_token_risk,
    nested_transaction_hashes,
    safe_tx_typed_data,
    transaction_hashes,
)
from .validation import (
    parse_address,
    parse_data,
    parse_operation,
    parse_uint,
)
from .version import validate_version

if TYPE_CHECKING:
    from eth_typing import ChecksumAddress

logger = logging.getLogger(__name__)
status = make_status_logger(logger)

# SafeTx fields that can be overridden, in prompt order.
SAFETX_FIELDS = (
    "to",
    "value",
    "data",
    "operation",
    "safe_tx_gas",
    "base_gas",
    "gas_price",
    "gas_token",
    "refund_receiver",
)


# ┌─────────┐
# │ Options │
# └─────────┘


def resolve_network(
    network: Optional[str], chain_id: Optional[int]
) -> tuple[Optional[str], int]:
    """Return the network name (if known) and chain ID to hash against."""
    if chain_id is not None:
        return get_network_name(chain_id), chain_id
    if network is None:
        raise InvalidInput("Specify a network with --network or --chain-id.")
    return network, get_chain_id(network)


def resolve_version(safe_version: Optional[str], safe_info: Optional[str]) -> str:
    if safe_version is not None:
        return safe_version
    if safe_info is not None:
        with open(safe_info, "rb") as f:
            return parse_safe_version(f.read())
    logger.info(f"No Safe version given, assuming {UNKNOWN_VERSION}")
    return UNKNOWN_VERSION


def validate_nested_tx_options(
    nested_safe: Optional[str], nested_safe_nonce: Optional[int]
) -> None:
    if nested_safe is not None and nested_safe_nonce is None:
        raise MissingNestedParameter(
            "The nested Safe nonce is required with --nested-safe "
            "(use --nested-safe-nonce)."
        )
    if nested_safe_nonce is not None and nested_safe is None:
        raise MissingNestedParameter(
            "The nested Safe address is required with --nested-safe-nonce "
            "(use --nested-safe)."
        )


def validate_nested_message_options(nested_safe_nonce: Optional[int]) -> None:
    if nested_safe_nonce is not None:
        raise MissingNestedParameter(
            "Do not specify a nested Safe nonce when calculating "
            "off-chain message hashes."
        )


def prompt_versions(
    version: str, nested_version: Optional[str]
) -> tuple[str, Optional[str]]:
    from rich.prompt import Prompt

    console.print(
        "[danger]Interactive mode is enabled. Values entered here are only "
        "loosely validated. BE VERY CAREFUL![/danger]"
    )
    console.line()
    version = Prompt.ask("Enter the Safe version", console=console, default=version)
    if nested_version is not None:
        nested_version = Prompt.ask(
            "Enter the nested Safe version", console=console, default=nested_version
        )
    return version, nested_version


def validate_versions(version: str, nested_version: Optional[str]) -> None:
    """Raise `UnsupportedVersion` before any transaction or message is loaded."""
    validate_version(version)
    if nested_version is not None:
        validate_version(nested_version)


# ┌──────────────┐
# │ Transactions │
# └──────────────┘


def choose_transaction(
    candidates: Sequence[ServiceTransaction],
    index: Optional[int],
    interactive: bool,
) -> ServiceTransaction:
    """Select a transaction, asking the user when several share the nonce."""
    try:
        return select_transaction(candidates, index=index, pick_first=interactive)
    except AmbiguousSelection as exc:
        console.print(
            f"[caution]{SYMBOL_WARNING} Several transactions with identical nonce "
            "values have been detected. This occurrence is normal if you are "
            "deliberately replacing an existing transaction. However, if your "
            "Safe interface displays only a single transaction, this could "
            "indicate potential irregular activity requiring your attention."
            "[/caution]"
        )
        console.line()
        chosen = click.prompt(
            "Index of the transaction",
            type=click.IntRange(0, exc.count - 1),
        )
        console.line()
        return select_transaction(candidates, index=chosen)


def prompt_safetx(safetx: SafeTx) -> SafeTx:
    """Let the user override every SafeTx field, keeping defaults on empty input."""
    from rich.prompt import Prompt

    updates: dict[str, Any] = {}
    for field in SAFETX_FIELDS:
        current = getattr(safetx, field)
        if field == "data":
            default = current.to_0x_hex()
        elif field == "operation":
            default = str(current.value)
        else:
            default = str(current)
        answer = Prompt.ask(f"Enter the `{field}`", console=console, default=default)
        updates[field] = answer
    return apply_overrides(safetx, updates)


def apply_overrides(safetx: SafeTx, overrides: dict[str, Any]) -> SafeTx:
    parsers = {
        "to": lambda v: parse_address(v, "to"),
        "value": lambda v: parse_uint(v, "value"),
        "data": parse_data,
        "operation": parse_operation,
        "safe_tx_gas": lambda v: parse_uint(v, "safeTxGas"),
        "base_gas": lambda v: parse_uint(v, "baseGas"),
        "gas_price": lambda v: parse_uint(v, "gasPrice"),
        "gas_token": lambda v: parse_address(v, "gasToken"),
        "refund_receiver": lambda v: parse_address(v, "refundReceiver"),
    }
    updates = {
        field: parsers[field](value)
        for field, value in overrides.items()
        if value is not None
    }
    if updates:
        logger.info(f"Overriding transaction fields: {', '.join(updates)}")
    return safetx._replace(**updates)


def load_transaction(
    *,
    nonce: int,
    txfile: Optional[str],
    index: Optional[int],
    interactive: bool,
    overrides: dict[str, Any],
) -> tuple[SafeTx, Optional[DecodedCall]]:
    """Build the SafeTx to hash from a saved transaction and/or options."""
    if txfile is not None:
        with status("Loading transaction..."):
            with open(txfile, "rb") as f:
                candidates = parse_candidates(f.read(), nonce=nonce)
        chosen = choose_transaction(candidates, index, interactive)
    elif overrides.get("to") is None and not interactive:
        raise InvalidInput("Provide a transaction with --txfile or --to.")
    else:
        chosen = ServiceTransaction()
    safetx = chosen.to_safetx(nonce)
    decoded = parse_decoded_call(chosen.data_decoded)

    if interactive:
        safetx = prompt_safetx(safetx)
        decoded = None
    safetx = apply_overrides(safetx, overrides)
    if overrides.get("data") is not None:
        # A decoding of the saved call data no longer applies.
        decoded = None
    return safetx, decoded


def build_transaction_report(
    chain: ChainContext,
    safetx: SafeTx,
    version: str,
    decoded: Optional[DecodedCall],
) -> TransactionReport:
    hashes = transaction_hashes(chain, safetx, version)
    return TransactionReport(
        chain=chain,
        version=version,
        safetx=safetx,
        hashes=hashes,
        intent=classify_intent(
            chain.verifying_contract, safetx.to, safetx.value, safetx.data
        ),
        decoded=decoded,
        delegate_call_trust=delegate_call_trust(safetx),
        gas_token_risk=gas_token_risk(safetx),
        sensitive_methods=sensitive_methods(decoded),
    )


def build_nested_transaction_report(
    primary: TransactionReport,
    nested_safe: "ChecksumAddress",
    nested_nonce: int,
    nested_version: str,
) -> TransactionReport:
    """Report on the `approveHash` transaction that approves `primary`."""
    approval, hashes = nested_transaction_hashes(
        chain_id=primary.chain.chain_id,
        primary_safe=primary.chain.verifying_contract,
        safe_tx_hash=primary.hashes.safe_tx_hash,
        nested_safe=nested_safe,
        nested_nonce=nested_nonce,
        nested_version=nested_version,
    )
    decoded = approve_hash_call(primary.hashes.safe_tx_hash)
    return TransactionReport(
        chain=ChainContext(
            chain_id=primary.chain.chain_id, verifying_contract=nested_safe
        ),
        version=nested_version,
        safetx=approval,
        hashes=hashes,
        intent=classify_intent(nested_safe, approval.to, approval.value, approval.data),
        decoded=decoded,
        delegate_call_trust=delegate_call_trust(approval),
        gas_token_risk=gas_token_risk(approval),
        sensitive_methods=sensitive_methods(decoded),
    )


def transaction_output(report: TransactionReport) -> dict[str, Any]:
    hashes = report.hashes
    return {
        "chainId": report.chain.chain_id,
        "safe": report.chain.verifying_contract,
        "safeVersion": report.version,
        "method": report.decoded.method if report.decoded else None,
        "domainHash": hashes.domain_hash,
        "messageHash": hashes.message_hash,
        "safeTxHash": hashes.safe_tx_hash,
        "encodedMessage": hashes.encoded_message,
        "typedData": safe_tx_typed_data(report.chain, report.safetx, report.version),
    }


# ┌──────────┐
# │ Messages │
# └──────────┘


def build_message_report(
    chain: ChainContext, message: bytes, version: str
) -> MessageReport:
    return MessageReport(
        chain=chain,
        version=version,
        message=message,
        hashes=offchain_message_hashes(chain, message, version),
    )


def build_nested_message_report(
    chain: ChainContext,
    nested_safe: "ChecksumAddress",
    message: bytes,
    nested_version: str,
) -> MessageReport:
    return MessageReport(
        chain=ChainContext(chain_id=chain.chain_id, verifying_contract=nested_safe),
        version=nested_version,
        message=message,
        hashes=nested_offchain_message_hashes(
            chain, nested_safe, message, nested_version
        ),
    )


def message_output(report: MessageReport) -> dict[str, Any]:
    hashes = report.hashes
    return {
        "chainId": report.chain.chain_id,
        "safe": report.chain.verifying_contract,
        "safeVersion": report.version,
        "safeMessage": hashes.safe_message,
        "domainHash": hashes.domain_hash,
        "messageHash": hashes.message_hash,
        "safeMessageHash": hashes.safe_message_hash,
        "typedData": safe_message_typed_data(
            report.chain, hashes.safe_message, report.version
        ),
    }
