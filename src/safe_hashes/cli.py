import json
import logging
import shutil
import sys
import typing
from types import TracebackType
from typing import (
    Any,
    Optional,
)

import click
from rich.traceback import Traceback

from . import params
from .click import Group
from .console import (
    SAFE_DEBUG,
    activate_logging,
    console,
    get_output_console,
    hexbytes_json_encoder,
    make_status_logger,
    print_message,
    print_nested_approval_notice,
    print_nested_message,
    print_network,
    print_networks,
    print_transaction,
    print_transaction_warnings,
    print_version,
)
from .eip712 import hash_eip712_data
from .exceptions import InvalidInput
from .models import ChainContext
from .networks import CHAIN_IDS
from .source import read_message_file
from .workflows import (
    build_message_report,
    build_nested_message_report,
    build_nested_transaction_report,
    build_transaction_report,
    load_transaction,
    message_output,
    prompt_versions,
    resolve_network,
    resolve_version,
    transaction_output,
    validate_nested_message_options,
    validate_nested_tx_options,
    validate_versions,
)

# ┌───────┐
# │ Setup │
# └───────┘

logger = logging.getLogger(__name__)
status = make_status_logger(logger)

TYPED_DATA_KEYS = {"types", "primaryType", "domain", "message"}


def handle_crash(
    exc_type: type[BaseException],
    exc_value: BaseException,
    exc_traceback: TracebackType | None,
) -> None:
    if not SAFE_DEBUG:
        console.print(f"[bold]{exc_type.__name__}[/bold]: {exc_value}")
    else:
        rich_traceback = Traceback.from_exception(
            exc_type,
            exc_value,
            exc_traceback,
            suppress=[click],
            show_locals=True,
        )
        console.print(rich_traceback)


sys.excepthook = handle_crash


def write_output(output: Optional[typing.TextIO], data: dict[str, Any]) -> None:
    if output is None:
        return
    json.dump(data, output, indent=2, default=hexbytes_json_encoder)
    output.write("\n")
    logger.info(f"Wrote hashes to {output.name}")


# ┌──────┐
# │ Main │
# └──────┘


@click.group(
    cls=Group,
    context_settings=dict(
        show_default=True,
        max_content_width=shutil.get_terminal_size().columns,
        help_option_names=["-h", "--help"],
    ),
)
@click.option(
    "--version",
    is_flag=True,
    callback=print_version,
    expose_value=False,
    is_eager=True,
    help="print version info and exit",
)
def main():
    """Verify the hashes a Safe account asks its owners to sign."""
    if SAFE_DEBUG:
        activate_logging()


# ┌──────────┐
# │ Commands │
# └──────────┘


@main.command()
@params.network
@params.safe
@params.transaction
@params.nested_safe(transaction=True)
@params.output_file
@params.common
def tx(
    network: Optional[str],
    chain_id: Optional[int],
    safe_address: str,
    safe_version: Optional[str],
    safe_info: Optional[str],
    nonce: int,
    txfile: Optional[str],
    index: Optional[int],
    interactive: bool,
    nested_safe: Optional[str],
    nested_safe_nonce: Optional[int],
    nested_safe_version: Optional[str],
    output: Optional[typing.TextIO],
    **overrides: Any,
) -> None:
    """Compute the hashes of a Safe transaction.

    The transaction is read from a saved Safe Transaction Service response
    (--txfile), built from the field options, or both, in which case the
    options override the saved fields.
    """
    validate_nested_tx_options(nested_safe, nested_safe_nonce)
    network_name, chain = resolve_network(network, chain_id)
    version = resolve_version(safe_version, safe_info)
    nested_version = (nested_safe_version or version) if nested_safe else None
    if interactive:
        version, nested_version = prompt_versions(version, nested_version)
    validate_versions(version, nested_version)
    safetx, decoded = load_transaction(
        nonce=nonce,
        txfile=txfile,
        index=index,
        interactive=interactive,
        overrides=overrides,
    )

    with status("Computing Safe transaction hashes..."):
        report = build_transaction_report(
            ChainContext(chain_id=chain, verifying_contract=safe_address),
            safetx,
            version,
            decoded,
        )

    print_transaction_warnings(report)
    print_network(network_name, chain)
    console.line()
    print_transaction(report, "Transaction Data and Computed Hashes")
    data = transaction_output(report)

    if nested_safe is not None:
        assert nested_safe_nonce is not None and nested_version is not None
        with status("Computing nested Safe approval hashes..."):
            nested = build_nested_transaction_report(
                report, nested_safe, nested_safe_nonce, nested_version
            )
        console.line()
        print_nested_approval_notice(nested_safe)
        print_transaction(nested, "Nested Safe Approval Data and Computed Hashes")
        data["nested"] = transaction_output(nested)

    write_output(output, data)


@main.command()
@params.network
@params.safe
@params.nested_safe(transaction=False)
@params.output_file
@click.argument("message_file", metavar="MESSAGEFILE", type=click.Path(dir_okay=False))
@params.common
def message(
    network: Optional[str],
    chain_id: Optional[int],
    safe_address: str,
    safe_version: Optional[str],
    safe_info: Optional[str],
    nested_safe: Optional[str],
    nested_safe_nonce: Optional[int],
    nested_safe_version: Optional[str],
    output: Optional[typing.TextIO],
    message_file: str,
) -> None:
    """Compute the hashes of an off-chain Safe message.

    MESSAGEFILE holds the exact message text. CRLF line endings are
    normalised to LF.
    """
    validate_nested_message_options(nested_safe_nonce)
    network_name, chain = resolve_network(network, chain_id)
    version = resolve_version(safe_version, safe_info)
    nested_version = (nested_safe_version or version) if nested_safe else None
    validate_versions(version, nested_version)
    raw = read_message_file(message_file)
    context = ChainContext(chain_id=chain, verifying_contract=safe_address)

    with status("Computing Safe message hashes..."):
        report = build_message_report(context, raw, version)

    print_network(network_name, chain)
    console.line()
    print_message(report)
    data = message_output(report)

    if nested_safe is not None:
        assert nested_version is not None
        with status("Computing nested Safe message hashes..."):
            nested = build_nested_message_report(context, nested_safe, raw, nested_version)
        console.line()
        print_nested_message(nested)
        data["nested"] = message_output(nested)

    write_output(output, data)


@main.command()
@params.common
def networks():
    """List supported networks and their chain IDs."""
    print_networks(CHAIN_IDS)


@main.command(name="hash")
@click.argument("typed_data_file", metavar="TYPEDDATA", type=click.File("r"))
@params.common
def hash_(typed_data_file: typing.TextIO) -> None:
    """Compute the EIP-712 hash of a typed data JSON document.

    Use '-' to read from standard input.
    """
    try:
        typed_data = json.load(typed_data_file)
        if not isinstance(typed_data, dict) or not TYPED_DATA_KEYS <= typed_data.keys():
            raise ValueError(f"expected keys: {', '.join(sorted(TYPED_DATA_KEYS))}")
        digest = hash_eip712_data(typed_data)
    except (ValueError, KeyError, TypeError) as exc:
        raise InvalidInput(f"Invalid EIP-712 typed data: {exc}") from exc
    get_output_console().print(digest.to_0x_hex())
