from typing import Any, Callable, TypeVar

import click
from click import Command
from click_option_group import MutuallyExclusiveOptionGroup
from click_option_group._decorators import (
    _OptGroup,  # pyright: ignore[reportPrivateUsage]
)

from .validation import address_callback, uint_callback, verbose_callback

FC = TypeVar("FC", bound=Callable[..., Any] | Command)

Decorator = Callable[[FC], FC]

optgroup = _OptGroup()


# ┌─────────┐
# │ Options │
# └─────────┘


def common(f: FC) -> FC:
    for option in reversed(
        [
            click.option(
                "--verbose",
                "-v",
                is_flag=True,
                expose_value=False,
                is_eager=True,
                help="print informational messages",
                callback=verbose_callback,
            ),
        ]
    ):
        f = option(f)
    return f


def network(f: FC) -> FC:
    for option in reversed(
        [
            optgroup.group("Network", cls=MutuallyExclusiveOptionGroup),
            optgroup.option(
                "--network",
                "-n",
                envvar="SAFE_NETWORK",
                show_envvar=True,
                metavar="NAME",
                help="network name (see `safe-hashes networks`)",
            ),
            optgroup.option(
                "--chain-id",
                metavar="ID",
                callback=uint_callback,
                help="custom chain ID",
            ),
        ]
    ):
        f = option(f)
    return f


def safe(f: FC) -> FC:
    for option in reversed(
        [
            click.option(
                "--safe",
                "safe_address",
                metavar="ADDRESS",
                required=True,
                callback=address_callback,
                help="Safe account address",
            ),
            optgroup.group("Safe version", cls=MutuallyExclusiveOptionGroup),
            optgroup.option(
                "--safe-version",
                envvar="SAFE_VERSION",
                show_envvar=True,
                metavar="VERSION",
                help="Safe contract version",
            ),
            optgroup.option(
                "--safe-info",
                type=click.Path(exists=True, dir_okay=False),
                metavar="FILE",
                help="saved Safe info JSON to read the version from",
            ),
        ]
    ):
        f = option(f)
    return f


def nested_safe(transaction: bool) -> Callable[[FC], FC]:
    def decorator(f: FC) -> FC:
        for option in reversed(
            [
                optgroup.group("Nested Safe"),
                optgroup.option(
                    "--nested-safe",
                    metavar="ADDRESS",
                    callback=address_callback,
                    help="nested Safe that signs for the owner "
                    + ("by approving the transaction hash" if transaction else "of the Safe"),
                ),
                optgroup.option(
                    "--nested-safe-nonce",
                    metavar="NONCE",
                    callback=uint_callback,
                    help="nonce of the nested Safe approval"
                    if transaction
                    else "not applicable to messages",
                    hidden=not transaction,
                ),
                optgroup.option(
                    "--nested-safe-version",
                    metavar="VERSION",
                    help="nested Safe contract version (default: the Safe version)",
                ),
            ]
        ):
            f = option(f)
        return f

    return decorator


def transaction(f: FC) -> FC:
    for option in reversed(
        [
            click.option(
                "--nonce",
                required=True,
                callback=uint_callback,
                help="Safe transaction nonce",
            ),
            optgroup.group("Transaction source"),
            optgroup.option(
                "--txfile",
                type=click.Path(exists=True, dir_okay=False),
                metavar="FILE",
                help="saved Safe Transaction Service multisig-transactions JSON",
            ),
            optgroup.option(
                "--index",
                type=click.IntRange(min=0),
                help="transaction to use when several share the nonce",
            ),
            optgroup.option(
                "--interactive",
                "-i",
                is_flag=True,
                default=False,
                help="prompt for every transaction field",
            ),
            optgroup.group("Transaction fields (override the source)"),
            optgroup.option(
                "--to", metavar="ADDRESS", callback=address_callback, help="target address"
            ),
            optgroup.option(
                "--value", metavar="WEI", callback=uint_callback, help="value in wei"
            ),
            optgroup.option("--data", metavar="HEX", help="call data"),
            optgroup.option(
                "--operation",
                type=click.IntRange(0, 1),
                help="0 = CALL, 1 = DELEGATECALL",
            ),
            optgroup.option(
                "--safe-tx-gas", metavar="GAS", callback=uint_callback, help="safeTxGas"
            ),
            optgroup.option(
                "--base-gas", metavar="GAS", callback=uint_callback, help="baseGas"
            ),
            optgroup.option(
                "--gas-price", metavar="WEI", callback=uint_callback, help="gasPrice"
            ),
            optgroup.option(
                "--gas-token",
                metavar="ADDRESS",
                callback=address_callback,
                help="gasToken",
            ),
            optgroup.option(
                "--refund-receiver",
                metavar="ADDRESS",
                callback=address_callback,
                help="refundReceiver",
            ),
        ]
    ):
        f = option(f)
    return f


output_file = click.option(
    "--output", "-o", type=click.File(mode="w"), help="write hashes as JSON to FILENAME"
)
