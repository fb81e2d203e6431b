import logging
import os
import sys
import typing
from importlib.metadata import PackageNotFoundError, version
from typing import TYPE_CHECKING, Any, Optional

from click import Context, Parameter
from hexbytes import HexBytes
from rich.console import Console
from rich.markup import escape
from rich.theme import Theme

from .calldata import describe_method
from .constants import (
    SYMBOL_CAUTION,
    SYMBOL_CHECK,
    SYMBOL_CROSS,
    SYMBOL_WARNING,
)
from .models import (
    DelegateCallTrust,
    GasTokenRisk,
    MessageReport,
    TransactionReport,
)

if TYPE_CHECKING:
    from rich.console import RenderableType
    from rich.panel import Panel
    from rich.table import Table


logger = logging.getLogger(__name__)

# Constants
JSON_INDENT_LEVEL = 2
SAFE_DEBUG = True if "SAFE_DEBUG" in os.environ else False

THEME = Theme(
    {
        "ok": "green",
        "caution": "yellow",
        "danger": "bold red",
        "secondary": "dim",
        "hash": "green",
        "panel_ok": "green",
        "panel_caution": "yellow",
        "panel_danger": "red",
    }
)

console = Console(theme=THEME)


def activate_logging():
    from rich.logging import RichHandler

    if SAFE_DEBUG:
        level = logging.NOTSET
    else:
        level = logging.INFO
    format = "<%(name)s.%(funcName)s> %(message)s"
    logging.basicConfig(
        level=level,
        format=format,
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True))],
    )


def format_hash(value: bytes) -> str:
    """Format a hash the way a Ledger device displays it."""
    return "0x" + HexBytes(value).hex().upper()


def hexbytes_json_encoder(obj: Any):
    if isinstance(obj, HexBytes):
        return obj.to_0x_hex()
    raise TypeError(f"Cannot serialize object of {type(obj)}")


def get_json_data_renderable(data: Any) -> "RenderableType":
    from rich.json import JSON

    return JSON.from_data(
        data,
        default=hexbytes_json_encoder,
        indent=JSON_INDENT_LEVEL,
    )


def get_kvtable(
    *args: dict[str, "RenderableType"], draw_divider: bool = True
) -> "Table":
    from rich.box import Box
    from rich.table import Table
    from rich.text import Text

    custom_box: Box = Box(
        "    \n"  # top
        "    \n"  # head
        "    \n"  # head_row
        "    \n"  # mid
        " ── \n"  # row
        "    \n"  # foot_row
        "    \n"  # foot
        "    \n"  # bottom
    )
    table = Table(
        show_edge=False,
        show_header=False,
        box=custom_box,
    )
    table.add_column("Field", justify="right", style="bold", no_wrap=True)
    table.add_column("Value", no_wrap=False)
    for idx, arg in enumerate(args):
        for key, val in arg.items():
            # Wrap all strings in a Text with overflow.
            if isinstance(val, str):
                table.add_row(key, Text.from_markup(val, overflow="fold"))
            else:
                table.add_row(key, val)
        if len(args) > 1 and idx < len(args) - 1:
            if draw_divider:
                table.add_section()
            else:
                table.add_row("", "")
    return table


def get_output_console(output: Optional[typing.TextIO] = None) -> Console:
    """Return a Console suitable for printing results.

    The Console must not insert hard wraps, which Rich normally inserts by
    default. This is important when piping or writing text-encoded data to a
    file such as a hexadecimal string or a JSON object.
    """
    return Console(file=output if output else sys.stdout, soft_wrap=True)


def get_panel(
    title: str, subtitle: str, renderable: "RenderableType", **kwargs: Any
) -> "Panel":
    from rich.box import ROUNDED
    from rich.panel import Panel

    base_config = dict(
        title=title,
        title_align="left",
        subtitle=subtitle,
        subtitle_align="right",
        border_style="bold italic",
        padding=(1, 1),
    )
    base_config.update(**kwargs)
    return Panel(renderable, box=ROUNDED, **base_config)  # pyright: ignore[reportArgumentType]


def make_status_logger(logger: logging.Logger):
    def status_logger(message: str):
        logger.info(message, stacklevel=2)
        return console.status(message)

    return status_logger


def print_kvtable(
    title: str,
    subtitle: str,
    *args: dict[str, "RenderableType"],
    draw_divider: bool = True,
    **kwargs: Any,
) -> None:
    table = get_kvtable(*args, draw_divider=draw_divider)
    console.print(get_panel(title, subtitle, table, **kwargs))


def print_network(network: Optional[str], chain_id: int) -> None:
    print_kvtable(
        "Selected Network Configuration",
        "",
        {
            "Network": network if network else "<custom>",
            "Chain ID": str(chain_id),
        },
    )


def print_networks(chain_ids: dict[str, int]) -> None:
    print_kvtable(
        "Supported Networks",
        f"[ networks={len(chain_ids)} ]",
        {name: str(chain_ids[name]) for name in sorted(chain_ids)},
    )


def _operation_label(report: TransactionReport) -> str:
    operation = report.safetx.operation
    label = f"{operation.value} ({operation.name.capitalize()})"
    if report.delegate_call_trust is DelegateCallTrust.TRUSTED:
        label += f" [caution]{SYMBOL_CHECK} TRUSTED DELEGATECALL[/caution]"
    elif report.delegate_call_trust is DelegateCallTrust.UNTRUSTED:
        label += f" [danger]{SYMBOL_CROSS} UNTRUSTED DELEGATECALL[/danger]"
    return label


def print_transaction(report: TransactionReport, title: str) -> None:
    safetx = report.safetx
    hashes = report.hashes
    if report.decoded is not None:
        parameters: "RenderableType" = get_json_data_renderable(
            report.decoded.parameters
        )
    elif safetx.data:
        parameters = "Unknown"
    else:
        parameters = escape("[]")
    border_style = (
        "panel_danger"
        if report.delegate_call_trust is DelegateCallTrust.UNTRUSTED
        else "bold italic"
    )
    print_kvtable(
        title,
        f"[ Safe {report.version} ]",
        {
            "Multisig Address": report.chain.verifying_contract,
            "To": safetx.to,
            "Value": str(safetx.value),
            "Data": safetx.data.to_0x_hex(),
            "Operation": _operation_label(report),
            "Safe Transaction Gas": str(safetx.safe_tx_gas),
            "Base Gas": str(safetx.base_gas),
            "Gas Price": str(safetx.gas_price),
            "Gas Token": safetx.gas_token,
            "Refund Receiver": safetx.refund_receiver,
            "Nonce": str(safetx.nonce),
            "Encoded Message": hashes.encoded_message.to_0x_hex(),
        },
        {
            "Method": escape(describe_method(report.intent, report.decoded)),
            "Parameters": parameters,
        },
        {
            "Domain Hash": format_hash(hashes.domain_hash),
            "Message Hash": format_hash(hashes.message_hash),
            "Safe Transaction Hash": f"[hash]{hashes.safe_tx_hash.to_0x_hex()}[/hash]",
        },
        border_style=border_style,
    )


GAS_TOKEN_WARNINGS = {
    GasTokenRisk.CUSTOM_TOKEN: (
        "caution",
        "This transaction uses a custom gas token. "
        "Please verify that this is intended.",
    ),
    GasTokenRisk.CUSTOM_RECEIVER: (
        "caution",
        "This transaction uses a custom refund receiver. "
        "Please verify that this is intended.",
    ),
    GasTokenRisk.TOKEN_AND_RECEIVER: (
        "danger",
        "This transaction uses a custom gas token and a custom refund receiver. "
        "This combination can be used to hide a rerouting of funds through "
        "gas refunds.",
    ),
    GasTokenRisk.TOKEN_AND_RECEIVER_WITH_GAS_PRICE: (
        "danger",
        "This transaction uses a custom gas token and a custom refund receiver. "
        "This combination can be used to hide a rerouting of funds through "
        "gas refunds. Furthermore, the gas price is non-zero, which increases "
        "the potential for hidden value transfers.",
    ),
}


def print_transaction_warnings(report: TransactionReport) -> None:
    from rich.text import Text

    warnings: list[tuple[str, str]] = []
    if report.delegate_call_trust is DelegateCallTrust.UNTRUSTED:
        warnings.append(
            (
                "danger",
                "The transaction includes an untrusted delegate call to address "
                f"{report.safetx.to}! This may lead to unexpected behaviour or "
                "vulnerabilities. Please review it carefully before you sign!",
            )
        )
    if report.gas_token_risk in GAS_TOKEN_WARNINGS:
        warnings.append(GAS_TOKEN_WARNINGS[report.gas_token_risk])
    for method in report.sensitive_methods:
        warnings.append(
            (
                "danger",
                f'The "{method}" function modifies the owners or threshold of '
                "the Safe. Proceed with caution!",
            )
        )
    for style, message in warnings:
        logger.info(f"Warning: {message}")
        console.print(Text(f"{SYMBOL_WARNING} WARNING: {message}", style=style))
        console.line()


def print_nested_approval_notice(nested_safe: str) -> None:
    console.print(
        f"[caution]The nested Safe at {nested_safe} will use the following "
        "transaction to approve the primary transaction.[/caution]"
    )
    console.line()


def print_message(report: MessageReport) -> None:
    print_kvtable(
        "Message Data and Computed Hashes",
        f"[ Safe {report.version} ]",
        {
            "Multisig Address": report.chain.verifying_contract,
            "Message": escape(report.message.decode("utf-8", errors="replace")),
        },
        _message_hash_rows(report),
    )


def print_nested_message(report: MessageReport) -> None:
    console.print(
        f"[caution]The nested Safe at {report.chain.verifying_contract} will sign "
        f"the Safe message {report.hashes.safe_message.to_0x_hex()} via an "
        "EIP-712 message object.[/caution]"
    )
    console.line()
    print_kvtable(
        "Nested Safe Computed Hashes",
        f"[ Safe {report.version} ]",
        {"Nested Safe Address": report.chain.verifying_contract},
        _message_hash_rows(report),
    )


def _message_hash_rows(report: MessageReport) -> dict[str, "RenderableType"]:
    hashes = report.hashes
    return {
        "Safe Message": hashes.safe_message.to_0x_hex(),
        "Domain Hash": format_hash(hashes.domain_hash),
        "Message Hash": format_hash(hashes.message_hash),
        "Safe Message Hash": f"[hash]{hashes.safe_message_hash.to_0x_hex()}[/hash]",
    }


def print_unsupported(message: str) -> None:
    console.print(f"[caution]{SYMBOL_CAUTION} {message}[/caution]")


def print_version(ctx: Context, param: Parameter, value: Optional[bool]) -> None:
    if not value or ctx.resilient_parsing:
        return
    try:
        pkg_version = version("safe-hashes")
    except PackageNotFoundError:
        pkg_version = "unknown"
    get_output_console().print(f"Safe Hashes v{pkg_version}", highlight=False)
    ctx.exit()
