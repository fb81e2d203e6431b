import re
from typing import TYPE_CHECKING, Any, Optional, Union

import click
from hexbytes import HexBytes

from .exceptions import InvalidInput
from .models import SafeOperation

if TYPE_CHECKING:
    from eth_typing import ChecksumAddress

ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")
UINT_PATTERN = re.compile(r"^[0-9]+$")
HEX_DATA_PATTERN = re.compile(r"^(0x)?([0-9a-fA-F]{2})*$")
UINT256_MAX = 2**256 - 1


def to_checksum_address(address: str) -> "ChecksumAddress":
    from eth_utils.address import to_checksum_address

    return to_checksum_address(address)


def parse_address(address: Optional[str], name: str = "address") -> "ChecksumAddress":
    """Validate a `0x`-prefixed 40 hex digit address and checksum it.

    The input checksum is not enforced: the Safe Transaction Service and
    users both supply lower-case addresses.
    """
    if not address or not ADDRESS_PATTERN.match(address):
        raise InvalidInput(f'Invalid Ethereum address format for {name}: "{address}"')
    return to_checksum_address(address)


def parse_uint(value: Union[int, str, None], name: str) -> int:
    if isinstance(value, bool):
        raise InvalidInput(f'Invalid `{name}` value: "{value}".')
    if isinstance(value, int):
        number = value
    elif isinstance(value, str) and UINT_PATTERN.match(value):
        number = int(value)
    else:
        raise InvalidInput(
            f'Invalid `{name}` value: "{value}". Must be a non-negative integer!'
        )
    if not 0 <= number <= UINT256_MAX:
        raise InvalidInput(f"`{name}` value {number} does not fit in a uint256.")
    return number


def parse_data(data: Union[bytes, str, None]) -> HexBytes:
    """Parse call data; `None`, `""` and `"0x"` all mean no call data."""
    if data is None:
        return HexBytes(b"")
    if isinstance(data, bytes):
        return HexBytes(data)
    if not HEX_DATA_PATTERN.match(data):
        raise InvalidInput(
            f'Invalid hex call data: "{data}". Expected an even number of hex digits.'
        )
    return HexBytes(data)


def parse_operation(operation: Union[int, str, None]) -> SafeOperation:
    number = parse_uint(operation, "operation")
    try:
        return SafeOperation(number)
    except ValueError as exc:
        raise InvalidInput(
            f"Invalid operation {number}. Use 0 (CALL) or 1 (DELEGATECALL)."
        ) from exc


# ┌─────────────────┐
# │ Click Callbacks │
# └─────────────────┘


def address_callback(
    ctx: click.Context, param: click.Parameter, value: Optional[str]
) -> Optional["ChecksumAddress"]:
    if value is None:
        return None
    try:
        return parse_address(value, f"--{param.name}".replace("_", "-"))
    except InvalidInput as exc:
        raise click.BadParameter(str(exc), ctx=ctx, param=param) from exc


def uint_callback(
    ctx: click.Context, param: click.Parameter, value: Optional[str]
) -> Optional[int]:
    if value is None:
        return None
    try:
        return parse_uint(value, str(param.name))
    except InvalidInput as exc:
        raise click.BadParameter(str(exc), ctx=ctx, param=param) from exc


def verbose_callback(
    ctx: click.Context, opt: click.Parameter, value: Optional[bool]
) -> Optional[Any]:
    from .console import SAFE_DEBUG, activate_logging

    if value and not SAFE_DEBUG:
        activate_logging()
    return None
