"""Typed inputs for the hashers.

Transactions are read from Safe Transaction Service JSON, as saved from
`/api/v2/safes/<address>/multisig-transactions/?nonce=<nonce>`, or from a
single transaction object. Nothing here performs network requests.
"""

import json
import logging
from typing import Any, Optional, Sequence, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
)
from web3.constants import CHECKSUM_ADDRESSS_ZERO

from .constants import UNKNOWN_VERSION
from .exceptions import AmbiguousSelection, InvalidInput, NoTransactionFound
from .models import SafeTx
from .validation import (
    parse_address,
    parse_data,
    parse_operation,
    parse_uint,
)

logger = logging.getLogger(__name__)

Number = Union[int, str]


class ServiceTransaction(BaseModel):
    """A multisig transaction; absent or null fields take zero values."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    to: Optional[str] = None
    value: Optional[Number] = None
    data: Optional[str] = None
    operation: Optional[Number] = None
    safe_tx_gas: Optional[Number] = Field(default=None, alias="safeTxGas")
    base_gas: Optional[Number] = Field(default=None, alias="baseGas")
    gas_price: Optional[Number] = Field(default=None, alias="gasPrice")
    gas_token: Optional[str] = Field(default=None, alias="gasToken")
    refund_receiver: Optional[str] = Field(default=None, alias="refundReceiver")
    nonce: Optional[Number] = None
    data_decoded: Optional[dict[str, Any]] = Field(default=None, alias="dataDecoded")

    def to_safetx(self, nonce: int) -> SafeTx:
        return SafeTx(
            to=parse_address(self.to or CHECKSUM_ADDRESSS_ZERO, "to"),
            value=parse_uint(_or_zero(self.value), "value"),
            data=parse_data(self.data),
            operation=parse_operation(_or_zero(self.operation)),
            safe_tx_gas=parse_uint(_or_zero(self.safe_tx_gas), "safeTxGas"),
            base_gas=parse_uint(_or_zero(self.base_gas), "baseGas"),
            gas_price=parse_uint(_or_zero(self.gas_price), "gasPrice"),
            gas_token=parse_address(
                self.gas_token or CHECKSUM_ADDRESSS_ZERO, "gasToken"
            ),
            refund_receiver=parse_address(
                self.refund_receiver or CHECKSUM_ADDRESSS_ZERO, "refundReceiver"
            ),
            nonce=nonce,
        )


class ServiceResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    count: Optional[int] = None
    results: list[ServiceTransaction] = []


class SafeInfo(BaseModel):
    """Subset of `/api/v1/safes/<address>/`."""

    model_config = ConfigDict(extra="ignore")

    version: Optional[str] = None


def _or_zero(value: Optional[Number]) -> Number:
    return 0 if value is None else value


def parse_candidates(
    text: Union[str, bytes], nonce: Optional[int] = None
) -> list[ServiceTransaction]:
    """Parse saved transactions, keeping those matching `nonce` if given."""
    try:
        payload = json.loads(text)
        if isinstance(payload, list):
            candidates = [ServiceTransaction.model_validate(tx) for tx in payload]
        elif isinstance(payload, dict) and "results" in payload:
            candidates = ServiceResponse.model_validate(payload).results
        else:
            candidates = [ServiceTransaction.model_validate(payload)]
    except (ValueError, ValidationError) as exc:
        raise InvalidInput(f"Invalid transaction JSON: {exc}") from exc
    if nonce is not None:
        candidates = [
            tx
            for tx in candidates
            if tx.nonce is None or parse_uint(tx.nonce, "nonce") == nonce
        ]
    logger.info(f"Loaded {len(candidates)} candidate transaction(s)")
    return candidates


def select_transaction(
    candidates: Sequence[ServiceTransaction],
    index: Optional[int] = None,
    pick_first: bool = False,
) -> ServiceTransaction:
    """Pick one transaction among those sharing a nonce.

    Several candidates are normal when a transaction is being replaced, but
    can also indicate irregular activity, so the caller must choose unless
    `pick_first` is set.
    """
    if len(candidates) == 0:
        raise NoTransactionFound("No transaction is available for this nonce.")
    if index is None:
        if len(candidates) > 1 and not pick_first:
            raise AmbiguousSelection(len(candidates))
        index = 0
    if not 0 <= index < len(candidates):
        raise InvalidInput(
            f"No transaction at index {index} "
            f"(available range: 0-{len(candidates) - 1})."
        )
    return candidates[index]


def parse_safe_version(text: Union[str, bytes]) -> str:
    """Read the version of a Safe from its saved info, if present."""
    try:
        info = SafeInfo.model_validate_json(text)
    except ValidationError as exc:
        raise InvalidInput(f"Invalid Safe info JSON: {exc}") from exc
    return info.version or UNKNOWN_VERSION


def read_message_file(path: str) -> bytes:
    """Read a message file as raw bytes.

    Trailing line breaks are dropped since editors append them on save and
    they are not part of the signed message.
    """
    try:
        with open(path, "rb") as f:
            raw = f.read()
    except FileNotFoundError:
        raise InvalidInput(f'Message file not found: "{path}"') from None
    if not raw:
        raise InvalidInput(f'Message file is empty: "{path}"')
    return raw.rstrip(b"\r\n")
