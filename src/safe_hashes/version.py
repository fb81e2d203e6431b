"""Map a Safe contract version to the EIP-712 type layout it signs."""

import logging
from typing import NamedTuple

from hexbytes import HexBytes

from .constants import (
    DOMAIN_SEPARATOR_TYPEHASH,
    DOMAIN_SEPARATOR_TYPEHASH_OLD,
    MIN_SUPPORTED_VERSION,
    SAFE_TX_TYPEHASH,
    SAFE_TX_TYPEHASH_OLD,
)
from .exceptions import UnsupportedVersion
from .models import TypehashSet

logger = logging.getLogger(__name__)

VersionTuple = tuple[int, ...]


class DomainRule(NamedTuple):
    min_version: VersionTuple
    typehash: HexBytes
    has_chain_id: bool


class SafeTxRule(NamedTuple):
    min_version: VersionTuple
    typehash: HexBytes


# Rules are ordered newest first; the first rule whose minimum version is
# satisfied wins.
DOMAIN_RULES = (
    # chainId was added to the domain in safe-smart-account PR #264.
    DomainRule((1, 2, 0), HexBytes(DOMAIN_SEPARATOR_TYPEHASH), True),
    DomainRule((0, 1, 0), HexBytes(DOMAIN_SEPARATOR_TYPEHASH_OLD), False),
)

SAFE_TX_RULES = (
    # dataGas was renamed to baseGas in safe-smart-account PR #90.
    SafeTxRule((1, 0, 0), HexBytes(SAFE_TX_TYPEHASH)),
    SafeTxRule((0, 1, 0), HexBytes(SAFE_TX_TYPEHASH_OLD)),
)


def clean_version(version: str) -> str:
    """Drop build metadata such as the `+L2` suffix."""
    return version.split("+", 1)[0].strip()


def parse_version(version: str) -> VersionTuple:
    cleaned = clean_version(version)
    if not cleaned:
        raise UnsupportedVersion(
            version,
            "No Safe contract found for the specified network. "
            "Please ensure that you have selected the correct network.",
        )
    parts = cleaned.split(".")
    if not all(part.isdigit() for part in parts):
        raise UnsupportedVersion(
            version, f'Safe version "{cleaned}" is not a valid version number.'
        )
    numbers = [int(part) for part in parts]
    while len(numbers) < 3:
        numbers.append(0)
    return tuple(numbers)


def validate_version(version: str) -> VersionTuple:
    parsed = parse_version(version)
    if parsed < parse_version(MIN_SUPPORTED_VERSION):
        raise UnsupportedVersion(
            version, f'Safe version "{clean_version(version)}" is not supported.'
        )
    return parsed


def resolve(version: str) -> TypehashSet:
    """Select the domain and SafeTx typehashes for a Safe version.

    Raises `UnsupportedVersion` if the version is empty or below 0.1.0.
    """
    parsed = validate_version(version)
    domain = next(rule for rule in DOMAIN_RULES if parsed >= rule.min_version)
    safetx = next(rule for rule in SAFE_TX_RULES if parsed >= rule.min_version)
    logger.debug(
        f"Safe version {version}: "
        f"{'current' if domain.has_chain_id else 'legacy'} domain, "
        f"SafeTx typehash {safetx.typehash.to_0x_hex()}"
    )
    return TypehashSet(
        domain_separator_typehash=domain.typehash,
        safe_tx_typehash=safetx.typehash,
        domain_has_chain_id=domain.has_chain_id,
    )
