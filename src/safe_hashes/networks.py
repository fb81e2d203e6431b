from typing import Optional

from .exceptions import InvalidInput

# Networks supported by the Safe Transaction Service.
# See https://docs.safe.global/advanced/smart-account-supported-networks?service=Transaction+Service.
CHAIN_IDS: dict[str, int] = {
    "arbitrum": 42161,
    "aurora": 1313161554,
    "avalanche": 43114,
    "base": 8453,
    "base-sepolia": 84532,
    "berachain": 80094,
    "botanix": 3637,
    "bsc": 56,
    "celo": 42220,
    "codex": 81224,
    "ethereum": 1,
    "gnosis": 100,
    "gnosis-chiado": 10200,
    "hemi": 43111,
    "ink": 57073,
    "katana": 747474,
    "lens": 232,
    "linea": 59144,
    "mantle": 5000,
    "opbnb": 204,
    "optimism": 10,
    "peaq": 3338,
    "polygon": 137,
    "polygon-zkevm": 1101,
    "scroll": 534352,
    "sepolia": 11155111,
    "sonic": 146,
    "unichain": 130,
    "worldchain": 480,
    "xdc": 50,
    "xlayer": 196,
    "zksync": 324,
}


def get_chain_id(network: str) -> int:
    try:
        return CHAIN_IDS[network]
    except KeyError:
        raise InvalidInput(
            f'Invalid network name: "{network}". '
            "Run `safe-hashes networks` to list supported networks."
        ) from None


def get_network_name(chain_id: int) -> Optional[str]:
    for name, network_chain_id in CHAIN_IDS.items():
        if network_chain_id == chain_id:
            return name
    return None
