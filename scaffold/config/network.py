"""
Network configuration for the deploy script.

Contains RPC URLs, explorers and faucets for the two networks the deploy
command can target. Mainnet/testnet is a binary switch: ``--testnet``,
the ``deploy-testnet`` command, or a truthy ``TESTNET`` environment variable.
"""

import os
from typing import Any


# =============================================================================
# CHAIN CONFIGURATIONS
# =============================================================================

CHAINS: dict[str, dict[str, Any]] = {
    "gnosis": {
        "chain_id": 100,
        "name": "Gnosis Chain",
        "currency": "xDAI",
        "rpc_urls": [
            "https://rpc.gnosischain.com",
            "https://gnosis-mainnet.public.blastapi.io",
            "https://rpc.ankr.com/gnosis",
        ],
        "explorer": {
            "name": "Gnosisscan",
            "url": "https://gnosisscan.io",
        },
        "faucet": None,
    },
    "chiado": {
        "chain_id": 10200,
        "name": "Chiado Testnet",
        "currency": "xDAI",
        "rpc_urls": [
            "https://rpc.chiadochain.net",
            "https://rpc.chiado.gnosis.gateway.fm",
        ],
        "explorer": {
            "name": "Chiado Explorer",
            "url": "https://gnosis-chiado.blockscout.com",
        },
        "faucet": "https://faucet.chiadochain.net",
    },
}

# Binary network mode -> (env override, default chain name)
NETWORKS: dict[str, tuple[str, str]] = {
    "mainnet": ("MAINNET_CHAIN", "gnosis"),
    "testnet": ("TESTNET_CHAIN", "chiado"),
}

_TRUTHY = {"1", "true", "yes", "on"}


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def is_testnet_requested(flag: bool = False, command: str | None = None) -> bool:
    """True when the flag, the ``deploy-testnet`` command or TESTNET env asks for testnet."""
    if flag or command == "deploy-testnet":
        return True
    return os.getenv("TESTNET", "").strip().lower() in _TRUTHY


def resolve_network(testnet: bool) -> str:
    """Return the network mode name for the switch."""
    return "testnet" if testnet else "mainnet"


def chain_name(network: str) -> str:
    """Chain behind a network mode, read from the environment at call time."""
    if network not in NETWORKS:
        return network
    env_var, default = NETWORKS[network]
    return os.getenv(env_var) or default


def get_chain_config(network: str) -> dict[str, Any]:
    """Get configuration for a network mode ('mainnet'/'testnet') or a chain name.

    Raises:
        ValueError: If the chain is not supported.
    """
    chain = chain_name(network).lower()
    if chain not in CHAINS:
        raise ValueError(f"Unsupported chain: {chain}. Supported: {list(CHAINS.keys())}")
    return CHAINS[chain]


def get_rpc_url(network: str) -> str:
    """Get the primary RPC URL for a network.

    Uses RPC_URL environment variable if set, otherwise returns first default.
    """
    env_rpc = os.getenv("RPC_URL")
    if env_rpc:
        return env_rpc
    return get_chain_config(network)["rpc_urls"][0]


def get_chain_id(network: str) -> int:
    return get_chain_config(network)["chain_id"]


def explorer_address_url(network: str, address: str) -> str:
    """Block explorer link for an address."""
    return f"{get_chain_config(network)['explorer']['url']}/address/{address}"
