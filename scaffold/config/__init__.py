"""
Configuration package for the build and deploy scripts.
"""

from scaffold.config.network import (
    CHAINS,
    NETWORKS,
    chain_name,
    get_chain_config,
    get_chain_id,
    get_rpc_url,
    explorer_address_url,
    is_testnet_requested,
    resolve_network,
)

from scaffold.config.settings import (
    DETERMINISTIC_DEPLOYER,
    BuildSettings,
    DeploySettings,
    ProjectPaths,
)

from scaffold.config.logging_config import (
    setup_logger,
    get_cli_logger,
)

__all__ = [
    # Network
    'CHAINS',
    'NETWORKS',
    'chain_name',
    'get_chain_config',
    'get_chain_id',
    'get_rpc_url',
    'explorer_address_url',
    'is_testnet_requested',
    'resolve_network',

    # Settings
    'DETERMINISTIC_DEPLOYER',
    'BuildSettings',
    'DeploySettings',
    'ProjectPaths',

    # Logging
    'setup_logger',
    'get_cli_logger',
]
