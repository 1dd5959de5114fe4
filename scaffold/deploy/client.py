"""
Chain client - the RPC calls the deploy script needs.

Public API
----------
connect(network, rpc_url=None)
    Return a ChainClient for 'mainnet' or 'testnet'.
ChainClient
    Balance, sequence number (nonce), code presence, read-only calls,
    fee fields and raw transaction submission.
"""
from __future__ import annotations

import logging
from typing import Any

from hexbytes import HexBytes
from web3 import Web3
from web3.middleware import ExtraDataToPOAMiddleware

from scaffold.config.network import get_chain_id, get_rpc_url
from scaffold.errors import NetworkError

logger = logging.getLogger(__name__)

PRIORITY_FEE_GWEI = 2


class ChainClient:
    def __init__(self, w3: Web3, network: str = "mainnet"):
        self.w3 = w3
        self.network = network

    @property
    def chain_id(self) -> int:
        return self.w3.eth.chain_id

    def get_balance(self, address: str) -> int:
        return int(self.w3.eth.get_balance(Web3.to_checksum_address(address)))

    def get_seqno(self, address: str) -> int:
        """Mined transaction count of ``address`` (its next nonce)."""
        return int(self.w3.eth.get_transaction_count(Web3.to_checksum_address(address), "latest"))

    def is_contract_deployed(self, address: str) -> bool:
        return len(self.w3.eth.get_code(Web3.to_checksum_address(address))) > 0

    def call_get_method(self, address: str, abi: list[dict[str, Any]], name: str, *args: Any) -> Any:
        contract = self.w3.eth.contract(address=Web3.to_checksum_address(address), abi=abi)
        return contract.functions[name](*args).call()

    def fee_fields(self) -> dict[str, int]:
        """EIP-1559 fee fields: base fee plus a 2 gwei tip, generous cap."""
        latest_block = self.w3.eth.get_block("latest")
        base_fee = latest_block.get("baseFeePerGas", self.w3.eth.gas_price)
        priority_fee = Web3.to_wei(PRIORITY_FEE_GWEI, "gwei")
        return {
            "maxPriorityFeePerGas": int(priority_fee),
            "maxFeePerGas": int(base_fee + priority_fee * 2),
        }

    def estimate_gas(self, tx: dict[str, Any], fallback: int) -> int:
        try:
            return int(self.w3.eth.estimate_gas(tx) * 12 // 10)  # 20% buffer
        except Exception as err:  # fallback on ANY estimation failure
            logger.warning(f"   estimate_gas failed, using {fallback:,} fallback -> {err}")
            return fallback

    def send_raw_transaction(self, raw: bytes) -> HexBytes:
        return HexBytes(self.w3.eth.send_raw_transaction(raw))


def build_web3(rpc_url: str) -> Web3:
    w3 = Web3(Web3.HTTPProvider(rpc_url))
    w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)
    return w3


def connect(network: str, rpc_url: str | None = None) -> ChainClient:
    url = rpc_url or get_rpc_url(network)
    w3 = build_web3(url)
    if not w3.is_connected():
        raise NetworkError(f"Could not connect to RPC endpoint {url}")
    client = ChainClient(w3, network)
    expected = get_chain_id(network)
    if client.chain_id != expected:
        logger.warning(f" - Warning: endpoint {url} reports chain id {client.chain_id}, expected {expected} for '{network}'")
    return client
