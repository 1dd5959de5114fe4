"""
Deploy descriptor for ``contracts/main.sol``: a counter with an owner.
"""
from __future__ import annotations

import logging

from eth_abi import encode
from eth_utils import keccak, to_checksum_address
from web3 import Web3

from scaffold.deploy.messaging import send_message_with_wallet

logger = logging.getLogger(__name__)

OWNER_ADDRESS = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
INITIAL_COUNTER = 10

MAIN_ABI = [
    {
        "inputs": [],
        "name": "counter",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "owner",
        "outputs": [{"name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "increment",
        "outputs": [],
        "stateMutability": "payable",
        "type": "function",
    },
]


def data(owner: str, counter: int) -> bytes:
    """Constructor arguments, in the order ``constructor(address, uint256)`` takes them."""
    return encode(["address", "uint256"], [to_checksum_address(owner), counter])


def increment() -> bytes:
    return keccak(text="increment()")[:4]


# init data of the contract storage, in constructor order
def init_data() -> bytes:
    return data(OWNER_ADDRESS, INITIAL_COUNTER)


# first message sent to the new contract; None sends nothing
def init_message() -> bytes | None:
    return increment()


# optional end-to-end check against the live contract
def post_deploy_test(wallet, client, address, secret_key):
    counter = client.call_get_method(address, MAIN_ABI, "counter")
    logger.info(f"   # Getter 'counter' = {counter}")

    send_message_with_wallet(wallet, address, Web3.to_wei("0.02", "ether"), increment())
    logger.info("   # Sent 'increment' op message")

    counter = client.call_get_method(address, MAIN_ABI, "counter")
    logger.info(f"   # Getter 'counter' = {counter}")
