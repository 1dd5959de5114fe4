import logging
from types import SimpleNamespace

import pytest
from web3 import Web3

from scaffold.deploy import client as client_module
from scaffold.deploy.client import ChainClient, connect
from scaffold.errors import NetworkError

ADDRESS = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"


class FakeEth:
    chain_id = 100
    gas_price = 3 * 10**9

    def __init__(self, code=b"", estimate=None):
        self.code = code
        self.estimate = estimate
        self.calls = []

    def get_balance(self, address):
        return 42

    def get_transaction_count(self, address, block):
        self.calls.append(block)
        return 5

    def get_code(self, address):
        return self.code

    def get_block(self, block):
        return {"baseFeePerGas": 10**9}

    def estimate_gas(self, tx):
        if self.estimate is None:
            raise ValueError("execution reverted")
        return self.estimate


def make_client(**kwargs):
    return ChainClient(SimpleNamespace(eth=FakeEth(**kwargs)), "mainnet")


def test_seqno_uses_latest_block():
    client = make_client()
    assert client.get_seqno(ADDRESS) == 5
    assert client.w3.eth.calls == ["latest"]


def test_is_contract_deployed():
    assert not make_client().is_contract_deployed(ADDRESS)
    assert make_client(code=b"\x60").is_contract_deployed(ADDRESS)


def test_fee_fields():
    fees = make_client().fee_fields()
    assert fees["maxPriorityFeePerGas"] == Web3.to_wei(2, "gwei")
    assert fees["maxFeePerGas"] == 10**9 + 2 * Web3.to_wei(2, "gwei")


def test_estimate_gas_buffer_and_fallback():
    assert make_client(estimate=100_000).estimate_gas({}, 1) == 120_000
    assert make_client().estimate_gas({}, 3_000_000) == 3_000_000


def test_connect_unreachable(monkeypatch):
    monkeypatch.setattr(client_module, "build_web3", lambda url: SimpleNamespace(is_connected=lambda: False))
    with pytest.raises(NetworkError, match="http://127.0.0.1:1"):
        connect("testnet", "http://127.0.0.1:1")


def test_connect_warns_on_chain_id_mismatch(monkeypatch, caplog):
    monkeypatch.setattr(
        client_module, "build_web3", lambda url: SimpleNamespace(is_connected=lambda: True, eth=FakeEth())
    )
    with caplog.at_level(logging.WARNING, logger="scaffold"):
        client = connect("testnet", "http://127.0.0.1:8545")
    assert client.chain_id == 100
    assert "reports chain id 100, expected 10200" in caplog.text

    caplog.clear()
    with caplog.at_level(logging.WARNING, logger="scaffold"):
        connect("mainnet", "http://127.0.0.1:8545")
    assert "reports chain id" not in caplog.text
