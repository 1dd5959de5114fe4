import pytest

from scaffold.build.artifacts import ArtifactStore
from scaffold.config.logging_config import reset_logger
from scaffold.config.settings import DETERMINISTIC_DEPLOYER, DeploySettings
from scaffold.deploy.planner import create2_address
from scaffold.deploy.registry import DescriptorRegistry

WALLET_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
HARDHAT_MNEMONIC = "test test test test test test test test test test test junk"

ENV_VARS = (
    "TESTNET",
    "MAINNET_CHAIN",
    "TESTNET_CHAIN",
    "RPC_URL",
    "DEPLOY_DESCRIPTORS",
    "DEPLOYER_MNEMONIC",
    "DEPLOY_WORKCHAIN",
    "DEPLOY_FUNDING",
    "DEPLOY_MIN_BALANCE",
    "DEPLOY_POLL_INTERVAL",
    "DEPLOY_MAX_ATTEMPTS",
    "DEPLOY_FACTORY",
    "SOLC_VERSION",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield
    reset_logger()


class FakeChain:
    """In-memory stand-in for ChainClient."""

    chain_id = 10200

    def __init__(self, balance=10**18):
        self.balances = {WALLET_ADDRESS: balance}
        self.code = {}
        self.nonces = {}
        self.sent = []
        self.counter = 10
        # whether submitted transactions get mined / create the contract
        self.accept = True
        self.deploy_on_send = True
        self.seqno_errors = []

    def get_balance(self, address):
        return self.balances.get(address, 0)

    def get_seqno(self, address):
        if self.seqno_errors:
            raise self.seqno_errors.pop(0)
        return self.nonces.get(address, 0)

    def is_contract_deployed(self, address):
        return bool(self.code.get(address))

    def call_get_method(self, address, abi, name, *args):
        return self.counter


class FakeWallet:
    def __init__(self, chain, address=WALLET_ADDRESS):
        self.chain = chain
        self.address = address
        self.secret_key = b"\x01" * 32

    def get_seqno(self):
        return self.chain.get_seqno(self.address)

    def send(self, *, to, value, data=b"", seqno=None):
        if seqno is None:
            seqno = self.get_seqno()
        self.chain.sent.append({"to": to, "value": value, "data": bytes(data), "seqno": seqno})
        if self.chain.accept:
            self.chain.nonces[self.address] = seqno + 1
            if self.chain.deploy_on_send and to == DETERMINISTIC_DEPLOYER:
                address = create2_address(to, data[:32], data[32:])
                self.chain.code[address] = b"\x60\x00"
                self.chain.balances[address] = value
            elif to in self.chain.code:
                self.chain.counter += 1
        return seqno, "0x" + "ab" * 32


@pytest.fixture
def chain():
    return FakeChain()


@pytest.fixture
def wallet(chain):
    return FakeWallet(chain)


@pytest.fixture
def store(tmp_path):
    store = ArtifactStore(tmp_path / "build")
    store.save("main", bytes.fromhex("6080604052"))
    return store


@pytest.fixture
def settings():
    return DeploySettings(poll_interval=0, max_attempts=3)


@pytest.fixture
def registry():
    registry = DescriptorRegistry()
    registry.register(
        "main",
        init_data=lambda: b"\x00" * 64,
        init_message=lambda: bytes.fromhex("d09de08a"),
    )
    return registry


@pytest.fixture
def no_sleep():
    calls = []

    def sleep(seconds):
        calls.append(seconds)

    sleep.calls = calls
    return sleep
