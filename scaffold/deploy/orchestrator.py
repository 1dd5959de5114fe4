"""
Deploy orchestrator.

Every contract with a registered deploy descriptor goes through:

    PLAN -> ALREADY_DEPLOYED
         -> SUBMIT -> CONFIRM_POLL -> CONFIRMED | UNCONFIRMED

after a single funding check of the deployer wallet. Configuration and
funding problems raise and end the run; an unconfirmed contract is reported
and the run moves on to the next one.
"""
from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

from web3 import Web3

from scaffold.build.artifacts import ArtifactStore
from scaffold.config.network import explorer_address_url, get_chain_config
from scaffold.config.settings import DeploySettings, ProjectPaths
from scaffold.deploy.client import connect
from scaffold.deploy.messaging import TRANSIENT_ERRORS, send_message_with_wallet, wait_for_seqno
from scaffold.deploy.planner import DeploymentPlan, InitDescriptor, plan_deployment
from scaffold.deploy.registry import DeployDescriptor, DescriptorRegistry
from scaffold.deploy.verifier import run_post_deploy_test
from scaffold.deploy.wallet import DeployWallet, load_or_create_credentials
from scaffold.errors import ArtifactError, ConfigurationError, FundingError

logger = logging.getLogger(__name__)


class DeployStatus(str, Enum):
    ALREADY_DEPLOYED = "already_deployed"
    CONFIRMED = "confirmed"
    UNCONFIRMED = "unconfirmed"


@dataclass
class DeployOutcome:
    name: str
    address: str
    status: DeployStatus
    tx_hash: str | None = None
    seqno: int | None = None
    balance: int | None = None
    init_message_sent: bool | None = None
    verified: bool = False

    @property
    def success(self) -> bool:
        return self.status is not DeployStatus.UNCONFIRMED


@dataclass
class DeployReport:
    network: str
    wallet: str
    balance: int
    outcomes: list[DeployOutcome] = field(default_factory=list)

    @property
    def unconfirmed(self) -> list[DeployOutcome]:
        return [o for o in self.outcomes if not o.success]

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        for outcome in payload["outcomes"]:
            outcome["status"] = DeployStatus(outcome["status"]).value
        return payload


def _ether(wei: int) -> str:
    return f"{Web3.from_wei(wei, 'ether')}"


def build_init(name: str, descriptor: DeployDescriptor) -> InitDescriptor:
    data = descriptor.init_data()
    if not isinstance(data, (bytes, bytearray)):
        raise ConfigurationError(f"'{name}': init_data() must return bytes, got {type(data).__name__}")
    message = descriptor.init_message()
    if message is not None and not isinstance(message, (bytes, bytearray)):
        raise ConfigurationError(f"'{name}': init_message() must return bytes or None, got {type(message).__name__}")
    return InitDescriptor(data=bytes(data), message=bytes(message) if message is not None else None)


def plan_contract(name: str, descriptor: DeployDescriptor, store: ArtifactStore, settings: DeploySettings) -> DeploymentPlan:
    init = build_init(name, descriptor)
    try:
        code = store.load(name)
    except ArtifactError as e:
        raise ConfigurationError(f"'{name}': {e}") from e
    return plan_deployment(name, code, init, workchain=settings.workchain, deployer=settings.deployer)


def preview(registry: DescriptorRegistry, store: ArtifactStore, settings: DeploySettings) -> list[DeploymentPlan]:
    """Plans for every registered contract, without any network access."""
    return [plan_contract(name, descriptor, store, settings) for name, descriptor in registry.items()]


class DeployOrchestrator:
    def __init__(
        self,
        client: Any,
        wallet: Any,
        registry: DescriptorRegistry,
        store: ArtifactStore,
        settings: DeploySettings | None = None,
        network: str = "mainnet",
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.client = client
        self.wallet = wallet
        self.registry = registry
        self.store = store
        self.settings = settings or DeploySettings()
        self.network = network
        self.sleep = sleep

    # ------------------------------------------------------------------ #
    # FUNDING_CHECK                                                      #
    # ------------------------------------------------------------------ #

    def check_funding(self) -> int:
        logger.info(f" - Wallet address used to deploy from is: {self.wallet.address}")
        balance = self.client.get_balance(self.wallet.address)
        if balance < self.settings.min_balance:
            logger.error(
                f" - ERROR: Wallet has less than {_ether(self.settings.min_balance)} for gas "
                f"({_ether(balance)}), please send some funds for gas first"
            )
            raise FundingError(self.wallet.address, balance, self.settings.min_balance)
        logger.info(f" - Wallet balance is {_ether(balance)}, which will be used for gas")
        return balance

    # ------------------------------------------------------------------ #
    # PER_CONTRACT                                                       #
    # ------------------------------------------------------------------ #

    def _poll(self, seqno: int) -> bool:
        return wait_for_seqno(
            self.wallet,
            seqno,
            poll_interval=self.settings.poll_interval,
            max_attempts=self.settings.max_attempts,
            sleep=self.sleep,
        )

    def _verify(self, name: str, descriptor: DeployDescriptor, address: str) -> bool:
        return run_post_deploy_test(name, descriptor, self.wallet, self.client, address)

    def deploy_contract(self, name: str, descriptor: DeployDescriptor) -> DeployOutcome:
        logger.info(f"\n* Found root contract '{name}' - let's deploy it:")

        plan = plan_contract(name, descriptor, self.store, self.settings)
        address = plan.address
        logger.info(f" - Based on your init code+data, your new contract address is: {address}")

        if self.client.is_contract_deployed(address):
            logger.info(" - Looks like the contract is already deployed in this address, skipping deployment")
            verified = self._verify(name, descriptor, address)
            return DeployOutcome(name, address, DeployStatus.ALREADY_DEPLOYED, verified=verified)

        logger.info(" - Let's deploy the contract on-chain..")
        seqno = self.wallet.get_seqno()
        _, tx_hash = self.wallet.send(
            to=plan.deployer,
            value=self.settings.funding,
            data=plan.deploy_payload,
            seqno=seqno,
        )
        logger.info(f" - Deploy transaction sent successfully: {tx_hash}")
        logger.info(f" - Block explorer link: {explorer_address_url(self.network, address)}")

        logger.info(
            f" - Waiting up to {self.settings.confirmation_window:g} seconds to check if the contract was actually deployed.."
        )
        if not self._poll(seqno):
            logger.warning(f" - Wallet seqno did not advance past {seqno} within the confirmation window")

        if not self.client.is_contract_deployed(address):
            logger.error(f" - FAILURE! Contract address still looks uninitialized: {address}")
            return DeployOutcome(name, address, DeployStatus.UNCONFIRMED, tx_hash=tx_hash, seqno=seqno)

        logger.info(f" - SUCCESS! Contract deployed successfully to address: {address}")
        balance = self.client.get_balance(address)
        logger.info(f" - New contract balance is now {_ether(balance)}")

        init_message_sent = None
        if plan.init.message is not None:
            logger.info(" - Sending the init message to the new contract..")
            try:
                init_message_sent = send_message_with_wallet(
                    self.wallet,
                    address,
                    0,
                    plan.init.message,
                    poll_interval=self.settings.poll_interval,
                    max_attempts=self.settings.max_attempts,
                    sleep=self.sleep,
                )
            except TRANSIENT_ERRORS as e:
                # the contract is deployed either way
                logger.error(f" - Init message failed: {e}")
                init_message_sent = False
            else:
                if not init_message_sent:
                    logger.warning(" - Init message was not confirmed within the confirmation window")

        verified = self._verify(name, descriptor, address)
        return DeployOutcome(
            name,
            address,
            DeployStatus.CONFIRMED,
            tx_hash=tx_hash,
            seqno=seqno,
            balance=balance,
            init_message_sent=init_message_sent,
            verified=verified,
        )

    # ------------------------------------------------------------------ #
    # Run                                                                #
    # ------------------------------------------------------------------ #

    def run(self) -> DeployReport:
        balance = self.check_funding()
        report = DeployReport(network=self.network, wallet=self.wallet.address, balance=balance)
        if len(self.registry) == 0:
            logger.warning("\n* No deploy descriptors registered, nothing to deploy")
        for name, descriptor in self.registry.items():
            report.outcomes.append(self.deploy_contract(name, descriptor))
        logger.info("")
        return report


def open_deployment(
    paths: ProjectPaths,
    registry: DescriptorRegistry,
    settings: DeploySettings,
    network: str,
    rpc_url: str | None = None,
) -> DeployOrchestrator:
    """INIT: endpoint, credentials and wallet for ``network``."""
    logger.info("=================================================================")
    logger.info("Deploy script running, let's find some contracts to deploy..")

    try:
        chain = get_chain_config(network)
    except ValueError as e:
        raise ConfigurationError(str(e)) from e
    if network == "testnet":
        faucet = f" ({chain['faucet']} will give you test {chain['currency']})" if chain.get("faucet") else ""
        logger.info(f"\n* We are working with 'testnet' - {chain['name']}{faucet}")
    else:
        logger.info(f"\n* We are working with 'mainnet' - {chain['name']}")

    client = connect(network, rpc_url)
    credentials = load_or_create_credentials(paths.env_file)
    wallet = DeployWallet.from_mnemonic(
        client,
        credentials.mnemonic,
        settings.derivation_path,
        gas_fallback=settings.gas_fallback,
    )
    return DeployOrchestrator(
        client,
        wallet,
        registry,
        ArtifactStore(paths.build_dir),
        settings,
        network=network,
    )
