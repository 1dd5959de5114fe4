"""
Build and deploy settings.

Values come from keyword arguments or from the environment (``.env`` is
loaded by the CLI before these are read). Amounts are given in ether units
and stored in wei.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path

from eth_utils import to_checksum_address
from web3 import Web3


# --------------------------------------------------------------------------- #
# Constants                                                                   #
# --------------------------------------------------------------------------- #

SOLIDITY_VERSION = "0.8.24"
EVM_VERSION = "paris"  # no PUSH0, deployable on older nodes

# Deterministic deployment proxy (CREATE2 factory present on most EVM chains)
DETERMINISTIC_DEPLOYER = "0x4e59b44847b379578588920cA78FbF26c0B4956C"

DEFAULT_DERIVATION_PATH = "m/44'/60'/0'/0/0"
DEPLOYER_WALLET_TYPE = "eth.local.bip44"

# new contract funding, and the minimum deployer balance required for gas
DEFAULT_FUNDING = "0.02"
DEFAULT_MIN_BALANCE = "0.2"

# confirmation window: 10 attempts, 2 seconds apart
DEFAULT_POLL_INTERVAL = 2.0
DEFAULT_MAX_ATTEMPTS = 10


def _env_decimal(name: str, default: str) -> Decimal:
    return Decimal(os.getenv(name, default))


def _to_wei(amount: Decimal | str) -> int:
    return int(Web3.to_wei(Decimal(str(amount)), "ether"))


@dataclass(frozen=True)
class ProjectPaths:
    """Repository layout the scripts run against (relative to ``root``)."""

    root: Path = field(default_factory=Path.cwd)
    contracts_dir: Path = Path("contracts")
    build_dir: Path = Path("build")
    env_file: Path = Path(".env")

    def __post_init__(self) -> None:
        root = Path(self.root)
        object.__setattr__(self, "root", root)
        for name in ("contracts_dir", "build_dir", "env_file"):
            value = Path(getattr(self, name))
            if not value.is_absolute():
                value = root / value
            object.__setattr__(self, name, value)

    @property
    def imports_dir(self) -> Path:
        """Shared import files; ``imports/<contract>`` holds dedicated ones."""
        return self.contracts_dir / "imports"


@dataclass(frozen=True)
class BuildSettings:
    solc_version: str = SOLIDITY_VERSION
    optimize: bool = True
    optimize_runs: int = 200
    evm_version: str = EVM_VERSION

    @classmethod
    def from_env(cls, solc_version: str | None = None) -> BuildSettings:
        return cls(
            solc_version=solc_version or os.getenv("SOLC_VERSION", SOLIDITY_VERSION),
            optimize=os.getenv("SOLC_OPTIMIZE", "1") not in ("0", "false", "no"),
            optimize_runs=int(os.getenv("SOLC_OPTIMIZE_RUNS", "200")),
            evm_version=os.getenv("SOLC_EVM_VERSION", EVM_VERSION),
        )


@dataclass(frozen=True)
class DeploySettings:
    """Parameters of one deploy run, passed explicitly into the orchestrator."""

    workchain: int = 0
    funding: int = _to_wei(DEFAULT_FUNDING)
    min_balance: int = _to_wei(DEFAULT_MIN_BALANCE)
    poll_interval: float = DEFAULT_POLL_INTERVAL
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    deployer: str = DETERMINISTIC_DEPLOYER
    derivation_path: str = DEFAULT_DERIVATION_PATH
    gas_fallback: int = 3_000_000

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.poll_interval < 0:
            raise ValueError("poll_interval must not be negative")
        if self.funding < 0 or self.min_balance < 0:
            raise ValueError("amounts must not be negative")
        object.__setattr__(self, "deployer", to_checksum_address(self.deployer))

    @property
    def confirmation_window(self) -> float:
        return self.poll_interval * self.max_attempts

    @classmethod
    def from_env(cls) -> DeploySettings:
        """Read DEPLOY_* overrides from the environment."""
        return cls(
            workchain=int(os.getenv("DEPLOY_WORKCHAIN", "0")),
            funding=_to_wei(_env_decimal("DEPLOY_FUNDING", DEFAULT_FUNDING)),
            min_balance=_to_wei(_env_decimal("DEPLOY_MIN_BALANCE", DEFAULT_MIN_BALANCE)),
            poll_interval=float(os.getenv("DEPLOY_POLL_INTERVAL", str(DEFAULT_POLL_INTERVAL))),
            max_attempts=int(os.getenv("DEPLOY_MAX_ATTEMPTS", str(DEFAULT_MAX_ATTEMPTS))),
            deployer=os.getenv("DEPLOY_FACTORY", DETERMINISTIC_DEPLOYER),
            derivation_path=os.getenv("DEPLOYER_PATH", DEFAULT_DERIVATION_PATH),
            gas_fallback=int(os.getenv("DEPLOY_GAS_FALLBACK", "3000000")),
        )
