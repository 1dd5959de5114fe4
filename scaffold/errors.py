"""
Error hierarchy for the build and deploy pipelines.

Orchestrators raise these; only the CLI turns them into exit codes.
"""
from __future__ import annotations


class ScaffoldError(Exception):
    """Base class for all pipeline errors."""


# --------------------------------------------------------------------------- #
# Build                                                                       #
# --------------------------------------------------------------------------- #

class BuildError(ScaffoldError):
    pass


class CompilationError(BuildError):
    """The compiler rejected a root contract."""

    def __init__(self, contract: str, message: str):
        self.contract = contract
        self.message = message
        super().__init__(f"Compilation of '{contract}' failed:\n{message}")


class ArtifactError(BuildError):
    """An artifact is malformed or was not written."""


class ArtifactNotFoundError(ArtifactError):
    pass


# --------------------------------------------------------------------------- #
# Deploy                                                                      #
# --------------------------------------------------------------------------- #

class DeployError(ScaffoldError):
    pass


class ConfigurationError(DeployError):
    """Missing descriptor function, missing artifact or bad settings."""


class FundingError(DeployError):
    """Deployer wallet balance is below the gas threshold."""

    def __init__(self, address: str, balance: int, minimum: int):
        self.address = address
        self.balance = balance
        self.minimum = minimum
        super().__init__(
            f"Wallet {address} has {balance} wei, less than the {minimum} wei required for gas"
        )


class NetworkError(DeployError):
    """RPC endpoint unreachable."""
