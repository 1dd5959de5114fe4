"""Build and deploy scripts for Solidity contracts."""

__version__ = "0.1.0"
