"""
Deployer wallet.

The deployer is one HD account derived from the mnemonic in ``.env``
(``DEPLOYER_MNEMONIC``). When no mnemonic exists yet a fresh 24-word one is
minted and written to the file. Keep that file secret.

The account nonce is the wallet's sequence number. ``get_seqno`` returns a
snapshot; callers compare a later snapshot against it to tell whether a
submitted transaction was accepted.
"""
from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dotenv import dotenv_values
from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_utils import to_checksum_address
from hexbytes import HexBytes

from scaffold.config.settings import DEFAULT_DERIVATION_PATH, DEPLOYER_WALLET_TYPE

logger = logging.getLogger(__name__)

MNEMONIC_ENV = "DEPLOYER_MNEMONIC"
WALLET_ENV = "DEPLOYER_WALLET"
MNEMONIC_WORDS = 24


@dataclass(frozen=True)
class Credentials:
    mnemonic: str
    created: bool = False


def write_text_atomic(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_fd, tmp_path = tempfile.mkstemp(prefix="envfile_", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(tmp_fd, "w") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    finally:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)


def _strip_keys(text: str, keys: set[str]) -> list[str]:
    kept = []
    for line in text.splitlines():
        s = line.strip()
        if s.startswith("export "):
            s = s[7:]
        if "=" in s and s.split("=", 1)[0].strip() in keys:
            continue
        kept.append(line)
    return kept


def mint_mnemonic() -> str:
    Account.enable_unaudited_hdwallet_features()
    _, mnemonic = Account.create_with_mnemonic(num_words=MNEMONIC_WORDS)
    return mnemonic


def save_credentials(env_file: Path, mnemonic: str) -> None:
    """Write the wallet lines into ``env_file``, keeping any other settings."""
    env_file = Path(env_file)
    existing = env_file.read_text() if env_file.exists() else ""
    lines = _strip_keys(existing, {WALLET_ENV, MNEMONIC_ENV})
    lines.append(f"{WALLET_ENV}={DEPLOYER_WALLET_TYPE}")
    lines.append(f'{MNEMONIC_ENV}="{mnemonic}"')
    write_text_atomic(env_file, "\n".join(lines) + "\n")


def load_or_create_credentials(env_file: Path) -> Credentials:
    """Deployer mnemonic from the environment or ``env_file``; minted if absent."""
    env_file = Path(env_file)
    mnemonic = os.getenv(MNEMONIC_ENV)
    if not mnemonic and env_file.exists():
        mnemonic = dotenv_values(env_file).get(MNEMONIC_ENV)

    if mnemonic and mnemonic.strip():
        logger.info(f"\n* Config file '{env_file}' found and will be used for deployment!")
        return Credentials(mnemonic=" ".join(mnemonic.split()))

    logger.info(f"\n* Config file '{env_file}' not found, creating a new wallet for deploy..")
    mnemonic = mint_mnemonic()
    save_credentials(env_file, mnemonic)
    logger.info(f" - Created new wallet in '{env_file}' - keep this file secret!")
    return Credentials(mnemonic=mnemonic, created=True)


def account_from_mnemonic(mnemonic: str, path: str = DEFAULT_DERIVATION_PATH) -> LocalAccount:
    # eth-account marks HD wallet features as unaudited
    Account.enable_unaudited_hdwallet_features()
    return Account.from_mnemonic(mnemonic.strip(), account_path=path)


class DeployWallet:
    """A signing account bound to a chain client."""

    def __init__(self, client: Any, account: LocalAccount, gas_fallback: int = 3_000_000):
        self.client = client
        self.account = account
        self.gas_fallback = gas_fallback

    @classmethod
    def from_mnemonic(cls, client: Any, mnemonic: str, path: str = DEFAULT_DERIVATION_PATH, **kwargs: Any) -> DeployWallet:
        return cls(client, account_from_mnemonic(mnemonic, path), **kwargs)

    @property
    def address(self) -> str:
        return to_checksum_address(self.account.address)

    @property
    def secret_key(self) -> bytes:
        return bytes(self.account.key)

    def get_seqno(self) -> int:
        return self.client.get_seqno(self.address)

    def create_transfer(self, *, seqno: int, to: str, value: int, data: bytes = b"") -> bytes:
        """Sign one transaction from ``seqno``; returns the raw signed bytes."""
        tx: dict[str, Any] = {
            "from": self.address,
            "to": to_checksum_address(to),
            "value": int(value),
            "data": HexBytes(data),
            "nonce": seqno,
            "chainId": self.client.chain_id,
            **self.client.fee_fields(),
        }
        tx["gas"] = self.client.estimate_gas(
            {"from": tx["from"], "to": tx["to"], "value": tx["value"], "data": tx["data"]},
            self.gas_fallback,
        )
        tx.pop("from")
        signed = self.account.sign_transaction(tx)
        return bytes(signed.raw_transaction)

    def send(self, *, to: str, value: int, data: bytes = b"", seqno: int | None = None) -> tuple[int, str]:
        """Submit one transaction; returns (seqno used, tx hash)."""
        if seqno is None:
            seqno = self.get_seqno()
        raw = self.create_transfer(seqno=seqno, to=to, value=value, data=data)
        tx_hash = self.client.send_raw_transaction(raw)
        return seqno, "0x" + bytes(tx_hash).hex()
