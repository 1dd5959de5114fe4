"""
Deployment planner: deterministic contract addresses.

The address is the CREATE2 address of ``code ‖ init_data`` deployed through
the deterministic deployment proxy, with the workchain number used as the
salt. It depends on nothing but its inputs, so a deploy can be previewed and
repeated without touching the network.
"""
from __future__ import annotations

from dataclasses import dataclass

from eth_abi import encode
from eth_typing import ChecksumAddress
from eth_utils import keccak, to_bytes, to_checksum_address

from scaffold.config.settings import DETERMINISTIC_DEPLOYER


@dataclass(frozen=True)
class InitDescriptor:
    data: bytes
    message: bytes | None = None


def workchain_salt(workchain: int) -> bytes:
    """32-byte salt for a workchain (int256, two's complement)."""
    return encode(["int256"], [workchain])


def init_code(code: bytes, init_data: bytes) -> bytes:
    return bytes(code) + bytes(init_data)


def create2_address(deployer: str, salt: bytes, code: bytes) -> ChecksumAddress:
    if len(salt) != 32:
        raise ValueError("salt must be 32 bytes")
    digest = keccak(b"\xff" + to_bytes(hexstr=deployer) + salt + keccak(code))
    return to_checksum_address(digest[12:])


def compute_address(
    workchain: int,
    code: bytes,
    init_data: bytes,
    deployer: str = DETERMINISTIC_DEPLOYER,
) -> ChecksumAddress:
    return create2_address(deployer, workchain_salt(workchain), init_code(code, init_data))


@dataclass(frozen=True)
class DeploymentPlan:
    name: str
    workchain: int
    code: bytes
    init: InitDescriptor
    address: ChecksumAddress
    deployer: str = DETERMINISTIC_DEPLOYER

    @property
    def init_code(self) -> bytes:
        return init_code(self.code, self.init.data)

    @property
    def deploy_payload(self) -> bytes:
        """Calldata for the proxy: salt followed by the init code."""
        return workchain_salt(self.workchain) + self.init_code


def plan_deployment(
    name: str,
    code: bytes,
    init: InitDescriptor,
    workchain: int = 0,
    deployer: str = DETERMINISTIC_DEPLOYER,
) -> DeploymentPlan:
    return DeploymentPlan(
        name=name,
        workchain=workchain,
        code=bytes(code),
        init=init,
        address=compute_address(workchain, code, init.data, deployer),
        deployer=to_checksum_address(deployer),
    )
