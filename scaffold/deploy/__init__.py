from scaffold.deploy.client import ChainClient, connect
from scaffold.deploy.messaging import send_message_with_wallet, wait_for_seqno
from scaffold.deploy.orchestrator import (
    DeployOrchestrator,
    DeployOutcome,
    DeployReport,
    DeployStatus,
    open_deployment,
    preview,
)
from scaffold.deploy.planner import DeploymentPlan, InitDescriptor, compute_address, plan_deployment
from scaffold.deploy.registry import DeployDescriptor, DescriptorRegistry, load_registry
from scaffold.deploy.verifier import run_post_deploy_test
from scaffold.deploy.wallet import DeployWallet, load_or_create_credentials

__all__ = [
    "ChainClient",
    "connect",
    "send_message_with_wallet",
    "wait_for_seqno",
    "DeployOrchestrator",
    "DeployOutcome",
    "DeployReport",
    "DeployStatus",
    "open_deployment",
    "preview",
    "DeploymentPlan",
    "InitDescriptor",
    "compute_address",
    "plan_deployment",
    "DeployDescriptor",
    "DescriptorRegistry",
    "load_registry",
    "run_post_deploy_test",
    "DeployWallet",
    "load_or_create_credentials",
]
