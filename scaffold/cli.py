"""Command line entry point for the build and deploy scripts.

    scaffold build            compile contracts/*.sol into build/*.compiled.json
    scaffold deploy           deploy every contract with a descriptor (mainnet)
    scaffold deploy --testnet deploy to the testnet (same as ``deploy-testnet``)

Run from the repository root; paths are relative to the working directory.
"""

import argparse
import logging
import sys
from decimal import InvalidOperation
from pathlib import Path

from dotenv import load_dotenv

from scaffold.build.artifacts import ArtifactStore, write_json_atomic
from scaffold.build.compiler import SolidityCompiler
from scaffold.build.orchestrator import BuildOrchestrator
from scaffold.config.logging_config import get_cli_logger, reset_logger
from scaffold.config.network import is_testnet_requested, resolve_network
from scaffold.config.settings import BuildSettings, DeploySettings, ProjectPaths
from scaffold.deploy.orchestrator import open_deployment, preview
from scaffold.deploy.registry import load_registry
from scaffold.errors import BuildError, ConfigurationError, DeployError

logger = logging.getLogger(__name__)


def _paths(args) -> ProjectPaths:
    kwargs = {}
    if getattr(args, "contracts", None):
        kwargs["contracts_dir"] = Path(args.contracts)
    if getattr(args, "build_dir", None):
        kwargs["build_dir"] = Path(args.build_dir)
    if getattr(args, "env_file", None):
        kwargs["env_file"] = Path(args.env_file)
    return ProjectPaths(**kwargs)


def build(args) -> int:
    """Compile every root contract."""
    paths = _paths(args)
    load_dotenv(paths.env_file)
    compiler = SolidityCompiler(BuildSettings.from_env(args.solc_version), base_path=paths.root)
    try:
        report = BuildOrchestrator(paths, compiler).run()
    except BuildError as e:
        logger.error(f"Build failed: {e}")
        return 1
    logger.info(f"Built {len(report.contracts)} contract(s): {', '.join(report.names) or '-'}")
    return 0


def _deploy_settings() -> DeploySettings:
    try:
        return DeploySettings.from_env()
    except (ValueError, InvalidOperation) as e:
        raise ConfigurationError(f"Invalid DEPLOY_* setting: {e}") from e


def _dry_run(args, paths: ProjectPaths, network: str) -> int:
    settings = _deploy_settings()
    plans = preview(load_registry(), ArtifactStore(paths.build_dir), settings)
    logger.info(f"Dry run on '{network}', nothing will be sent:")
    for plan in plans:
        logger.info(f" - '{plan.name}' -> {plan.address} ({len(plan.init_code)} bytes of init code)")
    if args.report:
        write_json_atomic(
            Path(args.report),
            {
                "network": network,
                "dry_run": True,
                "plans": [
                    {"name": p.name, "address": p.address, "workchain": p.workchain, "deployer": p.deployer}
                    for p in plans
                ],
            },
        )
    return 0


def deploy(args) -> int:
    """Deploy every contract that has a descriptor."""
    paths = _paths(args)
    # settings read from the environment must see the .env values
    load_dotenv(paths.env_file)
    network = resolve_network(is_testnet_requested(getattr(args, "testnet", False), args.command))

    try:
        if args.dry_run:
            return _dry_run(args, paths, network)
        settings = _deploy_settings()
        registry = load_registry()
        report = open_deployment(paths, registry, settings, network).run()
    except DeployError as e:
        logger.error(f"Deploy failed: {e}")
        return 1

    for outcome in report.outcomes:
        status = "SUCCESS" if outcome.success else "FAILURE"
        logger.info(f"{status}: '{outcome.name}' {outcome.status.value} at {outcome.address}")
    if args.report:
        write_json_atomic(Path(args.report), report.to_dict())
    return 0


def _add_deploy_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--env-file", help="Wallet/config file (default: .env)")
    parser.add_argument("--build-dir", help="Artifact directory (default: build)")
    parser.add_argument("--dry-run", action="store_true", help="Only print the planned addresses")
    parser.add_argument("--report", help="Write a JSON report to this path")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scaffold",
        description="Build and deploy Solidity contracts",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--log-dir", help="Directory for log files (default: logs)")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Build command
    build_parser_ = subparsers.add_parser("build", help="Compile contracts/*.sol")
    build_parser_.add_argument("--contracts", help="Contracts directory (default: contracts)")
    build_parser_.add_argument("--build-dir", help="Artifact directory (default: build)")
    build_parser_.add_argument("--solc-version", help="solc version (default: SOLC_VERSION or pinned)")
    build_parser_.set_defaults(func=build)

    # Deploy commands
    deploy_parser = subparsers.add_parser("deploy", help="Deploy contracts (mainnet unless --testnet)")
    deploy_parser.add_argument("--testnet", action="store_true", help="Deploy to the testnet")
    _add_deploy_arguments(deploy_parser)
    deploy_parser.set_defaults(func=deploy)

    testnet_parser = subparsers.add_parser("deploy-testnet", help="Deploy contracts to the testnet")
    _add_deploy_arguments(testnet_parser)
    testnet_parser.set_defaults(func=deploy)

    return parser


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    reset_logger()
    get_cli_logger(verbose=args.verbose, log_dir=Path(args.log_dir) if args.log_dir else None)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
