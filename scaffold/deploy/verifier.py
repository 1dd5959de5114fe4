"""
Post-deploy verifier: runs a descriptor's optional ``post_deploy_test`` hook
against the live contract. The hook may be a coroutine function.
"""
from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any

from scaffold.deploy.registry import DeployDescriptor

logger = logging.getLogger(__name__)


def run_post_deploy_test(name: str, descriptor: DeployDescriptor, wallet: Any, client: Any, address: str) -> bool:
    """Run the hook; returns whether one ran. Hook failures are logged, not raised."""
    if descriptor.post_deploy_test is None:
        logger.info(f" - Not running a post deployment test, '{name}' does not have 'post_deploy_test()' function")
        return False

    logger.info(" - Running a post deployment test:")
    try:
        result = descriptor.post_deploy_test(wallet, client, address, wallet.secret_key)
        if inspect.isawaitable(result):
            asyncio.run(_await(result))
    except Exception:
        logger.exception(f" - Post deployment test for '{name}' raised")
    return True


async def _await(awaitable: Any) -> Any:
    return await awaitable
