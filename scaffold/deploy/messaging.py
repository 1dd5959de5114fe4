"""
Wallet messaging helpers: send one message, then wait for the wallet's
sequence number to move past the value it had before submission.
"""
from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from web3.exceptions import Web3Exception

from scaffold.config.settings import DEFAULT_MAX_ATTEMPTS, DEFAULT_POLL_INTERVAL

logger = logging.getLogger(__name__)

# RPC failures treated as transient while polling
TRANSIENT_ERRORS = (OSError, ValueError, Web3Exception)


def wait_for_seqno(
    wallet: Any,
    seqno: int,
    *,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """Poll until ``wallet.get_seqno() > seqno``; False once the attempts run out."""
    for attempt in range(1, max_attempts + 1):
        sleep(poll_interval)
        try:
            seqno_after = wallet.get_seqno()
        except TRANSIENT_ERRORS as e:
            logger.debug(f"   seqno poll {attempt}/{max_attempts} failed: {e}")
            continue
        if seqno_after > seqno:
            return True
    return False


def send_message_with_wallet(
    wallet: Any,
    to: str,
    value: int,
    data: bytes | None = None,
    *,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """Send one message from ``wallet`` to ``to`` and wait for it to be accepted."""
    seqno = wallet.get_seqno()
    wallet.send(to=to, value=value, data=data or b"", seqno=seqno)
    return wait_for_seqno(wallet, seqno, poll_interval=poll_interval, max_attempts=max_attempts, sleep=sleep)
