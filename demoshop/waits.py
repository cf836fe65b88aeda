from __future__ import annotations

import logging
import time
from typing import Callable

log = logging.getLogger(__name__)


def eventually(fn: Callable[[], None], timeout_s: float = 8.0, interval_s: float = 0.25,
               label: str = "") -> None:
    """
    Retries fn until it stops raising or timeout is reached.
    Use for steps against the live site, where pages settle asynchronously.
    """
    # monotonic, so wall-clock jumps do not shorten or stretch the wait
    end = time.monotonic() + timeout_s
    last_err = None
    attempts = 0
    while time.monotonic() < end:
        attempts += 1
        try:
            fn()
            return
        except Exception as e:
            # Keep the last failure; it becomes the cause of the timeout error.
            last_err = e
            log.debug("step %r attempt %d failed: %s", label or fn, attempts, e)
            time.sleep(interval_s)
    msg = f"Step failed after {timeout_s}s"
    if label:
        msg += f" ({label})"
    raise AssertionError(msg) from last_err
