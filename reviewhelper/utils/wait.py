from __future__ import annotations

import logging
import time

from reviewhelper.core.exceptions import WaitTimeoutError

logger = logging.getLogger(__name__)


def poll(predicate, interval: float, timeout: float, signals):
    """Waits for a predicate to return a truthy value.

    The cancellation token is captured when the call starts, so only a
    conversation close that happens during this wait aborts it.
    """

    token = signals.current()
    name = getattr(predicate, "__name__", repr(predicate))
    logger.debug("Polling %s every %ss for up to %ss", name, interval, timeout)
    deadline = time.monotonic() + timeout
    while True:
        token.raise_if_cancelled()
        result = predicate()
        if result:
            return result
        if time.monotonic() >= deadline:
            raise WaitTimeoutError(f"Timeout waiting for {name}")
        time.sleep(interval)
