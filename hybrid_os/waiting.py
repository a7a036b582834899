"""Bounded polling used in place of fixed settle delays."""
from __future__ import annotations

import time
from typing import Callable

Sleep = Callable[[float], None]
Clock = Callable[[], float]

POLL_INTERVAL_S = 0.1


def wait_until(
    predicate: Callable[[], bool],
    timeout_s: float,
    interval_s: float = POLL_INTERVAL_S,
    sleep: Sleep = time.sleep,
    clock: Clock = time.monotonic,
) -> bool:
    """Poll `predicate` until it returns True or `timeout_s` elapses.

    The predicate is always evaluated at least once. Returns whether it was
    observed true before the deadline.
    """
    deadline = clock() + timeout_s
    while True:
        if predicate():
            return True
        remaining = deadline - clock()
        if remaining <= 0:
            return False
        sleep(min(interval_s, remaining))


__all__ = ["Clock", "POLL_INTERVAL_S", "Sleep", "wait_until"]
