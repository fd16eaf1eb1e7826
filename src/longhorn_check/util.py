from __future__ import annotations
import time
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass
class PollResult(Generic[T]):
    ok: bool
    value: Optional[T]
    elapsed_s: float
    attempts: int


def poll_until(
    probe: Callable[[], T],
    predicate: Callable[[T], bool],
    timeout_s: float,
    interval_s: float,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> PollResult[T]:
    """Call probe until predicate(value) holds or timeout_s has elapsed.

    The probe always runs at least once, and the poll gives up only after
    the full timeout, never earlier.
    """
    start = clock()
    attempts = 0
    while True:
        value = probe()
        attempts += 1
        elapsed = clock() - start
        if predicate(value):
            return PollResult(True, value, elapsed, attempts)
        if elapsed >= timeout_s:
            return PollResult(False, value, elapsed, attempts)
        sleep(max(0.0, min(interval_s, timeout_s - elapsed)))
