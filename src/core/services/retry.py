"""Bounded retry helper.

The readiness poll of the setup sequence used to be a hard-coded
"30 attempts, sleep 2s" loop. It is expressed here as a policy plus a pure
loop so callers can reuse it and tests can drive it with a fake sleep.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to probe and how long to wait between failed probes."""

    max_attempts: int = 30
    base_delay: float = 2.0
    backoff_factor: float = 1.0
    max_delay: float | None = None

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.base_delay < 0:
            raise ValueError("base_delay must be >= 0")
        if self.backoff_factor < 1.0:
            raise ValueError("backoff_factor must be >= 1.0")

    def delay_for(self, failures: int) -> float:
        """Delay after the `failures`-th consecutive failure (1-based)."""

        delay = self.base_delay * (self.backoff_factor ** max(failures - 1, 0))
        if self.max_delay is not None:
            delay = min(delay, self.max_delay)
        return delay

    def schedule(self) -> list[float]:
        """Every delay the loop may sleep, in order (one fewer than attempts)."""

        return [self.delay_for(n) for n in range(1, self.max_attempts)]


def retry_until(
    probe: Callable[[], bool],
    policy: RetryPolicy,
    *,
    sleep: Callable[[float], None] = time.sleep,
    on_failure: Callable[[int, float], None] | None = None,
) -> int | None:
    """Call `probe` until it returns True or the attempt budget runs out.

    Returns the 1-based attempt that succeeded, or None on exhaustion. No sleep
    happens after the final attempt. `on_failure(attempt, delay)` fires before
    each sleep.
    """

    for attempt in range(1, policy.max_attempts + 1):
        if probe():
            return attempt
        if attempt == policy.max_attempts:
            break
        delay = policy.delay_for(attempt)
        if on_failure is not None:
            on_failure(attempt, delay)
        sleep(delay)
    return None
