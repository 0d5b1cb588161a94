"""Poll delay policy with exponential backoff on consecutive failures."""

from __future__ import annotations

import random


class PollBackoff:
    """Delay before the next poll.

    After a success the delay is the plain poll interval. Each consecutive
    failure doubles it (``factor``) up to ``max_delay``, with +/- ``jitter``
    random variation so many clients don't retry in lockstep.
    """

    def __init__(
        self,
        interval: float,
        max_delay: float = 60.0,
        factor: float = 2.0,
        jitter: float = 0.25,
    ) -> None:
        self.interval = interval
        self.max_delay = max(max_delay, interval)
        self.factor = factor
        self.jitter = jitter
        self.failures = 0

    def success(self) -> None:
        self.failures = 0

    def failure(self) -> None:
        self.failures += 1

    def next_delay(self) -> float:
        if self.failures == 0:
            return self.interval

        delay = min(self.interval * (self.factor**self.failures), self.max_delay)
        if self.jitter:
            delay += delay * self.jitter * random.uniform(-1.0, 1.0)
        return max(delay, self.interval)
