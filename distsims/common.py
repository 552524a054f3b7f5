"""Small helpers shared by the simulations."""

from __future__ import annotations

import random
from datetime import timedelta


def get_random_duration(base_millis: int, variance_millis: int) -> timedelta:
    """Return ``base_millis`` shifted by a uniform jitter in ``[-variance, +variance]`` ms.

    A negative variance is treated as zero.
    """
    variance = max(variance_millis, 0)
    jitter = random.randint(-variance, variance)
    return timedelta(milliseconds=base_millis + jitter)