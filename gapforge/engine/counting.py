"""
Target gap count resolution.
"""

from __future__ import annotations

import math
import random

from .settings import CountMode, GapSettings

AUTO_MIN_RATIO = 0.5
AUTO_MAX_RATIO = 0.8
FALLBACK_RATIO = 0.65


def _auto_count(eligible_count: int, rng: random.Random) -> int:
    ratio = rng.uniform(AUTO_MIN_RATIO, AUTO_MAX_RATIO)
    return max(1, math.floor(eligible_count * ratio))


def resolve_count(eligible_count: int, settings: GapSettings, rng: random.Random) -> int:
    """
    Calculate how many gaps to instantiate.

    - fixed: min(fixed_count, eligible); unset fixed_count uses the auto formula
    - range: uniform integer in the clamped [min, max]; min >= max returns min
    - auto: 50-80% of eligible, at least 1
    """
    if eligible_count <= 0:
        return 0

    mode = settings.count_mode

    if mode is CountMode.FIXED:
        if settings.fixed_count is not None:
            return min(settings.fixed_count, eligible_count)
        return _auto_count(eligible_count, rng)

    if mode is CountMode.RANGE:
        if settings.min_count is not None and settings.max_count is not None:
            low = min(settings.min_count, eligible_count)
            high = min(settings.max_count, eligible_count)
            if low >= high:
                return low
            return rng.randint(low, high)

    elif mode is CountMode.AUTO:
        return _auto_count(eligible_count, rng)

    return max(1, math.floor(eligible_count * FALLBACK_RATIO))
