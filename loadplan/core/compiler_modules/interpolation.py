"""Duration arithmetic used by the schedule compilers."""

from __future__ import annotations

import math
from fractions import Fraction


def interpolate(part: int, whole: int, duration: Fraction) -> Fraction:
    """
    Share of a ramp's duration taken by ``part`` of the ``whole`` workers ramping.

    Ramps are linear, so ``part`` workers take ``duration * part / whole``.
    The result is exact; rounding only happens at the engine edge.
    """
    if whole <= 0:
        raise ValueError(f"whole must be positive (got {whole})")
    return Fraction(duration) * Fraction(part, whole)


def ceil_seconds(value: Fraction) -> int:
    """Round a duration up to whole seconds, the runtime's smallest time unit."""
    return int(math.ceil(value))
