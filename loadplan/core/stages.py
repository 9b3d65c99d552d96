"""Stage value type shared by the profile builder and the schedule compilers.

A stage is one declared segment of a concurrency profile: either a timed
transition (ramp or hold) towards ``target_count`` workers, or an
iteration-bound hold that ends once every worker ran ``iterations`` loops.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal
from fractions import Fraction
from numbers import Real

ZERO = Fraction(0)

DurationLike = timedelta | int | float | Decimal | Fraction


class InvalidProfile(ValueError):
    """Raised when a profile operation would produce a stage sequence the runtime can't run."""


def as_seconds(value: DurationLike) -> Fraction:
    """Normalize a duration into exact seconds.

    Accepts ``timedelta`` or a plain number of seconds. Floats are converted
    through their shortest repr so ``0.1`` stays ``1/10``.
    """
    if isinstance(value, bool):
        raise TypeError("duration must be a timedelta or a number of seconds, not bool")
    if isinstance(value, timedelta):
        whole = value.days * 86_400 + value.seconds
        return Fraction(whole) + Fraction(value.microseconds, 1_000_000)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"duration must be finite (got {value})")
        return Fraction(repr(value))
    if isinstance(value, (int, Fraction, Decimal)):
        if isinstance(value, Decimal) and not value.is_finite():
            raise ValueError(f"duration must be finite (got {value})")
        return Fraction(value)
    if isinstance(value, Real):
        return as_seconds(float(value))
    raise TypeError(
        f"duration must be a timedelta or a number of seconds (got {type(value).__name__})"
    )


@dataclass(frozen=True, slots=True)
class Stage:
    """One declared transition, hold, or iteration-bound hold.

    Attributes:
        target_count: Concurrent workers once the stage completes
        duration: Seconds taken to reach (or keep) ``target_count``
        iterations: Loops each worker runs before the stage ends (negative = unbounded)
    """

    target_count: int
    duration: Fraction | None = None
    iterations: int | None = None

    def __post_init__(self) -> None:
        if self.target_count < 0:
            raise InvalidProfile(f"target_count must be >= 0 (got {self.target_count})")
        if (self.duration is None) == (self.iterations is None):
            raise InvalidProfile("a stage needs exactly one of duration or iterations")
        if self.duration is not None and self.duration < 0:
            raise InvalidProfile(f"duration must be >= 0 seconds (got {self.duration})")

    @classmethod
    def timed(cls, target_count: int, duration: DurationLike) -> "Stage":
        return cls(target_count=target_count, duration=as_seconds(duration))

    @classmethod
    def iterating(cls, target_count: int, iterations: int) -> "Stage":
        return cls(target_count=target_count, iterations=int(iterations))

    @property
    def is_iteration_bound(self) -> bool:
        return self.iterations is not None

    @property
    def seconds(self) -> Fraction:
        """Duration of the stage, zero for iteration-bound stages."""
        return self.duration if self.duration is not None else ZERO
