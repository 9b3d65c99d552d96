"""
Concurrency profile builder.

Accumulates the stages of a worker timeline from incremental calls and
rejects, at the call that introduces them, sequences the runtime has no
primitive for.
"""

from __future__ import annotations

from fractions import Fraction
from numbers import Real
from typing import Iterator

from loadplan.core.compiler_modules import is_simple
from loadplan.core.profile_compiler import CompiledSchedule, compile_profile
from loadplan.core.stages import DurationLike, InvalidProfile, Stage, as_seconds


class ConcurrencyProfile:
    """Ordered, append-only list of stages describing a worker timeline.

    Example:
        profile = (
            ConcurrencyProfile()
            .ramp_to(10, timedelta(seconds=10))
            .ramp_to(5, 10)
            .ramp_to_and_hold(20, 5, 10)
            .ramp_to(0, 5)
        )
    """

    def __init__(self) -> None:
        self._stages: list[Stage] = []

    def __len__(self) -> int:
        return len(self._stages)

    def __iter__(self) -> Iterator[Stage]:
        return iter(self._stages)

    def __repr__(self) -> str:
        return f"ConcurrencyProfile(stages={self._stages!r})"

    @property
    def stages(self) -> tuple[Stage, ...]:
        return tuple(self._stages)

    @property
    def is_simple(self) -> bool:
        """True if the runtime's single ramp/hold worker group can run this profile."""
        return is_simple(self._stages)

    @property
    def total_duration(self) -> Fraction:
        """Sum of stage durations in seconds (iteration-bound stages count as zero)."""
        return sum((s.seconds for s in self._stages), Fraction(0))

    def ramp_to(self, threads: int, duration: DurationLike) -> "ConcurrencyProfile":
        """
        Ramp up or down to ``threads`` workers over ``duration``.

        Args:
            threads: Workers running once the ramp completes
            duration: timedelta or seconds taken by the ramp

        Raises:
            InvalidProfile: If threads is not a non-negative integer, the duration
                is negative, or the previous stage holds for iterations
        """
        threads = self._count(threads, "Thread count")
        if threads < 0:
            raise InvalidProfile(f"Thread count must be >=0 (got {threads})")
        self._check_not_after_iterations(
            "Ramping up/down after holding for iterations is not supported. "
            "Use ramp_to(threads, ramp).hold_iterating(iterations) as the last stages instead"
        )
        self._stages.append(Stage(target_count=threads, duration=self._seconds(duration)))
        return self

    def hold_for(self, duration: DurationLike) -> "ConcurrencyProfile":
        """Keep the current number of workers for ``duration``."""
        self._check_not_after_iterations(
            "Holding for duration after holding for iterations is not supported."
        )
        self._stages.append(
            Stage(target_count=self._last_target(), duration=self._seconds(duration))
        )
        return self

    def hold_iterating(self, iterations: int) -> "ConcurrencyProfile":
        """
        Keep the current workers until each has run ``iterations`` loops.

        Only valid right after a single ramp, or after an initial zero-worker
        hold followed by a ramp, since those are the only shapes the runtime's
        iteration-bound group supports. Negative iterations run unbounded.

        Raises:
            InvalidProfile: If the previous stages don't match a supported shape,
                or there would be no workers to iterate
        """
        iterations = self._count(iterations, "Iterations")
        stages = self._stages
        supported = (
            len(stages) == 1 and stages[0].target_count != 0
        ) or (
            len(stages) == 2
            and stages[0].target_count == 0
            and stages[1].target_count != 0
        )
        if not supported:
            if stages and stages[-1].target_count == 0:
                raise InvalidProfile("Can't hold for iterations with no threads.")
            raise InvalidProfile(
                "Holding for iterations is only supported after initial hold and ramp, or ramp."
            )
        self._stages.append(Stage(target_count=self._last_target(), iterations=iterations))
        return self

    def ramp_to_and_hold(
        self, threads: int, ramp_duration: DurationLike, hold_duration: DurationLike
    ) -> "ConcurrencyProfile":
        """Ramp to ``threads`` workers, then hold them for ``hold_duration``."""
        return self.ramp_to(threads, ramp_duration).hold_for(hold_duration)

    def compile(self) -> CompiledSchedule:
        return compile_profile(self._stages)

    def _last_target(self) -> int:
        return self._stages[-1].target_count if self._stages else 0

    def _check_not_after_iterations(self, message: str) -> None:
        if self._stages and self._stages[-1].is_iteration_bound:
            raise InvalidProfile(message)

    @staticmethod
    def _seconds(duration: DurationLike) -> Fraction:
        try:
            seconds = as_seconds(duration)
        except (TypeError, ValueError) as e:
            raise InvalidProfile(f"Invalid duration: {e}") from e
        if seconds < 0:
            raise InvalidProfile(f"Duration must be >=0 seconds (got {duration})")
        return seconds

    @staticmethod
    def _count(value: int, what: str) -> int:
        if isinstance(value, bool) or not isinstance(value, Real):
            raise InvalidProfile(f"{what} must be an integer (got {value!r})")
        try:
            count = int(value)
        except (OverflowError, ValueError) as e:
            raise InvalidProfile(f"{what} must be an integer (got {value!r})") from e
        if count != value:
            raise InvalidProfile(f"{what} must be an integer (got {value!r})")
        return count
