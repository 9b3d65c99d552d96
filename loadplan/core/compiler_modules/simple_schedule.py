"""
Simple worker group compilation.

Maps a short profile (delay, ramp, hold or iterate) onto the runtime's
single-block primitive: N workers, a ramp-up period, a steady duration (or
an iteration count) and an optional start delay.
"""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from typing import Any, Sequence

from loadplan.core.compiler_modules.interpolation import ceil_seconds
from loadplan.core.stages import ZERO, Stage

DEFAULT_THREADS = 1
DEFAULT_ITERATIONS = 1


@dataclass(frozen=True, slots=True)
class SimpleSchedule:
    """Settings for the runtime's single ramp/hold worker group.

    Attributes:
        threads: Workers started by the group
        ramp_up: Seconds taken to start all workers
        duration: Steady duration measured from test start (ramp-up included),
            None when the group runs for a number of iterations
        iterations: Loops per worker when no duration is set (negative = unbounded)
        delay: Seconds to wait before starting the first worker
    """

    threads: int = DEFAULT_THREADS
    ramp_up: Fraction = ZERO
    duration: Fraction | None = None
    iterations: int | None = DEFAULT_ITERATIONS
    delay: Fraction | None = None

    @property
    def is_timed(self) -> bool:
        return self.duration is not None

    def to_row(self) -> dict[str, Any]:
        """Engine settings with durations rounded up to whole seconds."""
        return {
            "threads": int(self.threads),
            "ramp_up_seconds": ceil_seconds(self.ramp_up),
            "duration_seconds": (
                ceil_seconds(self.duration) if self.duration is not None else None
            ),
            "iterations": self.iterations if self.duration is None else None,
            "delay_seconds": ceil_seconds(self.delay) if self.delay is not None else None,
        }


def compile_simple_schedule(stages: Sequence[Stage]) -> SimpleSchedule:
    """
    Compile up to three classifier-approved stages into a SimpleSchedule.

    The first stage is either a delay (no workers) or the initial ramp. A
    second stage supplies the final worker count; after a delay it is the
    ramp and a third stage supplies the hold, otherwise it is the hold.

    Args:
        stages: Stages accepted by ``is_simple``

    Returns:
        SimpleSchedule for the runtime's single-block worker group

    Raises:
        ValueError: If more than three stages are given
    """
    if len(stages) > 3:
        raise ValueError(
            f"simple worker groups support at most 3 stages (got {len(stages)})"
        )
    if not stages:
        return SimpleSchedule()

    threads = DEFAULT_THREADS
    ramp_up: Fraction | None = None
    duration: Fraction | None = None
    delay: Fraction | None = None

    first = stages[0]
    starts_with_delay = first.target_count == 0
    if starts_with_delay:
        delay = first.duration
        # Nothing ramps after a lone delay.
        threads = 0
    else:
        ramp_up = first.duration
        threads = first.target_count
    iterations = first.iterations

    if len(stages) > 1:
        second = stages[1]
        threads = second.target_count
        iterations = second.iterations
        if starts_with_delay:
            ramp_up = second.duration
            if len(stages) > 2:
                last = stages[2]
                duration = last.duration
                iterations = last.iterations
        else:
            duration = second.duration

    # The runtime counts steady duration from test start, so it has to
    # include the ramp-up.
    if ramp_up and (iterations is None or duration is not None):
        duration = duration + ramp_up if duration is not None else ramp_up
    if duration is None and iterations is None:
        # Timed profile whose ramps are all instantaneous.
        duration = ZERO

    return SimpleSchedule(
        threads=threads,
        ramp_up=ramp_up if ramp_up is not None else ZERO,
        duration=duration,
        iterations=None if duration is not None else iterations,
        delay=delay,
    )
