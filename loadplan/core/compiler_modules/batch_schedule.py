"""
Batch table compilation for profiles that ramp up and down repeatedly.

The runtime's batch table runs independent cohorts of workers, each with its
own start offset, startup ramp, hold and shutdown ramp, and sums the active
workers of overlapping cohorts. A profile is swept stage by stage:

- a ramp up opens a new cohort for the added workers, parking the cohort
  that was being built on a stack;
- a hold extends the cohort being built;
- a ramp down shrinks the newest cohorts first (LIFO), splitting a cohort
  when only part of it has to leave.

When a cohort finishes, the cohort below it on the stack was holding the
whole time, so the finished cohort's lifetime is folded into its hold.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from fractions import Fraction
from typing import Sequence

from loadplan.core.compiler_modules.interpolation import ceil_seconds, interpolate
from loadplan.core.stages import ZERO, Stage

logger = logging.getLogger(__name__)

BatchRow = tuple[int, int, int, int, int]


@dataclass(frozen=True, slots=True)
class BatchSchedule:
    """One cohort of workers sharing a startup/hold/shutdown lifecycle.

    Attributes:
        size: Workers in the cohort
        start_offset: Seconds from test start until the cohort starts ramping up
        startup_duration: Seconds taken to start all workers of the cohort
        hold_duration: Seconds all workers keep running
        shutdown_duration: Seconds taken to stop all workers of the cohort
    """

    size: int
    start_offset: Fraction = ZERO
    startup_duration: Fraction = ZERO
    hold_duration: Fraction = ZERO
    shutdown_duration: Fraction = ZERO

    @property
    def lifetime(self) -> Fraction:
        return self.startup_duration + self.hold_duration + self.shutdown_duration

    @property
    def end_offset(self) -> Fraction:
        return self.start_offset + self.lifetime

    def to_row(self) -> BatchRow:
        """Engine table row, durations rounded up to whole seconds."""
        return (
            int(self.size),
            ceil_seconds(self.start_offset),
            ceil_seconds(self.startup_duration),
            ceil_seconds(self.hold_duration),
            ceil_seconds(self.shutdown_duration),
        )


@dataclass
class _BatchSweep:
    """Accumulator state while sweeping the stages of a profile."""

    elapsed: Fraction = ZERO
    active: int = 0
    # Size-0 sentinel: it sits at the bottom of the stack and is never emitted.
    current: BatchSchedule = field(default_factory=lambda: BatchSchedule(size=0))
    open_stack: list[BatchSchedule] = field(default_factory=list)
    completed: list[BatchSchedule] = field(default_factory=list)

    def apply(self, stage: Stage) -> None:
        if stage.duration is None:
            raise ValueError(
                "iteration-bound stages can't be compiled into a batch table"
            )
        target = stage.target_count
        if target == self.active:
            self._hold(stage.duration)
        elif target > self.active:
            self._ramp_up(target, stage.duration)
        else:
            self._ramp_down(target, stage.duration)
        self.active = target
        self.elapsed += stage.duration

    def drain(self) -> None:
        while self.open_stack:
            self._finalize()

    def _hold(self, duration: Fraction) -> None:
        self.current = replace(
            self.current, hold_duration=self.current.hold_duration + duration
        )

    def _ramp_up(self, target: int, duration: Fraction) -> None:
        self.open_stack.append(self.current)
        self.current = BatchSchedule(
            size=target - self.active,
            start_offset=self.elapsed,
            startup_duration=duration,
        )

    def _ramp_down(self, target: int, duration: Fraction) -> None:
        remaining = self.active - target
        budget = duration
        while remaining > self.current.size:
            # The whole cohort leaves during this stage, taking its share of the ramp.
            shutdown = interpolate(self.current.size, remaining, budget)
            self.current = replace(self.current, shutdown_duration=shutdown)
            budget -= shutdown
            remaining -= self.current.size
            self._finalize()
        if remaining == self.current.size:
            self.current = replace(self.current, shutdown_duration=budget)
        else:
            self.current = self._split_current(remaining, budget)
        self._finalize()

    def _split_current(self, leaving: int, shutdown: Fraction) -> BatchSchedule:
        """Split off the last ``leaving`` workers started by the current cohort.

        The workers that stay are parked on the stack with a fresh hold; the
        leaving part is returned to become the current cohort.
        """
        batch = self.current
        spent = interpolate(leaving, batch.size, batch.startup_duration)
        staying = replace(
            batch,
            size=batch.size - leaving,
            startup_duration=batch.startup_duration - spent,
            hold_duration=ZERO,
        )
        self.open_stack.append(staying)
        return BatchSchedule(
            size=leaving,
            start_offset=batch.start_offset + batch.startup_duration - spent,
            startup_duration=spent,
            hold_duration=batch.hold_duration,
            shutdown_duration=shutdown,
        )

    def _finalize(self) -> None:
        done = self.current
        self.completed.append(done)
        outer = self.open_stack.pop()
        self.current = replace(outer, hold_duration=outer.hold_duration + done.lifetime)


def compile_batch_schedules(stages: Sequence[Stage]) -> list[BatchSchedule]:
    """
    Decompose a timed profile into overlapping worker cohorts.

    Args:
        stages: Timed stages (iteration-bound stages only fit simple groups)

    Returns:
        Cohorts ordered by start offset

    Raises:
        ValueError: If an iteration-bound stage is found
    """
    sweep = _BatchSweep()
    for stage in stages:
        sweep.apply(stage)
    sweep.drain()
    batches = sorted(sweep.completed, key=lambda b: b.start_offset)
    logger.debug("Compiled %d stages into %d worker batches", len(stages), len(batches))
    return batches
