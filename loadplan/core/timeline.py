"""
Worker timelines.

``ProfileTimeline`` is the planned worker count over time as declared by a
profile's stages, suitable for charting. ``active_workers_at`` evaluates a
compiled batch table at a point in time, the way the runtime ramps each
batch linearly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from fractions import Fraction
from typing import Any, Iterable, Sequence

from loadplan.core.compiler_modules import BatchSchedule
from loadplan.core.stages import ZERO, DurationLike, Stage, as_seconds


@dataclass(frozen=True, slots=True)
class TimelinePoint:
    time: Fraction
    threads: int


@dataclass
class ProfileTimeline:
    """Planned workers over time, one point per stage boundary."""

    name: str
    load_unit: str = "Threads"
    points: list[TimelinePoint] = field(default_factory=list)

    @classmethod
    def from_stages(cls, stages: Iterable[Stage], *, name: str) -> "ProfileTimeline":
        """
        Build the planned timeline of a profile.

        Starts at (0, 0) and adds a point at the cumulative time of each
        stage. An iteration-bound stage has no known end, so the timeline
        stops before it.
        """
        timeline = cls(name=name)
        timeline.add(ZERO, 0)
        elapsed = ZERO
        for stage in stages:
            if stage.duration is None:
                break
            elapsed += stage.duration
            timeline.add(elapsed, stage.target_count)
        return timeline

    def add(self, time: Fraction, threads: int) -> None:
        self.points.append(TimelinePoint(time=Fraction(time), threads=int(threads)))

    @property
    def max_time(self) -> Fraction:
        return max((p.time for p in self.points), default=ZERO)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "load_unit": self.load_unit,
            "max_time_seconds": float(self.max_time),
            "points": [
                {"time_seconds": float(p.time), "threads": p.threads} for p in self.points
            ],
        }


def _batch_workers_at(batch: BatchSchedule, at: Fraction) -> Fraction:
    if at < batch.start_offset or at > batch.end_offset:
        return ZERO
    ramped_at = batch.start_offset + batch.startup_duration
    if at < ramped_at:
        return batch.size * (at - batch.start_offset) / batch.startup_duration
    stopping_at = ramped_at + batch.hold_duration
    if at <= stopping_at:
        return Fraction(batch.size)
    return batch.size * (batch.end_offset - at) / batch.shutdown_duration


def active_workers_at(batches: Sequence[BatchSchedule], at: DurationLike) -> Fraction:
    """
    Workers running at ``at`` seconds from test start.

    Each batch ramps linearly from zero to its size over its startup, holds,
    then ramps linearly back to zero over its shutdown. The value is exact,
    so at stage boundaries it is a whole number of workers.

    Instantaneous steps are closed on both ends: a batch with no startup
    counts in full at its start offset, and a batch with no shutdown still
    counts in full at its end offset. At the moment of a zero-duration ramp
    down the value is therefore the count from before the drop.
    """
    moment = as_seconds(at)
    return sum((_batch_workers_at(b, moment) for b in batches), ZERO)
