"""
Worker group configuration.

A worker group owns a concurrency profile plus the settings the runtime
applies to all of its workers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from loadplan.core.profile import ConcurrencyProfile
from loadplan.core.profile_compiler import CompiledSchedule
from loadplan.core.stages import DurationLike, InvalidProfile
from loadplan.core.timeline import ProfileTimeline

DEFAULT_GROUP_NAME = "Worker Group"


class SampleErrorAction(str, Enum):
    """What a worker does when one of its samples fails."""

    CONTINUE = "continue"
    START_NEXT_ITERATION = "startnextloop"
    STOP_THREAD = "stopthread"
    STOP_TEST = "stoptest"
    STOP_TEST_NOW = "stoptestnow"


@dataclass
class WorkerGroup:
    """Named group of workers driven by a concurrency profile.

    Attributes:
        name: Display name of the group
        sample_error_action: Behavior of a worker after a failed sample
        profile: Stages describing how many workers run over time
    """

    name: str = DEFAULT_GROUP_NAME
    sample_error_action: SampleErrorAction = SampleErrorAction.CONTINUE
    profile: ConcurrencyProfile = field(default_factory=ConcurrencyProfile)

    @classmethod
    def for_iterations(
        cls, threads: int, iterations: int, *, name: str = DEFAULT_GROUP_NAME
    ) -> "WorkerGroup":
        """Start ``threads`` workers at once, each running ``iterations`` loops."""
        _check_thread_count(threads)
        if iterations <= 0:
            raise InvalidProfile(f"Iterations must be >=1 (got {iterations})")
        group = cls(name=name)
        group.profile.ramp_to(threads, 0).hold_iterating(iterations)
        return group

    @classmethod
    def for_duration(
        cls, threads: int, duration: DurationLike, *, name: str = DEFAULT_GROUP_NAME
    ) -> "WorkerGroup":
        """Start ``threads`` workers at once and keep them running for ``duration``."""
        _check_thread_count(threads)
        group = cls(name=name)
        group.profile.ramp_to(threads, 0).hold_for(duration)
        return group

    def compile(self) -> CompiledSchedule:
        return self.profile.compile()

    def timeline(self) -> ProfileTimeline:
        return ProfileTimeline.from_stages(self.profile, name=f"{self.name} threads timeline")

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "sample_error_action": SampleErrorAction(self.sample_error_action).value,
            "total_duration_seconds": float(self.profile.total_duration),
            **self.compile().to_dict(),
        }


def _check_thread_count(threads: int) -> None:
    if threads <= 0:
        raise InvalidProfile(f"Threads count must be >=1 (got {threads})")
