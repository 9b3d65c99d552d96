"""
Core load-profile compilation.

Usage:
    from loadplan.core import ConcurrencyProfile

    compiled = ConcurrencyProfile().ramp_to(10, 30).hold_for(60).ramp_to(0, 30).compile()
"""

from .stages import InvalidProfile, Stage, as_seconds
from .profile import ConcurrencyProfile
from .profile_compiler import (
    BatchCompilation,
    CompiledSchedule,
    ExecutionEngine,
    SimpleCompilation,
    compile_profile,
    dispatch_schedule,
)
from .compiler_modules import BatchSchedule, SimpleSchedule
from .timeline import ProfileTimeline, TimelinePoint, active_workers_at
from .worker_group import SampleErrorAction, WorkerGroup

__all__ = [
    "InvalidProfile",
    "Stage",
    "as_seconds",
    "ConcurrencyProfile",
    "BatchCompilation",
    "CompiledSchedule",
    "ExecutionEngine",
    "SimpleCompilation",
    "compile_profile",
    "dispatch_schedule",
    "BatchSchedule",
    "SimpleSchedule",
    "ProfileTimeline",
    "TimelinePoint",
    "active_workers_at",
    "SampleErrorAction",
    "WorkerGroup",
]
