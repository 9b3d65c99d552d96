"""
Profile Compiler Package

This package turns a validated stage sequence into the settings the load
runtime understands, split into logical modules.

Modules:
- interpolation: Exact duration splitting and engine rounding
- classifier: Picks the simple or batch strategy for a stage sequence
- simple_schedule: Single ramp/hold worker group compilation
- batch_schedule: Stack-based sweep into overlapping worker batches

The tagged result type and dispatch helpers live in
``loadplan.core.profile_compiler``.
"""

from .interpolation import ceil_seconds, interpolate
from .classifier import is_simple
from .simple_schedule import SimpleSchedule, compile_simple_schedule
from .batch_schedule import BatchRow, BatchSchedule, compile_batch_schedules

__all__ = [
    # Interpolation
    "ceil_seconds",
    "interpolate",
    # Classifier
    "is_simple",
    # Simple worker group
    "SimpleSchedule",
    "compile_simple_schedule",
    # Batch table
    "BatchRow",
    "BatchSchedule",
    "compile_batch_schedules",
]
