"""
Profile compilation entry point.

Selects the compilation strategy once, through the classifier, and wraps
the result in a tagged value: ``SimpleCompilation`` for the runtime's single
ramp/hold worker group, ``BatchCompilation`` for its batch table. Callers
branch on the tag instead of relying on a shared interface.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from fractions import Fraction
from typing import Any, Literal, Protocol, Sequence

from loadplan.core.compiler_modules import (
    BatchRow,
    BatchSchedule,
    SimpleSchedule,
    compile_batch_schedules,
    compile_simple_schedule,
    is_simple,
)
from loadplan.core.stages import ZERO, Stage

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SimpleCompilation:
    """Profile compiled to a single ramp/hold worker group."""

    schedule: SimpleSchedule
    kind: Literal["simple"] = "simple"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "simple": self.schedule.to_row()}


@dataclass(frozen=True, slots=True)
class BatchCompilation:
    """Profile compiled to a table of worker batches, ordered by start offset."""

    batches: tuple[BatchSchedule, ...]
    kind: Literal["batches"] = "batches"

    @property
    def end_offset(self) -> Fraction:
        return max((b.end_offset for b in self.batches), default=ZERO)

    def to_rows(self) -> list[BatchRow]:
        return [b.to_row() for b in self.batches]

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "batches": [list(row) for row in self.to_rows()]}


CompiledSchedule = SimpleCompilation | BatchCompilation


class ExecutionEngine(Protocol):
    """The two primitives a load runtime exposes for running workers."""

    def run_worker_group(self, schedule: SimpleSchedule) -> Any: ...

    def run_batch_table(self, rows: list[BatchRow]) -> Any: ...


def compile_profile(stages: Sequence[Stage]) -> CompiledSchedule:
    """
    Compile a validated stage sequence.

    Args:
        stages: Stages built through ``ConcurrencyProfile``

    Returns:
        SimpleCompilation when the runtime's single-block group can express
        the profile, BatchCompilation otherwise
    """
    if is_simple(stages):
        schedule = compile_simple_schedule(stages)
        logger.debug("Compiled %d stages into a simple worker group", len(stages))
        return SimpleCompilation(schedule)
    return BatchCompilation(tuple(compile_batch_schedules(stages)))


def dispatch_schedule(compiled: CompiledSchedule, engine: ExecutionEngine) -> Any:
    """Hand a compiled schedule to the engine primitive matching its kind."""
    if isinstance(compiled, SimpleCompilation):
        return engine.run_worker_group(compiled.schedule)
    if isinstance(compiled, BatchCompilation):
        return engine.run_batch_table(compiled.to_rows())
    raise TypeError(f"Unknown compiled schedule: {type(compiled).__name__}")
