"""
Profile API Models

Defines Pydantic models for the profile endpoints:
- Stage operations replayed through the profile builder
- Compiled worker group / batch table responses
- Planned timeline responses
"""

from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from loadplan.core import ConcurrencyProfile, SampleErrorAction


class StageOperationType(str, Enum):
    """Builder operations a request can replay."""

    RAMP_TO = "ramp_to"
    HOLD_FOR = "hold_for"
    HOLD_ITERATING = "hold_iterating"
    RAMP_TO_AND_HOLD = "ramp_to_and_hold"


_REQUIRED_FIELDS: dict[StageOperationType, tuple[str, ...]] = {
    StageOperationType.RAMP_TO: ("threads", "duration_seconds"),
    StageOperationType.HOLD_FOR: ("duration_seconds",),
    StageOperationType.HOLD_ITERATING: ("iterations",),
    StageOperationType.RAMP_TO_AND_HOLD: ("threads", "duration_seconds", "hold_seconds"),
}


class StageOperation(BaseModel):
    """
    A single profile builder call.

    Negative thread counts are accepted here so the builder reports them
    with the same message as any other caller.
    """

    op: StageOperationType = Field(..., description="Builder operation to apply")
    threads: Optional[int] = Field(None, description="Target workers (ramp operations)")
    duration_seconds: Optional[float] = Field(
        None, description="Ramp duration, or hold duration for hold_for"
    )
    hold_seconds: Optional[float] = Field(
        None, description="Hold duration after the ramp (ramp_to_and_hold)"
    )
    iterations: Optional[int] = Field(
        None, description="Loops per worker (hold_iterating, negative = unbounded)"
    )

    @model_validator(mode="after")
    def validate_operation_fields(self):
        """Each operation needs its own parameters."""
        missing = [
            name for name in _REQUIRED_FIELDS[self.op] if getattr(self, name) is None
        ]
        if missing:
            raise ValueError(f"{self.op.value} requires {', '.join(missing)}")
        return self

    def apply(self, profile: ConcurrencyProfile) -> ConcurrencyProfile:
        """Replay this operation on ``profile`` (raises InvalidProfile)."""
        if self.op == StageOperationType.RAMP_TO:
            return profile.ramp_to(self.threads, self.duration_seconds)
        if self.op == StageOperationType.HOLD_FOR:
            return profile.hold_for(self.duration_seconds)
        if self.op == StageOperationType.HOLD_ITERATING:
            return profile.hold_iterating(self.iterations)
        return profile.ramp_to_and_hold(
            self.threads, self.duration_seconds, self.hold_seconds
        )


class ProfileRequest(BaseModel):
    """
    Worker group definition submitted for compilation.
    """

    name: Optional[str] = Field(None, description="Worker group name")
    sample_error_action: SampleErrorAction = Field(
        SampleErrorAction.CONTINUE, description="Worker behavior after a failed sample"
    )
    stages: List[StageOperation] = Field(
        default_factory=list, description="Builder operations, in order"
    )


class SimpleScheduleOut(BaseModel):
    """Settings for the runtime's single ramp/hold worker group."""

    threads: int
    ramp_up_seconds: int
    duration_seconds: Optional[int] = None
    iterations: Optional[int] = None
    delay_seconds: Optional[int] = None


class BatchRowOut(BaseModel):
    """One row of the runtime's batch table."""

    model_config = ConfigDict(frozen=True)

    size: int = Field(..., ge=1)
    start_seconds: int = Field(..., ge=0)
    startup_seconds: int = Field(..., ge=0)
    hold_seconds: int = Field(..., ge=0)
    shutdown_seconds: int = Field(..., ge=0)


class CompiledProfileResponse(BaseModel):
    """Compiled worker group, either a simple group or a batch table."""

    name: str
    sample_error_action: str
    kind: Literal["simple", "batches"]
    total_duration_seconds: float
    simple: Optional[SimpleScheduleOut] = None
    batches: Optional[List[BatchRowOut]] = None


class TimelinePointOut(BaseModel):
    time_seconds: float
    threads: int


class TimelineResponse(BaseModel):
    """Planned worker count at each stage boundary."""

    name: str
    load_unit: str
    max_time_seconds: float
    points: List[TimelinePointOut]
