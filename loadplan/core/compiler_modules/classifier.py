"""Decides which runtime primitive a stage sequence compiles to."""

from __future__ import annotations

from typing import Sequence

from loadplan.core.stages import Stage


def is_simple(stages: Sequence[Stage]) -> bool:
    """
    True when the stages fit the runtime's single ramp/hold worker group.

    Accepted shapes:
    - no stages, or a single stage
    - delay + ramp, or ramp + hold (two stages)
    - delay + ramp + hold/iterate (three stages)
    """
    count = len(stages)
    if count <= 1:
        return True
    first, second = stages[0], stages[1]
    if count == 2:
        return first.target_count == 0 or first.target_count == second.target_count
    if count == 3:
        return first.target_count == 0 and second.target_count == stages[2].target_count
    return False
