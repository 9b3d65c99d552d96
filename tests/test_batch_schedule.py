from __future__ import annotations

from fractions import Fraction

import pytest

from loadplan.core import BatchCompilation, ConcurrencyProfile, Stage, active_workers_at
from loadplan.core.compiler_modules import BatchSchedule, compile_batch_schedules


def _complex_profile() -> ConcurrencyProfile:
    return (
        ConcurrencyProfile()
        .hold_for(10)
        .ramp_to_and_hold(3, 10, 10)
        .ramp_to_and_hold(2, 10, 10)
        .ramp_to(5, 10)
        .ramp_to(3, 10)
        .ramp_to_and_hold(7, 10, 10)
        .ramp_to_and_hold(5, 10, 10)
        .ramp_to(1, 10)
    )


def _boundaries(profile: ConcurrencyProfile) -> list[tuple[Fraction, int]]:
    elapsed = Fraction(0)
    points = [(elapsed, 0)]
    for stage in profile:
        elapsed += stage.duration
        points.append((elapsed, stage.target_count))
    return points


PROFILES = [
    _complex_profile,
    lambda: ConcurrencyProfile().ramp_to(3, 10).ramp_to(0, 15),
    lambda: ConcurrencyProfile().ramp_to(10, 10).ramp_to(5, 10).ramp_to_and_hold(20, 5, 10).ramp_to(0, 5),
    lambda: ConcurrencyProfile().ramp_to(4, 7).ramp_to(1, 3).ramp_to(6, 11).hold_for(2).ramp_to(2, 13),
    lambda: ConcurrencyProfile().ramp_to(5, 10).ramp_to(2, 10).ramp_to(4, 10).ramp_to(0, 10),
]


def test_complex_profile_matches_engine_table():
    compiled = _complex_profile().compile()

    assert isinstance(compiled, BatchCompilation)
    assert compiled.to_rows() == [
        (1, 10, 4, 107, 0),
        (1, 14, 4, 101, 3),
        (1, 17, 4, 10, 10),
        (1, 50, 4, 62, 3),
        (2, 54, 7, 0, 10),
        (2, 70, 5, 35, 5),
        (2, 75, 5, 10, 10),
    ]


def test_ramp_up_and_down_is_a_single_batch():
    compiled = ConcurrencyProfile().ramp_to(3, 10).ramp_to(0, 15).compile()

    assert compiled.to_rows() == [(3, 0, 10, 0, 15)]
    assert compiled.batches == (
        BatchSchedule(
            size=3,
            start_offset=Fraction(0),
            startup_duration=Fraction(10),
            shutdown_duration=Fraction(15),
        ),
    )


def test_partial_ramp_down_splits_newest_workers():
    batches = compile_batch_schedules([Stage.timed(3, 30), Stage.timed(1, 10)])

    assert batches == [
        BatchSchedule(
            size=1,
            start_offset=Fraction(0),
            startup_duration=Fraction(10),
            hold_duration=Fraction(30),
        ),
        BatchSchedule(
            size=2,
            start_offset=Fraction(10),
            startup_duration=Fraction(20),
            shutdown_duration=Fraction(10),
        ),
    ]


@pytest.mark.parametrize("build", PROFILES)
def test_active_workers_match_targets_at_stage_boundaries(build):
    profile = build()
    batches = compile_batch_schedules(profile.stages)

    for at, target in _boundaries(profile):
        assert active_workers_at(batches, at) == target


@pytest.mark.parametrize("build", PROFILES)
def test_batches_ordered_and_end_with_profile(build):
    profile = build()
    batches = compile_batch_schedules(profile.stages)

    offsets = [b.start_offset for b in batches]
    assert offsets == sorted(offsets)
    assert all(b.size > 0 for b in batches)
    assert max(b.end_offset for b in batches) == profile.total_duration


@pytest.mark.parametrize("build", PROFILES)
def test_compilation_is_repeatable(build):
    profile = build()

    assert profile.compile() == profile.compile()


def test_iteration_stage_rejected():
    with pytest.raises(ValueError):
        compile_batch_schedules(
            [Stage.timed(3, 10), Stage.timed(5, 10), Stage.iterating(5, 10)]
        )


def test_workers_between_boundaries_are_interpolated():
    batches = compile_batch_schedules([Stage.timed(4, 8), Stage.timed(0, 4)])

    assert active_workers_at(batches, 2) == 1
    assert active_workers_at(batches, 10) == 2
    assert active_workers_at(batches, 20) == 0
