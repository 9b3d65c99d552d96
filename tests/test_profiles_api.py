from __future__ import annotations

import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from loadplan.api.routes import profiles as routes
from loadplan.models.profile import ProfileRequest, StageOperation


def _request(*stages, **kwargs) -> ProfileRequest:
    return ProfileRequest(stages=[StageOperation(**s) for s in stages], **kwargs)


@pytest.mark.asyncio
async def test_compile_simple_profile():
    response = await routes.compile_profile(
        _request(
            {"op": "hold_for", "duration_seconds": 10},
            {"op": "ramp_to", "threads": 3, "duration_seconds": 15},
            {"op": "hold_iterating", "iterations": 10},
            name="login",
        )
    )

    assert response.kind == "simple"
    assert response.name == "login"
    assert response.batches is None
    assert response.simple.threads == 3
    assert response.simple.delay_seconds == 10
    assert response.simple.iterations == 10
    assert response.simple.duration_seconds is None


@pytest.mark.asyncio
async def test_compile_batch_profile():
    response = await routes.compile_profile(
        _request(
            {"op": "ramp_to_and_hold", "threads": 3, "duration_seconds": 10, "hold_seconds": 5},
            {"op": "ramp_to", "threads": 0, "duration_seconds": 15},
        )
    )

    assert response.kind == "batches"
    assert response.name == "Worker Group"
    assert response.sample_error_action == "continue"
    assert response.total_duration_seconds == 30.0
    assert [row.model_dump() for row in response.batches] == [
        {
            "size": 3,
            "start_seconds": 0,
            "startup_seconds": 10,
            "hold_seconds": 5,
            "shutdown_seconds": 15,
        }
    ]


@pytest.mark.asyncio
async def test_rejected_profile_is_bad_request():
    with pytest.raises(HTTPException) as exc_info:
        await routes.compile_profile(
            _request(
                {"op": "ramp_to", "threads": 3, "duration_seconds": 10},
                {"op": "hold_iterating", "iterations": 5},
                {"op": "hold_for", "duration_seconds": 10},
            )
        )

    assert exc_info.value.status_code == 400
    assert "after holding for iterations" in exc_info.value.detail


@pytest.mark.asyncio
async def test_worker_limit_enforced(monkeypatch):
    monkeypatch.setattr(routes.settings, "MAX_WORKERS", 5)

    with pytest.raises(HTTPException) as exc_info:
        await routes.compile_profile(
            _request({"op": "ramp_to", "threads": 6, "duration_seconds": 10})
        )

    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_stage_limit_enforced(monkeypatch):
    monkeypatch.setattr(routes.settings, "MAX_PROFILE_STAGES", 1)

    with pytest.raises(HTTPException) as exc_info:
        await routes.profile_timeline(
            _request(
                {"op": "ramp_to", "threads": 1, "duration_seconds": 10},
                {"op": "hold_for", "duration_seconds": 10},
            )
        )

    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_timeline_endpoint():
    response = await routes.profile_timeline(
        _request(
            {"op": "ramp_to", "threads": 4, "duration_seconds": 10},
            {"op": "ramp_to", "threads": 1, "duration_seconds": 5},
            name="cart",
        )
    )

    assert response.name == "cart threads timeline"
    assert response.max_time_seconds == 15.0
    assert [(p.time_seconds, p.threads) for p in response.points] == [
        (0.0, 0),
        (10.0, 4),
        (15.0, 1),
    ]


def test_operation_requires_its_parameters():
    with pytest.raises(ValidationError):
        StageOperation(op="ramp_to", threads=3)
    with pytest.raises(ValidationError):
        StageOperation(op="hold_iterating")
    with pytest.raises(ValidationError):
        StageOperation(op="jump_to", threads=3, duration_seconds=1)


@pytest.mark.asyncio
async def test_health_check():
    from loadplan.main import health_check

    payload = await health_check()

    assert payload["status"] == "healthy"
    assert payload["service"] == "loadplan"
