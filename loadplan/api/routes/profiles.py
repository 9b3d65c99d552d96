"""
API routes for compiling concurrency profiles.

Requests replay builder operations against a fresh profile, so a rejected
sequence fails with the same message the Python builder raises.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException

from loadplan.api.error_handling import http_exception
from loadplan.config import settings
from loadplan.core import InvalidProfile, WorkerGroup
from loadplan.models.profile import (
    CompiledProfileResponse,
    ProfileRequest,
    TimelineResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _build_worker_group(request: ProfileRequest) -> WorkerGroup:
    if len(request.stages) > settings.MAX_PROFILE_STAGES:
        raise InvalidProfile(
            f"Profile has {len(request.stages)} operations "
            f"(max {settings.MAX_PROFILE_STAGES})"
        )
    group = WorkerGroup(
        name=request.name or settings.DEFAULT_WORKER_GROUP_NAME,
        sample_error_action=request.sample_error_action,
    )
    for operation in request.stages:
        if operation.threads is not None and operation.threads > settings.MAX_WORKERS:
            raise InvalidProfile(
                f"Thread count {operation.threads} exceeds MAX_WORKERS ({settings.MAX_WORKERS})"
            )
        operation.apply(group.profile)
    return group


@router.post("/compile", response_model=CompiledProfileResponse)
async def compile_profile(request: ProfileRequest) -> CompiledProfileResponse:
    """
    Compile a worker group into the runtime's configuration.

    Returns either the settings of a single ramp/hold group or a batch
    table, whichever the profile's shape requires.
    """
    try:
        group = _build_worker_group(request)
        payload = group.to_dict()
    except HTTPException:
        raise
    except Exception as e:
        raise http_exception("compile profile", e)

    logger.info(
        "Compiled profile '%s': %d stages -> %s",
        group.name,
        len(group.profile),
        payload["kind"],
    )
    if payload["kind"] == "batches":
        payload["batches"] = [
            dict(
                zip(
                    (
                        "size",
                        "start_seconds",
                        "startup_seconds",
                        "hold_seconds",
                        "shutdown_seconds",
                    ),
                    row,
                )
            )
            for row in payload["batches"]
        ]
    return CompiledProfileResponse(**payload)


@router.post("/timeline", response_model=TimelineResponse)
async def profile_timeline(request: ProfileRequest) -> TimelineResponse:
    """
    Planned worker count at each stage boundary, for charting.
    """
    try:
        group = _build_worker_group(request)
        timeline = group.timeline()
    except HTTPException:
        raise
    except Exception as e:
        raise http_exception("build timeline", e)
    return TimelineResponse(**timeline.to_dict())
