# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Query, status

from peopledesk.api.deps import AuthDep, ManagerDep
from peopledesk.db import SessionDep
from peopledesk.schemas.time_off import (
    CreateTimeOffPayload,
    ReviewTimeOffPayload,
    TimeOffPage,
    TimeOffQueryParams,
    TimeOffResponse,
    TimeOffStatsResponse,
)
from peopledesk.services import time_off as time_off_service

time_offs_router = APIRouter(prefix="/time-offs", tags=["time-offs"])


@time_offs_router.post("", response_model=TimeOffResponse, status_code=status.HTTP_201_CREATED)
async def create_time_off(
    payload: CreateTimeOffPayload,
    session: SessionDep,
    auth: AuthDep,
) -> TimeOffResponse:
    """File a new time-off request (Pending)."""
    return await time_off_service.create_time_off(session, auth, payload)


@time_offs_router.get("", response_model=TimeOffPage)
async def get_time_offs(
    params: Annotated[TimeOffQueryParams, Query()],
    session: SessionDep,
    auth: AuthDep,
) -> TimeOffPage:
    """List time-off requests with filters, sorting and pagination."""
    return await time_off_service.get_time_offs(session, params)


@time_offs_router.get("/stats", response_model=TimeOffStatsResponse)
async def get_time_off_stats(
    session: SessionDep,
    auth: AuthDep,
    employee_id: str | None = Query(default=None, min_length=1, max_length=64),
) -> TimeOffStatsResponse:
    """Request counts and days by status and type, optionally for one employee.

    `employee_id` takes an id or employee number; one that matches nobody is a 404
    rather than empty stats.
    """
    return await time_off_service.get_time_off_stats(session, employee_id)


@time_offs_router.get("/{request_id}", response_model=TimeOffResponse)
async def get_time_off(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> TimeOffResponse:
    """Get a single time-off request."""
    return await time_off_service.get_time_off(session, request_id)


@time_offs_router.patch("/{request_id}/review", response_model=TimeOffResponse)
async def review_time_off(
    request_id: uuid.UUID,
    payload: ReviewTimeOffPayload,
    session: SessionDep,
    auth: ManagerDep,
) -> TimeOffResponse:
    """Approve or reject a pending request (managers only)."""
    return await time_off_service.review_time_off(session, auth, request_id, payload)


@time_offs_router.post("/{request_id}/cancel", response_model=TimeOffResponse)
async def cancel_time_off(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> TimeOffResponse:
    """Cancel one's own pending request."""
    return await time_off_service.cancel_time_off(session, auth, request_id)
