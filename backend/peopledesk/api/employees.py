# ruff: noqa: B008, TC001
from __future__ import annotations

from fastapi import APIRouter, Query, status

from peopledesk.api.deps import AuthDep, ManagerDep
from peopledesk.db import SessionDep
from peopledesk.models.enums import EmployeeRole, EmploymentStatus
from peopledesk.schemas.employee import (
    AdjustLeaveBalanceRequest,
    CreateEmployeeRequest,
    EmployeeListResponse,
    EmployeeResponse,
)
from peopledesk.schemas.time_off import MAX_OFFSET
from peopledesk.services import employee as employee_service

employees_router = APIRouter(prefix="/employees", tags=["employees"])


@employees_router.post("", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
async def create_employee(
    payload: CreateEmployeeRequest,
    session: SessionDep,
    auth: ManagerDep,
) -> EmployeeResponse:
    """Onboard an employee with their initial leave balances (managers only)."""
    return await employee_service.create_employee(session, auth, payload)


@employees_router.get("", response_model=EmployeeListResponse)
async def list_employees(
    session: SessionDep,
    auth: AuthDep,
    department: str | None = Query(default=None),
    role: EmployeeRole | None = Query(default=None),
    employment_status: EmploymentStatus | None = Query(default=None, alias="status"),
    search: str | None = Query(default=None, min_length=1, max_length=100),
    offset: int = Query(default=0, ge=0, le=MAX_OFFSET),
    limit: int = Query(default=10, ge=1, le=100),
) -> EmployeeListResponse:
    """List employees with optional filters; `search` matches first name, last name or email."""
    return await employee_service.list_employees(
        session,
        department=department,
        role=role,
        employment_status=employment_status,
        search=search,
        offset=offset,
        limit=limit,
    )


@employees_router.get("/{employee_ref}", response_model=EmployeeResponse)
async def get_employee(
    employee_ref: str,
    session: SessionDep,
    auth: AuthDep,
) -> EmployeeResponse:
    """Get an employee by id or employee number, with leave balances."""
    return await employee_service.get_employee(session, employee_ref)


@employees_router.get("/{employee_ref}/reports", response_model=EmployeeListResponse)
async def list_direct_reports(
    employee_ref: str,
    session: SessionDep,
    auth: AuthDep,
) -> EmployeeListResponse:
    """List the employees reporting to this manager."""
    return await employee_service.list_direct_reports(session, employee_ref)


@employees_router.post("/{employee_ref}/leave-balance", response_model=EmployeeResponse)
async def adjust_leave_balance(
    employee_ref: str,
    payload: AdjustLeaveBalanceRequest,
    session: SessionDep,
    auth: ManagerDep,
) -> EmployeeResponse:
    """Add to or subtract from one leave balance (managers only)."""
    return await employee_service.adjust_leave_balance(session, auth, employee_ref, payload)
