# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field

from peopledesk.models.enums import BalanceOperation, ContractType, EmployeeRole, EmploymentStatus, TimeOffType


class LeaveBalance(BaseModel):
    """Remaining days per leave type."""

    annual: int = Field(ge=0)
    sick: int = Field(ge=0)
    casual: int = Field(ge=0)

    def for_type(self, leave_type: TimeOffType) -> int:
        return int(getattr(self, leave_type.balance_key))


class LeaveBalanceOverride(BaseModel):
    """Optional onboarding override of the configured default allowance."""

    annual: int | None = Field(default=None, ge=0)
    sick: int | None = Field(default=None, ge=0)
    casual: int | None = Field(default=None, ge=0)


class CreateEmployeeRequest(BaseModel):
    """Request body for onboarding an employee."""

    employee_number: str = Field(min_length=1, max_length=50, pattern=r"^[A-Za-z0-9_-]+$")
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: str = Field(min_length=3, max_length=255)
    job_title: str = Field(min_length=1, max_length=150)
    department: str = Field(min_length=1, max_length=150)
    role: EmployeeRole = EmployeeRole.EMPLOYEE
    employment_status: EmploymentStatus = EmploymentStatus.ACTIVE
    contract_type: ContractType = ContractType.FULL_TIME
    work_location: str | None = Field(default=None, max_length=150)
    reports_to: str | None = Field(default=None, min_length=1, max_length=64)
    date_of_joining: date
    leave_balance: LeaveBalanceOverride | None = None


class AdjustLeaveBalanceRequest(BaseModel):
    """Request body for a managerial leave-balance adjustment."""

    leave_type: TimeOffType
    amount: int = Field(gt=0, le=366)
    operation: BalanceOperation
    reason: str | None = Field(default=None, max_length=500)


class EmployeeResponse(BaseModel):
    """Response schema for an employee."""

    id: uuid.UUID
    employee_number: str
    first_name: str
    last_name: str
    email: str
    job_title: str
    department: str
    role: EmployeeRole
    employment_status: EmploymentStatus
    contract_type: ContractType
    work_location: str | None
    reports_to: uuid.UUID | None
    date_of_joining: date
    leave_balance: LeaveBalance
    created_at: datetime


class EmployeeListResponse(BaseModel):
    """Paginated list of employees."""

    items: list[EmployeeResponse]
    total: int
