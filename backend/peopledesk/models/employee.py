# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date

import sqlalchemy as sa
from sqlmodel import Field

from peopledesk.models.base import TimestampMixin, UUIDBase
from peopledesk.models.enums import ContractType, EmployeeRole, EmploymentStatus


class Employee(UUIDBase, TimestampMixin, table=True):
    """Directory record for a person employed by the organization."""

    __tablename__ = "employee"
    __table_args__ = (sa.Index("ix_employee_department_role", "department", "role"),)

    employee_number: str = Field(max_length=50, unique=True, index=True)
    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)
    email: str = Field(max_length=255)
    job_title: str = Field(max_length=150)
    department: str = Field(max_length=150)
    role: str = Field(default=EmployeeRole.EMPLOYEE, max_length=50, sa_column_kwargs={"server_default": "Employee"})
    employment_status: str = Field(
        default=EmploymentStatus.ACTIVE, max_length=50, sa_column_kwargs={"server_default": "Active"}
    )
    contract_type: str = Field(default=ContractType.FULL_TIME, max_length=50)
    work_location: str | None = Field(default=None, max_length=150)
    reports_to: uuid.UUID | None = Field(
        default=None,
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("employee.id", ondelete="SET NULL"), nullable=True, index=True),
    )
    date_of_joining: date
