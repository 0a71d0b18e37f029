# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from peopledesk.models.base import now_utc


class EmployeeLeaveBalance(SQLModel, table=True):
    """Remaining days of one leave type for one employee.

    Only mutated through the guarded update in the employee directory, so
    ``days`` never drops below zero.
    """

    __tablename__ = "employee_leave_balance"
    __table_args__ = (
        sa.PrimaryKeyConstraint("employee_id", "leave_type"),
        sa.CheckConstraint("days >= 0", name="ck_leave_balance_non_negative"),
    )

    employee_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("employee.id", ondelete="CASCADE"), nullable=False),
    )
    leave_type: str = Field(max_length=50)
    days: int = Field(default=0, sa_column_kwargs={"server_default": "0"})
    updated_at: datetime = Field(  # type: ignore[call-overload]
        default_factory=now_utc,
        sa_type=sa.DateTime(timezone=True),
        sa_column_kwargs={"server_default": sa.func.now(), "onupdate": now_utc},
    )
    version: int = Field(default=1, sa_column_kwargs={"server_default": "1"})
