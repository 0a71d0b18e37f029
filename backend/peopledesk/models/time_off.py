# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date, datetime

import sqlalchemy as sa
from sqlmodel import Field

from peopledesk.models.base import TimestampMixin, UpdatedAtMixin, UUIDBase
from peopledesk.models.enums import RequestStatus

REASON_MAX_LENGTH = 500
REVIEW_NOTE_MAX_LENGTH = 500


def duration_days(starts_at: date, ends_at: date) -> int:
    """Length of the inclusive range ``[starts_at, ends_at]`` in calendar days."""
    return (ends_at - starts_at).days + 1


class TimeOffRequest(UUIDBase, TimestampMixin, UpdatedAtMixin, table=True):
    """An employee's leave request and its review outcome."""

    __tablename__ = "time_off_request"
    __table_args__ = (
        sa.Index("ix_time_off_employee_range", "employee_id", "starts_at", "ends_at"),
        sa.CheckConstraint("ends_at >= starts_at", name="ck_time_off_range"),
    )

    employee_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("employee.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    time_off_type: str = Field(max_length=50, index=True)
    status: str = Field(
        default=RequestStatus.PENDING, max_length=50, index=True, sa_column_kwargs={"server_default": "Pending"}
    )
    starts_at: date
    ends_at: date
    duration_days: int
    reason: str | None = Field(default=None, max_length=REASON_MAX_LENGTH)
    reviewed_by: uuid.UUID | None = Field(
        default=None,
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("employee.id", ondelete="SET NULL"), nullable=True),
    )
    reviewed_at: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
    review_note: str | None = Field(default=None, max_length=REVIEW_NOTE_MAX_LENGTH)
