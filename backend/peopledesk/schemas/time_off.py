# ruff: noqa: TC001, TC003
from __future__ import annotations

import re
import uuid
from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from peopledesk.models.enums import RequestStatus, TimeOffType
from peopledesk.models.time_off import REASON_MAX_LENGTH, REVIEW_NOTE_MAX_LENGTH

SortDirection = Literal["ASC", "DESC"]

SORTABLE_FIELDS = frozenset(
    {"created_at", "updated_at", "starts_at", "ends_at", "status", "time_off_type", "duration_days"}
)
DEFAULT_SORT: list[tuple[str, SortDirection]] = [("created_at", "DESC")]
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
# Largest OFFSET every supported driver can bind (signed 32-bit).
MAX_OFFSET = 2**31 - 1

_SORT_PATTERN = re.compile(r"^(?P<field>[a-z_]+),(?P<direction>asc|desc)$", re.IGNORECASE)

# ---------------------------------------------------------------------------
# Request payloads
# ---------------------------------------------------------------------------


class CreateTimeOffPayload(BaseModel):
    """Request body for filing a time-off request.

    ``employee_id`` defaults to the caller; it accepts a UUID or an employee number.
    """

    employee_id: str | None = Field(default=None, min_length=1, max_length=64)
    time_off_type: TimeOffType
    starts_at: date
    ends_at: date
    reason: str | None = Field(default=None, max_length=REASON_MAX_LENGTH)


class ReviewTimeOffPayload(BaseModel):
    """Request body for a manager's decision."""

    status: RequestStatus
    review_note: str | None = Field(default=None, max_length=REVIEW_NOTE_MAX_LENGTH)


# ---------------------------------------------------------------------------
# Query parameters
# ---------------------------------------------------------------------------


class TimeOffFilter(BaseModel):
    """Supported predicates for listing requests.

    Equality on status, type and employee; half-open ranges on both dates.
    """

    status: RequestStatus | None = None
    time_off_type: TimeOffType | None = None
    employee_id: str | None = Field(default=None, min_length=1, max_length=64)
    starts_at_gte: date | None = None
    starts_at_lt: date | None = None
    ends_at_gte: date | None = None
    ends_at_lt: date | None = None


class TimeOffQueryParams(TimeOffFilter):
    """Filter plus sort and pagination; unknown parameters are rejected."""

    model_config = ConfigDict(extra="forbid")

    sort: list[str] = Field(default_factory=list)
    limit: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    page: int | None = Field(default=None, ge=1, le=MAX_OFFSET)
    offset: int | None = Field(default=None, ge=0, le=MAX_OFFSET)

    @field_validator("sort")
    @classmethod
    def _validate_sort(cls, value: list[str]) -> list[str]:
        for item in value:
            match = _SORT_PATTERN.match(item.strip())
            if match is None:
                msg = f"sort must look like 'field,ASC' or 'field,DESC', got {item!r}"
                raise ValueError(msg)
            if match.group("field") not in SORTABLE_FIELDS:
                msg = f"cannot sort by {match.group('field')!r}"
                raise ValueError(msg)
        return value

    def sort_spec(self) -> list[tuple[str, SortDirection]]:
        """Parsed ``(field, direction)`` pairs, defaulting to newest first."""
        if not self.sort:
            return list(DEFAULT_SORT)
        spec: list[tuple[str, SortDirection]] = []
        for item in self.sort:
            field, direction = item.strip().split(",")
            spec.append((field, "ASC" if direction.upper() == "ASC" else "DESC"))
        return spec

    def skip(self) -> int:
        """Rows to skip; an explicit offset wins over page."""
        if self.offset is not None:
            return self.offset
        if self.page is not None:
            return min((self.page - 1) * self.limit, MAX_OFFSET)
        return 0

    def current_page(self) -> int:
        return self.skip() // self.limit + 1


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class TimeOffResponse(BaseModel):
    """A single time-off request; dates render as ``YYYY-MM-DD``."""

    id: uuid.UUID
    employee_id: uuid.UUID
    time_off_type: TimeOffType
    status: RequestStatus
    starts_at: date
    ends_at: date
    duration_days: int
    reason: str | None
    reviewed_by: uuid.UUID | None
    reviewed_at: datetime | None
    review_note: str | None
    created_at: datetime
    updated_at: datetime


class TimeOffPage(BaseModel):
    """One page of time-off requests."""

    data: list[TimeOffResponse]
    count: int
    total: int
    page: int
    page_count: int


class TimeOffTypeStats(BaseModel):
    type: TimeOffType
    count: int
    days: int


class TimeOffStatusStats(BaseModel):
    """Requests in one status, broken down by leave type."""

    status: RequestStatus
    types: list[TimeOffTypeStats]
    total_count: int
    total_days: int


class TimeOffStatsResponse(BaseModel):
    employee_id: uuid.UUID | None
    items: list[TimeOffStatusStats]
