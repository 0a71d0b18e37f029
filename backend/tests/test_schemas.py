"""Unit tests for request payloads and list query parameters."""

from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from peopledesk.models.enums import RequestStatus, TimeOffType
from peopledesk.schemas.employee import AdjustLeaveBalanceRequest, CreateEmployeeRequest, LeaveBalance
from peopledesk.schemas.time_off import (
    MAX_OFFSET,
    CreateTimeOffPayload,
    ReviewTimeOffPayload,
    TimeOffQueryParams,
)

# ---------------------------------------------------------------------------
# Payloads
# ---------------------------------------------------------------------------


def test_create_time_off_payload_parses_dates() -> None:
    payload = CreateTimeOffPayload.model_validate(
        {"time_off_type": "Annual", "starts_at": "2026-03-02", "ends_at": "2026-03-06"}
    )
    assert payload.time_off_type == TimeOffType.ANNUAL
    assert payload.starts_at == date(2026, 3, 2)
    assert payload.employee_id is None
    assert payload.reason is None


def test_create_time_off_payload_reason_too_long() -> None:
    with pytest.raises(ValidationError):
        CreateTimeOffPayload(
            time_off_type=TimeOffType.SICK,
            starts_at=date(2026, 3, 2),
            ends_at=date(2026, 3, 2),
            reason="x" * 501,
        )


def test_review_payload_rejects_unknown_status() -> None:
    with pytest.raises(ValidationError):
        ReviewTimeOffPayload.model_validate({"status": "Cancelled"})
    assert ReviewTimeOffPayload(status=RequestStatus.REJECTED).review_note is None


def test_create_employee_request_number_pattern() -> None:
    base = {
        "first_name": "Jane",
        "last_name": "Doe",
        "email": "jane@example.com",
        "job_title": "Engineer",
        "department": "Engineering",
        "date_of_joining": "2024-01-15",
    }
    assert CreateEmployeeRequest.model_validate({**base, "employee_number": "EMP_01-a"}).leave_balance is None
    with pytest.raises(ValidationError):
        CreateEmployeeRequest.model_validate({**base, "employee_number": "EMP 01"})


def test_adjust_leave_balance_amount_bounds() -> None:
    with pytest.raises(ValidationError):
        AdjustLeaveBalanceRequest.model_validate({"leave_type": "Annual", "amount": 0, "operation": "add"})
    with pytest.raises(ValidationError):
        AdjustLeaveBalanceRequest.model_validate({"leave_type": "Annual", "amount": 5, "operation": "double"})


def test_leave_balance_for_type() -> None:
    balance = LeaveBalance(annual=30, sick=10, casual=5)
    assert balance.for_type(TimeOffType.ANNUAL) == 30
    assert balance.for_type(TimeOffType.CASUAL) == 5
    with pytest.raises(ValidationError):
        LeaveBalance(annual=-1, sick=0, casual=0)


# ---------------------------------------------------------------------------
# Query parameters
# ---------------------------------------------------------------------------


def test_query_params_defaults() -> None:
    params = TimeOffQueryParams()
    assert params.sort_spec() == [("created_at", "DESC")]
    assert params.limit == 10
    assert params.skip() == 0
    assert params.current_page() == 1


def test_query_params_sort_spec() -> None:
    params = TimeOffQueryParams(sort=["starts_at,asc", "status,DESC"])
    assert params.sort_spec() == [("starts_at", "ASC"), ("status", "DESC")]


@pytest.mark.parametrize("sort", ["starts_at", "starts_at,UP", "reason,ASC", "id;drop,ASC"])
def test_query_params_invalid_sort(sort: str) -> None:
    with pytest.raises(ValidationError):
        TimeOffQueryParams(sort=[sort])


def test_query_params_page_and_offset() -> None:
    assert TimeOffQueryParams(limit=20, page=3).skip() == 40
    assert TimeOffQueryParams(limit=20, page=3).current_page() == 3
    # offset wins over page
    params = TimeOffQueryParams(limit=20, page=3, offset=5)
    assert params.skip() == 5
    assert params.current_page() == 1


def test_query_params_forbid_unknown_fields() -> None:
    with pytest.raises(ValidationError):
        TimeOffQueryParams.model_validate({"colour": "blue"})


@pytest.mark.parametrize("limit", [0, 101])
def test_query_params_limit_bounds(limit: int) -> None:
    with pytest.raises(ValidationError):
        TimeOffQueryParams(limit=limit)


@pytest.mark.parametrize("field", ["page", "offset"])
def test_query_params_position_upper_bound(field: str) -> None:
    with pytest.raises(ValidationError):
        TimeOffQueryParams.model_validate({field: MAX_OFFSET + 1})


def test_query_params_far_page_clamped() -> None:
    params = TimeOffQueryParams(limit=100, page=MAX_OFFSET)
    assert params.skip() == MAX_OFFSET
