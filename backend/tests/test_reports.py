"""Tests for the audit log: every mutation leaves an entry, and only managers can read them."""

from __future__ import annotations

import uuid
from datetime import UTC, date, datetime, timedelta
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from httpx import AsyncClient

BOOTSTRAP_ID = str(uuid.uuid4())
BOOTSTRAP_HEADERS = {"X-User-Id": BOOTSTRAP_ID, "X-Role": "Manager"}
MANAGER_HEADERS = {"X-User-Id": "MGR-001", "X-Role": "Manager"}
EMPLOYEE_HEADERS = {"X-User-Id": "EMP-001", "X-Role": "Employee"}
AUDIT_URL = "/audit-log"


def _employee_payload(employee_number: str, role: str = "Employee") -> dict:
    return {
        "employee_number": employee_number,
        "first_name": employee_number,
        "last_name": "Audit",
        "email": f"{employee_number.lower()}@example.com",
        "job_title": "Analyst",
        "department": "Finance",
        "role": role,
        "date_of_joining": "2022-09-01",
    }


def _next_monday() -> date:
    today = datetime.now(UTC).date()
    return today + timedelta(days=7 - today.weekday())


@pytest.fixture
async def approved_request(async_client: AsyncClient) -> dict:
    """Onboard a manager and an employee, then file and approve one request."""
    for number, role in (("MGR-001", "Manager"), ("EMP-001", "Employee")):
        resp = await async_client.post("/employees", json=_employee_payload(number, role), headers=BOOTSTRAP_HEADERS)
        assert resp.status_code == 201, resp.text

    monday = _next_monday()
    resp = await async_client.post(
        "/time-offs",
        json={
            "time_off_type": "Annual",
            "starts_at": monday.isoformat(),
            "ends_at": (monday + timedelta(days=2)).isoformat(),
        },
        headers=EMPLOYEE_HEADERS,
    )
    assert resp.status_code == 201, resp.text
    request = resp.json()

    resp = await async_client.patch(
        f"/time-offs/{request['id']}/review",
        json={"status": "Approved"},
        headers=MANAGER_HEADERS,
    )
    assert resp.status_code == 200, resp.text
    return resp.json()


async def test_audit_log_records_lifecycle(async_client: AsyncClient, approved_request: dict) -> None:
    resp = await async_client.get(
        AUDIT_URL,
        params={"entity_type": "TIME_OFF_REQUEST", "entity_id": approved_request["id"]},
        headers=MANAGER_HEADERS,
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["total"] == 2
    by_action = {e["action"]: e for e in data["items"]}
    assert set(by_action) == {"CREATE", "APPROVE"}

    create = by_action["CREATE"]
    assert create["before_json"] is None
    assert create["after_json"]["status"] == "Pending"
    assert create["actor_id"] == approved_request["employee_id"]

    approve = by_action["APPROVE"]
    assert approve["before_json"]["status"] == "Pending"
    assert approve["after_json"]["status"] == "Approved"
    assert approve["actor_id"] == approved_request["reviewed_by"]


async def test_audit_log_records_onboarding(async_client: AsyncClient, approved_request: dict) -> None:
    resp = await async_client.get(
        AUDIT_URL,
        params={"entity_type": "EMPLOYEE", "actor_id": BOOTSTRAP_ID},
        headers=MANAGER_HEADERS,
    )
    data = resp.json()
    assert data["total"] == 2
    assert {e["after_json"]["employee_number"] for e in data["items"]} == {"MGR-001", "EMP-001"}


async def test_audit_log_records_balance_adjustment(async_client: AsyncClient, approved_request: dict) -> None:
    resp = await async_client.post(
        "/employees/EMP-001/leave-balance",
        json={"leave_type": "Annual", "amount": 2, "operation": "add", "reason": "Overtime"},
        headers=MANAGER_HEADERS,
    )
    assert resp.status_code == 200

    resp = await async_client.get(AUDIT_URL, params={"action": "ADJUST"}, headers=MANAGER_HEADERS)
    [entry] = resp.json()["items"]
    assert entry["entity_type"] == "LEAVE_BALANCE"
    assert entry["entity_id"] == approved_request["employee_id"]
    assert entry["before_json"] == {"leave_type": "Annual", "days": 27}
    assert entry["after_json"] == {"leave_type": "Annual", "days": 29, "reason": "Overtime"}


async def test_failed_approval_leaves_no_audit_entry(async_client: AsyncClient, approved_request: dict) -> None:
    monday = _next_monday() + timedelta(days=7)
    resp = await async_client.post(
        "/time-offs",
        json={"time_off_type": "Casual", "starts_at": monday.isoformat(), "ends_at": monday.isoformat()},
        headers=EMPLOYEE_HEADERS,
    )
    request_id = resp.json()["id"]
    await async_client.post(
        "/employees/EMP-001/leave-balance",
        json={"leave_type": "Casual", "amount": 5, "operation": "subtract"},
        headers=MANAGER_HEADERS,
    )

    resp = await async_client.patch(
        f"/time-offs/{request_id}/review",
        json={"status": "Approved"},
        headers=MANAGER_HEADERS,
    )
    assert resp.status_code == 400

    resp = await async_client.get(AUDIT_URL, params={"entity_id": request_id}, headers=MANAGER_HEADERS)
    assert [e["action"] for e in resp.json()["items"]] == ["CREATE"]


async def test_audit_log_pagination(async_client: AsyncClient, approved_request: dict) -> None:
    resp = await async_client.get(AUDIT_URL, params={"limit": 1, "offset": 3}, headers=MANAGER_HEADERS)
    data = resp.json()
    assert data["total"] == 4
    assert data["offset"] == 3
    assert data["limit"] == 1
    assert len(data["items"]) == 1


async def test_audit_log_requires_manager(async_client: AsyncClient, approved_request: dict) -> None:
    resp = await async_client.get(AUDIT_URL, headers=EMPLOYEE_HEADERS)
    assert resp.status_code == 403
    assert resp.json()["code"] == "FORBIDDEN"


async def test_audit_log_date_range(async_client: AsyncClient, approved_request: dict) -> None:
    today = datetime.now(UTC).date()

    resp = await async_client.get(
        AUDIT_URL,
        params={"start_date": today.isoformat(), "end_date": today.isoformat()},
        headers=MANAGER_HEADERS,
    )
    assert resp.json()["total"] == 4

    resp = await async_client.get(
        AUDIT_URL,
        params={"end_date": (today - timedelta(days=1)).isoformat()},
        headers=MANAGER_HEADERS,
    )
    assert resp.json()["total"] == 0

    resp = await async_client.get(
        AUDIT_URL,
        params={"start_date": today.isoformat(), "end_date": (today - timedelta(days=1)).isoformat()},
        headers=MANAGER_HEADERS,
    )
    assert resp.status_code == 400
    assert resp.json()["code"] == "INVALID_INPUT"
