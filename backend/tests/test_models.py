from __future__ import annotations

import uuid
from datetime import date

from peopledesk.models import (
    AuditLog,
    Employee,
    EmployeeLeaveBalance,
    SQLModel,
    TimeOffRequest,
)
from peopledesk.models.enums import RequestStatus, TimeOffType
from peopledesk.models.time_off import duration_days

EXPECTED_TABLES = {
    "audit_log",
    "employee",
    "employee_leave_balance",
    "time_off_request",
}


def test_all_tables_registered() -> None:
    assert set(SQLModel.metadata.tables.keys()) == EXPECTED_TABLES


def test_employee_instantiation_defaults() -> None:
    employee = Employee(
        employee_number="EMP-001",
        first_name="Jane",
        last_name="Doe",
        email="jane@example.com",
        job_title="Engineer",
        department="Engineering",
        date_of_joining=date(2024, 1, 15),
    )
    assert employee.id is not None
    assert employee.role == "Employee"
    assert employee.employment_status == "Active"
    assert employee.contract_type == "FullTime"
    assert employee.reports_to is None


def test_leave_balance_primary_key_and_guard() -> None:
    table = SQLModel.metadata.tables["employee_leave_balance"]
    assert [c.name for c in table.primary_key.columns] == ["employee_id", "leave_type"]
    checks = {c.name for c in table.constraints if c.name and c.name.startswith("ck_")}
    assert "ck_leave_balance_non_negative" in checks

    balance = EmployeeLeaveBalance(employee_id=uuid.uuid4(), leave_type=TimeOffType.SICK.value, days=10)
    assert balance.days == 10
    assert balance.version == 1


def test_time_off_request_defaults_to_pending() -> None:
    request = TimeOffRequest(
        employee_id=uuid.uuid4(),
        time_off_type=TimeOffType.ANNUAL.value,
        starts_at=date(2026, 3, 2),
        ends_at=date(2026, 3, 6),
        duration_days=5,
    )
    assert request.status == RequestStatus.PENDING
    assert request.reviewed_by is None
    assert request.created_at is not None
    assert request.updated_at is not None


def test_duration_days_is_inclusive() -> None:
    assert duration_days(date(2026, 3, 2), date(2026, 3, 2)) == 1
    assert duration_days(date(2026, 3, 2), date(2026, 3, 6)) == 5
    assert duration_days(date(2026, 2, 27), date(2026, 3, 2)) == 4


def test_audit_log_instantiation() -> None:
    entry = AuditLog(
        actor_id=uuid.uuid4(),
        entity_type="TIME_OFF_REQUEST",
        entity_id=uuid.uuid4(),
        action="CREATE",
        after_json={"status": "Pending"},
    )
    assert entry.before_json is None
    assert entry.after_json == {"status": "Pending"}


def test_request_status_transitions() -> None:
    assert RequestStatus.PENDING.can_transition_to(RequestStatus.APPROVED)
    assert RequestStatus.PENDING.can_transition_to(RequestStatus.REJECTED)
    assert not RequestStatus.PENDING.can_transition_to(RequestStatus.PENDING)
    assert not RequestStatus.APPROVED.can_transition_to(RequestStatus.REJECTED)
    assert not RequestStatus.REJECTED.can_transition_to(RequestStatus.APPROVED)
    assert not RequestStatus.PENDING.is_terminal
    assert RequestStatus.APPROVED.is_terminal
    assert RequestStatus.REJECTED.is_terminal


def test_time_off_type_balance_key() -> None:
    assert [t.balance_key for t in TimeOffType] == ["annual", "sick", "casual"]
