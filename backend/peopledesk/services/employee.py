"""Employee directory: lookup by id or employee number, onboarding and leave balances.

Leave balances change only through :func:`update_balance`, a single guarded
UPDATE that refuses to take a balance below zero. Callers own the transaction.
"""

from __future__ import annotations

import logging
import uuid
from collections import defaultdict
from typing import TYPE_CHECKING

from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from peopledesk.config import get_settings
from peopledesk.exceptions import InsufficientBalanceError, InvalidInputError, NotFoundError
from peopledesk.models.balance import EmployeeLeaveBalance
from peopledesk.models.base import now_utc
from peopledesk.models.employee import Employee
from peopledesk.models.enums import (
    AuditAction,
    AuditEntityType,
    BalanceOperation,
    ContractType,
    EmployeeRole,
    EmploymentStatus,
    TimeOffType,
)
from peopledesk.schemas.employee import EmployeeListResponse, EmployeeResponse, LeaveBalance
from peopledesk.services.audit import balance_audit_dict, model_to_audit_dict, write_audit_log

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from peopledesk.schemas.auth import AuthContext
    from peopledesk.schemas.employee import AdjustLeaveBalanceRequest, CreateEmployeeRequest

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------


def parse_employee_ref(ref: str | uuid.UUID) -> uuid.UUID | None:
    """Return the UUID a reference names, or None when it is an employee number."""
    if isinstance(ref, uuid.UUID):
        return ref
    try:
        return uuid.UUID(ref.strip())
    except ValueError:
        return None


async def find_employee(
    session: AsyncSession,
    ref: str | uuid.UUID,
    *,
    for_update: bool = False,
) -> Employee | None:
    """Resolve a reference by primary id when it is a UUID, otherwise by employee number."""
    employee_id = parse_employee_ref(ref)
    query = select(Employee)
    if employee_id is not None:
        query = query.where(col(Employee.id) == employee_id)
    else:
        query = query.where(col(Employee.employee_number) == str(ref).strip())
    if for_update:
        query = query.with_for_update()

    result = await session.execute(query)
    return result.scalar_one_or_none()


async def get_employee_or_404(
    session: AsyncSession,
    ref: str | uuid.UUID,
    *,
    label: str = "Employee",
    for_update: bool = False,
) -> Employee:
    """Resolve a reference. Raises 404 if nobody matches."""
    employee = await find_employee(session, ref, for_update=for_update)
    if employee is None:
        raise NotFoundError(f"{label} with ID {ref} not found")
    return employee


async def resolve_actor_id(session: AsyncSession, auth: AuthContext) -> uuid.UUID:
    """Employee id of the caller.

    A caller that is not in the directory yet is accepted when its reference is
    a UUID, so the first manager can onboard the rest of the organization.
    """
    actor = await find_employee(session, auth.user_id)
    if actor is not None:
        return actor.id
    actor_id = parse_employee_ref(auth.user_id)
    if actor_id is None:
        raise NotFoundError(f"Employee with ID {auth.user_id} not found")
    return actor_id


# ---------------------------------------------------------------------------
# Leave balances
# ---------------------------------------------------------------------------


async def _fetch_balances(
    session: AsyncSession,
    employee_ids: list[uuid.UUID],
) -> dict[uuid.UUID, dict[str, int]]:
    """Read current balances for several employees in one query."""
    balances: dict[uuid.UUID, dict[str, int]] = defaultdict(dict)
    if not employee_ids:
        return balances
    result = await session.execute(
        select(
            col(EmployeeLeaveBalance.employee_id),
            col(EmployeeLeaveBalance.leave_type),
            col(EmployeeLeaveBalance.days),
        ).where(col(EmployeeLeaveBalance.employee_id).in_(employee_ids))
    )
    for employee_id, leave_type, days in result.all():
        balances[employee_id][TimeOffType(leave_type).balance_key] = int(days)
    return balances


def _to_leave_balance(raw: dict[str, int]) -> LeaveBalance:
    return LeaveBalance(
        annual=raw.get(TimeOffType.ANNUAL.balance_key, 0),
        sick=raw.get(TimeOffType.SICK.balance_key, 0),
        casual=raw.get(TimeOffType.CASUAL.balance_key, 0),
    )


async def get_leave_balance(session: AsyncSession, employee_id: uuid.UUID) -> LeaveBalance:
    """Current balance of every leave type for one employee."""
    balances = await _fetch_balances(session, [employee_id])
    return _to_leave_balance(balances.get(employee_id, {}))


async def update_balance(
    session: AsyncSession,
    employee_id: uuid.UUID,
    leave_type: TimeOffType,
    delta: int,
) -> int:
    """Atomically add ``delta`` days to one balance and return the new value.

    The WHERE clause carries the non-negative guard, so a concurrent debit can
    never push the balance below zero. Does not commit.
    """
    result = await session.execute(
        update(EmployeeLeaveBalance)
        .where(
            col(EmployeeLeaveBalance.employee_id) == employee_id,
            col(EmployeeLeaveBalance.leave_type) == leave_type.value,
            col(EmployeeLeaveBalance.days) + delta >= 0,
        )
        .values(
            days=col(EmployeeLeaveBalance.days) + delta,
            version=col(EmployeeLeaveBalance.version) + 1,
            updated_at=now_utc(),
        )
        .execution_options(synchronize_session=False)
    )

    current = await session.execute(
        select(col(EmployeeLeaveBalance.days)).where(
            col(EmployeeLeaveBalance.employee_id) == employee_id,
            col(EmployeeLeaveBalance.leave_type) == leave_type.value,
        )
    )
    days = current.scalar_one_or_none()
    if days is None:
        raise NotFoundError(f"No {leave_type.balance_key} leave balance for employee {employee_id}")

    if result.rowcount == 0:  # type: ignore[attr-defined]
        raise InsufficientBalanceError(
            f"Insufficient {leave_type.balance_key} leave balance. Available: {days}, Required: {-delta}"
        )
    return int(days)


# ---------------------------------------------------------------------------
# Read path
# ---------------------------------------------------------------------------


def _build_employee_response(employee: Employee, balance: LeaveBalance) -> EmployeeResponse:
    """Map an employee model and its balances to the response schema."""
    return EmployeeResponse(
        id=employee.id,
        employee_number=employee.employee_number,
        first_name=employee.first_name,
        last_name=employee.last_name,
        email=employee.email,
        job_title=employee.job_title,
        department=employee.department,
        role=EmployeeRole(employee.role),
        employment_status=EmploymentStatus(employee.employment_status),
        contract_type=ContractType(employee.contract_type),
        work_location=employee.work_location,
        reports_to=employee.reports_to,
        date_of_joining=employee.date_of_joining,
        leave_balance=balance,
        created_at=employee.created_at,
    )


async def _build_employee_list(session: AsyncSession, employees: list[Employee], total: int) -> EmployeeListResponse:
    balances = await _fetch_balances(session, [e.id for e in employees])
    return EmployeeListResponse(
        items=[_build_employee_response(e, _to_leave_balance(balances.get(e.id, {}))) for e in employees],
        total=total,
    )


async def get_employee(session: AsyncSession, ref: str) -> EmployeeResponse:
    """Get a single employee with current leave balances."""
    employee = await get_employee_or_404(session, ref)
    return _build_employee_response(employee, await get_leave_balance(session, employee.id))


async def list_employees(
    session: AsyncSession,
    *,
    department: str | None = None,
    role: EmployeeRole | None = None,
    employment_status: EmploymentStatus | None = None,
    search: str | None = None,
    offset: int = 0,
    limit: int = 10,
) -> EmployeeListResponse:
    """List employees with optional filters, newest first.

    ``search`` is a case-insensitive substring match on first name, last name or email.
    """
    filters = []
    if department is not None:
        filters.append(col(Employee.department) == department)
    if role is not None:
        filters.append(col(Employee.role) == role.value)
    if employment_status is not None:
        filters.append(col(Employee.employment_status) == employment_status.value)
    if search:
        pattern = f"%{search}%"
        filters.append(
            or_(
                col(Employee.first_name).ilike(pattern),
                col(Employee.last_name).ilike(pattern),
                col(Employee.email).ilike(pattern),
            )
        )

    count_result = await session.execute(select(func.count()).select_from(Employee).where(*filters))
    total = count_result.scalar_one()

    result = await session.execute(
        select(Employee).where(*filters).order_by(col(Employee.created_at).desc()).offset(offset).limit(limit)
    )
    return await _build_employee_list(session, list(result.scalars().all()), total)


async def list_direct_reports(session: AsyncSession, ref: str) -> EmployeeListResponse:
    """Employees whose ``reports_to`` points at the given manager."""
    manager = await get_employee_or_404(session, ref)
    result = await session.execute(
        select(Employee).where(col(Employee.reports_to) == manager.id).order_by(col(Employee.created_at).desc())
    )
    reports = list(result.scalars().all())
    return await _build_employee_list(session, reports, len(reports))


# ---------------------------------------------------------------------------
# Write path
# ---------------------------------------------------------------------------


async def create_employee(
    session: AsyncSession,
    auth: AuthContext,
    payload: CreateEmployeeRequest,
) -> EmployeeResponse:
    """Onboard an employee and seed their leave balances.

    Balances default to the configured allowance unless the payload overrides them.
    """
    actor_id = await resolve_actor_id(session, auth)

    existing = await session.execute(
        select(col(Employee.id)).where(col(Employee.employee_number) == payload.employee_number)
    )
    if existing.scalar_one_or_none() is not None:
        raise InvalidInputError(f"Employee number {payload.employee_number} already exists")

    reports_to: uuid.UUID | None = None
    if payload.reports_to is not None:
        manager = await get_employee_or_404(session, payload.reports_to, label="Manager")
        reports_to = manager.id

    employee = Employee(
        employee_number=payload.employee_number,
        first_name=payload.first_name,
        last_name=payload.last_name,
        email=payload.email,
        job_title=payload.job_title,
        department=payload.department,
        role=payload.role.value,
        employment_status=payload.employment_status.value,
        contract_type=payload.contract_type.value,
        work_location=payload.work_location,
        reports_to=reports_to,
        date_of_joining=payload.date_of_joining,
    )
    session.add(employee)

    settings = get_settings()
    override = payload.leave_balance
    defaults = {
        TimeOffType.ANNUAL: settings.default_annual_leave_days,
        TimeOffType.SICK: settings.default_sick_leave_days,
        TimeOffType.CASUAL: settings.default_casual_leave_days,
    }
    for leave_type, default_days in defaults.items():
        days = getattr(override, leave_type.balance_key) if override is not None else None
        session.add(
            EmployeeLeaveBalance(
                employee_id=employee.id,
                leave_type=leave_type.value,
                days=default_days if days is None else days,
            )
        )

    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        raise InvalidInputError(f"Employee number {payload.employee_number} already exists") from None

    await write_audit_log(
        session,
        actor_id=actor_id,
        entity_type=AuditEntityType.EMPLOYEE,
        entity_id=employee.id,
        action=AuditAction.CREATE,
        after_json=model_to_audit_dict(employee),
    )

    await session.commit()
    logger.info("Employee %s onboarded as %s", employee.employee_number, employee.id)
    return _build_employee_response(employee, await get_leave_balance(session, employee.id))


async def adjust_leave_balance(
    session: AsyncSession,
    auth: AuthContext,
    ref: str,
    payload: AdjustLeaveBalanceRequest,
) -> EmployeeResponse:
    """Managerial add/subtract on one leave balance; never goes below zero."""
    actor_id = await resolve_actor_id(session, auth)
    employee = await get_employee_or_404(session, ref, for_update=True)

    before = await get_leave_balance(session, employee.id)
    delta = payload.amount if payload.operation == BalanceOperation.ADD else -payload.amount
    new_days = await update_balance(session, employee.id, payload.leave_type, delta)

    await write_audit_log(
        session,
        actor_id=actor_id,
        entity_type=AuditEntityType.LEAVE_BALANCE,
        entity_id=employee.id,
        action=AuditAction.ADJUST,
        before_json=balance_audit_dict(payload.leave_type, before.for_type(payload.leave_type)),
        after_json=balance_audit_dict(payload.leave_type, new_days, reason=payload.reason),
    )

    await session.commit()
    logger.info(
        "Leave balance %s for employee %s adjusted by %+d to %d",
        payload.leave_type.value,
        employee.employee_number,
        delta,
        new_days,
    )
    return _build_employee_response(employee, await get_leave_balance(session, employee.id))
