# ruff: noqa: TC003
from __future__ import annotations

import logging
import math
import uuid
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import col

from peopledesk.exceptions import (
    AppError,
    ForbiddenError,
    InsufficientBalanceError,
    InternalError,
    InvalidInputError,
    InvalidStateError,
    NotFoundError,
    OverlapConflictError,
)
from peopledesk.models.enums import AuditAction, AuditEntityType, RequestStatus, TimeOffType
from peopledesk.models.time_off import TimeOffRequest, duration_days
from peopledesk.schemas.time_off import (
    TimeOffPage,
    TimeOffResponse,
    TimeOffStatsResponse,
    TimeOffStatusStats,
    TimeOffTypeStats,
)
from peopledesk.services.audit import model_to_audit_dict, write_audit_log
from peopledesk.services.employee import find_employee, get_employee_or_404, get_leave_balance, update_balance

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from peopledesk.schemas.auth import AuthContext
    from peopledesk.schemas.time_off import CreateTimeOffPayload, ReviewTimeOffPayload, TimeOffQueryParams

logger = logging.getLogger(__name__)

_REVIEW_ACTIONS = {
    RequestStatus.APPROVED: AuditAction.APPROVE,
    RequestStatus.REJECTED: AuditAction.REJECT,
}


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _today() -> date:
    return datetime.now(UTC).date()


def _build_time_off_response(request: TimeOffRequest) -> TimeOffResponse:
    """Map a request model to its response schema."""
    return TimeOffResponse(
        id=request.id,
        employee_id=request.employee_id,
        time_off_type=TimeOffType(request.time_off_type),
        status=RequestStatus(request.status),
        starts_at=request.starts_at,
        ends_at=request.ends_at,
        duration_days=request.duration_days,
        reason=request.reason,
        reviewed_by=request.reviewed_by,
        reviewed_at=request.reviewed_at,
        review_note=request.review_note,
        created_at=request.created_at,
        updated_at=request.updated_at,
    )


async def _get_request_or_404(
    session: AsyncSession,
    request_id: uuid.UUID,
    *,
    for_update: bool = False,
) -> TimeOffRequest:
    """Fetch a request by ID. Raises 404 if not found."""
    query = select(TimeOffRequest).where(col(TimeOffRequest.id) == request_id)
    if for_update:
        query = query.with_for_update()
    result = await session.execute(query)
    request = result.scalar_one_or_none()
    if request is None:
        raise NotFoundError("Time off request not found")
    return request


def _ensure_transition(request: TimeOffRequest, target: RequestStatus, verb: str) -> None:
    """Raise unless the request's current status may move to ``target``."""
    current = RequestStatus(request.status)
    if not current.can_transition_to(target):
        raise InvalidStateError(f"Cannot {verb} {current.value.lower()} time off request")


async def find_overlapping(
    session: AsyncSession,
    employee_id: uuid.UUID,
    starts_at: date,
    ends_at: date,
    exclude_request_id: uuid.UUID | None = None,
) -> TimeOffRequest | None:
    """Return a non-rejected request of this employee sharing at least one day with the range.

    Inclusive ranges overlap when existing.starts_at <= ends_at AND
    existing.ends_at >= starts_at.
    """
    query = select(TimeOffRequest).where(
        col(TimeOffRequest.employee_id) == employee_id,
        col(TimeOffRequest.status) != RequestStatus.REJECTED.value,
        col(TimeOffRequest.starts_at) <= ends_at,
        col(TimeOffRequest.ends_at) >= starts_at,
    )
    if exclude_request_id is not None:
        query = query.where(col(TimeOffRequest.id) != exclude_request_id)

    result = await session.execute(query.limit(1))
    return result.scalars().first()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def create_time_off(
    session: AsyncSession,
    auth: AuthContext,
    payload: CreateTimeOffPayload,
) -> TimeOffResponse:
    """File a Pending request; the balance is only checked here, never debited.

    Flow:
    1. Resolve (and lock) the employee; a non-manager may only file for themselves
    2. Validate the date range (ordered, not in the past)
    3. Check the balance of the requested type covers the duration
    4. Reject ranges overlapping a non-rejected request
    5. Insert the request (Pending) and audit it
    6. Commit
    """
    employee_ref = payload.employee_id or auth.user_id

    # 1. Resolve employee. The row lock serializes overlap-check + insert per employee.
    employee = await get_employee_or_404(session, employee_ref, for_update=True)
    actor_id = employee.id
    if payload.employee_id is not None:
        caller = await get_employee_or_404(session, auth.user_id)
        if caller.id != employee.id and not auth.is_manager:
            raise ForbiddenError("Only managers can file time off for another employee")
        actor_id = caller.id

    # 2. Dates.
    if payload.starts_at > payload.ends_at:
        raise InvalidInputError("Start date must be before end date")
    if payload.starts_at < _today():
        raise InvalidInputError("Cannot create time-off request for past dates")

    duration = duration_days(payload.starts_at, payload.ends_at)

    # 3. Balance.
    balance = await get_leave_balance(session, employee.id)
    available = balance.for_type(payload.time_off_type)
    if available < duration:
        raise InsufficientBalanceError(
            f"Insufficient {payload.time_off_type.balance_key} leave balance. "
            f"Available: {available}, Required: {duration}"
        )

    # 4. Overlap.
    if await find_overlapping(session, employee.id, payload.starts_at, payload.ends_at) is not None:
        raise OverlapConflictError("Time-off request overlaps with an existing request")

    # 5. Insert.
    time_off = TimeOffRequest(
        employee_id=employee.id,
        time_off_type=payload.time_off_type.value,
        status=RequestStatus.PENDING.value,
        starts_at=payload.starts_at,
        ends_at=payload.ends_at,
        duration_days=duration,
        reason=payload.reason,
    )
    session.add(time_off)
    await session.flush()

    await write_audit_log(
        session,
        actor_id=actor_id,
        entity_type=AuditEntityType.TIME_OFF_REQUEST,
        entity_id=time_off.id,
        action=AuditAction.CREATE,
        after_json=model_to_audit_dict(time_off),
    )

    # 6. Commit.
    await session.commit()
    logger.info(
        "Time-off request %s created for employee %s (%s, %s..%s, %d days)",
        time_off.id,
        employee.employee_number,
        time_off.time_off_type,
        time_off.starts_at,
        time_off.ends_at,
        duration,
    )
    return _build_time_off_response(time_off)


async def get_time_off(session: AsyncSession, request_id: uuid.UUID) -> TimeOffResponse:
    """Get a single request by ID."""
    return _build_time_off_response(await _get_request_or_404(session, request_id))


async def get_time_offs(session: AsyncSession, params: TimeOffQueryParams) -> TimeOffPage:
    """List requests matching the filter, sorted and paginated.

    An ``employee_id`` that resolves to nobody yields an empty page rather than
    an error.
    """
    filters = []
    if params.status is not None:
        filters.append(col(TimeOffRequest.status) == params.status.value)
    if params.time_off_type is not None:
        filters.append(col(TimeOffRequest.time_off_type) == params.time_off_type.value)
    if params.employee_id is not None:
        employee = await find_employee(session, params.employee_id)
        if employee is None:
            return TimeOffPage(data=[], count=0, total=0, page=params.current_page(), page_count=0)
        filters.append(col(TimeOffRequest.employee_id) == employee.id)
    if params.starts_at_gte is not None:
        filters.append(col(TimeOffRequest.starts_at) >= params.starts_at_gte)
    if params.starts_at_lt is not None:
        filters.append(col(TimeOffRequest.starts_at) < params.starts_at_lt)
    if params.ends_at_gte is not None:
        filters.append(col(TimeOffRequest.ends_at) >= params.ends_at_gte)
    if params.ends_at_lt is not None:
        filters.append(col(TimeOffRequest.ends_at) < params.ends_at_lt)

    order_by = []
    for field, direction in params.sort_spec():
        column = col(getattr(TimeOffRequest, field))
        order_by.append(column.asc() if direction == "ASC" else column.desc())
    # Stable pagination when the requested keys tie.
    order_by.append(col(TimeOffRequest.id).asc())

    count_result = await session.execute(select(func.count()).select_from(TimeOffRequest).where(*filters))
    total = count_result.scalar_one()

    result = await session.execute(
        select(TimeOffRequest).where(*filters).order_by(*order_by).offset(params.skip()).limit(params.limit)
    )
    data = [_build_time_off_response(r) for r in result.scalars().all()]

    return TimeOffPage(
        data=data,
        count=len(data),
        total=total,
        page=params.current_page(),
        page_count=math.ceil(total / params.limit),
    )


async def review_time_off(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
    payload: ReviewTimeOffPayload,
) -> TimeOffResponse:
    """Approve or reject a Pending request.

    Approval re-checks the balance (it may have changed since creation) and
    debits it. Debit, status change and audit entry commit together; a storage
    failure rolls all of them back.
    """
    if payload.status not in _REVIEW_ACTIONS:
        raise InvalidInputError("Review status must be Approved or Rejected")

    time_off = await _get_request_or_404(session, request_id, for_update=True)
    reviewer = await get_employee_or_404(session, auth.user_id, label="Reviewer")

    if reviewer.id == time_off.employee_id:
        raise ForbiddenError("Cannot review your own time off request")

    _ensure_transition(time_off, payload.status, "review")
    before_dict = model_to_audit_dict(time_off)

    try:
        if payload.status == RequestStatus.APPROVED:
            leave_type = TimeOffType(time_off.time_off_type)
            duration = duration_days(time_off.starts_at, time_off.ends_at)
            await update_balance(session, time_off.employee_id, leave_type, -duration)

        time_off.status = payload.status.value
        time_off.reviewed_by = reviewer.id
        time_off.reviewed_at = datetime.now(UTC)
        time_off.review_note = payload.review_note
        await session.flush()

        await write_audit_log(
            session,
            actor_id=reviewer.id,
            entity_type=AuditEntityType.TIME_OFF_REQUEST,
            entity_id=time_off.id,
            action=_REVIEW_ACTIONS[payload.status],
            before_json=before_dict,
            after_json=model_to_audit_dict(time_off),
        )
        await session.commit()
    except AppError:
        await session.rollback()
        raise
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.exception("Error reviewing time off request %s", request_id)
        raise InternalError("Failed to review time-off request") from exc

    logger.info(
        "Time off request %s %s by %s",
        time_off.id,
        time_off.status.lower(),
        reviewer.employee_number,
    )
    return _build_time_off_response(time_off)


async def cancel_time_off(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
) -> TimeOffResponse:
    """Withdraw one's own Pending request. It ends up Rejected; no balance effect."""
    time_off = await _get_request_or_404(session, request_id, for_update=True)
    employee = await get_employee_or_404(session, auth.user_id)

    if employee.id != time_off.employee_id:
        raise ForbiddenError("Not authorized to cancel this time off request")

    _ensure_transition(time_off, RequestStatus.REJECTED, "cancel")
    before_dict = model_to_audit_dict(time_off)
    time_off.status = RequestStatus.REJECTED.value
    await session.flush()

    await write_audit_log(
        session,
        actor_id=employee.id,
        entity_type=AuditEntityType.TIME_OFF_REQUEST,
        entity_id=time_off.id,
        action=AuditAction.CANCEL,
        before_json=before_dict,
        after_json=model_to_audit_dict(time_off),
    )

    await session.commit()
    logger.info("Time off request %s cancelled by employee %s", time_off.id, employee.employee_number)
    return _build_time_off_response(time_off)


async def get_time_off_stats(
    session: AsyncSession,
    employee_ref: str | None = None,
) -> TimeOffStatsResponse:
    """Count and total days of requests, grouped by status and then by type.

    An ``employee_ref`` that does not resolve raises ``NotFoundError``.
    """
    filters = []
    employee_id: uuid.UUID | None = None
    if employee_ref is not None:
        employee = await get_employee_or_404(session, employee_ref)
        employee_id = employee.id
        filters.append(col(TimeOffRequest.employee_id) == employee_id)

    result = await session.execute(
        select(
            col(TimeOffRequest.status),
            col(TimeOffRequest.time_off_type),
            func.count().label("request_count"),
            func.coalesce(func.sum(col(TimeOffRequest.duration_days)), 0).label("total_days"),
        )
        .where(*filters)
        .group_by(col(TimeOffRequest.status), col(TimeOffRequest.time_off_type))
    )

    grouped: dict[RequestStatus, list[TimeOffTypeStats]] = {}
    for status_value, time_off_type, request_count, total_days in result.all():
        grouped.setdefault(RequestStatus(status_value), []).append(
            TimeOffTypeStats(type=TimeOffType(time_off_type), count=int(request_count), days=int(total_days))
        )

    items: list[TimeOffStatusStats] = []
    for status in RequestStatus:
        types = grouped.get(status)
        if not types:
            continue
        types.sort(key=lambda t: list(TimeOffType).index(t.type))
        items.append(
            TimeOffStatusStats(
                status=status,
                types=types,
                total_count=sum(t.count for t in types),
                total_days=sum(t.days for t in types),
            )
        )

    return TimeOffStatsResponse(employee_id=employee_id, items=items)
