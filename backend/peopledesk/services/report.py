"""Audit trail queries for managers."""

from __future__ import annotations

from datetime import UTC, date, datetime, time, timedelta
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlmodel import col

from peopledesk.exceptions import InvalidInputError
from peopledesk.models.audit import AuditLog
from peopledesk.schemas.report import AuditLogEntryResponse, AuditLogListResponse

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession

    from peopledesk.models.enums import AuditAction, AuditEntityType


def _start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=UTC)


async def query_audit_log(
    session: AsyncSession,
    *,
    entity_type: AuditEntityType | None = None,
    entity_id: uuid.UUID | None = None,
    action: AuditAction | None = None,
    actor_id: uuid.UUID | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    offset: int = 0,
    limit: int = 50,
) -> AuditLogListResponse:
    """Audit entries matching every given filter, newest first.

    ``start_date`` and ``end_date`` are inclusive UTC calendar days.
    """
    if start_date is not None and end_date is not None and start_date > end_date:
        raise InvalidInputError("start_date must not be after end_date")

    filters = []
    if entity_type is not None:
        filters.append(col(AuditLog.entity_type) == entity_type.value)
    if entity_id is not None:
        filters.append(col(AuditLog.entity_id) == entity_id)
    if action is not None:
        filters.append(col(AuditLog.action) == action.value)
    if actor_id is not None:
        filters.append(col(AuditLog.actor_id) == actor_id)
    if start_date is not None:
        filters.append(col(AuditLog.created_at) >= _start_of_day(start_date))
    if end_date is not None:
        filters.append(col(AuditLog.created_at) < _start_of_day(end_date + timedelta(days=1)))

    total = (await session.execute(select(func.count()).select_from(AuditLog).where(*filters))).scalar_one()
    result = await session.execute(
        select(AuditLog)
        .where(*filters)
        .order_by(col(AuditLog.created_at).desc(), col(AuditLog.id))
        .offset(offset)
        .limit(limit)
    )

    return AuditLogListResponse(
        items=[AuditLogEntryResponse.model_validate(entry) for entry in result.scalars().all()],
        total=total,
        offset=offset,
        limit=limit,
    )
