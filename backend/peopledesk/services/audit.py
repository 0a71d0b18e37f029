"""Audit trail writes. Entries join the caller's transaction and commit or roll back with it."""

from __future__ import annotations

import enum
import logging
import uuid
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from peopledesk.models.audit import AuditLog

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlmodel import SQLModel

    from peopledesk.models.enums import AuditAction, AuditEntityType, TimeOffType

logger = logging.getLogger(__name__)


def to_audit_value(value: Any) -> Any:
    """Convert a single column value to something the JSON column can store."""
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, enum.Enum):
        return value.value
    return value


def model_to_audit_dict(model: SQLModel) -> dict[str, Any]:
    """Snapshot every column of a table model."""
    return {key: to_audit_value(value) for key, value in model.model_dump().items()}


def balance_audit_dict(leave_type: TimeOffType, days: int, **extra: Any) -> dict[str, Any]:
    """Snapshot of one leave balance bucket."""
    return {"leave_type": leave_type.value, "days": days, **{k: to_audit_value(v) for k, v in extra.items()}}


async def write_audit_log(
    session: AsyncSession,
    *,
    actor_id: uuid.UUID,
    entity_type: AuditEntityType,
    entity_id: uuid.UUID,
    action: AuditAction,
    before_json: dict[str, Any] | None = None,
    after_json: dict[str, Any] | None = None,
) -> AuditLog:
    entry = AuditLog(
        actor_id=actor_id,
        entity_type=entity_type.value,
        entity_id=entity_id,
        action=action.value,
        before_json=before_json,
        after_json=after_json,
    )
    session.add(entry)
    logger.debug("Audit %s %s %s by %s", action.value, entity_type.value, entity_id, actor_id)
    return entry
