from sqlmodel import SQLModel

from peopledesk.models.audit import AuditLog
from peopledesk.models.balance import EmployeeLeaveBalance
from peopledesk.models.base import TimestampMixin, UpdatedAtMixin, UUIDBase
from peopledesk.models.employee import Employee
from peopledesk.models.enums import (
    AuditAction,
    AuditEntityType,
    BalanceOperation,
    ContractType,
    EmployeeRole,
    EmploymentStatus,
    RequestStatus,
    TimeOffType,
)
from peopledesk.models.time_off import TimeOffRequest

__all__ = [
    "AuditAction",
    "AuditEntityType",
    "AuditLog",
    "BalanceOperation",
    "ContractType",
    "Employee",
    "EmployeeLeaveBalance",
    "EmployeeRole",
    "EmploymentStatus",
    "RequestStatus",
    "SQLModel",
    "TimeOffRequest",
    "TimeOffType",
    "TimestampMixin",
    "UUIDBase",
    "UpdatedAtMixin",
]
