from __future__ import annotations

import enum


class TimeOffType(enum.StrEnum):
    """Leave category; each has its own balance bucket."""

    ANNUAL = "Annual"
    SICK = "Sick"
    CASUAL = "Casual"

    @property
    def balance_key(self) -> str:
        """Lower-case key used in the employee's leave balance mapping."""
        return self.value.lower()


class RequestStatus(enum.StrEnum):
    """State machine for time-off requests.

    Pending is the only non-terminal state. Cancellation by the owner also
    lands in Rejected.
    """

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"

    @property
    def is_terminal(self) -> bool:
        return not ALLOWED_TRANSITIONS.get(self)

    def can_transition_to(self, target: RequestStatus) -> bool:
        return target in ALLOWED_TRANSITIONS.get(self, frozenset())


ALLOWED_TRANSITIONS: dict[RequestStatus, frozenset[RequestStatus]] = {
    RequestStatus.PENDING: frozenset({RequestStatus.APPROVED, RequestStatus.REJECTED}),
}


class EmployeeRole(enum.StrEnum):
    MANAGER = "Manager"
    EMPLOYEE = "Employee"


class EmploymentStatus(enum.StrEnum):
    ACTIVE = "Active"
    ON_LEAVE = "OnLeave"
    TERMINATED = "Terminated"


class ContractType(enum.StrEnum):
    FULL_TIME = "FullTime"
    PART_TIME = "PartTime"
    CONTRACT = "Contract"


class BalanceOperation(enum.StrEnum):
    """Direction of a managerial leave-balance adjustment."""

    ADD = "add"
    SUBTRACT = "subtract"


class AuditEntityType(enum.StrEnum):
    """Entity type recorded in the audit log."""

    EMPLOYEE = "EMPLOYEE"
    TIME_OFF_REQUEST = "TIME_OFF_REQUEST"
    LEAVE_BALANCE = "LEAVE_BALANCE"


class AuditAction(enum.StrEnum):
    """Action recorded in the audit log."""

    CREATE = "CREATE"
    APPROVE = "APPROVE"
    REJECT = "REJECT"
    CANCEL = "CANCEL"
    ADJUST = "ADJUST"
