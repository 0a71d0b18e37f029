from __future__ import annotations

from pydantic import BaseModel

from peopledesk.models.enums import EmployeeRole


class AuthContext(BaseModel):
    """Dev auth context extracted from request headers.

    ``user_id`` is an employee reference: the employee's UUID or their
    employee number.
    """

    user_id: str
    role: EmployeeRole = EmployeeRole.EMPLOYEE

    @property
    def is_manager(self) -> bool:
        return self.role == EmployeeRole.MANAGER
