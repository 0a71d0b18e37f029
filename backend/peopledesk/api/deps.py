# ruff: noqa: B008
from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Header

from peopledesk.exceptions import ForbiddenError
from peopledesk.models.enums import EmployeeRole
from peopledesk.schemas.auth import AuthContext


async def get_auth_context(
    x_user_id: str = Header(min_length=1, max_length=64),
    x_role: EmployeeRole = Header(default=EmployeeRole.EMPLOYEE),
) -> AuthContext:
    """Extract dev auth context from request headers."""
    return AuthContext(user_id=x_user_id.strip(), role=x_role)


AuthDep = Annotated[AuthContext, Depends(get_auth_context)]


async def require_manager(
    auth: AuthDep,
) -> AuthContext:
    """Require the Manager role for the request."""
    if not auth.is_manager:
        raise ForbiddenError("Manager access required")
    return auth


ManagerDep = Annotated[AuthContext, Depends(require_manager)]
