# ruff: noqa: B008, TC003
from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import Depends, Header, Path, status

from app.exceptions import AppError
from app.models.enums import SystemRole
from app.schemas.auth import AuthContext


async def get_auth_context(
    x_organization_id: uuid.UUID = Header(),
    x_user_id: uuid.UUID = Header(),
    x_role: SystemRole = Header(default=SystemRole.EMPLOYEE),
) -> AuthContext:
    """Extract dev auth context from request headers."""
    return AuthContext(organization_id=x_organization_id, user_id=x_user_id, role=x_role)


AuthDep = Annotated[AuthContext, Depends(get_auth_context)]


async def require_admin(
    auth: AuthDep,
) -> AuthContext:
    """Require admin role for the request."""
    if not auth.is_admin:
        raise AppError("Admin access required", status_code=status.HTTP_403_FORBIDDEN)
    return auth


AdminDep = Annotated[AuthContext, Depends(require_admin)]


async def validate_organization_scope(
    organization_id: uuid.UUID = Path(),
    auth: AuthContext = Depends(get_auth_context),
) -> AuthContext:
    """Ensure the path organization_id matches the auth header organization_id."""
    if organization_id != auth.organization_id:
        raise AppError("Organization ID mismatch", status_code=status.HTTP_403_FORBIDDEN)
    return auth
