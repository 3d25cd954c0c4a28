# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid

from pydantic import BaseModel

from app.models.enums import SystemRole


class AuthContext(BaseModel):
    """Dev auth context extracted from request headers."""

    organization_id: uuid.UUID
    user_id: uuid.UUID
    role: SystemRole = SystemRole.EMPLOYEE

    @property
    def is_admin(self) -> bool:
        return self.role == SystemRole.ADMIN
