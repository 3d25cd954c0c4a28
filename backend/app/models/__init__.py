from sqlmodel import SQLModel

from app.models.audit import AuditLog
from app.models.base import OrganizationScoped, TimestampMixin, UUIDBase
from app.models.catalog import Location, Role
from app.models.employee import Employee
from app.models.enums import (
    AuditAction,
    AuditEntityType,
    BalanceAction,
    RequestStatus,
    RequestType,
    SystemRole,
)
from app.models.request import TimeOffRequest

__all__ = [
    "AuditAction",
    "AuditEntityType",
    "AuditLog",
    "BalanceAction",
    "Employee",
    "Location",
    "OrganizationScoped",
    "RequestStatus",
    "RequestType",
    "Role",
    "SQLModel",
    "SystemRole",
    "TimeOffRequest",
    "TimestampMixin",
    "UUIDBase",
]
