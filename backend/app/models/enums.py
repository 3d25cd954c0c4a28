from __future__ import annotations

import enum


class RequestType(enum.StrEnum):
    """Kind of time off being requested."""

    DAYS_OFF = "DAYS_OFF"
    HOURS_OFF = "HOURS_OFF"
    SICK_LEAVE = "SICK_LEAVE"

    @property
    def label(self) -> str:
        """Human-readable label used in exports."""
        return _REQUEST_TYPE_LABELS[self]


_REQUEST_TYPE_LABELS = {
    RequestType.DAYS_OFF: "Days Off",
    RequestType.HOURS_OFF: "Hours Off",
    RequestType.SICK_LEAVE: "Sick Leave",
}


class RequestStatus(enum.StrEnum):
    """State machine for time-off requests."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    DENIED = "DENIED"


class BalanceAction(enum.StrEnum):
    """Direction of a balance mutation driven by a request."""

    APPROVE = "APPROVE"
    RESTORE = "RESTORE"


class SystemRole(enum.StrEnum):
    """Role carried in the auth context."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class AuditEntityType(enum.StrEnum):
    """Entity type recorded in the audit log."""

    EMPLOYEE = "EMPLOYEE"
    ROLE = "ROLE"
    LOCATION = "LOCATION"
    REQUEST = "REQUEST"


class AuditAction(enum.StrEnum):
    """Action recorded in the audit log."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    APPROVE = "APPROVE"
    DENY = "DENY"
