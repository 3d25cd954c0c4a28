# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel


class AuditLogEntryResponse(BaseModel):
    """Response schema for a single audit log entry."""

    id: uuid.UUID
    organization_id: uuid.UUID
    actor_id: uuid.UUID
    entity_type: str
    entity_id: uuid.UUID
    action: str
    before_json: dict[str, Any] | None
    after_json: dict[str, Any] | None
    created_at: datetime


class AuditLogListResponse(BaseModel):
    """Paginated list of audit log entries."""

    items: list[AuditLogEntryResponse]
    total: int


class DashboardStatsResponse(BaseModel):
    """Headline numbers for the admin dashboard."""

    pending_count: int
    approved_count: int
    denied_count: int
    employee_count: int
    available_staff: int


class DailyAvailability(BaseModel):
    """Staffing on one day of the month."""

    day: date
    total_employees: int
    available_staff: int
    percentage: int


class ShortageDay(BaseModel):
    """A day where at most half the staff is available."""

    day: date
    employees_short: int
    total_employees: int
    location_name: str


class StaffAvailabilityResponse(BaseModel):
    month: str
    location_id: uuid.UUID | None
    location_name: str
    days: list[DailyAvailability]
    shortages: list[ShortageDay]


class RequestExportRow(BaseModel):
    """A flattened request row ready for spreadsheet export."""

    request_id: uuid.UUID
    created_at: datetime
    employee_name: str
    location: str | None
    type: str
    start: date
    end: date | None
    status: str
    days_off: int
    hours_off: int
    processed_at: datetime | None
    processed_by: str | None


class RequestExportResponse(BaseModel):
    """Paginated request export."""

    items: list[RequestExportRow]
    total: int
