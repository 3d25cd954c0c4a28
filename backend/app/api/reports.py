# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid
from datetime import date, datetime

from fastapi import APIRouter, Depends, Query

from app.api.deps import AdminDep, validate_organization_scope
from app.db import SessionDep
from app.models.base import now_utc
from app.models.enums import RequestStatus, RequestType
from app.schemas.report import (
    AuditLogListResponse,
    DashboardStatsResponse,
    RequestExportResponse,
    StaffAvailabilityResponse,
)
from app.services import report as report_service

reports_router = APIRouter(
    prefix="/organizations/{organization_id}",
    tags=["reports"],
    dependencies=[Depends(validate_organization_scope)],
)


@reports_router.get(
    "/audit-log",
    response_model=AuditLogListResponse,
)
async def query_audit_log(
    organization_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
    entity_type: str | None = Query(default=None),
    entity_id: uuid.UUID | None = Query(default=None),
    action: str | None = Query(default=None),
    actor_id: uuid.UUID | None = Query(default=None),
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> AuditLogListResponse:
    """Query audit log entries with optional filters (admin only)."""
    return await report_service.query_audit_log(
        session,
        organization_id,
        entity_type=entity_type,
        entity_id=entity_id,
        action=action,
        actor_id=actor_id,
        start_date=start_date,
        end_date=end_date,
        offset=offset,
        limit=limit,
    )


@reports_router.get(
    "/reports/dashboard",
    response_model=DashboardStatsResponse,
)
async def get_dashboard_stats(
    organization_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
) -> DashboardStatsResponse:
    """Request counts by status, headcount, and staff available today (admin only)."""
    return await report_service.get_dashboard_stats(session, organization_id)


@reports_router.get(
    "/reports/availability",
    response_model=StaffAvailabilityResponse,
)
async def get_staff_availability(
    organization_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
    month: str | None = Query(default=None, pattern=r"^\d{4}-(0[1-9]|1[0-2])$"),
    location_id: uuid.UUID | None = Query(default=None),
) -> StaffAvailabilityResponse:
    """Daily staff availability for a month (YYYY-MM, default current) and its shortage days (admin only)."""
    if month is None:
        month_start = now_utc().date().replace(day=1)
    else:
        month_start = datetime.strptime(month, "%Y-%m").date()
    return await report_service.get_staff_availability(session, organization_id, month_start, location_id)


@reports_router.get(
    "/reports/requests",
    response_model=RequestExportResponse,
)
async def export_requests(
    organization_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
    type_filter: RequestType | None = Query(default=None, alias="type"),
    status_filter: RequestStatus | None = Query(default=None, alias="status"),
    location_id: uuid.UUID | None = Query(default=None),
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> RequestExportResponse:
    """Export requests as flat rows for spreadsheets (admin only)."""
    return await report_service.export_requests(
        session,
        organization_id,
        type_filter=type_filter,
        status_filter=status_filter,
        location_id=location_id,
        start_date=start_date,
        end_date=end_date,
        offset=offset,
        limit=limit,
    )
