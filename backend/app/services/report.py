"""Reporting service: audit log queries, dashboard counts, staff availability, and request exports."""

from __future__ import annotations

import math
from calendar import monthrange
from datetime import UTC, date, datetime, time, timedelta
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlmodel import col

from app.exceptions import NotFoundError
from app.models.audit import AuditLog
from app.models.base import now_utc
from app.models.catalog import Location
from app.models.employee import Employee
from app.models.enums import RequestStatus, RequestType
from app.models.request import TimeOffRequest
from app.schemas.report import (
    AuditLogEntryResponse,
    AuditLogListResponse,
    DailyAvailability,
    DashboardStatsResponse,
    RequestExportResponse,
    RequestExportRow,
    ShortageDay,
    StaffAvailabilityResponse,
)

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession

ALL_LOCATIONS = "All Locations"
SHORTAGE_THRESHOLD = 50
MAX_SHORTAGE_DAYS = 5


def _start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=UTC)


async def query_audit_log(
    session: AsyncSession,
    organization_id: uuid.UUID,
    *,
    entity_type: str | None = None,
    entity_id: uuid.UUID | None = None,
    action: str | None = None,
    actor_id: uuid.UUID | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    offset: int = 0,
    limit: int = 50,
) -> AuditLogListResponse:
    """Query audit log entries with optional filters."""
    filters = [col(AuditLog.organization_id) == organization_id]

    if entity_type is not None:
        filters.append(col(AuditLog.entity_type) == entity_type)
    if entity_id is not None:
        filters.append(col(AuditLog.entity_id) == entity_id)
    if action is not None:
        filters.append(col(AuditLog.action) == action)
    if actor_id is not None:
        filters.append(col(AuditLog.actor_id) == actor_id)
    if start_date is not None:
        filters.append(col(AuditLog.created_at) >= _start_of_day(start_date))
    if end_date is not None:
        # end_date is inclusive: keep everything logged before the next midnight.
        filters.append(col(AuditLog.created_at) < _start_of_day(end_date + timedelta(days=1)))

    count_result = await session.execute(select(func.count()).select_from(AuditLog).where(*filters))
    total = count_result.scalar_one()

    result = await session.execute(
        select(AuditLog).where(*filters).order_by(col(AuditLog.created_at).desc()).offset(offset).limit(limit)
    )
    entries = list(result.scalars().all())

    return AuditLogListResponse(
        items=[
            AuditLogEntryResponse(
                id=e.id,
                organization_id=e.organization_id,
                actor_id=e.actor_id,
                entity_type=e.entity_type,
                entity_id=e.entity_id,
                action=e.action,
                before_json=e.before_json,
                after_json=e.after_json,
                created_at=e.created_at,
            )
            for e in entries
        ],
        total=total,
    )


async def get_dashboard_stats(
    session: AsyncSession,
    organization_id: uuid.UUID,
    today: date | None = None,
) -> DashboardStatsResponse:
    """Count requests by status, headcount, and staff not on approved leave today."""
    today = today or now_utc().date()
    status_result = await session.execute(
        select(col(TimeOffRequest.status), func.count())
        .where(col(TimeOffRequest.organization_id) == organization_id)
        .group_by(col(TimeOffRequest.status))
    )
    by_status = {row[0]: int(row[1]) for row in status_result}

    employee_result = await session.execute(
        select(func.count()).select_from(Employee).where(col(Employee.organization_id) == organization_id)
    )
    employee_count = employee_result.scalar_one()

    on_leave_result = await session.execute(
        select(func.count(func.distinct(col(TimeOffRequest.employee_id)))).where(
            col(TimeOffRequest.organization_id) == organization_id,
            col(TimeOffRequest.status) == RequestStatus.APPROVED.value,
            col(TimeOffRequest.start_date) <= today,
            func.coalesce(col(TimeOffRequest.end_date), col(TimeOffRequest.start_date)) >= today,
        )
    )

    return DashboardStatsResponse(
        pending_count=by_status.get(RequestStatus.PENDING.value, 0),
        approved_count=by_status.get(RequestStatus.APPROVED.value, 0),
        denied_count=by_status.get(RequestStatus.DENIED.value, 0),
        employee_count=employee_count,
        available_staff=max(0, employee_count - on_leave_result.scalar_one()),
    )


async def get_staff_availability(
    session: AsyncSession,
    organization_id: uuid.UUID,
    month_start: date,
    location_id: uuid.UUID | None = None,
) -> StaffAvailabilityResponse:
    """Daily staffing for one month, plus the first days at or below half strength.

    Only approved DAYS_OFF and SICK_LEAVE requests take someone off the floor.
    An organization (or location) with no employees yields no days at all.
    """
    location_name = ALL_LOCATIONS
    employee_filters = [col(Employee.organization_id) == organization_id]
    if location_id is not None:
        location = await session.get(Location, location_id)
        if location is None or location.organization_id != organization_id:
            raise NotFoundError("Location not found")
        location_name = location.name
        employee_filters.append(col(Employee.location_id) == location_id)

    month_start = month_start.replace(day=1)
    month_end = month_start.replace(day=monthrange(month_start.year, month_start.month)[1])
    response = StaffAvailabilityResponse(
        month=month_start.strftime("%Y-%m"),
        location_id=location_id,
        location_name=location_name,
        days=[],
        shortages=[],
    )

    total_result = await session.execute(select(func.count()).select_from(Employee).where(*employee_filters))
    total = total_result.scalar_one()
    if total == 0:
        return response

    leave_result = await session.execute(
        select(
            col(TimeOffRequest.employee_id),
            col(TimeOffRequest.start_date),
            func.coalesce(col(TimeOffRequest.end_date), col(TimeOffRequest.start_date)),
        )
        .join(Employee, col(Employee.id) == col(TimeOffRequest.employee_id))
        .where(
            *employee_filters,
            col(TimeOffRequest.status) == RequestStatus.APPROVED.value,
            col(TimeOffRequest.type).in_([RequestType.DAYS_OFF.value, RequestType.SICK_LEAVE.value]),
            col(TimeOffRequest.start_date) <= month_end,
            func.coalesce(col(TimeOffRequest.end_date), col(TimeOffRequest.start_date)) >= month_start,
        )
    )
    leaves = list(leave_result.all())

    day = month_start
    while day <= month_end:
        away = {employee_id for employee_id, start, end in leaves if start <= day <= end}
        available = max(0, total - len(away))
        # Half rounds up, so 1 of 2 available is 50%.
        percentage = math.floor(available * 100 / total + 0.5)
        response.days.append(
            DailyAvailability(day=day, total_employees=total, available_staff=available, percentage=percentage)
        )
        if percentage <= SHORTAGE_THRESHOLD and len(response.shortages) < MAX_SHORTAGE_DAYS:
            response.shortages.append(
                ShortageDay(
                    day=day,
                    employees_short=total - available,
                    total_employees=total,
                    location_name=location_name,
                )
            )
        day += timedelta(days=1)

    return response


async def export_requests(
    session: AsyncSession,
    organization_id: uuid.UUID,
    *,
    type_filter: RequestType | None = None,
    status_filter: RequestStatus | None = None,
    location_id: uuid.UUID | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    offset: int = 0,
    limit: int = 50,
) -> RequestExportResponse:
    """Flatten requests into export rows with employee, location and processor names.

    ``start_date``/``end_date`` keep requests that begin within the window.
    """
    filters = [col(TimeOffRequest.organization_id) == organization_id]

    if type_filter is not None:
        filters.append(col(TimeOffRequest.type) == type_filter.value)
    if status_filter is not None:
        filters.append(col(TimeOffRequest.status) == status_filter.value)
    if location_id is not None:
        filters.append(col(Employee.location_id) == location_id)
    if start_date is not None:
        filters.append(col(TimeOffRequest.start_date) >= start_date)
    if end_date is not None:
        filters.append(col(TimeOffRequest.start_date) <= end_date)

    joined = (
        select(TimeOffRequest, Employee, col(Location.name).label("location_name"))
        .join(Employee, col(Employee.id) == col(TimeOffRequest.employee_id))
        .outerjoin(Location, col(Location.id) == col(Employee.location_id))
        .where(*filters)
    )

    count_result = await session.execute(select(func.count()).select_from(joined.subquery()))
    total = count_result.scalar_one()

    result = await session.execute(
        joined.order_by(col(TimeOffRequest.created_at).desc()).offset(offset).limit(limit)
    )
    rows = list(result.all())

    processor_ids = {row[0].processed_by for row in rows if row[0].processed_by is not None}
    processor_names: dict[uuid.UUID, str] = {}
    if processor_ids:
        names_result = await session.execute(
            select(col(Employee.id), col(Employee.first_name), col(Employee.last_name)).where(
                col(Employee.id).in_(processor_ids)
            )
        )
        processor_names = {r.id: f"{r.first_name} {r.last_name}" for r in names_result}

    items: list[RequestExportRow] = []
    for request, employee, location_name in rows:
        processed_by = None
        if request.processed_by is not None:
            # Admins are not necessarily employees; fall back to the raw id.
            processed_by = processor_names.get(request.processed_by, str(request.processed_by))
        items.append(
            RequestExportRow(
                request_id=request.id,
                created_at=request.created_at,
                employee_name=f"{employee.first_name} {employee.last_name}",
                location=location_name,
                type=RequestType(request.type).label,
                start=request.start_date,
                end=request.end_date,
                status=RequestStatus(request.status).value.capitalize(),
                days_off=request.days_off,
                hours_off=request.hours_off,
                processed_at=request.processed_at,
                processed_by=processed_by,
            )
        )

    return RequestExportResponse(items=items, total=total)
