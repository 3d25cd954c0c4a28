# ruff: noqa: TC003
from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

from fastapi import status
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from app.exceptions import AppError, NotFoundError
from app.models.base import now_utc
from app.models.catalog import Location, Role
from app.models.employee import Employee
from app.models.enums import AuditAction, AuditEntityType, RequestStatus
from app.models.request import TimeOffRequest
from app.schemas.employee import BalanceResponse, EmployeeListResponse, EmployeeResponse
from app.services.audit import model_to_audit_dict, write_audit_log
from app.services.balance import SqlBalanceRepository
from app.services.transaction import run_transaction

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from app.schemas.auth import AuthContext
    from app.schemas.employee import CreateEmployeeRequest, EmployeeFields, UpdateEmployeeRequest

logger = logging.getLogger(__name__)

_DUPLICATE_EMAIL = "An account with this email already exists"


async def _lookup_names(
    session: AsyncSession,
    employees: list[Employee],
) -> tuple[dict[uuid.UUID, str], dict[uuid.UUID, str]]:
    """Resolve role and location names for a batch of employees."""
    role_ids = {e.role_id for e in employees if e.role_id is not None}
    location_ids = {e.location_id for e in employees if e.location_id is not None}

    role_names: dict[uuid.UUID, str] = {}
    if role_ids:
        result = await session.execute(select(col(Role.id), col(Role.name)).where(col(Role.id).in_(role_ids)))
        role_names = {row.id: row.name for row in result}

    location_names: dict[uuid.UUID, str] = {}
    if location_ids:
        result = await session.execute(
            select(col(Location.id), col(Location.name)).where(col(Location.id).in_(location_ids))
        )
        location_names = {row.id: row.name for row in result}

    return role_names, location_names


def _build_employee_response(
    employee: Employee,
    role_names: dict[uuid.UUID, str],
    location_names: dict[uuid.UUID, str],
) -> EmployeeResponse:
    return EmployeeResponse(
        id=employee.id,
        organization_id=employee.organization_id,
        first_name=employee.first_name,
        last_name=employee.last_name,
        email=employee.email,
        role_id=employee.role_id,
        role_name=role_names.get(employee.role_id) if employee.role_id else None,
        location_id=employee.location_id,
        location_name=location_names.get(employee.location_id) if employee.location_id else None,
        days_available=employee.days_available,
        hours_available=employee.hours_available,
        annual_days=employee.annual_days,
        annual_hours=employee.annual_hours,
        created_at=employee.created_at,
        updated_at=employee.updated_at,
    )


async def _single_response(session: AsyncSession, employee: Employee) -> EmployeeResponse:
    role_names, location_names = await _lookup_names(session, [employee])
    return _build_employee_response(employee, role_names, location_names)


async def get_employee_or_404(
    session: AsyncSession,
    organization_id: uuid.UUID,
    employee_id: uuid.UUID,
    *,
    for_update: bool = False,
) -> Employee:
    """Fetch an employee scoped to organization. Raises 404 if not found."""
    query = select(Employee).where(
        col(Employee.id) == employee_id,
        col(Employee.organization_id) == organization_id,
    )
    if for_update:
        query = query.with_for_update().execution_options(populate_existing=True)
    result = await session.execute(query)
    employee = result.scalar_one_or_none()
    if employee is None:
        raise NotFoundError("Employee not found")
    return employee


async def _verify_references(session: AsyncSession, organization_id: uuid.UUID, fields: EmployeeFields) -> None:
    """Ensure the referenced role and location exist in the same organization."""
    checks: list[tuple[type[Role] | type[Location], uuid.UUID | None, str]] = [
        (Role, fields.role_id, "Role not found"),
        (Location, fields.location_id, "Location not found"),
    ]
    for model, ref_id, message in checks:
        if ref_id is None:
            continue
        result = await session.execute(
            select(col(model.id)).where(col(model.id) == ref_id, col(model.organization_id) == organization_id)
        )
        if result.scalar_one_or_none() is None:
            raise NotFoundError(message)


def _apply_fields(employee: Employee, fields: EmployeeFields) -> None:
    employee.first_name = fields.first_name.strip()
    employee.last_name = fields.last_name.strip()
    employee.role_id = fields.role_id
    employee.location_id = fields.location_id
    employee.days_available = fields.days_available
    employee.hours_available = fields.hours_available
    employee.annual_days = fields.annual_days
    employee.annual_hours = fields.annual_hours


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def create_employee(
    session: AsyncSession,
    auth: AuthContext,
    payload: CreateEmployeeRequest,
) -> EmployeeResponse:
    """Create an employee with an opening balance."""

    async def _work(session: AsyncSession) -> Employee:
        existing = await session.execute(
            select(col(Employee.id)).where(
                col(Employee.organization_id) == auth.organization_id,
                col(Employee.email) == payload.email,
            )
        )
        if existing.scalar_one_or_none() is not None:
            raise AppError(_DUPLICATE_EMAIL, status_code=status.HTTP_409_CONFLICT)
        await _verify_references(session, auth.organization_id, payload)

        employee = Employee(
            organization_id=auth.organization_id,
            email=payload.email,
            first_name=payload.first_name,
            last_name=payload.last_name,
            created_by=auth.user_id,
        )
        _apply_fields(employee, payload)
        session.add(employee)
        try:
            await session.flush()
        except IntegrityError:
            raise AppError(_DUPLICATE_EMAIL, status_code=status.HTTP_409_CONFLICT) from None

        await write_audit_log(
            session,
            auth=auth,
            entity_type=AuditEntityType.EMPLOYEE,
            entity_id=employee.id,
            action=AuditAction.CREATE,
            after_json=model_to_audit_dict(employee),
        )
        return employee

    employee = await run_transaction(session, _work)
    await session.refresh(employee)
    logger.info("Employee %s created in organization %s", employee.id, employee.organization_id)
    return await _single_response(session, employee)


async def update_employee(
    session: AsyncSession,
    auth: AuthContext,
    employee_id: uuid.UUID,
    payload: UpdateEmployeeRequest,
) -> EmployeeResponse:
    """Update an employee's profile and balance pool.

    A manual balance edit goes through the same version compare-and-set as
    approvals, so whichever of the two commits second re-runs on fresh numbers.
    """

    async def _work(session: AsyncSession) -> Employee:
        employee = await get_employee_or_404(session, auth.organization_id, employee_id, for_update=True)
        await _verify_references(session, auth.organization_id, payload)

        before_dict = model_to_audit_dict(employee)
        if (employee.days_available, employee.hours_available) != (
            payload.days_available,
            payload.hours_available,
        ):
            await SqlBalanceRepository(session).set_balance(
                employee.id,
                payload.days_available,
                payload.hours_available,
                expected_version=employee.balance_version,
            )
            await session.refresh(employee)
        _apply_fields(employee, payload)
        employee.updated_at = now_utc()
        await session.flush()

        await write_audit_log(
            session,
            auth=auth,
            entity_type=AuditEntityType.EMPLOYEE,
            entity_id=employee.id,
            action=AuditAction.UPDATE,
            before_json=before_dict,
            after_json=model_to_audit_dict(employee),
        )
        return employee

    employee = await run_transaction(session, _work)
    await session.refresh(employee)
    return await _single_response(session, employee)


async def delete_employee(
    session: AsyncSession,
    auth: AuthContext,
    employee_id: uuid.UUID,
) -> None:
    """Delete an employee and their request history.

    Refused while the employee still has pending requests.
    """

    async def _work(session: AsyncSession) -> None:
        employee = await get_employee_or_404(session, auth.organization_id, employee_id)

        pending = await session.execute(
            select(col(TimeOffRequest.id))
            .where(
                col(TimeOffRequest.employee_id) == employee.id,
                col(TimeOffRequest.status) == RequestStatus.PENDING.value,
            )
            .limit(1)
        )
        if pending.scalar_one_or_none() is not None:
            raise AppError(
                "Cannot delete employee with pending time-off requests",
                status_code=status.HTTP_409_CONFLICT,
            )

        before_dict = model_to_audit_dict(employee)
        await session.execute(delete(TimeOffRequest).where(col(TimeOffRequest.employee_id) == employee.id))
        await session.delete(employee)
        await session.flush()

        await write_audit_log(
            session,
            auth=auth,
            entity_type=AuditEntityType.EMPLOYEE,
            entity_id=employee_id,
            action=AuditAction.DELETE,
            before_json=before_dict,
        )

    await run_transaction(session, _work)
    logger.info("Employee %s deleted", employee_id)


async def get_employee(
    session: AsyncSession,
    organization_id: uuid.UUID,
    employee_id: uuid.UUID,
) -> EmployeeResponse:
    """Get a single employee with role and location names."""
    employee = await get_employee_or_404(session, organization_id, employee_id)
    return await _single_response(session, employee)


async def list_employees(
    session: AsyncSession,
    organization_id: uuid.UUID,
) -> EmployeeListResponse:
    """List all employees for an organization, newest first."""
    result = await session.execute(
        select(Employee)
        .where(col(Employee.organization_id) == organization_id)
        .order_by(col(Employee.created_at).desc())
    )
    employees = list(result.scalars().all())
    role_names, location_names = await _lookup_names(session, employees)
    items = [_build_employee_response(e, role_names, location_names) for e in employees]
    return EmployeeListResponse(items=items, total=len(items))


async def get_employee_balance(
    session: AsyncSession,
    organization_id: uuid.UUID,
    employee_id: uuid.UUID,
) -> BalanceResponse:
    """Get the employee's remaining days and hours."""
    employee = await get_employee_or_404(session, organization_id, employee_id)
    return BalanceResponse(
        employee_id=employee.id,
        days_available=employee.days_available,
        hours_available=employee.hours_available,
        annual_days=employee.annual_days,
        annual_hours=employee.annual_hours,
        updated_at=employee.updated_at,
    )
