# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Response, status

from app.api.deps import AdminDep, AuthDep, validate_organization_scope
from app.db import SessionDep
from app.schemas.employee import (
    BalanceResponse,
    CreateEmployeeRequest,
    EmployeeListResponse,
    EmployeeResponse,
    UpdateEmployeeRequest,
)
from app.services import employee as employee_service

employees_router = APIRouter(
    prefix="/organizations/{organization_id}/employees",
    tags=["employees"],
    dependencies=[Depends(validate_organization_scope)],
)


@employees_router.post("", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
async def create_employee(
    payload: CreateEmployeeRequest,
    session: SessionDep,
    auth: AdminDep,
) -> EmployeeResponse:
    """Create an employee (admin only)."""
    return await employee_service.create_employee(session, auth, payload)


@employees_router.get("", response_model=EmployeeListResponse)
async def list_employees(
    session: SessionDep,
    auth: AuthDep,
) -> EmployeeListResponse:
    """List all employees of the organization."""
    return await employee_service.list_employees(session, auth.organization_id)


@employees_router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee(
    employee_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> EmployeeResponse:
    """Get a single employee."""
    return await employee_service.get_employee(session, auth.organization_id, employee_id)


@employees_router.put("/{employee_id}", response_model=EmployeeResponse)
async def update_employee(
    employee_id: uuid.UUID,
    payload: UpdateEmployeeRequest,
    session: SessionDep,
    auth: AdminDep,
) -> EmployeeResponse:
    """Update an employee (admin only)."""
    return await employee_service.update_employee(session, auth, employee_id, payload)


@employees_router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_employee(
    employee_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
) -> Response:
    """Delete an employee without pending requests (admin only)."""
    await employee_service.delete_employee(session, auth, employee_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@employees_router.get("/{employee_id}/balance", response_model=BalanceResponse)
async def get_employee_balance(
    employee_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> BalanceResponse:
    """Get an employee's remaining leave days and hours."""
    return await employee_service.get_employee_balance(session, auth.organization_id, employee_id)
