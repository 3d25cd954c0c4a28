# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class EmployeeFields(BaseModel):
    """Editable employee fields; balances must be non-negative."""

    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    role_id: uuid.UUID | None = None
    location_id: uuid.UUID | None = None
    days_available: int = Field(default=0, ge=0)
    hours_available: int = Field(default=0, ge=0)
    annual_days: int = Field(default=0, ge=0)
    annual_hours: int = Field(default=0, ge=0)


class CreateEmployeeRequest(EmployeeFields):
    """Request body for creating an employee."""

    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")

    @field_validator("email", mode="before")
    @classmethod
    def _normalize_email(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value


class UpdateEmployeeRequest(EmployeeFields):
    """Request body for updating an employee. Email is immutable."""


class EmployeeResponse(BaseModel):
    """Response schema for an employee."""

    id: uuid.UUID
    organization_id: uuid.UUID
    first_name: str
    last_name: str
    email: str
    role_id: uuid.UUID | None
    role_name: str | None
    location_id: uuid.UUID | None
    location_name: str | None
    days_available: int
    hours_available: int
    annual_days: int
    annual_hours: int
    created_at: datetime
    updated_at: datetime | None


class EmployeeListResponse(BaseModel):
    """List of employees."""

    items: list[EmployeeResponse]
    total: int


class BalanceResponse(BaseModel):
    """An employee's remaining leave days and hours."""

    employee_id: uuid.UUID
    days_available: int
    hours_available: int
    annual_days: int
    annual_hours: int
    updated_at: datetime | None
