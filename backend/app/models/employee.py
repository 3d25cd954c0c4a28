# ruff: noqa: TC003
from __future__ import annotations

import uuid

import sqlalchemy as sa
from sqlmodel import Field

from app.models.base import OrganizationScoped, TimestampMixin, UUIDBase


class Employee(UUIDBase, OrganizationScoped, TimestampMixin, table=True):
    """An employee of an organization, carrying the leave balance pool."""

    __tablename__ = "employee"
    __table_args__ = (
        sa.UniqueConstraint("organization_id", "email", name="uq_employee_organization_email"),
        sa.CheckConstraint("days_available >= 0", name="ck_employee_days_available"),
        sa.CheckConstraint("hours_available >= 0", name="ck_employee_hours_available"),
    )

    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)
    email: str = Field(max_length=255)
    role_id: uuid.UUID | None = Field(
        default=None,
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("role.id", ondelete="SET NULL"), nullable=True, index=True),
    )
    location_id: uuid.UUID | None = Field(
        default=None,
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("location.id", ondelete="SET NULL"), nullable=True, index=True),
    )
    days_available: int = Field(default=0, sa_column_kwargs={"server_default": "0"})
    hours_available: int = Field(default=0, sa_column_kwargs={"server_default": "0"})
    annual_days: int = Field(default=0, sa_column_kwargs={"server_default": "0"})
    annual_hours: int = Field(default=0, sa_column_kwargs={"server_default": "0"})
    # Bumped on every balance write; compared on write to detect lost updates.
    balance_version: int = Field(default=1, sa_column_kwargs={"server_default": "1"})
    created_by: uuid.UUID | None = None
