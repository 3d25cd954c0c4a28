# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date, datetime

import sqlalchemy as sa
from sqlmodel import Field

from app.models.base import OrganizationScoped, TimestampMixin, UUIDBase
from app.models.enums import RequestStatus


class TimeOffRequest(UUIDBase, OrganizationScoped, TimestampMixin, table=True):
    """An employee's time-off request with its approval state and derived amounts."""

    __tablename__ = "time_off_request"
    __table_args__ = (
        sa.Index("ix_request_organization_status", "organization_id", "status"),
        sa.CheckConstraint("end_date IS NULL OR start_date <= end_date", name="ck_request_date_order"),
    )

    employee_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("employee.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    type: str = Field(max_length=50)
    start_date: date
    end_date: date | None = None
    hours_requested: int | None = None
    days_off: int = Field(default=0, sa_column_kwargs={"server_default": "0"})
    hours_off: int = Field(default=0, sa_column_kwargs={"server_default": "0"})
    notes: str | None = None
    status: str = Field(
        default=RequestStatus.PENDING, max_length=50, index=True, sa_column_kwargs={"server_default": "PENDING"}
    )
    processed_by: uuid.UUID | None = None
    processed_at: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
