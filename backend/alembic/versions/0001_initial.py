"""initial schema: roles, locations, employees, requests, audit log

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-17 00:00:00

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _catalog_table(name: str) -> None:
    op.create_table(
        name,
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("organization_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("created_by", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("organization_id", "name", name=f"uq_{name}_organization_name"),
    )
    op.create_index(f"ix_{name}_organization_id", name, ["organization_id"])


def upgrade() -> None:
    _catalog_table("role")
    _catalog_table("location")

    op.create_table(
        "employee",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("organization_id", sa.Uuid(), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("role_id", sa.Uuid(), sa.ForeignKey("role.id", ondelete="SET NULL"), nullable=True),
        sa.Column("location_id", sa.Uuid(), sa.ForeignKey("location.id", ondelete="SET NULL"), nullable=True),
        sa.Column("days_available", sa.Integer(), server_default="0", nullable=False),
        sa.Column("hours_available", sa.Integer(), server_default="0", nullable=False),
        sa.Column("annual_days", sa.Integer(), server_default="0", nullable=False),
        sa.Column("annual_hours", sa.Integer(), server_default="0", nullable=False),
        sa.Column("balance_version", sa.Integer(), server_default="1", nullable=False),
        sa.Column("created_by", sa.Uuid(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("organization_id", "email", name="uq_employee_organization_email"),
        sa.CheckConstraint("days_available >= 0", name="ck_employee_days_available"),
        sa.CheckConstraint("hours_available >= 0", name="ck_employee_hours_available"),
    )
    op.create_index("ix_employee_organization_id", "employee", ["organization_id"])
    op.create_index("ix_employee_role_id", "employee", ["role_id"])
    op.create_index("ix_employee_location_id", "employee", ["location_id"])

    op.create_table(
        "time_off_request",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("organization_id", sa.Uuid(), nullable=False),
        sa.Column("employee_id", sa.Uuid(), sa.ForeignKey("employee.id", ondelete="CASCADE"), nullable=False),
        sa.Column("type", sa.String(length=50), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("hours_requested", sa.Integer(), nullable=True),
        sa.Column("days_off", sa.Integer(), server_default="0", nullable=False),
        sa.Column("hours_off", sa.Integer(), server_default="0", nullable=False),
        sa.Column("notes", sa.String(), nullable=True),
        sa.Column("status", sa.String(length=50), server_default="PENDING", nullable=False),
        sa.Column("processed_by", sa.Uuid(), nullable=True),
        sa.Column("processed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("end_date IS NULL OR start_date <= end_date", name="ck_request_date_order"),
    )
    op.create_index("ix_time_off_request_organization_id", "time_off_request", ["organization_id"])
    op.create_index("ix_time_off_request_employee_id", "time_off_request", ["employee_id"])
    op.create_index("ix_time_off_request_status", "time_off_request", ["status"])
    op.create_index("ix_request_organization_status", "time_off_request", ["organization_id", "status"])

    op.create_table(
        "audit_log",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("organization_id", sa.Uuid(), nullable=False),
        sa.Column("actor_id", sa.Uuid(), nullable=False),
        sa.Column("entity_type", sa.String(length=50), nullable=False),
        sa.Column("entity_id", sa.Uuid(), nullable=False),
        sa.Column("action", sa.String(length=50), nullable=False),
        sa.Column("before_json", sa.JSON(), nullable=True),
        sa.Column("after_json", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_audit_log_organization_id", "audit_log", ["organization_id"])
    op.create_index("ix_audit_log_created_at", "audit_log", ["created_at"])
    op.create_index("ix_audit_entity", "audit_log", ["entity_type", "entity_id"])


def downgrade() -> None:
    op.drop_table("audit_log")
    op.drop_table("time_off_request")
    op.drop_table("employee")
    op.drop_table("location")
    op.drop_table("role")
