# ruff: noqa: TC003
from __future__ import annotations

import uuid

import sqlalchemy as sa
from sqlmodel import Field

from app.models.base import OrganizationScoped, TimestampMixin, UUIDBase


class Role(UUIDBase, OrganizationScoped, TimestampMixin, table=True):
    """A job role employees can be assigned to."""

    __tablename__ = "role"
    __table_args__ = (sa.UniqueConstraint("organization_id", "name", name="uq_role_organization_name"),)

    name: str = Field(max_length=255)
    created_by: uuid.UUID


class Location(UUIDBase, OrganizationScoped, TimestampMixin, table=True):
    """A work location employees can be assigned to."""

    __tablename__ = "location"
    __table_args__ = (sa.UniqueConstraint("organization_id", "name", name="uq_location_organization_name"),)

    name: str = Field(max_length=255)
    created_by: uuid.UUID
