# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class CatalogItemPayload(BaseModel):
    """Request body for creating or renaming a role or location."""

    name: str = Field(min_length=1, max_length=255)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            msg = "name must not be blank"
            raise ValueError(msg)
        return stripped


class CatalogItemResponse(BaseModel):
    """Response schema for a role or location."""

    id: uuid.UUID
    organization_id: uuid.UUID
    name: str
    created_by: uuid.UUID
    created_at: datetime
    updated_at: datetime | None


class CatalogListResponse(BaseModel):
    """List of roles or locations."""

    items: list[CatalogItemResponse]
    total: int
