# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Self

from pydantic import BaseModel, Field, model_validator

from app.models.enums import RequestStatus, RequestType

MAX_HOURS_PER_REQUEST = 8

# ---------------------------------------------------------------------------
# Request payloads
# ---------------------------------------------------------------------------


class RequestFields(BaseModel):
    """User-editable fields shared by create and edit."""

    type: RequestType
    start_date: date
    end_date: date | None = None
    hours: int | None = Field(default=None, ge=1, le=MAX_HOURS_PER_REQUEST)
    notes: str | None = Field(default=None, max_length=2000)

    @model_validator(mode="after")
    def _validate_shape(self) -> Self:
        if self.type == RequestType.HOURS_OFF:
            if self.hours is None:
                msg = "hours is required for HOURS_OFF requests"
                raise ValueError(msg)
            # A partial-day request has no end date.
            self.end_date = None
        else:
            if self.end_date is None:
                msg = f"end_date is required for {self.type} requests"
                raise ValueError(msg)
            if self.start_date > self.end_date:
                msg = "Start date cannot be after end date"
                raise ValueError(msg)
            self.hours = None
        return self


class CreateRequestPayload(RequestFields):
    """Request body for submitting a new time-off request."""

    employee_id: uuid.UUID


class UpdateRequestPayload(RequestFields):
    """Request body for editing an existing time-off request."""


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class RequestResponse(BaseModel):
    """Response schema for a single time-off request."""

    id: uuid.UUID
    organization_id: uuid.UUID
    employee_id: uuid.UUID
    type: RequestType
    start_date: date
    end_date: date | None
    hours_requested: int | None
    days_off: int
    hours_off: int
    notes: str | None
    status: RequestStatus
    processed_by: uuid.UUID | None
    processed_at: datetime | None
    created_at: datetime
    updated_at: datetime | None


class RequestListResponse(BaseModel):
    """Paginated list of time-off requests."""

    items: list[RequestResponse]
    total: int
