# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, Response, status

from app.api.deps import AdminDep, AuthDep, validate_organization_scope
from app.db import SessionDep
from app.models.enums import RequestStatus, RequestType
from app.schemas.request import (
    CreateRequestPayload,
    RequestListResponse,
    RequestResponse,
    UpdateRequestPayload,
)
from app.services import request as request_service

requests_router = APIRouter(
    prefix="/organizations/{organization_id}/requests",
    tags=["requests"],
    dependencies=[Depends(validate_organization_scope)],
)


@requests_router.post("", response_model=RequestResponse, status_code=status.HTTP_201_CREATED)
async def create_request(
    payload: CreateRequestPayload,
    session: SessionDep,
    auth: AuthDep,
) -> RequestResponse:
    """Submit a new time-off request."""
    return await request_service.create_request(session, auth, payload)


@requests_router.get("", response_model=RequestListResponse)
async def list_requests(
    session: SessionDep,
    auth: AuthDep,
    status_filter: RequestStatus | None = Query(default=None, alias="status"),
    type_filter: RequestType | None = Query(default=None, alias="type"),
    employee_id: uuid.UUID | None = Query(default=None),
    location_id: uuid.UUID | None = Query(default=None),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> RequestListResponse:
    """List time-off requests with optional filters."""
    return await request_service.list_requests(
        session, auth.organization_id, status_filter, type_filter, employee_id, location_id, offset, limit
    )


@requests_router.get("/{request_id}", response_model=RequestResponse)
async def get_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> RequestResponse:
    """Get a single time-off request."""
    return await request_service.get_request(session, auth.organization_id, request_id)


@requests_router.put("/{request_id}", response_model=RequestResponse)
async def update_request(
    request_id: uuid.UUID,
    payload: UpdateRequestPayload,
    session: SessionDep,
    auth: AuthDep,
) -> RequestResponse:
    """Edit a time-off request; it goes back to pending."""
    return await request_service.update_request(session, auth, request_id, payload)


@requests_router.delete("/{request_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> Response:
    """Delete a time-off request."""
    await request_service.delete_request(session, auth, request_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@requests_router.post("/{request_id}/approve", response_model=RequestResponse)
async def approve_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
) -> RequestResponse:
    """Approve a pending time-off request (admin only)."""
    return await request_service.approve_request(session, auth, request_id)


@requests_router.post("/{request_id}/deny", response_model=RequestResponse)
async def deny_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
) -> RequestResponse:
    """Deny a pending or approved time-off request (admin only)."""
    return await request_service.deny_request(session, auth, request_id)
