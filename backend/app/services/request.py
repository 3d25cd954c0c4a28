# ruff: noqa: TC003
from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import TYPE_CHECKING

from fastapi import status
from sqlalchemy import delete, func, select, update
from sqlmodel import col

from app.exceptions import AppError, NotFoundError, TransactionConflictError
from app.models.base import now_utc
from app.models.employee import Employee
from app.models.enums import (
    AuditAction,
    AuditEntityType,
    BalanceAction,
    RequestStatus,
    RequestType,
)
from app.models.request import TimeOffRequest
from app.schemas.request import RequestListResponse, RequestResponse
from app.services.audit import model_to_audit_dict, write_audit_log
from app.services.balance import adjust_balance
from app.services.deduction import compute_request_amounts
from app.services.transaction import run_transaction

if TYPE_CHECKING:
    from sqlalchemy.engine import CursorResult
    from sqlalchemy.ext.asyncio import AsyncSession

    from app.schemas.auth import AuthContext
    from app.schemas.request import CreateRequestPayload, RequestFields, UpdateRequestPayload

logger = logging.getLogger(__name__)

_ACTIVE_STATUSES = [RequestStatus.PENDING.value, RequestStatus.APPROVED.value]


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _build_request_response(request: TimeOffRequest) -> RequestResponse:
    """Map a request model to its response schema."""
    return RequestResponse(
        id=request.id,
        organization_id=request.organization_id,
        employee_id=request.employee_id,
        type=RequestType(request.type),
        start_date=request.start_date,
        end_date=request.end_date,
        hours_requested=request.hours_requested,
        days_off=request.days_off,
        hours_off=request.hours_off,
        notes=request.notes,
        status=RequestStatus(request.status),
        processed_by=request.processed_by,
        processed_at=request.processed_at,
        created_at=request.created_at,
        updated_at=request.updated_at,
    )


async def _get_request_or_404(
    session: AsyncSession,
    organization_id: uuid.UUID,
    request_id: uuid.UUID,
    *,
    for_update: bool = False,
) -> TimeOffRequest:
    """Fetch a request by ID scoped to organization. Raises 404 if not found."""
    query = select(TimeOffRequest).where(
        col(TimeOffRequest.id) == request_id,
        col(TimeOffRequest.organization_id) == organization_id,
    )
    if for_update:
        # Locked reads must see the committed row, not a stale identity-map copy.
        query = query.with_for_update().execution_options(populate_existing=True)
    result = await session.execute(query)
    request = result.scalar_one_or_none()
    if request is None:
        raise NotFoundError("Request not found")
    return request


async def _move_status(
    session: AsyncSession,
    request: TimeOffRequest,
    expected: str,
    new_status: RequestStatus,
    processed_by: uuid.UUID | None,
) -> None:
    """Write ``new_status`` only while the stored status is still ``expected``.

    Another transaction that moved the request first makes this raise
    ``TransactionConflictError``, so the balance change made in the same unit
    of work is rolled back and the whole transition is re-run.
    """
    now = now_utc()
    result: CursorResult = await session.execute(  # type: ignore[assignment]
        update(TimeOffRequest)
        .where(
            col(TimeOffRequest.id) == request.id,
            col(TimeOffRequest.status) == expected,
        )
        .values(
            status=new_status.value,
            processed_by=processed_by,
            processed_at=now if processed_by is not None else None,
            updated_at=now,
        )
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        raise TransactionConflictError(f"Request {request.id} changed status concurrently")
    await session.refresh(request)


async def _get_employee_or_404(
    session: AsyncSession,
    organization_id: uuid.UUID,
    employee_id: uuid.UUID,
) -> Employee:
    result = await session.execute(
        select(Employee).where(
            col(Employee.id) == employee_id,
            col(Employee.organization_id) == organization_id,
        )
    )
    employee = result.scalar_one_or_none()
    if employee is None:
        raise NotFoundError("Employee not found")
    return employee


def _require_owner_or_admin(auth: AuthContext, employee_id: uuid.UUID, verb: str) -> None:
    if not auth.is_admin and auth.user_id != employee_id:
        raise AppError(f"Not authorized to {verb} this request", status_code=status.HTTP_403_FORBIDDEN)


async def _check_request_overlap(
    session: AsyncSession,
    organization_id: uuid.UUID,
    employee_id: uuid.UUID,
    start_date: date,
    end_date: date | None,
    exclude_request_id: uuid.UUID | None = None,
) -> None:
    """Raise 409 if a pending or approved request of the employee overlaps the range.

    Both ranges are inclusive. An hours-off request occupies its start date only.
    """
    last_day = end_date or start_date
    existing_last_day = func.coalesce(col(TimeOffRequest.end_date), col(TimeOffRequest.start_date))
    query = select(col(TimeOffRequest.id)).where(
        col(TimeOffRequest.organization_id) == organization_id,
        col(TimeOffRequest.employee_id) == employee_id,
        col(TimeOffRequest.status).in_(_ACTIVE_STATUSES),
        col(TimeOffRequest.start_date) <= last_day,
        existing_last_day >= start_date,
    )
    if exclude_request_id is not None:
        query = query.where(col(TimeOffRequest.id) != exclude_request_id)

    result = await session.execute(query.limit(1))
    if result.scalar_one_or_none() is None:
        return

    if exclude_request_id is not None:
        detail = (
            "You already have a request for this date range. "
            "Please delete this request and create a new one."
        )
    else:
        detail = "You already have a request for this date range. Please select different dates."
    raise AppError(detail, status_code=status.HTTP_409_CONFLICT)


def _apply_fields(request: TimeOffRequest, fields: RequestFields) -> None:
    """Copy user-editable fields onto the request and recompute its amounts."""
    amounts = compute_request_amounts(fields.type, fields.start_date, fields.end_date, fields.hours)
    request.type = fields.type.value
    request.start_date = fields.start_date
    request.end_date = fields.end_date
    request.hours_requested = fields.hours
    request.days_off = amounts.days
    request.hours_off = amounts.hours
    request.notes = fields.notes


async def _restore_if_approved(session: AsyncSession, request: TimeOffRequest) -> None:
    """Give back the deduction of an approved request before it changes or disappears."""
    if request.status == RequestStatus.APPROVED and request.type != RequestType.SICK_LEAVE:
        await adjust_balance(session, request.id, BalanceAction.RESTORE)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def create_request(
    session: AsyncSession,
    auth: AuthContext,
    payload: CreateRequestPayload,
) -> RequestResponse:
    """Create a PENDING request. No balance changes until approval."""

    async def _work(session: AsyncSession) -> TimeOffRequest:
        await _get_employee_or_404(session, auth.organization_id, payload.employee_id)
        _require_owner_or_admin(auth, payload.employee_id, "create")
        await _check_request_overlap(
            session, auth.organization_id, payload.employee_id, payload.start_date, payload.end_date
        )

        request = TimeOffRequest(
            organization_id=auth.organization_id,
            employee_id=payload.employee_id,
            type=payload.type.value,
            start_date=payload.start_date,
            status=RequestStatus.PENDING.value,
        )
        _apply_fields(request, payload)
        session.add(request)
        await session.flush()

        await write_audit_log(
            session,
            auth=auth,
            entity_type=AuditEntityType.REQUEST,
            entity_id=request.id,
            action=AuditAction.CREATE,
            after_json=model_to_audit_dict(request),
        )
        return request

    request = await run_transaction(session, _work)
    await session.refresh(request)
    logger.info("Request %s created for employee %s", request.id, request.employee_id)
    return _build_request_response(request)


async def update_request(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
    payload: UpdateRequestPayload,
) -> RequestResponse:
    """Edit a request, restoring an approved deduction and resetting it to PENDING."""

    async def _work(session: AsyncSession) -> TimeOffRequest:
        request = await _get_request_or_404(session, auth.organization_id, request_id, for_update=True)
        _require_owner_or_admin(auth, request.employee_id, "edit")
        await _check_request_overlap(
            session,
            auth.organization_id,
            request.employee_id,
            payload.start_date,
            payload.end_date,
            exclude_request_id=request.id,
        )

        before_dict = model_to_audit_dict(request)
        await _restore_if_approved(session, request)

        await _move_status(session, request, request.status, RequestStatus.PENDING, processed_by=None)
        _apply_fields(request, payload)
        request.updated_at = now_utc()
        await session.flush()

        await write_audit_log(
            session,
            auth=auth,
            entity_type=AuditEntityType.REQUEST,
            entity_id=request.id,
            action=AuditAction.UPDATE,
            before_json=before_dict,
            after_json=model_to_audit_dict(request),
        )
        return request

    request = await run_transaction(session, _work)
    await session.refresh(request)
    return _build_request_response(request)


async def approve_request(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
) -> RequestResponse:
    """Approve a pending request: deduct the balance and mark it APPROVED together."""

    async def _work(session: AsyncSession) -> TimeOffRequest:
        request = await _get_request_or_404(session, auth.organization_id, request_id, for_update=True)
        if request.status != RequestStatus.PENDING:
            raise AppError("Only pending requests can be approved", status_code=status.HTTP_400_BAD_REQUEST)

        before_dict = model_to_audit_dict(request)
        await adjust_balance(session, request.id, BalanceAction.APPROVE)

        await _move_status(session, request, RequestStatus.PENDING.value, RequestStatus.APPROVED, auth.user_id)

        await write_audit_log(
            session,
            auth=auth,
            entity_type=AuditEntityType.REQUEST,
            entity_id=request.id,
            action=AuditAction.APPROVE,
            before_json=before_dict,
            after_json=model_to_audit_dict(request),
        )
        return request

    request = await run_transaction(session, _work)
    await session.refresh(request)
    return _build_request_response(request)


async def deny_request(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
) -> RequestResponse:
    """Deny a pending or approved request, restoring the balance if it was approved."""

    async def _work(session: AsyncSession) -> TimeOffRequest:
        request = await _get_request_or_404(session, auth.organization_id, request_id, for_update=True)
        if request.status == RequestStatus.DENIED:
            raise AppError("Request is already denied", status_code=status.HTTP_400_BAD_REQUEST)

        before_dict = model_to_audit_dict(request)
        await _restore_if_approved(session, request)

        await _move_status(session, request, request.status, RequestStatus.DENIED, auth.user_id)

        await write_audit_log(
            session,
            auth=auth,
            entity_type=AuditEntityType.REQUEST,
            entity_id=request.id,
            action=AuditAction.DENY,
            before_json=before_dict,
            after_json=model_to_audit_dict(request),
        )
        return request

    request = await run_transaction(session, _work)
    await session.refresh(request)
    return _build_request_response(request)


async def delete_request(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
) -> None:
    """Delete a request, restoring the balance first if it was approved."""

    async def _work(session: AsyncSession) -> None:
        request = await _get_request_or_404(session, auth.organization_id, request_id, for_update=True)
        _require_owner_or_admin(auth, request.employee_id, "delete")

        before_dict = model_to_audit_dict(request)
        await _restore_if_approved(session, request)

        result: CursorResult = await session.execute(  # type: ignore[assignment]
            delete(TimeOffRequest)
            .where(
                col(TimeOffRequest.id) == request.id,
                col(TimeOffRequest.status) == request.status,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise TransactionConflictError(f"Request {request_id} changed status concurrently")
        session.expunge(request)

        await write_audit_log(
            session,
            auth=auth,
            entity_type=AuditEntityType.REQUEST,
            entity_id=request_id,
            action=AuditAction.DELETE,
            before_json=before_dict,
        )

    await run_transaction(session, _work)
    logger.info("Request %s deleted", request_id)


async def get_request(
    session: AsyncSession,
    organization_id: uuid.UUID,
    request_id: uuid.UUID,
) -> RequestResponse:
    """Get a single request by ID."""
    request = await _get_request_or_404(session, organization_id, request_id)
    return _build_request_response(request)


async def list_requests(
    session: AsyncSession,
    organization_id: uuid.UUID,
    status_filter: RequestStatus | None = None,
    type_filter: RequestType | None = None,
    employee_id: uuid.UUID | None = None,
    location_id: uuid.UUID | None = None,
    offset: int = 0,
    limit: int = 50,
) -> RequestListResponse:
    """List requests with optional filters, ordered by created_at DESC."""
    base_filters = [col(TimeOffRequest.organization_id) == organization_id]

    if status_filter is not None:
        base_filters.append(col(TimeOffRequest.status) == status_filter.value)
    if type_filter is not None:
        base_filters.append(col(TimeOffRequest.type) == type_filter.value)
    if employee_id is not None:
        base_filters.append(col(TimeOffRequest.employee_id) == employee_id)
    if location_id is not None:
        base_filters.append(
            col(TimeOffRequest.employee_id).in_(
                select(col(Employee.id)).where(col(Employee.location_id) == location_id)
            )
        )

    count_result = await session.execute(select(func.count()).select_from(TimeOffRequest).where(*base_filters))
    total = count_result.scalar_one()

    result = await session.execute(
        select(TimeOffRequest)
        .where(*base_filters)
        .order_by(col(TimeOffRequest.created_at).desc())
        .offset(offset)
        .limit(limit)
    )
    requests = list(result.scalars().all())

    return RequestListResponse(
        items=[_build_request_response(r) for r in requests],
        total=total,
    )
