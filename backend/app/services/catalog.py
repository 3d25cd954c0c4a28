"""Roles and locations: named, per-organization lookup records.

Both share the same rules, so one set of functions serves both, parametrized
by a ``CatalogKind`` describing the table, its audit entity type, and the
employee column that references it.
"""

# ruff: noqa: TC003
from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from fastapi import status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from app.exceptions import AppError, NotFoundError
from app.models.base import now_utc
from app.models.catalog import Location, Role
from app.models.employee import Employee
from app.models.enums import AuditAction, AuditEntityType
from app.schemas.catalog import CatalogItemResponse, CatalogListResponse
from app.services.audit import model_to_audit_dict, write_audit_log
from app.services.transaction import run_transaction

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from app.schemas.auth import AuthContext
    from app.schemas.catalog import CatalogItemPayload


@dataclass(frozen=True)
class CatalogKind:
    """Describes one catalog table."""

    model: type[Role] | type[Location]
    label: str
    entity_type: AuditEntityType
    employee_column: Any


ROLES = CatalogKind(model=Role, label="role", entity_type=AuditEntityType.ROLE, employee_column=Employee.role_id)
LOCATIONS = CatalogKind(
    model=Location,
    label="location",
    entity_type=AuditEntityType.LOCATION,
    employee_column=Employee.location_id,
)


def _build_item_response(item: Role | Location) -> CatalogItemResponse:
    return CatalogItemResponse(
        id=item.id,
        organization_id=item.organization_id,
        name=item.name,
        created_by=item.created_by,
        created_at=item.created_at,
        updated_at=item.updated_at,
    )


def _duplicate_error(kind: CatalogKind) -> AppError:
    return AppError(
        f"A {kind.label} with this name already exists in your organization",
        status_code=status.HTTP_409_CONFLICT,
    )


async def _get_item_or_404(
    session: AsyncSession,
    kind: CatalogKind,
    organization_id: uuid.UUID,
    item_id: uuid.UUID,
) -> Role | Location:
    result = await session.execute(
        select(kind.model).where(
            col(kind.model.id) == item_id,
            col(kind.model.organization_id) == organization_id,
        )
    )
    item = result.scalar_one_or_none()
    if item is None:
        raise NotFoundError(f"{kind.label.capitalize()} not found")
    return item


async def _ensure_name_available(
    session: AsyncSession,
    kind: CatalogKind,
    organization_id: uuid.UUID,
    name: str,
    exclude_id: uuid.UUID | None = None,
) -> None:
    query = select(col(kind.model.id)).where(
        col(kind.model.organization_id) == organization_id,
        col(kind.model.name) == name,
    )
    if exclude_id is not None:
        query = query.where(col(kind.model.id) != exclude_id)
    result = await session.execute(query.limit(1))
    if result.scalar_one_or_none() is not None:
        raise _duplicate_error(kind)


async def _flush_unique(session: AsyncSession, kind: CatalogKind) -> None:
    try:
        await session.flush()
    except IntegrityError:
        raise _duplicate_error(kind) from None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def create_item(
    session: AsyncSession,
    auth: AuthContext,
    kind: CatalogKind,
    payload: CatalogItemPayload,
) -> CatalogItemResponse:
    """Create a role or location; names are unique per organization."""

    async def _work(session: AsyncSession) -> Role | Location:
        await _ensure_name_available(session, kind, auth.organization_id, payload.name)
        item = kind.model(organization_id=auth.organization_id, name=payload.name, created_by=auth.user_id)
        session.add(item)
        await _flush_unique(session, kind)

        await write_audit_log(
            session,
            auth=auth,
            entity_type=kind.entity_type,
            entity_id=item.id,
            action=AuditAction.CREATE,
            after_json=model_to_audit_dict(item),
        )
        return item

    item = await run_transaction(session, _work)
    await session.refresh(item)
    return _build_item_response(item)


async def rename_item(
    session: AsyncSession,
    auth: AuthContext,
    kind: CatalogKind,
    item_id: uuid.UUID,
    payload: CatalogItemPayload,
) -> CatalogItemResponse:
    """Rename a role or location."""

    async def _work(session: AsyncSession) -> Role | Location:
        item = await _get_item_or_404(session, kind, auth.organization_id, item_id)
        await _ensure_name_available(session, kind, auth.organization_id, payload.name, exclude_id=item.id)

        before_dict = model_to_audit_dict(item)
        item.name = payload.name
        item.updated_at = now_utc()
        await _flush_unique(session, kind)

        await write_audit_log(
            session,
            auth=auth,
            entity_type=kind.entity_type,
            entity_id=item.id,
            action=AuditAction.UPDATE,
            before_json=before_dict,
            after_json=model_to_audit_dict(item),
        )
        return item

    item = await run_transaction(session, _work)
    await session.refresh(item)
    return _build_item_response(item)


async def delete_item(
    session: AsyncSession,
    auth: AuthContext,
    kind: CatalogKind,
    item_id: uuid.UUID,
) -> None:
    """Delete a role or location that no employee is assigned to."""

    async def _work(session: AsyncSession) -> None:
        item = await _get_item_or_404(session, kind, auth.organization_id, item_id)

        assigned = await session.execute(
            select(col(Employee.id))
            .where(
                col(Employee.organization_id) == auth.organization_id,
                col(kind.employee_column) == item.id,
            )
            .limit(1)
        )
        if assigned.scalar_one_or_none() is not None:
            raise AppError(
                f"This {kind.label} cannot be deleted as it is currently assigned to employees",
                status_code=status.HTTP_409_CONFLICT,
            )

        before_dict = model_to_audit_dict(item)
        await session.delete(item)
        await session.flush()

        await write_audit_log(
            session,
            auth=auth,
            entity_type=kind.entity_type,
            entity_id=item_id,
            action=AuditAction.DELETE,
            before_json=before_dict,
        )

    await run_transaction(session, _work)


async def get_item(
    session: AsyncSession,
    kind: CatalogKind,
    organization_id: uuid.UUID,
    item_id: uuid.UUID,
) -> CatalogItemResponse:
    """Get a single role or location."""
    item = await _get_item_or_404(session, kind, organization_id, item_id)
    return _build_item_response(item)


async def list_items(
    session: AsyncSession,
    kind: CatalogKind,
    organization_id: uuid.UUID,
) -> CatalogListResponse:
    """List roles or locations for an organization, newest first."""
    result = await session.execute(
        select(kind.model)
        .where(col(kind.model.organization_id) == organization_id)
        .order_by(col(kind.model.created_at).desc())
    )
    items = [_build_item_response(i) for i in result.scalars().all()]
    return CatalogListResponse(items=items, total=len(items))
