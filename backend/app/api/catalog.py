# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Response, status

from app.api.deps import AdminDep, AuthDep, validate_organization_scope
from app.db import SessionDep
from app.schemas.catalog import CatalogItemPayload, CatalogItemResponse, CatalogListResponse
from app.services import catalog as catalog_service

roles_router = APIRouter(
    prefix="/organizations/{organization_id}/roles",
    tags=["roles"],
    dependencies=[Depends(validate_organization_scope)],
)

locations_router = APIRouter(
    prefix="/organizations/{organization_id}/locations",
    tags=["locations"],
    dependencies=[Depends(validate_organization_scope)],
)


@roles_router.post("", response_model=CatalogItemResponse, status_code=status.HTTP_201_CREATED)
async def create_role(
    payload: CatalogItemPayload,
    session: SessionDep,
    auth: AdminDep,
) -> CatalogItemResponse:
    """Create a role (admin only)."""
    return await catalog_service.create_item(session, auth, catalog_service.ROLES, payload)


@roles_router.get("", response_model=CatalogListResponse)
async def list_roles(
    session: SessionDep,
    auth: AuthDep,
) -> CatalogListResponse:
    """List the organization's roles."""
    return await catalog_service.list_items(session, catalog_service.ROLES, auth.organization_id)


@roles_router.get("/{item_id}", response_model=CatalogItemResponse)
async def get_role(
    item_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> CatalogItemResponse:
    """Get a single role."""
    return await catalog_service.get_item(session, catalog_service.ROLES, auth.organization_id, item_id)


@roles_router.put("/{item_id}", response_model=CatalogItemResponse)
async def rename_role(
    item_id: uuid.UUID,
    payload: CatalogItemPayload,
    session: SessionDep,
    auth: AdminDep,
) -> CatalogItemResponse:
    """Rename a role (admin only)."""
    return await catalog_service.rename_item(session, auth, catalog_service.ROLES, item_id, payload)


@roles_router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_role(
    item_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
) -> Response:
    """Delete a role no employee is assigned to (admin only)."""
    await catalog_service.delete_item(session, auth, catalog_service.ROLES, item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@locations_router.post("", response_model=CatalogItemResponse, status_code=status.HTTP_201_CREATED)
async def create_location(
    payload: CatalogItemPayload,
    session: SessionDep,
    auth: AdminDep,
) -> CatalogItemResponse:
    """Create a location (admin only)."""
    return await catalog_service.create_item(session, auth, catalog_service.LOCATIONS, payload)


@locations_router.get("", response_model=CatalogListResponse)
async def list_locations(
    session: SessionDep,
    auth: AuthDep,
) -> CatalogListResponse:
    """List the organization's locations."""
    return await catalog_service.list_items(session, catalog_service.LOCATIONS, auth.organization_id)


@locations_router.get("/{item_id}", response_model=CatalogItemResponse)
async def get_location(
    item_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> CatalogItemResponse:
    """Get a single location."""
    return await catalog_service.get_item(session, catalog_service.LOCATIONS, auth.organization_id, item_id)


@locations_router.put("/{item_id}", response_model=CatalogItemResponse)
async def rename_location(
    item_id: uuid.UUID,
    payload: CatalogItemPayload,
    session: SessionDep,
    auth: AdminDep,
) -> CatalogItemResponse:
    """Rename a location (admin only)."""
    return await catalog_service.rename_item(session, auth, catalog_service.LOCATIONS, item_id, payload)


@locations_router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_location(
    item_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
) -> Response:
    """Delete a location no employee is assigned to (admin only)."""
    await catalog_service.delete_item(session, auth, catalog_service.LOCATIONS, item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
