from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Any

from sqlalchemy import select
from sqlmodel import col

from app.models.employee import Employee

if TYPE_CHECKING:
    from httpx import AsyncClient
    from sqlalchemy.ext.asyncio import AsyncSession

ORG_ID = uuid.uuid4()
ADMIN_ID = uuid.uuid4()
AUTH_HEADERS = {
    "X-Organization-Id": str(ORG_ID),
    "X-User-Id": str(ADMIN_ID),
    "X-Role": "admin",
}
EMPLOYEE_HEADERS = {
    "X-Organization-Id": str(ORG_ID),
    "X-User-Id": str(uuid.uuid4()),
    "X-Role": "employee",
}
BASE = f"/organizations/{ORG_ID}"


def _employee_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "first_name": "Katherine",
        "last_name": "Johnson",
        "email": "katherine@example.com",
        "days_available": 12,
        "hours_available": 16,
        "annual_days": 20,
        "annual_hours": 16,
    }
    payload.update(overrides)
    return payload


async def _create_employee(client: AsyncClient, **overrides: Any) -> dict:
    resp = await client.post(f"{BASE}/employees", json=_employee_payload(**overrides), headers=AUTH_HEADERS)
    assert resp.status_code == 201, resp.text
    return resp.json()


async def _create_catalog_item(client: AsyncClient, kind: str, name: str) -> str:
    resp = await client.post(f"{BASE}/{kind}", json={"name": name}, headers=AUTH_HEADERS)
    assert resp.status_code == 201, resp.text
    return resp.json()["id"]


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


async def test_create_employee(async_client: AsyncClient) -> None:
    data = await _create_employee(async_client, email="  Katherine@Example.COM ")

    assert data["email"] == "katherine@example.com"
    assert data["organization_id"] == str(ORG_ID)
    assert (data["days_available"], data["hours_available"]) == (12, 16)
    assert data["role_id"] is None
    assert data["location_name"] is None


async def test_create_employee_with_role_and_location(async_client: AsyncClient) -> None:
    role_id = await _create_catalog_item(async_client, "roles", "Engineer")
    location_id = await _create_catalog_item(async_client, "locations", "Porto")

    data = await _create_employee(async_client, role_id=role_id, location_id=location_id)

    assert data["role_name"] == "Engineer"
    assert data["location_name"] == "Porto"


async def test_create_duplicate_email_rejected(async_client: AsyncClient) -> None:
    await _create_employee(async_client)

    resp = await async_client.post(
        f"{BASE}/employees", json=_employee_payload(email="KATHERINE@example.com"), headers=AUTH_HEADERS
    )

    assert resp.status_code == 409
    assert resp.json()["detail"] == "An account with this email already exists"


async def test_same_email_allowed_in_other_organization(async_client: AsyncClient) -> None:
    await _create_employee(async_client)
    other_org = uuid.uuid4()
    headers = {**AUTH_HEADERS, "X-Organization-Id": str(other_org)}

    resp = await async_client.post(f"/organizations/{other_org}/employees", json=_employee_payload(), headers=headers)

    assert resp.status_code == 201


async def test_create_with_unknown_role_returns_404(async_client: AsyncClient) -> None:
    resp = await async_client.post(
        f"{BASE}/employees", json=_employee_payload(role_id=str(uuid.uuid4())), headers=AUTH_HEADERS
    )
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Role not found"


async def test_create_negative_balance_rejected(async_client: AsyncClient) -> None:
    resp = await async_client.post(
        f"{BASE}/employees", json=_employee_payload(days_available=-1), headers=AUTH_HEADERS
    )
    assert resp.status_code == 422


async def test_create_requires_admin(async_client: AsyncClient) -> None:
    resp = await async_client.post(f"{BASE}/employees", json=_employee_payload(), headers=EMPLOYEE_HEADERS)
    assert resp.status_code == 403


# ---------------------------------------------------------------------------
# Read
# ---------------------------------------------------------------------------


async def test_get_and_list_employees(async_client: AsyncClient) -> None:
    first = await _create_employee(async_client)
    await _create_employee(async_client, email="dorothy@example.com", first_name="Dorothy")

    resp = await async_client.get(f"{BASE}/employees/{first['id']}", headers=EMPLOYEE_HEADERS)
    assert resp.status_code == 200
    assert resp.json()["email"] == "katherine@example.com"

    resp = await async_client.get(f"{BASE}/employees", headers=AUTH_HEADERS)
    assert resp.json()["total"] == 2


async def test_get_unknown_employee_returns_404(async_client: AsyncClient) -> None:
    resp = await async_client.get(f"{BASE}/employees/{uuid.uuid4()}", headers=AUTH_HEADERS)
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Employee not found"


async def test_get_balance(async_client: AsyncClient) -> None:
    employee = await _create_employee(async_client)

    resp = await async_client.get(f"{BASE}/employees/{employee['id']}/balance", headers=AUTH_HEADERS)

    assert resp.status_code == 200
    data = resp.json()
    assert data["employee_id"] == employee["id"]
    assert (data["days_available"], data["hours_available"]) == (12, 16)
    assert (data["annual_days"], data["annual_hours"]) == (20, 16)


# ---------------------------------------------------------------------------
# Update
# ---------------------------------------------------------------------------


async def test_update_employee(async_client: AsyncClient, db_session: AsyncSession) -> None:
    employee = await _create_employee(async_client)

    resp = await async_client.put(
        f"{BASE}/employees/{employee['id']}",
        json={"first_name": "Kat", "last_name": "Johnson", "days_available": 5, "hours_available": 16},
        headers=AUTH_HEADERS,
    )

    assert resp.status_code == 200
    data = resp.json()
    assert data["first_name"] == "Kat"
    assert data["days_available"] == 5
    assert data["email"] == "katherine@example.com"
    assert data["updated_at"] is not None

    result = await db_session.execute(
        select(col(Employee.balance_version)).where(col(Employee.id) == uuid.UUID(employee["id"]))
    )
    assert result.scalar_one() == 2


async def test_update_without_balance_change_keeps_version(
    async_client: AsyncClient, db_session: AsyncSession
) -> None:
    employee = await _create_employee(async_client)

    resp = await async_client.put(
        f"{BASE}/employees/{employee['id']}",
        json=_employee_payload(last_name="Goble"),
        headers=AUTH_HEADERS,
    )

    assert resp.status_code == 200
    result = await db_session.execute(
        select(col(Employee.balance_version)).where(col(Employee.id) == uuid.UUID(employee["id"]))
    )
    assert result.scalar_one() == 1


async def test_update_unknown_employee_returns_404(async_client: AsyncClient) -> None:
    resp = await async_client.put(
        f"{BASE}/employees/{uuid.uuid4()}",
        json={"first_name": "A", "last_name": "B"},
        headers=AUTH_HEADERS,
    )
    assert resp.status_code == 404


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------


async def test_delete_employee_with_history(async_client: AsyncClient) -> None:
    employee = await _create_employee(async_client)
    resp = await async_client.post(
        f"{BASE}/requests",
        json={"employee_id": employee["id"], "type": "DAYS_OFF", "start_date": "2025-02-03", "end_date": "2025-02-03"},
        headers=AUTH_HEADERS,
    )
    request_id = resp.json()["id"]
    await async_client.post(f"{BASE}/requests/{request_id}/deny", headers=AUTH_HEADERS)

    resp = await async_client.delete(f"{BASE}/employees/{employee['id']}", headers=AUTH_HEADERS)

    assert resp.status_code == 204
    assert (await async_client.get(f"{BASE}/employees/{employee['id']}", headers=AUTH_HEADERS)).status_code == 404
    assert (await async_client.get(f"{BASE}/requests/{request_id}", headers=AUTH_HEADERS)).status_code == 404


async def test_delete_employee_with_pending_request_rejected(async_client: AsyncClient) -> None:
    employee = await _create_employee(async_client)
    await async_client.post(
        f"{BASE}/requests",
        json={"employee_id": employee["id"], "type": "SICK_LEAVE", "start_date": "2025-02-03", "end_date": "2025-02-04"},
        headers=AUTH_HEADERS,
    )

    resp = await async_client.delete(f"{BASE}/employees/{employee['id']}", headers=AUTH_HEADERS)

    assert resp.status_code == 409
    assert resp.json()["detail"] == "Cannot delete employee with pending time-off requests"


async def test_delete_requires_admin(async_client: AsyncClient) -> None:
    employee = await _create_employee(async_client)
    resp = await async_client.delete(f"{BASE}/employees/{employee['id']}", headers=EMPLOYEE_HEADERS)
    assert resp.status_code == 403


async def test_employee_changes_are_audited(async_client: AsyncClient) -> None:
    employee = await _create_employee(async_client)
    await async_client.delete(f"{BASE}/employees/{employee['id']}", headers=AUTH_HEADERS)

    resp = await async_client.get(
        f"{BASE}/audit-log",
        params={"entity_type": "EMPLOYEE", "entity_id": employee["id"]},
        headers=AUTH_HEADERS,
    )

    entries = resp.json()["items"]
    assert sorted(e["action"] for e in entries) == ["CREATE", "DELETE"]
    delete_entry = next(e for e in entries if e["action"] == "DELETE")
    assert delete_entry["before_json"]["email"] == "katherine@example.com"
    assert delete_entry["after_json"] is None
