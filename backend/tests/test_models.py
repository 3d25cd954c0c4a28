from __future__ import annotations

import uuid
from datetime import date

from app.models import (
    AuditLog,
    Employee,
    Location,
    Role,
    SQLModel,
    TimeOffRequest,
)
from app.models.enums import RequestStatus, RequestType

EXPECTED_TABLES = {
    "audit_log",
    "employee",
    "location",
    "role",
    "time_off_request",
}


def test_all_tables_registered() -> None:
    table_names = set(SQLModel.metadata.tables.keys())
    assert EXPECTED_TABLES.issubset(table_names)


def test_employee_defaults() -> None:
    employee = Employee(
        organization_id=uuid.uuid4(),
        first_name="Ada",
        last_name="Lovelace",
        email="ada@example.com",
    )
    assert employee.id is not None
    assert employee.days_available == 0
    assert employee.hours_available == 0
    assert employee.balance_version == 1
    assert employee.role_id is None
    assert employee.updated_at is None


def test_time_off_request_defaults() -> None:
    request = TimeOffRequest(
        organization_id=uuid.uuid4(),
        employee_id=uuid.uuid4(),
        type=RequestType.DAYS_OFF,
        start_date=date(2025, 7, 1),
        end_date=date(2025, 7, 2),
    )
    assert request.status == RequestStatus.PENDING
    assert request.days_off == 0
    assert request.hours_off == 0
    assert request.processed_by is None
    assert request.processed_at is None


def test_catalog_models_instantiation() -> None:
    org = uuid.uuid4()
    role = Role(organization_id=org, name="Barista", created_by=uuid.uuid4())
    location = Location(organization_id=org, name="Downtown", created_by=uuid.uuid4())
    assert role.name == "Barista"
    assert location.name == "Downtown"
    assert role.id != location.id


def test_audit_log_instantiation() -> None:
    entry = AuditLog(
        organization_id=uuid.uuid4(),
        actor_id=uuid.uuid4(),
        entity_type="REQUEST",
        entity_id=uuid.uuid4(),
        action="APPROVE",
    )
    assert entry.before_json is None
    assert entry.created_at is not None


def test_request_type_labels() -> None:
    assert RequestType.DAYS_OFF.label == "Days Off"
    assert RequestType.HOURS_OFF.label == "Hours Off"
    assert RequestType.SICK_LEAVE.label == "Sick Leave"
