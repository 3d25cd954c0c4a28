# ruff: noqa: TC003
from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from pydantic import BaseModel
from sqlalchemy import select, update
from sqlmodel import col

from app.exceptions import NotFoundError, TransactionConflictError
from app.models.base import now_utc
from app.models.employee import Employee
from app.models.enums import BalanceAction, RequestType
from app.models.request import TimeOffRequest
from app.services.deduction import compute_deduction

if TYPE_CHECKING:
    from sqlalchemy.engine import CursorResult
    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


class EmployeeBalance(BaseModel):
    """Point-in-time view of an employee's leave pool."""

    employee_id: uuid.UUID
    days_available: int
    hours_available: int
    version: int
    updated_at: datetime | None = None


@runtime_checkable
class BalanceRepository(Protocol):
    """Typed access to the employee balance store."""

    async def get_balance(self, employee_id: uuid.UUID) -> EmployeeBalance | None:
        """Read the balance, locking it for the rest of the transaction where supported."""
        ...

    async def set_balance(
        self,
        employee_id: uuid.UUID,
        days: int,
        hours: int,
        *,
        expected_version: int,
    ) -> EmployeeBalance:
        """Write a new balance if nobody else wrote since ``expected_version`` was read."""
        ...


class SqlBalanceRepository:
    """Balance store backed by the ``employee`` table."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_balance(self, employee_id: uuid.UUID) -> EmployeeBalance | None:
        result = await self._session.execute(
            select(
                col(Employee.id),
                col(Employee.days_available),
                col(Employee.hours_available),
                col(Employee.balance_version),
                col(Employee.updated_at),
            )
            .where(col(Employee.id) == employee_id)
            .with_for_update()
        )
        row = result.one_or_none()
        if row is None:
            return None
        return EmployeeBalance(
            employee_id=row.id,
            days_available=row.days_available,
            hours_available=row.hours_available,
            version=row.balance_version,
            updated_at=row.updated_at,
        )

    async def set_balance(
        self,
        employee_id: uuid.UUID,
        days: int,
        hours: int,
        *,
        expected_version: int,
    ) -> EmployeeBalance:
        now = now_utc()
        result: CursorResult = await self._session.execute(  # type: ignore[assignment]
            update(Employee)
            .where(
                col(Employee.id) == employee_id,
                col(Employee.balance_version) == expected_version,
            )
            .values(
                days_available=days,
                hours_available=hours,
                balance_version=expected_version + 1,
                updated_at=now,
            )
        )
        if result.rowcount != 1:
            raise TransactionConflictError(f"Balance of employee {employee_id} changed during update")
        return EmployeeBalance(
            employee_id=employee_id,
            days_available=days,
            hours_available=hours,
            version=expected_version + 1,
            updated_at=now,
        )


def apply_action(balance: EmployeeBalance, days: int, hours: int, action: BalanceAction) -> tuple[int, int]:
    """Return the (days, hours) pool after applying ``action``.

    Approval clamps at zero. Restoration adds back the nominal amount with no
    ceiling, so a request whose deduction was clamped can leave the pool
    larger than it was before approval.
    """
    if action == BalanceAction.APPROVE:
        return max(0, balance.days_available - days), max(0, balance.hours_available - hours)
    return balance.days_available + days, balance.hours_available + hours


async def adjust_balance(
    session: AsyncSession,
    request_id: uuid.UUID,
    action: BalanceAction,
    repository: BalanceRepository | None = None,
) -> EmployeeBalance | None:
    """Deduct or restore the owning employee's balance for a request.

    Must run inside the caller's transaction (see ``run_transaction``). Returns
    the new balance, or None for sick leave, which never touches the pool.
    """
    request = await session.get(TimeOffRequest, request_id)
    if request is None:
        raise NotFoundError("Request not found")

    if request.type == RequestType.SICK_LEAVE:
        logger.debug("Skipping balance %s for sick leave request %s", action, request_id)
        return None

    repo = repository if repository is not None else SqlBalanceRepository(session)
    current = await repo.get_balance(request.employee_id)
    if current is None:
        raise NotFoundError("Employee not found")

    deduction = compute_deduction(request)
    new_days, new_hours = apply_action(current, deduction.days, deduction.hours, action)
    updated = await repo.set_balance(
        request.employee_id,
        new_days,
        new_hours,
        expected_version=current.version,
    )

    logger.info(
        "Balance %s for employee %s via request %s: days %d->%d hours %d->%d",
        action,
        request.employee_id,
        request_id,
        current.days_available,
        new_days,
        current.hours_available,
        new_hours,
    )
    return updated
