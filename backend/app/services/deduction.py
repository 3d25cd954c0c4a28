"""Pure arithmetic for request amounts and the balance deduction they imply.

Two functions live here:

* ``compute_request_amounts`` derives the persisted ``days_off`` / ``hours_off``
  fields from what the employee typed in. It runs on create and on every edit.
* ``compute_deduction`` reads those persisted fields back when a request is
  approved or restored. It never looks at the raw dates again, so the amount
  restored is always the amount that was stored at approval time.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

from app.models.enums import RequestType

if TYPE_CHECKING:
    from datetime import date

    from app.models.request import TimeOffRequest


class Deduction(NamedTuple):
    """Whole days and whole hours taken from (or returned to) a balance."""

    days: int
    hours: int


NO_DEDUCTION = Deduction(days=0, hours=0)


def inclusive_day_count(start: date, end: date) -> int:
    """Number of calendar days from start to end, counting both endpoints."""
    return (end - start).days + 1


def compute_request_amounts(
    request_type: RequestType,
    start_date: date,
    end_date: date | None,
    hours: int | None,
) -> Deduction:
    """Derive the stored days_off / hours_off for a request.

    Sick leave is recorded with zero amounts: it never consumes balance.
    """
    if request_type == RequestType.DAYS_OFF:
        if end_date is None:
            msg = "DAYS_OFF requests need an end date"
            raise ValueError(msg)
        return Deduction(days=inclusive_day_count(start_date, end_date), hours=0)
    if request_type == RequestType.HOURS_OFF:
        return Deduction(days=0, hours=hours or 0)
    return NO_DEDUCTION


def compute_deduction(request: TimeOffRequest) -> Deduction:
    """Amount to deduct on approval (or restore later), from the stored fields."""
    request_type = RequestType(request.type)
    if request_type == RequestType.HOURS_OFF:
        return Deduction(days=0, hours=request.hours_off)
    if request_type == RequestType.DAYS_OFF:
        return Deduction(days=request.days_off, hours=0)
    return NO_DEDUCTION
