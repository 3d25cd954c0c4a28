"""Tests for request amount derivation and the deduction it implies."""

from __future__ import annotations

import uuid
from datetime import date, timedelta

import pytest

from app.models.enums import RequestType
from app.models.request import TimeOffRequest
from app.services.deduction import (
    NO_DEDUCTION,
    Deduction,
    compute_deduction,
    compute_request_amounts,
    inclusive_day_count,
)


def _stored_request(request_type: RequestType, days_off: int = 0, hours_off: int = 0) -> TimeOffRequest:
    return TimeOffRequest(
        organization_id=uuid.uuid4(),
        employee_id=uuid.uuid4(),
        type=request_type.value,
        start_date=date(2025, 3, 3),
        end_date=None if request_type == RequestType.HOURS_OFF else date(2025, 3, 7),
        days_off=days_off,
        hours_off=hours_off,
    )


# ---------------------------------------------------------------------------
# compute_request_amounts
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("span", [0, 1, 4, 30, 365])
def test_days_off_counts_both_endpoints(span: int) -> None:
    start = date(2024, 2, 20)
    end = start + timedelta(days=span)
    amounts = compute_request_amounts(RequestType.DAYS_OFF, start, end, None)
    assert amounts == Deduction(days=span + 1, hours=0)
    assert amounts.days == inclusive_day_count(start, end)


def test_days_off_across_leap_day() -> None:
    amounts = compute_request_amounts(RequestType.DAYS_OFF, date(2024, 2, 28), date(2024, 3, 1), None)
    assert amounts.days == 3


def test_days_off_without_end_date_raises() -> None:
    with pytest.raises(ValueError, match="end date"):
        compute_request_amounts(RequestType.DAYS_OFF, date(2025, 1, 1), None, None)


def test_hours_off_uses_requested_hours() -> None:
    amounts = compute_request_amounts(RequestType.HOURS_OFF, date(2025, 1, 1), None, 6)
    assert amounts == Deduction(days=0, hours=6)


def test_sick_leave_is_always_zero() -> None:
    amounts = compute_request_amounts(RequestType.SICK_LEAVE, date(2025, 1, 1), date(2025, 1, 10), None)
    assert amounts == NO_DEDUCTION


# ---------------------------------------------------------------------------
# compute_deduction
# ---------------------------------------------------------------------------


def test_deduction_days_off_reads_stored_days() -> None:
    assert compute_deduction(_stored_request(RequestType.DAYS_OFF, days_off=5)) == Deduction(days=5, hours=0)


def test_deduction_hours_off_reads_stored_hours() -> None:
    assert compute_deduction(_stored_request(RequestType.HOURS_OFF, hours_off=3)) == Deduction(days=0, hours=3)


def test_deduction_trusts_stored_fields_over_dates() -> None:
    """The stored days_off wins even if it disagrees with the date range."""
    request = _stored_request(RequestType.DAYS_OFF, days_off=2)
    assert compute_deduction(request).days == 2


def test_deduction_sick_leave_is_zero() -> None:
    request = _stored_request(RequestType.SICK_LEAVE, days_off=4, hours_off=2)
    assert compute_deduction(request) == NO_DEDUCTION
