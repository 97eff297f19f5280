from __future__ import annotations

from datetime import date, datetime

import pytest

from backoffice.attendance.model import AttendanceRecord
from backoffice.attendance.service import AttendanceService
from backoffice.core.enums import OvertimeStatus, Role
from backoffice.core.exceptions import NotFoundError, ValidationError
from backoffice.users.model import User

from tests.fakes import InMemoryAttendance, InMemoryOvertime, InMemoryUsers


@pytest.fixture
def staff():
    return User(user_id=1, username="sari", name="Sari", role=Role.BAKER, password_hash="x", base_salary=4_800_000)


@pytest.fixture
def attendance():
    return InMemoryAttendance()


@pytest.fixture
def overtime():
    return InMemoryOvertime()


def _svc(attendance, overtime, staff, now):
    return AttendanceService(attendance, InMemoryUsers([staff]), overtime, clock=lambda: now)


def test_clock_in_inside_working_hours(attendance, overtime, staff, fixed_now):
    svc = _svc(attendance, overtime, staff, fixed_now)

    record = svc.clock_in(1)

    assert record.work_date == date(2025, 3, 10)
    assert record.clock_in == fixed_now
    assert svc.clock_in(1) == record
    assert len(attendance.by_id) == 1
    assert svc.open_record(1) == record


@pytest.mark.parametrize(
    "utc_now",
    [
        datetime(2025, 3, 10, 1, 59),  # 08:59 WIB
        datetime(2025, 3, 10, 10, 0),  # 17:00 WIB
    ],
)
def test_clock_in_outside_working_hours(attendance, overtime, staff, utc_now):
    with pytest.raises(ValidationError):
        _svc(attendance, overtime, staff, utc_now).clock_in(1)


def test_clock_in_unknown_user(attendance, overtime, staff, fixed_now):
    with pytest.raises(NotFoundError):
        _svc(attendance, overtime, staff, fixed_now).clock_in(2)


def test_clock_out_once(attendance, overtime, staff, fixed_now):
    svc = _svc(attendance, overtime, staff, fixed_now)
    record = svc.clock_in(1)

    closed = svc.clock_out(record.record_id)
    assert closed.clock_out == fixed_now
    assert svc.open_record(1) is None

    with pytest.raises(ValidationError):
        svc.clock_out(record.record_id)
    with pytest.raises(NotFoundError):
        svc.clock_out(42)


def test_monthly_summary(attendance, overtime, staff):
    # 10:00 -> 17:00 WIB, 30 minutes past the tolerance
    attendance.by_id[1] = AttendanceRecord(1, 1, date(2025, 3, 3), datetime(2025, 3, 3, 3, 0), datetime(2025, 3, 3, 10, 0))
    # 09:20 WIB, never clocked out
    attendance.by_id[2] = AttendanceRecord(2, 1, date(2025, 3, 4), datetime(2025, 3, 4, 2, 20))
    # February is out of range
    attendance.by_id[3] = AttendanceRecord(3, 1, date(2025, 2, 28), datetime(2025, 2, 28, 4, 0))
    ot = overtime.create(
        user_id=1, start=datetime(2025, 3, 3, 10, 0), end=datetime(2025, 3, 3, 11, 30), minutes=90, reason=None
    )
    overtime.decide(ot.request_id, status=OvertimeStatus.APPROVED, approved_by_id=9, approved_at=datetime(2025, 3, 4))
    overtime.create(user_id=1, start=datetime(2025, 3, 5, 10, 0), end=datetime(2025, 3, 5, 11, 0), minutes=60, reason=None)

    svc = _svc(attendance, overtime, staff, datetime(2025, 3, 20, 5, 0))
    summary = svc.monthly(1, "2025-03")

    assert summary["month"] == "2025-03"
    assert [r["id"] for r in summary["records"]] == [1, 2]
    assert summary["totals"] == {
        "latenessMinutes": 30,
        "workedMinutes": 420 + 460,
        "overtimeMinutes": 90,
        "hourlyRate": 30_000,
        "penaltyRate": 20_000,
        "latenessPenalty": 0,
    }

    with pytest.raises(ValidationError):
        svc.monthly(1, None)
