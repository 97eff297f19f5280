from __future__ import annotations

from contextlib import nullcontext
from datetime import date, datetime
from typing import Any, Callable, ContextManager, Optional, Sequence

from ..common.datetime_utils import jakarta_today, minute_of_day_jakarta, month_key, month_range, now_utc, parse_month
from ..core.enums import OvertimeStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..payroll.calculator.base import PayrollCalculator
from ..payroll.calculator.standard_calculator import StandardPayrollCalculator
from ..payroll.repository import OvertimeRepository
from ..users.model import User
from ..users.repository import UserRepository
from .model import AttendanceDay, AttendanceRecord, WorkSchedule
from .repository import AttendanceRepository


def _hhmm(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def schedule_for(user: User) -> WorkSchedule:
    return WorkSchedule(start_minutes=user.work_start_minutes, end_minutes=user.work_end_minutes)


def month_dates(year: int, month: int) -> tuple[date, date]:
    """[first day, first day of next month) as Jakarta calendar dates."""
    first = date(year, month, 1)
    nxt = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    return first, nxt


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        overtime: OvertimeRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
        transaction: Callable[[], ContextManager[Any]] = nullcontext,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._attendance = attendance
        self._users = users
        self._overtime = overtime
        self._calculator = calculator or StandardPayrollCalculator()
        self._tx = transaction
        self._clock = clock

    def _user(self, user_id: int) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def clock_in(self, user_id: int) -> AttendanceRecord:
        user = self._user(user_id)
        now = self._clock()
        minute = minute_of_day_jakarta(now)
        if minute < user.work_start_minutes:
            raise ValidationError(f"Too early to clock in (work starts {_hhmm(user.work_start_minutes)} WIB)")
        if minute >= user.work_end_minutes:
            raise ValidationError(f"Working hours are over (until {_hhmm(user.work_end_minutes)} WIB)")

        today = jakarta_today(now)
        existing = self._attendance.get_for_user_and_date(user.user_id, today)
        if existing:
            return existing
        with self._tx():
            return self._attendance.create_clock_in(user_id=user.user_id, work_date=today, clock_in=now)

    def clock_out(self, record_id: int) -> AttendanceRecord:
        record = self._attendance.get(record_id)
        if not record:
            raise NotFoundError("Attendance record not found")
        if not record.is_open:
            raise ValidationError("Already clocked out")
        with self._tx():
            return self._attendance.set_clock_out(record_id, self._clock())

    def open_record(self, user_id: int) -> Optional[AttendanceRecord]:
        return self._attendance.latest_open(user_id)

    def evaluate_days(self, user: User, records: Sequence[AttendanceRecord]) -> list[AttendanceDay]:
        schedule = schedule_for(user)
        now = self._clock()
        return [
            AttendanceDay(
                record=r,
                lateness_minutes=self._calculator.lateness_minutes(r, schedule),
                worked_minutes=self._calculator.worked_minutes(r, schedule, now=now),
            )
            for r in records
        ]

    def monthly(self, user_id: int, month: Optional[str]) -> dict:
        """The user's own month: days, approved overtime, rates and the lateness penalty."""
        if not month:
            raise ValidationError("month (YYYY-MM) is required")
        year, mon = parse_month(month)
        user = self._user(user_id)
        first, nxt = month_dates(year, mon)
        days = self.evaluate_days(user, self._attendance.list_between(first, nxt, user_id=user.user_id))

        start, end = month_range(year, mon)
        overtime = self._overtime.list_between(start, end, user_id=user.user_id, status=OvertimeStatus.APPROVED)
        overtime_minutes = sum(o.minutes for o in overtime)

        hourly = self._calculator.hourly_rate(user)
        penalty_rate = self._calculator.penalty_rate(user)
        lateness = sum(d.lateness_minutes for d in days)
        return {
            "month": month_key(year, mon),
            "records": [d.to_dict() for d in days],
            "overtime": [o.to_dict() for o in overtime],
            "totals": {
                "latenessMinutes": lateness,
                "workedMinutes": sum(d.worked_minutes for d in days),
                "overtimeMinutes": overtime_minutes,
                "hourlyRate": hourly,
                "penaltyRate": penalty_rate,
                "latenessPenalty": self._calculator.lateness_penalty(lateness, penalty_rate),
            },
        }
