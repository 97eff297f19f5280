from __future__ import annotations

from datetime import datetime, timedelta

from ...attendance.model import AttendanceRecord, WorkSchedule
from ...common.datetime_utils import start_of_day_jakarta
from ...common.money import round_half_up
from ...core.constants import (
    LATE_TOLERANCE_MINUTES,
    LATENESS_FREE_MINUTES,
    OVERTIME_HOURS_DIVISOR,
    PENALTY_HOURS_DIVISOR,
)
from ...users.model import User
from .base import PayrollCalculator


def _minutes(delta: timedelta) -> int:
    return max(0, round_half_up(delta.total_seconds() / 60))


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: 30 minutes late tolerance per day, first 120 late minutes a month are free."""

    def hourly_rate(self, user: User) -> int:
        if user.overtime_hourly_rate is not None:
            return int(user.overtime_hourly_rate)
        return int(user.base_salary or 0) // OVERTIME_HOURS_DIVISOR

    def penalty_rate(self, user: User) -> int:
        return int(user.base_salary or 0) // PENALTY_HOURS_DIVISOR

    def lateness_minutes(self, record: AttendanceRecord, schedule: WorkSchedule) -> int:
        day_start = start_of_day_jakarta(record.work_date)
        allowed = day_start + timedelta(minutes=schedule.start_minutes + LATE_TOLERANCE_MINUTES)
        return _minutes(record.clock_in - allowed)

    def worked_minutes(self, record: AttendanceRecord, schedule: WorkSchedule, *, now: datetime) -> int:
        if record.clock_out is not None:
            return _minutes(record.clock_out - record.clock_in)
        # open record: counted up to the scheduled end at most
        scheduled_end = start_of_day_jakarta(record.work_date) + timedelta(minutes=schedule.end_minutes)
        return _minutes(min(now, scheduled_end) - record.clock_in)

    def lateness_penalty(self, total_lateness_minutes: int, penalty_rate: float) -> int:
        excess = max(0, total_lateness_minutes - LATENESS_FREE_MINUTES)
        return round_half_up(excess * penalty_rate / 60)

    def overtime_pay(self, overtime_minutes: int, hourly_rate: float) -> int:
        return round_half_up(overtime_minutes * hourly_rate / 60)
