from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from ...attendance.model import AttendanceRecord, WorkSchedule
from ...users.model import User


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def hourly_rate(self, user: User) -> int:
        raise NotImplementedError

    @abstractmethod
    def penalty_rate(self, user: User) -> int:
        raise NotImplementedError

    @abstractmethod
    def lateness_minutes(self, record: AttendanceRecord, schedule: WorkSchedule) -> int:
        raise NotImplementedError

    @abstractmethod
    def worked_minutes(self, record: AttendanceRecord, schedule: WorkSchedule, *, now: datetime) -> int:
        raise NotImplementedError

    @abstractmethod
    def lateness_penalty(self, total_lateness_minutes: int, penalty_rate: float) -> int:
        raise NotImplementedError

    @abstractmethod
    def overtime_pay(self, overtime_minutes: int, hourly_rate: float) -> int:
        raise NotImplementedError

    def net_salary(self, *, base_salary: int, lateness_penalty: int, manual_penalty: int, overtime_pay: int) -> int:
        return max(0, base_salary - (lateness_penalty + manual_penalty) + overtime_pay)
