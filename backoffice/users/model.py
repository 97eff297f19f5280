from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.constants import DEFAULT_WORK_END_MINUTES, DEFAULT_WORK_START_MINUTES
from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: plain data object, no DB access code.
    """

    user_id: int
    username: str
    name: str
    role: Role
    password_hash: str
    base_salary: int = 0
    work_start_minutes: int = DEFAULT_WORK_START_MINUTES
    work_end_minutes: int = DEFAULT_WORK_END_MINUTES
    overtime_hourly_rate: Optional[int] = None
    created_at: Optional[datetime] = None

    def to_public(self) -> dict:
        return {
            "id": self.user_id,
            "username": self.username,
            "name": self.name,
            "role": self.role.value,
            "baseSalary": self.base_salary,
            "workStartMinutes": self.work_start_minutes,
            "workEndMinutes": self.work_end_minutes,
            "overtimeHourlyRate": self.overtime_hourly_rate,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class PayrollSettings:
    base_salary: Optional[int] = None
    work_start_minutes: Optional[int] = None
    work_end_minutes: Optional[int] = None
    overtime_hourly_rate: Optional[int] = None
    clear_overtime_rate: bool = False
