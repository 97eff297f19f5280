from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import iso
from ..core.enums import OvertimeStatus


@dataclass(frozen=True)
class OvertimeRequest:
    request_id: int
    user_id: int
    start: datetime
    end: datetime
    minutes: int
    status: OvertimeStatus
    reason: Optional[str] = None
    approved_by_id: Optional[int] = None
    approved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    user_name: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.status == OvertimeStatus.PENDING

    def to_dict(self) -> dict:
        return {
            "id": self.request_id,
            "userId": self.user_id,
            "userName": self.user_name,
            "startAt": iso(self.start),
            "endAt": iso(self.end),
            "minutes": self.minutes,
            "reason": self.reason,
            "status": self.status.value,
            "approvedById": self.approved_by_id,
            "approvedAt": iso(self.approved_at),
            "createdAt": iso(self.created_at),
        }


@dataclass(frozen=True)
class UserBonus:
    bonus_id: int
    user_id: int
    year: int
    month: int
    amount: int
    note: Optional[str] = None
    created_at: Optional[datetime] = None
    user_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.bonus_id,
            "userId": self.user_id,
            "userName": self.user_name,
            "year": self.year,
            "month": self.month,
            "amount": self.amount,
            "note": self.note,
            "createdAt": iso(self.created_at),
        }


@dataclass(frozen=True)
class ManualPenalty:
    penalty_id: int
    user_id: int
    month: str
    amount: int
    reason: Optional[str] = None
    created_at: Optional[datetime] = None
    user_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.penalty_id,
            "userId": self.user_id,
            "userName": self.user_name,
            "month": self.month,
            "amount": self.amount,
            "reason": self.reason,
            "createdAt": iso(self.created_at),
        }


@dataclass(frozen=True)
class PayrollSnapshot:
    """Salary inputs frozen the first time a month's payroll is computed."""

    user_id: int
    month: str
    base_salary: int
    hourly_rate: float
    penalty_rate: float
