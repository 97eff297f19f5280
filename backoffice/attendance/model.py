from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import iso


@dataclass(frozen=True)
class AttendanceRecord:
    """One clock-in per user per Jakarta calendar day."""

    record_id: int
    user_id: int
    work_date: date
    clock_in: datetime
    clock_out: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.clock_out is None

    def to_dict(self) -> dict:
        return {
            "id": self.record_id,
            "userId": self.user_id,
            "date": iso(self.work_date),
            "clockInAt": iso(self.clock_in),
            "clockOutAt": iso(self.clock_out),
        }


@dataclass(frozen=True)
class WorkSchedule:
    start_minutes: int
    end_minutes: int


@dataclass(frozen=True)
class AttendanceDay:
    record: AttendanceRecord
    lateness_minutes: int
    worked_minutes: int

    def to_dict(self) -> dict:
        data = self.record.to_dict()
        data.update({"latenessMinutes": self.lateness_minutes, "workedMinutes": self.worked_minutes})
        return data
