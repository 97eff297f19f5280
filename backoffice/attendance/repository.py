from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get(self, record_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def latest_open(self, user_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_clock_in(self, *, user_id: int, work_date: date, clock_in: datetime) -> AttendanceRecord:
        raise NotImplementedError

    def set_clock_out(self, record_id: int, clock_out: datetime) -> AttendanceRecord:
        raise NotImplementedError

    def list_between(self, start: date, end: date, *, user_id: Optional[int] = None) -> Sequence[AttendanceRecord]:
        """Records with ``start <= work_date < end``, oldest first."""
        raise NotImplementedError
