from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..database.extensions import db
from ..database.models import AttendanceRow
from .model import AttendanceRecord


def to_record(row: AttendanceRow) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=int(row.id),
        user_id=int(row.user_id),
        work_date=row.work_date,
        clock_in=row.clock_in,
        clock_out=row.clock_out,
    )


class SqlAttendanceRepository:
    def get(self, record_id: int) -> Optional[AttendanceRecord]:
        row = db.session.get(AttendanceRow, record_id)
        return to_record(row) if row else None

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        row = AttendanceRow.query.filter_by(user_id=user_id, work_date=work_date).first()
        return to_record(row) if row else None

    def latest_open(self, user_id: int) -> Optional[AttendanceRecord]:
        row = (
            AttendanceRow.query.filter(AttendanceRow.user_id == user_id, AttendanceRow.clock_out.is_(None))
            .order_by(AttendanceRow.clock_in.desc())
            .first()
        )
        return to_record(row) if row else None

    def create_clock_in(self, *, user_id: int, work_date: date, clock_in: datetime) -> AttendanceRecord:
        row = AttendanceRow(user_id=user_id, work_date=work_date, clock_in=clock_in)
        db.session.add(row)
        db.session.flush()
        return to_record(row)

    def set_clock_out(self, record_id: int, clock_out: datetime) -> AttendanceRecord:
        row = db.session.get(AttendanceRow, record_id)
        row.clock_out = clock_out
        db.session.flush()
        return to_record(row)

    def list_between(self, start: date, end: date, *, user_id: Optional[int] = None) -> Sequence[AttendanceRecord]:
        q = AttendanceRow.query.filter(AttendanceRow.work_date >= start, AttendanceRow.work_date < end)
        if user_id is not None:
            q = q.filter(AttendanceRow.user_id == user_id)
        return [to_record(r) for r in q.order_by(AttendanceRow.work_date.asc(), AttendanceRow.id.asc()).all()]
