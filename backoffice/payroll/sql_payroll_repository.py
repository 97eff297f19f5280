from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Sequence

from ..core.enums import OvertimeStatus
from ..database.extensions import db
from ..database.models import ManualPenaltyRow, OvertimeRequestRow, PayrollSnapshotRow, UserBonusRow, UserRow
from .model import ManualPenalty, OvertimeRequest, PayrollSnapshot, UserBonus


def _user_names(user_ids: Iterable[int]) -> dict[int, str]:
    ids = set(user_ids)
    if not ids:
        return {}
    return {u.id: u.name for u in UserRow.query.filter(UserRow.id.in_(ids)).all()}


def to_overtime(row: OvertimeRequestRow) -> OvertimeRequest:
    return OvertimeRequest(
        request_id=int(row.id),
        user_id=int(row.user_id),
        start=row.start,
        end=row.end,
        minutes=int(row.minutes),
        status=OvertimeStatus(row.status),
        reason=row.reason,
        approved_by_id=row.approved_by_id,
        approved_at=row.approved_at,
        created_at=row.created_at,
        user_name=row.user.name if row.user else None,
    )


def to_bonus(row: UserBonusRow, names: dict[int, str]) -> UserBonus:
    return UserBonus(
        bonus_id=int(row.id),
        user_id=int(row.user_id),
        year=int(row.year),
        month=int(row.month),
        amount=int(row.amount),
        note=row.note,
        created_at=row.created_at,
        user_name=names.get(row.user_id),
    )


def to_penalty(row: ManualPenaltyRow, names: dict[int, str]) -> ManualPenalty:
    return ManualPenalty(
        penalty_id=int(row.id),
        user_id=int(row.user_id),
        month=row.month,
        amount=int(row.amount),
        reason=row.reason,
        created_at=row.created_at,
        user_name=names.get(row.user_id),
    )


class SqlOvertimeRepository:
    def get(self, request_id: int) -> Optional[OvertimeRequest]:
        row = db.session.get(OvertimeRequestRow, request_id)
        return to_overtime(row) if row else None

    def create(self, *, user_id: int, start: datetime, end: datetime, minutes: int, reason: Optional[str]) -> OvertimeRequest:
        row = OvertimeRequestRow(
            user_id=user_id, start=start, end=end, minutes=minutes, reason=reason, status=OvertimeStatus.PENDING.value
        )
        db.session.add(row)
        db.session.flush()
        return to_overtime(row)

    def list_between(
        self,
        start: datetime,
        end: datetime,
        *,
        user_id: Optional[int] = None,
        status: Optional[OvertimeStatus] = None,
    ) -> Sequence[OvertimeRequest]:
        q = OvertimeRequestRow.query.filter(OvertimeRequestRow.start >= start, OvertimeRequestRow.start < end)
        if user_id is not None:
            q = q.filter(OvertimeRequestRow.user_id == user_id)
        if status is not None:
            q = q.filter(OvertimeRequestRow.status == status.value)
        return [to_overtime(r) for r in q.order_by(OvertimeRequestRow.start.asc()).all()]

    def decide(
        self, request_id: int, *, status: OvertimeStatus, approved_by_id: Optional[int], approved_at: datetime
    ) -> OvertimeRequest:
        row = db.session.get(OvertimeRequestRow, request_id)
        row.status = status.value
        row.approved_by_id = approved_by_id
        row.approved_at = approved_at
        db.session.flush()
        return to_overtime(row)


class SqlBonusRepository:
    def get(self, bonus_id: int) -> Optional[UserBonus]:
        row = db.session.get(UserBonusRow, bonus_id)
        return to_bonus(row, _user_names([row.user_id])) if row else None

    def search(
        self, *, user_id: Optional[int] = None, year: Optional[int] = None, month: Optional[int] = None
    ) -> Sequence[UserBonus]:
        q = UserBonusRow.query
        if user_id is not None:
            q = q.filter(UserBonusRow.user_id == user_id)
        if year is not None:
            q = q.filter(UserBonusRow.year == year)
        if month is not None:
            q = q.filter(UserBonusRow.month == month)
        rows = q.order_by(UserBonusRow.year.desc(), UserBonusRow.month.desc(), UserBonusRow.id.desc()).all()
        names = _user_names(r.user_id for r in rows)
        return [to_bonus(r, names) for r in rows]

    def create(self, *, user_id: int, year: int, month: int, amount: int, note: Optional[str]) -> UserBonus:
        row = UserBonusRow(user_id=user_id, year=year, month=month, amount=amount, note=note)
        db.session.add(row)
        db.session.flush()
        return to_bonus(row, _user_names([user_id]))

    def update(self, bonus_id: int, *, user_id: int, year: int, month: int, amount: int, note: Optional[str]) -> UserBonus:
        row = db.session.get(UserBonusRow, bonus_id)
        row.user_id = user_id
        row.year = year
        row.month = month
        row.amount = amount
        row.note = note
        db.session.flush()
        return to_bonus(row, _user_names([user_id]))

    def delete(self, bonus_id: int) -> bool:
        return UserBonusRow.query.filter_by(id=bonus_id).delete(synchronize_session=False) > 0


class SqlPenaltyRepository:
    def search(self, *, month: str, user_id: Optional[int] = None) -> Sequence[ManualPenalty]:
        q = ManualPenaltyRow.query.filter(ManualPenaltyRow.month == month)
        if user_id is not None:
            q = q.filter(ManualPenaltyRow.user_id == user_id)
        rows = q.order_by(ManualPenaltyRow.id.desc()).all()
        names = _user_names(r.user_id for r in rows)
        return [to_penalty(r, names) for r in rows]

    def create(self, *, user_id: int, month: str, amount: int, reason: Optional[str]) -> ManualPenalty:
        row = ManualPenaltyRow(user_id=user_id, month=month, amount=amount, reason=reason)
        db.session.add(row)
        db.session.flush()
        return to_penalty(row, _user_names([user_id]))

    def delete(self, penalty_id: int) -> bool:
        return ManualPenaltyRow.query.filter_by(id=penalty_id).delete(synchronize_session=False) > 0


class SqlSnapshotRepository:
    def for_month(self, month: str) -> dict[int, PayrollSnapshot]:
        rows = PayrollSnapshotRow.query.filter_by(month=month).all()
        return {
            r.user_id: PayrollSnapshot(
                user_id=int(r.user_id),
                month=r.month,
                base_salary=int(r.base_salary),
                hourly_rate=float(r.hourly_rate),
                penalty_rate=float(r.penalty_rate),
            )
            for r in rows
        }

    def create_many(self, snapshots: Iterable[PayrollSnapshot]) -> None:
        db.session.add_all(
            PayrollSnapshotRow(
                user_id=s.user_id,
                month=s.month,
                base_salary=s.base_salary,
                hourly_rate=s.hourly_rate,
                penalty_rate=s.penalty_rate,
            )
            for s in snapshots
        )
        db.session.flush()
