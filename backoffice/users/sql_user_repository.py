from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.extensions import db
from ..database.models import UserRow
from .model import PayrollSettings, User


def _to_domain(row: UserRow) -> User:
    return User(
        user_id=int(row.id),
        username=row.username,
        name=row.name,
        role=Role(row.role),
        password_hash=row.password_hash,
        base_salary=int(row.base_salary or 0),
        work_start_minutes=int(row.work_start_minutes),
        work_end_minutes=int(row.work_end_minutes),
        overtime_hourly_rate=row.overtime_hourly_rate,
        created_at=row.created_at,
    )


class SqlUserRepository:
    def get_by_id(self, user_id: int) -> Optional[User]:
        row = db.session.get(UserRow, user_id)
        return _to_domain(row) if row else None

    def get_by_username(self, username: str) -> Optional[User]:
        row = UserRow.query.filter_by(username=username).first()
        return _to_domain(row) if row else None

    def list_all(self) -> Sequence[User]:
        return [_to_domain(r) for r in UserRow.query.order_by(UserRow.id.asc()).all()]

    def create_user(self, *, username: str, name: str, role: Role, password_hash: str) -> User:
        row = UserRow(username=username, name=name, role=role.value, password_hash=password_hash)
        db.session.add(row)
        db.session.flush()
        return _to_domain(row)

    def update_password(self, user_id: int, password_hash: str) -> bool:
        row = db.session.get(UserRow, user_id)
        if not row:
            return False
        row.password_hash = password_hash
        return True

    def update_payroll_settings(self, user_id: int, settings: PayrollSettings) -> bool:
        row = db.session.get(UserRow, user_id)
        if not row:
            return False
        if settings.base_salary is not None:
            row.base_salary = settings.base_salary
        if settings.work_start_minutes is not None:
            row.work_start_minutes = settings.work_start_minutes
        if settings.work_end_minutes is not None:
            row.work_end_minutes = settings.work_end_minutes
        if settings.clear_overtime_rate:
            row.overtime_hourly_rate = None
        elif settings.overtime_hourly_rate is not None:
            row.overtime_hourly_rate = settings.overtime_hourly_rate
        return True
