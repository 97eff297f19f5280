from __future__ import annotations

import logging
from contextlib import nullcontext
from datetime import datetime
from typing import Any, Callable, ContextManager, Optional

from ..attendance.repository import AttendanceRepository
from ..attendance.service import month_dates, schedule_for
from ..common.datetime_utils import month_key, month_range, now_utc, parse_datetime, parse_month
from ..common.money import round_half_up
from ..common.validators import optional_int, require_int, require_number
from ..core.enums import OvertimeStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..users.repository import UserRepository
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import ManualPenalty, OvertimeRequest, PayrollSnapshot, UserBonus
from .repository import BonusRepository, OvertimeRepository, PenaltyRepository, SnapshotRepository

logger = logging.getLogger(__name__)


def _required_month(value: Optional[str]) -> tuple[int, int]:
    if not value:
        raise ValidationError("month (YYYY-MM) is required")
    return parse_month(value)


class OvertimeService:
    def __init__(
        self,
        overtime: OvertimeRepository,
        users: UserRepository,
        *,
        transaction: Callable[[], ContextManager[Any]] = nullcontext,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._overtime = overtime
        self._users = users
        self._tx = transaction
        self._clock = clock

    def request(self, body: dict) -> OvertimeRequest:
        user_id = require_int(body.get("userId"), "userId", minimum=1)
        start_raw = body.get("start") or body.get("startAt")
        end_raw = body.get("end") or body.get("endAt")
        if not start_raw or not end_raw:
            raise ValidationError("userId, start and end are required")
        start, end = parse_datetime(start_raw), parse_datetime(end_raw)
        if end <= start:
            raise ValidationError("end must be after start")
        if not self._users.get_by_id(user_id):
            raise NotFoundError("User not found")
        minutes = round_half_up((end - start).total_seconds() / 60)
        with self._tx():
            return self._overtime.create(
                user_id=user_id, start=start, end=end, minutes=minutes, reason=(body.get("reason") or "").strip() or None
            )

    def list_requests(self, *, month: Optional[str], user_id: Optional[int]) -> list[OvertimeRequest]:
        year, mon = _required_month(month)
        start, end = month_range(year, mon)
        return list(self._overtime.list_between(start, end, user_id=user_id))

    def decide(self, request_id: int, body: dict) -> OvertimeRequest:
        item = self._overtime.get(request_id)
        if not item:
            raise NotFoundError("Overtime request not found")
        if not item.is_pending:
            raise ValidationError(f"Overtime request is already {item.status.value}")
        status = OvertimeStatus.APPROVED if body.get("approve") else OvertimeStatus.REJECTED
        approver = optional_int(body.get("approverId", body.get("adminId")), "approverId")
        with self._tx():
            return self._overtime.decide(request_id, status=status, approved_by_id=approver, approved_at=self._clock())


class BonusService:
    def __init__(
        self,
        bonuses: BonusRepository,
        users: UserRepository,
        *,
        transaction: Callable[[], ContextManager[Any]] = nullcontext,
    ):
        self._bonuses = bonuses
        self._users = users
        self._tx = transaction

    def _fields(self, body: dict) -> dict:
        user_id = require_int(body.get("userId"), "userId", minimum=1)
        if not self._users.get_by_id(user_id):
            raise NotFoundError("User not found")
        month = require_int(body.get("month"), "month", minimum=1)
        if month > 12:
            raise ValidationError("month must be between 1 and 12")
        return {
            "user_id": user_id,
            "year": require_int(body.get("year"), "year", minimum=2000),
            "month": month,
            "amount": round_half_up(require_number(body.get("amount"), "amount", minimum=0)),
            "note": (body.get("note") or "").strip() or None,
        }

    def list_bonuses(self, *, user_id: Optional[int], year: Optional[int], month: Optional[int]) -> list[UserBonus]:
        return list(self._bonuses.search(user_id=user_id, year=year, month=month))

    def create(self, body: dict) -> UserBonus:
        fields = self._fields(body)
        with self._tx():
            return self._bonuses.create(**fields)

    def update(self, bonus_id: int, body: dict) -> UserBonus:
        current = self._bonuses.get(bonus_id)
        if not current:
            raise NotFoundError("Bonus not found")
        merged = {
            "userId": current.user_id,
            "year": current.year,
            "month": current.month,
            "amount": current.amount,
            "note": current.note,
        }
        merged.update({k: v for k, v in body.items() if v is not None})
        fields = self._fields(merged)
        with self._tx():
            return self._bonuses.update(bonus_id, **fields)

    def delete(self, bonus_id: int) -> None:
        with self._tx():
            if not self._bonuses.delete(bonus_id):
                raise NotFoundError("Bonus not found")


class PenaltyService:
    def __init__(
        self,
        penalties: PenaltyRepository,
        users: UserRepository,
        *,
        transaction: Callable[[], ContextManager[Any]] = nullcontext,
    ):
        self._penalties = penalties
        self._users = users
        self._tx = transaction

    def list_penalties(self, *, month: Optional[str], user_id: Optional[int]) -> list[ManualPenalty]:
        year, mon = _required_month(month)
        return list(self._penalties.search(month=month_key(year, mon), user_id=user_id))

    def create(self, body: dict) -> ManualPenalty:
        year, mon = _required_month(body.get("month"))
        user_id = require_int(body.get("userId"), "userId", minimum=1)
        amount = round_half_up(require_number(body.get("amount"), "amount"))
        if amount <= 0:
            raise ValidationError("amount must be greater than 0")
        if not self._users.get_by_id(user_id):
            raise NotFoundError("User not found")
        with self._tx():
            return self._penalties.create(
                user_id=user_id,
                month=month_key(year, mon),
                amount=amount,
                reason=(body.get("reason") or "").strip() or None,
            )

    def delete(self, penalty_id: int) -> None:
        with self._tx():
            if not self._penalties.delete(penalty_id):
                raise NotFoundError("Penalty not found")


class PayrollService:
    """Monthly payroll summary over frozen salary snapshots."""

    def __init__(
        self,
        users: UserRepository,
        attendance: AttendanceRepository,
        overtime: OvertimeRepository,
        bonuses: BonusRepository,
        penalties: PenaltyRepository,
        snapshots: SnapshotRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
        transaction: Callable[[], ContextManager[Any]] = nullcontext,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._users = users
        self._attendance = attendance
        self._overtime = overtime
        self._bonuses = bonuses
        self._penalties = penalties
        self._snapshots = snapshots
        self._calculator = calculator or StandardPayrollCalculator()
        self._tx = transaction
        self._clock = clock

    def _ensure_snapshots(self, users, month: str) -> dict[int, PayrollSnapshot]:
        snapshots = self._snapshots.for_month(month)
        missing = [
            PayrollSnapshot(
                user_id=u.user_id,
                month=month,
                base_salary=int(u.base_salary or 0),
                hourly_rate=self._calculator.hourly_rate(u),
                penalty_rate=self._calculator.penalty_rate(u),
            )
            for u in users
            if u.user_id not in snapshots
        ]
        if missing:
            with self._tx():
                self._snapshots.create_many(missing)
            logger.info("payroll %s: froze %d new snapshot(s)", month, len(missing))
            snapshots.update({s.user_id: s for s in missing})
        return snapshots

    def summary(self, month: Optional[str]) -> dict:
        year, mon = _required_month(month)
        key = month_key(year, mon)
        users = sorted(self._users.list_all(), key=lambda u: u.user_id)
        snapshots = self._ensure_snapshots(users, key)

        first, nxt = month_dates(year, mon)
        start, end = month_range(year, mon)
        records = self._attendance.list_between(first, nxt)
        overtime = self._overtime.list_between(start, end, status=OvertimeStatus.APPROVED)
        bonuses = self._bonuses.search(year=year, month=mon)
        penalties = self._penalties.search(month=key)
        now = self._clock()

        lines = []
        for user in users:
            snap = snapshots[user.user_id]
            schedule = schedule_for(user)
            own = [r for r in records if r.user_id == user.user_id]
            lateness = sum(self._calculator.lateness_minutes(r, schedule) for r in own)
            worked = sum(self._calculator.worked_minutes(r, schedule, now=now) for r in own)
            ot_minutes = sum(o.minutes for o in overtime if o.user_id == user.user_id)
            own_penalties = [p for p in penalties if p.user_id == user.user_id]

            lateness_penalty = self._calculator.lateness_penalty(lateness, snap.penalty_rate)
            manual_penalty = sum(p.amount for p in own_penalties)
            overtime_pay = self._calculator.overtime_pay(ot_minutes, snap.hourly_rate)
            lines.append(
                {
                    "user": {
                        "id": user.user_id,
                        "name": user.name,
                        "username": user.username,
                        "role": user.role.value,
                        "baseSalary": snap.base_salary,
                        "hourlyRate": snap.hourly_rate,
                        "penaltyRate": snap.penalty_rate,
                    },
                    "totals": {
                        "latenessMinutes": lateness,
                        "workedMinutes": worked,
                        "overtimeMinutes": ot_minutes,
                    },
                    "penalty": lateness_penalty,
                    "manualPenalty": manual_penalty,
                    "manualPenaltyDetails": [{"amount": p.amount, "reason": p.reason} for p in own_penalties],
                    "overtimePay": overtime_pay,
                    "netSalary": self._calculator.net_salary(
                        base_salary=snap.base_salary,
                        lateness_penalty=lateness_penalty,
                        manual_penalty=manual_penalty,
                        overtime_pay=overtime_pay,
                    ),
                    "bonus": sum(b.amount for b in bonuses if b.user_id == user.user_id),
                }
            )

        rates = {user.user_id: snapshots[user.user_id].hourly_rate for user in users}
        names = {user.user_id: user.name for user in users}
        overtime_details = [
            {
                "id": o.request_id,
                "userId": o.user_id,
                "userName": names.get(o.user_id, f"User #{o.user_id}"),
                "startAt": o.start.isoformat(),
                "endAt": o.end.isoformat(),
                "minutes": o.minutes,
                "pay": self._calculator.overtime_pay(o.minutes, rates.get(o.user_id, 0)),
            }
            for o in overtime
        ]
        return {"month": key, "users": lines, "overtimeDetails": overtime_details}
