from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import OvertimeStatus
from .model import ManualPenalty, OvertimeRequest, PayrollSnapshot, UserBonus


class OvertimeRepository(Protocol):
    def get(self, request_id: int) -> Optional[OvertimeRequest]:
        raise NotImplementedError

    def create(self, *, user_id: int, start: datetime, end: datetime, minutes: int, reason: Optional[str]) -> OvertimeRequest:
        raise NotImplementedError

    def list_between(
        self,
        start: datetime,
        end: datetime,
        *,
        user_id: Optional[int] = None,
        status: Optional[OvertimeStatus] = None,
    ) -> Sequence[OvertimeRequest]:
        """Requests starting in ``[start, end)``, oldest first."""
        raise NotImplementedError

    def decide(
        self, request_id: int, *, status: OvertimeStatus, approved_by_id: Optional[int], approved_at: datetime
    ) -> OvertimeRequest:
        raise NotImplementedError


class BonusRepository(Protocol):
    def get(self, bonus_id: int) -> Optional[UserBonus]:
        raise NotImplementedError

    def search(
        self, *, user_id: Optional[int] = None, year: Optional[int] = None, month: Optional[int] = None
    ) -> Sequence[UserBonus]:
        raise NotImplementedError

    def create(self, *, user_id: int, year: int, month: int, amount: int, note: Optional[str]) -> UserBonus:
        raise NotImplementedError

    def update(self, bonus_id: int, *, user_id: int, year: int, month: int, amount: int, note: Optional[str]) -> UserBonus:
        raise NotImplementedError

    def delete(self, bonus_id: int) -> bool:
        raise NotImplementedError


class PenaltyRepository(Protocol):
    def search(self, *, month: str, user_id: Optional[int] = None) -> Sequence[ManualPenalty]:
        raise NotImplementedError

    def create(self, *, user_id: int, month: str, amount: int, reason: Optional[str]) -> ManualPenalty:
        raise NotImplementedError

    def delete(self, penalty_id: int) -> bool:
        raise NotImplementedError


class SnapshotRepository(Protocol):
    def for_month(self, month: str) -> dict[int, PayrollSnapshot]:
        raise NotImplementedError

    def create_many(self, snapshots: Iterable[PayrollSnapshot]) -> None:
        raise NotImplementedError
