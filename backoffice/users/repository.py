from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import PayrollSettings, User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): services depend on this interface, not on a concrete DB.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError

    def list_all(self) -> Sequence[User]:
        raise NotImplementedError

    def create_user(self, *, username: str, name: str, role: Role, password_hash: str) -> User:
        raise NotImplementedError

    def update_password(self, user_id: int, password_hash: str) -> bool:
        raise NotImplementedError

    def update_payroll_settings(self, user_id: int, settings: PayrollSettings) -> bool:
        raise NotImplementedError
