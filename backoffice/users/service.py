from __future__ import annotations

from contextlib import nullcontext
from dataclasses import dataclass
from typing import Any, Callable, ContextManager, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from .model import PayrollSettings, User
from .repository import UserRepository

PASSWORD_METHOD = "pbkdf2:sha512:150000"


def hash_password(password: str) -> str:
    return generate_password_hash(password, method=PASSWORD_METHOD)


def verify_password(password_hash: str, password: str) -> bool:
    try:
        return check_password_hash(password_hash, password)
    except (TypeError, ValueError):
        # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
        return False


@dataclass(frozen=True)
class BootstrapAdmin:
    """Credentials that create the first Admin on first login."""

    username: str
    password: str
    name: str = "Super Administrator"


class AuthService:
    """Use case: authenticate user (login) and reset passwords."""

    def __init__(
        self,
        users: UserRepository,
        *,
        bootstrap_admin: Optional[BootstrapAdmin] = None,
        transaction: Callable[[], ContextManager[Any]] = nullcontext,
    ):
        self._users = users
        self._bootstrap = bootstrap_admin
        self._tx = transaction

    def authenticate(self, username: str, password: str) -> User:
        if not username or not password:
            raise ValidationError("Username and password are required")

        user = self._users.get_by_username(username)
        if not user:
            if self._is_bootstrap(username, password):
                with self._tx():
                    return self._users.create_user(
                        username=username,
                        name=self._bootstrap.name,
                        role=Role.ADMIN,
                        password_hash=hash_password(password),
                    )
            raise NotFoundError("User not found")

        if not verify_password(user.password_hash, password):
            raise AuthenticationError("Wrong password")
        return user

    def _is_bootstrap(self, username: str, password: str) -> bool:
        return bool(self._bootstrap) and username == self._bootstrap.username and password == self._bootstrap.password

    def reset_password(self, username: str, new_password: str) -> None:
        if not username or not new_password:
            raise ValidationError("Username and new password are required")
        user = self._users.get_by_username(username)
        if not user:
            raise NotFoundError("User not found")
        with self._tx():
            self._users.update_password(user.user_id, hash_password(new_password))


class UserService:
    """Use case: manage users (admin)."""

    def __init__(
        self,
        users: UserRepository,
        *,
        default_password: str,
        transaction: Callable[[], ContextManager[Any]] = nullcontext,
    ):
        self._users = users
        self._default_password = default_password
        self._tx = transaction

    def list_users(self) -> Sequence[User]:
        return self._users.list_all()

    def get_user(self, user_id: int) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def create_account(self, *, name: str, username: str, role: str) -> User:
        name = require_non_empty(name, "Name")
        username = require_non_empty(username, "Username")
        try:
            role_e = Role(str(role or "").strip())
        except ValueError:
            raise ValidationError("Unknown role")

        if self._users.get_by_username(username):
            raise ConflictError("Username already taken")

        with self._tx():
            return self._users.create_user(
                username=username,
                name=name,
                role=role_e,
                password_hash=hash_password(self._default_password),
            )

    def update_payroll_settings(self, user_id: int, body: dict) -> None:
        """Apply numeric fields only; ``overtimeHourlyRate: null`` clears the rate."""

        def number(key: str) -> Optional[int]:
            value = body.get(key)
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                return int(value)
            return None

        settings = PayrollSettings(
            base_salary=number("baseSalary"),
            work_start_minutes=number("workStartMinutes"),
            work_end_minutes=number("workEndMinutes"),
            overtime_hourly_rate=number("overtimeHourlyRate"),
            clear_overtime_rate="overtimeHourlyRate" in body and body["overtimeHourlyRate"] is None,
        )
        start = settings.work_start_minutes
        end = settings.work_end_minutes
        for value in (start, end):
            if value is not None and not 0 <= value <= 24 * 60:
                raise ValidationError("Work minutes must be within a day")

        with self._tx():
            if not self._users.update_payroll_settings(user_id, settings):
                raise NotFoundError("User not found")
