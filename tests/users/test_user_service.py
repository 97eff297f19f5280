from __future__ import annotations

import pytest

from backoffice.core.enums import Role
from backoffice.core.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from backoffice.users.service import AuthService, BootstrapAdmin, UserService, hash_password, verify_password

from tests.fakes import InMemoryUsers


@pytest.fixture
def users():
    return InMemoryUsers()


def test_verify_password_tolerates_placeholder_hashes():
    assert verify_password(hash_password("secret"), "secret")
    assert not verify_password("CHANGE_ME", "secret")


def test_bootstrap_admin_created_on_first_login(users):
    auth = AuthService(users, bootstrap_admin=BootstrapAdmin(username="root", password="s3cret"))

    user = auth.authenticate("root", "s3cret")

    assert user.role == Role.ADMIN
    assert users.get_by_username("root") is not None
    assert auth.authenticate("root", "s3cret").user_id == user.user_id
    with pytest.raises(AuthenticationError):
        auth.authenticate("root", "wrong")


def test_unknown_user_without_bootstrap(users):
    auth = AuthService(users)

    with pytest.raises(NotFoundError):
        auth.authenticate("ghost", "x")
    with pytest.raises(ValidationError):
        auth.authenticate("", "")


def test_create_account_and_reset_password(users):
    svc = UserService(users, default_password="welcome1")
    auth = AuthService(users)

    created = svc.create_account(name="Dewi", username="dewi", role="Sales")
    assert created.role == Role.SALES
    assert auth.authenticate("dewi", "welcome1").user_id == created.user_id

    auth.reset_password("dewi", "n3w-pass")
    assert auth.authenticate("dewi", "n3w-pass").user_id == created.user_id

    with pytest.raises(ConflictError):
        svc.create_account(name="Dewi 2", username="dewi", role="Sales")
    with pytest.raises(ValidationError):
        svc.create_account(name="X", username="x", role="Owner")


def test_payroll_settings(users):
    svc = UserService(users, default_password="welcome1")
    user = svc.create_account(name="Dewi", username="dewi", role="Baker")

    svc.update_payroll_settings(user.user_id, {"baseSalary": 4_000_000, "overtimeHourlyRate": 30_000})
    assert users.get_by_id(user.user_id).overtime_hourly_rate == 30_000

    svc.update_payroll_settings(user.user_id, {"overtimeHourlyRate": None})
    assert users.get_by_id(user.user_id).overtime_hourly_rate is None
    assert users.get_by_id(user.user_id).base_salary == 4_000_000

    with pytest.raises(ValidationError):
        svc.update_payroll_settings(user.user_id, {"workStartMinutes": 2000})
    with pytest.raises(NotFoundError):
        svc.update_payroll_settings(99, {"baseSalary": 1})
