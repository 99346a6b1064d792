from __future__ import annotations

import pytest

from src.attendance_tracker.attendance_tracker.core.enums import Role
from src.attendance_tracker.attendance_tracker.core.exceptions import AuthenticationError, ValidationError
from src.attendance_tracker.attendance_tracker.storage.bootstrap import ensure_default_users
from src.attendance_tracker.attendance_tracker.users.json_user_repository import JsonUserRepository
from src.attendance_tracker.attendance_tracker.users.service import AuthService, UserService
from src.attendance_tracker.attendance_tracker.users.throttle import LoginThrottle


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def users_repo(store, fixed_now):
    ensure_default_users(store, now=fixed_now)
    return JsonUserRepository(store)


def test_login_with_seeded_admin(users_repo):
    s_user = AuthService(users_repo).authenticate("admin", "admin123", identifier="127.0.0.1")

    assert s_user.user_id == 1
    assert s_user.role == Role.ADMIN


def test_wrong_password_is_rejected(users_repo):
    with pytest.raises(AuthenticationError, match="Invalid credentials"):
        AuthService(users_repo).authenticate("admin", "nope")


def test_unknown_user_is_rejected(users_repo):
    with pytest.raises(AuthenticationError, match="Invalid credentials"):
        AuthService(users_repo).authenticate("ghost", "admin123")


def test_lockout_after_five_failures(users_repo):
    clock = FakeClock()
    svc = AuthService(users_repo, LoginThrottle(clock=clock))
    for _ in range(5):
        with pytest.raises(AuthenticationError):
            svc.authenticate("employee1", "wrong", identifier="10.0.0.1")

    with pytest.raises(AuthenticationError, match="Try again in 15 minutes"):
        svc.authenticate("employee1", "emp123", identifier="10.0.0.1")

    # other clients are not affected
    assert svc.authenticate("employee1", "emp123", identifier="10.0.0.2").username == "employee1"

    clock.now += 901
    assert svc.authenticate("employee1", "emp123", identifier="10.0.0.1").role == Role.EMPLOYEE


def test_throttle_reports_remaining_minutes():
    clock = FakeClock()
    throttle = LoginThrottle(max_attempts=2, lockout_seconds=900, clock=clock)
    throttle.record_failure("k")
    throttle.record_failure("k")

    clock.now += 600
    with pytest.raises(AuthenticationError, match="Try again in 5 minutes"):
        throttle.check("k")

    throttle.reset("k")
    throttle.check("k")


def test_register_creates_employee(users_repo, fixed_now):
    user = UserService(users_repo).register(username="new_hire", email="new@company.com", password="secret1", now=fixed_now)

    assert user.user_id == 4
    assert user.role == Role.EMPLOYEE
    assert "password" not in user.to_public()
    assert AuthService(users_repo).authenticate("new_hire", "secret1").user_id == 4


@pytest.mark.parametrize(
    "payload",
    [
        {"username": "ab", "email": "a@b.co", "password": "secret1"},
        {"username": "bad name", "email": "a@b.co", "password": "secret1"},
        {"username": "x" * 51, "email": "a@b.co", "password": "secret1"},
        {"username": "valid_name", "email": "not-an-email", "password": "secret1"},
        {"username": "valid_name", "email": "a@b.co", "password": "123"},
        {"username": "valid_name", "email": "a@b.co", "password": "secret1", "role": "owner"},
        {"username": "admin", "email": "fresh@b.co", "password": "secret1"},
        {"username": "fresh", "email": "admin@company.com", "password": "secret1"},
    ],
)
def test_register_rejects_invalid_input(users_repo, payload):
    with pytest.raises(ValidationError):
        UserService(users_repo).register(**payload)


def test_seeding_is_skipped_when_users_exist(store, users_repo):
    assert ensure_default_users(store) == 0
    assert [u.username for u in users_repo.list_all()] == ["admin", "supervisor1", "employee1"]


def test_malformed_user_entries_are_skipped(store, fixed_now):
    ensure_default_users(store, now=fixed_now)
    store.write("users", ["junk", {"email": "no-id@company.com"}, *store.read("users")])
    repo = JsonUserRepository(store)

    assert repo.get_by_id(1).username == "admin"
    assert [u.username for u in repo.list_all()] == ["admin", "supervisor1", "employee1"]

    user = UserService(repo).register(username="after_junk", email="after@company.com", password="secret1")
    assert user.user_id == 4
