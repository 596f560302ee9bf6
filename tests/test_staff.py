from __future__ import annotations

import pytest

from src.family_care.family_care.core.enums import StaffGroup
from src.family_care.family_care.core.exceptions import (
    AuthenticationError,
    ConflictError,
    ValidationError,
)
from src.family_care.family_care.staff.service import AuthService, StaffService
from tests.fakes import InMemoryStaff, Store


@pytest.fixture
def repo():
    return InMemoryStaff(Store())


@pytest.fixture
def staff_service(repo):
    return StaffService(repo)


@pytest.fixture
def auth(repo):
    return AuthService(repo)


@pytest.fixture
def kim(staff_service):
    return staff_service.create(full_name="Kim Minsu", nick_name="minsu", personal_pin="4321", group=StaffGroup.TEAM_A)


def test_pin_is_hashed(kim):
    assert kim.pin_hash and kim.pin_hash != "4321"


def test_authenticate_success_logs_and_touches_last_login(auth, repo, kim):
    member = auth.authenticate(" minsu ", "4321", ip_address="10.0.0.1")

    assert member.id == kim.id
    assert repo.get_by_id(kim.id).last_login is not None
    logs = repo.list_login_logs(kim.id, 10)
    assert len(logs) == 1 and logs[0].success and logs[0].ip_address == "10.0.0.1"


def test_authenticate_wrong_pin_records_failure(auth, repo, kim):
    with pytest.raises(AuthenticationError):
        auth.authenticate("minsu", "0000")

    logs = repo.list_login_logs(kim.id, 10)
    assert [log.success for log in logs] == [False]
    assert logs[0].failure_reason == "Invalid PIN"
    assert repo.get_by_id(kim.id).last_login is None


def test_authenticate_unknown_nickname(auth):
    with pytest.raises(AuthenticationError):
        auth.authenticate("ghost", "1234")


def test_authenticate_requires_both_fields(auth):
    with pytest.raises(ValidationError):
        auth.authenticate("minsu", "")


def test_inactive_staff_cannot_log_in(auth, staff_service, kim):
    staff_service.deactivate(kim.id, current_staff_id="someone-else")

    with pytest.raises(AuthenticationError):
        auth.authenticate("minsu", "4321")


def test_nickname_must_be_unique_even_against_inactive(staff_service, kim):
    staff_service.deactivate(kim.id, current_staff_id="someone-else")

    with pytest.raises(ConflictError):
        staff_service.create(full_name="Other", nick_name="minsu", personal_pin="1111", group=StaffGroup.TEAM_B)


def test_create_rejects_short_pin(staff_service):
    with pytest.raises(ValidationError):
        staff_service.create(full_name="X", nick_name="x", personal_pin="12", group=StaffGroup.TEAM_A)


def test_cannot_deactivate_self(staff_service, kim):
    with pytest.raises(ValidationError):
        staff_service.deactivate(kim.id, current_staff_id=kim.id)


def test_cannot_deactivate_self_through_update(staff_service, kim):
    with pytest.raises(ValidationError):
        staff_service.update(kim.id, {"is_active": False}, current_staff_id=kim.id)

    assert staff_service.get(kim.id).is_active is True


def test_update_ignores_nulls_for_required_fields(staff_service, kim):
    updated = staff_service.update(
        kim.id, {"group": None, "is_active": None, "display_order": None, "nick_name": None, "email": None}
    )

    assert updated.group == StaffGroup.TEAM_A
    assert updated.is_active is True
    assert updated.nick_name == "minsu"
    assert updated.email is None


def test_profile_update_ignores_group(staff_service, auth, kim):
    updated = staff_service.update_profile(kim.id, {"full_name": "Kim M.", "group": StaffGroup.ADM, "personal_pin": "9999"})

    assert updated.full_name == "Kim M."
    assert updated.group == StaffGroup.TEAM_A
    assert auth.authenticate("minsu", "9999").id == kim.id


def test_reorder_sets_display_order(staff_service, kim):
    lee = staff_service.create(full_name="Lee", nick_name="lee", personal_pin="1111", group=StaffGroup.TEAM_B)

    staff_service.reorder([lee.id, kim.id])

    assert [s.nick_name for s in staff_service.list_active()] == ["lee", "minsu"]


def test_login_logs_are_newest_first_and_limited(auth, staff_service, kim):
    for _ in range(3):
        auth.authenticate("minsu", "4321")

    logs = staff_service.login_logs(kim.id, limit=2)

    assert len(logs) == 2
    assert logs[0].login_time >= logs[1].login_time
