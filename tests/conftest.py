from __future__ import annotations

import pytest

from src.family_care.family_care.container import wire
from src.family_care.family_care.core.enums import StaffGroup
from src.family_care.family_care.main import create_app
from tests.fakes import (
    InMemoryAnnouncements,
    InMemoryCareLogs,
    InMemoryDonations,
    InMemoryEvents,
    InMemoryFamilies,
    InMemoryOrganization,
    InMemoryStaff,
    Store,
)

PIN = "1234"


@pytest.fixture
def store():
    return Store()


@pytest.fixture
def container(store, tmp_path):
    return wire(
        staff_repo=InMemoryStaff(store),
        families_repo=InMemoryFamilies(store),
        care_logs_repo=InMemoryCareLogs(store),
        announcements_repo=InMemoryAnnouncements(store),
        events_repo=InMemoryEvents(store),
        organization_repo=InMemoryOrganization(store),
        donations_repo=InMemoryDonations(store),
        upload_dir=str(tmp_path / "uploads"),
        object_dir=str(tmp_path / "objects"),
    )


@pytest.fixture
def staff(container):
    """One account per role tier, all with PIN 1234."""
    create = container.staff_service.create
    return {
        "adm": create(full_name="Admin Kim", nick_name="admin", personal_pin=PIN, group=StaffGroup.ADM),
        "mgm": create(full_name="Manager Lee", nick_name="manager", personal_pin=PIN, group=StaffGroup.MGM),
        "team": create(full_name="Helper Park", nick_name="helper", personal_pin=PIN, group=StaffGroup.TEAM_A),
    }


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(client, staff):
    def _login(role: str = "adm"):
        resp = client.post("/api/auth/login", json={"nickname": staff[role].nick_name, "pin": PIN})
        assert resp.status_code == 200, resp.get_json()
        return staff[role]

    return _login
