from __future__ import annotations

import io
from datetime import datetime, timedelta

from PIL import Image

from src.family_care.family_care.core.enums import AnnouncementType, MemberStatus, StaffGroup

HEADER = "Department,Team,Korean Name,English Name,Phone,Email,Address,Business Name,Business Title\n"


def test_endpoints_require_login(client):
    assert client.get("/api/families").status_code == 401
    assert client.get("/api/auth/me").status_code == 401
    assert client.get("/api/announcements/dashboard").status_code == 401


def test_wrong_pin_does_not_open_a_session(client, staff):
    resp = client.post("/api/auth/login", json={"nickname": "admin", "pin": "0000"})

    assert resp.status_code == 401
    assert resp.get_json() == {"message": "Invalid credentials"}
    assert client.get("/api/auth/me").status_code == 401


def test_login_me_logout(client, login):
    login("team")

    me = client.get("/api/auth/me").get_json()
    assert me == {"id": me["id"], "fullName": "Helper Park", "nickName": "helper", "group": "TEAM-A"}

    client.post("/api/auth/logout")
    assert client.get("/api/auth/me").status_code == 401


def test_staff_management_is_super_admin_only(client, login):
    login("mgm")
    assert client.get("/api/staff/manage").status_code == 403

    login("adm")
    staff = client.get("/api/staff/manage").get_json()
    assert len(staff) == 3
    assert all("pinHash" not in s for s in staff)


def test_update_staff_ignores_null_group(client, login, staff, container):
    login("adm")
    resp = client.put(f"/api/staff/manage/{staff['team'].id}", json={"group": None, "isActive": None})

    assert resp.status_code == 200
    member = container.staff_service.get(staff["team"].id)
    assert member.group == StaffGroup.TEAM_A
    assert member.is_active is True


def test_admin_cannot_deactivate_own_account_through_update(client, login, staff, container):
    login("adm")
    resp = client.put(f"/api/staff/manage/{staff['adm'].id}", json={"isActive": False})

    assert resp.status_code == 400
    assert container.staff_service.get(staff["adm"].id).is_active is True


def test_create_staff_validates_pin(client, login):
    login("adm")
    resp = client.post("/api/staff/manage", json={"fullName": "New", "nickName": "new", "personalPin": "12", "group": "TEAM-B"})

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Invalid data"
    assert resp.get_json()["errors"][0]["path"] == "personalPin"


def test_family_create_requires_admin_and_returns_camel_case(client, login):
    body = {
        "familyName": "",
        "memberStatus": "member",
        "members": [
            {"relationship": "husband", "koreanName": "김철수"},
            {"relationship": "wife", "koreanName": "이영희", "courses": ["101"]},
            {"relationship": "child", "koreanName": "민수", "gradeLevel": "3"},
        ],
    }
    login("team")
    assert client.post("/api/families", json=body).status_code == 403

    login("mgm")
    resp = client.post("/api/families", json=body)
    assert resp.status_code == 201
    family = resp.get_json()
    assert family["familyCode"] == "FM0001"
    assert family["familyName"] == "김철수・이영희"
    assert [m["relationship"] for m in family["members"]] == ["husband", "wife", "child"]
    assert family["members"][2]["gradeGroup"] == "Team Kid"

    found = client.get("/api/families?memberStatus=member&course=101").get_json()
    assert found == []


def test_any_staff_can_edit_family(client, login, container):
    family = container.family_service.create({"family_name": "Kim"}, [])
    login("team")

    resp = client.put(f"/api/families/{family.id}", json={"lifeGroup": "North", "phoneNumber": None})

    assert resp.status_code == 200
    assert resp.get_json()["lifeGroup"] == "North"
    assert resp.get_json()["phoneNumber"] == ""


def test_unknown_family_is_404(client, login):
    login("team")
    resp = client.get("/api/families/missing")

    assert resp.status_code == 404
    assert resp.get_json() == {"message": "Family not found"}


def test_care_log_only_author_or_super_admin(client, login, container):
    family = container.family_service.create({"family_name": "Kim"}, [])
    login("team")
    created = client.post(
        "/api/care-logs",
        json={"familyId": family.id, "date": "2024-02-01", "type": "Call", "description": "Checked in"},
    )
    assert created.status_code == 201
    log = created.get_json()
    assert log["staff"]["nickName"] == "helper"
    assert log["status"] == "pending"

    login("mgm")
    denied = client.put(f"/api/care-logs/{log['id']}", json={"status": "completed"})
    assert denied.status_code == 403

    login("adm")
    assert client.delete(f"/api/care-logs/{log['id']}").status_code == 200
    assert client.get(f"/api/families/{family.id}/care-logs").get_json() == []


def test_login_page_announcements_are_public(client, container, staff):
    now = datetime.now()
    container.announcement_service.create(
        created_by=staff["adm"].id,
        fields={
            "title": "Welcome",
            "content": "Hello",
            "type": AnnouncementType.MAJOR,
            "is_login_required": False,
            "start_date": now - timedelta(days=1),
            "end_date": now + timedelta(days=1),
        },
    )

    items = client.get("/api/announcements/login").get_json()

    assert [a["title"] for a in items] == ["Welcome"]
    assert items[0]["createdByStaff"]["nickName"] == "admin"


def test_event_roll_call_and_export(client, login, container):
    container.family_service.create({"family_name": "Kim"}, [{"relationship": "husband", "korean_name": "Dad"}])
    login("adm")

    event = client.post(
        "/api/events", json={"title": "Picnic", "date": "2024-10-05", "time": "11:00 AM", "location": "Park"}
    ).get_json()
    rows = client.get(f"/api/events/{event['id']}/attendance").get_json()
    assert len(rows) == 1

    login("team")
    updated = client.put(f"/api/attendance/{rows[0]['id']}", json={"attendanceStatus": "present"})
    assert updated.get_json()["updatedByStaff"]["nickName"] == "helper"
    stats = client.get(f"/api/events/{event['id']}/stats").get_json()
    assert stats["present"] == 1 and stats["parentCount"] == 1

    assert client.get(f"/api/events/{event['id']}/attendance.xlsx").status_code == 403
    login("adm")
    export = client.get(f"/api/events/{event['id']}/attendance.xlsx")
    assert export.status_code == 200
    assert export.mimetype.endswith("spreadsheetml.sheet")
    assert "attendance_Picnic_2024-10-05.xlsx" in export.headers["Content-Disposition"]


def test_csv_upload(client, login):
    login("adm")
    csv = (HEADER + "Youth,Middle,김철수,,9725550100,,,,\n").encode("utf-8")

    rejected = client.post("/api/families/upload-csv", data={"file": (io.BytesIO(csv), "families.txt", "text/plain")})
    assert rejected.status_code == 400

    resp = client.post("/api/families/upload-csv", data={"file": (io.BytesIO(csv), "families.csv")})
    assert resp.status_code == 200
    result = resp.get_json()
    assert result["success"] == 1
    assert result["created"] == {"departments": ["Youth"], "teams": ["Middle"], "families": ["김철수"]}


def test_department_tree(client, login, staff):
    login("adm")
    dept = client.post("/api/departments", json={"name": "New Family"}).get_json()
    team = client.post(
        "/api/teams", json={"departmentId": dept["id"], "name": "Team 1", "assignedStaff": [staff["team"].id]}
    ).get_json()
    client.post("/api/families", json={"familyName": "Kim", "teamId": team["id"]})

    tree = client.get("/api/departments/tree").get_json()

    assert tree[0]["name"] == "New Family"
    assert tree[0]["teams"][0]["assignedStaff"] == [staff["team"].id]
    assert [f["familyName"] for f in tree[0]["teams"][0]["families"]] == ["Kim"]


def test_donations_are_admin_only(client, login, container):
    family = container.family_service.create({"family_name": "Kim"}, [])
    login("team")
    assert client.get("/api/donations").status_code == 403

    login("mgm")
    created = client.post("/api/donations", json={"familyId": family.id, "amount": "25.50", "date": "2024-03-01"})
    assert created.status_code == 201
    assert created.get_json()["amount"] == "25.50"
    assert created.get_json()["familyName"] == "Kim"


def test_image_upload_is_served_cross_origin(client, login):
    buf = io.BytesIO()
    Image.new("RGB", (2, 2)).save(buf, format="PNG")
    login("team")

    resp = client.post("/api/upload", data={"image": (io.BytesIO(buf.getvalue()), "photo.png", "image/png")})
    assert resp.status_code == 200
    url = resp.get_json()["url"]

    served = client.get(url)
    assert served.status_code == 200
    assert served.headers["Cross-Origin-Resource-Policy"] == "cross-origin"


def test_image_upload_ignores_client_extension(client, login):
    buf = io.BytesIO()
    Image.new("RGB", (2, 2)).save(buf, format="PNG")
    login("adm")

    resp = client.post(
        "/api/upload",
        data={"image": (io.BytesIO(buf.getvalue() + b"<script>alert(1)</script>"), "x.html", "image/png")},
    )
    url = resp.get_json()["url"]
    assert url.endswith(".png")

    served = client.get(url)
    assert served.mimetype == "image/png"
    assert served.headers["X-Content-Type-Options"] == "nosniff"


def test_family_search_with_unknown_status_returns_nothing(client, login, container):
    container.family_service.create({"family_name": "Kim", "member_status": MemberStatus.MEMBER}, [])
    login("team")

    assert client.get("/api/families?memberStatus=bogus").get_json() == []
    assert len(client.get("/api/families?memberStatus=all").get_json()) == 1
