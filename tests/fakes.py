"""In-memory repositories for service and API tests.

All fakes share one Store so deleting a family cascades the way the
MySQL foreign keys do.
"""

from __future__ import annotations

from dataclasses import fields, replace
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Optional, Sequence

from src.family_care.family_care.announcements.model import Announcement
from src.family_care.family_care.care_logs.model import CareLog
from src.family_care.family_care.core.enums import (
    AnnouncementType,
    AttendanceStatus,
    CareLogStatus,
    DonationType,
    MemberStatus,
    Relationship,
    StaffGroup,
)
from src.family_care.family_care.core.exceptions import ConflictError
from src.family_care.family_care.donations.model import Donation, DonationFilters
from src.family_care.family_care.events.model import (
    Attendance,
    AttendanceFamily,
    AttendanceMember,
    Event,
    NewAttendance,
)
from src.family_care.family_care.families.model import Family, FamilyFilters, FamilyMember
from src.family_care.family_care.families.repository import DuplicateFamilyCodeError
from src.family_care.family_care.organization.model import Department, Team
from src.family_care.family_care.staff.model import Staff, StaffLoginLog, StaffRef

_FAMILY_FIELDS = {f.name for f in fields(Family)} - {"id", "family_code", "members", "created_at", "updated_at"}
_MEMBER_FIELDS = {f.name for f in fields(FamilyMember)} - {"id", "family_id"}


class Store:
    def __init__(self):
        self.staff: dict[str, Staff] = {}
        self.login_logs: list[StaffLoginLog] = []
        self.families: dict[str, Family] = {}
        self.care_logs: dict[str, CareLog] = {}
        self.announcements: dict[str, Announcement] = {}
        self.events: dict[str, Event] = {}
        self.attendance: dict[str, Attendance] = {}
        self.departments: dict[str, Department] = {}
        self.teams: dict[str, Team] = {}
        self.donations: dict[str, Donation] = {}
        self._seq = 0

    def next_id(self, prefix: str) -> str:
        self._seq += 1
        return f"{prefix}-{self._seq}"

    def tick(self) -> datetime:
        """Monotonic fake timestamps so created_at ordering is deterministic."""
        return datetime(2024, 1, 1, 9, 0, 0) + timedelta(seconds=self._seq)

    def ref(self, staff_id: str) -> Optional[StaffRef]:
        member = self.staff.get(staff_id)
        if not member:
            return None
        return StaffRef(id=member.id, full_name=member.full_name, nick_name=member.nick_name)


class InMemoryStaff:
    def __init__(self, store: Store):
        self._s = store

    def get_by_id(self, staff_id: str) -> Optional[Staff]:
        return self._s.staff.get(staff_id)

    def get_by_nickname(self, nick_name: str, *, include_inactive: bool = False) -> Optional[Staff]:
        for member in self._s.staff.values():
            if member.nick_name == nick_name and (include_inactive or member.is_active):
                return member
        return None

    def list_active(self) -> Sequence[Staff]:
        return sorted(
            (m for m in self._s.staff.values() if m.is_active), key=lambda m: (m.display_order, m.full_name)
        )

    def list_all(self) -> Sequence[Staff]:
        return sorted(self._s.staff.values(), key=lambda m: (m.display_order, m.full_name))

    def create(self, *, full_name, nick_name, pin_hash, group, email, display_order, is_active=True) -> Staff:
        if self.get_by_nickname(nick_name, include_inactive=True):
            raise ConflictError("Nickname already exists")
        member = Staff(
            id=self._s.next_id("staff"),
            full_name=full_name,
            nick_name=nick_name,
            group=StaffGroup(group),
            email=email,
            display_order=display_order,
            is_active=is_active,
            pin_hash=pin_hash,
            created_at=self._s.tick(),
        )
        self._s.staff[member.id] = member
        return member

    def update(self, staff_id: str, changes: dict) -> Optional[Staff]:
        member = self._s.staff.get(staff_id)
        if not member:
            return None
        changes = dict(changes)
        if "group" in changes:
            changes["group"] = StaffGroup(changes["group"])
        self._s.staff[staff_id] = replace(member, **changes)
        return self._s.staff[staff_id]

    def deactivate(self, staff_id: str) -> bool:
        return self.update(staff_id, {"is_active": False}) is not None

    def set_display_order(self, staff_ids: Sequence[str]) -> None:
        for position, staff_id in enumerate(staff_ids):
            self.update(staff_id, {"display_order": position})

    def touch_last_login(self, staff_id: str, at: datetime) -> None:
        self.update(staff_id, {"last_login": at})

    def add_login_log(self, *, staff_id, success, at, ip_address=None, user_agent=None, failure_reason=None) -> None:
        self._s.login_logs.append(
            StaffLoginLog(
                id=self._s.next_id("log"),
                staff_id=staff_id,
                login_time=at,
                success=success,
                ip_address=ip_address,
                user_agent=user_agent,
                failure_reason=failure_reason,
            )
        )

    def list_login_logs(self, staff_id: str, limit: int) -> Sequence[StaffLoginLog]:
        logs = [log for log in self._s.login_logs if log.staff_id == staff_id]
        logs.sort(key=lambda log: log.login_time, reverse=True)
        return logs[:limit]


class InMemoryFamilies:
    def __init__(self, store: Store):
        self._s = store
        # codes that collide once, as if another request inserted them first
        self.collide_once: set[str] = set()
        self._ghost_codes: set[str] = set()

    def _member(self, family_id: str, member_id: str, data: dict) -> FamilyMember:
        values = {k: v for k, v in data.items() if k in _MEMBER_FIELDS}
        values["relationship"] = Relationship(values["relationship"])
        values["courses"] = tuple(values.get("courses") or ())
        values["korean_name"] = values.get("korean_name") or ""
        values["english_name"] = values.get("english_name") or ""
        values["display_order"] = int(values.get("display_order") or 0)
        return FamilyMember(id=member_id, family_id=family_id, **values)

    @staticmethod
    def _sorted_members(members) -> tuple[FamilyMember, ...]:
        order = {r: i for i, r in enumerate(Relationship)}
        return tuple(sorted(members, key=lambda m: (m.display_order, order[m.relationship])))

    def get(self, family_id: str) -> Optional[Family]:
        return self._s.families.get(family_id)

    def search(self, filters: FamilyFilters) -> Sequence[Family]:
        def contains(value: Optional[str], needle: Optional[str]) -> bool:
            return not needle or needle.casefold() in (value or "").casefold()

        out = []
        for f in self._s.families.values():
            if not contains(f.family_name, filters.name):
                continue
            if not contains(f.life_group, filters.life_group):
                continue
            if not contains(f.support_team_member, filters.support_team_member):
                continue
            if filters.member_statuses and f.member_status.value not in filters.member_statuses:
                continue
            if filters.date_from and (f.visited_date is None or f.visited_date < filters.date_from):
                continue
            if filters.date_to and (f.visited_date is None or f.visited_date > filters.date_to):
                continue
            if filters.unassigned and f.team_id is not None:
                continue
            if not filters.unassigned and filters.team_id and f.team_id != filters.team_id:
                continue
            out.append(f)

        out.sort(key=lambda f: f.family_name)
        out.sort(key=lambda f: f.visited_date or date.min, reverse=True)
        return out

    def list_family_codes(self) -> Sequence[str]:
        return [f.family_code for f in self._s.families.values() if f.family_code] + sorted(self._ghost_codes)

    def find_by_name_and_phone(self, family_name: str, phone_number: str) -> Optional[Family]:
        for f in self._s.families.values():
            if f.family_name == family_name and f.phone_number == phone_number:
                return f
        return None

    def create(self, *, fields: dict, members: Sequence[dict], family_code: str) -> Family:
        if family_code in self.collide_once:
            self.collide_once.discard(family_code)
            self._ghost_codes.add(family_code)
            raise DuplicateFamilyCodeError(family_code)
        if family_code in self.list_family_codes():
            raise DuplicateFamilyCodeError(family_code)

        family_id = self._s.next_id("family")
        values = {k: v for k, v in fields.items() if k in _FAMILY_FIELDS and v is not None}
        values["member_status"] = MemberStatus(values.get("member_status") or MemberStatus.VISIT)
        family = Family(
            id=family_id,
            family_code=family_code,
            created_at=self._s.tick(),
            members=self._sorted_members(
                self._member(family_id, self._s.next_id("member"), m) for m in members
            ),
            **values,
        )
        self._s.families[family_id] = family
        return family

    def update(self, family_id: str, *, changes: dict, members: Optional[Sequence[dict]]) -> Optional[Family]:
        family = self._s.families.get(family_id)
        if not family:
            return None

        values = {k: v for k, v in changes.items() if k in _FAMILY_FIELDS}
        if "member_status" in values:
            values["member_status"] = MemberStatus(values["member_status"])
        family = replace(family, **values)

        if members is not None:
            existing = {m.id for m in family.members}
            updated = []
            for m in members:
                member_id = m.get("id") if m.get("id") in existing else self._s.next_id("member")
                updated.append(self._member(family_id, member_id, m))
            removed = existing - {m.id for m in updated}
            for attendance_id, row in list(self._s.attendance.items()):
                if row.family_member_id in removed:
                    del self._s.attendance[attendance_id]
            family = replace(family, members=self._sorted_members(updated))

        self._s.families[family_id] = family
        return family

    def delete(self, family_id: str) -> bool:
        if family_id not in self._s.families:
            return False
        del self._s.families[family_id]
        for table in (self._s.care_logs, self._s.attendance, self._s.donations):
            for key, row in list(table.items()):
                if row.family_id == family_id:
                    del table[key]
        return True

    def list_members(self, family_id: str) -> Sequence[FamilyMember]:
        family = self._s.families.get(family_id)
        return list(family.members) if family else []

    def set_team_order(self, team_id: Optional[str], family_ids: Sequence[str]) -> None:
        for position, family_id in enumerate(family_ids):
            family = self._s.families.get(family_id)
            if family:
                self._s.families[family_id] = replace(family, team_id=team_id, display_order=position)


class InMemoryCareLogs:
    def __init__(self, store: Store):
        self._s = store

    def get(self, care_log_id: str) -> Optional[CareLog]:
        return self._s.care_logs.get(care_log_id)

    def list_for_family(self, family_id: str) -> Sequence[CareLog]:
        logs = [c for c in self._s.care_logs.values() if c.family_id == family_id]
        return sorted(logs, key=lambda c: (c.date, c.created_at), reverse=True)

    def create(self, *, family_id: str, staff_id: str, fields: dict) -> CareLog:
        log = CareLog(
            id=self._s.next_id("care"),
            family_id=family_id,
            staff_id=staff_id,
            date=fields["date"],
            type=fields["type"],
            description=fields["description"],
            status=CareLogStatus(fields.get("status") or CareLogStatus.PENDING),
            created_at=self._s.tick(),
            staff=self._s.ref(staff_id),
        )
        self._s.care_logs[log.id] = log
        return log

    def update(self, care_log_id: str, changes: dict) -> Optional[CareLog]:
        log = self._s.care_logs.get(care_log_id)
        if not log:
            return None
        changes = dict(changes)
        if "status" in changes:
            changes["status"] = CareLogStatus(changes["status"])
        self._s.care_logs[care_log_id] = replace(log, **changes)
        return self._s.care_logs[care_log_id]

    def delete(self, care_log_id: str) -> bool:
        return self._s.care_logs.pop(care_log_id, None) is not None


class InMemoryAnnouncements:
    def __init__(self, store: Store):
        self._s = store

    def get(self, announcement_id: str) -> Optional[Announcement]:
        return self._s.announcements.get(announcement_id)

    def list_all(self) -> Sequence[Announcement]:
        return sorted(self._s.announcements.values(), key=lambda a: a.created_at, reverse=True)

    def list_visible(self, now: datetime, *, login_required: Optional[bool] = None) -> Sequence[Announcement]:
        return [
            a
            for a in self.list_all()
            if a.visible_at(now) and (login_required is None or a.is_login_required == login_required)
        ]

    def create(self, *, created_by: str, fields: dict) -> Announcement:
        item = Announcement(
            id=self._s.next_id("ann"),
            title=fields["title"],
            content=fields["content"],
            type=AnnouncementType(fields.get("type") or AnnouncementType.MEDIUM),
            is_login_required=fields.get("is_login_required", True),
            start_date=fields["start_date"],
            end_date=fields["end_date"],
            created_by=created_by,
            is_active=fields.get("is_active", True),
            created_at=self._s.tick(),
            created_by_staff=self._s.ref(created_by),
        )
        self._s.announcements[item.id] = item
        return item

    def update(self, announcement_id: str, changes: dict) -> Optional[Announcement]:
        item = self._s.announcements.get(announcement_id)
        if not item:
            return None
        changes = dict(changes)
        if "type" in changes:
            changes["type"] = AnnouncementType(changes["type"])
        self._s.announcements[announcement_id] = replace(item, **changes)
        return self._s.announcements[announcement_id]

    def delete(self, announcement_id: str) -> bool:
        return self._s.announcements.pop(announcement_id, None) is not None


class InMemoryEvents:
    def __init__(self, store: Store):
        self._s = store

    def _detailed(self, row: Attendance) -> Attendance:
        family = self._s.families.get(row.family_id)
        member = None
        if family and row.family_member_id:
            for m in family.members:
                if m.id == row.family_member_id:
                    member = AttendanceMember(
                        id=m.id,
                        korean_name=m.korean_name,
                        english_name=m.english_name,
                        relationship=m.relationship.value,
                        grade_group=m.grade_group,
                    )
        return replace(
            row,
            family=AttendanceFamily(id=family.id, family_name=family.family_name) if family else None,
            family_member=member,
            updated_by_staff=self._s.ref(row.updated_by),
        )

    def list_events(self, *, active_only: bool = False) -> Sequence[Event]:
        items = [e for e in self._s.events.values() if e.is_active or not active_only]
        return sorted(items, key=lambda e: (e.date, e.created_at), reverse=True)

    def get(self, event_id: str) -> Optional[Event]:
        return self._s.events.get(event_id)

    def create(self, *, created_by: str, fields: dict, attendance: Sequence[NewAttendance]) -> Event:
        event = Event(
            id=self._s.next_id("event"),
            title=fields["title"],
            date=fields["date"],
            time=fields["time"],
            location=fields["location"],
            created_by=created_by,
            is_active=fields.get("is_active", True),
            created_at=self._s.tick(),
            created_by_staff=self._s.ref(created_by),
        )
        self._s.events[event.id] = event
        self.add_attendance(event.id, attendance)
        return event

    def update(self, event_id: str, changes: dict) -> Optional[Event]:
        event = self._s.events.get(event_id)
        if not event:
            return None
        self._s.events[event_id] = replace(event, **changes)
        return self._s.events[event_id]

    def delete(self, event_id: str) -> bool:
        if self._s.events.pop(event_id, None) is None:
            return False
        for key, row in list(self._s.attendance.items()):
            if row.event_id == event_id:
                del self._s.attendance[key]
        return True

    def list_attendance(self, event_id: str) -> Sequence[Attendance]:
        return [self._detailed(r) for r in self._s.attendance.values() if r.event_id == event_id]

    def families_with_attendance(self, event_id: str) -> set[str]:
        return {r.family_id for r in self._s.attendance.values() if r.event_id == event_id}

    def add_attendance(self, event_id: str, rows: Sequence[NewAttendance]) -> int:
        for r in rows:
            row = Attendance(
                id=self._s.next_id("att"),
                event_id=event_id,
                family_id=r.family_id,
                family_member_id=r.family_member_id,
                attendance_status=r.attendance_status,
                updated_by=r.updated_by,
                created_at=self._s.tick(),
            )
            self._s.attendance[row.id] = row
        return len(rows)

    def get_attendance(self, attendance_id: str) -> Optional[Attendance]:
        row = self._s.attendance.get(attendance_id)
        return self._detailed(row) if row else None

    def set_attendance_status(self, attendance_id: str, status: AttendanceStatus, *, updated_by: str):
        row = self._s.attendance.get(attendance_id)
        if not row:
            return None
        self._s.attendance[attendance_id] = replace(
            row, attendance_status=AttendanceStatus(status), updated_by=updated_by
        )
        return self.get_attendance(attendance_id)


class InMemoryOrganization:
    def __init__(self, store: Store):
        self._s = store

    def list_departments(self) -> Sequence[Department]:
        return sorted(self._s.departments.values(), key=lambda d: (d.display_order, d.name))

    def get_department(self, department_id: str) -> Optional[Department]:
        return self._s.departments.get(department_id)

    def find_department_by_name(self, name: str) -> Optional[Department]:
        return next((d for d in self._s.departments.values() if d.name == name), None)

    def create_department(self, fields: dict) -> Department:
        department = Department(id=self._s.next_id("dept"), created_at=self._s.tick(), **fields)
        self._s.departments[department.id] = department
        return department

    def update_department(self, department_id: str, changes: dict) -> Optional[Department]:
        department = self._s.departments.get(department_id)
        if not department:
            return None
        self._s.departments[department_id] = replace(department, **changes)
        return self._s.departments[department_id]

    def delete_department(self, department_id: str) -> bool:
        if self._s.departments.pop(department_id, None) is None:
            return False
        for team in list(self._s.teams.values()):
            if team.department_id == department_id:
                self.delete_team(team.id)
        return True

    def list_teams(self, department_id: Optional[str] = None) -> Sequence[Team]:
        teams = [t for t in self._s.teams.values() if not department_id or t.department_id == department_id]
        return sorted(teams, key=lambda t: (t.display_order, t.name))

    def get_team(self, team_id: str) -> Optional[Team]:
        return self._s.teams.get(team_id)

    def find_team_by_name(self, department_id: str, name: str) -> Optional[Team]:
        return next(
            (t for t in self._s.teams.values() if t.department_id == department_id and t.name == name), None
        )

    def create_team(self, fields: dict, assigned_staff: Sequence[str]) -> Team:
        team = Team(
            id=self._s.next_id("team"),
            assigned_staff=tuple(dict.fromkeys(assigned_staff)),
            created_at=self._s.tick(),
            **fields,
        )
        self._s.teams[team.id] = team
        return team

    def update_team(self, team_id: str, changes: dict, assigned_staff: Optional[Sequence[str]]) -> Optional[Team]:
        team = self._s.teams.get(team_id)
        if not team:
            return None
        team = replace(team, **changes)
        if assigned_staff is not None:
            team = replace(team, assigned_staff=tuple(dict.fromkeys(assigned_staff)))
        self._s.teams[team_id] = team
        return team

    def delete_team(self, team_id: str) -> bool:
        if self._s.teams.pop(team_id, None) is None:
            return False
        for family in list(self._s.families.values()):
            if family.team_id == team_id:
                self._s.families[family.id] = replace(family, team_id=None)
        return True


class InMemoryDonations:
    def __init__(self, store: Store):
        self._s = store

    def _with_family(self, donation: Donation) -> Donation:
        family = self._s.families.get(donation.family_id)
        return replace(donation, family_name=family.family_name if family else None)

    def search(self, filters: DonationFilters) -> Sequence[Donation]:
        out = []
        for d in map(self._with_family, self._s.donations.values()):
            if filters.family_name and filters.family_name.casefold() not in (d.family_name or "").casefold():
                continue
            if filters.type and d.type != filters.type:
                continue
            if filters.date_from and d.date < filters.date_from:
                continue
            if filters.date_to and d.date > filters.date_to:
                continue
            if any(
                getattr(filters, flag) is not None and getattr(d, flag) != getattr(filters, flag)
                for flag in ("received", "email_for_thank", "email_for_tax")
            ):
                continue
            out.append(d)
        return sorted(out, key=lambda d: (d.date, d.created_at), reverse=True)

    def get(self, donation_id: str) -> Optional[Donation]:
        donation = self._s.donations.get(donation_id)
        return self._with_family(donation) if donation else None

    def create(self, *, created_by: str, fields: dict) -> Donation:
        donation = Donation(
            id=self._s.next_id("donation"),
            family_id=fields["family_id"],
            amount=Decimal(fields["amount"]),
            type=DonationType(fields.get("type") or DonationType.REGULAR),
            date=fields["date"],
            created_by=created_by,
            received=fields.get("received", True),
            email_for_thank=fields.get("email_for_thank", False),
            email_for_tax=fields.get("email_for_tax", False),
            comment=fields.get("comment"),
            created_at=self._s.tick(),
            created_by_staff=self._s.ref(created_by),
        )
        self._s.donations[donation.id] = donation
        return self._with_family(donation)

    def update(self, donation_id: str, changes: dict) -> Optional[Donation]:
        donation = self._s.donations.get(donation_id)
        if not donation:
            return None
        changes = dict(changes)
        if "type" in changes:
            changes["type"] = DonationType(changes["type"])
        self._s.donations[donation_id] = replace(donation, **changes)
        return self.get(donation_id)

    def delete(self, donation_id: str) -> bool:
        return self._s.donations.pop(donation_id, None) is not None
