from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_update, db_cursor, fetchall, fetchone, new_id
from ..staff.model import StaffRef
from .model import Attendance, AttendanceFamily, AttendanceMember, Event, NewAttendance
from .repository import EventRepository

_COLUMNS = {
    "title": "title",
    "date": "event_date",
    "time": "event_time",
    "location": "location",
    "is_active": "is_active",
}

_SELECT_EVENT = """
    SELECT e.id, e.title, e.event_date, e.event_time, e.location, e.is_active, e.created_by,
           e.created_at, e.updated_at,
           s.full_name AS staff_full_name, s.nick_name AS staff_nick_name
    FROM events e
    JOIN staff s ON s.id = e.created_by
"""

_SELECT_ATTENDANCE = """
    SELECT a.id, a.event_id, a.family_id, a.family_member_id, a.attendance_status, a.updated_by,
           a.created_at, a.updated_at,
           f.family_name,
           m.korean_name, m.english_name, m.relationship, m.grade_group,
           s.full_name AS staff_full_name, s.nick_name AS staff_nick_name
    FROM event_attendance a
    JOIN families f ON f.id = a.family_id
    LEFT JOIN family_members m ON m.id = a.family_member_id
    JOIN staff s ON s.id = a.updated_by
"""


def _to_event(r: dict) -> Event:
    return Event(
        id=r["id"],
        title=r["title"],
        date=r["event_date"],
        time=r["event_time"],
        location=r["location"],
        created_by=r["created_by"],
        is_active=bool(r["is_active"]),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        created_by_staff=StaffRef(
            id=r["created_by"], full_name=r["staff_full_name"], nick_name=r["staff_nick_name"]
        ),
    )


def _to_attendance(r: dict) -> Attendance:
    member = None
    if r.get("family_member_id"):
        member = AttendanceMember(
            id=r["family_member_id"],
            korean_name=r.get("korean_name") or "",
            english_name=r.get("english_name") or "",
            relationship=r.get("relationship") or "",
            grade_group=r.get("grade_group"),
        )
    return Attendance(
        id=r["id"],
        event_id=r["event_id"],
        family_id=r["family_id"],
        family_member_id=r.get("family_member_id"),
        attendance_status=AttendanceStatus(r["attendance_status"]),
        updated_by=r["updated_by"],
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        family=AttendanceFamily(id=r["family_id"], family_name=r["family_name"]),
        family_member=member,
        updated_by_staff=StaffRef(
            id=r["updated_by"], full_name=r["staff_full_name"], nick_name=r["staff_nick_name"]
        ),
    )


class MySQLEventRepository(EventRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_events(self, *, active_only: bool = False) -> Sequence[Event]:
        where = "WHERE e.is_active=1" if active_only else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_EVENT + f" {where} ORDER BY e.event_date DESC, e.created_at DESC")
            return [_to_event(r) for r in fetchall(cur)]

    def get(self, event_id: str) -> Optional[Event]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_EVENT + " WHERE e.id=%s", (event_id,))
            r = fetchone(cur)
            return _to_event(r) if r else None

    def _insert_attendance(self, cur, event_id: str, rows: Sequence[NewAttendance]) -> int:
        if not rows:
            return 0
        cur.executemany(
            """
            INSERT INTO event_attendance (id, event_id, family_id, family_member_id, attendance_status, updated_by)
            VALUES (%s, %s, %s, %s, %s, %s)
            """,
            [
                (new_id(), event_id, r.family_id, r.family_member_id, r.attendance_status.value, r.updated_by)
                for r in rows
            ],
        )
        return len(rows)

    def create(self, *, created_by: str, fields: dict, attendance: Sequence[NewAttendance]) -> Event:
        event_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO events (id, title, event_date, event_time, location, is_active, created_by)
                VALUES (%s, %s, %s, %s, %s, %s, %s)
                """,
                (
                    event_id,
                    fields["title"],
                    fields["date"],
                    fields["time"],
                    fields["location"],
                    1 if fields.get("is_active", True) else 0,
                    created_by,
                ),
            )
            self._insert_attendance(cur, event_id, attendance)
            cur.execute(_SELECT_EVENT + " WHERE e.id=%s", (event_id,))
            return _to_event(fetchone(cur))

    def update(self, event_id: str, changes: dict) -> Optional[Event]:
        assignments, params = build_update(_COLUMNS, changes)
        with db_cursor(self._conn_factory) as (_, cur):
            if assignments:
                cur.execute(f"UPDATE events SET {assignments} WHERE id=%s", (*params, event_id))
            cur.execute(_SELECT_EVENT + " WHERE e.id=%s", (event_id,))
            r = fetchone(cur)
            return _to_event(r) if r else None

    def delete(self, event_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM events WHERE id=%s", (event_id,))
            return cur.rowcount > 0

    def list_attendance(self, event_id: str) -> Sequence[Attendance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT_ATTENDANCE
                + " WHERE a.event_id=%s ORDER BY f.display_order, f.family_name, a.family_id, "
                "m.display_order, m.created_at",
                (event_id,),
            )
            return [_to_attendance(r) for r in fetchall(cur)]

    def families_with_attendance(self, event_id: str) -> set[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT DISTINCT family_id FROM event_attendance WHERE event_id=%s", (event_id,))
            return {r["family_id"] for r in fetchall(cur)}

    def add_attendance(self, event_id: str, rows: Sequence[NewAttendance]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._insert_attendance(cur, event_id, rows)

    def get_attendance(self, attendance_id: str) -> Optional[Attendance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_ATTENDANCE + " WHERE a.id=%s", (attendance_id,))
            r = fetchone(cur)
            return _to_attendance(r) if r else None

    def set_attendance_status(
        self, attendance_id: str, status: AttendanceStatus, *, updated_by: str
    ) -> Optional[Attendance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE event_attendance SET attendance_status=%s, updated_by=%s WHERE id=%s",
                (AttendanceStatus(status).value, updated_by, attendance_id),
            )
            cur.execute(_SELECT_ATTENDANCE + " WHERE a.id=%s", (attendance_id,))
            r = fetchone(cur)
            return _to_attendance(r) if r else None
