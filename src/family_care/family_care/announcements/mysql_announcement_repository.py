from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import AnnouncementType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_update, db_cursor, fetchall, fetchone, new_id
from ..staff.model import StaffRef
from .model import Announcement
from .repository import AnnouncementRepository

_COLUMNS = {
    "title": "title",
    "content": "content",
    "type": "announcement_type",
    "is_login_required": "is_login_required",
    "start_date": "start_date",
    "end_date": "end_date",
    "is_active": "is_active",
}

_SELECT = """
    SELECT a.id, a.title, a.content, a.announcement_type, a.is_login_required,
           a.start_date, a.end_date, a.created_by, a.is_active, a.created_at, a.updated_at,
           s.full_name AS staff_full_name, s.nick_name AS staff_nick_name
    FROM announcements a
    JOIN staff s ON s.id = a.created_by
"""


def _to_announcement(r: dict) -> Announcement:
    return Announcement(
        id=r["id"],
        title=r["title"],
        content=r["content"],
        type=AnnouncementType(r["announcement_type"]),
        is_login_required=bool(r["is_login_required"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        created_by=r["created_by"],
        is_active=bool(r["is_active"]),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        created_by_staff=StaffRef(
            id=r["created_by"],
            full_name=r["staff_full_name"],
            nick_name=r["staff_nick_name"],
        ),
    )


class MySQLAnnouncementRepository(AnnouncementRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, announcement_id: str) -> Optional[Announcement]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE a.id=%s", (announcement_id,))
            r = fetchone(cur)
            return _to_announcement(r) if r else None

    def list_all(self) -> Sequence[Announcement]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY a.created_at DESC")
            return [_to_announcement(r) for r in fetchall(cur)]

    def list_visible(self, now: datetime, *, login_required: Optional[bool] = None) -> Sequence[Announcement]:
        clauses = ["a.is_active=1", "a.start_date <= %s", "a.end_date >= %s"]
        params: list[object] = [now, now]
        if login_required is not None:
            clauses.append("a.is_login_required=%s")
            params.append(1 if login_required else 0)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE {' AND '.join(clauses)} ORDER BY a.created_at DESC",
                tuple(params),
            )
            return [_to_announcement(r) for r in fetchall(cur)]

    def create(self, *, created_by: str, fields: dict) -> Announcement:
        announcement_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO announcements
                    (id, title, content, announcement_type, is_login_required, start_date, end_date,
                     created_by, is_active)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
                """,
                (
                    announcement_id,
                    fields["title"],
                    fields["content"],
                    AnnouncementType(fields.get("type") or AnnouncementType.MEDIUM).value,
                    1 if fields.get("is_login_required", True) else 0,
                    fields["start_date"],
                    fields["end_date"],
                    created_by,
                    1 if fields.get("is_active", True) else 0,
                ),
            )
            cur.execute(_SELECT + " WHERE a.id=%s", (announcement_id,))
            return _to_announcement(fetchone(cur))

    def update(self, announcement_id: str, changes: dict) -> Optional[Announcement]:
        assignments, params = build_update(_COLUMNS, changes)
        with db_cursor(self._conn_factory) as (_, cur):
            if assignments:
                cur.execute(f"UPDATE announcements SET {assignments} WHERE id=%s", (*params, announcement_id))
            cur.execute(_SELECT + " WHERE a.id=%s", (announcement_id,))
            r = fetchone(cur)
            return _to_announcement(r) if r else None

    def delete(self, announcement_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM announcements WHERE id=%s", (announcement_id,))
            return cur.rowcount > 0
