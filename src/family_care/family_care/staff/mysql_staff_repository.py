from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import StaffGroup
from ..core.exceptions import ConflictError, NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_update, db_cursor, fetchall, fetchone, is_duplicate_key, new_id
from .model import Staff, StaffLoginLog
from .repository import StaffRepository

_SELECT = """
    SELECT id, full_name, nick_name, pin_hash, staff_group, email, display_order,
           is_active, last_login, created_at, updated_at
    FROM staff
"""

_COLUMNS = {
    "full_name": "full_name",
    "nick_name": "nick_name",
    "pin_hash": "pin_hash",
    "group": "staff_group",
    "email": "email",
    "display_order": "display_order",
    "is_active": "is_active",
}


def _to_staff(row: dict) -> Staff:
    return Staff(
        id=row["id"],
        full_name=row["full_name"],
        nick_name=row["nick_name"],
        group=StaffGroup(row["staff_group"]),
        email=row.get("email"),
        display_order=int(row.get("display_order") or 0),
        is_active=bool(row.get("is_active", True)),
        last_login=row.get("last_login"),
        pin_hash=row.get("pin_hash") or "",
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class MySQLStaffRepository(StaffRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, staff_id: str) -> Optional[Staff]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE id=%s", (staff_id,))
            row = fetchone(cur)
            return _to_staff(row) if row else None

    def get_by_nickname(self, nick_name: str, *, include_inactive: bool = False) -> Optional[Staff]:
        sql = _SELECT + " WHERE nick_name=%s"
        if not include_inactive:
            sql += " AND is_active=1"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, (nick_name,))
            row = fetchone(cur)
            return _to_staff(row) if row else None

    def list_active(self) -> Sequence[Staff]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE is_active=1 ORDER BY display_order, full_name")
            return [_to_staff(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[Staff]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY display_order, full_name")
            return [_to_staff(r) for r in fetchall(cur)]

    def create(self, *, full_name: str, nick_name: str, pin_hash: str, group: str, email: Optional[str], display_order: int, is_active: bool = True) -> Staff:
        staff_id = new_id()
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO staff (id, full_name, nick_name, pin_hash, staff_group, email, display_order, is_active)
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                    """,
                    (staff_id, full_name, nick_name, pin_hash, StaffGroup(group).value, email, int(display_order), int(is_active)),
                )
        except Exception as e:
            if is_duplicate_key(e, key="nick_name"):
                raise ConflictError("Nickname already exists") from e
            raise
        created = self.get_by_id(staff_id)
        if created is None:
            raise NotFoundError("Staff not found")
        return created

    def update(self, staff_id: str, changes: dict) -> Optional[Staff]:
        assignments, params = build_update(_COLUMNS, changes)
        if assignments:
            try:
                with db_cursor(self._conn_factory) as (_, cur):
                    cur.execute(f"UPDATE staff SET {assignments} WHERE id=%s", (*params, staff_id))
            except Exception as e:
                if is_duplicate_key(e, key="nick_name"):
                    raise ConflictError("Nickname already exists") from e
                raise
        return self.get_by_id(staff_id)

    def deactivate(self, staff_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE staff SET is_active=0 WHERE id=%s", (staff_id,))
            return cur.rowcount > 0

    def set_display_order(self, staff_ids: Sequence[str]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            for position, staff_id in enumerate(staff_ids):
                cur.execute("UPDATE staff SET display_order=%s WHERE id=%s", (position, staff_id))

    def touch_last_login(self, staff_id: str, at: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE staff SET last_login=%s WHERE id=%s", (at, staff_id))

    def add_login_log(
        self,
        *,
        staff_id: str,
        success: bool,
        at: datetime,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
        failure_reason: Optional[str] = None,
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO staff_login_logs (id, staff_id, login_time, ip_address, user_agent, success, failure_reason)
                VALUES (%s, %s, %s, %s, %s, %s, %s)
                """,
                (new_id(), staff_id, at, ip_address, (user_agent or "")[:500] or None, int(success), failure_reason),
            )

    def list_login_logs(self, staff_id: str, limit: int) -> Sequence[StaffLoginLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, staff_id, login_time, ip_address, user_agent, success, failure_reason
                FROM staff_login_logs
                WHERE staff_id=%s
                ORDER BY login_time DESC
                LIMIT %s
                """,
                (staff_id, int(limit)),
            )
            return [
                StaffLoginLog(
                    id=r["id"],
                    staff_id=r["staff_id"],
                    login_time=r["login_time"],
                    success=bool(r["success"]),
                    ip_address=r.get("ip_address"),
                    user_agent=r.get("user_agent"),
                    failure_reason=r.get("failure_reason"),
                )
                for r in fetchall(cur)
            ]
