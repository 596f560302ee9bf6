from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import CareLogStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_update, db_cursor, fetchall, fetchone, new_id
from ..staff.model import StaffRef
from .model import CareLog
from .repository import CareLogRepository

_COLUMNS = {
    "date": "log_date",
    "type": "log_type",
    "description": "description",
    "status": "status",
}

_SELECT = """
    SELECT c.id, c.family_id, c.staff_id, c.log_date, c.log_type, c.description, c.status,
           c.created_at, c.updated_at,
           s.full_name AS staff_full_name, s.nick_name AS staff_nick_name
    FROM care_logs c
    JOIN staff s ON s.id = c.staff_id
"""


def _to_care_log(r: dict) -> CareLog:
    return CareLog(
        id=r["id"],
        family_id=r["family_id"],
        staff_id=r["staff_id"],
        date=r["log_date"],
        type=r["log_type"],
        description=r["description"],
        status=CareLogStatus(r["status"]),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        staff=StaffRef(
            id=r["staff_id"],
            full_name=r["staff_full_name"],
            nick_name=r["staff_nick_name"],
        ),
    )


class MySQLCareLogRepository(CareLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, care_log_id: str) -> Optional[CareLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE c.id=%s", (care_log_id,))
            r = fetchone(cur)
            return _to_care_log(r) if r else None

    def list_for_family(self, family_id: str) -> Sequence[CareLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE c.family_id=%s ORDER BY c.log_date DESC, c.created_at DESC",
                (family_id,),
            )
            return [_to_care_log(r) for r in fetchall(cur)]

    def create(self, *, family_id: str, staff_id: str, fields: dict) -> CareLog:
        care_log_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO care_logs (id, family_id, staff_id, log_date, log_type, description, status)
                VALUES (%s, %s, %s, %s, %s, %s, %s)
                """,
                (
                    care_log_id,
                    family_id,
                    staff_id,
                    fields["date"],
                    fields["type"],
                    fields["description"],
                    CareLogStatus(fields.get("status") or CareLogStatus.PENDING).value,
                ),
            )
            cur.execute(_SELECT + " WHERE c.id=%s", (care_log_id,))
            return _to_care_log(fetchone(cur))

    def update(self, care_log_id: str, changes: dict) -> Optional[CareLog]:
        assignments, params = build_update(_COLUMNS, changes)
        with db_cursor(self._conn_factory) as (_, cur):
            if assignments:
                cur.execute(f"UPDATE care_logs SET {assignments} WHERE id=%s", (*params, care_log_id))
            cur.execute(_SELECT + " WHERE c.id=%s", (care_log_id,))
            r = fetchone(cur)
            return _to_care_log(r) if r else None

    def delete(self, care_log_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM care_logs WHERE id=%s", (care_log_id,))
            return cur.rowcount > 0
