from __future__ import annotations

from collections import defaultdict
from typing import Optional, Sequence

from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    build_update,
    db_cursor,
    fetchall,
    fetchone,
    is_missing_reference,
    new_id,
    placeholders,
)
from .model import Department, Team
from .repository import OrganizationRepository

_CONTACT_COLUMNS = (
    "name", "description", "contact_person_name", "contact_person_phone",
    "contact_person_email", "picture", "display_order",
)
DEPARTMENT_COLUMNS = _CONTACT_COLUMNS
TEAM_COLUMNS = ("department_id",) + _CONTACT_COLUMNS


def _to_department(r: dict) -> Department:
    return Department(
        id=r["id"],
        name=r["name"],
        description=r.get("description"),
        contact_person_name=r.get("contact_person_name"),
        contact_person_phone=r.get("contact_person_phone"),
        contact_person_email=r.get("contact_person_email"),
        picture=r.get("picture"),
        display_order=int(r.get("display_order") or 0),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _to_team(r: dict, staff_ids: Sequence[str] = ()) -> Team:
    return Team(
        id=r["id"],
        department_id=r["department_id"],
        name=r["name"],
        description=r.get("description"),
        contact_person_name=r.get("contact_person_name"),
        contact_person_phone=r.get("contact_person_phone"),
        contact_person_email=r.get("contact_person_email"),
        picture=r.get("picture"),
        display_order=int(r.get("display_order") or 0),
        assigned_staff=tuple(staff_ids),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLOrganizationRepository(OrganizationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    # departments

    def list_departments(self) -> Sequence[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM departments ORDER BY display_order, name")
            return [_to_department(r) for r in fetchall(cur)]

    def get_department(self, department_id: str) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM departments WHERE id=%s", (department_id,))
            r = fetchone(cur)
            return _to_department(r) if r else None

    def find_department_by_name(self, name: str) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM departments WHERE name=%s ORDER BY created_at LIMIT 1", (name,))
            r = fetchone(cur)
            return _to_department(r) if r else None

    def create_department(self, fields: dict) -> Department:
        department_id = new_id()
        columns = [c for c in DEPARTMENT_COLUMNS if c in fields]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO departments (id, {', '.join(columns)}) VALUES (%s, {placeholders(columns)})",
                (department_id, *(fields[c] for c in columns)),
            )
            cur.execute("SELECT * FROM departments WHERE id=%s", (department_id,))
            return _to_department(fetchone(cur))

    def update_department(self, department_id: str, changes: dict) -> Optional[Department]:
        assignments, params = build_update({c: c for c in DEPARTMENT_COLUMNS}, changes)
        with db_cursor(self._conn_factory) as (_, cur):
            if assignments:
                cur.execute(f"UPDATE departments SET {assignments} WHERE id=%s", (*params, department_id))
            cur.execute("SELECT * FROM departments WHERE id=%s", (department_id,))
            r = fetchone(cur)
            return _to_department(r) if r else None

    def delete_department(self, department_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM departments WHERE id=%s", (department_id,))
            return cur.rowcount > 0

    # teams

    def _staff_by_team(self, cur, team_ids: Sequence[str]) -> dict[str, list[str]]:
        grouped: dict[str, list[str]] = defaultdict(list)
        if not team_ids:
            return grouped
        cur.execute(
            f"SELECT team_id, staff_id FROM team_staff WHERE team_id IN ({placeholders(team_ids)}) "
            "ORDER BY team_id, position",
            tuple(team_ids),
        )
        for r in fetchall(cur):
            grouped[r["team_id"]].append(r["staff_id"])
        return grouped

    def _load_teams(self, cur, where: str = "", params: tuple = ()) -> list[Team]:
        cur.execute(f"SELECT * FROM teams {where} ORDER BY display_order, name", params)
        rows = fetchall(cur)
        staff = self._staff_by_team(cur, [r["id"] for r in rows])
        return [_to_team(r, staff.get(r["id"], [])) for r in rows]

    def _replace_staff(self, cur, team_id: str, staff_ids: Sequence[str]) -> None:
        cur.execute("DELETE FROM team_staff WHERE team_id=%s", (team_id,))
        for position, staff_id in enumerate(dict.fromkeys(staff_ids)):
            cur.execute(
                "INSERT INTO team_staff (team_id, staff_id, position) VALUES (%s, %s, %s)",
                (team_id, staff_id, position),
            )

    def list_teams(self, department_id: Optional[str] = None) -> Sequence[Team]:
        with db_cursor(self._conn_factory) as (_, cur):
            if department_id:
                return self._load_teams(cur, "WHERE department_id=%s", (department_id,))
            return self._load_teams(cur)

    def get_team(self, team_id: str) -> Optional[Team]:
        with db_cursor(self._conn_factory) as (_, cur):
            teams = self._load_teams(cur, "WHERE id=%s", (team_id,))
            return teams[0] if teams else None

    def find_team_by_name(self, department_id: str, name: str) -> Optional[Team]:
        with db_cursor(self._conn_factory) as (_, cur):
            teams = self._load_teams(cur, "WHERE department_id=%s AND name=%s", (department_id, name))
            return teams[0] if teams else None

    def create_team(self, fields: dict, assigned_staff: Sequence[str]) -> Team:
        team_id = new_id()
        columns = [c for c in TEAM_COLUMNS if c in fields]
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"INSERT INTO teams (id, {', '.join(columns)}) VALUES (%s, {placeholders(columns)})",
                    (team_id, *(fields[c] for c in columns)),
                )
                self._replace_staff(cur, team_id, assigned_staff)
                return self._load_teams(cur, "WHERE id=%s", (team_id,))[0]
        except Exception as e:
            if is_missing_reference(e):
                raise ValidationError("Unknown department or staff id") from e
            raise

    def update_team(self, team_id: str, changes: dict, assigned_staff: Optional[Sequence[str]]) -> Optional[Team]:
        assignments, params = build_update({c: c for c in TEAM_COLUMNS}, changes)
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("SELECT id FROM teams WHERE id=%s FOR UPDATE", (team_id,))
                if not fetchone(cur):
                    return None
                if assignments:
                    cur.execute(f"UPDATE teams SET {assignments} WHERE id=%s", (*params, team_id))
                if assigned_staff is not None:
                    self._replace_staff(cur, team_id, assigned_staff)
                return self._load_teams(cur, "WHERE id=%s", (team_id,))[0]
        except Exception as e:
            if is_missing_reference(e):
                raise ValidationError("Unknown department or staff id") from e
            raise

    def delete_team(self, team_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM teams WHERE id=%s", (team_id,))
            return cur.rowcount > 0
