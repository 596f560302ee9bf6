from __future__ import annotations

from typing import Any, Optional, Sequence

from ..core.enums import MemberStatus, Relationship
from ..core.exceptions import NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    build_update,
    db_cursor,
    dump_json,
    fetchall,
    fetchone,
    is_duplicate_key,
    load_json_list,
    new_id,
    placeholders,
)
from .model import Family, FamilyFilters, FamilyMember
from .repository import DuplicateFamilyCodeError, FamilyRepository

FAMILY_COLUMNS = (
    "family_code", "family_name", "visited_date", "registration_date", "member_status",
    "phone_number", "email", "address", "city", "state", "zip_code", "full_address",
    "family_notes", "family_picture", "life_group", "support_team_member",
    "biz", "biz_title", "biz_category", "biz_name", "biz_intro", "team_id", "display_order",
)
_UPDATABLE = {c: c for c in FAMILY_COLUMNS if c != "family_code"}

MEMBER_COLUMNS = (
    "korean_name", "english_name", "birth_date", "phone_number", "email", "relationship",
    "courses", "grade_level", "grade_group", "school", "display_order",
)

_SELECT_FAMILY = (
    "SELECT id, " + ", ".join(FAMILY_COLUMNS) + ", created_at, updated_at FROM families"
)
_SELECT_MEMBER = (
    "SELECT id, family_id, " + ", ".join(MEMBER_COLUMNS) + " FROM family_members"
)
_MEMBER_ORDER = " ORDER BY display_order, FIELD(relationship, 'husband', 'wife', 'child', 'other'), created_at"


def _to_member(row: dict) -> FamilyMember:
    return FamilyMember(
        id=row["id"],
        family_id=row["family_id"],
        relationship=Relationship(row["relationship"]),
        korean_name=row.get("korean_name") or "",
        english_name=row.get("english_name") or "",
        birth_date=row.get("birth_date"),
        phone_number=row.get("phone_number"),
        email=row.get("email"),
        courses=tuple(load_json_list(row.get("courses"))),
        grade_level=row.get("grade_level"),
        grade_group=row.get("grade_group"),
        school=row.get("school"),
        display_order=int(row.get("display_order") or 0),
    )


def _to_family(row: dict, members: Sequence[FamilyMember] = ()) -> Family:
    return Family(
        id=row["id"],
        family_code=row.get("family_code"),
        family_name=row["family_name"],
        member_status=MemberStatus(row["member_status"]),
        visited_date=row.get("visited_date"),
        registration_date=row.get("registration_date"),
        phone_number=row.get("phone_number") or "",
        email=row.get("email"),
        address=row.get("address") or "",
        city=row.get("city") or "",
        state=row.get("state") or "",
        zip_code=row.get("zip_code") or "",
        full_address=row.get("full_address") or "",
        family_notes=row.get("family_notes"),
        family_picture=row.get("family_picture"),
        life_group=row.get("life_group"),
        support_team_member=row.get("support_team_member"),
        biz=row.get("biz"),
        biz_title=row.get("biz_title"),
        biz_category=row.get("biz_category"),
        biz_name=row.get("biz_name"),
        biz_intro=row.get("biz_intro"),
        team_id=row.get("team_id"),
        display_order=int(row.get("display_order") or 0),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
        members=tuple(members),
    )


def _member_params(member: dict) -> list[Any]:
    out: list[Any] = []
    for column in MEMBER_COLUMNS:
        value = member.get(column)
        if column == "courses":
            value = dump_json(list(value or []))
        elif column == "relationship":
            value = Relationship(value).value
        elif column in ("korean_name", "english_name"):
            value = value or ""
        elif column == "display_order":
            value = int(value or 0)
        out.append(value)
    return out


class MySQLFamilyRepository(FamilyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _members_by_family(self, cur, family_ids: Sequence[str]) -> dict[str, list[FamilyMember]]:
        grouped: dict[str, list[FamilyMember]] = {fid: [] for fid in family_ids}
        if not family_ids:
            return grouped
        cur.execute(
            _SELECT_MEMBER + f" WHERE family_id IN ({placeholders(family_ids)})" + _MEMBER_ORDER,
            tuple(family_ids),
        )
        for r in fetchall(cur):
            grouped.setdefault(r["family_id"], []).append(_to_member(r))
        return grouped

    def get(self, family_id: str) -> Optional[Family]:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._get(cur, family_id)

    def _get(self, cur, family_id: str) -> Optional[Family]:
        cur.execute(_SELECT_FAMILY + " WHERE id=%s", (family_id,))
        row = fetchone(cur)
        if not row:
            return None
        members = self._members_by_family(cur, [family_id])[family_id]
        return _to_family(row, members)

    def search(self, filters: FamilyFilters) -> Sequence[Family]:
        clauses = ["1=1"]
        params: list[object] = []

        for column, value in (
            ("family_name", filters.name),
            ("life_group", filters.life_group),
            ("support_team_member", filters.support_team_member),
        ):
            if value:
                clauses.append(f"{column} LIKE %s")
                params.append(f"%{value}%")

        if filters.member_statuses:
            clauses.append(f"member_status IN ({placeholders(filters.member_statuses)})")
            params.extend(filters.member_statuses)
        if filters.date_from:
            clauses.append("visited_date >= %s")
            params.append(filters.date_from)
        if filters.date_to:
            clauses.append("visited_date <= %s")
            params.append(filters.date_to)
        if filters.unassigned:
            clauses.append("team_id IS NULL")
        elif filters.team_id:
            clauses.append("team_id=%s")
            params.append(filters.team_id)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT_FAMILY
                + f" WHERE {where} ORDER BY visited_date IS NULL, visited_date DESC, family_name",
                tuple(params),
            )
            rows = fetchall(cur)
            members = self._members_by_family(cur, [r["id"] for r in rows])
            return [_to_family(r, members.get(r["id"], [])) for r in rows]

    def list_family_codes(self) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT family_code FROM families WHERE family_code IS NOT NULL")
            return [r["family_code"] for r in fetchall(cur)]

    def find_by_name_and_phone(self, family_name: str, phone_number: str) -> Optional[Family]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id FROM families WHERE family_name=%s AND phone_number=%s ORDER BY created_at LIMIT 1",
                (family_name, phone_number),
            )
            row = fetchone(cur)
            return self._get(cur, row["id"]) if row else None

    def _insert_member(self, cur, family_id: str, member: dict) -> None:
        cur.execute(
            f"INSERT INTO family_members (id, family_id, {', '.join(MEMBER_COLUMNS)}) "
            f"VALUES (%s, %s, {placeholders(MEMBER_COLUMNS)})",
            (new_id(), family_id, *_member_params(member)),
        )

    def create(self, *, fields: dict, members: Sequence[dict], family_code: str) -> Family:
        family_id = new_id()
        values = dict(fields, family_code=family_code)
        columns = [c for c in FAMILY_COLUMNS if c in values]
        params = [values[c].value if isinstance(values[c], MemberStatus) else values[c] for c in columns]

        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"INSERT INTO families (id, {', '.join(columns)}) VALUES (%s, {placeholders(columns)})",
                    (family_id, *params),
                )
                for member in members:
                    self._insert_member(cur, family_id, member)
                created = self._get(cur, family_id)
        except Exception as e:
            if is_duplicate_key(e, key="family_code"):
                raise DuplicateFamilyCodeError(f"Family code {family_code} already exists") from e
            raise
        if created is None:
            raise NotFoundError("Family not found")
        return created

    def update(self, family_id: str, *, changes: dict, members: Optional[Sequence[dict]]) -> Optional[Family]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id FROM families WHERE id=%s FOR UPDATE", (family_id,))
            if not fetchone(cur):
                return None

            assignments, params = build_update(_UPDATABLE, changes)
            if assignments:
                cur.execute(f"UPDATE families SET {assignments} WHERE id=%s", (*params, family_id))

            if members is not None:
                cur.execute("SELECT id FROM family_members WHERE family_id=%s", (family_id,))
                existing = {r["id"] for r in fetchall(cur)}
                kept: set[str] = set()

                for member in members:
                    member_id = member.get("id")
                    if member_id and member_id in existing:
                        kept.add(member_id)
                        cur.execute(
                            "UPDATE family_members SET "
                            + ", ".join(f"{c}=%s" for c in MEMBER_COLUMNS)
                            + " WHERE id=%s AND family_id=%s",
                            (*_member_params(member), member_id, family_id),
                        )
                    else:
                        self._insert_member(cur, family_id, member)

                removed = sorted(existing - kept)
                if removed:
                    cur.execute(
                        f"DELETE FROM family_members WHERE id IN ({placeholders(removed)})",
                        tuple(removed),
                    )

            return self._get(cur, family_id)

    def delete(self, family_id: str) -> bool:
        # members, care logs, attendance and donations go with it (ON DELETE CASCADE)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM families WHERE id=%s", (family_id,))
            return cur.rowcount > 0

    def list_members(self, family_id: str) -> Sequence[FamilyMember]:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._members_by_family(cur, [family_id])[family_id]

    def set_team_order(self, team_id: Optional[str], family_ids: Sequence[str]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            for position, family_id in enumerate(family_ids):
                cur.execute(
                    "UPDATE families SET team_id=%s, display_order=%s WHERE id=%s",
                    (team_id, position, family_id),
                )
