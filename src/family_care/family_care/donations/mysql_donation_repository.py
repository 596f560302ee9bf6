from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import DonationType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_update, db_cursor, fetchall, fetchone, new_id
from ..staff.model import StaffRef
from .model import Donation, DonationFilters
from .repository import DonationRepository

_COLUMNS = {
    "family_id": "family_id",
    "amount": "amount",
    "type": "donation_type",
    "date": "donation_date",
    "received": "received",
    "email_for_thank": "email_for_thank",
    "email_for_tax": "email_for_tax",
    "comment": "comment",
}

_SELECT = """
    SELECT d.id, d.family_id, d.amount, d.donation_type, d.donation_date, d.received,
           d.email_for_thank, d.email_for_tax, d.comment, d.created_by, d.created_at, d.updated_at,
           f.family_name,
           s.full_name AS staff_full_name, s.nick_name AS staff_nick_name
    FROM donations d
    JOIN families f ON f.id = d.family_id
    JOIN staff s ON s.id = d.created_by
"""


def _to_donation(r: dict) -> Donation:
    return Donation(
        id=r["id"],
        family_id=r["family_id"],
        amount=Decimal(r["amount"]),
        type=DonationType(r["donation_type"]),
        date=r["donation_date"],
        created_by=r["created_by"],
        received=bool(r["received"]),
        email_for_thank=bool(r["email_for_thank"]),
        email_for_tax=bool(r["email_for_tax"]),
        comment=r.get("comment"),
        family_name=r.get("family_name"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        created_by_staff=StaffRef(
            id=r["created_by"], full_name=r["staff_full_name"], nick_name=r["staff_nick_name"]
        ),
    )


class MySQLDonationRepository(DonationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def search(self, filters: DonationFilters) -> Sequence[Donation]:
        clauses = ["1=1"]
        params: list[object] = []

        if filters.family_name:
            clauses.append("f.family_name LIKE %s")
            params.append(f"%{filters.family_name}%")
        if filters.type:
            clauses.append("d.donation_type=%s")
            params.append(DonationType(filters.type).value)
        if filters.date_from:
            clauses.append("d.donation_date >= %s")
            params.append(filters.date_from)
        if filters.date_to:
            clauses.append("d.donation_date <= %s")
            params.append(filters.date_to)
        for column in ("received", "email_for_thank", "email_for_tax"):
            value = getattr(filters, column)
            if value is not None:
                clauses.append(f"d.{column}=%s")
                params.append(1 if value else 0)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE {' AND '.join(clauses)} ORDER BY d.donation_date DESC, d.created_at DESC",
                tuple(params),
            )
            return [_to_donation(r) for r in fetchall(cur)]

    def get(self, donation_id: str) -> Optional[Donation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE d.id=%s", (donation_id,))
            r = fetchone(cur)
            return _to_donation(r) if r else None

    def create(self, *, created_by: str, fields: dict) -> Donation:
        donation_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO donations
                    (id, family_id, amount, donation_type, donation_date, received,
                     email_for_thank, email_for_tax, comment, created_by)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                """,
                (
                    donation_id,
                    fields["family_id"],
                    fields["amount"],
                    DonationType(fields.get("type") or DonationType.REGULAR).value,
                    fields["date"],
                    1 if fields.get("received", True) else 0,
                    1 if fields.get("email_for_thank") else 0,
                    1 if fields.get("email_for_tax") else 0,
                    fields.get("comment"),
                    created_by,
                ),
            )
            cur.execute(_SELECT + " WHERE d.id=%s", (donation_id,))
            return _to_donation(fetchone(cur))

    def update(self, donation_id: str, changes: dict) -> Optional[Donation]:
        assignments, params = build_update(_COLUMNS, changes)
        with db_cursor(self._conn_factory) as (_, cur):
            if assignments:
                cur.execute(f"UPDATE donations SET {assignments} WHERE id=%s", (*params, donation_id))
            cur.execute(_SELECT + " WHERE d.id=%s", (donation_id,))
            r = fetchone(cur)
            return _to_donation(r) if r else None

    def delete(self, donation_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM donations WHERE id=%s", (donation_id,))
            return cur.rowcount > 0
