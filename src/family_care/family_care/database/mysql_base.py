from __future__ import annotations

import json
import uuid
from contextlib import contextmanager
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Sequence

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True) -> Iterator[tuple]:
    """One connection, one transaction.

    Every statement executed inside the block commits together; any exception
    rolls the whole block back.
    """
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def new_id() -> str:
    return str(uuid.uuid4())


def is_duplicate_key(exc: Exception, *, key: Optional[str] = None) -> bool:
    if not isinstance(exc, IntegrityError) or exc.errno != errorcode.ER_DUP_ENTRY:
        return False
    return key is None or key in str(exc.msg)


def placeholders(values: Sequence[Any]) -> str:
    return ",".join(["%s"] * len(values))


def load_json_list(value: Any) -> list:
    """JSON columns come back as str or bytes depending on the connector build."""
    if value is None:
        return []
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        value = json.loads(value) if value.strip() else []
    return list(value or [])


def dump_json(value: Any) -> str:
    return json.dumps(value if value is not None else [], ensure_ascii=False)


def build_update(columns: Dict[str, str], changes: Dict[str, Any]) -> tuple[str, list]:
    """Render "col=%s, ..." for the provided changes.

    `columns` maps domain field names to column names; unknown fields are ignored.
    """
    assignments: list[str] = []
    params: list[Any] = []
    for name, value in changes.items():
        column = columns.get(name)
        if column is None:
            continue
        if isinstance(value, Enum):
            value = value.value
        assignments.append(f"{column}=%s")
        params.append(value)
    return ", ".join(assignments), params


def is_missing_reference(exc: Exception) -> bool:
    """Foreign key points at a row that does not exist."""
    return isinstance(exc, IntegrityError) and exc.errno in (
        errorcode.ER_NO_REFERENCED_ROW,
        errorcode.ER_NO_REFERENCED_ROW_2,
    )
