from __future__ import annotations

import re
import uuid
from pathlib import Path
from typing import Iterable

import mysql.connector
from werkzeug.security import generate_password_hash

from ..common.app_logger import get_logger
from .connection import DBConfig

logger = get_logger(__name__)

# Starter accounts, only created on an empty staff table.
SAMPLE_STAFF = (
    ("John Admin", "John", "1234", "ADM", 1),
    ("Sarah Manager", "Sarah", "2345", "MGM", 2),
    ("Mike Team A", "Mike", "3456", "TEAM-A", 3),
    ("Lisa Team B", "Lisa", "4567", "TEAM-B", 4),
)


def _connect(target: DBConfig, *, with_database: bool = True):
    return mysql.connector.connect(use_pure=True, **target.connect_args(with_database=with_database))


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)

    sql = _strip_create_db_and_use(_strip_comments(Path(schema_path).read_text(encoding="utf-8")))

    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_sample_staff(db_config: dict) -> int:
    """Insert the sample accounts when the staff table is empty. Returns rows created."""

    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SELECT COUNT(*) FROM staff")
        (count,) = cur.fetchone()
        if count:
            return 0

        for full_name, nick_name, pin, group, display_order in SAMPLE_STAFF:
            cur.execute(
                """
                INSERT INTO staff (id, full_name, nick_name, pin_hash, staff_group, display_order, is_active)
                VALUES (%s, %s, %s, %s, %s, %s, 1)
                """,
                (str(uuid.uuid4()), full_name, nick_name, generate_password_hash(pin), group, display_order),
            )
        conn.commit()
        logger.info("Sample staff data initialized (%d accounts)", len(SAMPLE_STAFF))
        return len(SAMPLE_STAFF)
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
